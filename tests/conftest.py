import karabo_bridge
import pytest


@pytest.fixture
def simulator():

    server = karabo_bridge.simulator.Simulator()

    yield server

    server.stop()


@pytest.fixture
def serve():
    """ Start simulators serving custom replies. The fixture is a function
        accepting the same arguments as the Simulator class; every server
        started through it is stopped when the test completes.
    """

    servers = list()

    def start(replies=None, **kwargs):
        server = karabo_bridge.simulator.Simulator(replies=replies, **kwargs)
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.stop()

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
