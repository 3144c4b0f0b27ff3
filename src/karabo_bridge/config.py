""" Runtime defaults. Each value can be overridden with an environment
    variable so that command line tools and test harnesses can redirect
    a client without code changes.
"""

import logging
import os


# The bridge has no well-known port; the simulator and most deployments
# use this one, and it is only a default.

default_endpoint = os.environ.get('KARABO_BRIDGE_ENDPOINT', 'tcp://localhost:4545')

log_level = os.environ.get('KARABO_BRIDGE_LOG_LEVEL', 'WARNING').upper()


def endpoint(requested=None):
    """ Return the *requested* endpoint, or the configured default if
        *requested* is None or empty.
    """

    if requested:
        return requested

    return default_endpoint


def logging_level(requested=None):
    """ Translate a level name such as 'DEBUG' into the numeric level
        understood by :mod:`logging`. Unknown names raise ValueError.
    """

    if requested is None:
        requested = log_level

    level = getattr(logging, str(requested).upper(), None)

    if not isinstance(level, int):
        raise ValueError('unknown log level: ' + repr(requested))

    return level


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
