""" The :class:`Client` is the principal entry point: connect it to a
    bridge server, then call :func:`Client.next` once per dataset.
"""

import io
import logging

from . import printer
from .protocol.builder import build
from .transport.session import Session


logger = logging.getLogger(__name__)


class Client:
    """ Pull datasets from a bridge server at *endpoint*. If no *endpoint*
        is given here, :func:`connect` must be called before the first
        request. The *context* is an optional :class:`zmq.Context`.

        Every request consumes data on the server side; two clients pulling
        from the same server each see only part of the stream.
    """

    session_class = Session

    def __init__(self, endpoint=None, context=None):

        self.session = self.session_class(context=context)

        if endpoint is not None:
            self.connect(endpoint)


    def __enter__(self):
        return self


    def __exit__(self, *exception):
        self.close()


    def connect(self, endpoint=None):
        """ Connect to *endpoint*, or the configured default if None.
        """

        self.session.connect(endpoint)


    def close(self):
        self.session.close()


    def next(self):
        """ Request and return the next :class:`karabo_bridge.dataset.Dataset`.
            Any framing problem in the reply raises a
            :class:`karabo_bridge.errors.ProtocolError`, in which case the
            whole reply is discarded.
        """

        logger.debug('requesting next dataset from %s', self.session.endpoint)
        message = self.session.next_multipart()
        return build(message)


    def show_msg(self, sink=None, boundary=True):
        """ Request the next reply and write the raw structure of every
            frame to *sink*, any object with a ``write()`` method. If *sink*
            is None the rendering is returned as a string instead. This
            consumes a dataset on the server side.
        """

        message = self.session.next_multipart()

        if sink is None:
            buffer = io.StringIO()
            printer.dump_multipart(message, buffer, boundary)
            return buffer.getvalue()

        return printer.dump_multipart(message, sink, boundary)


    def show_next(self):
        """ Request the next dataset and return a text summary of its
            fields. This consumes a dataset on the server side.
        """

        with self.next() as dataset:
            return dataset.summary()


# end of class Client


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
