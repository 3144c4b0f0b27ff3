"""ZeroMQ request/reply session with a bridge server.

The bridge speaks a strict REQ/REP exchange: the client sends the four
bytes ``next`` and the server answers with one multipart reply. The
session enforces that alternation itself, so a misuse surfaces as
:class:`~karabo_bridge.errors.OutOfSequence` rather than as an obscure
socket state error.
"""

from __future__ import annotations

import logging
from typing import Optional

import zmq

from .. import config
from ..errors import OutOfSequence, TransportConnectionError, TransportError
from ..message import MultipartMessage
from ..protocol.fields import REQUEST


logger = logging.getLogger(__name__)

zmq_context = zmq.Context.instance()


class Session:
    """Issue ``next`` requests over a ZeroMQ REQ socket.

    The session blocks without a timeout while waiting for a reply;
    callers needing a deadline must enforce it outside the session.
    """

    def __init__(self, endpoint: Optional[str] = None, context: Optional[zmq.Context] = None):
        self.context = context or zmq_context
        self.endpoint: Optional[str] = None
        self.socket: Optional[zmq.Socket] = None
        self._awaiting_reply = False

        if endpoint is not None:
            self.connect(endpoint)

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exception) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self.socket is not None

    @property
    def awaiting_reply(self) -> bool:
        return self._awaiting_reply

    def connect(self, endpoint: Optional[str] = None) -> None:
        """Connect to *endpoint*, or the configured default endpoint."""

        endpoint = config.endpoint(endpoint)
        if self.socket is not None:
            raise TransportConnectionError(f"already connected to {self.endpoint}")

        socket = self.context.socket(zmq.REQ)
        socket.setsockopt(zmq.LINGER, 0)
        try:
            socket.connect(endpoint)
        except zmq.ZMQError as exc:
            socket.close()
            raise TransportConnectionError(f"cannot connect to {endpoint}: {exc}") from exc

        logger.info("connected to bridge server %s", endpoint)
        self.socket = socket
        self.endpoint = endpoint
        self._awaiting_reply = False

    def close(self) -> None:
        if self.socket is None:
            return

        self.socket.close()
        self.socket = None
        self._awaiting_reply = False
        logger.info("closed connection to %s", self.endpoint)

    def _require_socket(self) -> zmq.Socket:
        if self.socket is None:
            raise TransportConnectionError("session is not connected")
        return self.socket

    def send_request(self) -> None:
        """Send one ``next`` request."""

        socket = self._require_socket()
        if self._awaiting_reply:
            raise OutOfSequence("a request is already awaiting its reply")

        try:
            socket.send(REQUEST)
        except zmq.ZMQError as exc:
            raise TransportError(f"send to {self.endpoint} failed: {exc}") from exc

        self._awaiting_reply = True

    def receive_multipart(self) -> MultipartMessage:
        """Block until the complete reply to the outstanding request arrives."""

        socket = self._require_socket()
        if not self._awaiting_reply:
            raise OutOfSequence("no request has been sent")

        try:
            frames = socket.recv_multipart(copy=True)
        except zmq.ZMQError as exc:
            raise TransportError(f"receive from {self.endpoint} failed: {exc}") from exc

        self._awaiting_reply = False

        message = MultipartMessage(frames)
        logger.debug("received %r", message)
        return message

    def next_multipart(self) -> MultipartMessage:
        """Request and return the next reply."""

        self.send_request()
        return self.receive_multipart()
