""" Exceptions raised by the bridge client. Everything descends from
    :class:`BridgeError`; the intermediate classes group errors by how
    far the damage reaches. A :class:`TransportError` or a
    :class:`ProtocolError` discards the whole fetch, while a
    :class:`TypeMismatch` or an :class:`ArraySizeError` only affects the
    one value being extracted.
"""


class BridgeError(Exception):
    """ Base class for all karabo_bridge errors.
    """


# Transport errors.

class TransportError(BridgeError):
    """ A socket-level failure. No retry is attempted.
    """


class TransportConnectionError(TransportError):
    """ The session could not establish a connection, or was used before
        one was established.
    """


# Protocol errors; any of these aborts the fetch in progress.

class ProtocolError(BridgeError):
    """ The reply did not follow the bridge framing rules.
    """


class MissingField(ProtocolError):
    """ A header lacks one of its required fields.
    """

    def __init__(self, field, header=None):
        self.field = field
        message = 'header is missing required field: ' + repr(field)
        if header is not None:
            message += ' (header: %r)' % (header,)
        ProtocolError.__init__(self, message)


class UnknownContent(ProtocolError):
    """ A header declared a content type this client does not recognize.
    """

    def __init__(self, content):
        self.content = content
        ProtocolError.__init__(self, 'unknown data content: ' + repr(content))


class InconsistentSource(ProtocolError):
    """ One reply carried frames from more than one source.
    """

    def __init__(self, expected, received):
        self.expected = expected
        self.received = received
        message = 'reply mixes sources: expected %r, received %r' % (expected, received)
        ProtocolError.__init__(self, message)


class OutOfSequence(ProtocolError):
    """ A send or receive was issued out of the request/reply alternation.
    """


class Unsupported(ProtocolError):
    """ A recognized part of the protocol that this client cannot decode.
    """


class MissingFrame(ProtocolError):
    """ A header frame arrived without its data frame.
    """


class MalformedFrame(ProtocolError):
    """ A frame could not be decoded, or decoded to the wrong shape.
    """


class DuplicateField(ProtocolError):
    """ The same field path or metadata key appeared twice in one reply.
    """


# Extraction errors; the dataset remains valid.

class TypeMismatch(BridgeError, TypeError):
    """ The caller requested a type that disagrees with the stored value.
    """


class ArraySizeError(BridgeError, ValueError):
    """ Base class for array sizing problems.
    """


class SizeOverflow(ArraySizeError):
    """ The product of the array shape cannot be represented.
    """


class SizeMismatch(ArraySizeError):
    """ The data frame length disagrees with the shape and dtype.
    """


class Released(BridgeError, ReferenceError):
    """ A value or array was accessed after its dataset was released.
    """


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
