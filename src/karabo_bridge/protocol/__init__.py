"""
Bridge Protocol Layer
=====================

Everything needed to turn the frames of one bridge reply into a
:class:`~karabo_bridge.dataset.Dataset`. Nothing here touches a socket.

---------------------------------------------------------------------

Layer Overview
--------------

Data Model Builder (builder.py)
    Pairs header and data frames, dispatches on the content tag,
    enforces the single-source rule
    - build()

    │
    ▼
Headers (header.py)
    Validated header frames
    - Content
    - Header
    - decode_header()

    │
    ▼
Wire Decoder (wire.py)
    Schema-less msgpack decoding into tagged values
    - GenericValue
    - Tag
    - decode_value()

    │
    ▼
Vocabulary (fields.py, dtype.py)
    Canonical header field names, content tags, and array element types

---------------------------------------------------------------------

Wire Format
-----------

A reply is an ordered multipart message of (header, data) pairs. Each
header is a msgpack map with at least ``source`` and ``content``:

    content     data frame
    -------     ----------
    msgpack     msgpack map of fields, with an optional "metadata" map
    array       raw little-endian bytes; header adds path, shape, dtype
    ImageData   not supported by this client

---------------------------------------------------------------------
"""

from . import fields
from . import wire
from . import dtype
from . import header
from . import builder

from .builder import build
from .dtype import DType
from .header import Content, Header, decode_header
from .wire import DecodeResult, GenericValue, Status, Tag, decode_value


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
