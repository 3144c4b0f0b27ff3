"""Header frames.

Every data frame in a bridge reply is preceded by a msgpack header that
names the source and says how to read the frame after it. The content
tag is resolved into :class:`Content` here, once, so the rest of the
client never compares content strings.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import Optional, Tuple

from ..errors import MalformedFrame, MissingField, UnknownContent
from . import fields
from .dtype import DType, normalize
from .wire import GenericValue, Tag, decode_value


class Content(enum.Enum):
    """How the frame following a header is to be interpreted."""

    MSGPACK = fields.MSGPACK
    ARRAY = fields.ARRAY
    IMAGE_DATA = fields.IMAGE_DATA

    @classmethod
    def parse(cls, name: str) -> "Content":
        try:
            return cls(name)
        except ValueError:
            raise UnknownContent(name) from None


@dataclasses.dataclass(frozen=True)
class Header:
    source: str
    content: Content
    path: Optional[str] = None
    shape: Optional[Tuple[int, ...]] = None
    dtype: Optional[DType] = None
    dtype_name: Optional[str] = None


def _text(header: GenericValue, field: str, required: bool = True) -> Optional[str]:
    item = header.lookup(field)
    if item is None:
        if required:
            raise MissingField(field, header.to_python())
        return None
    if not item.is_text:
        raise MalformedFrame(f"header field {field!r} must be a string, not {item.tag.value}")
    return item.text()


def _shape(item: GenericValue) -> Tuple[int, ...]:
    if item.tag is not Tag.ARRAY:
        raise MalformedFrame(f"header field 'shape' must be an array, not {item.tag.value}")

    shape = []
    for dimension in item.value:
        if dimension.tag is not Tag.UINT64:
            raise MalformedFrame(f"array dimensions must be unsigned integers: {item.to_python()!r}")
        shape.append(dimension.value)
    return tuple(shape)


def parse_header(header: GenericValue) -> Header:
    """Validate a decoded header map and return a :class:`Header`."""

    if not header.is_map:
        raise MalformedFrame(f"header must be a map, not {header.tag.value}")

    source = _text(header, fields.SOURCE)
    content = Content.parse(_text(header, fields.CONTENT))

    if content is not Content.ARRAY:
        return Header(source, content)

    path = _text(header, fields.PATH)

    shape = header.lookup(fields.SHAPE)
    if shape is None:
        raise MissingField(fields.SHAPE, header.to_python())
    shape = _shape(shape)

    name = normalize(_text(header, fields.DTYPE))
    try:
        dtype = DType.parse(name)
    except ValueError:
        # Kept by name; extraction reports the mismatch for this array only.
        dtype = None

    return Header(source, content, path, shape, dtype, name)


def decode_header(frame) -> Header:
    """Decode and validate one header frame."""

    result = decode_value(frame)
    if not result.ok:
        raise MalformedFrame(f"cannot decode header: {result.reason} at byte {result.offset}")
    return parse_header(result.value)
