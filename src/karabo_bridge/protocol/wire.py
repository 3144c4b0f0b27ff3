"""Schema-less msgpack decoding.

A frame is decoded into a tree of :class:`GenericValue` nodes, each one
tagged with the msgpack family it was encoded as. The tags are finer than
the Python types msgpack would normally hand back: float32 and float64
stay distinct, as do ``str`` and ``bin``, and map keys are kept as
decoded nodes rather than forced into a dict.

The decoder walks msgpack's streaming :class:`msgpack.Unpacker`, reading
container headers one at a time and classifying every item by its format
byte before unpacking it.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Optional, Tuple

import msgpack


class Tag(enum.Enum):
    """The discriminant of a decoded item."""

    NIL = "nil"
    BOOL = "bool"
    UINT64 = "uint64"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STR = "str"
    BIN = "bin"
    ARRAY = "array"
    MAP = "map"
    EXT = "ext"

    @property
    def display(self) -> str:
        return TYPE_NAMES[self]


# How each tag is reported in summaries. Scalars use the C type names the
# array dtypes use; the container tags are spelled so they cannot be
# mistaken for an element type.
TYPE_NAMES = {
    Tag.NIL: "MSGPACK_OBJECT_NIL",
    Tag.BOOL: "bool",
    Tag.UINT64: "uint64_t",
    Tag.INT64: "int64_t",
    Tag.FLOAT32: "float",
    Tag.FLOAT64: "double",
    Tag.STR: "string",
    Tag.BIN: "MSGPACK_OBJECT_BIN",
    Tag.ARRAY: "MSGPACK_OBJECT_ARRAY",
    Tag.MAP: "MSGPACK_OBJECT_MAP",
    Tag.EXT: "MSGPACK_OBJECT_EXT",
}


@dataclasses.dataclass(frozen=True)
class GenericValue:
    """One decoded msgpack item.

    ``value`` holds the Python scalar for scalar tags, a tuple of
    GenericValue for ARRAY, a tuple of (key, value) GenericValue pairs
    for MAP, and an :class:`Extension` for EXT.
    """

    tag: Tag
    value: Any = None

    @property
    def is_map(self) -> bool:
        return self.tag is Tag.MAP

    @property
    def is_text(self) -> bool:
        return self.tag is Tag.STR or self.tag is Tag.BIN

    def text(self) -> str:
        """Return a STR or BIN item as text; BIN is decoded as UTF-8."""

        if self.tag is Tag.STR:
            return self.value
        if self.tag is Tag.BIN:
            return bytes(self.value).decode("utf-8", errors="replace")
        raise TypeError(f"{self.tag.value} item is not text")

    def items(self) -> Tuple[Tuple["GenericValue", "GenericValue"], ...]:
        if self.tag is not Tag.MAP:
            raise TypeError(f"{self.tag.value} item is not a map")
        return self.value

    def lookup(self, key: str) -> Optional["GenericValue"]:
        """Return the value stored under the text *key* of a map, or None."""

        for k, v in self.items():
            if k.is_text and k.text() == key:
                return v
        return None

    def to_python(self) -> Any:
        """Recursively convert into plain Python objects.

        Arrays become lists and maps become dicts; keys that are text are
        converted to str, other unhashable keys to tuples.
        """

        if self.tag is Tag.ARRAY:
            return [item.to_python() for item in self.value]

        if self.tag is Tag.MAP:
            result = dict()
            for k, v in self.value:
                if k.is_text:
                    key = k.text()
                else:
                    key = _hashable(k.to_python())
                result[key] = v.to_python()
            return result

        return self.value


@dataclasses.dataclass(frozen=True)
class Extension:
    """The payload of an ext item, kept opaque whatever its type code."""

    code: int
    data: bytes


def _hashable(thing):
    if isinstance(thing, list):
        return tuple(_hashable(item) for item in thing)
    if isinstance(thing, dict):
        return tuple((key, _hashable(value)) for key, value in thing.items())
    return thing


class Status(enum.Enum):
    OK = "ok"
    PARSE_ERROR = "parse error"
    INSUFFICIENT_BYTES = "insufficient bytes"


@dataclasses.dataclass(frozen=True)
class DecodeResult:
    """Outcome of :func:`decode_value`.

    ``value`` is set only when ``status`` is OK; ``offset`` is the byte
    position at which decoding stopped.
    """

    status: Status
    value: Optional[GenericValue] = None
    offset: int = 0
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    def __bool__(self) -> bool:
        return self.ok


# Nesting deeper than this is treated as malformed rather than risking
# the interpreter's recursion limit.
MAX_DEPTH = 256


class _Malformed(Exception):
    pass


def _scalar_tag(head: int, value: Any) -> Tag:
    """Classify a scalar by its leading format byte."""

    if head <= 0x7F:
        return Tag.UINT64
    if head >= 0xE0:
        return Tag.INT64
    if 0xA0 <= head <= 0xBF or 0xD9 <= head <= 0xDB:
        return Tag.STR
    if head == 0xC0:
        return Tag.NIL
    if head in (0xC2, 0xC3):
        return Tag.BOOL
    if 0xC4 <= head <= 0xC6:
        return Tag.BIN
    if head == 0xCA:
        return Tag.FLOAT32
    if head == 0xCB:
        return Tag.FLOAT64
    if 0xCC <= head <= 0xCF:
        return Tag.UINT64
    if 0xD0 <= head <= 0xD3:
        # Signed encodings are classified by value, the way the msgpack
        # object model does it.
        return Tag.INT64 if value < 0 else Tag.UINT64
    raise _Malformed(f"invalid format byte 0x{head:02x}")


def _is_array(head: int) -> bool:
    return 0x90 <= head <= 0x9F or head in (0xDC, 0xDD)


def _is_map(head: int) -> bool:
    return 0x80 <= head <= 0x8F or head in (0xDE, 0xDF)


# Bytes preceding the payload of each ext format: the format byte, any
# length field, and the type code.
_EXT_PREFIX = {
    0xD4: 2,
    0xD5: 2,
    0xD6: 2,
    0xD7: 2,
    0xD8: 2,
    0xC7: 3,
    0xC8: 4,
    0xC9: 6,
}


def _read_ext(unpacker: msgpack.Unpacker, data, offset: int) -> GenericValue:
    # Skipping only checks the framing; unpacking would interpret type -1
    # as a timestamp and reject payloads that are not one.
    unpacker.skip()
    end = unpacker.tell()

    prefix = _EXT_PREFIX[data[offset]]
    code = data[offset + prefix - 1]
    if code > 0x7F:
        code -= 0x100

    return GenericValue(Tag.EXT, Extension(code, bytes(data[offset + prefix:end])))


def _read(unpacker: msgpack.Unpacker, data, depth: int) -> GenericValue:
    if depth > MAX_DEPTH:
        raise _Malformed(f"nesting deeper than {MAX_DEPTH} levels")

    offset = unpacker.tell()
    if offset >= len(data):
        raise msgpack.OutOfData()

    head = data[offset]

    if _is_array(head):
        count = unpacker.read_array_header()
        items = []
        for _ in range(count):
            items.append(_read(unpacker, data, depth + 1))
        return GenericValue(Tag.ARRAY, tuple(items))

    if _is_map(head):
        count = unpacker.read_map_header()
        pairs = []
        for _ in range(count):
            key = _read(unpacker, data, depth + 1)
            value = _read(unpacker, data, depth + 1)
            pairs.append((key, value))
        return GenericValue(Tag.MAP, tuple(pairs))

    if head == 0xC1:
        raise _Malformed("reserved format byte 0xc1")

    if head in _EXT_PREFIX:
        return _read_ext(unpacker, data, offset)

    value = unpacker.unpack()
    return GenericValue(_scalar_tag(head, value), value)


def decode_value(data) -> DecodeResult:
    """Decode one msgpack object from *data* without any schema.

    Never raises for malformed input; the result reports whether parsing
    succeeded, hit a format error, or ran out of bytes, together with the
    offset at which it stopped. Bytes left over after one complete object
    are a parse error.
    """

    if not isinstance(data, bytes):
        data = bytes(data)

    # No length limits: a declared length beyond the end of the frame is
    # reported as insufficient bytes, not as a format error.
    unpacker = msgpack.Unpacker(raw=False, strict_map_key=False, max_buffer_size=0)
    unpacker.feed(data)

    try:
        value = _read(unpacker, data, 0)
    except msgpack.OutOfData:
        return DecodeResult(Status.INSUFFICIENT_BYTES, offset=unpacker.tell(), reason="insufficient bytes")
    except (_Malformed, ValueError, msgpack.UnpackException) as e:
        return DecodeResult(Status.PARSE_ERROR, offset=unpacker.tell(), reason=str(e))

    consumed = unpacker.tell()
    if consumed != len(data):
        return DecodeResult(
            Status.PARSE_ERROR,
            offset=consumed,
            reason=f"{len(data) - consumed} trailing bytes after one object",
        )

    return DecodeResult(Status.OK, value=value, offset=consumed)
