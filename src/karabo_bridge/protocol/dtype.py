"""Element types for array frames.

The bridge describes array frames with numpy type names ("uint16",
"float32"), while array access is keyed by C-style names ("uint16_t",
"float"). Both sides go through :func:`normalize`, which appends the
``_t`` suffix to integer names that lack it and folds the float aliases,
so a name from either side lands on the same :class:`DType`.
"""

from __future__ import annotations

import enum

import numpy


SUFFIX = "_t"

_ALIASES = {
    "float32": "float",
    "float64": "double",
    "bool_": "bool",
}


def normalize(name: str) -> str:
    """Return the canonical spelling of a dtype *name*."""

    name = name.strip()
    if "int" in name and not name.endswith(SUFFIX):
        name += SUFFIX
    return _ALIASES.get(name, name)


class DType(enum.Enum):
    """Closed set of element types an array frame may hold.

    Each member's value is its canonical name; :attr:`numpy` is the
    little-endian numpy dtype used to read the frame.
    """

    UINT8 = "uint8_t"
    UINT16 = "uint16_t"
    UINT32 = "uint32_t"
    UINT64 = "uint64_t"
    INT8 = "int8_t"
    INT16 = "int16_t"
    INT32 = "int32_t"
    INT64 = "int64_t"
    FLOAT32 = "float"
    FLOAT64 = "double"
    BOOL = "bool"

    @property
    def numpy(self) -> numpy.dtype:
        return numpy.dtype(_WIRE_FORMATS[self])

    @property
    def itemsize(self) -> int:
        return self.numpy.itemsize

    @classmethod
    def parse(cls, name) -> "DType":
        """Look up a dtype by name, raising ValueError if it is unknown."""

        if isinstance(name, bytes):
            name = name.decode("utf-8", errors="replace")
        if not isinstance(name, str):
            raise ValueError(f"dtype name must be a string, not {type(name).__name__}")
        return cls(normalize(name))

    @classmethod
    def of(cls, requested) -> "DType":
        """Resolve a DType, a name, or anything numpy accepts as a dtype."""

        if isinstance(requested, cls):
            return requested
        if isinstance(requested, (str, bytes)):
            return cls.parse(requested)
        try:
            name = numpy.dtype(requested).name
        except TypeError as e:
            raise ValueError(f"not a dtype: {requested!r}") from e
        return cls.parse(name)

    def __str__(self) -> str:
        return self.value


_WIRE_FORMATS = {
    DType.UINT8: "u1",
    DType.UINT16: "<u2",
    DType.UINT32: "<u4",
    DType.UINT64: "<u8",
    DType.INT8: "i1",
    DType.INT16: "<i2",
    DType.INT32: "<i4",
    DType.INT64: "<i8",
    DType.FLOAT32: "<f4",
    DType.FLOAT64: "<f8",
    DType.BOOL: "?",
}
