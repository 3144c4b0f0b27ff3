""" The :class:`Value` is a deferred-typed handle on one decoded msgpack
    item. Nothing is converted until the caller asks for a specific type
    via :func:`Value.as_`; asking for the wrong one raises
    :class:`karabo_bridge.errors.TypeMismatch` and leaves the value intact
    for another attempt.
"""

import numpy

from .errors import TypeMismatch
from .protocol.wire import Tag


_integers = (Tag.UINT64, Tag.INT64)
_floats = (Tag.FLOAT32, Tag.FLOAT64)


class Value:
    """ A single field or metadata entry of a
        :class:`karabo_bridge.dataset.Dataset`. The *item* is the decoded
        :class:`karabo_bridge.protocol.wire.GenericValue`; the *borrow*
        ties this handle to the frames it was decoded from.
    """

    def __init__(self, item, borrow):

        self._item = item
        self._borrow = borrow


    def __repr__(self):
        if self._borrow.alive:
            return 'Value(%s: %r)' % (self._item.tag.value, self._item.to_python())
        else:
            return 'Value(released)'


    def get(self):
        """ Return the underlying :class:`GenericValue`.
        """

        self._borrow()
        return self._item


    @property
    def dtype(self):
        """ The :class:`karabo_bridge.protocol.wire.Tag` of the held item.
        """

        return self.get().tag


    @property
    def dtype_name(self):
        return self.dtype.display


    def to_python(self):
        """ Convert the held item to plain Python objects, whatever its
            type. Arrays become lists and maps become dictionaries.
        """

        return self.get().to_python()


    def as_(self, kind):
        """ Return the held item converted to *kind*, one of None's type,
            bool, int, float, str, bytes, list, tuple, dict, or a numpy
            scalar type such as numpy.uint16. Integers are accepted where
            a float is requested; everything else must match exactly.
        """

        item = self.get()
        tag = item.tag
        value = item.value

        if kind is None or kind is type(None):
            if tag is Tag.NIL:
                return None

        elif kind is bool:
            if tag is Tag.BOOL:
                return value

        elif kind is int:
            if tag in _integers:
                return value

        elif kind is float:
            if tag in _floats or tag in _integers:
                return float(value)

        elif kind is str:
            if tag is Tag.STR:
                return value
            if tag is Tag.BIN:
                try:
                    return bytes(value).decode('utf-8')
                except UnicodeDecodeError:
                    pass

        elif kind is bytes:
            if tag is Tag.BIN:
                return bytes(value)
            if tag is Tag.STR:
                return value.encode('utf-8')

        elif kind is list:
            if tag is Tag.ARRAY:
                return item.to_python()

        elif kind is tuple:
            if tag is Tag.ARRAY:
                return tuple(item.to_python())

        elif kind is dict:
            if tag is Tag.MAP:
                return item.to_python()

        elif isinstance(kind, type) and issubclass(kind, numpy.generic):
            return self._as_numpy(kind, tag, value)

        raise TypeMismatch('cannot convert %s value to %s' % (tag.value, _name(kind)))


    def _as_numpy(self, kind, tag, value):

        if issubclass(kind, numpy.bool_):
            if tag is Tag.BOOL:
                return kind(value)

        elif issubclass(kind, numpy.integer):
            if tag in _integers:
                limits = numpy.iinfo(kind)
                if limits.min <= value <= limits.max:
                    return kind(value)

        elif issubclass(kind, numpy.floating):
            if tag in _floats or tag in _integers:
                return kind(value)

        raise TypeMismatch('cannot convert %s value %r to %s' % (tag.value, value, _name(kind)))


# end of class Value



def _name(kind):
    try:
        return kind.__name__
    except AttributeError:
        return repr(kind)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
