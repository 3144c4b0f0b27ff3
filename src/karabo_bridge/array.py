""" The :class:`ArrayView` describes one raw array frame: where it lives
    in the reply, its shape, and its element type. The frame is only read
    when :func:`ArrayView.as_` is called, and the result is always a
    freshly allocated numpy array; nothing handed back to the caller
    refers to the received frame.
"""

import sys

import numpy

from .errors import SizeMismatch, SizeOverflow, TypeMismatch
from .protocol.dtype import DType


def element_count(shape, limit=sys.maxsize):
    """ Return the product of the *shape* dimensions. Raise
        :class:`karabo_bridge.errors.SizeOverflow` if the running product
        would exceed *limit*.
    """

    count = 1
    for dimension in shape:
        if dimension < 0:
            raise SizeOverflow('negative array dimension in shape %r' % (shape,))
        if dimension and count > limit // dimension:
            raise SizeOverflow('unmanageable array size for shape %r' % (shape,))
        count *= dimension

    return count



class ArrayView:
    """ A typed view on frame *index* of the message held by *borrow*.
        The *path* is the dataset field the array was stored under.

        The *dtype* is None when the header named an element type this
        client cannot read; *dtype_name* then keeps that name, and every
        :func:`as_` request raises :class:`karabo_bridge.errors.TypeMismatch`.
    """

    def __init__(self, borrow, index, path, shape, dtype, dtype_name=None):

        self._borrow = borrow
        self.index = index
        self.path = path
        self.shape = tuple(shape)
        self.dtype = dtype

        if dtype_name is None:
            dtype_name = str(dtype)

        self.dtype_name = dtype_name


    def __repr__(self):
        return 'ArrayView(%s, %s, %s)' % (self.path, self.dtype_name, list(self.shape))


    @property
    def nbytes(self):
        """ Size in bytes of the underlying frame.
        """

        return len(self._frame())


    def _frame(self):
        message = self._borrow()
        return message[self.index]


    def size(self):
        """ Number of elements, as the product of the shape.
        """

        return element_count(self.shape)


    def as_(self, dtype, reshape=False):
        """ Copy the frame out as a numpy array of *dtype*, which must
            agree with the dtype announced in the header. *dtype* may be
            a :class:`karabo_bridge.protocol.dtype.DType`, a name such as
            'uint16' or 'uint16_t', or a numpy dtype or scalar type. The
            result is flat unless *reshape* is True.
        """

        try:
            requested = DType.of(dtype)
        except ValueError:
            raise TypeMismatch('unrecognized array type: %r' % (dtype,)) from None

        if requested is not self.dtype:
            raise TypeMismatch('array %s holds %s, not %s' % (self.path, self.dtype_name, requested))

        count = self.size()
        frame = self._frame()

        # Compare without multiplying out count * itemsize, which could
        # itself overflow.

        itemsize = requested.itemsize
        if len(frame) % itemsize or len(frame) // itemsize != count:
            raise SizeMismatch('array %s: %d bytes cannot hold %d x %s' % (self.path, len(frame), count, requested))

        native_dtype = requested.numpy.newbyteorder('=')

        if count == 0:
            native = numpy.empty(0, dtype=native_dtype)
        else:
            serialized = numpy.frombuffer(frame, dtype=requested.numpy, count=count)
            native = serialized.astype(native_dtype, copy=True)

        if reshape:
            native = native.reshape(self.shape)

        return native


# end of class ArrayView


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
