""" The :class:`Dataset` is the decoded form of one bridge reply: every
    field and array from a single source, plus the metadata that source
    attached. Instances are built by :func:`karabo_bridge.protocol.builder.build`;
    callers only read from them.
"""

import logging

from .array import ArrayView
from .errors import DuplicateField
from .message import Borrow, MultipartMessage
from .protocol.wire import Tag


logger = logging.getLogger(__name__)


class Dataset:
    """ A read-only mapping of field paths to :class:`karabo_bridge.value.Value`
        or :class:`karabo_bridge.array.ArrayView` instances. The *source*
        is the identifier shared by every frame in the reply; *metadata*
        maps names to :class:`karabo_bridge.value.Value` instances.

        The dataset owns the received *message*. Releasing the dataset,
        either by calling :func:`release`, by leaving a ``with`` block, or
        by dropping the last reference to it, invalidates every value and
        array view taken from it; results already extracted with ``as_()``
        are copies and remain usable.
    """

    def __init__(self, message=None, source=None):

        if message is None:
            message = MultipartMessage()

        self._message = message
        self.source = source
        self.metadata = dict()
        self._fields = dict()
        self._nbytes = message.nbytes


    def borrow(self):
        """ Return a new :class:`karabo_bridge.message.Borrow` on the frames
            owned by this dataset.
        """

        return Borrow(self)


    @property
    def message(self):
        """ The received :class:`karabo_bridge.message.MultipartMessage`,
            or None once the dataset has been released.
        """

        return self._message


    def _add_field(self, path, entry):

        if path in self._fields:
            raise DuplicateField('field defined twice in one reply: ' + repr(path))

        self._fields[path] = entry


    def _add_metadata(self, key, value):

        if key in self.metadata:
            raise DuplicateField('metadata defined twice in one reply: ' + repr(key))

        self.metadata[key] = value


    def __enter__(self):
        return self


    def __exit__(self, *exception):
        self.release()


    def release(self):
        """ Drop the received frames. Any further access through a value or
            array view of this dataset raises
            :class:`karabo_bridge.errors.Released`.
        """

        if self._message is not None:
            logger.debug('releasing dataset from %s', self.source)

        self._message = None


    @property
    def released(self):
        return self._message is None


    @property
    def nbytes(self):
        """ Total number of bytes received for this dataset.
        """

        return self._nbytes


    def __setitem__(self, path, value):
        raise NotImplementedError('a Dataset is read-only')


    def __delitem__(self, path):
        raise NotImplementedError('a Dataset is read-only')


    def __getitem__(self, path):

        try:
            return self._fields[path]
        except KeyError:
            error = "dataset from '%s' does not contain the field '%s'" % (self.source, path)
            raise KeyError(error)


    def __contains__(self, path):
        return path in self._fields


    def __iter__(self):
        return iter(self._fields)


    def __len__(self):
        return len(self._fields)


    def __repr__(self):
        return 'Dataset(%r: %s)' % (self.source, ', '.join(self._fields))


    def get(self, path, default=None):
        return self._fields.get(path, default)


    def keys(self):
        return self._fields.keys()


    def values(self):
        return self._fields.values()


    def items(self):
        return self._fields.items()


    @property
    def arrays(self):
        """ The subset of fields that are :class:`karabo_bridge.array.ArrayView`
            instances, keyed by path.
        """

        return dict((path, entry) for path, entry in self._fields.items() if isinstance(entry, ArrayView))


    def summary(self):
        """ Describe every field: its path, its type, and for containers
            the element type and length. Arrays are listed last with their
            dtype and shape.
        """

        lines = list()
        lines.append('source: %s' % (self.source,))
        lines.append('Total bytes received: %d' % (self.nbytes))
        lines.append('')
        lines.append('path, type, container data type, container shape')

        arrays = list()

        for path, entry in self._fields.items():
            if isinstance(entry, ArrayView):
                arrays.append(entry)
                continue

            item = entry.get()
            tag = item.tag

            if tag is Tag.ARRAY:
                size = len(item.value)
                if size == 0:
                    lines.append('%s, %s, , [0]' % (path, tag.display))
                else:
                    element = item.value[0].tag
                    lines.append('%s, %s, %s, [%d]' % (path, tag.display, element.display, size))

            elif tag is Tag.BIN:
                lines.append('%s, %s, byte, [%d]' % (path, tag.display, len(item.value)))

            elif tag is Tag.MAP or tag is Tag.EXT:
                lines.append('%s, %s (Check...unexpected data type!)' % (path, tag.display))

            else:
                lines.append('%s, %s' % (path, tag.display))

        for array in arrays:
            shape = ', '.join(str(dimension) for dimension in array.shape)
            lines.append('%s: Array, %s, [%s]' % (array.path, array.dtype_name, shape))

        lines.append('')
        return '\n'.join(lines) + '\n'


# end of class Dataset


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
