""" Ownership of received frames. A :class:`MultipartMessage` holds the
    raw frames of one reply; everything decoded from those frames borrows
    them through a :class:`Borrow`, a weak reference to the owner that
    refuses to dereference once the owner has released them or is gone.
"""

import weakref

from .errors import Released


class MultipartMessage:
    """ The ordered frames of a single multipart reply. Frames are stored
        as immutable bytes; the message is the only strong reference to
        them once a :class:`karabo_bridge.dataset.Dataset` has taken it over.
    """

    def __init__(self, frames=()):

        self.frames = tuple(bytes(frame) for frame in frames)


    def __getitem__(self, index):
        return self.frames[index]


    def __iter__(self):
        return iter(self.frames)


    def __len__(self):
        return len(self.frames)


    def __repr__(self):
        return 'MultipartMessage(%d frames, %d bytes)' % (len(self), self.nbytes)


    @property
    def nbytes(self):
        """ Total number of bytes received across all frames.
        """

        return sum(len(frame) for frame in self.frames)


# end of class MultipartMessage



class Borrow:
    """ A weak handle on the owner of a :class:`MultipartMessage`, such as
        a :class:`karabo_bridge.dataset.Dataset`. The owner exposes the
        frames as its ``message`` attribute, which is None once it has
        released them. Calling the borrow returns the message while the
        owner is alive and holds it; otherwise it raises
        :class:`karabo_bridge.errors.Released`, even if some other
        reference keeps the message itself alive.
    """

    def __init__(self, owner):

        self._reference = weakref.ref(owner)


    def __call__(self):

        owner = self._reference()
        if owner is None:
            message = None
        else:
            message = owner.message

        if message is None:
            raise Released('the dataset owning this value has been released')

        return message


    @property
    def alive(self):

        owner = self._reference()
        return owner is not None and owner.message is not None


# end of class Borrow


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
