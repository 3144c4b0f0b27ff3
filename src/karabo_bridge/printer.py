""" Render decoded msgpack values with no knowledge of their schema. This
    is a diagnostic aid: it shows the structure of whatever the bridge
    sends, including fields this client does not otherwise interpret.

    Maps put every entry on its own line, indented four spaces per level
    of map nesting, as ``key: value``. Arrays are bracketed. Binary blobs
    print as ``(bin)``, except in key position, where the protocol uses
    them for plain names and they print as text.
"""

import dataclasses
import logging

import numpy

from .protocol.wire import Status, Tag, decode_value


logger = logging.getLogger(__name__)

indent = '    '
separator = '\n----------new message----------\n'


def _scalar(value, tag, key):

    if tag is Tag.NIL:
        return 'null'

    if tag is Tag.BOOL:
        return 'true' if value else 'false'

    if tag is Tag.UINT64 or tag is Tag.INT64:
        return str(value)

    if tag is Tag.FLOAT32:
        # Shortest text that round-trips at single precision.
        return str(numpy.float32(value))

    if tag is Tag.FLOAT64:
        return repr(value)

    if tag is Tag.STR:
        return '"' + value + '"'

    if tag is Tag.BIN:
        if key:
            return bytes(value).decode('utf-8', errors='replace')
        return '(bin)'

    # Extension types carry no renderable content.
    return ''


def render(item, depth=0, key=False):
    """ Return the text rendering of *item*, a
        :class:`karabo_bridge.protocol.wire.GenericValue`. *depth* is the
        number of maps enclosing *item*; *key* is True when *item* is
        itself a map key. Rendering the same item always produces the same
        text.
    """

    tag = item.tag

    if tag is Tag.ARRAY:
        if not item.value:
            return '[]'
        elements = [render(element, depth) for element in item.value]
        return '[' + ','.join(elements) + ']'

    if tag is Tag.MAP:
        if not item.value:
            return '{}'
        prefix = '\n' + indent * depth
        entries = list()
        for k, v in item.value:
            entries.append(prefix + render(k, depth + 1, key=True) + ': ' + render(v, depth + 1))
        return ','.join(entries)

    return _scalar(item.value, tag, key)



@dataclasses.dataclass(frozen=True)
class DumpResult:
    """ Outcome of :func:`dump`. *text* is empty unless *status* is OK.
    """

    status: Status
    text: str = ''
    offset: int = 0
    reason: str = ''

    @property
    def ok(self):
        return self.status is Status.OK

    def __bool__(self):
        return self.ok



def dump(frame):
    """ Decode one msgpack *frame* and render it. Malformed input is
        reported in the returned :class:`DumpResult`, never raised.
    """

    result = decode_value(frame)

    if not result.ok:
        logger.warning('%s at byte %d of %d-byte frame', result.status.value, result.offset, len(frame))
        return DumpResult(result.status, offset=result.offset, reason=result.reason)

    text = render(result.value) + '\n'
    return DumpResult(Status.OK, text, result.offset)



def dump_multipart(frames, sink, boundary=True):
    """ Write the rendering of every frame in *frames* to *sink*, any object
        with a ``write()`` method. Each frame is preceded by a separator
        line if *boundary* is True. Frames that cannot be decoded are
        noted in place. Return True if every frame decoded.
    """

    complete = True

    for frame in frames:
        if boundary:
            sink.write(separator)

        result = dump(frame)
        if result.ok:
            sink.write(result.text)
        else:
            complete = False
            sink.write('(%s at byte %d: %s)\n' % (result.status.value, result.offset, result.reason))

    return complete


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
