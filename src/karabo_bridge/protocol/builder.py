"""Assemble a :class:`~karabo_bridge.dataset.Dataset` from reply frames.

A reply is a sequence of (header, data) frame pairs. The header's content
tag decides how the data frame is read:

    msgpack     a map; each key is a field, except "metadata", whose
                entries are merged into the dataset metadata
    array       raw bytes described by the header's path, shape, dtype
    ImageData   recognized, but not decodable by this client

Every header must carry the same source. Any violation raises a
:class:`~karabo_bridge.errors.ProtocolError` and no dataset is returned.
"""

from __future__ import annotations

import logging

from ..array import ArrayView
from ..dataset import Dataset
from ..errors import InconsistentSource, MalformedFrame, MissingFrame, Unsupported
from ..message import Borrow, MultipartMessage
from ..value import Value
from . import fields
from .header import Content, Header, decode_header
from .wire import decode_value


logger = logging.getLogger(__name__)


def _msgpack(dataset: Dataset, borrow: Borrow, header: Header, frame: bytes, index: int) -> None:
    result = decode_value(frame)
    if not result.ok:
        raise MalformedFrame(f"frame {index}: {result.reason} at byte {result.offset}")

    data = result.value
    if not data.is_map:
        raise MalformedFrame(f"frame {index}: msgpack data must be a map, not {data.tag.value}")

    for key, value in data.items():
        if not key.is_text:
            raise MalformedFrame(f"frame {index}: field names must be strings, not {key.tag.value}")
        key = key.text()

        if key != fields.METADATA:
            dataset._add_field(key, Value(value, borrow))
            continue

        if not value.is_map:
            raise MalformedFrame(f"frame {index}: metadata must be a map, not {value.tag.value}")

        for meta_key, meta_value in value.items():
            if not meta_key.is_text:
                raise MalformedFrame(f"frame {index}: metadata names must be strings, not {meta_key.tag.value}")
            dataset._add_metadata(meta_key.text(), Value(meta_value, borrow))


def _array(dataset: Dataset, borrow: Borrow, header: Header, frame: bytes, index: int) -> None:
    view = ArrayView(borrow, index, header.path, header.shape, header.dtype, header.dtype_name)
    dataset._add_field(header.path, view)


def _image_data(dataset: Dataset, borrow: Borrow, header: Header, frame: bytes, index: int) -> None:
    raise Unsupported(f"ImageData content from {header.source!r} cannot be decoded")


_HANDLERS = {
    Content.MSGPACK: _msgpack,
    Content.ARRAY: _array,
    Content.IMAGE_DATA: _image_data,
}


def build(frames) -> Dataset:
    """Decode the frames of one reply into a :class:`Dataset`.

    *frames* is a :class:`MultipartMessage` or any sequence of byte
    strings; the returned dataset takes ownership of it. An empty reply
    yields an empty dataset whose source is None.
    """

    if isinstance(frames, MultipartMessage):
        message = frames
    else:
        message = MultipartMessage(frames)

    dataset = Dataset(message)

    if len(message) == 0:
        logger.debug("empty reply")
        return dataset

    if len(message) % 2:
        raise MissingFrame(f"expected (header, data) pairs, received {len(message)} frames")

    borrow = dataset.borrow()
    source = None

    for index in range(0, len(message), 2):
        header = decode_header(message[index])

        if source is None:
            source = header.source
        elif header.source != source:
            raise InconsistentSource(source, header.source)

        logger.debug("frame %d: %s content from %s", index, header.content.value, header.source)
        _HANDLERS[header.content](dataset, borrow, header, message[index + 1], index + 1)

    dataset.source = source
    logger.debug("built dataset from %s: %d fields, %d metadata entries", source, len(dataset), len(dataset.metadata))
    return dataset
