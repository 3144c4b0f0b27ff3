import karabo_bridge
import numpy
import pytest

from karabo_bridge.protocol.builder import build
from karabo_bridge.simulator import array_frames, msgpack_frames, pack


def test_empty_reply():

    dataset = build([])

    assert len(dataset) == 0
    assert dataset.source is None
    assert dataset.metadata == {}
    assert dataset.nbytes == 0


def test_msgpack_fields_and_metadata():

    frames = list()
    frames.extend(msgpack_frames('A', {'a': 1, 'b': 'two', 'metadata': {'timestamp.tid': 7, 'source': 'A'}}))
    frames.extend(msgpack_frames('A', {'c': [1, 2], 'metadata': {'timestamp': 1.5}}))

    dataset = build(frames)

    assert dataset.source == 'A'
    assert set(dataset.keys()) == set(('a', 'b', 'c'))
    assert 'metadata' not in dataset
    assert set(dataset.metadata.keys()) == set(('timestamp.tid', 'source', 'timestamp'))

    assert dataset['a'].as_(int) == 1
    assert dataset['b'].as_(str) == 'two'
    assert dataset['c'].as_(list) == [1, 2]
    assert dataset.metadata['timestamp.tid'].as_(int) == 7
    assert dataset.metadata['timestamp'].as_(float) == 1.5


def test_array_example():

    header = pack({'source': 'A', 'content': 'array', 'path': 'x.y', 'shape': [2, 2], 'dtype': 'uint16'})
    data = bytes((1, 0, 2, 0, 3, 0, 4, 0))

    dataset = build([header, data])
    view = dataset['x.y']

    assert isinstance(view, karabo_bridge.ArrayView)
    assert view.shape == (2, 2)
    assert list(view.as_(numpy.uint16)) == [1, 2, 3, 4]
    assert list(view.as_('uint16_t')) == [1, 2, 3, 4]

    with pytest.raises(karabo_bridge.TypeMismatch):
        view.as_(numpy.int16)


def test_integer_dtype_suffix():

    array = numpy.array([[-1, 2, -3]], dtype=numpy.int32)
    dataset = build(array_frames('A', 'values', array))

    view = dataset['values']
    assert view.dtype is karabo_bridge.protocol.DType.INT32
    assert list(view.as_('int32')) == [-1, 2, -3]
    assert list(view.as_('int32_t')) == [-1, 2, -3]
    assert list(view.as_(numpy.int32)) == [-1, 2, -3]


def test_mixed_reply():

    frames = list()
    frames.extend(msgpack_frames('A', {'header.trainId': 3}))
    frames.extend(array_frames('A', 'image.data', numpy.zeros((3, 2), dtype=numpy.float32)))

    dataset = build(frames)

    assert set(dataset.keys()) == set(('header.trainId', 'image.data'))
    assert set(dataset.arrays.keys()) == set(('image.data',))
    assert dataset.nbytes == sum(len(frame) for frame in frames)


def test_image_data_unsupported():

    frames = [pack({'source': 'A', 'content': 'ImageData'}), b'\x00' * 16]

    with pytest.raises(karabo_bridge.Unsupported):
        build(frames)


def test_inconsistent_source():

    frames = list()
    frames.extend(msgpack_frames('A', {'a': 1}))
    frames.extend(msgpack_frames('B', {'b': 2}))

    with pytest.raises(karabo_bridge.InconsistentSource) as info:
        build(frames)

    assert info.value.expected == 'A'
    assert info.value.received == 'B'


def test_unknown_content():

    frames = [pack({'source': 'A', 'content': 'hdf5'}), b'']

    with pytest.raises(karabo_bridge.UnknownContent):
        build(frames)


def test_missing_data_frame():

    frames = list(msgpack_frames('A', {'a': 1}))
    frames.append(pack({'source': 'A', 'content': 'msgpack'}))

    with pytest.raises(karabo_bridge.MissingFrame):
        build(frames)


def test_data_must_be_a_map():

    frames = [pack({'source': 'A', 'content': 'msgpack'}), pack([1, 2, 3])]

    with pytest.raises(karabo_bridge.MalformedFrame):
        build(frames)

    frames = [pack({'source': 'A', 'content': 'msgpack'}), b'\x92\x01']

    with pytest.raises(karabo_bridge.MalformedFrame):
        build(frames)


def test_metadata_must_be_a_map():

    frames = msgpack_frames('A', {'metadata': 5})

    with pytest.raises(karabo_bridge.MalformedFrame):
        build(frames)


def test_duplicate_fields():

    frames = list()
    frames.extend(msgpack_frames('A', {'a': 1}))
    frames.extend(msgpack_frames('A', {'a': 2}))

    with pytest.raises(karabo_bridge.DuplicateField):
        build(frames)

    frames = list()
    frames.extend(msgpack_frames('A', {'metadata': {'tid': 1}}))
    frames.extend(msgpack_frames('A', {'metadata': {'tid': 1}}))

    with pytest.raises(karabo_bridge.DuplicateField):
        build(frames)


def test_error_after_valid_pairs():

    # A failure late in the reply still fails the whole reply.

    frames = list()
    frames.extend(msgpack_frames('A', {'a': 1}))
    frames.extend(array_frames('A', 'x', numpy.arange(4, dtype=numpy.uint8)))
    frames.append(pack({'source': 'A', 'content': 'ImageData'}))
    frames.append(b'')

    with pytest.raises(karabo_bridge.ProtocolError):
        build(frames)


def test_accepts_multipart_message():

    message = karabo_bridge.message.MultipartMessage(msgpack_frames('A', {'a': 1}))
    dataset = build(message)

    assert dataset['a'].as_(int) == 1
    assert dataset.message is message


def test_release_with_message_still_referenced():

    frames = list()
    frames.extend(msgpack_frames('A', {'a': 1}))
    frames.extend(array_frames('A', 'x', numpy.arange(3, dtype=numpy.uint8)))

    message = karabo_bridge.message.MultipartMessage(frames)
    dataset = build(message)
    value = dataset['a']
    view = dataset['x']

    dataset.release()

    assert len(message) == 4

    with pytest.raises(karabo_bridge.Released):
        value.as_(int)

    with pytest.raises(karabo_bridge.Released):
        view.as_(numpy.uint8)

    assert repr(value) == 'Value(released)'


def test_dropped_dataset():

    message = karabo_bridge.message.MultipartMessage(msgpack_frames('A', {'a': 1}))
    value = build(message)['a']

    with pytest.raises(karabo_bridge.Released):
        value.as_(int)


def test_unknown_array_dtype():

    frames = list()
    frames.extend(msgpack_frames('A', {'a': 1}))
    frames.extend(array_frames('A', 'half', numpy.zeros(2, dtype=numpy.float16)))

    dataset = build(frames)

    assert dataset['a'].as_(int) == 1

    view = dataset['half']
    assert view.dtype is None
    assert view.dtype_name == 'float16'
    assert view.shape == (2,)

    for requested in (numpy.float16, numpy.float32, 'float16', 'uint16'):
        with pytest.raises(karabo_bridge.TypeMismatch):
            view.as_(requested)

    assert 'half: Array, float16, [2]' in dataset.summary().splitlines()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
