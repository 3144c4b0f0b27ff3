import karabo_bridge
import pytest

from karabo_bridge.protocol.dtype import DType
from karabo_bridge.protocol.header import Content, decode_header
from karabo_bridge.simulator import pack


def array_header(**overrides):
    header = dict(source='A', content='array', path='x.y', shape=[2, 2], dtype='uint16')
    header.update(overrides)
    return {key: value for key, value in header.items() if value is not None}


def test_msgpack_header():

    header = decode_header(pack({'source': 'A', 'content': 'msgpack'}))

    assert header.source == 'A'
    assert header.content is Content.MSGPACK
    assert header.path is None
    assert header.shape is None
    assert header.dtype is None


def test_array_header():

    header = decode_header(pack(array_header()))

    assert header.content is Content.ARRAY
    assert header.path == 'x.y'
    assert header.shape == (2, 2)
    assert header.dtype is DType.UINT16


def test_image_data_header():

    header = decode_header(pack({'source': 'A', 'content': 'ImageData'}))
    assert header.content is Content.IMAGE_DATA


def test_binary_strings():

    header = decode_header(pack({b'source': b'A', b'content': b'msgpack'}))

    assert header.source == 'A'
    assert header.content is Content.MSGPACK


def test_missing_fields():

    with pytest.raises(karabo_bridge.MissingField) as info:
        decode_header(pack({'content': 'msgpack'}))
    assert info.value.field == 'source'

    with pytest.raises(karabo_bridge.MissingField) as info:
        decode_header(pack({'source': 'A'}))
    assert info.value.field == 'content'

    for field in ('path', 'shape', 'dtype'):
        with pytest.raises(karabo_bridge.MissingField) as info:
            decode_header(pack(array_header(**{field: None})))
        assert info.value.field == field


def test_unknown_content():

    with pytest.raises(karabo_bridge.UnknownContent) as info:
        decode_header(pack({'source': 'A', 'content': 'hdf5'}))

    assert info.value.content == 'hdf5'


def test_malformed_shape():

    with pytest.raises(karabo_bridge.MalformedFrame):
        decode_header(pack(array_header(shape=[2, -1])))

    with pytest.raises(karabo_bridge.MalformedFrame):
        decode_header(pack(array_header(shape=4)))

    with pytest.raises(karabo_bridge.MalformedFrame):
        decode_header(pack(array_header(shape=[2.0, 2.0])))


def test_unknown_dtype():

    header = decode_header(pack(array_header(dtype='complex64')))

    assert header.dtype is None
    assert header.dtype_name == 'complex64'
    assert header.path == 'x.y'


def test_dtype_name():

    assert decode_header(pack(array_header(dtype='int32'))).dtype_name == 'int32_t'
    assert decode_header(pack(array_header(dtype='float32'))).dtype_name == 'float'


def test_malformed_header():

    with pytest.raises(karabo_bridge.MalformedFrame):
        decode_header(pack(['source', 'A']))

    with pytest.raises(karabo_bridge.MalformedFrame):
        decode_header(b'\xc1')

    with pytest.raises(karabo_bridge.MalformedFrame):
        decode_header(pack({'source': 5, 'content': 'msgpack'}))


def test_errors_are_protocol_errors():

    with pytest.raises(karabo_bridge.ProtocolError):
        decode_header(pack({'source': 'A', 'content': 'hdf5'}))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
