import io
import karabo_bridge
import msgpack

from karabo_bridge.printer import dump, dump_multipart, render, separator
from karabo_bridge.protocol.wire import Status, decode_value
from karabo_bridge.simulator import pack


def decoded(thing, **kwargs):
    result = decode_value(msgpack.packb(thing, use_bin_type=True, **kwargs))
    assert result.ok
    return result.value


def test_scalars():

    assert render(decoded(None)) == 'null'
    assert render(decoded(True)) == 'true'
    assert render(decoded(False)) == 'false'
    assert render(decoded(42)) == '42'
    assert render(decoded(-42)) == '-42'
    assert render(decoded(2.5)) == '2.5'
    assert render(decoded(0.1, use_single_float=True)) == '0.1'
    assert render(decoded('text')) == '"text"'
    assert render(decoded(b'\x00\xff')) == '(bin)'
    assert render(decoded(msgpack.ExtType(1, b'x'))) == ''


def test_array():

    assert render(decoded([1, 'a', None, [True]])) == '[1,"a",null,[true]]'
    assert render(decoded([])) == '[]'


def test_map():

    value = decoded({'a': 1, 'b': {'c': 'x', 'd': [1, 2]}})
    assert render(value) == '\na: 1,\nb: \n    c: "x",\n    d: [1,2]'

    assert render(decoded({})) == '{}'


def test_map_inside_array():

    value = decoded({'list': [{'a': 1}]})
    assert render(value) == '\nlist: [\n    a: 1]'


def test_binary_keys():

    value = decoded({b'name': b'\x00\x01', 'other': 1})
    assert render(value) == '\nname: (bin),\nother: 1'


def test_deep_nesting():

    nested = 'leaf'
    for _ in range(40):
        nested = [nested, {'k': 0}]

    text = render(decoded(nested))

    assert text.count('[') == 40
    assert text.count(']') == 40

    # Only maps add indentation; arrays do not.
    assert text.count('\nk: 0') == 40

    nested = 'leaf'
    for _ in range(40):
        nested = {'k': nested}

    text = render(decoded(nested))
    assert text.endswith('\n' + '    ' * 39 + 'k: "leaf"')


def test_idempotent():

    value = decoded({'a': [1, 2, {'b': b'blob'}], 'c': 1.5})
    assert render(value) == render(value)


def test_dump():

    result = dump(pack({'a': 1}))

    assert result.ok
    assert result.text == '\na: 1\n'


def test_dump_malformed():

    result = dump(b'\x92\x01')

    assert not result
    assert result.status is Status.INSUFFICIENT_BYTES
    assert result.text == ''

    result = dump(b'\xc1')
    assert result.status is Status.PARSE_ERROR


def test_dump_multipart():

    frames = [pack({'source': 'A', 'content': 'msgpack'}), pack({'a': [1, 2]})]
    sink = io.StringIO()

    assert dump_multipart(frames, sink)

    text = sink.getvalue()
    assert text.count(separator) == 2
    assert '\nsource: "A",\ncontent: "msgpack"\n' in text
    assert '\na: [1,2]\n' in text


def test_dump_multipart_malformed():

    frames = [pack({'a': 1}), b'\xc1', pack([1])]
    sink = io.StringIO()

    assert not dump_multipart(frames, sink, boundary=False)

    text = sink.getvalue()
    assert separator not in text
    assert '(parse error at byte 0' in text
    assert text.endswith('[1]\n')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
