import pytest
import beacon

from beacon.protocol import wire


def test_encode():

    assert wire.encode('abc') == b'\x00\x03abc'
    assert wire.encode('') == b'\x00\x00'

    # The length field counts bytes, not characters.

    encoded = wire.encode('é')
    assert encoded == b'\x00\x02' + 'é'.encode('utf-8')

    assert wire.encode('abc') == wire.encode('abc')
    assert wire.probe('abc') == wire.encode('abc')


def test_encode_too_long():

    wire.encode('x' * 65535)

    with pytest.raises(beacon.EncodeError):
        wire.encode('x' * 65536)

    # EncodeError is also a ValueError, for callers that don't care.

    with pytest.raises(ValueError):
        wire.encode('x' * 65536)


def test_decode():

    assert wire.decode(b'\x00\x05hello') == 'hello'
    assert wire.decode(b'\x00\x00') == ''
    assert wire.decode(wire.encode('héllo')) == 'héllo'

    # Anything past the declared length is not part of the string.

    assert wire.decode(b'\x00\x02hello') == 'he'


def test_decode_malformed():

    for buffer in (b'', b'\x00', b'\x00\x05hell', b'\x01\x00abc'):
        with pytest.raises(beacon.DecodeError):
            wire.decode(buffer)

    with pytest.raises(beacon.DecodeError):
        wire.decode(b'\x00\x02\xff\xfe')


def test_has_prefix():

    prefix = wire.encode('abc')

    assert wire.has_prefix(prefix, prefix) == True
    assert wire.has_prefix(prefix + b'anything', prefix) == True
    assert wire.has_prefix(bytearray(prefix + b'x'), prefix) == True

    assert wire.has_prefix(b'', prefix) == False
    assert wire.has_prefix(prefix[:-1], prefix) == False
    assert wire.has_prefix(wire.encode('abd') + b'x', prefix) == False
    assert wire.has_prefix(wire.encode('abcd'), prefix) == False


def test_reply():

    data = wire.reply('abc', 9000, 'hello')
    assert data == b'\x00\x03abc' + b'\x23\x28' + b'\x00\x05hello'

    prefix = wire.encode('abc')
    assert wire.parse_reply(prefix, data) == (9000, 'hello')

    data = wire.reply('abc', 65535, '')
    assert wire.parse_reply(prefix, data) == (65535, '')

    for port in (-1, 65536):
        with pytest.raises(beacon.EncodeError):
            wire.reply('abc', port, 'hello')


def test_parse_reply_malformed():

    prefix = wire.encode('abc')

    truncated = (
        prefix,
        prefix + b'\x23',
        prefix + b'\x23\x28',
        prefix + b'\x23\x28\x00',
        prefix + b'\x23\x28\x00\x05hell',
        prefix + b'\x23\x28\x00\x01\xff',
    )

    for buffer in truncated:
        with pytest.raises(beacon.DecodeError):
            wire.parse_reply(prefix, buffer)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
