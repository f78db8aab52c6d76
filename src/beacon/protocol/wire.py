""" Encoding and decoding of discovery datagrams. Both sides of the exchange
    use the same primitive: a string is framed as a two-byte, big-endian,
    unsigned length followed by the UTF-8 bytes of the string.

    A probe datagram is nothing more than the framed beacon type. A reply
    carries the same framed beacon type as a prefix, so that unrelated
    traffic on the port can be told apart, followed by the port the beacon
    is listening on and the framed payload::

        [encode(type)][port, 2 bytes, big-endian][encode(payload)]

    The port field exists because the reply is typically sent from an
    ephemeral port, not the one the beacon wants clients to use.
"""

import struct

from ..transport.base import DecodeError, EncodeError


# There's nothing special about this port number beyond being unprivileged
# and agreed upon by every probe and beacon on the network.

DISCOVERY_PORT = 35891

_length = struct.Struct('>H')
_port = struct.Struct('>H')


def encode(string):
    """ Return the canonical framed bytes for *string*. The same input always
        produces the same output; the result is used both as the probe body
        and as the prefix replies are matched against.
    """

    body = string.encode('utf-8')

    try:
        length = _length.pack(len(body))
    except struct.error:
        raise EncodeError('string too long to encode: %d bytes' % (len(body)))

    return length + body


def decode(buffer):
    """ Inverse of :func:`encode`. Bytes beyond the declared length are
        ignored; too few bytes, or bytes that are not valid UTF-8, raise
        :class:`DecodeError`.
    """

    buffer = bytes(buffer)

    if len(buffer) < _length.size:
        raise DecodeError('too few bytes for a length field')

    length, = _length.unpack_from(buffer)
    end = _length.size + length

    if len(buffer) < end:
        raise DecodeError('too few bytes in packet: expected %d, got %d' % (end, len(buffer)))

    try:
        return buffer[_length.size:end].decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecodeError('payload is not valid UTF-8') from e


def has_prefix(buffer, prefix):
    """ Return True if *buffer* begins with exactly the bytes in *prefix*.
    """

    return bytes(buffer[:len(prefix)]) == bytes(prefix)


def probe(beacon_type):
    """ Return the datagram broadcast by a probe looking for *beacon_type*.
    """

    return encode(beacon_type)


def reply(beacon_type, port, payload):
    """ Return the reply a beacon of *beacon_type* sends back to a probe,
        advertising its listening *port* and application *payload*.
    """

    try:
        port = _port.pack(int(port))
    except struct.error:
        raise EncodeError('invalid port: ' + repr(port))

    return encode(beacon_type) + port + encode(payload)


def parse_reply(prefix, buffer):
    """ Interpret the remainder of a reply whose leading bytes already
        matched *prefix*. Returns an (advertised port, payload) tuple.
    """

    offset = len(prefix)
    if len(buffer) < offset + _port.size:
        raise DecodeError('too few bytes for a port field')

    port, = _port.unpack_from(buffer, offset)
    payload = decode(buffer[offset + _port.size:])

    return (port, payload)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
