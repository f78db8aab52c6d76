""" The :class:`Location` is the value handed to subscribers for every peer a
    :class:`beacon.Probe` currently knows about.
"""


class Location:
    """ One discovered beacon: the *address* it can be reached at, as a
        (host, port) tuple, the *payload* it advertised, and *last_seen*,
        the probe clock reading when its most recent reply arrived.

        Two instances are equal if and only if their addresses are equal;
        the payload and timestamp play no part in identity. Instances are
        immutable: a fresh reply produces a new :class:`Location` that
        replaces the old one.
    """

    __slots__ = ('_address', '_payload', '_last_seen')

    def __init__(self, address, payload, last_seen):

        host, port = address
        object.__setattr__(self, '_address', (str(host), int(port)))
        object.__setattr__(self, '_payload', payload)
        object.__setattr__(self, '_last_seen', float(last_seen))


    def __setattr__(self, name, value):
        raise AttributeError('Location instances are immutable')


    def __delattr__(self, name):
        raise AttributeError('Location instances are immutable')


    @property
    def address(self):
        return self._address

    @property
    def host(self):
        return self._address[0]

    @property
    def port(self):
        return self._address[1]

    @property
    def payload(self):
        return self._payload

    @property
    def last_seen(self):
        return self._last_seen


    def __eq__(self, other):
        if isinstance(other, Location):
            return self._address == other._address
        return NotImplemented


    def __hash__(self):
        return hash(self._address)


    def __str__(self):
        return str(self._payload)


    def __repr__(self):
        host, port = self._address
        return 'Location((%r, %d), %r, %r)' % (host, port, self._payload, self._last_seen)


# end of class Location


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
