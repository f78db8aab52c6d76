""" Default settings for a :class:`beacon.Probe`. Each default can be
    overridden by an environment variable, which is consulted every time a
    probe is constructed; explicit arguments to the probe take precedence
    over both.
"""

import os

from .protocol import wire


port = wire.DISCOVERY_PORT
interval = 2.0                  # seconds between probe broadcasts
timeout = 5.0                   # seconds before an unheard peer is dropped
broadcast = '255.255.255.255'
buffer = 65535                  # largest datagram accepted

_environment = dict()
_environment['port'] = ('BEACON_PORT', int)
_environment['interval'] = ('BEACON_INTERVAL', float)
_environment['timeout'] = ('BEACON_TIMEOUT', float)
_environment['broadcast'] = ('BEACON_BROADCAST', str)


def get(setting):
    """ Return the effective value for *setting*, one of 'port', 'interval',
        'timeout', 'broadcast' or 'buffer'.
    """

    default = globals()[setting]

    try:
        variable, cast = _environment[setting]
    except KeyError:
        return default

    try:
        value = os.environ[variable]
    except KeyError:
        return default

    try:
        value = cast(value)
    except ValueError:
        raise ValueError('invalid value for %s: %r' % (variable, value))

    if cast in (int, float) and value <= 0:
        raise ValueError('%s must be positive: %r' % (variable, value))

    if setting == 'port':
        check_port(value, variable)

    return value


def check_port(port, name='port'):
    """ Raise ValueError unless *port* is a usable UDP port, 1 through 65535.
    """

    if port < 1 or port > 65535:
        raise ValueError('%s must be between 1 and 65535: %r' % (name, port))


def resolve(**overrides):
    """ Return a dictionary of every setting, with any non-None *overrides*
        taking the place of the configured value.
    """

    settings = dict()

    for setting in ('port', 'interval', 'timeout', 'broadcast', 'buffer'):
        value = overrides.pop(setting, None)
        if value is None:
            value = get(setting)
        settings[setting] = value

    if overrides:
        raise TypeError('unknown settings: ' + ', '.join(sorted(overrides)))

    settings['port'] = int(settings['port'])
    check_port(settings['port'])

    return settings


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
