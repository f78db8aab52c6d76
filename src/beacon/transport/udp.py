""" UDP socket handling for the probe: creating the shared send/receive
    socket, and tearing it down in a way that releases any thread blocked
    reading from it.
"""

import logging
import socket
import sys

from .base import BindError

logger = logging.getLogger(__name__)

# Windows-only values for unrestricted (NAT traversal) reception; the socket
# module does not expose them.

IPV6_PROTECTION_LEVEL = 23
PROTECTION_LEVEL_UNRESTRICTED = 10


def bind(address='', port=0, timeout=None):
    """ Return an unconnected UDP socket bound to *address* and *port*, by
        default any interface and an ephemeral port, with address reuse and
        broadcast enabled. Any failure raises :class:`BindError`.

        If *timeout* is set it is applied to the socket, so that a thread
        blocked in :func:`socket.socket.recvfrom` wakes up periodically.
    """

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as e:
        raise BindError('unable to create UDP socket: ' + str(e)) from e

    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        sock.bind((address, port))
    except OSError as e:
        sock.close()
        raise BindError('unable to bind UDP socket to %r: %s' % ((address, port), e)) from e

    if timeout is not None:
        sock.settimeout(timeout)

    allow_nat_traversal(sock)
    return sock


def allow_nat_traversal(sock):
    """ Best effort: ask the platform to allow traffic from outside the
        local network to reach this socket. Only Windows offers such a knob;
        everywhere else, or if the option is refused, the failure is logged
        and otherwise ignored. Returns True if the option was set.
    """

    if sys.platform != 'win32':
        logger.debug('NAT traversal is not supported on %s', sys.platform)
        return False

    level = getattr(socket, 'IPPROTO_IPV6', 41)

    try:
        sock.setsockopt(level, IPV6_PROTECTION_LEVEL, PROTECTION_LEVEL_UNRESTRICTED)
    except OSError as e:
        logger.debug('error switching on NAT traversal: %s', e)
        return False

    return True


def close(sock):
    """ Shut down and close *sock*. Shutting the socket down before closing
        it wakes any thread blocked on a read, which would otherwise stay
        blocked on some platforms.
    """

    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # Unconnected datagram sockets report ENOTCONN here, but the
        # shutdown still takes effect on Linux.
        pass

    sock.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
