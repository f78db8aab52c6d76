""" Deterministic ordering of discovered peers. Every snapshot handed to a
    subscriber is sorted by payload, then by address; identical peer sets
    always produce identical snapshots regardless of the order in which
    replies arrived.

    Addresses compare by the ordinal value of the textual host, and on a
    host tie the higher port sorts first. Consumers already depend on this
    exact arrangement.
"""

import functools


def compare(a, b):
    """ Comparator for two (host, port) addresses; returns a negative number,
        zero, or a positive number, in the style of :func:`functools.cmp_to_key`.
    """

    host_a = str(a[0])
    host_b = str(b[0])

    if host_a < host_b:
        return -1
    if host_a > host_b:
        return 1

    return b[1] - a[1]


address_key = functools.cmp_to_key(compare)


def sort_key(location):
    """ Canonical key for a :class:`beacon.location.Location`.
    """

    return (location.payload, address_key(location.address))


def ordered(locations):
    """ Return the supplied locations as a tuple in canonical order.
    """

    return tuple(sorted(locations, key=sort_key))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
