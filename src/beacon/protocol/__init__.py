""" Wire-level pieces of the discovery protocol. Nothing here touches a
    socket; see :mod:`beacon.transport` for that.
"""

from . import wire
from .wire import DISCOVERY_PORT


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
