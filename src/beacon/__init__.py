""" Python implementation of broadcast peer discovery. A :class:`Probe`
    announces itself on the local network and maintains a live, ordered
    view of the beacons that answer.
"""

import logging

# The library never configures logging on its own behalf.

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Utility components.

from . import config
from . import ordering
from . import weakref

# Submodules used by multiple other components.

from . import protocol
from . import transport

# Primary public-facing interfaces.

from .location import Location
from .probe import Probe
from .protocol.wire import DISCOVERY_PORT
from .transport.base import (
    DiscoveryError,
    EncodeError,
    DecodeError,
    BindError,
    ProbeStateError,
)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
