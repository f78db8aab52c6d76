"""Discovery interface and exceptions.

This is the (small) contract that discovery implementations follow, along
with the exceptions raised anywhere in the package. It lives outside
:mod:`beacon.protocol` so the wire codec remains socket-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Tuple


# Discovery exceptions

class DiscoveryError(Exception):
    """Base class for all discovery errors."""


class EncodeError(DiscoveryError, ValueError):
    """A value cannot be represented in the wire format."""


class DecodeError(DiscoveryError, ValueError):
    """A datagram is truncated or otherwise malformed."""


class BindError(DiscoveryError):
    """The discovery socket could not be created or bound."""


class ProbeStateError(DiscoveryError, RuntimeError):
    """A lifecycle method was called in the wrong state."""


class RelayPortError(DiscoveryError):
    """No suitable port could be bound for the snapshot relay."""


class RelayTimeout(DiscoveryError):
    """No snapshot arrived from the relay in time."""


class Discovery(ABC):

    # lifecycle
    @abstractmethod
    def start(self):
        """Acquire the socket and begin discovering."""

    @abstractmethod
    def stop(self):
        """Stop discovering and release the socket."""

    # query known endpoints
    @abstractmethod
    def peers(self) -> Tuple:
        """Return the most recently published snapshot."""

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc_info):
        self.stop()
