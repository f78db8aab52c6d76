"""Socket-level pieces: exceptions, UDP socket setup, the snapshot relay."""

from .base import (
    DiscoveryError,
    EncodeError,
    DecodeError,
    BindError,
    ProbeStateError,
    RelayPortError,
    RelayTimeout,
    Discovery,
)

from . import udp
