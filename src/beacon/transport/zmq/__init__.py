"""ZeroMQ relay for republishing peer snapshots."""

from . import publish
