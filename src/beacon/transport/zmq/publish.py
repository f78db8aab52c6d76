"""ZeroMQ relay for peer snapshots.

A probe invokes its listeners on its own threads. An application that wants
snapshots somewhere else (another thread, another process, another host) can
register a :class:`Server` as a listener; every snapshot is republished on a
PUB socket, and a :class:`Client` receives them wherever it runs.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Optional, Sequence, Tuple

import zmq

from ...location import Location
from ..base import RelayPortError, RelayTimeout
from .framing import from_pub_frames, to_pub_frames

logger = logging.getLogger(__name__)

default_topic = "peers"
zmq_context = zmq.Context()


class Client:
    """SUB client."""

    def __init__(self, address: str, port: int, topic: str = default_topic):
        self.address = address
        self.port = int(port)
        self.topic = topic

        server = f"tcp://{address}:{self.port}"
        self.socket = zmq_context.socket(zmq.SUB)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.connect(server)
        self.socket.setsockopt(zmq.SUBSCRIBE, topic.encode())

    def recv(self, timeout: Optional[float] = None) -> Tuple[Location, ...]:
        """Return the next snapshot; *timeout* is in seconds."""

        if timeout is not None:
            if not self.socket.poll(int(timeout * 1000), zmq.POLLIN):
                raise RelayTimeout(f"no snapshot within {timeout} seconds")

        parts = self.socket.recv_multipart()
        return from_pub_frames(parts)

    def close(self) -> None:
        self.socket.close()


class Server:
    """PUB server. Instances are callable, so they can be registered directly
    as a probe listener:

        relay = Server()
        probe.on_peers_changed(relay)
    """

    def __init__(self, port: Optional[int] = None, topic: str = default_topic):
        self.topic = topic
        self.socket = zmq_context.socket(zmq.PUB)
        self.socket.setsockopt(zmq.LINGER, 0)

        try:
            if port is None:
                self.port = self.socket.bind_to_random_port("tcp://*")
            else:
                self.port = int(port)
                self.socket.bind(f"tcp://*:{self.port}")
        except zmq.ZMQBaseError as exc:
            self.socket.close()
            raise RelayPortError(f"unable to bind relay: {exc}") from exc

        # Snapshots arrive on probe threads; only the relay thread touches
        # the PUB socket.
        self._queue = queue.SimpleQueue()

        internal = f"inproc://publish.Server:signal:{id(self)}"
        self._sig_rx = zmq_context.socket(zmq.PAIR)
        self._sig_rx.bind(internal)
        self._sig_tx = zmq_context.socket(zmq.PAIR)
        self._sig_tx.connect(internal)
        self._sig_lock = threading.Lock()

        self.shutdown = False
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

        logger.debug("relaying snapshots on port %d", self.port)

    def __call__(self, snapshot: Sequence[Location]) -> None:
        self.send(snapshot)

    def send(self, snapshot: Sequence[Location]) -> None:
        self._queue.put(tuple(snapshot))
        self._signal()

    def _signal(self) -> None:
        # PAIR sockets are not thread-safe; senders may be on any thread.
        with self._sig_lock:
            self._sig_tx.send(b"")

    def _send_one(self) -> None:
        self._sig_rx.recv(flags=zmq.NOBLOCK)
        try:
            snapshot = self._queue.get(block=False)
        except queue.Empty:
            return
        frames = to_pub_frames(self.topic, snapshot)
        self.socket.send_multipart(frames)

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self._sig_rx, zmq.POLLIN)
        while not self.shutdown:
            for active, _flag in poller.poll(10000):
                if active == self._sig_rx:
                    try:
                        self._send_one()
                    except zmq.ZMQError:
                        logger.exception("unable to relay snapshot")

        self._sig_rx.close()
        self.socket.close()

    def close(self) -> None:
        """Stop the relay thread and release the sockets."""

        if self.shutdown:
            return

        self.shutdown = True
        self._signal()
        self.thread.join()
        self._sig_tx.close()

