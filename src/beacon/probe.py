""" The :class:`Probe` looks for beacons on the local network. It broadcasts
    a probe datagram on a fixed cadence, collects the replies, and keeps a
    time-bounded list of every beacon heard from recently. Interested parties
    subscribe with :func:`Probe.on_peers_changed` and receive a new snapshot
    whenever that list changes.

    Snapshots are tuples of :class:`beacon.location.Location` instances,
    ordered by payload and then by address (see :mod:`beacon.ordering`).

    Listeners are not invoked on the caller's thread: a merge triggered by a
    reply runs on the receiving thread, a prune runs on the broadcast thread.
    A listener that needs to run somewhere specific must hand the snapshot
    off itself, for example via a :class:`queue.Queue` or a
    :class:`beacon.transport.zmq.publish.Server`.
"""

import logging
import socket
import threading
import time

from . import config
from . import ordering
from . import weakref
from .location import Location
from .protocol import wire
from .transport import udp
from .transport.base import DecodeError, Discovery, ProbeStateError

logger = logging.getLogger(__name__)


class Probe(Discovery):
    """ Discover beacons advertising the given *beacon_type*. The remaining
        arguments override the defaults in :mod:`beacon.config`: *port* is
        the discovery port probes are broadcast to, *interval* the number of
        seconds between broadcasts, *timeout* the number of seconds after
        which a silent beacon is dropped, and *broadcast* the destination
        address for probes. *clock* returns the current time in seconds and
        defaults to :func:`time.monotonic`; only differences between its
        readings matter.

        A probe does nothing until :func:`start` is called, and can be
        started at most once. :func:`stop` may be called any number of
        times; only the first call has any effect.

        Functions, lambdas and other callables stay subscribed until
        :func:`remove_listener` is called. A method bound to a Python object
        is held weakly, and stops receiving snapshots once its object is
        collected.
    """

    def __init__(self, beacon_type, port=None, interval=None, timeout=None,
                       broadcast=None, clock=None):

        settings = config.resolve(port=port, interval=interval,
                                  timeout=timeout, broadcast=broadcast)

        self._beacon_type = beacon_type
        self._prefix = wire.encode(beacon_type)
        self._probe = wire.probe(beacon_type)

        self.port = int(settings['port'])
        self.interval = float(settings['interval'])
        self.timeout = float(settings['timeout'])
        self.broadcast_address = settings['broadcast']
        self.buffer = int(settings['buffer'])

        if clock is None:
            clock = time.monotonic
        self.clock = clock

        self.listeners = weakref.Listeners()
        self.socket = None

        # The lock guards _peers and _current as one unit; every merge and
        # every prune holds it from mutation through notification.

        self._lock = threading.Lock()
        self._peers = dict()
        self._current = tuple()

        self._lifecycle = threading.Lock()
        self._started = False
        self._stopped = False
        self._running = False

        self._alarm = threading.Event()
        self._closing = threading.Event()
        self._thread = None
        self._receiver = None


    @property
    def beacon_type(self):
        return self._beacon_type


    @property
    def running(self):
        return self._running


    @property
    def address(self):
        """ The local (host, port) the probe is bound to, or None if the
            probe is not running.
        """

        sock = self.socket
        if sock is None:
            return None

        return sock.getsockname()


    def on_peers_changed(self, listener):
        """ Register *listener* to be called with a snapshot, a tuple of
            :class:`beacon.location.Location` instances, every time the set
            of known beacons changes. The *listener* is returned, so this
            method can be used as a decorator.
        """

        self.listeners.add(listener)
        return listener


    def remove_listener(self, listener):
        self.listeners.discard(listener)


    def peers(self):
        """ Return the most recently published snapshot.
        """

        return self._current


    def start(self):
        """ Bind the socket and start the receiving and broadcasting threads.
            Failure to bind raises :class:`beacon.transport.BindError`, and
            the probe remains unstarted.
        """

        with self._lifecycle:
            if self._started or self._stopped:
                raise ProbeStateError('a probe can only be started once')

            # Receiving threads wake up this often to check whether the
            # socket is being closed.

            sock = udp.bind(timeout=0.25)

            self.socket = sock
            self._started = True
            self._running = True

            self._receiver = threading.Thread(target=self._receive, args=(sock,))
            self._receiver.daemon = True
            self._receiver.start()

            self._thread = threading.Thread(target=self.run)
            self._thread.daemon = True
            self._thread.start()

        logger.info('probing for %r beacons from %s:%d', self._beacon_type, *sock.getsockname())
        return self


    def stop(self):
        """ Stop probing. The broadcast thread is woken up immediately rather
            than at the end of its current wait, and this method blocks until
            it exits; only then is the socket closed.
        """

        with self._lifecycle:
            if self._stopped:
                return

            self._stopped = True
            self._running = False
            self._alarm.set()

        current = threading.current_thread()

        if current is self._thread or current is self._receiver:
            # Called from a listener, which runs with the lock held; joining
            # here would deadlock, so the rest happens in the background.

            cleanup = threading.Thread(target=self._shutdown)
            cleanup.daemon = True
            cleanup.start()
        else:
            self._shutdown()


    def _shutdown(self):

        if self._thread is not None:
            self._thread.join()

        sock = self.socket

        if sock is not None:
            self._closing.set()
            udp.close(sock)
            self.socket = None

        if self._receiver is not None:
            self._receiver.join()

        logger.info('stopped probing for %r beacons', self._beacon_type)


    def run(self):
        """ Body of the broadcast thread: probe, wait, prune, until stopped.
        """

        while self._running:
            self.broadcast()
            self._alarm.wait(self.interval)
            self.prune()


    def broadcast(self):
        """ Send a single probe datagram. A failure to send is logged; the
            next attempt happens on the next cycle.
        """

        sock = self.socket
        if sock is None:
            raise ProbeStateError('the probe is not running')

        destination = (self.broadcast_address, self.port)

        try:
            sock.sendto(self._probe, destination)
        except (OSError, OverflowError) as e:
            logger.warning('unable to broadcast probe to %s:%d: %s', destination[0], destination[1], e)


    def _receive(self, sock):
        """ Body of the receiving thread. Closing the socket is what ends it.
        """

        while True:
            try:
                data, address = sock.recvfrom(self.buffer)
            except socket.timeout:
                if self._closing.is_set():
                    break
                continue
            except OSError:
                break

            if self._closing.is_set():
                break

            self.received(data, address)


    def received(self, data, address):
        """ Handle a single datagram *data* that arrived from *address*.
            Anything that is not a well-formed reply for this probe's beacon
            type is discarded.
        """

        if wire.has_prefix(data, self._prefix):
            pass
        else:
            return

        try:
            port, payload = wire.parse_reply(self._prefix, data)
        except DecodeError as e:
            logger.debug('discarding malformed reply from %s: %s', address, e)
            return

        location = Location((address[0], port), payload, self.clock())
        self._merge(location)


    def _merge(self, location):

        with self._lock:
            self._peers[location.address] = location
            snapshot = ordering.ordered(self._peers.values())
            self._commit(snapshot)


    def prune(self):
        """ Drop every beacon not heard from within the timeout, publishing a
            new snapshot if that changed anything.
        """

        cutoff = self.clock() - self.timeout

        with self._lock:
            peers = dict()
            for address, location in self._peers.items():
                if location.last_seen >= cutoff:
                    peers[address] = location

            self._peers = peers
            snapshot = ordering.ordered(peers.values())
            self._commit(snapshot)


    def _commit(self, snapshot):
        """ Replace the current snapshot, and notify listeners if it differs
            from the previous one. Must be called with the lock held.
        """

        previous = self._current
        self._current = snapshot

        if changed(previous, snapshot):
            self.listeners(snapshot)


# end of class Probe



def changed(previous, snapshot):
    """ Return True if the two snapshots differ in length, or in the address
        or payload found at any position. The last seen time is ignored.
    """

    if len(previous) != len(snapshot):
        return True

    for old, new in zip(previous, snapshot):
        if old.address != new.address or old.payload != new.payload:
            return True

    return False


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
