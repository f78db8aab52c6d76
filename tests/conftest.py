import pytest
import threading

import beacon


class Collector:
    """ Stand-in for an application listener: remembers every snapshot it
        receives, and lets a test wait for a given number of them.
    """

    def __init__(self):
        self.snapshots = list()
        self.condition = threading.Condition()


    def __call__(self, snapshot):
        with self.condition:
            self.snapshots.append(snapshot)
            self.condition.notify_all()


    def wait(self, count=1, timeout=2):
        with self.condition:
            self.condition.wait_for(lambda: len(self.snapshots) >= count, timeout)
            return len(self.snapshots) >= count



class Clock:
    """ A clock that only moves when told to.
    """

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds



@pytest.fixture
def collector():
    return Collector()


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def make_probe():
    """ Factory for :class:`beacon.Probe` instances; every probe created is
        stopped when the test finishes, whether or not it was started.
    """

    probes = list()

    def factory(beacon_type='abc', **kwargs):
        probe = beacon.Probe(beacon_type, **kwargs)
        probes.append(probe)
        return probe

    yield factory

    for probe in probes:
        probe.stop()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
