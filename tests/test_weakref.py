import gc
import beacon


class Referenced:
    def a_method(self, *args):
        self.called = args


def test_strong_listeners():
    """ Anything that is not a method bound to a Python object is held
        strongly: the collection is the only thing keeping these alive.
    """

    listeners = beacon.weakref.Listeners()
    calls = list()

    listeners.add(lambda *args: calls.append(('lambda',) + args))
    listeners.add(calls.append)

    def function(*args):
        calls.append(('function',) + args)

    listeners.add(function)
    del function
    gc.collect()

    assert len(listeners) == 3

    listeners('snapshot')
    assert calls == [('lambda', 'snapshot'), 'snapshot', ('function', 'snapshot')]

    listeners.discard(calls.append)
    assert len(listeners) == 2


def test_listeners():
    listeners = beacon.weakref.Listeners()
    thing = Referenced()

    listeners.add(thing.a_method)
    listeners.add(thing.a_method)       # Redundant, ignored.
    assert len(listeners) == 1

    listeners('snapshot')
    assert thing.called == ('snapshot',)

    listeners.discard(thing.a_method)
    assert len(listeners) == 0

    # Discarding something never added is a no-op.

    listeners.discard(thing.a_method)


def test_listeners_expire():
    listeners = beacon.weakref.Listeners()
    thing = Referenced()

    listeners.add(thing.a_method)
    assert len(listeners) == 1

    del thing
    gc.collect()

    assert len(listeners) == 0
    listeners('snapshot')


def test_listener_failure():
    listeners = beacon.weakref.Listeners()
    thing = Referenced()

    def broken(*args):
        raise ValueError('broken listener')

    listeners.add(broken)
    listeners.add(thing.a_method)

    # The exception is logged, not raised, and the next listener still runs.

    listeners('snapshot')
    assert thing.called == ('snapshot',)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
