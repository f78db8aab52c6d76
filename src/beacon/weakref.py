""" References to listeners. Plain functions, lambdas and other callables
    are kept alive by the collection; a method bound to a Python object is
    held weakly, so subscribing does not keep its object around, and the
    listener is dropped once the object is collected.
"""

import logging
import threading
import weakref

logger = logging.getLogger(__name__)


class strong:
    """ A reference with the same interface as :func:`weakref.ref`, except
        that it keeps its target alive.
    """

    __slots__ = ('target',)

    def __init__(self, target):
        self.target = target

    def __call__(self):
        return self.target

    def __eq__(self, other):
        if isinstance(other, strong):
            return self.target == other.target
        return NotImplemented

    def __hash__(self):
        return hash(self.target)


def ref(listener):
    """ Return a reference to the supplied *listener*. Methods bound to a
        Python object get a :class:`weakref.WeakMethod`; a plain
        :func:`weakref.ref` to a bound method would die immediately, since
        the method object is created on attribute access. Everything else,
        including builtin bound methods such as ``list.append``, is held
        strongly.
    """

    try:
        listener.__func__
        listener.__self__
    except AttributeError:
        return strong(listener)
    else:
        return weakref.WeakMethod(listener)



class Listeners:
    """ An ordered collection of listeners. Calling the collection calls
        every listener still alive, in subscription order, with the supplied
        arguments. An exception raised by one listener is
        logged and does not prevent the others from being called.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._references = list()


    def __len__(self):
        return len(self._alive())


    def add(self, listener):

        if callable(listener):
            pass
        else:
            raise TypeError('the listener must be callable')

        reference = ref(listener)

        with self._lock:
            if reference not in self._references:
                self._references.append(reference)


    def discard(self, listener):

        reference = ref(listener)

        with self._lock:
            try:
                self._references.remove(reference)
            except ValueError:
                pass


    def _alive(self):
        """ Return strong references to every live listener, dropping any
            references whose target has been collected.
        """

        alive = list()
        invalid = list()

        with self._lock:
            for reference in self._references:
                listener = reference()

                if listener is None:
                    invalid.append(reference)
                else:
                    alive.append(listener)

            for reference in invalid:
                self._references.remove(reference)

        return alive


    def __call__(self, *args):

        for listener in self._alive():
            try:
                listener(*args)
            except Exception:
                logger.exception('listener %r raised an exception', listener)


# end of class Listeners


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
