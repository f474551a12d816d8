# -*- coding: utf-8 -*-
"""
Defines a class that can be used as a decorator that will cache returns of a
function for a set of arguments and/or keyword arguments. If the arguments are
equal to the ones of an earlier call, the result is taken out of the cache.

Arguments are compared by their content, not by their identity. Two lists
that were constructed separately but hold the same items are the same key,
which is what you want when caching lookups like ``names('graph',
'--list-types')``.

There is no maximum size and no way to clear the cache, throw the wrapper
away if you need a fresh one.
"""
import functools
import threading
import types


def make_key(args, kwargs):
    """
    Make a lookup key from the positional and keyword arguments of a call.

    Keyword arguments are sorted by name, so their order at the call site
    doesn't matter.

    :param tuple args: Positional arguments.
    :param dict kwargs: Keyword arguments.
    :return tuple: A key that is hashable unless one of the arguments is an
        object that can't be hashed at all.
    """
    return (
        tuple(freeze(arg) for arg in args),
        tuple(sorted((name, freeze(value)) for name, value in kwargs.items()))
    )


def freeze(value):
    """
    Turn mutable containers into hashable values that compare by content.

    Every value is tagged with its type, so ``[1, 2]`` and ``(1, 2)`` give
    different keys, and so do ``1``, ``1.0`` and ``True`` although they
    compare equal.

    :param object value: Any value.
    :return tuple: ``(type, frozen content)``.
    """
    if isinstance(value, (list, tuple)):
        return (type(value), tuple(freeze(item) for item in value))
    if isinstance(value, dict):
        items = {freeze(key): freeze(item) for key, item in value.items()}
        try:
            return (dict, frozenset(items.items()))
        except TypeError:
            # Unhashable values, a dict still compares regardless of order.
            return (dict, items)
    if isinstance(value, (set, frozenset)):
        return (frozenset, frozenset(freeze(item) for item in value))
    return (type(value), value)


class Memoized(object):
    """
    Wrap a function so repeated calls with equal arguments return the result
    of the first call.

    Only successful results are stored, if the function raises, the exception
    is passed on to the caller and the next call with the same arguments
    calls the function again.

    .. Note:: Use :func:`memoize` to make these:
        .. code::
            @memoize
            def fib(n):
                if n <= 1:
                    return n
                return fib(n-1) + fib(n-2)
    """

    def __init__(self, func, thread_safe=False):
        """
        Initialise an empty cache for ``func``.

        :param callable func: The function to wrap.
        :param bool thread_safe: Hold a lock while looking up, computing and
            storing a result, so the function is called at most once per key
            even with many threads calling the wrapper.
        """
        self.func = func
        self._entries = {}
        # Keys that can't be hashed, compared one by one with ``==``.
        self._unhashable = []
        self._lock = threading.RLock() if thread_safe else None
        functools.update_wrapper(self, func)

    def __call__(self, *args, **kwargs):
        key = make_key(args, kwargs)
        if self._lock is None:
            return self._get_or_compute(key, args, kwargs)
        with self._lock:
            return self._get_or_compute(key, args, kwargs)

    def __get__(self, instance, owner=None):
        """Bind to ``instance``, which becomes part of the key."""
        if instance is None:
            return self
        return types.MethodType(self, instance)

    def __len__(self):
        return len(self._entries) + len(self._unhashable)

    def __contains__(self, args):
        """
        Check if a result is stored for the positional arguments of a call.

        :param tuple|object args: Positional arguments of a call, anything
            that is not a tuple is taken as the only argument.
        """
        if not isinstance(args, tuple):
            args = (args,)
        try:
            self._lookup(make_key(args, {}))
        except KeyError:
            return False
        return True

    def __repr__(self):
        return "<Memoized {} ({} entries)>".format(
            getattr(self.func, '__qualname__', repr(self.func)),
            len(self)
        )

    def _get_or_compute(self, key, args, kwargs):
        try:
            return self._lookup(key)
        except KeyError:
            pass
        # Exceptions from func propagate before anything is stored.
        result = self.func(*args, **kwargs)
        self._store(key, result)
        return result

    def _lookup(self, key):
        """
        Return the value stored for ``key``.

        :raises KeyError: When nothing is stored for the key.
        """
        try:
            return self._entries[key]
        except TypeError:
            for stored_key, value in self._unhashable:
                if stored_key == key:
                    return value
            raise KeyError(key)

    def _store(self, key, value):
        try:
            self._entries[key] = value
        except TypeError:
            self._unhashable.append((key, value))


def memoize(func=None, thread_safe=False):
    """
    Return a memoized version of ``func``.

    Can be used as a plain function, as a decorator or as a decorator with
    arguments:

    .. code::

        cached_lookup = memoize(lookup)

        @memoize
        def version():
            ...

        @memoize(thread_safe=True)
        def names(*args):
            ...

    :param callable func: Function to wrap.
    :param bool thread_safe: See :class:`Memoized`.
    :return Memoized: Callable with the same signature as ``func``.
    """
    if func is None:
        return functools.partial(memoize, thread_safe=thread_safe)
    return Memoized(func, thread_safe=thread_safe)
