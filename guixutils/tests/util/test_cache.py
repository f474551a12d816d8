"""
Test the memoizing call cache.
"""

# pylint: disable=no-self-use
# pylint: disable=invalid-name

import threading
import pytest
from guixutils.util.cache import Memoized
from guixutils.util.cache import make_key
from guixutils.util.cache import memoize


class Counter(object):
    """Callable that squares its argument and counts how often it ran."""

    def __init__(self):
        self.calls = 0

    def __call__(self, x):
        self.calls += 1
        return x * x


class Unhashable(object):
    """Compares by value but can't be hashed."""

    __hash__ = None

    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        return isinstance(other, Unhashable) and self.value == other.value


class TestMemoize(object):
    """
    Test the memoize function and the Memoized wrapper it returns.
    """

    def test_square_scenario(self):
        """
        Square with a counter:
         - g(3) is 9 and runs the function once.
         - g(3) again is 9 and does not run it again.
         - g(4) is 16 and runs it a second time.
        """
        square = Counter()
        g = memoize(square)
        assert g(3) == 9
        assert square.calls == 1
        assert g(3) == 9
        assert square.calls == 1
        assert g(4) == 16
        assert square.calls == 2

    def test_returns_identical_object(self):
        """The second call returns the very object of the first call."""
        g = memoize(lambda *args: list(args))
        first = g(1, 2)
        assert g(1, 2) is first

    def test_structurally_equal_arguments(self):
        """
        Separately built lists and dicts with equal content are one key.
        """
        calls = []

        @memoize
        def total(items, weights=None):
            calls.append(items)
            return sum(items)

        assert total([1, 2, 3], weights={'a': [1]}) == 6
        assert total([1, 2, 3], weights={'a': [1]}) == 6
        assert len(calls) == 1

    def test_different_arguments(self):
        """Different argument tuples are computed separately."""
        square = Counter()
        g = memoize(square)
        g(2)
        g(5)
        assert square.calls == 2
        assert len(g) == 2

    def test_list_and_tuple_are_different_keys(self):
        """A list and a tuple with the same items are different keys."""
        g = memoize(lambda value: type(value).__name__)
        assert g([1, 2]) == 'list'
        assert g((1, 2)) == 'tuple'

    @pytest.mark.parametrize("first,second", [
        (1, True),
        (1, 1.0),
        ([0], [False]),
        ({'a': 1}, {'a': True}),
    ])
    def test_equal_values_of_other_types_are_different_keys(
            self, first, second):
        """Values that compare equal but differ in type are not mixed up."""
        g = memoize(repr)
        assert g(first) == repr(first)
        assert g(second) == repr(second)
        assert len(g) == 2

    def test_keyword_order_does_not_matter(self):
        """f(a=1, b=2) and f(b=2, a=1) are the same call."""
        calls = []

        @memoize
        def func(a=0, b=0):
            calls.append((a, b))
            return a - b

        assert func(a=1, b=2) == -1
        assert func(b=2, a=1) == -1
        assert len(calls) == 1
        assert make_key((), {'a': 1, 'b': 2}) == make_key(
            (), {'b': 2, 'a': 1}
        )

    def test_no_arguments(self):
        """A function without arguments is computed once."""
        calls = []

        @memoize
        def version():
            calls.append(None)
            return "1.4.0"

        assert version() == version() == "1.4.0"
        assert len(calls) == 1

    def test_none_is_cached(self):
        """None is a valid result and is stored like any other."""
        calls = []

        @memoize
        def nothing(x):
            calls.append(x)

        assert nothing(1) is None
        assert nothing(1) is None
        assert calls == [1]
        assert (1,) in nothing

    def test_failure_is_not_cached(self):
        """
        A raising function:
         - The exception reaches the caller unchanged.
         - Nothing is stored.
         - The next call with the same arguments runs the function again.
        """
        attempts = []

        @memoize
        def flaky(x):
            attempts.append(x)
            if len(attempts) == 1:
                raise ValueError("first attempt fails")
            return x

        with pytest.raises(ValueError, match="first attempt fails"):
            flaky(7)
        assert len(flaky) == 0
        assert (7,) not in flaky
        assert flaky(7) == 7
        assert flaky(7) == 7
        assert attempts == [7, 7]

    def test_unhashable_arguments(self):
        """Objects that can't be hashed are compared with ``==``."""
        calls = []

        @memoize
        def value_of(obj):
            calls.append(obj)
            return obj.value

        assert value_of(Unhashable(3)) == 3
        assert value_of(Unhashable(3)) == 3
        assert value_of(Unhashable(4)) == 4
        assert len(calls) == 2
        assert len(value_of) == 2

    def test_dict_with_unhashable_values(self):
        """A dict holding unhashable values still works as an argument."""
        calls = []

        @memoize
        def value_of(mapping):
            calls.append(mapping)
            return mapping['obj'].value

        assert value_of({'obj': Unhashable(5)}) == 5
        assert value_of({'obj': Unhashable(5)}) == 5
        assert len(calls) == 1

    def test_dict_with_unhashable_values_in_other_order(self):
        """Dicts with unhashable values are equal regardless of item order."""
        calls = []

        @memoize
        def total(mapping):
            calls.append(mapping)
            return sum(item.value for item in mapping.values())

        assert total({'a': Unhashable(1), 'b': Unhashable(2)}) == 3
        assert total({'b': Unhashable(2), 'a': Unhashable(1)}) == 3
        assert len(calls) == 1

    def test_side_effects_are_suppressed(self):
        """Side effects of the function only happen on the first call."""
        log = []
        g = memoize(lambda x: log.append(x) or x)
        g('a')
        g('a')
        assert log == ['a']

    def test_recursive_function(self):
        """Recursive calls go through the cache too."""
        calls = []

        @memoize
        def fib(n):
            calls.append(n)
            if n <= 1:
                return n
            return fib(n - 1) + fib(n - 2)

        assert fib(30) == 832040
        assert sorted(calls) == list(range(31))

    def test_wrapper_keeps_metadata(self):
        """The wrapper has the name and docstring of the function."""
        @memoize
        def lookup(key):
            """Look a key up."""
            return key

        assert isinstance(lookup, Memoized)
        assert lookup.__name__ == 'lookup'
        assert lookup.__doc__ == "Look a key up."
        assert lookup.__wrapped__(1) == 1

    def test_wrappers_do_not_share_caches(self):
        """Two wrappers of one function have their own caches."""
        square = Counter()
        first = memoize(square)
        second = memoize(square)
        first(3)
        second(3)
        assert square.calls == 2

    def test_method(self):
        """
        Used on a method:
         - The instance is part of the key.
         - The bound method keeps the name of the function.
        """
        class Squarer(object):
            calls = 0

            def __init__(self, offset):
                self.offset = offset

            @memoize
            def square(self, x):
                Squarer.calls += 1
                return x * x + self.offset

        one = Squarer(1)
        two = Squarer(2)
        assert one.square(3) == 10
        assert one.square(3) == 10
        assert two.square(3) == 11
        assert Squarer.calls == 2
        assert one.square.__name__ == 'square'
        assert one.square.__self__ is one

    def test_contains(self):
        """
        Test the in operator:
         - A tuple holds the positional arguments of a call.
         - Anything else is the only argument.
        """
        g = memoize(len)
        g('ab')
        g((1, 2))
        assert 'ab' in g
        assert ('ab',) in g
        assert ('a', 'b') not in g
        assert ((1, 2),) in g
        assert 5 not in g


class TestThreadSafeMemoize(object):
    """
    Test memoize with ``thread_safe=True``.
    """

    def test_decorator_with_arguments(self):
        """memoize(thread_safe=True) returns a decorator."""
        @memoize(thread_safe=True)
        def double(x):
            return 2 * x

        assert isinstance(double, Memoized)
        assert double(4) == 8

    def test_computed_once_with_many_threads(self):
        """
        Many threads asking for the same key at once run the function once.
        """
        calls = []
        started = threading.Event()

        @memoize(thread_safe=True)
        def slow(x):
            calls.append(x)
            started.wait(1)
            return x

        threads = [
            threading.Thread(target=slow, args=(1,)) for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        started.set()
        for thread in threads:
            thread.join()
        assert calls == [1]

    def test_recursion_does_not_deadlock(self):
        """The lock is re-entrant."""
        @memoize(thread_safe=True)
        def factorial(n):
            return 1 if n <= 1 else n * factorial(n - 1)

        assert factorial(10) == 3628800
