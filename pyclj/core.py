"""
pyclj.core - Core collection functions

This module contains the functions that make up pyclj's collection
library. Every function accepts any of the container categories
(see pyclj.types.Category) and treats None as an empty collection.

Categories:
- Categories: classify values, build empty containers
- Operation dispatch: per-category implementation tables
- Iteration: to_iterable, seq, and the restartable LazySeq
- Sequence accessors: first, rest, nth, count, etc.
- Lazy sequences: map, filter, take, drop, partition, etc.
- Structural operations: get, assoc, conj, dissoc, disj and their ! forms
- Equality: deep, category-aware equals
- Reducers: reduce, reductions, some, every, etc.
- Collection utilities: into, merge, group_by, sort, etc.
- Atoms, function helpers, math and predicates
"""

import functools
import logging
import random
from collections import OrderedDict
from collections.abc import Mapping
from itertools import islice
from numbers import Number
from typing import Any, Callable, Iterable, Iterator, Optional

from pyclj.config import get_config
from pyclj.types import (
    _MISSING,
    Atom,
    Category,
    IllegalArgumentError,
    List,
    Reduced,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Categories
# =============================================================================


def classify(value: Any) -> Category:
    """
    Return the container category of a value.

    Concrete types are checked in a fixed order: OrderedDict before dict
    and List before list, since each is a subclass of the other.
    """
    if isinstance(value, OrderedDict):
        return Category.ORDERED_MAP
    if isinstance(value, set):
        return Category.SET
    if isinstance(value, List):
        return Category.LIST
    if isinstance(value, list):
        return Category.VECTOR
    if isinstance(value, LazySeq):
        return Category.LAZY_SEQ
    if isinstance(value, dict):
        return Category.RECORD
    return Category.NONE


def _empty_lazy_seq() -> "LazySeq":
    return LazySeq(tuple)


_EMPTY_FACTORIES: dict[Category, Callable[[], Any]] = {
    Category.ORDERED_MAP: OrderedDict,
    Category.VECTOR: list,
    Category.RECORD: dict,
    Category.LIST: List,
    Category.SET: set,
    Category.LAZY_SEQ: _empty_lazy_seq,
}

_uncovered = set(Category) - set(_EMPTY_FACTORIES) - {Category.NONE}
if _uncovered:
    raise RuntimeError(
        f"No empty factory for categories: {sorted(c.name for c in _uncovered)}"
    )


def empty_of_category(category: Category) -> Any:
    """Return a new empty container of the given category, or None for NONE."""
    if category is Category.NONE:
        return None
    return _EMPTY_FACTORIES[category]()


def empty(coll):
    """Return an empty collection of the same category as coll, or None."""
    return empty_of_category(classify(coll))


def map_q(x) -> bool:
    """Return True if x is an OrderedDict (a Map)."""
    return classify(x) is Category.ORDERED_MAP


def record_q(x) -> bool:
    """Return True if x is a plain dict (an Object)."""
    return classify(x) is Category.RECORD


def vector_q(x) -> bool:
    return classify(x) is Category.VECTOR


def list_q(x) -> bool:
    return classify(x) is Category.LIST


def set_q(x) -> bool:
    return classify(x) is Category.SET


def lazy_seq_q(x) -> bool:
    return classify(x) is Category.LAZY_SEQ


def coll_q(x) -> bool:
    """Return True if x belongs to any container category."""
    return classify(x) is not Category.NONE


# =============================================================================
# Operation Dispatch
# =============================================================================

# Global registry of category-dispatched operations
_OPERATIONS: dict[str, dict[Category, Optional[Callable[..., Any]]]] = {
    # op_name: {
    #   Category.VECTOR: callable(coll, *args),
    #   Category.SET: None,   # unsupported
    # }
}


def register_operation(
    name: str, impls: dict[Category, Optional[Callable[..., Any]]]
) -> None:
    """
    Register the per-category implementations of an operation.

    Args:
        name: Operation name as it appears in error messages (e.g. "assoc!")
        impls: An entry for every Category; None marks it unsupported

    Raises:
        RuntimeError: If any Category has no entry
    """
    missing = [c.name for c in Category if c not in impls]
    if missing:
        raise RuntimeError(f"Operation {name} has no entry for: {', '.join(missing)}")
    _OPERATIONS[name] = dict(impls)


def _operation(name: str) -> dict[Category, Optional[Callable[..., Any]]]:
    impls = _OPERATIONS.get(name)
    if impls is None:
        raise TypeError(f"Unknown operation: {name}")
    return impls


def supported_categories(name: str) -> list[Category]:
    """Return the categories an operation accepts, in Category order."""
    impls = _operation(name)
    return [c for c in Category if impls[c] is not None]


def supports_operation(name: str, coll: Any) -> bool:
    """Check whether coll's category has an implementation of an operation."""
    return _operation(name)[classify(coll)] is not None


def operation_dispatch(name: str, coll: Any, *args):
    """
    Call the implementation of an operation for coll's category.

    Raises:
        IllegalArgumentError: If coll's category is unsupported
    """
    impls = _operation(name)
    category = classify(coll)
    fn = impls[category]
    if fn is None:
        logger.debug("%s called on unsupported category %s", name, category.name)
        raise IllegalArgumentError.expects(name, supported_categories(name))
    return fn(coll, *args)


# =============================================================================
# Iteration
# =============================================================================


def _record_like(x) -> bool:
    """Duck-typed mapping check (the same test dict.update uses)."""
    return isinstance(x, Mapping) or (
        hasattr(x, "keys") and hasattr(x, "__getitem__")
    )


def seqable_q(x) -> bool:
    """Return True if seq() is supported for x."""
    return x is None or isinstance(x, str) or hasattr(x, "__iter__")


def to_iterable(x):
    """
    Return something iterable for x, even when x is None.

    - None -> []
    - strings, lists, sets, LazySeqs -> unchanged
    - dicts and other mappings -> list of [key, value] pairs
    - any other iterable -> unchanged

    Raises:
        TypeError: If x cannot be iterated at all
    """
    if x is None:
        return []
    if isinstance(x, (str, list, set, LazySeq)):
        return x
    if isinstance(x, dict):
        return [[k, v] for k, v in x.items()]
    if _record_like(x):
        return [[k, x[k]] for k in x.keys()]
    if hasattr(x, "__iter__"):
        return x
    raise TypeError(f"{type(x).__name__} is not seqable")


def seq(x):
    """
    Return an iterable of x, or None if it's empty.

    seq(None) => None
    seq("") => None
    seq([1, 2]) => [1, 2]
    seq({"name": "George"}) => [["name", "George"]]
    """
    it = to_iterable(x)
    if isinstance(it, LazySeq):
        return it if it else None
    if hasattr(it, "__len__"):
        return it if len(it) > 0 else None
    # One-shot iterators: peek, then put the element back
    iterator = iter(it)
    head = next(iterator, _MISSING)
    if head is _MISSING:
        return None
    return _prepend(head, iterator)


def _prepend(head, iterator):
    yield head
    yield from iterator


class LazySeq:
    """
    A restartable lazy sequence.

    Wraps a zero-argument factory that returns a fresh iterator. Every
    traversal calls the factory again, so a LazySeq can be consumed any
    number of times, each time from the start, and nothing is cached
    between traversals. A single traversal is single-pass.

    LazySeqs may be infinite; bound them with take(), first() or some().
    """

    __slots__ = ("_factory",)

    def __init__(self, factory: Callable[[], Iterable]):
        self._factory = factory

    def new_iterator(self) -> Iterator:
        """Start a new, independent traversal."""
        return iter(self._factory())

    def __iter__(self):
        return self.new_iterator()

    def __bool__(self):
        """LazySeq is truthy if a fresh traversal yields at least one element."""
        return next(self.new_iterator(), _MISSING) is not _MISSING

    def __repr__(self):
        # Bounded so that infinite sequences can still be displayed
        limit = get_config().repr_length
        it = self.new_iterator()
        items = [repr(x) for x in islice(it, limit)]
        if next(it, _MISSING) is not _MISSING:
            items.append("...")
        return f"({' '.join(items)})"


def lazy(gen_fn):
    """
    Decorator turning a generator function into one that returns a LazySeq.

    The LazySeq's factory re-invokes the generator function with the same
    arguments, which is what makes the result restartable.
    """

    @functools.wraps(gen_fn)
    def wrapper(*args, **kwargs):
        return LazySeq(lambda: gen_fn(*args, **kwargs))

    return wrapper


def lazy_seq(coll) -> LazySeq:
    """Wrap any seqable value in a LazySeq.

    Restartable as long as coll itself can be iterated more than once.
    """
    if isinstance(coll, LazySeq):
        return coll
    return LazySeq(lambda: to_iterable(coll))


# =============================================================================
# Sequence Accessors
# =============================================================================


def first(coll):
    """Return the first element of a collection, or None."""
    return next(iter(to_iterable(coll)), None)


def second(coll):
    """Return the second element of a collection, or None."""
    return next(islice(to_iterable(coll), 1, None), None)


def ffirst(coll):
    """Same as first(first(coll))."""
    return first(first(coll))


def last(coll):
    """Return the last element of a collection, or None."""
    items = to_iterable(coll)
    if isinstance(items, (list, str)):
        return items[-1] if items else None
    result = None
    for x in items:
        result = x
    return result


def butlast(coll):
    """Return a list of all but the last element, or None if that is empty."""
    items = list(to_iterable(coll))[:-1]
    return items if items else None


@lazy
def rest(coll):
    """Lazily yield all but the first element."""
    it = iter(to_iterable(coll))
    next(it, None)
    yield from it


def nth(coll, index: int, not_found=None):
    """Return the element at index, or not_found if there is none."""
    if index < 0:
        return not_found
    items = to_iterable(coll)
    if isinstance(items, (list, str)):
        return items[index] if index < len(items) else not_found
    return next(islice(items, index, None), not_found)


def count(coll) -> int:
    """Return the number of items in a collection (entries for mappings)."""
    if coll is None:
        return 0
    if hasattr(coll, "__len__") and not isinstance(coll, LazySeq):
        return len(coll)
    return sum(1 for _ in to_iterable(coll))


# =============================================================================
# Lazy Sequence Functions
# =============================================================================


@lazy
def cons(x, coll):
    """Lazily yield x followed by every element of coll."""
    yield x
    yield from to_iterable(coll)


def clj_map(f, *colls) -> LazySeq:
    """Lazily map a function over one or more collections.

    With one collection: yields f(x) for each x in coll.
    With several: yields f(x1, x2, ...) across the collections and stops
    as soon as the shortest one is exhausted.
    """
    if not colls:
        raise IllegalArgumentError(
            "Illegal arity: map expects at least one collection", operation="map"
        )

    if len(colls) == 1:
        coll = colls[0]

        def generate():
            for x in to_iterable(coll):
                yield f(x)

        return LazySeq(generate)

    def generate_zipped():
        iterators = [iter(to_iterable(c)) for c in colls]
        while True:
            args = []
            for it in iterators:
                x = next(it, _MISSING)
                if x is _MISSING:
                    return
                args.append(x)
            yield f(*args)

    return LazySeq(generate_zipped)


@lazy
def clj_filter(pred, coll):
    """Lazily yield the elements of coll for which pred is truthy."""
    for x in to_iterable(coll):
        if pred(x):
            yield x


def remove(pred, coll) -> LazySeq:
    """Lazily yield the elements of coll for which pred is falsy."""
    return clj_filter(complement(pred), coll)


@lazy
def take(n, coll):
    """Lazily take the first n elements, never pulling the (n+1)th."""
    if n <= 0:
        return
    taken = 0
    for x in to_iterable(coll):
        yield x
        taken += 1
        if taken >= n:
            return


@lazy
def drop(n, coll):
    """Lazily drop the first n elements; n <= 0 drops nothing."""
    it = iter(to_iterable(coll))
    for _ in range(n):
        if next(it, _MISSING) is _MISSING:
            return
    yield from it


@lazy
def take_while(pred, coll):
    """Lazily take elements while pred holds."""
    for x in to_iterable(coll):
        if not pred(x):
            return
        yield x


@lazy
def drop_while(pred, coll):
    """Lazily drop elements while pred holds, then yield the rest untested."""
    it = iter(to_iterable(coll))
    for x in it:
        if not pred(x):
            yield x
            break
    yield from it


@lazy
def take_nth(n, coll):
    """Lazily yield every nth element. n <= 0 repeats the first element forever."""
    if n <= 0:
        yield from repeat(first(coll))
        return
    for i, x in enumerate(to_iterable(coll)):
        if i % n == 0:
            yield x


@lazy
def cycle(coll):
    """Lazily cycle through a collection infinitely.

    Note: Materializes the collection on first pass, so coll must be finite.
    An empty collection yields nothing.
    """
    items = list(to_iterable(coll))
    if not items:
        return
    while True:
        yield from items


def clj_range(*args) -> LazySeq:
    """Lazily generate an arithmetic progression.

    clj_range() -> 0, 1, 2, ... (infinite)
    clj_range(end) -> 0, 1, ..., end-1
    clj_range(start, end) -> start, start+1, ..., end-1
    clj_range(start, end, step) -> start, start+step, ... up to end
    """
    start, end, step = 0, None, 1
    if len(args) == 1:
        (end,) = args
    elif len(args) == 2:
        start, end = args
    elif len(args) == 3:
        start, end, step = args
    elif len(args) > 3:
        raise IllegalArgumentError(
            f"Illegal arity: range takes 0-3 arguments, got {len(args)}",
            operation="range",
        )
    return _progression(start or 0, end, step or 1)


@lazy
def _progression(start, end, step):
    # start + i * step rather than repeated addition, to avoid float drift
    i = 0
    while True:
        value = start + i * step
        if end is not None and (value >= end if step > 0 else value <= end):
            return
        yield value
        i += 1


@lazy
def iterate(f, x):
    """Lazily generate x, f(x), f(f(x)), ... infinitely."""
    current = x
    while True:
        yield current
        current = f(current)


def repeat(*args) -> LazySeq:
    """Lazily repeat a value: repeat(x) forever, repeat(n, x) n times."""
    if len(args) == 1:
        return _repeat_forever(args[0])
    if len(args) == 2:
        return take(args[0], _repeat_forever(args[1]))
    raise IllegalArgumentError(
        f"Illegal arity: repeat takes 1 or 2 arguments, got {len(args)}",
        operation="repeat",
    )


@lazy
def _repeat_forever(x):
    while True:
        yield x


def repeatedly(*args) -> LazySeq:
    """Lazily call a function of no arguments: repeatedly(f) or repeatedly(n, f)."""
    if len(args) == 1:
        return _call_forever(args[0])
    if len(args) == 2:
        return take(args[0], _call_forever(args[1]))
    raise IllegalArgumentError(
        f"Illegal arity: repeatedly takes 1 or 2 arguments, got {len(args)}",
        operation="repeatedly",
    )


@lazy
def _call_forever(f):
    while True:
        yield f()


@lazy
def _partition(n, step, pad, coll, keep_incomplete):
    if n <= 0:
        return
    window = []
    offset = 0
    for x in to_iterable(coll):
        if offset < n:
            window.append(x)
            if len(window) == n:
                yield window
                window = window[step:] if step < n else []
        offset += 1
        if offset == step:
            offset = 0
    if window:
        if len(window) == n or keep_incomplete:
            yield window
        elif pad is not None:
            filler = list(islice(to_iterable(pad), n - len(window)))
            if filler:
                yield window + filler


def _check_step(op: str, step) -> None:
    if step <= 0:
        raise IllegalArgumentError(
            f"Illegal argument: {op} expects a positive step, got {step}",
            operation=op,
        )


def partition(n, *args) -> LazySeq:
    """Lazily partition a collection into lists of n items.

    partition(n, coll)
    partition(n, step, coll)      windows start every step items
    partition(n, step, pad, coll) the incomplete last window is filled from pad

    Without pad an incomplete trailing window is dropped.
    """
    step, pad = n, None
    if len(args) == 1:
        (coll,) = args
    elif len(args) == 2:
        step, coll = args
    elif len(args) == 3:
        step, pad, coll = args
    else:
        raise IllegalArgumentError(
            f"Illegal arity: partition takes 2-4 arguments, got {len(args) + 1}",
            operation="partition",
        )
    _check_step("partition", step)
    return _partition(n, step, pad, coll, False)


def partition_all(n, *args) -> LazySeq:
    """Like partition, but keeps an incomplete trailing window."""
    step = n
    if len(args) == 1:
        (coll,) = args
    elif len(args) == 2:
        step, coll = args
    else:
        raise IllegalArgumentError(
            f"Illegal arity: partition_all takes 2-3 arguments, got {len(args) + 1}",
            operation="partition_all",
        )
    _check_step("partition_all", step)
    return _partition(n, step, None, coll, True)


@lazy
def interleave(*colls):
    """Lazily yield the first item of each coll, then the second, etc.

    Only complete rounds are emitted: stops when any collection is exhausted.
    """
    if not colls:
        return
    iterators = [iter(to_iterable(c)) for c in colls]
    while True:
        round_ = []
        for it in iterators:
            x = next(it, _MISSING)
            if x is _MISSING:
                return
            round_.append(x)
        yield from round_


def interpose(sep, coll) -> LazySeq:
    """Lazily yield the elements of coll separated by sep."""
    return drop(1, interleave(repeat(sep), coll))


@lazy
def distinct(coll):
    """Lazily remove all duplicates, keeping first occurrence."""
    seen = set()
    seen_ids = set()
    for x in to_iterable(coll):
        try:
            if x in seen:
                continue
            seen.add(x)
        except TypeError:
            # Unhashable, use identity
            if id(x) in seen_ids:
                continue
            seen_ids.add(id(x))
        yield x


@lazy
def dedupe(coll):
    """Lazily remove consecutive duplicates."""
    prev = _MISSING
    for x in to_iterable(coll):
        if prev is _MISSING or x != prev:
            yield x
        prev = x


@lazy
def concat(*colls):
    """Lazily concatenate multiple collections."""
    for coll in colls:
        yield from to_iterable(coll)


@lazy
def mapcat(f, *colls):
    """Lazily map f over colls and concatenate the results.

    Equivalent to concat(*clj_map(f, *colls)).
    """
    for result in clj_map(f, *colls):
        yield from to_iterable(result)


@lazy
def keep(f, coll):
    """Lazily keep non-None results of f applied to coll."""
    for x in to_iterable(coll):
        result = f(x)
        if result is not None:
            yield result


@lazy
def keep_indexed(f, coll):
    """Lazily keep non-None results of f(index, item) applied to coll."""
    for i, x in enumerate(to_iterable(coll)):
        result = f(i, x)
        if result is not None:
            yield result


@lazy
def map_indexed(f, coll):
    """Lazily map f(index, item) over a collection."""
    for i, x in enumerate(to_iterable(coll)):
        yield f(i, x)


def _sequential_q(x) -> bool:
    return isinstance(x, (list, tuple, LazySeq))


@lazy
def flatten(coll):
    """Lazily flatten nested sequential collections (lists, tuples, LazySeqs)."""
    for x in to_iterable(coll):
        if _sequential_q(x):
            yield from flatten(x)
        else:
            yield x


def drop_last(*args) -> LazySeq:
    """Lazily drop the last n (default 1) elements: drop_last(coll), drop_last(n, coll)."""
    if len(args) == 1:
        n, coll = 1, args[0]
    elif len(args) == 2:
        n, coll = args
    else:
        raise IllegalArgumentError(
            f"Illegal arity: drop_last takes 1 or 2 arguments, got {len(args)}",
            operation="drop_last",
        )
    return clj_map(lambda x, _: x, coll, drop(n, coll))


# =============================================================================
# Structural Operations
# =============================================================================


def _index_q(key) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


def get(coll, key, not_found=None):
    """
    Return the value mapped to key, or not_found if the key is not present.

    Maps and dicts look up keys, lists look up indexes and sets return
    the key itself when it is a member.

    get([1, 2, 3], 1) => 2
    get({"a": 1}, "b", "nope") => "nope"
    get({1, 2}, 2) => 2
    """
    category = classify(coll)
    try:
        if category is Category.SET:
            return key if key in coll else not_found
        if category in (Category.ORDERED_MAP, Category.RECORD):
            return coll[key] if key in coll else not_found
        if category in (Category.VECTOR, Category.LIST):
            if _index_q(key) and 0 <= key < len(coll):
                return coll[key]
            return not_found
        if category is Category.NONE and coll is not None and _record_like(coll):
            return coll[key] if key in coll else not_found
    except TypeError:
        # Unhashable key
        return not_found
    return not_found


def _check_pairs(op: str, kvs: tuple) -> None:
    if len(kvs) % 2 != 0:
        raise IllegalArgumentError(
            f"Illegal argument: {op} expects an even number of key/value arguments.",
            operation=op,
        )


def _assoc_entries(coll, kvs):
    for i in range(0, len(kvs), 2):
        coll[kvs[i]] = kvs[i + 1]
    return coll


def _assoc_indexed(coll, kvs):
    for i in range(0, len(kvs), 2):
        index, val = kvs[i], kvs[i + 1]
        if not _index_q(index):
            raise IllegalArgumentError(
                f"Illegal argument: assoc on an Array expects an integer index, got {index!r}",
                operation="assoc",
            )
        if index < 0:
            raise IllegalArgumentError(
                f"Illegal argument: assoc on an Array expects a non-negative index, got {index}",
                operation="assoc",
            )
        if index >= len(coll):
            coll.extend([None] * (index - len(coll) + 1))
        coll[index] = val
    return coll


def _conj_entries(coll, xs):
    for x in xs:
        if x is None:
            continue
        if isinstance(x, (list, tuple)):
            if len(x) != 2:
                raise IllegalArgumentError(
                    "Illegal argument: conj onto a Map or Object expects [key, value] pairs",
                    operation="conj",
                )
            coll[x[0]] = x[1]
        else:
            coll.update(to_iterable(x))
    return coll


def _conj_vector(coll, xs):
    coll.extend(xs)
    return coll


def _conj_list(coll, xs):
    coll[0:0] = reversed(xs)
    return coll


def _conj_set(coll, xs):
    coll.update(xs)
    return coll


def _conj_lazy(coll, xs):
    # Only reached from conj: a LazySeq is never mutated
    return concat(xs, coll)


def _dissoc_keys(coll, keys):
    for key in keys:
        coll.pop(key, None)
    return coll


def _disj_members(coll, xs):
    for x in xs:
        coll.discard(x)
    return coll


def _copying(mutator):
    """Return an implementation that shallow-copies coll, then mutates the copy."""

    def impl(coll, *args):
        return mutator(coll.copy(), *args)

    return impl


_UNSUPPORTED = dict.fromkeys(Category)

register_operation(
    "assoc!",
    {
        **_UNSUPPORTED,
        Category.ORDERED_MAP: _assoc_entries,
        Category.VECTOR: _assoc_indexed,
        Category.RECORD: _assoc_entries,
    },
)
register_operation(
    "assoc",
    {
        **_UNSUPPORTED,
        Category.ORDERED_MAP: _copying(_assoc_entries),
        Category.VECTOR: _copying(_assoc_indexed),
        Category.RECORD: _copying(_assoc_entries),
    },
)
register_operation(
    "conj!",
    {
        **_UNSUPPORTED,
        Category.ORDERED_MAP: _conj_entries,
        Category.VECTOR: _conj_vector,
        Category.RECORD: _conj_entries,
        Category.LIST: _conj_list,
        Category.SET: _conj_set,
    },
)
register_operation(
    "conj",
    {
        **_UNSUPPORTED,
        Category.ORDERED_MAP: _copying(_conj_entries),
        Category.VECTOR: _copying(_conj_vector),
        Category.RECORD: _copying(_conj_entries),
        Category.LIST: _copying(_conj_list),
        Category.SET: _copying(_conj_set),
        Category.LAZY_SEQ: _conj_lazy,
    },
)
register_operation("dissoc!", {**_UNSUPPORTED, Category.RECORD: _dissoc_keys})
register_operation(
    "dissoc", {**_UNSUPPORTED, Category.RECORD: _copying(_dissoc_keys)}
)
register_operation("disj!", {**_UNSUPPORTED, Category.SET: _disj_members})
register_operation("disj", {**_UNSUPPORTED, Category.SET: _copying(_disj_members)})


def assoc_bang(coll, key, val, *kvs):
    """Mutably associate key(s) with value(s) in a Map, list or dict.

    Returns the same collection (mutated in place). List indexes past the
    end pad the list with None.
    """
    _check_pairs("assoc!", kvs)
    return operation_dispatch("assoc!", coll, (key, val) + kvs)


def assoc(coll, key, val, *kvs):
    """Return a copy of a Map, list or dict with key(s) associated to value(s).

    assoc([1, 2, 5], 0, 77) => [77, 2, 5]
    assoc(None, "a", 1) => {"a": 1}
    """
    if coll is None:
        coll = {}
    _check_pairs("assoc", kvs)
    return operation_dispatch("assoc", coll, (key, val) + kvs)


def conj_bang(*xs):
    """Mutably add items to a collection. Where they go depends on its category.

    Returns the same collection (mutated in place).
    """
    if not xs:
        return []
    coll, items = xs[0], xs[1:]
    return operation_dispatch("conj!", coll, items)


def conj(*xs):
    """Return a copy of a collection with items added.

    conj([1, 2, 3], 4) => [1, 2, 3, 4]
    conj(List(1, 2, 3), 4) => List(4, 1, 2, 3)
    conj({"a": 1}, ["b", 2]) => {"a": 1, "b": 2}
    """
    if not xs:
        return []
    coll, items = xs[0], xs[1:]
    if coll is None:
        coll = []
    return operation_dispatch("conj", coll, items)


def dissoc_bang(coll, *keys):
    """Mutably remove keys from a dict. Missing keys are ignored."""
    return operation_dispatch("dissoc!", coll, keys)


def dissoc(coll, *keys):
    """Return a copy of a dict with keys removed."""
    if coll is None:
        coll = {}
    return operation_dispatch("dissoc", coll, keys)


def disj_bang(coll, *xs):
    """Mutably remove elements from a set."""
    return operation_dispatch("disj!", coll, xs)


def disj(coll, *xs):
    """Return a copy of a set with elements removed."""
    return operation_dispatch("disj", coll, xs)


def _contains_key(coll, key):
    try:
        return key in coll
    except TypeError:
        return False


def _contains_index(coll, key):
    return _index_q(key) and 0 <= key < len(coll)


register_operation(
    "contains?",
    {
        **_UNSUPPORTED,
        Category.ORDERED_MAP: _contains_key,
        Category.VECTOR: _contains_index,
        Category.RECORD: _contains_key,
        Category.LIST: _contains_index,
        Category.SET: _contains_key,
    },
)


def contains_q(coll, key) -> bool:
    """Check if a collection contains a key/element.

    For maps: checks if key is present.
    For sets: checks if element is present.
    For lists: checks if index is valid (not value!).
    Anything that isn't a collection contains nothing.
    """
    if classify(coll) is Category.NONE:
        return False
    return operation_dispatch("contains?", coll, key)


def _absent_q(x) -> bool:
    # Falsy scalars count as missing; empty containers are kept
    return x is None or (classify(x) is Category.NONE and not x)


_ASSOC_IN_ROOTS = (Category.ORDERED_MAP, Category.VECTOR, Category.RECORD)


def _assoc_in_with(f, name, coll, path, val):
    base = classify(coll)
    if base not in _ASSOC_IN_ROOTS:
        raise IllegalArgumentError.expects(name, _ASSOC_IN_ROOTS)
    keys = list(to_iterable(path))
    if not keys:
        raise IllegalArgumentError(
            f"Illegal argument: {name} expects a non-empty path", operation=name
        )

    # Walk down, creating missing levels with the root's category
    chain = [coll]
    current = coll
    for key in keys[:-1]:
        child = get(current, key)
        if _absent_q(child):
            child = empty_of_category(base)
        chain.append(child)
        current = child
    chain.append(val)

    # Write back up from the deepest level
    for i in range(len(chain) - 2, -1, -1):
        chain[i] = f(chain[i], keys[i], chain[i + 1])
    return chain[0]


def assoc_in_bang(coll, path, val):
    """Mutably associate a value in a nested structure.

    assoc_in_bang(pets, [0, "age"], 13) mutates pets[0]["age"].
    """
    return _assoc_in_with(assoc_bang, "assoc_in!", coll, path, val)


def assoc_in(coll, path, val):
    """Return a new nested structure with the value at path replaced.

    assoc_in([{"name": "George", "age": 12}], [0, "age"], 13)
    => [{"name": "George", "age": 13}]
    """
    return _assoc_in_with(assoc, "assoc_in", coll, path, val)


def get_in(coll, path, not_found=None):
    """Return the value at path in a nested structure, or not_found."""
    entry = coll
    for key in to_iterable(path):
        entry = get(entry, key)
    return not_found if entry is None else entry


def update(coll, key, f, *args):
    """Return a copy of coll with the value at key replaced by f(value, *args)."""
    return assoc(coll, key, f(get(coll, key), *args))


def update_bang(coll, key, f, *args):
    """Mutably replace the value at key with f(value, *args)."""
    return assoc_bang(coll, key, f(get(coll, key), *args))


def update_in(coll, path, f, *args):
    """Return a copy of a nested structure with the value at path updated by f."""
    return assoc_in(coll, path, f(get_in(coll, path), *args))


def select_keys(coll, keys):
    """Return a collection of the same category with only the given keys.

    Keys whose value is None (or missing) are left out.

    select_keys({"a": 1, "b": 2}, ["a"]) => {"a": 1}
    """
    ret = empty(coll)
    if ret is None:
        return None
    for key in to_iterable(keys):
        val = get(coll, key)
        if val is not None:
            assoc_bang(ret, key, val)
    return ret


# =============================================================================
# Equality
# =============================================================================


def _eq(x, y) -> bool:
    if y is _MISSING:
        return True
    cx, cy = classify(x), classify(y)
    try:
        if cx is Category.SET and cy is Category.SET:
            return len(x) == len(y) and all(v in y for v in x)

        if cx is Category.ORDERED_MAP and cy is Category.ORDERED_MAP:
            if len(x) != len(y):
                return False
            for k, v in x.items():
                if k not in y or not _eq(v, y[k]):
                    return False
            return True

        if x is None or y is None:
            return x is y

        if cx in (Category.LIST, Category.LAZY_SEQ) or cy in (
            Category.LIST,
            Category.LAZY_SEQ,
        ):
            return _eq(list(to_iterable(x)), list(to_iterable(y)))

        if cx is Category.VECTOR and cy is Category.VECTOR:
            if len(x) != len(y):
                return False
            return all(_eq(a, b) for a, b in zip(x, y))

        if _record_like(x) and _record_like(y):
            xk, yk = list(x.keys()), list(y.keys())
            if len(xk) != len(yk):
                return False
            return all(_eq(x[k], y[k]) for k in xk)

        return x == y
    except (TypeError, KeyError, IndexError, AttributeError) as e:
        logger.debug(
            "equals: %s vs %s treated as unequal (%s)",
            type(x).__name__,
            type(y).__name__,
            e,
        )
        return False


def equals(x, y=_MISSING, *more) -> bool:
    """
    Compare values structurally. Works across nested lists, dicts, Maps,
    sets and Lists; a List equals a list with the same elements.

    equals(5) => True
    equals(1, 1, 1) => True
    equals([1, 2, [3, 4, [{"a": "b"}]]], [1, 2, [3, 4, [{"a": "b"}]]]) => True
    equals({1, 2}, {1, 2, 3}) => False
    """
    if not more:
        return _eq(x, y)
    return all(_eq(x, v) for v in (x, y) + more)


def not_equals(x, y=_MISSING, *more) -> bool:
    """Same as not equals(x, y, *more)."""
    return not equals(x, y, *more)


# =============================================================================
# Reducers
# =============================================================================


def reduced(x) -> Reduced:
    """Wrap x so that reduce terminates with the value x."""
    return Reduced(x)


def reduced_q(x) -> bool:
    """Return True if x is the result of a call to reduced."""
    return isinstance(x, Reduced)


def reduce(f, *args):
    """Reduce a collection with a function.

    reduce(f, coll) - seeds with the first element; f() for an empty coll
    reduce(f, init, coll) - reduces with initial value

    Returning reduced(x) from f stops immediately with x.
    """
    if len(args) == 1:
        it = iter(to_iterable(args[0]))
        acc = next(it, _MISSING)
        if acc is _MISSING:
            return f()  # f with no args for empty collection
    elif len(args) == 2:
        acc = args[0]
        it = iter(to_iterable(args[1]))
    else:
        raise IllegalArgumentError(
            f"Illegal arity: reduce takes 2-3 arguments, got {len(args) + 1}",
            operation="reduce",
        )

    if isinstance(acc, Reduced):
        return acc.value
    for x in it:
        acc = f(acc, x)
        if isinstance(acc, Reduced):
            return acc.value
    return acc


def reductions(f, *args) -> LazySeq:
    """Lazily yield intermediate reduce values.

    reductions(f, coll) - the first element is the seed; an empty coll
                          yields just 0
    reductions(f, init, coll) - starts with init
    """
    if len(args) == 1:
        seed, coll = _MISSING, args[0]
    elif len(args) == 2:
        seed, coll = args
    else:
        raise IllegalArgumentError(
            f"Illegal arity: reductions takes 2-3 arguments, got {len(args) + 1}",
            operation="reductions",
        )

    def generate():
        it = iter(to_iterable(coll))
        acc = seed
        if acc is _MISSING:
            acc = next(it, 0)
        if not isinstance(acc, Reduced):
            for x in it:
                yield acc
                acc = f(acc, x)
                if isinstance(acc, Reduced):
                    break
        yield acc.value if isinstance(acc, Reduced) else acc

    return LazySeq(generate)


def some(pred, coll):
    """Return the first truthy value of pred(x) for x in coll, or None."""
    for x in to_iterable(coll):
        result = pred(x)
        if result:
            return result
    return None


def every_q(pred, coll) -> bool:
    """Return True if pred(x) is truthy for all x in coll."""
    for x in to_iterable(coll):
        if not pred(x):
            return False
    return True


def not_every_q(pred, coll) -> bool:
    """Return True if pred(x) is falsy for at least one x in coll."""
    return not every_q(pred, coll)


def not_any_q(pred, coll) -> bool:
    """Return True if pred(x) is falsy for all x in coll."""
    return not some(pred, coll)


# =============================================================================
# Collection Utilities
# =============================================================================


def into(*args):
    """Return a new collection with the items of from_coll conjoined onto to_coll.

    into([], [1, 2, 3]) => [1, 2, 3]
    into({}, [["a", 1]]) => {"a": 1}
    into(List(), [1, 2, 3]) => List(3, 2, 1)
    """
    if not args:
        return []
    if len(args) == 1:
        return args[0]
    if len(args) > 2:
        raise IllegalArgumentError(
            f"Illegal arity: into takes 0-2 arguments, got {len(args)}",
            operation="into",
        )
    to_coll, from_coll = args
    return conj([] if to_coll is None else to_coll, *to_iterable(from_coll))


def merge(*colls):
    """Conj the rest of the collections onto a copy of the first.

    merge({"a": 1, "b": 2}, {"b": 9, "d": 4}) => {"a": 1, "b": 9, "d": 4}

    Lists conj each argument as one element, so list arguments nest:
    merge(["a", "b"], ["c", "d"]) => ["a", "b", ["c", "d"]]
    merge(["a", "b"], "c", "d") => ["a", "b", "c", "d"]
    """
    if not colls:
        return None
    head = colls[0]
    target = {} if head is None else into(empty(head), head)
    return conj_bang(target, *colls[1:])


def _check_key(op: str, key) -> None:
    try:
        hash(key)
    except TypeError as e:
        raise IllegalArgumentError(
            f"Illegal argument: {op} expects hashable keys, got {key!r}",
            operation=op,
        ) from e


def group_by(f, coll) -> dict:
    """Return a dict of the elements of coll keyed by f(element).

    Raises:
        IllegalArgumentError: If f returns an unhashable key
    """
    result = {}
    for x in to_iterable(coll):
        key = f(x)
        _check_key("group_by", key)
        if key not in result:
            result[key] = []
        result[key].append(x)
    return result


def frequencies(coll) -> dict:
    """Return a dict of the distinct items of coll to the number of times they appear.

    Raises:
        IllegalArgumentError: If an item is unhashable
    """
    result = {}
    count_one = fnil(inc, 0)
    for x in to_iterable(coll):
        _check_key("frequencies", x)
        update_bang(result, x, count_one)
    return result


def zipmap(keys, vals) -> dict:
    """Return a dict with keys mapped to corresponding vals."""
    return dict(zip(to_iterable(keys), to_iterable(vals)))


def keys(coll):
    """Return a list of the keys of a Map or dict, or None if it's empty."""
    if seq(coll) is None:
        return None
    if not _record_like(coll):
        raise IllegalArgumentError.expects(
            "keys", (Category.ORDERED_MAP, Category.RECORD)
        )
    return list(coll.keys())


def vals(coll):
    """Return a list of the values of a Map or dict, or None if it's empty."""
    if seq(coll) is None:
        return None
    if not _record_like(coll):
        raise IllegalArgumentError.expects(
            "vals", (Category.ORDERED_MAP, Category.RECORD)
        )
    return [coll[k] for k in coll.keys()]


def vec(coll) -> list:
    """Return a new list of the items of coll (pairs for mappings)."""
    return list(to_iterable(coll))


def vector(*args) -> list:
    """Return a new list containing args."""
    return list(args)


def clj_list(*args) -> List:
    """Return a new List containing args."""
    return List(*args)


def clj_set(coll=None) -> set:
    """Return a set of the distinct elements of coll."""
    return set(to_iterable(coll))


def mapv(f, *colls) -> list:
    """Return the results of clj_map as a list."""
    return list(clj_map(f, *colls))


def filterv(pred, coll) -> list:
    """Return the results of clj_filter as a list."""
    return list(clj_filter(pred, coll))


def reverse(coll) -> list:
    """Return a new list with the items of coll in reverse order."""
    return list(to_iterable(coll))[::-1]


def sort(*args) -> list:
    """Return a sorted list (realizes collection).

    sort(coll) - natural order
    sort(comparator, coll) - comparator(a, b) returns negative, zero or positive
    """
    if len(args) == 1:
        return sorted(to_iterable(args[0]))
    if len(args) == 2:
        comparator, coll = args
        return sorted(to_iterable(coll), key=functools.cmp_to_key(comparator))
    raise IllegalArgumentError(
        f"Illegal arity: sort takes 1 or 2 arguments, got {len(args)}",
        operation="sort",
    )


def sort_by(keyfn, coll) -> list:
    """Return a list sorted by keyfn (realizes collection)."""
    return sorted(to_iterable(coll), key=keyfn)


def shuffle(coll) -> list:
    """Return a random permutation of coll."""
    items = list(to_iterable(coll))
    random.shuffle(items)
    return items


def split_at(n, coll) -> list:
    """Return [take(n, coll), drop(n, coll)] as lists."""
    return [list(take(n, coll)), list(drop(n, coll))]


def split_with(pred, coll) -> list:
    """Return [take_while(pred, coll), drop_while(pred, coll)] as lists."""
    return [list(take_while(pred, coll)), list(drop_while(pred, coll))]


def doall(coll) -> list:
    """Force realization of a lazy sequence, return as list."""
    return list(to_iterable(coll))


def dorun(coll) -> None:
    """Force realization of a lazy sequence for side effects only, return None."""
    for _ in to_iterable(coll):
        pass
    return None


def subvec(v, start, end=None) -> list:
    """Return a list of the items in v from start (inclusive) to end (exclusive)."""
    return list(v[start:end])


def replace(smap, coll):
    """Replace elements of coll that are keys in smap with the mapped values.

    Lists give back lists, anything else a LazySeq.

    replace(["zeroth", "first", "second"], [0, 2, 0]) => ["zeroth", "second", "zeroth"]
    """

    def substitute(x):
        found = get(smap, x, _MISSING)
        return x if found is _MISSING else found

    if isinstance(coll, list):
        return mapv(substitute, coll)
    return clj_map(substitute, coll)


def empty_q(coll) -> bool:
    """Return True if coll has no items."""
    return seq(coll) is None


def distinct_q(*xs) -> bool:
    """Return True if no two of the arguments are equal."""
    return all(xs.index(x) == i for i, x in enumerate(xs))


# =============================================================================
# Atoms
# =============================================================================


def atom(value=None) -> Atom:
    """Return a new Atom holding value."""
    return Atom(value)


def deref(ref):
    """Return the value held by an Atom or a Reduced wrapper."""
    if isinstance(ref, (Atom, Reduced)):
        return ref.deref()
    raise IllegalArgumentError(
        f"Illegal argument: deref expects an Atom or a reduced value, got {type(ref).__name__}",
        operation="deref",
    )


def reset_bang(ref: Atom, value):
    """Set the value of an Atom, returning the new value."""
    return ref.reset(value)


def swap_bang(ref: Atom, f, *args):
    """Set the value of an Atom to f(current, *args), returning the new value."""
    return ref.swap(f, *args)


# =============================================================================
# Functions
# =============================================================================


def identity(x):
    return x


def constantly(x):
    """Return a function that ignores its arguments and returns x."""

    def constant(*_args, **_kwargs):
        return x

    return constant


def complement(f):
    """Return a function returning the opposite truth value of f."""

    def complemented(*args, **kwargs):
        return not f(*args, **kwargs)

    return complemented


def comp(*fs):
    """Compose functions right to left: comp(f, g)(x) == f(g(x))."""
    if not fs:
        return identity
    if len(fs) == 1:
        return fs[0]
    innermost, *outer = reversed(fs)

    def composed(*args, **kwargs):
        x = innermost(*args, **kwargs)
        for g in outer:
            x = g(x)
        return x

    return composed


def partial(f, *xs):
    """Return f with its leading positional arguments fixed to xs."""

    def partially_applied(*args):
        return f(*xs, *args)

    return partially_applied


def fnil(f, *defaults):
    """Return f with None in its leading arguments replaced by defaults.

    fnil(inc, 0)(None) => 1
    """

    def patched(*args):
        args = list(args)
        for i, default in enumerate(defaults[: len(args)]):
            if args[i] is None:
                args[i] = default
        return f(*args)

    return patched


def every_pred(*preds):
    """Return a predicate that is True when every pred holds for every argument."""

    def all_hold(*args):
        return all(p(x) for p in preds for x in args)

    return all_hold


def apply(f, *args):
    """Call f with the leading args followed by the items of the last arg."""
    if not args:
        return f()
    return f(*args[:-1], *to_iterable(args[-1]))


# =============================================================================
# Math Operations
# =============================================================================


def inc(x):
    """Increment a number by 1."""
    return x + 1


def dec(x):
    """Decrement a number by 1."""
    return x - 1


def plus(*args):
    """Add numbers together."""
    result = 0
    for x in args:
        result = result + x
    return result


def minus(*args):
    """Subtract numbers. With one argument, negate it."""
    if not args:
        raise IllegalArgumentError(
            "Illegal arity: 0 args passed to minus", operation="minus"
        )
    if len(args) == 1:
        return -args[0]
    result = args[0]
    for x in args[1:]:
        result = result - x
    return result


def multiply(*args):
    """Multiply numbers together."""
    result = 1
    for x in args:
        result = result * x
    return result


def divide(*args):
    """Divide numbers. With one argument, return its reciprocal."""
    if not args:
        raise IllegalArgumentError(
            "Illegal arity: 0 args passed to divide", operation="divide"
        )
    if len(args) == 1:
        return 1 / args[0]
    result = args[0]
    for x in args[1:]:
        result = result / x
    return result


def quot(a, b):
    """Integer division (quotient), rounding toward negative infinity."""
    return a // b


def mod(a, b):
    """Modulo operation."""
    return a % b


def gt(*args) -> bool:
    """Return True if the numbers are in strictly decreasing order."""
    return all(a > b for a, b in zip(args, args[1:]))


def lt(*args) -> bool:
    """Return True if the numbers are in strictly increasing order."""
    return all(a < b for a, b in zip(args, args[1:]))


def clj_max(*args):
    """Return the maximum value."""
    if len(args) == 1 and hasattr(args[0], "__iter__"):
        return max(to_iterable(args[0]))
    return max(args)


def clj_min(*args):
    """Return the minimum value."""
    if len(args) == 1 and hasattr(args[0], "__iter__"):
        return min(to_iterable(args[0]))
    return min(args)


# =============================================================================
# Predicates
# =============================================================================


def _check_number(x) -> None:
    if isinstance(x, bool) or not isinstance(x, Number):
        raise IllegalArgumentError(f"Illegal argument: {x!r} is not a number")


def even_q(x) -> bool:
    """Return True if x is even. Raises for non-numbers."""
    _check_number(x)
    return x % 2 == 0


def odd_q(x) -> bool:
    """Return True if x is odd. Raises for non-numbers."""
    return not even_q(x)


def zero_q(x) -> bool:
    """Return True if x is zero."""
    return x == 0


def pos_q(x) -> bool:
    """Return True if x is positive."""
    return x > 0


def neg_q(x) -> bool:
    """Return True if x is negative."""
    return x < 0


def nil_q(x) -> bool:
    return x is None


def some_q(x) -> bool:
    return x is not None


def true_q(x) -> bool:
    return x is True


def false_q(x) -> bool:
    return x is False


def not_(x) -> bool:
    return not x


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Categories
    "classify",
    "empty_of_category",
    "empty",
    "map_q",
    "record_q",
    "vector_q",
    "list_q",
    "set_q",
    "lazy_seq_q",
    "coll_q",
    # Operation dispatch
    "register_operation",
    "operation_dispatch",
    "supported_categories",
    "supports_operation",
    # Iteration
    "seqable_q",
    "to_iterable",
    "seq",
    "LazySeq",
    "lazy",
    "lazy_seq",
    # Sequence accessors
    "first",
    "second",
    "ffirst",
    "last",
    "butlast",
    "rest",
    "nth",
    "count",
    # Lazy sequences
    "cons",
    "clj_map",
    "clj_filter",
    "remove",
    "take",
    "drop",
    "take_while",
    "drop_while",
    "take_nth",
    "cycle",
    "clj_range",
    "iterate",
    "repeat",
    "repeatedly",
    "partition",
    "partition_all",
    "interleave",
    "interpose",
    "distinct",
    "dedupe",
    "concat",
    "mapcat",
    "keep",
    "keep_indexed",
    "map_indexed",
    "flatten",
    "drop_last",
    # Structural operations
    "get",
    "assoc",
    "assoc_bang",
    "conj",
    "conj_bang",
    "dissoc",
    "dissoc_bang",
    "disj",
    "disj_bang",
    "contains_q",
    "assoc_in",
    "assoc_in_bang",
    "get_in",
    "update",
    "update_bang",
    "update_in",
    "select_keys",
    # Equality
    "equals",
    "not_equals",
    # Reducers
    "reduced",
    "reduced_q",
    "reduce",
    "reductions",
    "some",
    "every_q",
    "not_every_q",
    "not_any_q",
    # Collection utilities
    "into",
    "merge",
    "group_by",
    "frequencies",
    "zipmap",
    "keys",
    "vals",
    "vec",
    "vector",
    "clj_list",
    "clj_set",
    "mapv",
    "filterv",
    "reverse",
    "sort",
    "sort_by",
    "shuffle",
    "split_at",
    "split_with",
    "doall",
    "dorun",
    "subvec",
    "replace",
    "empty_q",
    "distinct_q",
    # Atoms
    "atom",
    "deref",
    "reset_bang",
    "swap_bang",
    # Functions
    "identity",
    "constantly",
    "complement",
    "comp",
    "partial",
    "fnil",
    "every_pred",
    "apply",
    # Math operations
    "inc",
    "dec",
    "plus",
    "minus",
    "multiply",
    "divide",
    "quot",
    "mod",
    "gt",
    "lt",
    "clj_max",
    "clj_min",
    # Predicates
    "even_q",
    "odd_q",
    "zero_q",
    "pos_q",
    "neg_q",
    "nil_q",
    "some_q",
    "true_q",
    "false_q",
    "not_",
]
