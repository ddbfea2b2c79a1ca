"""
pyclj.types - Core type definitions for pyclj

This module contains the fundamental types shared by every other module:
- Category: The closed set of container categories values are classified into
- List: A front-growing list (conj prepends instead of appending)
- Reduced: Sentinel wrapper that stops a reduce early
- Atom: A single-cell mutable reference
- IllegalArgumentError: Raised for wrong container categories and arities

These types carry no behaviour of their own beyond what is needed to
represent them; the polymorphic operations live in pyclj.core.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

# Sentinel for missing values
_MISSING = object()


class Category(Enum):
    """
    The container category of a runtime value.

    Every value handed to a structural operation is classified into exactly
    one category, and dispatch is a lookup on that category. The value of
    each member is the label used in error messages.

    Python representation:
        ORDERED_MAP -> collections.OrderedDict
        VECTOR      -> list
        RECORD      -> dict
        LIST        -> pyclj.types.List
        SET         -> set
        LAZY_SEQ    -> pyclj.core.LazySeq
        NONE        -> anything else (None, strings, numbers, tuples, ...)
    """

    ORDERED_MAP = "Map"
    VECTOR = "Array"
    RECORD = "Object"
    LIST = "List"
    SET = "Set"
    LAZY_SEQ = "LazySeq"
    NONE = "None"

    @property
    def label(self) -> str:
        return self.value


class IllegalArgumentError(TypeError):
    """
    Raised when an operation receives a container of the wrong category,
    or the wrong number of arguments.

    Attributes:
        operation: Name of the operation, with a trailing "!" for the
                   mutating variant (e.g. "assoc!")
        categories: Categories the operation accepts (empty for arity errors)
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        categories: Iterable[Category] = (),
    ):
        super().__init__(message)
        self.operation = operation
        self.categories = tuple(categories)

    @classmethod
    def expects(
        cls, operation: str, categories: Iterable[Category]
    ) -> "IllegalArgumentError":
        """Build the standard "expects a X, Y or Z" error for an operation."""
        categories = tuple(categories)
        return cls(
            f"Illegal argument: {operation} expects "
            f"{describe_categories(categories)} as the first argument.",
            operation=operation,
            categories=categories,
        )


def describe_categories(categories: Iterable[Category]) -> str:
    """
    Render categories as an English list with an indefinite article.

    describe_categories([Category.ORDERED_MAP, Category.VECTOR, Category.RECORD])
    => "a Map, Array or Object"
    """
    labels = [c.label for c in categories]
    if not labels:
        return "nothing"
    article = "an" if labels[0][0] in "AEIOU" else "a"
    if len(labels) == 1:
        return f"{article} {labels[0]}"
    return f"{article} {', '.join(labels[:-1])} or {labels[-1]}"


class List(list):
    """
    A list whose conj adds to the front.

    Apart from that one behaviour it is an ordinary Python list, so
    indexing, len() and iteration all work as usual. The constructor takes
    the elements themselves rather than an iterable:

        List(1, 2, 3)     # List([1, 2, 3])
        List(*"abc")      # List(['a', 'b', 'c'])
    """

    def __init__(self, *items: Any):
        super().__init__(items)

    def __repr__(self):
        return f"List({list.__repr__(self)})"

    def copy(self) -> "List":
        return List(*self)


@dataclass(frozen=True)
class Reduced:
    """
    Wraps the final value of a reduction.

    Returning reduced(x) from a reducing function stops reduce (and
    reductions) immediately with x as the result.
    """

    value: Any

    def deref(self) -> Any:
        return self.value


@dataclass(eq=False)
class Atom:
    """
    A single mutable cell.

    Atoms only name shared mutable state; there is no locking or
    compare-and-set, and they are meant for single-threaded use.
    """

    value: Any

    def deref(self) -> Any:
        return self.value

    def reset(self, value: Any) -> Any:
        self.value = value
        return value

    def swap(self, f, *args) -> Any:
        """Replace the value with f(value, *args) and return the new value."""
        return self.reset(f(self.value, *args))

    def __repr__(self):
        return f"Atom({self.value!r})"


# Type exports
__all__ = [
    "Category",
    "IllegalArgumentError",
    "describe_categories",
    "List",
    "Reduced",
    "Atom",
    "_MISSING",
]
