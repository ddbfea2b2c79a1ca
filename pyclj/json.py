"""
pyclj.json - JSON serialization and printing for pyclj values.

This module provides a custom JSON encoder that can serialize pyclj's
containers (sets, Lists, LazySeqs) and reference types (Atom, Reduced)
to JSON, plus the printing helpers built on top of it.

    >>> dumps({"evens": clj_filter(even_q, clj_range())}, print_length=3)
    '{"evens": [0, 2, 4]}'
    >>> pr_str(List(1, 2), {"a"})
    '[1,2]["a"]'
"""

import json
from collections import OrderedDict
from itertools import islice
from typing import Any, Optional, TextIO

from pyclj.config import get_config
from pyclj.core import LazySeq
from pyclj.types import Atom, Reduced


class PycljJSONEncoder(json.JSONEncoder):
    """
    JSON encoder that handles pyclj's containers.

    Supported types:
    - set -> list (JSON has no set type)
    - LazySeq -> list, truncated to print_length elements when given
    - Atom, Reduced -> the value they hold
    - OrderedDict, dict -> object; keys json can't write are str()'d

    Plain lists and Lists are native to json already.

    Example:
        >>> from pyclj.core import clj_map, inc
        >>> from pyclj.json import PycljJSONEncoder
        >>> import json
        >>> json.dumps({"items": clj_map(inc, [1, 2])}, cls=PycljJSONEncoder)
        '{"items": [2, 3]}'
    """

    def __init__(self, *args: Any, print_length: Optional[int] = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.print_length = print_length

    def iterencode(self, o: Any, _one_shot: bool = False):
        # json writes dicts itself and never hands them to default(), so
        # their keys are converted up front
        return super().iterencode(self._convert_keys(o), _one_shot)

    def default(self, o: Any) -> Any:
        """
        Convert pyclj types to JSON-serializable Python types.

        Args:
            o: The object to serialize.

        Returns:
            A value the base encoder knows how to write.

        Raises:
            TypeError: If the object is not JSON serializable.
        """
        # Lazy sequences -> list, bounded so infinite ones can be printed
        if isinstance(o, LazySeq):
            if self.print_length is None:
                return self._convert_keys(list(o))
            return self._convert_keys(list(islice(o, self.print_length)))

        # Sets -> list (JSON has no native set)
        if isinstance(o, (set, frozenset)):
            return self._convert_keys(list(o))

        # Reference types -> their value
        if isinstance(o, (Atom, Reduced)):
            return self._convert_keys(o.deref())

        # Anything else is not serializable
        return super().default(o)

    def _convert_keys(self, o: Any) -> Any:
        """Copy nested dicts and lists, turning non-scalar dict keys into strings."""
        if isinstance(o, dict):
            return {self._convert_key(k): self._convert_keys(v) for k, v in o.items()}
        if isinstance(o, (list, tuple)):
            return [self._convert_keys(x) for x in o]
        return o

    def _convert_key(self, key: Any) -> Any:
        """
        Convert a map key to something json accepts as an object key.

        str, int, float, bool and None are written by json as they are;
        anything else becomes str(key).
        """
        if key is None or isinstance(key, (str, int, float, bool)):
            return key
        return str(key)


def dumps(obj: Any, *, print_length: Optional[int] = None, **kwargs: Any) -> str:
    """
    Serialize a pyclj value to a JSON formatted string.

    Args:
        obj: The value to serialize.
        print_length: Maximum number of items written for each LazySeq.
            None writes them whole, so infinite sequences need a bound.
        **kwargs: Passed on to json.dumps (indent, sort_keys, separators, ...).

    Returns:
        A JSON formatted string.

    Example:
        >>> from pyclj.json import dumps
        >>> dumps({"tags": {"a"}})
        '{"tags": ["a"]}'
    """
    return json.dumps(obj, cls=PycljJSONEncoder, print_length=print_length, **kwargs)


def dump(obj: Any, fp: TextIO, *, print_length: Optional[int] = None, **kwargs: Any):
    """Serialize a pyclj value as JSON to a file-like object. See dumps()."""
    json.dump(obj, fp, cls=PycljJSONEncoder, print_length=print_length, **kwargs)


# Decoding needs no help: JSON only ever produces plain Python values
loads = json.loads
load = json.load


def loads_ordered(s: str | bytes | bytearray, **kwargs: Any) -> Any:
    """
    Parse a JSON string, turning every JSON object into an OrderedDict (Map).

    Example:
        >>> loads_ordered('{"b": 1, "a": [1, 2]}')
        OrderedDict([('b', 1), ('a', [1, 2])])
    """
    return json.loads(s, object_pairs_hook=OrderedDict, **kwargs)


def load_ordered(fp: TextIO, **kwargs: Any) -> Any:
    """Parse JSON from a file, turning every JSON object into an OrderedDict."""
    return json.load(fp, object_pairs_hook=OrderedDict, **kwargs)


# =============================================================================
# Printing
# =============================================================================


def pr_str(*xs) -> str:
    """
    Return the compact JSON text of every argument, concatenated.

    Lazy sequences are truncated to the configured print_length.

    pr_str([1, 2, 3]) => "[1,2,3]"
    pr_str({"a": 1}, None) => '{"a":1}null'
    """
    print_length = get_config().print_length
    return "".join(
        json.dumps(
            x, cls=PycljJSONEncoder, separators=(",", ":"), print_length=print_length
        )
        for x in xs
    )


def prn(*xs) -> None:
    """Print pr_str(*xs) followed by a newline."""
    print(pr_str(*xs))


def println(*xs) -> None:
    """Print the values separated by spaces, followed by a newline."""
    print(*xs)


def clj_str(*xs) -> str:
    """Concatenate the string forms of xs. None renders as the empty string."""
    return "".join("" if x is None else str(x) for x in xs)


__all__ = [
    "PycljJSONEncoder",
    "dumps",
    "dump",
    "loads",
    "load",
    "loads_ordered",
    "load_ordered",
    "pr_str",
    "prn",
    "println",
    "clj_str",
]
