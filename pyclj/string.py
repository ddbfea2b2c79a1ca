"""
pyclj.string - String functions

Separators and patterns may be plain strings (matched literally) or
compiled regular expressions.
"""

import re
from typing import Optional, Union

from pyclj.core import LazySeq, to_iterable
from pyclj.json import clj_str
from pyclj.types import IllegalArgumentError

Pattern = Union[str, re.Pattern]


def blank_q(s: Optional[str]) -> bool:
    """Return True if s is None, empty or contains only whitespace."""
    return not s or s.strip() == ""


def join(*args) -> str:
    """
    Return a string of all elements in coll, optionally separated by sep.

    join([1, 2, 3]) => "123"
    join(", ", [1, 2, 3]) => "1, 2, 3"
    """
    if len(args) == 1:
        sep, coll = "", args[0]
    elif len(args) == 2:
        sep, coll = args
    else:
        raise IllegalArgumentError(
            f"Illegal arity: join takes 1 or 2 arguments, got {len(args)}",
            operation="join",
        )
    return sep.join(clj_str(x) for x in to_iterable(coll))


def trim(s: str) -> str:
    """Remove whitespace from both ends of s."""
    return s.strip()


def replace(s: str, match: Pattern, replacement: str) -> str:
    """Replace every occurrence of match in s with replacement."""
    if isinstance(match, re.Pattern):
        return match.sub(replacement, s)
    return s.replace(match, replacement)


def split(s: str, sep: Pattern, limit: int = 0) -> list:
    """
    Split s on a literal separator or a compiled pattern.

    limit 0 drops a trailing empty string, a negative limit keeps
    everything, and a positive limit caps the number of parts (the last
    part holds the unsplit remainder). An empty separator splits s into
    characters.

    split("q1w2e3", re.compile(r"\\d+")) => ["q", "w", "e"]
    split("q1w2e3", re.compile(r"\\d+"), -1) => ["q", "w", "e", ""]
    split("fooxbarybaz", re.compile("[xy]"), 2) => ["foo", "barybaz"]
    """
    if limit == 1:
        return [s]

    if sep == "":
        parts = list(s)
        if 0 < limit < len(parts):
            parts = parts[: limit - 1] + ["".join(parts[limit - 1 :])]
    else:
        pattern = sep if isinstance(sep, re.Pattern) else re.compile(re.escape(sep))
        parts = pattern.split(s, maxsplit=max(limit - 1, 0))

    if limit == 0 and parts and parts[-1] == "":
        parts.pop()
    return parts


def lower_case(s: str) -> str:
    return s.lower()


def upper_case(s: str) -> str:
    return s.upper()


def ends_with(s: str, suffix: str) -> bool:
    return s.endswith(suffix)


def starts_with(s: str, prefix: str) -> bool:
    return s.startswith(prefix)


def _match_value(m: re.Match):
    if m.re.groups == 0:
        return m.group(0)
    return [m.group(0), *m.groups()]


def re_matches(pattern: Pattern, s: str):
    """
    Match the whole of s against pattern.

    Returns the matched string when the pattern has no groups, a list of
    [whole, *groups] when it does, or None when s does not match.

    re_matches(r"hello, world", "hello, world") => "hello, world"
    re_matches(r"(\\w+)@(\\w+)", "me@host") => ["me@host", "me", "host"]
    """
    m = re.fullmatch(pattern, s)
    if m is None:
        return None
    return _match_value(m)


def re_seq(pattern: Pattern, s: str) -> LazySeq:
    """
    Return a lazy sequence of successive matches of pattern in s.

    re_seq(r"\\d", "test 5.9.2") => ("5" "9" "2")
    re_seq(r"(\\S+):(\\d+)", " RX pkts:18 err:5")
    => (["pkts:18", "pkts", "18"] ["err:5", "err", "5"])
    """
    compiled = re.compile(pattern)

    def generate():
        for m in compiled.finditer(s):
            yield _match_value(m)

    return LazySeq(generate)


__all__ = [
    "blank_q",
    "join",
    "trim",
    "replace",
    "split",
    "lower_case",
    "upper_case",
    "ends_with",
    "starts_with",
    "re_matches",
    "re_seq",
]
