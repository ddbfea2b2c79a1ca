"""Fuzz testing suite for pyclj."""

from .fuzz import (
    Fuzzer,
    FuzzResult,
    FuzzRunner,
    discover_fuzzers,
    random_key,
    random_value,
    run_suite,
)

__all__ = [
    "Fuzzer",
    "FuzzResult",
    "FuzzRunner",
    "discover_fuzzers",
    "random_key",
    "random_value",
    "run_suite",
]
