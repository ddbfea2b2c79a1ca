#!/usr/bin/env python3
"""Fuzz testing for the structural operators.

Each fuzzer drives a pyclj container through random copying (conj, assoc,
dissoc, disj) and mutating (conj_bang, assoc_bang, ...) operations and
mirrors every step on a plain Python reference container. Copies must
never disturb earlier versions, so old versions are kept and re-checked.
"""

import random
from collections import OrderedDict
from typing import Any

from pyclj.core import (
    assoc,
    assoc_bang,
    conj,
    conj_bang,
    contains_q,
    count,
    disj,
    disj_bang,
    dissoc,
    dissoc_bang,
    equals,
    get,
    into,
)
from pyclj.types import List

from .fuzz import Fuzzer, random_key, random_value


class _VersionedFuzzer(Fuzzer):
    """Keeps (value, snapshot) pairs for the versions replaced by copying ops."""

    def __init__(self):
        super().__init__()
        self.old_versions: list[tuple[Any, Any]] = []
        self.max_size = 0

    def snapshot(self, value):
        return value.copy()

    def save_version(self):
        """Save current version for checking that copies leave it alone."""
        self.old_versions.append((self.coll, self.snapshot(self.reference)))
        if len(self.old_versions) > 20:
            del self.old_versions[:-10]

    def check_old_versions(self):
        for old_coll, old_ref in self.old_versions[-5:]:
            assert old_coll == old_ref, "Copy disturbed an earlier version!"

    def get_stats(self) -> dict[str, Any]:
        return {"Max size": self.max_size}


class VectorFuzzer(_VersionedFuzzer):
    """Fuzz tester that maintains a list and a reference list."""

    name = "Vector"

    def reset(self):
        self.coll: list = []
        self.reference: list = []
        self.old_versions.clear()

    def check_invariants(self):
        assert count(self.coll) == len(self.reference), (
            f"Length mismatch: {count(self.coll)} vs {len(self.reference)}"
        )
        assert self.coll == self.reference, (
            f"Content mismatch:\n  Vector: {self.coll[:10]}...\n  "
            f"Reference: {self.reference[:10]}..."
        )
        assert equals(self.coll, list(self.reference))

        # Spot check indexing
        if self.reference:
            for i in [0, len(self.reference) - 1, len(self.reference) // 2]:
                assert get(self.coll, i) == self.reference[i]
                assert contains_q(self.coll, i)
        assert not contains_q(self.coll, len(self.reference))

        self.check_old_versions()

    def do_conj(self):
        self.save_version()
        values = [random_value() for _ in range(random.randint(1, 5))]
        self.coll = conj(self.coll, *values)
        self.reference = self.reference + values
        self.record_op("conj")

    def do_conj_bang(self):
        values = [random_value() for _ in range(random.randint(1, 5))]
        result = conj_bang(self.coll, *values)
        assert result is self.coll, "conj_bang must return its target"
        self.reference.extend(values)
        self.record_op("conj!")

    def do_assoc(self):
        if not self.reference:
            return
        self.save_version()
        idx = random.randint(0, len(self.reference) - 1)
        value = random_value()
        self.coll = assoc(self.coll, idx, value)
        self.reference = self.reference.copy()
        self.reference[idx] = value
        self.record_op("assoc")

    def do_assoc_past_end(self):
        self.save_version()
        gap = random.randint(0, 3)
        value = random_value()
        self.coll = assoc(self.coll, len(self.reference) + gap, value)
        self.reference = self.reference + [None] * gap + [value]
        self.record_op("assoc_end")

    def do_assoc_bang(self):
        if not self.reference:
            return
        idx = random.randint(0, len(self.reference) - 1)
        value = random_value()
        assoc_bang(self.coll, idx, value)
        self.reference[idx] = value
        self.record_op("assoc!")

    def do_into(self):
        self.save_version()
        values = [random_value() for _ in range(random.randint(0, 10))]
        self.coll = into(self.coll, values)
        self.reference = self.reference + values
        self.record_op("into")

    def do_random_operation(self):
        self.pick_operation(
            [
                (self.do_conj, 20),
                (self.do_conj_bang, 10),
                (self.do_assoc, 20),
                (self.do_assoc_past_end, 5),
                (self.do_assoc_bang, 10),
                (self.do_into, 5),
            ]
        )
        self.max_size = max(self.max_size, len(self.reference))


class ListFuzzer(_VersionedFuzzer):
    """Fuzz tester for List, whose conj adds to the front."""

    name = "List"

    def reset(self):
        self.coll: List = List()
        self.reference: list = []
        self.old_versions.clear()

    def check_invariants(self):
        assert isinstance(self.coll, List), f"Lost List type: {type(self.coll)}"
        assert list(self.coll) == self.reference, (
            f"Content mismatch:\n  List: {list(self.coll)[:10]}...\n  "
            f"Reference: {self.reference[:10]}..."
        )
        assert equals(self.coll, self.reference)
        self.check_old_versions()

    def do_conj(self):
        self.save_version()
        values = [random_value() for _ in range(random.randint(1, 5))]
        self.coll = conj(self.coll, *values)
        self.reference = values[::-1] + self.reference
        self.record_op("conj")

    def do_conj_bang(self):
        values = [random_value() for _ in range(random.randint(1, 5))]
        conj_bang(self.coll, *values)
        self.reference[0:0] = values[::-1]
        self.record_op("conj!")

    def do_random_operation(self):
        self.pick_operation([(self.do_conj, 3), (self.do_conj_bang, 1)])
        self.max_size = max(self.max_size, len(self.reference))


class RecordFuzzer(_VersionedFuzzer):
    """Fuzz tester that maintains a dict (or OrderedDict) and a reference dict."""

    name = "Record"
    factory = dict

    def reset(self):
        self.coll = self.factory()
        self.reference: dict = {}
        self.old_versions.clear()

    def check_invariants(self):
        assert type(self.coll) is self.factory, f"Lost type: {type(self.coll)}"
        assert dict(self.coll) == self.reference, (
            f"Content mismatch:\n  Coll: {dict(self.coll)}\n  "
            f"Reference: {self.reference}"
        )
        assert list(self.coll.keys()) == list(self.reference.keys()), (
            "Insertion order differs"
        )
        for key in random.sample(list(self.reference), min(3, len(self.reference))):
            assert contains_q(self.coll, key)
            assert get(self.coll, key, "missing") == self.reference[key]
        self.check_old_versions()

    def do_assoc(self):
        self.save_version()
        key, value = random_key(), random_value()
        self.coll = assoc(self.coll, key, value)
        self.reference = dict(self.reference)
        self.reference[key] = value
        self.record_op("assoc")

    def do_assoc_bang(self):
        key, value = random_key(), random_value()
        assoc_bang(self.coll, key, value)
        self.reference[key] = value
        self.record_op("assoc!")

    def do_conj_pair(self):
        self.save_version()
        key, value = random_key(), random_value()
        self.coll = conj(self.coll, [key, value])
        self.reference = dict(self.reference)
        self.reference[key] = value
        self.record_op("conj")

    def do_dissoc(self):
        if not self.reference or self.factory is not dict:
            return
        self.save_version()
        key = random.choice(list(self.reference))
        self.coll = dissoc(self.coll, key)
        self.reference = dict(self.reference)
        del self.reference[key]
        self.record_op("dissoc")

    def do_dissoc_bang(self):
        if self.factory is not dict:
            return
        # Missing keys are ignored
        key = random_key()
        dissoc_bang(self.coll, key)
        self.reference.pop(key, None)
        self.record_op("dissoc!")

    def do_random_operation(self):
        self.pick_operation(
            [
                (self.do_assoc, 20),
                (self.do_assoc_bang, 10),
                (self.do_conj_pair, 10),
                (self.do_dissoc, 10),
                (self.do_dissoc_bang, 5),
            ]
        )
        self.max_size = max(self.max_size, len(self.reference))


class OrderedMapFuzzer(RecordFuzzer):
    """Same operations on an OrderedDict, which must stay an OrderedDict."""

    name = "OrderedMap"
    factory = OrderedDict


class SetFuzzer(_VersionedFuzzer):
    """Fuzz tester that maintains a set through conj/disj."""

    name = "Set"

    def reset(self):
        self.coll: set = set()
        self.reference: set = set()
        self.old_versions.clear()

    def check_invariants(self):
        assert self.coll == self.reference, (
            f"Content mismatch: {len(self.coll)} vs {len(self.reference)} items"
        )
        assert equals(self.coll, set(self.reference))
        for x in list(self.reference)[:3]:
            assert contains_q(self.coll, x)
        self.check_old_versions()

    def do_conj(self):
        self.save_version()
        values = [random_key() for _ in range(random.randint(1, 5))]
        self.coll = conj(self.coll, *values)
        self.reference = self.reference | set(values)
        self.record_op("conj")

    def do_disj(self):
        if not self.reference:
            return
        self.save_version()
        x = random.choice(list(self.reference))
        self.coll = disj(self.coll, x)
        self.reference = self.reference - {x}
        self.record_op("disj")

    def do_disj_bang(self):
        x = random_key()
        disj_bang(self.coll, x)
        self.reference.discard(x)
        self.record_op("disj!")

    def do_random_operation(self):
        self.pick_operation(
            [(self.do_conj, 10), (self.do_disj, 6), (self.do_disj_bang, 4)]
        )
        self.max_size = max(self.max_size, len(self.reference))
