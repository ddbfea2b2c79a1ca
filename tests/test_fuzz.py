"""Runs the structural fuzzers with a small, seeded budget."""

import unittest

from tests.fuzzing.fuzz import FuzzRunner, discover_fuzzers
from tests.fuzzing.fuzz_collections import (
    ListFuzzer,
    OrderedMapFuzzer,
    RecordFuzzer,
    SetFuzzer,
    VectorFuzzer,
)


class TestFuzzers(unittest.TestCase):
    def run_fuzzer(self, fuzzer_cls):
        runner = FuzzRunner(examples=20, steps=40, seed=20240601, verbose=False)
        result = runner.run(fuzzer_cls())
        self.assertTrue(result.passed, result.failure)
        self.assertEqual(result.examples, 20)
        self.assertGreater(result.operations, 0)

    def test_vector(self):
        self.run_fuzzer(VectorFuzzer)

    def test_list(self):
        self.run_fuzzer(ListFuzzer)

    def test_record(self):
        self.run_fuzzer(RecordFuzzer)

    def test_ordered_map(self):
        self.run_fuzzer(OrderedMapFuzzer)

    def test_set(self):
        self.run_fuzzer(SetFuzzer)

    def test_discovery(self):
        names = {cls.name for cls in discover_fuzzers()}
        self.assertEqual(names, {"Vector", "List", "Record", "OrderedMap", "Set"})


if __name__ == "__main__":
    unittest.main()
