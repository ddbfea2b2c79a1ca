#!/usr/bin/env python3
"""Fuzzing harness for pyclj's structural operators.

A fuzzer owns one pyclj container plus a plain Python reference container,
applies random operations to both and checks after every step that they
still agree. Runs are seeded so that a failure can be replayed exactly.

Usage:
    python -m tests.fuzzing.fuzz [--examples N] [--steps N] [--seed N] [pattern...]

Example:
    python -m tests.fuzzing.fuzz                    # every fuzzer
    python -m tests.fuzzing.fuzz record set         # names containing 'record' or 'set'
    python -m tests.fuzzing.fuzz --seed 7 -n 5000   # replay a seed with more examples
"""

import abc
import argparse
import importlib
import inspect
import random
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from pyclj.types import List

_SCALARS: list[Callable[[], Any]] = [
    lambda: random.randint(-10000, 10000),
    lambda: random.random() * 1000,
    lambda: "".join(random.choices("abcdefghij", k=random.randint(0, 12))),
    lambda: None,
    lambda: random.choice([True, False]),
    lambda: (random.randint(0, 100), random.randint(0, 100)),
]


def random_value(depth: int = 0) -> Any:
    """Return a random element value.

    Mostly scalars; below depth 2 it sometimes nests a list, a List or a dict,
    so that deep equality gets exercised too.
    """
    if depth < 2 and random.random() < 0.15:
        size = random.randint(0, 3)
        kind = random.randrange(3)
        if kind == 0:
            return [random_value(depth + 1) for _ in range(size)]
        if kind == 1:
            return List(*(random_value(depth + 1) for _ in range(size)))
        return {random_key(): random_value(depth + 1) for _ in range(size)}
    return random.choice(_SCALARS)()


def random_key() -> Any:
    """Return a hashable key from a small space, so that keys collide often."""
    if random.random() < 0.5:
        return random.randint(0, 30)
    return random.choice("abcdefghij")


class Fuzzer(abc.ABC):
    """One randomized scenario.

    Subclasses set ``name`` and implement reset(), do_random_operation()
    and check_invariants(). check_invariants() signals a mismatch by
    raising AssertionError.
    """

    name: str = "unnamed"

    def __init__(self):
        self.operations = 0
        self.op_counts: dict[str, int] = {}

    def record_op(self, name: str):
        self.operations += 1
        self.op_counts[name] = self.op_counts.get(name, 0) + 1

    @abc.abstractmethod
    def reset(self):
        """Start a new example from an empty container."""

    @abc.abstractmethod
    def do_random_operation(self):
        """Apply one operation to both the container and the reference."""

    @abc.abstractmethod
    def check_invariants(self):
        """Raise AssertionError if the container and the reference disagree."""

    def get_stats(self) -> dict[str, Any]:
        return {}

    def pick_operation(self, ops: list[tuple[Callable[[], None], int]]):
        """Call one of the (operation, weight) pairs, chosen by weight."""
        operations = [op for op, _ in ops]
        weights = [weight for _, weight in ops]
        random.choices(operations, weights=weights)[0]()


@dataclass
class FuzzResult:
    """Outcome of running a single fuzzer. Truthy when it passed."""

    name: str
    seed: int
    passed: bool = True
    examples: int = 0
    operations: int = 0
    elapsed: float = 0.0
    failure: Optional[str] = None
    op_counts: dict[str, int] = field(default_factory=dict)

    def __bool__(self):
        return self.passed


class FuzzRunner:
    """Runs fuzzers for a fixed number of examples and steps."""

    def __init__(
        self,
        examples: int = 1000,
        steps: int = 200,
        seed: int | None = None,
        verbose: bool = True,
    ):
        self.examples = examples
        self.steps = steps
        self.verbose = verbose
        self.seed = seed if seed is not None else random.randrange(2**32)

    def _report(self, message: str = ""):
        if self.verbose:
            print(message)

    def run(self, fuzzer: Fuzzer) -> FuzzResult:
        """Run a fuzzer from a freshly seeded generator.

        Every run reseeds, so the same seed replays the same operations
        regardless of which fuzzers ran before.
        """
        random.seed(self.seed)
        result = FuzzResult(name=fuzzer.name, seed=self.seed)
        self._report(
            f"Fuzz: {fuzzer.name} "
            f"({self.examples:,} examples x {self.steps} steps, seed {self.seed})"
        )

        started = time.monotonic()
        next_progress = started + 1.0
        example = step = 0
        try:
            for example in range(self.examples):
                fuzzer.reset()
                for step in range(self.steps):
                    fuzzer.do_random_operation()
                    fuzzer.check_invariants()
                result.examples = example + 1

                now = time.monotonic()
                if now >= next_progress:
                    self._report(
                        f"  [{now - started:6.1f}s] {example + 1:>7,} examples, "
                        f"{fuzzer.operations:>9,} ops"
                    )
                    next_progress = now + 1.0
        except AssertionError as e:
            result.passed = False
            result.failure = f"example {example + 1}, step {step + 1}: {e}"
            print(f"FAILED {fuzzer.name} at {result.failure} (seed {self.seed})")

        result.elapsed = time.monotonic() - started
        result.operations = fuzzer.operations
        result.op_counts = dict(fuzzer.op_counts)

        if result.passed:
            self._report(
                f"  {result.operations:,} operations in {result.elapsed:.1f}s: PASSED"
            )
            self._report(f"  Operations: {result.op_counts}")
            for key, value in fuzzer.get_stats().items():
                self._report(f"  {key}: {value}")
        return result


def _is_concrete_fuzzer(obj) -> bool:
    return (
        inspect.isclass(obj)
        and issubclass(obj, Fuzzer)
        and not inspect.isabstract(obj)
        and not obj.__name__.startswith("_")
    )


def discover_fuzzers() -> list[type[Fuzzer]]:
    """Collect the concrete Fuzzer classes defined in fuzz_*.py modules."""
    found: list[type[Fuzzer]] = []
    for path in sorted(Path(__file__).parent.glob("fuzz_*.py")):
        module = importlib.import_module(f"{__package__}.{path.stem}")
        for _, cls in inspect.getmembers(module, _is_concrete_fuzzer):
            if cls.__module__ == module.__name__ and cls not in found:
                found.append(cls)
    return found


def run_suite(
    examples: int = 1000,
    steps: int = 200,
    seed: int | None = None,
    patterns: list[str] | None = None,
) -> int:
    """Run every discovered fuzzer whose name matches one of patterns.

    Returns:
        Exit code: 0 when all selected fuzzers passed, 1 otherwise
    """
    fuzzers = discover_fuzzers()
    if patterns:
        wanted = [p.lower() for p in patterns]
        fuzzers = [f for f in fuzzers if any(p in f.name.lower() for p in wanted)]
    if not fuzzers:
        print("No fuzzers selected.")
        return 1

    runner = FuzzRunner(examples=examples, steps=steps, seed=seed)
    results = []
    for fuzzer_cls in fuzzers:
        results.append(runner.run(fuzzer_cls()))
        print()

    print("Summary")
    print("-" * 40)
    for result in results:
        print(f"  {result.name:<12} {'PASSED' if result else 'FAILED'}")
    failed = [r for r in results if not r]
    print(f"Passed: {len(results) - len(failed)}, Failed: {len(failed)}")
    return 1 if failed else 0


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="Fuzz pyclj's structural operators")
    parser.add_argument(
        "--examples", "-n", type=int, default=1000, help="examples per fuzzer"
    )
    parser.add_argument("--steps", "-s", type=int, default=200, help="steps per example")
    parser.add_argument("--seed", type=int, default=None, help="seed to replay")
    parser.add_argument("patterns", nargs="*", help="fuzzer name filters")
    args = parser.parse_args(argv)

    sys.exit(
        run_suite(
            examples=args.examples,
            steps=args.steps,
            seed=args.seed,
            patterns=args.patterns or None,
        )
    )


if __name__ == "__main__":
    main()
