"""Time the statistical tests, optionally against a reference executable.

The reference executable is called with a test file and the bit count and
must print one JSON object per line with the keys "test" and "time"
(milliseconds).
"""

from __future__ import annotations

import argparse
import json
import subprocess
import sys
import time
from os import PathLike
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .bitvec import BitVec
from .core import Test
from .overlapping import OverlappingTemplateTestArgs
from .runner import RunnerTestArgs, available_tests, iter_tests
from .template_matching import NonOverlappingTemplateTestArgs, TemplateArg

TEST_FILE_NAMES = (
    "e.1e6.bin",
    "pi.1e6.bin",
    "sha1.1e6.bin",
    "sqrt2.1e6.bin",
    "sqrt3.1e6.bin",
)

DEFAULT_RUNS_PER_FILE = 100

EXPECTED_BIT_LENGTH = 1_000_000

Statistics = Dict[Test, Tuple[List[float], List[float]]]
"""Per test: timings of this implementation and of the reference, in ms."""

PathArg = Union[str, PathLike]

_REFERENCE_NAMES = {
    "Frequency(tp.n)": Test.FREQUENCY,
    "BlockFrequency(tp.blockFrequencyBlockLength, tp.n)": Test.FREQUENCY_WITHIN_A_BLOCK,
    "CumulativeSums(tp.n)": Test.CUMULATIVE_SUMS,
    "Runs(tp.n)": Test.RUNS,
    "LongestRunOfOnes(tp.n)": Test.LONGEST_RUN_OF_ONES,
    "Rank(tp.n)": Test.BINARY_MATRIX_RANK,
    "DiscreteFourierTransform(tp.n)": Test.SPECTRAL_DFT,
    "NonOverlappingTemplateMatchings(tp.nonOverlappingTemplateBlockLength, tp.n)":
        Test.NON_OVERLAPPING_TEMPLATE_MATCHING,
    "OverlappingTemplateMatchings(tp.overlappingTemplateBlockLength, tp.n)":
        Test.OVERLAPPING_TEMPLATE_MATCHING,
    "Universal(tp.n)": Test.MAURERS_UNIVERSAL_STATISTICAL,
    "ApproximateEntropy(tp.approximateEntropyBlockLength, tp.n)": Test.APPROXIMATE_ENTROPY,
    "RandomExcursions(tp.n)": Test.RANDOM_EXCURSIONS,
    "RandomExcursionsVariant(tp.n)": Test.RANDOM_EXCURSIONS_VARIANT,
    "Serial(tp.serialBlockLength,tp.n)": Test.SERIAL,
    "LinearComplexity(tp.linearComplexitySequenceLength, tp.n)": Test.LINEAR_COMPLEXITY,
}


def map_reference_name(name: str) -> Optional[Test]:
    """The test named by the reference executable's output, or None."""
    return _REFERENCE_NAMES.get(name)


def average(values: Sequence[float]) -> Optional[float]:
    """The arithmetic mean, or None for an empty sequence."""
    if not values:
        return None
    return sum(values) / len(values)


def _display_name(test: Test) -> str:
    return test.name.replace("_", " ").title()


def format_statistics(
    test: Test, own_avg: Optional[float], reference_avg: Optional[float]
) -> str:
    """Describe the average timings of one test as indented report lines."""
    lines = [f"\tTest {_display_name(test)}"]
    if own_avg is not None:
        lines.append(f"\t\tAverage time of this implementation:          {own_avg:.6f} ms")
    if reference_avg is not None:
        lines.append(f"\t\tAverage time of the reference implementation: {reference_avg:.6f} ms")
    if own_avg is not None and reference_avg is not None:
        ratio = 100.0 * own_avg / reference_avg
        verdict = "faster" if ratio <= 100.0 else "SLOWER"
        lines.append(
            f"\t\t{verdict}: This implementation takes {abs(ratio):.2f}% of the time "
            "of the reference implementation."
        )
    return "\n".join(lines)


def _entry(statistics: Statistics, test: Test) -> Tuple[List[float], List[float]]:
    return statistics.setdefault(test, ([], []))


def time_own_implementation(
    test_file: PathArg, args: Optional[RunnerTestArgs], statistics: Statistics
) -> None:
    """Run every available test once on the file, recording each duration in ms.

    The file must hold exactly 10^6 bits; otherwise ValueError is raised.
    """
    data = BitVec.from_bytes(Path(test_file).read_bytes())
    if len(data) != EXPECTED_BIT_LENGTH:
        raise ValueError(
            f"Invalid test file length. Expected {EXPECTED_BIT_LENGTH} bits. Got: {len(data)} bits."
        )

    results = iter_tests(data, available_tests(), args)
    while True:
        start = time.perf_counter_ns()
        item = next(results, None)
        if item is None:
            break
        elapsed_ms = (time.perf_counter_ns() - start) / 1e6
        _entry(statistics, item[0])[0].append(elapsed_ms)


def time_reference_implementation(
    test_file: PathArg, executable: PathArg, statistics: Statistics
) -> None:
    """Run the reference executable on the file and record the timings it reports."""
    executable = Path(executable)
    completed = subprocess.run(
        [str(executable), str(test_file), str(EXPECTED_BIT_LENGTH)],
        cwd=executable.parent,
        capture_output=True,
    )
    if completed.returncode != 0:
        message = completed.stderr.decode("utf-8", errors="replace")
        raise RuntimeError(f"Error when executing the reference implementation: {message}")

    for line in completed.stdout.decode("utf-8", errors="replace").splitlines():
        if not line.strip():
            continue
        record = json.loads(line)
        test = map_reference_name(record["test"])
        if test is None:
            raise ValueError(f"Unknown test name from the reference implementation: {record['test']}")
        _entry(statistics, test)[1].append(float(record["time"]))


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="randomness-sts-benchmark",
        description="Time the statistical tests on the 10^6-bit test files.",
    )
    parser.add_argument(
        "-b", "--bin", dest="bin_path", type=Path, default=None,
        help="path to the built reference executable",
    )
    parser.add_argument(
        "-d", "--dir", dest="test_files_dir", type=Path, required=True,
        help="directory containing the test files",
    )
    parser.add_argument(
        "-t", "--templates", type=Path, default=None,
        help="template file of length 9 for the Non-overlapping Template Matching Test",
    )
    parser.add_argument(
        "-r", "--runs", type=int, default=DEFAULT_RUNS_PER_FILE,
        help="number of runs per test file",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point."""
    parser = _parser()
    args = parser.parse_args(argv)

    if args.runs < 1:
        parser.error("the number of runs must be at least 1")

    test_files_dir = args.test_files_dir.resolve()
    test_files = [test_files_dir / name for name in TEST_FILE_NAMES]
    for path in test_files:
        if not path.exists():
            parser.error(f"Test file {path} does not exist!")
        if not path.is_file():
            parser.error(f"Test file {path} is no regular file!")

    executable = args.bin_path
    if executable is not None:
        if not executable.exists():
            parser.error(f"Executable {executable} does not exist!")
        if not executable.is_file():
            parser.error(f"Executable {executable} is no regular file!")

    non_overlapping = None
    if args.templates is not None:
        non_overlapping = NonOverlappingTemplateTestArgs(TemplateArg.from_file(args.templates, 9), 8)
    test_args = RunnerTestArgs(
        non_overlapping_template=non_overlapping,
        overlapping_template=OverlappingTemplateTestArgs.nist_behaviour(9),
    )

    all_averages: Statistics = {}

    for test_file in test_files:
        print(f"Testing {test_file}...", file=sys.stderr)
        stats: Statistics = {}
        for run in range(1, args.runs + 1):
            print(f"\tAttempt {run}/{args.runs} - This implementation", file=sys.stderr)
            time_own_implementation(test_file, test_args, stats)
            if executable is not None:
                print(f"\tAttempt {run}/{args.runs} - Reference implementation", file=sys.stderr)
                time_reference_implementation(test_file, executable, stats)

        print(f"Statistics for test file {test_file}:")
        for test in sorted(stats):
            own, reference = stats[test]
            own_avg, reference_avg = average(own), average(reference)
            print(format_statistics(test, own_avg, reference_avg))
            overall = _entry(all_averages, test)
            if own_avg is not None:
                overall[0].append(own_avg)
            if reference_avg is not None:
                overall[1].append(reference_avg)
        print()

    print("Overall statistics:")
    for test in sorted(all_averages):
        own, reference = all_averages[test]
        print(format_statistics(test, average(own), average(reference)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())