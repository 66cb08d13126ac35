"""Run several statistical tests on one sequence in a single call."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .bitvec import BitVec
from .core import ErrorCode, InvalidParameterError, StsError, Test, TestResult
from .cumulative_sums import cumulative_sums_test
from .longest_run import longest_run_of_ones_test
from .overlapping import OverlappingTemplateTestArgs, overlapping_template_matching_test
from .random_excursions import random_excursions_test
from .template_matching import (
    NonOverlappingTemplateTestArgs,
    non_overlapping_template_matching_test,
)

TestLike = Union[Test, int]
Outcome = Union[List[TestResult], StsError]


class DuplicateTestError(StsError, ValueError):
    """A test was given more than once to the same run."""

    code = ErrorCode.DUPLICATE_TEST


class TestFailedError(StsError):
    """One or more tests of a run failed; the others still produced results."""

    code = ErrorCode.TEST_FAILED

    def __init__(self, errors: List[Tuple[Test, StsError]]) -> None:
        self.errors = list(errors)
        details = ", ".join(f"{test.name}: {error}" for test, error in self.errors)
        super().__init__(f"Test runner: one or multiple tests failed: {details}")


class TestWasNotRunError(StsError, LookupError):
    """The requested test has no stored result."""

    code = ErrorCode.TEST_WAS_NOT_RUN


@dataclass
class RunnerTestArgs:
    """Arguments for the tests that take them.

    The Non-overlapping Template Matching Test needs templates; without them
    that test fails when run.
    """

    non_overlapping_template: Optional[NonOverlappingTemplateTestArgs] = None
    overlapping_template: OverlappingTemplateTestArgs = field(
        default_factory=OverlappingTemplateTestArgs
    )


def _run_non_overlapping(data: BitVec, args: RunnerTestArgs) -> List[TestResult]:
    if args.non_overlapping_template is None:
        raise InvalidParameterError(
            "the Non-overlapping Template Matching Test needs templates, none were given"
        )
    return non_overlapping_template_matching_test(data, args.non_overlapping_template)


_DISPATCH = {
    Test.LONGEST_RUN_OF_ONES: lambda data, args: [longest_run_of_ones_test(data)],
    Test.NON_OVERLAPPING_TEMPLATE_MATCHING: _run_non_overlapping,
    Test.OVERLAPPING_TEMPLATE_MATCHING: lambda data, args: [
        overlapping_template_matching_test(data, args.overlapping_template)
    ],
    Test.CUMULATIVE_SUMS: lambda data, args: list(cumulative_sums_test(data)),
    Test.RANDOM_EXCURSIONS: lambda data, args: list(random_excursions_test(data)),
}


def available_tests() -> Tuple[Test, ...]:
    """The tests this runner can execute, in numeric order."""
    return tuple(sorted(_DISPATCH))


def _to_test(value: TestLike) -> Test:
    if isinstance(value, Test):
        return value
    return Test.from_value(value)


def _validate(tests: Iterable[TestLike]) -> List[Test]:
    chosen: List[Test] = []
    for value in tests:
        test = _to_test(value)
        if test in chosen:
            raise DuplicateTestError(f"The test {test.name} was specified multiple times!")
        if test not in _DISPATCH:
            raise InvalidParameterError(f"The test {test.name} is not supported by this runner")
        chosen.append(test)
    return chosen


def iter_tests(
    data: BitVec, tests: Iterable[TestLike], args: Optional[RunnerTestArgs] = None
) -> Iterator[Tuple[Test, Outcome]]:
    """Validate the tests, then lazily run them in the given order.

    Each item is the test and either its results or the error it raised.
    Invalid or duplicate tests raise before anything runs.
    """
    chosen = _validate(tests)
    used_args = args if args is not None else RunnerTestArgs()

    def generate() -> Iterator[Tuple[Test, Outcome]]:
        for test in chosen:
            try:
                yield test, _DISPATCH[test](data, used_args)
            except StsError as error:
                yield test, error

    return generate()


class TestRunner:
    """Runs tests and keeps their results until they are taken."""

    __test__ = False

    def __init__(self) -> None:
        self._results: Dict[Test, List[TestResult]] = {}

    def run(
        self,
        data: BitVec,
        tests: Iterable[TestLike],
        args: Optional[RunnerTestArgs] = None,
    ) -> None:
        """Run the chosen tests, replacing all stored results.

        Raises TestFailedError after storing the successful results if any
        test failed.
        """
        outcomes = iter_tests(data, tests, args)
        results: Dict[Test, List[TestResult]] = {}
        errors: List[Tuple[Test, StsError]] = []
        for test, outcome in outcomes:
            if isinstance(outcome, StsError):
                errors.append((test, outcome))
            else:
                results[test] = outcome
        self._results = results
        if errors:
            raise TestFailedError(errors)

    def run_all(self, data: BitVec, args: Optional[RunnerTestArgs] = None) -> None:
        """Run every available test."""
        self.run(data, available_tests(), args)

    def take_result(self, test: TestLike) -> List[TestResult]:
        """Remove and return the stored results of a test."""
        chosen = _to_test(test)
        try:
            return self._results.pop(chosen)
        except KeyError:
            raise TestWasNotRunError(f"The test {chosen.name} was not run!") from None