"""Shared types of the test suite: errors, error codes, test identifiers and results."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Optional

from scipy import special

OVERLAPPING_TEMPLATE_DEFAULT_BLOCK_LENGTH = 1032
"""Default block length M, in bits, of the Overlapping Template Matching Test."""

OVERLAPPING_TEMPLATE_DEFAULT_FREEDOM = 6
"""Default degrees of freedom K of the Overlapping Template Matching Test."""

OVERLAPPING_TEMPLATE_DEFAULT_TEMPLATE_LENGTH = 9
"""Default template length of the Overlapping Template Matching Test."""

NON_OVERLAPPING_TEMPLATE_DEFAULT_BLOCK_COUNT = 8
"""Default block count of the Non-overlapping Template Matching Test."""

NON_OVERLAPPING_TEMPLATE_DEFAULT_TEMPLATE_LENGTH = 9
"""Default template length of the Non-overlapping Template Matching Test."""

DEFAULT_THRESHOLD = 0.01
"""Default significance level for deciding whether a test passed."""


class ErrorCode(enum.IntEnum):
    """Numeric codes identifying the kind of a failure."""

    NO_ERROR = 0
    OVERFLOW = 1
    NAN = 2
    INFINITE = 3
    GAMMA_FUNCTION_FAILED = 4
    INVALID_PARAMETER = 5
    SET_MAX_THREADS = 6
    INVALID_TEST = 7
    DUPLICATE_TEST = 8
    TEST_FAILED = 9
    TEST_WAS_NOT_RUN = 10


class StsError(Exception):
    """Base class of all errors raised by the statistical tests."""

    code: ErrorCode = ErrorCode.NO_ERROR


class NumericOverflowError(StsError, OverflowError):
    """A numeric overflow happened in a test."""

    code = ErrorCode.OVERFLOW


class NaNError(StsError, ArithmeticError):
    """The result of a calculation was NaN."""

    code = ErrorCode.NAN

    def __init__(self, message: str = "the result of a calculation is NaN") -> None:
        super().__init__(message)


class InfiniteError(StsError, ArithmeticError):
    """The result of a calculation was positive or negative infinity."""

    code = ErrorCode.INFINITE

    def __init__(self, message: str = "the result of a calculation is infinite") -> None:
        super().__init__(message)


class GammaFunctionError(StsError, ArithmeticError):
    """The incomplete gamma function could not be evaluated."""

    code = ErrorCode.GAMMA_FUNCTION_FAILED


class InvalidParameterError(StsError, ValueError):
    """A test was called with an invalid parameter."""

    code = ErrorCode.INVALID_PARAMETER


class Test(enum.IntEnum):
    """All statistical tests, numbered in the order of the NIST publication."""

    FREQUENCY = 0
    FREQUENCY_WITHIN_A_BLOCK = 1
    RUNS = 2
    LONGEST_RUN_OF_ONES = 3
    BINARY_MATRIX_RANK = 4
    SPECTRAL_DFT = 5
    NON_OVERLAPPING_TEMPLATE_MATCHING = 6
    OVERLAPPING_TEMPLATE_MATCHING = 7
    MAURERS_UNIVERSAL_STATISTICAL = 8
    LINEAR_COMPLEXITY = 9
    SERIAL = 10
    APPROXIMATE_ENTROPY = 11
    CUMULATIVE_SUMS = 12
    RANDOM_EXCURSIONS = 13
    RANDOM_EXCURSIONS_VARIANT = 14

    @classmethod
    def from_value(cls, value: int) -> "Test":
        """Return the test with the given numeric value, raising ValueError if there is none."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"The numerical value {value!r} is not a valid test!")
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"The numerical value {value} is not a valid test!") from None


TEST_COUNT = len(Test)
"""The number of tests; values run from 0 to TEST_COUNT - 1."""


@dataclass(frozen=True)
class TestResult:
    """The outcome of one statistical test: a p-value and an optional comment."""

    p_value: float
    comment: Optional[str] = None

    def passed(self, threshold: float = DEFAULT_THRESHOLD) -> bool:
        """Whether the p-value reaches the given significance threshold."""
        return self.p_value >= threshold


def error_code_for(error: BaseException) -> ErrorCode:
    """Return the error code that describes the given error."""
    if isinstance(error, StsError):
        return error.code
    raise TypeError(f"{type(error).__name__} is not an error of the test suite")


def check_f64(value: float) -> float:
    """Return the value unchanged, raising if it is NaN or infinite."""
    if math.isnan(value):
        raise NaNError()
    if math.isinf(value):
        raise InfiniteError()
    return value


def igamc(a: float, x: float) -> float:
    """The regularized upper incomplete gamma function Q(a, x)."""
    if not a > 0.0 or not x >= 0.0 or math.isinf(a) or math.isinf(x):
        raise GammaFunctionError(f"igamc is undefined for a = {a}, x = {x}")
    result = float(special.gammaincc(a, x))
    if math.isnan(result):
        raise GammaFunctionError(f"igamc failed for a = {a}, x = {x}")
    return result