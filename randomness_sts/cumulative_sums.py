"""The cumulative sums test (No. 13).

Partial sums of the sequence, with 0 mapped to -1 and 1 to +1, are computed
once from the first bit and once from the last bit. The test checks whether
the largest absolute partial sum stays within the bounds expected of a
random sequence.
"""

from __future__ import annotations

import math
from itertools import accumulate
from typing import Iterable, Tuple

from .bitvec import BitVec
from .core import InvalidParameterError, TestResult, check_f64

MIN_INPUT_LENGTH = 100
"""The minimum input length, in bits, recommended by NIST."""


def cumulative_sums_test(data: BitVec) -> Tuple[TestResult, TestResult]:
    """Run the test forwards and backwards, returning both results in that order.

    Raises InvalidParameterError for sequences shorter than 100 bits.
    """
    if len(data) < MIN_INPUT_LENGTH:
        raise InvalidParameterError(f"Sequence length must be >= 100. Is: {len(data)}")
    return _cusum(data, reverse=False), _cusum(data, reverse=True)


def _max_excursion(bits: Iterable[int]) -> int:
    steps = (1 if bit else -1 for bit in bits)
    return max(map(abs, accumulate(steps)), default=0)


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _phi(x: float) -> float:
    """Standard normal cumulative distribution function."""
    return 0.5 * math.erfc(-x / math.sqrt(2.0))


def _cusum(data: BitVec, reverse: bool) -> TestResult:
    bits = data.bits
    z = _max_excursion(reversed(bits) if reverse else bits)
    n = len(data)
    sqrt_n = math.sqrt(n)

    upper = _trunc_div(_trunc_div(n, z) - 1, 4) + 1

    lower_1 = _trunc_div(_trunc_div(-n, z) + 1, 4)
    sum_1 = math.fsum(
        _phi((4.0 * k + 1.0) * z / sqrt_n) - _phi((4.0 * k - 1.0) * z / sqrt_n)
        for k in range(lower_1, upper)
    )
    check_f64(sum_1)

    lower_2 = _trunc_div(_trunc_div(-n, z) - 3, 4)
    sum_2 = math.fsum(
        _phi((4.0 * k + 3.0) * z / sqrt_n) - _phi((4.0 * k + 1.0) * z / sqrt_n)
        for k in range(lower_2, upper)
    )
    check_f64(sum_2)

    p_value = check_f64(1.0 - sum_1 + sum_2)
    return TestResult(p_value)