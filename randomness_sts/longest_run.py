"""Test for the longest run of ones in a block (No. 4).

The sequence is split into blocks whose length depends on the input length,
and the distribution of the longest run of ones per block is compared with
the one expected of a random sequence. The input needs at least 128 bits.
"""

from __future__ import annotations

import math
from typing import Sequence

from .bitvec import BitVec
from .core import InvalidParameterError, TestResult, check_f64, igamc

MIN_INPUT_LENGTH = 128
"""The minimum input length, in bits, recommended by NIST."""

_CRITERIA_8 = (1, 2, 3, 4)
_CRITERIA_128 = (4, 5, 6, 7, 8, 9)
_CRITERIA_10_4 = (10, 11, 12, 13, 14, 15, 16)

_PROBABILITIES_8 = (0.21484375, 0.3671875, 0.23046875, 0.1875)
_PROBABILITIES_128 = (
    0.11740357883779325,
    0.2429559592774549,
    0.2493634831790783,
    0.17517706034678193,
    0.10270107130405359,
    0.11239884705483805,
)
_PROBABILITIES_10_4 = (
    0.08663231107995277,
    0.2082006483876035,
    0.24841858194169963,
    0.1939127867416558,
    0.12145848508900658,
    0.06801108930393818,
    0.07336609745614353,
)


def longest_run_of_ones_test(data: BitVec) -> TestResult:
    """Run the test; raises InvalidParameterError for fewer than 128 bits."""
    length = len(data)
    if length < MIN_INPUT_LENGTH:
        raise InvalidParameterError(f"Input length has to be at least 128 bits, is {length}")
    if length <= 6271:
        return _run(data, 8, _CRITERIA_8, _PROBABILITIES_8)
    if length <= 749_999:
        return _run(data, 128, _CRITERIA_128, _PROBABILITIES_128)
    # whole bytes only: 10000 bits is exactly 1250 bytes
    return _run(data, 10_000, _CRITERIA_10_4, _PROBABILITIES_10_4)


def _longest_run(block: bytes) -> int:
    return max(map(len, block.split(b"\x00")))


def _bucket(run_length: int, criteria: Sequence[int]) -> int:
    if run_length <= criteria[0]:
        return 0
    if run_length >= criteria[-1]:
        return len(criteria) - 1
    return criteria.index(run_length)


def _run(
    data: BitVec,
    block_length: int,
    criteria: Sequence[int],
    probabilities: Sequence[float],
) -> TestResult:
    bits = data.bits
    block_count = len(bits) // block_length
    table = [0] * len(criteria)
    for start in range(0, block_count * block_length, block_length):
        table[_bucket(_longest_run(bits[start:start + block_length]), criteria)] += 1

    chi = math.fsum(
        (observed - block_count * pi) ** 2 / (block_count * pi)
        for observed, pi in zip(table, probabilities)
    )
    check_f64(chi)

    param_1 = check_f64((len(criteria) - 1) / 2.0)
    param_2 = check_f64(chi / 2.0)
    p_value = check_f64(igamc(param_1, param_2))
    return TestResult(p_value)