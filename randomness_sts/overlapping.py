"""The Overlapping Template Matching Test (No. 8).

Each block is scanned for the all-ones template of length m, moving one
bit at a time so that matches may overlap. The distribution of match
counts is compared with probabilities computed after Hamano and Kaneko;
the inaccurate probabilities of the NIST reference can be chosen with
OverlappingTemplateTestArgs.nist_behaviour.
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, List, Tuple

from .bitvec import BitVec
from .core import (
    OVERLAPPING_TEMPLATE_DEFAULT_BLOCK_LENGTH,
    OVERLAPPING_TEMPLATE_DEFAULT_FREEDOM,
    OVERLAPPING_TEMPLATE_DEFAULT_TEMPLATE_LENGTH,
    InvalidParameterError,
    TestResult,
    igamc,
)

DEFAULT_BLOCK_LENGTH = OVERLAPPING_TEMPLATE_DEFAULT_BLOCK_LENGTH
DEFAULT_FREEDOM = OVERLAPPING_TEMPLATE_DEFAULT_FREEDOM
DEFAULT_TEMPLATE_LENGTH = OVERLAPPING_TEMPLATE_DEFAULT_TEMPLATE_LENGTH

MIN_INPUT_LENGTH = 2 * 4
"""The minimum input length, in bits."""


@dataclass(frozen=True)
class OverlappingTemplateTestArgs:
    """Template length m (2..21), block length M in bits and degrees of freedom K."""

    template_length: int = DEFAULT_TEMPLATE_LENGTH
    block_length: int = DEFAULT_BLOCK_LENGTH
    freedom: int = DEFAULT_FREEDOM
    inaccurate_nist_calculation: bool = False

    def __post_init__(self) -> None:
        if not 2 <= self.template_length <= 21:
            raise InvalidParameterError(
                f"template length must be within 2 and 21, is {self.template_length}"
            )

    @classmethod
    def nist_behaviour(cls, template_length: int) -> "OverlappingTemplateTestArgs":
        """Arguments reproducing the reference's probabilities; m must be 9 or 10."""
        if template_length not in (9, 10):
            raise InvalidParameterError(
                f"template length must be 9 or 10 for the NIST behaviour, is {template_length}"
            )
        return cls(template_length, 1032, 6, True)


def calculate_nist_pis(block_length: int, template_length: int) -> Tuple[float, ...]:
    """The six probabilities as computed by the NIST reference."""
    lam = (block_length - template_length + 1) / 2.0 ** template_length
    eta = lam / 2.0
    pi_0 = math.exp(-eta)
    pis = [
        pi_0,
        eta / 2.0 * pi_0,
        eta / 8.0 * pi_0 * (eta + 2.0),
        eta / 8.0 * pi_0 * (eta * eta / 6.0 + eta + 1.0),
        eta / 16.0 * pi_0 * (eta * eta * eta / 24.0 + eta * eta / 2.0 + 3.0 * eta / 2.0 + 1.0),
    ]
    pis.append(1.0 - sum(pis))
    return tuple(pis)


_CACHE_LOCK = threading.Lock()
_CACHE: Dict[Tuple[int, int, int], Tuple[float, ...]] = {
    (DEFAULT_BLOCK_LENGTH, DEFAULT_TEMPLATE_LENGTH, DEFAULT_FREEDOM): (
        0.3640910532167278,
        0.18565890010624034,
        0.13938113045903266,
        0.10057114399877809,
        0.07043232634639843,
        0.13986544587282246,
    ),
}


def _compute_hamano_kaneko_pis(
    block_length: int, template_length: int, freedom: int
) -> Tuple[float, ...]:
    """Exact computation, without the cache. List index i holds T(i - 1)."""
    n_max = block_length
    m = template_length

    t0: List[int] = []
    for n in range(-1, n_max + 1):
        if n <= 0:
            t0.append(1)
        elif n < m:
            t0.append(2 * t0[n])
        else:
            t0.append(2 * t0[n] - t0[n - m])

    t1: List[int] = []
    for n in range(-1, n_max + 1):
        if n < m:
            t1.append(0)
        elif n == m:
            t1.append(1)
        elif n == m + 1:
            t1.append(2)
        else:
            t1.append(sum(t0[i] * t0[n - m - i] for i in range(n - m + 1)))

    rows = [t0, t1]
    for a in range(2, freedom - 1):
        prev = rows[a - 1]
        row = [0]
        for n in range(0, n_max + 1):
            total = prev[n] + sum(
                t0[i] * prev[n - m - i] for i in range(0, n - 2 * m - a + 2)
            )
            row.append(total)
        rows.append(row)

    divisor = 2 ** block_length
    exact = [Fraction(row[block_length + 1], divisor) for row in rows]
    last = 1 - sum(exact, Fraction(0))
    return tuple(float(pi) for pi in exact) + (float(last),)


def calculate_hamano_kaneko_pis(
    block_length: int, template_length: int, freedom: int
) -> Tuple[float, ...]:
    """The `freedom` probabilities after Hamano and Kaneko; results are cached."""
    if freedom < 3:
        raise InvalidParameterError(f"degrees of freedom must be at least 3, is {freedom}")
    key = (block_length, template_length, freedom)
    with _CACHE_LOCK:
        cached = _CACHE.get(key)
    if cached is not None:
        return cached
    pis = _compute_hamano_kaneko_pis(block_length, template_length, freedom)
    with _CACHE_LOCK:
        _CACHE[key] = pis
    return pis


def _count_overlapping_ones(block: bytes, template_length: int) -> int:
    return sum(
        max(0, len(run) - template_length + 1) for run in block.split(b"\x00")
    )


def overlapping_template_matching_test(
    data: BitVec, arg: OverlappingTemplateTestArgs = OverlappingTemplateTestArgs()
) -> TestResult:
    """Run the test and return its single result."""
    template_length = arg.template_length
    block_length = arg.block_length
    freedom = arg.freedom

    if block_length < template_length:
        raise InvalidParameterError(
            f"the calculated block length {block_length} is smaller than the passed "
            f"template length {template_length}!"
        )

    block_count = len(data) // block_length

    if arg.inaccurate_nist_calculation and freedom == 6:
        pis = calculate_nist_pis(block_length, template_length)
    else:
        pis = calculate_hamano_kaneko_pis(block_length, template_length, freedom)

    occurrences = [0] * freedom
    bits = data.bits
    # blocks are scanned with the default block length, as the reference does
    scan_length = DEFAULT_BLOCK_LENGTH
    for index in range(block_count):
        block = bits[index * scan_length:(index + 1) * scan_length]
        matches = _count_overlapping_ones(block, template_length)
        occurrences[min(matches, freedom - 1)] += 1

    if block_count == 0:
        chi = math.nan
    else:
        chi = math.fsum(
            (v_i - block_count * pi_i) ** 2 / (block_count * pi_i)
            for v_i, pi_i in zip(occurrences, pis)
        )

    return TestResult(igamc(5.0 / 2.0, chi / 2.0))