"""The random excursions test (No. 14).

Cumulative sums of the sequence (0 as -1, 1 as +1) are split into cycles
between zero values. For each state x in -4..-1 and +1..+4, the number of
cycles in which x occurs k times is compared with the expected frequency.

Eight results are returned, in the order -4, -3, -2, -1, +1, +2, +3, +4,
each commented with its state. Fewer than the required number of cycles
yields results with a p-value of 0.0 and the comment "Too few cycles".
"""

from __future__ import annotations

import math
from itertools import accumulate
from typing import List, Tuple

from .bitvec import BitVec
from .core import InvalidParameterError, TestResult, check_f64, igamc

MIN_INPUT_LENGTH = 1_000_000
"""The minimum input length, in bits, recommended by NIST."""

_STATES = (-4, -3, -2, -1, 1, 2, 3, 4)
_STATE_INDEX = {state: index for index, state in enumerate(_STATES)}

_PROBABILITIES = (
    (7.0 / 8.0, 5.0 / 6.0, 3.0 / 4.0, 1.0 / 2.0, 1.0 / 2.0, 3.0 / 4.0, 5.0 / 6.0, 7.0 / 8.0),
    (1.0 / 64.0, 1.0 / 36.0, 1.0 / 16.0, 1.0 / 4.0, 1.0 / 4.0, 1.0 / 16.0, 1.0 / 36.0, 1.0 / 64.0),
    (7.0 / 512.0, 5.0 / 216.0, 3.0 / 64.0, 1.0 / 8.0, 1.0 / 8.0, 3.0 / 64.0, 5.0 / 216.0, 7.0 / 512.0),
    (49.0 / 4096.0, 25.0 / 1296.0, 9.0 / 256.0, 1.0 / 16.0, 1.0 / 16.0, 9.0 / 256.0, 25.0 / 1296.0,
     49.0 / 4096.0),
    (343.0 / 32768.0, 125.0 / 7776.0, 27.0 / 1024.0, 1.0 / 32.0, 1.0 / 32.0, 27.0 / 1024.0,
     125.0 / 7776.0, 343.0 / 32768.0),
    (2401.0 / 32768.0, 625.0 / 7776.0, 81.0 / 1024.0, 1.0 / 32.0, 1.0 / 32.0, 81.0 / 1024.0,
     625.0 / 7776.0, 2401.0 / 32768.0),
)


def _comment(state: int) -> str:
    return f"x = {state:+d}"


def _count_states_per_cycle(data: BitVec) -> List[List[int]]:
    cycles = [[0] * len(_STATES)]
    for total in accumulate(1 if bit else -1 for bit in data.bits):
        if total == 0:
            cycles.append([0] * len(_STATES))
            continue
        index = _STATE_INDEX.get(total)
        if index is not None:
            cycles[-1][index] += 1
    return cycles


def random_excursions_test(data: BitVec, enforce_limits: bool = True) -> Tuple[TestResult, ...]:
    """Run the test, returning eight results.

    With enforce_limits, inputs shorter than 10^6 bits raise
    InvalidParameterError, and too few cycles give zero p-values.
    """
    length = len(data)
    if enforce_limits and length < MIN_INPUT_LENGTH:
        raise InvalidParameterError(f"The input bit length must be at >= 10^6. Is: {length}")

    cycles = _count_states_per_cycle(data)
    num_cycles = len(cycles)

    if enforce_limits:
        min_cycles = max(0.005 * math.sqrt(length), 500.0)
        if num_cycles < min_cycles:
            return tuple(TestResult(0.0, "Too few cycles") for _ in _STATES)

    # v[k][x]: number of cycles in which state x occurred exactly k times (k = 5 means >= 5)
    v = [[0] * len(_STATES) for _ in _PROBABILITIES]
    for cycle in cycles:
        for state, occurrences in enumerate(cycle):
            v[min(occurrences, 5)][state] += 1

    results = []
    for state_index, state in enumerate(_STATES):
        chi = math.fsum(
            (v_k[state_index] - num_cycles * pi_k[state_index]) ** 2
            / (num_cycles * pi_k[state_index])
            for v_k, pi_k in zip(v, _PROBABILITIES)
        )
        check_f64(chi)
        p_value = check_f64(igamc(5.0 / 2.0, chi / 2.0))
        results.append(TestResult(p_value, _comment(state)))
    return tuple(results)