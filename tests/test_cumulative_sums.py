import pytest

from randomness_sts.bitvec import BitVec
from randomness_sts.core import InvalidParameterError
from randomness_sts.cumulative_sums import cumulative_sums_test

NIST_EXAMPLE = (
    "1100100100001111110110101010001000100001011010001100"
    "001000110100110001001100011001100010100010111000"
)


def test_nist_example_forward_and_backward():
    data = BitVec.from_ascii_str(NIST_EXAMPLE)
    assert len(data) == 100
    forward, backward = cumulative_sums_test(data)
    assert forward.p_value == pytest.approx(0.219194, abs=1e-6)
    assert backward.p_value == pytest.approx(0.114866, abs=1e-6)


def test_reversed_input_swaps_results():
    data = BitVec.from_ascii_str(NIST_EXAMPLE)
    reversed_data = BitVec.from_ascii_str(NIST_EXAMPLE[::-1])
    forward, backward = cumulative_sums_test(data)
    rev_forward, rev_backward = cumulative_sums_test(reversed_data)
    assert rev_forward.p_value == pytest.approx(backward.p_value)
    assert rev_backward.p_value == pytest.approx(forward.p_value)


def test_too_short_input_raises():
    data = BitVec.from_ascii_str("01" * 49)
    with pytest.raises(InvalidParameterError):
        cumulative_sums_test(data)


def test_constant_sequence_fails():
    data = BitVec.from_bits([1] * 200)
    forward, backward = cumulative_sums_test(data)
    assert not forward.passed()
    assert not backward.passed()


def test_alternating_sequence_has_high_p_value():
    data = BitVec.from_ascii_str("10" * 100)
    forward, _ = cumulative_sums_test(data)
    assert forward.p_value > 0.99