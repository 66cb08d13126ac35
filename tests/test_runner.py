import random

import pytest

from randomness_sts.bitvec import BitVec
from randomness_sts.core import ErrorCode, InvalidParameterError, StsError, Test
from randomness_sts.cumulative_sums import cumulative_sums_test
from randomness_sts.longest_run import longest_run_of_ones_test
from randomness_sts.runner import (
    DuplicateTestError,
    RunnerTestArgs,
    TestFailedError,
    TestRunner,
    TestWasNotRunError,
    available_tests,
    iter_tests,
)
from randomness_sts.template_matching import (
    NonOverlappingTemplateTestArgs,
    TemplateArg,
    non_overlapping_template_matching_test,
)


def _data(length=512, seed=7):
    rng = random.Random(seed)
    return BitVec.from_bits(rng.getrandbits(1) for _ in range(length))


def test_available_tests_sorted_and_supported():
    tests = available_tests()
    assert list(tests) == sorted(tests)
    assert Test.CUMULATIVE_SUMS in tests
    assert Test.LONGEST_RUN_OF_ONES in tests
    assert Test.FREQUENCY not in tests


def test_iter_tests_keeps_order_and_matches_direct_calls():
    data = _data()
    items = list(iter_tests(data, [Test.CUMULATIVE_SUMS, Test.LONGEST_RUN_OF_ONES]))
    assert [test for test, _ in items] == [Test.CUMULATIVE_SUMS, Test.LONGEST_RUN_OF_ONES]
    assert items[0][1] == list(cumulative_sums_test(data))
    assert items[1][1] == [longest_run_of_ones_test(data)]


def test_iter_tests_accepts_integers():
    data = _data()
    items = list(iter_tests(data, [int(Test.LONGEST_RUN_OF_ONES)]))
    assert items[0][0] is Test.LONGEST_RUN_OF_ONES


def test_iter_tests_yields_errors():
    data = _data(50)
    ((test, outcome),) = list(iter_tests(data, [Test.CUMULATIVE_SUMS]))
    assert test is Test.CUMULATIVE_SUMS
    assert isinstance(outcome, InvalidParameterError)


def test_duplicate_raises_before_running():
    with pytest.raises(DuplicateTestError) as info:
        iter_tests(_data(), [Test.CUMULATIVE_SUMS, Test.CUMULATIVE_SUMS])
    assert info.value.code == ErrorCode.DUPLICATE_TEST


def test_invalid_numeric_test():
    with pytest.raises(ValueError):
        iter_tests(_data(), [99])


def test_unsupported_test():
    with pytest.raises(InvalidParameterError):
        iter_tests(_data(), [Test.FREQUENCY])


def test_run_and_take_result():
    data = _data()
    runner = TestRunner()
    runner.run(data, [Test.CUMULATIVE_SUMS])
    results = runner.take_result(Test.CUMULATIVE_SUMS)
    assert results == list(cumulative_sums_test(data))
    assert len(results) == 2
    with pytest.raises(TestWasNotRunError) as info:
        runner.take_result(Test.CUMULATIVE_SUMS)
    assert info.value.code == ErrorCode.TEST_WAS_NOT_RUN


def test_take_result_of_test_not_run():
    runner = TestRunner()
    with pytest.raises(TestWasNotRunError):
        runner.take_result(Test.LONGEST_RUN_OF_ONES)


def test_take_result_invalid_value():
    runner = TestRunner()
    with pytest.raises(ValueError):
        runner.take_result(-1)


def test_run_all_stores_successes_and_reports_failures():
    data = _data(200)
    runner = TestRunner()
    with pytest.raises(TestFailedError) as info:
        runner.run_all(data)
    error = info.value
    assert error.code == ErrorCode.TEST_FAILED
    failed = {test for test, _ in error.errors}
    assert Test.RANDOM_EXCURSIONS in failed
    assert Test.NON_OVERLAPPING_TEMPLATE_MATCHING in failed
    assert Test.CUMULATIVE_SUMS not in failed
    assert all(isinstance(err, StsError) for _, err in error.errors)
    assert runner.take_result(Test.LONGEST_RUN_OF_ONES) == [longest_run_of_ones_test(data)]
    with pytest.raises(TestWasNotRunError):
        runner.take_result(Test.RANDOM_EXCURSIONS)


def test_new_run_replaces_results():
    data = _data()
    runner = TestRunner()
    runner.run(data, [Test.CUMULATIVE_SUMS])
    runner.run(data, [Test.LONGEST_RUN_OF_ONES])
    with pytest.raises(TestWasNotRunError):
        runner.take_result(Test.CUMULATIVE_SUMS)
    assert len(runner.take_result(Test.LONGEST_RUN_OF_ONES)) == 1


def test_duplicate_does_not_clear_results():
    data = _data()
    runner = TestRunner()
    runner.run(data, [Test.CUMULATIVE_SUMS])
    with pytest.raises(DuplicateTestError):
        runner.run(data, [Test.LONGEST_RUN_OF_ONES, Test.LONGEST_RUN_OF_ONES])
    assert len(runner.take_result(Test.CUMULATIVE_SUMS)) == 2


def test_non_overlapping_with_custom_templates():
    data = _data(256)
    template_args = NonOverlappingTemplateTestArgs(TemplateArg((1, 2), 2), 8)
    args = RunnerTestArgs(non_overlapping_template=template_args)
    runner = TestRunner()
    runner.run(data, [Test.NON_OVERLAPPING_TEMPLATE_MATCHING], args)
    results = runner.take_result(Test.NON_OVERLAPPING_TEMPLATE_MATCHING)
    assert results == non_overlapping_template_matching_test(data, template_args)
    assert len(results) == 2


def test_non_overlapping_without_templates_fails():
    runner = TestRunner()
    with pytest.raises(TestFailedError) as info:
        runner.run(_data(), [Test.NON_OVERLAPPING_TEMPLATE_MATCHING])
    ((test, error),) = info.value.errors
    assert test is Test.NON_OVERLAPPING_TEMPLATE_MATCHING
    assert isinstance(error, InvalidParameterError)


def test_empty_run_stores_nothing():
    runner = TestRunner()
    runner.run(_data(), [])
    with pytest.raises(TestWasNotRunError):
        runner.take_result(Test.CUMULATIVE_SUMS)