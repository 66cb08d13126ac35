import os
import stat

import pytest

from randomness_sts.benchmark import (
    average,
    format_statistics,
    main,
    map_reference_name,
    time_own_implementation,
    time_reference_implementation,
)
from randomness_sts.core import Test
from randomness_sts.runner import available_tests


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Frequency(tp.n)", Test.FREQUENCY),
        ("Serial(tp.serialBlockLength,tp.n)", Test.SERIAL),
        ("RandomExcursionsVariant(tp.n)", Test.RANDOM_EXCURSIONS_VARIANT),
        (
            "OverlappingTemplateMatchings(tp.overlappingTemplateBlockLength, tp.n)",
            Test.OVERLAPPING_TEMPLATE_MATCHING,
        ),
    ],
)
def test_map_reference_name_known(name, expected):
    assert map_reference_name(name) is expected


def test_map_reference_name_unknown():
    assert map_reference_name("Frequency") is None


def test_average_empty_is_none():
    assert average([]) is None


def test_average_of_values():
    assert average([1.0, 2.0, 3.0]) == pytest.approx(2.0)


def test_format_statistics_faster():
    text = format_statistics(Test.RUNS, 1.0, 2.0)
    assert "faster" in text
    assert "SLOWER" not in text
    assert "50.00%" in text


def test_format_statistics_slower():
    text = format_statistics(Test.RUNS, 3.0, 1.0)
    assert "SLOWER" in text


def test_format_statistics_own_only():
    text = format_statistics(Test.CUMULATIVE_SUMS, 1.5, None)
    assert len(text.splitlines()) == 2
    assert "reference" not in text


def test_time_own_rejects_wrong_length(tmp_path):
    path = tmp_path / "short.bin"
    path.write_bytes(b"\x00" * 10)
    with pytest.raises(ValueError):
        time_own_implementation(path, None, {})


def test_time_own_records_every_available_test(tmp_path):
    path = tmp_path / "random.bin"
    path.write_bytes(os.urandom(125_000))
    statistics = {}
    time_own_implementation(path, None, statistics)
    assert set(statistics) == set(available_tests())
    for own, reference in statistics.values():
        assert len(own) == 1 and own[0] >= 0.0
        assert reference == []


def _script(tmp_path, body):
    path = tmp_path / "reference.sh"
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


def test_time_reference_parses_output(tmp_path):
    exe = _script(
        tmp_path,
        "echo '{\"test\": \"Frequency(tp.n)\", \"time\": 1.5}'\n"
        "echo '{\"test\": \"Runs(tp.n)\", \"time\": 2.5}'\n",
    )
    statistics = {Test.FREQUENCY: ([3.0], [])}
    time_reference_implementation(tmp_path / "data.bin", exe, statistics)
    assert statistics[Test.FREQUENCY] == ([3.0], [1.5])
    assert statistics[Test.RUNS] == ([], [2.5])


def test_time_reference_failure_raises(tmp_path):
    exe = _script(tmp_path, "echo broken >&2\nexit 1\n")
    with pytest.raises(RuntimeError, match="broken"):
        time_reference_implementation(tmp_path / "data.bin", exe, {})


def test_time_reference_unknown_name_raises(tmp_path):
    exe = _script(tmp_path, "echo '{\"test\": \"Nope\", \"time\": 1.0}'\n")
    with pytest.raises(ValueError):
        time_reference_implementation(tmp_path / "data.bin", exe, {})


def test_main_missing_test_files(tmp_path):
    with pytest.raises(SystemExit) as info:
        main(["-d", str(tmp_path)])
    assert info.value.code == 2


def test_main_runs_over_test_files(tmp_path, capsys):
    for name in ("e.1e6.bin", "pi.1e6.bin", "sha1.1e6.bin", "sqrt2.1e6.bin", "sqrt3.1e6.bin"):
        (tmp_path / name).write_bytes(os.urandom(125_000))
    assert main(["-d", str(tmp_path), "-r", "1"]) == 0
    out = capsys.readouterr().out
    assert out.count("Statistics for test file") == 5
    assert "Overall statistics:" in out
    assert "Longest Run Of Ones" in out