# randomness_sts

Statistical tests that judge whether a bit sequence looks random, following the
NIST Statistical Test Suite (SP 800-22). Each test takes a sequence of bits and
returns one or more results, each holding a p-value that can be checked against
a significance threshold.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Bit sequences

Tests work on a `BitVec` (`randomness_sts.bitvec`). It can be built in several ways:

```python
from randomness_sts.bitvec import BitVec

bits = BitVec.from_ascii_str("0110 1001 1100")   # characters other than 0 and 1 are ignored
bits = BitVec.from_ascii_str("0110 1001", 4)     # read at most 4 bits
bits = BitVec.from_bytes(b"\x5a\xa5")            # 8 bits per byte, most significant first
bits = BitVec.from_bits([True, False, True, True])
```

`crop` shortens a sequence in place, `copy` returns an independent copy and
`to_bytes` packs the bits back into bytes, returning the full bytes and, when
the length is not a multiple of 8, a zero-padded last byte.

## Running single tests

```python
from randomness_sts.bitvec import BitVec
from randomness_sts.cumulative_sums import cumulative_sums_test

with open("data.bin", "rb") as handle:
    data = BitVec.from_bytes(handle.read())

forward, backward = cumulative_sums_test(data)
print(forward.passed(0.01), backward.passed(0.01))
```

The tests in this package:

- `randomness_sts.longest_run.longest_run_of_ones_test` (at least 128 bits)
- `randomness_sts.cumulative_sums.cumulative_sums_test` (at least 100 bits)
- `randomness_sts.random_excursions.random_excursions_test` (at least 10^6 bits,
  unless called with `enforce_limits=False`)
- `randomness_sts.template_matching.non_overlapping_template_matching_test`
  with `NonOverlappingTemplateTestArgs`
- `randomness_sts.overlapping.overlapping_template_matching_test`
  with `OverlappingTemplateTestArgs` (use `OverlappingTemplateTestArgs.nist_behaviour`
  to reproduce the reference suite's probabilities)

Results are `TestResult` objects (`randomness_sts.core`) with a `p_value`, an
optional `comment` and `passed(threshold)`; the default threshold is 0.01.

Invalid input, such as a sequence that is too short for a test, raises
`InvalidParameterError`; numeric failures raise the other subclasses of
`StsError` found in `randomness_sts.core`. `error_code_for` maps an error to
its `ErrorCode`.

### Templates

The Non-overlapping Template Matching Test needs its templates supplied.
`TemplateArg.from_file(path, template_len)` loads a binary template file: every
template packed into ceil(m / 8) big-endian bytes, padded with zero bits, and
decompressed first if the file name ends in `.xz`. A `TemplateArg` can also be
built directly from a tuple of integers.

```python
from randomness_sts.template_matching import (
    NonOverlappingTemplateTestArgs, TemplateArg, non_overlapping_template_matching_test,
)

args = NonOverlappingTemplateTestArgs(TemplateArg.from_file("template9", 9), 8)
results = non_overlapping_template_matching_test(data, args)
```

## Running several tests at once

```python
from randomness_sts.runner import RunnerTestArgs, TestFailedError, TestRunner, available_tests

runner = TestRunner()
try:
    runner.run_all(data, RunnerTestArgs(non_overlapping_template=args))
except TestFailedError as error:
    print(error.errors)

for test in available_tests():
    try:
        for result in runner.take_result(test):
            print(test.name, result.passed(0.01))
    except LookupError:
        pass
```

`TestRunner.run` takes an explicit selection of tests, as `Test` members or
their numbers. Naming a test twice raises `DuplicateTestError`; if some tests
fail, the others are still run and `TestFailedError` is raised afterwards.
Asking for a result that was not produced raises `TestWasNotRunError`.
`iter_tests` yields each test with its results or its error, one test at a
time, instead of storing them. Without templates in `RunnerTestArgs`, the
Non-overlapping Template Matching Test fails when run.

## Benchmark command

`sts-benchmark` times this package on a directory of one-million-bit test files
(`e.1e6.bin`, `pi.1e6.bin`, `sha1.1e6.bin`, `sqrt2.1e6.bin`, `sqrt3.1e6.bin`)
and, optionally, compares it with a reference executable that prints one JSON
object per line with the keys `test` and `time`:

```
sts-benchmark --dir path/to/test-files
sts-benchmark --dir path/to/test-files --bin path/to/assess --templates path/to/template9 --runs 10
```

Average times per test are printed for each file and overall.

## What this package does not do

- Of the fifteen tests listed in the `Test` enum, only the five above are
  implemented; the frequency, block frequency, runs, binary matrix rank,
  spectral DFT, Maurer's universal, linear complexity, serial, approximate
  entropy and random excursions variant tests are not, and the runner rejects them.
- No template files are bundled, and there is no tool for turning ASCII
  template or data files into the binary format; such files must be supplied
  ready-made.