"""Template handling and the Non-overlapping Template Matching Test (No. 7).

The test looks for too many occurrences of given aperiodic m-bit patterns.
The sequence is divided into N blocks, and each block is scanned with an
m-bit window: after a match the window skips past the matched bits,
otherwise it moves on by one bit.

Templates are stored as integers whose m bits, most significant first, form
the pattern. Template files hold every template packed into
ceil(m / 8) bytes, big-endian, padded with zero bits at the end.
"""

from __future__ import annotations

import lzma
import math
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from .bitvec import BitVec
from .core import (
    NON_OVERLAPPING_TEMPLATE_DEFAULT_BLOCK_COUNT,
    InvalidParameterError,
    TestResult,
    check_f64,
    igamc,
)

MIN_TEMPLATE_LENGTH = 2
MAX_TEMPLATE_LENGTH = 21

MIN_INPUT_LENGTH = 2
"""The minimum input length, in bits: one block of the shortest template."""


def _check_template_len(template_len: int) -> None:
    if not MIN_TEMPLATE_LENGTH <= template_len <= MAX_TEMPLATE_LENGTH:
        raise InvalidParameterError(
            f"template length must be within {MIN_TEMPLATE_LENGTH} and "
            f"{MAX_TEMPLATE_LENGTH}, is {template_len}"
        )


@dataclass(frozen=True)
class TemplateArg:
    """The templates to search for and their common length m (2 <= m <= 21)."""

    templates: Tuple[int, ...]
    template_len: int

    def __post_init__(self) -> None:
        _check_template_len(self.template_len)
        templates = tuple(self.templates)
        limit = 1 << self.template_len
        for template in templates:
            if not 0 <= template < limit:
                raise InvalidParameterError(
                    f"template {template} does not fit into {self.template_len} bits"
                )
        object.__setattr__(self, "templates", templates)

    @classmethod
    def from_file(cls, path: Union[str, PathLike], template_len: int) -> "TemplateArg":
        """Load the templates from a template file; files ending in .xz are decompressed."""
        _check_template_len(template_len)
        path = Path(path)
        raw = path.read_bytes()
        if path.suffix == ".xz":
            raw = decompress_template_file(raw)
        return cls(split_template_file(raw, template_len), template_len)


def decompress_template_file(compressed: bytes) -> bytes:
    """Decompress an xz-compressed template file."""
    return lzma.decompress(compressed, format=lzma.FORMAT_XZ)


def split_template_file(raw: bytes, template_len: int) -> Tuple[int, ...]:
    """Split raw template file content into templates of template_len bits.

    A trailing incomplete template is ignored.
    """
    _check_template_len(template_len)
    width = -(-template_len // 8)
    padding = width * 8 - template_len
    usable = len(raw) // width * width
    return tuple(
        int.from_bytes(raw[start:start + width], "big") >> padding
        for start in range(0, usable, width)
    )


def _template_bits(template: int, template_len: int) -> bytes:
    return bytes((template >> shift) & 1 for shift in range(template_len - 1, -1, -1))


@dataclass(frozen=True)
class NonOverlappingTemplateTestArgs:
    """Templates and the number of independent blocks N (1 <= N < 100)."""

    templates: TemplateArg
    count_blocks: int = NON_OVERLAPPING_TEMPLATE_DEFAULT_BLOCK_COUNT

    def __post_init__(self) -> None:
        if not 1 <= self.count_blocks < 100:
            raise InvalidParameterError(
                f"block count must be within 1 and 99, is {self.count_blocks}"
            )


def _blocks(bits: bytes, block_length: int, count: int) -> Iterable[bytes]:
    return (bits[start:start + block_length] for start in range(0, count * block_length, block_length))


def non_overlapping_template_matching_test(
    data: BitVec, test_arg: NonOverlappingTemplateTestArgs
) -> List[TestResult]:
    """Run the test, returning one result per template, in template order."""
    count_blocks = test_arg.count_blocks
    template_len = test_arg.templates.template_len
    block_length = len(data) // count_blocks

    if block_length < template_len:
        raise InvalidParameterError(
            f"the calculated block length {block_length} is smaller than the "
            f"passed template length {template_len}!"
        )

    blocks = list(_blocks(data.bits, block_length, count_blocks))

    power = 2.0 ** template_len
    mean = (block_length - template_len + 1) / power
    variance = block_length * (1.0 / power - (2.0 * template_len - 1.0) / power ** 2)

    results = []
    for template in test_arg.templates.templates:
        pattern = _template_bits(template, template_len)
        # bytes.count scans left to right and resumes after each match,
        # which is exactly the non-overlapping window of the test
        chi = math.fsum((block.count(pattern) - mean) ** 2 / variance for block in blocks)
        check_f64(chi)
        p_value = check_f64(igamc(count_blocks / 2.0, chi / 2.0))
        results.append(TestResult(p_value))
    return results