"""A sequence of bits to run the statistical tests on."""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Optional, Tuple, Union

_NON_BINARY = re.compile(r"[^01]")
_ASCII_TO_BIT = bytes.maketrans(b"01", b"\x00\x01")
_BIT_TO_ASCII = bytes.maketrans(b"\x00\x01", b"01")
_BYTE_BITS = tuple(bytes((byte >> shift) & 1 for shift in range(7, -1, -1)) for byte in range(256))


class BitVec:
    """An ordered list of bits, each stored as 0 or 1."""

    __slots__ = ("_bits",)

    def __init__(self, bits: Iterable[object] = ()) -> None:
        self._bits = bytearray(1 if bit else 0 for bit in bits)

    @classmethod
    def _from_raw(cls, raw: Union[bytes, bytearray]) -> "BitVec":
        instance = cls.__new__(cls)
        instance._bits = bytearray(raw)
        return instance

    @classmethod
    def from_ascii_str(cls, text: str, max_length: Optional[int] = None) -> "BitVec":
        """Read "0" and "1" characters from text, ignoring all others.

        At most max_length bits are read when it is given.
        """
        if max_length is not None and max_length < 0:
            raise ValueError("max_length must not be negative")
        digits = _NON_BINARY.sub("", text)
        if max_length is not None:
            digits = digits[:max_length]
        return cls._from_raw(digits.encode("ascii").translate(_ASCII_TO_BIT))

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview]) -> "BitVec":
        """Unpack each byte into 8 bits, most significant bit first."""
        return cls._from_raw(b"".join(_BYTE_BITS[byte] for byte in bytes(data)))

    @classmethod
    def from_bits(cls, bits: Iterable[object]) -> "BitVec":
        """Build a sequence with one bit per element, by truth value."""
        return cls(bits)

    @property
    def bits(self) -> bytes:
        """The bits as a bytes object holding one 0 or 1 per element."""
        return bytes(self._bits)

    def crop(self, new_bit_len: int) -> None:
        """Shorten the sequence to new_bit_len bits; longer lengths change nothing."""
        if new_bit_len < 0:
            raise ValueError("new_bit_len must not be negative")
        if new_bit_len < len(self._bits):
            del self._bits[new_bit_len:]

    def to_bytes(self) -> Tuple[bytes, Optional[int]]:
        """Pack the bits, most significant first.

        Returns the full bytes and, if the length is not a multiple of 8, a
        last byte holding the remaining bits padded with zeros.
        """
        full_len = len(self._bits) // 8 * 8
        full = self._pack(self._bits[:full_len])
        rest = self._bits[full_len:]
        remainder = None
        if rest:
            remainder = int(bytes(rest).translate(_BIT_TO_ASCII), 2) << (8 - len(rest))
        return full, remainder

    @staticmethod
    def _pack(bits: bytearray) -> bytes:
        if not bits:
            return b""
        value = int(bytes(bits).translate(_BIT_TO_ASCII), 2)
        return value.to_bytes(len(bits) // 8, "big")

    def count_ones(self) -> int:
        """The number of bits set to 1."""
        return self._bits.count(1)

    def copy(self) -> "BitVec":
        """An independent copy of this sequence."""
        return self._from_raw(self._bits)

    __copy__ = copy

    def __len__(self) -> int:
        return len(self._bits)

    def __iter__(self) -> Iterator[int]:
        return iter(self._bits)

    def __getitem__(self, index: Union[int, slice]) -> Union[int, "BitVec"]:
        if isinstance(index, slice):
            return self._from_raw(self._bits[index])
        return self._bits[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitVec):
            return NotImplemented
        return self._bits == other._bits

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        preview = self._bits[:32].translate(_BIT_TO_ASCII).decode("ascii")
        suffix = "..." if len(self._bits) > 32 else ""
        return f"BitVec(len={len(self._bits)}, bits={preview}{suffix})"