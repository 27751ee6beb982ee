"""Typed access (signed, unsigned, scaled and IEEE floats) to a word memory map."""

from __future__ import annotations

import struct

from mbmap.memory_map import (
    DEFAULT_MEM_MODE,
    DWORD_MASK,
    WORD_MASK,
    MapError,
    MemMode,
    MemoryMap,
)

_BYTE_MASK = 0xFF


def _to_signed(value: int, bits: int) -> int:
    sign = 1 << (bits - 1)
    value &= (1 << bits) - 1
    return value - (1 << bits) if value & sign else value


class TypedMap(MemoryMap):
    """A word map that reads and writes values as fixed-width numeric types.

    32-bit values occupy two consecutive words, low word first.
    """

    # ---------------------------------------------------------------- reading

    def read_uint8(self, adr: int, mode: MemMode = DEFAULT_MEM_MODE) -> int:
        """Return the low byte of the word at ``adr`` as an unsigned value."""
        return self.read_word(adr, mode) & _BYTE_MASK

    def read_uint16(self, adr: int, mode: MemMode = DEFAULT_MEM_MODE) -> int:
        """Return the word at ``adr`` as an unsigned value."""
        return self.read_word(adr, mode)

    def read_uint32(self, adr: int, mode: MemMode = DEFAULT_MEM_MODE) -> int:
        """Return the two words at ``adr`` as an unsigned 32-bit value."""
        return self.read_dword(adr, mode)

    def read_int8(self, adr: int, mode: MemMode = DEFAULT_MEM_MODE) -> int:
        """Return the low byte of the word at ``adr`` as a signed value."""
        return _to_signed(self.read_word(adr, mode), 8)

    def read_int16(self, adr: int, mode: MemMode = DEFAULT_MEM_MODE) -> int:
        """Return the word at ``adr`` as a signed value."""
        return _to_signed(self.read_word(adr, mode), 16)

    def read_int32(self, adr: int, mode: MemMode = DEFAULT_MEM_MODE) -> int:
        """Return the two words at ``adr`` as a signed 32-bit value."""
        return _to_signed(self.read_dword(adr, mode), 32)

    def read_float16(
        self, adr: int, precision: int = 1, mode: MemMode = DEFAULT_MEM_MODE
    ) -> float:
        """Return the signed word at ``adr`` divided by ``10 ** precision``."""
        return self.read_int16(adr, mode) / 10**precision

    def read_float32(self, adr: int, mode: MemMode = DEFAULT_MEM_MODE) -> float:
        """Return the two words at ``adr`` interpreted as an IEEE single float."""
        raw = self.read_dword(adr, mode)
        return struct.unpack("<f", struct.pack("<I", raw))[0]

    # ---------------------------------------------------------------- writing

    def write_uint8(self, adr: int, val: int, mode: MemMode = DEFAULT_MEM_MODE) -> None:
        """Store ``val`` truncated to 8 bits in the word at ``adr``."""
        self.write_word(adr, val & _BYTE_MASK, mode)

    def write_uint16(self, adr: int, val: int, mode: MemMode = DEFAULT_MEM_MODE) -> None:
        """Store ``val`` truncated to 16 bits at ``adr``."""
        self.write_word(adr, val & WORD_MASK, mode)

    def write_uint32(self, adr: int, val: int, mode: MemMode = DEFAULT_MEM_MODE) -> None:
        """Store ``val`` truncated to 32 bits at ``adr`` and ``adr + 1``."""
        self.write_dword(adr, val & DWORD_MASK, mode)

    def write_int8(self, adr: int, val: int, mode: MemMode = DEFAULT_MEM_MODE) -> None:
        """Store a signed byte, sign-extended to the whole word at ``adr``."""
        self.write_word(adr, _to_signed(val, 8) & WORD_MASK, mode)

    def write_int16(self, adr: int, val: int, mode: MemMode = DEFAULT_MEM_MODE) -> None:
        """Store a signed 16-bit value at ``adr``."""
        self.write_word(adr, val & WORD_MASK, mode)

    def write_int32(self, adr: int, val: int, mode: MemMode = DEFAULT_MEM_MODE) -> None:
        """Store a signed 32-bit value at ``adr`` and ``adr + 1``."""
        self.write_dword(adr, val & DWORD_MASK, mode)

    def write_float16(
        self,
        adr: int,
        val: float,
        precision: int = 1,
        mode: MemMode = DEFAULT_MEM_MODE,
    ) -> None:
        """Store ``val * 10 ** precision``, truncated to a signed 16-bit integer."""
        scaled = int(val * 10**precision)
        if not -0x8000 <= scaled <= 0x7FFF:
            raise MapError(f"{val} with precision {precision} does not fit in 16 bits")
        self.write_word(adr, scaled & WORD_MASK, mode)

    def write_float32(
        self, adr: int, val: float, mode: MemMode = DEFAULT_MEM_MODE
    ) -> None:
        """Store ``val`` as an IEEE single float at ``adr`` and ``adr + 1``."""
        try:
            raw = struct.unpack("<I", struct.pack("<f", val))[0]
        except OverflowError as exc:
            raise MapError(f"{val} does not fit in a 32-bit float") from exc
        self.write_dword(adr, raw, mode)