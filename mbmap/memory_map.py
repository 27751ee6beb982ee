"""Memory map of consecutive Modbus addresses stored as bits or 16-bit words."""

from __future__ import annotations

import enum
import threading
from collections.abc import MutableSequence, Sequence

WORD_BIT_SIZE = 16
DWORD_BIT_SIZE = 32
WORD_MASK = 0xFFFF
DWORD_MASK = 0xFFFFFFFF


class MapType(enum.Enum):
    """Kind of cells a map holds."""

    BIT_MAP = enum.auto()
    WORD_MAP = enum.auto()


class MemMode(enum.Enum):
    """Byte layout of stored values."""

    EMPTY = enum.auto()
    BIG_ENDIAN_MODE = enum.auto()
    LITTLE_ENDIAN_MODE = enum.auto()
    BIG_ENDIAN_BYTE_SWAP_MODE = enum.auto()
    LITTLE_ENDIAN_BYTE_SWAP_MODE = enum.auto()


DEFAULT_MEM_MODE = MemMode.LITTLE_ENDIAN_BYTE_SWAP_MODE


class MapError(Exception):
    """Raised when a map access is invalid or out of range."""


def set_word_bit(word: int, bit_number: int, bit_val: int) -> int:
    """Return ``word`` with bit ``bit_number`` set to ``bit_val`` (truthiness)."""
    if bit_val:
        return (word | (1 << bit_number)) & WORD_MASK
    return word & ~(1 << bit_number) & WORD_MASK


def get_word_bit(word: int, bit_number: int) -> int:
    """Return bit ``bit_number`` of ``word`` as 0 or 1."""
    return (word >> bit_number) & 1


def invert_word_bit(word: int, bit_number: int) -> int:
    """Return ``word`` with bit ``bit_number`` flipped."""
    return (word ^ (1 << bit_number)) & WORD_MASK


class MemoryMap:
    """A map of consecutive addresses holding either bits or 16-bit words.

    Word maps may also be addressed bit by bit: a global bit address ``n``
    refers to bit ``n % 16`` of the word at address ``n // 16``.
    Every access is guarded by a lock so one map can be shared between threads.
    """

    def __init__(self, start_adr: int = 0, quantity: int = 0) -> None:
        self._start_adr = start_adr
        self._quantity = quantity
        self._map_type = MapType.WORD_MAP
        self._mem_mode = DEFAULT_MEM_MODE
        self._bits: MutableSequence[int] | None = None
        self._words: MutableSequence[int] | None = None
        self._bound = False
        self._lock = threading.RLock()

    # ------------------------------------------------------------------ state

    @property
    def start_adr(self) -> int:
        return self._start_adr

    @property
    def quantity(self) -> int:
        return self._quantity

    @property
    def end_adr(self) -> int:
        """Last address that belongs to the map."""
        return self._start_adr + self._quantity - 1

    @property
    def map_type(self) -> MapType:
        return self._map_type

    @property
    def mem_mode(self) -> MemMode:
        return self._mem_mode

    @property
    def is_bound(self) -> bool:
        """True when the map works on storage supplied by the caller."""
        return self._bound

    def bind_map(
        self,
        map_type: MapType,
        start_adr: int,
        quantity: int,
        data: MutableSequence[int],
    ) -> None:
        """Use the caller's mutable sequence ``data`` as the map's storage."""
        if data is None:
            raise MapError("no data to bind")
        if len(data) < quantity:
            raise MapError(f"bound data holds {len(data)} cells, {quantity} needed")
        with self._lock:
            self._map_type = map_type
            self._start_adr = start_adr
            self._quantity = quantity
            if map_type is MapType.BIT_MAP:
                self._bits = data
            else:
                self._words = data
            self._bound = True

    def init_new_memory(
        self,
        map_type: MapType = MapType.WORD_MAP,
        mem_mode: MemMode = DEFAULT_MEM_MODE,
        start_adr: int | None = None,
        quantity: int | None = None,
    ) -> None:
        """Allocate fresh zeroed storage, optionally moving the address window."""
        with self._lock:
            if start_adr is not None:
                self._start_adr = start_adr
            if quantity is not None:
                self._quantity = quantity
            self._map_type = map_type
            self._mem_mode = mem_mode
            self.clear_memory()
            if self._quantity <= 0:
                raise MapError("cannot allocate a map of zero cells")
            if map_type is MapType.BIT_MAP:
                self._bits = [0] * self._quantity
            else:
                self._words = [0] * self._quantity

    def clear_memory(self) -> None:
        """Drop the map's storage."""
        with self._lock:
            self._bits = None
            self._words = None
            self._bound = False

    # ---------------------------------------------------------------- helpers

    def _require_words(self) -> MutableSequence[int]:
        if self._map_type is MapType.BIT_MAP:
            raise MapError("operation needs a word map")
        if self._words is None:
            raise MapError("word memory is not initialised")
        return self._words

    def _require_bits(self) -> MutableSequence[int]:
        if self._map_type is MapType.WORD_MAP:
            raise MapError("operation needs a bit map")
        if self._bits is None:
            raise MapError("bit memory is not initialised")
        return self._bits

    def _offset(self, adr: int, count: int = 1) -> int:
        last = adr + count - 1
        if adr < self._start_adr or last > self.end_adr:
            raise MapError(
                f"addresses {adr}..{last} outside map {self._start_adr}..{self.end_adr}"
            )
        return adr - self._start_adr

    @staticmethod
    def _check_bit_number(bit_number: int) -> None:
        if not 0 <= bit_number < WORD_BIT_SIZE:
            raise MapError(f"bit number {bit_number} outside 0..{WORD_BIT_SIZE - 1}")

    def _check_bit_span(self, first_bit: int, quantity: int) -> None:
        first_word = first_bit // WORD_BIT_SIZE
        last_word = (first_bit + max(quantity, 1) - 1) // WORD_BIT_SIZE
        self._offset(first_word, last_word - first_word + 1)

    def _read_bits_at(self, first_bit: int, quantity: int) -> list[int]:
        words = self._require_words()
        self._check_bit_span(first_bit, quantity)
        result = []
        for pos in range(first_bit, first_bit + quantity):
            word = words[pos // WORD_BIT_SIZE - self._start_adr]
            result.append(get_word_bit(word, pos % WORD_BIT_SIZE))
        return result

    def _write_bits_at(self, first_bit: int, values: Sequence[int]) -> None:
        words = self._require_words()
        self._check_bit_span(first_bit, len(values))
        for pos, value in enumerate(values, start=first_bit):
            offset = pos // WORD_BIT_SIZE - self._start_adr
            words[offset] = set_word_bit(words[offset], pos % WORD_BIT_SIZE, value)

    # ------------------------------------------------------------------ words

    def read_word(self, adr: int, mode: MemMode = DEFAULT_MEM_MODE) -> int:
        """Return the word at ``adr``."""
        with self._lock:
            words = self._require_words()
            return words[self._offset(adr)]

    def read_dword(self, adr: int, mode: MemMode = DEFAULT_MEM_MODE) -> int:
        """Return the 32-bit value kept in ``adr`` (low word) and ``adr + 1``."""
        with self._lock:
            words = self._require_words()
            offset = self._offset(adr, 2)
            return words[offset] | (words[offset + 1] << WORD_BIT_SIZE)

    def read_words(
        self, adr: int, quantity: int, mode: MemMode = DEFAULT_MEM_MODE
    ) -> list[int]:
        """Return ``quantity`` consecutive words starting at ``adr``."""
        if quantity <= 0:
            raise MapError("quantity must be positive")
        with self._lock:
            words = self._require_words()
            offset = self._offset(adr, quantity)
            return list(words[offset : offset + quantity])

    def write_word(self, adr: int, val: int, mode: MemMode = DEFAULT_MEM_MODE) -> None:
        """Store ``val`` (truncated to 16 bits) at ``adr``."""
        with self._lock:
            words = self._require_words()
            words[self._offset(adr)] = val & WORD_MASK

    def write_dword(self, adr: int, val: int, mode: MemMode = DEFAULT_MEM_MODE) -> None:
        """Store a 32-bit value: low word at ``adr``, high word at ``adr + 1``."""
        with self._lock:
            words = self._require_words()
            offset = self._offset(adr, 2)
            val &= DWORD_MASK
            words[offset] = val & WORD_MASK
            words[offset + 1] = val >> WORD_BIT_SIZE

    def write_words(
        self, adr: int, values: Sequence[int], mode: MemMode = DEFAULT_MEM_MODE
    ) -> None:
        """Store ``values`` at consecutive addresses starting at ``adr``."""
        if not values:
            raise MapError("no values to write")
        with self._lock:
            words = self._require_words()
            offset = self._offset(adr, len(values))
            for i, value in enumerate(values):
                words[offset + i] = value & WORD_MASK

    # ------------------------------------------- bits of a word by bit number

    def read_word_nbit(
        self, word_adr: int, bit_number: int, mode: MemMode = DEFAULT_MEM_MODE
    ) -> int:
        """Return bit ``bit_number`` of the word at ``word_adr``."""
        self._check_bit_number(bit_number)
        with self._lock:
            words = self._require_words()
            return get_word_bit(words[self._offset(word_adr)], bit_number)

    def read_word_nbits(
        self,
        word_adr: int,
        bit_number: int,
        quantity: int,
        mode: MemMode = DEFAULT_MEM_MODE,
    ) -> list[int]:
        """Return ``quantity`` bits starting at a bit of a word, running into later words."""
        self._check_bit_number(bit_number)
        with self._lock:
            return self._read_bits_at(word_adr * WORD_BIT_SIZE + bit_number, quantity)

    def write_word_nbit(
        self, word_adr: int, bit_number: int, val: int, mode: MemMode = DEFAULT_MEM_MODE
    ) -> None:
        """Set bit ``bit_number`` of the word at ``word_adr``."""
        self._check_bit_number(bit_number)
        with self._lock:
            words = self._require_words()
            offset = self._offset(word_adr)
            words[offset] = set_word_bit(words[offset], bit_number, val)

    def write_word_nbits(
        self,
        word_adr: int,
        bit_number: int,
        values: Sequence[int],
        mode: MemMode = DEFAULT_MEM_MODE,
    ) -> None:
        """Write ``values`` as bits starting at a bit of a word, running into later words."""
        if values is None:
            raise MapError("no values to write")
        self._check_bit_number(bit_number)
        with self._lock:
            self._write_bits_at(word_adr * WORD_BIT_SIZE + bit_number, values)

    # ------------------------------------ bits of words by global bit address

    def read_word_bit(self, bit_adr: int, mode: MemMode = DEFAULT_MEM_MODE) -> int:
        """Return the bit at global bit address ``bit_adr`` of a word map."""
        with self._lock:
            return self._read_bits_at(bit_adr, 1)[0]

    def read_word_bits(
        self, bit_adr: int, quantity: int, mode: MemMode = DEFAULT_MEM_MODE
    ) -> list[int]:
        """Return ``quantity`` bits from global bit address ``bit_adr`` of a word map."""
        with self._lock:
            return self._read_bits_at(bit_adr, quantity)

    def write_word_bit(
        self, bit_adr: int, val: int, mode: MemMode = DEFAULT_MEM_MODE
    ) -> None:
        """Set the bit at global bit address ``bit_adr`` of a word map."""
        with self._lock:
            self._write_bits_at(bit_adr, [val])

    def write_word_bits(
        self, bit_adr: int, values: Sequence[int], mode: MemMode = DEFAULT_MEM_MODE
    ) -> None:
        """Write ``values`` from global bit address ``bit_adr`` of a word map."""
        if values is None:
            raise MapError("no values to write")
        with self._lock:
            self._write_bits_at(bit_adr, values)

    # ------------------------------------------------------------- bit maps

    def read_bit(self, adr: int, mode: MemMode = DEFAULT_MEM_MODE) -> int:
        """Return the bit at ``adr`` of a bit map."""
        with self._lock:
            bits = self._require_bits()
            return bits[self._offset(adr)]

    def read_bits(
        self, adr: int, quantity: int, mode: MemMode = DEFAULT_MEM_MODE
    ) -> list[int]:
        """Return ``quantity`` bits of a bit map starting at ``adr``."""
        if quantity <= 0:
            raise MapError("quantity must be positive")
        with self._lock:
            bits = self._require_bits()
            offset = self._offset(adr, quantity)
            return list(bits[offset : offset + quantity])

    def write_bit(self, adr: int, val: int, mode: MemMode = DEFAULT_MEM_MODE) -> None:
        """Write a bit; on a word map ``adr`` is a global bit address."""
        bit = 1 if val else 0
        with self._lock:
            if self._map_type is MapType.BIT_MAP:
                bits = self._require_bits()
                bits[self._offset(adr)] = bit
            else:
                self._write_bits_at(adr, [bit])

    def write_bits(
        self, adr: int, values: Sequence[int], mode: MemMode = DEFAULT_MEM_MODE
    ) -> None:
        """Write bits; on a word map ``adr`` is a global bit address."""
        if not values:
            raise MapError("no values to write")
        normalised = [1 if value else 0 for value in values]
        with self._lock:
            if self._map_type is MapType.BIT_MAP:
                bits = self._require_bits()
                offset = self._offset(adr, len(normalised))
                bits[offset : offset + len(normalised)] = normalised
            else:
                self._write_bits_at(adr, normalised)

    # ------------------------------------------------------------- rendering

    def _render(self, width: int, cells: Sequence[int], cell_format) -> str:
        if width <= 0:
            raise ValueError("width must be positive")
        parts = ["    Adr"]
        for i, value in enumerate(cells):
            if i % width == 0:
                parts.append(f"\n{self._start_adr + i:6d} ")
            parts.append(cell_format(value))
        parts.append("\n\n")
        return "".join(parts)

    def format_bit_map(self, width: int) -> str:
        """Render a bit map as a table, ``width`` cells per row."""
        with self._lock:
            if self._quantity <= 0:
                raise MapError("map is empty")
            bits = self._require_bits()
            return self._render(width, bits[: self._quantity], lambda v: f"[{v:2d}]")

    def format_word_map(self, width: int) -> str:
        """Render a word map as a table of decimal values."""
        with self._lock:
            if self._quantity <= 0:
                raise MapError("map is empty")
            words = self._require_words()
            return self._render(width, words[: self._quantity], lambda v: f"[{v:6d}]")

    def format_word_map_bits(self, width: int) -> str:
        """Render a word map as a table of binary values, high bit first."""

        def cell(value: int) -> str:
            text = f"{value & WORD_MASK:016b}"
            return f"[{text[:8]} {text[8:]}]"

        with self._lock:
            if self._quantity <= 0:
                raise MapError("map is empty")
            words = self._require_words()
            return self._render(width, words[: self._quantity], cell)