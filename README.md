# mbmap

Register memory maps in the style of Modbus devices.

A map covers a run of consecutive addresses, starting at a given address and
holding a given number of entries. It is either a bit map (coils, discrete
inputs) or a word map of 16-bit registers (holding and input registers).
Invalid accesses — an address outside the map, a bit operation on a word map
or the reverse, storage that was never allocated — raise
`mbmap.memory_map.MapError`.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Word and bit maps

`mbmap.memory_map.MemoryMap` holds the memory. Every access takes a lock, so
one map can be shared between threads.

```python
from mbmap.memory_map import MemoryMap, MapType, MapError

m = MemoryMap(1, 100)
m.init_new_memory(MapType.BIT_MAP)
m.write_bit(22, 11)          # any non-zero value stores 1
m.read_bit(22)               # -> 1
m.write_bits(54, [1, 0, 1])
m.read_bits(54, 3)           # -> [1, 0, 1]

m.init_new_memory(MapType.WORD_MAP, start_adr=0, quantity=100)
m.write_word(76, 27)
m.write_dword(61, 999999)    # low word at 61, high word at 62
m.write_words(20, [99, 111, 25, 7, 3])
m.read_words(20, 5)          # -> [99, 111, 25, 7, 3]

try:
    m.write_word(102, 15)
except MapError:
    pass                     # out of range
```

`init_new_memory` allocates fresh zeroed storage and raises `MapError` for a
map of zero entries. `bind_map` makes the map work on a mutable sequence
that you supply instead, and `clear_memory` drops the storage. The
`start_adr`, `quantity`, `end_adr`, `map_type`, `mem_mode` and `is_bound`
properties describe the map.

Most methods take a `mode` argument of type `MemMode`; it is accepted for
every access but does not change how values are laid out: words are stored
as plain integers and 32-bit values always put the low word first.

A word map also gives access to single bits:

- `read_word_nbit` / `write_word_nbit` and `read_word_nbits` /
  `write_word_nbits` take a word address and a bit number (0 is the lowest
  bit); runs carry on into the next word.
- `read_word_bit` / `write_word_bit` and `read_word_bits` / `write_word_bits`
  take a global bit address: word `n` holds bits `n * 16` to `n * 16 + 15`.
- `write_bit` and `write_bits` on a word map also take a global bit address.

`format_bit_map`, `format_word_map` and `format_word_map_bits` return the
map laid out as text, a given number of entries per row.

The module-level helpers `set_word_bit`, `get_word_bit` and `invert_word_bit`
work on a single 16-bit value.

## Typed values

`mbmap.typed_map.TypedMap` is a word map that reads and writes signed and
unsigned 8, 16 and 32 bit integers (`read_int16`, `write_uint32` and so on),
IEEE 754 single-precision floats over two registers (`read_float32`,
`write_float32`), and scaled fixed-point values in one register:
`write_float16(adr, 102.315, 1)` stores 1023 and `read_float16(adr)` gives
102.3. Values that do not fit raise `MapError`.

## Address ranges

`mbmap.ranges.RangeManager` collects `Range` objects (inclusive address
spans) per slave id and function number, merges overlapping or adjacent
ones, and lists them.

```python
from mbmap.ranges import RangeManager

rm = RangeManager()
rm.add_range(1, 3, 10, 20)
rm.add_range_str(1, 3, "21-30")   # merged with 10-20 into 10-30
rm.add_range_str(1, 3, "50")
rm.normalize_ranges()
print("\n".join(rm.info_lines()))
```

`add_range_str` raises `ValueError` for text that is not a range.
`print_info` prints the same lines as `info_lines`, and the `ranges`
property gives the collected ranges by slave id, then by function.

## Demonstration

```
mbmap-demo
```

walks through bit, word, bit-in-word and typed accesses, printing each step
and the map laid out as text. From Python, `mbmap.demo.run_demo(out)` writes
the same report to any text stream and returns the final `TypedMap`.

## What it does not do

The package only keeps register memory in the process. It does not speak
Modbus: there is no RTU or TCP client or server, no framing or CRC, and no
serial or network I/O.