"""Walk-through of bit maps, word maps and typed access, printed as a report."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from typing import Any, TextIO, TypeVar

from mbmap.memory_map import MapError, MapType
from mbmap.typed_map import TypedMap

_T = TypeVar("_T")

_BITS_7335 = "0001 1100 1010 0111"


def _attempt(
    out: TextIO,
    ok_message: str,
    error_message: str,
    action: Callable[..., _T],
    *args: Any,
) -> tuple[bool, _T | None]:
    """Run ``action``; report success or failure and return its outcome."""
    try:
        result = action(*args)
    except MapError:
        print(error_message, file=out)
        return False, None
    print(ok_message, file=out)
    return True, result


def _bit_groups(bits: Sequence[int]) -> str:
    """Render bits in groups of eight, each group preceded by a space."""
    digits = "".join(str(bit) for bit in bits)
    return "".join(f" {digits[i:i + 8]}" for i in range(0, len(digits), 8))


def _bit_map_section(out: TextIO, m: TypedMap) -> None:
    print("                  Init bit map start adr 1, quantity 100", file=out)
    out.write(m.format_bit_map(10))

    _attempt(
        out,
        "Map: writeBit 0 adr bit 1",
        "Map: Error writeBit 0 adr out of range",
        m.write_bit, 0, 1,
    )
    _attempt(
        out,
        "Map: writeBit 101 adr bit 1",
        "Map: Error writeBit 101 adr out of range",
        m.write_bit, 101, 1,
    )
    _attempt(
        out,
        "Map: writeBit 22 adr val 11 > 0 (means bit 1)",
        "Map: Error writeBit 22 adr",
        m.write_bit, 22, 11,
    )
    try:
        bit_val = m.read_bit(22)
    except MapError:
        print("Map: Error readBit 22 adr", file=out)
    else:
        print(f"Map: readBit 22 adr, value {bit_val}", file=out)

    write_bit_vals = [1, 0, 1]
    _attempt(
        out,
        "Map: writeBits 54 adr, quantity 3, array values",
        "Map: Error writeBits 54 adr",
        m.write_bits, 54, write_bit_vals,
    )
    ok, read_bit_vals = _attempt(
        out,
        "Map: readBits 54, quantity 3, array values",
        "Map: Error readBits 54 adr",
        m.read_bits, 54, len(write_bit_vals),
    )
    if ok:
        for adr, value in enumerate(read_bit_vals, start=54):
            print(f"Map: Bit adr {adr} value {value}", file=out)

    print("                  Writed bit map (adr 22, 54-57)", file=out)
    out.write(m.format_bit_map(10))


def _word_map_section(out: TextIO, m: TypedMap) -> None:
    m.init_new_memory(MapType.WORD_MAP, start_adr=0, quantity=100)

    print("                  Init word map start adr 0, quantity 100", file=out)
    out.write(m.format_word_map(10))

    _attempt(
        out,
        "Map: writeWord 0 adr, value 33",
        "Map: Error writeWord 0 adr out of range",
        m.write_word, 0, 33,
    )
    _attempt(
        out,
        "Map: writeWord 102 adr value 15",
        "Map: Error writeWord 102 adr out of range",
        m.write_word, 102, 15,
    )
    _attempt(
        out,
        "Map: writeWord 76 adr value 27",
        "Map: Error writeWord 76 adr",
        m.write_word, 76, 27,
    )
    ok, word_val = _attempt(
        out, "Map: readWord 76 adr", "Map: Error readWord 76 adr", m.read_word, 76
    )
    if ok:
        print(f"Map: Word adr 76 value {word_val}", file=out)

    _attempt(
        out,
        "Map: writeDWord 61 adr value 999999",
        "Map: Error writeDWord 61 adr",
        m.write_dword, 61, 999999,
    )
    ok, dword_val = _attempt(
        out, "Map: readDWord 61 adr", "Map: Error readDWord 61 adr", m.read_dword, 61
    )
    if ok:
        print(f"Map: Word adr 61 value {dword_val}", file=out)

    write_word_vals = [99, 111, 25, 7, 3]
    _attempt(
        out,
        "Map: writeWords 20 adr quantity 5 values {99, 111, 25, 7, 3}",
        "Map: Error writeWords 20 adr",
        m.write_words, 20, write_word_vals,
    )
    ok, read_word_vals = _attempt(
        out,
        "Map: readWords adr 20 quantity 5",
        "Map: Error readWords 20 adr",
        m.read_words, 20, len(write_word_vals),
    )
    if ok:
        for adr, value in enumerate(read_word_vals, start=20):
            print(f"Map: Word adr {adr} value {value}", file=out)

    print(
        "                  Writed word map (76, 61, 62, 20, 21, 22, 23, 24)",
        file=out,
    )
    out.write(m.format_word_map(10))


def _word_bits_section(out: TextIO, m: TypedMap) -> None:
    _attempt(
        out,
        "Map: writeWord 8 adr value 7335",
        "Map: Error writeWord 8 adr",
        m.write_word, 8, 7335,
    )
    _attempt(
        out,
        "Map: writeWord word 9, val 7334",
        "Map: Error writeWord word 9, val 7334",
        m.write_word, 9, 7334,
    )

    # Word 8 starts at global bit address 8 * 16 = 128.
    print(
        f"Map: word 7335 = {_BITS_7335}, read this word with readWordBit and readWordBits",
        file=out,
    )
    wbit_adr = 128
    for bit_adr in range(wbit_adr, wbit_adr + 16):
        try:
            value = m.read_word_bit(bit_adr)
        except MapError:
            print(f"Map: Error readWordBit {bit_adr} adr", file=out)
        else:
            print(f"Map: readWordBit {bit_adr} adr, value {value}", file=out)

    ok, wbit_vals = _attempt(
        out,
        f"Map: readWordBits {wbit_adr} adr, quantity 32",
        f"Map: Error readWordBits {wbit_adr} adr",
        m.read_word_bits, wbit_adr, 32,
    )
    if ok:
        print(
            "Map: readWordBits adr bit 128 (adr word 8), quantity 32 value 7335: "
            + _bit_groups(wbit_vals),
            file=out,
        )
    out.write(m.format_word_map_bits(5))

    # Bit address 863 is bit 15 of word 53.
    _attempt(
        out,
        "Map: writeWordBits 863 adr (53 word adr 15 bit pos), quantity 6, vals 1,1,0,0,1,1",
        "Map: Error writeWordBits 863 adr (53 word adr 15 bit pos)",
        m.write_word_bits, 863, [1, 1, 0, 0, 1, 1],
    )
    _attempt(
        out,
        "Map: writeWordBit 860 adr (53 word adr 12 bit pos), val 1",
        "Map: Error writeWordBit 860 adr (53 word adr 12 bit pos)",
        m.write_word_bit, 860, 1,
    )
    out.write(m.format_word_map_bits(5))


def _word_nbits_section(out: TextIO, m: TypedMap) -> None:
    for bit_number in range(16):
        try:
            value = m.read_word_nbit(8, bit_number)
        except MapError:
            print(f"Map: Error readWordNBit 8, number bit {bit_number}", file=out)
        else:
            print(
                f"Map: readWordNBit adr 8, number bit {bit_number}: {value}", file=out
            )

    ok, wbits_vals = _attempt(
        out,
        "Map: readWordNBits 8, number bit 15, quantity 32 ",
        "Map: Error readWordNBits 8, number bit 15, quantity 32 ",
        m.read_word_nbits, 8, 15, 32,
    )
    if ok:
        print("Map: readWordNBits Word 7335 bits: " + _bit_groups(wbits_vals), file=out)

    for word_adr, bit_number, val in ((8, 0, 0), (10, 0, 1), (10, 2, 1)):
        _attempt(
            out,
            f"Map: writeWordNBit {word_adr}, number bit {bit_number}, val {val}",
            f"Map: Error writeWordNBit {word_adr}, number bit {bit_number}, val {val}",
            m.write_word_nbit, word_adr, bit_number, val,
        )

    write_wbits_vals = [1] * 32
    write_wbits_vals[1:4] = [0, 0, 0]
    _attempt(
        out,
        "Map: writeWordNBits 11, number bit 6, quantity 32",
        "Map: Error writeWordNBits 11, number bit 6, quantity 32",
        m.write_word_nbits, 11, 6, write_wbits_vals,
    )
    out.write(m.format_word_map_bits(5))


def _typed_section(out: TextIO, m: TypedMap) -> None:
    m.write_uint8(0, 231)
    print("Map: writeUInt8 adr 0, val 231", file=out)
    print(f"Map: readUInt8 adr 0. Val {m.read_uint8(0)}", file=out)

    m.write_uint16(1, 63123)
    print("Map: writeUInt16 adr 1, val 63123", file=out)
    print(f"Map: readUInt16 adr 1. Val {m.read_uint16(1)}", file=out)

    m.write_uint32(2, 4121113)
    print("Map: writeUInt32 adr 2, val 4121113", file=out)
    print(f"Map: readUInt32 adr 2. Val {m.read_uint32(2)}", file=out)

    m.write_int8(30, -21)
    print("Map: writeInt8 adr 30, val -21", file=out)
    print(f"Map: readInt8 adr 30. Val {m.read_int8(30)}", file=out)

    m.write_int16(31, -29132)
    print("Map: writeInt16 adr 31, val -29132", file=out)
    print(f"Map: readInt16 adr 31. Val {m.read_int16(31)}", file=out)

    m.write_int32(32, -4121113)
    print("Map: writeInt32 adr 32, val -4121113", file=out)
    print(f"Map: readInt32 adr 32. Val {m.read_int32(32)}", file=out)

    m.write_float16(85, 102.315, 1)
    print("Map: writeFloat16 adr 85, val 102.315, precision 1", file=out)
    print(
        f"Map: readFloat16 adr 85, precision 1. Val {m.read_float16(85):.6g}", file=out
    )

    m.write_float32(86, 72124.9214)
    print("Map: writeFloat32 adr 86, val 72124.9214", file=out)
    print(f"Map: readFloat32 adr 86. Val {m.read_float32(86):.4f}", file=out)

    out.write(m.format_word_map(5))
    out.write(m.format_word_map_bits(5))


def run_demo(out: TextIO | None = None) -> TypedMap:
    """Exercise a map step by step, writing the report to ``out``.

    Returns the map in its final state.
    """
    if out is None:
        out = sys.stdout
    m = TypedMap(1, 100)
    m.init_new_memory(MapType.BIT_MAP)
    _bit_map_section(out, m)
    _word_map_section(out, m)
    _word_bits_section(out, m)
    _word_nbits_section(out, m)
    _typed_section(out, m)
    return m


def main(argv: Sequence[str] | None = None) -> int:
    """Print the memory map walk-through to standard output."""
    parser = argparse.ArgumentParser(
        prog="mbmap-demo",
        description="Show reading and writing of bit and word memory maps.",
    )
    parser.parse_args(argv)
    run_demo(sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())