import io

import pytest

from mbmap.demo import main, run_demo
from mbmap.memory_map import MapType


@pytest.fixture()
def demo():
    out = io.StringIO()
    m = run_demo(out)
    return m, out.getvalue()


def test_bit_map_out_of_range_writes_are_reported(demo):
    _, text = demo
    assert "Map: Error writeBit 0 adr out of range" in text
    assert "Map: Error writeBit 101 adr out of range" in text


def test_bit_read_back_is_normalised_to_one(demo):
    _, text = demo
    assert "Map: readBit 22 adr, value 1" in text


def test_bits_read_back_match_written(demo):
    _, text = demo
    lines = text.splitlines()
    assert "Map: Bit adr 54 value 1" in lines
    assert "Map: Bit adr 55 value 0" in lines
    assert "Map: Bit adr 56 value 1" in lines


def test_word_map_reports(demo):
    _, text = demo
    assert "Map: writeWord 0 adr, value 33" in text
    assert "Map: Error writeWord 102 adr out of range" in text
    assert "Map: Word adr 76 value 27" in text
    assert "Map: Word adr 61 value 999999" in text


def test_final_map_is_word_map_with_written_words(demo):
    m, _ = demo
    assert m.map_type is MapType.WORD_MAP
    assert m.start_adr == 0
    assert m.quantity == 100
    assert m.read_word(76) == 27
    assert m.read_dword(61) == 999999
    assert m.read_words(20, 5) == [99, 111, 25, 7, 3]


def test_final_map_typed_values(demo):
    m, _ = demo
    assert m.read_uint8(0) == 231
    assert m.read_uint16(1) == 63123
    assert m.read_uint32(2) == 4121113
    assert m.read_int8(30) == -21
    assert m.read_int16(31) == -29132
    assert m.read_int32(32) == -4121113
    assert m.read_float32(86) == pytest.approx(72124.9214, rel=1e-6)


def test_float16_report_matches_map(demo):
    m, text = demo
    line = next(
        l for l in text.splitlines() if l.startswith("Map: readFloat16 adr 85")
    )
    reported = float(line.rsplit("Val ", 1)[1])
    assert reported == pytest.approx(m.read_float16(85))
    assert reported == pytest.approx(102.315, abs=0.1)


def test_float32_report_precision(demo):
    _, text = demo
    line = next(
        l for l in text.splitlines() if l.startswith("Map: readFloat32 adr 86. Val ")
    )
    value_text = line.rsplit("Val ", 1)[1]
    assert len(value_text.split(".")[1]) == 4
    assert float(value_text) == pytest.approx(72124.9214, rel=1e-6)


def test_word_bit_writes_in_final_map(demo):
    m, _ = demo
    assert m.read_word_nbit(8, 0) == 0
    assert m.read_word_nbit(10, 0) == 1
    assert m.read_word_nbit(10, 2) == 1
    expected = [1] * 32
    expected[1:4] = [0, 0, 0]
    assert m.read_word_nbits(11, 6, 32) == expected
    assert m.read_word_bits(863, 6) == [1, 1, 0, 0, 1, 1]
    assert m.read_word_bit(860) == 1


def test_bit_group_lines_have_four_groups(demo):
    _, text = demo
    prefix = "Map: readWordBits adr bit 128 (adr word 8), quantity 32 value 7335: "
    line = next(l for l in text.splitlines() if l.startswith(prefix))
    groups = line[len(prefix):].split()
    assert len(groups) == 4
    assert all(len(g) == 8 and set(g) <= {"0", "1"} for g in groups)


def test_read_word_bits_consistent_with_single_bit_reads(demo):
    _, text = demo
    lines = text.splitlines()
    singles = [
        l.rsplit(" ", 1)[1]
        for l in lines
        if l.startswith("Map: readWordBit ") and "adr, value" in l
    ]
    prefix = "Map: readWordBits adr bit 128 (adr word 8), quantity 32 value 7335: "
    grouped = next(l for l in lines if l.startswith(prefix))
    digits = "".join(grouped[len(prefix):].split())
    assert len(singles) == 16
    assert "".join(singles) == digits[:16]


def test_word_map_bits_render_present(demo):
    _, text = demo
    assert "0001 1100 1010 0111" in text
    assert text.count("    Adr") == 9


def test_main_prints_report(capsys):
    assert main([]) == 0
    captured = capsys.readouterr().out
    assert "Init bit map start adr 1, quantity 100" in captured
    assert "Map: readInt32 adr 32. Val -4121113" in captured


def test_main_rejects_unknown_option():
    with pytest.raises(SystemExit):
        main(["--bogus"])