import pytest

from mbmap.memory_map import (
    MapError,
    MapType,
    MemMode,
    MemoryMap,
    get_word_bit,
    invert_word_bit,
    set_word_bit,
)


@pytest.fixture
def bit_map():
    m = MemoryMap(1, 100)
    m.init_new_memory(MapType.BIT_MAP)
    return m


@pytest.fixture
def word_map():
    m = MemoryMap(1, 100)
    m.init_new_memory(MapType.WORD_MAP, MemMode.LITTLE_ENDIAN_BYTE_SWAP_MODE, 0, 100)
    return m


def test_word_bit_helpers_round_trip():
    word = set_word_bit(0, 3, 1)
    assert get_word_bit(word, 3) == 1
    assert set_word_bit(word, 3, 0) == 0
    assert invert_word_bit(invert_word_bit(7335, 5), 5) == 7335
    assert get_word_bit(invert_word_bit(7335, 15), 15) == 1 - get_word_bit(7335, 15)


def test_end_adr_follows_window(word_map):
    assert word_map.start_adr == 0
    assert word_map.end_adr == 99


@pytest.mark.parametrize("adr", [0, 101])
def test_write_bit_out_of_range(bit_map, adr):
    with pytest.raises(MapError):
        bit_map.write_bit(adr, 1)


def test_write_bit_normalises_value(bit_map):
    bit_map.write_bit(22, 11)
    assert bit_map.read_bit(22) == 1


def test_write_read_bits(bit_map):
    bit_map.write_bits(54, [1, 0, 1])
    assert bit_map.read_bits(54, 3) == [1, 0, 1]


def test_read_bits_zero_quantity(bit_map):
    with pytest.raises(MapError):
        bit_map.read_bits(54, 0)


def test_read_bits_past_end(bit_map):
    with pytest.raises(MapError):
        bit_map.read_bits(99, 3)


def test_word_op_on_bit_map_fails(bit_map):
    with pytest.raises(MapError):
        bit_map.read_word(5)


def test_bit_op_on_word_map_fails(word_map):
    with pytest.raises(MapError):
        word_map.read_bit(5)


def test_write_word_out_of_range(word_map):
    with pytest.raises(MapError):
        word_map.write_word(102, 15)


def test_write_read_word(word_map):
    word_map.write_word(76, 27)
    assert word_map.read_word(76) == 27


def test_dword_round_trip_and_layout(word_map):
    word_map.write_dword(61, 999999)
    assert word_map.read_dword(61) == 999999
    assert word_map.read_word(61) | (word_map.read_word(62) << 16) == 999999


def test_dword_low_word_first(word_map):
    word_map.write_dword(10, 0x12345678)
    assert word_map.read_word(10) == 0x5678


def test_dword_at_last_address_fails(word_map):
    with pytest.raises(MapError):
        word_map.write_dword(99, 1)


def test_words_round_trip(word_map):
    values = [99, 111, 25, 7, 3]
    word_map.write_words(20, values)
    assert word_map.read_words(20, 5) == values


def test_write_words_empty(word_map):
    with pytest.raises(MapError):
        word_map.write_words(20, [])


def test_read_word_bits_rebuild_value(word_map):
    word_map.write_word(8, 7335)
    bits = word_map.read_word_bits(128, 16)
    assert sum(bit << i for i, bit in enumerate(bits)) == 7335
    assert [word_map.read_word_bit(128 + i) for i in range(16)] == bits


def test_read_word_bits_crosses_words(word_map):
    word_map.write_word(8, 7335)
    word_map.write_word(9, 7334)
    bits = word_map.read_word_bits(128, 32)
    assert sum(bit << i for i, bit in enumerate(bits[16:])) == 7334


def test_write_word_bits_round_trip(word_map):
    values = [1, 1, 0, 0, 1, 1]
    word_map.write_word_bits(863, values)
    assert word_map.read_word_bits(863, 6) == values
    assert word_map.read_word_nbit(53, 15) == 1


def test_write_word_bit_sets_bit(word_map):
    word_map.write_word_bit(860, 1)
    assert word_map.read_word_nbit(53, 12) == 1


def test_word_bits_outside_map(word_map):
    with pytest.raises(MapError):
        word_map.read_word_bits(99 * 16 + 10, 10)


def test_nbits_match_global_bits(word_map):
    word_map.write_word(8, 7335)
    word_map.write_word(9, 7334)
    assert word_map.read_word_nbits(8, 15, 32) == word_map.read_word_bits(8 * 16 + 15, 32)


def test_write_word_nbit_and_nbits(word_map):
    word_map.write_word_nbit(10, 2, 1)
    assert word_map.read_word_nbit(10, 2) == 1
    values = [1] * 32
    values[1:4] = [0, 0, 0]
    word_map.write_word_nbits(11, 6, values)
    assert word_map.read_word_nbits(11, 6, 32) == values


@pytest.mark.parametrize("bit_number", [16, 20])
def test_bit_number_out_of_range(word_map, bit_number):
    with pytest.raises(MapError):
        word_map.read_word_nbit(8, bit_number)


def test_write_bit_on_word_map_uses_bit_address(word_map):
    word_map.write_bit(17, 5)
    assert word_map.read_word_nbit(1, 1) == 1
    word_map.write_bits(32, [1, 0, 1])
    assert word_map.read_word_bits(32, 3) == [1, 0, 1]


def test_init_zero_quantity_fails():
    m = MemoryMap(0, 0)
    with pytest.raises(MapError):
        m.init_new_memory()


def test_clear_memory_blocks_access(word_map):
    word_map.clear_memory()
    with pytest.raises(MapError):
        word_map.read_word(1)


def test_bind_map_shares_storage():
    data = [0] * 4
    m = MemoryMap()
    m.bind_map(MapType.WORD_MAP, 10, 4, data)
    m.write_word(12, 7)
    assert data[2] == 7
    assert m.is_bound


def test_bind_map_without_data():
    with pytest.raises(MapError):
        MemoryMap().bind_map(MapType.WORD_MAP, 0, 4, None)


def test_format_bit_map():
    m = MemoryMap(1, 3)
    m.init_new_memory(MapType.BIT_MAP)
    m.write_bit(2, 1)
    assert m.format_bit_map(10) == "    Adr\n     1 [ 0][ 1][ 0]\n\n"


def test_format_word_map_rows(word_map):
    text = word_map.format_word_map(10)
    assert text.startswith("    Adr\n")
    assert text.count("\n") == 10 + 2
    assert text.count("[") == 100


def test_format_word_map_bits(word_map):
    word_map.write_word(0, 1)
    text = word_map.format_word_map_bits(5)
    assert "[00000000 00000001]" in text


def test_format_wrong_type(bit_map):
    with pytest.raises(MapError):
        bit_map.format_word_map(5)


def test_format_zero_width(word_map):
    with pytest.raises(ValueError):
        word_map.format_word_map(0)