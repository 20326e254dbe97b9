import pytest

from pactools.bitstream import BitReader, BitWriter


def test_read_bytes():
    reader = BitReader(bytes([0xFF, 0x7F, 0x64]))
    assert reader.read_byte() == 0xFF
    assert reader.read_byte() == 0x7F
    assert reader.read_byte() == 0x64


def test_read_bits():
    reader = BitReader(bytes([0b01001101]))
    bits = [reader.read_bit() for _ in range(8)]
    assert bits == [False, True, False, False, True, True, False, True]


def test_read_bytes_offset():
    reader = BitReader(bytes([0b00010101, 0b11100000, 0xFF]))
    reader.seek(0, 3)
    assert reader.read_byte() == 0b10101111
    reader.seek(2, 0)
    assert reader.read_byte() == 0xFF


def test_read_past_end_raises():
    reader = BitReader(b"\x01")
    assert reader.read_byte() == 0x01
    with pytest.raises(EOFError):
        reader.read_byte()


def test_reader_seek_rejects_bad_bit():
    reader = BitReader(b"\x00")
    with pytest.raises(ValueError):
        reader.seek(0, 9)


def test_write_bytes():
    expected = bytes([0xFF, 0x7F, 0x64])
    actual = bytearray([0xFF, 0x7F, 0xCC])
    writer = BitWriter(actual)
    for value in expected:
        writer.write_bits(value, 8)
    assert bytes(actual) == expected


def test_write_byte_partial():
    expected = bytes([0b10101111, 0b01100111, 0b10000101])
    actual = bytearray(3)
    writer = BitWriter(actual)
    writer.write_bits(0x2B, 6)
    writer.write_bits(0x36, 6)
    writer.write_bits(0x1E, 6)
    writer.write_bits(0x05, 6)
    assert bytes(actual) == expected


def test_write_ints():
    actual = bytearray([0xFF, 0x7F, 0xCC, 0xAA])
    writer = BitWriter(actual)
    writer.write_bits(0xFF7F6432, 32)
    assert bytes(actual) == bytes([0xFF, 0x7F, 0x64, 0x32])


def test_write_int_partial():
    actual = bytearray([0xFF, 0x7F, 0xCC, 0x00])
    writer = BitWriter(actual)
    writer.write_bits(0x159E0, 17)
    writer.write_bits(0x530F, 15)
    assert bytes(actual) == bytes([0xAC, 0xF0, 0x53, 0x0F])


def test_write_bits():
    actual = bytearray([0xFF, 0x00])
    writer = BitWriter(actual)
    for bit in [1, 0, 1, 0, 1, 1, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0]:
        writer.write_bit(bool(bit))
    assert bytes(actual) == bytes([0b10101100, 0b11110000])


def test_write_bytes_offset():
    actual = bytearray([0x0F, 0xF0])
    writer = BitWriter(actual)
    writer.seek(0, 4)
    writer.write_bits(0x9A, 8)
    assert bytes(actual) == bytes([0b00001001, 0b10100000])


def test_writer_grows_buffer():
    writer = BitWriter()
    writer.write_bits(0xFF7F6432, 32)
    assert bytes(writer.buffer) == bytes([0xFF, 0x7F, 0x64, 0x32])


def test_writer_tell_tracks_position():
    writer = BitWriter()
    writer.write_bits(0xABC, 12)
    assert writer.tell() == (1, 4)


def test_writer_rejects_negative_bit_count():
    writer = BitWriter()
    with pytest.raises(ValueError):
        writer.write_bits(1, -1)


@pytest.mark.parametrize(
    "fields",
    [
        [(1, 1), (0x2B, 6), (0x159E0, 17), (0x530F, 15)],
        [(0, 3), (0xFF, 8), (0x1, 1), (0xFFFFFFFF, 32)],
        [(0x5, 3), (0x12345, 20), (0x7, 3), (0x0, 9)],
    ],
)
def test_round_trip(fields):
    writer = BitWriter()
    for value, n_bits in fields:
        writer.write_bits(value, n_bits)
    reader = BitReader(bytes(writer.buffer))
    for value, n_bits in fields:
        read = 0
        for _ in range(n_bits):
            read = (read << 1) | int(reader.read_bit())
        assert read == value


def test_bits_then_byte_round_trip():
    writer = BitWriter()
    writer.write_bit(True)
    writer.write_bits(0xA5, 8)
    writer.write_bit(False)
    writer.write_bits(0x3C, 8)
    reader = BitReader(bytes(writer.buffer))
    assert reader.read_bit() is True
    assert reader.read_byte() == 0xA5
    assert reader.read_bit() is False
    assert reader.read_byte() == 0x3C