import io

import pytest

from bitio import BitReader, BitWriter


def test_write_bits_msb_first_and_align():
    out = io.BytesIO()
    w = BitWriter(out)
    for bit in (1, 0, 1):
        w.write_bit(bit)
    assert out.getvalue() == b""  # partial byte stays buffered
    assert w.align() == 5
    assert out.getvalue() == b"\xa0"
    assert w.bits_written == 8


def test_align_on_boundary_adds_nothing():
    out = io.BytesIO()
    w = BitWriter(out)
    assert w.align() == 0
    w.write_byte(0x5A)
    assert w.align() == 0
    assert out.getvalue() == b"\x5a"


def test_write_byte_across_boundary():
    out = io.BytesIO()
    w = BitWriter(out)
    w.write_bit(True)
    w.write_byte(0xFF)
    assert w.align() == 7
    assert out.getvalue() == b"\xff\x80"


def test_write_code_string():
    out = io.BytesIO()
    with BitWriter(out) as w:
        w.write_bits("0001111")
        w.write_bits("10")
        assert w.align() == 7
    assert out.getvalue() == b"\x1f\x00"


def test_read_bits_and_bytes():
    r = BitReader(io.BytesIO(b"\xa5\x3c"))
    assert [r.read_bit() for _ in range(8)] == [True, False, True, False, False, True, False, True]
    assert r.aligned()
    assert r.read_byte() == 0x3C
    assert r.bytes_read == 2
    assert r.bits_read == 16


def test_read_past_end_raises_eof():
    r = BitReader(io.BytesIO(b"\x01"))
    r.read_byte()
    with pytest.raises(EOFError):
        r.read_bit()


def test_limit_stops_before_trailing_bytes():
    r = BitReader(io.BytesIO(b"\x00\xff"), limit=1)
    assert r.read_byte() == 0
    with pytest.raises(EOFError):
        r.read_bit()


def test_skip_counts_set_bits():
    r = BitReader(io.BytesIO(b"\x81"))
    assert r.skip(4) == 1
    assert not r.aligned()
    assert r.skip(4) == 1
