from __future__ import annotations

from typing import BinaryIO, Optional


class BitWriter:
    """
    Packs single bits MSB-first into bytes and writes every completed byte
    to the underlying sink (anything with a write(bytes) method)
    """

    def __init__(self, sink: BinaryIO) -> None:
        self.sink = sink
        self.acc = 0
        self.acc_bits = 0
        self.bits_written = 0

    def __enter__(self) -> "BitWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        flush = getattr(self.sink, "flush", None)
        if flush is not None:
            flush()

    def write_bit(self, bit: bool) -> None:
        self.acc = (self.acc << 1) | (1 if bit else 0)
        self.acc_bits += 1
        self.bits_written += 1
        if self.acc_bits == 8:
            self.sink.write(bytes((self.acc & 0xFF,)))
            self.acc = 0
            self.acc_bits = 0

    def write_byte(self, value: int) -> None:
        for i in range(7, -1, -1):
            self.write_bit((value >> i) & 1)

    def write_bits(self, code: str) -> None:
        # code: '0'/'1' string as stored in the code table
        for ch in code:
            self.write_bit(ch == '1')

    def align(self) -> int:
        """
        Pad the partial byte with zero bits and flush it
        Returns the number of pad bits inserted (0-7)
        """
        if self.acc_bits == 0:
            return 0
        pad_bits = 8 - self.acc_bits
        for _ in range(pad_bits):
            self.write_bit(False)
        return pad_bits


class BitReader:
    """
    Reads bits MSB-first from a byte source, one buffered byte at a time.
    If limit is given, at most that many bytes are taken from the source.
    """

    def __init__(self, source: BinaryIO, limit: Optional[int] = None) -> None:
        self.source = source
        self.limit = limit
        self.byte = 0
        self.mask = 0  # 0 means the buffered byte is used up
        self.bytes_read = 0
        self.bits_read = 0

    def _next_byte(self) -> int:
        if self.limit is not None and self.bytes_read >= self.limit:
            raise EOFError("Bit stream length exceeded")
        chunk = self.source.read(1)
        if not chunk:
            raise EOFError("Bit stream length exceeded")
        self.bytes_read += 1
        return chunk[0]

    def read_bit(self) -> bool:
        if self.mask == 0:
            self.byte = self._next_byte()
            self.mask = 0x80
        bit = (self.byte & self.mask) != 0
        self.mask >>= 1
        self.bits_read += 1
        return bit

    def read_byte(self) -> int:
        value = 0
        for _ in range(8):
            value = (value << 1) | (1 if self.read_bit() else 0)
        return value

    def skip(self, count: int) -> int:
        """
        Reads and discards count bits, returns how many of them were set
        """
        ones = 0
        for _ in range(count):
            if self.read_bit():
                ones += 1
        return ones

    def aligned(self) -> bool:
        return self.mask == 0
