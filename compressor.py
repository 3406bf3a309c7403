"""
Huffman file format:

  [tree, pre-order bits][0-7 zero bits]
  [payload, one code per input byte][0-7 zero bits]
  [1 byte: high nibble = tree pad bits, low nibble = payload pad bits]

Empty input is stored as the single metadata byte 0x00.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Optional

import huffman
from bitio import BitReader, BitWriter
from tree_codec import deserialize_tree, serialize_tree


class DecodeError(ValueError):
    """Compressed input is truncated or malformed"""


@dataclass
class CompressionResult:
    original_bytes: int
    compressed_bytes: int
    padding_tree: int
    padding_data: int
    tree_bits: int
    payload_bits: int
    codes: Dict[int, str] = field(default_factory=dict)
    frequencies: Dict[int, int] = field(default_factory=dict)
    tree: Optional[huffman.HuffmanNode] = None

    @property
    def compression_ratio(self) -> float:
        return self.compressed_bytes / max(1, self.original_bytes)


def compress_stream(data: bytes, sink: BinaryIO) -> CompressionResult:
    """
    Encode data and write the complete file format to sink
    Returns the code table and the bookkeeping needed to report on it
    """
    if not data:
        sink.write(b"\x00")
        return CompressionResult(original_bytes=0, compressed_bytes=1, padding_tree=0,
                                 padding_data=0, tree_bits=0, payload_bits=0)

    ft = huffman.freq_table(data)
    root = huffman.build_huffman_tree(ft)
    code_map = huffman.generate_huffman_codes(root)

    with BitWriter(sink) as writer:
        tree_bits = serialize_tree(root, writer)
        padding_tree = writer.align()

        for b in data:
            code = code_map.get(b)
            if code is None:
                raise RuntimeError(f"no Huffman code for symbol {b}")
            writer.write_bits(code)

        payload_bits = writer.bits_written - tree_bits - padding_tree
        padding_data = writer.align()
        sink.write(bytes(((padding_tree << 4) | padding_data,)))

    return CompressionResult(
        original_bytes=len(data),
        compressed_bytes=writer.bits_written // 8 + 1,
        padding_tree=padding_tree,
        padding_data=padding_data,
        tree_bits=tree_bits,
        payload_bits=payload_bits,
        codes=code_map,
        frequencies=ft,
        tree=root,
    )


def decompress_stream(source: BinaryIO) -> bytes:
    """
    Decode a seekable source holding the complete file format
    Raises DecodeError if the file is truncated or malformed
    """
    size = source.seek(0, io.SEEK_END)
    if size == 0:
        raise DecodeError("missing metadata byte")

    source.seek(size - 1)
    meta = source.read(1)[0]
    padding_tree = meta >> 4
    padding_data = meta & 0x0F
    if padding_tree > 7 or padding_data > 7:
        raise DecodeError(f"invalid metadata byte 0x{meta:02x}")

    if size == 1:
        if meta != 0:
            raise DecodeError(f"invalid metadata byte 0x{meta:02x} for empty stream")
        return b""

    source.seek(0)
    reader = BitReader(source, limit=size - 1) # never read the metadata byte as bits

    try:
        root = deserialize_tree(reader)
    except EOFError as e:
        raise DecodeError("stream ends inside the Huffman tree") from e
    except ValueError as e:
        raise DecodeError(str(e)) from e

    tree_bits = reader.bits_read
    if padding_tree != (-tree_bits) % 8:
        raise DecodeError(f"tree padding is {padding_tree} bits but the tree is {tree_bits} bits long")
    if reader.skip(padding_tree):
        raise DecodeError("tree padding bits are not zero")

    payload_bits = (size - reader.bytes_read - 1) * 8 - padding_data
    if payload_bits <= 0:
        raise DecodeError("stream has no payload bits")

    decoded = bytearray()
    node = root
    try:
        if root.is_leaf():
            # single-symbol stream: every occurrence is the 1-bit code 0
            for _ in range(payload_bits):
                if reader.read_bit():
                    raise DecodeError("single-symbol stream may only contain 0 bits")
                decoded.append(root.symbol)
        else:
            for _ in range(payload_bits):
                node = node.right if reader.read_bit() else node.left
                if node.is_leaf():
                    decoded.append(node.symbol)
                    node = root
        if reader.skip(padding_data):
            raise DecodeError("payload padding bits are not zero")
    except EOFError as e:
        raise DecodeError("stream ends inside the payload") from e

    if node is not root:
        raise DecodeError("payload ends in the middle of a code")

    return bytes(decoded)


def compress(data: bytes) -> bytes:
    out = io.BytesIO()
    compress_stream(data, out)
    return out.getvalue()


def decompress(data: bytes) -> bytes:
    return decompress_stream(io.BytesIO(data))


def compress_file(input_path, output_path) -> CompressionResult:
    with open(input_path, "rb") as f:
        data = f.read()
    with open(output_path, "wb") as out:
        return compress_stream(data, out)


def decompress_file(input_path, output_path) -> int:
    """
    Returns the number of bytes written to output_path
    """
    with open(input_path, "rb") as f:
        data = decompress_stream(f)
    with open(output_path, "wb") as out:
        out.write(data)
    return len(data)
