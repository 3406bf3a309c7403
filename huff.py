"""
Huffman file compressor

How to run:
  python huff.py compress notes.txt                 (writes notes.txt.huff)
  python huff.py compress notes.txt -o out.huff -v  (also prints the code table)
  python huff.py decompress out.huff -o notes.txt
  python huff.py table notes.txt                    (code table only, nothing written)
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

import huffman
from compressor import compress_file, decompress_file

SUFFIX = ".huff"


def printable(symbol: int) -> str:
    if symbol == 0x20:
        return "SP"  # a bare space would vanish in the char column
    ch = chr(symbol)
    if ch.isprintable() and symbol < 128:
        return ch
    return f"\\x{symbol:02x}"

def format_code_table(code_map: Dict[int, str], ft: Dict[int, int]) -> str:
    # Shortest codes first, then by symbol value
    rows = sorted(code_map.items(), key=lambda item: (len(item[1]), item[0]))
    lines = [f"{'symbol':>6}  {'char':<4}  {'count':>10}  code"]
    for symbol, code in rows:
        lines.append(f"{symbol:>6}  {printable(symbol):<4}  {ft.get(symbol, 0):>10}  {code}")
    return "\n".join(lines)

def default_output(input_path: Path, decompress: bool) -> Path:
    if not decompress:
        return input_path.with_name(input_path.name + SUFFIX)
    if input_path.suffix == SUFFIX:
        return input_path.with_suffix("")
    return input_path.with_name(input_path.name + ".out")


def cmd_compress(args: argparse.Namespace) -> int:
    src = Path(args.input)
    dst = Path(args.output) if args.output else default_output(src, decompress=False)
    result = compress_file(src, dst)
    if args.verbose and result.codes:
        print(format_code_table(result.codes, result.frequencies))
        print(f"Payload: {result.payload_bits} bits "
              f"(tree {result.tree_bits} bits, padding {result.padding_tree}/{result.padding_data})")
    print(f"{src} -> {dst}: {result.original_bytes} -> {result.compressed_bytes} bytes "
          f"(ratio {result.compression_ratio:.3f})")
    return 0

def cmd_decompress(args: argparse.Namespace) -> int:
    src = Path(args.input)
    dst = Path(args.output) if args.output else default_output(src, decompress=True)
    written = decompress_file(src, dst)
    print(f"{src} -> {dst}: {written} bytes")
    return 0

def cmd_table(args: argparse.Namespace) -> int:
    data = Path(args.input).read_bytes()
    if not data:
        print("Input is empty, no code table")
        return 0
    ft = huffman.freq_table(data)
    code_map = huffman.generate_huffman_codes(huffman.build_huffman_tree(ft))
    print(format_code_table(code_map, ft))
    print(f"Encoded payload: {huffman.code_cost(code_map, ft)} bits for {len(data)} bytes")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="huff", description="Huffman compressor / decompressor")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("compress", help="Compress a file")
    p.add_argument("input", type=str, help="File to compress")
    p.add_argument("-o", "--output", type=str, default=None, help=f"Output file (default: <input>{SUFFIX})")
    p.add_argument("-v", "--verbose", action="store_true", help="Print the code table")
    p.set_defaults(func=cmd_compress)

    p = sub.add_parser("decompress", help="Decompress a file")
    p.add_argument("input", type=str, help="File to decompress")
    p.add_argument("-o", "--output", type=str, default=None, help=f"Output file (default: <input> without {SUFFIX})")
    p.set_defaults(func=cmd_decompress)

    p = sub.add_parser("table", help="Print the code table for a file")
    p.add_argument("input", type=str, help="File to analyse")
    p.set_defaults(func=cmd_table)

    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if not Path(args.input).is_file():
        print(f"Error: {args.input} does not exist or is not a file", file=sys.stderr)
        return 1

    try:
        return args.func(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
