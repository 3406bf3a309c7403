"""
Benchmark: where the bytes of a compressed file go

Two sweeps over synthetic inputs, every run round-tripped through compressor:
  - alphabet  uniform data with 1, 2, 4 ... 256 distinct symbols at a fixed size,
              shows how the serialized tree (10 bits per symbol, minus one) and
              the two padding fields add to the payload
  - size      fixed datasets at doubling sizes, shows the ratio converging once
              the tree overhead is amortised

Each row also records code_cost, the optimal payload length from the code table;
the packed payload must match it exactly.

Outputs (in --outdir): measurements.csv, summary.csv, overhead_by_alphabet.png,
ratio_by_size.png

How to run:
  python experiments.py --outdir results
  python experiments.py --outdir results --runs 5 --max_kb 4096 --datasets skewed,uniform256
"""

from __future__ import annotations

import argparse
import csv
import io
import random
import statistics
import time
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Callable, Dict, List

import matplotlib.pyplot as plt

import huffman
from compressor import compress_stream, decompress

METADATA_BITS = 8


# Inputs

def uniform(size: int, alphabet: int, seed: int) -> bytes:
    rng = random.Random(seed)
    symbols = rng.sample(range(256), alphabet)
    # every symbol appears at least once so the alphabet size is exact
    head = symbols[:size]
    return bytes(head + [rng.choice(symbols) for _ in range(size - len(head))])

def skewed(size: int, seed: int) -> bytes:
    # exponential ranks: a few symbols dominate, a long tail appears rarely
    rng = random.Random(seed)
    return bytes(min(255, int(rng.expovariate(0.5))) for _ in range(size))

DATASETS: Dict[str, Callable[[int, int], bytes]] = {
    "single_symbol": lambda size, seed: uniform(size, 1, seed),
    "uniform256": lambda size, seed: uniform(size, 256, seed),
    "skewed": skewed,
}


# Measurement

@dataclass
class Measurement:
    sweep: str
    dataset: str
    input_bytes: int
    run: int
    alphabet: int

    tree_bits: int
    padding_bits: int
    payload_bits: int
    optimal_bits: int
    compressed_bytes: int
    ratio: float

    compress_ms: float
    decompress_ms: float
    roundtrip_ok: bool

    @property
    def overhead_bits(self) -> int:
        return self.compressed_bytes * 8 - self.payload_bits


def measure(data: bytes, sweep: str = "", dataset: str = "", run: int = 0) -> Measurement:
    out = io.BytesIO()
    start = time.perf_counter()
    result = compress_stream(data, out)
    packed = out.getvalue()
    middle = time.perf_counter()
    restored = decompress(packed)
    end = time.perf_counter()

    return Measurement(
        sweep=sweep,
        dataset=dataset,
        input_bytes=len(data),
        run=run,
        alphabet=len(result.frequencies),
        tree_bits=result.tree_bits,
        padding_bits=result.padding_tree + result.padding_data,
        payload_bits=result.payload_bits,
        optimal_bits=huffman.code_cost(result.codes, result.frequencies),
        compressed_bytes=len(packed),
        ratio=result.compression_ratio,
        compress_ms=(middle - start) * 1000.0,
        decompress_ms=(end - middle) * 1000.0,
        roundtrip_ok=restored == data,
    )


def alphabet_sweep(size: int, runs: int, seed: int) -> List[Measurement]:
    rows = []
    alphabet = 1
    while alphabet <= 256:
        for run in range(runs):
            data = uniform(size, alphabet, seed + 1000 * alphabet + run)
            rows.append(measure(data, "alphabet", f"uniform{alphabet}", run))
        alphabet *= 2
    return rows

def size_sweep(datasets: List[str], min_size: int, max_size: int, runs: int, seed: int) -> List[Measurement]:
    rows = []
    for name in datasets:
        make = DATASETS.get(name)
        if make is None:
            raise ValueError(f"unknown dataset {name!r}, choose from {', '.join(DATASETS)}")
        size = min_size
        while size <= max_size:
            for run in range(runs):
                rows.append(measure(make(size, seed + size + run), "size", name, run))
            size *= 2
    return rows


# Reports

def write_measurements(path: Path, rows: List[Measurement]) -> None:
    names = [f.name for f in fields(Measurement)] + ["overhead_bits"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=names)
        writer.writeheader()
        for m in rows:
            writer.writerow(dict(asdict(m), overhead_bits=m.overhead_bits))

def summarize(rows: List[Measurement]) -> List[dict]:
    """
    One record per (sweep, dataset, input size), runs averaged
    """
    groups: Dict[tuple, List[Measurement]] = {}
    for m in rows:
        groups.setdefault((m.sweep, m.dataset, m.input_bytes), []).append(m)

    summary = []
    for (sweep, dataset, input_bytes), group in sorted(groups.items()):
        summary.append({
            "sweep": sweep,
            "dataset": dataset,
            "input_bytes": input_bytes,
            "runs": len(group),
            "alphabet": max(m.alphabet for m in group),
            "ratio": statistics.mean(m.ratio for m in group),
            "tree_bits": statistics.mean(m.tree_bits for m in group),
            "padding_bits": statistics.mean(m.padding_bits for m in group),
            "overhead_share": statistics.mean(m.overhead_bits / (m.compressed_bytes * 8) for m in group),
            "compress_ms": statistics.mean(m.compress_ms for m in group),
            "decompress_ms": statistics.mean(m.decompress_ms for m in group),
            "all_optimal": all(m.payload_bits == m.optimal_bits for m in group),
            "all_roundtrip": all(m.roundtrip_ok for m in group),
        })
    return summary

def write_summary(path: Path, summary: List[dict]) -> None:
    if not summary:
        path.write_text("", encoding="utf-8")
        return
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(summary[0]))
        writer.writeheader()
        writer.writerows(summary)


def plot_overhead_by_alphabet(summary: List[dict], path: Path) -> bool:
    records = [s for s in summary if s["sweep"] == "alphabet"]
    if not records:
        return False
    records.sort(key=lambda s: s["alphabet"])
    labels = [str(s["alphabet"]) for s in records]
    tree = [s["tree_bits"] for s in records]
    padding = [s["padding_bits"] for s in records]

    fig, ax = plt.subplots()
    ax.bar(labels, tree, label="tree")
    ax.bar(labels, padding, bottom=tree, label="padding")
    ax.bar(labels, [METADATA_BITS] * len(records), bottom=[t + p for t, p in zip(tree, padding)], label="metadata byte")
    ax.set_xlabel("Distinct symbols")
    ax.set_ylabel("Bits outside the payload")
    ax.set_yscale("log")
    ax.set_title(f"Format overhead, {records[0]['input_bytes']} byte inputs")
    ax.legend()
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return True

def plot_ratio_by_size(summary: List[dict], path: Path) -> bool:
    records = [s for s in summary if s["sweep"] == "size"]
    if not records:
        return False

    fig, ax = plt.subplots()
    for dataset in sorted({s["dataset"] for s in records}):
        points = sorted((s["input_bytes"], s["ratio"]) for s in records if s["dataset"] == dataset)
        ax.plot([p[0] for p in points], [p[1] for p in points], marker="o", label=dataset)
    ax.set_xscale("log", base=2)
    ax.set_xlabel("Input size (bytes)")
    ax.set_ylabel("Compressed / original")
    ax.set_title("Compression ratio by input size")
    ax.legend()
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return True


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Huffman format overhead benchmark")
    ap.add_argument("--outdir", type=str, default="results", help="Directory for CSV files and charts")
    ap.add_argument("--runs", type=int, default=3, help="Runs per configuration")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--alphabet_kb", type=int, default=16, help="Input size for the alphabet sweep, in KB")
    ap.add_argument("--min_kb", type=int, default=1, help="Smallest input of the size sweep, in KB")
    ap.add_argument("--max_kb", type=int, default=1024, help="Largest input of the size sweep, in KB")
    ap.add_argument("--datasets", type=str, default=",".join(DATASETS),
                    help="Comma-separated datasets for the size sweep")
    args = ap.parse_args(argv)

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    runs = max(1, args.runs)

    rows = alphabet_sweep(max(1, args.alphabet_kb) * 1024, runs, args.seed)
    print(f"alphabet sweep: {len(rows)} runs")
    datasets = [name.strip() for name in args.datasets.split(",") if name.strip()]
    size_rows = size_sweep(datasets, max(1, args.min_kb) * 1024, max(1, args.max_kb) * 1024, runs, args.seed)
    print(f"size sweep: {len(size_rows)} runs")
    rows += size_rows

    summary = summarize(rows)
    write_measurements(outdir / "measurements.csv", rows)
    write_summary(outdir / "summary.csv", summary)
    plot_overhead_by_alphabet(summary, outdir / "overhead_by_alphabet.png")
    plot_ratio_by_size(summary, outdir / "ratio_by_size.png")

    failed = [m for m in rows if not m.roundtrip_ok or m.payload_bits != m.optimal_bits]
    print(f"Results written to {outdir.resolve()}")
    if failed:
        print(f"{len(failed)} runs did not round-trip or were not optimal")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
