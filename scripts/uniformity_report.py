#!/usr/bin/env python3
from __future__ import annotations

import argparse
import csv
from pathlib import Path

from dirsample.sampling.random_source import resolve_random_source
from dirsample.sampling.reservoir import filled_slots, reservoir_sample


def build_rows(stream_size: int, sample_size: int, trials: int, seed: int) -> list[dict[str, object]]:
    source = resolve_random_source(seed)
    counts = [0] * stream_size
    for _ in range(trials):
        slots, _seen = reservoir_sample(range(stream_size), sample_size, source)
        for item in filled_slots(slots):
            counts[item] += 1

    expected = min(sample_size, stream_size) / stream_size if stream_size else 0.0
    rows: list[dict[str, object]] = []
    for item, count in enumerate(counts):
        observed = count / trials
        rows.append(
            {
                "item": item,
                "selected": count,
                "trials": trials,
                "observed_rate": observed,
                "expected_rate": expected,
                "abs_error": abs(observed - expected),
            }
        )
    return rows


def write_csv(rows: list[dict[str, object]], out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    fieldnames = ["item", "selected", "trials", "observed_rate", "expected_rate", "abs_error"]
    with out_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Measure per-item selection rates of the reservoir sampler."
    )
    parser.add_argument("--items", default=10, type=int)
    parser.add_argument("--num", default=3, type=int)
    parser.add_argument("--trials", default=100_000, type=int)
    parser.add_argument("--seed", default=0, type=int)
    parser.add_argument("--out", default=Path("analysis/uniformity.csv"), type=Path)
    args = parser.parse_args()

    rows = build_rows(args.items, args.num, args.trials, args.seed)
    write_csv(rows, args.out)
    worst = max((float(r["abs_error"]) for r in rows), default=0.0)
    print(f"Wrote {len(rows)} rows to {args.out} (max abs error {worst:.4f})")


if __name__ == "__main__":
    main()
