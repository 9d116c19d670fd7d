from __future__ import annotations

import argparse
import csv
import glob
import math
import os
from dataclasses import dataclass
from typing import Dict, List, Tuple

REQUIRED = {
    "domain_size",
    "ring_size",
    "op",
    "warmup",
    "rep",
    "elapsed_ns",
    "signature_len_bytes",
}


@dataclass(frozen=True)
class Row:
    domain_size: int
    ring_size: int
    op: str
    warmup: int
    rep: int
    elapsed_ns: int
    signature_len_bytes: int


def _read_rows(paths: List[str]) -> List[Row]:
    rows: List[Row] = []
    for p in paths:
        with open(p, "r", newline="") as f:
            r = csv.DictReader(f)
            if not REQUIRED.issubset(set(r.fieldnames or [])):
                missing = REQUIRED - set(r.fieldnames or [])
                raise ValueError(f"{p}: missing columns {sorted(missing)}")

            for d in r:
                rows.append(
                    Row(
                        domain_size=int(d["domain_size"]),
                        ring_size=int(d["ring_size"]),
                        op=str(d["op"]),
                        warmup=int(d["warmup"]),
                        rep=int(d["rep"]),
                        elapsed_ns=int(d["elapsed_ns"]),
                        signature_len_bytes=int(d["signature_len_bytes"]),
                    )
                )
    return rows


def _percentile(sorted_vals: List[int], q: float) -> int:
    """Nearest-rank percentile (q in [0,1])."""
    if not sorted_vals:
        raise ValueError("empty values")
    if q <= 0:
        return sorted_vals[0]
    if q >= 1:
        return sorted_vals[-1]
    k = math.ceil(q * len(sorted_vals)) - 1
    return sorted_vals[max(0, min(k, len(sorted_vals) - 1))]


def _summarize(vals: List[int]) -> Dict[str, int]:
    vals_sorted = sorted(vals)
    n = len(vals_sorted)
    median = (
        vals_sorted[n // 2]
        if (n % 2 == 1)
        else int(round((vals_sorted[n // 2 - 1] + vals_sorted[n // 2]) / 2))
    )
    return {
        "n": n,
        "mean_ns": int(round(sum(vals_sorted) / n)),
        "median_ns": median,
        "p95_ns": _percentile(vals_sorted, 0.95),
        "min_ns": vals_sorted[0],
        "max_ns": vals_sorted[-1],
    }


def main() -> None:
    ap = argparse.ArgumentParser(description="Aggregate raw ring VRF benchmark CSVs into a summary.")
    ap.add_argument("--in", dest="inputs", nargs="*", default=None, help="Input CSV files. If omitted, uses --glob.")
    ap.add_argument("--glob", dest="globpat", default="bench/outputs/*.csv")
    ap.add_argument("--out", dest="out", default="bench/outputs/summary.csv")
    ap.add_argument("--include-warmup", action="store_true", help="Include warmup rows (default: excluded).")
    args = ap.parse_args()

    paths = args.inputs if args.inputs else sorted(glob.glob(args.globpat))
    paths = [p for p in paths if os.path.abspath(p) != os.path.abspath(args.out)]
    if not paths:
        raise SystemExit(f"No input CSVs found (inputs={args.inputs}, glob={args.globpat}).")

    rows = _read_rows(paths)
    if not args.include_warmup:
        rows = [x for x in rows if x.warmup == 0]

    groups: Dict[Tuple[int, int, str], List[Row]] = {}
    for x in rows:
        groups.setdefault((x.domain_size, x.ring_size, x.op), []).append(x)

    out_dir = os.path.dirname(args.out)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(args.out, "w", newline="") as f:
        w = csv.DictWriter(
            f,
            fieldnames=[
                "domain_size",
                "ring_size",
                "op",
                "n",
                "mean_ns",
                "median_ns",
                "p95_ns",
                "min_ns",
                "max_ns",
                "signature_len_bytes",
            ],
        )
        w.writeheader()

        for (domain_size, ring_size, op), rs in sorted(groups.items()):
            stats = _summarize([r.elapsed_ns for r in rs])
            w.writerow(
                {
                    "domain_size": domain_size,
                    "ring_size": ring_size,
                    "op": op,
                    **stats,
                    "signature_len_bytes": max(r.signature_len_bytes for r in rs),
                }
            )

    print(f"Wrote: {args.out}")
    print(f"Inputs: {len(paths)} file(s); rows used: {len(rows)}; groups: {len(groups)}")


if __name__ == "__main__":
    main()
