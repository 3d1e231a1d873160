# scripts/bench_narray_ops_workers.py
"""
Microbench: NArray elementwise / reduction ops (1 worker vs N workers).

What it measures
----------------
- Per-op latency for a selected set of NArray kernels, first with the
  sequential configuration (``num_workers=1``) and then with the chunked
  thread-pool configuration (``num_workers=N``, ``parallel_threshold=1``).
- Uses warmup iterations (not recorded), then repeats with median/p95.

Notes
-----
- The timings include the gather/scatter through strided layouts and the
  result allocation, since those dominate for small arrays.
- ``--strided`` benchmarks transposed views instead of dense inputs.

Example
-------
python -O scripts/bench_narray_ops_workers.py --ops add mul exp sum argmax \
    --shape 1024 1024 --workers 4 --repeats 50 --sanity
"""

from __future__ import annotations

import argparse
import math
import statistics
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence

import numpy as np

import os
import sys

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
SRC_DIR = os.path.join(ROOT_DIR, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from stridegrad import config_context, from_numpy  # noqa: E402


# ----------------------------
# Stats helpers
# ----------------------------
def _median(xs: Sequence[float]) -> float:
    return statistics.median(xs) if xs else float("nan")


def _p95(xs: Sequence[float]) -> float:
    if not xs:
        return float("nan")
    ys = sorted(xs)
    k = int(math.ceil(0.95 * len(ys))) - 1
    k = max(0, min(k, len(ys) - 1))
    return ys[k]


def _fmt(sec: float) -> str:
    if sec < 1e-3:
        return f"{sec * 1e6:8.1f} µs"
    return f"{sec * 1e3:8.3f} ms"


@dataclass
class OpResult:
    name: str
    seq_med: float
    seq_p95: float
    par_med: float
    par_p95: float


# ----------------------------
# Bench core
# ----------------------------
def _time_op(fn: Callable[[], object], *, warmup: int, repeats: int) -> List[float]:
    for _ in range(warmup):
        fn()
    times: List[float] = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        times.append(time.perf_counter() - t0)
    return times


def _build_ops(a, b, alpha: float) -> Dict[str, Callable[[], object]]:
    return {
        "add": lambda: a + b,
        "sub": lambda: a - b,
        "mul": lambda: a * b,
        "div": lambda: a / b,
        "neg": lambda: -a,
        "exp": lambda: a.exp(),
        "tanh": lambda: a.tanh(),
        "mul_scalar": lambda: a * alpha,
        "sum": lambda: a.sum(),
        "max": lambda: a.max(),
        "argmax": lambda: a.argmax(),
    }


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--shape", nargs="+", type=int, default=[512, 512])
    ap.add_argument("--dtype", choices=["float32", "float64"], default="float64")
    ap.add_argument("--workers", type=int, default=4)
    ap.add_argument("--warmup", type=int, default=5)
    ap.add_argument("--repeats", type=int, default=30)
    ap.add_argument("--strided", action="store_true", help="Use transposed views as inputs")
    ap.add_argument(
        "--ops",
        nargs="*",
        default=["add", "mul", "div", "exp", "mul_scalar", "sum", "argmax"],
    )
    ap.add_argument("--alpha", type=float, default=0.125)
    ap.add_argument("--sanity", action="store_true", help="Compare 1-worker and N-worker outputs")
    args = ap.parse_args()

    shape = tuple(int(x) for x in args.shape)
    dtype = np.float32 if args.dtype == "float32" else np.float64

    print("=" * 96)
    print(
        f"NArray ops 1 vs {args.workers} workers | shape={shape} dtype={args.dtype} "
        f"strided={args.strided} warmup={args.warmup} repeats={args.repeats}"
    )
    print("=" * 96)

    rng = np.random.default_rng(0)
    a = from_numpy(rng.standard_normal(size=shape).astype(dtype) * 0.25)
    b = from_numpy(rng.standard_normal(size=shape).astype(dtype) * 0.25 + 1.0)
    if args.strided:
        a, b = a.transpose(), b.transpose()

    ops = _build_ops(a, b, float(args.alpha))
    selected = [op for op in args.ops if op in ops]
    if not selected:
        raise SystemExit(f"No valid ops selected. Choose from: {' '.join(ops)}")

    results: List[OpResult] = []
    for name in selected:
        with config_context(num_workers=1):
            seq_times = _time_op(ops[name], warmup=args.warmup, repeats=args.repeats)
            seq_out = ops[name]().to_numpy() if args.sanity else None
        with config_context(num_workers=args.workers, parallel_threshold=1):
            par_times = _time_op(ops[name], warmup=args.warmup, repeats=args.repeats)
            par_out = ops[name]().to_numpy() if args.sanity else None

        if args.sanity and not np.allclose(seq_out, par_out, rtol=1e-6, atol=1e-9):
            raise AssertionError(f"[sanity] {name} differs between worker counts")

        results.append(
            OpResult(
                name=name,
                seq_med=_median(seq_times),
                seq_p95=_p95(seq_times),
                par_med=_median(par_times),
                par_p95=_p95(par_times),
            )
        )

    print("\nResults (median / p95):")
    print("-" * 96)
    print(
        f"{'op':12s} | {'1w_med':>12s} {'1w_p95':>12s} | "
        f"{'Nw_med':>12s} {'Nw_p95':>12s} | {'speedup':>8s}"
    )
    print("-" * 96)
    for r in results:
        speedup_s = f"{r.seq_med / r.par_med:7.2f}x" if r.par_med > 0 else "   n/a"
        print(
            f"{r.name:12s} | {_fmt(r.seq_med):>12s} {_fmt(r.seq_p95):>12s} | "
            f"{_fmt(r.par_med):>12s} {_fmt(r.par_p95):>12s} | {speedup_s:>8s}"
        )
    print("-" * 96)
    if args.sanity:
        print("Sanity: PASS (all selected ops)")


if __name__ == "__main__":
    main()
