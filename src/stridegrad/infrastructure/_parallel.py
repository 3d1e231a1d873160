"""
Chunked execution helpers for elementwise and reduction kernels.

Kernels describe their work as a function over a half-open range
``[start, stop)`` of the C-order element sequence. `map_chunks` splits the
sequence into contiguous chunks, runs them on a thread pool when the
configuration allows it, and returns the per-chunk results in chunk order.

Chunks never overlap, so each output slot (or each partial accumulator) is
owned by exactly one worker. Combining partial results is left to the caller
and must walk the returned list in order; this keeps first-occurrence
tie-breaks identical to the sequential computation.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, TypeVar

from ._config import get_config
from ._logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


def chunk_bounds(n: int, chunks: int) -> list[tuple[int, int]]:
    """Split ``range(n)`` into at most `chunks` contiguous, non-empty ranges."""
    chunks = max(1, min(int(chunks), int(n)))
    if n <= 0:
        return [(0, 0)]
    base, extra = divmod(n, chunks)
    bounds = []
    start = 0
    for i in range(chunks):
        stop = start + base + (1 if i < extra else 0)
        bounds.append((start, stop))
        start = stop
    return bounds


def map_chunks(
    fn: Callable[[int, int], T],
    n: int,
    *,
    workers: Optional[int] = None,
    threshold: Optional[int] = None,
) -> list[T]:
    """
    Run ``fn(start, stop)`` over chunks of ``range(n)``.

    Parameters
    ----------
    fn : Callable[[int, int], T]
        Work function for one chunk.
    n : int
        Total number of elements.
    workers : Optional[int]
        Worker count; defaults to `EngineConfig.num_workers`.
    threshold : Optional[int]
        Minimum `n` before splitting; defaults to
        `EngineConfig.parallel_threshold`.

    Returns
    -------
    list[T]
        One result per chunk, in chunk order.
    """
    cfg = get_config()
    workers = cfg.num_workers if workers is None else int(workers)
    threshold = cfg.parallel_threshold if threshold is None else int(threshold)

    if workers <= 1 or n < threshold:
        return [fn(0, n)]

    bounds = chunk_bounds(n, workers)
    logger.debug("splitting %d elements into %d chunks", n, len(bounds))
    with ThreadPoolExecutor(max_workers=len(bounds)) as pool:
        futures = [pool.submit(fn, start, stop) for start, stop in bounds]
        return [f.result() for f in futures]
