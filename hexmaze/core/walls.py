"""Random orderings of the candidate wall list."""

from __future__ import annotations

from typing import Tuple

import numpy as np

SHUFFLE_STRATEGIES: Tuple[str, ...] = ("uniform", "bucket")

BUCKET_COUNT = 1024
BUCKET_PASSES = 3


def shuffle_walls(walls: np.ndarray, rng: np.random.Generator, strategy: str = "uniform") -> np.ndarray:
    """Return a reordered copy of ``walls`` containing every wall exactly once.

    ``"uniform"`` draws a Fisher-Yates permutation, so every ordering is
    equally likely. ``"bucket"`` reproduces the classic make-maze ordering:
    three passes scattering walls over 1024 random buckets, each pass reading
    the buckets back in order with the most recently added wall first. It is
    not a uniform permutation and is only kept for recreating old mazes.
    """

    if strategy == "uniform":
        return walls[rng.permutation(len(walls))]
    if strategy == "bucket":
        return walls[_bucket_order(len(walls), rng)]
    raise ValueError(f"Unknown shuffle strategy {strategy!r}; expected one of {', '.join(SHUFFLE_STRATEGIES)}")


def _bucket_order(count: int, rng: np.random.Generator) -> np.ndarray:
    order = np.arange(count)
    position = np.arange(count)
    for _ in range(BUCKET_PASSES):
        buckets = rng.integers(0, BUCKET_COUNT, size=count)
        # Sort by bucket, then newest-first inside a bucket.
        order = order[np.lexsort((-position, buckets))]
    return order


__all__ = ["BUCKET_COUNT", "SHUFFLE_STRATEGIES", "shuffle_walls"]
