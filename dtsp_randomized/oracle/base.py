"""Ordering oracle port consumed by the best-of-N search."""

from __future__ import annotations

from typing import List

import numpy as np

from ..engine.errors import OracleOutputError, ResourceCleanupError


class OrderingOracle:
    """Heuristic solver for the asymmetric ordering sub-problem.

    Subclasses implement :meth:`solve`.  The search only relies on the result
    being a permutation of every waypoint index that starts at ``origin``;
    optimality is never assumed.  Scratch cleanup problems that do not affect
    the ordering are appended to ``cleanup_errors``.
    """

    name = "base"

    def __init__(self):
        self.cleanup_errors: List[ResourceCleanupError] = []

    def solve(self, cost: np.ndarray, origin: int = 0) -> np.ndarray:
        raise NotImplementedError

    def drain_cleanup_errors(self) -> List[ResourceCleanupError]:
        errors, self.cleanup_errors = self.cleanup_errors, []
        return errors


def rotate_to_origin(cycle, origin: int) -> np.ndarray:
    """Rotate a closed tour so that it starts at ``origin``."""

    cycle = np.asarray(cycle, dtype=np.int64)
    hits = np.flatnonzero(cycle == origin)
    if hits.size == 0:
        raise OracleOutputError(f"tour does not visit origin {origin}")
    return np.roll(cycle, -int(hits[0]))


def validate_ordering(ordering, n: int, origin: int = 0) -> np.ndarray:
    """Return ``ordering`` as an int array or raise :class:`OracleOutputError`."""

    try:
        arr = np.asarray(ordering)
    except Exception as exc:
        raise OracleOutputError(f"ordering is not array-like: {exc}") from exc
    if arr.ndim != 1:
        raise OracleOutputError("ordering must be one-dimensional")
    if arr.size and not np.issubdtype(arr.dtype, np.integer):
        if not np.all(np.equal(np.mod(arr, 1), 0)):
            raise OracleOutputError("ordering must contain integer indices")
    arr = arr.astype(np.int64)

    if arr.shape[0] != n:
        raise OracleOutputError(f"ordering has {arr.shape[0]} entries, expected {n}")
    if np.any(arr < 0) or np.any(arr >= n):
        raise OracleOutputError("ordering contains out-of-range indices")

    counts = np.bincount(arr, minlength=n)
    missing = np.flatnonzero(counts == 0)
    if missing.size:
        dup = np.flatnonzero(counts > 1)
        raise OracleOutputError(
            f"ordering misses waypoints {missing.tolist()} and repeats {dup.tolist()}"
        )
    if arr[0] != origin:
        raise OracleOutputError(f"ordering starts at {int(arr[0])}, expected origin {origin}")
    return arr


__all__ = ["OrderingOracle", "rotate_to_origin", "validate_ordering"]
