"""In-process heuristic for the asymmetric ordering problem.

Nearest-neighbour construction from the origin followed by first-improvement
asymmetric 2-opt and single-node relocation over the closed tour.  Reversing a
block in an asymmetric instance flips the direction of every interior arc, so
2-opt gains include the reversed interior cost.
"""

from __future__ import annotations

import numpy as np
from numba import njit

from ..engine.errors import OracleIOError
from .base import OrderingOracle


@njit(cache=True)
def nearest_neighbor_tour(cost, origin):
    n = cost.shape[0]
    tour = np.empty(n, dtype=np.int64)
    visited = np.zeros(n, dtype=np.bool_)
    tour[0] = origin
    visited[origin] = True
    cur = origin
    for k in range(1, n):
        best = -1
        best_c = np.inf
        for j in range(n):
            if not visited[j] and cost[cur, j] < best_c:
                best_c = cost[cur, j]
                best = j
        if best < 0:
            for j in range(n):
                if not visited[j]:
                    best = j
                    break
        tour[k] = best
        visited[best] = True
        cur = best
    return tour


@njit(cache=True)
def cycle_cost(cost, tour):
    L = tour.shape[0]
    s = 0.0
    for k in range(L):
        s += cost[tour[k], tour[(k + 1) % L]]
    return s


@njit(cache=True)
def two_opt_asym(cost, tour):
    """First-improvement 2-opt on a closed tour with ``tour[0]`` fixed.

    Returns True when a move was applied in place.
    """
    L = tour.shape[0]
    if L < 3:
        return False
    for i in range(1, L - 1):
        a = tour[i - 1]
        fwd = 0.0  # interior arcs i..j as travelled now
        bwd = 0.0  # the same arcs reversed
        for j in range(i + 1, L):
            fwd += cost[tour[j - 1], tour[j]]
            bwd += cost[tour[j], tour[j - 1]]
            b = tour[(j + 1) % L]
            old = cost[a, tour[i]] + fwd + cost[tour[j], b]
            new = cost[a, tour[j]] + bwd + cost[tour[i], b]
            if old - new > 1e-9:
                lo = i
                hi = j
                while lo < hi:
                    tmp = tour[lo]
                    tour[lo] = tour[hi]
                    tour[hi] = tmp
                    lo += 1
                    hi -= 1
                return True
    return False


@njit(cache=True)
def relocate_asym(cost, tour):
    """Move one non-origin node to a cheaper slot. Returns True when applied."""
    L = tour.shape[0]
    if L < 3:
        return False
    for i in range(1, L):
        node = tour[i]
        prev = tour[i - 1]
        nxt = tour[(i + 1) % L]
        gain = cost[prev, node] + cost[node, nxt] - cost[prev, nxt]
        for k in range(L):
            if k == i or k == i - 1:
                continue
            u = tour[k]
            v = tour[(k + 1) % L]
            if v == node:
                continue
            add = cost[u, node] + cost[node, v] - cost[u, v]
            if gain - add > 1e-9:
                reduced = np.empty(L - 1, dtype=np.int64)
                m = 0
                pos = -1
                for s in range(L):
                    if s == i:
                        continue
                    reduced[m] = tour[s]
                    if s == k:
                        pos = m
                    m += 1
                m = 0
                for s in range(L - 1):
                    tour[m] = reduced[s]
                    m += 1
                    if s == pos:
                        tour[m] = node
                        m += 1
                return True
    return False


@njit(cache=True)
def improve_tour(cost, tour, budget):
    """Apply improving moves until none is left or ``budget`` is spent."""
    moves = 0
    while moves < budget:
        if two_opt_asym(cost, tour):
            moves += 1
            continue
        if relocate_asym(cost, tour):
            moves += 1
            continue
        break
    return moves


class LocalSearchOracle(OrderingOracle):
    """Deterministic in-process oracle; needs no external executable."""

    name = "local"

    def __init__(self, budget=10000):
        super().__init__()
        self.budget = int(budget)

    def solve(self, cost, origin=0):
        cost = np.ascontiguousarray(cost, dtype=np.float64)
        if cost.ndim != 2 or cost.shape[0] != cost.shape[1]:
            raise OracleIOError("cost matrix must be square")
        if not 0 <= origin < cost.shape[0]:
            raise OracleIOError(f"origin {origin} outside the cost matrix")
        tour = nearest_neighbor_tour(cost, int(origin))
        improve_tour(cost, tour, self.budget)
        return tour


__all__ = [
    "LocalSearchOracle",
    "cycle_cost",
    "improve_tour",
    "nearest_neighbor_tour",
    "relocate_asym",
    "two_opt_asym",
]
