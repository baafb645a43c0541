"""Numba-backed Dubins path lengths and pairwise cost matrices.

Every pose pair is first moved into the normalized frame (start at the origin,
turning radius 1, straight-line direction along +x) where the six Dubins words
have closed-form solutions.  A word is *infeasible* when its closed form has
no real solution; its parameters are then reported as NaN and it never wins
the minimum.  At least one CSC word is feasible for every finite pose pair so
the shortest length is always defined for ``r > 0``.
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit

from ..config.enums import F_WORD, LRL, LSL, LSR, N_WORDS, RLR, RSL, RSR, W_P, W_Q, W_T

TWO_PI = 2.0 * math.pi


@njit(cache=True)
def mod2pi(theta):
    """Wrap an angle into ``[0, 2*pi)``."""

    val = theta - TWO_PI * math.floor(theta / TWO_PI)
    # snap float noise just below 2*pi back to 0
    if TWO_PI - val < 1e-10:
        return 0.0
    return val


@njit(cache=True)
def normalize_poses(x0, y0, h0, x1, y1, h1, r):
    """Return ``(alpha, beta, d)`` for a pose pair in the normalized frame."""

    dx = x1 - x0
    dy = y1 - y0
    dist = math.sqrt(dx * dx + dy * dy)
    d = dist / r
    if dist < 1e-12:
        # any frame works for coincident points; align it with the start
        theta = h0
    else:
        theta = math.atan2(dy, dx)
    return mod2pi(h0 - theta), mod2pi(h1 - theta), d


@njit(cache=True)
def dubins_words(alpha, beta, d, out):
    """Fill ``out`` (shape ``(N_WORDS, F_WORD)``) with normalized word parameters.

    Rows follow the word codes of :mod:`dtsp_randomized.config.enums`.  The
    columns hold the first arc angle ``t``, the middle parameter ``p`` (a
    straight length for CSC words, an arc angle for CCC words) and the last arc
    angle ``q``.  Infeasible words are filled with NaN.
    """

    out[:, :] = np.nan

    sa = math.sin(alpha)
    sb = math.sin(beta)
    ca = math.cos(alpha)
    cb = math.cos(beta)
    c_ab = math.cos(alpha - beta)
    d_sq = d * d

    # LSL
    p_sq = 2.0 + d_sq - 2.0 * c_ab + 2.0 * d * (sa - sb)
    if p_sq >= 0.0:
        tmp = math.atan2(cb - ca, d + sa - sb)
        out[LSL, W_T] = mod2pi(tmp - alpha)
        out[LSL, W_P] = math.sqrt(p_sq)
        out[LSL, W_Q] = mod2pi(beta - tmp)

    # RSR
    p_sq = 2.0 + d_sq - 2.0 * c_ab + 2.0 * d * (sb - sa)
    if p_sq >= 0.0:
        tmp = math.atan2(ca - cb, d - sa + sb)
        out[RSR, W_T] = mod2pi(alpha - tmp)
        out[RSR, W_P] = math.sqrt(p_sq)
        out[RSR, W_Q] = mod2pi(tmp - beta)

    # LSR
    p_sq = -2.0 + d_sq + 2.0 * c_ab + 2.0 * d * (sa + sb)
    if p_sq >= 0.0:
        p = math.sqrt(p_sq)
        tmp = math.atan2(-ca - cb, d + sa + sb) - math.atan2(-2.0, p)
        out[LSR, W_T] = mod2pi(tmp - alpha)
        out[LSR, W_P] = p
        out[LSR, W_Q] = mod2pi(tmp - beta)

    # RSL
    p_sq = -2.0 + d_sq + 2.0 * c_ab - 2.0 * d * (sa + sb)
    if p_sq >= 0.0:
        p = math.sqrt(p_sq)
        tmp = math.atan2(ca + cb, d - sa - sb) - math.atan2(2.0, p)
        out[RSL, W_T] = mod2pi(alpha - tmp)
        out[RSL, W_P] = p
        out[RSL, W_Q] = mod2pi(beta - tmp)

    # RLR
    tmp = (6.0 - d_sq + 2.0 * c_ab + 2.0 * d * (sa - sb)) / 8.0
    if abs(tmp) <= 1.0:
        phi = math.atan2(ca - cb, d - sa + sb)
        p = mod2pi(TWO_PI - math.acos(tmp))
        t = mod2pi(alpha - phi + p / 2.0)
        out[RLR, W_T] = t
        out[RLR, W_P] = p
        out[RLR, W_Q] = mod2pi(alpha - beta - t + p)

    # LRL
    tmp = (6.0 - d_sq + 2.0 * c_ab + 2.0 * d * (sb - sa)) / 8.0
    if abs(tmp) <= 1.0:
        phi = math.atan2(ca - cb, d + sa - sb)
        p = mod2pi(TWO_PI - math.acos(tmp))
        t = mod2pi(-alpha - phi + p / 2.0)
        out[LRL, W_T] = t
        out[LRL, W_P] = p
        out[LRL, W_Q] = mod2pi(beta - alpha - t + p)


@njit(cache=True)
def shortest_word(x0, y0, h0, x1, y1, h1, r, out):
    """Return ``(word, t, p, q)`` of the shortest feasible word.

    ``word`` is ``-1`` when no word is feasible.  ``out`` is a scratch buffer
    of shape ``(N_WORDS, F_WORD)``.
    """

    alpha, beta, d = normalize_poses(x0, y0, h0, x1, y1, h1, r)
    dubins_words(alpha, beta, d, out)

    best = -1
    best_len = np.inf
    for w in range(N_WORDS):
        if np.isnan(out[w, W_T]):
            continue
        length = out[w, W_T] + out[w, W_P] + out[w, W_Q]
        if length < best_len:
            best_len = length
            best = w
    if best < 0:
        return -1, np.nan, np.nan, np.nan
    return best, out[best, W_T], out[best, W_P], out[best, W_Q]


@njit(cache=True)
def _dubins_length(x0, y0, h0, x1, y1, h1, r):
    out = np.empty((N_WORDS, F_WORD), dtype=np.float64)
    word, t, p, q = shortest_word(x0, y0, h0, x1, y1, h1, r, out)
    if word < 0:
        return np.inf
    return (t + p + q) * r


@njit(cache=True)
def _build_cost_matrix(coords, headings, r, cost):
    n = coords.shape[0]
    out = np.empty((N_WORDS, F_WORD), dtype=np.float64)
    for i in range(n):
        x0 = coords[i, 0]
        y0 = coords[i, 1]
        h0 = headings[i]
        cost[i, i] = 0.0
        for j in range(n):
            if i == j:
                continue
            word, t, p, q = shortest_word(
                x0, y0, h0, coords[j, 0], coords[j, 1], headings[j], r, out
            )
            if word < 0:
                cost[i, j] = np.inf
            else:
                cost[i, j] = (t + p + q) * r


def dubins_length(x0: float, y0: float, h0: float, x1: float, y1: float, h1: float, r: float) -> float:
    """Length of the shortest Dubins path between two oriented poses.

    Raises
    ------
    ValueError
        If ``r`` is not strictly positive or no word admits a solution.
    """

    if not r > 0.0:
        raise ValueError("turning radius must be > 0")
    length = _dubins_length(
        float(x0), float(y0), float(h0), float(x1), float(y1), float(h1), float(r)
    )
    if not math.isfinite(length):
        raise ValueError("no feasible Dubins path for the given poses")
    return float(length)


def build_cost_matrix(coords: np.ndarray, headings: np.ndarray, r: float) -> np.ndarray:
    """Dense asymmetric ``(n, n)`` matrix of pairwise Dubins lengths.

    Entry ``(i, j)`` is the length from pose ``i`` to pose ``j``; the diagonal
    is zero and carries no meaning.
    """

    coords = np.ascontiguousarray(coords, dtype=np.float64)
    headings = np.ascontiguousarray(headings, dtype=np.float64)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise ValueError("coords must have shape (n, 2)")
    if headings.shape != (coords.shape[0],):
        raise ValueError("headings must have shape (n,)")
    if not r > 0.0:
        raise ValueError("turning radius must be > 0")

    n = coords.shape[0]
    cost = np.empty((n, n), dtype=np.float64)
    _build_cost_matrix(coords, headings, float(r), cost)
    if not np.all(np.isfinite(cost)):
        raise ValueError("no feasible Dubins path for some waypoint pair")
    return cost


__all__ = [
    "TWO_PI",
    "build_cost_matrix",
    "dubins_length",
    "dubins_words",
    "mod2pi",
    "normalize_poses",
    "shortest_word",
]
