"""Best-of-N randomized heading search for the Dubins TSP.

Each trial draws fresh random headings, builds the pairwise Dubins cost
matrix, asks the ordering oracle for a tour and scores it.  Trials are
independent: every one gets its own generator spawned from the search
generator, so running them on a thread pool yields the same answer as running
them one after another.  The reduction walks trials in order and keeps the
first trial or any strictly cheaper one.
"""

from __future__ import annotations

import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

import numpy as np

from ..config.config import DEFAULTS
from ..config.enums import TRIAL_BEST, TRIAL_KEEP, TRIAL_SKIP
from ..oracle.base import validate_ordering
from .dubins import TWO_PI, build_cost_matrix
from .errors import DTSPError, InvalidArgument, OracleIOError, OracleOutputError
from .headings import randomize_headings
from .tour import create_tour_edges, dubins_tour_cost

logger = logging.getLogger(__name__)

ORIGIN = 0


def _check_inputs(coords, origin_heading, turning_radius, iters, workers, headings):
    try:
        coords = np.array(coords, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"waypoints must be numeric: {exc}") from exc
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise InvalidArgument("waypoints must have shape (n, 2)")
    if not np.all(np.isfinite(coords)):
        raise InvalidArgument("waypoint coordinates must be finite")

    try:
        x = float(origin_heading)
        r = float(turning_radius)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"origin heading and turning radius must be numeric: {exc}") from exc
    if not (0.0 <= x < TWO_PI):
        raise InvalidArgument("Expected origin heading to be between 0 and 2*PI")

    n = coords.shape[0]
    if headings is not None and np.shape(headings) != (n,):
        raise InvalidArgument(f"headings buffer has shape {np.shape(headings)}, expected ({n},)")

    if n < 2:
        raise InvalidArgument("Expected at least 2 waypoints")

    if not (math.isfinite(r) and r > 0.0):
        raise InvalidArgument("turning radius must be finite and > 0")
    if iters < 1:
        raise InvalidArgument("iters must be >= 1")
    if workers < 1:
        raise InvalidArgument("workers must be >= 1")

    return coords, x, r


def _run_trial(coords, origin_heading, r, oracle, rng, close_loop):
    t0 = time.perf_counter()
    n = coords.shape[0]

    headings = randomize_headings(n, origin_heading, rng)
    cost = build_cost_matrix(coords, headings, r)

    try:
        raw = oracle.solve(cost, ORIGIN)
    except DTSPError:
        raise
    except Exception as exc:
        raise OracleIOError(f"ordering oracle failed: {exc}") from exc

    tour = validate_ordering(raw, n, ORIGIN)
    score = dubins_tour_cost(coords, headings, tour, r, close_loop)

    return {
        "tour": tour,
        "headings": headings,
        "cost": score,
        "elapsed_ms": (time.perf_counter() - t0) * 1000.0,
    }


def _run_trials(coords, origin_heading, r, oracle, rngs, close_loop, workers):
    """Yield ``(trial, result, error)`` in trial order."""

    if workers <= 1:
        for i, trial_rng in enumerate(rngs):
            try:
                yield i, _run_trial(coords, origin_heading, r, oracle, trial_rng, close_loop), None
            except (OracleIOError, OracleOutputError) as exc:
                yield i, None, exc
        return

    pool = ThreadPoolExecutor(max_workers=workers)
    try:
        futures = [
            pool.submit(_run_trial, coords, origin_heading, r, oracle, trial_rng, close_loop)
            for trial_rng in rngs
        ]
        for i, fut in enumerate(futures):
            try:
                yield i, fut.result(), None
            except (OracleIOError, OracleOutputError) as exc:
                yield i, None, exc
    finally:
        pool.shutdown(wait=True, cancel_futures=True)


def run_randomized_dtsp(
    coords,
    origin_heading: float,
    turning_radius: float,
    oracle,
    *,
    return_to_initial: bool = True,
    params: Optional[Dict[str, Any]] = None,
    rng=None,
    metrics=None,
    headings: Optional[np.ndarray] = None,
) -> Dict[str, Any]:
    """Solve the DTSP with the randomized heading algorithm.

    Parameters
    ----------
    coords:
        ``(n, 2)`` waypoint positions; row 0 is the origin.
    origin_heading:
        Fixed heading of the origin in ``[0, 2*pi)``.
    turning_radius:
        Minimum turning radius, ``> 0``.
    oracle:
        Object with ``solve(cost, origin) -> ordering``.
    return_to_initial:
        Close the final tour with a leg back to the origin.
    params:
        Overrides for :data:`~dtsp_randomized.config.config.DEFAULTS`.
    rng:
        ``numpy.random.Generator`` or seed; ``None`` draws fresh entropy.
    metrics:
        Optional :class:`~dtsp_randomized.logging.metrics.Metrics` trace.
    headings:
        Optional ``(n,)`` buffer receiving the best headings on success.

    Returns
    -------
    dict
        ``tour``, ``edges``, ``headings``, ``cost`` plus ``trial_costs``,
        ``best_trial`` and ``cleanup_errors``.

    Raises
    ------
    InvalidArgument
        Before any trial when a precondition fails.
    OracleIOError, OracleOutputError
        When a trial's oracle round trip fails (unless failed trials are
        skipped and at least one trial succeeds).
    """

    p = DEFAULTS.copy()
    if params:
        p.update(params)
    iters = int(p["iters"])
    workers = int(p.get("workers", 1))
    log_period = max(1, int(p.get("log_period", 1)))
    skip_failed = bool(p.get("skip_failed_trials", False))
    trial_close = bool(p.get("trial_close_loop", False))

    coords, x, r = _check_inputs(coords, origin_heading, turning_radius, iters, workers, headings)
    n = coords.shape[0]

    logger.debug("Found %d waypoints, running %d trials.", n, iters)

    rng = np.random.default_rng(rng)
    trial_rngs = rng.spawn(iters)
    trial_costs = np.full(iters, np.nan, dtype=np.float64)

    best = None
    best_trial = -1
    last_error = None
    trials = _run_trials(coords, x, r, oracle, trial_rngs, trial_close, workers)
    try:
        for i, trial, err in trials:
            if err is not None:
                if not skip_failed:
                    raise err
                logger.warning("Trial %d failed, skipping: %s", i, err)
                last_error = err
                if metrics is not None:
                    metrics.append(
                        i,
                        np.nan,
                        best["cost"] if best is not None else np.nan,
                        status=TRIAL_SKIP,
                        error=str(err),
                    )
                continue

            trial_costs[i] = trial["cost"]
            # Save the best scenario
            if best is None or trial["cost"] < best["cost"]:
                best = trial
                best_trial = i
                status = TRIAL_BEST
            else:
                status = TRIAL_KEEP

            logger.debug(
                "Trial %d: cost %.6f, best %.6f (%.1fms).",
                i,
                trial["cost"],
                best["cost"],
                trial["elapsed_ms"],
            )
            if metrics is not None and ((i % log_period) == 0 or i == iters - 1):
                metrics.append(
                    i,
                    trial["cost"],
                    best["cost"],
                    status=status,
                    elapsed_ms=trial["elapsed_ms"],
                )
    finally:
        trials.close()

    if best is None:
        raise last_error

    # Use the best scenario
    tour = best["tour"].copy()
    best_headings = best["headings"].copy()
    edges, cost = create_tour_edges(coords, best_headings, tour, r, return_to_initial)

    logger.info("Solved %d point tour with cost %.6f.", n, cost)
    for i in range(n):
        logger.debug("   Node %d: %.6f rad.", i, best_headings[i])

    if headings is not None:
        headings[:] = best_headings

    drain = getattr(oracle, "drain_cleanup_errors", None)
    cleanup_errors = drain() if drain is not None else []

    return {
        "tour": tour,
        "edges": edges,
        "headings": best_headings,
        "cost": cost,
        "trial_costs": trial_costs,
        "best_trial": best_trial,
        "cleanup_errors": cleanup_errors,
    }


__all__ = ["ORIGIN", "run_randomized_dtsp"]
