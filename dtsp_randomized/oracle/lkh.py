"""Ordering oracle backed by the LKH executable.

Each :meth:`LKHOracle.solve` call owns three scratch files (parameters,
problem, tour).  They are created right before the solver runs and removed
right after, whether the round trip succeeded or not.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
import time
from typing import Dict, Iterable, Optional, Sequence, Union

import numpy as np

from ..engine.errors import OracleIOError, OracleOutputError, ResourceCleanupError
from .base import OrderingOracle, rotate_to_origin
from .tsplib import (
    PAR_FILE_EXTENSION,
    TOUR_FILE_EXTENSION,
    TSP_FILE_EXTENSION,
    read_tour_file,
    scale_weights,
    write_atsp_file,
    write_par_file,
)

logger = logging.getLogger(__name__)

PROBLEM_NAME = "prDubinsScenario"


def release_scratch(paths: Iterable[str]) -> None:
    """Remove every path; raise one :class:`ResourceCleanupError` listing all failures."""

    failures = []
    for path in paths:
        try:
            os.remove(path)
        except FileNotFoundError:
            continue
        except OSError as exc:
            failures.append((str(path), exc))
    if failures:
        raise ResourceCleanupError(failures)


def acquire_scratch(scratch_dir: Optional[str] = None) -> Dict[str, str]:
    paths: Dict[str, str] = {}
    try:
        for key, suffix in (
            ("par", PAR_FILE_EXTENSION),
            ("problem", TSP_FILE_EXTENSION),
            ("tour", TOUR_FILE_EXTENSION),
        ):
            fd, path = tempfile.mkstemp(prefix="dtsp_", suffix=suffix, dir=scratch_dir)
            os.close(fd)
            paths[key] = path
    except OSError as exc:
        try:
            release_scratch(paths.values())
        except ResourceCleanupError as cleanup:
            logger.warning("%s", cleanup)
        raise OracleIOError(f"could not create scratch files: {exc}") from exc
    return paths


class LKHOracle(OrderingOracle):
    """Solve the ATSP with LKH through TSPLIB files.

    ``executable`` may be a program name or a full command prefix such as
    ``["/opt/lkh/LKH"]``; the parameter file path is appended.
    """

    name = "lkh"

    def __init__(
        self,
        executable: Union[str, Sequence[str]] = "LKH",
        *,
        runs: int = 1,
        timeout: Optional[float] = None,
        scale: float = 1000.0,
        scratch_dir: Optional[str] = None,
        seed: Optional[int] = None,
    ):
        super().__init__()
        if isinstance(executable, str):
            self.command = [executable]
        else:
            self.command = list(executable)
        self.runs = int(runs)
        self.timeout = timeout
        self.scale = float(scale)
        self.scratch_dir = scratch_dir
        self.seed = seed

    def solve(self, cost, origin=0):
        cost = np.asarray(cost, dtype=np.float64)
        if cost.ndim != 2 or cost.shape[0] != cost.shape[1]:
            raise OracleIOError("cost matrix must be square")

        paths = acquire_scratch(self.scratch_dir)
        try:
            ordering = self._round_trip(cost, int(origin), paths)
        finally:
            try:
                release_scratch(paths.values())
            except ResourceCleanupError as exc:
                logger.warning("%s", exc)
                self.cleanup_errors.append(exc)
        return ordering

    def _round_trip(self, cost, origin, paths):
        n = cost.shape[0]
        try:
            weights = scale_weights(cost, self.scale)
            write_par_file(
                paths["par"], paths["problem"], paths["tour"], runs=self.runs, seed=self.seed
            )
            write_atsp_file(
                paths["problem"],
                PROBLEM_NAME,
                f"Asymmetric TSP problem with {n} nodes.",
                weights,
            )
        except (OSError, ValueError) as exc:
            raise OracleIOError(f"failed creating TSP files: {exc}") from exc

        logger.debug("Wrote %s and %s.", paths["par"], paths["problem"])
        logger.debug("Running LKH solver for asymmetric TSP.")

        t0 = time.perf_counter()
        try:
            proc = subprocess.run(
                self.command + [paths["par"]],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise OracleIOError(f"LKH did not finish within {self.timeout}s") from exc
        except OSError as exc:
            raise OracleIOError(f"could not run {self.command[0]}: {exc}") from exc
        elapsed = (time.perf_counter() - t0) * 1000.0

        if proc.returncode != 0:
            tail = proc.stderr.decode("utf-8", errors="replace").strip()[-500:]
            raise OracleIOError(f"LKH exited with status {proc.returncode}: {tail}")

        logger.debug("Finished (%.1fms). ATSP tour in %s.", elapsed, paths["tour"])

        try:
            cycle = read_tour_file(paths["tour"])
        except (OSError, UnicodeDecodeError) as exc:
            raise OracleOutputError(f"could not read solution from LKH tour file: {exc}") from exc
        return rotate_to_origin(cycle, origin)


__all__ = ["LKHOracle", "acquire_scratch", "release_scratch"]
