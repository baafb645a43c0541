"""TSPLIB problem, LKH parameter and tour file helpers.

Only the subset needed to hand an explicit asymmetric matrix to LKH and read
its tour back is supported: ``TYPE: ATSP`` with ``EDGE_WEIGHT_FORMAT:
FULL_MATRIX`` and a ``TOUR_SECTION`` terminated by ``-1`` or ``EOF``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np

from ..engine.errors import OracleOutputError

PAR_FILE_EXTENSION = ".par"
TSP_FILE_EXTENSION = ".atsp"
TOUR_FILE_EXTENSION = ".tour"


def scale_weights(cost: np.ndarray, scale: float) -> np.ndarray:
    """Round ``cost * scale`` to the integer weights TSPLIB expects."""

    cost = np.asarray(cost, dtype=np.float64)
    if not np.all(np.isfinite(cost)):
        raise ValueError("cost matrix must be finite")
    weights = np.rint(cost * float(scale)).astype(np.int64)
    np.fill_diagonal(weights, 0)
    return weights


def write_atsp_file(path: Path, name: str, comment: str, weights: np.ndarray) -> None:
    weights = np.asarray(weights, dtype=np.int64)
    n = weights.shape[0]
    lines = [
        f"NAME: {name}",
        "TYPE: ATSP",
        f"COMMENT: {comment}",
        f"DIMENSION: {n}",
        "EDGE_WEIGHT_TYPE: EXPLICIT",
        "EDGE_WEIGHT_FORMAT: FULL_MATRIX",
        "EDGE_WEIGHT_SECTION",
    ]
    lines.extend(" ".join(str(int(w)) for w in row) for row in weights)
    lines.append("EOF")
    Path(path).write_text("\n".join(lines) + "\n", encoding="utf-8")


def write_par_file(
    path: Path,
    problem_path: Path,
    tour_path: Path,
    *,
    runs: int = 1,
    seed: Optional[int] = None,
) -> None:
    lines = [
        f"PROBLEM_FILE = {problem_path}",
        f"OUTPUT_TOUR_FILE = {tour_path}",
        f"RUNS = {int(runs)}",
        "TRACE_LEVEL = 0",
    ]
    if seed is not None:
        lines.append(f"SEED = {int(seed)}")
    Path(path).write_text("\n".join(lines) + "\n", encoding="utf-8")


def read_tour_file(path: Path) -> np.ndarray:
    """Return the 0-based node sequence of a TSPLIB tour file."""

    text = Path(path).read_text(encoding="utf-8")
    nodes = []
    in_section = False
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        if not in_section:
            if line.upper().startswith("TOUR_SECTION"):
                in_section = True
            continue
        if line.upper() == "EOF":
            break
        done = False
        for tok in line.split():
            try:
                val = int(tok)
            except ValueError as exc:
                raise OracleOutputError(f"bad tour entry {tok!r} in {path}") from exc
            if val == -1:
                done = True
                break
            nodes.append(val - 1)
        if done:
            break

    if not in_section:
        raise OracleOutputError(f"no TOUR_SECTION in {path}")
    if not nodes:
        raise OracleOutputError(f"empty tour in {path}")
    return np.asarray(nodes, dtype=np.int64)


__all__ = [
    "PAR_FILE_EXTENSION",
    "TOUR_FILE_EXTENSION",
    "TSP_FILE_EXTENSION",
    "read_tour_file",
    "scale_weights",
    "write_atsp_file",
    "write_par_file",
]
