"""Configuration and waypoint-table helpers for the command-line glue layer.

Configurations are YAML or JSON mappings; waypoint tables are CSV or Parquet
files read through Pandas with mandatory ``x``/``y`` columns and an optional
``id`` column naming each waypoint.  The first row is the origin.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
import yaml


def load_config(path_yaml: Path) -> Dict:
    """Read a YAML (or JSON) configuration file.

    Parameters
    ----------
    path_yaml:
        Path to the configuration file.

    Returns
    -------
    dict
        Parsed configuration dictionary.  Empty files resolve to ``{}``.
    """

    path = Path(path_yaml)
    if not path.exists():
        raise FileNotFoundError(path)

    text = path.read_text(encoding="utf-8").strip()
    if not text:
        return {}

    if path.suffix.lower() == ".json":
        cfg = json.loads(text)
    else:
        cfg = yaml.safe_load(text)
    cfg = cfg or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"configuration must be a mapping: {path}")
    return cfg


def _read_frame(path_like: Path) -> pd.DataFrame:
    """Return a Pandas ``DataFrame`` from CSV or Parquet input."""

    path = Path(path_like)
    if path.suffix.lower() in {".parquet", ".pq"}:
        return pd.read_parquet(path)
    return pd.read_csv(path)


def load_waypoints(path_table: Path) -> Tuple[np.ndarray, Optional[List[str]]]:
    """Load waypoint coordinates (and ids when present) from a table."""

    df = _read_frame(path_table)
    if not {"x", "y"}.issubset(df.columns):
        raise ValueError("waypoint table must contain 'x' and 'y' columns")
    if df[["x", "y"]].isna().any().any():
        raise ValueError("waypoint table has missing coordinates")

    coords = df[["x", "y"]].to_numpy(dtype=np.float64, copy=True)
    ids = None
    if "id" in df.columns:
        ids = [str(v) for v in df["id"].tolist()]
    return coords, ids


def save_waypoints(path_table: Path, coords: np.ndarray, ids: Optional[List[str]] = None) -> None:
    df = pd.DataFrame({"x": coords[:, 0], "y": coords[:, 1]})
    if ids is not None:
        df.insert(0, "id", ids)
    path = Path(path_table)
    if path.suffix.lower() in {".parquet", ".pq"}:
        df.to_parquet(path, index=False)
    else:
        df.to_csv(path, index=False)


def validate_waypoints(coords: np.ndarray, ids: Optional[List[str]] = None) -> None:
    """Run lightweight shape checks on a loaded instance."""

    coords = np.asarray(coords)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise ValueError("coords must have shape (n, 2)")
    if coords.shape[0] < 2:
        raise ValueError("at least 2 waypoints are required")
    if not np.all(np.isfinite(coords)):
        raise ValueError("coords must be finite")
    if ids is not None:
        if len(ids) != coords.shape[0]:
            raise ValueError("ids must align with coords")
        if len(set(ids)) != len(ids):
            raise ValueError("waypoint ids must be unique")


__all__ = [
    "load_config",
    "load_waypoints",
    "save_waypoints",
    "validate_waypoints",
]
