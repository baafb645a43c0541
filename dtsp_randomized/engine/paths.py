"""Concrete Dubins path geometry for rendering or execution downstream."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from ..config.enums import F_WORD, N_WORDS, WORD_NAMES
from .dubins import mod2pi, shortest_word

Pose = Tuple[float, float, float]


@dataclass
class Segment:
    kind: str                     # 'L', 'S' or 'R'
    length: float                 # travelled distance
    angle: float                  # turned angle in radians, 0 for 'S'
    start: Pose
    end: Pose
    center: Optional[Tuple[float, float]] = None


@dataclass
class DubinsPath:
    path_type: str
    params: Tuple[float, float, float]  # normalized (t, p, q)
    radius: float
    length: float
    segments: List[Segment] = field(default_factory=list)


@dataclass
class Edge:
    """One materialized tour leg between consecutive waypoints."""

    source: int
    target: int
    path_type: str
    length: float
    segments: List[Segment] = field(default_factory=list)


def _advance(pose: Pose, kind: str, param: float, r: float):
    x, y, h = pose
    if kind == "S":
        dist = param * r
        return (x + dist * math.cos(h), y + dist * math.sin(h), h), None
    if kind == "L":
        cx, cy = x - r * math.sin(h), y + r * math.cos(h)
        h1 = h + param
        return (cx + r * math.sin(h1), cy - r * math.cos(h1), mod2pi(h1)), (cx, cy)
    cx, cy = x + r * math.sin(h), y - r * math.cos(h)
    h1 = h - param
    return (cx - r * math.sin(h1), cy + r * math.cos(h1), mod2pi(h1)), (cx, cy)


def dubins_path(start: Pose, end: Pose, r: float) -> DubinsPath:
    """Shortest Dubins path from ``start`` to ``end`` with its segment geometry."""

    if not r > 0.0:
        raise ValueError("turning radius must be > 0")
    out = np.empty((N_WORDS, F_WORD), dtype=np.float64)
    word, t, p, q = shortest_word(
        float(start[0]), float(start[1]), float(start[2]),
        float(end[0]), float(end[1]), float(end[2]),
        float(r), out,
    )
    if word < 0:
        raise ValueError("no feasible Dubins path for the given poses")

    name = WORD_NAMES[word]
    segments = []
    pose = (float(start[0]), float(start[1]), float(start[2]))
    for kind, param in zip(name, (t, p, q)):
        nxt, center = _advance(pose, kind, param, r)
        segments.append(
            Segment(
                kind=kind,
                length=float(param * r),
                angle=0.0 if kind == "S" else float(param),
                start=pose,
                end=nxt,
                center=center,
            )
        )
        pose = nxt

    return DubinsPath(
        path_type=name,
        params=(float(t), float(p), float(q)),
        radius=float(r),
        length=float((t + p + q) * r),
        segments=segments,
    )


def sample_path(path: DubinsPath, step: float) -> np.ndarray:
    """Points ``(k, 3)`` of ``x, y, heading`` spaced at most ``step`` apart."""

    if step <= 0:
        raise ValueError("step must be > 0")
    r = path.radius
    pts = [path.segments[0].start]
    for seg in path.segments:
        count = max(1, int(math.ceil(seg.length / step)))
        param = seg.length / r if seg.kind == "S" else seg.angle
        for k in range(1, count + 1):
            pose, _ = _advance(seg.start, seg.kind, param * k / count, r)
            pts.append(pose)
    return np.asarray(pts, dtype=np.float64)


__all__ = ["DubinsPath", "Edge", "Pose", "Segment", "dubins_path", "sample_path"]
