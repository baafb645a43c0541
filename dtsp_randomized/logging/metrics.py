import csv
import json

import numpy as np

from ..config.enums import TRIAL_BEST


class Metrics:
    def __init__(self):
        self.rows = []

    def append(self, trial, cost, best, status="", elapsed_ms=0.0, error=""):
        self.rows.append(
            (
                int(trial),
                float(cost),
                float(best),
                status,
                float(elapsed_ms),
                error,
            )
        )

    @property
    def best_costs(self):
        return np.array([row[2] for row in self.rows], dtype=np.float64)

    @property
    def improvements(self):
        return sum(1 for row in self.rows if row[3] == TRIAL_BEST)

    def save_csv(self, path):
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["trial", "cost", "best_cost", "status", "elapsed_ms", "error"])
            for row in self.rows:
                w.writerow(list(row))


def save_solution_json(path, metrics, best, params, *, ids=None, extra=None):
    tour = [int(i) for i in best["tour"]]
    data = {
        "final_cost": float(best["cost"]),
        "tour": tour,
        "headings": [float(h) for h in best["headings"]],
        "trials_logged": len(metrics.rows),
        "params": params,
    }
    if ids is not None:
        data["tour_ids"] = [ids[i] for i in tour]
    if extra:
        data.update(extra)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, default=str)


def save_edges_csv(path, edges):
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(
            [
                "edge_id",
                "source",
                "target",
                "path_type",
                "segment",
                "kind",
                "length",
                "angle",
                "x0",
                "y0",
                "h0",
                "x1",
                "y1",
                "h1",
            ]
        )
        for e, edge in enumerate(edges):
            for s, seg in enumerate(edge.segments):
                w.writerow(
                    [
                        e,
                        edge.source,
                        edge.target,
                        edge.path_type,
                        s,
                        seg.kind,
                        seg.length,
                        seg.angle,
                        *seg.start,
                        *seg.end,
                    ]
                )
