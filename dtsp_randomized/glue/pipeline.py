"""Command line pipeline orchestrating instance loading and the randomized search."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

from ..config.config import DEFAULTS
from ..data.generate_data import generate_waypoints
from ..engine.search import run_randomized_dtsp
from ..logging.metrics import Metrics, save_edges_csv, save_solution_json
from ..oracle import LKHOracle, LocalSearchOracle
from .io import load_config, load_waypoints, validate_waypoints


def _resolve(base: Path, maybe_path: Optional[str]) -> Optional[Path]:
    if maybe_path is None:
        return None
    return (base / maybe_path).resolve()


def assemble_data(cfg: Dict[str, Any], base_dir: Path) -> Dict[str, Any]:
    """Load (or generate) the waypoint instance following the config contract."""

    dataset = cfg.get("dataset", {})
    waypoints_path = dataset.get("waypoints")
    generate = dataset.get("generate")

    if waypoints_path is not None:
        coords, ids = load_waypoints(_resolve(base_dir, waypoints_path))
    elif generate is not None:
        coords = generate_waypoints(
            n_waypoints=int(generate.get("n", 20)),
            extent=float(generate.get("extent", 100.0)),
            seed=int(generate.get("seed", cfg.get("seed", 0))),
        )
        ids = None
    else:
        raise ValueError("dataset.waypoints or dataset.generate must be provided")

    validate_waypoints(coords, ids)

    return {
        "coords": coords,
        "ids": ids,
        "n": coords.shape[0],
    }


def build_params(cfg: Dict[str, Any]) -> Dict[str, Any]:
    params = DEFAULTS.copy()
    params.update(cfg.get("params", {}))
    if "iters" in cfg:
        params["iters"] = int(cfg["iters"])
    if "log_period" in cfg:
        params["log_period"] = int(cfg["log_period"])
    unknown = set(params) - set(DEFAULTS)
    if unknown:
        raise ValueError(f"unknown parameters: {sorted(unknown)}")
    return params


def build_oracle(params: Dict[str, Any], seed: Optional[int] = None):
    kind = str(params.get("oracle", "local")).lower()
    if kind == "local":
        return LocalSearchOracle(budget=int(params["ls_budget"]))
    if kind == "lkh":
        return LKHOracle(
            params["lkh_executable"],
            runs=int(params["lkh_runs"]),
            timeout=params["lkh_timeout"],
            scale=float(params["lkh_scale"]),
            scratch_dir=params["lkh_scratch_dir"],
            seed=seed,
        )
    raise ValueError(f"unknown oracle: {kind}")


def run_pipeline(
    cfg: Dict[str, Any],
    *,
    base_dir: Path,
    outdir: Path,
    export_trace: bool = False,
) -> Dict[str, Any]:
    """Execute the randomized search according to ``cfg`` and return the best solution."""

    outdir.mkdir(parents=True, exist_ok=True)

    seed = int(cfg.get("seed", 0))
    rng = np.random.default_rng(seed)

    data = assemble_data(cfg, base_dir)
    params = build_params(cfg)
    oracle = build_oracle(params, seed=seed)
    metrics = Metrics()

    best = run_randomized_dtsp(
        data["coords"],
        float(params["origin_heading"]),
        float(params["turning_radius"]),
        oracle,
        return_to_initial=bool(params["return_to_initial"]),
        params=params,
        rng=rng,
        metrics=metrics,
    )

    meta = {
        "seed": seed,
        "config_version": cfg.get("version", "dev"),
        "oracle": oracle.name,
        "best_trial": int(best["best_trial"]),
        "cleanup_errors": [str(e) for e in best["cleanup_errors"]],
    }

    if export_trace:
        trace_path = outdir / "trace.npz"
        np.savez(
            trace_path,
            trial_costs=best["trial_costs"],
            best_costs=metrics.best_costs,
            best_tour=best["tour"],
            best_headings=best["headings"],
        )
        meta["trace"] = str(trace_path)

    save_solution_json(
        outdir / "solution.json", metrics, best, params, ids=data["ids"], extra=meta
    )
    save_edges_csv(outdir / "edges.csv", best["edges"])
    metrics.save_csv(outdir / "trials.csv")

    return {
        "best": best,
        "data": data,
        "metrics": metrics,
        "params": params,
        "meta": meta,
    }


def load_and_run(
    config_path: Path,
    outdir: Path,
    *,
    seed_override: Optional[int] = None,
    export_trace: bool = False,
) -> Dict[str, Any]:
    """Convenience wrapper combining ``load_config`` and :func:`run_pipeline`."""

    cfg = load_config(config_path)
    if seed_override is not None:
        cfg["seed"] = int(seed_override)

    base_dir = Path(config_path).resolve().parent
    return run_pipeline(cfg, base_dir=base_dir, outdir=outdir, export_trace=export_trace)


def build_arg_parser():
    import argparse

    ap = argparse.ArgumentParser(description="Randomized-heading Dubins TSP solver")
    ap.add_argument("--config", required=True, help="Path to YAML/JSON configuration")
    ap.add_argument("--outdir", required=True, help="Output directory")
    ap.add_argument("--seed", type=int, default=None, help="Optional RNG seed override")
    ap.add_argument(
        "--trace",
        action="store_true",
        help="Export compact trace.npz alongside the solution",
    )
    ap.add_argument("--log-level", default="WARNING", help="Python logging level")
    return ap


def main(argv: Optional[list[str]] = None) -> Dict[str, Any]:
    ap = build_arg_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    outdir = Path(args.outdir).resolve()
    cfg_path = Path(args.config).resolve()

    result = load_and_run(
        cfg_path,
        outdir,
        seed_override=args.seed,
        export_trace=args.trace,
    )

    best = result["best"]
    summary = {
        "best_cost": float(best["cost"]),
        "waypoints": int(result["data"]["n"]),
        "trials": int(result["params"]["iters"]),
        "best_trial": int(best["best_trial"]),
        "tour": [int(i) for i in best["tour"]],
    }

    print("\n[DONE]")
    print(json.dumps(summary, indent=2))
    return result


def cli(argv: Optional[list[str]] = None) -> None:
    """Console script entry; exit status 0 on success."""
    main(argv)


__all__ = [
    "assemble_data",
    "build_arg_parser",
    "build_oracle",
    "build_params",
    "cli",
    "load_and_run",
    "main",
    "run_pipeline",
]
