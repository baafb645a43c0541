import numpy as np
from dtsp_randomized.data.generate_data import generate_waypoints
from dtsp_randomized.engine.search import run_randomized_dtsp
from dtsp_randomized.logging.metrics import Metrics
from dtsp_randomized.oracle import LocalSearchOracle
from dtsp_randomized.config.config import DEFAULTS

def test_pipeline_smoke():
    coords = generate_waypoints(n_waypoints=25, extent=100.0, seed=0)
    params = DEFAULTS.copy()
    params["iters"] = 5
    metrics = Metrics()
    best = run_randomized_dtsp(coords, 0.0, 5.0, LocalSearchOracle(), params=params, rng=0, metrics=metrics)
    assert np.isfinite(best["cost"])
    assert len(best["edges"]) == 25
    assert len(metrics.rows) == 5
