import numpy as np


def generate_waypoints(n_waypoints=20, extent=100.0, seed=0):
    """Random waypoint instance; waypoint 0 (the origin) sits at the centre."""
    rng = np.random.default_rng(seed)
    coords = np.zeros((n_waypoints, 2), dtype=np.float64)
    coords[0] = np.array([extent / 2.0, extent / 2.0])
    coords[1:] = rng.uniform(0.0, extent, size=(n_waypoints - 1, 2))
    return coords
