import numpy as np

TWO_PI = 2.0 * np.pi


def random_heading(rng):
    """Uniform random heading in ``[0, 2*pi)``."""
    return float(np.mod(rng.uniform(0.0, TWO_PI), TWO_PI))


def randomize_headings(n, origin_heading, rng, skip_origin=True, headings=None):
    """Draw an independent uniform heading for every waypoint.

    The origin (index 0) always ends up with ``origin_heading``; with
    ``skip_origin`` unset it still consumes a draw from ``rng``.  Fills and
    returns ``headings`` when given, else a fresh array.
    """
    if headings is None:
        headings = np.empty(n, dtype=np.float64)
    start = 1 if skip_origin else 0
    for i in range(start, n):
        headings[i] = random_heading(rng)
    headings[0] = origin_heading
    return headings
