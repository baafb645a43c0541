import numpy as np
from numba import njit

from ..config.enums import F_WORD, N_WORDS
from .dubins import shortest_word
from .paths import Edge, dubins_path


@njit(cache=True)
def _tour_cost(coords, headings, tour, r, close_loop):
    out = np.empty((N_WORDS, F_WORD), dtype=np.float64)
    L = tour.shape[0]
    s = 0.0
    for k in range(L - 1):
        a = tour[k]
        b = tour[k + 1]
        word, t, p, q = shortest_word(
            coords[a, 0], coords[a, 1], headings[a],
            coords[b, 0], coords[b, 1], headings[b],
            r, out,
        )
        s += (t + p + q) * r
    if close_loop and L > 1:
        a = tour[L - 1]
        b = tour[0]
        word, t, p, q = shortest_word(
            coords[a, 0], coords[a, 1], headings[a],
            coords[b, 0], coords[b, 1], headings[b],
            r, out,
        )
        s += (t + p + q) * r
    return s


def _tour_legs(tour, close_loop):
    legs = [(int(tour[k]), int(tour[k + 1])) for k in range(len(tour) - 1)]
    if close_loop and len(tour) > 1:
        legs.append((int(tour[-1]), int(tour[0])))
    return legs


def dubins_tour_cost(coords, headings, tour, r, close_loop=False):
    """Sum of Dubins lengths along ``tour`` using each waypoint's heading.

    With ``close_loop`` the leg from the last waypoint back to ``tour[0]`` (the
    origin) is added.  Inputs are not modified.
    """
    coords = np.ascontiguousarray(coords, dtype=np.float64)
    headings = np.ascontiguousarray(headings, dtype=np.float64)
    tour = np.ascontiguousarray(tour, dtype=np.int64)
    return float(_tour_cost(coords, headings, tour, float(r), bool(close_loop)))


def create_tour_edges(coords, headings, tour, r, close_loop=False):
    """Materialize the legs of ``tour`` as :class:`Edge` objects.

    Returns ``(edges, cost)`` where ``cost`` is the sum of the edge lengths and
    matches :func:`dubins_tour_cost` for the same arguments.
    """
    edges = []
    cost = 0.0
    for a, b in _tour_legs(tour, close_loop):
        path = dubins_path(
            (coords[a, 0], coords[a, 1], headings[a]),
            (coords[b, 0], coords[b, 1], headings[b]),
            r,
        )
        edges.append(
            Edge(
                source=a,
                target=b,
                path_type=path.path_type,
                length=path.length,
                segments=path.segments,
            )
        )
        cost += path.length
    return edges, cost
