import math

import numpy as np
import pytest

from dtsp_randomized.engine.dubins import dubins_length
from dtsp_randomized.engine.headings import randomize_headings, random_heading
from dtsp_randomized.engine.paths import dubins_path, sample_path
from dtsp_randomized.engine.tour import create_tour_edges, dubins_tour_cost


def _angle_diff(a, b):
    return (a - b + math.pi) % (2 * math.pi) - math.pi


def test_random_headings_stay_in_range_and_keep_origin():
    rng = np.random.default_rng(3)
    headings = randomize_headings(200, 1.25, rng)
    assert headings[0] == 1.25
    assert np.all(headings >= 0.0)
    assert np.all(headings < 2 * math.pi)
    assert 0.0 <= random_heading(rng) < 2 * math.pi


def test_random_headings_are_reproducible_per_seed():
    a = randomize_headings(10, 0.0, np.random.default_rng(11))
    b = randomize_headings(10, 0.0, np.random.default_rng(11))
    c = randomize_headings(10, 0.0, np.random.default_rng(12))
    assert np.array_equal(a, b)
    assert not np.array_equal(a, c)


def test_sampling_the_origin_still_pins_its_heading():
    buf = np.full(5, -1.0)
    out = randomize_headings(5, 0.5, np.random.default_rng(0), skip_origin=False, headings=buf)
    assert out is buf
    assert buf[0] == 0.5
    assert np.all(buf[1:] >= 0.0)


def test_path_segments_reach_the_goal_pose():
    rng = np.random.default_rng(1)
    for _ in range(100):
        start = (*rng.uniform(-10, 10, size=2), rng.uniform(0, 2 * math.pi))
        end = (*rng.uniform(-10, 10, size=2), rng.uniform(0, 2 * math.pi))
        r = rng.uniform(0.5, 3.0)
        path = dubins_path(start, end, r)

        assert len(path.segments) == 3
        assert path.segments[0].start == pytest.approx(start)
        for a, b in zip(path.segments, path.segments[1:]):
            assert a.end == b.start
        x, y, h = path.segments[-1].end
        assert x == pytest.approx(end[0], abs=1e-6)
        assert y == pytest.approx(end[1], abs=1e-6)
        assert _angle_diff(h, end[2]) == pytest.approx(0.0, abs=1e-6)

        assert sum(s.length for s in path.segments) == pytest.approx(path.length)
        assert path.length == pytest.approx(dubins_length(*start, *end, r))


def test_sample_path_spacing():
    path = dubins_path((0.0, 0.0, 0.0), (4.0, 4.0, math.pi), 1.0)
    pts = sample_path(path, 0.1)
    assert pts.shape[1] == 3
    assert pts[0, :2] == pytest.approx([0.0, 0.0])
    assert pts[-1, :2] == pytest.approx([4.0, 4.0], abs=1e-6)
    steps = np.hypot(np.diff(pts[:, 0]), np.diff(pts[:, 1]))
    assert steps.max() <= 0.1 + 1e-9


def test_closing_edge_adds_exactly_the_return_leg():
    coords = np.array([[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [0.0, 8.0]])
    headings = np.array([0.0, 1.2, 2.8, 4.0])
    tour = np.array([0, 2, 1, 3])

    open_cost = dubins_tour_cost(coords, headings, tour, 1.0, close_loop=False)
    closed_cost = dubins_tour_cost(coords, headings, tour, 1.0, close_loop=True)
    back = dubins_length(0.0, 8.0, 4.0, 0.0, 0.0, 0.0, 1.0)
    assert closed_cost == pytest.approx(open_cost + back)


def test_edges_chain_along_the_tour_and_sum_to_its_cost():
    coords = np.array([[0.0, 0.0], [5.0, 1.0], [3.0, 7.0]])
    headings = np.array([0.0, 2.0, 4.0])
    tour = np.array([0, 1, 2])
    coords_before = coords.copy()

    edges, cost = create_tour_edges(coords, headings, tour, 2.0, close_loop=True)

    assert [(e.source, e.target) for e in edges] == [(0, 1), (1, 2), (2, 0)]
    assert cost == pytest.approx(dubins_tour_cost(coords, headings, tour, 2.0, True))
    assert sum(e.length for e in edges) == pytest.approx(cost)
    assert {e.path_type for e in edges} <= {"LSL", "LSR", "RSL", "RSR", "RLR", "LRL"}
    assert np.array_equal(coords, coords_before)

    open_edges, _ = create_tour_edges(coords, headings, tour, 2.0, close_loop=False)
    assert len(open_edges) == 2
