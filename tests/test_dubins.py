import math

import numpy as np
import pytest

from dtsp_randomized.config.enums import F_WORD, LRL, LSL, N_WORDS, RLR, W_P
from dtsp_randomized.engine.dubins import (
    build_cost_matrix,
    dubins_length,
    dubins_words,
    mod2pi,
    normalize_poses,
)


def test_straight_line_costs_the_distance():
    assert dubins_length(0.0, 0.0, 0.0, 10.0, 0.0, 0.0, 1.0) == pytest.approx(10.0)


def test_quarter_turn_then_straight():
    # left quarter circle of radius 1 ends at (1, 1) facing +y, then 5 straight
    length = dubins_length(0.0, 0.0, 0.0, 1.0, 6.0, math.pi / 2, 1.0)
    assert length == pytest.approx(math.pi / 2 + 5.0, abs=1e-9)


def test_coincident_poses_cost_nothing():
    assert dubins_length(3.0, 4.0, 1.0, 3.0, 4.0, 1.0, 2.0) == pytest.approx(0.0, abs=1e-9)


def test_length_is_never_shorter_than_euclidean_distance():
    rng = np.random.default_rng(0)
    for _ in range(500):
        x0, y0, x1, y1 = rng.uniform(-20.0, 20.0, size=4)
        h0, h1 = rng.uniform(0.0, 2 * math.pi, size=2)
        r = rng.uniform(0.1, 5.0)
        length = dubins_length(x0, y0, h0, x1, y1, h1, r)
        assert length >= math.hypot(x1 - x0, y1 - y0) - 1e-9


def test_length_scales_with_radius():
    base = dubins_length(0.0, 0.0, 0.3, 2.0, 1.0, 4.0, 1.0)
    scaled = dubins_length(0.0, 0.0, 0.3, 6.0, 3.0, 4.0, 3.0)
    assert scaled == pytest.approx(3.0 * base, rel=1e-9)


def test_non_positive_radius_rejected():
    with pytest.raises(ValueError):
        dubins_length(0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0)
    with pytest.raises(ValueError):
        dubins_length(0.0, 0.0, 0.0, 1.0, 0.0, 0.0, -2.0)


def test_ccc_words_infeasible_for_distant_poses():
    alpha, beta, d = normalize_poses(0.0, 0.0, 0.0, 50.0, 0.0, 1.0, 1.0)
    out = np.empty((N_WORDS, F_WORD))
    dubins_words(alpha, beta, d, out)
    assert np.isnan(out[RLR]).all()
    assert np.isnan(out[LRL]).all()
    assert out[LSL, W_P] > 0.0


def test_mod2pi_wraps_into_half_open_range():
    assert mod2pi(2 * math.pi) == pytest.approx(0.0)
    assert mod2pi(-math.pi / 2) == pytest.approx(1.5 * math.pi)
    assert 0.0 <= mod2pi(-1e-17) < 2 * math.pi


def test_cost_matrix_matches_pairwise_lengths():
    coords = np.array([[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [-3.0, 4.0]])
    headings = np.array([0.0, 1.0, 2.5, 5.0])
    cost = build_cost_matrix(coords, headings, 1.5)

    assert cost.shape == (4, 4)
    assert np.all(np.diag(cost) == 0.0)
    for i in range(4):
        for j in range(4):
            if i == j:
                continue
            expected = dubins_length(
                coords[i, 0], coords[i, 1], headings[i],
                coords[j, 0], coords[j, 1], headings[j],
                1.5,
            )
            assert cost[i, j] == pytest.approx(expected)


def test_cost_matrix_is_asymmetric():
    coords = np.array([[0.0, 0.0], [10.0, 0.0]])
    headings = np.zeros(2)
    cost = build_cost_matrix(coords, headings, 1.0)
    assert cost[0, 1] == pytest.approx(10.0)
    # going back against the heading needs a turn-around
    assert cost[1, 0] > cost[0, 1]


def test_cost_matrix_shape_checks():
    with pytest.raises(ValueError):
        build_cost_matrix(np.zeros((3, 3)), np.zeros(3), 1.0)
    with pytest.raises(ValueError):
        build_cost_matrix(np.zeros((3, 2)), np.zeros(2), 1.0)
    with pytest.raises(ValueError):
        build_cost_matrix(np.zeros((3, 2)), np.zeros(3), 0.0)
