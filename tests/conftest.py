import numpy as np
import pytest

from dtsp_randomized.oracle.base import OrderingOracle


class IdentityOracle(OrderingOracle):
    """Always visits waypoints in index order."""

    name = "identity"

    def __init__(self):
        super().__init__()
        self.calls = 0
        self.matrices = []

    def solve(self, cost, origin=0):
        self.calls += 1
        self.matrices.append(np.array(cost, copy=True))
        return np.arange(cost.shape[0])


class ScriptedOracle(OrderingOracle):
    """Returns identity tours except on the listed calls."""

    name = "scripted"

    def __init__(self, failures):
        super().__init__()
        self.failures = dict(failures)
        self.calls = 0

    def solve(self, cost, origin=0):
        call = self.calls
        self.calls += 1
        action = self.failures.get(call)
        if isinstance(action, BaseException):
            raise action
        if action is not None:
            return action
        return np.arange(cost.shape[0])


@pytest.fixture
def identity_oracle():
    return IdentityOracle()


@pytest.fixture
def make_scripted_oracle():
    return ScriptedOracle
