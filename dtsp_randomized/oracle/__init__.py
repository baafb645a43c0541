"""Ordering oracle implementations."""

from .base import OrderingOracle, rotate_to_origin, validate_ordering
from .lkh import LKHOracle
from .local import LocalSearchOracle

__all__ = [
    "LKHOracle",
    "LocalSearchOracle",
    "OrderingOracle",
    "rotate_to_origin",
    "validate_ordering",
]
