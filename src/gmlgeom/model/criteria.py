"""Linearization criteria: how densely a curved segment is approximated."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class NumPointsCriterion:
    """Use exactly `num_points` interpolation points per arc."""
    num_points: int

    def __post_init__(self) -> None:
        if self.num_points < 2:
            raise ValueError(f"num_points must be at least 2, got {self.num_points}.")


@dataclass(frozen=True)
class MaxErrorCriterion:
    """
    Use as few points as keep every chord within `max_error` of the true curve.

    `max_num_points` caps the computed count; 0 means no cap.
    """
    max_error: float
    max_num_points: int = 0

    def __post_init__(self) -> None:
        if not self.max_error > 0.0:
            raise ValueError(f"max_error must be positive, got {self.max_error}.")
        if self.max_num_points != 0 and self.max_num_points < 2:
            raise ValueError(f"max_num_points must be 0 or at least 2, got {self.max_num_points}.")


LinearizationCriterion = Union[NumPointsCriterion, MaxErrorCriterion]
