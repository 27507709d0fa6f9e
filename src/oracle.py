#!/usr/bin/env python3
"""
Targeting Oracle Client contract.

The guidance controller does no trajectory work of its own. It asks an
external physics solver for intercept solutions and proportional-navigation
terms through the TargetingOracle protocol, and hands its thrust command back
through ThrustActuator. Calls are synchronous and the answers are treated as
authoritative for the current tick.

Results are plain frozen dataclasses so test stubs can return fixed values.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol

try:
    from .vectors import Vector3, Vector3d
except ImportError:
    from vectors import Vector3, Vector3d


@dataclass(frozen=True)
class InterceptSolution:
    """
    Result of an intercept solve.

    Attributes:
        intercept: Intercept point relative to the missile (meters)
        time_to_intercept: Estimated time until intercept (seconds)
    """
    intercept: Vector3
    time_to_intercept: float


@dataclass(frozen=True)
class Separation:
    """
    Line of sight from one entity to another.

    Attributes:
        direction: Unit vector toward the other entity (zero when coincident)
        distance: Distance to the other entity (meters)
    """
    direction: Vector3
    distance: float


class TargetingOracle(Protocol):
    """Physics and trajectory solver consumed by guidance."""

    def solve_intercept(
        self,
        self_id: int,
        target_id: int,
        thrust_magnitude: float,
        tolerance: float,
        max_iterations: int
    ) -> InterceptSolution:
        """
        Solve for the constant-thrust intercept of the target's trajectory.

        Must return within max_iterations. A non-converged best estimate is
        a valid answer.
        """
        ...

    def compute_proportional_navigation_acceleration(
        self,
        self_id: int,
        target_id: int,
        gain: float
    ) -> Vector3d:
        """Lateral acceleration command of the PN law (m/s^2)."""
        ...

    def compute_local_acceleration(self, self_id: int, thrust_magnitude: float) -> float:
        """Acceleration the given thrust produces on self_id (m/s^2)."""
        ...

    def get_velocity(self, self_id: int) -> Vector3d:
        ...

    def compute_separation(self, self_id: int, target_id: int) -> Separation:
        ...


class ThrustActuator(Protocol):
    """Receives the thrust command issued by guidance each tick."""

    def set_thrust(self, entity_id: int, thrust: Vector3d) -> None:
        ...
