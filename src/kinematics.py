#!/usr/bin/env python3
"""
Kinematic Targeting Oracle

Reference implementation of the TargetingOracle and ThrustActuator
contracts for sandboxes and tests. It answers from the current state only:
positions come from the entity host, velocities and masses from bodies
registered here, and targets are assumed to keep their current velocity.
It records thrust commands but never integrates motion.

Intercept solve:
    With r the target offset, v_rel the target velocity relative to the
    missile and a = thrust / mass, the intercept time satisfies

        |r + v_rel * t| = 0.5 * a * t^2

    which is iterated as t <- sqrt(2 * |r + v_rel * t| / a) until the
    predicted intercept point moves by no more than the tolerance, or the
    iteration cap is reached. The last estimate is returned either way.

Proportional navigation:
    omega_los = (r x v_rel) / |r|^2
    a_pn = N' * V_c * (omega_los x r_hat),  V_c = -v_rel . r_hat
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Optional

try:
    from .entity import EntityHost
    from .oracle import InterceptSolution, Separation
    from .vectors import Vector3, Vector3d
except ImportError:
    from entity import EntityHost
    from oracle import InterceptSolution, Separation
    from vectors import Vector3, Vector3d


DEFAULT_BODY_MASS_KG = 1.0


@dataclass
class KinematicBody:
    """
    Physical state the oracle tracks for one entity.

    Attributes:
        velocity: Velocity in world coordinates (m/s)
        mass_kg: Mass (kg)
        thrust: Last thrust command received (Newtons)
    """
    velocity: Vector3d = field(default_factory=Vector3d.zero)
    mass_kg: float = DEFAULT_BODY_MASS_KG
    thrust: Vector3d = field(default_factory=Vector3d.zero)

    def __post_init__(self) -> None:
        if self.mass_kg <= 0:
            raise ValueError("Body mass must be positive")


class KinematicOracle:
    """
    Straight-line targeting oracle.

    Entities that were never registered behave as stationary bodies of
    unit mass.
    """

    def __init__(self, host: EntityHost) -> None:
        self.host = host
        self.bodies: dict[int, KinematicBody] = {}

    def register(
        self,
        entity_id: int,
        velocity: Optional[Vector3d] = None,
        mass_kg: float = DEFAULT_BODY_MASS_KG
    ) -> KinematicBody:
        body = KinematicBody(
            velocity=velocity if velocity is not None else Vector3d.zero(),
            mass_kg=mass_kg
        )
        self.bodies[entity_id] = body
        return body

    def body(self, entity_id: int) -> KinematicBody:
        return self.bodies.get(entity_id) or KinematicBody()

    def _relative_state(self, self_id: int, target_id: int) -> tuple[Vector3d, Vector3d]:
        """Target position and velocity relative to self (double precision)."""
        offset = self.host.get_position(target_id) - self.host.get_position(self_id)
        rel_vel = self.body(target_id).velocity - self.body(self_id).velocity
        return Vector3d.from_vector3(offset), rel_vel

    # -------------------------------------------------------------------------
    # TargetingOracle
    # -------------------------------------------------------------------------

    def solve_intercept(
        self,
        self_id: int,
        target_id: int,
        thrust_magnitude: float,
        tolerance: float,
        max_iterations: int
    ) -> InterceptSolution:
        """
        Iteratively solve the constant-thrust intercept.

        Args:
            self_id: Pursuing entity
            target_id: Target entity
            thrust_magnitude: Thrust available to the pursuer (Newtons)
            tolerance: Convergence tolerance on the intercept point (meters)
            max_iterations: Iteration cap

        Returns:
            Intercept offset from the pursuer and time to intercept. With no
            acceleration available, the current offset and zero time.
        """
        rel_pos, rel_vel = self._relative_state(self_id, target_id)
        accel = self.compute_local_acceleration(self_id, thrust_magnitude)
        if accel <= 0:
            return InterceptSolution(Vector3.from_vector3d(rel_pos), 0.0)

        t = math.sqrt(2.0 * rel_pos.magnitude / accel)
        intercept = rel_pos + rel_vel * t
        for _ in range(max_iterations):
            t = math.sqrt(2.0 * intercept.magnitude / accel)
            refined = rel_pos + rel_vel * t
            shift = (refined - intercept).magnitude
            intercept = refined
            if shift <= tolerance:
                break

        return InterceptSolution(Vector3.from_vector3d(intercept), t)

    def compute_proportional_navigation_acceleration(
        self,
        self_id: int,
        target_id: int,
        gain: float
    ) -> Vector3d:
        rel_pos, rel_vel = self._relative_state(self_id, target_id)
        distance_sq = rel_pos.magnitude_squared
        if distance_sq == 0:
            return Vector3d.zero()

        los_unit = rel_pos.normalized()
        omega_los = rel_pos.cross(rel_vel) / distance_sq
        closing_velocity = -rel_vel.dot(los_unit)
        return omega_los.cross(los_unit) * (gain * closing_velocity)

    def compute_local_acceleration(self, self_id: int, thrust_magnitude: float) -> float:
        return thrust_magnitude / self.body(self_id).mass_kg

    def get_velocity(self, self_id: int) -> Vector3d:
        return self.body(self_id).velocity

    def compute_separation(self, self_id: int, target_id: int) -> Separation:
        offset = self.host.get_position(target_id) - self.host.get_position(self_id)
        return Separation(direction=offset.normalized(), distance=float(offset.magnitude))

    # -------------------------------------------------------------------------
    # ThrustActuator
    # -------------------------------------------------------------------------

    def set_thrust(self, entity_id: int, thrust: Vector3d) -> None:
        self.bodies.setdefault(entity_id, KinematicBody()).thrust = thrust
