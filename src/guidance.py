#!/usr/bin/env python3
"""
Guidance Controller Module for the Missile Guidance Core

Per-missile intercept guidance run once per simulation tick:
- GuidanceConfig: tuning parameters (thrust, solver tolerance, PN gain, ...)
- GuidanceState: mutable per-missile state owned by the missile entity
- GuidanceController: throttled intercept solving and pursuit/PN blending
- ThrustCommand: the command issued every seeking tick

Guidance law:
    The pure-pursuit direction toward the solved intercept point is blended
    with the proportional-navigation acceleration direction:

        b = clamp(|a_pn| / a_local, 0, 1)
        direction = normalize((1 - b) * normalize(d_intercept) + b * normalize(a_pn))

    b grows with how hard the target is maneuvering relative to the
    missile's own acceleration authority. With no authority (a_local == 0)
    b is 1.

Recompute throttling:
    The intercept solve is expensive. seek_timer counts up while seeking and
    a solve runs whenever it is above zero; each solve then subtracts
    time_to_intercept * recompute_factor. The timer is not clamped, so a
    large factor can hold it below zero for many ticks.
"""

from __future__ import annotations
import json
import logging
import math
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional

try:
    from .entity import EntityReference
    from .oracle import TargetingOracle
    from .vectors import Vector3, Vector3d
except ImportError:
    from entity import EntityReference
    from oracle import TargetingOracle
    from vectors import Vector3, Vector3d


logger = logging.getLogger(__name__)


# =============================================================================
# DEFAULT TUNING
# =============================================================================

DEFAULT_ENGINE_THRUST_N = 1_000.0
DEFAULT_TARGETING_TOLERANCE_M = 1.0
DEFAULT_MAX_SOLVER_ITERATIONS = 20
DEFAULT_PROPORTIONAL_GAIN = 3.0  # N' for proportional navigation
DEFAULT_RECOMPUTE_FACTOR = 0.1  # ~10 solves per estimated time-to-intercept


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class GuidanceConfig:
    """
    Tuning parameters for one guidance controller.

    Constant across a controller's lifetime unless edited externally.

    Attributes:
        engine_thrust: Engine thrust magnitude (Newtons)
        targeting_tolerance: Intercept solver convergence tolerance (meters)
        max_iterations: Intercept solver iteration cap
        proportional_gain: Proportional navigation constant N'
        recompute_factor: Fraction of time-to-intercept between solves
    """
    engine_thrust: float = DEFAULT_ENGINE_THRUST_N
    targeting_tolerance: float = DEFAULT_TARGETING_TOLERANCE_M
    max_iterations: int = DEFAULT_MAX_SOLVER_ITERATIONS
    proportional_gain: float = DEFAULT_PROPORTIONAL_GAIN
    recompute_factor: float = DEFAULT_RECOMPUTE_FACTOR

    def __post_init__(self) -> None:
        """Validate tuning values."""
        non_finite = [f.name for f in fields(self) if not math.isfinite(getattr(self, f.name))]
        if non_finite:
            raise ValueError(f"Guidance config values must be finite: {', '.join(non_finite)}")
        if self.max_iterations != int(self.max_iterations):
            raise ValueError("Max iterations must be a whole number")
        self.max_iterations = int(self.max_iterations)
        if self.engine_thrust < 0:
            raise ValueError("Engine thrust must be non-negative")
        if self.targeting_tolerance <= 0:
            raise ValueError("Targeting tolerance must be positive")
        if self.max_iterations < 1:
            raise ValueError("Max iterations must be at least 1")
        if self.proportional_gain < 0:
            raise ValueError("Proportional gain must be non-negative")
        if self.recompute_factor < 0:
            raise ValueError("Recompute factor must be non-negative")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GuidanceConfig:
        """
        Create a config from a mapping of field names to values.

        Args:
            data: Field values; missing fields keep their defaults

        Returns:
            Validated GuidanceConfig

        Raises:
            ValueError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown guidance config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_guidance_config(filepath: str | Path, profile: Optional[str] = None) -> GuidanceConfig:
    """
    Load a guidance config from a JSON file.

    Top-level keys are config fields. An optional "profiles" object maps
    profile names to overrides applied on top of them.

    Args:
        filepath: Path to the JSON file
        profile: Profile name to apply, or None for the top-level values

    Returns:
        Validated GuidanceConfig

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        KeyError: If the profile is not defined in the file.
        ValueError: If the values are invalid.
    """
    with open(filepath, "r") as f:
        data = json.load(f)

    profiles = data.pop("profiles", {})
    if profile is not None:
        if profile not in profiles:
            raise KeyError(f"Guidance profile '{profile}' not found in {filepath}")
        data.update(profiles[profile])

    return GuidanceConfig.from_dict(data)


# =============================================================================
# STATE AND COMMANDS
# =============================================================================

@dataclass
class GuidanceState:
    """
    Per-missile guidance state.

    Created with the missile entity, mutated once per tick, discarded with
    it. References are weak and re-validated every tick.

    Attributes:
        seeking: Active guidance enabled (owned by gameplay logic)
        seek_timer: Recompute timer (seconds); solve when above zero
        target: Entity being pursued
        targeting_reticle: Marker placed on the solved intercept point
        aiming_reticle: Marker placed along the commanded thrust direction
        intercept: Last solved intercept point relative to the missile (m)
        time_to_intercept: Last estimated time to intercept (s)
        intercept_direction: Unit pursuit direction from the last solve
        proportional_acceleration: Last PN acceleration command (m/s^2)
        bias: Last PN blend weight in [0, 1]
        thrust_direction: Last commanded thrust direction
        solve_count: Number of intercept solves performed
        target_lost: Target reference was invalid on the last tick
    """
    seeking: bool = False
    seek_timer: float = 0.0
    target: EntityReference = field(default_factory=EntityReference)
    targeting_reticle: EntityReference = field(default_factory=EntityReference)
    aiming_reticle: EntityReference = field(default_factory=EntityReference)

    intercept: Vector3 = field(default_factory=Vector3.zero)
    time_to_intercept: float = 0.0
    intercept_direction: Vector3d = field(default_factory=Vector3d.zero)
    proportional_acceleration: Vector3d = field(default_factory=Vector3d.zero)
    bias: float = 0.0
    thrust_direction: Vector3d = field(default_factory=Vector3d.zero)
    solve_count: int = 0
    target_lost: bool = False

    @property
    def has_solution(self) -> bool:
        return self.solve_count > 0


@dataclass(frozen=True)
class ThrustCommand:
    """
    Thrust command issued by guidance for one tick.

    Attributes:
        direction: Unit thrust direction (zero if no direction is known)
        thrust: Thrust vector (Newtons)
        bias: PN blend weight used
        solved: True if an intercept solve ran this tick
    """
    direction: Vector3d
    thrust: Vector3d
    bias: float
    solved: bool = False


# =============================================================================
# GUIDANCE LAW
# =============================================================================

def compute_bias(pn_acceleration_magnitude: float, local_acceleration: float) -> float:
    """
    Weight of the proportional-navigation term.

    Args:
        pn_acceleration_magnitude: |a_pn| (m/s^2)
        local_acceleration: Maximum acceleration at current thrust (m/s^2)

    Returns:
        Bias in [0, 1]; 1 when local_acceleration is zero
    """
    if local_acceleration == 0:
        return 1.0
    return max(0.0, min(1.0, pn_acceleration_magnitude / local_acceleration))


def blend_direction(
    intercept_direction: Vector3d,
    pn_acceleration: Vector3d,
    bias: float
) -> Vector3d:
    """
    Blend pure pursuit with proportional navigation.

    Zero inputs pass through normalization as zero vectors, so an
    unreachable target or a silent PN term needs no special case.

    Args:
        intercept_direction: Direction toward the intercept point
        pn_acceleration: PN acceleration command
        bias: PN weight in [0, 1]

    Returns:
        Unit thrust direction, or zero if both terms vanish
    """
    pursuit = intercept_direction.normalized() * (1.0 - bias)
    correction = pn_acceleration.normalized() * bias
    return (pursuit + correction).normalized()


# =============================================================================
# GUIDANCE CONTROLLER
# =============================================================================

class GuidanceController:
    """
    Tick-driven guidance state machine for one missile.

    Idle (state.seeking False): timer held at zero, no command.
    Seeking: timer advances, intercept re-solved when the timer is above
    zero, PN bias refreshed, thrust command issued every tick.

    Attributes:
        oracle: Physics solver answering intercept and PN queries
        config: Tuning parameters
        state: Mutable per-missile state
    """

    def __init__(
        self,
        oracle: TargetingOracle,
        config: Optional[GuidanceConfig] = None,
        state: Optional[GuidanceState] = None
    ) -> None:
        self.oracle = oracle
        self.config = config or GuidanceConfig()
        self.state = state or GuidanceState()

    def update(self, self_id: int, dt: float) -> Optional[ThrustCommand]:
        """
        Run one guidance tick.

        Args:
            self_id: Entity id of the guided missile
            dt: Elapsed tick time (seconds)

        Returns:
            ThrustCommand while seeking, None while idle
        """
        state = self.state
        if not state.seeking:
            state.seek_timer = 0.0
            return None

        state.seek_timer += dt

        solved = False
        if self._check_target(self_id):
            target_id = state.target.entity_id
            if state.seek_timer > 0:
                self._solve_intercept(self_id, target_id)
                solved = True
            self._update_bias(self_id, target_id)

        direction = blend_direction(
            state.intercept_direction,
            state.proportional_acceleration,
            state.bias
        )
        state.thrust_direction = direction

        return ThrustCommand(
            direction=direction,
            thrust=direction * self.config.engine_thrust,
            bias=state.bias,
            solved=solved
        )

    def _check_target(self, self_id: int) -> bool:
        """Re-validate the target reference, reporting changes."""
        state = self.state
        valid = state.target.is_valid()
        if not valid and not state.target_lost:
            logger.warning(
                f"Missile {self_id}: target {state.target.entity_id} not found, "
                f"holding last intercept solution"
            )
        elif valid and state.target_lost:
            logger.info(f"Missile {self_id}: target {state.target.entity_id} reacquired")
        state.target_lost = not valid
        return valid

    def _solve_intercept(self, self_id: int, target_id: int) -> None:
        state = self.state
        cfg = self.config
        solution = self.oracle.solve_intercept(
            self_id,
            target_id,
            cfg.engine_thrust,
            cfg.targeting_tolerance,
            cfg.max_iterations
        )
        state.intercept = solution.intercept
        state.time_to_intercept = solution.time_to_intercept
        state.intercept_direction = Vector3d.from_vector3(solution.intercept.normalized())
        state.seek_timer -= solution.time_to_intercept * cfg.recompute_factor
        state.solve_count += 1

        if logger.isEnabledFor(logging.DEBUG):
            speed = self.oracle.get_velocity(self_id).magnitude
            logger.debug(
                f"Missile {self_id}: intercept {solution.intercept!r} "
                f"in {solution.time_to_intercept:.3f}s at {speed:.1f} m/s, "
                f"seek timer {state.seek_timer:.3f}s"
            )

    def _update_bias(self, self_id: int, target_id: int) -> None:
        state = self.state
        cfg = self.config
        pn = self.oracle.compute_proportional_navigation_acceleration(
            self_id, target_id, cfg.proportional_gain
        )
        local = self.oracle.compute_local_acceleration(self_id, cfg.engine_thrust)
        state.proportional_acceleration = pn
        state.bias = compute_bias(pn.magnitude, local)
