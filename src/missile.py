#!/usr/bin/env python3
"""
Missile entity script.

Binds a GuidanceController to the host: each tick it runs guidance, sends
the thrust command to the physics actuator and moves the reticle markers.

Reticles:
- Targeting reticle: missile position + solved intercept offset
- Aiming reticle: missile position + commanded direction scaled to the
  current distance to the target

A reticle whose reference has gone stale is reported and skipped for the
tick. A null (unset) reticle reference is simply not drawn.
"""

from __future__ import annotations
import logging
from typing import Optional

try:
    from .entity import Entity, EntityReference, TransformComponent
    from .guidance import GuidanceConfig, GuidanceController, GuidanceState, ThrustCommand
    from .oracle import TargetingOracle, ThrustActuator
    from .vectors import Vector3
except ImportError:
    from entity import Entity, EntityReference, TransformComponent
    from guidance import GuidanceConfig, GuidanceController, GuidanceState, ThrustCommand
    from oracle import TargetingOracle, ThrustActuator
    from vectors import Vector3


logger = logging.getLogger(__name__)


class Missile(Entity):
    """
    Guided missile script.

    Attributes:
        state: Guidance state owned by this missile
        controller: Guidance controller driving the state
        actuator: Receives the thrust command every seeking tick
        last_command: Most recent thrust command, None while idle
    """

    def __init__(
        self,
        oracle: TargetingOracle,
        actuator: ThrustActuator,
        config: Optional[GuidanceConfig] = None,
        target: Optional[EntityReference] = None,
        targeting_reticle: Optional[EntityReference] = None,
        aiming_reticle: Optional[EntityReference] = None,
        seeking: bool = False
    ) -> None:
        super().__init__()
        self.state = GuidanceState(
            seeking=seeking,
            target=target if target is not None else EntityReference(),
            targeting_reticle=targeting_reticle if targeting_reticle is not None else EntityReference(),
            aiming_reticle=aiming_reticle if aiming_reticle is not None else EntityReference()
        )
        self.controller = GuidanceController(oracle, config, self.state)
        self.actuator = actuator
        self.last_command: Optional[ThrustCommand] = None

    @property
    def seeking(self) -> bool:
        return self.state.seeking

    @seeking.setter
    def seeking(self, value: bool) -> None:
        self.state.seeking = value

    @property
    def target(self) -> EntityReference:
        return self.state.target

    @target.setter
    def target(self, reference: EntityReference) -> None:
        self.state.target = reference

    @property
    def config(self) -> GuidanceConfig:
        return self.controller.config

    def on_update(self, dt: float) -> None:
        command = self.controller.update(self.id, dt)
        self.last_command = command
        if command is None:
            return

        self.actuator.set_thrust(self.id, command.thrust)

        if not self.state.has_solution or self.state.target_lost:
            return

        position = self.transform.position
        self._place_reticle(
            self.state.targeting_reticle,
            position + self.state.intercept,
            "Targeting reticle"
        )
        if self.state.aiming_reticle.is_null:
            return
        separation = self.controller.oracle.compute_separation(
            self.id, self.state.target.entity_id
        )
        aim_offset = Vector3.from_vector3d(command.direction) * separation.distance
        self._place_reticle(self.state.aiming_reticle, position + aim_offset, "Aiming reticle")

    def _place_reticle(self, reticle: EntityReference, position: Vector3, label: str) -> None:
        if reticle.is_null:
            return
        if not reticle.is_valid():
            logger.error(f"{label} {reticle.entity_id} not found for missile {self.id}")
            return
        reticle.get_component(TransformComponent).position = position


if __name__ == "__main__":
    try:
        from .kinematics import KinematicOracle
        from .logger import setup_logging
        from .scene import Scene
        from .vectors import Vector3d
    except ImportError:
        from kinematics import KinematicOracle
        from logger import setup_logging
        from scene import Scene
        from vectors import Vector3d

    setup_logging(level=logging.DEBUG)

    print("=" * 70)
    print("MISSILE GUIDANCE - SELF TEST")
    print("=" * 70)

    scene = Scene()
    oracle = KinematicOracle(scene)

    target_id = scene.create_entity("Target", Vector3(10_000.0, 2_000.0, 0.0))
    reticle_id = scene.create_entity("TargetingReticle")
    missile_id = scene.create_entity("Missile")

    oracle.register(target_id, velocity=Vector3d(0.0, 150.0, 0.0), mass_kg=20_000.0)
    oracle.register(missile_id, mass_kg=100.0)

    missile = Missile(
        oracle,
        oracle,
        GuidanceConfig(engine_thrust=5_000.0),
        target=scene.reference(target_id),
        targeting_reticle=scene.reference(reticle_id),
        seeking=True
    )
    scene.attach_script(missile_id, missile)

    for tick in range(5):
        scene.update(0.016)
        cmd = missile.last_command
        print(f"Tick {tick}: thrust {cmd.thrust!r} bias {cmd.bias:.3f} solved {cmd.solved}")
    print(f"Targeting reticle at {scene.get_position(reticle_id)}")
