#!/usr/bin/env python3
"""
Test Suite for the Missile Script

Runs Missile scripts inside an in-memory Scene with the kinematic oracle
acting as both solver and thrust actuator.

Tests cover:
1. Idle missiles issue no thrust
2. Seeking missiles thrust toward the intercept every tick
3. Targeting and aiming reticle placement
4. Destroyed targets and reticles degrade without aborting the tick
"""

import logging
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vectors import Vector3, Vector3d
from entity import EntityReference
from guidance import GuidanceConfig
from kinematics import KinematicOracle
from missile import Missile
from scene import Scene


DT = 0.016
RETICLE_HOME = Vector3(-1.0, -1.0, -1.0)


class RecordingActuator:
    """Collects every thrust command."""

    def __init__(self):
        self.commands = []

    def set_thrust(self, entity_id, thrust):
        self.commands.append((entity_id, thrust))


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def scene():
    return Scene()


@pytest.fixture
def oracle(scene):
    return KinematicOracle(scene)


@pytest.fixture
def actuator():
    return RecordingActuator()


@pytest.fixture
def engagement(scene, oracle, actuator):
    """
    Missile at the origin, stationary target 100 m down +x.

    50 N on a 1 kg missile solves to t = 2 s with the intercept at the
    target itself.
    """
    target_id = scene.create_entity("Target", Vector3(100.0, 0.0, 0.0))
    targeting_id = scene.create_entity("TargetingReticle", RETICLE_HOME)
    aiming_id = scene.create_entity("AimingReticle", RETICLE_HOME)
    missile_id = scene.create_entity("Missile")
    oracle.register(missile_id, mass_kg=1.0)

    missile = Missile(
        oracle,
        actuator,
        GuidanceConfig(engine_thrust=50.0),
        target=scene.reference(target_id),
        targeting_reticle=scene.reference(targeting_id),
        aiming_reticle=scene.reference(aiming_id),
    )
    scene.attach_script(missile_id, missile)
    return {
        "missile": missile,
        "missile_id": missile_id,
        "target_id": target_id,
        "targeting_id": targeting_id,
        "aiming_id": aiming_id,
    }


# =============================================================================
# TESTS
# =============================================================================

class TestMissileLifecycle:
    """Creation and idle behavior."""

    def test_on_create_sets_id_and_logs(self, scene, oracle, actuator, caplog):
        missile_id = scene.create_entity("Missile")
        with caplog.at_level(logging.INFO, logger="entity"):
            missile = scene.attach_script(missile_id, Missile(oracle, actuator))
        assert missile.id == missile_id
        assert f"Missile.on_create({missile_id})" in caplog.text

    def test_idle_missile_issues_no_thrust(self, scene, actuator, engagement):
        for _ in range(20):
            scene.update(DT)
        assert actuator.commands == []
        assert engagement["missile"].last_command is None
        assert engagement["missile"].state.seek_timer == 0.0
        assert scene.get_position(engagement["targeting_id"]) == RETICLE_HOME

    def test_seeking_toggled_externally(self, scene, actuator, engagement):
        missile = engagement["missile"]
        missile.seeking = True
        scene.update(DT)
        missile.seeking = False
        scene.update(DT)
        assert len(actuator.commands) == 1
        assert missile.state.seek_timer == 0.0


class TestSeeking:
    """Seeking missiles."""

    def test_thrust_toward_target(self, scene, actuator, engagement):
        engagement["missile"].seeking = True
        scene.update(DT)
        assert actuator.commands == [(engagement["missile_id"], Vector3d(50.0, 0.0, 0.0))]

    def test_thrust_every_tick(self, scene, actuator, engagement):
        engagement["missile"].seeking = True
        for _ in range(10):
            scene.update(DT)
        assert len(actuator.commands) == 10
        assert all(thrust == Vector3d(50.0, 0.0, 0.0) for _, thrust in actuator.commands)
        # 2 s to intercept * 0.1 recompute factor: one solve in ten ticks
        assert engagement["missile"].state.solve_count == 1

    def test_solution_from_oracle(self, scene, engagement):
        engagement["missile"].seeking = True
        scene.update(DT)
        state = engagement["missile"].state
        assert state.time_to_intercept == pytest.approx(2.0)
        assert state.intercept == Vector3(100.0, 0.0, 0.0)
        assert state.bias == 0.0

    def test_kinematic_oracle_receives_thrust(self, scene, oracle):
        target_id = scene.create_entity("Target", Vector3(0.0, 30.0, 0.0))
        missile_id = scene.create_entity("Missile")
        missile = Missile(oracle, oracle, GuidanceConfig(engine_thrust=7.0),
                          target=scene.reference(target_id), seeking=True)
        scene.attach_script(missile_id, missile)
        scene.update(DT)
        assert oracle.body(missile_id).thrust == Vector3d(0.0, 7.0, 0.0)


class TestReticles:
    """Reticle placement."""

    def test_targeting_reticle_on_intercept(self, scene, engagement):
        engagement["missile"].seeking = True
        scene.update(DT)
        assert scene.get_position(engagement["targeting_id"]) == Vector3(100.0, 0.0, 0.0)

    def test_aiming_reticle_along_thrust_at_target_range(self, scene, engagement):
        engagement["missile"].seeking = True
        scene.update(DT)
        assert scene.get_position(engagement["aiming_id"]) == Vector3(100.0, 0.0, 0.0)

    def test_reticle_follows_missile_between_solves(self, scene, engagement):
        engagement["missile"].seeking = True
        scene.update(DT)
        scene.set_position(engagement["missile_id"], Vector3(10.0, 5.0, 0.0))
        scene.update(DT)
        assert engagement["missile"].state.solve_count == 1
        assert scene.get_position(engagement["targeting_id"]) == Vector3(110.0, 5.0, 0.0)

    def test_no_reticle_update_before_first_solve(self, scene, engagement):
        missile = engagement["missile"]
        missile.seeking = True
        missile.state.seek_timer = -10.0
        scene.update(DT)
        assert missile.state.solve_count == 0
        assert scene.get_position(engagement["targeting_id"]) == RETICLE_HOME

    def test_null_reticles_are_skipped_quietly(self, scene, oracle, actuator, caplog):
        target_id = scene.create_entity("Target", Vector3(0.0, 0.0, 10.0))
        missile_id = scene.create_entity("Missile")
        missile = Missile(oracle, actuator, target=scene.reference(target_id), seeking=True)
        scene.attach_script(missile_id, missile)
        with caplog.at_level(logging.ERROR, logger="missile"):
            scene.update(DT)
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
        assert len(actuator.commands) == 1


class TestStaleReferences:
    """Destroyed targets and reticles."""

    def test_destroyed_target_keeps_thrusting_on_last_solution(self, scene, actuator, engagement, caplog):
        missile = engagement["missile"]
        missile.seeking = True
        scene.update(DT)

        scene.destroy_entity(engagement["target_id"])
        scene.set_position(engagement["missile_id"], Vector3(0.0, 50.0, 0.0))
        with caplog.at_level(logging.WARNING):
            scene.update(DT)

        assert len(actuator.commands) == 2
        assert actuator.commands[-1][1] == Vector3d(50.0, 0.0, 0.0)
        assert scene.get_position(engagement["targeting_id"]) == Vector3(100.0, 0.0, 0.0)
        assert scene.get_position(engagement["aiming_id"]) == Vector3(100.0, 0.0, 0.0)
        assert "not found" in caplog.text

    def test_destroyed_reticle_reported(self, scene, actuator, engagement, caplog):
        missile = engagement["missile"]
        missile.seeking = True
        scene.destroy_entity(engagement["targeting_id"])
        with caplog.at_level(logging.ERROR, logger="missile"):
            scene.update(DT)
        assert "Targeting reticle" in caplog.text
        assert len(actuator.commands) == 1
        assert scene.get_position(engagement["aiming_id"]) == Vector3(100.0, 0.0, 0.0)

    def test_reticle_stale_before_construction_reported(self, scene, oracle, actuator, caplog):
        target_id = scene.create_entity("Target", Vector3(100.0, 0.0, 0.0))
        reticle_id = scene.create_entity("TargetingReticle")
        stale = scene.reference(reticle_id)
        scene.destroy_entity(reticle_id)
        missile_id = scene.create_entity("Missile")

        missile = Missile(
            oracle,
            actuator,
            GuidanceConfig(engine_thrust=50.0),
            target=scene.reference(target_id),
            targeting_reticle=stale,
            seeking=True,
        )
        scene.attach_script(missile_id, missile)
        assert missile.state.targeting_reticle.entity_id == reticle_id

        with caplog.at_level(logging.ERROR, logger="missile"):
            scene.update(DT)
        assert f"Targeting reticle {reticle_id} not found" in caplog.text

    def test_target_stale_before_construction_keeps_id(self, scene, oracle, actuator, caplog):
        target_id = scene.create_entity("Target")
        stale = scene.reference(target_id)
        scene.destroy_entity(target_id)
        missile_id = scene.create_entity("Missile")

        missile = Missile(oracle, actuator, target=stale, seeking=True)
        scene.attach_script(missile_id, missile)
        assert missile.target == EntityReference(target_id)

        with caplog.at_level(logging.WARNING, logger="guidance"):
            scene.update(DT)
        assert f"target {target_id} not found" in caplog.text

    def test_retargeting(self, scene, actuator, engagement):
        missile = engagement["missile"]
        missile.seeking = True
        scene.update(DT)
        new_target = scene.create_entity("Decoy", Vector3(0.0, -40.0, 0.0))
        missile.target = scene.reference(new_target)
        missile.state.seek_timer = 1.0
        scene.update(DT)
        assert actuator.commands[-1][1] == Vector3d(0.0, -50.0, 0.0)
        assert missile.target == EntityReference(new_target)
