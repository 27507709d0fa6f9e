"""Missile intercept guidance core: vector math, oracle contract and guidance controller."""

from .vectors import (
    Vector2,
    Vector3,
    Vector3d,
)

from .entity import (
    NULL_ENTITY_ID,
    Component,
    Entity,
    EntityHost,
    EntityReference,
    TransformComponent,
)

from .input_source import (
    InputSource,
    KeyCode,
)

from .oracle import (
    InterceptSolution,
    Separation,
    TargetingOracle,
    ThrustActuator,
)

from .guidance import (
    # Configuration
    GuidanceConfig,
    load_guidance_config,
    # State types
    GuidanceState,
    ThrustCommand,
    # Guidance law
    compute_bias,
    blend_direction,
    # Controller
    GuidanceController,
)

from .missile import Missile
from .player import Player
from .scene import Scene
from .kinematics import KinematicBody, KinematicOracle
from .logger import setup_logging

__all__ = [
    # Vectors
    "Vector2",
    "Vector3",
    "Vector3d",
    # Entities
    "NULL_ENTITY_ID",
    "Component",
    "Entity",
    "EntityHost",
    "EntityReference",
    "TransformComponent",
    # Input
    "InputSource",
    "KeyCode",
    # Oracle contract
    "InterceptSolution",
    "Separation",
    "TargetingOracle",
    "ThrustActuator",
    # Guidance
    "GuidanceConfig",
    "load_guidance_config",
    "GuidanceState",
    "ThrustCommand",
    "compute_bias",
    "blend_direction",
    "GuidanceController",
    # Scripts
    "Missile",
    "Player",
    # Sandbox host and oracle
    "Scene",
    "KinematicBody",
    "KinematicOracle",
    # Logging
    "setup_logging",
]
