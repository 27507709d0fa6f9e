#!/usr/bin/env python3
"""
Player-control entity script.

Moves its entity in the XY plane from keyboard state: A/D along x, W/S
along y. Diagonal movement is normalized so speed is the same in every
direction.
"""

from __future__ import annotations
import logging

try:
    from .entity import Entity
    from .input_source import InputSource, KeyCode
    from .vectors import Vector3
except ImportError:
    from entity import Entity
    from input_source import InputSource, KeyCode
    from vectors import Vector3


logger = logging.getLogger(__name__)

DEFAULT_PLAYER_SPEED = 1.0  # units per second


class Player(Entity):
    """
    Keyboard-driven entity.

    Attributes:
        speed: Movement speed (units per second)
        input_source: Polled keyboard state
    """

    def __init__(self, input_source: InputSource, speed: float = DEFAULT_PLAYER_SPEED) -> None:
        super().__init__()
        self.input_source = input_source
        self.speed = speed

    def movement_direction(self) -> Vector3:
        """Unit movement direction from the keys held this tick."""
        keys = self.input_source
        x = 0.0
        y = 0.0
        if keys.is_key_pressed(KeyCode.A):
            x = -1.0
        elif keys.is_key_pressed(KeyCode.D):
            x = 1.0
        if keys.is_key_pressed(KeyCode.W):
            y = 1.0
        elif keys.is_key_pressed(KeyCode.S):
            y = -1.0
        return Vector3(x, y, 0.0).normalized()

    def on_update(self, dt: float) -> None:
        super().on_update(dt)

        direction = self.movement_direction()
        distance = self.speed * dt

        transform = self.transform
        position = transform.position + direction * distance
        transform.position = position

        logger.info(f"Entity ({self.id}) position: {position}")
