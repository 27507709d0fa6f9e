#!/usr/bin/env python3
"""
In-memory scene host.

Implements the EntityHost and InputSource contracts with plain dictionaries
so scripts can run outside the engine (tests, sandboxes, self-tests):
- Entities with a name, a transform position and a set of component types
- Scripts attached to entities, ticked in creation order by update()
- Keyboard state set with press_key() / release_key()

Entity ids are random non-zero 64-bit values, so a destroyed entity's id is
never handed out again in practice.
"""

from __future__ import annotations
import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional

try:
    from .entity import MAX_ENTITY_ID, NULL_ENTITY_ID, Entity, EntityReference, TransformComponent
    from .input_source import KeyCode
    from .vectors import Vector3
except ImportError:
    from entity import MAX_ENTITY_ID, NULL_ENTITY_ID, Entity, EntityReference, TransformComponent
    from input_source import KeyCode
    from vectors import Vector3


logger = logging.getLogger(__name__)


@dataclass
class EntityRecord:
    """Storage for one live entity."""
    entity_id: int
    name: str
    position: Vector3 = field(default_factory=Vector3.zero)
    components: set[type] = field(default_factory=lambda: {TransformComponent})
    script: Optional[Entity] = None


class Scene:
    """Dictionary-backed entity host."""

    def __init__(self) -> None:
        self._entities: dict[int, EntityRecord] = {}
        self._pressed: set[KeyCode] = set()

    # -------------------------------------------------------------------------
    # Entity lifecycle
    # -------------------------------------------------------------------------

    def _new_entity_id(self) -> int:
        while True:
            entity_id = uuid.uuid4().int & MAX_ENTITY_ID
            if entity_id != NULL_ENTITY_ID and entity_id not in self._entities:
                return entity_id

    def create_entity(self, name: str = "Entity", position: Optional[Vector3] = None) -> int:
        """
        Create an entity with a transform.

        Args:
            name: Display name
            position: Initial position (origin if None)

        Returns:
            New entity id
        """
        entity_id = self._new_entity_id()
        self._entities[entity_id] = EntityRecord(
            entity_id=entity_id,
            name=name,
            position=position if position is not None else Vector3.zero()
        )
        logger.debug(f"Created entity '{name}' ({entity_id})")
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Remove an entity. Weak references to it become invalid."""
        record = self._entities.pop(entity_id, None)
        if record is not None:
            logger.debug(f"Destroyed entity '{record.name}' ({entity_id})")

    def _record(self, entity_id: int) -> EntityRecord:
        record = self._entities.get(entity_id)
        if record is None:
            raise KeyError(f"Entity {entity_id} not found in scene")
        return record

    def entity_name(self, entity_id: int) -> str:
        return self._record(entity_id).name

    def reference(self, entity_id: int) -> EntityReference:
        """Weak reference to an entity of this scene."""
        return EntityReference(entity_id, self)

    def __len__(self) -> int:
        return len(self._entities)

    # -------------------------------------------------------------------------
    # Components and scripts
    # -------------------------------------------------------------------------

    def add_component(self, entity_id: int, component_type: type) -> None:
        self._record(entity_id).components.add(component_type)

    def remove_component(self, entity_id: int, component_type: type) -> None:
        if component_type is TransformComponent:
            raise ValueError("Transform cannot be removed from an entity")
        self._record(entity_id).components.discard(component_type)

    def attach_script(self, entity_id: int, script: Entity) -> Entity:
        """
        Attach a script to an entity and run its on_create().

        The script's class is registered as a component of the entity.
        """
        record = self._record(entity_id)
        script.host = self
        record.script = script
        record.components.add(type(script))
        script.on_create(entity_id)
        return script

    def update(self, dt: float) -> None:
        """Tick every live script once, in creation order."""
        for entity_id in list(self._entities):
            record = self._entities.get(entity_id)
            if record is not None and record.script is not None:
                record.script.on_update(dt)

    # -------------------------------------------------------------------------
    # EntityHost
    # -------------------------------------------------------------------------

    def get_position(self, entity_id: int) -> Vector3:
        return self._record(entity_id).position

    def set_position(self, entity_id: int, position: Vector3) -> None:
        self._record(entity_id).position = position

    def is_valid(self, entity_id: int) -> bool:
        return entity_id in self._entities

    def has_component(self, entity_id: int, component_type: type) -> bool:
        record = self._entities.get(entity_id)
        if record is None:
            return False
        return component_type in record.components

    # -------------------------------------------------------------------------
    # InputSource
    # -------------------------------------------------------------------------

    def press_key(self, code: KeyCode) -> None:
        self._pressed.add(code)

    def release_key(self, code: KeyCode) -> None:
        self._pressed.discard(code)

    def is_key_pressed(self, code: KeyCode) -> bool:
        return code in self._pressed
