#!/usr/bin/env python3
"""
Entity Module for the Missile Guidance Core

Script-side view of the host's entity/component storage:
- EntityHost: the narrow get/set position, validity and component interface
  the host implements
- Component / TransformComponent: handles that read and write through the host
- EntityReference: weak handle (identity plus liveness check, no ownership)
- Entity: base class for per-entity scripts (Missile, Player)

Entity identifiers are opaque unsigned 64-bit integers. Id 0 is the null
entity and is never valid.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol, Type, TypeVar

try:
    from .vectors import Vector3
except ImportError:
    from vectors import Vector3


logger = logging.getLogger(__name__)

NULL_ENTITY_ID = 0
MAX_ENTITY_ID = 2**64 - 1


# =============================================================================
# HOST CONTRACT
# =============================================================================

class EntityHost(Protocol):
    """Entity and transform storage owned by the host simulation."""

    def get_position(self, entity_id: int) -> Vector3:
        ...

    def set_position(self, entity_id: int, position: Vector3) -> None:
        ...

    def is_valid(self, entity_id: int) -> bool:
        ...

    def has_component(self, entity_id: int, component_type: type) -> bool:
        ...


# =============================================================================
# COMPONENTS
# =============================================================================

class Component:
    """
    Handle to one component of an entity.

    A component whose entity is None is unbound: it is what get_component()
    hands back when the entity lacks the component.
    """

    def __init__(self, entity: Optional[Entity] = None) -> None:
        self.entity = entity

    @property
    def is_bound(self) -> bool:
        return self.entity is not None

    def _require_entity(self) -> Entity:
        if self.entity is None or self.entity.host is None:
            raise RuntimeError(f"{type(self).__name__} is not bound to an entity")
        return self.entity


class TransformComponent(Component):
    """Position of an entity, stored by the host."""

    @property
    def position(self) -> Vector3:
        entity = self._require_entity()
        return entity.host.get_position(entity.id)

    @position.setter
    def position(self, value: Vector3) -> None:
        entity = self._require_entity()
        entity.host.set_position(entity.id, value)


ComponentT = TypeVar("ComponentT", bound=Component)


# =============================================================================
# ENTITY REFERENCE
# =============================================================================

@dataclass(frozen=True)
class EntityReference:
    """
    Weak reference to another entity.

    Carries identity only. The referenced entity may be destroyed at any
    time, so is_valid() must be checked before every use.

    Attributes:
        entity_id: Referenced entity (0 for the null reference)
        host: Host used for liveness and component queries
    """
    entity_id: int = NULL_ENTITY_ID
    host: Optional[EntityHost] = field(default=None, compare=False, repr=False)

    @property
    def is_null(self) -> bool:
        return self.entity_id == NULL_ENTITY_ID

    def is_valid(self) -> bool:
        if self.host is None or self.is_null:
            return False
        return self.host.is_valid(self.entity_id)

    def __bool__(self) -> bool:
        return self.is_valid()

    def has_component(self, component_type: Type[Component]) -> bool:
        if not self.is_valid():
            return False
        return self.host.has_component(self.entity_id, component_type)

    def get_component(self, component_type: Type[ComponentT]) -> ComponentT:
        """Component bound to the referenced entity, or an unbound one."""
        if self.has_component(component_type):
            return component_type(Entity(self.host, self.entity_id))
        return component_type(None)


# =============================================================================
# ENTITY SCRIPT BASE
# =============================================================================

class Entity:
    """
    Base class for entity scripts.

    The host sets `host`, then calls on_create() once and on_update() every
    simulation tick for as long as the entity lives.
    """

    def __init__(self, host: Optional[EntityHost] = None, entity_id: int = NULL_ENTITY_ID) -> None:
        self.host = host
        self.id = entity_id

    def on_create(self, entity_id: int) -> None:
        self.id = entity_id
        logger.info(f"{type(self).__name__}.on_create({entity_id})")

    def on_update(self, dt: float) -> None:
        pass

    def has_component(self, component_type: Type[Component]) -> bool:
        if self.host is None:
            return False
        return self.host.has_component(self.id, component_type)

    def get_component(self, component_type: Type[ComponentT]) -> ComponentT:
        if self.has_component(component_type):
            return component_type(self)
        return component_type(None)

    @property
    def transform(self) -> TransformComponent:
        """Transform is guaranteed on every entity."""
        return TransformComponent(self)

    def reference(self, entity_id: int) -> EntityReference:
        """Weak reference to another entity in the same host."""
        return EntityReference(entity_id, self.host)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id})"
