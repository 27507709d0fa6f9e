#!/usr/bin/env python3
"""
Vector Math Module for the Missile Guidance Core

Small immutable vector types used by guidance and the script layer:
- Vector2 / Vector3: single precision (numpy.float32) for rendering-space
  positions and directions
- Vector3d: double precision for physical quantities (velocity, acceleration,
  thrust)

Degenerate inputs never raise:
- Normalizing a zero vector returns the zero vector
- Dividing by a zero scalar returns the zero vector
- The cross product of parallel or zero vectors is the zero vector

Precision is part of the type. Arithmetic between different vector types is
not supported; convert explicitly with the from_* classmethods.
"""

from __future__ import annotations
import math
import numbers
from dataclasses import dataclass

import numpy as np


# =============================================================================
# TOLERANCES
# =============================================================================

# Default tolerances for is_close() comparisons
SINGLE_PRECISION_TOLERANCE = 1e-5
DOUBLE_PRECISION_TOLERANCE = 1e-9


def _is_scalar(value: object) -> bool:
    return isinstance(value, numbers.Real)


def _components_close(a: tuple, b: tuple, tol: float) -> bool:
    return all(
        math.isclose(float(p), float(q), rel_tol=tol, abs_tol=tol)
        for p, q in zip(a, b)
    )


# =============================================================================
# VECTOR2 CLASS
# =============================================================================

@dataclass(frozen=True)
class Vector2:
    """
    2D single-precision vector.

    Components are stored as numpy.float32 and every operation is computed
    in single precision.
    """
    x: float = 0.0
    y: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", np.float32(self.x))
        object.__setattr__(self, "y", np.float32(self.y))

    def __add__(self, other: Vector2) -> Vector2:
        """Vector addition."""
        if not isinstance(other, Vector2):
            return NotImplemented
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        """Vector subtraction."""
        if not isinstance(other, Vector2):
            return NotImplemented
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2:
        """Scalar multiplication."""
        if not _is_scalar(scalar):
            return NotImplemented
        s = np.float32(scalar)
        return Vector2(self.x * s, self.y * s)

    def __rmul__(self, scalar: float) -> Vector2:
        """Right scalar multiplication."""
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector2:
        """Scalar division. Division by zero gives the zero vector."""
        if not _is_scalar(scalar):
            return NotImplemented
        s = np.float32(scalar)
        if s == 0:
            return Vector2.zero()
        return Vector2(self.x / s, self.y / s)

    def __neg__(self) -> Vector2:
        """Negation."""
        return Vector2(-self.x, -self.y)

    def dot(self, other: Vector2) -> np.float32:
        """Dot product."""
        return self.x * other.x + self.y * other.y

    @property
    def magnitude_squared(self) -> np.float32:
        """Squared magnitude (avoids sqrt for comparisons)."""
        with np.errstate(over="ignore", under="ignore"):
            return self.x * self.x + self.y * self.y

    @property
    def magnitude(self) -> np.float32:
        """Vector magnitude (length), without intermediate overflow."""
        return np.hypot(self.x, self.y)

    def normalized(self) -> Vector2:
        """Return unit vector in same direction, or zero for a zero vector."""
        if self.magnitude_squared == 0:
            return Vector2.zero()
        scaled = self / max(abs(self.x), abs(self.y))
        return scaled / scaled.magnitude

    def is_zero(self) -> bool:
        return self.x == 0 and self.y == 0

    def is_close(self, other: Vector2, tol: float = SINGLE_PRECISION_TOLERANCE) -> bool:
        """Component-wise comparison within tolerance."""
        return _components_close(self.to_tuple(), other.to_tuple(), tol)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to tuple of Python floats."""
        return (float(self.x), float(self.y))

    @classmethod
    def from_tuple(cls, t: tuple[float, float]) -> Vector2:
        """Create from tuple."""
        return cls(t[0], t[1])

    @classmethod
    def broadcast(cls, value: float) -> Vector2:
        """Vector with every component set to value."""
        return cls(value, value)

    @classmethod
    def zero(cls) -> Vector2:
        """Zero vector."""
        return cls(0.0, 0.0)

    def __str__(self) -> str:
        return f"{self.x} {self.y}"

    def __repr__(self) -> str:
        return f"Vector2({self.x:.6g}, {self.y:.6g})"


# =============================================================================
# VECTOR3 CLASS
# =============================================================================

@dataclass(frozen=True)
class Vector3:
    """
    3D single-precision vector for rendering-space positions and directions.

    Uses a right-handed coordinate system. Entity transforms are stored in
    this type; physical quantities use Vector3d.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", np.float32(self.x))
        object.__setattr__(self, "y", np.float32(self.y))
        object.__setattr__(self, "z", np.float32(self.z))

    def __add__(self, other: Vector3) -> Vector3:
        """Vector addition."""
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        """Vector subtraction."""
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3:
        """Scalar multiplication."""
        if not _is_scalar(scalar):
            return NotImplemented
        s = np.float32(scalar)
        return Vector3(self.x * s, self.y * s, self.z * s)

    def __rmul__(self, scalar: float) -> Vector3:
        """Right scalar multiplication."""
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector3:
        """Scalar division. Division by zero gives the zero vector."""
        if not _is_scalar(scalar):
            return NotImplemented
        s = np.float32(scalar)
        if s == 0:
            return Vector3.zero()
        return Vector3(self.x / s, self.y / s, self.z / s)

    def __neg__(self) -> Vector3:
        """Negation."""
        return Vector3(-self.x, -self.y, -self.z)

    def dot(self, other: Vector3) -> np.float32:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        """Cross product (right-handed)."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    @property
    def magnitude_squared(self) -> np.float32:
        """Squared magnitude (avoids sqrt for comparisons)."""
        with np.errstate(over="ignore", under="ignore"):
            return self.x * self.x + self.y * self.y + self.z * self.z

    @property
    def magnitude(self) -> np.float32:
        """Vector magnitude (length), without intermediate overflow."""
        return np.hypot(np.hypot(self.x, self.y), self.z)

    def normalized(self) -> Vector3:
        """Return unit vector in same direction, or zero for a zero vector."""
        if self.magnitude_squared == 0:
            return Vector3.zero()
        # Scale the largest component to 1 so the length cannot overflow
        scaled = self / max(abs(self.x), abs(self.y), abs(self.z))
        return scaled / scaled.magnitude

    def is_zero(self) -> bool:
        return self.x == 0 and self.y == 0 and self.z == 0

    def is_close(self, other: Vector3, tol: float = SINGLE_PRECISION_TOLERANCE) -> bool:
        """Component-wise comparison within tolerance."""
        return _components_close(self.to_tuple(), other.to_tuple(), tol)

    def to_tuple(self) -> tuple[float, float, float]:
        """Convert to tuple of Python floats."""
        return (float(self.x), float(self.y), float(self.z))

    @classmethod
    def from_tuple(cls, t: tuple[float, float, float]) -> Vector3:
        """Create from tuple."""
        return cls(t[0], t[1], t[2])

    @classmethod
    def from_vector2(cls, v: Vector2) -> Vector3:
        """Extend a 2D vector with z = 0."""
        return cls(v.x, v.y, 0.0)

    @classmethod
    def from_vector3d(cls, v: Vector3d) -> Vector3:
        """
        Narrow a double-precision vector to single precision.

        This loses precision and is never done implicitly.
        """
        return cls(v.x, v.y, v.z)

    @classmethod
    def broadcast(cls, value: float) -> Vector3:
        """Vector with every component set to value."""
        return cls(value, value, value)

    @classmethod
    def zero(cls) -> Vector3:
        """Zero vector."""
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def unit_x(cls) -> Vector3:
        return cls(1.0, 0.0, 0.0)

    @classmethod
    def unit_y(cls) -> Vector3:
        return cls(0.0, 1.0, 0.0)

    @classmethod
    def unit_z(cls) -> Vector3:
        return cls(0.0, 0.0, 1.0)

    def __str__(self) -> str:
        return f"{self.x} {self.y} {self.z}"

    def __repr__(self) -> str:
        return f"Vector3({self.x:.6g}, {self.y:.6g}, {self.z:.6g})"


# =============================================================================
# VECTOR3D CLASS
# =============================================================================

@dataclass(frozen=True)
class Vector3d:
    """
    3D double-precision vector for physical quantities.

    Velocities, accelerations and thrust commands live in this type so that
    error does not accumulate over long runs. All units SI.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "z", float(self.z))

    def __add__(self, other: Vector3d) -> Vector3d:
        """Vector addition."""
        if not isinstance(other, Vector3d):
            return NotImplemented
        return Vector3d(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3d) -> Vector3d:
        """Vector subtraction."""
        if not isinstance(other, Vector3d):
            return NotImplemented
        return Vector3d(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3d:
        """Scalar multiplication."""
        if not _is_scalar(scalar):
            return NotImplemented
        s = float(scalar)
        return Vector3d(self.x * s, self.y * s, self.z * s)

    def __rmul__(self, scalar: float) -> Vector3d:
        """Right scalar multiplication."""
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector3d:
        """Scalar division. Division by zero gives the zero vector."""
        if not _is_scalar(scalar):
            return NotImplemented
        s = float(scalar)
        if s == 0:
            return Vector3d.zero()
        return Vector3d(self.x / s, self.y / s, self.z / s)

    def __neg__(self) -> Vector3d:
        """Negation."""
        return Vector3d(-self.x, -self.y, -self.z)

    def dot(self, other: Vector3d) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3d) -> Vector3d:
        """Cross product (right-handed)."""
        return Vector3d(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    @property
    def magnitude_squared(self) -> float:
        """Squared magnitude (avoids sqrt for comparisons)."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    @property
    def magnitude(self) -> float:
        """Vector magnitude (length), without intermediate overflow."""
        return math.hypot(self.x, self.y, self.z)

    def normalized(self) -> Vector3d:
        """Return unit vector in same direction, or zero for a zero vector."""
        if self.magnitude_squared == 0:
            return Vector3d.zero()
        scaled = self / max(abs(self.x), abs(self.y), abs(self.z))
        return scaled / scaled.magnitude

    def is_zero(self) -> bool:
        return self.x == 0 and self.y == 0 and self.z == 0

    def is_close(self, other: Vector3d, tol: float = DOUBLE_PRECISION_TOLERANCE) -> bool:
        """Component-wise comparison within tolerance."""
        return _components_close(self.to_tuple(), other.to_tuple(), tol)

    def to_tuple(self) -> tuple[float, float, float]:
        """Convert to tuple."""
        return (self.x, self.y, self.z)

    @classmethod
    def from_tuple(cls, t: tuple[float, float, float]) -> Vector3d:
        """Create from tuple."""
        return cls(t[0], t[1], t[2])

    @classmethod
    def from_vector3(cls, v: Vector3) -> Vector3d:
        """Widen a single-precision vector."""
        return cls(float(v.x), float(v.y), float(v.z))

    @classmethod
    def from_vector2(cls, v: Vector2) -> Vector3d:
        """Widen a 2D vector with z = 0."""
        return cls(float(v.x), float(v.y), 0.0)

    @classmethod
    def broadcast(cls, value: float) -> Vector3d:
        """Vector with every component set to value."""
        return cls(value, value, value)

    @classmethod
    def zero(cls) -> Vector3d:
        """Zero vector."""
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def unit_x(cls) -> Vector3d:
        return cls(1.0, 0.0, 0.0)

    @classmethod
    def unit_y(cls) -> Vector3d:
        return cls(0.0, 1.0, 0.0)

    @classmethod
    def unit_z(cls) -> Vector3d:
        return cls(0.0, 0.0, 1.0)

    def __str__(self) -> str:
        return f"{self.x} {self.y} {self.z}"

    def __repr__(self) -> str:
        return f"Vector3d({self.x:.6g}, {self.y:.6g}, {self.z:.6g})"
