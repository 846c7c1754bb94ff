"""
Simple 3D Vector class for the Space Colonization Algorithm.
"""

import numpy as np
from typing import Tuple


EPSILON = 1e-10


class Vector3:
    __slots__ = ('x', 'y', 'z')
    
    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
    
    def __add__(self, other: 'Vector3') -> 'Vector3':
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)
    
    def __sub__(self, other: 'Vector3') -> 'Vector3':
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)
    
    def __mul__(self, scalar: float) -> 'Vector3':
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)
    
    def __rmul__(self, scalar: float) -> 'Vector3':
        return self.__mul__(scalar)
    
    def __truediv__(self, scalar: float) -> 'Vector3':
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)
    
    def __repr__(self) -> str:
        return f"Vector3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z
    
    def __hash__(self) -> int:
        return hash((self.x, self.y, self.z))
    
    def isclose(self, other: 'Vector3', tol: float = 1e-9) -> bool:
        return bool(np.allclose(self.to_array(), other.to_array(), rtol=0.0, atol=tol))
    
    @property
    def magnitude(self) -> float:
        return float(np.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2))
    
    def normalize(self) -> 'Vector3':
        """Unit vector in the same direction, or the zero vector if degenerate."""
        mag = self.magnitude
        if mag < EPSILON:
            return Vector3(0, 0, 0)
        return self / mag
    
    def distance_to(self, other: 'Vector3') -> float:
        return (self - other).magnitude
    
    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)
    
    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])
    
    @classmethod
    def from_tuple(cls, t) -> 'Vector3':
        if len(t) == 2:
            return cls(t[0], t[1], 0.0)
        return cls(t[0], t[1], t[2])
    
    @classmethod
    def from_array(cls, arr: np.ndarray) -> 'Vector3':
        return cls.from_tuple(arr)
    
    def copy(self) -> 'Vector3':
        return Vector3(self.x, self.y, self.z)


def add(a: Vector3, b: Vector3) -> Vector3:
    return a + b


def subtract(a: Vector3, b: Vector3) -> Vector3:
    return a - b


def scale(v: Vector3, factor: float) -> Vector3:
    return v * factor


def distance(a: Vector3, b: Vector3) -> float:
    return a.distance_to(b)


def normalize(v: Vector3) -> Tuple[Vector3, bool]:
    """
    Normalize ``v``.

    Returns ``(unit_vector, True)``, or ``(zero_vector, False)`` when the
    magnitude is below ``EPSILON``. Callers treat the degenerate case as
    "no contribution".
    """
    if v.magnitude < EPSILON:
        return Vector3(0.0, 0.0, 0.0), False
    return v.normalize(), True
