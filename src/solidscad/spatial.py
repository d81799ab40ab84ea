"""Immutable 3D value types used for node geometry.

Vector3 is a point or direction, Bounds an axis aligned box. Both compare
exactly (no tolerance) since node geometry is derived with plain float
arithmetic and tests compare literal values.
"""

from dataclasses import dataclass
from numbers import Real

import numpy as np
from datatrees import datatree, dtfield


@dataclass(frozen=True)
class Vector3:
    """An (x, y, z) coordinate."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_array(cls, arr) -> 'Vector3':
        """Creates a Vector3 from the first three elements of an array like."""
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def as_array(self) -> np.ndarray:
        return np.array((self.x, self.y, self.z), dtype=float)

    def with_component(self, index: int, value: float) -> 'Vector3':
        """Returns a copy with the component at index (0, 1 or 2) replaced."""
        values = [self.x, self.y, self.z]
        values[index] = value
        return Vector3(*values)

    def dot(self, other: 'Vector3') -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def __len__(self):
        return 3

    def __getitem__(self, index):
        return (self.x, self.y, self.z)[index]

    def __add__(self, other: 'Vector3') -> 'Vector3':
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: 'Vector3') -> 'Vector3':
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, other) -> 'Vector3':
        """Componentwise multiply by another Vector3 or scale by a number."""
        if isinstance(other, Real):
            return Vector3(self.x * other, self.y * other, self.z * other)
        return Vector3(self.x * other.x, self.y * other.y, self.z * other.z)

    def __rmul__(self, other) -> 'Vector3':
        return self.__mul__(other)

    def __truediv__(self, other: float) -> 'Vector3':
        return Vector3(self.x / other, self.y / other, self.z / other)

    def __neg__(self) -> 'Vector3':
        return Vector3(-self.x, -self.y, -self.z)


@datatree(frozen=True)
class Bounds:
    """Axis aligned box described by its bottom left and top right corners.

    The corners are kept as given. Use from_points() when the corners may be
    out of order.
    """

    bottom_left: Vector3 = dtfield(default_factory=Vector3, doc='The minimum corner.')
    top_right: Vector3 = dtfield(default_factory=Vector3, doc='The maximum corner.')

    @classmethod
    def from_points(cls, points) -> 'Bounds':
        """Returns the smallest box containing all the given Vector3 points."""
        arr = np.array([p.as_array() for p in points])
        return cls(Vector3.from_array(arr.min(axis=0)), Vector3.from_array(arr.max(axis=0)))

    @property
    def x_min(self) -> float:
        return self.bottom_left.x

    @property
    def x_max(self) -> float:
        return self.top_right.x

    @property
    def y_min(self) -> float:
        return self.bottom_left.y

    @property
    def y_max(self) -> float:
        return self.top_right.y

    @property
    def z_min(self) -> float:
        return self.bottom_left.z

    @property
    def z_max(self) -> float:
        return self.top_right.z

    @property
    def size(self) -> Vector3:
        """The extent along each axis."""
        return self.top_right - self.bottom_left

    @property
    def center(self) -> Vector3:
        return (self.bottom_left + self.top_right) / 2

    def corners(self) -> tuple:
        """All eight corners of the box."""
        bl, tr = self.bottom_left, self.top_right
        return tuple(
            Vector3(x, y, z) for x in (bl.x, tr.x) for y in (bl.y, tr.y) for z in (bl.z, tr.z)
        )

    def contains(self, point: Vector3) -> bool:
        """Check if a point is inside (or on the surface of) the box."""
        p = point.as_array()
        return bool(
            np.all(p >= self.bottom_left.as_array()) and np.all(p <= self.top_right.as_array())
        )

    def translate(self, v: Vector3) -> 'Bounds':
        return Bounds(self.bottom_left + v, self.top_right + v)


def format_number(value) -> str:
    """Renders a number in canonical OpenScad decimal form.

    Integral values have no decimal point, other values use the shortest
    positional representation that round trips. Scientific notation is never
    produced.
    """
    value = float(value)
    if value == 0:
        return '0'  # Also folds -0.0
    if value.is_integer():
        return '%d' % value
    return np.format_float_positional(value, trim='-')
