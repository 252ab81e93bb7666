from collections import namedtuple
from math import hypot

from curvekit.tools.geomutil import equal


class Point(namedtuple("Point", ("x", "y"))):
    """
    Point is an immutable subscriptable 2D vector with .x and .y as well as [0] and [1].

    Points compare by value. Arithmetic mirrors complex numbers, the product and division only accept scalars.
    Rotations assume the usual y-up convention, so rot90cw() turns a tangent towards the right-hand side of the
    curve it follows.
    """

    __slots__ = ()

    def __new__(cls, x=0.0, y=0.0):
        return super().__new__(cls, float(x), float(y))

    def __repr__(self):
        return f"Point({self.x:.12g}, {self.y:.12g})"

    def __str__(self):
        return f"{self.x:.12g},{self.y:.12g}"

    def __add__(self, other):
        return Point(self.x + other[0], self.y + other[1])

    __radd__ = __add__

    def __sub__(self, other):
        return Point(self.x - other[0], self.y - other[1])

    def __rsub__(self, other):
        return Point(other[0] - self.x, other[1] - self.y)

    def __neg__(self):
        return Point(-self.x, -self.y)

    def __mul__(self, other):
        if isinstance(other, (int, float)):
            return Point(self.x * other, self.y * other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, (int, float)):
            return Point(self.x / other, self.y / other)
        return NotImplemented

    def __abs__(self):
        return hypot(self.x, self.y)

    def is_zero(self):
        return self.x == 0.0 and self.y == 0.0

    def equals(self, other):
        """Tolerance based equality, see geomutil.equal"""
        return equal(self.x, other[0]) and equal(self.y, other[1])

    def mul(self, factor):
        return Point(self.x * factor, self.y * factor)

    def dot(self, other):
        return self.x * other[0] + self.y * other[1]

    def perp_dot(self, other):
        """2D cross product, positive when other lies counter-clockwise of self"""
        return self.x * other[1] - self.y * other[0]

    def length(self):
        return hypot(self.x, self.y)

    def norm(self, length):
        """Scale to the given length, the zero vector stays zero"""
        d = self.length()
        if equal(d, 0.0):
            return Point(0.0, 0.0)
        return Point(self.x / d * length, self.y / d * length)

    def rot90cw(self):
        return Point(self.y, -self.x)

    def rot90ccw(self):
        return Point(-self.y, self.x)

    def interpolate(self, other, t):
        return Point(
            self.x + (other[0] - self.x) * t,
            self.y + (other[1] - self.y) * t,
        )

    def distance_to(self, other):
        return hypot(self.x - other[0], self.y - other[1])
