"""Geometry primitives -- points, control points and sampled knots.

Every primitive is an immutable, slotted dataclass.  Arithmetic returns a
plain :class:`Vertex`; the control-point subclasses only tag *where* a
point sits in a spline.

Units are whatever the owning path's ``GeneralConfig.uol`` says.
Conversion to the file format's unit happens in the format codec, never
here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from path_codec.units.converter import fix_precision

Number = Union[int, float]


@dataclass(frozen=True, slots=True)
class Vertex:
    """2-D point / vector.

    Parameters
    ----------
    x, y : float
        Coordinates in path units.
    """

    x: float
    y: float

    # -- Arithmetic ---------------------------------------------------------

    def add(self, other: Vertex) -> Vertex:
        return Vertex(self.x + other.x, self.y + other.y)

    def subtract(self, other: Vertex) -> Vertex:
        return Vertex(self.x - other.x, self.y - other.y)

    def multiply(self, factor: Vertex | Number) -> Vertex:
        """Scale by a scalar or component-wise by another vertex."""
        if isinstance(factor, Vertex):
            return Vertex(self.x * factor.x, self.y * factor.y)
        return Vertex(self.x * factor, self.y * factor)

    def divide(self, divisor: Vertex | Number) -> Vertex:
        """Divide by a scalar or component-wise by another vertex."""
        if isinstance(divisor, Vertex):
            return Vertex(self.x / divisor.x, self.y / divisor.y)
        return Vertex(self.x / divisor, self.y / divisor)

    def __add__(self, other: Vertex) -> Vertex:
        return self.add(other)

    def __sub__(self, other: Vertex) -> Vertex:
        return self.subtract(other)

    def __mul__(self, factor: Vertex | Number) -> Vertex:
        return self.multiply(factor)

    def __truediv__(self, divisor: Vertex | Number) -> Vertex:
        return self.divide(divisor)

    # -- Measurement --------------------------------------------------------

    def distance(self, other: Vertex) -> float:
        """Euclidean distance to *other*."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def interpolate(self, other: Vertex, distance: float) -> Vertex:
        """Point at *distance* from self in the direction of *other*.

        The result is not clamped to the segment: a distance larger than
        ``self.distance(other)`` extrapolates past *other*.  Coincident
        points have no direction, so a copy of self is returned.
        """
        length = self.distance(other)
        if length == 0:
            return Vertex(self.x, self.y)
        ratio = distance / length
        return Vertex(
            self.x + (other.x - self.x) * ratio,
            self.y + (other.y - self.y) * ratio,
        )

    def midpoint(self, other: Vertex) -> Vertex:
        return self.add(other).divide(Vertex(2, 2))

    def fix_precision(self, precision: int = 3) -> Vertex:
        return Vertex(
            fix_precision(self.x, precision), fix_precision(self.y, precision)
        )

    def coordinates_equal(self, other: Vertex, precision: int = 3) -> bool:
        """Compare coordinates (not type or identity) at *precision* decimals."""
        return (
            fix_precision(self.x, precision) == fix_precision(other.x, precision)
            and fix_precision(self.y, precision) == fix_precision(other.y, precision)
        )

    def to_vertex(self) -> Vertex:
        """Strip any subclass tagging."""
        return Vertex(self.x, self.y)


@dataclass(frozen=True, slots=True)
class Control(Vertex):
    """Interior control point of a cubic spline."""

    pass


@dataclass(frozen=True, slots=True)
class EndPointControl(Control):
    """Boundary control point of a spline.

    Only end points carry a heading and may be shared by adjacent
    splines.

    Parameters
    ----------
    heading : float
        Robot heading at this point, in degrees.
    """

    heading: float = 0.0


@dataclass(frozen=True, slots=True)
class Knot(Vertex):
    """One speed-annotated sample along a path.

    Parameters
    ----------
    speed : float
        Target speed at this sample, in the speed-limit range units.
    heading : float | None
        Heading in degrees, ``None`` where the path does not define one.
    """

    speed: float = 0.0
    heading: float | None = None
