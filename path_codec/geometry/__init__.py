"""
Geometry module.

Immutable control-point primitives plus the Spline and Path model.
Coordinates are in the owning path's unit of length.
"""

from path_codec.geometry.spline import Path, Spline, make_id
from path_codec.geometry.vertex import Control, EndPointControl, Knot, Vertex

__all__ = [
    "Control",
    "EndPointControl",
    "Knot",
    "Path",
    "Spline",
    "Vertex",
    "make_id",
]
