"""Exception hierarchy for the path codec.

Every error is synchronous and permanent: malformed input never becomes
valid on retry.  Each exception carries enough context (line number,
coordinates, offending value) for a caller to render a precise message.
"""

from __future__ import annotations

from typing import Any


class PathCodecError(Exception):
    """Base exception for all path codec errors."""

    pass


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


class GeometryError(PathCodecError):
    """Error constructing splines or paths."""

    pass


class InvalidSplineShape(GeometryError, ValueError):
    """Spline control list has the wrong length or endpoint types."""

    pass


class DiscontinuousPath(GeometryError):
    """Adjacent splines do not share their boundary point.

    Parameters
    ----------
    last : Any
        End point of the current last spline.
    first : Any
        Start point of the spline being appended.
    line : int | None
        1-based line number in the source text, when decoding.
    """

    def __init__(self, last: Any, first: Any, line: int | None = None) -> None:
        self.last = last
        self.first = first
        self.line = line
        where = f" at line {line}" if line is not None else ""
        super().__init__(
            f"Discontinuous path{where}: spline ends at "
            f"({last.x}, {last.y}) but next spline starts at "
            f"({first.x}, {first.y})"
        )


# ---------------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------------


class FormatError(PathCodecError):
    """Error decoding or encoding a path file."""

    pass


class MissingSentinel(FormatError):
    """The ``endData`` line was not found."""

    def __init__(self, sentinel: str = "endData") -> None:
        self.sentinel = sentinel
        super().__init__(
            f"Invalid file format, unable to find line '{sentinel}'"
        )


class InvalidMaxSpeed(FormatError):
    """The max speed line is missing or not a finite number."""

    def __init__(self, value: str | None) -> None:
        self.value = value
        super().__init__(
            f"Invalid file format, unable to parse max speed {value!r}"
        )


class MalformedSplineLine(FormatError):
    """A spline line has the wrong token count or a non-numeric token."""

    def __init__(self, line: int, text: str | None = None) -> None:
        self.line = line
        self.text = text
        super().__init__(
            f"Invalid file format, unable to parse spline at line {line}"
        )


class EmptyPath(FormatError):
    """The document has no path to export."""

    def __init__(self, message: str = "No path to export") -> None:
        super().__init__(message)


class NoSplines(FormatError):
    """The selected path has no spline to export."""

    def __init__(self, message: str = "No spline to export") -> None:
        super().__init__(message)


class DocumentError(FormatError):
    """The embedded JSON document failed validation."""

    pass


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigError(PathCodecError):
    """Raised when configuration validation fails."""

    pass
