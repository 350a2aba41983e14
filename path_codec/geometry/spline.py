"""Spline and Path model.

A :class:`Spline` is one Bézier segment: four controls for a cubic, or
two end points for a straight line.  A :class:`Path` is an ordered,
continuous chain of splines plus the configuration it is sampled with.

Continuity
----------
Adjacent splines must share their boundary point.  The check compares
coordinates (not identity) at the file-format resolution of three
decimals.  A mismatch is always a hard error; nothing is snapped or
corrected.
"""

from __future__ import annotations

import logging
import secrets
import string
from collections.abc import Iterator
from typing import TYPE_CHECKING

from path_codec.exceptions import DiscontinuousPath, InvalidSplineShape
from path_codec.geometry.vertex import Control, EndPointControl, Vertex

if TYPE_CHECKING:
    from path_codec.configs.loader import GeneralConfig, SpeedConfig

logger = logging.getLogger(__name__)

CONTINUITY_PRECISION = 3
"""Decimal places at which adjacent end points must agree."""

_ID_ALPHABET = string.ascii_letters + string.digits


def make_id(length: int = 10) -> str:
    """Random alphanumeric identifier for splines and paths."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


# ---------------------------------------------------------------------------
# Spline
# ---------------------------------------------------------------------------


class Spline:
    """One path segment built from control points.

    Parameters
    ----------
    *controls : Control
        Either ``(EndPointControl, EndPointControl)`` for a straight
        segment or ``(EndPointControl, Control, Control, EndPointControl)``
        for a cubic Bézier.
    uid : str | None
        Stable identifier; generated when omitted.

    Raises
    ------
    InvalidSplineShape
        If the count is not 2 or 4, the boundary points are not
        :class:`EndPointControl`, or an interior point is not a plain
        :class:`Control`.
    """

    __slots__ = ("_controls", "uid")

    def __init__(self, *controls: Control, uid: str | None = None) -> None:
        if len(controls) not in (2, 4):
            raise InvalidSplineShape(
                f"Spline requires 2 or 4 controls, got {len(controls)}"
            )
        for pos in (0, -1):
            if not isinstance(controls[pos], EndPointControl):
                raise InvalidSplineShape(
                    f"Spline {'first' if pos == 0 else 'last'} control must be "
                    f"an EndPointControl, got {type(controls[pos]).__name__}"
                )
        for ctrl in controls[1:-1]:
            if not isinstance(ctrl, Control) or isinstance(ctrl, EndPointControl):
                raise InvalidSplineShape(
                    f"Spline interior controls must be Control, "
                    f"got {type(ctrl).__name__}"
                )
        self._controls: tuple[Control, ...] = tuple(controls)
        self.uid = uid if uid is not None else make_id()

    def __repr__(self) -> str:
        pts = ", ".join(f"({c.x}, {c.y})" for c in self._controls)
        return f"Spline({pts})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Spline):
            return NotImplemented
        return self._controls == other._controls

    def __hash__(self) -> int:
        return hash(self._controls)

    @property
    def controls(self) -> tuple[Control, ...]:
        return self._controls

    @property
    def first(self) -> EndPointControl:
        return self._controls[0]  # type: ignore[return-value]

    @property
    def last(self) -> EndPointControl:
        return self._controls[-1]  # type: ignore[return-value]

    @property
    def is_cubic(self) -> bool:
        return len(self._controls) == 4

    def as_cubic(self) -> tuple[Vertex, Vertex, Vertex, Vertex]:
        """Control polygon in cubic form.

        A straight segment is lifted by using its midpoint as both
        interior controls, which keeps the curve on the chord.
        """
        if self.is_cubic:
            return self._controls  # type: ignore[return-value]
        p0, p1 = self._controls
        center = p0.midpoint(p1)
        return (p0, center, center, p1)

    def point_at(self, t: float) -> Vertex:
        """Evaluate the segment at parameter ``t`` in [0, 1]."""
        if not self.is_cubic:
            p0, p1 = self._controls
            return Vertex(p0.x + (p1.x - p0.x) * t, p0.y + (p1.y - p0.y) * t)
        p1, p2, p3, p4 = self._controls
        u = 1.0 - t
        b0 = u ** 3
        b1 = 3.0 * u * u * t
        b2 = 3.0 * u * t * t
        b3 = t ** 3
        return Vertex(
            b0 * p1.x + b1 * p2.x + b2 * p3.x + b3 * p4.x,
            b0 * p1.y + b1 * p2.y + b2 * p3.y + b3 * p4.y,
        )


# ---------------------------------------------------------------------------
# Path
# ---------------------------------------------------------------------------


class Path:
    """Ordered, continuous chain of splines.

    Parameters
    ----------
    *splines : Spline
        Initial splines, appended in order under the continuity check.
    gc : GeneralConfig | None
        General configuration (unit of length, knot density).  ``None``
        uses the shipped defaults.
    sc : SpeedConfig | None
        Speed configuration; ``sc.speed_limit.to`` is the path's maximum
        speed.  ``None`` uses the shipped defaults.
    name : str
        Display name.
    uid : str | None
        Stable identifier; generated when omitted.

    Notes
    -----
    Mutation is append-only.  Encoders require at least one spline; an
    empty path is representable so that editors can build one up.
    """

    def __init__(
        self,
        *splines: Spline,
        gc: GeneralConfig | None = None,
        sc: SpeedConfig | None = None,
        name: str = "Path",
        uid: str | None = None,
    ) -> None:
        if gc is None or sc is None:
            from path_codec.configs.loader import default_config

            defaults = default_config()
            gc = gc if gc is not None else defaults.gc
            sc = sc if sc is not None else defaults.sc
        self.gc = gc
        self.sc = sc
        self.name = name
        self.uid = uid if uid is not None else make_id()
        self._splines: list[Spline] = []
        for spline in splines:
            self.append(spline)

    def __repr__(self) -> str:
        return f"Path(name={self.name!r}, splines={len(self._splines)})"

    def __len__(self) -> int:
        return len(self._splines)

    def __iter__(self) -> Iterator[Spline]:
        return iter(self._splines)

    @property
    def splines(self) -> tuple[Spline, ...]:
        return tuple(self._splines)

    @property
    def first_spline(self) -> Spline | None:
        return self._splines[0] if self._splines else None

    @property
    def last_spline(self) -> Spline | None:
        return self._splines[-1] if self._splines else None

    def append(self, spline: Spline) -> None:
        """Append *spline*, enforcing continuity with the current end.

        Raises
        ------
        DiscontinuousPath
            If ``spline.first`` does not match the last spline's end point
            at three-decimal resolution.
        """
        if self._splines:
            a = self._splines[-1].last
            b = spline.first
            if not a.coordinates_equal(b, CONTINUITY_PRECISION):
                raise DiscontinuousPath(a, b)
        self._splines.append(spline)
        logger.debug(
            "Path %s: appended spline %d (%d controls)",
            self.uid,
            len(self._splines),
            len(spline.controls),
        )

    def control_points(self) -> list[Control]:
        """All controls in order, shared end points listed once."""
        points: list[Control] = []
        for i, spline in enumerate(self._splines):
            points.extend(spline.controls if i == 0 else spline.controls[1:])
        return points
