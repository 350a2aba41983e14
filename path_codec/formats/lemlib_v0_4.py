"""LemLib v0.4 path format -- inch units, byte-voltage speeds.

File layout (``\\n``-separated)::

    x, y, speed               one line per sampled knot (inches)
    ...
    x, y, 0                   ghost knot past the end of the path
    endData                   sentinel
    200                       deceleration (not supported, fixed)
    <max speed>               speed_limit.to
    200                       multiplier (not supported, fixed)
    x1, y1, x2, y2, x3, y3, x4, y4    one line per spline (inches)
    ...
    #PATH.JERRYIO-DATA {...}  full document as JSON, no trailing newline

A LemLib consumer stops reading at the last spline line; the editor reads
the JSON line back to recover headings, units and every path.

Ghost knot:
    The consumer decelerates more smoothly when the path continues a bit
    past its last point.  The ghost is placed along the direction from the
    second-to-last knot to the last knot, at the final knot spacing plus a
    fixed 20 inch overrun, measured from the second-to-last knot.  LemLib
    Path-Gen measures from a control point instead; the knot-based
    placement here is intentional.

The layout follows LemLib Path-Gen (GPLv3).
"""

from __future__ import annotations

import logging
import math
import re
from io import StringIO

from path_codec.configs.loader import SpeedConfig
from path_codec.exceptions import (
    DiscontinuousPath,
    EmptyPath,
    InvalidMaxSpeed,
    MalformedSplineLine,
    MissingSentinel,
    NoSplines,
)
from path_codec.formats.base import Format, PathFileData, PointSampler, format_number
from path_codec.formats.document import dump_path_file_data
from path_codec.geometry.spline import Path, Spline
from path_codec.geometry.vertex import Control, EndPointControl, Vertex
from path_codec.sampling.knots import calculate_knots
from path_codec.units.converter import UnitConverter, UnitOfLength, fix_precision
from path_codec.utils.logging_config import log_context

logger = logging.getLogger(__name__)

SENTINEL = "endData"
TOKEN_SEPARATOR = ", "
METADATA_PREFIX = "#PATH.JERRYIO-DATA "
UNSUPPORTED_PLACEHOLDER = "200"
GHOST_OVERRUN_IN = 20.0
TOKENS_PER_SPLINE = 8


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
"""Plain decimal or exponent notation; no whitespace, underscores or words."""


def _parse_finite(text: str | None) -> float | None:
    """Parse *text* as a finite float; ``None`` if it is not one."""
    if text is None or not _NUMBER_RE.fullmatch(text):
        return None
    value = float(text)
    return value if math.isfinite(value) else None


def _parse_spline_line(line: str, line_no: int) -> Spline:
    """Parse one ``x1, y1, ..., x4, y4`` line into a cubic spline.

    Heading is always 0: the format cannot express it.
    """
    tokens = line.split(TOKEN_SEPARATOR)
    if len(tokens) != TOKENS_PER_SPLINE:
        raise MalformedSplineLine(line_no, line)

    values = []
    for token in tokens:
        value = _parse_finite(token)
        if value is None:
            raise MalformedSplineLine(line_no, line)
        values.append(fix_precision(value))

    x1, y1, x2, y2, x3, y3, x4, y4 = values
    return Spline(
        EndPointControl(x1, y1, 0),
        Control(x2, y2),
        Control(x3, y3),
        EndPointControl(x4, y4, 0),
    )


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------


class LemLibFormatV0_4(Format):
    """LemLib v0.4.x path file codec."""

    def get_name(self) -> str:
        return "LemLib v0.4.x (inch, byte-voltage)"

    # ------------------------------------------------------------------
    # Decode
    # ------------------------------------------------------------------

    def decode(self, text: str) -> PathFileData:
        """Rebuild a document from LemLib v0.4 text.

        Parameters
        ----------
        text : str
            Complete file content.

        Returns
        -------
        PathFileData
            Document with at most one path and the decoded max speed.

        Raises
        ------
        MissingSentinel
            If no line equals ``endData``.
        InvalidMaxSpeed
            If the max speed line is missing or not a finite number.
        MalformedSplineLine
            If a spline line is not 8 numeric tokens.
        DiscontinuousPath
            If a spline does not start where the previous one ended.
        """
        with log_context(format=self.name):
            lines = text.split("\n")

            try:
                i = lines.index(SENTINEL)
            except ValueError:
                raise MissingSentinel(SENTINEL) from None

            # i + 1: deceleration, not supported.

            raw_speed = lines[i + 2] if i + 2 < len(lines) else None
            max_speed = _parse_finite(raw_speed)
            if max_speed is None:
                raise InvalidMaxSpeed(raw_speed)

            defaults = self.config
            speed_limit = defaults.sc.speed_limit
            sc: SpeedConfig = defaults.sc.with_max_speed(
                speed_limit.clamp(fix_precision(max_speed))
            )
            gc = defaults.gc
            if max_speed != sc.speed_limit.to:
                logger.debug(
                    "Max speed %s stored as %s (limits [%s, %s])",
                    raw_speed,
                    format_number(sc.speed_limit.to),
                    format_number(speed_limit.min_limit.value),
                    format_number(speed_limit.max_limit.value),
                )

            # i + 3: multiplier, not supported.

            path: Path | None = None
            # The final line is always skipped: it is the empty string after
            # the last newline, or the metadata line.
            for index in range(i + 4, len(lines) - 1):
                line_no = index + 1
                spline = _parse_spline_line(lines[index], line_no)
                if path is None:
                    path = Path(spline, gc=gc, sc=sc)
                    continue
                try:
                    path.append(spline)
                except DiscontinuousPath as exc:
                    raise DiscontinuousPath(exc.last, exc.first, line=line_no) from exc

            paths = [path] if path is not None else []
            logger.info(
                "Decoded %d spline(s), max speed %s",
                len(path) if path is not None else 0,
                format_number(sc.speed_limit.to),
            )
            return PathFileData(
                format=self.name,
                gc=gc,
                sc=sc,
                oc=self.build_output_config(),
                paths=paths,
            )

    # ------------------------------------------------------------------
    # Encode
    # ------------------------------------------------------------------

    def encode(
        self,
        document: PathFileData,
        sampler: PointSampler | None = None,
        *,
        path_index: int = 0,
    ) -> str:
        """Render one path of *document* as LemLib v0.4 text.

        Parameters
        ----------
        document : PathFileData
            Document to export; it is embedded whole in the metadata line.
        sampler : PointSampler | None
            Knot sampler.  ``None`` uses :func:`calculate_knots`.
        path_index : int
            Which path to export, default the first.

        Returns
        -------
        str
            Complete file content.

        Raises
        ------
        EmptyPath
            If the document has no path at *path_index*.
        NoSplines
            If the selected path has no spline.
        """
        if not document.paths:
            raise EmptyPath()
        if not 0 <= path_index < len(document.paths):
            raise EmptyPath(
                f"No path at index {path_index}; document has "
                f"{len(document.paths)} path(s)"
            )
        path = document.paths[path_index]
        if len(path) == 0:
            raise NoSplines()

        with log_context(format=self.name, path=path.uid):
            uc = UnitConverter(path.gc.uol, UnitOfLength.INCH)
            sample = sampler if sampler is not None else calculate_knots
            knots = list(sample(path, path.gc, path.sc))

            buf = StringIO()

            def point(p: Vertex) -> str:
                return (
                    f"{format_number(uc.from_a_to_b(p.x))}{TOKEN_SEPARATOR}"
                    f"{format_number(uc.from_a_to_b(p.y))}"
                )

            # Heading is not supported by this format.
            for knot in knots:
                buf.write(
                    f"{point(knot)}{TOKEN_SEPARATOR}"
                    f"{format_number(uc.fix_precision(knot.speed))}\n"
                )

            if len(knots) > 1:
                last2 = knots[-2]
                last1 = knots[-1]
                ghost = last2.interpolate(
                    last1, last2.distance(last1) + uc.from_b_to_a(GHOST_OVERRUN_IN)
                )
                buf.write(f"{point(ghost)}{TOKEN_SEPARATOR}0\n")

            buf.write(f"{SENTINEL}\n")
            buf.write(f"{UNSUPPORTED_PLACEHOLDER}\n")
            buf.write(f"{format_number(path.sc.speed_limit.to)}\n")
            buf.write(f"{UNSUPPORTED_PLACEHOLDER}\n")

            for spline in path.splines:
                buf.write(TOKEN_SEPARATOR.join(point(p) for p in spline.as_cubic()))
                buf.write("\n")

            buf.write(METADATA_PREFIX)
            buf.write(dump_path_file_data(document))

            logger.info(
                "Encoded %d knot(s) and %d spline(s)", len(knots), len(path)
            )
            return buf.getvalue()
