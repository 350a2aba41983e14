"""Knot sampling -- dense, speed-annotated points along a path.

Provides:
    - Cubic Bézier evaluation over a parameter grid
    - Arc-length parametrization of the flattened path
    - Uniform resampling every ``gc.knot_density`` path units
    - Trapezoidal speed profile from ``sc.speed_limit``

Used by:
    - Format encoders: the knot lines of LemLib v0.4 and the ghost knot
    - Editors: previewing the robot's target speed along a path

All lengths are in path units (``gc.uol``).  Speeds are in the speed-limit
scale (byte-voltage for LemLib).

Speed profile:
    The robot cruises at ``speed_limit.to``.  Over the first and last
    ``(1 - transition_range.to) / 2`` of the total length it ramps
    linearly from and back to ``speed_limit.from_``.
"""

from __future__ import annotations

import logging

import numpy as np

from path_codec.configs.loader import GeneralConfig, SpeedConfig
from path_codec.geometry.spline import Path, Spline
from path_codec.geometry.vertex import Knot

logger = logging.getLogger(__name__)

SAMPLES_PER_SPLINE = 256
"""Parameter-grid resolution used to flatten each spline."""


def bezier_points(spline: Spline, samples: int = SAMPLES_PER_SPLINE) -> np.ndarray:
    """Evaluate *spline* on a uniform parameter grid.

    Parameters
    ----------
    spline : Spline
        Straight (2 controls) or cubic (4 controls) segment.
    samples : int
        Number of parameter values in [0, 1], >= 2.

    Returns
    -------
    np.ndarray
        Points on the curve, shape (samples, 2).

    Notes
    -----
    B(t) = (1-t)^3 p1 + 3(1-t)^2 t p2 + 3(1-t) t^2 p3 + t^3 p4
    """
    t = np.linspace(0.0, 1.0, samples)[:, None]
    ctrl = np.array([[c.x, c.y] for c in spline.controls], dtype=np.float64)
    if len(ctrl) == 2:
        return (1.0 - t) * ctrl[0] + t * ctrl[1]

    u = 1.0 - t
    return (
        (u ** 3) * ctrl[0]
        + 3.0 * (u ** 2) * t * ctrl[1]
        + 3.0 * u * (t ** 2) * ctrl[2]
        + (t ** 3) * ctrl[3]
    )


def path_polyline(path: Path, samples: int = SAMPLES_PER_SPLINE) -> np.ndarray:
    """Flatten every spline of *path* into one polyline, shape (N, 2).

    Shared end points appear once.
    """
    parts = []
    for i, spline in enumerate(path.splines):
        pts = bezier_points(spline, samples)
        parts.append(pts if i == 0 else pts[1:])
    if not parts:
        return np.zeros((0, 2))
    return np.concatenate(parts, axis=0)


def cumulative_length(points: np.ndarray) -> np.ndarray:
    """Arc length from the first vertex to each vertex, shape (N,)."""
    if points.shape[0] < 2:
        return np.zeros(points.shape[0])
    seg = np.linalg.norm(np.diff(points, axis=0), axis=1)
    return np.concatenate([[0.0], np.cumsum(seg)])


def knot_distances(total: float, spacing: float) -> np.ndarray:
    """Arc-length stations every *spacing*, always ending at *total*."""
    if spacing <= 0:
        raise ValueError(f"knot spacing must be > 0, got {spacing}")
    stations = np.arange(0.0, total, spacing)
    if stations.size == 0:
        return np.array([total])
    if total - stations[-1] > spacing * 1e-6:
        return np.append(stations, total)
    stations[-1] = total
    return stations


def speed_profile(distances: np.ndarray, total: float, sc: SpeedConfig) -> np.ndarray:
    """Target speed at each station.

    Linear ramps from ``from_`` up to ``to`` at the start and back down at
    the end; the ramp length per side is ``(1 - transition_range.to) / 2``
    of *total*.
    """
    lo = sc.speed_limit.from_
    hi = sc.speed_limit.to
    ramp = total * (1.0 - sc.transition_range.to) / 2.0
    if ramp <= 0:
        return np.full(distances.shape, hi, dtype=np.float64)
    accel = lo + (hi - lo) * np.clip(distances / ramp, 0.0, 1.0)
    decel = lo + (hi - lo) * np.clip((total - distances) / ramp, 0.0, 1.0)
    return np.minimum(accel, decel)


def calculate_knots(path: Path, gc: GeneralConfig, sc: SpeedConfig) -> list[Knot]:
    """Sample *path* every ``gc.knot_density`` units with target speeds.

    Parameters
    ----------
    path : Path
        Path to sample; may be empty.
    gc : GeneralConfig
        Supplies ``knot_density`` (spacing in path units).
    sc : SpeedConfig
        Supplies the speed limit and transition range.

    Returns
    -------
    list[Knot]
        Ordered knots.  The first is the path start and the last is the
        path end; both carry the end point headings.  A zero-length path
        gives a single knot.
    """
    if len(path) == 0:
        return []

    points = path_polyline(path)
    cum = cumulative_length(points)
    total = float(cum[-1])
    start = path.splines[0].first
    end = path.splines[-1].last

    if total <= 0:
        return [Knot(start.x, start.y, speed=sc.speed_limit.to, heading=start.heading)]

    distances = knot_distances(total, gc.knot_density)
    xs = np.interp(distances, cum, points[:, 0])
    ys = np.interp(distances, cum, points[:, 1])
    speeds = speed_profile(distances, total, sc)

    knots = [
        Knot(float(x), float(y), speed=float(v))
        for x, y, v in zip(xs, ys, speeds)
    ]
    knots[0] = Knot(start.x, start.y, speed=knots[0].speed, heading=start.heading)
    knots[-1] = Knot(end.x, end.y, speed=knots[-1].speed, heading=end.heading)

    logger.debug(
        "Sampled %d knot(s) over %.3f units (density %.3f)",
        len(knots),
        total,
        gc.knot_density,
    )
    return knots
