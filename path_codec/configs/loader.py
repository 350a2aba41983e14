"""Configuration loader for path formats.

Loads and validates ``defaults.yaml`` into typed, frozen dataclasses.
Every format default (speed limits, knot density, unit of length) comes
from the config -- nothing is hardcoded in the codec.

Lengths are stored in the unit named by ``GeneralConfig.uol``.  Speeds
are stored in the format's own speed scale (byte-voltage for LemLib).

Usage::

    from path_codec.configs.loader import load_config
    cfg = load_config()                        # shipped defaults
    cfg = load_config("/custom/format.yaml")   # explicit path
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from functools import lru_cache
from pathlib import Path
from typing import Any

from path_codec.exceptions import ConfigError
from path_codec.units.converter import UnitOfLength
from path_codec.utils.fs import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RangeLimit:
    """One bound of a :class:`NumberRange` with its display label."""

    value: float
    label: str


@dataclass(frozen=True)
class NumberRange:
    """Selected sub-range ``[from_, to]`` within ``[min_limit, max_limit]``.

    ``from`` is a keyword, hence ``from_``; it serializes as ``"from"``.
    """

    min_limit: RangeLimit
    max_limit: RangeLimit
    step: float
    from_: float
    to: float

    def clamp(self, value: float) -> float:
        """Clamp *value* into ``[min_limit.value, max_limit.value]``."""
        return max(min(value, self.max_limit.value), self.min_limit.value)

    def with_to(self, to: float) -> NumberRange:
        return replace(self, to=to)


@dataclass(frozen=True)
class GeneralConfig:
    """Editor-wide settings that affect sampling and export."""

    robot_width: float
    robot_height: float
    show_robot: bool
    uol: UnitOfLength
    knot_density: float
    control_magnet_distance: float


@dataclass(frozen=True)
class SpeedConfig:
    """Speed settings.  ``speed_limit.to`` is the path's maximum speed."""

    speed_limit: NumberRange
    application_range: NumberRange
    transition_range: NumberRange

    def with_max_speed(self, to: float) -> SpeedConfig:
        return replace(self, speed_limit=self.speed_limit.with_to(to))


@dataclass(frozen=True)
class OutputConfig:
    """Format-specific output settings.  LemLib v0.4 defines none."""

    extras: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FormatConfig:
    """Complete format configuration loaded from YAML."""

    gc: GeneralConfig
    sc: SpeedConfig
    oc: OutputConfig


# ---------------------------------------------------------------------------
# Internal parsing helpers
# ---------------------------------------------------------------------------


def _parse_limit(data: Any) -> RangeLimit:
    if isinstance(data, dict):
        value = float(data["value"])
        return RangeLimit(value=value, label=str(data.get("label", f"{value:g}")))
    value = float(data)
    return RangeLimit(value=value, label=f"{value:g}")


def _parse_range(name: str, data: dict[str, Any]) -> NumberRange:
    """Parse a single number range section from raw YAML dict."""
    if not isinstance(data, dict):
        raise ConfigError(f"Range '{name}' must be a mapping, got {data!r}")
    return NumberRange(
        min_limit=_parse_limit(data["min_limit"]),
        max_limit=_parse_limit(data["max_limit"]),
        step=float(data.get("step", 1)),
        from_=float(data["from"]),
        to=float(data["to"]),
    )


def _parse_uol(raw: Any) -> UnitOfLength:
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return UnitOfLength(float(raw))
    return UnitOfLength.from_name(str(raw))


def _parse_general(data: dict[str, Any]) -> GeneralConfig:
    """Parse the ``general`` section."""
    return GeneralConfig(
        robot_width=float(data["robot_width"]),
        robot_height=float(data["robot_height"]),
        show_robot=bool(data.get("show_robot", True)),
        uol=_parse_uol(data["uol"]),
        knot_density=float(data["knot_density"]),
        control_magnet_distance=float(data.get("control_magnet_distance", 0.0)),
    )


def _parse_speed(data: dict[str, Any]) -> SpeedConfig:
    """Parse the ``speed`` section."""
    return SpeedConfig(
        speed_limit=_parse_range("speed_limit", data["speed_limit"]),
        application_range=_parse_range(
            "application_range", data["application_range"]
        ),
        transition_range=_parse_range(
            "transition_range", data["transition_range"]
        ),
    )


def validate_range(name: str, rng: NumberRange) -> None:
    """Check ``min <= from <= to <= max`` and a positive step.

    Raises
    ------
    ConfigError
        On any invalid combination.
    """
    if rng.step <= 0:
        raise ConfigError(f"Range '{name}' step must be > 0, got {rng.step}")
    if rng.min_limit.value > rng.max_limit.value:
        raise ConfigError(
            f"Range '{name}' limits inverted: "
            f"{rng.min_limit.value} > {rng.max_limit.value}"
        )
    if not (
        rng.min_limit.value <= rng.from_ <= rng.to <= rng.max_limit.value
    ):
        raise ConfigError(
            f"Range '{name}' selection [{rng.from_}, {rng.to}] not within "
            f"[{rng.min_limit.value}, {rng.max_limit.value}]"
        )


def _validate_config(cfg: FormatConfig) -> None:
    """Validate cross-field consistency.

    Raises
    ------
    ConfigError
        On any invalid combination.
    """
    if cfg.gc.knot_density <= 0:
        raise ConfigError(
            f"knot_density must be > 0, got {cfg.gc.knot_density}"
        )
    if cfg.gc.robot_width <= 0 or cfg.gc.robot_height <= 0:
        raise ConfigError(
            f"Robot size must be positive, got "
            f"{cfg.gc.robot_width} x {cfg.gc.robot_height}"
        )
    validate_range("speed_limit", cfg.sc.speed_limit)
    validate_range("application_range", cfg.sc.application_range)
    validate_range("transition_range", cfg.sc.transition_range)

    if cfg.sc.speed_limit.from_ == cfg.sc.speed_limit.to:
        logger.warning(
            "Speed limit range is a single value (%.1f); "
            "sampled knots will have constant speed",
            cfg.sc.speed_limit.to,
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_config(data: dict[str, Any]) -> FormatConfig:
    """Build and validate a :class:`FormatConfig` from a raw mapping.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation.
    """
    try:
        config = FormatConfig(
            gc=_parse_general(data["general"]),
            sc=_parse_speed(data["speed"]),
            oc=OutputConfig(extras=dict(data.get("output") or {})),
        )
    except KeyError as exc:
        raise ConfigError(
            f"Missing required configuration key: {exc}"
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid configuration value: {exc}"
        ) from exc

    _validate_config(config)
    return config


def load_config(path: str | Path | None = None) -> FormatConfig:
    """Load and validate format configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to a config YAML.  ``None`` loads ``defaults.yaml`` shipped
        alongside this module.

    Returns
    -------
    FormatConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.debug("Loading configuration from %s", path)

    data = load_yaml(path)
    if not data:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration root must be a mapping, got {type(data).__name__}"
        )

    config = parse_config(data)
    logger.debug("Configuration loaded successfully")
    return config


@lru_cache(maxsize=1)
def default_config() -> FormatConfig:
    """Shipped ``defaults.yaml``, loaded and validated once per process.

    The returned config is frozen, so every caller may share it.
    """
    return load_config()
