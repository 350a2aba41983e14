"""Tests for the format configuration loader.

Validates that:
    - defaults.yaml loads with the LemLib v0.4 defaults
    - Structural invariants hold (ranges ordered, positive density)
    - Invalid or incomplete configs raise ConfigError
"""

from __future__ import annotations

import copy
from pathlib import Path

import pytest
import yaml

from path_codec import geometry
from path_codec.configs import loader
from path_codec.configs.loader import (
    DEFAULT_CONFIG_PATH,
    FormatConfig,
    default_config,
    load_config,
    parse_config,
)
from path_codec.exceptions import ConfigError
from path_codec.units.converter import UnitOfLength


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> FormatConfig:
    """Load the defaults.yaml shipped with the package."""
    return load_config()


@pytest.fixture()
def raw() -> dict:
    with open(DEFAULT_CONFIG_PATH, encoding="utf-8") as f:
        return yaml.safe_load(f)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_general(self, config: FormatConfig) -> None:
        gc = config.gc
        assert gc.uol is UnitOfLength.INCH
        assert gc.knot_density == 2
        assert gc.robot_width == 12
        assert gc.robot_height == 12
        assert gc.show_robot is True
        assert gc.control_magnet_distance == pytest.approx(5 / 2.54)

    def test_speed_limit(self, config: FormatConfig) -> None:
        sl = config.sc.speed_limit
        assert sl.min_limit.value == 0
        assert sl.max_limit.value == 127
        assert sl.max_limit.label == "127"
        assert (sl.from_, sl.to) == (20, 100)

    def test_secondary_ranges(self, config: FormatConfig) -> None:
        assert (config.sc.application_range.from_, config.sc.application_range.to) == (1.4, 1.8)
        assert config.sc.transition_range.to == 0.95

    def test_frozen(self, config: FormatConfig) -> None:
        with pytest.raises(AttributeError):
            config.gc.knot_density = 5  # type: ignore[misc]

    def test_with_max_speed_copies(self, config: FormatConfig) -> None:
        sc = config.sc.with_max_speed(64)
        assert sc.speed_limit.to == 64
        assert config.sc.speed_limit.to == 100

    @pytest.mark.parametrize(("value", "expected"), [(130, 127), (-3, 0), (55.5, 55.5)])
    def test_clamp(self, config: FormatConfig, value: float, expected: float) -> None:
        assert config.sc.speed_limit.clamp(value) == expected


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_missing_key(self, raw: dict) -> None:
        del raw["general"]["knot_density"]
        with pytest.raises(ConfigError, match="Missing required configuration key"):
            parse_config(raw)

    def test_bad_value(self, raw: dict) -> None:
        raw["general"]["knot_density"] = "dense"
        with pytest.raises(ConfigError, match="Invalid configuration value"):
            parse_config(raw)

    def test_zero_density(self, raw: dict) -> None:
        raw["general"]["knot_density"] = 0
        with pytest.raises(ConfigError, match="knot_density"):
            parse_config(raw)

    def test_range_out_of_limits(self, raw: dict) -> None:
        raw["speed"]["speed_limit"]["to"] = 200
        with pytest.raises(ConfigError, match="speed_limit"):
            parse_config(raw)

    def test_range_inverted(self, raw: dict) -> None:
        raw["speed"]["transition_range"]["from"] = 0.99
        with pytest.raises(ConfigError, match="transition_range"):
            parse_config(raw)

    def test_unknown_unit(self, raw: dict) -> None:
        raw["general"]["uol"] = "cubit"
        with pytest.raises(ConfigError):
            parse_config(raw)

    def test_numeric_unit(self, raw: dict) -> None:
        raw["general"]["uol"] = 10
        assert parse_config(raw).gc.uol is UnitOfLength.CENTIMETER


# ---------------------------------------------------------------------------
# Loading from disk
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_custom_file(self, raw: dict, tmp_path: Path) -> None:
        data = copy.deepcopy(raw)
        data["general"]["uol"] = "cm"
        data["general"]["knot_density"] = 5
        cfg_path = tmp_path / "format.yaml"
        cfg_path.write_text(yaml.safe_dump(data), encoding="utf-8")

        cfg = load_config(cfg_path)
        assert cfg.gc.uol is UnitOfLength.CENTIMETER
        assert cfg.gc.knot_density == 5

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        cfg_path = tmp_path / "empty.yaml"
        cfg_path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigError, match="Empty"):
            load_config(cfg_path)


# ---------------------------------------------------------------------------
# Shared defaults
# ---------------------------------------------------------------------------


class TestDefaultConfig:
    def test_loaded_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []
        real = loader.load_config

        def counting(path=None):
            calls.append(path)
            return real(path)

        default_config.cache_clear()
        monkeypatch.setattr(loader, "load_config", counting)
        try:
            first = default_config()
            assert default_config() is first
            assert len(calls) == 1
        finally:
            default_config.cache_clear()

    def test_matches_defaults_file(self) -> None:
        assert default_config() == load_config()

    def test_paths_share_defaults(self) -> None:
        end = geometry.EndPointControl
        a = geometry.Path(geometry.Spline(end(0, 0), end(1, 0)))
        b = geometry.Path(geometry.Spline(end(0, 0), end(2, 0)))
        assert a.gc is b.gc
        assert a.sc is b.sc
        assert a.gc is default_config().gc
