"""Format configuration loading and validation."""

from path_codec.configs.loader import (
    FormatConfig,
    GeneralConfig,
    NumberRange,
    OutputConfig,
    RangeLimit,
    SpeedConfig,
    default_config,
    load_config,
    parse_config,
)

__all__ = [
    "FormatConfig",
    "GeneralConfig",
    "NumberRange",
    "OutputConfig",
    "RangeLimit",
    "SpeedConfig",
    "default_config",
    "load_config",
    "parse_config",
]
