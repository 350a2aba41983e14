"""Units of length and fixed-precision conversion."""

from path_codec.units.converter import UnitConverter, UnitOfLength, fix_precision

__all__ = ["UnitConverter", "UnitOfLength", "fix_precision"]
