"""Length units and fixed-precision conversion between them.

File formats are usually unit-fixed (LemLib v0.4 is inch-only) while the
editor lets the user pick a unit.  :class:`UnitConverter` bridges the two
and applies the format's decimal precision on every conversion.

Precision convention:
    Values are rounded on their shortest decimal string, half away from
    zero, then parsed back to float.  A conversion of an already rounded
    value therefore rounds twice; that matches the reference output and
    must not be collapsed into a single rounding pass.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum


class UnitOfLength(float, Enum):
    """Unit of length, valued in millimetres."""

    MILLIMETER = 1.0
    CENTIMETER = 10.0
    METER = 1000.0
    INCH = 25.4
    FOOT = 304.8

    @property
    def inches(self) -> float:
        """Length of one unit expressed in inches."""
        return self.value / UnitOfLength.INCH.value

    @classmethod
    def from_name(cls, name: str) -> UnitOfLength:
        """Look up a unit by case-insensitive name (``"inch"``, ``"cm"`` ...)."""
        key = name.strip().upper()
        aliases = {"MM": "MILLIMETER", "CM": "CENTIMETER", "M": "METER",
                   "IN": "INCH", "FT": "FOOT"}
        key = aliases.get(key, key)
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown unit of length: {name!r}") from None


def fix_precision(value: float, precision: int = 3) -> float:
    """Round *value* to *precision* decimals, half away from zero.

    Parameters
    ----------
    value : float
        Value to round.  Non-finite values are returned unchanged.
    precision : int
        Number of decimal places, default 3.

    Returns
    -------
    float
        The rounded decimal string re-parsed as float.
    """
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-precision)
    rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


class UnitConverter:
    """Convert lengths between unit *A* and unit *B*.

    Parameters
    ----------
    from_unit : UnitOfLength
        Unit *A* (usually the editor's unit).
    to_unit : UnitOfLength
        Unit *B* (usually the file format's unit).
    precision : int
        Decimal places kept by every conversion, default 3.
    """

    def __init__(
        self,
        from_unit: UnitOfLength,
        to_unit: UnitOfLength,
        precision: int = 3,
    ) -> None:
        self.from_unit = from_unit
        self.to_unit = to_unit
        self.precision = precision

    def __repr__(self) -> str:
        return (
            f"UnitConverter({self.from_unit.name}, {self.to_unit.name}, "
            f"precision={self.precision})"
        )

    @property
    def is_identity(self) -> bool:
        return self.from_unit is self.to_unit

    def from_a_to_b(self, value: float) -> float:
        """Convert *value* from unit A to unit B."""
        return self.fix_precision(
            value * self.from_unit.value / self.to_unit.value
        )

    def from_b_to_a(self, value: float) -> float:
        """Convert *value* from unit B to unit A."""
        return self.fix_precision(
            value * self.to_unit.value / self.from_unit.value
        )

    def fix_precision(self, value: float) -> float:
        return fix_precision(value, self.precision)
