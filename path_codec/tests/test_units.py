"""Tests for units of length and fixed-precision conversion."""

from __future__ import annotations

import pytest

from path_codec.units.converter import UnitConverter, UnitOfLength, fix_precision


class TestFixPrecision:
    def test_rounds_to_three_places(self) -> None:
        assert fix_precision(1.23456) == 1.235

    def test_half_away_from_zero_on_decimal_string(self) -> None:
        # Binary round() gives 1.0 because 1.0005 is stored as 1.000499...
        assert fix_precision(1.0005) == 1.001
        assert fix_precision(-1.0005) == -1.001

    def test_custom_precision(self) -> None:
        assert fix_precision(2.675, 2) == 2.68

    def test_integers_unchanged(self) -> None:
        assert fix_precision(42) == 42.0

    def test_non_finite_passthrough(self) -> None:
        assert fix_precision(float("inf")) == float("inf")


class TestUnitOfLength:
    def test_inch_factor(self) -> None:
        assert UnitOfLength.INCH.inches == 1.0
        assert UnitOfLength.FOOT.inches == pytest.approx(12.0)
        assert UnitOfLength.CENTIMETER.inches == pytest.approx(1 / 2.54)

    @pytest.mark.parametrize(
        ("name", "unit"),
        [("inch", UnitOfLength.INCH), ("cm", UnitOfLength.CENTIMETER), ("Foot", UnitOfLength.FOOT)],
    )
    def test_from_name(self, name: str, unit: UnitOfLength) -> None:
        assert UnitOfLength.from_name(name) is unit

    def test_from_name_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown unit"):
            UnitOfLength.from_name("furlong")


class TestUnitConverter:
    def test_cm_to_inch(self) -> None:
        uc = UnitConverter(UnitOfLength.CENTIMETER, UnitOfLength.INCH)
        assert uc.from_a_to_b(2.54) == 1.0
        assert uc.from_b_to_a(20) == 50.8

    def test_identity_still_rounds(self) -> None:
        uc = UnitConverter(UnitOfLength.INCH, UnitOfLength.INCH)
        assert uc.is_identity
        assert uc.from_a_to_b(1.23456) == 1.235
        assert uc.from_b_to_a(20) == 20

    def test_fix_precision_uses_converter_precision(self) -> None:
        uc = UnitConverter(UnitOfLength.INCH, UnitOfLength.INCH, precision=1)
        assert uc.fix_precision(33.35) == 33.4

    @pytest.mark.parametrize("unit", [UnitOfLength.MILLIMETER, UnitOfLength.CENTIMETER])
    @pytest.mark.parametrize("x", [0.001, 0.5, 1.0, 2.54, 12.345, 123.456, 9999.999])
    def test_round_trip_within_rounding(self, unit: UnitOfLength, x: float) -> None:
        uc = UnitConverter(unit, UnitOfLength.INCH)
        assert uc.from_a_to_b(uc.from_b_to_a(x)) == pytest.approx(x, abs=1e-3)
