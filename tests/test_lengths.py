"""Tests for CSS length resolution."""

import math

import pytest

from cutshape.geom.lengths import LengthContext, LengthResolver, parse_length
from cutshape.utils.errors import CutShapeStateError, LengthSyntaxError


@pytest.fixture
def ctx():
    return LengthContext(
        reference_width=300.0,
        viewport_width=1200.0,
        viewport_height=800.0,
        font_size=20.0,
        root_font_size=16.0,
        custom_properties={"--gap": "12px", "--twice": "calc(var(--gap) * 2)"},
    )


class TestUnits:
    def test_px(self, ctx):
        assert parse_length("12px", ctx) == 12

    def test_unitless_is_px(self, ctx):
        assert parse_length("30", ctx) == 30

    def test_absolute_units(self, ctx):
        assert parse_length("1in", ctx) == pytest.approx(96)
        assert parse_length("2.54cm", ctx) == pytest.approx(96)
        assert parse_length("72pt", ctx) == pytest.approx(96)

    def test_font_relative(self, ctx):
        assert parse_length("2rem", ctx) == 32
        assert parse_length("1.5em", ctx) == 30

    def test_percentage_uses_reference_width(self, ctx):
        assert parse_length("50%", ctx) == 150

    def test_viewport_units(self, ctx):
        assert parse_length("10vw", ctx) == pytest.approx(120)
        assert parse_length("10vh", ctx) == pytest.approx(80)
        assert parse_length("10vmin", ctx) == pytest.approx(80)
        assert parse_length("10vmax", ctx) == pytest.approx(120)

    def test_negative(self, ctx):
        assert parse_length("-5px", ctx) == -5

    def test_empty_is_nan(self, ctx):
        assert math.isnan(parse_length("   ", ctx))


class TestFunctions:
    def test_calc(self, ctx):
        assert parse_length("calc(100% - 20px)", ctx) == 280

    def test_calc_nested_parens(self, ctx):
        assert parse_length("calc((10px + 5px) * 2)", ctx) == 30

    def test_clamp(self):
        wide = LengthContext(viewport_width=1000)
        narrow = LengthContext(viewport_width=100)
        assert parse_length("clamp(10px, 5vw, 40px)", wide) == 40
        assert parse_length("clamp(10px, 5vw, 40px)", narrow) == 10

    def test_min_max(self, ctx):
        assert parse_length("min(30px, 50%)", ctx) == 30
        assert parse_length("max(1rem, 2px*3)", ctx) == 16

    def test_var(self, ctx):
        assert parse_length("var(--gap)", ctx) == 12
        assert parse_length("var(--twice)", ctx) == 24

    def test_var_fallback(self, ctx):
        assert parse_length("var(--missing, 8px)", ctx) == 8

    def test_var_missing_is_nan(self, ctx):
        assert math.isnan(parse_length("var(--missing)", ctx))

    def test_division_by_zero_is_infinite(self, ctx):
        assert math.isinf(parse_length("calc(10px / 0)", ctx))

    def test_cyclic_var(self):
        ctx = LengthContext(custom_properties={"--a": "var(--a)"})
        with pytest.raises(LengthSyntaxError):
            parse_length("var(--a)", ctx)


class TestMalformed:
    @pytest.mark.parametrize(
        "text",
        [
            "abc",
            "10furlongs",
            "calc(10px + 5)",
            "calc(10px * 2px)",
            "min(10px, 5)",
            "clamp(1px, 2px)",
            "10px 20px",
            "foo(1px)",
            "calc(10px",
        ],
    )
    def test_raises(self, ctx, text):
        with pytest.raises(LengthSyntaxError):
            parse_length(text, ctx)


class TestLengthResolver:
    def test_number_unchanged(self):
        assert LengthResolver().resolve(15, 20) == 15

    def test_absent_uses_fallback(self):
        assert LengthResolver().resolve(None, 20) == 20

    def test_malformed_uses_fallback(self):
        assert LengthResolver().resolve("bad", 7) == 7

    def test_non_finite_uses_fallback(self):
        r = LengthResolver()
        assert r.resolve("var(--nope)", 3) == 3
        assert r.resolve(float("inf"), 3) == 3
        assert r.resolve(float("nan"), 3) == 3

    def test_bool_is_invalid(self):
        assert LengthResolver().resolve(True, 4) == 4

    def test_update_context(self):
        r = LengthResolver()
        r.update_context(reference_width=400)
        assert r.resolve("25%", 0) == 100

    def test_measure_is_strict(self):
        with pytest.raises(LengthSyntaxError):
            LengthResolver().measure("abc")

    def test_disposed(self):
        r = LengthResolver()
        r.dispose()
        assert r.disposed
        with pytest.raises(CutShapeStateError):
            r.measure("10px")
