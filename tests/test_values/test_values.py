"""Tests for evaluated values and their arithmetic."""

import pytest

from flatcss.errors import ErrorKind, EvaluationError
from flatcss.scss.tokens import Op, format_number
from flatcss.scss.values import (
    ColorValue,
    ListValue,
    NumberValue,
    Text,
    apply,
    apply_math,
    concat_into_list,
)


def num(scalar, unit=None):
    return NumberValue(scalar, unit, raw=f"{scalar}{unit or ''}")


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


class TestFormatNumber:
    def test_integral(self):
        assert format_number(2.0) == "2"

    def test_precision(self):
        assert format_number(1 / 3) == "0.33333"
        assert format_number(1.23456789, 3) == "1.235"

    def test_float_noise(self):
        assert format_number(0.1 + 0.2) == "0.3"


class TestNumberValue:
    def test_literal_keeps_spelling(self):
        assert NumberValue(1.5, "em", raw="1.50em").to_css() == "1.50em"

    def test_computed_uses_scalar(self):
        assert NumberValue(1.5, "em", True, raw="1.50em").to_css() == "1.5em"

    def test_negate(self):
        assert num(2, "px").negate() == NumberValue(-2, "px", True)


class TestUnits:
    def test_same_units_are_kept(self):
        assert apply_math(Op.Plus, num(1, "px"), num(2, "px")) == NumberValue(3, "px", True)

    def test_one_unit_wins(self):
        assert apply_math(Op.Plus, num(1, "px"), num(2)) == NumberValue(3, "px", True)
        assert apply_math(Op.Star, num(2), num(3, "em")) == NumberValue(6, "em", True)

    def test_division_cancels(self):
        assert apply_math(Op.Slash, num(10, "px"), num(2, "px")) == NumberValue(5, None, True)

    def test_square_units(self):
        with pytest.raises(EvaluationError) as exc:
            apply_math(Op.Star, num(2, "px"), num(3, "px"))
        assert exc.value.kind is ErrorKind.InvalidSquareUnits

    def test_incompatible_units(self):
        with pytest.raises(EvaluationError) as exc:
            apply_math(Op.Plus, num(1, "px"), num(1, "em"))
        assert exc.value.kind is ErrorKind.IncompatibleUnits

    def test_modulo(self):
        assert apply_math(Op.Percent, num(7), num(3)) == NumberValue(1, None, True)

    def test_division_by_zero(self):
        with pytest.raises(EvaluationError) as exc:
            apply_math(Op.Slash, num(1), num(0))
        assert exc.value.kind is ErrorKind.InvalidApplyMathArgs


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


class TestListValue:
    def test_display(self):
        value = ListValue([num(80, "%"), num(90, "%"), Op.Comma, Text("a")])
        assert value.to_css() == "80% 90%, a"

    def test_slash_display(self):
        assert ListValue([num(15), Op.Slash, num(3)]).to_css() == "15/3"

    def test_concat_flattens(self):
        joined = concat_into_list(ListValue([Text("a"), Text("b")]), ListValue([Text("c")]))
        assert joined == ListValue([Text("a"), Text("b"), Text("c")])

    def test_slash_list_collapses_in_math(self):
        half = ListValue([num(1), Op.Slash, num(2)])
        assert apply_math(Op.Plus, half, half) == NumberValue(1, None, True)

    def test_plus_glues_items(self):
        result = apply_math(Op.Plus, num(1), ListValue([num(2), num(3)]))
        assert result.to_css() == "12 3"
        result = apply_math(Op.Plus, ListValue([num(2), num(3)]), num(1))
        assert result.to_css() == "2 31"

    def test_other_list_math(self):
        with pytest.raises(EvaluationError) as exc:
            apply_math(Op.Star, ListValue([Text("a"), Text("b")]), num(2))
        assert exc.value.kind is ErrorKind.InvalidApplyListArgs


class TestSlash:
    def test_literals_stay_separated(self):
        assert apply(Op.Slash, num(15), num(3)) == ListValue([num(15), Op.Slash, num(3)])

    def test_computed_operand_divides(self):
        assert apply(Op.Slash, num(15), NumberValue(3, None, True)) == NumberValue(5, None, True)

    def test_inside_parens_divides(self):
        assert apply(Op.Slash, num(15), num(3), paren_level=1) == NumberValue(5, None, True)

    def test_list_inside_parens_is_extended(self):
        result = apply(Op.Slash, ListValue([num(1), num(6)]), num(7), paren_level=1)
        assert result.to_css() == "1 6/7"


# ---------------------------------------------------------------------------
# Text and colours
# ---------------------------------------------------------------------------


class TestText:
    def test_plus_concatenates(self):
        assert apply_math(Op.Plus, Text("a"), num(1)) == Text("a1")
        assert apply_math(Op.Plus, ColorValue.from_hex("#abc"), Text("hello")) == Text("#abchello")

    def test_other_math(self):
        with pytest.raises(EvaluationError) as exc:
            apply_math(Op.Minus, Text("a"), num(1))
        assert exc.value.kind is ErrorKind.InvalidApplyMathArgs


class TestColorValue:
    def test_short_hex(self):
        color = ColorValue.from_hex("#abc")
        assert color.rgb == (170, 187, 204)
        assert color.to_css() == "#abc"

    def test_long_hex(self):
        assert ColorValue.from_hex("#ff0000").to_css() == "#ff0000"

    def test_invalid_hex(self):
        with pytest.raises(EvaluationError) as exc:
            ColorValue.from_hex("#abcd")
        assert exc.value.kind is ErrorKind.InvalidColor

    def test_overflow_without_name(self):
        result = apply_math(Op.Plus, ColorValue.from_hex("#ff0000"), num(1))
        assert result.computed
        assert result.to_css() == "#ff0101"

    def test_computed_prefers_names(self):
        assert ColorValue.from_computed(192, 192, 192).to_css() == "silver"

    def test_combining_colors(self):
        result = apply_math(Op.Plus, ColorValue.from_hex("#ff0000"), ColorValue.from_hex("#00ff00"))
        assert result.computed
        assert result.to_css() == "yellow"

    def test_channels_saturate(self):
        result = apply_math(Op.Minus, ColorValue.from_hex("#123"), num(100))
        assert result.rgb == (0, 0, 0)
        assert result.to_css() == "black"

    def test_number_and_color_stay_a_list(self):
        result = apply_math(Op.Plus, num(1), ColorValue.from_hex("#abc"))
        assert result.to_css() == "1 + #abc"

    def test_compressed(self):
        color = ColorValue.from_computed(255, 255, 0)
        assert color.to_css(compressed=True) == "#ff0"
        assert ColorValue.from_computed(255, 0, 0).to_css(compressed=True) == "red"
