"""
Evaluated values and the arithmetic between them.

number => `NumberValue(12, "px")`, literal numbers print as written
text   => `Text("sans-serif")`, anything that is not a number or colour
list   => `ListValue([a, b, Op.Comma, c])`, space joined with `,` and `/` kept as separators
color  => `ColorValue(255, 0, 0)`, from `#hex` or `rgb(...)`
"""
from __future__ import annotations
from dataclasses import dataclass, field
import math
from typing_extensions import TypeAliasType

from flatcss.errors import ErrorKind, EvaluationError
from flatcss.scss.tokens import Op, PRECISION, format_number

__all__ = [
    "NumberValue",
    "Text",
    "ListValue",
    "ColorValue",
    "Value",
    "ListItem",
    "concat_into_list",
    "apply",
    "apply_math",
    "is_computed",
]


@dataclass
class NumberValue:
    scalar: float
    unit: str | None = None
    computed: bool = False
    raw: str | None = field(default=None, compare=False)

    def negate(self) -> NumberValue:
        return NumberValue(-self.scalar, self.unit, True)

    def to_css(self, precision: int = PRECISION, compressed: bool = False) -> str:
        if not self.computed and self.raw is not None:
            return self.raw
        return format_number(self.scalar, precision) + (self.unit or "")

    def __str__(self) -> str:
        return self.to_css()


@dataclass
class Text:
    value: str

    def to_css(self, precision: int = PRECISION, compressed: bool = False) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass
class ListValue:
    """Space separated values. `Op.Comma` and `Op.Slash` items are separators."""

    items: list[ListItem] = field(default_factory=list)

    @property
    def is_slash_list(self) -> bool:
        """`a/b/c` made only of numbers, which collapses when used in arithmetic."""
        if len(self.items) < 3 or len(self.items) % 2 == 0:
            return False
        for i, item in enumerate(self.items):
            if i % 2 == 1 and item is not Op.Slash:
                return False
            if i % 2 == 0 and not isinstance(item, NumberValue):
                return False
        return True

    def collapse(self) -> NumberValue:
        """Divide out a slash list left to right."""
        result = self.items[0]
        for i in range(2, len(self.items), 2):
            result = _number_math(Op.Slash, result, self.items[i])
        return result

    def to_css(self, precision: int = PRECISION, compressed: bool = False) -> str:
        out = ""
        previous = None
        for item in self.items:
            if isinstance(item, Op):
                out += str(item)
            else:
                if out and previous is not Op.Slash:
                    out += " "
                out += item.to_css(precision, compressed)
            previous = item
        return out

    def __str__(self) -> str:
        return self.to_css()


NAMED_COLORS = {
    "black": (0, 0, 0),
    "silver": (192, 192, 192),
    "gray": (128, 128, 128),
    "white": (255, 255, 255),
    "maroon": (128, 0, 0),
    "red": (255, 0, 0),
    "purple": (128, 0, 128),
    "magenta": (255, 0, 255),
    "green": (0, 128, 0),
    "lime": (0, 255, 0),
    "olive": (128, 128, 0),
    "yellow": (255, 255, 0),
    "navy": (0, 0, 128),
    "blue": (0, 0, 255),
    "teal": (0, 128, 128),
    "cyan": (0, 255, 255),
    "orange": (255, 165, 0),
    "darkgrey": (169, 169, 169),
    "darkslategrey": (47, 79, 79),
    "dimgrey": (105, 105, 105),
    "lightgrey": (211, 211, 211),
    "lightslategrey": (119, 136, 153),
    "slategrey": (112, 128, 144),
    "aliceblue": (240, 248, 255),
    "antiquewhite": (250, 235, 215),
    "aquamarine": (127, 255, 212),
    "azure": (240, 255, 255),
    "beige": (245, 245, 220),
    "bisque": (255, 228, 196),
    "blanchedalmond": (255, 235, 205),
    "blueviolet": (138, 43, 226),
    "brown": (165, 42, 42),
    "burlywood": (222, 184, 135),
    "cadetblue": (95, 158, 160),
    "chartreuse": (127, 255, 0),
    "chocolate": (210, 105, 30),
    "coral": (255, 127, 80),
    "cornflowerblue": (100, 149, 237),
    "crimson": (220, 20, 60),
    "gold": (255, 215, 0),
    "indigo": (75, 0, 130),
    "ivory": (255, 255, 240),
    "khaki": (240, 230, 140),
    "orchid": (218, 112, 214),
    "pink": (255, 192, 203),
    "plum": (221, 160, 221),
    "salmon": (250, 128, 114),
    "sienna": (160, 82, 45),
    "tan": (210, 180, 140),
    "tomato": (255, 99, 71),
    "violet": (238, 130, 238),
    "wheat": (245, 222, 179),
}
COLOR_NAMES = {rgb: name for name, rgb in NAMED_COLORS.items()}


def _hex_format(red: int, green: int, blue: int) -> str:
    return f"#{red:02x}{green:02x}{blue:02x}"


@dataclass
class ColorValue:
    red: int
    green: int
    blue: int
    computed: bool = False
    original: str = field(default="", compare=False)

    @staticmethod
    def from_hex(text: str, offset: int | None = None) -> ColorValue:
        digits = text.lstrip("#")
        if len(digits) == 3:
            red, green, blue = (int(d, 16) * 17 for d in digits)
        elif len(digits) == 6:
            red, green, blue = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
        else:
            raise EvaluationError(ErrorKind.InvalidColor, f"Invalid hex color: {text}", offset)
        return ColorValue(red, green, blue, False, text)

    @staticmethod
    def from_computed(red: int, green: int, blue: int) -> ColorValue:
        return ColorValue(red, green, blue, True, _hex_format(red, green, blue))

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    def to_hex(self) -> str:
        return _hex_format(self.red, self.green, self.blue)

    def to_short_hex(self) -> str:
        if all(channel % 17 == 0 for channel in self.rgb):
            return "#" + "".join(f"{channel // 17:x}" for channel in self.rgb)
        return self.to_hex()

    def to_named_color(self) -> str:
        return COLOR_NAMES.get(self.rgb, self.to_hex())

    def to_css(self, precision: int = PRECISION, compressed: bool = False) -> str:
        if compressed:
            if not self.computed:
                return self.to_css()
            short, named = self.to_short_hex(), self.to_named_color()
            return short if len(short) < len(named) else named

        candidate = self.to_named_color() if self.computed else self.to_hex()
        original = self.original or self.to_hex()
        return candidate if len(candidate) <= len(original) else original

    def __str__(self) -> str:
        return self.to_css()


Value = TypeAliasType("Value", NumberValue | Text | ListValue | ColorValue)
ListItem = TypeAliasType("ListItem", NumberValue | Text | ListValue | ColorValue | Op)


def is_computed(value: Value) -> bool:
    return isinstance(value, (NumberValue, ColorValue)) and value.computed


def concat_into_list(left: Value | Op, right: Value | Op) -> ListValue:
    """Join two values into one flat list, splicing in the items of either side that is already a list."""
    items: list[ListItem] = []
    for side in (left, right):
        if isinstance(side, ListValue):
            items.extend(side.items)
        else:
            items.append(side)
    return ListValue(items)


def _spelled(item: ListItem, precision: int) -> str:
    return str(item) if isinstance(item, Op) else item.to_css(precision)


def _collapsed(value: Value) -> Value:
    if isinstance(value, ListValue) and value.is_slash_list:
        return value.collapse()
    return value


def apply(
    op: Op,
    left: Value,
    right: Value,
    paren_level: int = 0,
    offset: int | None = None,
    precision: int = PRECISION,
) -> Value:
    """Apply a binary operator the way it behaves inside an expression.

    At the top level `a/b` between literals is a separator, not a division.
    """
    if op is Op.Slash:
        if paren_level == 0:
            if is_computed(left) or is_computed(right):
                return apply_math(op, left, right, offset, precision)
            return concat_into_list(concat_into_list(left, op), right)
        if isinstance(left, ListValue) and not left.is_slash_list:
            return concat_into_list(concat_into_list(left, op), right)
    return apply_math(op, left, right, offset, precision)


def apply_math(op: Op, left: Value, right: Value, offset: int | None = None, precision: int = PRECISION) -> Value:
    if not op.arithmetic:
        raise EvaluationError(
            ErrorKind.InvalidOperator,
            f"Cannot apply operator `{op}` as math",
            offset,
        )
    left, right = _collapsed(left), _collapsed(right)

    if isinstance(left, NumberValue) and isinstance(right, NumberValue):
        return _number_math(op, left, right, offset)
    if isinstance(left, ColorValue) and isinstance(right, NumberValue):
        return _color_math(op, left, (int(right.scalar),) * 3, offset)
    if isinstance(left, ColorValue) and isinstance(right, ColorValue):
        return _color_math(op, left, right.rgb, offset)
    if isinstance(left, NumberValue) and isinstance(right, ColorValue):
        return ListValue([left, Text(str(op)), right])
    if op is Op.Plus and (isinstance(left, ListValue) or isinstance(right, ListValue)):
        return apply_list(left, right, precision)
    if op is Op.Plus and (isinstance(left, Text) or isinstance(right, Text)):
        return Text(left.to_css(precision) + right.to_css(precision))
    if isinstance(left, ListValue) or isinstance(right, ListValue):
        raise EvaluationError(
            ErrorKind.InvalidApplyListArgs,
            f"Cannot apply `{op}` to {left} and {right}",
            offset,
        )
    raise EvaluationError(
        ErrorKind.InvalidApplyMathArgs,
        f"Cannot apply `{op}` to {left} and {right}",
        offset,
    )


def apply_list(left: Value, right: Value, precision: int = PRECISION) -> ListValue:
    """`+` touching a list glues the adjacent items together as text."""
    if isinstance(left, ListValue) and isinstance(right, ListValue):
        return concat_into_list(left, right)
    if isinstance(right, ListValue):
        if not right.items:
            return ListValue([left])
        first, *rest = right.items
        return ListValue([Text(left.to_css(precision) + _spelled(first, precision)), *rest])
    if not left.items:
        return ListValue([right])
    *rest, last = left.items
    return ListValue([*rest, Text(_spelled(last, precision) + right.to_css(precision))])


def _result_unit(op: Op, left: NumberValue, right: NumberValue, offset: int | None) -> str | None:
    if left.unit is None or right.unit is None:
        return left.unit or right.unit
    if left.unit != right.unit:
        raise EvaluationError(
            ErrorKind.IncompatibleUnits,
            f"Incompatible units: {left.unit} and {right.unit}",
            offset,
        )
    if op is Op.Slash:
        return None
    if op is Op.Star:
        raise EvaluationError(
            ErrorKind.InvalidSquareUnits,
            f"Multiplying {left} by {right} would give square units",
            offset,
        )
    return left.unit


def _number_math(op: Op, left: NumberValue, right: NumberValue, offset: int | None = None) -> NumberValue:
    unit = _result_unit(op, left, right, offset)
    a, b = left.scalar, right.scalar
    if op in (Op.Slash, Op.Percent) and b == 0:
        raise EvaluationError(ErrorKind.InvalidApplyMathArgs, f"Cannot divide {left} by zero", offset)

    if op is Op.Plus:
        result = a + b
    elif op is Op.Minus:
        result = a - b
    elif op is Op.Star:
        result = a * b
    elif op is Op.Slash:
        result = a / b
    else:
        result = math.fmod(a, b)
    return NumberValue(result, unit, True)


def _color_math(op: Op, color: ColorValue, other: tuple[int, int, int], offset: int | None) -> ColorValue:
    channels = []
    for a, b in zip(color.rgb, other):
        if op is Op.Plus:
            result = a + b
        elif op is Op.Minus:
            result = a - b
        elif op is Op.Star:
            result = a * b
        elif b == 0:
            raise EvaluationError(ErrorKind.InvalidApplyMathArgs, f"Cannot divide {color} by zero", offset)
        elif op is Op.Slash:
            result = a // b
        else:
            result = a % b
        channels.append(max(0, min(result, 255)))
    return ColorValue.from_computed(*channels)
