""" EXPRESSION EVALUATION

Evaluates the lexemes of one declaration value with two stacks, one for
values and one for operators.

    1 2 3          => 1 2 3        adjacent values form a list
    1 + 2 3        => 12 3         at the top level the list joins the last value
    15/3/5         => 15/3/5       top level `/` between literals is a separator
    (15/3)/5       => 1            parentheses or computed operands divide
    1 + (2 3)      => 12 3         `+` next to a list glues items as text
    $a, $b         => a, b         commas separate list items
"""

from __future__ import annotations
import logging
import re

from flatcss.errors import ErrorKind, EvaluationError
from flatcss.scss.context import Context
from flatcss.scss.parser import Expression, split_top_level
from flatcss.scss.tokens import Comment, Ident, Lexeme, Number, Op, Operator, StringLiteral
from flatcss.scss.values import *

__all__ = ["Evaluator", "evaluate", "PASS_THROUGH_FUNCTIONS", "UNSUPPORTED_FUNCTIONS"]

logger = logging.getLogger(__name__)

HEX = re.compile(r"#[0-9a-fA-F]+")

PASS_THROUGH_FUNCTIONS = frozenset({"calc", "var", "env", "min", "max", "clamp", "attr", "format", "local"})
UNSUPPORTED_FUNCTIONS = frozenset({
    "darken",
    "lighten",
    "saturate",
    "desaturate",
    "adjust-hue",
    "mix",
    "percentage",
    "unquote",
    "quote",
    "map-get",
    "nth",
    "length",
    "join",
    "append",
    "if",
})


class Evaluator:
    """Single use: create one per expression."""

    def __init__(self, context: Context | None = None) -> None:
        self.context = context or Context()
        self.values: list[Value | Op] = []
        self.operators: list[Lexeme] = []
        # (height of the value stack, join with the value before it) per open `(`
        self.parens: list[tuple[int, bool]] = []
        self.last_was_operator = True

    @property
    def paren_level(self) -> int:
        return len(self.parens)

    def evaluate(self, lexemes: Expression | list[Lexeme]) -> Value:
        lexemes = [lexeme for lexeme in lexemes if not isinstance(lexeme.token, Comment)]
        if not lexemes:
            raise EvaluationError(ErrorKind.ExpectedValue, "Expected a value, found nothing")

        index = 0
        while index < len(lexemes):
            lexeme = lexemes[index]
            token = lexeme.token
            following = lexemes[index + 1] if index + 1 < len(lexemes) else None

            if (
                isinstance(token, Ident)
                and following is not None
                and following.is_op(Op.LeftParen)
                and lexeme.touches(following)
            ):
                end = self._matching_paren_(lexemes, index + 1)
                self._push_value_(self._function_(token.raw, lexemes[index + 2:end], lexeme))
                index = end + 1
                continue

            if isinstance(token, Operator):
                self._operator_(lexeme)
            else:
                self._push_value_(self._value_(lexeme))
            index += 1

        while self.operators:
            if self.operators[-1].is_op(Op.LeftParen):
                raise EvaluationError(
                    ErrorKind.ExpectedOperator,
                    "Expected `)` to close `(`",
                    self.operators[-1].offset,
                )
            self._reduce_()

        return self._fold_(self.values, lexemes[0].offset)

    def _matching_paren_(self, lexemes: list[Lexeme], start: int) -> int:
        depth = 0
        for index in range(start, len(lexemes)):
            if lexemes[index].is_op(Op.LeftParen):
                depth += 1
            elif lexemes[index].is_op(Op.RightParen):
                depth -= 1
                if depth == 0:
                    return index
        raise EvaluationError(ErrorKind.ExpectedOperator, "Expected `)` to close the function call", lexemes[start].offset)

    def _value_(self, lexeme: Lexeme) -> Value:
        token = lexeme.token
        if isinstance(token, Number):
            return NumberValue(token.value, token.unit, token.computed, token.raw)
        if isinstance(token, StringLiteral):
            return Text(token.raw)
        if isinstance(token, Ident):
            raw = token.raw
            if token.is_variable:
                value = self.context.get_variable(raw)
                return value if value is not None else Text(raw)
            if raw.startswith("-$"):
                value = self.context.get_variable(raw[1:])
                if isinstance(value, NumberValue):
                    return value.negate()
                return Text(raw) if value is None else Text("-" + value.to_css(self.context.precision))
            if HEX.fullmatch(raw):
                return ColorValue.from_hex(raw, lexeme.offset)
            return Text(raw)
        raise EvaluationError(
            ErrorKind.UnexpectedValuePartType,
            f"Unexpected `{lexeme}` in a value",
            lexeme.offset,
        )

    def _push_value_(self, value: Value):
        if self.last_was_operator:
            self.values.append(value)
        else:
            if self.paren_level > 0:
                self._reduce_to_paren_()
            self.values.append(concat_into_list(self.values.pop(), value))
        self.last_was_operator = False

    def _operator_(self, lexeme: Lexeme):
        op = lexeme.op
        if op in (Op.LeftCurlyBrace, Op.RightCurlyBrace, Op.Semicolon, Op.Colon):
            raise EvaluationError(
                ErrorKind.UnexpectedValuePartType,
                f"Unexpected `{op}` in a value",
                lexeme.offset,
            )

        if op is Op.LeftParen:
            join = not self.last_was_operator
            if join and self.paren_level > 0:
                self._reduce_to_paren_()
            self.operators.append(lexeme)
            self.parens.append((len(self.values), join))
            self.last_was_operator = True
        elif op is Op.RightParen:
            if not self.parens:
                raise EvaluationError(ErrorKind.InvalidOperator, "Unmatched `)`", lexeme.offset)
            self._reduce_to_paren_()
            self.operators.pop()
            height, join = self.parens.pop()
            inner = self.values[height:]
            del self.values[height:]
            value = self._fold_(inner, lexeme.offset) if inner else ListValue()
            if join:
                value = concat_into_list(self.values.pop(), value)
            self.values.append(value)
            self.last_was_operator = False
        elif op is Op.Comma:
            if self.last_was_operator:
                raise EvaluationError(ErrorKind.ExpectedValue, "Expected a value before `,`", lexeme.offset)
            self._reduce_to_paren_()
            self.values.append(Op.Comma)
            self.last_was_operator = True
        else:
            if self.last_was_operator:
                if op is not Op.Minus:
                    raise EvaluationError(ErrorKind.ExpectedValue, f"Expected a value before `{op}`", lexeme.offset)
                # unary minus is `-1 * x`
                self.values.append(NumberValue(-1, computed=True))
                lexeme = Lexeme(Operator(Op.Star), lexeme.offset)
                op = Op.Star
            while self.operators and self.operators[-1].op.same_or_greater_precedence(op):
                self._reduce_()
            self.operators.append(lexeme)
            self.last_was_operator = True

    def _reduce_to_paren_(self):
        while self.operators and not self.operators[-1].is_op(Op.LeftParen):
            self._reduce_()

    def _reduce_(self):
        operator = self.operators.pop()
        if len(self.values) < 2 or isinstance(self.values[-1], Op) or isinstance(self.values[-2], Op):
            raise EvaluationError(
                ErrorKind.ExpectedValue,
                f"Expected a value on both sides of `{operator}`",
                operator.offset,
            )
        right = self.values.pop()
        left = self.values.pop()
        result = apply(operator.op, left, right, self.paren_level, operator.offset, self.context.precision)
        logger.debug("%s %s %s => %r", left, operator, right, result)
        self.values.append(result)

    @staticmethod
    def _fold_(entries: list[Value | Op], offset: int | None) -> Value:
        if not entries:
            raise EvaluationError(ErrorKind.ExpectedValue, "Expected a value, found nothing", offset)
        if len(entries) == 1:
            if isinstance(entries[0], Op):
                raise EvaluationError(ErrorKind.ExpectedValue, f"Expected a value, found `{entries[0]}`", offset)
            return entries[0]
        result = ListValue()
        for entry in entries:
            result = concat_into_list(result, entry)
        return result

    def _substitute_(self, lexemes: list[Lexeme]) -> str:
        """Spell out lexemes with variables replaced by their values and nothing else evaluated."""
        text = ""
        previous = None
        for lexeme in lexemes:
            if previous is not None and not previous.touches(lexeme):
                text += " "
            token = lexeme.token
            value = self.context.get_variable(token.raw) if isinstance(token, Ident) and token.is_variable else None
            text += str(lexeme) if value is None else value.to_css(self.context.precision)
            previous = lexeme
        return text

    def _function_(self, name: str, arguments: list[Lexeme], lexeme: Lexeme) -> Value:
        lowered = name.lower()
        if lowered in UNSUPPORTED_FUNCTIONS:
            raise EvaluationError(
                ErrorKind.UnknownFunction,
                f"Function `{name}()` is not supported",
                lexeme.offset,
            )
        if lowered in PASS_THROUGH_FUNCTIONS or lowered.startswith("-"):
            return Text(f"{name}({self._substitute_(arguments)})")

        values = [Evaluator(self.context).evaluate(group) for group in split_top_level(arguments) if group]
        if lowered == "rgb" and len(values) == 3 and all(
            isinstance(value, NumberValue) and value.unit is None for value in values
        ):
            red, green, blue = (max(0, min(round(value.scalar), 255)) for value in values)
            return ColorValue.from_computed(red, green, blue)
        return Text(f"{name}({', '.join(value.to_css(self.context.precision) for value in values)})")


def evaluate(expression: Expression | list[Lexeme], context: Context | None = None) -> Value:
    return Evaluator(context).evaluate(expression)
