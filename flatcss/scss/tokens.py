"""
Lexical tokens of the stylesheet language.

<comment/>
<ruleset>
    <selector/> <block>
        <property/>: <value/>;
        <variable/>: <value/>;
        @include <mixin/>(<args/>);
    </block>
</ruleset>

ident    => selectors, property names, keywords, `$variables`, `#hex`, `url(...)`
string   => `"..."` or `'...'`, kept with quotes
number   => `12`, `1.5em`, `-3`, `50%`
comment  => `/* ... */`, `//` comments never become tokens
operator => `+ - * / % ( ) , : ; { }`
"""
from __future__ import annotations
from enum import Enum

__all__ = [
    "Op",
    "Token",
    "Ident",
    "StringLiteral",
    "Number",
    "Comment",
    "Operator",
    "Lexeme",
    "format_number",
]

PRECISION = 5

def format_number(value: float, precision: int = PRECISION) -> str:
    """Spell a number the way it is written in css: no trailing zeros, no `-0`."""
    rounded = round(value, precision)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.{precision}f}".rstrip("0").rstrip(".")

class Op(Enum):
    Plus = "+"
    Minus = "-"
    Star = "*"
    Slash = "/"
    Percent = "%"
    LeftParen = "("
    RightParen = ")"
    Comma = ","
    Colon = ":"
    Semicolon = ";"
    LeftCurlyBrace = "{"
    RightCurlyBrace = "}"

    @staticmethod
    def from_char(char: str | None) -> Op | None:
        if char is None:
            return None
        for op in Op:
            if op.value == char:
                return op
        return None

    @property
    def arithmetic(self) -> bool:
        return self in (Op.Plus, Op.Minus, Op.Star, Op.Slash, Op.Percent)

    def same_or_greater_precedence(self, other: Op) -> bool:
        """Whether an operator already on the stack should be applied before `other` is pushed."""
        if self is Op.LeftParen:
            return False
        if self in (Op.Plus, Op.Minus) and other in (Op.Star, Op.Slash, Op.Percent):
            return False
        return True

    def __str__(self) -> str:
        return self.value

OPERATOR_CHARS = frozenset(op.value for op in Op)

class Token:
    raw: str
    def __init__(self, raw: str = ''):
        self.raw = raw

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.raw!r})'

    def __str__(self) -> str:
        return self.raw

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.raw == self.raw

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self.raw))

class Ident(Token):
    @property
    def is_variable(self) -> bool:
        return self.raw.startswith("$")

class StringLiteral(Token): pass

class Comment(Token): pass

class Number(Token):
    """A numeric literal, or a number produced by arithmetic when `computed`.

    A literal keeps its source spelling in `raw` so it prints exactly as written.
    """
    value: float
    unit: str | None
    computed: bool
    def __init__(self, value: float, unit: str | None = None, computed: bool = False, raw: str | None = None):
        self.value = value
        self.unit = unit or None
        self.computed = computed
        if raw is None or computed:
            raw = format_number(value) + (self.unit or "")
        super().__init__(raw)

    def __repr__(self) -> str:
        flags = ", computed" if self.computed else ""
        return f"Number({self.value!r}, {self.unit!r}{flags})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Number)
            and other.value == self.value
            and other.unit == self.unit
            and other.computed == self.computed
        )

    def __hash__(self) -> int:
        return hash((self.value, self.unit, self.computed))

class Operator(Token):
    op: Op
    def __init__(self, op: Op):
        self.op = op
        super().__init__(op.value)

    def __repr__(self) -> str:
        return f"Operator({self.op.name})"


class Lexeme:
    """A token together with the offset of its first character in the source."""

    __slots__ = ("token", "offset")

    def __init__(self, token: Token, offset: int | None = None) -> None:
        self.token = token
        self.offset = offset

    @property
    def end(self) -> int | None:
        if self.offset is None:
            return None
        return self.offset + len(self.token.raw)

    @property
    def op(self) -> Op | None:
        return self.token.op if isinstance(self.token, Operator) else None

    def is_op(self, *ops: Op) -> bool:
        return isinstance(self.token, Operator) and self.token.op in ops

    def touches(self, other: Lexeme) -> bool:
        """True when `other` starts exactly where this lexeme ends."""
        return self.end is not None and other.offset is not None and self.end == other.offset

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Lexeme) and other.token == self.token and other.offset == self.offset

    def __hash__(self) -> int:
        return hash((self.token, self.offset))

    def __repr__(self) -> str:
        return f"Lexeme({self.token!r}, {self.offset!r})"

    def __str__(self) -> str:
        return str(self.token)
