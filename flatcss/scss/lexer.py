""" STYLESHEET LEXING

Turns a source string into a lazy sequence of lexemes (token + offset).
The lexer knows nothing about rules or declarations; it only decides where
one token ends and the next begins.

Disambiguation, in priority order at each character:
    whitespace  | skipped
    `/*`        | block comment, kept
    `//`        | line comment, discarded
    `-`         | number when a digit follows, identifier when a name character
                  follows, otherwise the minus operator
    `"` or `'`  | string literal, quotes and escapes kept
    operator    | one of `+ - * / % ( ) , : ; { }`
    digit       | number, with an optional unit (`%` allowed)
    anything    | identifier, up to whitespace or an operator other than `-`
"""

from __future__ import annotations
import logging
from flatcss.errors import ErrorKind, TokenizeError
from flatcss.scss.tokens import *
from flatcss.scss.tokens import OPERATOR_CHARS

logger = logging.getLogger(__name__)

class Check:
    @staticmethod
    def whitespace(current: str | None) -> bool:
        return current is not None and current in ' \t\n\r\f\v'

    @staticmethod
    def digit(current: str | None) -> bool:
        return current is not None and current in '0123456789'

    @staticmethod
    def number(current: str | None) -> bool:
        return current is not None and (Check.digit(current) or current == ".")

    @staticmethod
    def operator(current: str | None) -> bool:
        return current is not None and current in OPERATOR_CHARS

    @staticmethod
    def ident(current: str | None) -> bool:
        """Characters that continue an identifier. Hyphens do, other operators don't."""
        return (
            current is not None
            and not Check.whitespace(current)
            and (current == "-" or not Check.operator(current))
        )

    @staticmethod
    def unit(current: str | None) -> bool:
        return current is not None and (
            current == "%"
            or (not Check.whitespace(current) and not Check.operator(current))
        )

    @staticmethod
    def newline(current: str | None) -> bool:
        return current is not None and current in "\n\r"


class Lexer:
    """Pull-based, forward-only cursor over the lexemes of `source`.

    `peek` buffers lexemes without consuming them; once `next` has moved past
    a lexeme it is never produced again.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.index = 0
        self._lookahead: list[Lexeme] = []
        self._done = False

    def __iter__(self):
        return self

    def __next__(self) -> Lexeme:
        lexeme = self.next()
        if lexeme is None:
            raise StopIteration
        return lexeme

    def process(self) -> list[Lexeme]:
        """Lexes the entire source at once."""
        return [lexeme for lexeme in self]

    def next(self) -> Lexeme | None:
        if self._lookahead:
            return self._lookahead.pop(0)
        return self.consume()

    def peek(self, amount: int = 1) -> Lexeme | None:
        """The lexeme `amount` positions ahead, without consuming anything."""
        while len(self._lookahead) < amount:
            lexeme = self.consume()
            if lexeme is None:
                return None
            self._lookahead.append(lexeme)
        return self._lookahead[amount - 1]

    def at_end(self) -> bool:
        return self.peek() is None

    def _char_(self, ahead: int = 0) -> str | None:
        """The code point `ahead` characters past the cursor."""
        index = self.index + ahead
        if index < len(self.source):
            return self.source[index]
        return None

    def _skip_whitespace_(self):
        while Check.whitespace(self._char_()):
            self.index += 1

    def _consume_comment_(self, start: int) -> Comment:
        end = self.source.find("*/", start + 2)
        if end == -1:
            self.index = len(self.source)
            raise TokenizeError(
                ErrorKind.UnexpectedEof,
                "Expected comment to be closed with `*/`, reached end of input instead.",
                start,
            )
        self.index = end + 2
        return Comment(self.source[start:self.index])

    def _skip_line_comment_(self):
        while self._char_() is not None and not Check.newline(self._char_()):
            self.index += 1

    def _skip_trivia_(self):
        """Whitespace and any number of `//` comments."""
        while True:
            self._skip_whitespace_()
            if self._char_() != "/" or self._char_(1) != "/":
                return
            self._skip_line_comment_()

    def _consume_string_(self, start: int) -> StringLiteral:
        quote = self.source[start]
        self.index = start + 1
        escaped = False
        while (current := self._char_()) is not None:
            self.index += 1
            if escaped:
                escaped = False
            elif current == "\\":
                escaped = True
            elif current == quote:
                return StringLiteral(self.source[start:self.index])
        raise TokenizeError(
            ErrorKind.UnexpectedEof,
            f"Expected string to be closed with `{quote}`, reached end of input instead.",
            start,
        )

    def _consume_numeric_(self, start: int) -> Number:
        """Consume an optionally negative number and its unit."""
        if self._char_() == "-":
            self.index += 1
        while Check.number(self._char_()):
            self.index += 1
        digits = self.source[start:self.index]

        unit_start = self.index
        while Check.unit(self._char_()):
            self.index += 1
        unit = self.source[unit_start:self.index] or None

        try:
            value = float(digits)
        except ValueError:
            raise TokenizeError(
                ErrorKind.TokenizerError,
                f"Could not read `{digits}` as a number.",
                start,
            ) from None
        return Number(value, unit, raw=self.source[start:self.index])

    def _consume_ident_(self, start: int) -> Ident:
        while Check.ident(self._char_()):
            self.index += 1
        ident = self.source[start:self.index]
        if ident == "url" and self._char_() == "(":
            return self._consume_url_(start)
        return Ident(ident)

    def _consume_url_(self, start: int) -> Ident:
        """`url(...)` is kept verbatim so `//` and `:` inside it are not lexed."""
        end = self.source.find(")", self.index)
        if end == -1:
            raise TokenizeError(
                ErrorKind.UnexpectedEof,
                "Expected `)` to close `url(`, reached end of input instead.",
                start,
            )
        self.index = end + 1
        return Ident(self.source[start:self.index])

    def consume(self) -> Lexeme | None:
        """Consume code points and return the next lexeme, or None at end of input."""
        if self._done:
            return None

        self._skip_trivia_()
        start = self.index
        current = self._char_()
        if current is None:
            self._done = True
            return None

        following = self._char_(1)
        token: Token
        if current == "/" and following == "*":
            token = self._consume_comment_(start)
        elif current in "\"'":
            token = self._consume_string_(start)
        elif current == "-":
            if Check.digit(following) or (following == "." and Check.digit(self._char_(2))):
                token = self._consume_numeric_(start)
            elif following is not None and Check.ident(following):
                self.index += 1
                token = self._consume_ident_(start)
            else:
                self.index += 1
                token = Operator(Op.Minus)
        elif Check.operator(current):
            self.index += 1
            token = Operator(Op.from_char(current))
        elif Check.digit(current) or (current == "." and Check.digit(following)):
            token = self._consume_numeric_(start)
        else:
            token = self._consume_ident_(start)

        logger.debug("lexed %r at %d", token, start)
        return Lexeme(token, start)


def tokenize(source: str) -> list[Lexeme]:
    return Lexer(source).process()
