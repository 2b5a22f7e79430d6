""" STRUCTURAL PARSER

Builds the rule tree from a lexeme stream. Values are not interpreted here;
declarations keep their raw lexemes as an `Expression` for the resolver.

    stylesheet   := item*
    item         := comment | at-rule | ruleset | declaration | `;`
    ruleset      := selector (`,` selector)* `{` item* `}`
    declaration  := name `:` lexeme* (`;` | before `}`)
    at-rule      := `@mixin` name [`(` parameter (`,` parameter)* `)`] `{` item* `}`
                  | `@include` name [`(` argument (`,` argument)* `)`] `;`
                  | `@extend` name `;`

Whether an item is a ruleset or a declaration is decided by looking ahead to
the first `{`, `;` or `}` outside parentheses.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import re

from flatcss.errors import ErrorKind, ParseError
from flatcss.scss.lexer import Lexer
from flatcss.scss.tokens import Comment as CommentToken
from flatcss.scss.tokens import Ident, Lexeme, Op

__all__ = [
    "Expression",
    "Node",
    "Rule",
    "Property",
    "VariableDecl",
    "Comment",
    "Parameter",
    "Argument",
    "MixinDecl",
    "MixinCall",
    "Root",
    "ParserMode",
    "Parser",
    "normalize_selector",
    "parse",
]

logger = logging.getLogger(__name__)


class Expression:
    """Raw value lexemes waiting to be evaluated."""

    lexemes: list[Lexeme]
    def __init__(self, lexemes: list[Lexeme] | None = None) -> None:
        self.lexemes = lexemes or []

    @property
    def offset(self) -> int | None:
        return self.lexemes[0].offset if self.lexemes else None

    def __iter__(self):
        return iter(self.lexemes)

    def __len__(self) -> int:
        return len(self.lexemes)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Expression) and [l.token for l in other.lexemes] == [l.token for l in self.lexemes]

    def __repr__(self) -> str:
        return f"Expression({self})"

    def __str__(self) -> str:
        return join_lexemes(self.lexemes)


class Node: pass

@dataclass
class Rule(Node):
    selectors: list[str]
    children: list[Node] = field(default_factory=list)
    depth: int = 0

    @property
    def has_declarations(self) -> bool:
        return any(isinstance(child, (Property, Comment)) for child in self.children)

@dataclass
class Property(Node):
    name: Lexeme
    value: object

@dataclass
class VariableDecl(Node):
    name: Lexeme
    value: Expression
    default: bool = False
    is_global: bool = False

@dataclass
class Comment(Node):
    text: str

@dataclass
class Parameter:
    name: str
    default: Expression | None = None

@dataclass
class Argument:
    value: Expression
    name: str | None = None

@dataclass
class MixinDecl(Node):
    name: str
    parameters: list[Parameter] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)

@dataclass
class MixinCall(Node):
    name: str
    arguments: list[Argument] = field(default_factory=list)
    offset: int | None = None

@dataclass
class Root:
    children: list[Node] = field(default_factory=list)


class ParserMode(Enum):
    IN_SELECTORS = "in-selectors"
    IN_PROPERTIES = "in-properties"
    IN_COMMENT = "in-comment"


WHITESPACE = re.compile(r"\s+")
ATTRIBUTE = re.compile(r"\[\s*([^\s*~^|=\]]+)\s*([*~^$|]?=)\s*([^\s\]]+)\s*\]")

def normalize_selector(selector: str) -> str:
    """Collapse whitespace runs and squeeze attribute selectors: `[ a = b ]` -> `[a=b]`."""
    selector = WHITESPACE.sub(" ", selector.strip())
    return ATTRIBUTE.sub(lambda m: f"[{m.group(1)}{m.group(2)}{m.group(3)}]", selector)

def join_lexemes(lexemes: list[Lexeme]) -> str:
    """Spell lexemes back out with a single space wherever the source had a gap."""
    text = ""
    previous = None
    for lexeme in lexemes:
        if previous is not None and not previous.touches(lexeme):
            text += " "
        text += str(lexeme)
        previous = lexeme
    return text

def split_top_level(lexemes: list[Lexeme], separator: Op = Op.Comma) -> list[list[Lexeme]]:
    """Split on `separator` wherever it is not nested in parentheses."""
    groups: list[list[Lexeme]] = [[]]
    depth = 0
    for lexeme in lexemes:
        if lexeme.is_op(Op.LeftParen):
            depth += 1
        elif lexeme.is_op(Op.RightParen):
            depth = max(0, depth - 1)
        elif depth == 0 and lexeme.is_op(separator):
            groups.append([])
            continue
        groups[-1].append(lexeme)
    return groups


class Parser:
    """Structural parser over a `Lexer`.

    `parse` returns the whole tree, `parse_rule_body` one `{ ... }` block.
    """

    def __init__(self, source: str | Lexer) -> None:
        self.lexer = source if isinstance(source, Lexer) else Lexer(source)
        self.mode = ParserMode.IN_SELECTORS
        self.depth = 0

    def _switch_(self, mode: ParserMode):
        if mode is not self.mode:
            logger.debug("parser mode %s -> %s", self.mode.value, mode.value)
            self.mode = mode

    def _eof_offset_(self) -> int:
        return len(self.lexer.source)

    def _expect_(self, op: Op, context: str) -> Lexeme:
        lexeme = self.lexer.next()
        if lexeme is None:
            raise ParseError(
                ErrorKind.UnexpectedEof,
                f"Expected `{op}` {context}, reached end of input instead",
                self._eof_offset_(),
            )
        if not lexeme.is_op(op):
            raise ParseError(
                ErrorKind.ParseError,
                f"Expected `{op}` {context}, found `{lexeme}`",
                lexeme.offset,
            )
        return lexeme

    def _scan_(self) -> Op | None:
        """The first `{`, `;` or `}` ahead outside parentheses, without consuming anything."""
        depth = 0
        ahead = 1
        while (lexeme := self.lexer.peek(ahead)) is not None:
            if lexeme.is_op(Op.LeftParen):
                depth += 1
            elif lexeme.is_op(Op.RightParen):
                depth = max(0, depth - 1)
            elif depth == 0 and lexeme.is_op(Op.LeftCurlyBrace, Op.Semicolon, Op.RightCurlyBrace):
                return lexeme.op
            ahead += 1
        return None

    def parse(self) -> Root:
        logger.debug("parsing stylesheet")
        return Root(self.parse_rule_body(top_level=True))

    def parse_rule_body(self, top_level: bool = False) -> list[Node]:
        nodes: list[Node] = []
        while True:
            lexeme = self.lexer.peek()
            if lexeme is None:
                if top_level:
                    return nodes
                raise ParseError(
                    ErrorKind.UnexpectedEof,
                    "Expected `}` to close the rule, reached end of input instead",
                    self._eof_offset_(),
                )

            token = lexeme.token
            if lexeme.is_op(Op.Semicolon):
                self.lexer.next()
            elif lexeme.is_op(Op.RightCurlyBrace):
                if top_level:
                    raise ParseError(ErrorKind.ParseError, "Unexpected `}` with no rule to close", lexeme.offset)
                self.lexer.next()
                return nodes
            elif isinstance(token, CommentToken):
                self._switch_(ParserMode.IN_COMMENT)
                self.lexer.next()
                nodes.append(Comment(token.raw))
            elif isinstance(token, Ident) and token.raw.startswith("@"):
                nodes.append(self.parse_at_rule())
            elif self._scan_() is Op.LeftCurlyBrace:
                nodes.append(self.parse_rule())
            else:
                nodes.append(self.parse_declaration(top_level))

    def parse_rule(self) -> Rule:
        self._switch_(ParserMode.IN_SELECTORS)
        lexemes = []
        start = self.lexer.peek()
        while not (lexeme := self.lexer.next()).is_op(Op.LeftCurlyBrace):
            if not isinstance(lexeme.token, CommentToken):
                lexemes.append(lexeme)

        selectors = []
        for group in split_top_level(lexemes):
            selector = normalize_selector(join_lexemes(group))
            if not selector:
                raise ParseError(ErrorKind.ParseError, "Expected a selector", start.offset)
            selectors.append(selector)

        self.depth += 1
        rule = Rule(selectors, [], self.depth - 1)
        rule.children = self.parse_rule_body()
        self.depth -= 1
        self._switch_(ParserMode.IN_SELECTORS)
        return rule

    def _declaration_value_(self) -> list[Lexeme]:
        """Lexemes up to `;` (consumed) or `}` (left for the body)."""
        value = []
        depth = 0
        while True:
            lexeme = self.lexer.peek()
            if lexeme is None:
                raise ParseError(
                    ErrorKind.UnexpectedEof,
                    "Expected `;` after the value, reached end of input instead",
                    self._eof_offset_(),
                )
            if lexeme.is_op(Op.LeftParen):
                depth += 1
            elif lexeme.is_op(Op.RightParen):
                depth = max(0, depth - 1)
            elif depth == 0 and lexeme.is_op(Op.RightCurlyBrace):
                return value
            elif depth == 0 and lexeme.is_op(Op.Semicolon):
                self.lexer.next()
                return value
            self.lexer.next()
            if not isinstance(lexeme.token, CommentToken):
                value.append(lexeme)

    def parse_declaration(self, top_level: bool = False) -> Property | VariableDecl:
        self._switch_(ParserMode.IN_PROPERTIES)
        name = self.lexer.next()
        if not isinstance(name.token, Ident):
            raise ParseError(ErrorKind.ParseError, f"Expected a property name, found `{name}`", name.offset)
        self._expect_(Op.Colon, f"after `{name}`")

        value = self._declaration_value_()
        if name.token.is_variable:
            default = is_global = False
            while value and isinstance(value[-1].token, Ident) and value[-1].token.raw in ("!default", "!global"):
                flag = value.pop().token.raw
                default = default or flag == "!default"
                is_global = is_global or flag == "!global"
            if not value:
                raise ParseError(ErrorKind.ParseError, f"Expected a value for `{name}`", name.offset)
            return VariableDecl(name, Expression(value), default, is_global)

        if not value:
            raise ParseError(ErrorKind.ParseError, f"Expected a value for `{name}`", name.offset)
        if top_level:
            raise ParseError(
                ErrorKind.UnexpectedTopLevelElement,
                f"Property `{name}` must be inside a rule",
                name.offset,
            )
        return Property(name, Expression(value))

    def parse_at_rule(self) -> MixinDecl | MixinCall:
        keyword = self.lexer.next()
        name = self.lexer.next()
        if name is None:
            raise ParseError(
                ErrorKind.UnexpectedEof,
                f"Expected a name after `{keyword}`, reached end of input instead",
                self._eof_offset_(),
            )
        at_rule = keyword.token.raw
        if at_rule not in ("@mixin", "@include", "@extend"):
            raise ParseError(ErrorKind.ParseError, f"Unsupported at-rule `{at_rule}`", keyword.offset)
        if not isinstance(name.token, Ident):
            raise ParseError(ErrorKind.ParseError, f"Expected a name after `{keyword}`, found `{name}`", name.offset)

        groups = []
        following = self.lexer.peek()
        if following is not None and following.is_op(Op.LeftParen):
            groups = self._parenthesized_()

        if at_rule == "@mixin":
            parameters = [self._parameter_(group) for group in groups]
            self._expect_(Op.LeftCurlyBrace, f"to open the body of mixin `{name}`")
            logger.debug("mixin %s(%s)", name, ", ".join(p.name for p in parameters))
            return MixinDecl(name.token.raw, parameters, self.parse_rule_body())

        following = self.lexer.peek()
        if following is None:
            raise ParseError(
                ErrorKind.UnexpectedEof,
                f"Expected `;` after `{keyword} {name}`, reached end of input instead",
                self._eof_offset_(),
            )
        if following.is_op(Op.Semicolon):
            self.lexer.next()
        elif not following.is_op(Op.RightCurlyBrace):
            raise ParseError(ErrorKind.ParseError, f"Expected `;` after `{keyword} {name}`, found `{following}`", following.offset)
        return MixinCall(name.token.raw, [self._argument_(group) for group in groups], keyword.offset)

    def _parenthesized_(self) -> list[list[Lexeme]]:
        """Consume `( ... )` and split its contents on top-level commas."""
        self.lexer.next()
        inner = []
        depth = 0
        while True:
            lexeme = self.lexer.next()
            if lexeme is None:
                raise ParseError(
                    ErrorKind.UnexpectedEof,
                    "Expected `)`, reached end of input instead",
                    self._eof_offset_(),
                )
            if lexeme.is_op(Op.LeftParen):
                depth += 1
            elif lexeme.is_op(Op.RightParen):
                if depth == 0:
                    break
                depth -= 1
            if not isinstance(lexeme.token, CommentToken):
                inner.append(lexeme)
        if not inner:
            return []
        return split_top_level(inner)

    @staticmethod
    def _named_(group: list[Lexeme]) -> tuple[str | None, list[Lexeme]]:
        if (
            len(group) >= 2
            and isinstance(group[0].token, Ident)
            and group[0].token.is_variable
            and group[1].is_op(Op.Colon)
        ):
            return group[0].token.raw, group[2:]
        return None, group

    def _parameter_(self, group: list[Lexeme]) -> Parameter:
        name, default = self._named_(group)
        if name is None:
            if len(group) != 1 or not isinstance(group[0].token, Ident) or not group[0].token.is_variable:
                offset = group[0].offset if group else None
                raise ParseError(ErrorKind.ParseError, f"Expected a `$parameter`, found `{join_lexemes(group)}`", offset)
            return Parameter(group[0].token.raw)
        return Parameter(name, Expression(default) if default else None)

    def _argument_(self, group: list[Lexeme]) -> Argument:
        name, value = self._named_(group)
        if not value:
            raise ParseError(ErrorKind.ParseError, "Expected an argument value", group[0].offset if group else None)
        return Argument(Expression(value), name)


def parse(source: str) -> Root:
    return Parser(source).parse()
