from __future__ import annotations
from enum import Enum
from functools import cache
import re

from flatcss.errors import CompileError, ErrorKind
from flatcss.scss.parser import Comment, Property, Root, Rule
from flatcss.scss.tokens import PRECISION

__all__ = ["OutputStyle", "Formatter", "Expanded", "Nested", "Compact", "Compressed", "render"]


class OutputStyle(Enum):
    Nested = "nested"
    Expanded = "expanded"
    Compact = "compact"
    Compressed = "compressed"

    @staticmethod
    @cache
    def names() -> list[str]:
        return [i.value for i in OutputStyle]

    @staticmethod
    def parse(name: str | OutputStyle) -> OutputStyle:
        if isinstance(name, OutputStyle):
            return name
        for option in OutputStyle:
            if option.value == name.lower():
                return option
        raise CompileError(
            ErrorKind.InvalidOutputStyle,
            f"Unknown output style '{name}', expected one of {', '.join(OutputStyle.names())}",
        )

    def formatter(self, precision: int = PRECISION) -> Formatter:
        return {
            OutputStyle.Nested: Nested,
            OutputStyle.Expanded: Expanded,
            OutputStyle.Compact: Compact,
            OutputStyle.Compressed: Compressed,
        }[self](precision)


class Formatter:
    """Writes a flattened tree as css text.

    Subclasses only override the separators and the spelling of single
    properties, comments and selector lists.
    """

    rule_separator = "\n\n"
    child_rule_separator = "\n\n"
    selector_separator = ", "
    compressed = False

    def __init__(self, precision: int = PRECISION) -> None:
        self.precision = precision

    def indent(self, depth: int) -> str:
        return ""

    def selectors(self, rule: Rule) -> str:
        return self.selector_separator.join(rule.selectors)

    def value(self, prop: Property) -> str:
        return prop.value.to_css(self.precision, self.compressed)

    def property(self, prop: Property, depth: int) -> str:
        return f"{self.indent(depth)}  {prop.name}: {self.value(prop)};"

    def comment(self, comment: Comment, depth: int) -> str:
        return f"{self.indent(depth)}  {comment.text}"

    def top_level_comment(self, comment: Comment) -> str:
        return comment.text

    def declarations(self, rule: Rule) -> list[str]:
        lines = []
        for child in rule.children:
            if isinstance(child, Property):
                lines.append(self.property(child, rule.depth))
            elif isinstance(child, Comment):
                lines.append(self.comment(child, rule.depth))
        return [line for line in lines if line]

    def rule(self, rule: Rule) -> str:
        body = "\n".join(self.declarations(rule))
        return f"{self.indent(rule.depth)}{self.selectors(rule)} {{\n{body}\n{self.indent(rule.depth)}}}"

    def render(self, root: Root) -> str:
        out = ""
        for node in root.children:
            if isinstance(node, Rule):
                chunk = self.rule(node)
                separator = self.child_rule_separator if node.depth > 0 else self.rule_separator
            elif isinstance(node, Comment):
                chunk = self.top_level_comment(node)
                separator = self.rule_separator
            else:
                continue
            if not chunk:
                continue
            out += (separator if out else "") + chunk
        return out + "\n" if out else ""


class Expanded(Formatter):
    """
    a {
      color: red;
    }
    """


class Nested(Formatter):
    """
    a {
      color: red; }
      a b {
        color: blue; }
    """

    child_rule_separator = "\n"

    def indent(self, depth: int) -> str:
        return "  " * depth

    def rule(self, rule: Rule) -> str:
        body = "\n".join(self.declarations(rule))
        return f"{self.indent(rule.depth)}{self.selectors(rule)} {{\n{body} }}"


class Compact(Formatter):
    """a { color: red; background: blue; }"""

    child_rule_separator = "\n"

    def property(self, prop: Property, depth: int) -> str:
        return f"{prop.name}: {self.value(prop)};"

    def comment(self, comment: Comment, depth: int) -> str:
        return " ".join(line.strip() for line in comment.text.splitlines())

    def top_level_comment(self, comment: Comment) -> str:
        return self.comment(comment, 0)

    def rule(self, rule: Rule) -> str:
        return f"{self.selectors(rule)} {{ {' '.join(self.declarations(rule))} }}"


SQUEEZE = re.compile(r"\s*([>+~])\s*")
class Compressed(Formatter):
    """a{color:red;background:blue}"""

    rule_separator = ""
    child_rule_separator = ""
    selector_separator = ","
    compressed = True

    def selectors(self, rule: Rule) -> str:
        return SQUEEZE.sub(r"\1", super().selectors(rule))

    def property(self, prop: Property, depth: int) -> str:
        return f"{prop.name}:{self.value(prop)}"

    def comment(self, comment: Comment, depth: int) -> str:
        return ""

    def top_level_comment(self, comment: Comment) -> str:
        return ""

    def rule(self, rule: Rule) -> str:
        return f"{self.selectors(rule)}{{{';'.join(self.declarations(rule))}}}"


def render(root: Root, style: OutputStyle | str = OutputStyle.Nested, precision: int = PRECISION) -> str:
    return OutputStyle.parse(style).formatter(precision).render(root)
