"""
Flattens nested rules into plain css rules.

    div { span { color: blue } }   =>   div span { color: blue }
    a { &:hover { color: red } }   =>   a:hover { color: red }
"""
from __future__ import annotations
import logging

from flatcss.scss.parser import Comment, Property, Root, Rule

__all__ = ["optimize", "combine_selectors", "flatten_rule"]

logger = logging.getLogger(__name__)


def combine_selectors(parents: list[str] | None, children: list[str]) -> list[str]:
    """Cross product of parent and child selectors, parent-major.

    `&` in a child stands for the parent; without one the child becomes a descendant.
    """
    if not parents:
        return list(children)
    return [
        child.replace("&", parent) if "&" in child else f"{parent} {child}"
        for parent in parents
        for child in children
    ]


def flatten_rule(rule: Rule, parents: list[str] | None = None, depth: int = 0) -> list[Rule]:
    """`rule` and its descendants as flat rules, each emitted before the rules nested in it.

    A rule without declarations is dropped, its children flatten against its selectors.
    """
    selectors = combine_selectors(parents, rule.selectors)
    declarations = [child for child in rule.children if isinstance(child, (Property, Comment))]

    flat = []
    if declarations:
        flat.append(Rule(selectors, declarations, depth))
        depth += 1
    for child in rule.children:
        if isinstance(child, Rule):
            flat.extend(flatten_rule(child, selectors, depth))
    return flat


def optimize(root: Root) -> Root:
    children = []
    for node in root.children:
        if isinstance(node, Rule):
            children.extend(flatten_rule(node))
        else:
            children.append(node)
    logger.debug("flattened into %d top level nodes", len(children))
    return Root(children)
