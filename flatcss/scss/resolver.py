"""
Scope resolution: binds variables, expands mixins and evaluates every
property value. The resulting tree only holds rules, properties and comments.
"""
from __future__ import annotations
import logging

from flatcss.errors import ErrorKind, ResolveError
from flatcss.scss.context import Context
from flatcss.scss.evaluator import evaluate
from flatcss.scss.parser import *
from flatcss.scss.values import Value

__all__ = ["Resolver", "resolve", "bind_arguments"]

logger = logging.getLogger(__name__)


def bind_arguments(mixin: MixinDecl, call: MixinCall, context: Context) -> Context:
    """Scope for the body of `mixin`: a child of the caller's `context` with every parameter bound.

    Named arguments bind their parameter, unnamed arguments fill the remaining
    parameters left to right and anything still unbound takes its default.
    """
    parameters = {parameter.name for parameter in mixin.parameters}
    named: dict[str, Value] = {}
    positional: list[Value] = []
    for argument in call.arguments:
        if argument.name is None:
            positional.append(evaluate(argument.value, context))
        elif argument.name not in parameters:
            raise ResolveError(
                ErrorKind.ArgumentNotFound,
                f"Mixin `{mixin.name}` has no parameter named `{argument.name}`",
                argument.value.offset,
            )
        else:
            named[argument.name] = evaluate(argument.value, context)

    scope = context.child()
    positional.reverse()
    for parameter in mixin.parameters:
        if parameter.name in named:
            value = named[parameter.name]
        elif positional:
            value = positional.pop()
        elif parameter.default is not None:
            value = evaluate(parameter.default, scope)
        else:
            raise ResolveError(
                ErrorKind.ExpectedMixinArgument,
                f"Missing argument for parameter `{parameter.name}` of mixin `{mixin.name}`",
                call.offset,
            )
        scope.add_variable(parameter.name, value)
    return scope


class Resolver:
    def __init__(self, context: Context | None = None) -> None:
        self.context = context or Context()

    def resolve(self, root: Root) -> Root:
        logger.debug("resolving %d top level nodes", len(root.children))
        return Root(self.resolve_nodes(root.children, self.context, 0))

    def resolve_nodes(self, nodes: list[Node], context: Context, depth: int) -> list[Node]:
        resolved: list[Node] = []
        for node in nodes:
            if isinstance(node, VariableDecl):
                value = evaluate(node.value, context)
                context.add_variable(node.name.token.raw, value, default=node.default, is_global=node.is_global)
            elif isinstance(node, Property):
                if depth == 0:
                    raise ResolveError(
                        ErrorKind.UnexpectedTopLevelElement,
                        f"Property `{node.name}` must be inside a rule",
                        node.name.offset,
                    )
                resolved.append(Property(node.name, evaluate(node.value, context)))
            elif isinstance(node, MixinDecl):
                context.add_mixin(node)
            elif isinstance(node, MixinCall):
                resolved.extend(self.expand(node, context, depth))
            elif isinstance(node, Rule):
                children = self.resolve_nodes(node.children, context.child(), depth + 1)
                resolved.append(Rule(list(node.selectors), children, node.depth))
            elif isinstance(node, Comment):
                resolved.append(node)
        return resolved

    def expand(self, call: MixinCall, context: Context, depth: int) -> list[Node]:
        mixin = context.get_mixin(call.name)
        if mixin is None:
            raise ResolveError(ErrorKind.ExpectedMixin, f"Cannot find mixin named `{call.name}`", call.offset)
        logger.debug("expanding mixin %s", call.name)
        return self.resolve_nodes(mixin.children, bind_arguments(mixin, call, context), depth)


def resolve(root: Root, context: Context | None = None) -> Root:
    return Resolver(context).resolve(root)
