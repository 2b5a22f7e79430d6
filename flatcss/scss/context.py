from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from flatcss.scss.tokens import PRECISION
from flatcss.scss.values import NumberValue, Value

if TYPE_CHECKING:
    from flatcss.scss.parser import MixinDecl

__all__ = ["Context"]

logger = logging.getLogger(__name__)

class Context:
    """Variables and mixins visible in one lexical scope.

    A child scope starts as a copy of its parent, so bindings made inside it
    never leak back out. The only exception are `!global` bindings, which are
    also written to the root scope and found there by any scope that lacks
    its own binding.

    `precision` is how many decimals computed numbers keep when they are
    spelled out as text during evaluation.
    """

    def __init__(
        self,
        variables: dict[str, Value] | None = None,
        mixins: dict[str, MixinDecl] | None = None,
        root: Context | None = None,
        precision: int = PRECISION,
    ) -> None:
        self.variables = dict(variables or {})
        self.mixins = dict(mixins or {})
        self.root = root
        self.precision = precision

    def child(self) -> Context:
        return Context(self.variables, self.mixins, self.root or self, self.precision)

    def add_variable(self, name: str, value: Value, *, default: bool = False, is_global: bool = False):
        if default and self.get_variable(name) is not None:
            return
        if isinstance(value, NumberValue):
            value = NumberValue(value.scalar, value.unit, True)
        self.variables[name] = value
        if is_global and self.root is not None:
            self.root.variables[name] = value
        logger.debug("bound %s = %s", name, value)

    def get_variable(self, name: str) -> Value | None:
        if name in self.variables:
            return self.variables[name]
        if self.root is not None:
            return self.root.variables.get(name)
        return None

    def add_mixin(self, mixin: MixinDecl):
        self.mixins[mixin.name] = mixin

    def get_mixin(self, name: str) -> MixinDecl | None:
        if name in self.mixins:
            return self.mixins[name]
        if self.root is not None:
            return self.root.mixins.get(name)
        return None

    def __repr__(self) -> str:
        return f"Context(variables={list(self.variables)}, mixins={list(self.mixins)})"
