from .lexer import Lexer, tokenize
from .parser import Parser, parse
from .context import Context
from .evaluator import evaluate
from .resolver import resolve
from .optimizer import optimize

__all__ = ["Lexer", "tokenize", "Parser", "parse", "Context", "evaluate", "resolve", "optimize"]
