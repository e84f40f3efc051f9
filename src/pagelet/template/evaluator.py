"""Expression evaluation for pagelet templates.

The evaluator interprets expression nodes directly; no Python source or
bytecode is ever generated from template text.

Thread-Safety:
An Evaluator only reads its function table, which is a snapshot taken
when rendering starts. Safe for concurrent use.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pagelet.nodes import Call, Const, Name, Pipe
from pagelet.template.helpers import resolve_path
from pagelet.utils.constants import ERR_UNKNOWN_FUNCTION

if TYPE_CHECKING:
    from pagelet.environment.functions import Function
    from pagelet.nodes import Expr


class Evaluator:
    """Evaluate expressions against a context.

    Attributes:
        functions: Function table (built-ins plus adapted host functions)
        strict: Re-raise host function failures instead of rendering them inline

    Example:
            >>> ev = Evaluator(BUILTINS)
            >>> ev.evaluate(Call("eq", (Name(("n",)), Const(1))), {"n": 1})
            True

    """

    __slots__ = ("functions", "strict")

    def __init__(self, functions: Mapping[str, Function], *, strict: bool = False) -> None:
        self.functions = functions
        self.strict = strict

    def evaluate(self, expr: Expr, ctx: Mapping[str, Any]) -> Any:
        """Evaluate *expr*; missing variables are None, unknown functions an error string."""
        match expr:
            case Const(value=value):
                return value
            case Name(path=path):
                return resolve_path(ctx, path)
            case Call(name=name, args=args):
                return self.call(name, args, ctx)
            case Pipe(value=value, name=name, args=args):
                return self.call(name, (value, *args), ctx)
        return None

    def call(self, name: str, args: Sequence[Expr], ctx: Mapping[str, Any]) -> Any:
        func = self.functions.get(name)
        if func is None:
            return ERR_UNKNOWN_FUNCTION.format(name=name)
        return func(self, ctx, args)
