"""Function registry for pagelet environments.

Provides a dict-like view over an environment's function table and the
adapter that turns a host function into the internal calling convention.
"""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pagelet.environment.exceptions import TemplateRuntimeError
from pagelet.utils.constants import ERR_FUNCTION_FAILED

if TYPE_CHECKING:
    from pagelet.environment.core import Environment
    from pagelet.environment.functions import Function
    from pagelet.nodes import Expr
    from pagelet.template.evaluator import Evaluator

logger = logging.getLogger(__name__)

# Names a template can actually call: identifier characters only
_NAME_RE = re.compile(r"[A-Za-z0-9_]+")


def adapt_function(name: str, func: Callable[..., Any]) -> Function:
    """Wrap a host function so it receives evaluated arguments.

    Every argument expression is evaluated against the caller's context
    before *func* runs, so host functions never see short-circuiting or raw
    expressions. If *func* raises, strict evaluators re-raise it as
    TemplateRuntimeError; otherwise the failure is logged and rendered as
    ``[Error: name() failed]``.
    """

    @functools.wraps(func)
    def adapter(evaluator: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> Any:
        values = [evaluator.evaluate(arg, ctx) for arg in args]
        try:
            return func(*values)
        except Exception as exc:
            if evaluator.strict:
                raise TemplateRuntimeError(
                    f"{type(exc).__name__}: {exc}", function_name=name
                ) from exc
            logger.warning("Function %s() raised %s: %s", name, type(exc).__name__, exc)
            return ERR_FUNCTION_FAILED.format(name=name)

    return adapter


class FunctionRegistry:
    """Dict-like interface for an environment's template functions.

    Supports:
        - env.functions['name'] = func
        - env.functions.update({'name': func})
        - del env.functions['name']
        - 'name' in env.functions

    Assigned callables are host functions: they are adapted to receive
    evaluated arguments. All mutations use copy-on-write, so a render that
    captured the table when it started keeps a consistent snapshot.
    """

    __slots__ = ("_env", "_attr")

    def __init__(self, env: Environment, attr: str):
        self._env = env
        self._attr = attr

    def _get_dict(self) -> dict[str, Function]:
        return getattr(self._env, self._attr)

    def _set_dict(self, d: dict[str, Function]) -> None:
        setattr(self._env, self._attr, d)

    def __getitem__(self, name: str) -> Function:
        return self._get_dict()[name]

    def __setitem__(self, name: str, func: Callable[..., Any]) -> None:
        self.update({name: func})

    def __delitem__(self, name: str) -> None:
        new = self._get_dict().copy()
        del new[name]
        self._set_dict(new)

    def __contains__(self, name: object) -> bool:
        return name in self._get_dict()

    def __iter__(self) -> Iterator[str]:
        return iter(self._get_dict())

    def __len__(self) -> int:
        return len(self._get_dict())

    def get(self, name: str, default: Function | None = None) -> Function | None:
        return self._get_dict().get(name, default)

    def update(self, mapping: Mapping[str, Callable[..., Any]]) -> None:
        """Batch register host functions."""
        new = self._get_dict().copy()
        for name, func in mapping.items():
            if not isinstance(name, str) or not _NAME_RE.fullmatch(name):
                raise ValueError(f"Invalid function name {name!r}: use letters, digits and _")
            if not callable(func):
                raise TypeError(f"Function {name!r} must be callable, got {type(func).__name__}")
            if name in new:
                logger.debug("Overriding template function %r", name)
            new[name] = adapt_function(name, func)
        self._set_dict(new)

    def snapshot(self) -> Mapping[str, Function]:
        """Return the current table without copying.

        Mutations replace the table rather than editing it, so the result
        never changes underneath the caller.
        """
        return self._get_dict()

    def copy(self) -> dict[str, Function]:
        """Return a copy of the underlying dict."""
        return self._get_dict().copy()

    def keys(self):
        return self._get_dict().keys()

    def items(self):
        return self._get_dict().items()
