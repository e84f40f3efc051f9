"""Built-in functions for pagelet templates.

Built-ins receive their arguments as unevaluated expressions together with
the evaluator and the current context, so ``and``/``or``/``default`` can
short-circuit. Each one declares a minimum argument count; calls with fewer
arguments return ``[Error: name() needs N args]`` before evaluating anything.

Categories:
**Comparison**: ``eq``, ``ne``, ``gt``, ``lt``, ``gte``, ``lte``
**Logical**: ``and``, ``or``, ``not``
**String**: ``lowercase``, ``uppercase``, ``trim``, ``truncate``, ``replace``
**Sequence**: ``limit``, ``first``, ``last``, ``length``, ``join``
**Utility**: ``default``, ``safeUrl``

Example:
    ```
    {{#if and(author, gt(word_count, 1000))}}Long read by {{ author }}{{/if}}
    {{ title | lowercase | truncate(20, "…") }}
    {{#each tags | limit(3) as tag}}<li>{{ tag }}</li>{{/each}}
    ```

"""

from __future__ import annotations

import functools
import math
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pagelet.template.helpers import (
    is_sequence,
    is_truthy,
    strict_equals,
    to_number,
    to_str,
)
from pagelet.utils.constants import DEFAULT_TRUNCATE_SUFFIX, ERR_ARITY
from pagelet.utils.html import safe_url

if TYPE_CHECKING:
    from pagelet.nodes import Expr
    from pagelet.template.evaluator import Evaluator

Function = Callable[["Evaluator", Mapping[str, Any], Sequence["Expr"]], Any]

BUILTINS: dict[str, Function] = {}


def builtin(name: str, min_args: int = 0) -> Callable[[Function], Function]:
    """Register a built-in under *name*, guarding its minimum arity."""

    def decorator(func: Function) -> Function:
        if min_args:

            @functools.wraps(func)
            def checked(evaluator: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> Any:
                if len(args) < min_args:
                    return ERR_ARITY.format(name=name, count=min_args)
                return func(evaluator, ctx, args)

            BUILTINS[name] = checked
        else:
            BUILTINS[name] = func
        return func

    return decorator


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


@builtin("eq", 2)
def _eq(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> bool:
    return strict_equals(ev.evaluate(args[0], ctx), ev.evaluate(args[1], ctx))


@builtin("ne", 2)
def _ne(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> bool:
    return not strict_equals(ev.evaluate(args[0], ctx), ev.evaluate(args[1], ctx))


def _numeric_operands(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> tuple[float, float]:
    return to_number(ev.evaluate(args[0], ctx)), to_number(ev.evaluate(args[1], ctx))


@builtin("gt", 2)
def _gt(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> bool:
    left, right = _numeric_operands(ev, ctx, args)
    return left > right


@builtin("lt", 2)
def _lt(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> bool:
    left, right = _numeric_operands(ev, ctx, args)
    return left < right


@builtin("gte", 2)
def _gte(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> bool:
    left, right = _numeric_operands(ev, ctx, args)
    return left >= right


@builtin("lte", 2)
def _lte(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> bool:
    left, right = _numeric_operands(ev, ctx, args)
    return left <= right


# ---------------------------------------------------------------------------
# Logical
# ---------------------------------------------------------------------------


@builtin("and")
def _and(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> Any:
    """Return the first falsy operand, else the last one."""
    result: Any = True
    for arg in args:
        result = ev.evaluate(arg, ctx)
        if not is_truthy(result):
            return result
    return result


@builtin("or")
def _or(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> Any:
    """Return the first truthy operand, else the last one."""
    result: Any = False
    for arg in args:
        result = ev.evaluate(arg, ctx)
        if is_truthy(result):
            return result
    return result


@builtin("not", 1)
def _not(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> bool:
    return not is_truthy(ev.evaluate(args[0], ctx))


# ---------------------------------------------------------------------------
# String
# ---------------------------------------------------------------------------


@builtin("lowercase", 1)
def _lowercase(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> str:
    return to_str(ev.evaluate(args[0], ctx)).lower()


@builtin("uppercase", 1)
def _uppercase(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> str:
    return to_str(ev.evaluate(args[0], ctx)).upper()


@builtin("trim", 1)
def _trim(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> str:
    return to_str(ev.evaluate(args[0], ctx)).strip()


@builtin("truncate", 2)
def _truncate(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> str:
    """Cut to n characters and append a suffix ("..." unless given).

    A negative n counts from the end, like a slice: ``truncate(-2)`` on
    "Hello" gives "Hel...".
    """
    text = to_str(ev.evaluate(args[0], ctx))
    limit = to_number(ev.evaluate(args[1], ctx))
    suffix = to_str(ev.evaluate(args[2], ctx)) if len(args) > 2 else DEFAULT_TRUNCATE_SUFFIX
    if len(text) > limit:
        # Only finite or -inf limits get here; -inf keeps nothing
        end = int(limit) if math.isfinite(limit) else 0
        return text[:end] + suffix
    return text


@builtin("replace", 3)
def _replace(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> str:
    """Replace every literal occurrence of the search string."""
    text = to_str(ev.evaluate(args[0], ctx))
    search = to_str(ev.evaluate(args[1], ctx))
    replacement = to_str(ev.evaluate(args[2], ctx))
    if not search:
        # Empty search separates characters rather than wrapping the ends
        return replacement.join(text)
    return text.replace(search, replacement)


# ---------------------------------------------------------------------------
# Sequence
# ---------------------------------------------------------------------------


@builtin("limit", 2)
def _limit(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> Any:
    """Keep the first n elements; n below zero keeps none."""
    items = ev.evaluate(args[0], ctx)
    count = to_number(ev.evaluate(args[1], ctx))
    if not is_sequence(items):
        return items
    if math.isnan(count) or count < 0:
        return []
    if math.isinf(count):
        return list(items)
    return list(items[: int(count)])


@builtin("first", 1)
def _first(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> Any:
    value = ev.evaluate(args[0], ctx)
    if is_sequence(value):
        return value[0] if value else None
    return value


@builtin("last", 1)
def _last(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> Any:
    value = ev.evaluate(args[0], ctx)
    if is_sequence(value):
        return value[-1] if value else None
    return value


@builtin("length", 1)
def _length(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> int:
    value = ev.evaluate(args[0], ctx)
    return len(value) if is_sequence(value) else len(to_str(value))


@builtin("join", 2)
def _join(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> str:
    """Join elements with a separator; the separator is only evaluated for sequences."""
    value = ev.evaluate(args[0], ctx)
    if not is_sequence(value):
        return to_str(value)
    separator = to_str(ev.evaluate(args[1], ctx))
    return separator.join(to_str(item) for item in value)


# ---------------------------------------------------------------------------
# Utility
# ---------------------------------------------------------------------------


@builtin("default", 2)
def _default(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> Any:
    value = ev.evaluate(args[0], ctx)
    return value if is_truthy(value) else ev.evaluate(args[1], ctx)


@builtin("safeUrl", 1)
def _safe_url(ev: Evaluator, ctx: Mapping[str, Any], args: Sequence[Expr]) -> str:
    value = ev.evaluate(args[0], ctx)
    return safe_url(None if value is None else to_str(value))
