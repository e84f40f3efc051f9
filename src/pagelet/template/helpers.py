"""Pure value helpers shared by the evaluator, built-ins and renderer.

These implement the engine's value model on top of plain Python data:
truthiness, string and number coercion, and strict equality. None of them
touch attributes of the values they inspect; mappings and sequences are
the only containers the engine looks into.

Thread-Safety:
All functions are stateless and safe for concurrent use.

"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")

# Floats print in exponent form at or beyond 1e21 and below 1e-6
_EXPONENT_THRESHOLD = 1e21
_SMALL_THRESHOLD = 1e-6
# repr pads exponents to two digits ("1e-07"); output uses "1e-7"
_EXPONENT_RE = re.compile(r"e([+-])0*(\d)")


def is_sequence(value: Any) -> bool:
    """Lists and tuples are sequences; strings are not."""
    return isinstance(value, (list, tuple))


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_number(value: Any) -> bool:
    """True for int and float, False for bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """Engine truthiness.

    Falsy: None, False, 0, 0.0, "", NaN, empty sequence, empty mapping.
    Everything else is truthy, including ``[0]`` and ``{"a": False}``.
    """
    if value is None or value is False:
        return False
    if is_number(value):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    if is_sequence(value) or is_mapping(value):
        return len(value) > 0
    return True


def format_number(value: int | float) -> str:
    """Format a number the way template output expects.

    Integral floats drop the fractional part (``10.0`` -> ``"10"``). Exponent
    form is used only below 1e-6 or from 1e21 up, without padding
    (``1e-7``, ``1.5e+21``).
    """
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < _EXPONENT_THRESHOLD:
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    if _SMALL_THRESHOLD <= abs(value) < _EXPONENT_THRESHOLD:
        return format(Decimal(text), "f")
    return _EXPONENT_RE.sub(r"e\1\2", text)


def to_str(value: Any) -> str:
    """String form of a value.

    None renders as an empty string, booleans as ``true``/``false``,
    sequences as their comma-joined elements and mappings as
    ``[object Object]``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value)
    if is_sequence(value):
        return ",".join(to_str(item) for item in value)
    if is_mapping(value):
        return "[object Object]"
    return str(value)


def to_number(value: Any) -> float:
    """Numeric form of a value; NaN when it has none.

    Strings are stripped and parsed as decimal (``""`` is 0); ``Infinity``
    and ``0x`` hex literals are also understood.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, float):
        return value
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if _NUMBER_RE.fullmatch(text):
            return float(text)
        if _HEX_RE.fullmatch(text):
            return float(int(text, 16))
        if text.lstrip("+-") == "Infinity":
            return -math.inf if text.startswith("-") else math.inf
        return math.nan
    if is_sequence(value):
        if not value:
            return 0.0
        if len(value) == 1:
            return to_number(to_str(value[0]))
    return math.nan


def strict_equals(left: Any, right: Any) -> bool:
    """Strict structural equality.

    ``True`` never equals ``1``, ``1`` equals ``1.0``, NaN equals nothing.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if is_number(left) and is_number(right):
        return left == right
    if is_sequence(left) and is_sequence(right):
        return len(left) == len(right) and all(
            strict_equals(a, b) for a, b in zip(left, right, strict=True)
        )
    if is_mapping(left) and is_mapping(right):
        return left.keys() == right.keys() and all(
            strict_equals(left[key], right[key]) for key in left
        )
    if isinstance(left, str) or isinstance(right, str):
        return isinstance(left, str) and isinstance(right, str) and left == right
    return left is right or (type(left) is type(right) and left == right)


def resolve_path(ctx: Mapping[str, Any], path: tuple[str, ...]) -> Any:
    """Resolve a variable path against own keys only.

    Mappings are looked up with ``in``; sequences accept canonical decimal
    indexes (``"0"``, ``"12"``, not ``"01"``). Anything else, including
    attributes of arbitrary objects, is unreachable and yields None.
    """
    value: Any = ctx
    for segment in path:
        if value is None:
            return None
        if is_mapping(value):
            if segment not in value:
                return None
            value = value[segment]
        elif is_sequence(value):
            if not (segment.isdigit() and (segment == "0" or segment[0] != "0")):
                return None
            index = int(segment)
            if index >= len(value):
                return None
            value = value[index]
        else:
            return None
    return value
