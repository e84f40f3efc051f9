"""Expression nodes for pagelet syntax trees."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from pagelet.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for expressions."""


@dataclass(frozen=True, slots=True)
class Const(Expr):
    """Constant value: string, number, boolean, None."""

    value: str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class Name(Expr):
    """Variable reference: {{ user }} or {{ user.address.city }}

    Each segment is resolved left to right against own keys only.
    """

    path: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Call(Expr):
    """Function call: {{ eq(a, b) }}"""

    name: str
    args: Sequence[Expr] = ()


@dataclass(frozen=True, slots=True)
class Pipe(Expr):
    """Pipe application: {{ value | truncate(10) }}

    Evaluates exactly like ``Call(name, (value, *args))``.
    """

    value: Expr
    name: str
    args: Sequence[Expr] = ()
