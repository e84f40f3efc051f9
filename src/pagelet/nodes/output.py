"""Output nodes for pagelet syntax trees."""

from __future__ import annotations

from dataclasses import dataclass

from pagelet.nodes.base import Node
from pagelet.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Output expression: {{ expr }} or raw {{+ expr +}}"""

    expr: Expr
    escape: bool = True


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Literal text between tags."""

    value: str
