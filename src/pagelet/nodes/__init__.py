"""pagelet syntax tree nodes.

Node kinds:
    Data    literal text
    Output  interpolation (``escape=False`` for raw tags)
    If      conditional with else-if branches and fallback
    Each    loop with item/index bindings and empty fallback

Expression kinds:
    Const   literal value
    Name    variable path
    Call    function call
    Pipe    ``value | fn(args)``, sugar for a call
"""

from __future__ import annotations

from pagelet.nodes.base import Node
from pagelet.nodes.control_flow import Each, If
from pagelet.nodes.expressions import Call, Const, Expr, Name, Pipe
from pagelet.nodes.output import Data, Output


__all__ = [
    "Call",
    "Const",
    "Data",
    "Each",
    "Expr",
    "If",
    "Name",
    "Node",
    "Output",
    "Pipe",
]
