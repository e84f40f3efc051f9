"""Control flow nodes for pagelet syntax trees."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from pagelet.nodes.base import Node
from pagelet.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional: {{#if cond}}...{{:else if cond}}...{{:else}}...{{/if}}"""

    test: Expr
    body: Sequence[Node]
    elif_: Sequence[tuple[Expr, Sequence[Node]]] = ()
    else_: Sequence[Node] = ()

    @property
    def branches(self) -> tuple[tuple[Expr, Sequence[Node]], ...]:
        """All (test, body) pairs in declaration order."""
        return ((self.test, self.body), *self.elif_)


@dataclass(frozen=True, slots=True)
class Each(Node):
    """Loop: {{#each items as item, i}}...{{:else}}...{{/each}}"""

    iter: Expr
    target: str
    index: str | None = None
    body: Sequence[Node] = ()
    empty: Sequence[Node] = ()
