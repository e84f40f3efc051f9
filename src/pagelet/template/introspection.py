"""Template introspection: which context names a tree reads.

Useful for validating data before rendering, e.g. warning when a record
lacks a field the template expects. Loop bindings are scoped: a name bound
by ``{{#each ... as x}}`` is not reported for uses inside that loop.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pagelet.nodes import Call, Data, Each, Expr, If, Name, Node, Output, Pipe


def referenced_names(nodes: Sequence[Node]) -> frozenset[str]:
    """Top-level context names the tree may read."""
    found: set[str] = set()
    _visit_nodes(nodes, frozenset(), found)
    return frozenset(found)


def _visit_nodes(nodes: Iterable[Node], bound: frozenset[str], found: set[str]) -> None:
    for node in nodes:
        match node:
            case Data():
                pass
            case Output(expr=expr):
                _visit_expr(expr, bound, found)
            case If():
                for test, body in node.branches:
                    _visit_expr(test, bound, found)
                    _visit_nodes(body, bound, found)
                _visit_nodes(node.else_, bound, found)
            case Each():
                _visit_expr(node.iter, bound, found)
                inner = bound | {node.target}
                if node.index is not None:
                    inner |= {node.index}
                _visit_nodes(node.body, inner, found)
                _visit_nodes(node.empty, bound, found)


def _visit_expr(expr: Expr, bound: frozenset[str], found: set[str]) -> None:
    match expr:
        case Name(path=path):
            if path[0] not in bound:
                found.add(path[0])
        case Call(args=args):
            for arg in args:
                _visit_expr(arg, bound, found)
        case Pipe(value=value, args=args):
            _visit_expr(value, bound, found)
            for arg in args:
                _visit_expr(arg, bound, found)
