"""Tree rendering for pagelet templates.

StringBuilder Pattern:
Output fragments are appended to one list per render and joined once at
the end, O(n) in output size.

Scoping:
Each loop iteration renders against a shallow copy of the enclosing
context with the item (and index) bound, so bindings shadow outer names
for one iteration only and never leak out of the loop.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pagelet.nodes import Data, Each, If, Node, Output
from pagelet.template.evaluator import Evaluator
from pagelet.template.helpers import is_mapping, is_sequence, is_truthy, to_str
from pagelet.utils.constants import ERR_ARRAY_OUTPUT, ERR_EACH_NOT_ARRAY, ERR_OBJECT_OUTPUT
from pagelet.utils.html import html_escape


class Renderer:
    """Render a node tree against a context."""

    __slots__ = ("_autoescape", "_evaluator")

    def __init__(self, evaluator: Evaluator, *, autoescape: bool = True) -> None:
        self._evaluator = evaluator
        self._autoescape = autoescape

    def render(self, nodes: Sequence[Node], ctx: Mapping[str, Any]) -> str:
        buf: list[str] = []
        self._render_into(nodes, ctx, buf)
        return "".join(buf)

    def _render_into(self, nodes: Sequence[Node], ctx: Mapping[str, Any], buf: list[str]) -> None:
        _append = buf.append
        evaluate = self._evaluator.evaluate
        for node in nodes:
            match node:
                case Data(value=value):
                    _append(value)
                case Output(expr=expr, escape=escape):
                    _append(self._format_output(evaluate(expr, ctx), escape))
                case If():
                    for test, body in node.branches:
                        if is_truthy(evaluate(test, ctx)):
                            self._render_into(body, ctx, buf)
                            break
                    else:
                        self._render_into(node.else_, ctx, buf)
                case Each():
                    self._render_each(node, ctx, buf)

    def _render_each(self, node: Each, ctx: Mapping[str, Any], buf: list[str]) -> None:
        items = self._evaluator.evaluate(node.iter, ctx)
        if not is_sequence(items):
            buf.append(ERR_EACH_NOT_ARRAY)
            return
        if not items:
            self._render_into(node.empty, ctx, buf)
            return
        for index, item in enumerate(items):
            scope = {**ctx, node.target: item}
            if node.index is not None:
                scope[node.index] = index
            self._render_into(node.body, scope, buf)

    def _format_output(self, value: Any, escape: bool) -> str:
        if is_sequence(value):
            return ERR_ARRAY_OUTPUT
        if is_mapping(value):
            return ERR_OBJECT_OUTPUT
        if value is None:
            return ""
        text = to_str(value)
        return html_escape(text) if escape and self._autoescape else text
