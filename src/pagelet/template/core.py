"""pagelet Template — a parsed tree bound to its environment.

Templates are immutable and re-entrant: ``render()`` builds only local
state (a fresh evaluator, renderer and output buffer), so one Template can
be rendered by many threads at once against different data.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pagelet.template.evaluator import Evaluator
from pagelet.template.introspection import referenced_names
from pagelet.template.renderer import Renderer

if TYPE_CHECKING:
    from pagelet.environment import Environment
    from pagelet.nodes import Node


class Template:
    """Parsed template ready for rendering.

    Calling a Template is the same as calling ``render()``, so it can be
    passed anywhere a ``data -> str`` callable is expected.

    Function lookups go through the environment's table as it stands when
    each render starts; functions registered later are picked up by the
    next render.

    Example:
            >>> from pagelet import Environment
            >>> env = Environment()
            >>> t = env.from_string("Hello, {{ name | uppercase }}!")
            >>> t.render({"name": "World"})
            'Hello, WORLD!'

            >>> t(name="World")  # keyword context also works
            'Hello, WORLD!'

    """

    __slots__ = ("_env", "_nodes", "_source")

    def __init__(self, env: Environment, nodes: Sequence[Node], source: str | None = None):
        self._env = env
        self._nodes = tuple(nodes)
        self._source = source

    @property
    def environment(self) -> Environment:
        return self._env

    @property
    def nodes(self) -> tuple[Node, ...]:
        """The parsed tree."""
        return self._nodes

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def variables(self) -> frozenset[str]:
        """Top-level context names this template reads."""
        return referenced_names(self._nodes)

    def render(self, data: Mapping[str, Any] | None = None, /, **kwargs: Any) -> str:
        """Render with *data* and/or keyword arguments as the root context.

        Raises:
            TypeError: If *data* is not a mapping
            TemplateRuntimeError: If a host function fails in strict mode
        """
        if data is not None and not isinstance(data, Mapping):
            raise TypeError(f"Template data must be a mapping, got {type(data).__name__}")
        ctx: dict[str, Any] = {**data} if data else {}
        ctx.update(kwargs)

        env = self._env
        evaluator = Evaluator(env.functions.snapshot(), strict=env.strict)
        return Renderer(evaluator, autoescape=env.autoescape).render(self._nodes, ctx)

    def __call__(self, data: Mapping[str, Any] | None = None, /, **kwargs: Any) -> str:
        return self.render(data, **kwargs)

    def __repr__(self) -> str:
        return f"<Template {len(self._nodes)} nodes>"
