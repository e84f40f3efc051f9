"""pagelet — small, safe templates for rendering HTML fragments.

A logic-light template engine for tooling that renders many small HTML
snippets (search results, cards, list items) from structured records.
Templates are interpreted, never turned into Python code, so template
text from untrusted sources cannot execute anything or reach attributes
of the data it is given.

Quickstart:
    >>> import pagelet
    >>> pagelet.render("Hello, {{ name }}!", {"name": "World"})
    'Hello, World!'

    >>> card = pagelet.compile('<a href="{{ url | safeUrl }}">{{ title }}</a>')
    >>> card({"url": "/docs/", "title": "Docs & Guides"})
    '<a href="/docs/">Docs &amp; Guides</a>'

Syntax:
    {{ expr }}                       escaped output
    {{+ expr +}}                     raw output
    \\{{                              literal "{{"
    {{#if expr}}..{{:else if expr}}..{{:else}}..{{/if}}
    {{#each expr as item, i}}..{{:else}}..{{/each}}
    {{ value | fn(arg) }}            same as fn(value, arg)

Architecture:
Template Source → Parser → immutable tree → Renderer + Evaluator → str

Error Handling:
Mistakes in template content never raise. They render inline, e.g.
``[Error: unknown foo()]`` or ``[Error: use #each for arrays]``.

Thread-Safety:
Parsed templates are immutable and may be rendered concurrently. Function
registration is copy-on-write; each render uses the table as it was when
the render started.

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pagelet.environment import (
    BUILTINS,
    Environment,
    ErrorCode,
    FunctionRegistry,
    TemplateError,
    TemplateRuntimeError,
)
from pagelet.parser import Parser, parse
from pagelet.template import Template
from pagelet.utils.html import html_escape, safe_url

__version__ = "0.1.0"

_default_environment = Environment()


def get_default_environment() -> Environment:
    """The environment behind the module-level compile/render/register_function."""
    return _default_environment


def compile(source: str) -> Template:  # noqa: A001
    """Parse *source* once and return a reusable ``data -> str`` Template."""
    return _default_environment.from_string(source)


def render(source: str, data: Mapping[str, Any] | None = None, /, **kwargs: Any) -> str:
    """Render *source* with *data*; equivalent to ``compile(source)(data)``."""
    return _default_environment.render(source, data, **kwargs)


def register_function(name: str, func: Callable[..., Any]) -> None:
    """Add or replace a template function in the default environment.

    *func* receives already-evaluated argument values, in order; with pipe
    syntax the piped value comes first.

    Example:
        >>> register_function("wrap", lambda s, left, right: f"{left}{s}{right}")
        >>> render('{{ title | wrap("[", "]") }}', {"title": "Hi"})
        '[Hi]'
    """
    _default_environment.add_function(name, func)


__all__ = [
    "BUILTINS",
    "Environment",
    "ErrorCode",
    "FunctionRegistry",
    "Parser",
    "Template",
    "TemplateError",
    "TemplateRuntimeError",
    "__version__",
    "compile",
    "get_default_environment",
    "html_escape",
    "parse",
    "register_function",
    "render",
    "safe_url",
]
