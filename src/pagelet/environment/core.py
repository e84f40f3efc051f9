"""pagelet Environment — configuration, function table and template cache.

The environment owns everything that is shared between renders: the
escaping policy, the parser depth guard, the function table and a small
cache of parsed templates. Templates hold a reference back to it and read
its function table at the start of every render.

Thread-Safety:
- Function registration is copy-on-write (see FunctionRegistry)
- The template cache is guarded by a lock
- Parsed templates are immutable

"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pagelet.environment.functions import BUILTINS, Function
from pagelet.environment.registry import FunctionRegistry
from pagelet.parser import parse
from pagelet.template import Template
from pagelet.utils.constants import DEFAULT_CACHE_SIZE, DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(eq=False)
class Environment:
    """Central configuration for parsing and rendering templates.

    Attributes:
        autoescape: HTML-escape ``{{ expr }}`` output (raw ``{{+ expr +}}``
            output is never escaped)
        strict: Raise TemplateRuntimeError when a host function fails,
            instead of rendering ``[Error: name() failed]``
        max_depth: Deepest block/expression nesting the parser accepts;
            deeper constructs render as inline errors
        cache_size: Parsed templates kept by from_string() (0 disables)

    Example:
            >>> env = Environment()
            >>> env.add_function("double", lambda n: n * 2)
            >>> env.render("{{ double(n) }}", {"n": 21})
            '42'

            >>> @env.function()
            ... def shout(text):
            ...     return f"{text}!"
            >>> env.render("{{ name | shout }}", name="hey")
            'hey!'

    """

    autoescape: bool = True
    strict: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH
    cache_size: int = DEFAULT_CACHE_SIZE

    _functions: dict[str, Function] = field(init=False, repr=False)
    _cache: OrderedDict[str, Template] = field(init=False, repr=False)
    _cache_lock: threading.Lock = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")
        if self.cache_size < 0:
            raise ValueError(f"cache_size cannot be negative, got {self.cache_size}")
        self._functions = dict(BUILTINS)
        self._cache = OrderedDict()
        self._cache_lock = threading.Lock()

    @property
    def functions(self) -> FunctionRegistry:
        """Template functions (dict-like; assigned callables get evaluated args)."""
        return FunctionRegistry(self, "_functions")

    def add_function(self, name: str, func: Callable[..., Any]) -> None:
        """Register *func* as a template function, replacing any existing one.

        Args:
            name: Name used in templates, e.g. ``{{ name(x) }}`` or ``{{ x | name }}``
            func: Called with the evaluated argument values

        Raises:
            TypeError: If *func* is not callable
            ValueError: If *name* is not made of letters, digits and ``_``
        """
        self.functions[name] = func

    def function(self, name: str | None = None) -> Callable[[F], F]:
        """Decorator form of add_function().

        Example:
            >>> @env.function()
            ... def initials(name):
            ...     return "".join(part[0] for part in name.split())
        """

        def decorator(func: F) -> F:
            self.add_function(name or func.__name__, func)
            return func

        return decorator

    def parse(self, source: str) -> tuple:
        """Parse *source* into a tree without caching it."""
        return parse(source, max_depth=self.max_depth)

    def from_string(self, source: str) -> Template:
        """Parse *source* once and return a reusable Template."""
        if not self.cache_size:
            return Template(self, self.parse(source), source)

        with self._cache_lock:
            cached = self._cache.get(source)
            if cached is not None:
                self._cache.move_to_end(source)
                return cached

        template = Template(self, self.parse(source), source)
        with self._cache_lock:
            self._cache[source] = template
            self._cache.move_to_end(source)
            while len(self._cache) > self.cache_size:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("Evicted template from cache (%d chars)", len(evicted))
        return template

    def render(self, source: str, data: Mapping[str, Any] | None = None, /, **kwargs: Any) -> str:
        """Parse (or reuse) *source* and render it in one call."""
        return self.from_string(source).render(data, **kwargs)

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()

    @property
    def cache_info(self) -> dict[str, int]:
        """Current and maximum number of cached templates."""
        return {"size": len(self._cache), "max_size": self.cache_size}
