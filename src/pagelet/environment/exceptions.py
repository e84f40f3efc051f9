"""Exceptions for pagelet.

Template authors never see these: every problem in template content is
rendered inline as an ``[Error: ...]`` fragment. Exceptions are reserved
for the host application.

Exception Hierarchy:
TemplateError (base)
└── TemplateRuntimeError      # Host function failed while rendering (strict mode)

"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Searchable error codes for pagelet exceptions.

    Format: P-{CATEGORY}-{NUMBER}
    Categories: RUN (runtime)
    """

    FUNCTION_ERROR = "P-RUN-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'runtime')."""
        prefix = self.value.split("-")[1]
        return {"RUN": "runtime"}.get(prefix, "unknown")


class TemplateError(Exception):
    """Base exception for all pagelet errors.

    Example:
            >>> try:
            ...     template.render(data)
            ... except TemplateError as e:
            ...     log.error(e)

    """


class TemplateRuntimeError(TemplateError):
    """A host-registered function raised while rendering.

    Only raised when the environment is in strict mode; otherwise the
    failure is logged and rendered inline as ``[Error: name() failed]``.

    Attributes:
        function_name: Name the template used to call the function
        code: ErrorCode for the failure
    """

    def __init__(
        self,
        message: str,
        *,
        function_name: str | None = None,
        code: ErrorCode = ErrorCode.FUNCTION_ERROR,
    ) -> None:
        self.message = message
        self.function_name = function_name
        self.code = code
        super().__init__(self._format())

    def _format(self) -> str:
        location = f" in {self.function_name}()" if self.function_name else ""
        return f"[{self.code.value}] {self.message}{location}"
