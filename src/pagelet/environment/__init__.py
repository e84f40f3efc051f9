"""pagelet environment: configuration, function registry and exceptions."""

from pagelet.environment.core import Environment
from pagelet.environment.exceptions import ErrorCode, TemplateError, TemplateRuntimeError
from pagelet.environment.functions import BUILTINS, builtin
from pagelet.environment.registry import FunctionRegistry, adapt_function

__all__ = [
    "BUILTINS",
    "Environment",
    "ErrorCode",
    "FunctionRegistry",
    "TemplateError",
    "TemplateRuntimeError",
    "adapt_function",
    "builtin",
]
