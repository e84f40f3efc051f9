"""Shared constants for pagelet.

Inline error messages are part of the rendered output contract: downstream
snapshot tests compare them byte-for-byte, so never reword them.
"""

from __future__ import annotations

# Parser / renderer inline errors
ERR_UNKNOWN_BLOCK = "[Error: unknown #{keyword}]"
ERR_EACH_MISSING_AS = "[Error: #each missing 'as']"
ERR_BLOCK_TOO_DEEP = "[Error: #{keyword} nested too deep]"
ERR_EXPR_TOO_DEEP = "[Error: expression nested too deep]"
ERR_ARRAY_OUTPUT = "[Error: use #each for arrays]"
ERR_OBJECT_OUTPUT = "[Error: cannot render object]"
ERR_EACH_NOT_ARRAY = "[Error: #each needs array]"

# Evaluator inline errors
ERR_UNKNOWN_FUNCTION = "[Error: unknown {name}()]"
ERR_ARITY = "[Error: {name}() needs {count} args]"
ERR_FUNCTION_FAILED = "[Error: {name}() failed]"

# Tag syntax
TAG_OPEN = "{{"
TAG_CLOSE = "}}"
ESCAPED_OPEN = "\\{{"
RAW_MARKER = "+"
BLOCK_MARKER = "#"

IF_STOPS: tuple[str, ...] = ("{{:else if", "{{:elseif", "{{:else}}", "{{/if}}")
IF_ELSE_STOPS: tuple[str, ...] = ("{{/if}}",)
EACH_STOPS: tuple[str, ...] = ("{{:else}}", "{{/each}}")
EACH_ELSE_STOPS: tuple[str, ...] = ("{{/each}}",)

ELSE_IF = "{{:else if"
ELSEIF = "{{:elseif"
ELSE = "{{:else}}"
END_IF = "{{/if}}"
END_EACH = "{{/each}}"

KEYWORD_CONSTANTS: dict[str, bool | None] = {"true": True, "false": False, "null": None}

# Nesting guard for untrusted templates. Each nested block costs a handful of
# Python frames while parsing and rendering, so this stays far below the
# interpreter recursion limit.
DEFAULT_MAX_DEPTH = 64
DEFAULT_CACHE_SIZE = 400

DEFAULT_TRUNCATE_SUFFIX = "..."

# URL schemes the safeUrl function lets through (compared lowercase)
SAFE_URL_SCHEMES: frozenset[str] = frozenset(
    {
        "http",
        "https",
        "mailto",
        "tel",
        "ftp",
    }
)
