"""HTML helpers for pagelet output.

Escaping runs in a single pass via ``str.translate()`` with a prebuilt table.
"""

from __future__ import annotations

import re
from typing import Any

from pagelet.utils.constants import SAFE_URL_SCHEMES

_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)

# RFC 3986 scheme: ALPHA *( ALPHA / DIGIT / "+" / "-" / "." ) ":"
_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")

# Browsers drop tab and newlines anywhere in a URL and C0 controls or
# spaces at either end before reading the scheme
_URL_NEWLINES = str.maketrans("", "", "\t\n\r")
_URL_EDGES_RE = re.compile(r"^[\x00-\x20\s]+|[\x00-\x20\s]+\Z")


def html_escape(value: str) -> str:
    """Escape ``& < > " '`` to their named/numeric entities.

    Each special character maps to its entity exactly once; ``&`` is part
    of the same table, so existing entities are escaped again rather than
    preserved.

    Example:
        >>> html_escape('<a href="x">Tom & Jerry\\'s</a>')
        '&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&#39;s&lt;/a&gt;'
    """
    return value.translate(_ESCAPE_TABLE)


def safe_url(value: Any) -> str:
    """Return *value* as a URL if it is relative or uses an allowed scheme.

    The URL is cleaned the way a browser cleans an ``href`` first: tabs
    and newlines are removed everywhere, control characters and whitespace
    at either end are stripped. So ``"java\\tscript:..."`` and
    ``"\\x01javascript:..."`` cannot slip past the scheme check. Disallowed
    schemes (``javascript:``, ``data:``, ``vbscript:``, ...) yield an empty
    string; anything else is returned cleaned.
    """
    if value is None:
        return ""
    url = _URL_EDGES_RE.sub("", value.translate(_URL_NEWLINES))
    match = _SCHEME_RE.match(url)
    if match and match.group(1).lower() not in SAFE_URL_SCHEMES:
        return ""
    return url
