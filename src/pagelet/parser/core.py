"""Core parser for pagelet templates.

A hand-rolled recursive-descent parser over a single character cursor.
There is no separate lexer: tags are recognised directly in the source,
which keeps escape handling and stop-sequence look-ahead simple.

The parser never raises for template content. Malformed constructs turn
into inline error text or end the offending block early, and every loop
consumes at least one character per iteration, so parsing always
terminates.

Thread-Safety:
A Parser holds mutable cursor state and must not be shared; ``parse()``
creates a fresh one per call. The tree it returns is immutable.

"""

from __future__ import annotations

import re

from pagelet.nodes import Data, Node, Output
from pagelet.parser.blocks import BlockParsingMixin
from pagelet.parser.expressions import ExpressionParsingMixin
from pagelet.utils.constants import (
    BLOCK_MARKER,
    DEFAULT_MAX_DEPTH,
    ESCAPED_OPEN,
    RAW_MARKER,
    TAG_CLOSE,
    TAG_OPEN,
)

_WS_RE = re.compile(r"[ \t\n\r]*")
_IDENT_RE = re.compile(r"[A-Za-z0-9_]*")
# Next place where literal text stops: a tag or an escaped tag
_TEXT_END_RE = re.compile(r"\\?\{\{")


class Parser(ExpressionParsingMixin, BlockParsingMixin):
    """Parse template source into an immutable tuple of nodes.

    Example:
            >>> Parser("Hi {{ name }}").parse()
            (Data(value='Hi '), Output(expr=Name(path=('name',)), escape=True))

    """

    def __init__(self, source: str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._source = source
        self._length = len(source)
        self._pos = 0
        self._max_depth = max_depth
        self._block_depth = 0
        self._expr_depth = 0

    def parse(self) -> tuple[Node, ...]:
        """Parse the whole source. Never raises for template content."""
        return self._parse_nodes()

    # ─────────────────────────────────────────────────────────────────────
    # Cursor helpers
    # ─────────────────────────────────────────────────────────────────────

    def _peek(self) -> str:
        """Character under the cursor, or "" at end of input."""
        return self._source[self._pos] if self._pos < self._length else ""

    def _at(self, text: str) -> bool:
        return self._source.startswith(text, self._pos)

    def _skip(self, text: str) -> None:
        """Consume *text* if the cursor is on it."""
        if self._source.startswith(text, self._pos):
            self._pos += len(text)

    def _skip_ws(self) -> None:
        self._pos = _WS_RE.match(self._source, self._pos).end()

    def _ident(self) -> str:
        """Read an identifier (ASCII word characters, possibly empty)."""
        match = _IDENT_RE.match(self._source, self._pos)
        self._pos = match.end()
        return match.group()

    def _skip_to_close(self) -> None:
        """Discard everything up to and including the next ``}}``."""
        end = self._source.find(TAG_CLOSE, self._pos)
        self._pos = self._length if end == -1 else end + len(TAG_CLOSE)

    # ─────────────────────────────────────────────────────────────────────
    # Node parsing
    # ─────────────────────────────────────────────────────────────────────

    def _parse_nodes(self, stops: tuple[str, ...] = ()) -> tuple[Node, ...]:
        """Parse nodes until end of input or one of *stops*.

        Stop sequences are left unconsumed so the enclosing block parser
        can decide what they mean (``{{:else}}``, ``{{/if}}``, ...).
        """
        result: list[Node] = []
        source = self._source
        while self._pos < self._length:
            if stops and any(source.startswith(stop, self._pos) for stop in stops):
                break

            if source.startswith(ESCAPED_OPEN, self._pos):
                self._pos += len(ESCAPED_OPEN)
                result.append(Data(TAG_OPEN))
                continue

            if source.startswith(TAG_OPEN, self._pos):
                self._pos += len(TAG_OPEN)
                result.append(self._parse_tag())
                continue

            # Every stop sequence starts with "{{", so text can run to the
            # next (possibly escaped) opening delimiter.
            match = _TEXT_END_RE.search(source, self._pos)
            end = match.start() if match else self._length
            result.append(Data(source[self._pos : end]))
            self._pos = end
        return tuple(result)

    def _parse_tag(self) -> Node:
        """Parse a tag whose ``{{`` has already been consumed."""
        self._skip_ws()
        char = self._peek()
        if char == RAW_MARKER:
            self._pos += 1
            return self._parse_output(escape=False)
        if char == BLOCK_MARKER:
            self._pos += 1
            return self._parse_block()
        return self._parse_output(escape=True)

    def _parse_output(self, *, escape: bool) -> Output:
        """Parse ``{{ expr }}`` or ``{{+ expr +}}``.

        Everything after the expression up to ``}}`` is discarded, which
        also accepts a raw tag whose closing ``+`` is missing.
        """
        expr = self._parse_expression()
        self._skip_to_close()
        return Output(expr, escape)


def parse(source: str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> tuple[Node, ...]:
    """Parse template source into a tree of nodes."""
    return Parser(source, max_depth=max_depth).parse()
