"""Block parsing for pagelet parser.

Provides mixin for parsing ``{{#if}}`` and ``{{#each}}`` blocks.

Block bodies are parsed with stop sequences: the body parser returns when
it reaches ``{{:else}}``, ``{{/if}}`` and friends without consuming them,
and the block parser here decides which branch comes next. A missing
closing tag simply lets the body run to end of input.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pagelet.nodes import Data, Each, If
from pagelet.utils.constants import (
    EACH_ELSE_STOPS,
    EACH_STOPS,
    ELSE,
    ELSE_IF,
    ELSEIF,
    END_EACH,
    END_IF,
    ERR_BLOCK_TOO_DEEP,
    ERR_EACH_MISSING_AS,
    ERR_UNKNOWN_BLOCK,
    IF_ELSE_STOPS,
    IF_STOPS,
    TAG_CLOSE,
)

if TYPE_CHECKING:
    from pagelet.nodes import Expr, Node

logger = logging.getLogger(__name__)

# Block keyword -> parser method
_BLOCK_PARSERS: dict[str, str] = {
    "if": "_parse_if",
    "each": "_parse_each",
}


class BlockParsingMixin:
    """Mixin for parsing block tags.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    if TYPE_CHECKING:
        # Host attributes (from Parser.__init__)
        _pos: int
        _max_depth: int
        _block_depth: int

        # From Parser
        def _peek(self) -> str: ...
        def _at(self, text: str) -> bool: ...
        def _skip(self, text: str) -> None: ...
        def _skip_ws(self) -> None: ...
        def _ident(self) -> str: ...
        def _skip_to_close(self) -> None: ...
        def _parse_nodes(self, stops: tuple[str, ...] = ()) -> tuple[Node, ...]: ...

        # From ExpressionParsingMixin
        def _parse_expression(self) -> Expr: ...

    def _parse_block(self) -> Node:
        """Parse a block tag whose ``{{#`` has already been consumed."""
        keyword = self._ident()
        self._skip_ws()

        method = _BLOCK_PARSERS.get(keyword)
        if method is None:
            logger.debug("Unknown block keyword %r at offset %d", keyword, self._pos)
            # Only a bare "{{#keyword}}" is swallowed; anything else in the
            # tag is left for the enclosing parser to treat as text.
            self._skip(TAG_CLOSE)
            return Data(ERR_UNKNOWN_BLOCK.format(keyword=keyword))

        if self._block_depth >= self._max_depth:
            logger.debug(
                "Block #%s at offset %d exceeds max depth %d", keyword, self._pos, self._max_depth
            )
            self._skip_to_close()
            return Data(ERR_BLOCK_TOO_DEEP.format(keyword=keyword))

        self._block_depth += 1
        node = getattr(self, method)()
        self._block_depth -= 1
        return node

    def _parse_tag_expression(self) -> Expr:
        """Parse the expression of an opening tag and consume its ``}}``."""
        expr = self._parse_expression()
        self._skip_ws()
        self._skip(TAG_CLOSE)
        return expr

    def _parse_if(self) -> If:
        """Parse {{#if cond}}...{{:else if cond}}...{{:else}}...{{/if}}."""
        test = self._parse_tag_expression()
        body = self._parse_nodes(IF_STOPS)

        elif_: list[tuple[Expr, tuple[Node, ...]]] = []
        while True:
            if self._at(ELSEIF):
                self._skip(ELSEIF)
            elif self._at(ELSE_IF):
                self._skip(ELSE_IF)
            else:
                break
            self._skip_ws()
            branch_test = self._parse_tag_expression()
            elif_.append((branch_test, self._parse_nodes(IF_STOPS)))

        else_: tuple[Node, ...] = ()
        if self._at(ELSE):
            self._skip(ELSE)
            else_ = self._parse_nodes(IF_ELSE_STOPS)

        self._skip(END_IF)
        return If(test, body, tuple(elif_), else_)

    def _parse_each(self) -> Node:
        """Parse {{#each items as item[, index]}}...{{:else}}...{{/each}}.

        Returns an error Data node, with the malformed tag consumed, when
        the ``as`` keyword is missing.
        """
        iterable = self._parse_expression()
        self._skip_ws()
        if self._ident() != "as":
            logger.debug("#each without 'as' at offset %d", self._pos)
            self._skip_to_close()
            return Data(ERR_EACH_MISSING_AS)

        self._skip_ws()
        target = self._ident()
        self._skip_ws()
        index = None
        if self._peek() == ",":
            self._skip(",")
            self._skip_ws()
            index = self._ident() or None
            self._skip_ws()
        self._skip(TAG_CLOSE)

        body = self._parse_nodes(EACH_STOPS)
        empty: tuple[Node, ...] = ()
        if self._at(ELSE):
            self._skip(ELSE)
            empty = self._parse_nodes(EACH_ELSE_STOPS)

        self._skip(END_EACH)
        return Each(iterable, target, index, body, empty)
