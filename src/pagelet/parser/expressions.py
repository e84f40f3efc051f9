"""Expression parsing for pagelet parser.

Provides mixin for parsing literals, variable paths, calls and pipes.

Grammar::

    expression := primary ( '|' IDENT [ args ] )*
    primary    := STRING | NUMBER | 'true' | 'false' | 'null'
                | IDENT args
                | IDENT ( '.' IDENT )*
    args       := '(' [ expression ( ',' expression )* ] ( ')' | <'}' or end> )

There is no operator precedence: pipes apply left to right after the
primary expression.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pagelet.nodes import Call, Const, Expr, Name, Pipe
from pagelet.utils.constants import ERR_EXPR_TOO_DEEP, KEYWORD_CONSTANTS

_STRING_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}
_NUMBER_START = frozenset("-0123456789.")
_DIGITS = frozenset("0123456789")


class ExpressionParsingMixin:
    """Mixin for parsing expressions.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    if TYPE_CHECKING:
        # Host attributes (from Parser.__init__)
        _source: str
        _length: int
        _pos: int
        _max_depth: int
        _expr_depth: int

        # From Parser
        def _peek(self) -> str: ...
        def _skip(self, text: str) -> None: ...
        def _skip_ws(self) -> None: ...
        def _ident(self) -> str: ...

    def _parse_expression(self) -> Expr:
        """Parse one expression with any trailing pipes.

        If nothing could be consumed (unrecognised character or end of
        input) the cursor still advances by one, so callers looping over
        expressions always make progress.
        """
        self._skip_ws()
        start = self._pos
        if self._expr_depth >= self._max_depth:
            if self._pos < self._length:
                self._pos += 1
            return Const(ERR_EXPR_TOO_DEEP)

        self._expr_depth += 1
        expr = self._parse_pipes(self._parse_primary())
        self._expr_depth -= 1

        if self._pos == start and self._pos < self._length:
            self._pos += 1
        return expr

    def _parse_primary(self) -> Expr:
        char = self._peek()
        if char == '"' or char == "'":
            return self._parse_string()
        if char in _NUMBER_START:
            return self._parse_number()

        name = self._ident()
        if name in KEYWORD_CONSTANTS:
            return Const(KEYWORD_CONSTANTS[name])

        self._skip_ws()
        if self._peek() == "(":
            return Call(name, self._parse_args())

        path = [name]
        while self._peek() == ".":
            self._pos += 1
            path.append(self._ident())
        return Name(tuple(path))

    def _parse_string(self) -> Const:
        """Parse a single- or double-quoted string.

        Recognises ``\\n``, ``\\t``, ``\\r``; any other escaped character
        stands for itself (``\\\\``, ``\\"``, ``\\'``). An unterminated
        string runs to end of input and evaluates to "".
        """
        source = self._source
        quote = source[self._pos]
        self._pos += 1
        chars: list[str] = []
        while self._pos < self._length and source[self._pos] != quote:
            char = source[self._pos]
            if char == "\\" and self._pos + 1 < self._length:
                escaped = source[self._pos + 1]
                chars.append(_STRING_ESCAPES.get(escaped, escaped))
                self._pos += 2
                continue
            chars.append(char)
            self._pos += 1

        if self._pos >= self._length:
            return Const("")
        self._pos += 1  # closing quote
        return Const("".join(chars))

    def _parse_number(self) -> Expr:
        """Parse ``-?\\.?digits`` with at most one decimal point.

        A lone ``-`` or ``.`` is not a number: it becomes a one-segment
        variable path named after the character, which renders as empty
        unless the data happens to carry that key.
        """
        source = self._source
        start = self._pos
        if self._peek() == "-":
            self._pos += 1
        seen_dot = False
        if self._peek() == ".":
            self._pos += 1
            seen_dot = True
        while self._pos < self._length:
            char = source[self._pos]
            if char == "." and not seen_dot:
                seen_dot = True
            elif char not in _DIGITS:
                break
            self._pos += 1

        text = source[start : self._pos]
        if text in ("-", ".", ""):
            return Name((text or "-",))
        try:
            return Const(float(text) if seen_dot else int(text))
        except ValueError:
            # "-." has no digits; overlong digit runs exceed int() limits
            return Const(math.nan if seen_dot else float(text))

    def _parse_pipes(self, expr: Expr) -> Expr:
        """Apply trailing pipes left to right.

        Each pipe nests the chain one level deeper, so pipes count toward
        the expression depth; a chain longer than the limit collapses to
        the depth error (the remaining pipes are still consumed).
        """
        self._skip_ws()
        outer_depth = self._expr_depth
        while self._peek() == "|":
            self._pos += 1
            self._skip_ws()
            name = self._ident()
            self._skip_ws()
            args = self._parse_args() if self._peek() == "(" else ()
            if self._expr_depth >= self._max_depth:
                expr = Const(ERR_EXPR_TOO_DEEP)
            else:
                expr = Pipe(expr, name, args)
            self._expr_depth += 1
            self._skip_ws()
        self._expr_depth = outer_depth
        return expr

    def _parse_args(self) -> tuple[Expr, ...]:
        """Parse a parenthesised argument list.

        Tolerates a missing ``)``: the list also ends at ``}`` or end of
        input, leaving the cursor there.
        """
        self._pos += 1  # consume '('
        self._skip_ws()
        args: list[Expr] = []
        while self._pos < self._length and self._source[self._pos] not in ")}":
            args.append(self._parse_expression())
            self._skip_ws()
            if self._peek() == ",":
                self._pos += 1
                self._skip_ws()
        self._skip(")")
        return tuple(args)
