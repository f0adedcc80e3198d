"""
  Lisp Reader

- Reads one datum at a time straight from a character stream
- One character of lookahead, pushed back after each datum
- Produces heap values:

    - runs of letters       -> interned Symbol
    - runs of digits        -> Integer (wrapping 64-bit accumulation)
    - ( ... )               -> proper list, () -> NIL
    - 'x                    -> (QUOTE x)
"""

from __future__ import annotations

import string
from typing import Iterator, Optional, TextIO

from a2lisp import Value
from a2lisp.errors import LispSyntaxError
from a2lisp.types.heap import Heap, to_word
from a2lisp.types.nil import Nil
from a2lisp.types.symbol import SymbolTable

WHITESPACE = frozenset(" \t\n\r\f\v")
LETTERS = frozenset(string.ascii_letters)
DIGITS = frozenset(string.digits)

EOF = ""
QUOTE_MARK = object()


class Reader:
    def __init__(self, stream: TextIO, heap: Heap, symbols: SymbolTable, quote: Value):
        self.stream = stream
        self.heap = heap
        self.symbols = symbols
        self.quote = quote
        self._pushback: Optional[str] = None

    # --- character level ---
    def next_char(self) -> str:
        if self._pushback is not None:
            ch, self._pushback = self._pushback, None
            return ch
        return self.stream.read(1)

    def unread(self, ch: str) -> None:
        if ch != EOF:
            self._pushback = ch

    def skip_whitespace(self) -> str:
        """Skip whitespace; return (without consuming) the next character."""
        ch = self.next_char()
        while ch in WHITESPACE:
            ch = self.next_char()
        self.unread(ch)
        return ch

    def _take_run(self, allowed: frozenset) -> str:
        chars = []
        ch = self.next_char()
        while ch != EOF and ch in allowed:
            chars.append(ch)
            ch = self.next_char()
        self.unread(ch)
        return "".join(chars)

    # --- datum level ---
    def read(self) -> Optional[Value]:
        """Read one datum; None at end of input."""
        ch = self.skip_whitespace()
        if ch == EOF:
            return None
        return self._read_datum()

    def _read_datum(self) -> Value:
        """Read one complete datum.

        Open lists and pending quotes live on an explicit stack, so nesting
        depth is bounded by memory rather than by the host call stack.
        """
        heap = self.heap
        with heap.rooted() as keep:
            stack: list = []
            while True:
                ch = self.skip_whitespace()
                if ch == EOF:
                    if any(frame is not QUOTE_MARK for frame in stack):
                        raise LispSyntaxError("Unexpected end of input inside a list.")
                    raise LispSyntaxError("Unexpected end of input.")
                if ch == "(":
                    self.next_char()
                    stack.append([])
                    continue
                if ch == "'":
                    self.next_char()
                    stack.append(QUOTE_MARK)
                    continue
                if ch == ")" and stack and stack[-1] is not QUOTE_MARK:
                    self.next_char()
                    datum = heap.list_from(stack.pop())
                else:
                    datum = self._read_atom(ch)

                while stack and stack[-1] is QUOTE_MARK:
                    stack.pop()
                    datum = heap.cons(self.quote, heap.cons(datum, Nil))
                keep(datum)
                if not stack:
                    return datum
                stack[-1].append(datum)

    def _read_atom(self, ch: str) -> Value:
        if ch in LETTERS:
            return self.symbols.intern(self._take_run(LETTERS))
        if ch in DIGITS:
            return self.heap.make_integer(self._read_integer())
        self.next_char()
        raise LispSyntaxError(f"Unrecognized token. {ch!r}")

    def _read_integer(self) -> int:
        value = 0
        for digit in self._take_run(DIGITS):
            value = to_word(value * 10 + ord(digit) - ord("0"))
        return value

    def read_all(self) -> Iterator[Value]:
        while (datum := self.read()) is not None:
            yield datum
