from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional, TextIO

from a2lisp import Ref, Value, NativeFn
from a2lisp import config
from a2lisp.builtin.env_builtin import register
from a2lisp.evaluation.evaluator import evaluate
from a2lisp.evaluation.special_forms import SPECIAL_FORMS
from a2lisp.printer import write
from a2lisp.reader.parser import Reader
from a2lisp.types.environment import Environment
from a2lisp.types.heap import Heap
from a2lisp.types.nil import Nil
from a2lisp.types.symbol import SymbolTable

logger = logging.getLogger(__name__)


class Interpreter:
    """
    One interpreter session: heap, symbol table, global environment and natives.
    Sessions share nothing, so several can coexist in one process.
    """

    def __init__(
        self,
        heap_cells: Optional[int] = None,
        max_heap_cells: Optional[int] = None,
        *,
        natives: bool = True,
    ):
        capacity = heap_cells or config.get_heap_cells()
        self.heap = Heap(capacity, max_heap_cells or max(capacity, config.get_max_heap_cells()))
        self.symbols = SymbolTable(self.heap)

        # Special-form symbols are interned before anything else is named
        self.special_forms = {
            self.symbols.intern(name): handler for name, handler in SPECIAL_FORMS.items()
        }
        self.quote: Ref = self.symbols.intern("QUOTE")

        self.environment = Environment(self.heap)
        # The most recent top-level result stays reachable until the next one
        self.last_value: Value = Nil
        self.heap.add_root_source(lambda: (self.last_value,))

        if natives:
            register(self)
        logger.debug("Interpreter ready: %d symbols, %s", len(self.symbols), self.heap.stats())

    @property
    def global_env(self) -> Ref:
        return self.environment.header

    def define_native(self, name: str, fn: NativeFn) -> Ref:
        sym = self.symbols.intern(name)
        self.environment.define_global(sym, self.heap.make_native(name.upper(), fn))
        logger.debug("Registered native %s", name.upper())
        return sym

    # --- reading / printing ---
    def reader(self, stream: TextIO) -> Reader:
        return Reader(stream, self.heap, self.symbols, self.quote)

    def read(self, code: str) -> Optional[Value]:
        """Read the first datum of `code` (None for blank input)."""
        return self.reader(io.StringIO(code)).read()

    def write(self, value: Value) -> str:
        return write(self.heap, value)

    # --- evaluation ---
    def evaluate(self, expr: Value, env: Optional[Value] = None) -> Value:
        return evaluate(expr, self.global_env if env is None else env, self)

    def eval_stream(self, stream: TextIO) -> Value:
        result: Value = Nil
        for expr in self.reader(stream).read_all():
            self.last_value = result = self.evaluate(expr)
        return result

    def eval(self, code: str) -> Value:
        """Evaluate every datum in `code`; return the last value (NIL if there is none)."""
        return self.eval_stream(io.StringIO(code))

    def eval_to_string(self, code: str) -> str:
        return self.write(self.eval(code))

    def load(self, path: str | Path) -> Value:
        with open(path, encoding="ascii", errors="replace") as stream:
            return self.eval_stream(stream)
