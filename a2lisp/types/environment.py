"""Environment model for a2lisp.

A lexical environment is a chain of Pairs whose elements are (name . value)
binding Pairs. Every chain built by the interpreter ends at the global header
cell; the global bindings themselves live in one ordered mapping owned by the
Environment object, so everyone holding the header sees later definitions.
Only `define_global` mutates anything; `bind` always builds a new chain.
"""

from __future__ import annotations

from io import StringIO
from typing import Iterator, Optional

from a2lisp import Ref, Value
from a2lisp.errors import LispInvalidSymbol
from a2lisp.types.heap import Heap, Kind
from a2lisp.types.nil import Nil


class Environment:
    """Owns the global frame and implements bind/lookup over binding chains."""

    __slots__ = ("heap", "header", "globals")

    def __init__(self, heap: Heap):
        self.heap = heap
        # Identity of the header never changes
        self.header: Ref = heap.make_global()
        self.globals: dict[Ref, Value] = {}
        heap.add_root_source(self.roots)

    def bind(self, name: Ref, value: Value, env: Value) -> Ref:
        """Return a new environment that shadows `env` with (name . value)."""
        with self.heap.rooted(env):
            binding = self.heap.cons(name, value)
        return self.heap.cons(binding, env)

    def lookup(self, name: Ref, env: Value) -> Optional[Value]:
        """Innermost binding of `name` along `env`, or None when nothing binds it."""
        heap = self.heap
        while env is not Nil:
            if heap.kind_of(env) is Kind.GLOBAL:
                return self.globals.get(name)
            binding = heap.car(env)
            # interned symbols: identity is equality
            if heap.car(binding) == name:
                return heap.cdr(binding)
            env = heap.cdr(env)
        return None

    def define_global(self, name: Ref, value: Value) -> None:
        if not self.heap.is_symbol(name):
            raise LispInvalidSymbol("Only symbols can be defined")
        self.globals[name] = value

    def roots(self) -> Iterator[Value]:
        yield self.header
        for name, value in self.globals.items():
            yield name
            yield value

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("{")
            buffer.write(", ".join(self.heap.symbol_name(k) for k in self.globals))
            buffer.write("}")
            return buffer.getvalue()
