"""Cell arena for a2lisp values.

Every value except the empty-list sentinel is a fixed-size tagged record in a
numpy-backed arena and is referred to by its index (a Ref). A record is one
`uint8` tag plus three `int64` payload words:

    INTEGER  word0 = the integer
    SYMBOL   word0 = index into the spelling table
    PAIR     word0 = first, word1 = rest
    NATIVE   word0 = index into the native procedure table
    LAMBDA   word0 = params, word1 = body, word2 = environment
    GLOBAL   (no payload; the global environment header)

References to Nil are stored as -1. Cells are never retagged while live; the
collector re-tags unreachable cells FREE and hands them out again.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Iterable, Iterator

import numpy as np

from a2lisp import Ref, Value, NativeFn
from a2lisp.errors import LispAllocationExhausted, LispTypeError
from a2lisp.types.nil import Nil

logger = logging.getLogger(__name__)

SLOTS_PER_CELL = 3
NIL_WORD = -1

_WORD_BITS = 64
_WORD_MASK = (1 << _WORD_BITS) - 1
_WORD_SIGN = 1 << (_WORD_BITS - 1)


class Kind(IntEnum):
    FREE = 0
    INTEGER = 1
    SYMBOL = 2
    PAIR = 3
    NATIVE = 4
    LAMBDA = 5
    GLOBAL = 6


def to_word(n: int) -> int:
    """Wrap an arbitrary Python int to a signed 64-bit machine word."""
    n &= _WORD_MASK
    return n - (1 << _WORD_BITS) if n & _WORD_SIGN else n


@dataclass(frozen=True)
class NativeProcedure:
    """Host-provided code exposed to Lisp under `name`."""
    name: str
    fn: NativeFn

    def __call__(self, interpreter, args: Value) -> Value:
        return self.fn(interpreter, args)


class Heap:
    """Bump arena with a free list and a mark-and-sweep collection hook."""

    def __init__(self, capacity: int = 1024, max_capacity: int | None = None):
        if capacity <= 0:
            raise ValueError("heap capacity must be positive")
        self._capacity = capacity
        self._max_capacity = max(max_capacity or capacity, capacity)
        self._tags = np.zeros(capacity, dtype=np.uint8)
        self._slots = np.zeros((capacity, SLOTS_PER_CELL), dtype=np.int64)
        self._top = 0
        self._free: list[int] = []

        self._spellings: list[str] = []
        self._natives: list[NativeProcedure] = []

        self._roots: list[Value] = []
        self._root_sources: list[Callable[[], Iterable[Value]]] = []

        self.allocations = 0
        self.collections = 0

    # ----------------- Allocation -----------------
    def allocate(self, kind: Kind) -> Ref:
        """Return a zeroed cell tagged `kind`, collecting or growing first if full."""
        if not self._free and self._top >= self._capacity:
            freed = self.collect()
            if len(self._free) < self._capacity // 4 and self._capacity < self._max_capacity:
                self._grow()
            if not self._free and self._top >= self._capacity:
                raise LispAllocationExhausted(
                    f"Heap exhausted: {self._capacity} cells live after collecting {freed}"
                )

        if self._free:
            index = self._free.pop()
        else:
            index = self._top
            self._top += 1
        self._tags[index] = kind
        self._slots[index] = 0
        self.allocations += 1
        return Ref(index)

    def _grow(self) -> None:
        new_capacity = min(self._capacity * 2, self._max_capacity)
        logger.info("Growing heap from %d to %d cells", self._capacity, new_capacity)
        tags = np.zeros(new_capacity, dtype=np.uint8)
        slots = np.zeros((new_capacity, SLOTS_PER_CELL), dtype=np.int64)
        tags[: self._capacity] = self._tags
        slots[: self._capacity] = self._slots
        self._tags, self._slots = tags, slots
        self._capacity = new_capacity

    # ----------------- Constructors -----------------
    def make_integer(self, n: int) -> Ref:
        ref = self.allocate(Kind.INTEGER)
        self._slots[ref, 0] = to_word(n)
        return ref

    def make_symbol(self, spelling: str) -> Ref:
        ref = self.allocate(Kind.SYMBOL)
        self._spellings.append(spelling)
        self._slots[ref, 0] = len(self._spellings) - 1
        return ref

    def cons(self, first: Value, rest: Value) -> Ref:
        with self.rooted(first, rest):
            ref = self.allocate(Kind.PAIR)
        self._slots[ref, 0] = _encode(first)
        self._slots[ref, 1] = _encode(rest)
        return ref

    def make_native(self, name: str, fn: NativeFn) -> Ref:
        ref = self.allocate(Kind.NATIVE)
        self._natives.append(NativeProcedure(name, fn))
        self._slots[ref, 0] = len(self._natives) - 1
        return ref

    def make_lambda(self, params: Value, body: Value, env: Value) -> Ref:
        with self.rooted(params, body, env):
            ref = self.allocate(Kind.LAMBDA)
        self._slots[ref] = (_encode(params), _encode(body), _encode(env))
        return ref

    def make_global(self) -> Ref:
        return self.allocate(Kind.GLOBAL)

    # ----------------- Accessors -----------------
    def kind_of(self, ref: Value) -> Kind:
        if ref is Nil:
            raise LispTypeError("NIL is not a heap object")
        if not 0 <= ref < self._top or self._tags[ref] == Kind.FREE:
            raise ValueError(f"Dangling reference to cell {ref}")
        return Kind(int(self._tags[ref]))

    def is_kind(self, ref: Value, kind: Kind) -> bool:
        return ref is not Nil and self.kind_of(ref) is kind

    def is_pair(self, ref: Value) -> bool:
        return self.is_kind(ref, Kind.PAIR)

    def is_symbol(self, ref: Value) -> bool:
        return self.is_kind(ref, Kind.SYMBOL)

    def _expect(self, ref: Value, kind: Kind, what: str) -> None:
        if ref is Nil:
            raise LispTypeError(f"{what} of NIL")
        actual = self.kind_of(ref)
        if actual is not kind:
            raise LispTypeError(f"{what} of a {actual.name.lower()}, expected a {kind.name.lower()}")

    def car(self, ref: Value) -> Value:
        self._expect(ref, Kind.PAIR, "CAR")
        return _decode(self._slots[ref, 0])

    def cdr(self, ref: Value) -> Value:
        self._expect(ref, Kind.PAIR, "CDR")
        return _decode(self._slots[ref, 1])

    def integer_value(self, ref: Value) -> int:
        self._expect(ref, Kind.INTEGER, "Integer value")
        return int(self._slots[ref, 0])

    def symbol_name(self, ref: Value) -> str:
        self._expect(ref, Kind.SYMBOL, "Symbol name")
        return self._spellings[int(self._slots[ref, 0])]

    def native(self, ref: Value) -> NativeProcedure:
        self._expect(ref, Kind.NATIVE, "Native procedure")
        return self._natives[int(self._slots[ref, 0])]

    def lambda_parts(self, ref: Value) -> tuple[Value, Value, Value]:
        """Return (params, body, env) of a Lambda cell."""
        self._expect(ref, Kind.LAMBDA, "Lambda parts")
        params, body, env = self._slots[ref]
        return _decode(params), _decode(body), _decode(env)

    def iter_list(self, ref: Value) -> Iterator[Value]:
        """Yield the elements of a proper list; an improper tail raises LispTypeError."""
        while ref is not Nil:
            yield self.car(ref)
            ref = self.cdr(ref)

    def list_from(self, items: Iterable[Value]) -> Value:
        """Build a proper list from `items`, keeping them rooted while consing."""
        items = list(items)
        with self.rooted(*items) as keep:
            result: Value = Nil
            for item in reversed(items):
                result = self.cons(item, result)
                keep(result)
        return result

    # ----------------- Roots -----------------
    @contextmanager
    def rooted(self, *refs: Value):
        """Protect `refs` from collection for the duration of the block.

        Yields a callable that roots further values in the same frame.
        """
        mark = len(self._roots)
        self._roots.extend(refs)
        try:
            yield self._roots.append
        finally:
            del self._roots[mark:]

    def add_root_source(self, source: Callable[[], Iterable[Value]]) -> None:
        self._root_sources.append(source)

    # ----------------- Collection hook -----------------
    def collect(self) -> int:
        """Mark from every root, sweep the rest onto the free list; return cells freed."""
        logger.info("Running gc")
        self.collections += 1
        top = self._top
        marked = np.zeros(top, dtype=bool)

        stack: list[Value] = list(self._roots)
        for source in self._root_sources:
            stack.extend(source())

        tags, slots = self._tags, self._slots
        while stack:
            ref = stack.pop()
            if ref is Nil or marked[ref]:
                continue
            marked[ref] = True
            kind = tags[ref]
            if kind == Kind.PAIR:
                stack.extend(_decode(w) for w in slots[ref, :2])
            elif kind == Kind.LAMBDA:
                stack.extend(_decode(w) for w in slots[ref])

        live = tags[:top] != Kind.FREE
        dead = np.flatnonzero(live & ~marked)
        tags[dead] = Kind.FREE
        slots[dead] = 0
        # lowest indices are handed out first
        self._free = np.flatnonzero(tags[:top] == Kind.FREE)[::-1].tolist()
        logger.info("gc freed %d cells, %d live", len(dead), int(live.sum()) - len(dead))
        return len(dead)

    def stats(self) -> dict[str, int]:
        return {
            "capacity": self._capacity,
            "top": self._top,
            "free": len(self._free) + self._capacity - self._top,
            "allocations": self.allocations,
            "collections": self.collections,
        }


def _encode(ref: Value) -> int:
    return NIL_WORD if ref is Nil else ref


def _decode(word) -> Value:
    word = int(word)
    return Nil if word == NIL_WORD else Ref(word)
