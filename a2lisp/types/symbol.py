from __future__ import annotations

from typing import Iterator

from a2lisp import Ref
from a2lisp.errors import LispInvalidSymbol
from a2lisp.types.heap import Heap

SYMBOL_TABLE_SIZE = 255
MAX_SYMBOL_LENGTH = 31


def symbol_hash(spelling: str) -> int:
    """XOR-fold of the lower-cased character codes.

    Order-independent on purpose ("AB" and "BA" share a bucket); it is a weak
    hash and buckets are searched linearly.
    """
    h = 0
    for ch in spelling:
        h ^= ord(ch.lower())
    return h % SYMBOL_TABLE_SIZE


class SymbolTable:
    """Interns spellings so that each one maps to exactly one Symbol cell.

    Spellings compare case-insensitively and are stored upper-cased. Buckets are
    append-only for the lifetime of the table, so symbol identity is stable and
    `a is b` (or `a == b` on Refs) is symbol equality.
    """

    __slots__ = ("heap", "buckets")

    def __init__(self, heap: Heap):
        self.heap = heap
        self.buckets: list[list[Ref]] = [[] for _ in range(SYMBOL_TABLE_SIZE)]
        heap.add_root_source(self.roots)

    def intern(self, spelling: str) -> Ref:
        if not spelling:
            raise LispInvalidSymbol("Symbol spelling is empty")
        if len(spelling) > MAX_SYMBOL_LENGTH:
            raise LispInvalidSymbol(
                f"Symbol longer than {MAX_SYMBOL_LENGTH} characters: {spelling[:MAX_SYMBOL_LENGTH]}..."
            )
        canonical = spelling.upper()
        bucket = self.buckets[symbol_hash(spelling)]
        for sym in bucket:
            if self.heap.symbol_name(sym) == canonical:
                return sym
        sym = self.heap.make_symbol(canonical)
        bucket.append(sym)
        return sym

    def roots(self) -> Iterator[Ref]:
        for bucket in self.buckets:
            yield from bucket

    def __len__(self) -> int:
        return sum(len(b) for b in self.buckets)

    def __contains__(self, spelling: str) -> bool:
        canonical = spelling.upper()
        return any(
            self.heap.symbol_name(sym) == canonical
            for sym in self.buckets[symbol_hash(spelling)]
        )
