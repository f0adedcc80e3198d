"""Text rendering of a2lisp values."""

from __future__ import annotations

from io import StringIO

from a2lisp import Value
from a2lisp.types.heap import Heap, Kind
from a2lisp.types.nil import Nil

NIL_TEXT = "NIL"
OPAQUE = {
    Kind.NATIVE: "#<NATIVE>",
    Kind.LAMBDA: "#<LAMBDA>",
    Kind.GLOBAL: "#<ENVIRONMENT>",
}


def write(heap: Heap, value: Value) -> str:
    with StringIO() as buffer:
        _write(heap, value, buffer)
        return buffer.getvalue()


def _write(heap: Heap, value: Value, out: StringIO) -> None:
    if value is Nil:
        out.write(NIL_TEXT)
        return
    kind = heap.kind_of(value)
    if kind is Kind.INTEGER:
        out.write(str(heap.integer_value(value)))
    elif kind is Kind.SYMBOL:
        out.write(heap.symbol_name(value))
    elif kind is Kind.PAIR:
        _write_pair(heap, value, out)
    else:
        out.write(OPAQUE[kind])


def _write_pair(heap: Heap, pair: Value, out: StringIO) -> None:
    out.write("(")
    while True:
        _write(heap, heap.car(pair), out)
        rest = heap.cdr(pair)
        if rest is Nil:
            break
        if not heap.is_pair(rest):
            # Improper list
            out.write(" . ")
            _write(heap, rest, out)
            break
        out.write(" ")
        pair = rest
    out.write(")")
