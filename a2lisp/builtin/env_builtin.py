"""Native procedures for the a2lisp runtime.

Each native is called as fn(interp, args) where args is the already-evaluated
argument list (a Pair chain), and returns one value.
"""
from __future__ import annotations

from a2lisp import Value
from a2lisp.errors import LispArithmeticError, LispArityError, LispTypeError
from a2lisp.types.heap import Kind, to_word
from a2lisp.types.nil import Nil


def _arguments(interp, args: Value, name: str, count: int) -> list[Value]:
    values = list(interp.heap.iter_list(args))
    if len(values) != count:
        raise LispArityError(f"{name} expects {count} arguments, got {len(values)}")
    return values


def _integers(interp, args: Value, name: str) -> tuple[int, int]:
    heap = interp.heap
    a, b = _arguments(interp, args, name, 2)
    if not (heap.is_kind(a, Kind.INTEGER) and heap.is_kind(b, Kind.INTEGER)):
        raise LispTypeError(f"{name} expects integer arguments")
    return heap.integer_value(a), heap.integer_value(b)


# -------------------------------
# List manipulation
# -------------------------------
def cons(interp, args: Value) -> Value:
    first, rest = _arguments(interp, args, "CONS", 2)
    return interp.heap.cons(first, rest)


def car(interp, args: Value) -> Value:
    (pair,) = _arguments(interp, args, "CAR", 1)
    return interp.heap.car(pair)


def cdr(interp, args: Value) -> Value:
    (pair,) = _arguments(interp, args, "CDR", 1)
    return interp.heap.cdr(pair)


# -------------------------------
# Arithmetic (64-bit wrapping)
# -------------------------------
def plus(interp, args: Value) -> Value:
    a, b = _integers(interp, args, "PLUS")
    return interp.heap.make_integer(to_word(a + b))


def minus(interp, args: Value) -> Value:
    a, b = _integers(interp, args, "MINUS")
    return interp.heap.make_integer(to_word(a - b))


def mul(interp, args: Value) -> Value:
    a, b = _integers(interp, args, "MUL")
    return interp.heap.make_integer(to_word(a * b))


def div(interp, args: Value) -> Value:
    """Integer division truncating toward zero."""
    a, b = _integers(interp, args, "DIV")
    if b == 0:
        raise LispArithmeticError("Division by zero")
    quotient = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        quotient = -quotient
    return interp.heap.make_integer(to_word(quotient))


# -------------------------------
# Miscellaneous
# -------------------------------
def eval_builtin(interp, args: Value) -> Value:
    """(EVAL expr) evaluates an already-evaluated expression in the global environment."""
    (expr,) = _arguments(interp, args, "EVAL", 1)
    return interp.evaluate(expr)


NATIVES = {
    "CONS": cons,
    "CAR": car,
    "CDR": cdr,
    "PLUS": plus,
    "MINUS": minus,
    "MUL": mul,
    "DIV": div,
    "EVAL": eval_builtin,
}


def register(interp) -> None:
    """Register all native procedures and constants in the interpreter's global frame."""
    for name, fn in NATIVES.items():
        interp.define_native(name, fn)
    interp.environment.define_global(interp.symbols.intern("NIL"), Nil)
