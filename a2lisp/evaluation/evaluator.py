"""Core evaluator for the a2lisp interpreter.

Dispatches special forms by the identity of the head symbol and otherwise
evaluates the operator and the operands left to right before handing off to
`apply`. Errors propagate as exceptions; nothing is caught here.
"""

from __future__ import annotations

from a2lisp import Value
from a2lisp.errors import LispTypeError, LispUnboundSymbol
from a2lisp.evaluation.apply import apply
from a2lisp.types.heap import Kind
from a2lisp.types.nil import Nil


def evaluate(expr: Value, env: Value, interp) -> Value:
    """Evaluate `expr` in `env` using the heap, symbols and globals of `interp`."""
    if expr is Nil:
        return Nil

    heap = interp.heap
    kind = heap.kind_of(expr)

    if kind is Kind.INTEGER:
        return expr

    if kind is Kind.SYMBOL:
        value = interp.environment.lookup(expr, env)
        if value is None:
            raise LispUnboundSymbol(f"Undefined symbol. {heap.symbol_name(expr)}")
        return value

    if kind is Kind.PAIR:
        with heap.rooted(expr, env) as keep:
            head = heap.car(expr)
            # --- Special forms handling ---
            special = interp.special_forms.get(head)
            if special is not None:
                return special(heap.cdr(expr), env, interp, evaluate)

            proc = evaluate(head, env, interp)
            keep(proc)
            args = evaluate_operands(heap.cdr(expr), env, interp)
            keep(args)
            return apply(proc, args, interp, evaluate)

    raise LispTypeError(f"I don't know how to evaluate that. {interp.write(expr)}")


def evaluate_operands(operands: Value, env: Value, interp) -> Value:
    """Evaluate each operand left to right and return the results as a fresh list."""
    heap = interp.heap
    with heap.rooted() as keep:
        values = []
        for operand in heap.iter_list(operands):
            value = evaluate(operand, env, interp)
            keep(value)
            values.append(value)
        return heap.list_from(values)
