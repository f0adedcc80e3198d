"""Application engine for a2lisp.

Native procedures receive the evaluated argument list as a Pair chain.
Lambdas bind formals to actuals pairwise on top of the environment they
captured (not the caller's) and evaluate their body there. No tail-call
elimination: every interpreted call nests a host call.
"""

from __future__ import annotations

from a2lisp import Value, EvaluatorFn
from a2lisp.errors import LispArityError, LispNotCallable
from a2lisp.types.heap import Kind
from a2lisp.types.nil import Nil


def apply_lambda(proc: Value, args: Value, interp, evaluate_fn: EvaluatorFn) -> Value:
    """Bind `args` to the formals of `proc` and evaluate its body.

    Raises LispArityError before touching the body when the counts differ.
    """
    heap = interp.heap
    params, body, call_env = heap.lambda_parts(proc)
    with heap.rooted(proc, args):
        formal, actual = params, args
        while formal is not Nil and actual is not Nil:
            call_env = interp.environment.bind(heap.car(formal), heap.car(actual), call_env)
            formal = heap.cdr(formal)
            actual = heap.cdr(actual)

        if formal is not Nil or actual is not Nil:
            raise LispArityError(
                f"Argument count mismatch. expected {_length(heap, params)}, got {_length(heap, args)}"
            )
        return evaluate_fn(body, call_env, interp)


def apply(proc: Value, args: Value, interp, evaluate_fn: EvaluatorFn) -> Value:
    """Apply either a native procedure or a Lambda to an evaluated argument list."""
    heap = interp.heap
    kind = None if proc is Nil else heap.kind_of(proc)
    if kind is Kind.NATIVE:
        with heap.rooted(args):
            return heap.native(proc)(interp, args)
    if kind is Kind.LAMBDA:
        return apply_lambda(proc, args, interp, evaluate_fn)
    raise LispNotCallable(f"Type is not callable. {interp.write(proc)}")


def _length(heap, lst: Value) -> int:
    return sum(1 for _ in heap.iter_list(lst))
