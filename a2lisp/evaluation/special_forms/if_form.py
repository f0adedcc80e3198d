from a2lisp import EvaluatorFn, Value
from a2lisp.types.nil import Nil


def if_form(tail: Value, env: Value, interp, evaluate_fn: EvaluatorFn) -> Value:
    heap = interp.heap
    test = evaluate_fn(heap.car(tail), env, interp)
    branches = heap.cdr(tail)
    # Only NIL is false; integer zero is true
    if test is not Nil:
        return evaluate_fn(heap.car(branches), env, interp)
    alternative = heap.cdr(branches)
    if alternative is Nil:
        return Nil
    return evaluate_fn(heap.car(alternative), env, interp)
