from a2lisp import EvaluatorFn, Value


def quote_form(tail: Value, env: Value, interp, evaluate_fn: EvaluatorFn) -> Value:
    """(QUOTE datum) returns datum unevaluated."""
    return interp.heap.car(tail)
