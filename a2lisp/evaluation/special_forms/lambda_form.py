from a2lisp import EvaluatorFn, Value
from a2lisp.errors import LispInvalidSymbol, LispTypeError
from a2lisp.types.nil import Nil


def lambda_form(tail: Value, env: Value, interp, evaluate_fn: EvaluatorFn) -> Value:
    """(LAMBDA (params...) body) closes over `env` by reference.

    Only the first body expression is used; there is no implicit sequencing.
    """
    heap = interp.heap
    params = heap.car(tail)
    body_rest = heap.cdr(tail)
    body = Nil if body_rest is Nil else heap.car(body_rest)

    try:
        for param in heap.iter_list(params):
            if not heap.is_symbol(param):
                raise LispInvalidSymbol(f"LAMBDA parameter is not a symbol: {interp.write(param)}")
    except LispTypeError as ex:
        raise LispInvalidSymbol(f"Malformed LAMBDA parameter list: {interp.write(params)}") from ex

    return heap.make_lambda(params, body, env)
