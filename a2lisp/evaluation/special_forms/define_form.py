from a2lisp import EvaluatorFn, Value
from a2lisp.errors import LispInvalidSymbol


def define_form(tail: Value, env: Value, interp, evaluate_fn: EvaluatorFn) -> Value:
    """
    (DEFINE name value)
    Always binds in the global frame, whatever the lexical nesting; returns the name.
    """
    heap = interp.heap
    name = heap.car(tail)
    if not heap.is_symbol(name):
        raise LispInvalidSymbol(f"DEFINE expects a symbol name, got {interp.write(name)}")
    value = evaluate_fn(heap.car(heap.cdr(tail)), env, interp)
    interp.environment.define_global(name, value)
    return name
