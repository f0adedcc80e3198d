from __future__ import annotations

from timeit import timeit

from a2lisp.interpreter import Interpreter


def time_eval(code: str, rounds: int, heap_cells: int, max_heap_cells: int | None = None) -> float:
    """Time evaluation only: the form is read once and evaluated `rounds` times."""
    itp = Interpreter(heap_cells, max_heap_cells)
    itp.eval(LIBRARY)
    expr = itp.read(code)
    with itp.heap.rooted(expr):
        # Warmup
        itp.evaluate(expr)
        # Timed
        return timeit(lambda: itp.evaluate(expr), number=rounds)


def bench_lookup_chain(n_bindings: int = 1000, n_lookups: int = 10000) -> float:
    """Lookup of a global through a long lexical chain."""
    itp = Interpreter(heap_cells=4 * n_bindings)
    key = itp.symbols.intern("ANSWER")
    itp.environment.define_global(key, itp.heap.make_integer(42))
    filler = itp.symbols.intern("FILLER")
    env = itp.global_env
    with itp.heap.rooted() as keep:
        for _ in range(n_bindings):
            env = itp.environment.bind(filler, itp.heap.make_integer(0), env)
            keep(env)
        # Warmup
        for _ in range(1000):
            itp.environment.lookup(key, env)
        return timeit(lambda: itp.environment.lookup(key, env), number=n_lookups)


LIBRARY = r"""
(define LEN (lambda (l) (if l (plus 1 (LEN (cdr l))) 0)))
(define COPY (lambda (l) (if l (cons (car l) (COPY (cdr l))) NIL)))
(define XS '(1 2 3 4 5 6 7 8 9 10 11 12 13 14 15 16 17 18 19 20))
"""

LAMBDA_APPLY_CODE = "((lambda (x y) (plus x y)) 1 2)"

LIST_LENGTH_CODE = "(LEN XS)"

LIST_COPY_CODE = "(LEN (COPY (COPY XS)))"


def _print_pair(name: str, code: str, rounds: int) -> None:
    roomy = time_eval(code, rounds, heap_cells=1 << 16)
    tight = time_eval(code, rounds, heap_cells=512, max_heap_cells=512)
    print(f"Benchmark: {name}")
    print(f"  roomy heap: {roomy:.6f}s  |  512-cell heap (collecting): {tight:.6f}s  [rounds={rounds}]")


if __name__ == "__main__":
    print("Benchmark: global lookup through a 1000-binding chain")
    print(f"  time: {bench_lookup_chain():.6f}s")

    _print_pair("lambda application", LAMBDA_APPLY_CODE, rounds=20000)
    _print_pair("list length (recursive)", LIST_LENGTH_CODE, rounds=2000)
    _print_pair("list copy twice", LIST_COPY_CODE, rounds=1000)
