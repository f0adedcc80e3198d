import pytest

from a2lisp import errors
from a2lisp.types.heap import Kind
from a2lisp.types.nil import Nil

# -----------------------------------------------------
# Tests
# -----------------------------------------------------


@pytest.mark.parametrize(
    "source,expected",
    [
        ("42", "42"),
        ("NIL", "NIL"),
        ("()", "NIL"),
        ("'A", "A"),
        ("'(A B)", "(A B)"),
        ("(QUOTE (PLUS 1 2))", "(PLUS 1 2)"),
        ("'(1 'X)", "(1 (QUOTE X))"),
        ("(PLUS 1 2)", "3"),
        ("(CONS 1 (CONS 2 NIL))", "(1 2)"),
        ("(CAR '(A B))", "A"),
        ("(CDR '(A B))", "(B)"),
        ("(if NIL 1 2)", "2"),
        ("(if 0 1 2)", "1"),
        ("(if '(x) 1 2)", "1"),
        ("(if NIL 1)", "NIL"),
        ("((LAMBDA (X) (PLUS X 1)) 41)", "42"),
        ("((LAMBDA () 7))", "7"),
        ("((LAMBDA (X Y) (CONS Y X)) 1 2)", "(2 . 1)"),
        ("(LAMBDA (X) X)", "#<LAMBDA>"),
        ("CAR", "#<NATIVE>"),
        ("(EVAL '(PLUS 2 3))", "5"),
        ("(EVAL (CONS 'MUL '(6 7)))", "42"),
        ("(define x 5)", "X"),
    ],
)
def test_single_forms(run, source, expected):
    assert run(source) == expected


def test_define_then_call(run):
    run("(DEFINE ADD1 (LAMBDA (X) (PLUS X 1)))")
    assert run("(ADD1 41)") == "42"


def test_define_returns_the_name_symbol(interp):
    result = interp.eval("(DEFINE FOO 1)")
    assert result == interp.symbols.intern("foo")


def test_forward_reference_between_globals(run):
    run("(define F (lambda (n) (if n (G) 0)))")
    run("(define G (lambda () 1))")
    assert run("(F 1)") == "1"


def test_mutual_recursion(run):
    run("""
        (define EVENP (lambda (l) (if l (ODDP (cdr l)) 't)))
        (define ODDP (lambda (l) (if l (EVENP (cdr l)) NIL)))
    """)
    assert run("(EVENP '(a b c d))") == "T"
    assert run("(ODDP '(a b c d))") == "NIL"
    assert run("(ODDP '(a b c))") == "T"


def test_closures_capture_their_environment(run):
    run("(define ADDER (lambda (n) (lambda (x) (plus x n))))")
    run("(define ADDTEN (ADDER 10))")
    assert run("(ADDTEN 5)") == "15"
    assert run("((ADDER 1) 1)") == "2"


def test_lambda_body_sees_its_own_env_not_the_callers(run):
    run("(define N 100)")
    run("(define GETN (lambda () N))")
    assert run("((lambda (N) (GETN)) 1)") == "100"


def test_lexical_shadowing(run):
    assert run("((lambda (x) ((lambda (x) x) 2)) 1)") == "2"


def test_define_inside_lambda_is_global(run):
    run("((lambda (v) (define INNER v)) 9)")
    assert run("INNER") == "9"


def test_operands_evaluated_left_to_right(run):
    assert run("(cons (define ORDER 1) (define ORDER 2))") == "(ORDER . ORDER)"
    assert run("ORDER") == "2"


def test_if_evaluates_exactly_one_branch(run):
    run("(if 1 (define TAKEN 1) (define SKIPPED 1))")
    assert run("TAKEN") == "1"
    with pytest.raises(errors.LispUnboundSymbol):
        run("SKIPPED")


def test_recursion_over_lists(run):
    run("(define LEN (lambda (l) (if l (plus 1 (LEN (cdr l))) 0)))")
    assert run("(LEN '(a b c d e f g))") == "7"


def test_eval_uses_the_global_environment(run):
    run("(define Z 1)")
    assert run("((lambda (Z) (EVAL 'Z)) 2)") == "1"


def test_quote_returns_the_same_structure(interp):
    value = interp.eval("'(A B)")
    assert interp.heap.kind_of(value) is Kind.PAIR


def test_empty_input_is_nil(interp):
    assert interp.eval("") is Nil


# ------------------ Errors ------------------

def test_unbound_symbol(run):
    with pytest.raises(errors.LispUnboundSymbol, match="Undefined symbol"):
        run("NOWHERE")


@pytest.mark.parametrize("call", ["(ONE)", "(ONE 1 2)"])
def test_arity_mismatch_does_not_evaluate_body(run, call):
    run("(define ONE (lambda (x) (define HIT x)))")
    with pytest.raises(errors.LispArityError, match="Argument count mismatch"):
        run(call)
    with pytest.raises(errors.LispUnboundSymbol):
        run("HIT")


@pytest.mark.parametrize("source", ["(1 2)", "('A)", "(NIL)", "(('X) 1)"])
def test_not_callable(run, source):
    with pytest.raises(errors.LispNotCallable, match="Type is not callable"):
        run(source)


def test_car_of_nil_is_an_error(run):
    with pytest.raises(errors.LispTypeError):
        run("(CAR NIL)")


def test_evaluating_a_procedure_value_is_an_error(run):
    with pytest.raises(errors.LispTypeError, match="evaluate"):
        run("(EVAL CAR)")


@pytest.mark.parametrize(
    "source",
    ["(define 1 2)", "(lambda (1) 1)", "(lambda x x)", "(lambda (a . b) a)"],
)
def test_malformed_special_forms(interp, source):
    # LispInvalidSymbol is a LispSyntaxError; the reader has no dotted syntax
    with pytest.raises(errors.LispSyntaxError):
        interp.eval(source)


def test_errors_do_not_corrupt_the_session(run):
    run("(define KEEP '(1 2 3))")
    with pytest.raises(errors.LispError):
        run("(cons KEEP (car NIL))")
    assert run("KEEP") == "(1 2 3)"


def test_sessions_are_independent():
    from a2lisp.interpreter import Interpreter

    first, second = Interpreter(), Interpreter()
    first.eval("(define ONLY 1)")
    with pytest.raises(errors.LispUnboundSymbol):
        second.eval("ONLY")


def test_malformed_lambda_parameters_keep_the_underlying_error(interp):
    with pytest.raises(errors.LispInvalidSymbol, match="Malformed LAMBDA") as info:
        interp.eval("(lambda x x)")
    assert isinstance(info.value.__cause__, errors.LispTypeError)
