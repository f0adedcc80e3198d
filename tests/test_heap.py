import pytest

from a2lisp.errors import LispAllocationExhausted, LispTypeError
from a2lisp.types.heap import Heap, Kind, to_word
from a2lisp.types.nil import Nil


def test_constructors_tag_cells():
    heap = Heap(8)
    n = heap.make_integer(7)
    p = heap.cons(n, Nil)
    assert heap.kind_of(n) is Kind.INTEGER
    assert heap.kind_of(p) is Kind.PAIR
    assert heap.integer_value(heap.car(p)) == 7
    assert heap.cdr(p) is Nil


def test_lambda_parts_round_trip():
    heap = Heap(8)
    params = heap.cons(heap.make_symbol("X"), Nil)
    body = heap.make_integer(1)
    lam = heap.make_lambda(params, body, Nil)
    assert heap.lambda_parts(lam) == (params, body, Nil)


def test_native_side_table():
    heap = Heap(8)
    ref = heap.make_native("ID", lambda interp, args: args)
    proc = heap.native(ref)
    assert proc.name == "ID"
    assert proc(None, Nil) is Nil


@pytest.mark.parametrize("accessor", ["car", "cdr"])
def test_pair_accessors_reject_nil_and_atoms(accessor):
    heap = Heap(8)
    with pytest.raises(LispTypeError):
        getattr(heap, accessor)(Nil)
    with pytest.raises(LispTypeError):
        getattr(heap, accessor)(heap.make_integer(1))


def test_kind_of_nil_is_a_type_error():
    with pytest.raises(LispTypeError):
        Heap(4).kind_of(Nil)


def test_collection_reclaims_unrooted_cells_without_growing():
    heap = Heap(8, 8)
    for i in range(100):
        heap.make_integer(i)
    stats = heap.stats()
    assert stats["capacity"] == 8
    assert stats["collections"] >= 12
    assert stats["allocations"] == 100


def test_rooted_values_survive_collection():
    heap = Heap(8, 8)
    with heap.rooted() as keep:
        lst = heap.list_from([heap.make_integer(i) for i in range(3)])
        keep(lst)
        for i in range(50):
            heap.make_integer(-i)
        assert [heap.integer_value(x) for x in heap.iter_list(lst)] == [0, 1, 2]


def test_root_sources_are_marked():
    heap = Heap(4, 4)
    kept = heap.make_integer(99)
    heap.add_root_source(lambda: [kept])
    for i in range(20):
        heap.make_integer(i)
    assert heap.integer_value(kept) == 99


def test_freed_cells_are_reused():
    heap = Heap(4, 4)
    first = [heap.make_integer(i) for i in range(4)]
    again = heap.make_integer(5)
    assert again in first
    assert heap.stats()["top"] == 4


def test_heap_grows_when_live_data_fills_it():
    heap = Heap(8, 64)
    with heap.rooted() as keep:
        for i in range(20):
            keep(heap.make_integer(i))
        assert heap.stats()["capacity"] >= 32


def test_exhaustion_is_fatal():
    heap = Heap(8, 8)
    with heap.rooted() as keep:
        for i in range(8):
            keep(heap.make_integer(i))
        with pytest.raises(LispAllocationExhausted):
            heap.make_integer(8)


def test_roots_released_after_exception():
    heap = Heap(4, 4)
    with pytest.raises(RuntimeError):
        with heap.rooted(heap.make_integer(1)):
            raise RuntimeError("abandon")
    # nothing is pinned any more, so the heap can be refilled
    for i in range(10):
        heap.make_integer(i)
    assert heap.stats()["capacity"] == 4


@pytest.mark.parametrize(
    "n,expected",
    [
        (0, 0),
        (2**63 - 1, 2**63 - 1),
        (2**63, -(2**63)),
        (-(2**63) - 1, 2**63 - 1),
        (2**64 + 5, 5),
    ],
)
def test_to_word_wraps(n, expected):
    assert to_word(n) == expected
