import pytest

from a2lisp.interpreter import Interpreter

# Interpreter-level tests run twice:
# 1) with a roomy heap that rarely (if ever) collects ["roomy"]
# 2) with a tiny heap that fills up constantly, so the collector runs in the
#    middle of reading, evaluation and native calls ["tiny"]
# A value that is not rooted properly shows up as a wrong answer or a
# dangling-reference error in the second run.


@pytest.fixture(params=["roomy", "tiny"])
def heap_mode(request):
    return request.param


@pytest.fixture
def interp(heap_mode):
    if heap_mode == "tiny":
        return Interpreter(heap_cells=16)
    return Interpreter(heap_cells=4096)


@pytest.fixture
def run(interp):
    """Evaluate source text and return the printed value of its last form."""
    return interp.eval_to_string
