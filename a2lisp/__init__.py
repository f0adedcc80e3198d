# Core type aliases for the a2lisp data model.
# Every runtime value lives in the cell arena (a2lisp.types.heap) and is
# referred to by an integer handle (Ref). The empty-list sentinel Nil is the
# only value that is not a heap cell.
#
# Naming guidance:
# - Ref:   a handle to a live arena cell.
# - Value: what the reader produces and the evaluator consumes/returns (Ref or Nil).

import logging
from typing import Callable, NewType, Union

from a2lisp.types.nil import NilType

__version__ = "0.1.0"

Ref = NewType("Ref", int)
Value = Union[Ref, NilType]

# Evaluator function type: passed into special-form handlers
EvaluatorFn = Callable[..., Value]

# Native procedures are called as fn(interpreter, args) with args an evaluated Pair chain
NativeFn = Callable[..., Value]

logging.getLogger(__name__).addHandler(logging.NullHandler())
