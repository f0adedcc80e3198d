from __future__ import annotations


class NilType:
    """The empty-list sentinel.

    Not a heap cell: it terminates proper lists and is the only false value.
    Compare with `is Nil`.
    """
    __slots__ = ()

    def __repr__(self): return "NIL"


Nil = NilType()
