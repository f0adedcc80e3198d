from __future__ import annotations
import os


# Defaults
_DEFAULT_HEAP_CELLS = 1024
_DEFAULT_MAX_HEAP_CELLS = 1 << 20
_DEFAULT_LOG_LEVEL = "WARNING"
_DEFAULT_RECURSION_LIMIT = 10000


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def get_heap_cells() -> int:
    return int_from_env('A2LISP_HEAP_CELLS', _DEFAULT_HEAP_CELLS)


def get_max_heap_cells() -> int:
    # never below the initial capacity
    return max(int_from_env('A2LISP_MAX_HEAP_CELLS', _DEFAULT_MAX_HEAP_CELLS), get_heap_cells())


def get_log_level() -> str:
    return os.environ.get('A2LISP_LOG_LEVEL', _DEFAULT_LOG_LEVEL).strip().upper() or _DEFAULT_LOG_LEVEL


def get_recursion_limit() -> int:
    return int_from_env('A2LISP_RECURSION_LIMIT', _DEFAULT_RECURSION_LIMIT)
