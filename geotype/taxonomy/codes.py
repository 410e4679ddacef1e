"""Packing of taxonomy paths into integer type codes.

A code starts from a single marker bit and every path segment appends a
fixed-width sibling index below it, so the first segment lives in the most
significant bits and codes of different depth never collide.
"""
from __future__ import annotations

from typing import Iterable, List

TypeCode = int

EMPTY_CODE: TypeCode = 1
LEVEL_BITS = 7
MAX_LEVELS = 4
MAX_SIBLING_INDEX = (1 << LEVEL_BITS) - 1


class CodeError(ValueError):
    """Raised when a path cannot be represented as a type code."""


def depth(code: TypeCode) -> int:
    """Return the number of path segments packed into the code."""
    if code < EMPTY_CODE:
        raise CodeError(f"Invalid type code: {code}")
    return (code.bit_length() - 1) // LEVEL_BITS


def push_value(code: TypeCode, index: int) -> TypeCode:
    """Append one sibling index to the code."""
    if not 0 <= index <= MAX_SIBLING_INDEX:
        raise CodeError(f"Sibling index {index} does not fit in {LEVEL_BITS} bits")
    if depth(code) >= MAX_LEVELS:
        raise CodeError(f"Type code {code} already holds {MAX_LEVELS} levels")
    return (code << LEVEL_BITS) | index


def pack(indices: Iterable[int]) -> TypeCode:
    code = EMPTY_CODE
    for index in indices:
        code = push_value(code, index)
    return code


def split_code(code: TypeCode) -> List[int]:
    """Return the sibling indices of the code, root segment first."""
    levels = depth(code)
    mask = MAX_SIBLING_INDEX
    return [(code >> (LEVEL_BITS * (levels - 1 - level))) & mask for level in range(levels)]


def truncate(code: TypeCode, levels: int) -> TypeCode:
    """Keep only the first ``levels`` segments of the code."""
    current = depth(code)
    if levels >= current:
        return code
    return code >> (LEVEL_BITS * (current - max(levels, 0)))
