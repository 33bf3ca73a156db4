"""Relative-order consistency of two archive listings."""

from __future__ import annotations

from typing import Sequence


def check_order_consistency(order1: Sequence[str], order2: Sequence[str]) -> bool:
    """Return True if names shared by both sequences appear in the same relative order.

    Identical sequences are always consistent. Otherwise a duplicate name on
    either side makes relative order ambiguous, so the result is False.
    Sequences with nothing in common are trivially consistent.
    """
    if list(order1) == list(order2):
        return True
    names1, names2 = set(order1), set(order2)
    if len(names1) != len(order1) or len(names2) != len(order2):
        return False
    common = names1 & names2
    return [n for n in order1 if n in common] == [n for n in order2 if n in common]
