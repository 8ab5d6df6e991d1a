"""
Split strategies: how an expense amount is divided among group members.

Only the equal split is implemented. ``Expense.split_type`` selects the
strategy, so percentage or exact-share splits can be registered here later
without touching the balance engine, which only reads the stored
``per_person_amount``.
"""
from __future__ import annotations
from typing import Callable, Dict, List

from models import SPLIT_EQUAL


def equal_share(amount: float, members: List[str]) -> float:
    """Per-person share when *amount* is divided evenly across *members*"""
    if not members:
        raise ValueError("Cannot split an expense across a group with no members.")
    return float(amount) / len(members)


SPLIT_STRATEGIES: Dict[str, Callable[[float, List[str]], float]] = {
    SPLIT_EQUAL: equal_share,
}


def per_person_amount(amount: float, members: List[str], split_type: str = SPLIT_EQUAL) -> float:
    """Compute the per-person share for *split_type*"""
    try:
        strategy = SPLIT_STRATEGIES[split_type]
    except KeyError:
        raise ValueError(
            f"Unsupported split type {split_type!r}; supported: {', '.join(sorted(SPLIT_STRATEGIES))}."
        ) from None
    return strategy(amount, members)
