"""
Balance computation for GroupSplit.

A balance is the signed net amount a member is owed (+) or owes (-) within a
group. Balances are always derived from the full expense list and never
stored.
"""
from __future__ import annotations
import logging
from typing import Dict, Iterable, List

from models import Expense, Group, MemberSummary

logger = logging.getLogger(__name__)


class UnknownGroupError(ValueError):
    """Expense refers to a group that is not part of the snapshot"""


def _apply_expense(balances: Dict[str, float], group: Group, e: Expense) -> None:
    """Credit the payer and debit every other member for one expense"""
    share = float(e.per_person_amount)
    # a payer outside the member list gets its own entry
    balances[e.paid_by] = balances.get(e.paid_by, 0.0) + float(e.amount) - share
    for m in group.members:
        if m != e.paid_by:
            balances[m] -= share


def compute_balances(
    groups: Iterable[Group],
    expenses: Iterable[Expense],
    strict: bool = False,
) -> Dict[str, Dict[str, float]]:
    """
    Compute per-group member balances.
    Returns dict mapping group id -> {member: balance}.
    Expenses whose group is missing are skipped, or raise UnknownGroupError
    when *strict* is set.
    """
    by_id = {g.id: g for g in groups}
    balances = {gid: {m: 0.0 for m in g.members} for gid, g in by_id.items()}

    for e in expenses:
        group = by_id.get(e.group_id)
        if group is None:
            if strict:
                raise UnknownGroupError(
                    f"Expense {e.id!r} references unknown group {e.group_id!r}."
                )
            logger.warning("Skipping expense %s: unknown group %s", e.id, e.group_id)
            continue
        _apply_expense(balances[group.id], group, e)

    logger.debug("Computed balances for %d groups", len(balances))
    return balances


def compute_group_balances(group: Group, expenses: Iterable[Expense]) -> Dict[str, float]:
    """Balances for a single group; expenses of other groups are ignored"""
    return compute_balances([group], [e for e in expenses if e.group_id == group.id])[group.id]


def balance_residue(balances: Dict[str, float]) -> float:
    """Sum of a group's balances; zero when the books are consistent"""
    return sum(balances.values())


def summarize_members(group: Group, expenses: Iterable[Expense]) -> Dict[str, MemberSummary]:
    """
    Compute paid / share totals for each member of *group*.
    net = paid - share matches the member's balance as long as every payer is a
    member; payments by outsiders are left out of the summary.
    """
    summary = {m: MemberSummary() for m in group.members}
    for e in expenses:
        if e.group_id != group.id:
            continue
        if e.paid_by in summary:
            summary[e.paid_by].paid += float(e.amount)
        for m in group.members:
            summary[m].share += float(e.per_person_amount)
    return summary


def group_total(group_id: str, expenses: Iterable[Expense]) -> float:
    """Total amount spent by a group"""
    return sum(float(e.amount) for e in expenses if e.group_id == group_id)


def members_with_balance(balances: Dict[str, float], eps: float = 0.01) -> List[str]:
    """Members whose balance is not settled (|balance| > eps)"""
    return [m for m, v in balances.items() if abs(v) > eps]
