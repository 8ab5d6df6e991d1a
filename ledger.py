"""
Group and expense management on an in-memory Ledger.

These helpers validate records before they reach the balance engine, which
assumes well-formed input. They mutate the ledger in place; balances and
settlements are recomputed from the ledger on demand.
"""
from __future__ import annotations
import logging
import math
import uuid
from typing import Dict, List, Optional

from balances import UnknownGroupError, compute_group_balances
from config import Settings
from models import SPLIT_EQUAL, Expense, Group, Ledger
from settlements import plan_minimal_settlements, plan_settlements
from splits import per_person_amount
from utils import parse_date, round_money, safe_float, today_str

logger = logging.getLogger(__name__)


def clean_members(members: List[str]) -> List[str]:
    """Strip names, drop blanks and duplicates, keep order"""
    out = []
    for m in members:
        name = (m or "").strip()
        if name and name not in out:
            out.append(name)
    return out


def new_group(name: str, members: List[str], description: str = "", group_id: Optional[str] = None) -> Group:
    """Validate and build a Group"""
    if not (name or "").strip():
        raise ValueError("Group name is required.")
    valid = clean_members(members)
    if not valid:
        raise ValueError("At least one member is required.")
    return Group(
        id=group_id or str(uuid.uuid4()),
        name=name.strip(),
        description=(description or "").strip(),
        members=valid,
    )


def get_group(ledger: Ledger, group_id: str) -> Optional[Group]:
    for g in ledger.groups:
        if g.id == group_id:
            return g
    return None


def active_group(ledger: Ledger) -> Optional[Group]:
    """Currently selected group, falling back to the first one"""
    return get_group(ledger, ledger.active_group_id) or (ledger.groups[0] if ledger.groups else None)


def add_group(ledger: Ledger, group: Group) -> Group:
    """Add a group and make it the active one"""
    if get_group(ledger, group.id) is not None:
        raise ValueError(f"Group {group.id!r} already exists.")
    ledger.groups.append(group)
    ledger.active_group_id = group.id
    logger.info("Added group %s (%d members)", group.name, len(group.members))
    return group


def update_group(ledger: Ledger, group_id: str, name: str, members: List[str], description: str = "") -> Group:
    """
    Replace name, description and members of an existing group.
    Stored expenses keep the per-person amount they were created with.
    """
    if get_group(ledger, group_id) is None:
        raise ValueError(f"Unknown group {group_id!r}.")
    updated = new_group(name, members, description, group_id=group_id)
    ledger.groups = [updated if g.id == group_id else g for g in ledger.groups]
    return updated


def delete_group(ledger: Ledger, group_id: str) -> None:
    """Remove a group together with its expenses"""
    ledger.groups = [g for g in ledger.groups if g.id != group_id]
    dropped = [e for e in ledger.expenses if e.group_id == group_id]
    ledger.expenses = [e for e in ledger.expenses if e.group_id != group_id]
    if ledger.active_group_id == group_id:
        ledger.active_group_id = ledger.groups[0].id if ledger.groups else ""
    logger.info("Deleted group %s and %d expenses", group_id, len(dropped))


def new_expense(
    group: Group,
    description: str,
    amount,
    paid_by: str,
    date: Optional[str] = None,
    category: str = "Other",
    split_type: str = SPLIT_EQUAL,
    currency: str = "USD",
    expense_id: Optional[str] = None,
) -> Expense:
    """Validate and build an Expense, computing the per-person share"""
    if not (description or "").strip():
        raise ValueError("Description is required.")
    amt = safe_float(amount, None)
    if amt is None or not math.isfinite(amt) or amt <= 0:
        raise ValueError("Amount must be a positive number.")
    if paid_by not in group.members:
        raise ValueError(f"{paid_by!r} is not a member of {group.name!r}.")
    d = (date or today_str()).strip()
    try:
        parse_date(d)
    except ValueError:
        raise ValueError("Date must be YYYY-MM-DD.") from None

    amt = round_money(amt)
    return Expense(
        id=expense_id or str(uuid.uuid4()),
        description=description.strip(),
        amount=amt,
        paid_by=paid_by,
        group_id=group.id,
        date=d,
        category=(category or "Other").strip(),
        currency=currency,
        split_type=split_type,
        per_person_amount=per_person_amount(amt, group.members, split_type),
    )


def add_expense(ledger: Ledger, expense: Expense) -> Expense:
    if get_group(ledger, expense.group_id) is None:
        raise ValueError(f"Unknown group {expense.group_id!r}.")
    ledger.expenses.append(expense)
    return expense


def delete_expense(ledger: Ledger, expense_id: str) -> bool:
    """Remove an expense; returns False if it was not found"""
    before = len(ledger.expenses)
    ledger.expenses = [e for e in ledger.expenses if e.id != expense_id]
    return len(ledger.expenses) < before


def group_report(ledger: Ledger, group_id: str, settings: Optional[Settings] = None, exact: bool = False) -> Dict[str, object]:
    """
    Balances and settlement plan for one group.
    Returns {"balances": {member: balance}, "settlements": [Settlement, ...]}
    With *exact*, the minimum-transfer planner is used for small groups.
    """
    settings = settings or Settings()
    group = get_group(ledger, group_id)
    if group is None:
        if settings.strict_group_refs:
            raise UnknownGroupError(f"Unknown group {group_id!r}.")
        return {"balances": {}, "settlements": []}
    balances = compute_group_balances(group, ledger.expenses)
    if exact:
        settlements = plan_minimal_settlements(balances, settings.settle_eps, settings.exact_solver_max_members)
    else:
        settlements = plan_settlements(balances, settings.settle_eps)
    return {"balances": balances, "settlements": settlements}
