"""
Expense list filtering for display
"""
from __future__ import annotations
from datetime import date
from typing import Iterable, List, Optional

from models import Expense, ExpenseFilters
from utils import parse_date


def filter_expenses_by_date(
    expenses: Iterable[Expense],
    start: Optional[date],
    end: Optional[date]
) -> List[Expense]:
    """Filter expenses by date range (both ends inclusive)"""
    out = []
    for e in expenses:
        ed = parse_date(e.date)
        if start and ed < start:
            continue
        if end and ed > end:
            continue
        out.append(e)
    return out


def matches_search(e: Expense, term: str) -> bool:
    """Case-insensitive match against description, payer and category"""
    text = f"{e.description} {e.paid_by} {e.category}".lower()
    return term.lower() in text


def filter_expenses(
    expenses: Iterable[Expense],
    group_id: str,
    filters: Optional[ExpenseFilters] = None
) -> List[Expense]:
    """
    Expenses of *group_id* that pass every active filter.
    Empty category / search term means "any".
    """
    f = filters or ExpenseFilters()
    out = [e for e in expenses if e.group_id == group_id]
    if f.start or f.end:
        out = filter_expenses_by_date(out, f.start, f.end)
    if f.category:
        out = [e for e in out if e.category == f.category]
    if f.search_term:
        out = [e for e in out if matches_search(e, f.search_term)]
    return out


def unique_categories(expenses: Iterable[Expense], group_id: str) -> List[str]:
    """Categories used in a group, in first-seen order"""
    seen = []
    for e in expenses:
        if e.group_id == group_id and e.category not in seen:
            seen.append(e.category)
    return seen


def has_active_filters(filters: ExpenseFilters) -> bool:
    return bool(filters.start or filters.end or filters.category or filters.search_term)
