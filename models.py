"""
Data models for GroupSplit
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional


SPLIT_EQUAL = "equal"


@dataclass
class Group:
    """Group of members sharing expenses"""
    id: str
    name: str
    members: List[str]  # ordered, unique display names
    description: str = ""


@dataclass
class Expense:
    """Single shared expense inside a group"""
    id: str
    description: str
    amount: float  # 2-decimal fixed point
    paid_by: str
    group_id: str
    date: str  # YYYY-MM-DD
    per_person_amount: float  # amount / member count at creation time
    category: str = "Other"
    currency: str = "USD"  # display tag only
    split_type: str = SPLIT_EQUAL


@dataclass(frozen=True)
class Settlement:
    """Proposed payment from a debtor to a creditor"""
    from_member: str
    to_member: str
    amount: float

    def to_dict(self) -> Dict[str, object]:
        return {"from": self.from_member, "to": self.to_member, "amount": self.amount}


@dataclass
class MemberSummary:
    """Totals for one member of a group"""
    paid: float = 0.0
    share: float = 0.0  # consumed by this member

    @property
    def net(self) -> float:
        return self.paid - self.share


@dataclass
class ExpenseFilters:
    """Display filters applied to a group's expense list"""
    start: Optional[date] = None
    end: Optional[date] = None
    category: str = ""
    search_term: str = ""


@dataclass
class Ledger:
    """In-memory session: all groups and expenses"""
    groups: List[Group] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    active_group_id: str = ""
    version: int = 1
