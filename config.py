"""
Configuration and ledger snapshots for GroupSplit
"""
from __future__ import annotations
import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from typing import List, Optional

from models import Expense, Group, Ledger
from settlements import SETTLE_EPS
from utils import app_dir

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    "Food", "Utilities", "Accommodation", "Transport",
    "Entertainment", "Shopping", "Other",
]


@dataclass
class Settings:
    """Tunable behaviour of balance and settlement computation"""
    settle_eps: float = SETTLE_EPS
    default_currency: str = "USD"
    default_category: str = "Other"
    categories: List[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    strict_group_refs: bool = False  # raise on expenses of unknown groups
    exact_solver_max_members: int = 12


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from JSON file; missing file or keys fall back to defaults"""
    path = path or os.path.join(app_dir(), "settings.json")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return Settings()
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown settings in %s: %s", path, ", ".join(unknown))
    return Settings(**{k: v for k, v in data.items() if k in known})


def get_default_ledger() -> Ledger:
    """Demo ledger with two groups and a few expenses"""
    groups = [
        Group("g1", "Roommates", ["John", "Sara", "Miguel"], "Apartment expenses"),
        Group("g2", "Trip to Paris", ["John", "Lisa", "Tom", "Emily"], "Summer vacation"),
    ]
    expenses = [
        Expense("e1", "Groceries", 89.75, "John", "g1", "2023-11-15", 29.92, "Food"),
        Expense("e2", "Electricity Bill", 142.30, "Sara", "g1", "2023-11-18", 47.43, "Utilities"),
        Expense("e3", "Hotel Room", 850.00, "Lisa", "g2", "2023-08-12", 212.50, "Accommodation", "EUR"),
    ]
    return Ledger(groups=groups, expenses=expenses, active_group_id="g1")


def ledger_to_dict(ledger: Ledger) -> dict:
    """Convert Ledger object to dictionary for JSON serialization"""
    return {
        "version": ledger.version,
        "active_group_id": ledger.active_group_id,
        "groups": [asdict(g) for g in ledger.groups],
        "expenses": [asdict(e) for e in ledger.expenses],
    }


def dict_to_ledger(d: dict) -> Ledger:
    """Convert dictionary from JSON to Ledger object"""
    groups = [Group(**g) for g in d.get("groups", [])]
    exps = [Expense(**e) for e in d.get("expenses", [])]
    active = d.get("active_group_id") or (groups[0].id if groups else "")

    return Ledger(
        version=d.get("version", 1),
        groups=groups,
        expenses=exps,
        active_group_id=active,
    )
