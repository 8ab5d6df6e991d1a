"""
Utility functions for GroupSplit
"""
from __future__ import annotations
import os
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal


def today_str() -> str:
    """Get today's date as ISO string"""
    return date.today().isoformat()


def parse_date(s: str) -> date:
    """Parse YYYY-MM-DD date string"""
    return datetime.strptime(s.strip(), "%Y-%m-%d").date()


def safe_float(x, default=0.0):
    """Convert value to float safely, returning default on error"""
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def round_money(x: float) -> float:
    """Round to 2 decimals, halves away from zero"""
    return float(Decimal(str(x)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def app_dir() -> str:
    """
    Get application data directory: ~/.groupsplit
    (overridable with GROUPSPLIT_HOME). Creates directory if it doesn't exist.
    """
    path = os.environ.get("GROUPSPLIT_HOME") or os.path.expanduser("~/.groupsplit")
    os.makedirs(path, exist_ok=True)
    return path
