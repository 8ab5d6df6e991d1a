"""
CSV export and import of expenses for GroupSplit
"""
from __future__ import annotations
import csv
import logging
from typing import List

from models import SPLIT_EQUAL, Expense

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    'id', 'group_id', 'date', 'description', 'category', 'paid_by',
    'amount', 'currency', 'split_type', 'per_person_amount',
]


def export_expenses_to_csv(expenses: List[Expense], filepath: str) -> None:
    """
    Export expenses list to CSV file
    CSV columns: id, group_id, date, description, category, paid_by, amount,
    currency, split_type, per_person_amount
    """
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)
        for e in expenses:
            writer.writerow([
                e.id,
                e.group_id,
                e.date,
                e.description,
                e.category,
                e.paid_by,
                e.amount,
                e.currency,
                e.split_type,
                e.per_person_amount,
            ])
    logger.info("Exported %d expenses to %s", len(expenses), filepath)


def import_expenses_from_csv(filepath: str) -> List[Expense]:
    """
    Import expenses list from CSV file
    Returns list of Expense objects; raises ValueError on a malformed row
    """
    expenses = []

    with open(filepath, 'r', encoding='utf-8') as f:
        reader = csv.DictReader(f)

        for line, row in enumerate(reader, start=2):
            try:
                expense = Expense(
                    id=row['id'],
                    group_id=row['group_id'],
                    date=row['date'],
                    description=row['description'],
                    category=row.get('category') or 'Other',
                    paid_by=row['paid_by'],
                    amount=float(row['amount']),
                    currency=row.get('currency') or 'USD',
                    split_type=row.get('split_type') or SPLIT_EQUAL,
                    per_person_amount=float(row['per_person_amount']),
                )
            except (KeyError, TypeError, ValueError) as ex:
                raise ValueError(f"{filepath}:{line}: malformed expense row ({ex})") from ex
            expenses.append(expense)

    logger.info("Imported %d expenses from %s", len(expenses), filepath)
    return expenses
