"""
Excel export functionality for GroupSplit
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from config import Settings
from models import Ledger
from balances import compute_balances, summarize_members
from filters import filter_expenses_by_date
from settlements import plan_settlements

logger = logging.getLogger(__name__)

# Excel forbids []:*?/\ in sheet titles and caps them at 31 chars
_BAD_TITLE_CHARS = str.maketrans({c: "_" for c in "[]:*?/\\"})


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            v = cell.value
            if v is None:
                continue
            max_len = max(max_len, len(str(v)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _sheet_title(name: str, used: set) -> str:
    """Valid, unique worksheet title for a group name"""
    base = (name.translate(_BAD_TITLE_CHARS).strip() or "Group")[:31]
    title, n = base, 2
    while title in used:
        suffix = f" ({n})"
        title = base[:31 - len(suffix)] + suffix
        n += 1
    used.add(title)
    return title


def _money_format(ws, first_col, last_col):
    for r in range(2, ws.max_row + 1):
        for c in range(first_col, last_col + 1):
            ws.cell(r, c).number_format = "0.00"


def export_excel(
    ledger: Ledger,
    filepath: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
    settings: Optional[Settings] = None
) -> None:
    """
    Export ledger to Excel file with multiple sheets:
    - One sheet per group listing its expenses
    - Balances sheet (paid, share, balance per member)
    - Settlements sheet
    """
    settings = settings or Settings()
    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    exps = filter_expenses_by_date(ledger.expenses, start, end)
    used = {"Balances", "Settlements"}

    for g in ledger.groups:
        ws = wb.create_sheet(_sheet_title(g.name, used))
        headers = ["Date", "Description", "Category", "Paid by", "Amount", "Per person", "Currency"]
        ws.append(headers)
        _style_header(ws, 1)
        ws.freeze_panes = "A2"

        group_exps = sorted((e for e in exps if e.group_id == g.id), key=lambda e: (e.date, e.description))
        for e in group_exps:
            ws.append([e.date, e.description, e.category, e.paid_by, e.amount, e.per_person_amount, e.currency])

        if group_exps:
            ws.append(["TOTAL"] + [""] * (len(headers) - 1))
            trow = ws.max_row
            ws.cell(trow, 1).font = Font(bold=True)
            ws.cell(trow, 5).value = f"=SUM(E2:E{trow - 1})"

        _money_format(ws, 5, 6)
        _autosize_columns(ws)

    balances = compute_balances(ledger.groups, exps, strict=settings.strict_group_refs)

    ws = wb.create_sheet("Balances")
    ws.append(["Group", "Member", "Paid", "Share", "Balance"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for g in ledger.groups:
        summary = summarize_members(g, exps)
        for m in g.members:
            ws.append([g.name, m, summary[m].paid, summary[m].share, balances[g.id][m]])
    _money_format(ws, 3, 5)
    _autosize_columns(ws)

    ws = wb.create_sheet("Settlements")
    ws.append(["Group", "From (Debtor)", "To (Creditor)", "Amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for g in ledger.groups:
        for s in plan_settlements(balances[g.id], settings.settle_eps):
            ws.append([g.name, s.from_member, s.to_member, s.amount])
    _money_format(ws, 4, 4)
    _autosize_columns(ws)

    wb.save(filepath)
    logger.info("Exported Excel report for %d groups to %s", len(ledger.groups), filepath)
