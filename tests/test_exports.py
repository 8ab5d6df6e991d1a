from datetime import date

import pytest
from openpyxl import load_workbook

from config import get_default_ledger
from csv_handler import export_expenses_to_csv, import_expenses_from_csv
from excel_export import export_excel
from ledger import add_group, new_group


def test_csv_round_trip(tmp_path):
    ledger = get_default_ledger()
    path = str(tmp_path / "expenses.csv")

    export_expenses_to_csv(ledger.expenses, path)

    assert import_expenses_from_csv(path) == ledger.expenses


def test_csv_import_rejects_malformed_rows(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(
        "id,group_id,date,description,category,paid_by,amount,currency,split_type,per_person_amount\n"
        "e1,g1,2024-01-01,Lunch,Food,Ann,twelve,USD,equal,6\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="bad.csv:2"):
        import_expenses_from_csv(str(path))


def test_excel_report_sheets(tmp_path):
    ledger = get_default_ledger()
    path = str(tmp_path / "report.xlsx")

    export_excel(ledger, path)

    wb = load_workbook(path)
    assert wb.sheetnames == ["Roommates", "Trip to Paris", "Balances", "Settlements"]

    trip = wb["Trip to Paris"]
    assert trip["B2"].value == "Hotel Room"
    assert trip["A3"].value == "TOTAL"
    assert trip["E3"].value == "=SUM(E2:E2)"

    rows = list(wb["Settlements"].iter_rows(min_row=2, values_only=True))
    trip_rows = [r for r in rows if r[0] == "Trip to Paris"]
    assert trip_rows == [
        ("Trip to Paris", "John", "Lisa", 212.5),
        ("Trip to Paris", "Tom", "Lisa", 212.5),
        ("Trip to Paris", "Emily", "Lisa", 212.5),
    ]

    balances = {(r[0], r[1]): r[4] for r in wb["Balances"].iter_rows(min_row=2, values_only=True)}
    assert balances[("Trip to Paris", "Lisa")] == pytest.approx(637.5)


def test_excel_date_range_and_sheet_titles(tmp_path):
    ledger = get_default_ledger()
    add_group(ledger, new_group("Bills: 2024/Q1", ["A", "B"]))
    add_group(ledger, new_group("Bills: 2024?Q1", ["A", "B"]))
    path = str(tmp_path / "report.xlsx")

    export_excel(ledger, path, start=date(2023, 11, 1), end=date(2023, 11, 30))

    wb = load_workbook(path)
    assert "Bills_ 2024_Q1" in wb.sheetnames
    assert "Bills_ 2024_Q1 (2)" in wb.sheetnames
    assert wb["Trip to Paris"].max_row == 1
    assert wb["Settlements"].max_row > 1
