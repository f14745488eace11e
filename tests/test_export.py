import os
from datetime import date, datetime

import pytest
from openpyxl import load_workbook

from qr_attendance.errors import EmptyStoreError
from qr_attendance.export import build_table, export_data, export_filename, format_timestamp

from conftest import make_record


TODAY = date(2026, 10, 19)


def test_export_filename():
    assert export_filename(TODAY) == "attendance_2026-10-19.xlsx"


def test_build_table_has_header_and_rows():
    records = [make_record("1001", "Alice"), make_record("1002", "Bob")]

    rows = build_table(records)

    assert rows[0] == ["Student ID", "Name", "Timestamp"]
    assert rows[1] == ["1001", "Alice", format_timestamp(records[0].timestamp)]
    assert len(rows) == len(records) + 1


def test_export_empty_store_writes_nothing(tmp_path):
    folder = tmp_path / "records"

    with pytest.raises(EmptyStoreError):
        export_data([], folder=str(folder), today=TODAY)

    assert not folder.exists()


def test_export_writes_attendance_sheet(tmp_path):
    when = datetime(2026, 10, 19, 9, 0).astimezone()
    records = [
        make_record("0042", "Alice", when),
        make_record("1002", "Bob", when),
        make_record("1003", "Carol", when),
    ]

    path = export_data(records, folder=str(tmp_path), today=TODAY)

    assert os.path.basename(path) == "attendance_2026-10-19.xlsx"
    wb = load_workbook(path)
    assert wb.sheetnames == ["Attendance"]
    rows = list(wb["Attendance"].iter_rows(values_only=True))
    assert len(rows) == len(records) + 1
    assert rows[0] == ("Student ID", "Name", "Timestamp")
    assert rows[1] == ("0042", "Alice", format_timestamp(when))
    assert wb["Attendance"]["A1"].font.bold
