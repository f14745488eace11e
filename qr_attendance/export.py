import logging
import os
from datetime import date

import pandas as pd
from openpyxl import load_workbook
from openpyxl.styles import PatternFill, Alignment, Font, Border, Side
from openpyxl.worksheet.page import PageMargins

from qr_attendance.constants import (
    DISPLAY_TIME_FORMAT,
    EXPORT_COLUMNS,
    EXPORT_FILE_PREFIX,
    EXPORT_SHEET_NAME,
    RECORDS_FOLDER,
)
from qr_attendance.errors import EmptyStoreError

logger = logging.getLogger(__name__)


def format_timestamp(timestamp):
    return timestamp.astimezone().strftime(DISPLAY_TIME_FORMAT)


def export_filename(today=None):
    today = today or date.today()
    return f"{EXPORT_FILE_PREFIX}_{today.isoformat()}.xlsx"


def build_table(records):
    """Header row followed by one row per record, in store order."""
    rows = [list(EXPORT_COLUMNS)]
    rows.extend(
        [record.student_id, record.student_name, format_timestamp(record.timestamp)]
        for record in records
    )
    return rows


def _style_sheet(ws, row_count):
    header_fill = PatternFill("solid", start_color="9BBB59")
    data_fill = PatternFill("solid", start_color="F0F8FF")

    header_font = Font(bold=True, size=12)
    data_font = Font(size=11)

    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)

    for col_idx in range(1, len(EXPORT_COLUMNS) + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = border

    for row in ws.iter_rows(
        min_row=2,
        max_row=row_count,
        min_col=1,
        max_col=len(EXPORT_COLUMNS)
    ):
        for cell in row:
            cell.font = data_font
            cell.fill = data_fill
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.border = border

    ws.column_dimensions["A"].width = 15
    ws.column_dimensions["B"].width = 30
    ws.column_dimensions["C"].width = 25
    ws.freeze_panes = "A2"

    ws.page_margins = PageMargins(
        left=0.3, right=0.3,
        top=0.4, bottom=0.4,
        header=0.3, footer=0.3
    )
    ws.page_setup.orientation = ws.ORIENTATION_PORTRAIT
    ws.page_setup.paperSize = ws.PAPERSIZE_A4
    ws.page_setup.fitToWidth = 1
    ws.page_setup.fitToHeight = 0


def export_data(records, folder=RECORDS_FOLDER, today=None):
    """Write ``records`` to ``attendance_<date>.xlsx`` in ``folder``.

    Returns the path of the written file. Nothing is written when there are
    no records.
    """
    records = list(records)
    if not records:
        raise EmptyStoreError()

    rows = build_table(records)

    os.makedirs(folder, exist_ok=True)
    file_path = os.path.join(folder, export_filename(today))

    df = pd.DataFrame(rows[1:], columns=rows[0])
    df.to_excel(file_path, index=False, sheet_name=EXPORT_SHEET_NAME, engine="openpyxl")

    wb = load_workbook(file_path)
    ws = wb[EXPORT_SHEET_NAME]
    _style_sheet(ws, len(rows))
    wb.save(file_path)

    logger.info("Exported %d attendance records to %s", len(records), file_path)
    return file_path
