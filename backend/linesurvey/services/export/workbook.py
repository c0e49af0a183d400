# backend/linesurvey/services/export/workbook.py
from io import BytesIO
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from linesurvey.models.sheet import Sheet
from linesurvey.models.sheet_row import SheetRow

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill("solid", fgColor="4A6FA5")


def render_workbook(sheet: Sheet, rows: Sequence[SheetRow]) -> bytes:
    """Spreadsheet copy of a sheet: styled header, frozen header rows, one line per row."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet.name[:31]  # Excel のシート名上限

    header = list(sheet.header)
    ws.append(header)
    for cell in ws[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
    if sheet.frozen_rows:
        ws.freeze_panes = f"A{sheet.frozen_rows + 1}"  # ws.cell() だと空行が生成される

    for r in rows:
        ws.append([getattr(r, col) for col in header])

    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()
