"""Spreadsheet uploads -> flat CSV text of the first sheet."""

import csv
import io

from openpyxl import load_workbook

from reflection_portal.errors import UnsupportedDocument

SPREADSHEET_EXTENSIONS = (".xlsx", ".xlsm", ".csv")


def is_spreadsheet(filename: str) -> bool:
    return (filename or "").lower().endswith(SPREADSHEET_EXTENSIONS + (".xls",))


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def workbook_to_csv(data: bytes) -> str:
    """First worksheet of an .xlsx workbook as CSV text."""
    wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        sheet = wb.worksheets[0]
        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        for row in sheet.iter_rows(values_only=True):
            writer.writerow([_cell_text(v) for v in row])
        return out.getvalue()
    finally:
        wb.close()


def decode_csv(data: bytes) -> str:
    """CSV bytes as text, tolerating a BOM and legacy Korean encodings."""
    for encoding in ("utf-8-sig", "cp949"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("utf-8", errors="replace")


def spreadsheet_to_text(filename: str, data: bytes) -> str:
    """Convert an uploaded spreadsheet to CSV text for extraction."""
    name = (filename or "").lower()
    if name.endswith(".csv"):
        return decode_csv(data)
    if name.endswith((".xlsx", ".xlsm")):
        return workbook_to_csv(data)
    if name.endswith(".xls"):
        raise UnsupportedDocument("Legacy .xls workbooks are not supported. Save the file as .xlsx or .csv.")
    raise UnsupportedDocument(f"Not a spreadsheet: {filename}")
