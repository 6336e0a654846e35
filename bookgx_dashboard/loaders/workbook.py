"""
Loader for an .xlsx export of the bookings sheet.

Lets the pipeline run offline against File > Download > Microsoft Excel.

Structure:
    One header row (found by signature, usually row 1) followed by one
    booking per row. Cells are converted back to the strings the CSV export
    would have produced so the aggregator sees a single record shape.
"""

import logging
from datetime import date, datetime

import openpyxl

from ..config import (
    COL_BOOKING_DATE,
    COL_CLIENT_NAME,
    COL_LOCATION,
    COL_STATUS,
    COL_TOTAL_BOOK,
)
from .utils import find_header_row

logger = logging.getLogger(__name__)

_HEADER_SIGNATURE = {
    COL_BOOKING_DATE,
    COL_LOCATION,
    COL_CLIENT_NAME,
    COL_STATUS,
    COL_TOTAL_BOOK,
}


def _cell_to_str(val) -> str:
    if val is None:
        return ""
    if isinstance(val, datetime):
        if val.hour or val.minute or val.second:
            return val.isoformat(sep=" ")
        return val.date().isoformat()
    if isinstance(val, date):
        return val.isoformat()
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val).strip()


def load_bookings_workbook(path: str, sheet_name: str | None = None) -> list[dict[str, str]]:
    """Load booking records from an Excel workbook.

    Assumptions
    -----------
    - The header row contains at least two of the known booking columns
      within the first 20 rows; if none is found row 1 is used.
    - Fully empty rows are skipped.

    Returns
    -------
    List of records keyed by header, values as strings.
    """
    try:
        wb = openpyxl.load_workbook(path, data_only=True, read_only=False)
    except Exception:
        logger.exception("Failed to open bookings workbook: %s", path)
        raise

    if sheet_name and sheet_name in wb.sheetnames:
        ws = wb[sheet_name]
    else:
        if sheet_name:
            logger.warning("Sheet '%s' not found, using '%s'", sheet_name, wb.sheetnames[0])
        ws = wb[wb.sheetnames[0]]

    header_row = find_header_row(ws, _HEADER_SIGNATURE) or 1
    headers = [_cell_to_str(cell.value) for cell in ws[header_row]]

    records = []
    for row in ws.iter_rows(min_row=header_row + 1, values_only=True):
        values = [_cell_to_str(v) for v in row]
        if not any(values):
            continue
        record = {}
        for idx, header in enumerate(headers):
            if not header:
                continue
            record[header] = values[idx] if idx < len(values) else ""
        records.append(record)

    wb.close()

    logger.info("Loaded %d booking rows from %s", len(records), path)
    return records
