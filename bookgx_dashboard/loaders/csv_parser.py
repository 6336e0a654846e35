"""
Row parser for CSV text exported from Google Sheets.

The export is read with csv.reader, so quoted values keep their commas
("Smith, John", "1,250") and their line breaks (multi-line review cells).
Values are trimmed, and rows whose cells are all empty are skipped the
same way for the CSV export and the Sheets v4 values array.
"""

import csv
import io
import logging
from typing import Iterator, Sequence

logger = logging.getLogger(__name__)


def _reader(text: str, delimiter: str) -> Iterator[list[str]]:
    reader = csv.reader(io.StringIO(text), delimiter=delimiter, skipinitialspace=True)
    for row in reader:
        yield [value.strip() for value in row]


def parse_csv_line(line: str, delimiter: str = ",") -> list[str]:
    """Split one CSV line into trimmed values.

    Quote characters are not kept; a doubled quote inside a quoted field
    stands for one literal quote.
    """
    for values in _reader(line, delimiter):
        return values
    return [""]


def parse_csv(
    text: str,
    has_headers: bool = True,
    delimiter: str = ",",
) -> list[dict[str, str]] | list[list[str]]:
    """Parse CSV text into records.

    With headers, the first non-blank row names the fields and every later
    row is mapped positionally; short rows get "" for the missing fields and
    extra values are dropped. Without headers, raw value lists are returned.
    Rows with no non-empty value (blank lines, ",,,") are skipped.
    """
    rows = [values for values in _reader(text or "", delimiter) if any(values)]
    if not rows:
        return []

    if not has_headers:
        return rows

    headers = rows[0]
    records = []
    short_rows = 0
    for values in rows[1:]:
        if len(values) < len(headers):
            short_rows += 1
        records.append(_to_record(headers, values))

    if short_rows:
        logger.debug("%d rows had fewer columns than the header", short_rows)
    logger.info("Parsed %d records with %d columns", len(records), len(headers))
    return records


def rows_from_values(values: Sequence[Sequence]) -> list[dict[str, str]]:
    """Map a Sheets v4 ``values`` array (header row first) to records.

    The API omits trailing empty cells, so ragged rows are padded with "".
    """
    if not values:
        return []

    headers = [str(h).strip() for h in values[0]]
    records = []
    for row in values[1:]:
        cells = ["" if cell is None else str(cell).strip() for cell in row]
        if not any(cells):
            continue
        records.append(_to_record(headers, cells))
    return records


def _to_record(headers: list[str], values: Sequence[str]) -> dict[str, str]:
    record = {}
    for idx, header in enumerate(headers):
        record[header] = values[idx] if idx < len(values) else ""
    return record
