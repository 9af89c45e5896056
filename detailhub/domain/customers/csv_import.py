"""
Customer CSV import parsing
Maps spreadsheet columns to import rows by looking at the header names
"""

import csv
import re
from io import StringIO
from typing import Any, Optional

# First data row in a spreadsheet, after the header on line 1
FIRST_DATA_ROW = 2

SHORT_ZIP = re.compile(r"^[0-9]{1,4}$")

# Logical column -> header predicate, first matching header wins
COLUMN_MATCHERS = {
    "phone": lambda h: "phone" in h,
    "name": lambda h: "name" in h and "phone" not in h,
    "email": lambda h: "email" in h,
    "address1": lambda h: h in ("address 1", "address1"),
    "address2": lambda h: h in ("address 2", "address2"),
    "city": lambda h: h == "city",
    "state": lambda h: h == "state",
    "zip": lambda h: "zip" in h,
    "address": lambda h: h == "address",
    "vehicles": lambda h: h == "vehicles",
    "vehicle": lambda h: h == "vehicle",
    "services": lambda h: "service" in h,
    "firstVisit": lambda h: "first" in h and "visit" in h,
    "lastVisit": lambda h: "last" in h and "visit" in h,
    "visits": lambda h: h == "visits",
    "location": lambda h: h == "location",
    "locationType": lambda h: "location" in h and "type" in h,
    "notes": lambda h: "note" in h,
    "technician": lambda h: "technician" in h,
    "pets": lambda h: h == "pets",
    "kids": lambda h: h == "kids",
}

# Columns copied as-is into the customer's data
EXTRA_COLUMNS = ("technician", "pets", "kids")


class CsvImportError(ValueError):
    """The file as a whole cannot be imported"""


def detect_columns(fieldnames: list[str]) -> dict[str, str]:
    """Map logical column names to the header names present in the file"""
    normalized = [(name, (name or "").strip().lower()) for name in fieldnames]
    columns = {}
    for column, matches in COLUMN_MATCHERS.items():
        for original, header in normalized:
            if header and matches(header):
                columns[column] = original
                break
    return columns


def _cell(record: dict, columns: dict[str, str], column: str) -> str:
    header = columns.get(column)
    if header is None:
        return ""
    return (record.get(header) or "").strip()


def build_address(record: dict, columns: dict[str, str]) -> Optional[str]:
    """
    Assemble one address line from split columns.

    "123 Main St", "Apt 4", "Boston", "MA", "2101" becomes
    "123 Main St, Apt 4, Boston, MA 02101". Files with a single
    "Address" column keep that value.
    """
    if "address1" not in columns:
        return _cell(record, columns, "address") or None

    line1 = _cell(record, columns, "address1")
    line2 = _cell(record, columns, "address2")
    city = _cell(record, columns, "city")
    state = _cell(record, columns, "state")
    zip_code = _cell(record, columns, "zip")

    # Spreadsheets drop leading zeros from ZIP codes
    if SHORT_ZIP.match(zip_code):
        zip_code = zip_code.zfill(5)

    if not (line1 or city or state or zip_code):
        return None

    street = ", ".join(part for part in (line1, line2) if part)
    state_zip = " ".join(part for part in (state, zip_code) if part)
    city_state = ", ".join(part for part in (city, state_zip) if part)
    return ", ".join(part for part in (street, city_state) if part) or None


def _visit_count(value: str) -> Optional[int]:
    try:
        count = int(value)
    except ValueError:
        return None
    return count if count >= 0 else None


def record_to_row(record: dict, columns: dict[str, str]) -> dict[str, Any]:
    """Convert one CSV record to the fields of a CustomerImportRow"""
    row: dict[str, Any] = {
        "phone": _cell(record, columns, "phone") or None,
        "name": _cell(record, columns, "name") or None,
        "email": _cell(record, columns, "email") or None,
        "address": build_address(record, columns),
        "notes": _cell(record, columns, "notes") or None,
        "firstVisit": _cell(record, columns, "firstVisit") or None,
        "lastVisit": _cell(record, columns, "lastVisit") or None,
        "locationType": _cell(record, columns, "location")
        or _cell(record, columns, "locationType")
        or None,
    }

    vehicles = [v.strip() for v in _cell(record, columns, "vehicles").split(";") if v.strip()]
    if vehicles:
        row["vehicle"] = vehicles[0]
        if len(vehicles) > 1:
            row["vehicles"] = vehicles
    else:
        row["vehicle"] = _cell(record, columns, "vehicle") or None

    services = [s.strip() for s in re.split(r"[;,]", _cell(record, columns, "services")) if s.strip()]
    if services:
        row["services"] = services

    visits = _cell(record, columns, "visits")
    if visits:
        row["visitCount"] = _visit_count(visits)

    for column in EXTRA_COLUMNS:
        value = _cell(record, columns, column)
        if value:
            row[column] = value

    return row


def parse_customer_csv(text: str) -> list[dict[str, Any]]:
    """
    Parse CSV text into import rows.

    Raises:
        CsvImportError: when the file has no data rows or no phone column
    """
    reader = csv.DictReader(StringIO(text))
    if not reader.fieldnames:
        raise CsvImportError("File must contain at least a header row and one data row")

    columns = detect_columns(reader.fieldnames)
    if "phone" not in columns:
        raise CsvImportError('Phone column not found. Please ensure your file has a "Phone" column.')

    rows = [record_to_row(record, columns) for record in reader]
    if not rows:
        raise CsvImportError("File must contain at least a header row and one data row")
    return rows
