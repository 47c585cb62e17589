"""
CSV Transaction Parser

Turns pasted or uploaded CSV text into Transaction records for the
read-only transaction table.

KNOWN LIMITATION: Lines are split on bare commas. Quoted fields are
not supported, so a value containing a literal comma shifts every
later column of that row. The model still receives the raw CSV text,
so this only affects the local table.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from vola.models.transaction import Transaction


TRANSACTION_FIELDS = ("date", "description", "category", "amount")

# Only LF and CRLF end a row; form feeds and other separators stay in the value
_LINE_BREAK = re.compile(r"\r?\n")


class CSVParseError(ValueError):
    """A data row could not be converted to a Transaction."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        super().__init__(message)


def parse_amount(value: Optional[str]) -> Optional[Decimal]:
    """
    Convert an amount cell to Decimal.

    A leading "+" marks inflows ("+2500.00") and is dropped.
    No currency symbols or thousands separators are handled.
    Returns None for a missing cell.
    """
    if value is None:
        return None
    cleaned = value.replace("+", "").strip()
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Amount {value!r} is not a number")
    if not amount.is_finite():
        raise ValueError(f"Amount {value!r} is not a finite number")
    return amount


def parse_csv(text: str) -> list[Transaction]:
    """
    Parse CSV text with a header row into transactions.

    The header is lowercased and split on commas; each data value is
    assigned to the field named by the header at the same column.
    Unknown columns are ignored and missing columns leave the field
    None. Blank lines are skipped.

    Raises:
        CSVParseError: If an amount cell is not a finite number
    """
    lines = _LINE_BREAK.split(text.strip())
    if not lines or not lines[0].strip():
        return []

    headers = [h.strip() for h in lines[0].lower().split(",")]

    transactions = []
    for line_number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue

        values = line.split(",")
        entry = {}
        for index, header in enumerate(headers):
            if header not in TRANSACTION_FIELDS:
                continue
            value = values[index] if index < len(values) else None
            if header == "amount":
                try:
                    entry[header] = parse_amount(value)
                except ValueError as e:
                    raise CSVParseError(
                        f"Line {line_number}: {e}",
                        line_number=line_number,
                    ) from e
            else:
                entry[header] = value

        transactions.append(Transaction(**entry))

    return transactions
