"""CSV parsing package."""

from vola.parsing.csv_parser import (
    TRANSACTION_FIELDS,
    CSVParseError,
    parse_amount,
    parse_csv,
)

__all__ = [
    "TRANSACTION_FIELDS",
    "CSVParseError",
    "parse_amount",
    "parse_csv",
]
