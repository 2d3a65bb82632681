"""
Value normalisation helpers shared by the certificate models.

Handles:
- Currency strings to numbers ("$1,000,000" -> 1000000.0)
- Dates to MM/DD/YYYY
- Digits-only phone, fax and NAIC values
"""

import math
import re
from datetime import datetime
from typing import Any

from dateutil import parser as date_parser
from price_parser import Price

DATE_FORMAT = "%m/%d/%Y"


def parse_currency(value: Any) -> float | None:
    """
    Parse a currency string to float using price-parser.

    Handles "$1,000,000", "1,000,000.00", "$ 500", "2000000 USD", European
    "1.234,56" and dot-grouped "$1.000.000". Returns None for blanks, bare
    currency symbols and other text with no amount in it.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None

    value = value.strip()
    if not value:
        return None

    price = Price.fromstring(value)
    if price.amount_float is not None:
        return price.amount_float

    # Fallback: try parsing as plain number if price-parser finds no amount
    cleaned = re.sub(r"[^\d.,\-]", "", value)
    if not re.search(r"\d", cleaned):
        return None

    # The right-most separator is the decimal mark when both appear
    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        parts = cleaned.split(",")
        # "1234,56" uses a decimal comma, "1,000" groups thousands
        if len(parts) == 2 and len(parts[1]) != 3:
            cleaned = cleaned.replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")

    try:
        return float(cleaned)
    except ValueError:
        return None


def is_positive_amount(value: float | None) -> bool:
    """True for finite amounts strictly above zero."""
    return value is not None and math.isfinite(value) and value > 0


def normalize_date(value: Any) -> str | None:
    """
    Parse various date formats to MM/DD/YYYY.

    Returns None if parsing fails.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)

    value = value.strip()
    if not value:
        return None

    # Already in the target format
    match = re.match(r"^(\d{1,2})/(\d{1,2})/(\d{4})$", value)
    if match:
        month, day, year = match.groups()
        try:
            return datetime(int(year), int(month), int(day)).strftime(DATE_FORMAT)
        except ValueError:
            return None

    # ISO format (YYYY-MM-DD)
    match = re.match(r"^(\d{4})-(\d{2})-(\d{2})$", value)
    if match:
        year, month, day = match.groups()
        try:
            return datetime(int(year), int(month), int(day)).strftime(DATE_FORMAT)
        except ValueError:
            return None

    # Written formats ("January 15, 2024", "15 Jan 2024")
    try:
        return date_parser.parse(value).strftime(DATE_FORMAT)
    except (ValueError, OverflowError):
        return None


def digits_only(value: Any) -> str | None:
    """Strip everything but digits. None when no digit is left."""
    if value is None:
        return None
    digits = re.sub(r"\D", "", str(value))
    return digits or None


def first_line(value: str) -> str:
    """Return the first non-blank line of a multi-line value."""
    for line in value.splitlines():
        if line.strip():
            return line.strip()
    return value.strip()
