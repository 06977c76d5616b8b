"""
Swico S1 codec for structured bill information.

Structured bill information is a compact tag/value text embedded in the
QR-bill payload, e.g.:

    //S1/10/10201409/11/190512/20/1400.000-53/30/106017086/31/180508

Tags (in canonical order):
- 10 invoice number
- 11 invoice date (yyMMdd)
- 20 customer reference
- 30 VAT number
- 31 VAT date (yyMMdd) or VAT period (yyMMddyyMMdd)
- 32 VAT rate, or VAT rate details (rate:amount;rate:amount...)
- 33 VAT on import (rate:amount;...)
- 40 payment conditions (discount:days;...)

Decoding is tolerant because the text often comes from third-party software:
- unknown tags are skipped
- tags out of canonical order are dropped
- a trailing tag without value is ignored
- a malformed scalar value drops that value only
- a malformed list item drops itself and the rest of its list
- an empty value means the tag is present without value

All parsing is locale-invariant: digits are ASCII digits and the decimal
separator is always a period.
"""

import logging
import re
from collections.abc import Callable
from datetime import date
from decimal import Decimal
from typing import TypeVar

from zahlteil.domain.constants import MAX_BILL_INFO_YEAR, MIN_BILL_INFO_YEAR
from zahlteil.domain.models import SwicoBillInformation

T = TypeVar("T")

logger = logging.getLogger(__name__)

PREFIX = "//S1/"

TAG_INVOICE_NUMBER = 10
TAG_INVOICE_DATE = 11
TAG_CUSTOMER_REFERENCE = 20
TAG_VAT_NUMBER = 30
TAG_VAT_DATES = 31
TAG_VAT_RATE = 32
TAG_VAT_IMPORT_TAXES = 33
TAG_PAYMENT_CONDITIONS = 40

KNOWN_TAGS = (
    TAG_INVOICE_NUMBER,
    TAG_INVOICE_DATE,
    TAG_CUSTOMER_REFERENCE,
    TAG_VAT_NUMBER,
    TAG_VAT_DATES,
    TAG_VAT_RATE,
    TAG_VAT_IMPORT_TAXES,
    TAG_PAYMENT_CONDITIONS,
)

TAG_PATTERN = re.compile(r"[0-9]{2}")
DATE_PATTERN = re.compile(r"[0-9]{6}")
DECIMAL_PATTERN = re.compile(r"[0-9]+(\.[0-9]+)?")
INTEGER_PATTERN = re.compile(r"[0-9]+")


# =============================================================================
# Decoding
# =============================================================================

def split_escaped(text: str) -> list[str]:
    """
    Split text at unescaped slashes and remove the escape characters.

    A backslash escapes a following slash or backslash. Any other
    backslash is kept as a literal character.
    """
    parts: list[str] = []
    current: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text) and text[i + 1] in "/\\":
            current.append(text[i + 1])
            i += 2
            continue
        if ch == "/":
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    parts.append("".join(current))
    return parts


def _parse_tag(text: str) -> int | None:
    if not TAG_PATTERN.fullmatch(text):
        return None
    tag = int(text)
    return tag if tag in KNOWN_TAGS else None


def _parse_date(text: str) -> date | None:
    """Parse yyMMdd into a date of the 21st century."""
    if not DATE_PATTERN.fullmatch(text):
        return None
    try:
        return date(2000 + int(text[0:2]), int(text[2:4]), int(text[4:6]))
    except ValueError:
        return None


def _parse_decimal(text: str) -> Decimal | None:
    if not DECIMAL_PATTERN.fullmatch(text):
        return None
    return Decimal(text)


def _parse_int(text: str) -> int | None:
    if not INTEGER_PATTERN.fullmatch(text):
        return None
    return int(text)


def _parse_list(text: str, parse_second: Callable[[str], T | None]) -> tuple[tuple[Decimal, T], ...]:
    """
    Parse a list of "decimal:value" items separated by semicolons.

    Empty items are skipped. Parsing stops at the first malformed item;
    the items before it are kept.
    """
    items: list[tuple[Decimal, T]] = []
    for item in text.split(";"):
        if not item:
            continue
        pair = item.split(":")
        first = _parse_decimal(pair[0]) if len(pair) == 2 else None
        second = parse_second(pair[1]) if first is not None else None
        if first is None or second is None:
            logger.debug("Dropping malformed list item %r and its successors", item)
            break
        items.append((first, second))
    return tuple(items)


def _decode_value(tag: int, value: str, values: dict[str, object]) -> None:
    """Store the decoded value of a single tag; malformed values are dropped."""
    if tag == TAG_INVOICE_NUMBER:
        values["invoice_number"] = value
    elif tag == TAG_INVOICE_DATE:
        invoice_date = _parse_date(value)
        if invoice_date is not None:
            values["invoice_date"] = invoice_date
    elif tag == TAG_CUSTOMER_REFERENCE:
        values["customer_reference"] = value
    elif tag == TAG_VAT_NUMBER:
        values["vat_number"] = value
    elif tag == TAG_VAT_DATES:
        if len(value) == 6:
            vat_date = _parse_date(value)
            if vat_date is not None:
                values["vat_date"] = vat_date
        elif len(value) == 12:
            start_date = _parse_date(value[:6])
            end_date = _parse_date(value[6:])
            if start_date is not None and end_date is not None:
                values["vat_start_date"] = start_date
                values["vat_end_date"] = end_date
    elif tag == TAG_VAT_RATE:
        if ":" in value:
            details = _parse_list(value, _parse_decimal)
            if details:
                values["vat_rate_details"] = details
        else:
            vat_rate = _parse_decimal(value)
            if vat_rate is not None:
                values["vat_rate"] = vat_rate
    elif tag == TAG_VAT_IMPORT_TAXES:
        taxes = _parse_list(value, _parse_decimal)
        if taxes:
            values["vat_import_taxes"] = taxes
    elif tag == TAG_PAYMENT_CONDITIONS:
        conditions = _parse_list(value, _parse_int)
        if conditions:
            values["payment_conditions"] = conditions


def decode_swico(text: str | None) -> SwicoBillInformation | None:
    """
    Decode structured bill information in Swico S1 syntax.

    Scans the tag/value pairs once, remembering the highest tag accepted
    so far. A known tag lower than that is out of order and dropped.

    Args:
        text: Bill information text, possibly None

    Returns:
        Decoded bill information, or None if the text is None or does not
        start with "//S1/". Fields that could not be decoded are None.

    Example:
        >>> decode_swico("//S1/10/X.66711/20/405\\\\/1/40/0:30").customer_reference
        '405/1'
    """
    if text is None or not text.startswith(PREFIX):
        return None

    parts = split_escaped(text[len(PREFIX):])
    values: dict[str, object] = {}
    highest_tag = 0

    for i in range(0, len(parts) - 1, 2):
        tag_text, value = parts[i], parts[i + 1]
        tag = _parse_tag(tag_text)
        if tag is None:
            logger.debug("Ignoring unknown tag %r", tag_text)
            continue
        if tag < highest_tag:
            logger.debug("Ignoring tag %d after tag %d", tag, highest_tag)
            continue
        highest_tag = tag
        if value:
            _decode_value(tag, value, values)

    if len(parts) % 2 == 1 and parts[-1]:
        logger.debug("Ignoring incomplete trailing tag %r", parts[-1])

    return SwicoBillInformation(**values)


# =============================================================================
# Encoding
# =============================================================================

def escape(value: str) -> str:
    """Escape backslashes and slashes in a free-text value."""
    return value.replace("\\", "\\\\").replace("/", "\\/")


def format_date(value: date) -> str:
    """Format a date as yyMMdd; only years 2000 to 2099 can be represented."""
    if not MIN_BILL_INFO_YEAR <= value.year <= MAX_BILL_INFO_YEAR:
        raise ValueError(f"Year of {value.isoformat()} cannot be encoded with two digits")
    return f"{value.year % 100:02d}{value.month:02d}{value.day:02d}"


def format_decimal(value: Decimal) -> str:
    """Format a decimal without exponent, grouping or trailing zeros."""
    text = format(value.normalize(), "f")
    return "0" if text in ("-0", "") else text


def _format_list(items) -> str:
    return ";".join(f"{format_decimal(Decimal(a))}:{format_decimal(Decimal(b))}" for a, b in items)


def encode_swico(info: SwicoBillInformation) -> str:
    """
    Encode structured bill information in Swico S1 syntax.

    Populated fields are emitted in canonical tag order; absent fields are
    omitted entirely. A VAT date takes precedence over a VAT period and a
    single VAT rate over VAT rate details, as the syntax allows only one
    of each.
    """
    pairs: list[tuple[int, str]] = []

    if info.invoice_number:
        pairs.append((TAG_INVOICE_NUMBER, escape(info.invoice_number)))
    if info.invoice_date is not None:
        pairs.append((TAG_INVOICE_DATE, format_date(info.invoice_date)))
    if info.customer_reference:
        pairs.append((TAG_CUSTOMER_REFERENCE, escape(info.customer_reference)))
    if info.vat_number:
        pairs.append((TAG_VAT_NUMBER, escape(info.vat_number)))
    if info.vat_date is not None:
        pairs.append((TAG_VAT_DATES, format_date(info.vat_date)))
    elif info.vat_start_date is not None and info.vat_end_date is not None:
        pairs.append((TAG_VAT_DATES, format_date(info.vat_start_date) + format_date(info.vat_end_date)))
    if info.vat_rate is not None:
        pairs.append((TAG_VAT_RATE, format_decimal(info.vat_rate)))
    elif info.vat_rate_details:
        pairs.append((TAG_VAT_RATE, _format_list(info.vat_rate_details)))
    if info.vat_import_taxes:
        pairs.append((TAG_VAT_IMPORT_TAXES, _format_list(info.vat_import_taxes)))
    if info.payment_conditions:
        pairs.append((TAG_PAYMENT_CONDITIONS, _format_list(info.payment_conditions)))

    return PREFIX + "/".join(f"{tag}/{value}" for tag, value in pairs)
