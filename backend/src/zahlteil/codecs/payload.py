"""
Payload codec for the text embedded in the QR code of a QR bill.

The payload is a fixed sequence of lines, one field per line:

    SPC / 0200 / 1                  header, version, coding type
    account
    creditor                        7 lines (address type S or K, ...)
    ultimate creditor               7 lines, reserved, always empty
    amount, currency
    debtor                          7 lines, all empty without debtor
    reference type, reference
    unstructured message
    EPD                             trailer
    bill information                optional
    alternative schemes             optional, up to 2 lines

Encoding expects a validated bill. Decoding only checks the header; it
does not validate field contents, so a decoded bill should be run through
validate_bill() before it is trusted.
"""

import logging
import re
from decimal import Decimal

from zahlteil.config import Settings, get_settings
from zahlteil.domain.models import (
    Address,
    AddressType,
    Bill,
    Reference,
    ReferenceType,
)

from .swico import decode_swico, encode_swico

logger = logging.getLogger(__name__)

HEADER = "SPC"
VERSION = "0200"
CODING_TYPE = "1"
TRAILER = "EPD"

ADDRESS_TYPE_STRUCTURED = "S"
ADDRESS_TYPE_COMBINED = "K"

ADDRESS_LINE_COUNT = 7
MIN_LINE_COUNT = 31  # up to and including the trailer
MAX_LINE_COUNT = 34  # bill information and two alternative schemes

AMOUNT_PATTERN = re.compile(r"-?[0-9]+(\.[0-9]+)?")

# Line positions
LINE_ACCOUNT = 3
LINE_CREDITOR = 4
LINE_AMOUNT = 18
LINE_CURRENCY = 19
LINE_DEBTOR = 20
LINE_REFERENCE_TYPE = 27
LINE_REFERENCE = 28
LINE_UNSTRUCTURED_MESSAGE = 29
LINE_BILL_INFORMATION = 31
LINE_ALTERNATIVE_SCHEMES = 32


# =============================================================================
# Encoding
# =============================================================================

def _address_lines(address: Address | None) -> list[str]:
    """Encode an address as 7 lines; an absent address gives 7 empty lines."""
    if address is None:
        return [""] * ADDRESS_LINE_COUNT
    if address.address_type == AddressType.COMBINED:
        return [
            ADDRESS_TYPE_COMBINED,
            address.name or "",
            address.address_line1 or "",
            address.address_line2 or "",
            "",
            "",
            address.country_code or "",
        ]
    return [
        ADDRESS_TYPE_STRUCTURED,
        address.name or "",
        address.street or "",
        address.house_no or "",
        address.postal_code or "",
        address.town or "",
        address.country_code or "",
    ]


def format_amount(amount: Decimal | None) -> str:
    """Format an amount with two decimals and a period, independent of locale."""
    if amount is None:
        return ""
    return f"{amount:.2f}"


def encode_payload(bill: Bill, settings: Settings | None = None) -> str:
    """
    Encode a validated bill as payload text.

    Args:
        bill: A bill as produced by validate_bill()
        settings: Library settings (line separator)

    Returns:
        Payload text, lines joined by the configured separator
    """
    settings = settings or get_settings()
    reference = bill.reference or Reference()

    lines = [HEADER, VERSION, CODING_TYPE, bill.account or ""]
    lines += _address_lines(bill.creditor)
    lines += [""] * ADDRESS_LINE_COUNT
    lines += [format_amount(bill.amount), bill.currency or ""]
    lines += _address_lines(bill.debtor)
    lines += [
        reference.reference_type.value,
        reference.value or "",
        bill.unstructured_message or "",
        TRAILER,
    ]

    if bill.bill_information is not None or bill.alternative_schemes:
        if bill.bill_information is not None:
            lines.append(encode_swico(bill.bill_information))
        else:
            lines.append("")
        lines += list(bill.alternative_schemes)

    return settings.line_separator.join(lines)


# =============================================================================
# Decoding
# =============================================================================

def _optional(value: str) -> str | None:
    return value or None


def _decode_address(lines: list[str], start: int) -> Address | None:
    """Decode the 7 lines of an address; all empty means no address."""
    fields = lines[start:start + ADDRESS_LINE_COUNT]
    if not any(fields):
        return None
    address_type, name, line1, line2, postal_code, town, country_code = fields
    if address_type == ADDRESS_TYPE_STRUCTURED:
        return Address(
            name=_optional(name),
            street=_optional(line1),
            house_no=_optional(line2),
            postal_code=_optional(postal_code),
            town=_optional(town),
            country_code=_optional(country_code),
        )
    return Address(
        name=_optional(name),
        address_line1=_optional(line1),
        address_line2=_optional(line2),
        country_code=_optional(country_code),
    )


def _decode_amount(text: str) -> Decimal | None:
    """Plain decimal notation only; exponents and grouping are rejected."""
    if not text:
        return None
    if not AMOUNT_PATTERN.fullmatch(text):
        raise ValueError(f"Invalid amount {text!r}")
    return Decimal(text)


def decode_payload(text: str | None, settings: Settings | None = None) -> Bill | None:
    """
    Decode payload text into a bill.

    Only the header, version and coding type are checked. Field contents
    are taken as they are. Missing optional trailing lines are treated as
    absent.

    Args:
        text: Payload text
        settings: Library settings (line separator)

    Returns:
        The decoded (unvalidated) bill, or None if the text does not have
        the structure of a QR-bill payload
    """
    settings = settings or get_settings()
    if not text:
        return None

    lines = text.split(settings.line_separator)
    while len(lines) > MAX_LINE_COUNT and lines[-1] == "":
        lines.pop()

    if not MIN_LINE_COUNT <= len(lines) <= MAX_LINE_COUNT:
        logger.debug("Payload has %d lines, expected %d to %d", len(lines), MIN_LINE_COUNT, MAX_LINE_COUNT)
        return None
    if lines[0] != HEADER or lines[1] != VERSION or lines[2] != CODING_TYPE:
        logger.debug("Payload header %r is not supported", lines[:3])
        return None

    try:
        amount = _decode_amount(lines[LINE_AMOUNT])
    except ValueError:
        logger.debug("Payload amount %r is not a number", lines[LINE_AMOUNT])
        return None

    try:
        reference_type = ReferenceType(lines[LINE_REFERENCE_TYPE])
    except ValueError:
        logger.debug("Payload reference type %r is unknown", lines[LINE_REFERENCE_TYPE])
        return None

    bill_information = None
    alternative_schemes: tuple[str, ...] = ()
    if len(lines) > LINE_BILL_INFORMATION:
        bill_information = decode_swico(_optional(lines[LINE_BILL_INFORMATION]))
        alternative_schemes = tuple(s for s in lines[LINE_ALTERNATIVE_SCHEMES:] if s)

    return Bill(
        account=_optional(lines[LINE_ACCOUNT]),
        creditor=_decode_address(lines, LINE_CREDITOR),
        amount=amount,
        currency=_optional(lines[LINE_CURRENCY]),
        debtor=_decode_address(lines, LINE_DEBTOR),
        reference=Reference(
            value=_optional(lines[LINE_REFERENCE]),
            reference_type=reference_type,
        ),
        unstructured_message=_optional(lines[LINE_UNSTRUCTURED_MESSAGE]),
        bill_information=bill_information,
        alternative_schemes=alternative_schemes,
    )
