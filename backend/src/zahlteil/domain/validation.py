"""
Validation rules for QR-bill data.

This module contains pure functions that clean and validate a bill against
the Swiss payment standard. No side effects, no I/O - just rules.

Validation covers:
1. Single fields - currency, amount, account, reference, text lengths
2. Addresses - shape conflicts, mandatory subfields, country codes
3. Cross-field rules - QR-IBAN requires a QR reference and vice versa

Design Decisions:
- All rules run on every call; messages are collected, never fail-fast
- Messages appear in field order: currency, amount, account, creditor,
  debtor, reference, unstructured message, bill information,
  alternative schemes
- The input bill is never modified; a cleaned copy is returned in the result
- Unsupported characters are transliterated with a warning; only
  characters without a permitted equivalent are errors
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from functools import lru_cache

import pycountry

from zahlteil.config import Settings, get_settings
from zahlteil.codecs.swico import PREFIX as SWICO_PREFIX
from zahlteil.codecs.swico import decode_swico, encode_swico

from . import constants as c
from .checksums import is_qr_iban, is_valid_creditor_reference, is_valid_iban, is_valid_qr_reference
from .models import (
    Address,
    AddressType,
    Bill,
    MessageType,
    Reference,
    ReferenceType,
    SwicoBillInformation,
    ValidationMessage,
    ValidationResult,
)
from .text import clean_text, is_valid_character, remove_whitespace

logger = logging.getLogger(__name__)


class AddressRole(Enum):
    """Role of an address on the bill, valued by its field root."""
    CREDITOR = c.FIELD_ROOT_CREDITOR
    DEBTOR = c.FIELD_ROOT_DEBTOR

    @property
    def is_mandatory(self) -> bool:
        return self is AddressRole.CREDITOR


# (attribute, subfield, maximum length) in message order
ADDRESS_TEXT_FIELDS = (
    ("name", c.SUBFIELD_NAME, c.MAX_NAME_LENGTH),
    ("address_line1", c.SUBFIELD_ADDRESS_LINE_1, c.MAX_ADDRESS_LINE_LENGTH),
    ("address_line2", c.SUBFIELD_ADDRESS_LINE_2, c.MAX_ADDRESS_LINE_LENGTH),
    ("street", c.SUBFIELD_STREET, c.MAX_STREET_LENGTH),
    ("house_no", c.SUBFIELD_HOUSE_NO, c.MAX_HOUSE_NO_LENGTH),
    ("postal_code", c.SUBFIELD_POSTAL_CODE, c.MAX_POSTAL_CODE_LENGTH),
    ("town", c.SUBFIELD_TOWN, c.MAX_TOWN_LENGTH),
)

SUBFIELDS = {attribute: subfield for attribute, subfield, _ in ADDRESS_TEXT_FIELDS}
SUBFIELDS["country_code"] = c.SUBFIELD_COUNTRY_CODE

# Subfields that only exist in one of the two address shapes
SHAPE_SPECIFIC_FIELDS = ("address_line1", "address_line2", "street", "house_no", "postal_code", "town")

MANDATORY_FIELDS = {
    AddressType.STRUCTURED: ("name", "postal_code", "town", "country_code"),
    AddressType.COMBINED: ("name", "address_line2", "country_code"),
    # Shape unknown: require what either shape would need
    AddressType.UNDETERMINED: ("name", "address_line2", "postal_code", "town", "country_code"),
    AddressType.CONFLICTING: ("name", "country_code"),
}


@lru_cache
def get_valid_country_codes() -> frozenset[str]:
    """All ISO 3166-1 alpha-2 country codes."""
    return frozenset(country.alpha_2 for country in pycountry.countries)


def _clean_field(
    value: str | None,
    field_name: str,
    result: ValidationResult,
    settings: Settings,
    max_length: int | None = None,
) -> str | None:
    """
    Clean a text value and report character and length issues.

    Over-long values are clipped with a warning when max_length is given.
    """
    cleaned = clean_text(value, transliterate=settings.transliterate_characters)
    if cleaned.unsupported_characters:
        result.add_message(MessageType.ERROR, field_name, c.KEY_UNSUPPORTED_CHARACTERS)
    if cleaned.replaced_characters:
        result.add_message(MessageType.WARNING, field_name, c.KEY_REPLACED_UNSUPPORTED_CHARACTERS)

    text = cleaned.value
    if text is not None and max_length is not None and len(text) > max_length:
        result.add_message(MessageType.WARNING, field_name, c.KEY_FIELD_VALUE_CLIPPED, max_length)
        text = text[:max_length].rstrip() or None
    return text


# =============================================================================
# Addresses
# =============================================================================

def validate_address(
    address: Address | None,
    role: AddressRole,
    settings: Settings | None = None,
) -> tuple[Address | None, list[ValidationMessage]]:
    """
    Clean and validate the address of the creditor or the debtor.

    Rules:
    - text is trimmed, whitespace collapsed and the character set enforced
    - subfields of both address shapes must not be mixed
    - mandatory subfields depend on the shape; an optional (debtor)
      address is either entirely empty or validated like a mandatory one
    - the country code must be an ISO 3166-1 alpha-2 code

    Args:
        address: Raw address, possibly None
        role: Creditor or debtor; determines field names and whether the
            address is mandatory
        settings: Library settings

    Returns:
        The cleaned address (None if empty) and the validation messages
    """
    settings = settings or get_settings()
    result = ValidationResult()
    root = role.value
    address = address or Address()

    values: dict[str, str | None] = {}
    for attribute, subfield, max_length in ADDRESS_TEXT_FIELDS:
        values[attribute] = _clean_field(
            getattr(address, attribute), root + subfield, result, settings, max_length
        )
    country_code = remove_whitespace(address.country_code)
    values["country_code"] = country_code.upper() if country_code else None

    cleaned = Address(**values)
    if cleaned.is_empty:
        if not role.is_mandatory:
            return None, result.messages
        logger.debug("Mandatory address %s is empty", root)

    address_type = cleaned.address_type
    if address_type == AddressType.CONFLICTING:
        for attribute in SHAPE_SPECIFIC_FIELDS:
            if values[attribute]:
                result.add_message(MessageType.ERROR, root + SUBFIELDS[attribute], c.KEY_ADDRESS_TYPE_CONFLICT)

    for attribute in MANDATORY_FIELDS[address_type]:
        if not values[attribute]:
            result.add_message(MessageType.ERROR, root + SUBFIELDS[attribute], c.KEY_FIELD_VALUE_MISSING)

    if values["country_code"] and values["country_code"] not in get_valid_country_codes():
        result.add_message(MessageType.ERROR, root + c.SUBFIELD_COUNTRY_CODE, c.KEY_COUNTRY_CODE_INVALID)

    return (None if cleaned.is_empty else cleaned), result.messages


# =============================================================================
# References
# =============================================================================

def validate_reference(
    reference: Reference | None,
    account: str | None,
) -> tuple[Reference, list[ValidationMessage]]:
    """
    Clean and validate the payment reference.

    The reference must match the grammar of its type:
    - QRR: 27 digits with a valid Mod10 check digit
    - SCOR: "RF", two Mod97 check digits and up to 21 alphanumerics
    - NON: no reference at all

    If the (already validated) account is known, the reference type must
    match the account kind: a QR-IBAN requires QRR and a regular IBAN
    forbids it.

    Args:
        reference: Raw reference, possibly None
        account: Cleaned account or None if it is missing or invalid

    Returns:
        The cleaned reference and the validation messages
    """
    result = ValidationResult()
    reference = reference or Reference()
    reference_type = reference.reference_type
    value = remove_whitespace(reference.value)
    qr_iban = account is not None and is_qr_iban(account)

    if reference_type == ReferenceType.QRR:
        if value is None:
            result.add_message(MessageType.ERROR, c.FIELD_REFERENCE, c.KEY_FIELD_VALUE_MISSING)
        elif not is_valid_qr_reference(value):
            result.add_message(MessageType.ERROR, c.FIELD_REFERENCE, c.KEY_REF_INVALID)
        if account is not None and not qr_iban:
            result.add_message(MessageType.ERROR, c.FIELD_REFERENCE, c.KEY_QR_REF_INVALID_USE_FOR_NON_QR_IBAN)

    elif reference_type == ReferenceType.SCOR:
        value = value.upper() if value else None
        if value is None:
            result.add_message(MessageType.ERROR, c.FIELD_REFERENCE, c.KEY_FIELD_VALUE_MISSING)
        elif not is_valid_creditor_reference(value):
            result.add_message(MessageType.ERROR, c.FIELD_REFERENCE, c.KEY_REF_INVALID)
        if qr_iban:
            result.add_message(MessageType.ERROR, c.FIELD_REFERENCE, c.KEY_CRED_REF_INVALID_USE_FOR_QR_IBAN)

    else:
        if value is not None:
            result.add_message(MessageType.ERROR, c.FIELD_REFERENCE, c.KEY_REF_TYPE_INVALID)
        if qr_iban:
            result.add_message(MessageType.ERROR, c.FIELD_REFERENCE, c.KEY_QR_REF_MISSING)

    return Reference(value=value, reference_type=reference_type), result.messages


# =============================================================================
# Bill fields
# =============================================================================

def validate_currency(currency: str | None, result: ValidationResult) -> str | None:
    """Currency must be CHF or EUR."""
    currency = remove_whitespace(currency)
    if currency is None:
        result.add_message(MessageType.ERROR, c.FIELD_CURRENCY, c.KEY_FIELD_VALUE_MISSING)
        return None
    currency = currency.upper()
    if currency not in c.SUPPORTED_CURRENCIES:
        result.add_message(MessageType.ERROR, c.FIELD_CURRENCY, c.KEY_CURRENCY_NOT_CHF_OR_EUR)
    return currency


AMOUNT_MAGNITUDE_LIMIT = Decimal("1E+12")


def validate_amount(amount: Decimal | None, result: ValidationResult) -> Decimal | None:
    """
    Amount is optional; if given, it is rounded to cents and must lie in
    the range 0.01 to 999 999 999.99.
    """
    if amount is None:
        return None
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    # Checked before rounding: quantize fails once the digits exceed the context precision
    if not amount.is_finite() or abs(amount) >= AMOUNT_MAGNITUDE_LIMIT:
        result.add_message(
            MessageType.ERROR, c.FIELD_AMOUNT, c.KEY_AMOUNT_OUTSIDE_VALID_RANGE, c.MIN_AMOUNT, c.MAX_AMOUNT
        )
        return amount

    amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if not Decimal(c.MIN_AMOUNT) <= amount <= Decimal(c.MAX_AMOUNT):
        result.add_message(
            MessageType.ERROR, c.FIELD_AMOUNT, c.KEY_AMOUNT_OUTSIDE_VALID_RANGE, c.MIN_AMOUNT, c.MAX_AMOUNT
        )
    return amount


def validate_account(account: str | None, result: ValidationResult) -> str | None:
    """
    Account must be a valid IBAN from Switzerland or Liechtenstein.

    Returns:
        The cleaned IBAN, or None if it is missing or invalid
    """
    account = remove_whitespace(account)
    if account is None:
        result.add_message(MessageType.ERROR, c.FIELD_ACCOUNT, c.KEY_FIELD_VALUE_MISSING)
        return None

    account = account.upper()
    if not is_valid_iban(account):
        result.add_message(MessageType.ERROR, c.FIELD_ACCOUNT, c.KEY_ACCOUNT_IBAN_INVALID)
        return None
    if account[:2] not in c.SUPPORTED_IBAN_COUNTRIES:
        result.add_message(MessageType.ERROR, c.FIELD_ACCOUNT, c.KEY_ACCOUNT_IBAN_NOT_FROM_CH_OR_LI)
        return None
    if len(account) != 21:
        result.add_message(MessageType.ERROR, c.FIELD_ACCOUNT, c.KEY_ACCOUNT_IBAN_INVALID)
        return None
    return account


BILL_INFO_DATE_FIELDS = ("invoice_date", "vat_date", "vat_start_date", "vat_end_date")


def _has_encodable_dates(info: SwicoBillInformation, result: ValidationResult) -> bool:
    """Report dates whose year does not fit the two-digit Swico year."""
    encodable = True
    for attribute in BILL_INFO_DATE_FIELDS:
        value = getattr(info, attribute)
        if value is not None and not c.MIN_BILL_INFO_YEAR <= value.year <= c.MAX_BILL_INFO_YEAR:
            result.add_message(
                MessageType.ERROR,
                c.FIELD_BILL_INFORMATION,
                c.KEY_DATE_OUTSIDE_VALID_RANGE,
                c.MIN_BILL_INFO_YEAR,
                c.MAX_BILL_INFO_YEAR,
            )
            encodable = False
    return encodable


def validate_additional_information(
    unstructured_message: str | None,
    bill_information: SwicoBillInformation | None,
    result: ValidationResult,
    settings: Settings,
) -> tuple[str | None, SwicoBillInformation | None]:
    """
    Validate the unstructured message and the structured bill information.

    A message in Swico S1 syntax is moved into the bill information if no
    bill information was given. Bill information is stored in the form it
    takes after encoding, so that it survives a payload round trip. Dates
    outside the two-digit year range are errors and leave the bill
    information as given. Message and encoded bill information share a
    length limit.
    """
    message = _clean_field(unstructured_message, c.FIELD_UNSTRUCTURED_MESSAGE, result, settings)

    if bill_information is None and message is not None and message.startswith(SWICO_PREFIX):
        bill_information = decode_swico(message)
        message = None

    info_text = None
    if bill_information is not None and _has_encodable_dates(bill_information, result):
        info_text = encode_swico(bill_information)
        bill_information = decode_swico(info_text)
        if not all(is_valid_character(ch) for ch in info_text):
            result.add_message(MessageType.ERROR, c.FIELD_BILL_INFORMATION, c.KEY_UNSUPPORTED_CHARACTERS)

    limit = c.MAX_ADDITIONAL_INFO_LENGTH
    if info_text is None:
        if message is not None and len(message) > limit:
            result.add_message(MessageType.ERROR, c.FIELD_UNSTRUCTURED_MESSAGE, c.KEY_FIELD_VALUE_TOO_LONG, limit)
    elif message is None:
        if len(info_text) > limit:
            result.add_message(MessageType.ERROR, c.FIELD_BILL_INFORMATION, c.KEY_FIELD_VALUE_TOO_LONG, limit)
    elif len(message) + len(info_text) > limit:
        result.add_message(MessageType.ERROR, c.FIELD_UNSTRUCTURED_MESSAGE, c.KEY_ADDITIONAL_INFO_TOO_LONG, limit)
        result.add_message(MessageType.ERROR, c.FIELD_BILL_INFORMATION, c.KEY_ADDITIONAL_INFO_TOO_LONG, limit)

    return message, bill_information


def validate_alternative_schemes(
    schemes: tuple[str, ...] | list[str] | None,
    result: ValidationResult,
    settings: Settings,
) -> tuple[str, ...]:
    """At most two alternative scheme lines of at most 100 characters each."""
    cleaned: list[str] = []
    for scheme in schemes or ():
        value = _clean_field(scheme, c.FIELD_ALTERNATIVE_SCHEMES, result, settings)
        if value is None:
            continue
        if len(value) > c.MAX_ALTERNATIVE_SCHEME_LENGTH:
            result.add_message(
                MessageType.ERROR,
                c.FIELD_ALTERNATIVE_SCHEMES,
                c.KEY_FIELD_VALUE_TOO_LONG,
                c.MAX_ALTERNATIVE_SCHEME_LENGTH,
            )
        cleaned.append(value)

    if len(cleaned) > settings.alternative_scheme_limit:
        result.add_message(
            MessageType.ERROR,
            c.FIELD_ALTERNATIVE_SCHEMES,
            c.KEY_ALT_SCHEME_MAX_EXCEEDED,
            settings.alternative_scheme_limit,
        )
    return tuple(cleaned)


# =============================================================================
# Bill
# =============================================================================

def validate_bill(bill: Bill, settings: Settings | None = None) -> ValidationResult:
    """
    Execute complete validation of a bill.

    This orchestrates all field and cross-field rules into a single result.
    Every problem found is reported; the cleaned bill is attached to the
    result even if there are errors, while result.validated_bill is only
    available for bills without errors.

    Args:
        bill: Raw bill data
        settings: Library settings

    Returns:
        ValidationResult with the ordered messages and the cleaned bill
    """
    settings = settings or get_settings()
    result = ValidationResult()

    currency = validate_currency(bill.currency, result)
    amount = validate_amount(bill.amount, result)
    account = validate_account(bill.account, result)

    creditor, messages = validate_address(bill.creditor, AddressRole.CREDITOR, settings)
    result.messages.extend(messages)
    debtor, messages = validate_address(bill.debtor, AddressRole.DEBTOR, settings)
    result.messages.extend(messages)

    reference, messages = validate_reference(bill.reference, account)
    result.messages.extend(messages)

    unstructured_message, bill_information = validate_additional_information(
        bill.unstructured_message, bill.bill_information, result, settings
    )
    alternative_schemes = validate_alternative_schemes(bill.alternative_schemes, result, settings)

    result.cleaned_bill = Bill(
        account=account,
        creditor=creditor,
        amount=amount,
        currency=currency,
        debtor=debtor,
        reference=reference,
        unstructured_message=unstructured_message,
        bill_information=bill_information,
        alternative_schemes=alternative_schemes,
    )

    logger.debug(
        "Validated bill: %d errors, %d warnings",
        sum(1 for m in result.messages if m.type == MessageType.ERROR),
        sum(1 for m in result.messages if m.type == MessageType.WARNING),
    )
    return result
