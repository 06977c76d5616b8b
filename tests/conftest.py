"""
Shared sample data for the QR-bill tests.

Run with: pytest tests/ -v
"""

from datetime import date
from decimal import Decimal

import pytest

from zahlteil.domain.models import (
    Address,
    Bill,
    Reference,
    ReferenceType,
    SwicoBillInformation,
)

QR_IBAN = "CH4431999123000889012"
REGULAR_IBAN = "CH9300762011623852957"
QR_REFERENCE = "210000000003139471430009017"
CREDITOR_REFERENCE = "RF18539007547034"


@pytest.fixture
def creditor() -> Address:
    return Address(
        name="Robert Schneider AG",
        street="Rue du Lac",
        house_no="1268",
        postal_code="2501",
        town="Biel",
        country_code="CH",
    )


@pytest.fixture
def debtor() -> Address:
    return Address(
        name="Pia-Maria Rutschmann-Schnyder",
        street="Grosse Marktgasse",
        house_no="28",
        postal_code="9400",
        town="Rorschach",
        country_code="CH",
    )


@pytest.fixture
def bill_information() -> SwicoBillInformation:
    return SwicoBillInformation(
        invoice_number="10201409",
        invoice_date=date(2019, 5, 12),
        vat_number="106017086",
        payment_conditions=((Decimal("2"), 10), (Decimal("0"), 30)),
    )


@pytest.fixture
def qr_bill(creditor, debtor, bill_information) -> Bill:
    """Bill with QR-IBAN and QR reference, as a user would enter it."""
    return Bill(
        account="CH44 3199 9123 0008 8901 2",
        creditor=creditor,
        amount=Decimal("1949.75"),
        currency="CHF",
        debtor=debtor,
        reference=Reference("21 00000 00003 13947 14300 09017", ReferenceType.QRR),
        unstructured_message="Instruction of 15.09.2019",
        bill_information=bill_information,
    )


@pytest.fixture
def scor_bill(creditor) -> Bill:
    """Bill with regular IBAN and creditor reference, no amount, no debtor."""
    return Bill(
        account=REGULAR_IBAN,
        creditor=creditor,
        currency="EUR",
        reference=Reference(CREDITOR_REFERENCE, ReferenceType.SCOR),
    )


@pytest.fixture
def combined_bill() -> Bill:
    """Bill with combined addresses and alternative schemes, no reference."""
    return Bill(
        account=REGULAR_IBAN,
        creditor=Address(
            name="Salvation Army Foundation Switzerland",
            address_line1="Laupenstrasse 5",
            address_line2="3008 Bern",
            country_code="CH",
        ),
        amount=Decimal("50"),
        currency="CHF",
        debtor=Address(
            name="Sarah Beispiel",
            address_line1="Mustergasse 1",
            address_line2="3600 Thun",
            country_code="CH",
        ),
        unstructured_message="Donation",
        alternative_schemes=("eBill/B/sarah.beispiel@example.com",),
    )
