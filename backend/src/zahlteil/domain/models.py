"""
Domain models for Swiss QR-bill payment parts.

These models represent the data carried by a QR bill: the creditor and
debtor addresses, the payment reference, the amount and the additional
information fields.

Design Decisions:
- Using frozen dataclasses for immutable value objects; validation
  produces cleaned copies instead of mutating its input
- Address is a single record whose shape (structured vs. combined) is
  derived from the populated subfields, not expressed by subclasses
- Decimal for all monetary values and rates to avoid floating-point errors
- Sequences are stored as tuples so equal bills compare equal
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum


class AddressType(Enum):
    """Shape of an address, derived from its populated subfields."""
    UNDETERMINED = "undetermined"
    STRUCTURED = "structured"
    COMBINED = "combined"
    CONFLICTING = "conflicting"


class ReferenceType(Enum):
    """Payment reference kinds, valued by their payload tokens."""
    QRR = "QRR"    # QR reference, 27 digits with Mod10 check digit
    SCOR = "SCOR"  # ISO 11649 creditor reference
    NON = "NON"    # without reference


class MessageType(Enum):
    """Severity of a validation message."""
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Address:
    """
    Postal address of the creditor or the debtor.

    A structured address uses street, house number, postal code and town.
    A combined address uses two free address lines. Name and country code
    belong to both shapes. Populating subfields of both shapes at once
    makes the address CONFLICTING, which validation reports as an error.
    """
    name: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    street: str | None = None
    house_no: str | None = None
    postal_code: str | None = None
    town: str | None = None
    country_code: str | None = None

    @property
    def address_type(self) -> AddressType:
        """Discriminate the address shape from the populated subfields."""
        combined = bool(self.address_line1 or self.address_line2)
        structured = bool(self.street or self.house_no or self.postal_code or self.town)
        if combined and structured:
            return AddressType.CONFLICTING
        if combined:
            return AddressType.COMBINED
        if structured:
            return AddressType.STRUCTURED
        return AddressType.UNDETERMINED

    @property
    def is_empty(self) -> bool:
        """True if no subfield carries a value."""
        return not any(
            (
                self.name,
                self.address_line1,
                self.address_line2,
                self.street,
                self.house_no,
                self.postal_code,
                self.town,
                self.country_code,
            )
        )


@dataclass(frozen=True)
class Reference:
    """Payment reference with its declared kind."""
    value: str | None = None
    reference_type: ReferenceType = ReferenceType.NON


@dataclass(frozen=True)
class SwicoBillInformation:
    """
    Structured bill information following the Swico S1 syntax.

    Every field is optional. Rate/amount pairs and payment conditions are
    kept in the order they were given.
    """
    invoice_number: str | None = None
    invoice_date: date | None = None
    customer_reference: str | None = None
    vat_number: str | None = None
    vat_date: date | None = None
    vat_start_date: date | None = None
    vat_end_date: date | None = None
    vat_rate: Decimal | None = None
    vat_rate_details: tuple[tuple[Decimal, Decimal], ...] | None = None
    vat_import_taxes: tuple[tuple[Decimal, Decimal], ...] | None = None
    payment_conditions: tuple[tuple[Decimal, int], ...] | None = None

    @property
    def due_date(self) -> date | None:
        """
        Invoice date plus the longest payment term.

        Only available if both the invoice date and at least one payment
        condition are known.
        """
        if self.invoice_date is None or not self.payment_conditions:
            return None
        days = max(days for _, days in self.payment_conditions)
        return self.invoice_date + timedelta(days=days)


@dataclass(frozen=True)
class Bill:
    """
    QR bill data, either raw user input or the cleaned result of validation.

    Amount is None for bills where the payer fills in the amount.
    Debtor is None for bills without a known payer.
    """
    account: str | None = None
    creditor: Address | None = None
    amount: Decimal | None = None
    currency: str | None = "CHF"
    debtor: Address | None = None
    reference: Reference = field(default_factory=Reference)
    unstructured_message: str | None = None
    bill_information: SwicoBillInformation | None = None
    alternative_schemes: tuple[str, ...] = ()


@dataclass(frozen=True)
class ValidationMessage:
    """
    A single validation finding.

    Carries a stable message key and positional parameters instead of
    display text so that localization stays outside the domain.
    """
    type: MessageType
    field: str
    message_key: str
    message_parameters: tuple[str, ...] = ()


@dataclass
class ValidationResult:
    """
    Outcome of validating a bill.

    Mutable because messages are collected incrementally during validation.
    Messages are kept in the order the rules ran.
    """
    messages: list[ValidationMessage] = field(default_factory=list)
    cleaned_bill: Bill | None = None

    def add_message(
        self,
        message_type: MessageType,
        field_name: str,
        message_key: str,
        *parameters: object,
    ) -> None:
        """Append a message; parameters are stored as strings."""
        self.messages.append(
            ValidationMessage(
                type=message_type,
                field=field_name,
                message_key=message_key,
                message_parameters=tuple(str(p) for p in parameters),
            )
        )

    @property
    def has_errors(self) -> bool:
        """True if any message is an error."""
        return any(m.type == MessageType.ERROR for m in self.messages)

    @property
    def has_warnings(self) -> bool:
        """True if any message is a warning."""
        return any(m.type == MessageType.WARNING for m in self.messages)

    @property
    def has_messages(self) -> bool:
        return bool(self.messages)

    @property
    def is_valid(self) -> bool:
        """Warnings do not make a bill invalid."""
        return not self.has_errors

    @property
    def validated_bill(self) -> Bill | None:
        """The cleaned bill, available only if no errors were found."""
        return self.cleaned_bill if self.is_valid else None
