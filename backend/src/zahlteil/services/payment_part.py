"""
Payment part service.

Coordinates the QR-bill pipeline for callers that want a single entry point:
1. Validation of the raw bill
2. Payload encoding of the validated bill
3. QR code generation and drawing through external collaborators
4. Localized display of validation messages

The heavy lifting lives in the domain and codec modules; this service only
wires them to the symbol generator, message catalog and canvas.
"""

import logging
import re
from dataclasses import dataclass

from zahlteil.codecs import decode_payload, encode_payload
from zahlteil.config import Settings, get_settings
from zahlteil.domain.models import Bill, MessageType, ValidationResult
from zahlteil.domain.validation import validate_bill
from zahlteil.errors import QRBillError, QRBillValidationError
from zahlteil.ports import Canvas, MessageCatalog, SymbolGenerator

logger = logging.getLogger(__name__)

BLACK = 0x000000

PLACEHOLDER = re.compile(r"\{(\d+)\}")


def _fill_placeholders(template: str, parameters: tuple[str, ...]) -> str:
    """Replace {0}, {1}, ... in one pass; unknown indexes stay as they are."""

    def substitute(match: re.Match[str]) -> str:
        index = int(match.group(1))
        return parameters[index] if index < len(parameters) else match.group(0)

    return PLACEHOLDER.sub(substitute, template)


@dataclass(frozen=True)
class DisplayMessage:
    """A validation message rendered for display."""
    type: MessageType
    field: str
    text: str


class PaymentPartService:
    """
    Validates, encodes and renders QR bills.

    Example:
        service = PaymentPartService(symbol_generator=make_qr_matrix)

        payload = service.create_payload(bill)
        matrix = service.generate_symbol(bill)
    """

    def __init__(
        self,
        symbol_generator: SymbolGenerator | None = None,
        catalog: MessageCatalog | None = None,
        settings: Settings | None = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            symbol_generator: Turns payload text into a QR module matrix
                (required for generate_symbol and draw_symbol)
            catalog: Message catalog for describe() (optional)
            settings: Library settings (loaded from environment if None)
        """
        self.symbol_generator = symbol_generator
        self.catalog = catalog
        self.settings = settings or get_settings()

    def validate(self, bill: Bill) -> ValidationResult:
        """Validate a bill and return all findings."""
        return validate_bill(bill, self.settings)

    def create_payload(self, bill: Bill) -> str:
        """
        Validate a bill and encode it as payload text.

        Raises:
            QRBillValidationError: If the bill has validation errors
        """
        result = self.validate(bill)
        if result.validated_bill is None:
            raise QRBillValidationError(result)
        return encode_payload(result.validated_bill, self.settings)

    def read_payload(self, text: str) -> ValidationResult | None:
        """
        Decode payload text and validate the decoded bill.

        Returns:
            The validation result, or None if the text is not a QR-bill payload
        """
        bill = decode_payload(text, self.settings)
        if bill is None:
            logger.info("Text is not a QR-bill payload")
            return None
        return self.validate(bill)

    def generate_symbol(self, bill: Bill) -> list[list[bool]]:
        """
        Validate and encode a bill, then generate its QR code modules.

        Raises:
            QRBillValidationError: If the bill has validation errors
            QRBillError: If no symbol generator is configured
        """
        if self.symbol_generator is None:
            raise QRBillError("No symbol generator configured")
        payload = self.create_payload(bill)
        return [list(row) for row in self.symbol_generator(payload)]

    def draw_symbol(self, bill: Bill, canvas: Canvas, x: float, y: float, size: float) -> None:
        """
        Draw the QR code of a bill as filled squares onto a canvas.

        Args:
            bill: Bill to encode
            canvas: Drawing surface (millimeters, y-axis pointing up)
            x: Left edge of the code
            y: Bottom edge of the code
            size: Width and height of the code
        """
        modules = self.generate_symbol(bill)
        if not modules:
            return
        module_size = size / len(modules)
        top = y + size
        for row, line in enumerate(modules):
            for column, dark in enumerate(line):
                if dark:
                    canvas.add_rectangle(
                        x + column * module_size,
                        top - (row + 1) * module_size,
                        module_size,
                        module_size,
                    )
        canvas.fill_path(BLACK)

    def describe(self, result: ValidationResult, locale: str) -> list[DisplayMessage]:
        """
        Turn validation messages into display text using the message catalog.

        Messages without a catalog entry fall back to their message key.
        Positional parameters replace the {0}, {1}, ... placeholders.
        """
        described: list[DisplayMessage] = []
        for message in result.messages:
            template = self.catalog.lookup(message.message_key, locale) if self.catalog else None
            if template is None:
                text = message.message_key
            else:
                text = _fill_placeholders(template, message.message_parameters)
            described.append(DisplayMessage(type=message.type, field=message.field, text=text))
        return described
