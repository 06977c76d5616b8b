"""
Exceptions raised by the convenience entry points.

The validation engine and the codecs never raise for bad input data: the
engine reports ValidationMessages and the decoders return None. Exceptions
are reserved for callers that ask for a payload from a bill that turns out
to be invalid.
"""

from zahlteil.domain.models import MessageType, ValidationResult


class QRBillError(Exception):
    """Base class of all library errors."""


class QRBillValidationError(QRBillError):
    """The bill has validation errors and cannot be encoded."""

    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        errors = [m for m in result.messages if m.type == MessageType.ERROR]
        summary = ", ".join(f"{m.field}: {m.message_key}" for m in errors)
        super().__init__(f"QR bill data is invalid ({summary})")
