"""
zahlteil - Swiss QR-bill data model, validation and payload codecs.
"""

from zahlteil.codecs import decode_payload, decode_swico, encode_payload, encode_swico
from zahlteil.domain.models import (
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
from zahlteil.domain.validation import AddressRole, validate_address, validate_bill, validate_reference
from zahlteil.errors import QRBillError, QRBillValidationError
from zahlteil.services import PaymentPartService

__version__ = "0.1.0"

__all__ = [
    "Address",
    "AddressRole",
    "AddressType",
    "Bill",
    "MessageType",
    "PaymentPartService",
    "QRBillError",
    "QRBillValidationError",
    "Reference",
    "ReferenceType",
    "SwicoBillInformation",
    "ValidationMessage",
    "ValidationResult",
    "decode_payload",
    "decode_swico",
    "encode_payload",
    "encode_swico",
    "validate_address",
    "validate_bill",
    "validate_reference",
]
