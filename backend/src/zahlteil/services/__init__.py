"""
Services package - entry points wiring the core to external collaborators.
"""

from .payment_part import DisplayMessage, PaymentPartService

__all__ = ["PaymentPartService", "DisplayMessage"]
