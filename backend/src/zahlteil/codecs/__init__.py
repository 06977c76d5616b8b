"""
Codecs subpackage - QR-bill payload text and Swico S1 bill information.
"""

from .payload import decode_payload, encode_payload
from .swico import decode_swico, encode_swico

__all__ = ["encode_payload", "decode_payload", "encode_swico", "decode_swico"]
