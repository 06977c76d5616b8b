"""
Check digit algorithms for accounts and payment references.

Two algorithms are in use:
1. Mod10 recursive - the table-driven check digit of QR references
2. ISO 7064 MOD 97-10 - the check digits of IBANs and ISO 11649
   creditor references

The checksum routines assume pre-filtered input (digits only, or upper-case
alphanumerics only). The is_valid_* predicates do that filtering and are what
the validators call.
"""

from collections.abc import Iterable

from .constants import QR_IID_MAX, QR_IID_MIN

# Carry transitions of the Mod10 recursive algorithm. Row n is row 0
# rotated left by n, so a lookup is MOD_10_TABLE[(carry + digit) % 10].
MOD_10_TABLE = (0, 9, 4, 6, 8, 2, 7, 1, 3, 5)

QR_REFERENCE_LENGTH = 27
MAX_CREDITOR_REFERENCE_LENGTH = 25
MIN_CREDITOR_REFERENCE_LENGTH = 5


def _digits(value: str | Iterable[int]) -> list[int]:
    if isinstance(value, str):
        if not value.isascii() or not value.isdigit():
            raise ValueError(f"Expected decimal digits, got {value!r}")
        return [int(ch) for ch in value]
    return [int(d) for d in value]


def _mod10_carry(digits: Iterable[int]) -> int:
    carry = 0
    for digit in digits:
        carry = MOD_10_TABLE[(carry + digit) % 10]
    return carry


def mod10_check_digit(digits: str | Iterable[int]) -> int:
    """
    Compute the Mod10 recursive check digit.

    Args:
        digits: Decimal digits, as a string or a sequence of ints

    Returns:
        The check digit (0-9) to append

    Example:
        >>> mod10_check_digit("21000000000313947143000901")
        7
    """
    return (10 - _mod10_carry(_digits(digits))) % 10


def mod10_validate(digits: str | Iterable[int]) -> bool:
    """Check a digit sequence whose last digit is the Mod10 check digit."""
    values = _digits(digits)
    if not values:
        return False
    return mod10_check_digit(values[:-1]) == values[-1]


def mod97_remainder(identifier: str) -> int:
    """
    Compute the ISO 7064 MOD 97-10 remainder of an identifier.

    The first four characters are moved to the end and letters are
    replaced by two digits (A=10 ... Z=35). The remainder is accumulated
    digit by digit so no large integers are built.
    """
    rearranged = identifier[4:] + identifier[:4]
    remainder = 0
    for ch in rearranged:
        if "0" <= ch <= "9":
            remainder = (remainder * 10 + ord(ch) - ord("0")) % 97
        elif "A" <= ch <= "Z":
            remainder = (remainder * 100 + ord(ch) - ord("A") + 10) % 97
        else:
            raise ValueError(f"Invalid character {ch!r} in {identifier!r}")
    return remainder


def mod97_validate(identifier: str) -> bool:
    """True if the identifier carries valid MOD 97-10 check digits."""
    return mod97_remainder(identifier) == 1


def _is_upper_alnum(value: str) -> bool:
    return value.isascii() and value.isalnum() and value == value.upper()


def is_valid_iban(iban: str) -> bool:
    """
    Validate the structure and check digits of an IBAN.

    The IBAN must be free of whitespace and upper-case.
    """
    if len(iban) < 5 or len(iban) > 34:
        return False
    if not _is_upper_alnum(iban):
        return False
    if not iban[:2].isalpha() or not iban[2:4].isdigit():
        return False
    return mod97_validate(iban)


def is_qr_iban(iban: str) -> bool:
    """
    Check if a (valid) Swiss or Liechtenstein IBAN is a QR-IBAN.

    The institution identifier at positions 5-9 of a QR-IBAN falls into
    a reserved range.
    """
    iid = iban[4:9]
    if len(iid) != 5 or not iid.isdigit():
        return False
    return QR_IID_MIN <= int(iid) <= QR_IID_MAX


def is_valid_qr_reference(reference: str) -> bool:
    """Validate a whitespace-free QR reference (27 digits, Mod10)."""
    if len(reference) != QR_REFERENCE_LENGTH:
        return False
    if not reference.isascii() or not reference.isdigit():
        return False
    return mod10_validate(reference)


def is_valid_creditor_reference(reference: str) -> bool:
    """Validate a whitespace-free, upper-case ISO 11649 creditor reference."""
    if not MIN_CREDITOR_REFERENCE_LENGTH <= len(reference) <= MAX_CREDITOR_REFERENCE_LENGTH:
        return False
    if not reference.startswith("RF") or not reference[2:4].isdigit():
        return False
    if not _is_upper_alnum(reference):
        return False
    return mod97_validate(reference)


def create_qr_reference(raw_reference: str) -> str:
    """
    Build a QR reference from up to 26 digits by appending the check digit.

    Shorter inputs are left-padded with zeros. Whitespace is ignored.
    """
    digits = "".join(raw_reference.split())
    if not digits or len(digits) > QR_REFERENCE_LENGTH - 1:
        raise ValueError(f"QR reference body must have 1 to 26 digits, got {raw_reference!r}")
    body = digits.rjust(QR_REFERENCE_LENGTH - 1, "0")
    return body + str(mod10_check_digit(body))


def create_creditor_reference(raw_reference: str) -> str:
    """
    Build an ISO 11649 creditor reference ("RF" + check digits + reference).

    Whitespace is ignored and letters are upper-cased.
    """
    body = "".join(raw_reference.split()).upper()
    if not body or len(body) > MAX_CREDITOR_REFERENCE_LENGTH - 4 or not _is_upper_alnum(body):
        raise ValueError(f"Creditor reference body must have 1 to 21 alphanumerics, got {raw_reference!r}")
    remainder = mod97_remainder("RF00" + body)
    return f"RF{98 - remainder:02d}{body}"
