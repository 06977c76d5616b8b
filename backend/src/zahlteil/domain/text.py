"""
Text cleaning for QR-bill fields.

The payment standard restricts text to an extended Latin character set:
- Basic Latin (printable ASCII)
- Latin-1 Supplement
- Latin Extended-A
- a few additional letters (Romanian S/T with comma below) and the euro sign

Characters outside the set are transliterated where a reasonable equivalent
exists (e.g. letters with unusual diacritics lose the diacritic). Characters
without an equivalent are reported to the caller.
"""

import re
import unicodedata
from dataclasses import dataclass

# Punctuation without a compatibility decomposition
TRANSLITERATIONS = {
    "‘": "'",
    "’": "'",
    "‚": "'",
    "‛": "'",
    "“": '"',
    "”": '"',
    "„": '"',
    "‟": '"',
    "‐": "-",
    "‑": "-",
    "‒": "-",
    "–": "-",
    "—": "-",
    "―": "-",
    "•": "*",
    "‹": "<",
    "›": ">",
}

WHITESPACE_RUN = re.compile(r"\s+")


def is_valid_character(ch: str) -> bool:
    """True if the character belongs to the permitted character set."""
    code = ord(ch)
    return (
        0x20 <= code <= 0x7E
        or 0xA0 <= code <= 0x17F
        or 0x218 <= code <= 0x21B
        or code == 0x20AC
    )


def _transliterate(ch: str) -> str | None:
    """Find a permitted replacement for a single character, if any."""
    if ch in TRANSLITERATIONS:
        return TRANSLITERATIONS[ch]
    decomposed = unicodedata.normalize("NFKD", ch)
    replacement = "".join(c for c in decomposed if not unicodedata.combining(c))
    if replacement and all(is_valid_character(c) for c in replacement):
        return replacement
    return None


@dataclass(frozen=True)
class CleanedText:
    """Result of cleaning a single text value."""
    value: str | None
    replaced_characters: bool = False
    unsupported_characters: bool = False


def collapse_whitespace(value: str | None) -> str | None:
    """
    Trim a value and collapse runs of whitespace into single spaces.

    Returns None for None and for values consisting of whitespace only.
    """
    if value is None:
        return None
    collapsed = WHITESPACE_RUN.sub(" ", value).strip()
    return collapsed or None


def clean_text(value: str | None, transliterate: bool = True) -> CleanedText:
    """
    Trim, collapse whitespace and enforce the permitted character set.

    Args:
        value: Raw field value
        transliterate: Replace unsupported characters by permitted
            equivalents; if False, every unsupported character is reported

    Returns:
        CleanedText with the cleaned value and flags telling whether
        characters were replaced or could not be replaced
    """
    collapsed = collapse_whitespace(value)
    if collapsed is None:
        return CleanedText(value=None)

    collapsed = unicodedata.normalize("NFC", collapsed)
    if all(is_valid_character(ch) for ch in collapsed):
        return CleanedText(value=collapsed)

    replaced = False
    unsupported = False
    parts: list[str] = []
    for ch in collapsed:
        if is_valid_character(ch):
            parts.append(ch)
            continue
        replacement = _transliterate(ch) if transliterate else None
        if replacement is None:
            unsupported = True
            parts.append(ch)
        else:
            replaced = True
            parts.append(replacement)

    return CleanedText(
        value=collapse_whitespace("".join(parts)),
        replaced_characters=replaced,
        unsupported_characters=unsupported,
    )


def remove_whitespace(value: str | None) -> str | None:
    """Strip all whitespace; None if nothing remains."""
    if value is None:
        return None
    stripped = "".join(value.split())
    return stripped or None
