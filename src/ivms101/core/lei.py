"""
Legal Entity Identifier (ISO 17442) checks.

An LEI is 20 characters long: 18 upper case alphanumerics followed by two
check digits computed with ISO 7064 MOD 97-10, the same scheme IBANs use.
"""

import re

LEI_LENGTH = 20
_LEI_PATTERN = re.compile(r"[A-Z0-9]{18}[0-9]{2}")


class LeiError(ValueError):
    """Raised for text that is not a well formed Legal Entity Identifier."""


def _mod97(text: str) -> int:
    # Letters count as two digit numbers: A=10 ... Z=35
    digits = "".join(str(int(ch, 36)) for ch in text)
    return int(digits) % 97


def validate_lei(text: str) -> None:
    """
    Check ``text`` against the LEI format and checksum.

    Args:
        text: The candidate identifier, without surrounding whitespace.

    Raises:
        LeiError: If the length, the character set or the check digits are wrong.
    """
    if len(text) != LEI_LENGTH:
        raise LeiError(f"LEI must be {LEI_LENGTH} characters, got {len(text)}")
    if not _LEI_PATTERN.fullmatch(text):
        raise LeiError(f"LEI must be 18 upper case alphanumerics followed by 2 digits, got '{text}'")
    if _mod97(text) != 1:
        raise LeiError(f"LEI check digits do not match for '{text}'")


def is_valid_lei(text: str) -> bool:
    """Return True if ``text`` is a structurally valid LEI."""
    try:
        validate_lei(text)
    except LeiError:
        return False
    return True
