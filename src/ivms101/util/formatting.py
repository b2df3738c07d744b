from typing import Optional

from ..core.country_codes import lookup_country_name


def format_address(
    street: Optional[str],
    number: Optional[str],
    address_line: Optional[str],
    postcode: Optional[str],
    town: str,
    country_code: str,
) -> str:
    """
    Render an address on a single line for display.

    Example: ``"Main street 12, 8000 Zurich, Switzerland"``. Absent parts are
    left out; the building number is only shown together with a street.
    """
    parts = []
    if street:
        parts.append(f"{street} {number}" if number else street)
    if address_line:
        parts.append(address_line)
    parts.append(f"{postcode} {town}" if postcode else town)
    parts.append(lookup_country_name(country_code))
    return ", ".join(parts)
