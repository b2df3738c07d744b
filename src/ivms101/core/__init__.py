"""Lookup tables and identifier checks consumed by the validation rules."""

from ivms101.core.country_codes import (
    UNKNOWN_COUNTRY,
    is_known_country_code,
    lookup_country_name,
)
from ivms101.core.lei import LeiError, is_valid_lei, validate_lei
from .registration_authority import (
    RegistrationAuthorityListLoader,
    is_valid_registration_authority,
    use_registration_authority_list,
)

__all__ = [
    'UNKNOWN_COUNTRY',
    'is_known_country_code',
    'lookup_country_name',
    'LeiError',
    'is_valid_lei',
    'validate_lei',
    'RegistrationAuthorityListLoader',
    'is_valid_registration_authority',
    'use_registration_authority_list',
]
