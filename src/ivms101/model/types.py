"""Constrained value types used by the IVMS101 schema.

Length bounds are checked when a value is constructed (or decoded). Whether a
correctly sized code is actually recognised is a business rule and checked by
``validate()`` instead, so decoding errors stay distinct from rule violations.
"""

import logging
from typing import Any, ClassVar

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from ivms101.core.country_codes import UNKNOWN_COUNTRY, is_known_country_code
from ivms101.core.registration_authority import is_valid_registration_authority
from ivms101.errors import ShapeError, ValidationError

logger = logging.getLogger(__name__)


class ConstrainedString(str):
    """Immutable text whose length lies within ``min_length``..``max_length``.

    Subclasses only set the bounds. No normalization (case, whitespace) is applied.
    """

    min_length: ClassVar[int] = 0
    max_length: ClassVar[int]

    def __new__(cls, value: str):
        if not isinstance(value, str):
            raise ShapeError(f"Cannot parse {type(value).__name__} into a {cls.__name__}")
        if not cls.min_length <= len(value) <= cls.max_length:
            raise ShapeError(f"Cannot parse String of length {len(value)} into a {cls.__name__}")
        return super().__new__(cls, value)

    def as_text(self) -> str:
        return str.__str__(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str.__repr__(self)})"

    @classmethod
    def _coerce(cls, value: Any) -> "ConstrainedString":
        if isinstance(value, cls):
            return value
        if isinstance(value, ConstrainedString):
            # Distinct bounds are distinct types, even if the length would fit
            raise ShapeError(f"Cannot assign a {type(value).__name__} to a {cls.__name__}")
        return cls(value)

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        # On the wire the value is the bare string, no wrapper
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda v: str.__str__(v), info_arg=False, return_schema=core_schema.str_schema()
            ),
        )


class StringMax16(ConstrainedString):
    max_length = 16


class StringMax35(ConstrainedString):
    max_length = 35


class StringMax50(ConstrainedString):
    max_length = 50


class StringMax70(ConstrainedString):
    max_length = 70


class StringMax100(ConstrainedString):
    max_length = 100


class CountryCode(ConstrainedString):
    """Two letter ISO 3166-1 alpha-2 code, or ``XX`` for an unknown state or entity."""

    min_length = 2
    max_length = 2

    def validate(self) -> None:
        if self == UNKNOWN_COUNTRY or is_known_country_code(self):
            return
        logger.debug("Unrecognised country code %r", self.as_text())
        raise ValidationError(f"Invalid country code '{self.as_text()}'", rule=3)


class RegistrationAuthorityCode(ConstrainedString):
    """Eight character code from the GLEIF registration authority list, e.g. ``RA000094``."""

    min_length = 8
    max_length = 8

    def validate(self) -> None:
        if not is_valid_registration_authority(self):
            logger.debug("Registration authority %r not on the GLEIF list", self.as_text())
            raise ValidationError("Provided registration authority is not on the GLEIF list", rule=10)
