"""Pydantic models for the IVMS101 (interVASP Messaging Standard) data model."""

from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, Strict, model_serializer, model_validator
from pydantic import ValidationError as PydanticValidationError
from typing import Annotated, Any, ClassVar, Dict, Literal, Optional, Union
from datetime import date, datetime, timezone
from pathlib import Path
import logging

from ..core.lei import LeiError, validate_lei
from ..errors import ShapeError, ValidationError
from ..util.formatting import format_address
from .multiplicity import OneOrMany, ZeroOrMany
from .types import (
    CountryCode,
    RegistrationAuthorityCode,
    StringMax16,
    StringMax35,
    StringMax50,
    StringMax70,
    StringMax100,
)

logger = logging.getLogger(__name__)

# --- Code lists ---

NaturalPersonNameTypeCode = Literal["ALIA", "BIRT", "MAID", "LEGL", "MISC"]

NATURAL_PERSON_NAME_TYPE_DESCRIPTIONS = {
    "ALIA": "Alias name",
    "BIRT": "Name at birth",
    "MAID": "Maiden name",
    "LEGL": "Legal name",
    "MISC": "Unspecified",
}

LegalPersonNameTypeCode = Literal["LEGL", "SHRT", "TRAD"]

LEGAL_PERSON_NAME_TYPE_DESCRIPTIONS = {
    "LEGL": "Legal name",
    "SHRT": "Short name",
    "TRAD": "Trading name",
}

AddressTypeCode = Literal["HOME", "BIZZ", "GEOG"]

ADDRESS_TYPE_DESCRIPTIONS = {
    "HOME": "Residential",
    "BIZZ": "Business",
    "GEOG": "Geographic",
}

NationalIdentifierTypeCode = Literal[
    "ARNU", "CCPT", "RAID", "DRLC", "FIIN", "TXID", "SOCS", "IDCD", "LEIX", "MISC"
]

NATIONAL_IDENTIFIER_TYPE_DESCRIPTIONS = {
    "ARNU": "Alien registration number",
    "CCPT": "Passport number",
    "RAID": "Registration authority identifier",
    "DRLC": "Driver license number",
    "FIIN": "Foreign investment identity number",
    "TXID": "Tax identification number",
    "SOCS": "Social security number",
    "IDCD": "Identity card number",
    "LEIX": "Legal Entity Identifier",
    "MISC": "Unspecified",
}

# Identification types a legal person may carry (C7)
LEGAL_PERSON_IDENTIFIER_TYPES = ("RAID", "MISC", "LEIX", "TXID")


def get_natural_person_name_type_description(code: NaturalPersonNameTypeCode) -> str:
    """Get the description of a natural person name type based on its code."""
    return NATURAL_PERSON_NAME_TYPE_DESCRIPTIONS.get(code, "Unknown name type")

def get_legal_person_name_type_description(code: LegalPersonNameTypeCode) -> str:
    """Get the description of a legal person name type based on its code."""
    return LEGAL_PERSON_NAME_TYPE_DESCRIPTIONS.get(code, "Unknown name type")

def get_address_type_description(code: AddressTypeCode) -> str:
    """Get the description of an address type based on its code."""
    return ADDRESS_TYPE_DESCRIPTIONS.get(code, "Unknown address type")

def get_national_identifier_type_description(code: NationalIdentifierTypeCode) -> str:
    """Get the description of a national identifier type based on its code."""
    return NATIONAL_IDENTIFIER_TYPE_DESCRIPTIONS.get(code, "Unknown identifier type")


def _violation(detail: str, rule: int) -> ValidationError:
    logger.debug("IVMS101 C%d violated: %s", rule, detail)
    return ValidationError(detail, rule)


def _optional(cls, value: Optional[str]):
    return cls(value) if value is not None else None


# --- Base model ---

class BaseIvmsModel(BaseModel):
    """Common configuration for all IVMS101 entities.

    Attribute names are the wire names. Unknown fields are rejected, instances
    are immutable, and absent values are left out when encoding instead of
    being written as ``null``.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        data = handler(self)
        for name in type(self).model_fields:
            value = getattr(self, name, None)
            if value is None or (isinstance(value, ZeroOrMany) and value.is_empty()):
                data.pop(name, None)
        return data


# --- Natural person ---

class NaturalPersonNameID(BaseIvmsModel):
    primaryIdentifier: StringMax100  # last name, or full name if not separable
    secondaryIdentifier: Optional[StringMax100] = None  # first name(s)
    nameIdentifierType: NaturalPersonNameTypeCode


class LocalNaturalPersonNameID(BaseIvmsModel):
    primaryIdentifier: StringMax100
    secondaryIdentifier: Optional[StringMax100] = None
    nameIdentifierType: NaturalPersonNameTypeCode


class NaturalPersonName(BaseIvmsModel):
    nameIdentifier: OneOrMany[NaturalPersonNameID]
    localNameIdentifier: ZeroOrMany[LocalNaturalPersonNameID] = Field(default_factory=ZeroOrMany.none)
    phoneticNameIdentifier: ZeroOrMany[LocalNaturalPersonNameID] = Field(default_factory=ZeroOrMany.none)

    def validate(self) -> None:
        if not any(ni.nameIdentifierType == "LEGL" for ni in self.nameIdentifier):
            raise _violation("Natural person must have a legal name id", rule=6)


class Address(BaseIvmsModel):
    addressType: AddressTypeCode
    department: Optional[StringMax50] = None
    subDepartment: Optional[StringMax70] = None
    streetName: Optional[StringMax70] = None
    buildingNumber: Optional[StringMax16] = None
    buildingName: Optional[StringMax35] = None
    floor: Optional[StringMax70] = None
    postBox: Optional[StringMax16] = None
    room: Optional[StringMax70] = None
    postCode: Optional[StringMax16] = None
    townName: StringMax35
    townLocationName: Optional[StringMax35] = None
    districtName: Optional[StringMax35] = None
    countrySubDivision: Optional[StringMax35] = None
    addressLine: ZeroOrMany[StringMax70] = Field(default_factory=ZeroOrMany.none)
    country: CountryCode

    @classmethod
    def new(
        cls,
        street: Optional[str],
        number: Optional[str],
        address_line: Optional[str],
        postal_code: str,
        town: str,
        country: str,
    ) -> "Address":
        """Build a residential (``HOME``) address.

        Raises:
            ShapeError: If a value exceeds the bound of its field.
        """
        return cls(
            addressType="HOME",
            streetName=_optional(StringMax70, street),
            buildingNumber=_optional(StringMax16, number),
            postCode=StringMax16(postal_code),
            townName=StringMax35(town),
            addressLine=ZeroOrMany.from_optional(_optional(StringMax70, address_line)),
            country=CountryCode(country),
        )

    def address_lines(self) -> Optional[str]:
        """All address lines joined with ``", "``, or None if there are none."""
        if self.addressLine.is_empty():
            return None
        return ", ".join(line.as_text() for line in self.addressLine)

    def __str__(self) -> str:
        return format_address(
            self.streetName,
            self.buildingNumber,
            self.address_lines(),
            self.postCode,
            self.townName,
            self.country,
        )

    def validate(self) -> None:
        if self.addressLine.is_empty() and (
            self.streetName is None or (self.buildingName is None and self.buildingNumber is None)
        ):
            raise _violation(
                "Either 1) address line or 2) street name and either building name or building number are required",
                rule=8,
            )
        self.country.validate()


class DateAndPlaceOfBirth(BaseIvmsModel):
    dateOfBirth: Annotated[date, Strict()]  # YYYY-MM-DD text on the wire
    placeOfBirth: StringMax70

    def validate(self) -> None:
        if self.dateOfBirth >= datetime.now(timezone.utc).date():
            raise _violation("Date of birth must be in the past", rule=2)


class NationalIdentification(BaseIvmsModel):
    nationalIdentifier: StringMax35
    nationalIdentifierType: NationalIdentifierTypeCode
    countryOfIssue: Optional[CountryCode] = None
    registrationAuthority: Optional[RegistrationAuthorityCode] = None

    def validate(self) -> None:
        if self.countryOfIssue is not None:
            self.countryOfIssue.validate()
        if self.registrationAuthority is not None:
            self.registrationAuthority.validate()


class NaturalPerson(BaseIvmsModel):
    name: OneOrMany[NaturalPersonName]
    geographicAddress: ZeroOrMany[Address] = Field(default_factory=ZeroOrMany.none)
    nationalIdentification: Optional[NationalIdentification] = None
    customerIdentification: Optional[StringMax50] = None
    dateAndPlaceOfBirth: Optional[DateAndPlaceOfBirth] = None
    countryOfResidence: Optional[CountryCode] = None

    @classmethod
    def new(
        cls,
        first_name: str,
        last_name: str,
        customer_identification: Optional[str] = None,
        address: Optional[Address] = None,
    ) -> "NaturalPerson":
        """Build a natural person with a single legal (``LEGL``) name.

        Raises:
            ShapeError: If a name or the customer id exceeds its bound.
        """
        name_id = NaturalPersonNameID(
            primaryIdentifier=StringMax100(last_name),
            secondaryIdentifier=StringMax100(first_name),
            nameIdentifierType="LEGL",
        )
        return cls(
            name=OneOrMany.one(NaturalPersonName(nameIdentifier=OneOrMany.one(name_id))),
            geographicAddress=ZeroOrMany.from_optional(address),
            customerIdentification=_optional(StringMax50, customer_identification),
        )

    def first_name(self) -> Optional[str]:
        secondary = self.name.first().nameIdentifier.first().secondaryIdentifier
        return secondary.as_text() if secondary is not None else None

    def last_name(self) -> str:
        return self.name.first().nameIdentifier.first().primaryIdentifier.as_text()

    def address(self) -> Optional[Address]:
        return self.geographicAddress.first()

    def validate(self) -> None:
        for name in self.name:
            name.validate()
        for address in self.geographicAddress:
            address.validate()
        if self.nationalIdentification is not None:
            self.nationalIdentification.validate()
        if self.dateAndPlaceOfBirth is not None:
            self.dateAndPlaceOfBirth.validate()
        if self.countryOfResidence is not None:
            self.countryOfResidence.validate()


# --- Legal person ---

class LegalPersonNameID(BaseIvmsModel):
    legalPersonName: StringMax100
    legalPersonNameIdentifierType: LegalPersonNameTypeCode


class LocalLegalPersonNameID(BaseIvmsModel):
    legalPersonName: StringMax100
    legalPersonNameIdentifierType: LegalPersonNameTypeCode


class LegalPersonName(BaseIvmsModel):
    nameIdentifier: OneOrMany[LegalPersonNameID]
    localNameIdentifier: ZeroOrMany[LocalLegalPersonNameID] = Field(default_factory=ZeroOrMany.none)
    phoneticNameIdentifier: ZeroOrMany[LocalLegalPersonNameID] = Field(default_factory=ZeroOrMany.none)

    def validate(self) -> None:
        if not any(ni.legalPersonNameIdentifierType == "LEGL" for ni in self.nameIdentifier):
            raise _violation("Legal person must have a legal name id", rule=5)


def _lei_identification(lei: str) -> NationalIdentification:
    try:
        validate_lei(lei)
    except LeiError as e:
        raise ShapeError(f"Invalid LEI: {e}") from e
    return NationalIdentification(
        nationalIdentifier=StringMax35(lei),
        nationalIdentifierType="LEIX",
    )


def _legal_name(name: str) -> LegalPersonName:
    name_id = LegalPersonNameID(legalPersonName=StringMax100(name), legalPersonNameIdentifierType="LEGL")
    return LegalPersonName(nameIdentifier=OneOrMany.one(name_id))


class LegalPerson(BaseIvmsModel):
    name: LegalPersonName
    geographicAddress: ZeroOrMany[Address] = Field(default_factory=ZeroOrMany.none)
    customerIdentification: Optional[StringMax50] = None
    nationalIdentification: Optional[NationalIdentification] = None
    countryOfRegistration: Optional[CountryCode] = None

    @classmethod
    def new(cls, name: str, customer_identification: str, address: Address, lei: str) -> "LegalPerson":
        """Build a legal person identified by its Legal Entity Identifier.

        Raises:
            ShapeError: If a value exceeds its bound or ``lei`` is not a valid LEI.
        """
        return cls(
            name=_legal_name(name),
            geographicAddress=ZeroOrMany.one(address),
            customerIdentification=StringMax50(customer_identification),
            nationalIdentification=_lei_identification(lei),
        )

    def legal_name(self) -> str:
        return self.name.nameIdentifier.first().legalPersonName.as_text()

    def address(self) -> Optional[Address]:
        return self.geographicAddress.first()

    def lei(self) -> Optional[str]:
        """The LEI held in the national identification, if its type is ``LEIX``.

        Raises:
            LeiError: If the stored identifier is not a valid LEI.
        """
        ni = self.nationalIdentification
        if ni is None or ni.nationalIdentifierType != "LEIX":
            return None
        validate_lei(ni.nationalIdentifier)
        return ni.nationalIdentifier.as_text()

    def validate(self) -> None:
        ni = self.nationalIdentification
        has_geographic = any(addr.addressType == "GEOG" for addr in self.geographicAddress)
        if not has_geographic and ni is None and self.customerIdentification is None:
            raise _violation(
                "Legal person needs either geographic address, customer number or national identification",
                rule=4,
            )
        if ni is not None and ni.nationalIdentifierType not in LEGAL_PERSON_IDENTIFIER_TYPES:
            raise _violation("Legal person must have a 'RAID', 'MISC', 'LEIX' or 'TXID' identification", rule=7)
        if ni is not None and ni.nationalIdentifierType == "LEIX":
            try:
                validate_lei(ni.nationalIdentifier)
            except LeiError as e:
                raise _violation(f"Invalid LEI: {e}", rule=11) from e
        self.name.validate()
        for address in self.geographicAddress:
            address.validate()
        if ni is not None:
            if ni.countryOfIssue is not None:
                raise _violation("Legal person must not have a country of issue", rule=9)
            if ni.nationalIdentifierType != "LEIX" and ni.registrationAuthority is None:
                raise _violation("Legal person must specify registration authority for non-'LEIX' identification", rule=9)
            if ni.nationalIdentifierType == "LEIX" and ni.registrationAuthority is not None:
                raise _violation("Legal person must not specify registration authority for 'LEIX' identification", rule=9)
            ni.validate()
        if self.countryOfRegistration is not None:
            self.countryOfRegistration.validate()


# --- Person ---

class Person(BaseIvmsModel):
    """Either a natural or a legal person; exactly one of the two fields is set."""

    naturalPerson: Optional[NaturalPerson] = None
    legalPerson: Optional[LegalPerson] = None

    @model_validator(mode="before")
    @classmethod
    def _exactly_one_variant(cls, data: Any) -> Any:
        # Externally tagged: a single key naming the variant, an explicit null for the other one is not allowed
        if isinstance(data, dict):
            present = [key for key in ("naturalPerson", "legalPerson") if key in data]
            if len(present) != 1 or data[present[0]] is None:
                raise ShapeError("data did not match any variant of Person")
        return data

    @classmethod
    def natural(cls, person: NaturalPerson) -> "Person":
        return cls(naturalPerson=person)

    @classmethod
    def legal(cls, person: LegalPerson) -> "Person":
        return cls(legalPerson=person)

    @property
    def variant(self) -> Union[NaturalPerson, LegalPerson]:
        if self.naturalPerson is not None:
            return self.naturalPerson
        return self.legalPerson

    def first_name(self) -> Optional[str]:
        if self.naturalPerson is not None:
            return self.naturalPerson.first_name()
        return None

    def last_name(self) -> str:
        """The last name of a natural person, the legal name of a legal person."""
        if self.naturalPerson is not None:
            return self.naturalPerson.last_name()
        return self.legalPerson.legal_name()

    def address(self) -> Optional[Address]:
        return self.variant.address()

    def customer_identification(self) -> Optional[str]:
        customer_id = self.variant.customerIdentification
        return customer_id.as_text() if customer_id is not None else None

    def lei(self) -> Optional[str]:
        if self.legalPerson is not None:
            return self.legalPerson.lei()
        return None

    def validate(self) -> None:
        self.variant.validate()


# --- Message parties ---

class Originator(BaseIvmsModel):
    originatorPersons: OneOrMany[Person]
    accountNumber: ZeroOrMany[StringMax100] = Field(default_factory=ZeroOrMany.none)

    @classmethod
    def new(cls, person: Person) -> "Originator":
        return cls(originatorPersons=OneOrMany.one(person))

    def originator_person(self) -> Person:
        return self.originatorPersons.first()

    def first_name(self) -> Optional[str]:
        return self.originator_person().first_name()

    def last_name(self) -> str:
        return self.originator_person().last_name()

    def address(self) -> Optional[Address]:
        return self.originator_person().address()

    def customer_identification(self) -> Optional[str]:
        return self.originator_person().customer_identification()

    def validate(self) -> None:
        for person in self.originatorPersons:
            np = person.naturalPerson
            if np is not None and (
                np.geographicAddress.is_empty()
                and np.customerIdentification is None
                and np.nationalIdentification is None
                and np.dateAndPlaceOfBirth is None
            ):
                raise _violation(
                    "Natural person: one of 1) geographic address 2) customer id 3) national id "
                    "4) date and place of birth is required",
                    rule=1,
                )
            person.validate()


class Beneficiary(BaseIvmsModel):
    beneficiaryPersons: OneOrMany[Person]
    accountNumber: ZeroOrMany[StringMax100] = Field(default_factory=ZeroOrMany.none)

    @classmethod
    def new(cls, person: Person, account_number: Optional[str] = None) -> "Beneficiary":
        """Build a beneficiary with one person and at most one account number.

        Raises:
            ShapeError: If the account number is longer than 100 characters.
        """
        return cls(
            beneficiaryPersons=OneOrMany.one(person),
            accountNumber=ZeroOrMany.from_optional(_optional(StringMax100, account_number)),
        )

    def beneficiary_person(self) -> Person:
        return self.beneficiaryPersons.first()

    def first_name(self) -> Optional[str]:
        return self.beneficiary_person().first_name()

    def last_name(self) -> str:
        return self.beneficiary_person().last_name()

    def address(self) -> Optional[Address]:
        return self.beneficiary_person().address()

    def customer_identification(self) -> Optional[str]:
        return self.beneficiary_person().customer_identification()

    def validate(self) -> None:
        for person in self.beneficiaryPersons:
            person.validate()


class OriginatingVASP(BaseIvmsModel):
    originatingVASP: Person

    @classmethod
    def new(cls, name: str, lei: str) -> "OriginatingVASP":
        """Build the VASP record from its name and LEI.

        No geographic address is set, VASPs are identified through their LEI.

        Raises:
            ShapeError: If the name is too long or ``lei`` is not a valid LEI.
        """
        person = LegalPerson(name=_legal_name(name), nationalIdentification=_lei_identification(lei))
        return cls(originatingVASP=Person.legal(person))

    def lei(self) -> Optional[str]:
        return self.originatingVASP.lei()

    def validate(self) -> None:
        self.originatingVASP.validate()


class BeneficiaryVASP(BaseIvmsModel):
    beneficiaryVASP: Optional[Person] = None

    def validate(self) -> None:
        if self.beneficiaryVASP is not None:
            self.beneficiaryVASP.validate()


class IntermediaryVASP(BaseIvmsModel):
    intermediaryVASP: Person
    sequence: int = Field(..., ge=0, strict=True)

    def validate(self) -> None:
        # Sequential integrity (C12) can only be judged across the whole
        # transfer path of a message chain and is not checked here.
        self.intermediaryVASP.validate()


class TransferPath(BaseIvmsModel):
    transferPath: ZeroOrMany[IntermediaryVASP] = Field(default_factory=ZeroOrMany.none)

    def validate(self) -> None:
        for intermediary in self.transferPath:
            intermediary.validate()


# --- Root ---

class Message(BaseIvmsModel):
    """Root of an IVMS101 payload. All parties are optional."""

    originator: Optional[Originator] = None
    beneficiary: Optional[Beneficiary] = None
    originatingVASP: Optional[OriginatingVASP] = None
    beneficiaryVASP: Optional[BeneficiaryVASP] = None
    transferPath: Optional[TransferPath] = None

    def validate(self) -> None:
        """Check the IVMS101 constraints C1-C11 on every party present.

        Raises:
            ValidationError: For the first violated constraint.
        """
        if self.originator is not None:
            self.originator.validate()
        if self.beneficiary is not None:
            self.beneficiary.validate()
        if self.originatingVASP is not None:
            self.originatingVASP.validate()
        if self.beneficiaryVASP is not None:
            self.beneficiaryVASP.validate()
        if self.transferPath is not None:
            self.transferPath.validate()

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "Message":
        """Decode a message from JSON text.

        Raises:
            ShapeError: If the text is not JSON or does not match the schema.
        """
        try:
            return cls.model_validate_json(data)
        except PydanticValidationError as e:
            raise ShapeError(f"Failed to decode IVMS101 message: {e}") from e

    @classmethod
    def from_json_file(cls, file_path: Union[str, Path]) -> "Message":
        """Read a message from a JSON file.

        Raises:
            ValueError: If the file cannot be read.
            ShapeError: If the content does not decode into a message.
        """
        try:
            with open(file_path, 'rb') as f:
                data = f.read()
        except FileNotFoundError:
            raise ValueError(f"File not found: {file_path}")
        except OSError as e:
            raise ValueError(f"Error reading message from file: {e}")
        return cls.from_json(data)

    def to_json(self, indent: Optional[int] = None) -> str:
        return self.model_dump_json(indent=indent)

    def to_json_file(self, file_path: Union[str, Path], indent: Optional[int] = 2):
        """Writes the message to a JSON file."""
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(self.to_json(indent=indent))
        logger.debug("Message successfully written to %s", file_path)


# --- Description Helper Functions ---
class Descriptions:
    """Helper class for getting code list descriptions."""

    @staticmethod
    def natural_person_name_type(code: NaturalPersonNameTypeCode) -> str:
        return get_natural_person_name_type_description(code)

    @staticmethod
    def legal_person_name_type(code: LegalPersonNameTypeCode) -> str:
        return get_legal_person_name_type_description(code)

    @staticmethod
    def address_type(code: AddressTypeCode) -> str:
        return get_address_type_description(code)

    @staticmethod
    def national_identifier_type(code: NationalIdentifierTypeCode) -> str:
        return get_national_identifier_type_description(code)
