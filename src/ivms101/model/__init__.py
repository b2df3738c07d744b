"""Typed IVMS101 schema: value types, containers and message entities."""

from .types import (
    ConstrainedString,
    StringMax16,
    StringMax35,
    StringMax50,
    StringMax70,
    StringMax100,
    CountryCode,
    RegistrationAuthorityCode,
)
from .multiplicity import OneOrMany, ZeroOrMany
from .ivms101 import (
    Address,
    BaseIvmsModel,
    Beneficiary,
    BeneficiaryVASP,
    DateAndPlaceOfBirth,
    Descriptions,
    IntermediaryVASP,
    LegalPerson,
    LegalPersonName,
    LegalPersonNameID,
    LocalLegalPersonNameID,
    LocalNaturalPersonNameID,
    Message,
    NationalIdentification,
    NaturalPerson,
    NaturalPersonName,
    NaturalPersonNameID,
    Originator,
    OriginatingVASP,
    Person,
    TransferPath,
)

__all__ = [
    'ConstrainedString',
    'StringMax16',
    'StringMax35',
    'StringMax50',
    'StringMax70',
    'StringMax100',
    'CountryCode',
    'RegistrationAuthorityCode',
    'OneOrMany',
    'ZeroOrMany',
    'Address',
    'BaseIvmsModel',
    'Beneficiary',
    'BeneficiaryVASP',
    'DateAndPlaceOfBirth',
    'Descriptions',
    'IntermediaryVASP',
    'LegalPerson',
    'LegalPersonName',
    'LegalPersonNameID',
    'LocalLegalPersonNameID',
    'LocalNaturalPersonNameID',
    'Message',
    'NationalIdentification',
    'NaturalPerson',
    'NaturalPersonName',
    'NaturalPersonNameID',
    'Originator',
    'OriginatingVASP',
    'Person',
    'TransferPath',
]
