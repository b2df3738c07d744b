"""Schema and validation of IVMS101 identity data exchanged under the Travel Rule."""

from .errors import ShapeError, ValidationError
from .model import (
    Address,
    Beneficiary,
    BeneficiaryVASP,
    IntermediaryVASP,
    LegalPerson,
    Message,
    NaturalPerson,
    OneOrMany,
    Originator,
    OriginatingVASP,
    Person,
    TransferPath,
    ZeroOrMany,
)

__all__ = [
    'ShapeError',
    'ValidationError',
    'Address',
    'Beneficiary',
    'BeneficiaryVASP',
    'IntermediaryVASP',
    'LegalPerson',
    'Message',
    'NaturalPerson',
    'OneOrMany',
    'Originator',
    'OriginatingVASP',
    'Person',
    'TransferPath',
    'ZeroOrMany',
]
