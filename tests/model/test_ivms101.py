"""Business rule checks C1-C11 on the IVMS101 entities."""

import datetime

import pytest
from freezegun import freeze_time
from pydantic import ValidationError as PydanticValidationError

from ivms101.errors import ShapeError, ValidationError
from ivms101.model import (
    Address,
    Beneficiary,
    BeneficiaryVASP,
    CountryCode,
    DateAndPlaceOfBirth,
    Descriptions,
    IntermediaryVASP,
    LegalPerson,
    LegalPersonName,
    LegalPersonNameID,
    Message,
    NationalIdentification,
    NaturalPerson,
    NaturalPersonName,
    NaturalPersonNameID,
    OneOrMany,
    Originator,
    OriginatingVASP,
    Person,
    RegistrationAuthorityCode,
    StringMax16,
    StringMax35,
    StringMax50,
    StringMax70,
    StringMax100,
    TransferPath,
    ZeroOrMany,
)

VALID_LEI = "2594007XIACKNMUAW223"


def _assert_rule(excinfo, rule: int):
    assert str(excinfo.value).endswith(f"(IVMS101 C{rule})")
    assert excinfo.value.rule == rule


def _street_address(address_type: str = "HOME") -> Address:
    return Address(
        addressType=address_type,
        streetName=StringMax70("Main street"),
        buildingNumber=StringMax16("12"),
        townName=StringMax35("Zurich"),
        country=CountryCode("CH"),
    )


def _national_id(value: str, id_type: str, country=None, authority=None) -> NationalIdentification:
    return NationalIdentification(
        nationalIdentifier=StringMax35(value),
        nationalIdentifierType=id_type,
        countryOfIssue=CountryCode(country) if country else None,
        registrationAuthority=RegistrationAuthorityCode(authority) if authority else None,
    )


def _legal_person(**fields) -> LegalPerson:
    name = LegalPersonName(
        nameIdentifier=OneOrMany.one(
            LegalPersonNameID(legalPersonName=StringMax100("Company A"), legalPersonNameIdentifierType="LEGL")
        )
    )
    return LegalPerson(name=name, **fields)


class TestC1OriginatorIdentification:
    def test_name_only_fails(self, engels):
        originator = Originator.new(Person.natural(engels))
        with pytest.raises(ValidationError) as excinfo:
            originator.validate()
        _assert_rule(excinfo, 1)

    def test_with_address_passes(self, engels, home_address):
        person = engels.model_copy(update={"geographicAddress": ZeroOrMany.one(home_address)})
        Originator.new(Person.natural(person)).validate()

    @pytest.mark.parametrize(
        "update",
        [
            {"customerIdentification": StringMax50("cust-1")},
            {"nationalIdentification": NationalIdentification(
                nationalIdentifier=StringMax35("X123"), nationalIdentifierType="CCPT")},
            {"dateAndPlaceOfBirth": DateAndPlaceOfBirth(
                dateOfBirth=datetime.date(1820, 11, 28), placeOfBirth=StringMax70("Barmen"))},
        ],
    )
    def test_any_single_identification_passes(self, engels, update):
        Originator.new(Person.natural(engels.model_copy(update=update))).validate()

    def test_empty_address_list_counts_as_absent(self, engels):
        person = engels.model_copy(update={"geographicAddress": ZeroOrMany.many([])})
        with pytest.raises(ValidationError) as excinfo:
            Originator.new(Person.natural(person)).validate()
        _assert_rule(excinfo, 1)

    def test_checked_for_every_originator_person(self, engels, natural_person):
        originator = Originator(originatorPersons=OneOrMany.many([natural_person, Person.natural(engels)]))
        with pytest.raises(ValidationError) as excinfo:
            originator.validate()
        _assert_rule(excinfo, 1)

    def test_not_required_for_beneficiary(self, engels):
        Beneficiary.new(Person.natural(engels)).validate()

    def test_not_applied_to_legal_originator(self, company_a):
        Originator.new(Person.legal(company_a)).validate()


class TestC2DateOfBirth:
    @freeze_time("2024-06-15")
    def test_past_date_passes(self):
        DateAndPlaceOfBirth(dateOfBirth=datetime.date(2024, 6, 14), placeOfBirth=StringMax70("Basel")).validate()

    @freeze_time("2024-06-15")
    def test_today_fails(self):
        birth = DateAndPlaceOfBirth(dateOfBirth=datetime.date(2024, 6, 15), placeOfBirth=StringMax70("Basel"))
        with pytest.raises(ValidationError) as excinfo:
            birth.validate()
        _assert_rule(excinfo, 2)

    @freeze_time("2024-06-15")
    def test_future_date_fails_through_person(self, engels):
        birth = DateAndPlaceOfBirth(dateOfBirth=datetime.date(2030, 1, 1), placeOfBirth=StringMax70("Basel"))
        originator = Originator.new(Person.natural(engels.model_copy(update={"dateAndPlaceOfBirth": birth})))
        with pytest.raises(ValidationError) as excinfo:
            originator.validate()
        _assert_rule(excinfo, 2)


class TestC3CountryCode:
    def test_address_with_unknown_country_fails(self):
        address = _street_address().model_copy(update={"country": CountryCode("RR")})
        with pytest.raises(ValidationError) as excinfo:
            address.validate()
        _assert_rule(excinfo, 3)

    def test_unknown_state_passes(self):
        _street_address().model_copy(update={"country": CountryCode("XX")}).validate()

    def test_country_of_residence_is_checked(self, natural_person):
        person = natural_person.naturalPerson.model_copy(update={"countryOfResidence": CountryCode("RR")})
        with pytest.raises(ValidationError) as excinfo:
            person.validate()
        _assert_rule(excinfo, 3)

    def test_country_of_issue_is_checked(self, natural_person):
        ni = _national_id("X123", "CCPT", country="RR")
        person = natural_person.naturalPerson.model_copy(update={"nationalIdentification": ni})
        with pytest.raises(ValidationError) as excinfo:
            person.validate()
        _assert_rule(excinfo, 3)

    def test_country_of_registration_is_checked(self, company_a):
        company = company_a.model_copy(update={"countryOfRegistration": CountryCode("RR")})
        with pytest.raises(ValidationError) as excinfo:
            company.validate()
        _assert_rule(excinfo, 3)


class TestC4LegalPersonIdentification:
    def test_name_only_fails(self):
        with pytest.raises(ValidationError) as excinfo:
            _legal_person().validate()
        _assert_rule(excinfo, 4)

    def test_home_address_alone_fails(self):
        with pytest.raises(ValidationError) as excinfo:
            _legal_person(geographicAddress=ZeroOrMany.one(_street_address("HOME"))).validate()
        _assert_rule(excinfo, 4)

    def test_geographic_address_passes(self):
        _legal_person(geographicAddress=ZeroOrMany.one(_street_address("GEOG"))).validate()

    def test_customer_identification_passes(self):
        _legal_person(customerIdentification=StringMax50("cust-1")).validate()

    def test_national_identification_passes(self):
        _legal_person(nationalIdentification=_national_id(VALID_LEI, "LEIX")).validate()


class TestC5LegalPersonName:
    def test_without_legal_name_fails(self):
        name = LegalPersonName(
            nameIdentifier=OneOrMany.one(
                LegalPersonNameID(legalPersonName=StringMax100("ACME"), legalPersonNameIdentifierType="TRAD")
            )
        )
        with pytest.raises(ValidationError) as excinfo:
            name.validate()
        _assert_rule(excinfo, 5)

    def test_legal_name_among_others_passes(self):
        name = LegalPersonName(
            nameIdentifier=OneOrMany.many([
                LegalPersonNameID(legalPersonName=StringMax100("ACME"), legalPersonNameIdentifierType="SHRT"),
                LegalPersonNameID(legalPersonName=StringMax100("ACME Corp."), legalPersonNameIdentifierType="LEGL"),
            ])
        )
        name.validate()


class TestC6NaturalPersonName:
    def test_without_legal_name_fails(self):
        name = NaturalPersonName(
            nameIdentifier=OneOrMany.one(
                NaturalPersonNameID(primaryIdentifier=StringMax100("Mohr"), nameIdentifierType="ALIA")
            )
        )
        with pytest.raises(ValidationError) as excinfo:
            name.validate()
        _assert_rule(excinfo, 6)

    def test_legal_name_passes(self, engels):
        engels.name.first().validate()

    def test_every_name_entry_is_checked(self, engels):
        alias_only = NaturalPersonName(
            nameIdentifier=OneOrMany.one(
                NaturalPersonNameID(primaryIdentifier=StringMax100("Mohr"), nameIdentifierType="ALIA")
            )
        )
        person = engels.model_copy(update={
            "name": OneOrMany.many([engels.name.first(), alias_only]),
            "customerIdentification": StringMax50("cust-1"),
        })
        with pytest.raises(ValidationError) as excinfo:
            person.validate()
        _assert_rule(excinfo, 6)


class TestC7LegalPersonIdentifierType:
    @pytest.mark.parametrize("id_type", ["ARNU", "CCPT", "DRLC", "FIIN", "SOCS", "IDCD"])
    def test_personal_identifier_types_fail(self, id_type):
        company = _legal_person(nationalIdentification=_national_id("X123", id_type, authority="RA000094"))
        with pytest.raises(ValidationError) as excinfo:
            company.validate()
        _assert_rule(excinfo, 7)

    @pytest.mark.parametrize("id_type", ["RAID", "MISC", "TXID"])
    def test_allowed_types_pass(self, id_type):
        _legal_person(nationalIdentification=_national_id("X123", id_type, authority="RA000094")).validate()


class TestC8Address:
    def test_no_lines_and_no_street_fails(self):
        address = _street_address().model_copy(update={"streetName": None})
        with pytest.raises(ValidationError) as excinfo:
            address.validate()
        _assert_rule(excinfo, 8)

    def test_street_without_building_fails(self):
        address = _street_address().model_copy(update={"buildingNumber": None})
        with pytest.raises(ValidationError) as excinfo:
            address.validate()
        _assert_rule(excinfo, 8)

    def test_street_and_building_number_passes(self):
        _street_address().validate()

    def test_street_and_building_name_passes(self):
        _street_address().model_copy(update={"buildingNumber": None, "buildingName": StringMax35("Prime Tower")}).validate()

    def test_address_line_passes(self):
        Address(
            addressType="GEOG",
            addressLine=ZeroOrMany.one(StringMax70("Hardstrasse 201")),
            townName=StringMax35("Zurich"),
            country=CountryCode("CH"),
        ).validate()

    def test_empty_address_line_list_fails(self):
        address = _street_address().model_copy(update={"streetName": None, "addressLine": ZeroOrMany.many([])})
        with pytest.raises(ValidationError) as excinfo:
            address.validate()
        _assert_rule(excinfo, 8)


class TestC9LegalPersonNationalIdentification:
    def test_country_of_issue_fails(self):
        ni = _national_id("X123", "RAID", country="CH", authority="RA000094")
        with pytest.raises(ValidationError) as excinfo:
            _legal_person(nationalIdentification=ni).validate()
        _assert_rule(excinfo, 9)

    def test_missing_authority_for_non_lei_fails(self):
        with pytest.raises(ValidationError) as excinfo:
            _legal_person(nationalIdentification=_national_id("X123", "TXID")).validate()
        _assert_rule(excinfo, 9)

    def test_authority_with_lei_fails(self):
        ni = _national_id(VALID_LEI, "LEIX", authority="RA000094")
        with pytest.raises(ValidationError) as excinfo:
            _legal_person(nationalIdentification=ni).validate()
        _assert_rule(excinfo, 9)

    def test_lei_without_authority_passes(self, company_a):
        company_a.validate()


class TestC10RegistrationAuthority:
    def test_unlisted_authority_fails(self):
        ni = _national_id("X123", "RAID", authority="RA777777")
        with pytest.raises(ValidationError) as excinfo:
            _legal_person(nationalIdentification=ni).validate()
        _assert_rule(excinfo, 10)

    def test_listed_authority_passes(self):
        _legal_person(nationalIdentification=_national_id("X123", "RAID", authority="RA000548")).validate()

    def test_natural_person_authority_is_checked(self, natural_person):
        ni = _national_id("X123", "IDCD", authority="RA777777")
        person = natural_person.naturalPerson.model_copy(update={"nationalIdentification": ni})
        with pytest.raises(ValidationError) as excinfo:
            person.validate()
        _assert_rule(excinfo, 10)


class TestC11LegalEntityIdentifier:
    def test_company_a_passes(self):
        company = _legal_person(nationalIdentification=_national_id(VALID_LEI, "LEIX"))
        company.validate()

    def test_invalid_lei_fails(self):
        company = _legal_person(nationalIdentification=_national_id("invalid-lei", "LEIX"))
        with pytest.raises(ValidationError) as excinfo:
            company.validate()
        _assert_rule(excinfo, 11)
        assert excinfo.value.detail.startswith("Invalid LEI: ")

    def test_wrong_check_digits_fail(self):
        company = _legal_person(nationalIdentification=_national_id("2594007XIACKNMUAW224", "LEIX"))
        with pytest.raises(ValidationError) as excinfo:
            company.validate()
        _assert_rule(excinfo, 11)

    def test_lei_is_not_checked_for_other_types(self):
        _legal_person(nationalIdentification=_national_id("invalid-lei", "MISC", authority="RA000094")).validate()


class TestRuleOrder:
    def test_first_violation_wins(self):
        # Violates both C7 and C9 (no registration authority); C7 is checked first
        with pytest.raises(ValidationError) as excinfo:
            _legal_person(nationalIdentification=_national_id("X123", "CCPT")).validate()
        _assert_rule(excinfo, 7)

    def test_message_checks_parties_in_order(self, engels, company_a):
        message = Message(
            originator=Originator.new(Person.natural(engels)),
            originatingVASP=OriginatingVASP(originatingVASP=Person.legal(_legal_person())),
        )
        with pytest.raises(ValidationError) as excinfo:
            message.validate()
        _assert_rule(excinfo, 1)


class TestPerson:
    def test_exactly_one_variant(self, engels, company_a):
        with pytest.raises(PydanticValidationError, match="did not match any variant of Person"):
            Person()
        with pytest.raises(PydanticValidationError, match="did not match any variant of Person"):
            Person(naturalPerson=engels, legalPerson=company_a)
        with pytest.raises(PydanticValidationError, match="did not match any variant of Person"):
            Person(naturalPerson=engels, legalPerson=None)

    def test_natural_accessors(self, natural_person):
        assert natural_person.variant is natural_person.naturalPerson
        assert natural_person.first_name() == "Friedrich"
        assert natural_person.last_name() == "Engels"
        assert natural_person.address().townName == "Zurich"
        assert natural_person.customer_identification() is None
        assert natural_person.lei() is None

    def test_legal_accessors(self, company_a):
        person = Person.legal(company_a)
        assert person.first_name() is None
        assert person.last_name() == "Company A"
        assert person.customer_identification() == "cust-42"
        assert person.lei() == VALID_LEI
        assert str(person.address()) == "Bahnhofstrasse 1, 8001 Zurich, Switzerland"


class TestBuilders:
    def test_address_new(self):
        address = Address.new(None, None, "Postfach 12", "3000", "Bern", "CH")
        assert address.addressType == "HOME"
        assert address.streetName is None
        assert address.address_lines() == "Postfach 12"
        address.validate()

    def test_address_new_rejects_long_town(self):
        with pytest.raises(ShapeError):
            Address.new("Main street", "1", None, "8000", "x" * 36, "CH")

    def test_address_str(self, home_address):
        assert str(home_address) == "Main street 12, 8000 Zurich, Switzerland"

    def test_natural_person_new(self, home_address):
        person = NaturalPerson.new("Friedrich", "Engels", "cust-1", home_address)
        legal_name = person.name.first().nameIdentifier.first()
        assert legal_name.nameIdentifierType == "LEGL"
        assert legal_name.primaryIdentifier == "Engels"
        assert legal_name.secondaryIdentifier == "Friedrich"
        assert person.customerIdentification == "cust-1"
        assert person.address() == home_address

    def test_natural_person_new_rejects_long_customer_id(self):
        with pytest.raises(ShapeError):
            NaturalPerson.new("Friedrich", "Engels", "x" * 51)

    def test_legal_person_new(self, company_a):
        assert company_a.legal_name() == "Company A"
        assert company_a.nationalIdentification.nationalIdentifierType == "LEIX"
        assert company_a.nationalIdentification.registrationAuthority is None
        assert company_a.lei() == VALID_LEI

    def test_legal_person_new_rejects_invalid_lei(self, home_address):
        with pytest.raises(ShapeError, match="Invalid LEI"):
            LegalPerson.new("Company A", "cust-1", home_address, "invalid-lei")

    def test_originating_vasp_new(self):
        vasp = OriginatingVASP.new("VASP AG", VALID_LEI)
        assert vasp.lei() == VALID_LEI
        assert vasp.originatingVASP.address() is None
        vasp.validate()

    def test_originator_accessors(self, natural_person):
        originator = Originator.new(natural_person)
        assert originator.originator_person() is natural_person
        assert originator.first_name() == "Friedrich"
        assert originator.last_name() == "Engels"
        assert originator.address().country == "CH"
        assert originator.customer_identification() is None

    def test_beneficiary_new(self, natural_person):
        beneficiary = Beneficiary.new(natural_person, "0xabc")
        assert list(beneficiary.accountNumber) == ["0xabc"]
        assert beneficiary.beneficiary_person() is natural_person
        assert Beneficiary.new(natural_person).accountNumber.is_absent

    def test_beneficiary_new_rejects_long_account(self, natural_person):
        with pytest.raises(ShapeError):
            Beneficiary.new(natural_person, "x" * 101)

    def test_models_are_frozen(self, home_address):
        with pytest.raises(PydanticValidationError):
            home_address.townName = StringMax35("Basel")


class TestVaspsAndTransferPath:
    def test_empty_beneficiary_vasp_passes(self):
        BeneficiaryVASP().validate()

    def test_beneficiary_vasp_is_validated(self):
        vasp = BeneficiaryVASP(beneficiaryVASP=Person.legal(_legal_person()))
        with pytest.raises(ValidationError) as excinfo:
            vasp.validate()
        _assert_rule(excinfo, 4)

    def test_intermediaries_are_validated(self, company_a):
        path = TransferPath(transferPath=ZeroOrMany.many([
            IntermediaryVASP(intermediaryVASP=Person.legal(company_a), sequence=0),
            IntermediaryVASP(intermediaryVASP=Person.legal(_legal_person()), sequence=1),
        ]))
        with pytest.raises(ValidationError) as excinfo:
            path.validate()
        _assert_rule(excinfo, 4)

    def test_sequence_order_is_not_checked(self, company_a):
        path = TransferPath(transferPath=ZeroOrMany.many([
            IntermediaryVASP(intermediaryVASP=Person.legal(company_a), sequence=5),
            IntermediaryVASP(intermediaryVASP=Person.legal(company_a), sequence=5),
        ]))
        path.validate()

    def test_negative_sequence_is_rejected(self, company_a):
        with pytest.raises(PydanticValidationError):
            IntermediaryVASP(intermediaryVASP=Person.legal(company_a), sequence=-1)

    def test_empty_message_passes(self):
        Message().validate()


def test_descriptions():
    assert Descriptions.natural_person_name_type("LEGL") == "Legal name"
    assert Descriptions.legal_person_name_type("TRAD") == "Trading name"
    assert Descriptions.address_type("GEOG") == "Geographic"
    assert Descriptions.national_identifier_type("LEIX") == "Legal Entity Identifier"
    assert Descriptions.address_type("NOPE") == "Unknown address type"
