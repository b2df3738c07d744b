"""
Configuration file for pytest.

This file ensures that the src directory is in the Python path
so that tests can import modules from the package, and provides
the fixtures shared by the model and CLI tests.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add the src directory to the Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from ivms101.model import Address, LegalPerson, NaturalPerson, Person  # noqa: E402

SAMPLES_DIR = Path(__file__).parent / "samples"

VALID_LEI = "2594007XIACKNMUAW223"


@pytest.fixture
def samples_dir() -> Path:
    return SAMPLES_DIR


@pytest.fixture
def home_address() -> Address:
    return Address.new("Main street", "12", None, "8000", "Zurich", "CH")


@pytest.fixture
def engels() -> NaturalPerson:
    """Natural person with a legal name and nothing else."""
    return NaturalPerson.new("Friedrich", "Engels")


@pytest.fixture
def company_a() -> LegalPerson:
    return LegalPerson.new(
        "Company A",
        "cust-42",
        Address.new("Bahnhofstrasse", "1", None, "8001", "Zurich", "CH"),
        VALID_LEI,
    )


@pytest.fixture
def natural_person(home_address) -> Person:
    return Person.natural(NaturalPerson.new("Friedrich", "Engels", address=home_address))


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """setup_logging() detaches the package logger from the root; undo that so caplog keeps working."""
    package_logger = logging.getLogger("ivms101")
    yield
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
