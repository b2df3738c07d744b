import csv
import functools
import logging
import os
from pathlib import Path
from typing import FrozenSet, Optional, Union

logger = logging.getLogger(__name__)

BUNDLED_LIST_PATH = Path(__file__).resolve().parent.parent / "data" / "registration_authorities.csv"

_selected_list_path: Optional[Path] = None


class RegistrationAuthorityListLoader:
    def __init__(self, csv_path: Union[str, Path]):
        """
        Initializes the loader with the path to a GLEIF registration authority CSV file.

        Args:
            csv_path: Path to the CSV file.
        """
        self.csv_path = Path(csv_path)
        # Only the first column is used, further columns (names, jurisdictions) are ignored
        self.expected_first_header = 'code'

    def load_codes(self) -> FrozenSet[str]:
        """
        Loads the registration authority codes from the CSV file.

        The CSV file must have a header row whose first column is ``code``
        (case-insensitive). Every data row contributes the 8 character code
        in its first column; rows with codes of a different length are
        skipped with a warning.

        Returns:
            The set of codes. Empty if the file is missing, has a wrong header
            or cannot be read.
        """
        codes = set()

        if not os.path.exists(self.csv_path):
            logger.warning("Registration authority list not found at %s.", self.csv_path)
            return frozenset()

        try:
            with open(self.csv_path, mode='r', encoding='utf-8-sig', newline='') as file:
                reader = csv.reader(file)

                try:
                    header = next(reader)
                except StopIteration:
                    logger.error("Registration authority list %s is empty (no header).", self.csv_path)
                    return frozenset()

                if not header or header[0].lower().strip() != self.expected_first_header:
                    logger.error(
                        "Incorrect header in registration authority list %s. Expected first column '%s', got: %s.",
                        self.csv_path,
                        self.expected_first_header,
                        header,
                    )
                    return frozenset()

                for i, row in enumerate(reader, start=2):  # start=2 for 1-based data row index
                    if not row:
                        continue
                    code = row[0].strip()
                    if len(code) != 8:
                        logger.warning("Row %d in %s has malformed code '%s'. Skipping row.", i, self.csv_path, code)
                        continue
                    if code in codes:
                        logger.warning("Duplicate code '%s' in %s at row %d.", code, self.csv_path, i)
                    codes.add(code)

        except csv.Error as e:
            logger.error("CSV parsing error in %s: %s", self.csv_path, e)
            return frozenset()
        except IOError as e:
            logger.error("Could not read registration authority list %s: %s", self.csv_path, e)
            return frozenset()

        logger.debug("Loaded %d registration authority codes from %s.", len(codes), self.csv_path)
        return frozenset(codes)


@functools.cache
def _registration_authorities() -> FrozenSet[str]:
    path = _selected_list_path or BUNDLED_LIST_PATH
    return RegistrationAuthorityListLoader(path).load_codes()


def use_registration_authority_list(csv_path: Union[str, Path]) -> None:
    """Select the list consulted by :func:`is_valid_registration_authority`.

    Must be called before the first lookup; the list is never swapped once loaded.

    Raises:
        RuntimeError: If a list has already been loaded.
    """
    global _selected_list_path
    if _registration_authorities.cache_info().currsize:
        raise RuntimeError("Registration authority list is already initialized")
    _selected_list_path = Path(csv_path)
    logger.info("Using registration authority list %s", _selected_list_path)


def is_valid_registration_authority(code: str) -> bool:
    """Return True if ``code`` is on the GLEIF registration authority list."""
    return code in _registration_authorities()
