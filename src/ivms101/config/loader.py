import copy
import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from .models import Ivms101Settings

logger = logging.getLogger(__name__)


class ConfigManager:
    def __init__(self, config_file_path: Union[str, Path] = "config.toml", missing_ok: bool = False):
        self.config_file_path = str(config_file_path)
        self.missing_ok = missing_ok
        self._raw_config: Dict[str, Any] = self._load_raw_config()

    def _load_raw_config(self) -> Dict[str, Any]:
        if not os.path.exists(self.config_file_path):
            # Defaults of the settings models apply when there is no file
            log = logger.debug if self.missing_ok else logger.warning
            log(
                "Configuration file '%s' not found. Using defaults.",
                self.config_file_path,
            )
            return {}
        try:
            with open(self.config_file_path, "rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Error decoding TOML file '{self.config_file_path}': {e}") from e

    def _set_nested_value(self, data_dict: Dict[str, Any], path_str: str, value_str: str) -> None:
        keys = path_str.split('.')
        current_level = data_dict
        for key in keys[:-1]:
            current_level = current_level.setdefault(key, {})
            if not isinstance(current_level, dict):
                # e.g. general.log_level.sub=X when general.log_level is "INFO"
                raise ValueError(f"Cannot set nested value: '{key}' in path '{path_str}' is not a dictionary.")

        # Coerce value
        coerced_value: Any
        if value_str.lower() == "true":
            coerced_value = True
        elif value_str.lower() == "false":
            coerced_value = False
        else:
            try:
                coerced_value = int(value_str)
            except ValueError:
                coerced_value = value_str  # Fallback to string

        current_level[keys[-1]] = coerced_value

    def _apply_cli_overrides(self, config_dict: Dict[str, Any], overrides: Optional[List[str]]) -> Dict[str, Any]:
        if not overrides:
            return config_dict

        modified_config_dict = copy.deepcopy(config_dict)  # Work on a copy

        for override_entry in overrides:
            if '=' not in override_entry:
                logger.warning(
                    "Invalid override format '%s'. Skipping. Expected 'path.to.key=value'.",
                    override_entry,
                )
                continue

            path_str, value_str = override_entry.split('=', 1)
            try:
                self._set_nested_value(modified_config_dict, path_str, value_str)
            except ValueError as e:
                logger.warning("Could not apply override '%s': %s. Skipping.", override_entry, e)

        return modified_config_dict

    def get_settings(self, overrides: Optional[List[str]] = None) -> Ivms101Settings:
        """Resolve the settings from the file plus ``section.key=value`` overrides.

        Raises:
            ValueError: If the merged configuration does not fit the settings models.
        """
        merged = self._apply_cli_overrides(self._raw_config, overrides)
        try:
            return Ivms101Settings(**merged)
        except PydanticValidationError as e:
            raise ValueError(f"Invalid configuration in '{self.config_file_path}': {e}") from e
