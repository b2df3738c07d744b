# This file makes Python treat the `config` directory as a package.
from .models import GeneralSettings, LookupSettings, OutputSettings, Ivms101Settings
from .loader import ConfigManager
from .paths import resolve_config_file

__all__ = [
    "GeneralSettings",
    "LookupSettings",
    "OutputSettings",
    "Ivms101Settings",
    "ConfigManager",
    "resolve_config_file",
]
