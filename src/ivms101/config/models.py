from typing import Literal, Optional
from pydantic import BaseModel, Field

LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class GeneralSettings(BaseModel):
    '''General settings applicable globally.'''
    log_level: LogLevelName = Field(default="INFO", description="Log level for console output.")


class LookupSettings(BaseModel):
    '''Where the validation lookups get their data from.'''
    registration_authorities_file: Optional[str] = Field(
        default=None,
        description="CSV file with GLEIF registration authority codes, replaces the bundled list.",
    )


class OutputSettings(BaseModel):
    '''How messages are written back out.'''
    indent: Optional[int] = Field(default=2, ge=0, description="JSON indentation, None for compact output.")


class Ivms101Settings(BaseModel):
    '''All settings, one attribute per TOML table.'''
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    lookups: LookupSettings = Field(default_factory=LookupSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
