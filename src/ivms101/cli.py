import logging
import typer
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .config import ConfigManager, Ivms101Settings, resolve_config_file
from .core.country_codes import lookup_country_name
from .core.lei import LeiError
from .core.registration_authority import use_registration_authority_list
from .errors import ValidationError
from .logging_utils import setup_logging
from .model import Message, Person

logger = logging.getLogger(__name__)

app = typer.Typer()


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class GlobalOptions:
    settings: Ivms101Settings


@app.callback()
def main_callback(
    ctx: typer.Context,
    log_level: Optional[LogLevel] = typer.Option(None, "--log-level", help="Set the log level for console output. Defaults to general.log_level from the config."),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to the configuration TOML file. Defaults to config.toml in XDG config home or CWD."),
    override_configs: List[str] = typer.Option(None, "--set", help="Override configuration settings using path.to.key=value format. Can be used multiple times."),
):
    """IVMS101 message validation CLI"""
    setup_logging(level=logging.getLevelName(log_level.value) if log_level else logging.INFO)
    config_path = resolve_config_file(config_file)
    try:
        settings = ConfigManager(config_path, missing_ok=config_file is None).get_settings(override_configs)
    except ValueError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1)
    if log_level is None:
        setup_logging(level=logging.getLevelName(settings.general.log_level))

    ra_file = settings.lookups.registration_authorities_file
    if ra_file:
        try:
            use_registration_authority_list(ra_file)
        except RuntimeError as e:
            logger.warning("Ignoring registration authority list %s: %s", ra_file, e)
    ctx.obj = GlobalOptions(settings=settings)


def _load_message(input_file: Path) -> Message:
    try:
        return Message.from_json_file(input_file)
    except ValueError as e:
        # ShapeError is a ValueError as well
        logger.debug("Decoding %s failed", input_file, exc_info=True)
        typer.echo(f"Could not decode {input_file}: {e}", err=True)
        raise typer.Exit(code=1)


def _describe_person(person: Person) -> str:
    first_name = person.first_name()
    if first_name:
        return f"{first_name} {person.last_name()}"
    return person.last_name()


@app.command()
def validate(
    input_file: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, readable=True, help="IVMS101 JSON message to validate."),
):
    """Decodes an IVMS101 message and checks the IVMS101 constraints."""
    message = _load_message(input_file)
    try:
        message.validate()
    except ValidationError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)
    logger.info("%s is a valid IVMS101 message", input_file)
    typer.echo("OK")


@app.command()
def normalize(
    ctx: typer.Context,
    input_file: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, readable=True, help="IVMS101 JSON message to re-encode."),
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the message to this file instead of stdout."),
):
    """Decodes an IVMS101 message and encodes it again, dropping absent fields."""
    global_opts: GlobalOptions = ctx.obj
    indent = global_opts.settings.output.indent
    message = _load_message(input_file)
    if output_file:
        message.to_json_file(output_file, indent=indent)
        logger.info("Wrote %s", output_file)
    else:
        typer.echo(message.to_json(indent=indent))


@app.command()
def summary(
    input_file: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False, readable=True, help="IVMS101 JSON message to summarize."),
):
    """Prints the parties of an IVMS101 message in human readable form."""
    message = _load_message(input_file)
    if message.originator is not None:
        typer.echo(f"Originator: {_describe_person(message.originator.originator_person())}")
        address = message.originator.address()
        if address:
            typer.echo(f"  Address: {address}")
    if message.beneficiary is not None:
        typer.echo(f"Beneficiary: {_describe_person(message.beneficiary.beneficiary_person())}")
        for account in message.beneficiary.accountNumber:
            typer.echo(f"  Account: {account}")
    if message.originatingVASP is not None:
        vasp = message.originatingVASP.originatingVASP
        try:
            lei = vasp.lei()
        except LeiError as e:
            lei = f"invalid ({e})"
        typer.echo(f"Originating VASP: {vasp.last_name()}" + (f" (LEI {lei})" if lei else ""))
    if message.beneficiaryVASP is not None and message.beneficiaryVASP.beneficiaryVASP is not None:
        typer.echo(f"Beneficiary VASP: {message.beneficiaryVASP.beneficiaryVASP.last_name()}")


@app.command()
def country(
    code: str = typer.Argument(..., help="ISO 3166-1 alpha-2 country code."),
):
    """Prints the name of a country code."""
    typer.echo(lookup_country_name(code))


if __name__ == "__main__":
    app()
