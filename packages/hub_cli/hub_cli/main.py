"""Main entry point for the hub CLI."""

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from hub_management import __version__
from hub_management.application import description_from_mapping, description_to_summary
from hub_management.config import get_config
from hub_management.domain.exceptions import NotificationHubsError
from hub_management.infrastructure.logging import LogLevel, get_logger, setup_logging
from hub_management.infrastructure.serialization import XmlEntitySerializer

app = typer.Typer(help="Validate and render notification hub descriptions.")

logger = get_logger(__name__)


@app.callback()  # type: ignore[misc]
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Configure logging before any command runs."""
    try:
        logging_config = get_config().logging.to_logging_config()
    except NotificationHubsError as e:
        _fail(e)
    if verbose:
        logging_config = logging_config.model_copy(update={"level": LogLevel.DEBUG})
    setup_logging(logging_config)


def _load_json(file: Path) -> Any:
    try:
        return json.loads(file.read_text(encoding="utf-8"))
    except OSError as e:
        typer.echo(f"Error: cannot read {file}: {e.strerror}", err=True)
        raise typer.Exit(code=1) from e
    except json.JSONDecodeError as e:
        typer.echo(f"Error: {file} is not valid JSON: {e.msg} (line {e.lineno})", err=True)
        raise typer.Exit(code=1) from e


def _fail(error: NotificationHubsError) -> NoReturn:
    logger.debug(
        "Command failed", extra={"error_code": error.error_code, "details": error.details}
    )
    typer.echo(f"Error [{error.error_code}]: {error.message}", err=True)
    raise typer.Exit(code=1)


@app.command()  # type: ignore[misc]
def version() -> None:
    """Show the hub CLI version."""
    typer.echo(f"Hub CLI version {__version__}")


@app.command()  # type: ignore[misc]
def validate(file: Path = typer.Argument(..., help="JSON hub description file.")) -> None:
    """Check a JSON hub description against the entity rules."""
    data = _load_json(file)
    try:
        description = description_from_mapping(data)
    except NotificationHubsError as e:
        _fail(e)
    typer.echo(f"Hub description '{description.path}' is valid")


@app.command()  # type: ignore[misc]
def render(
    file: Path = typer.Argument(..., help="JSON hub description file."),
    pretty: bool = typer.Option(False, "--pretty", help="Indent the XML document."),
) -> None:
    """Render a JSON hub description as the management XML document."""
    data = _load_json(file)
    config = get_config().serialization
    if pretty:
        config = config.model_copy(update={"pretty_print": True})
    try:
        description = description_from_mapping(data)
        document = XmlEntitySerializer(config=config).serialize(description)
    except NotificationHubsError as e:
        _fail(e)
    typer.echo(document.decode(config.encoding))


@app.command()  # type: ignore[misc]
def inspect(file: Path = typer.Argument(..., help="XML hub description document.")) -> None:
    """Print a JSON summary of an XML hub description. Keys are never shown."""
    try:
        document = file.read_bytes()
    except OSError as e:
        typer.echo(f"Error: cannot read {file}: {e.strerror}", err=True)
        raise typer.Exit(code=1) from e
    try:
        description = XmlEntitySerializer(config=get_config().serialization).deserialize(
            document, read_only=True
        )
    except NotificationHubsError as e:
        _fail(e)
    typer.echo(json.dumps(description_to_summary(description), indent=2))


if __name__ == "__main__":
    app()
