"""
Main CLI application using Typer.

Every payload command reads a JSON request body from a file (or stdin when
the path is omitted or "-") and prints the JSON or text response.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ..config import AppConfig
from ..domain.exceptions import SlotError
from ..services.scheduler import SchedulingService

app = typer.Typer(
    name="freeslots",
    help="Find free time slots in a working day and phrase them as an answer",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

PayloadArgument = Annotated[
    Optional[Path],
    typer.Argument(help="JSON payload file. Reads stdin when omitted or '-'.")
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml if present")
]


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_service(config_file: Optional[Path]) -> SchedulingService:
    try:
        config = AppConfig.load(config_file)
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    _setup_logging(config.log_level)
    return SchedulingService.from_config(config)


def _read_payload(payload_file: Optional[Path]) -> Any:
    if payload_file is None or str(payload_file) == "-":
        raw = typer.get_text_stream("stdin").read()
        source = "stdin"
    else:
        try:
            raw = payload_file.read_text(encoding="utf-8")
        except OSError as e:
            err_console.print(f"[bold red]Error:[/bold red] Could not read {payload_file}: {escape(str(e))}")
            raise typer.Exit(1)
        source = str(payload_file)

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        err_console.print(f"[bold red]Error:[/bold red] Invalid JSON in {source}: {escape(str(e))}")
        raise typer.Exit(1)


def _run(
    operation: Callable[[SchedulingService, Any], Any],
    payload_file: Optional[Path],
    config_file: Optional[Path]
) -> Any:
    """Load config and payload, run one service operation, map errors to exit code 1."""
    service = _load_service(config_file)
    payload = _read_payload(payload_file)
    logger.debug("Running %s", operation.__name__)

    try:
        return operation(service, payload)
    except SlotError as e:
        body = json.dumps(SchedulingService.error_body(e), ensure_ascii=False)
        err_console.print(f"[bold red]{escape(body)}[/bold red]")
        raise typer.Exit(1)


@app.command()
def free_slots(payload_file: PayloadArgument = None, config_file: ConfigOption = None):
    """
    Compute free slots from occupied slots.

    Payload: {"value": [{"start": ..., "end": ...}], "startHour": 9, "endHour": 12}

    Example:

        echo '{"value": [...], "startHour": 9, "endHour": 12}' | freeslots free-slots
    """
    result = _run(SchedulingService.compute_free_slots, payload_file, config_file)
    console.print_json(data=result)


@app.command()
def suggest(payload_file: PayloadArgument = None, config_file: ConfigOption = None):
    """
    Keep the first free slots as suggestions.

    Payload: {"free_slots": [{"start": ..., "end": ...}, ...]}
    """
    result = _run(SchedulingService.suggest_slots, payload_file, config_file)
    console.print_json(data=result)


@app.command()
def next_business_day(payload_file: PayloadArgument = None, config_file: ConfigOption = None):
    """
    Move a date to the next business day and print its work window.

    Payload: {"requested_datetime": "2025-02-21T10:00:00"}
    """
    result = _run(SchedulingService.advance_to_next_business_day, payload_file, config_file)
    console.print_json(data=result)


@app.command()
def answer(payload_file: PayloadArgument = None, config_file: ConfigOption = None):
    """
    Phrase suggested slots as a French sentence.

    Payload: {"suggested_slots": [{"start": ..., "end": ...}, ...]}
    """
    sentence = _run(SchedulingService.format_answer, payload_file, config_file)
    console.print(sentence, soft_wrap=True, highlight=False, markup=False)


@app.command()
def propose(payload_file: PayloadArgument = None, config_file: ConfigOption = None):
    """
    Compute free slots, pick suggestions and phrase them in one go.

    Takes the same payload as free-slots.
    """
    result = _run(SchedulingService.propose, payload_file, config_file)

    if result["answer"] is None:
        err_console.print("[yellow]⚠ No free slots in the requested window.[/yellow]")
    console.print_json(data=result)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]freeslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
