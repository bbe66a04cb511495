"""Typer CLI entrypoint for tldsgen."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import typer
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigRepository, GeneratorConfig, SourceConfig
from .engine.exporter import FORMATS, FileExporter
from .errors import AggregateFetchError, PipelineTimeoutError
from .logging_conf import configure_logging
from .orchestrator import Orchestrator

app = typer.Typer(
    help="Generate a sorted list of public top-level domains.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()
err_console = Console(stderr=True)


def load_config(config_path: Optional[Path]) -> GeneratorConfig:
    repository = ConfigRepository(config_path)
    try:
        return repository.load()
    except (FileNotFoundError, ValueError, ValidationError) as exc:
        err_console.print(f"Invalid configuration: {exc}", style="red")
        raise typer.Exit(code=2) from exc


def build_orchestrator(config: GeneratorConfig) -> Orchestrator:
    return Orchestrator(config)


def _render_sources_table(sources: Sequence[SourceConfig]) -> Table:
    table = Table(title=f"Sources · {len(sources)}", box=box.SIMPLE_HEAD)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("URL", style="green", overflow="fold")
    table.add_column("Pattern", style="magenta")
    for source in sources:
        table.add_row(source.name, source.url, source.pattern)
    return table


@app.callback()
def main() -> None:
    """tldsgen command line."""


@app.command("generate", help="Fetch every source and write the merged TLD list.")
def generate(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or JSON configuration file.", show_default=False
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Destination file (overrides configuration).", show_default=False
    ),
    fmt: Optional[str] = typer.Option(
        None, "--format", "-f", help=f"Output format: {', '.join(FORMATS)}.", show_default=False
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Overall timeout in seconds.", show_default=False
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging.", is_flag=True),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Also write JSON logs to this file.", show_default=False
    ),
) -> None:
    configure_logging(verbose=verbose, log_file=log_file)
    config = load_config(config_path)
    overrides: dict[str, object] = {}
    if output is not None:
        overrides["output_path"] = output
    if fmt is not None:
        if fmt not in FORMATS:
            raise typer.BadParameter(f"expected one of {', '.join(FORMATS)}", param_hint="--format")
        overrides["output_format"] = fmt
    if timeout is not None:
        if timeout <= 0:
            raise typer.BadParameter("must be positive", param_hint="--timeout")
        overrides["overall_timeout"] = timeout
    if overrides:
        config = config.model_copy(update=overrides)

    orchestrator = build_orchestrator(config)
    try:
        result = orchestrator.run()
    except AggregateFetchError as exc:
        err_console.print("Could not get TLD list:", style="red")
        for error in exc.errors:
            err_console.print(f"  • {error}", style="red")
        raise typer.Exit(code=1) from exc
    except PipelineTimeoutError as exc:
        err_console.print(f"Could not get TLD list: {exc}", style="red")
        raise typer.Exit(code=1) from exc
    finally:
        orchestrator.close()

    exporter = FileExporter(config.output_path, config.output_format)
    configure_logging().info("writing_output", path=str(config.output_path), tlds=len(result))
    try:
        exporter.export(result)
    except OSError as exc:
        err_console.print(f"Could not write {config.output_path}: {exc}", style="red")
        raise typer.Exit(code=1) from exc
    finally:
        exporter.close()
    console.print(
        f"Wrote {len(result)} TLDs from {len(result.sources)} sources to {config.output_path}",
        style="green",
    )


@app.command("sources", help="List the configured sources.")
def sources(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or JSON configuration file.", show_default=False
    ),
) -> None:
    config = load_config(config_path)
    console.print(_render_sources_table(config.sources))


__all__ = ["app"]
