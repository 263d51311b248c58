"""
Command-line interface for the accessibility pipeline.

Provides:
- autotag: the script variant; tags a fixed sample PDF and writes the
  tagged PDF and the XLSX report to fixed paths
- check: run the accessibility checker on a local file
- serve: run the HTTP API with uvicorn
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.logging import RichHandler

from .configuration import load_settings
from .delivery import write_script_outputs
from .errors import AccessibilityServiceError
from .models import UploadedFile
from .pipeline import AccessibilityPipeline

app = typer.Typer(
    name="pdf-a11y",
    help="PDF accessibility checking and auto-tagging via Adobe PDF Services",
    add_completion=False,
)
console = Console()


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
    )


def _read_upload(path: Path) -> UploadedFile:
    content_type, _ = mimetypes.guess_type(path.name)
    return UploadedFile(content=path.read_bytes(), filename=path.name, content_type=content_type or "")


@app.command()
def autotag(
    input_path: Optional[Path] = typer.Option(None, "--input", "-i", help="PDF or DOCX to tag"),
    tagged_output: Optional[Path] = typer.Option(None, "--tagged-output", help="Where to write the tagged PDF"),
    report_output: Optional[Path] = typer.Option(None, "--report-output", help="Where to write the XLSX report"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config override file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """Auto-tag a document and write the tagged PDF and report."""
    setup_logging(verbose)
    settings = load_settings(config_path=config)
    input_path = input_path or Path(settings.script.input_path)
    tagged_output = tagged_output or Path(settings.script.tagged_pdf_path)
    report_output = report_output or Path(settings.script.report_path)

    if not input_path.exists():
        console.print(f"[red]Error: Input file not found: {input_path}[/red]")
        raise typer.Exit(code=1)

    runner = AccessibilityPipeline.from_settings(settings)
    try:
        outcome = runner.autotag(_read_upload(input_path))
        write_script_outputs(outcome, tagged_output, report_output)
    except AccessibilityServiceError as e:
        console.print(f"\n[red]✗ Error ({e.stage}):[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Tagged PDF: {tagged_output}")
    console.print(f"[green]✓[/green] Report:     {report_output}")


@app.command()
def check(
    input_path: Path = typer.Argument(..., help="PDF or DOCX to check"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config override file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """Run the accessibility checker and save the JSON report."""
    setup_logging(verbose)

    if not input_path.exists():
        console.print(f"[red]Error: Input file not found: {input_path}[/red]")
        raise typer.Exit(code=1)

    settings = load_settings(config_path=config)
    runner = AccessibilityPipeline.from_settings(settings)
    try:
        report = runner.check(_read_upload(input_path))
    except AccessibilityServiceError as e:
        console.print(f"\n[red]✗ Error ({e.stage}):[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Report saved to: {report.path}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the HTTP API."""
    settings = load_settings()
    uvicorn.run(
        "pdf_a11y_backend.main:app",
        host=host or settings.server.host,
        port=port or settings.server.port,
        reload=reload,
    )


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
