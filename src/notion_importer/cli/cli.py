"""
Notion Importer CLI Application.

Main entry point for the command-line interface. Reads a Notion HTML export
zip, runs the two import phases and writes a preview of the converted
documents and database attribute views to disk.
"""

import json
import logging
import zipfile
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..core import ImportOrchestrator, ImportReport, ZipArchive
from ..core.document_transformer import DocumentResult
from ..core.inventory import InventoryScanner
from ..core.resolver import ResolverRegistry
from ..exceptions.config_exceptions import ConfigurationError
from ..utils.config import ConfigManager
from ..utils.logging_config import LogFormat, LoggingManager, LogLevel

console = Console()

app = typer.Typer(
    name="notion-importer",
    help="Convert Notion HTML exports into SiYuan markdown and attribute views",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

_config_manager: Optional[ConfigManager] = None

logger = logging.getLogger(__name__)


def setup_logging(config_manager: ConfigManager) -> LoggingManager:
    """Configure root logging from the ``logging`` configuration section."""
    level = LogLevel.from_name(config_manager.get("logging.level", "WARNING"))
    log_format = LogFormat(config_manager.get("logging.format", "standard"))
    return LoggingManager(log_level=level, log_format=log_format, console=console)


def get_config_manager(config_path: Optional[str] = None) -> ConfigManager:
    """
    Get or create the global configuration manager.

    Raises:
        typer.Exit: If configuration loading fails
    """
    global _config_manager

    if _config_manager is None or config_path:
        try:
            _config_manager = ConfigManager(config_file=config_path, load_env=True)
            _config_manager.load_config()
        except ConfigurationError as e:
            rprint(f"[red]Configuration Error:[/red] {e}")
            raise typer.Exit(1)

    return _config_manager


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[str] = typer.Option(
        None,
        "--config-path",
        "-c",
        help="Path to configuration file (default: notion-importer.config.json)",
        metavar="PATH",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging (DEBUG level)",
    ),
) -> None:
    """
    Notion Importer CLI - convert Notion HTML exports for SiYuan.

    Common workflows:
    • List what an export contains: notion-importer inventory export.zip
    • Convert an export: notion-importer convert export.zip --output out/
    """
    global _config_manager

    # Re-read configuration on every invocation; the manager is module state
    _config_manager = None
    config_manager = get_config_manager(config_path)
    if verbose:
        config_manager.set("logging.level", "DEBUG")
    setup_logging(config_manager)

    ctx.obj = {
        "config_path": config_path,
        "verbose": verbose,
        "config_manager": config_manager,
    }


def build_registry(config_manager: ConfigManager, single_line_breaks: Optional[bool] = None) -> ResolverRegistry:
    """Registry configured from the ``attachments`` and ``markdown`` sections."""
    if single_line_breaks is None:
        single_line_breaks = config_manager.get("markdown.single_line_breaks", False)
    return ResolverRegistry(
        attachment_dir=config_manager.get("attachments.base_dir"),
        single_line_breaks=single_line_breaks,
    )


def open_archive(archive: Path) -> list:
    """
    List the entries of an export zip.

    Raises:
        typer.Exit: If the archive is missing or not a zip file
    """
    if not archive.exists():
        rprint(f"[red]Archive not found:[/red] {archive}")
        raise typer.Exit(1)
    try:
        return ZipArchive(archive).entries()
    except zipfile.BadZipFile as e:
        rprint(f"[red]Not a valid zip archive:[/red] {archive} ({e})")
        raise typer.Exit(1)


@app.command()
def inventory(
    ctx: typer.Context,
    archive: Path = typer.Argument(..., help="Notion HTML export zip"),
) -> None:
    """Run the inventory phase only and list pages and attachments."""
    config_manager = ctx.obj["config_manager"]
    registry = build_registry(config_manager)
    entries = open_archive(archive)

    result = InventoryScanner(registry).scan(entries)

    pages = Table(title="Pages")
    pages.add_column("Id", style="dim")
    pages.add_column("Title", style="cyan")
    pages.add_column("Destination")
    pages.add_column("Content", justify="center")
    for record in result.documents:
        pages.add_row(
            record.source_id,
            record.title,
            registry.resolve_path_for_entry(record),
            "✓" if record.has_content else "✗",
        )
    console.print(pages)

    attachments = Table(title="Attachments")
    attachments.add_column("Archive path", style="cyan")
    attachments.add_column("Reference path")
    for record in result.attachments:
        attachments.add_row(record.archive_path, record.reference_path)
    console.print(attachments)

    for failure in result.failures:
        rprint(f"[red]✗[/red] {failure.entry_path}: {failure.error}")

    rprint(
        f"[green]{len(result.documents)}[/green] pages, "
        f"[green]{len(result.attachments)}[/green] attachments, "
        f"[red]{len(result.failures)}[/red] failures"
    )
    if not result.success:
        raise typer.Exit(1)


def write_document(output: Path, document: DocumentResult) -> Path:
    """Write a converted page and its attribute views below ``output``."""
    folder = output / document.destination_path.strip('/')
    folder.mkdir(parents=True, exist_ok=True)

    markdown_path = folder / f"{document.title}.md"
    markdown_path.write_text(document.markdown_body, encoding="utf-8")

    for view in document.attribute_views:
        view_path = folder / f"{document.title}.{view.id}.av.json"
        view_path.write_text(
            json.dumps(view.to_dict(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    return markdown_path


def print_report(report: ImportReport) -> None:
    summary = Table(title="Converted documents")
    summary.add_column("Title", style="cyan")
    summary.add_column("Destination")
    summary.add_column("Databases", justify="right")
    summary.add_column("Properties", justify="right")
    for document in report.documents:
        summary.add_row(
            document.title,
            document.destination_path,
            str(len(document.attribute_views)),
            str(len(document.front_matter)),
        )
    console.print(summary)

    for failure in report.failures:
        rprint(f"[red]✗[/red] {failure.entry_path} ({failure.phase}): {failure.message}")


@app.command()
def convert(
    ctx: typer.Context,
    archive: Path = typer.Argument(..., help="Notion HTML export zip"),
    output: Path = typer.Option(..., "--output", "-o", help="Directory for the converted files"),
    single_line_breaks: Optional[bool] = typer.Option(
        None,
        "--single-line-breaks/--keep-line-breaks",
        help="Collapse blank lines between paragraphs (default from configuration)",
    ),
) -> None:
    """Convert an export and write markdown and attribute views to OUTPUT."""
    config_manager = ctx.obj["config_manager"]
    registry = build_registry(config_manager, single_line_breaks)
    entries = open_archive(archive)

    orchestrator = ImportOrchestrator(
        registry=registry,
        page_size=config_manager.get("databases.page_size"),
    )
    report = orchestrator.run(entries)

    output.mkdir(parents=True, exist_ok=True)
    for document in report.documents:
        write_document(output, document)

    print_report(report)
    rprint(
        f"[green]{len(report.documents)}[/green] documents, "
        f"[green]{len(report.attachments)}[/green] attachments, "
        f"[red]{len(report.failures)}[/red] failures"
    )
    if not report.success:
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    rprint(f"Notion Importer [blue]v{__version__}[/blue]")


def cli_main() -> None:
    """Console script entry point."""
    try:
        app()
    except KeyboardInterrupt:
        rprint("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(130)


if __name__ == "__main__":
    cli_main()
