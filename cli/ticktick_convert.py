#!/usr/bin/env python3
"""
TickTick to Org-mode and Denote Converter

Converts a TickTick CSV backup into:
1. An Org-mode outline of active tasks (org/ticktick-backup.org)
2. An Org-mode archive of archived tasks (org/ticktick-backup_archive.org)
3. One Denote file per note or checklist (denote/)

Usage:
    uv run ticktick_convert.py backup.csv ~/org-export
    uv run ticktick_convert.py backup.csv ~/org-export --with-signature
    uv run ticktick_convert.py backup.csv ~/org-export --checklist-policy flat --checklist-folder "Lists"
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv
from rich.console import Console

from config_loader import get_config_loader
from conversion import ChecklistPolicy, ConversionSettings, TickTickConverter
from note_writer import NoteWriter
from ticktick_reader import TickTickParseError, read_ticktick_export

# Load environment variables
load_dotenv()

console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


@click.command()
@click.argument("input_file", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("output_dir", type=click.Path(file_okay=False, path_type=Path))
@click.option("--with-signature", is_flag=True,
              help="Add a random signature (unique ID) to Denote filenames and identifiers")
@click.option("--checklist-policy", type=click.Choice([p.value for p in ChecklistPolicy]), default=None,
              help="How checklists are separated: none, flat (by list in the checklist folder) or tree (by parentId)")
@click.option("--checklist-folder", default=None, help="Folder whose lists are checklists (flat policy)")
@click.option("--no-archive", is_flag=True, help="Keep archived tasks in the main outline instead of an archive file")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Path to config.yaml (default: project root)")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(
    input_file: Path,
    output_dir: Path,
    with_signature: bool,
    checklist_policy: Optional[str],
    checklist_folder: Optional[str],
    no_archive: bool,
    config_path: Optional[Path],
    verbose: bool,
):
    """Convert a TickTick CSV backup INPUT_FILE into Org-mode and Denote files under OUTPUT_DIR"""
    setup_logging(verbose)

    config = get_config_loader(config_path)
    errors = config.validate_config()
    if errors:
        for error in errors:
            console.print(f"[red]Configuration error: {error}[/red]")
        sys.exit(1)

    base = config.get_conversion_settings()
    settings = ConversionSettings(
        checklist_policy=ChecklistPolicy(checklist_policy) if checklist_policy else base.checklist_policy,
        checklist_folder=checklist_folder or base.checklist_folder,
        with_signature=with_signature or base.with_signature,
        archive=base.archive and not no_archive,
    )
    output_config = config.get_output_config()

    console.print("[bold cyan]TickTick to Org-mode and Denote Converter[/bold cyan]")
    console.print("=" * 41)
    console.print(f"Signature mode: {'ENABLED' if settings.with_signature else 'DISABLED'}")
    console.print(f"Checklist policy: {settings.checklist_policy.value}")

    try:
        records = read_ticktick_export(input_file)
    except OSError as e:
        console.print(f"[red]Error reading {input_file}: {e}[/red]")
        sys.exit(1)
    except TickTickParseError as e:
        console.print(f"[red]Error parsing {input_file}: {e}[/red]")
        sys.exit(1)

    result = TickTickConverter(settings).convert(records)
    for diagnostic in result.diagnostics:
        logger.warning(f"{diagnostic.code}: {diagnostic.message} (task {diagnostic.task_id})")

    writer = NoteWriter(
        output_dir,
        org_dir=output_config["org_dir"],
        denote_dir=output_config["denote_dir"],
        max_concurrent=output_config["max_concurrent"],
    )

    try:
        writer.prepare()
        org_file = writer.write_document(output_config["org_file"], result.outline)
    except OSError as e:
        console.print(f"[red]Error writing org file: {e}[/red]")
        sys.exit(1)

    console.print(f"[green]Successfully created org file: {org_file}[/green]")
    console.print(f"Tasks written: {result.active_count}")

    archive_failed = False
    if result.archive_outline is not None:
        try:
            archive_file = writer.write_document(output_config["archive_file"], result.archive_outline)
            console.print(f"[green]Successfully created archive file: {archive_file}[/green]")
            console.print(f"Archived tasks written: {result.archived_count}")
        except OSError as e:
            archive_failed = True
            console.print(f"[red]Error writing archive file: {e}[/red]")

    report = asyncio.run(writer.write_notes(result.notes))
    console.print(f"[green]Successfully created {report.written} denote files[/green]")
    if report.failed:
        console.print(f"[yellow]{len(report.failed)} denote files could not be written[/yellow]")

    if (report.failed or archive_failed) and output_config["fail_on_write_error"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
