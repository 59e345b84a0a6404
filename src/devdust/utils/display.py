"""Display utilities for devdust using Rich."""

import time
from datetime import datetime
from enum import Enum

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from devdust.models import (
    CleanResult,
    ProjectType,
    ScannedProject,
    ScanResult,
    format_elapsed_time,
    format_size,
)
from devdust.scanner import DETECTION_RULES


class OutputFormat(str, Enum):
    """Output format options."""

    pretty = "pretty"
    plain = "plain"
    json = "json"


def make_console(output_format: OutputFormat, stderr: bool = False) -> Console:
    """Create a console for the chosen output format.

    Plain output keeps the same text but drops colour, highlighting and
    line wrapping so it can be piped or grepped.
    """
    if output_format is OutputFormat.pretty:
        return Console(stderr=stderr)
    return Console(stderr=stderr, no_color=True, highlight=False, emoji=False, soft_wrap=True)


def print_header(console: Console, version: str) -> None:
    """Print the application header."""
    console.print(
        Panel.fit(
            f"[bold cyan]Dev Dust v{version}[/]\n"
            "Clean Development Project Artifacts",
            border_style="cyan",
        )
    )
    console.print()


def display_project(console: Console, scanned: ScannedProject, now: float | None = None) -> None:
    """Display information about a project.

    Args:
        console: Rich console instance
        scanned: Project with measured artifacts
        now: Reference time for the "Modified" line (defaults to now)
    """
    project = scanned.project
    console.print(
        f"[bold blue]●[/] [bold]{escape(project.display_name)}[/] "
        f"[bright_black]({project.project_type.display_name})[/]"
    )
    console.print(f"  [bright_black]Path:[/] {escape(str(project.path))}", highlight=False)
    console.print(
        f"  [bright_black]Artifacts:[/] [bold yellow]{format_size(scanned.total_size_bytes)}[/]"
    )

    if scanned.last_modified is not None:
        elapsed = (now if now is not None else time.time()) - scanned.last_modified
        if elapsed >= 0:
            console.print(
                f"  [bright_black]Modified:[/] [bright_black]{format_elapsed_time(int(elapsed))}[/]"
            )

    console.print("  [bright_black]→[/] Artifact directories:")
    for artifact in scanned.artifacts:
        console.print(
            f"    • [bright_black]{escape(artifact.name)}[/] ({artifact.size_human})", highlight=False
        )


def display_found(console: Console, results: ScanResult) -> None:
    """Print the "Found: ..." line after a scan."""
    console.print(
        f"\n[bold green]Found:[/] [bold]{len(results.projects)}[/] projects with "
        f"[bold]{format_size(results.total_size_bytes)}[/] of artifacts\n"
    )


def display_no_projects(console: Console) -> None:
    """Explain an empty scan."""
    console.print("\n[bold green]Scan Finished...[/]")
    console.print("[yellow]No projects with build artifacts found.[/]")
    console.print("\n[bright_black]This could mean:[/]")
    console.print("  [bright_black]•[/] No development projects in the scanned directories")
    console.print("  [bright_black]•[/] All projects are already clean")
    console.print("  [bright_black]•[/] Projects are too new (if using --older filter)")


def display_clean_result(console: Console, result: CleanResult) -> None:
    """Print the outcome of cleaning one project."""
    if result.dry_run:
        console.print(f"  [blue]→[/] Would delete {format_size(result.freed_bytes)}")
        return

    if result.ok:
        console.print(f"  [bold green]✓[/] Cleaned [green]{format_size(result.freed_bytes)}[/]")
        return

    console.print(f"  [bold red]✗[/] Failed to clean: {result.describe()}")
    for failure in result.errors:
        console.print(
            f"    [red]{escape(str(failure.path))}[/]: {escape(failure.error)}", highlight=False
        )


def display_summary(
    console: Console, projects_cleaned: int, total_cleaned: int, dry_run: bool
) -> None:
    """Print the final summary."""
    console.print(Rule(style="cyan"))

    if dry_run:
        console.print(
            f"[bold yellow]Dry run:[/] [bold]{projects_cleaned}[/] projects, "
            f"[bold]{format_size(total_cleaned)}[/] would be freed"
        )
    else:
        console.print(
            f"[bold green]Summary:[/] [bold]{projects_cleaned}[/] projects cleaned, "
            f"[bold green]{format_size(total_cleaned)}[/] freed!"
        )


def display_project_types(console: Console) -> None:
    """Display the supported project types in a rich table."""
    table = Table(title="Supported Project Types")
    table.add_column("Type", style="cyan")
    table.add_column("Markers", style="yellow")
    table.add_column("Artifact Directories", style="magenta")

    markers: dict[ProjectType, list[str]] = {}
    for project_type, names, extensions in DETECTION_RULES:
        markers.setdefault(project_type, []).extend(names)
        markers[project_type].extend(f"*{ext}" for ext in extensions)

    for project_type in ProjectType:
        table.add_row(
            project_type.display_name,
            ", ".join(markers.get(project_type, [])),
            ", ".join(project_type.artifact_directories),
        )

    console.print(table)


def build_json_report(
    results: ScanResult,
    outcomes: dict[str, CleanResult],
    dry_run: bool,
) -> dict:
    """Build the JSON document for --format json.

    Args:
        results: Scan results
        outcomes: Clean results keyed by project path
        dry_run: Whether nothing was actually deleted

    Returns:
        JSON-serialisable dictionary
    """
    projects = []
    for scanned in results.projects:
        project = scanned.project
        entry = {
            "name": project.display_name,
            "type": project.project_type.display_name,
            "path": str(project.path),
            "artifact_size": scanned.total_size_bytes,
            "artifact_size_human": format_size(scanned.total_size_bytes),
            "last_modified": (
                datetime.fromtimestamp(scanned.last_modified).isoformat()
                if scanned.last_modified is not None
                else None
            ),
            "artifacts": [
                {"name": a.name, "path": str(a.path), "size": a.size_bytes}
                for a in scanned.artifacts
            ],
            "cleaned": None,
        }

        outcome = outcomes.get(str(project.path))
        if outcome is not None:
            entry["cleaned"] = {
                "freed": outcome.freed_bytes,
                "freed_human": format_size(outcome.freed_bytes),
                "errors": [{"path": str(f.path), "error": f.error} for f in outcome.errors],
            }
        projects.append(entry)

    total_cleaned = sum(o.freed_bytes for o in outcomes.values())
    return {
        "roots": [str(r) for r in results.roots],
        "dry_run": dry_run,
        "projects": projects,
        "total_artifact_size": results.total_size_bytes,
        "projects_cleaned": sum(1 for o in outcomes.values() if o.ok),
        "total_cleaned": total_cleaned,
        "warnings": [
            {"path": str(w.path) if w.path else None, "message": w.message}
            for w in results.warnings
        ],
    }
