"""Main CLI for devdust."""

import json
import logging
from enum import Enum
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import typer
from InquirerPy import inquirer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt

from devdust.cleaner import clean_project
from devdust.config import DEFAULT_CONFIG, load_config, parse_age_filter, save_config
from devdust.models import CleanResult, Project, ScanOptions
from devdust.scanner import scan_for_projects
from devdust.utils.display import (
    OutputFormat,
    build_json_report,
    display_clean_result,
    display_found,
    display_no_projects,
    display_project,
    display_project_types,
    display_summary,
    make_console,
    print_header,
)

app = typer.Typer(
    name="devdust",
    help="Scan and clean build artifacts from development projects",
    add_completion=False,
)
logger = logging.getLogger("devdust")


class Answer(str, Enum):
    """Reply to the per-project clean prompt."""

    YES = "yes"
    NO = "no"
    ALL = "all"
    QUIT = "quit"
    INVALID = "invalid"


def parse_answer(reply: str) -> Answer:
    """Map a typed reply to an Answer. An empty reply means no."""
    reply = reply.strip().lower()
    if reply in ("y", "yes"):
        return Answer.YES
    if reply in ("n", "no", ""):
        return Answer.NO
    if reply in ("a", "all"):
        return Answer.ALL
    if reply in ("q", "quit"):
        return Answer.QUIT
    return Answer.INVALID


def prompt_clean(console: Console, project: Project) -> Answer:
    """Ask whether to clean a project. End of input counts as quit."""
    try:
        reply = Prompt.ask(
            f"  [bold yellow]?[/] Clean [bold]{escape(project.display_name)}[/] project? "
            + escape("[y/N/a/q]"),
            console=console,
            default="",
            show_default=False,
        )
    except EOFError:
        return Answer.QUIT
    return parse_answer(reply)


def get_version() -> str:
    try:
        return version("devdust")
    except PackageNotFoundError:
        return "0.0.0"


def setup_logging(verbose: bool) -> None:
    """Send devdust diagnostics to stderr through Rich."""
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Clear existing handlers so repeated invocations don't duplicate output
    if logger.handlers:
        logger.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    logger.addHandler(handler)


def _is_valid_age(text: str) -> bool:
    if not text.strip():
        return True
    try:
        parse_age_filter(text)
    except ValueError:
        return False
    return True


def run_setup_wizard(console: Console, config: dict) -> None:
    """Prompt for default settings and save them."""
    console.print(Panel.fit(
        "[bold cyan]Configuration Wizard[/]\n\n"
        "Set your default preferences",
        border_style="cyan",
    ))

    console.print("\n[bold cyan]Scan Paths[/]")
    paths_input = inquirer.text(
        message="Directories to scan by default (comma-separated, empty for current directory):",
        default=", ".join(config.get("paths") or []),
    ).execute()
    new_paths = [p.strip() for p in paths_input.split(",") if p.strip()]

    console.print("\n[bold cyan]Walking[/]")
    follow_symlinks = inquirer.confirm(
        message="Follow symbolic links?",
        default=bool(config.get("follow_symlinks")),
    ).execute()
    same_filesystem = inquirer.confirm(
        message="Stay on the same filesystem?",
        default=bool(config.get("same_filesystem")),
    ).execute()

    console.print("\n[bold cyan]Default Age Filter[/]")
    older = inquirer.text(
        message="Only show projects older than (e.g. 30d, 2w, 6M; empty for no filter):",
        default=config.get("older") or "",
        validate=_is_valid_age,
        invalid_message="Use a number with m, h, d, w, M or y, or a date",
    ).execute()

    console.print("\n[bold cyan]Output Format[/]")
    output_format = inquirer.select(
        message="Default output format:",
        choices=[f.value for f in OutputFormat],
        default=config.get("format") or DEFAULT_CONFIG["format"],
    ).execute()

    save_config({
        "paths": new_paths,
        "follow_symlinks": bool(follow_symlinks),
        "same_filesystem": bool(same_filesystem),
        "older": older.strip() or None,
        "format": output_format,
    })

    console.print("\n[green]Configuration saved successfully![/]")


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"devdust {get_version()}")
        raise typer.Exit()


@app.command()
def main(
    paths: list[Path] | None = typer.Argument(
        None,
        help="Directories to scan (defaults to the current directory)",
        show_default=False,
    ),
    clean_all: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Clean all found projects without confirmation",
    ),
    follow_symlinks: bool = typer.Option(
        False,
        "--follow-symlinks",
        "-L",
        help="Follow symbolic links during scanning",
    ),
    same_filesystem: bool = typer.Option(
        False,
        "--same-filesystem",
        "-s",
        help="Stay on the same filesystem (don't cross mount points)",
    ),
    older: str | None = typer.Option(
        None,
        "--older",
        "-o",
        metavar="TIME",
        help="Only show projects older than TIME (e.g. 30d, 2w, 6M, or a date)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Quiet mode (minimal output)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show what would be deleted without actually deleting",
    ),
    output_format: OutputFormat | None = typer.Option(
        None,
        "--format",
        "-f",
        case_sensitive=False,
        help="Output format (default: pretty)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug details to stderr",
    ),
    list_types: bool = typer.Option(
        False,
        "--list-types",
        help="List supported project types and exit",
    ),
    setup: bool = typer.Option(
        False,
        "--setup",
        help="Run configuration wizard to set defaults",
    ),
    show_version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Find development projects and clean their build artifacts.

    Recursively scans directories for projects (Rust, Node.js, Python, .NET,
    Unity, ...) and deletes their regenerable build output.

    Examples:

        devdust                        # Scan the current directory

        devdust ~/Code ~/Work          # Scan several directories

        devdust --older 3M             # Projects untouched for 3 months

        devdust --all --dry-run        # Show what everything would free

        devdust --format json --all    # Clean everything, JSON report
    """
    setup_logging(verbose)
    config = load_config()

    if setup:
        run_setup_wizard(make_console(OutputFormat.pretty), config)
        raise typer.Exit(0)

    if output_format is None:
        try:
            output_format = OutputFormat(config.get("format") or DEFAULT_CONFIG["format"])
        except ValueError:
            output_format = OutputFormat.pretty

    console = make_console(output_format)
    err_console = make_console(output_format, stderr=True)

    if list_types:
        display_project_types(console)
        raise typer.Exit(0)

    roots = [
        Path(p).expanduser()
        for p in (paths or config.get("paths") or [Path.cwd()])
    ]

    for root in roots:
        if not root.exists():
            err_console.print(f"[bold red]Error:[/] Path does not exist: {escape(str(root))}")
            raise typer.Exit(1)
        if not root.is_dir():
            err_console.print(f"[bold red]Error:[/] Path is not a directory: {escape(str(root))}")
            raise typer.Exit(1)

    older = older or config.get("older")
    min_age_seconds = 0
    if older:
        try:
            min_age_seconds = parse_age_filter(older)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="'--older'") from e

    options = ScanOptions(
        follow_symlinks=follow_symlinks or bool(config.get("follow_symlinks")),
        same_filesystem=same_filesystem or bool(config.get("same_filesystem")),
        min_age_seconds=min_age_seconds,
    )
    logger.debug("Scan options: %s", options)

    json_output = output_format is OutputFormat.json
    show = not quiet and not json_output

    if show and output_format is OutputFormat.pretty:
        print_header(console, get_version())

    if show:
        for root in roots:
            console.print(f"[bold cyan]Scanning:[/] {escape(str(root))}", highlight=False)

    if show and output_format is OutputFormat.pretty:
        with console.status("[bold green]Scanning directories..."):
            results = scan_for_projects(roots, options)
    else:
        results = scan_for_projects(roots, options)

    if show:
        for warning in results.warnings:
            err_console.print(f"[yellow]Warning:[/] {escape(str(warning))}", highlight=False)

    outcomes: dict[str, CleanResult] = {}

    if not results.projects:
        if json_output:
            typer.echo(json.dumps(build_json_report(results, outcomes, dry_run), indent=2))
        elif show:
            display_no_projects(console)
        raise typer.Exit(0)

    if show:
        display_found(console, results)

    projects_cleaned = 0
    total_cleaned = 0
    clean_remaining = clean_all

    for scanned in results.projects:
        project = scanned.project

        if show:
            display_project(console, scanned)

        if dry_run or clean_remaining:
            should_clean = True
        elif json_output:
            should_clean = False
        else:
            answer = prompt_clean(console, project)
            if answer is Answer.QUIT:
                console.print("[yellow]Exiting...[/]")
                break
            if answer is Answer.INVALID:
                console.print("  [red]![/] Invalid input, skipping...")
            if answer is Answer.ALL:
                clean_remaining = True
            should_clean = answer in (Answer.YES, Answer.ALL)

        if should_clean:
            result = clean_project(project, options, dry_run=dry_run)
            outcomes[str(project.path)] = result
            if result.ok:
                projects_cleaned += 1
            total_cleaned += result.freed_bytes

            if show:
                display_clean_result(console, result)
            elif not result.ok and not json_output:
                display_clean_result(err_console, result)

        if show:
            console.print()

    if json_output:
        typer.echo(json.dumps(build_json_report(results, outcomes, dry_run), indent=2))
    elif show:
        display_summary(console, projects_cleaned, total_cleaned, dry_run)


if __name__ == "__main__":
    app()
