"""Command line interface for Saitama."""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from saitama.cli_support import (
    collection_stats,
    merge_imported,
    parse_tags,
    pick_random,
    search_problems,
    tag_counts,
)
from saitama.config import (
    ConfigError,
    ConfigManager,
    SaitamaConfig,
    resolve_with_precedence,
    set_nested,
)
from saitama.store import (
    Problem,
    ProblemStore,
    StoreError,
    export_to,
    find_by_id,
    import_from,
)

console = Console()


@dataclass
class AppContext:
    """Objects shared by every command in one invocation."""

    config: SaitamaConfig
    store: ProblemStore


def _configure_logging(level: str) -> None:
    """Attach a Rich handler to the package logger at ``level``."""
    logger = logging.getLogger("saitama")
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)


def _load_problems(store: ProblemStore) -> list[Problem]:
    try:
        return store.load()
    except StoreError as exc:
        raise click.ClickException(f"Error loading problems: {exc}") from exc


def _save_problems(store: ProblemStore, problems: Sequence[Problem]) -> None:
    try:
        store.save(problems)
    except StoreError as exc:
        raise click.ClickException(f"Error saving problems: {exc}") from exc


def _require_problem(problems: Sequence[Problem], raw_id: str) -> tuple[Problem, int]:
    """Look up a problem by its upper-cased id or fail the command."""
    target_id = raw_id.upper()
    problem, index = find_by_id(problems, target_id)
    if problem is None:
        raise click.ClickException(f"Problem with ID '{target_id}' not found")
    return problem, index


def _format_tags(tags: Sequence[str], *, empty: str = "none", separator: str = ", ") -> str:
    return separator.join(tags) if tags else empty


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="saitama")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Saitama tracks your coding problems and picks random ones to train on.

    Args:
        ctx: Click context that receives the shared application objects.
        verbose: When True, log at DEBUG level regardless of configuration.

    Raises:
        click.ClickException: If the configuration cannot be loaded.
    """
    try:
        overrides = {"logging.level": "DEBUG"} if verbose else None
        config = ConfigManager().load(cli_overrides=overrides)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    _configure_logging(config.logging.level)
    ctx.obj = AppContext(config=config, store=ProblemStore.from_config(config))


@cli.command()
@click.option("--id", "problem_id", help="Problem identifier such as LC1 or CF123.")
@click.option("--name", help="Problem name.")
@click.option("--tags", help="Comma-separated tags.")
@click.option("--difficulty", default="", help="Difficulty label (easy, medium, hard).")
@click.option("--platform", default="", help="Platform such as leetcode or codeforces.")
@click.option("--url", default="", help="Link to the problem statement.")
@click.option("--notes", default="", help="Free-text notes.")
@click.pass_obj
def add(
    app: AppContext,
    problem_id: str | None,
    name: str | None,
    tags: str | None,
    difficulty: str,
    platform: str,
    url: str,
    notes: str,
) -> None:
    """Add a new coding problem, prompting for anything not given as an option.

    Raises:
        click.ClickException: If the id already exists or the store cannot be updated.
    """
    problems = _load_problems(app.store)

    if problem_id is None:
        problem_id = click.prompt("Problem ID (e.g., LC1, CF123)")
    problem_id = problem_id.strip().upper()
    if not problem_id:
        raise click.ClickException("Problem ID cannot be empty.")
    if find_by_id(problems, problem_id)[1] != -1:
        raise click.ClickException(f"ID '{problem_id}' already exists")

    if name is None:
        name = click.prompt("Problem name")
    name = name.strip()
    if not name:
        raise click.ClickException("Problem name cannot be empty.")
    if tags is None:
        tags = click.prompt("Tags (comma-separated)", default="", show_default=False)

    problem = Problem(
        id=problem_id,
        name=name,
        tags=parse_tags(tags),
        date_added=datetime.now(timezone.utc),
        difficulty=difficulty.strip().lower(),
        platform=platform.strip().lower(),
        url=url.strip(),
        notes=notes,
    )
    problems.append(problem)
    _save_problems(app.store, problems)

    console.print(
        f"[green]Problem '{escape(problem.name)}' added with ID {escape(problem.id)}.[/green]"
    )
    if problem.tags:
        console.print(f"[yellow]Tags: {_format_tags(problem.tags)}[/yellow]")


@cli.command("list")
@click.pass_obj
def list_problems(app: AppContext) -> None:
    """List all saved coding problems."""
    problems = _load_problems(app.store)
    if not problems:
        console.print("[yellow]No problems found yet. Add one with `saitama add`.[/yellow]")
        return

    table = Table(title="Your coding problems")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Tags", style="green")
    table.add_column("Difficulty")
    table.add_column("Solved", justify="right")
    for problem in problems:
        table.add_row(
            problem.id,
            escape(problem.name),
            _format_tags(problem.tags),
            problem.difficulty or "-",
            str(problem.solve_count),
        )
    console.print(table)
    console.print(f"[magenta]Total: {len(problems)} problems[/magenta]")


@cli.command()
@click.argument("count", type=int, required=False)
@click.pass_obj
def pick(app: AppContext, count: int | None) -> None:
    """Pick COUNT random problems to solve (defaults to configuration)."""
    problems = _load_problems(app.store)
    if not problems:
        console.print("[yellow]No problems found. Add some first with `saitama add`.[/yellow]")
        return

    requested = count if count is not None and count > 0 else app.config.cli.pick_count
    if len(problems) < requested:
        console.print(
            f"[yellow]Not enough problems: you have {len(problems)}, requested {requested}. "
            "Showing all of them.[/yellow]"
        )

    for position, problem in enumerate(pick_random(problems, requested), start=1):
        console.print(f"[bold yellow]{position}. {problem.id}[/bold yellow]")
        console.print(f"   {escape(problem.name)}")
        tag_line = _format_tags(problem.tags, empty="No tags", separator=" • ")
        console.print(f"   [green]{tag_line}[/green]")


@cli.command()
@click.argument("query")
@click.pass_obj
def search(app: AppContext, query: str) -> None:
    """Search problems whose name or tags contain QUERY."""
    matches = search_problems(_load_problems(app.store), query)
    if not matches:
        console.print(f"[yellow]No problems found matching '{query}'.[/yellow]")
        return

    console.print(f"[cyan]Found {len(matches)} problems matching '{query}':[/cyan]")
    for position, problem in enumerate(matches, start=1):
        console.print(f"{position}. {escape(problem.id)} - {escape(problem.name)}")
        console.print(f"   [green]Tags: {_format_tags(problem.tags)}[/green]")


@cli.command()
@click.pass_obj
def tags(app: AppContext) -> None:
    """List all tags with problem counts."""
    counts = tag_counts(_load_problems(app.store))
    if not counts:
        console.print("[yellow]No tags found.[/yellow]")
        return

    table = Table(title="Tags")
    table.add_column("Tag", style="yellow")
    table.add_column("Problems", justify="right")
    for tag, count in counts:
        table.add_row(tag, str(count))
    console.print(table)


@cli.command()
@click.pass_obj
def stats(app: AppContext) -> None:
    """Show collection statistics."""
    problems = _load_problems(app.store)
    if not problems:
        console.print("[yellow]No problems found.[/yellow]")
        return

    summary = collection_stats(problems)
    console.print(f"Total problems: {summary.total}")
    console.print(f"Unique tags: {summary.unique_tags}")
    console.print(f"Average tags per problem: {summary.average_tags:.1f}")


@cli.command()
@click.argument("problem_id")
@click.option("-y", "--yes", is_flag=True, help="Delete without asking for confirmation.")
@click.pass_obj
def delete(app: AppContext, problem_id: str, yes: bool) -> None:
    """Delete the problem with PROBLEM_ID."""
    problems = _load_problems(app.store)
    problem, index = _require_problem(problems, problem_id)

    if not yes and not click.confirm(f"Delete problem '{problem.id} - {problem.name}'?"):
        console.print("[yellow]Deletion cancelled.[/yellow]")
        return

    del problems[index]
    _save_problems(app.store, problems)
    console.print(f"[green]Problem '{problem.id}' deleted.[/green]")


@cli.command()
@click.argument("problem_id")
@click.option("--name", help="New problem name.")
@click.option("--tags", "tag_text", help="New comma-separated tags.")
@click.pass_obj
def edit(app: AppContext, problem_id: str, name: str | None, tag_text: str | None) -> None:
    """Edit the name and tags of PROBLEM_ID, prompting when no option is given."""
    problems = _load_problems(app.store)
    problem, _ = _require_problem(problems, problem_id)

    if name is None and tag_text is None:
        name = click.prompt("New name", default=problem.name)
        tag_text = click.prompt("New tags", default=_format_tags(problem.tags, empty=""))

    if name is not None:
        if not name.strip():
            raise click.ClickException("Problem name cannot be empty.")
        problem.name = name.strip()
    if tag_text is not None:
        problem.tags = parse_tags(tag_text)

    _save_problems(app.store, problems)
    console.print(f"[green]Problem '{problem.id}' updated.[/green]")


@cli.command()
@click.argument("problem_id")
@click.pass_obj
def solve(app: AppContext, problem_id: str) -> None:
    """Record that PROBLEM_ID was solved just now."""
    problems = _load_problems(app.store)
    problem, _ = _require_problem(problems, problem_id)

    problem.solve_count += 1
    problem.last_solved = datetime.now(timezone.utc)
    _save_problems(app.store, problems)
    console.print(
        f"[green]Problem '{problem.id}' solved {problem.solve_count} time(s).[/green]"
    )


@cli.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-y", "--yes", is_flag=True, help="Merge without asking for confirmation.")
@click.pass_obj
def import_problems(app: AppContext, file: Path, yes: bool) -> None:
    """Merge problems from FILE, skipping ids that already exist."""
    if not yes and not click.confirm(
        "This will merge imported problems with your current list. Continue?"
    ):
        console.print("[yellow]Import cancelled.[/yellow]")
        return

    try:
        imported = import_from(file)
    except StoreError as exc:
        raise click.ClickException(f"Error importing problems: {exc}") from exc

    merged, added = merge_imported(_load_problems(app.store), imported)
    if added:
        _save_problems(app.store, merged)
    console.print(f"[green]Imported {added} new problems from {file}.[/green]")


@cli.command("export")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def export_problems(app: AppContext, file: Path) -> None:
    """Export all problems to FILE as JSON."""
    problems = _load_problems(app.store)
    try:
        export_to(problems, file)
    except StoreError as exc:
        raise click.ClickException(f"Error exporting problems: {exc}") from exc
    console.print(f"[green]Exported {len(problems)} problems to {file}.[/green]")


@cli.command()
@click.pass_obj
def backups(app: AppContext) -> None:
    """List saved snapshots of the data file, newest first."""
    try:
        snapshots = app.store.backups.list_backups()
    except StoreError as exc:
        raise click.ClickException(f"Error listing backups: {exc}") from exc

    if not snapshots:
        console.print("[yellow]No backups yet.[/yellow]")
        return
    for snapshot in reversed(snapshots):
        click.echo(str(snapshot))


@cli.command()
@click.pass_context
def wiki(ctx: click.Context) -> None:
    """Show all available commands."""
    click.echo(ctx.parent.get_help() if ctx.parent else ctx.get_help())


@cli.group()
def config() -> None:
    """Manage the Saitama configuration file."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    try:
        resolved = ConfigManager().load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(resolved.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'storage.max_backups'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        manager.ensure_exists()
        before = manager.read_text().splitlines()
        file_data = manager.load_file_overrides()
        set_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=SaitamaConfig(), file_overrides=file_data)
        manager.save(file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    after = manager.read_text().splitlines()
    diff = [
        line
        for line in difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
        if not line.startswith(("-# Last updated", "+# Last updated"))
    ]
    if any(line.startswith(("+", "-")) and not line.startswith(("+++", "---")) for line in diff):
        console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


@config.command("path")
@click.pass_obj
def config_path(app: AppContext) -> None:
    """Print the configuration file and data file locations."""
    try:
        data_path = app.store.data_path
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"config: {ConfigManager().config_path}")
    click.echo(f"data: {data_path}")
    click.echo(f"backups: {app.store.backup_dir}")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
