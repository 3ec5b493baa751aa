"""
Noggin CLI - manage libraries and modules, see what is due.

Usage:
    noggin library create ~/study/rust --name "Rust"
    noggin library list
    noggin module create rust "Ownership and Borrowing"
    noggin module list rust
    noggin due
    noggin review rust ownership-and-borrowing-20240101T000000Z quiz-1 2
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from noggin.config import get_settings
from noggin.core.errors import NogginError
from noggin.core.paths import derive_module_id
from noggin.services import Services, create_services

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="noggin",
    help="Noggin - spaced repetition over your own study folders",
    add_completion=False,
    rich_markup_mode="rich",
)
library_app = typer.Typer(name="library", help="Register, list and remove libraries")
module_app = typer.Typer(name="module", help="Create and inspect modules")
app.add_typer(library_app, name="library")
app.add_typer(module_app, name="module")

console = Console()


def _services() -> Services:
    return create_services(get_settings())


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{message}[/]")
    raise typer.Exit(1)


def _date(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


# =============================================================================
# Library Commands
# =============================================================================


@library_app.command("create")
def library_create(
    path: Annotated[Path, typer.Argument(help="Library root directory")],
    name: Annotated[str, typer.Option("--name", "-n", help="Display name")],
    description: Annotated[
        str, typer.Option("--description", "-d", help="Short description")
    ] = "",
) -> None:
    """Create a library at PATH and register it."""
    try:
        services = _services()
        library = asyncio.run(
            services.libraries.create(path.expanduser().resolve(), name, description)
        )
    except NogginError as e:
        _fail(str(e))
    console.print(f"[green]Created library[/] [bold]{library.slug}[/] at {library.path}")


@library_app.command("list")
def library_list() -> None:
    """List registered libraries."""
    try:
        libraries = asyncio.run(_services().libraries.read_all())
    except NogginError as e:
        _fail(str(e))
    if not libraries:
        console.print("[dim]No libraries registered.[/]")
        return

    table = Table(title="Libraries")
    table.add_column("Slug", style="cyan")
    table.add_column("Name")
    table.add_column("Path", style="dim")
    table.add_column("Created")
    for library in libraries:
        table.add_row(library.slug, library.name, library.path, _date(library.created_at))
    console.print(table)


@library_app.command("remove")
def library_remove(
    slug: Annotated[str, typer.Argument(help="Library slug")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Unregister a library and delete its directory."""
    try:
        services = _services()
        path = services.libraries.get_library_path(slug)
    except NogginError as e:
        _fail(str(e))
    if not yes:
        typer.confirm(f"Delete {path} and everything in it?", abort=True)
    try:
        asyncio.run(services.libraries.delete(slug))
    except NogginError as e:
        _fail(str(e))
    console.print(f"[green]Removed library[/] {slug}")


# =============================================================================
# Module Commands
# =============================================================================


@module_app.command("create")
def module_create(
    library: Annotated[str, typer.Argument(help="Library slug")],
    title: Annotated[str, typer.Argument(help="Module title")],
    overview: Annotated[str, typer.Option("--overview", "-o", help="Module overview")] = "",
) -> None:
    """Create a module in a library."""
    try:
        mod = asyncio.run(_services().modules.create_module(library, title, overview))
    except (NogginError, ValueError) as e:
        _fail(str(e))
    console.print(f"[green]Created module[/] [bold]{mod.metadata.id}[/]")


@module_app.command("list")
def module_list(
    library: Annotated[str, typer.Argument(help="Library slug")],
) -> None:
    """List the modules of a library."""
    try:
        overviews = asyncio.run(_services().discovery.get_module_overviews(library))
    except NogginError as e:
        _fail(str(e))
    if not overviews:
        console.print(f"[dim]No modules in {library}.[/]")
        return

    table = Table(title=f"Modules in {library}")
    table.add_column("Id", style="cyan")
    table.add_column("Title")
    for overview in overviews:
        table.add_row(overview.id, overview.display_name)
    console.print(table)


@module_app.command("show")
def module_show(
    library: Annotated[str, typer.Argument(help="Library slug")],
    module_id: Annotated[str, typer.Argument(help="Module id")],
) -> None:
    """Show a module: stats, sources, quizzes and submissions."""
    try:
        mod = asyncio.run(_services().modules.read_module(library, module_id))
    except NogginError as e:
        _fail(str(e))

    meta = mod.metadata
    stats = mod.stats
    console.print(
        Panel(
            f"[bold]{meta.title}[/]\n"
            f"{meta.overview or '[dim]no overview[/]'}\n\n"
            f"Box: {stats.current_box if stats else '-'}   "
            f"Next review: {_date(stats.next_review_date) if stats else '-'}   "
            f"Last review: {_date(stats.last_review_date) if stats else '-'}",
            title=derive_module_id(meta.slug, meta.created_at),
            border_style="cyan",
        )
    )

    if mod.sources:
        console.print("[bold]Sources[/]")
        for source in mod.sources:
            console.print(f"  {Path(source).name}")

    if mod.quizzes:
        table = Table(title="Quizzes")
        table.add_column("Id", style="cyan")
        table.add_column("Title")
        table.add_column("Questions", justify="right")
        table.add_column("Created")
        for quiz in mod.quizzes:
            table.add_row(quiz.id, quiz.title, str(len(quiz.questions)), _date(quiz.created_at))
        console.print(table)

    if mod.submissions:
        table = Table(title="Submissions")
        table.add_column("Quiz", style="cyan")
        table.add_column("Attempt", justify="right")
        table.add_column("Status")
        table.add_column("Grade", justify="right")
        table.add_column("Completed")
        for sub in sorted(mod.submissions, key=lambda s: s.completed_at, reverse=True):
            grade = f"{sub.grade} ({sub.letter_grade})" if sub.is_graded else "-"
            table.add_row(
                sub.quiz_id, str(sub.attempt_number), sub.status, grade, _date(sub.completed_at)
            )
        console.print(table)


# =============================================================================
# Practice Commands
# =============================================================================


@app.command()
def due() -> None:
    """List modules due for review, most urgent first."""
    try:
        mods = asyncio.run(_services().practice_feed.get_due_modules())
    except NogginError as e:
        _fail(str(e))
    if not mods:
        console.print("[green]Nothing due. Come back later.[/]")
        return

    table = Table(title="Due for review")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Library", style="cyan")
    table.add_column("Module")
    table.add_column("Box", justify="right")
    table.add_column("Due since")
    for i, mod in enumerate(mods, 1):
        meta = mod.metadata
        table.add_row(
            str(i),
            meta.library_id,
            f"{meta.title} [dim]({derive_module_id(meta.slug, meta.created_at)})[/]",
            str(mod.stats.current_box),
            _date(mod.stats.next_review_date),
        )
    console.print(table)


@app.command()
def review(
    library: Annotated[str, typer.Argument(help="Library slug")],
    module_id: Annotated[str, typer.Argument(help="Module id")],
    quiz_id: Annotated[str, typer.Argument(help="Quiz id")],
    attempt: Annotated[int, typer.Argument(help="Attempt number", min=1)],
) -> None:
    """Apply a stored graded submission to the module's review schedule."""
    async def _review():
        services = _services()
        submission = await services.modules.read_submission(library, module_id, quiz_id, attempt)
        updated = await services.practice_feed.update_review_schedule(
            library, module_id, submission
        )
        return submission, updated, await services.modules.get_stats(library, module_id)

    try:
        submission, updated, stats = asyncio.run(_review())
    except NogginError as e:
        _fail(str(e))

    if not updated:
        reason = "not graded" if not submission.is_graded else "already applied"
        console.print(f"[yellow]Schedule unchanged ({reason}).[/]")
        return
    console.print(
        f"[green]Grade {submission.grade}[/] -> box {stats.current_box}, "
        f"next review {_date(stats.next_review_date)}"
    )


def main() -> None:
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    app()


if __name__ == "__main__":
    main()
