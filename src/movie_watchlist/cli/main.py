"""Command line interface for the movie watchlist."""

import asyncio
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, NoReturn, Optional, Tuple, TypeVar

import click

from .. import __version__
from ..config import Config, ConfigManager
from ..core.interfaces import IWatchlistService
from ..core.models import WatchlistEntry, WatchlistPage
from ..infrastructure import Container, setup_logging
from ..utils import ConfigurationError, WatchlistError

T = TypeVar("T")

EXIT_CLIENT_ERROR = 1
EXIT_SERVER_ERROR = 2

# Commands that run without a loaded configuration
NO_CONFIG_COMMANDS = {"init"}


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file (default: search standard locations)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output")
@click.version_option(version=__version__, prog_name="movie-watchlist")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """Movie Watchlist - keep a watchlist enriched with OMDb and TMDb metadata."""
    ctx.ensure_object(dict)
    if ctx.invoked_subcommand in NO_CONFIG_COMMANDS:
        return

    try:
        config, container = _bootstrap(config_path, verbose)
    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(EXIT_CLIENT_ERROR)

    ctx.obj.update(config=config, container=container)


def _bootstrap(config_path: Optional[Path], verbose: bool) -> Tuple[Config, Container]:
    """Load configuration, set up logging and wire the services."""
    config_manager = ConfigManager(config_path)
    config = config_manager.load_config()
    if verbose:
        config.logging.level = "DEBUG"
    setup_logging(config.logging)

    container = Container(config_manager)
    container.configure_default_services()
    return config, container


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("config") / "config.yaml",
    show_default=True,
    help="Where to write the configuration file",
)
def init(output: Path) -> None:
    """Write a starter configuration file."""
    if output.exists() and not click.confirm(f"{output} already exists. Overwrite?"):
        return

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        ConfigManager.create_default_config(output)
    except OSError as e:
        click.echo(f"Cannot write {output}: {e}", err=True)
        sys.exit(EXIT_CLIENT_ERROR)

    click.echo(f"Configuration written to {output}")
    click.echo("Set OMDB_API_KEY and TMDB_API_KEY (or a .env file) before adding movies.")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show configuration and watchlist status."""
    config = ctx.obj["config"]
    service = _service(ctx)

    page = _call(service.list_movies, 0)

    click.echo("Movie Watchlist Status")
    click.echo("=" * 40)
    click.echo(f"OMDb Configured: {'✓' if _is_set(config.omdb.api_key) else '✗'}")
    click.echo(f"TMDb Configured: {'✓' if _is_set(config.tmdb.api_key) else '✗'}")
    click.echo(f"Watchlist Database: {config.storage.database_url}")
    click.echo(f"Images Directory: {config.storage.images_path}")
    click.echo(f"Max Workers: {config.app.max_workers}")
    click.echo(f"Movies on Watchlist: {page.total_elements}")


@cli.command()
@click.argument("title")
@click.option("--json", "as_json", is_flag=True, help="Print the entry as JSON")
@click.pass_context
def add(ctx: click.Context, title: str, as_json: bool) -> None:
    """Add a movie to the watchlist by TITLE."""
    service = _service(ctx)
    entry = _run(ctx, service.add_movie, title)

    if as_json:
        click.echo(entry.model_dump_json(indent=2))
    else:
        click.echo(f"Added: {_summary(entry)}")
        _display_entry(entry)


@cli.command(name="list")
@click.option("--page", "-p", type=int, default=0, help="Page number, starting at 0")
@click.option("--size", "-s", type=int, default=None, help="Entries per page")
@click.pass_context
def list_movies(ctx: click.Context, page: int, size: Optional[int]) -> None:
    """List movies on the watchlist."""
    result = _call(_service(ctx).list_movies, page, size)
    _display_page(result)


@cli.command()
@click.argument("entry_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print the entry as JSON")
@click.pass_context
def show(ctx: click.Context, entry_id: int, as_json: bool) -> None:
    """Show details of the entry ENTRY_ID."""
    entry = _call(_service(ctx).get_movie, entry_id)
    if entry is None:
        _not_found(entry_id)

    if as_json:
        click.echo(entry.model_dump_json(indent=2))
    else:
        click.echo(_summary(entry))
        _display_entry(entry)


@cli.command()
@click.argument("entry_id", type=int)
@click.option("--unwatched", is_flag=True, help="Mark as not watched")
@click.pass_context
def watched(ctx: click.Context, entry_id: int, unwatched: bool) -> None:
    """Mark the entry ENTRY_ID as watched."""
    entry = _call(_service(ctx).update_watched, entry_id, not unwatched)
    if entry is None:
        _not_found(entry_id)
    click.echo(f"{_summary(entry)}: {'watched' if entry.watched else 'not watched'}")


@cli.command()
@click.argument("entry_id", type=int)
@click.argument("rating", type=int, required=False)
@click.option("--clear", is_flag=True, help="Remove the rating")
@click.pass_context
def rate(ctx: click.Context, entry_id: int, rating: Optional[int], clear: bool) -> None:
    """Rate the entry ENTRY_ID from 1 to 5 stars."""
    if rating is None and not clear:
        raise click.UsageError("Give a RATING or use --clear")
    if rating is not None and clear:
        raise click.UsageError("RATING and --clear are mutually exclusive")

    entry = _call(_service(ctx).update_rating, entry_id, rating)
    if entry is None:
        _not_found(entry_id)

    if entry.rating is None:
        click.echo(f"{_summary(entry)}: rating cleared")
    else:
        click.echo(f"{_summary(entry)}: {'★' * entry.rating}")


@cli.command()
@click.argument("entry_id", type=int)
@click.pass_context
def delete(ctx: click.Context, entry_id: int) -> None:
    """Remove the entry ENTRY_ID from the watchlist."""
    if not _call(_service(ctx).delete_movie, entry_id):
        _not_found(entry_id)
    click.echo(f"Deleted entry {entry_id}")


@cli.command()
@click.argument("query")
@click.pass_context
def search(ctx: click.Context, query: str) -> None:
    """Search TMDb for movies matching QUERY."""
    service = _service(ctx)
    candidates = _run(ctx, service.search_movies, query)

    if not candidates:
        click.echo("No matches found")
        return

    for candidate in candidates:
        year = (candidate.release_date or "")[:4] or "?"
        score = f"{candidate.vote_average:.1f}" if candidate.vote_average is not None else "-"
        click.echo(f"[{candidate.id}] {candidate.title} ({year})  {score}")


def _service(ctx: click.Context) -> IWatchlistService:
    container: Container = ctx.obj["container"]
    try:
        return container.get(IWatchlistService)  # type: ignore
    except WatchlistError as e:
        _fail(e)


def _call(func: Callable[..., T], *args: Any) -> T:
    """Run a synchronous service call and map application errors to exit codes."""
    try:
        return func(*args)
    except WatchlistError as e:
        _fail(e)


def _run(ctx: click.Context, func: Callable[..., Awaitable[T]], *args: Any) -> T:
    """Run a service call and map application errors to exit codes."""
    container: Container = ctx.obj["container"]

    async def runner() -> T:
        try:
            return await func(*args)
        finally:
            await container.close()

    try:
        return asyncio.run(runner())
    except KeyboardInterrupt:
        click.echo("\nInterrupted.", err=True)
        sys.exit(1)
    except WatchlistError as e:
        _fail(e)


def _fail(error: WatchlistError) -> NoReturn:
    """Exit with 1 for caller mistakes and 2 for upstream failures."""
    click.echo(f"Error: {error}", err=True)
    sys.exit(EXIT_CLIENT_ERROR if error.client_error else EXIT_SERVER_ERROR)


def _not_found(entry_id: int) -> NoReturn:
    click.echo(f"Error: No watchlist entry with ID {entry_id}", err=True)
    sys.exit(EXIT_CLIENT_ERROR)


def _is_set(api_key: str) -> bool:
    return bool(api_key) and not api_key.startswith("${")


def _summary(entry: WatchlistEntry) -> str:
    year = f" ({entry.year})" if entry.year else ""
    return f"[{entry.id}] {entry.title}{year}"


def _display_entry(entry: WatchlistEntry) -> None:
    """Display the details of an entry."""
    fields = [
        ("Director", entry.director),
        ("Genre", entry.genre),
        ("Runtime", entry.runtime),
        ("IMDb Rating", entry.imdb_rating),
        ("TMDb Score", entry.vote_average),
        ("Released", entry.release_date),
        ("Plot", entry.plot or entry.overview),
    ]
    for label, value in fields:
        if value is not None:
            click.echo(f"  {label}: {value}")

    click.echo(f"  Watched: {'yes' if entry.watched else 'no'}")
    if entry.rating is not None:
        click.echo(f"  Rating: {'★' * entry.rating}")
    if entry.image_paths:
        click.echo("  Images:")
        for path in entry.image_paths:
            click.echo(f"    {path}")
    if entry.similar_titles:
        click.echo(f"  Similar: {', '.join(entry.similar_titles)}")


def _display_page(page: WatchlistPage) -> None:
    """Display one page of the watchlist."""
    if not page.items:
        click.echo("Watchlist is empty" if page.total_elements == 0 else "No entries on this page")
    for entry in page.items:
        marker = "✓" if entry.watched else " "
        rating = f"  {'★' * entry.rating}" if entry.rating else ""
        click.echo(f"{marker} {_summary(entry)}{rating}")

    click.echo("-" * 40)
    click.echo(
        f"Page {page.page_number + 1} of {max(page.total_pages, 1)} "
        f"({page.total_elements} movies)"
    )


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
