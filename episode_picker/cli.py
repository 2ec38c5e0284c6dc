"""CLI entry point for the episode picker."""

import asyncio
import json
import logging
import sys
from datetime import date
from pathlib import Path

import click

from .constants.config import MAX_CONCURRENT_REQUESTS, TMDB_API_KEY
from .constants.paths import BACKUP_FILENAME_PATTERN, LIBRARY_DIR
from .models.episode import NewEpisode, validate_episode
from .models.queue import QueueEntry, QueueSession, ShowNotFoundError
from .models.show import NewShow, ShowModel
from .processors.progress import (
    calculate_library_progress,
    calculate_show_progress,
    get_total_unwatched_runtime,
    get_unwatched_runtime,
)
from .processors.queue import build_queue
from .processors.selection import pick_one, sorted_episodes
from .utils.formatting import format_episode_code, format_runtime, where_to_watch
from .utils.storage import LibraryStore


def _describe_entry(entry: QueueEntry) -> str:
    code = format_episode_code(entry.season, entry.episode_number)
    return f"{entry.show_title} {code} - {entry.episode_title} ({format_runtime(entry.runtime)})"


def _require_show(store: LibraryStore, show_id: str) -> ShowModel:
    show = store.get_show(show_id)
    if show is None:
        click.echo(f"Error: No show with ID {show_id}", err=True)
        sys.exit(1)
    return show


def _print_session(session: QueueSession) -> None:
    if session.is_complete:
        click.echo("Queue complete! Run 'epick queue build' for a new one.")
        return

    click.echo(f"Now watching: {_describe_entry(session.current)}")
    remaining = session.remaining
    click.echo(f"{len(remaining)} episodes remaining ({format_runtime(session.remaining_runtime)})")
    if remaining:
        click.echo("Up next:")
        for entry in remaining[:3]:
            click.echo(f"  {_describe_entry(entry)}")
        if len(remaining) > 3:
            click.echo(f"  +{len(remaining) - 3} more...")


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=LIBRARY_DIR,
    show_default=True,
    help="Directory holding the library JSON files"
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, data_dir: Path, verbose: bool):
    """Episode Picker - random episodes and Couch Potato queues from your shows."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = LibraryStore(data_dir)


@cli.command("search")
@click.argument("query")
def search(query: str):
    """Search TVmaze for shows by title.

    Examples:

        epick search "breaking bad"
    """
    import aiohttp

    from .scrapers.tvmaze import MetadataLookupError, search_shows

    async def run():
        async with aiohttp.ClientSession() as session:
            return await search_shows(session, query)

    try:
        results = asyncio.run(run())
    except (MetadataLookupError, aiohttp.ClientError) as e:
        click.echo(f"Error: Search failed: {e}", err=True)
        sys.exit(1)

    if not results:
        click.echo("No shows found")
        return

    for result in results:
        year = f" ({result.premiered})" if result.premiered else ""
        click.echo(f"[{result.tvmaze_id}] {result.name}{year} - {result.status or 'unknown'}, {format_runtime(result.runtime)}")


@cli.command("add-show")
@click.argument("tvmaze_ids", nargs=-1, type=int, required=True)
@click.option("--tmdb-key", default=TMDB_API_KEY, help="TMDB API key for streaming availability")
@click.option(
    "--concurrency",
    default=MAX_CONCURRENT_REQUESTS,
    type=click.IntRange(min=1),
    help=f"Number of shows fetched at once (default: {MAX_CONCURRENT_REQUESTS})"
)
@click.pass_obj
def add_show(store: LibraryStore, tvmaze_ids: tuple[int, ...], tmdb_key: str | None, concurrency: int):
    """Add one or more shows by TVmaze ID, with all their episodes.

    Examples:

        epick add-show 169

        epick add-show 169 82 --tmdb-key $TMDB_API_KEY
    """
    from .scrapers.tvmaze import fetch_many_show_details

    click.echo(f"Fetching {len(tvmaze_ids)} show(s) from TVmaze...")
    details = asyncio.run(fetch_many_show_details(list(tvmaze_ids), concurrency, tmdb_key))

    for show_details in details:
        show = store.add_show(show_details.to_new_show())
        services = ", ".join(show.streaming_services) or "no known services"
        click.echo(f"Added {show.title}: {len(show.episodes)} episodes over {show_details.total_seasons} seasons ({services})")

    failed = len(tvmaze_ids) - len(details)
    if failed:
        click.echo(f"Warning: {failed} show(s) could not be fetched", err=True)
        sys.exit(1)


@cli.command("add-manual")
@click.argument("title")
@click.option("--seasons", required=True, type=int, help="Number of seasons")
@click.option("--episodes-per-season", required=True, type=int, help="Episodes in each season")
@click.option("--runtime", required=True, type=int, help="Runtime of each episode in minutes")
@click.pass_obj
def add_manual(store: LibraryStore, title: str, seasons: int, episodes_per_season: int, runtime: int):
    """Add a show by hand with a uniform season layout.

    Examples:

        epick add-manual "Home Videos" --seasons 2 --episodes-per-season 8 --runtime 25
    """
    title = title.strip()
    if not title:
        click.echo("Error: Please enter a show title", err=True)
        sys.exit(1)

    result = validate_episode({"season": seasons, "episode_number": episodes_per_season, "runtime": runtime})
    if not result.is_valid:
        for error in result.errors:
            click.echo(f"Error: {error}", err=True)
        sys.exit(1)

    episodes = [
        NewEpisode(season=s, episode_number=e, title=f"Episode {e}", runtime=runtime)
        for s in range(1, seasons + 1)
        for e in range(1, episodes_per_season + 1)
    ]
    show = store.add_show(NewShow(title=title, episodes=episodes))
    click.echo(f"Added {show.title} ({show.show_id}) with {len(show.episodes)} episodes")


@cli.command("list")
@click.pass_obj
def list_shows(store: LibraryStore):
    """List tracked shows with progress."""
    shows = store.get_shows()
    if not shows:
        click.echo("No shows yet. Add one with 'epick add-show' or 'epick add-manual'.")
        return

    for show in shows:
        progress = calculate_show_progress(show)
        click.echo(
            f"[{show.show_id}] {show.title}: {progress.watched}/{progress.total} watched "
            f"({progress.percentage}%), {format_runtime(get_unwatched_runtime(show))} left"
        )

    library = calculate_library_progress(shows)
    click.echo(f"\n{library.percentage}% of all episodes watched, {format_runtime(get_total_unwatched_runtime(shows))} left in total")


@cli.command("show")
@click.argument("show_id")
@click.pass_obj
def show_detail(store: LibraryStore, show_id: str):
    """List a show's episodes in watch order."""
    show = _require_show(store, show_id)
    click.echo(show.title)
    for episode in sorted_episodes(show):
        mark = "x" if episode.watched else " "
        code = format_episode_code(episode.season, episode.episode_number)
        click.echo(f"  [{mark}] {code} {episode.title} ({format_runtime(episode.runtime)}) [{episode.episode_id}]")


@cli.command("delete-show")
@click.argument("show_id")
@click.confirmation_option(prompt="Delete this show and its watch progress?")
@click.pass_obj
def delete_show(store: LibraryStore, show_id: str):
    """Remove a show from the library."""
    if not store.delete_show(show_id):
        click.echo(f"Error: No show with ID {show_id}", err=True)
        sys.exit(1)
    click.echo("Show deleted")


@cli.command("pick")
@click.option("--mark", is_flag=True, help="Mark the picked episode watched right away")
@click.pass_obj
def pick(store: LibraryStore, mark: bool):
    """Pick a random show and its next unwatched episode."""
    shows = store.get_shows()
    result = pick_one(shows)
    if result is None:
        click.echo("No unwatched episodes available. Add some shows first!")
        return

    show, episode = result.show, result.episode
    click.echo(show.title)
    click.echo(f"  {format_episode_code(episode.season, episode.episode_number)} {episode.title} ({format_runtime(episode.runtime)})")

    service = where_to_watch(show, store.get_settings(), store.get_all_streaming_services())
    if service:
        suffix = " (not subscribed)" if service.not_subscribed else ""
        click.echo(f"  Watch on: {service.name}{suffix}")

    if mark:
        store.set_episode_watched(show.show_id, episode.episode_id, True)
        click.echo("  Marked as watched")
    else:
        click.echo(f"  epick mark-watched {show.show_id} {episode.episode_id}")


@cli.command("mark-watched")
@click.argument("show_id")
@click.argument("episode_id")
@click.option("--unwatch", is_flag=True, help="Mark the episode unwatched instead")
@click.pass_obj
def mark_watched(store: LibraryStore, show_id: str, episode_id: str, unwatch: bool):
    """Mark an episode watched (or unwatched)."""
    if not store.set_episode_watched(show_id, episode_id, not unwatch):
        click.echo(f"Error: No episode {episode_id} in show {show_id}", err=True)
        sys.exit(1)
    click.echo("Marked as unwatched" if unwatch else "Marked as watched")


@cli.group("queue")
def queue():
    """Build and watch a Couch Potato queue."""
    pass


@queue.command("build")
@click.option("--minutes", type=click.IntRange(min=1), default=None, help="Target length (default: the configured duration)")
@click.pass_obj
def queue_build(store: LibraryStore, minutes: int | None):
    """Build a new queue that fills the target duration.

    Examples:

        epick queue build

        epick queue build --minutes 120
    """
    target = minutes if minutes is not None else store.get_settings().couch_potato_duration
    shows = store.get_shows()
    new_queue = build_queue(target, shows)

    if not new_queue.episodes:
        store.clear_session()
        click.echo("No unwatched episodes available. Add some shows first!")
        return

    for number, entry in enumerate(new_queue.episodes, start=1):
        click.echo(f"{number}. {_describe_entry(entry)}")
    click.echo(f"\nTotal: {format_runtime(new_queue.total_runtime)} (Target: {format_runtime(new_queue.target_runtime)})")

    store.save_session(QueueSession(queue=new_queue))


def _load_session(store: LibraryStore) -> QueueSession:
    session = store.get_session()
    if session is None:
        click.echo("Error: No queue yet. Run 'epick queue build' first.", err=True)
        sys.exit(1)
    return session


@queue.command("status")
@click.pass_obj
def queue_status(store: LibraryStore):
    """Show the episode being watched and what's up next."""
    _print_session(_load_session(store))


@queue.command("watched")
@click.pass_obj
def queue_watched(store: LibraryStore):
    """Mark the current queue episode watched and move to the next."""
    session = _load_session(store)
    try:
        session = session.mark_current_watched(store)
    except ShowNotFoundError as e:
        click.echo(f"Error: {e.args[0]}", err=True)
        sys.exit(1)
    store.save_session(session)
    _print_session(session)


@queue.command("skip")
@click.pass_obj
def queue_skip(store: LibraryStore):
    """Skip the current queue episode without marking it."""
    session = _load_session(store).skip()
    store.save_session(session)
    _print_session(session)


@queue.command("clear")
@click.pass_obj
def queue_clear(store: LibraryStore):
    """Discard the current queue."""
    store.clear_session()
    click.echo("Queue cleared")


@cli.command("history")
@click.option("--clear", is_flag=True, help="Clear all watch history")
@click.option("--limit", default=20, type=int, help="Number of entries to show (default: 20)")
@click.pass_obj
def history(store: LibraryStore, clear: bool, limit: int):
    """Show recently watched episodes."""
    if clear:
        click.confirm("Are you sure you want to clear all watch history?", abort=True)
        store.clear_history()
        click.echo("History cleared")
        return

    entries = store.get_history()
    if not entries:
        click.echo("No watch history yet")
        return

    for entry in entries[:limit]:
        code = format_episode_code(entry.season, entry.episode_number)
        click.echo(f"{entry.watched_at[:10]}  {entry.show_title} {code} - {entry.episode_title}")


@cli.command("settings")
@click.option("--duration", type=int, help="Couch Potato target duration in minutes")
@click.option(
    "--service", "-s",
    "services",
    multiple=True,
    help="Streaming service IDs you subscribe to (replaces the current list)"
)
@click.pass_obj
def settings(store: LibraryStore, duration: int | None, services: tuple[str, ...]):
    """Show or change settings.

    Examples:

        epick settings --duration 180

        epick settings -s netflix -s hulu
    """
    updates = {}
    if duration is not None:
        if duration < 1:
            click.echo("Error: Duration must be a positive number of minutes", err=True)
            sys.exit(1)
        updates["couch_potato_duration"] = duration
    if services:
        known = {s.service_id for s in store.get_all_streaming_services()}
        unknown = [s for s in services if s not in known]
        if unknown:
            click.echo(f"Error: Unknown service(s): {', '.join(unknown)}", err=True)
            sys.exit(1)
        updates["streaming_services"] = list(services)

    current = store.update_settings(**updates) if updates else store.get_settings()

    click.echo(f"Couch Potato duration: {format_runtime(current.couch_potato_duration)}")
    names = {s.service_id: s.name for s in store.get_all_streaming_services()}
    subscribed = ", ".join(names.get(s, s) for s in current.streaming_services) or "none"
    click.echo(f"Streaming services: {subscribed}")


@cli.group("services")
def services_group():
    """Manage custom streaming services."""
    pass


@services_group.command("list")
@click.pass_obj
def services_list(store: LibraryStore):
    """List all known streaming services."""
    for service in store.get_all_streaming_services():
        custom = " (custom)" if service.is_custom else ""
        click.echo(f"{service.service_id}: {service.name}{custom}")


@services_group.command("add")
@click.argument("name")
@click.option("--color", default=None, help="Badge color as hex, e.g. #8B5CF6")
@click.pass_obj
def services_add(store: LibraryStore, name: str, color: str | None):
    """Add a custom service such as Plex or a local drive."""
    service = store.add_custom_service(name, color) if color else store.add_custom_service(name)
    click.echo(f"Added {service.name} ({service.service_id})")


@services_group.command("remove")
@click.argument("service_id")
@click.pass_obj
def services_remove(store: LibraryStore, service_id: str):
    """Remove a custom service."""
    store.delete_custom_service(service_id)
    click.echo("Service removed")


@cli.command("export")
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def export(store: LibraryStore, path: Path | None):
    """Write a JSON backup of shows, history and settings."""
    if path is None:
        path = Path(BACKUP_FILENAME_PATTERN.format(date=date.today().isoformat()))
    backup = store.export_all_data()
    with open(path, "w", encoding="utf-8") as f:
        f.write(backup.model_dump_json(indent=2))
    click.echo(f"Backup saved to {path}")


@cli.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--merge", is_flag=True, help="Merge with the existing library instead of replacing it")
@click.pass_obj
def import_backup(store: LibraryStore, path: Path, merge: bool):
    """Restore a JSON backup."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        click.echo(f"Error: Failed to read backup: {e}", err=True)
        sys.exit(1)

    result = store.import_all_data(data, merge=merge)
    if not result.success:
        click.echo(f"Error: {result.message}", err=True)
        sys.exit(1)
    click.echo(result.message)


@cli.command("serve")
@click.option(
    "--port",
    default=3000,
    type=int,
    help="Port to run the server on (default: 3000)"
)
@click.option(
    "--host",
    default="127.0.0.1",
    help="Host to bind to (default: 127.0.0.1)"
)
@click.option("--debug", is_flag=True, help="Run Flask in debug mode")
@click.pass_obj
def serve(store: LibraryStore, port: int, host: str, debug: bool):
    """Start the JSON API server.

    Examples:

        epick serve

        epick serve --port 8080
    """
    from .server import run_server
    run_server(store, host=host, port=port, debug=debug)
