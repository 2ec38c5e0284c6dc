"""Flask JSON API over the episode library."""

from flask import Flask, Response, jsonify, request

from .processors.progress import (
    calculate_library_progress,
    calculate_show_progress,
    get_total_unwatched_runtime,
    get_unwatched_runtime,
    has_unwatched_episodes,
)
from .processors.queue import build_queue
from .processors.selection import pick_one, sorted_episodes
from .utils.formatting import where_to_watch
from .utils.storage import LibraryStore


def _not_found(message: str) -> tuple[Response, int]:
    return jsonify({"error": message}), 404


def create_app(store: LibraryStore) -> Flask:
    """Create the Flask app serving a library store."""
    app = Flask(__name__)

    @app.route("/api/shows")
    def list_shows() -> Response:
        """All shows with their progress and remaining runtime."""
        shows = store.get_shows()
        return jsonify([
            {
                "show_id": show.show_id,
                "title": show.title,
                "progress": calculate_show_progress(show).model_dump(),
                "unwatched_runtime": get_unwatched_runtime(show),
                "streaming_services": show.streaming_services,
            }
            for show in shows
        ])

    @app.route("/api/shows/<show_id>")
    def get_show(show_id: str) -> Response | tuple[Response, int]:
        """A show with its episodes in watch order."""
        show = store.get_show(show_id)
        if show is None:
            return _not_found(f"Show '{show_id}' not found")

        data = show.model_dump(mode="json")
        data["episodes"] = [ep.model_dump(mode="json") for ep in sorted_episodes(show)]
        data["progress"] = calculate_show_progress(show).model_dump()
        return jsonify(data)

    @app.route("/api/shows/<show_id>/episodes/<episode_id>/watched", methods=["POST"])
    def set_watched(show_id: str, episode_id: str) -> Response | tuple[Response, int]:
        """Mark an episode watched (or unwatched with {"watched": false})."""
        body = request.get_json(silent=True) or {}
        watched = body.get("watched", True)
        if not isinstance(watched, bool):
            return jsonify({"error": "'watched' must be a boolean"}), 400

        if not store.set_episode_watched(show_id, episode_id, watched):
            return _not_found(f"Episode '{episode_id}' not found in show '{show_id}'")
        return jsonify({"show_id": show_id, "episode_id": episode_id, "watched": watched})

    @app.route("/api/pick")
    def pick() -> Response:
        """Pick a random episode; null when nothing is left to watch."""
        result = pick_one(store.get_shows())
        if result is None:
            return jsonify(None)

        service = where_to_watch(result.show, store.get_settings(), store.get_all_streaming_services())
        return jsonify({
            "show_id": result.show.show_id,
            "show_title": result.show.title,
            "episode": result.episode.model_dump(mode="json"),
            "where_to_watch": service.model_dump() if service else None,
        })

    @app.route("/api/queue", methods=["POST"])
    def create_queue() -> Response | tuple[Response, int]:
        """Build a Couch Potato queue for {"minutes": N} or the configured duration."""
        body = request.get_json(silent=True) or {}
        minutes = body.get("minutes", store.get_settings().couch_potato_duration)
        if not isinstance(minutes, int) or isinstance(minutes, bool):
            return jsonify({"error": "'minutes' must be an integer"}), 400

        return jsonify(build_queue(minutes, store.get_shows()).model_dump())

    @app.route("/api/progress")
    def progress() -> Response:
        shows = store.get_shows()
        return jsonify({
            **calculate_library_progress(shows).model_dump(),
            "unwatched_runtime": get_total_unwatched_runtime(shows),
            "has_unwatched": has_unwatched_episodes(shows),
        })

    @app.route("/api/history")
    def history() -> Response:
        return jsonify([entry.model_dump() for entry in store.get_history()])

    @app.route("/api/export")
    def export() -> Response:
        return Response(
            store.export_all_data().model_dump_json(indent=2),
            mimetype="application/json"
        )

    return app


def run_server(store: LibraryStore, host: str = "127.0.0.1", port: int = 3000, debug: bool = False) -> None:
    """Run the Flask development server."""
    app = create_app(store)
    print(f"\nEpisode Picker API running at http://{host}:{port}/api/shows\n")
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    run_server(LibraryStore())
