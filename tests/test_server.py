"""Tests for the Flask JSON API."""

import pytest

from episode_picker.models.episode import NewEpisode
from episode_picker.models.show import NewShow
from episode_picker.server import create_app


@pytest.fixture
def show(store):
    return store.add_show(NewShow(title="Lost", streaming_services=["hulu"], episodes=[
        NewEpisode(season=1, episode_number=2, runtime=45),
        NewEpisode(season=1, episode_number=1, runtime=45),
    ]))


@pytest.fixture
def client(store):
    app = create_app(store)
    app.config["TESTING"] = True
    return app.test_client()


def test_list_shows(client, show):
    data = client.get("/api/shows").get_json()
    assert data[0]["title"] == "Lost"
    assert data[0]["progress"] == {"watched": 0, "total": 2, "percentage": 0}
    assert data[0]["unwatched_runtime"] == 90


def test_get_show_lists_episodes_in_watch_order(client, show):
    data = client.get(f"/api/shows/{show.show_id}").get_json()
    assert [ep["episode_number"] for ep in data["episodes"]] == [1, 2]


def test_get_missing_show(client):
    response = client.get("/api/shows/missing")
    assert response.status_code == 404
    assert "error" in response.get_json()


def test_mark_watched(client, store, show):
    episode = show.episodes[0]
    response = client.post(f"/api/shows/{show.show_id}/episodes/{episode.episode_id}/watched", json={"watched": True})
    assert response.status_code == 200
    assert store.get_show(show.show_id).get_episode(episode.episode_id).watched
    assert len(client.get("/api/history").get_json()) == 1


def test_mark_watched_validation(client, show):
    episode = show.episodes[0]
    url = f"/api/shows/{show.show_id}/episodes/{episode.episode_id}/watched"
    assert client.post(url, json={"watched": "yes"}).status_code == 400
    assert client.post(f"/api/shows/{show.show_id}/episodes/missing/watched", json={}).status_code == 404


def test_pick(client, show):
    data = client.get("/api/pick").get_json()
    assert data["show_id"] == show.show_id
    assert data["episode"]["episode_number"] == 1
    assert data["where_to_watch"]["service_id"] == "hulu"
    assert data["where_to_watch"]["not_subscribed"] is True


def test_pick_with_empty_library(client):
    response = client.get("/api/pick")
    assert response.status_code == 200
    assert response.get_json() is None


def test_build_queue(client, store, show):
    data = client.post("/api/queue", json={"minutes": 60}).get_json()
    assert data["total_runtime"] == 90
    assert data["target_runtime"] == 60
    assert [entry["episode_number"] for entry in data["episodes"]] == [1, 2]
    # Building a queue never marks anything watched
    assert not any(ep.watched for ep in store.get_show(show.show_id).episodes)


def test_build_queue_uses_configured_duration(client, store, show):
    store.update_settings(couch_potato_duration=30)
    data = client.post("/api/queue").get_json()
    assert data["target_runtime"] == 30
    assert len(data["episodes"]) == 1


def test_build_queue_rejects_bad_minutes(client):
    assert client.post("/api/queue", json={"minutes": "lots"}).status_code == 400


def test_progress(client, show):
    data = client.get("/api/progress").get_json()
    assert data == {"watched": 0, "total": 2, "percentage": 0, "unwatched_runtime": 90, "has_unwatched": True}


def test_export(client, show):
    response = client.get("/api/export")
    assert response.mimetype == "application/json"
    assert response.get_json()["shows"][0]["title"] == "Lost"
