from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient

from team_lunch.analytics.aggregator import compute_analytics
from team_lunch.analytics.store import clear_events, get_events, record_event
from team_lunch.app import app
from team_lunch.places.cache import LookupCache, lookup_cache
from team_lunch.records.store import get_store

client = TestClient(app)


def _login_user(c):
    c.post("/auth/login", json={"email": "user@example.com", "password": "user123"})


def _login_admin(c):
    c.post("/auth/login", json={"email": "admin@example.com", "password": "admin123"})


def test_analytics_returns_empty_initially():
    clear_events()
    _login_admin(client)
    resp = client.get("/analytics")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_searches"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["total_ballots"] == 0


def test_analytics_tracks_ballots():
    clear_events()
    get_store().clear()
    _login_user(client)
    a = client.post("/weeks/2025-03-10/suggestions", json={"restaurant": "A"}).json()["id"]
    client.put("/weeks/2025-03-10/votes", json={"votes": [{"suggestion_id": a, "rank": 1}]})
    client.put("/weeks/2025-03-10/votes", json={"votes": [{"suggestion_id": a, "rank": 1}]})

    assert len(get_events("ballot")) == 2
    _login_admin(client)
    body = client.get("/analytics").json()
    assert body["total_ballots"] == 2
    assert body["ballots_by_week"] == [{"week_of": "2025-03-10", "count": 2}]


def test_rejected_ballot_is_not_recorded():
    clear_events()
    get_store().clear()
    _login_user(client)
    resp = client.put("/weeks/2025-03-10/votes", json={"votes": [{"suggestion_id": "x", "rank": 1}]})
    assert resp.status_code == 400
    assert get_events("ballot") == []


def test_compute_analytics_nearby_figures():
    events = [
        {"type": "places_search", "search_type": "nearby", "ok": True,
         "response_time_ms": 10.0, "results_count": 40, "truncated": True},
        {"type": "places_search", "search_type": "nearby", "ok": True,
         "response_time_ms": 30.0, "results_count": 20, "truncated": False},
        {"type": "places_search", "search_type": "details", "ok": False, "response_time_ms": 5.0},
    ]
    body = compute_analytics(events)
    assert body["total_searches"] == 3
    assert body["failed_searches"] == 1
    assert body["truncated_nearby_searches"] == 1
    assert body["avg_nearby_results"] == 30.0
    assert body["avg_response_time_ms"] == 15.0
    assert body["searches_by_type"] == {"nearby": 2, "details": 1}


def test_record_event_stamps_type_and_time():
    clear_events()
    record_event("ballot", {"week_of": "2025-03-10"})
    (event,) = get_events()
    assert event["type"] == "ballot"
    assert event["timestamp"] > 0


# ── Lookup cache ─────────────────────────────────────────────────────────


def test_cache_miss_then_hit():
    cache = LookupCache()
    assert cache.get("details", "abc") is None
    cache.set("details", "abc", {"name": "Taqueria"})
    assert cache.get("details", "abc") == {"name": "Taqueria"}
    assert cache.stats() == {"size": 1, "hits": 1, "misses": 1, "hit_rate": 50.0}


def test_cache_keys_are_case_sensitive():
    cache = LookupCache()
    cache.set("details", "ChIJabc", 1)
    assert cache.get("details", "chijabc") is None
    assert cache.get("textsearch", "ChIJabc") is None


def test_cache_entries_expire():
    cache = LookupCache(ttl_seconds=60)
    with patch("team_lunch.places.cache.time.monotonic", return_value=1000.0):
        cache.set("details", "abc", 1)
    with patch("team_lunch.places.cache.time.monotonic", return_value=1061.0):
        assert cache.get("details", "abc") is None
    assert cache.stats()["size"] == 0


def test_cache_stats_endpoint():
    lookup_cache.clear()
    _login_admin(client)
    resp = client.get("/cache/stats")
    assert resp.status_code == 200
    assert resp.json() == {"size": 0, "hits": 0, "misses": 0, "hit_rate": 0.0}
