from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == "places_search"]
    total = len(searches)

    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    by_type: Counter[str] = Counter(s.get("search_type", "unknown") for s in searches)
    failed = sum(1 for s in searches if not s.get("ok", True))

    nearby = [s for s in searches if s.get("search_type") == "nearby" and s.get("ok", True)]
    truncated = sum(1 for s in nearby if s.get("truncated"))
    counts = [s.get("results_count", 0) for s in nearby]
    avg_results = round(sum(counts) / len(counts), 1) if counts else 0.0

    ballots = [e for e in events if e["type"] == "ballot"]
    weeks: Counter[str] = Counter(b.get("week_of", "unknown") for b in ballots)

    return {
        "total_searches": total,
        "searches_by_type": dict(by_type),
        "failed_searches": failed,
        "avg_response_time_ms": avg_time,
        "truncated_nearby_searches": truncated,
        "avg_nearby_results": avg_results,
        "total_ballots": len(ballots),
        "ballots_by_week": [{"week_of": w, "count": c} for w, c in weeks.most_common()],
    }
