from __future__ import annotations

from collections import Counter
from typing import Any

from .store import EVENT_TYPES


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    by_type: Counter[str] = Counter(e["type"] for e in events)

    # Demo fallback rate
    loads = [e for e in events if e["type"] == "load"]
    demo_loads = sum(1 for e in loads if e.get("source") == "demo")

    # Filter usage, counted per feature each time it is part of the active set
    filter_counter: Counter[str] = Counter()
    for e in events:
        if e["type"] == "filter":
            for f in e.get("active", []) or []:
                filter_counter[f] += 1
    top_filters = [{"name": n, "count": c} for n, c in filter_counter.most_common(5)]

    # Corroboration
    confirm_counter: Counter[str] = Counter()
    report_counter: Counter[str] = Counter()
    demo_actions = 0
    for e in events:
        if e["type"] == "confirm":
            confirm_counter[e["record_id"]] += 1
        elif e["type"] == "report":
            report_counter[e["record_id"]] += 1
        else:
            continue
        if e.get("demo"):
            demo_actions += 1

    return {
        "events": {t: by_type.get(t, 0) for t in EVENT_TYPES},
        "loads": {
            "total": len(loads),
            "demo": demo_loads,
            "demo_rate": round(demo_loads / len(loads) * 100, 1) if loads else 0.0,
        },
        "top_filters": top_filters,
        "most_confirmed": [{"record_id": r, "count": c} for r, c in confirm_counter.most_common(10)],
        "most_reported": [{"record_id": r, "count": c} for r, c in report_counter.most_common(10)],
        "demo_actions": demo_actions,
    }
