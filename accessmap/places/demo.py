from __future__ import annotations

from datetime import datetime, timezone

from .models import Place

# Shown when the remote collection is empty or unreachable.
_DEMO_SEED: list[dict] = [
    {
        "id": "demo-1",
        "name": "Green Leaf Cafeteria",
        "type": "Public Area",
        "address": "Building A, Campus Lane",
        "notes": "Wide doorway, ramp at main entrance. Staff friendly and helpful.",
        "features": ["wheelchair", "restroom", "step_free"],
        "confirmations": 4,
        "created_at": datetime(2025, 9, 10, tzinfo=timezone.utc),
    },
    {
        "id": "demo-2",
        "name": "Main Library — North Wing",
        "type": "Office",
        "address": "Library Road, North Wing",
        "notes": "Elevator available to all floors. Some narrow aisles near periodicals.",
        "features": ["lift", "wheelchair", "parking"],
        "confirmations": 6,
        "created_at": datetime(2025, 8, 21, tzinfo=timezone.utc),
    },
    {
        "id": "demo-3",
        "name": "Chemistry Building — Restroom",
        "type": "Washroom",
        "address": "Science Block, 1st Floor",
        "notes": "Accessible stall present, but door swing is tight. Needs wider space.",
        "features": ["restroom"],
        "confirmations": 1,
        "created_at": datetime(2025, 10, 3, tzinfo=timezone.utc),
    },
    {
        "id": "demo-4",
        "name": "Lecture Hall 3",
        "type": "Classroom",
        "address": "Academic Block, Hall 3",
        "notes": "Step-free entry available via side entrance. No designated parking.",
        "features": ["step_free"],
        "confirmations": 2,
        "created_at": datetime(2025, 7, 15, tzinfo=timezone.utc),
    },
]


def demo_places() -> list[Place]:
    """Return fresh copies of the demo records, in their fixed order."""
    return [Place(**seed, is_demo=True) for seed in _DEMO_SEED]
