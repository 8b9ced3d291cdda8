from __future__ import annotations

import asyncio
import logging
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import pandas as pd

from ..places.models import FEATURE_ICONS, PLACE_TYPES, PlaceSubmission
from ..places.store import PlaceStore, build_store
from .config import DEFAULT_SEED_CONFIG, SeedConfig

logger = logging.getLogger(__name__)

COLUMN_CANDIDATES: dict[str, List[str]] = {
    "name": ["name", "place_name", "placeName"],
    "type": ["type", "place_type", "placeType"],
    "address": ["address", "location"],
    "notes": ["notes", "description"],
    "features": ["features", "accessibility"],
}


@dataclass
class SeedReport:
    inserted: List[str] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)


def _normalize_features(raw: str, separators: str) -> List[str]:
    tags: List[str] = []
    for part in re.split(f"[{re.escape(separators)}]", raw):
        tag = part.strip().lower().replace(" ", "_").replace("-", "_")
        if not tag:
            continue
        if tag not in FEATURE_ICONS:
            logger.warning("Dropping unknown feature tag %r", tag)
            continue
        if tag not in tags:
            tags.append(tag)
    return tags


def _normalize_type(raw: str, fallback: str) -> str:
    if not raw:
        return ""
    for place_type in PLACE_TYPES:
        if raw.lower() == place_type.lower():
            return place_type
    return fallback


def load_submissions(
    config: SeedConfig = DEFAULT_SEED_CONFIG,
) -> tuple[List[tuple[int, PlaceSubmission]], List[int]]:
    """
    Read the seed CSV and map each row onto a ``PlaceSubmission``.

    Returns ``(valid, skipped)`` where ``valid`` pairs 1-based row numbers with
    submissions and ``skipped`` lists rows missing a required field.
    """
    df = pd.read_csv(config.csv_path, dtype=str).fillna("")

    # Column names vary between exports; take the first one present.
    def _first_present(columns: List[str]) -> str | None:
        for col in columns:
            if col in df.columns:
                return col
        return None

    columns = {key: _first_present(names) for key, names in COLUMN_CANDIDATES.items()}

    valid: List[tuple[int, PlaceSubmission]] = []
    skipped: List[int] = []
    for index, row in df.iterrows():
        row_number = int(index) + 1

        def _cell(key: str) -> str:
            col = columns[key]
            return str(row[col]).strip() if col else ""

        submission = PlaceSubmission(
            name=_cell("name"),
            type=_normalize_type(_cell("type"), config.fallback_type),
            address=_cell("address"),
            notes=_cell("notes"),
            features=_normalize_features(_cell("features"), config.feature_separators),
        )
        if submission.missing_fields():
            skipped.append(row_number)
            continue
        valid.append((row_number, submission))

    return valid, skipped


async def run_seed(store: PlaceStore, config: SeedConfig = DEFAULT_SEED_CONFIG) -> SeedReport:
    """
    Import the seed CSV into ``store``.

    Steps:
    - Read and normalize the CSV rows.
    - Skip rows without a name, type or address.
    - Insert the remaining rows, each with zero confirmations.
    """
    valid, skipped = load_submissions(config)
    report = SeedReport(skipped=skipped)
    for _, submission in valid:
        report.inserted.append(await store.insert(submission))
    logger.info("Seeded %d places, skipped %d rows", len(report.inserted), len(skipped))
    return report


if __name__ == "__main__":
    cfg = SeedConfig(csv_path=Path(sys.argv[1])) if len(sys.argv) > 1 else DEFAULT_SEED_CONFIG
    result = asyncio.run(run_seed(build_store(), cfg))
    print(f"Seed complete. Inserted {len(result.inserted)} places, skipped rows: {result.skipped}")
