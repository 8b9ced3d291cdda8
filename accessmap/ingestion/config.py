from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SeedConfig:
    """
    Configuration for the CSV seed import.
    """

    csv_path: Path = Path("data/places.csv")
    feature_separators: str = ",;"
    fallback_type: str = "Other"


DEFAULT_SEED_CONFIG = SeedConfig()
