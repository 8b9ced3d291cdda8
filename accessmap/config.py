"""
Runtime configuration.

Responsibilities:
- Load ``.env`` from the project root.
- Describe which place store backs the directory and how to reach it.
- Hold application-level settings (session secret, banner timing, moderators).
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


@dataclass(frozen=True)
class StoreConfig:
    backend: str = os.getenv("PLACES_BACKEND", "firestore")
    collection: str = os.getenv("PLACES_COLLECTION", "accessible_places")
    credentials_path: str | None = os.getenv("FIREBASE_CREDENTIALS")
    project_id: str | None = os.getenv("FIREBASE_PROJECT_ID")


@dataclass(frozen=True)
class AppConfig:
    session_secret: str = os.getenv("SESSION_SECRET", "accessmap-secret-change-in-production")
    banner_dismiss_ms: int = 3000
    max_sessions: int = 1024
    max_events: int = 10_000
    moderator_username: str = os.getenv("MODERATOR_USERNAME", "admin")
    moderator_password: str = os.getenv("MODERATOR_PASSWORD", "admin123")
    moderator_password_hash: str | None = os.getenv("MODERATOR_PASSWORD_HASH")
    max_login_failures: int = 5
    lockout_seconds: int = 300
    log_level: str = os.getenv("ACCESSMAP_LOG_LEVEL", "INFO")


DEFAULT_STORE_CONFIG = StoreConfig()
DEFAULT_APP_CONFIG = AppConfig()
