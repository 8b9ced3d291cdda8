"""
Moderator accounts.

Visitors use the directory anonymously; only moderators, who review
reported places and read analytics, sign in. The account comes from the
environment, either as a plain password hashed at startup or as a bcrypt
hash (``MODERATOR_PASSWORD_HASH``) so the plain text never sits in config.
Repeated wrong passwords lock the account for a while.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import bcrypt

from ..config import DEFAULT_APP_CONFIG, AppConfig

logger = logging.getLogger(__name__)

MODERATOR_ROLE = "admin"


class ModeratorLockedError(Exception):
    def __init__(self, username: str, retry_after: int) -> None:
        super().__init__(f"Moderator {username!r} is locked for {retry_after}s")
        self.username = username
        self.retry_after = retry_after


@dataclass
class _Moderator:
    password_hash: str
    failures: int = 0
    locked_until: float = 0.0
    last_login: float | None = None


_moderators: dict[str, _Moderator] = {}
_config: AppConfig = DEFAULT_APP_CONFIG


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode(), hashed.encode())
    except ValueError:
        # Malformed stored hash
        logger.error("Stored moderator password hash is not a bcrypt hash")
        return False


def seed_moderators(config: AppConfig = DEFAULT_APP_CONFIG) -> None:
    """Register the configured moderator, replacing any previous account state."""
    global _config
    _config = config
    password_hash = config.moderator_password_hash or _hash_password(config.moderator_password)
    _moderators.clear()
    _moderators[config.moderator_username] = _Moderator(password_hash=password_hash)


def authenticate(username: str, password: str) -> dict[str, str] | None:
    """
    Verify credentials. Returns ``{username, role}`` or ``None``.

    Raises ``ModeratorLockedError`` while the account is locked, whether or
    not the password is right.
    """
    account = _moderators.get(username)
    if account is None:
        return None

    now = time.monotonic()
    if account.locked_until > now:
        raise ModeratorLockedError(username, int(account.locked_until - now) + 1)

    if not _verify_password(password, account.password_hash):
        account.failures += 1
        if account.failures >= _config.max_login_failures:
            account.locked_until = now + _config.lockout_seconds
            account.failures = 0
            logger.warning("Moderator %s locked after repeated failed logins", username)
        return None

    account.failures = 0
    account.last_login = time.time()
    logger.info("Moderator %s signed in", username)
    return {"username": username, "role": MODERATOR_ROLE}


def last_login(username: str) -> float | None:
    account = _moderators.get(username)
    return account.last_login if account else None


seed_moderators()
