"""
Per-visitor directory state.

A ``DirectorySession`` owns the record cache and the active feature filters
for one visitor. Remote writes are awaited before the refresh that follows
them; two rapid actions are not serialized against each other and rely on
the store's atomic increment.
"""
from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass

from ..analytics.store import (
    record_corroboration,
    record_filter,
    record_load,
    record_submission,
)
from ..config import DEFAULT_APP_CONFIG, AppConfig
from .demo import demo_places
from .errors import ActionFailedError, PlaceValidationError, StoreError
from .filters import filter_places, toggle_feature
from .models import (
    CounterField,
    Notification,
    NotificationLevel,
    PersistenceStrategy,
    Place,
    PlaceSubmission,
)
from .persistence import CounterWriter, build_writers
from .store import CREATED_AT_FIELD, PlaceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Messages:
    remote: str
    local: str
    failure: str


_COUNTER_MESSAGES: dict[CounterField, _Messages] = {
    CounterField.confirmations: _Messages(
        remote="Thanks — your confirmation is recorded",
        local="Thanks — your confirmation is recorded (demo)",
        failure="Failed to confirm. Please try again.",
    ),
    CounterField.reports: _Messages(
        remote="Thanks — the issue was reported for review",
        local="Thanks — the issue was reported (demo)",
        failure="Failed to report. Try again later.",
    ),
}
_COUNTER_EVENTS = {CounterField.confirmations: "confirm", CounterField.reports: "report"}

SUBMIT_SUCCESS = "Thanks — your accessibility info helps others"
SUBMIT_FAILURE = "Failed to add place. Please try again."


class DirectorySession:
    def __init__(self, store: PlaceStore, config: AppConfig = DEFAULT_APP_CONFIG) -> None:
        self._store = store
        self._config = config
        self._writers: dict[PersistenceStrategy, CounterWriter] = build_writers(store)
        self.places: list[Place] = []
        self.active_features: set[str] = set()
        self.loaded = False

    # ── Cache ────────────────────────────────────────────────────────────

    async def load(self) -> list[Place]:
        """Replace the cache with the remote records, or the demo set if there are none."""
        try:
            places = await self._store.fetch_all(order_by=CREATED_AT_FIELD, descending=True)
        except StoreError:
            logger.warning("Loading places failed, falling back to demo data", exc_info=True)
            places = []
            reason = "error"
        else:
            reason = "empty"

        if places:
            self.places = places
            source = "remote"
        else:
            logger.info("Using demo places (%s)", reason)
            self.places = demo_places()
            source = "demo"

        self.loaded = True
        record_load(source, len(self.places))
        return self.places

    async def ensure_loaded(self) -> list[Place]:
        if not self.loaded:
            await self.load()
        return self.places

    def find(self, record_id: str) -> Place | None:
        for place in self.places:
            if place.id == record_id:
                return place
        return None

    # ── Filters ──────────────────────────────────────────────────────────

    def visible(self) -> list[Place]:
        return filter_places(self.places, self.active_features)

    def toggle(self, feature: str) -> set[str]:
        self.active_features = toggle_feature(self.active_features, feature)
        record_filter(self.active_features)
        return self.active_features

    def clear_filters(self) -> None:
        self.active_features = set()

    # ── Actions ──────────────────────────────────────────────────────────

    async def confirm(self, record_id: str) -> Notification:
        return await self._corroborate(record_id, CounterField.confirmations)

    async def report(self, record_id: str) -> Notification:
        return await self._corroborate(record_id, CounterField.reports)

    async def _corroborate(self, record_id: str, field: CounterField) -> Notification:
        place = self.find(record_id)
        # Records missing from the cache can only be remote ones
        strategy = place.strategy if place is not None else PersistenceStrategy.remote
        writer = self._writers[strategy]
        messages = _COUNTER_MESSAGES[field]

        try:
            await writer.increment(record_id, place, field)
        except StoreError as exc:
            logger.warning("Incrementing %s on %s failed", field.value, record_id, exc_info=True)
            raise ActionFailedError(messages.failure) from exc

        record_corroboration(
            _COUNTER_EVENTS[field], record_id, demo=strategy is PersistenceStrategy.local,
        )
        if writer.refresh_after_write:
            await self.load()

        local = strategy is PersistenceStrategy.local
        return self._success(messages.local if local else messages.remote)

    async def submit(self, submission: PlaceSubmission) -> tuple[str, Notification]:
        missing = submission.missing_fields()
        if missing:
            raise PlaceValidationError(missing)

        try:
            place_id = await self._store.insert(submission)
        except StoreError as exc:
            logger.warning("Adding place %r failed", submission.name, exc_info=True)
            raise ActionFailedError(SUBMIT_FAILURE) from exc

        record_submission(place_id, submission.feature_tags())
        await self.load()
        return place_id, self._success(SUBMIT_SUCCESS)

    def _success(self, message: str) -> Notification:
        return Notification(
            level=NotificationLevel.success,
            message=message,
            dismiss_after_ms=self._config.banner_dismiss_ms,
        )


class SessionRegistry:
    """Directory sessions keyed by the id kept in the visitor's cookie."""

    def __init__(self, max_sessions: int = DEFAULT_APP_CONFIG.max_sessions) -> None:
        self._sessions: OrderedDict[str, DirectorySession] = OrderedDict()
        self._max_sessions = max_sessions

    def get_or_create(
        self, session_id: str | None, store: PlaceStore,
    ) -> tuple[str, DirectorySession]:
        if session_id and session_id in self._sessions:
            self._sessions.move_to_end(session_id)
            return session_id, self._sessions[session_id]

        session_id = uuid.uuid4().hex
        session = DirectorySession(store)
        self._sessions[session_id] = session
        while len(self._sessions) > self._max_sessions:
            self._sessions.popitem(last=False)
        return session_id, session

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
