"""
Remote place storage.

The directory never owns durable state: records live in a hosted document
collection, and concurrent corroboration is resolved by the store's atomic
increment. ``InMemoryPlaceStore`` stands in for the hosted collection in
local runs and tests. Data is lost on restart.
"""
from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore, firestore_async
from pydantic import ValidationError

from ..config import DEFAULT_STORE_CONFIG, StoreConfig
from .errors import StoreError
from .models import CounterField, Place, PlaceSubmission

logger = logging.getLogger(__name__)

# Place attribute -> document field in the hosted collection
DOCUMENT_FIELDS: dict[str, str] = {
    "name": "placeName",
    "type": "placeType",
    "address": "address",
    "notes": "notes",
    "features": "features",
    "confirmations": "confirmations",
    "reports": "reports",
    "created_at": "createdAt",
}
CREATED_AT_FIELD = DOCUMENT_FIELDS["created_at"]


def _counter(value: Any) -> int:
    """Read a stored counter; anything missing, non-numeric or negative counts as 0."""
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


def place_from_document(doc_id: str, data: dict[str, Any]) -> Place:
    """Build a ``Place`` from a stored document, tolerating missing fields."""
    features = data.get("features")
    return Place(
        id=doc_id,
        name=data.get("placeName") or "",
        type=data.get("placeType") or "",
        address=data.get("address") or "",
        notes=data.get("notes") or "",
        features=features if isinstance(features, (list, tuple)) else [],
        confirmations=_counter(data.get("confirmations")),
        reports=_counter(data.get("reports")),
        created_at=data.get("createdAt"),
    )


def places_from_documents(documents: Iterable[tuple[str, dict[str, Any]]]) -> list[Place]:
    """Convert stored documents, leaving out any that cannot be read as a place."""
    places: list[Place] = []
    for doc_id, data in documents:
        try:
            places.append(place_from_document(doc_id, data))
        except ValidationError:
            logger.warning("Skipping unreadable place document %s", doc_id, exc_info=True)
    return places


def document_from_submission(submission: PlaceSubmission) -> dict[str, Any]:
    return {
        "placeName": submission.name,
        "placeType": submission.type,
        "address": submission.address,
        "notes": submission.notes or "",
        "features": submission.feature_tags(),
        "confirmations": 0,
        "reports": 0,
    }


class PlaceStore(ABC):
    @abstractmethod
    async def fetch_all(
        self, order_by: str = CREATED_AT_FIELD, descending: bool = True,
    ) -> list[Place]:
        """Return every stored place ordered by ``order_by``."""

    @abstractmethod
    async def insert(self, submission: PlaceSubmission) -> str:
        """Store a new place with a server-assigned timestamp; return its id."""

    @abstractmethod
    async def increment(self, place_id: str, field: CounterField, delta: int = 1) -> None:
        """Atomically add ``delta`` to a counter field of a stored place."""


class InMemoryPlaceStore(PlaceStore):
    def __init__(self, documents: dict[str, dict[str, Any]] | None = None) -> None:
        self._documents: dict[str, dict[str, Any]] = dict(documents or {})

    async def fetch_all(
        self, order_by: str = CREATED_AT_FIELD, descending: bool = True,
    ) -> list[Place]:
        # Documents without the ordering field are left out, as a hosted query would
        try:
            ordered = sorted(
                ((doc_id, doc) for doc_id, doc in self._documents.items() if doc.get(order_by) is not None),
                key=lambda item: item[1][order_by],
                reverse=descending,
            )
        except TypeError as exc:
            raise StoreError(f"Cannot order places by {order_by}") from exc
        return places_from_documents(ordered)

    async def insert(self, submission: PlaceSubmission) -> str:
        doc_id = uuid.uuid4().hex[:20]
        document = document_from_submission(submission)
        document[CREATED_AT_FIELD] = datetime.now(timezone.utc)
        self._documents[doc_id] = document
        return doc_id

    async def increment(self, place_id: str, field: CounterField, delta: int = 1) -> None:
        document = self._documents.get(place_id)
        if document is None:
            raise StoreError(f"No document to update: {place_id}")
        document[field.value] = int(document.get(field.value) or 0) + delta


class FirestorePlaceStore(PlaceStore):
    """Place store backed by a Cloud Firestore collection."""

    def __init__(self, config: StoreConfig = DEFAULT_STORE_CONFIG) -> None:
        self._config = config
        self._client = None

    def _get_client(self):
        if self._client is None:
            try:
                firebase_admin.get_app()
            except ValueError:
                cred = (
                    credentials.Certificate(self._config.credentials_path)
                    if self._config.credentials_path
                    else credentials.ApplicationDefault()
                )
                options = {"projectId": self._config.project_id} if self._config.project_id else None
                firebase_admin.initialize_app(cred, options)
            self._client = firestore_async.client()
        return self._client

    def _collection(self):
        return self._get_client().collection(self._config.collection)

    async def fetch_all(
        self, order_by: str = CREATED_AT_FIELD, descending: bool = True,
    ) -> list[Place]:
        direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
        try:
            snapshots = await self._collection().order_by(order_by, direction=direction).get()
        except Exception as exc:
            raise StoreError("Failed to fetch places") from exc
        return places_from_documents((s.id, s.to_dict() or {}) for s in snapshots)

    async def insert(self, submission: PlaceSubmission) -> str:
        document = document_from_submission(submission)
        document[CREATED_AT_FIELD] = firestore.SERVER_TIMESTAMP
        try:
            _, ref = await self._collection().add(document)
        except Exception as exc:
            raise StoreError("Failed to add place") from exc
        logger.info("Stored place %s in %s", ref.id, self._config.collection)
        return ref.id

    async def increment(self, place_id: str, field: CounterField, delta: int = 1) -> None:
        try:
            await self._collection().document(place_id).update(
                {field.value: firestore.Increment(delta)}
            )
        except Exception as exc:
            raise StoreError(f"Failed to increment {field.value} on {place_id}") from exc


def build_store(config: StoreConfig = DEFAULT_STORE_CONFIG) -> PlaceStore:
    if config.backend == "memory":
        return InMemoryPlaceStore()
    if config.backend == "firestore":
        return FirestorePlaceStore(config)
    raise ValueError(f"Unknown places backend: {config.backend!r}")
