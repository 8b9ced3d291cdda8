from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

PLACE_TYPES = ["Public Area", "Office", "Washroom", "Classroom", "Other"]

FEATURE_ICONS: dict[str, str] = {
    "wheelchair": "♿",
    "restroom": "🚻",
    "lift": "🛗",
    "step_free": "🚪",
    "parking": "🅿️",
}


class Feature(str, Enum):
    wheelchair = "wheelchair"
    restroom = "restroom"
    lift = "lift"
    step_free = "step_free"
    parking = "parking"


class PersistenceStrategy(str, Enum):
    local = "local"
    remote = "remote"


class CounterField(str, Enum):
    confirmations = "confirmations"
    reports = "reports"


class ActionType(str, Enum):
    view = "view"
    confirm = "confirm"
    report = "report"


class NotificationLevel(str, Enum):
    success = "success"
    alert = "alert"
    prompt = "prompt"


def _unique_tags(tags: list) -> list[str]:
    seen: list[str] = []
    for tag in tags:
        value = tag.value if isinstance(tag, Enum) else str(tag)
        if value not in seen:
            seen.append(value)
    return seen


class Place(BaseModel):
    id: str = Field(..., min_length=1, frozen=True)
    name: str
    type: str = ""
    address: str = ""
    notes: str = ""
    features: list[str] = Field(default_factory=list)
    confirmations: int = Field(default=0, ge=0)
    reports: int = Field(default=0, ge=0)
    created_at: datetime | None = None
    is_demo: bool = False

    @field_validator("features", mode="before")
    @classmethod
    def _features_as_set(cls, value):
        if value is None:
            return []
        return _unique_tags(list(value))

    @property
    def strategy(self) -> PersistenceStrategy:
        """Demo records live only in local memory; everything else is remote."""
        return PersistenceStrategy.local if self.is_demo else PersistenceStrategy.remote


class PlaceSubmission(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = ""
    type: str = ""
    address: str = ""
    notes: str = ""
    features: list[Feature] = Field(default_factory=list)

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        if value and value not in PLACE_TYPES:
            raise ValueError(f"type must be one of {PLACE_TYPES}")
        return value

    def missing_fields(self) -> list[str]:
        return [f for f in ("name", "type", "address") if not getattr(self, f)]

    def feature_tags(self) -> list[str]:
        return _unique_tags(self.features)


class Notification(BaseModel):
    level: NotificationLevel
    message: str
    dismiss_after_ms: int | None = None


# ── View models ──────────────────────────────────────────────────────────


class FeatureBadge(BaseModel):
    tag: str
    icon: str
    label: str


class CardAction(BaseModel):
    action: ActionType
    label: str
    url: str | None = None
    prompt: str | None = None


class PlaceCard(BaseModel):
    id: str
    name: str
    type: str
    address: str
    notes: str
    badges: list[FeatureBadge]
    confidence_label: str
    confidence_class: str
    score: float
    score_display: str
    confirmations: int
    added: str
    is_demo: bool
    actions: list[CardAction]


class PlaceListView(BaseModel):
    cards: list[PlaceCard]
    total: int
    active_features: list[str]
    empty_message: str | None = None


# ── Requests / responses ─────────────────────────────────────────────────


class FilterToggleRequest(BaseModel):
    feature: Feature


class ActionRequest(BaseModel):
    action: ActionType
    record_id: str = Field(..., min_length=1)
    confirmed: bool = False


class ActionResponse(BaseModel):
    action: ActionType
    record_id: str
    notification: Notification | None = None
    url: str | None = None
    places: PlaceListView | None = None


class SubmissionResponse(BaseModel):
    id: str
    notification: Notification
    places: PlaceListView


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
