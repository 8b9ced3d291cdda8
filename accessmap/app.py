from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .auth.dependencies import require_moderator
from .auth.moderators import ModeratorLockedError, authenticate
from .config import DEFAULT_APP_CONFIG
from .places.actions import dispatch
from .places.errors import (
    ActionFailedError,
    PlaceValidationError,
    RecordNotFoundError,
    StoreError,
)
from .places.models import (
    FEATURE_ICONS,
    PLACE_TYPES,
    ActionRequest,
    ActionResponse,
    FilterToggleRequest,
    LoginRequest,
    PlaceListView,
    PlaceSubmission,
    SubmissionResponse,
)
from .places.render import feature_label, render_list
from .places.session import DirectorySession, SessionRegistry
from .places.store import PlaceStore, build_store

logging.getLogger("accessmap").setLevel(DEFAULT_APP_CONFIG.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="AccessMap Directory API", version="1.0.0")
app.add_middleware(SessionMiddleware, secret_key=DEFAULT_APP_CONFIG.session_secret)

_registry = SessionRegistry(DEFAULT_APP_CONFIG.max_sessions)
_store: PlaceStore | None = None


async def get_store() -> PlaceStore:
    # Runs on the event loop, so the lazy build happens once
    global _store
    if _store is None:
        _store = build_store()
    return _store


async def get_directory(request: Request, store: PlaceStore = Depends(get_store)) -> DirectorySession:
    """Return the visitor's directory session, creating one on first visit."""
    session_id, directory = _registry.get_or_create(request.session.get("directory_id"), store)
    request.session["directory_id"] = session_id
    return directory


def reset_sessions() -> None:
    _registry.clear()


def _list_view(directory: DirectorySession) -> PlaceListView:
    return render_list(directory.places, directory.visible(), directory.active_features)


# ── Error handlers ───────────────────────────────────────────────────────


@app.exception_handler(PlaceValidationError)
async def _invalid_submission(request: Request, exc: PlaceValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": exc.message, "missing": exc.missing})


@app.exception_handler(ActionFailedError)
async def _action_failed(request: Request, exc: ActionFailedError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"level": "alert", "message": exc.message})


@app.exception_handler(RecordNotFoundError)
async def _record_not_found(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ModeratorLockedError)
async def _moderator_locked(request: Request, exc: ModeratorLockedError) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many failed logins. Try again later."},
        headers={"Retry-After": str(exc.retry_after)},
    )


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
async def metadata() -> dict:
    return {
        "features": [
            {"tag": tag, "icon": icon, "label": feature_label(tag)}
            for tag, icon in FEATURE_ICONS.items()
        ],
        "place_types": PLACE_TYPES,
    }


# ── Directory endpoints ──────────────────────────────────────────────────


@app.get("/places", response_model=PlaceListView)
async def list_places(
    refresh: bool = False,
    directory: DirectorySession = Depends(get_directory),
) -> PlaceListView:
    # A refresh is the equivalent of reloading the page: demo edits are dropped
    if refresh:
        await directory.load()
    else:
        await directory.ensure_loaded()
    return _list_view(directory)


@app.post("/places", response_model=SubmissionResponse, status_code=201)
async def submit_place(
    body: PlaceSubmission,
    directory: DirectorySession = Depends(get_directory),
) -> SubmissionResponse:
    place_id, notification = await directory.submit(body)
    return SubmissionResponse(id=place_id, notification=notification, places=_list_view(directory))


@app.post("/filters/toggle", response_model=PlaceListView)
async def toggle_filter(
    body: FilterToggleRequest,
    directory: DirectorySession = Depends(get_directory),
) -> PlaceListView:
    await directory.ensure_loaded()
    directory.toggle(body.feature.value)
    return _list_view(directory)


@app.delete("/filters", response_model=PlaceListView)
async def clear_filters(directory: DirectorySession = Depends(get_directory)) -> PlaceListView:
    await directory.ensure_loaded()
    directory.clear_filters()
    return _list_view(directory)


@app.post("/actions", response_model=ActionResponse)
async def card_action(
    body: ActionRequest,
    directory: DirectorySession = Depends(get_directory),
) -> ActionResponse:
    await directory.ensure_loaded()
    return await dispatch(directory, body.action, body.record_id, confirmed=body.confirmed)


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
async def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
async def logout(request: Request) -> dict:
    request.session.pop("user", None)
    return {"status": "logged_out"}


@app.get("/auth/me")
async def auth_me(user: dict = Depends(require_moderator)) -> dict:
    return user


# ── Moderator endpoints ──────────────────────────────────────────────────


@app.get("/moderation/reports")
async def reported_places(
    user: dict = Depends(require_moderator),
    store: PlaceStore = Depends(get_store),
) -> dict:
    try:
        places = await store.fetch_all()
    except StoreError:
        logger.warning("Loading places for moderation failed", exc_info=True)
        raise HTTPException(status_code=502, detail="Failed to load places. Try again later.")

    reported = sorted((p for p in places if p.reports > 0), key=lambda p: p.reports, reverse=True)
    return {
        "total": len(reported),
        "places": [
            {
                "id": p.id,
                "name": p.name,
                "address": p.address,
                "reports": p.reports,
                "confirmations": p.confirmations,
            }
            for p in reported
        ],
    }


@app.get("/analytics")
async def analytics(user: dict = Depends(require_moderator)) -> dict:
    return compute_analytics(get_events())
