"""Single entry point for the per-card actions: view, confirm and report."""
from __future__ import annotations

from .errors import RecordNotFoundError
from .models import ActionResponse, ActionType, Notification, NotificationLevel
from .render import REPORT_PROMPT, map_search_url, render_list
from .session import DirectorySession


async def dispatch(
    session: DirectorySession,
    action: ActionType,
    record_id: str,
    confirmed: bool = False,
) -> ActionResponse:
    if action is ActionType.view:
        place = session.find(record_id)
        if place is None:
            raise RecordNotFoundError(record_id)
        return ActionResponse(action=action, record_id=record_id, url=map_search_url(place.address))

    if action is ActionType.report and not confirmed:
        # Nothing is sent until the visitor accepts the prompt
        return ActionResponse(
            action=action,
            record_id=record_id,
            notification=Notification(level=NotificationLevel.prompt, message=REPORT_PROMPT),
        )

    if action is ActionType.confirm:
        notification = await session.confirm(record_id)
    else:
        notification = await session.report(record_id)

    return ActionResponse(
        action=action,
        record_id=record_id,
        notification=notification,
        places=render_list(session.places, session.visible(), session.active_features),
    )
