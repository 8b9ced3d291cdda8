from __future__ import annotations

from fastapi import HTTPException, Request

from .moderators import MODERATOR_ROLE


def require_moderator(request: Request) -> dict:
    """Raise 401 if nobody is logged in, 403 if the user is not a moderator."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if user.get("role") != MODERATOR_ROLE:
        raise HTTPException(status_code=403, detail="Moderator access required")
    return user
