"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from sqlmodel import Session

from ..core import Settings, get_session
from ..media import MediaHost
from ..models import User


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_media_host(request: Request) -> MediaHost:
    return request.app.state.media_host


def get_current_user(
    request: Request, session: Session = Depends(get_session)
) -> Optional[User]:
    """Return the logged-in user, clearing sessions that point at no account."""

    uid = request.session.get("uid")
    if uid is None:
        return None
    try:
        user = session.get(User, int(uid))
    except (TypeError, ValueError):
        user = None
    if not user:
        request.session.clear()
    return user


def login_session(request: Request, user: User) -> None:
    request.session["uid"] = user.id
    request.session["name"] = user.name
    request.session["email"] = user.email


__all__ = ["get_current_user", "get_media_host", "get_settings", "login_session"]
