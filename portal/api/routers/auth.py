"""Login, registration and OAuth authentication routes."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from authlib.integrations.starlette_client import OAuth, OAuthError
from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from ...core import Settings, get_session
from ...models import User
from ...services.accounts import (
    create_local_user,
    find_user_by_email,
    upsert_oauth_user,
    user_to_dict,
    verify_password,
)
from ..deps import get_current_user, get_settings, login_session

router = APIRouter(tags=["auth"])

logger = logging.getLogger(__name__)

OAUTH_PROVIDER = "portal"


def build_oauth(settings: Settings) -> OAuth:
    """OAuth registry with the portal's OpenID provider, when configured."""

    oauth = OAuth()
    if settings.oauth_configured:
        oauth.register(
            name=OAUTH_PROVIDER,
            client_id=settings.oauth_client_id,
            client_secret=settings.oauth_client_secret,
            server_metadata_url=settings.oauth_server_metadata_url,
            client_kwargs={"scope": "openid email profile"},
        )
    return oauth


def _oauth_client(request: Request):
    settings: Settings = request.app.state.settings
    if not settings.oauth_configured:
        raise HTTPException(
            status_code=500,
            detail="OAuth not configured. Check OAUTH_CLIENT_ID, OAUTH_CLIENT_SECRET and OAUTH_SERVER_METADATA_URL.",
        )
    return request.app.state.oauth.create_client(OAUTH_PROVIDER)


@router.get("/api/me")
def me(user: Optional[User] = Depends(get_current_user)):
    if not user:
        return JSONResponse({"ok": False, "user": None}, status_code=401)
    return {"ok": True, "user": user_to_dict(user)}


@router.post("/api/register")
def register(
    request: Request,
    body: Optional[Dict[str, Any]] = Body(None),
    session: Session = Depends(get_session),
):
    body = body or {}
    name = str(body.get("name") or "")
    email = str(body.get("email") or "").strip()
    password = str(body.get("password") or "")
    if not email or not password:
        raise HTTPException(status_code=400, detail="Email and password are required.")

    if find_user_by_email(session, email):
        raise HTTPException(status_code=409, detail="Email already registered.")

    try:
        user = create_local_user(session, name=name, email=email, password=password)
    except IntegrityError as exc:
        session.rollback()
        raise HTTPException(status_code=409, detail="Email already registered.") from exc

    login_session(request, user)
    logger.info("Registered user %s", user.id)
    return {"ok": True, "redirect": "/"}


@router.post("/api/login")
def login(
    request: Request,
    body: Optional[Dict[str, Any]] = Body(None),
    session: Session = Depends(get_session),
):
    body = body or {}
    email = str(body.get("email") or "")
    password = str(body.get("password") or "")

    user = find_user_by_email(session, email) if email else None
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password.")

    login_session(request, user)
    return {"ok": True, "redirect": "/"}


@router.post("/api/logout")
def logout(request: Request):
    request.session.clear()
    return {"ok": True, "redirect": "/"}


@router.get("/auth/oauth/start")
async def auth_oauth_start(
    request: Request,
    next: str | None = None,
    settings: Settings = Depends(get_settings),
):
    client = _oauth_client(request)
    if next:
        request.session["next"] = next
    try:
        return await client.authorize_redirect(request, settings.oauth_redirect_url)
    except Exception as exc:
        logger.exception("OAuth redirect failed")
        raise HTTPException(status_code=500, detail=f"OAuth error: {exc}") from exc


@router.get("/auth/oauth/callback")
async def auth_oauth_callback(
    request: Request,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    client = _oauth_client(request)
    try:
        token = await client.authorize_access_token(request)
    except OAuthError as exc:
        logger.warning("OAuth callback rejected: %s", exc)
        raise HTTPException(status_code=400, detail=f"OAuth error: {exc}") from exc
    userinfo = token.get("userinfo") or await client.userinfo(token=token)
    email = userinfo.get("email")
    sub = userinfo.get("sub")
    if not email or not sub:
        raise HTTPException(status_code=400, detail="Unable to read OAuth profile.")

    user = upsert_oauth_user(
        session,
        provider=OAUTH_PROVIDER,
        email=email,
        sub=sub,
        name=userinfo.get("name"),
    )
    login_session(request, user)

    fallback = settings.frontend_origin or "/"
    next_url = request.session.pop("next", None) or fallback
    if not settings.frontend_origin or not str(next_url).startswith(settings.frontend_origin):
        next_url = fallback
    return RedirectResponse(next_url, status_code=302)


__all__ = ["build_oauth", "router"]
