"""FastAPI application factory and configuration."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from . import models  # noqa: F401 - ensure models are registered with SQLModel
from .api import register_routes
from .api.routers.auth import build_oauth
from .core import Settings, build_engine, init_db, load_settings, setup_logging
from .media import CloudinaryClient, MediaHost

log = logging.getLogger("portal")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    init_db(app.state.engine, reset=settings.db_reset)
    log.info(
        "Portal ready (media host %s, games dir %s)",
        "configured" if settings.media_configured else "NOT configured",
        settings.games_dir,
    )
    yield
    app.state.engine.dispose()


def create_app(
    settings: Optional[Settings] = None,
    *,
    media_host: Optional[MediaHost] = None,
) -> FastAPI:
    if settings is None:
        # uvicorn --factory path
        settings = load_settings()
        setup_logging(level=settings.log_level)

    app = FastAPI(title="Game Portal API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = build_engine(settings.database_url)
    app.state.media_host = media_host or CloudinaryClient.from_settings(settings)
    app.state.oauth = build_oauth(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie="sid",
        max_age=settings.session_max_age,
        https_only=settings.cookie_secure,
        same_site=settings.cookie_samesite,
        domain=settings.cookie_domain,
    )

    register_routes(app)
    return app


def main() -> None:
    import uvicorn

    settings = load_settings()
    setup_logging(level=settings.log_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
