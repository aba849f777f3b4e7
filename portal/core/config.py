"""Application settings and environment helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///data/portal.db"


def _require_env(env: Mapping[str, str], name: str) -> str:
    """Return a required environment variable or raise an error."""

    value = env.get(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _env_bool(env: Mapping[str, str], name: str, default: bool = False) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(env: Mapping[str, str], name: str) -> Optional[int]:
    raw = (env.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


def normalize_database_url(raw_url: str | None) -> str:
    """Point bare postgres URLs at the psycopg 3 driver; leave others alone."""

    if not raw_url or not raw_url.strip():
        return DEFAULT_DATABASE_URL
    raw_url = raw_url.strip()
    if raw_url.startswith("postgres://"):
        return "postgresql+psycopg://" + raw_url[len("postgres://") :]
    if raw_url.startswith("postgresql://"):
        return "postgresql+psycopg://" + raw_url[len("postgresql://") :]
    return raw_url


_LOCAL_DEV_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
]


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup."""

    secret_key: str
    database_url: str = DEFAULT_DATABASE_URL
    db_reset: bool = False

    # Media host (Cloudinary)
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    media_upload_timeout: float = 60.0

    # Trophy uploads
    trophy_cert_folder: str = "dance-game/certificates"
    trophy_photo_folder: str = "dance-game/moments"
    trophy_anonymous_user_id: Optional[int] = None

    games_dir: Path = Path("games")

    # Browser-facing
    frontend_origins: List[str] = field(default_factory=list)
    allowed_cors_origins: List[str] = field(default_factory=list)
    cookie_domain: Optional[str] = None
    cookie_secure: bool = False
    cookie_samesite: str = "lax"
    session_max_age: int = 24 * 60 * 60

    # OpenID Connect login
    oauth_client_id: str = ""
    oauth_client_secret: str = ""
    oauth_server_metadata_url: str = ""
    oauth_redirect_url: str = "http://127.0.0.1:8080/auth/oauth/callback"

    port: int = 8080
    log_level: str = "INFO"

    @property
    def frontend_origin(self) -> str:
        return self.frontend_origins[0] if self.frontend_origins else ""

    @property
    def media_configured(self) -> bool:
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret
        )

    @property
    def oauth_configured(self) -> bool:
        return bool(
            self.oauth_client_id
            and self.oauth_client_secret
            and self.oauth_server_metadata_url
        )


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from the environment (``.env`` included)."""

    if env is None:
        load_dotenv(override=False)
        env = os.environ

    frontend_origins = _split_csv(env.get("FRONTEND_ORIGIN"))
    additional_origins = _split_csv(env.get("ADDITIONAL_ALLOWED_ORIGINS"))

    return Settings(
        secret_key=_require_env(env, "SECRET_KEY"),
        database_url=normalize_database_url(env.get("DATABASE_URL")),
        db_reset=_env_bool(env, "DB_RESET", False),
        cloudinary_cloud_name=(env.get("CLOUDINARY_CLOUD_NAME") or "").strip(),
        cloudinary_api_key=(env.get("CLOUDINARY_API_KEY") or "").strip(),
        cloudinary_api_secret=(env.get("CLOUDINARY_API_SECRET") or "").strip(),
        media_upload_timeout=_env_float(env, "MEDIA_UPLOAD_TIMEOUT", 60.0),
        trophy_cert_folder=env.get("TROPHY_CERT_FOLDER") or "dance-game/certificates",
        trophy_photo_folder=env.get("TROPHY_PHOTO_FOLDER") or "dance-game/moments",
        trophy_anonymous_user_id=_env_int(env, "TROPHY_ANONYMOUS_USER_ID"),
        games_dir=Path(env.get("GAMES_DIR") or "games"),
        frontend_origins=frontend_origins,
        allowed_cors_origins=_unique(
            [*frontend_origins, *additional_origins, *_LOCAL_DEV_ORIGINS]
        ),
        cookie_domain=env.get("COOKIE_DOMAIN") or None,
        cookie_secure=_env_bool(env, "COOKIE_SECURE", False),
        cookie_samesite=env.get("COOKIE_SAMESITE", "lax"),
        oauth_client_id=env.get("OAUTH_CLIENT_ID", ""),
        oauth_client_secret=env.get("OAUTH_CLIENT_SECRET", ""),
        oauth_server_metadata_url=env.get("OAUTH_SERVER_METADATA_URL", ""),
        oauth_redirect_url=env.get(
            "OAUTH_REDIRECT_URL", "http://127.0.0.1:8080/auth/oauth/callback"
        ),
        port=_env_int(env, "PORT") or 8080,
        log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
    )


__all__ = ["DEFAULT_DATABASE_URL", "Settings", "load_settings", "normalize_database_url"]
