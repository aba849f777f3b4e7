"""Database model for portal accounts."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class User(SQLModel, table=True):
    """Player account, local (email/password) or backed by an OAuth provider."""

    __tablename__ = "users"

    id: Optional[int] = ORMField(default=None, primary_key=True)
    name: str
    email: str = ORMField(index=True, unique=True)
    password_hash: Optional[str] = None
    provider: str = ORMField(default="local")
    provider_sub: Optional[str] = ORMField(default=None, index=True)
    level: int = 1
    coins: int = 0
    verified: bool = False
    created_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["User"]
