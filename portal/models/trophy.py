"""Database model for uploaded trophies."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow

USER_UPLOAD_SOURCE = "User Upload"


class TrophyStatus(str, Enum):
    """Review state; uploads always start out PENDING."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Trophy(SQLModel, table=True):
    """Certificate image plus optional supporting photos awaiting review."""

    __tablename__ = "trophies"

    id: Optional[int] = ORMField(default=None, primary_key=True)
    user_id: int = ORMField(index=True)
    image_path: str
    extra_images: str = "[]"
    source_name: str = USER_UPLOAD_SOURCE
    status: str = ORMField(default=TrophyStatus.PENDING.value)
    created_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["Trophy", "TrophyStatus", "USER_UPLOAD_SOURCE"]
