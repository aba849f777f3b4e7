"""Trophy upload pipeline: media uploads followed by a single insert."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ..core.config import Settings
from ..media import MediaHost, MediaUploadError
from ..models import USER_UPLOAD_SOURCE, Trophy, TrophyStatus

logger = logging.getLogger(__name__)

MAX_EXTRA_PHOTOS = 5


class TrophyError(Exception):
    """Base class for failures after validation has passed."""


class TrophyPersistenceError(TrophyError):
    """The trophy row could not be written."""


@dataclass(frozen=True)
class UploadedFile:
    data: bytes
    filename: Optional[str] = None


def _log_orphans(urls: Sequence[str], reason: str) -> None:
    # Remote assets are not compensated; leave a trail for manual cleanup.
    if urls:
        logger.warning("Orphaned media after %s: %s", reason, ", ".join(urls))


async def upload_extra_photos(
    media: MediaHost, photos: Sequence[UploadedFile], folder: str
) -> List[str]:
    """Upload every photo concurrently and return URLs in request order.

    Waits for all uploads to settle; if any failed, the first failure is raised
    after the successful ones have been logged as orphans.
    """

    results = await asyncio.gather(
        *(media.upload(photo.data, folder, photo.filename) for photo in photos),
        return_exceptions=True,
    )
    failures = [result for result in results if isinstance(result, BaseException)]
    if failures:
        _log_orphans(
            [result for result in results if isinstance(result, str)],
            "extra photo upload failure",
        )
        raise failures[0]
    return list(results)


async def submit_trophy(
    session: Session,
    media: MediaHost,
    settings: Settings,
    *,
    user_id: int,
    main_cert: UploadedFile,
    extra_photos: Sequence[UploadedFile] = (),
) -> Trophy:
    """Upload the certificate, then the extra photos, then record the trophy.

    Raises :class:`MediaUploadError` or :class:`TrophyPersistenceError`; no row
    is written unless every upload succeeded.
    """

    main_url = await media.upload(
        main_cert.data, settings.trophy_cert_folder, main_cert.filename
    )

    extra_urls: List[str] = []
    if extra_photos:
        try:
            extra_urls = await upload_extra_photos(
                media, extra_photos, settings.trophy_photo_folder
            )
        except Exception:
            _log_orphans([main_url], "extra photo upload failure")
            raise

    trophy = Trophy(
        user_id=user_id,
        image_path=main_url,
        extra_images=json.dumps(extra_urls),
        source_name=USER_UPLOAD_SOURCE,
        status=TrophyStatus.PENDING.value,
    )
    try:
        session.add(trophy)
        session.commit()
        session.refresh(trophy)
    except SQLAlchemyError as exc:
        session.rollback()
        _log_orphans([main_url, *extra_urls], "database failure")
        raise TrophyPersistenceError(f"could not save trophy: {exc}") from exc

    return trophy


def extra_images_from_trophy(trophy: Trophy) -> List[str]:
    """Extract secondary image URLs from stored JSON."""

    return json.loads(trophy.extra_images or "[]")


def trophy_to_dict(trophy: Trophy) -> Dict[str, Any]:
    """Serialise a trophy model to API-friendly dict."""

    return {
        "id": trophy.id,
        "user_id": trophy.user_id,
        "image_path": trophy.image_path,
        "extra_images": extra_images_from_trophy(trophy),
        "source_name": trophy.source_name,
        "status": trophy.status,
        "created_at": trophy.created_at.isoformat() if trophy.created_at else None,
    }


__all__ = [
    "MAX_EXTRA_PHOTOS",
    "MediaUploadError",
    "TrophyError",
    "TrophyPersistenceError",
    "UploadedFile",
    "extra_images_from_trophy",
    "submit_trophy",
    "trophy_to_dict",
    "upload_extra_photos",
]
