"""Trophy upload endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlmodel import Session
from starlette.datastructures import UploadFile

from ...core import Settings, get_session
from ...media import MediaHost
from ...models import User
from ...services.trophies import (
    MAX_EXTRA_PHOTOS,
    UploadedFile,
    submit_trophy,
    trophy_to_dict,
)
from ..deps import get_current_user, get_media_host, get_settings

router = APIRouter(prefix="/api", tags=["trophies"])

logger = logging.getLogger(__name__)


async def _read(upload: UploadFile) -> UploadedFile:
    return UploadedFile(data=await upload.read(), filename=upload.filename or None)


@router.post("/upload-trophy")
async def upload_trophy(
    request: Request,
    user: Optional[User] = Depends(get_current_user),
    session: Session = Depends(get_session),
    media: MediaHost = Depends(get_media_host),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Store a certificate (plus up to five photos) and record a pending trophy.

    Form fields: ``mainCert`` (one file) and ``extraPhotos`` (up to five files).
    Plain text values in either field are not files and are ignored.
    """

    form = await request.form()
    main_cert = form.get("mainCert")
    main = await _read(main_cert) if isinstance(main_cert, UploadFile) else None
    if main is None or not main.data:
        raise HTTPException(status_code=400, detail="Main certificate is required")

    extra_photos: List[UploadFile] = [
        item for item in form.getlist("extraPhotos") if isinstance(item, UploadFile)
    ]
    if len(extra_photos) > MAX_EXTRA_PHOTOS:
        raise HTTPException(
            status_code=400,
            detail=f"At most {MAX_EXTRA_PHOTOS} extra photos are allowed",
        )

    user_id = user.id if user else settings.trophy_anonymous_user_id
    if user_id is None:
        raise HTTPException(status_code=401, detail="Login required")

    extras = [await _read(photo) for photo in extra_photos]

    try:
        trophy = await submit_trophy(
            session,
            media,
            settings,
            user_id=user_id,
            main_cert=main,
            extra_photos=extras,
        )
    except Exception as exc:
        logger.exception("Trophy upload failed for user %s", user_id)
        raise HTTPException(status_code=500, detail=f"Upload failed: {exc}") from exc

    logger.info("Trophy %s uploaded by user %s: %s", trophy.id, user_id, trophy.image_path)
    return {"success": True, "data": trophy_to_dict(trophy)}


__all__ = ["router"]
