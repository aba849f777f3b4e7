"""
Cloudinary media host client.
Signed uploads of in-memory file buffers; returns the durable public URL.
"""

from __future__ import annotations

import hashlib
import logging
import time
from typing import Any, Dict, Optional, Protocol

import httpx

from .core.config import Settings

API_BASE = "https://api.cloudinary.com/v1_1"

logger = logging.getLogger(__name__)


class MediaUploadError(Exception):
	"""Raised when the media host does not return a usable URL."""


class MediaHost(Protocol):
	async def upload(self, data: bytes, folder: str, filename: Optional[str] = None) -> str:
		...


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
	"""Cloudinary request signature: SHA-1 of the sorted params plus the secret."""
	payload = "&".join(f"{key}={params[key]}" for key in sorted(params))
	return hashlib.sha1(f"{payload}{api_secret}".encode("utf-8")).hexdigest()


def _error_message(response: httpx.Response) -> str:
	try:
		body = response.json()
	except ValueError:
		body = None
	if isinstance(body, dict):
		error = body.get("error")
		if isinstance(error, dict) and error.get("message"):
			return str(error["message"])
	return f"media host responded with HTTP {response.status_code}"


class CloudinaryClient:
	"""Uploads images into folders of a single Cloudinary cloud."""

	def __init__(
		self,
		cloud_name: str,
		api_key: str,
		api_secret: str,
		*,
		timeout: float = 60.0,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.cloud_name = cloud_name
		self.api_key = api_key
		self.api_secret = api_secret
		self.timeout = timeout
		self._transport = transport

	@classmethod
	def from_settings(cls, settings: Settings, **kwargs: Any) -> "CloudinaryClient":
		return cls(
			settings.cloudinary_cloud_name,
			settings.cloudinary_api_key,
			settings.cloudinary_api_secret,
			timeout=settings.media_upload_timeout,
			**kwargs,
		)

	@property
	def upload_url(self) -> str:
		return f"{API_BASE}/{self.cloud_name}/image/upload"

	async def upload(self, data: bytes, folder: str, filename: Optional[str] = None) -> str:
		"""Upload ``data`` into ``folder`` and return its ``secure_url``."""
		if not (self.cloud_name and self.api_key and self.api_secret):
			raise MediaUploadError("media host is not configured")

		params = {"folder": folder, "timestamp": int(time.time())}
		form = {
			**{key: str(value) for key, value in params.items()},
			"api_key": self.api_key,
			"signature": sign_params(params, self.api_secret),
		}
		files = {"file": (filename or "upload", data)}

		try:
			async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
				r = await client.post(self.upload_url, data=form, files=files)
		except httpx.HTTPError as exc:
			raise MediaUploadError(f"media host unreachable: {exc}") from exc

		if r.is_error:
			raise MediaUploadError(_error_message(r))

		try:
			url = r.json().get("secure_url")
		except (ValueError, AttributeError):
			url = None
		if not url:
			raise MediaUploadError("media host response did not include a URL")
		logger.debug("Uploaded %d bytes to %s: %s", len(data), folder, url)
		return url


__all__ = ["API_BASE", "CloudinaryClient", "MediaHost", "MediaUploadError", "sign_params"]
