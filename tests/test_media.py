"""Cloudinary client against a mocked transport."""
import asyncio
import hashlib
import re

import httpx
import pytest

from portal.media import CloudinaryClient, MediaUploadError, sign_params


def _field(content: bytes, name: str) -> str:
    match = re.search(rb'name="' + name.encode() + rb'"\r\n\r\n([^\r]*)\r\n', content)
    assert match, f"missing form field {name}"
    return match.group(1).decode()


def _client(handler, **kwargs):
    return CloudinaryClient(
        "demo-cloud", "key-123", "shh", transport=httpx.MockTransport(handler), **kwargs
    )


def test_sign_params_sorts_and_appends_secret():
    expected = hashlib.sha1(b"folder=a/b&timestamp=1700000000shh").hexdigest()
    assert sign_params({"timestamp": 1700000000, "folder": "a/b"}, "shh") == expected


def test_upload_posts_signed_form_and_returns_secure_url():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["content"] = request.content
        return httpx.Response(200, json={"secure_url": "https://res.cloudinary.com/demo/x.jpg"})

    url = asyncio.run(_client(handler).upload(b"\x89PNG data", "dance-game/certificates", "cert.png"))

    assert url == "https://res.cloudinary.com/demo/x.jpg"
    assert seen["url"] == "https://api.cloudinary.com/v1_1/demo-cloud/image/upload"
    content = seen["content"]
    assert _field(content, "folder") == "dance-game/certificates"
    assert _field(content, "api_key") == "key-123"
    timestamp = int(_field(content, "timestamp"))
    assert _field(content, "signature") == sign_params(
        {"folder": "dance-game/certificates", "timestamp": timestamp}, "shh"
    )
    assert b'filename="cert.png"' in content
    assert b"\x89PNG data" in content


def test_upload_error_uses_host_message():
    def handler(request):
        return httpx.Response(401, json={"error": {"message": "Invalid Signature"}})

    with pytest.raises(MediaUploadError, match="Invalid Signature"):
        asyncio.run(_client(handler).upload(b"data", "f"))


def test_upload_error_without_json_body():
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    with pytest.raises(MediaUploadError, match="HTTP 502"):
        asyncio.run(_client(handler).upload(b"data", "f"))


def test_missing_secure_url_is_an_error():
    def handler(request):
        return httpx.Response(200, json={"public_id": "x"})

    with pytest.raises(MediaUploadError):
        asyncio.run(_client(handler).upload(b"data", "f"))


def test_transport_failure_is_an_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(MediaUploadError, match="unreachable"):
        asyncio.run(_client(handler).upload(b"data", "f"))


def test_unconfigured_client_never_calls_out():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"secure_url": "https://x"})

    client = CloudinaryClient("", "", "", transport=httpx.MockTransport(handler))
    with pytest.raises(MediaUploadError, match="not configured"):
        asyncio.run(client.upload(b"data", "f"))
    assert calls == []
