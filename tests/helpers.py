import json
import uuid
from typing import Dict, Optional

import httpx
from httpx import AsyncClient

from video_api.services.storage_service import object_key

USERINFO_URL = "https://idp.test/userinfo"
IDP_DOWN = "idp-down"


def new_sub() -> str:
    return f"auth0|{uuid.uuid4().hex[:12]}"


def bearer(sub: str) -> Dict[str, str]:
    # in tests the bearer token doubles as the subject claim
    return {"Authorization": f"Bearer {sub}"}


def userinfo_handler(request: httpx.Request) -> httpx.Response:
    """Fake identity provider: the token value becomes the `sub` claim."""
    token = request.headers["Authorization"].removeprefix("Bearer ")
    if token == IDP_DOWN:
        return httpx.Response(503, text="unavailable")
    return httpx.Response(200, content=json.dumps({
        "sub": token,
        "given_name": "Ada",
        "family_name": "Lovelace",
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "email_verified": True,
        "picture": "https://cdn.test/ada.png",
    }), headers={"Content-Type": "application/json"})


def userinfo_transport(handler=userinfo_handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


class FakeStorage:
    """In-memory object storage with the same contract as S3Storage."""

    def __init__(self) -> None:
        self.objects: Dict[str, bytes] = {}
        self.fail = False

    async def upload(self, content: bytes, filename: Optional[str],
                     content_type: Optional[str]) -> str:
        if self.fail:
            raise RuntimeError("storage_upload_error: stream closed")
        key = object_key(filename)
        self.objects[key] = content
        return f"https://cdn.test/{key}"


async def register(client: AsyncClient, sub: str) -> str:
    r = await client.post("/api/user/register", headers=bearer(sub))
    assert r.status_code == 200
    return r.json()["user_id"]


async def upload_video(client: AsyncClient, sub: str,
                       name: str = "clip.mp4") -> str:
    r = await client.post(
        "/api/videos",
        files={"file": (name, b"\x00\x00\x00\x18ftypmp42", "video/mp4")},
        headers=bearer(sub),
    )
    assert r.status_code == 201
    return r.json()["video_id"]


async def read_video(client: AsyncClient, sub: str, video_id: str) -> dict:
    r = await client.get(f"/api/videos/{video_id}", headers=bearer(sub))
    assert r.status_code == 200
    return r.json()
