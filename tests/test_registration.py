"""UserRegistrationService against a stubbed identity provider."""

from __future__ import annotations

import httpx
import pytest

from video_api.services.registration_service import UserRegistrationService
from tests.helpers import USERINFO_URL, new_sub, userinfo_transport


def service(db, handler) -> UserRegistrationService:
    return UserRegistrationService(db, USERINFO_URL,
                                   transport=userinfo_transport(handler))


async def test_register_creates_once_then_reuses(registration, db):
    sub = new_sub()
    first = await registration.register(sub)
    second = await registration.register(sub)

    assert first.created is True and second.created is False
    assert first.user_id == second.user_id
    assert await db["users"].count_documents({"sub": sub}) == 1


async def test_existing_user_profile_is_not_refreshed(db):
    sub = new_sub()
    names = iter(["Ada", "Augusta"])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"sub": sub,
                                         "given_name": next(names)})

    svc = service(db, handler)
    await svc.register("t1")
    await svc.register("t2")

    doc = await db["users"].find_one({"sub": sub})
    assert doc["first_name"] == "Ada"


async def test_fetch_sends_bearer_token(db):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"sub": "s-1", "unknown": [1, 2]})

    info = await service(db, handler).fetch_user_info("tok-123")
    assert seen == {"auth": "Bearer tok-123", "url": USERINFO_URL}
    assert info.sub == "s-1" and info.email is None


@pytest.mark.parametrize("response", [
    httpx.Response(401, json={"error": "invalid_token"}),
    httpx.Response(500, text="oops"),
    httpx.Response(200, text="<html>not json</html>"),
    httpx.Response(200, json={"name": "no subject"}),
])
async def test_bad_userinfo_response_is_upstream_error(db, response):
    svc = service(db, lambda request: response)
    with pytest.raises(RuntimeError, match="^userinfo_error"):
        await svc.register("tok")
    assert await db["users"].count_documents({}) == 0


async def test_transport_failure_is_upstream_error(db):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RuntimeError, match="^userinfo_error"):
        await service(db, handler).register("tok")


async def test_concurrent_insert_conflict_returns_winner(
        registration, db, monkeypatch):
    sub = new_sub()
    winner_id = await registration.repo.insert({"sub": sub})

    original = registration.repo.get_by_sub
    calls = []

    async def stale_lookup(value):
        # first lookup misses as if the winner had not committed yet
        calls.append(value)
        if len(calls) == 1:
            return None
        return await original(value)

    monkeypatch.setattr(registration.repo, "get_by_sub", stale_lookup)

    result = await registration.register(sub)
    assert result.user_id == winner_id
    assert result.created is False
    assert await db["users"].count_documents({"sub": sub}) == 1
