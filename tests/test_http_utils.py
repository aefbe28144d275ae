from http import HTTPStatus
import pytest
from video_api.api.http_utils import handle_runtime_errors
from fastapi import HTTPException


async def test_handle_runtime_errors_maps_known_code_with_details():
    @handle_runtime_errors({"boom": HTTPStatus.BAD_REQUEST})
    async def fn():
        raise RuntimeError("boom: something went wrong")
    with pytest.raises(HTTPException) as e:
        await fn()
    assert e.value.status_code == HTTPStatus.BAD_REQUEST
    assert e.value.detail == "boom"


@pytest.mark.parametrize("code, status", [
    ("video_not_found", HTTPStatus.NOT_FOUND),
    ("user_not_found", HTTPStatus.NOT_FOUND),
    ("reaction_conflict", HTTPStatus.CONFLICT),
    ("userinfo_error", HTTPStatus.BAD_GATEWAY),
    ("storage_upload_error", HTTPStatus.INTERNAL_SERVER_ERROR),
])
async def test_default_mapping(code, status):
    @handle_runtime_errors()
    async def fn():
        raise RuntimeError(code)
    with pytest.raises(HTTPException) as e:
        await fn()
    assert e.value.status_code == status
    assert e.value.detail == code


async def test_handle_runtime_errors_maps_unknown_to_500():
    @handle_runtime_errors()
    async def fn():
        raise RuntimeError("mongo_video_get_error: timeout")
    with pytest.raises(HTTPException) as e:
        await fn()
    assert e.value.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert e.value.detail == "internal_error"


async def test_handle_runtime_errors_happy_path_returns_value():
    @handle_runtime_errors()
    async def ok():
        return "ok"
    assert await ok() == "ok"
