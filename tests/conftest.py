import uuid

import pytest
from fastapi import Depends
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from video_api.main import app
from video_api.core.security import (
    AuthContext,
    bearer_scheme,
    get_auth,
    unauthorized,
)
from video_api.dependencies import (
    get_db,
    get_registration_service,
    get_storage,
)
from video_api.services.registration_service import UserRegistrationService
from video_api.services.repositories.users_repo import UsersRepo
from video_api.services.users_service import UsersService
from video_api.services.videos_service import VideosService
from tests.helpers import USERINFO_URL, FakeStorage, userinfo_transport


@pytest.fixture
async def db():
    """Fresh in-memory Mongo database per test."""
    client = AsyncMongoMockClient()
    database = client[f"videos_test_{uuid.uuid4().hex[:8]}"]
    await UsersRepo(database).ensure_indexes()
    return database


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def registration(db):
    return UserRegistrationService(db, USERINFO_URL,
                                   transport=userinfo_transport())


@pytest.fixture
def users_svc(db):
    return UsersService(db)


@pytest.fixture
def videos_svc(db, users_svc, storage):
    return VideosService(db, users_svc, storage)


def fake_auth(credentials=Depends(bearer_scheme)) -> AuthContext:
    """Accept any bearer token; the token itself is the subject."""
    if credentials is None:
        raise unauthorized("missing_token")
    return AuthContext(token=credentials.credentials,
                       claims={"sub": credentials.credentials})


@pytest.fixture
async def client(db, storage, registration):
    async def _db():
        return db

    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_registration_service] = \
        lambda: registration
    app.dependency_overrides[get_auth] = fake_auth
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport,
                           base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
