from typing import Any, Dict

from fastapi import Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from video_api.core.config import settings
from video_api.core.security import AuthContext, get_auth
from video_api.db.mongo import get_mongo_db
from video_api.services.registration_service import UserRegistrationService
from video_api.services.storage_service import ObjectStorage, get_s3_storage
from video_api.services.users_service import UsersService
from video_api.services.videos_service import VideosService


async def get_db() -> AsyncIOMotorDatabase:
    return await get_mongo_db()


def get_storage() -> ObjectStorage:
    return get_s3_storage()


async def get_users_service(db=Depends(get_db)) -> UsersService:
    return UsersService(db)


async def get_videos_service(
        db=Depends(get_db),
        users: UsersService = Depends(get_users_service),
        storage: ObjectStorage = Depends(get_storage),
) -> VideosService:
    return VideosService(db, users, storage)


async def get_registration_service(
        db=Depends(get_db)) -> UserRegistrationService:
    return UserRegistrationService(
        db,
        userinfo_endpoint=settings.userinfo_endpoint,
        timeout=settings.userinfo_timeout,
    )


async def get_current_user(
        auth: AuthContext = Depends(get_auth),
        users: UsersService = Depends(get_users_service),
) -> Dict[str, Any]:
    """Local user for the token's subject; 404 if never registered."""
    try:
        return await users.get_current_user(auth.sub)
    except RuntimeError as e:
        if str(e) == "user_not_found":
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                                detail="user_not_found")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="internal_error")
