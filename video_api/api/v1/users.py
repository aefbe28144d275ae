from http import HTTPStatus
from typing import Any, Dict

from fastapi import APIRouter, Depends

from video_api.api.http_utils import handle_runtime_errors
from video_api.core.security import AuthContext, get_auth
from video_api.dependencies import (
    get_current_user,
    get_registration_service,
    get_users_service,
)
from video_api.models.users import (
    SubscriptionResponse,
    UserHistoryResponse,
    UserRegisterResponse,
)
from video_api.services.registration_service import UserRegistrationService
from video_api.services.users_service import UsersService

router = APIRouter(prefix="/api/user", tags=["users"])


@router.post("/register", response_model=UserRegisterResponse,
             status_code=HTTPStatus.OK)
@handle_runtime_errors()
async def register(
    auth: AuthContext = Depends(get_auth),
    svc: UserRegistrationService = Depends(get_registration_service),
):
    return await svc.register(auth.token)


@router.post("/subscribe/{user_id}", response_model=SubscriptionResponse,
             status_code=HTTPStatus.OK)
@handle_runtime_errors()
async def subscribe_user(
    user_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    svc: UsersService = Depends(get_users_service),
):
    await svc.subscribe(str(user["_id"]), user_id)
    return SubscriptionResponse(ok=True)


@router.post("/unsubscribe/{user_id}", response_model=SubscriptionResponse,
             status_code=HTTPStatus.OK)
@handle_runtime_errors()
async def unsubscribe_user(
    user_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    svc: UsersService = Depends(get_users_service),
):
    await svc.unsubscribe(str(user["_id"]), user_id)
    return SubscriptionResponse(ok=True)


@router.get("/{user_id}/history", response_model=UserHistoryResponse,
            status_code=HTTPStatus.OK)
@handle_runtime_errors()
async def user_history(
    user_id: str,
    auth: AuthContext = Depends(get_auth),
    svc: UsersService = Depends(get_users_service),
):
    return await svc.user_history(user_id)
