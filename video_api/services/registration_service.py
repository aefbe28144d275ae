"""Binds an external identity (token subject) to exactly one local user."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from video_api.models.users import UserInfo, UserRegisterResponse
from video_api.services.repositories.users_repo import UsersRepo

logger = logging.getLogger(__name__)


class UserRegistrationService:
    """Lookup-or-create of local users keyed by the provider's `sub`."""

    def __init__(
            self,
            db: AsyncIOMotorDatabase,
            userinfo_endpoint: str,
            timeout: float = 5.0,
            transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.repo = UsersRepo(db)
        self.userinfo_endpoint = userinfo_endpoint
        self.timeout = timeout
        self._transport = transport

    async def fetch_user_info(self, token: str) -> UserInfo:
        """Exchange the bearer token for the provider's profile claims."""
        try:
            async with httpx.AsyncClient(
                    transport=self._transport,
                    timeout=self.timeout) as client:
                response = await client.get(
                    self.userinfo_endpoint,
                    headers={'Authorization': f'Bearer {token}'},
                )
                response.raise_for_status()
                payload = response.json()
            return UserInfo.model_validate(payload)
        except httpx.HTTPError as error:
            logger.error('userinfo_request_failed',
                         extra={'err': str(error)})
            raise RuntimeError(f'userinfo_error: {error}') from error
        except (ValueError, ValidationError) as error:
            # ValueError covers a non-JSON body
            logger.error('userinfo_payload_invalid',
                         extra={'err': str(error)})
            raise RuntimeError(f'userinfo_error: {error}') from error

    @staticmethod
    def _profile(info: UserInfo) -> Dict[str, Any]:
        return {
            'sub': info.sub,
            'first_name': info.given_name,
            'last_name': info.family_name,
            'full_name': info.name,
            'email_address': info.email,
        }

    async def register(self, token: str) -> UserRegisterResponse:
        """Return the user bound to the token's subject, creating it once."""
        info = await self.fetch_user_info(token)
        try:
            existing = await self.repo.get_by_sub(info.sub)
            if existing is not None:
                return UserRegisterResponse(user_id=str(existing['_id']),
                                            created=False)
            try:
                user_id = await self.repo.insert(self._profile(info))
            except DuplicateKeyError:
                # a concurrent registration for the same sub won the insert
                winner = await self.repo.get_by_sub(info.sub)
                if winner is None:
                    raise
                logger.info('user_register_race',
                            extra={'sub': info.sub})
                return UserRegisterResponse(user_id=str(winner['_id']),
                                            created=False)
        except PyMongoError as error:
            raise RuntimeError(f'mongo_user_register_error: {error}') \
                from error
        logger.info('user_registered',
                    extra={'user_id': user_id, 'sub': info.sub})
        return UserRegisterResponse(user_id=user_id, created=True)
