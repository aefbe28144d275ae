"""Service layer for users: current-user lookup, history, subscriptions."""

from __future__ import annotations

import logging
from typing import Any, Dict

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from video_api.models.users import UserHistoryResponse
from video_api.services.reactions import (
    SET_FOR_STATE,
    Transition,
    state_guard,
)
from video_api.services.repositories.users_repo import (
    HISTORY,
    SUBSCRIBED_TO,
    SUBSCRIBERS,
    UsersRepo,
)

logger = logging.getLogger(__name__)


class UsersService:
    """Operations on the local user records."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        """Initialize service with the users repository."""
        self.repo = UsersRepo(db)

    async def get_current_user(self, sub: str) -> Dict[str, Any]:
        """Resolve the local user bound to a token subject."""
        try:
            user = await self.repo.get_by_sub(sub)
        except PyMongoError as error:
            raise RuntimeError(f'mongo_user_get_error: {error}') from error
        if user is None:
            logger.warning('user_not_registered', extra={'sub': sub})
            raise RuntimeError('user_not_found')
        return user

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        """Return the user by id or raise `user_not_found`."""
        try:
            user = await self.repo.get_by_id(user_id)
        except PyMongoError as error:
            raise RuntimeError(f'mongo_user_get_error: {error}') from error
        if user is None:
            raise RuntimeError('user_not_found')
        return user

    async def add_to_history(self, user_id: str, video_id: str) -> None:
        """Record a viewed video; repeats are no-ops."""
        try:
            await self.repo.add_to_set(user_id, HISTORY, video_id)
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_user_history_error: {error}') from error

    async def apply_reaction(
            self,
            user_id: str,
            video_id: str,
            step: Transition) -> bool:
        """Move the video between reaction sets if the user is still in
        `step.before`; False means the state changed underneath us."""
        try:
            return await self.repo.move_between_sets(
                user_id,
                video_id,
                guard=state_guard(video_id, step.before),
                source=SET_FOR_STATE[step.before],
                target=SET_FOR_STATE[step.after],
            )
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_user_reaction_error: {error}') from error

    async def subscribe(self, current_user_id: str, user_id: str) -> None:
        """current user -> subscribed_to; target -> subscribers."""
        await self.get_user(user_id)
        try:
            await self.repo.add_to_set(current_user_id, SUBSCRIBED_TO, user_id)
            await self.repo.add_to_set(user_id, SUBSCRIBERS, current_user_id)
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_user_subscribe_error: {error}') from error
        logger.info('user_subscribed',
                    extra={'user_id': current_user_id, 'target': user_id})

    async def unsubscribe(self, current_user_id: str, user_id: str) -> None:
        """Reverse of `subscribe`; unknown links are ignored."""
        await self.get_user(user_id)
        try:
            await self.repo.pull_from_set(
                current_user_id, SUBSCRIBED_TO, user_id)
            await self.repo.pull_from_set(
                user_id, SUBSCRIBERS, current_user_id)
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_user_unsubscribe_error: {error}') from error
        logger.info('user_unsubscribed',
                    extra={'user_id': current_user_id, 'target': user_id})

    async def user_history(self, user_id: str) -> UserHistoryResponse:
        """Return the ids of videos a user has viewed."""
        user = await self.get_user(user_id)
        return UserHistoryResponse(
            user_id=str(user['_id']),
            video_ids=list(user.get(HISTORY, [])),
        )
