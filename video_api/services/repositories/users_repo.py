"""Mongo repository for users collection."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

LIKED = 'liked_videos'
DISLIKED = 'disliked_videos'
HISTORY = 'video_history'
SUBSCRIBED_TO = 'subscribed_to_users'
SUBSCRIBERS = 'subscribers'


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse a 24-hex id; malformed ids behave like missing ones."""
    if isinstance(value, ObjectId):
        return value
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


class UsersRepo:
    """Lookup by subject plus atomic set mutations on user documents."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.col = db['users']

    async def ensure_indexes(self) -> None:
        """One local user per external subject."""
        await self.col.create_index(
            [('sub', ASCENDING)],
            unique=True,
            name='users_sub',
        )

    async def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return await self.col.find_one({'_id': oid})

    async def get_by_sub(self, sub: str) -> Optional[Dict[str, Any]]:
        return await self.col.find_one({'sub': sub})

    async def insert(self, profile: Dict[str, Any]) -> str:
        """Insert a new user with empty relation sets; return its id."""
        doc = {
            **profile,
            LIKED: [],
            DISLIKED: [],
            HISTORY: [],
            SUBSCRIBED_TO: [],
            SUBSCRIBERS: [],
            'created_at': datetime.now(timezone.utc),
        }
        result = await self.col.insert_one(doc)
        return str(result.inserted_id)

    async def add_to_set(self, user_id: str, field: str, value: str) -> bool:
        result = await self.col.update_one(
            {'_id': to_object_id(user_id)},
            {'$addToSet': {field: value}},
        )
        return result.matched_count == 1

    async def pull_from_set(
        self,
        user_id: str,
        field: str,
        value: str,
    ) -> bool:
        result = await self.col.update_one(
            {'_id': to_object_id(user_id)},
            {'$pull': {field: value}},
        )
        return result.matched_count == 1

    async def move_between_sets(
        self,
        user_id: str,
        video_id: str,
        guard: Dict[str, Any],
        source: Optional[str],
        target: Optional[str],
    ) -> bool:
        """Move video_id from one reaction set to another in one write.

        The update only matches while `guard` still holds, so a request
        acting on a stale view of the sets changes nothing.
        """
        update: Dict[str, Any] = {}
        if source:
            update['$pull'] = {source: video_id}
        if target:
            update['$addToSet'] = {target: video_id}
        if not update:
            return True
        result = await self.col.update_one(
            {'_id': to_object_id(user_id), **guard},
            update,
        )
        return result.modified_count == 1


