"""Mongo repository for videos collection."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from .users_repo import to_object_id

LIKES = 'likes'
DISLIKES = 'dislikes'
VIEWS = 'view_count'


class VideosRepo:
    """CRUD, counters and embedded comments for videos."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.col = db['videos']

    async def insert(
        self,
        user_id: Optional[str],
        video_url: str,
        status: str,
    ) -> str:
        """Insert a freshly uploaded video and return its id."""
        now = datetime.now(timezone.utc)
        doc = {
            'user_id': user_id,
            'title': None,
            'description': None,
            'tags': [],
            'video_url': video_url,
            'thumbnail_url': None,
            'video_status': status,
            LIKES: 0,
            DISLIKES: 0,
            VIEWS: 0,
            'comments': [],
            'created_at': now,
            'last_modified_at': now,
        }
        result = await self.col.insert_one(doc)
        return str(result.inserted_id)

    async def get_by_id(self, video_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(video_id)
        if oid is None:
            return None
        return await self.col.find_one({'_id': oid})

    async def list_all(self) -> List[Dict[str, Any]]:
        cursor = self.col.find({}).sort('created_at', -1)
        return [doc async for doc in cursor]

    async def list_by_ids(self, video_ids: Iterable[str]) -> List[Dict[str, Any]]:
        oids = [oid for oid in map(to_object_id, video_ids) if oid]
        if not oids:
            return []
        cursor = self.col.find({'_id': {'$in': oids}})
        return [doc async for doc in cursor]

    async def update_fields(
        self,
        video_id: str,
        fields: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """$set the given fields; None when the video does not exist."""
        oid = to_object_id(video_id)
        if oid is None:
            return None
        return await self.col.find_one_and_update(
            {'_id': oid},
            {'$set': {**fields,
                      'last_modified_at': datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )

    async def increment_views(self, video_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(video_id)
        if oid is None:
            return None
        return await self.col.find_one_and_update(
            {'_id': oid},
            {'$inc': {VIEWS: 1}},
            return_document=ReturnDocument.AFTER,
        )

    async def apply_counter_delta(self, video_id: str, field: str,
                                  delta: int) -> bool:
        """$inc a counter; decrements never take it below zero."""
        if not delta:
            return True
        query: Dict[str, Any] = {'_id': to_object_id(video_id)}
        if delta < 0:
            query[field] = {'$gte': -delta}
        result = await self.col.update_one(
            query,
            {
                '$inc': {field: delta},
                '$set': {'last_modified_at': datetime.now(timezone.utc)},
            },
        )
        return result.modified_count == 1

    async def push_comment(
        self,
        video_id: str,
        comment: Dict[str, Any],
    ) -> bool:
        oid = to_object_id(video_id)
        if oid is None:
            return False
        result = await self.col.update_one(
            {'_id': oid},
            {'$push': {'comments': comment}},
        )
        return result.matched_count == 1
