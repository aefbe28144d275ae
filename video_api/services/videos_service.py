"""Service layer for videos: upload, metadata, views, reactions, comments."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from video_api.models.comments import CommentCreateRequest, CommentDto
from video_api.models.videos import (
    ThumbnailUploadResponse,
    UploadVideoResponse,
    VideoDto,
    VideoStatus,
    VideoUpdateRequest,
)
from video_api.services.reactions import Reaction, state_of, transition
from video_api.services.repositories.users_repo import (
    DISLIKED,
    HISTORY,
    LIKED,
)
from video_api.services.repositories.videos_repo import (
    DISLIKES,
    LIKES,
    VIEWS,
    VideosRepo,
)
from video_api.services.storage_service import ObjectStorage
from video_api.services.users_service import UsersService

logger = logging.getLogger(__name__)


def to_video_dto(doc: Dict[str, Any]) -> VideoDto:
    return VideoDto(
        id=str(doc['_id']),
        user_id=doc.get('user_id'),
        title=doc.get('title'),
        description=doc.get('description'),
        tags=set(doc.get('tags') or []),
        video_url=doc.get('video_url'),
        thumbnail_url=doc.get('thumbnail_url'),
        video_status=doc.get('video_status') or VideoStatus.DRAFT,
        like_count=int(doc.get(LIKES, 0)),
        dislike_count=int(doc.get(DISLIKES, 0)),
        view_count=int(doc.get(VIEWS, 0)),
        created_at=doc.get('created_at'),
        last_modified_at=doc.get('last_modified_at'),
    )


def to_comment_dto(doc: Dict[str, Any]) -> CommentDto:
    return CommentDto(
        comment_text=doc['text'],
        author_id=doc['author_id'],
        created_at=doc.get('created_at'),
    )


class VideosService:  # noqa: WPS214 (methods count)
    """Business logic for videos.

    Every operation on a missing video raises `video_not_found` before
    anything is written.
    """

    def __init__(
            self,
            db: AsyncIOMotorDatabase,
            users: UsersService,
            storage: Optional[ObjectStorage] = None) -> None:
        """Initialize service with database, users service and storage."""
        self.repo = VideosRepo(db)
        self.users = users
        self.storage = storage

    # ---------- helpers ----------

    async def _get_or_raise(self, video_id: str) -> Dict[str, Any]:
        """Return the video document or raise `video_not_found`."""
        try:
            doc = await self.repo.get_by_id(video_id)
        except PyMongoError as error:
            raise RuntimeError(f'mongo_video_get_error: {error}') from error
        if doc is None:
            logger.warning('video_not_found', extra={'video_id': video_id})
            raise RuntimeError('video_not_found')
        return doc

    async def _store(
            self,
            content: bytes,
            filename: Optional[str],
            content_type: Optional[str]) -> str:
        """Upload bytes to object storage and return the public URL."""
        if self.storage is None:
            raise RuntimeError('storage_upload_error: storage not configured')
        return await self.storage.upload(content, filename, content_type)

    # ---------- UPLOAD ----------

    async def upload_video(
            self,
            user: Dict[str, Any],
            content: bytes,
            filename: Optional[str],
            content_type: Optional[str]) -> UploadVideoResponse:
        """Store the file, then create the video document (DRAFT, zero
        counters). A failed upload leaves no document behind."""
        video_url = await self._store(content, filename, content_type)
        try:
            video_id = await self.repo.insert(
                user_id=str(user['_id']),
                video_url=video_url,
                status=VideoStatus.DRAFT.value,
            )
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_video_create_error: {error}') from error
        logger.info('video_uploaded',
                    extra={'video_id': video_id, 'user_id': str(user['_id'])})
        return UploadVideoResponse(video_id=video_id, video_url=video_url)

    async def upload_thumbnail(
            self,
            video_id: str,
            content: bytes,
            filename: Optional[str],
            content_type: Optional[str]) -> ThumbnailUploadResponse:
        """Store a thumbnail and attach its URL to an existing video."""
        await self._get_or_raise(video_id)
        thumbnail_url = await self._store(content, filename, content_type)
        try:
            await self.repo.update_fields(
                video_id, {'thumbnail_url': thumbnail_url})
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_video_update_error: {error}') from error
        logger.info('thumbnail_uploaded', extra={'video_id': video_id})
        return ThumbnailUploadResponse(video_id=video_id,
                                       thumbnail_url=thumbnail_url)

    # ---------- EDIT ----------

    async def edit_video(self, data: VideoUpdateRequest) -> VideoDto:
        """Set the metadata fields present in the request.

        Omitted fields keep their stored values; any status may replace
        any other.
        """
        fields = data.model_dump(exclude={'id'}, exclude_unset=True)
        if 'tags' in fields:
            fields['tags'] = sorted(fields['tags'])
        if 'video_status' in fields:
            fields['video_status'] = data.video_status.value
        try:
            doc = await self.repo.update_fields(data.id, fields)
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_video_update_error: {error}') from error
        if doc is None:
            raise RuntimeError('video_not_found')
        logger.info('video_metadata_updated', extra={'video_id': data.id})
        return to_video_dto(doc)

    # ---------- READ ----------

    async def get_video_details(
            self,
            user: Dict[str, Any],
            video_id: str) -> VideoDto:
        """Count one view and record the video in the caller's history."""
        try:
            doc = await self.repo.increment_views(video_id)
        except PyMongoError as error:
            raise RuntimeError(f'mongo_video_view_error: {error}') from error
        if doc is None:
            raise RuntimeError('video_not_found')
        await self.users.add_to_history(str(user['_id']), video_id)
        return to_video_dto(doc)

    async def list_videos(self) -> List[VideoDto]:
        """Return every video, newest first."""
        try:
            docs = await self.repo.list_all()
        except PyMongoError as error:
            raise RuntimeError(f'mongo_video_list_error: {error}') from error
        return [to_video_dto(doc) for doc in docs]

    async def _videos_from_set(
            self,
            user: Dict[str, Any],
            field: str) -> List[VideoDto]:
        """Resolve one of the caller's video-id sets into videos."""
        try:
            docs = await self.repo.list_by_ids(user.get(field, []))
        except PyMongoError as error:
            raise RuntimeError(f'mongo_video_list_error: {error}') from error
        return [to_video_dto(doc) for doc in docs]

    async def liked_videos(self, user: Dict[str, Any]) -> List[VideoDto]:
        """Return videos the caller currently likes."""
        return await self._videos_from_set(user, LIKED)

    async def disliked_videos(self, user: Dict[str, Any]) -> List[VideoDto]:
        """Return videos the caller currently dislikes."""
        return await self._videos_from_set(user, DISLIKED)

    async def history_videos(self, user: Dict[str, Any]) -> List[VideoDto]:
        """Return videos the caller has opened."""
        return await self._videos_from_set(user, HISTORY)

    # ---------- REACTIONS ----------

    async def react(
            self,
            user: Dict[str, Any],
            video_id: str,
            reaction: Reaction) -> VideoDto:
        """Apply like/dislike for the caller and return the updated video.

        The set change is conditional on the state read from `user`; if
        another request moved the state first, nothing is written and
        `reaction_conflict` is raised.
        """
        await self._get_or_raise(video_id)
        user_id = str(user['_id'])
        step = transition(
            state_of(video_id,
                     user.get(LIKED, []),
                     user.get(DISLIKED, [])),
            reaction,
        )
        moved = await self.users.apply_reaction(user_id, video_id, step)
        if not moved:
            logger.warning('reaction_conflict',
                           extra={'video_id': video_id, 'user_id': user_id})
            raise RuntimeError('reaction_conflict')
        try:
            await self.repo.apply_counter_delta(
                video_id, LIKES, step.like_delta)
            await self.repo.apply_counter_delta(
                video_id, DISLIKES, step.dislike_delta)
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_video_reaction_error: {error}') from error
        logger.info(
            'video_reaction',
            extra={
                'video_id': video_id,
                'user_id': user_id,
                'reaction': reaction.value,
                'before': step.before.value,
                'after': step.after.value,
            },
        )
        return to_video_dto(await self._get_or_raise(video_id))

    async def like_video(
            self,
            user: Dict[str, Any],
            video_id: str) -> VideoDto:
        """Toggle a like for the caller."""
        return await self.react(user, video_id, Reaction.LIKE)

    async def dislike_video(
            self,
            user: Dict[str, Any],
            video_id: str) -> VideoDto:
        """Toggle a dislike for the caller."""
        return await self.react(user, video_id, Reaction.DISLIKE)

    # ---------- COMMENTS ----------

    async def add_comment(
            self,
            user: Dict[str, Any],
            video_id: str,
            data: CommentCreateRequest) -> CommentDto:
        """Append a comment authored by the caller."""
        comment = {
            'text': data.comment_text,
            'author_id': str(user['_id']),
            'created_at': datetime.now(timezone.utc),
        }
        try:
            pushed = await self.repo.push_comment(video_id, comment)
        except PyMongoError as error:
            raise RuntimeError(
                f'mongo_comment_create_error: {error}') from error
        if not pushed:
            raise RuntimeError('video_not_found')
        logger.info('comment_added',
                    extra={'video_id': video_id,
                           'author_id': comment['author_id']})
        return to_comment_dto(comment)

    async def list_comments(self, video_id: str) -> List[CommentDto]:
        """Return the comments of a video in insertion order."""
        doc = await self._get_or_raise(video_id)
        return [to_comment_dto(c) for c in doc.get('comments', [])]
