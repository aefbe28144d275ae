from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Optional, Set

from pydantic import BaseModel, Field


class VideoStatus(str, Enum):
    DRAFT = "DRAFT"
    PROCESSING = "PROCESSING"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"


class VideoDto(BaseModel):
    id: str
    user_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Set[str] = Field(default_factory=set)
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    video_status: VideoStatus = VideoStatus.DRAFT
    like_count: int = 0
    dislike_count: int = 0
    view_count: int = 0
    created_at: Optional[datetime] = None
    last_modified_at: Optional[datetime] = None


class VideoUpdateRequest(BaseModel):
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Set[str] = Field(default_factory=set)
    thumbnail_url: Optional[str] = None
    video_status: VideoStatus = VideoStatus.DRAFT


class UploadVideoResponse(BaseModel):
    video_id: str
    video_url: str


class ThumbnailUploadResponse(BaseModel):
    video_id: str
    thumbnail_url: str
