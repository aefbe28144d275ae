from __future__ import annotations
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CommentCreateRequest(BaseModel):
    comment_text: str = Field(min_length=1, max_length=10_000)


class CommentDto(BaseModel):
    comment_text: str
    author_id: str
    created_at: Optional[datetime] = None
