from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class UserInfo(BaseModel):
    """Claims returned by the identity provider's userinfo endpoint."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None


class UserRegisterResponse(BaseModel):
    user_id: str
    created: bool


class SubscriptionResponse(BaseModel):
    ok: bool


class UserHistoryResponse(BaseModel):
    user_id: str
    video_ids: List[str]
