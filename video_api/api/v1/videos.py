from http import HTTPStatus
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, File, Form, UploadFile

from video_api.api.http_utils import handle_runtime_errors
from video_api.dependencies import get_current_user, get_videos_service
from video_api.models.comments import CommentCreateRequest, CommentDto
from video_api.models.videos import (
    ThumbnailUploadResponse,
    UploadVideoResponse,
    VideoDto,
    VideoUpdateRequest,
)
from video_api.services.videos_service import VideosService

router = APIRouter(prefix="/api/videos", tags=["videos"])


@router.post("", response_model=UploadVideoResponse,
             status_code=HTTPStatus.CREATED)
@handle_runtime_errors()
async def upload_video(
    file: UploadFile = File(...),
    user: Dict[str, Any] = Depends(get_current_user),
    svc: VideosService = Depends(get_videos_service),
):
    content = await file.read()
    return await svc.upload_video(user, content,
                                  file.filename, file.content_type)


@router.post("/thumbnail", response_model=ThumbnailUploadResponse,
             status_code=HTTPStatus.CREATED)
@handle_runtime_errors()
async def upload_thumbnail(
    file: UploadFile = File(...),
    video_id: str = Form(...),
    user: Dict[str, Any] = Depends(get_current_user),
    svc: VideosService = Depends(get_videos_service),
):
    content = await file.read()
    return await svc.upload_thumbnail(video_id, content,
                                      file.filename, file.content_type)


@router.put("", response_model=VideoDto, status_code=HTTPStatus.OK)
@handle_runtime_errors()
async def edit_video_metadata(
    body: VideoUpdateRequest,
    user: Dict[str, Any] = Depends(get_current_user),
    svc: VideosService = Depends(get_videos_service),
):
    """Update the metadata fields present in the body; omitted ones are kept."""
    return await svc.edit_video(body)


@router.get("", response_model=List[VideoDto], status_code=HTTPStatus.OK)
@handle_runtime_errors()
async def list_videos(
    user: Dict[str, Any] = Depends(get_current_user),
    svc: VideosService = Depends(get_videos_service),
):
    return await svc.list_videos()


@router.get("/liked", response_model=List[VideoDto],
            status_code=HTTPStatus.OK)
@handle_runtime_errors()
async def liked_videos(
    user: Dict[str, Any] = Depends(get_current_user),
    svc: VideosService = Depends(get_videos_service),
):
    return await svc.liked_videos(user)


@router.get("/disliked", response_model=List[VideoDto],
            status_code=HTTPStatus.OK)
@handle_runtime_errors()
async def disliked_videos(
    user: Dict[str, Any] = Depends(get_current_user),
    svc: VideosService = Depends(get_videos_service),
):
    return await svc.disliked_videos(user)


@router.get("/history", response_model=List[VideoDto],
            status_code=HTTPStatus.OK)
@handle_runtime_errors()
async def history_videos(
    user: Dict[str, Any] = Depends(get_current_user),
    svc: VideosService = Depends(get_videos_service),
):
    return await svc.history_videos(user)


@router.get("/{video_id}", response_model=VideoDto,
            status_code=HTTPStatus.OK)
@handle_runtime_errors()
async def get_video_details(
    video_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    svc: VideosService = Depends(get_videos_service),
):
    return await svc.get_video_details(user, video_id)


@router.post("/{video_id}/like", response_model=VideoDto,
             status_code=HTTPStatus.OK)
@handle_runtime_errors()
async def like_video(
    video_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    svc: VideosService = Depends(get_videos_service),
):
    return await svc.like_video(user, video_id)


@router.post("/{video_id}/dislike", response_model=VideoDto,
             status_code=HTTPStatus.OK)
@handle_runtime_errors()
async def dislike_video(
    video_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    svc: VideosService = Depends(get_videos_service),
):
    return await svc.dislike_video(user, video_id)


@router.post("/{video_id}/comment", response_model=CommentDto,
             status_code=HTTPStatus.CREATED)
@handle_runtime_errors()
async def add_comment(
    video_id: str,
    body: CommentCreateRequest,
    user: Dict[str, Any] = Depends(get_current_user),
    svc: VideosService = Depends(get_videos_service),
):
    return await svc.add_comment(user, video_id, body)


@router.get("/{video_id}/comments", response_model=List[CommentDto],
            status_code=HTTPStatus.OK)
@handle_runtime_errors()
async def list_comments(
    video_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    svc: VideosService = Depends(get_videos_service),
):
    return await svc.list_comments(video_id)
