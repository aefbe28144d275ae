"""Object storage for uploaded videos and thumbnails (S3 API)."""

from __future__ import annotations

import logging
import os
import uuid
from typing import Any, Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from video_api.core.config import settings

logger = logging.getLogger(__name__)


class ObjectStorage(Protocol):
    async def upload(
            self,
            content: bytes,
            filename: Optional[str],
            content_type: Optional[str]) -> str:
        ...


def object_key(filename: Optional[str]) -> str:
    """Collision-free key that keeps the original file extension."""
    _, ext = os.path.splitext(filename or '')
    return f'{uuid.uuid4().hex}{ext.lower()}'


class S3Storage:
    """Uploads bytes with boto3 and returns a public URL for the object."""

    def __init__(
        self,
        client: Any,
        bucket: str,
        public_base_url: str,
        public_read: bool = True,
    ) -> None:
        self.client = client
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip('/')
        self.public_read = public_read

    def put(
            self,
            content: bytes,
            filename: Optional[str],
            content_type: Optional[str]) -> str:
        """Blocking upload; returns the public URL of the stored object."""
        key = object_key(filename)
        params = {
            'Bucket': self.bucket,
            'Key': key,
            'Body': content,
            'ContentLength': len(content),
            'ContentType': content_type or 'application/octet-stream',
        }
        if self.public_read:
            params['ACL'] = 'public-read'
        try:
            self.client.put_object(**params)
        except (ClientError, BotoCoreError) as error:
            logger.error('storage_upload_failed',
                         extra={'key': key, 'bucket': self.bucket})
            raise RuntimeError(f'storage_upload_error: {error}') from error
        logger.info('storage_object_stored',
                    extra={'key': key, 'size': len(content)})
        return f'{self.public_base_url}/{key}'

    async def upload(
            self,
            content: bytes,
            filename: Optional[str],
            content_type: Optional[str]) -> str:
        return await run_in_threadpool(self.put, content, filename,
                                       content_type)


def build_s3_client():
    kwargs: dict[str, Any] = {'region_name': settings.s3_region}
    if settings.s3_endpoint_url:
        kwargs['endpoint_url'] = settings.s3_endpoint_url
    if settings.s3_access_key_id and settings.s3_secret_access_key:
        kwargs['aws_access_key_id'] = settings.s3_access_key_id
        kwargs['aws_secret_access_key'] = settings.s3_secret_access_key
    return boto3.client('s3', **kwargs)


_storage: Optional[S3Storage] = None


def get_s3_storage() -> S3Storage:
    global _storage
    if _storage is None:
        _storage = S3Storage(
            build_s3_client(),
            bucket=settings.s3_bucket,
            public_base_url=settings.public_base_url,
            public_read=settings.s3_public_read,
        )
    return _storage
