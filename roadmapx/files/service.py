# FILE: roadmapx/files/service.py
"""
File storage service: S3 objects plus a metadata row per file.

Object keys are `{user_id}/{uuid4}.{ext}`; the original filename is kept in
the row and, percent-encoded, in the object's metadata.
"""
import logging
from typing import List, Optional, Tuple
from urllib.parse import quote
from uuid import uuid4

from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from roadmapx.aws import s3_client
from roadmapx.config import DOWNLOAD_URL_EXPIRES, get_storage_settings
from roadmapx.files import models

logger = logging.getLogger(__name__)


class FileValidationError(Exception):
    """Upload rejected before reaching S3."""
    pass


class InvalidFileTypeError(FileValidationError):
    pass


class FileTooLargeError(FileValidationError):
    pass


class StorageError(Exception):
    """S3 request failed."""
    pass


def build_object_key(user_id: str, original_name: str) -> str:
    extension = original_name.rsplit(".", 1)[-1] if "." in original_name else "bin"
    return f"{user_id}/{uuid4()}.{extension}"


def object_url(bucket: str, region: str, key: str) -> str:
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


def validate_upload(content_type: Optional[str], size: int) -> None:
    settings = get_storage_settings()
    if content_type not in settings.allowed_mime_types:
        raise InvalidFileTypeError(content_type)
    if size > settings.max_file_size:
        raise FileTooLargeError(size)


def _discard_objects(bucket: str, keys: List[str]) -> None:
    """Best-effort removal of objects written by a failed upload."""
    for key in keys:
        try:
            s3_client().delete_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.warning("[files] Could not remove orphaned object %s: %s", key, e)


def upload_files(
    db: Session,
    user_id: str,
    uploads: List[Tuple[str, str, bytes]],
) -> List[models.File]:
    """
    Validate every (original_name, content_type, body), put the objects in S3,
    then record them in one commit.

    All or nothing: if any put (or the commit) fails, objects already written
    are removed and no rows are kept.

    Raises:
        InvalidFileTypeError / FileTooLargeError: rejected upload (nothing written)
        StorageError: S3 put failed
    """
    for _, content_type, body in uploads:
        validate_upload(content_type, len(body))

    settings = get_storage_settings()
    written = []
    for original_name, content_type, body in uploads:
        key = build_object_key(user_id, original_name)
        try:
            s3_client().put_object(
                Bucket=settings.bucket_name,
                Key=key,
                Body=body,
                ContentType=content_type,
                # S3 metadata values must be ASCII
                Metadata={"userId": user_id, "originalName": quote(original_name)},
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("[files] Upload of %s failed: %s", key, e)
            _discard_objects(settings.bucket_name, written)
            raise StorageError("Failed to upload file") from e
        written.append(key)

    records = [
        models.File(
            user_id=user_id,
            filename=key,
            original_name=original_name,
            mime_type=content_type,
            size=len(body),
            url=object_url(settings.bucket_name, settings.region, key),
        )
        for key, (original_name, content_type, body) in zip(written, uploads)
    ]
    db.add_all(records)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        _discard_objects(settings.bucket_name, written)
        raise

    for record in records:
        db.refresh(record)
        logger.info("[files] Stored %s (%d bytes) as %s", record.original_name, record.size, record.filename)
    return records


def list_files(db: Session, user_id: str) -> List[models.File]:
    return (
        db.query(models.File)
        .filter(models.File.user_id == user_id)
        .order_by(models.File.created_at.desc())
        .all()
    )


def get_file(db: Session, user_id: str, file_id: str) -> Optional[models.File]:
    return (
        db.query(models.File)
        .filter(models.File.id == file_id, models.File.user_id == user_id)
        .first()
    )


def get_download_url(record: models.File) -> str:
    settings = get_storage_settings()
    try:
        return s3_client().generate_presigned_url(
            "get_object",
            Params={"Bucket": settings.bucket_name, "Key": record.filename},
            ExpiresIn=DOWNLOAD_URL_EXPIRES,
        )
    except (BotoCoreError, ClientError) as e:
        raise StorageError("Failed to generate download URL") from e


def delete_file(db: Session, record: models.File) -> None:
    """Delete the object first; the row only goes once S3 confirms."""
    settings = get_storage_settings()
    try:
        s3_client().delete_object(Bucket=settings.bucket_name, Key=record.filename)
    except (BotoCoreError, ClientError) as e:
        logger.error("[files] Delete of %s failed: %s", record.filename, e)
        raise StorageError("Failed to delete file") from e
    db.delete(record)
    db.commit()
