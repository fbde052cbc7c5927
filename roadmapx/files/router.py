# file: roadmapx/files/router.py
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File as FastAPIFile
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from roadmapx.db import get_db
from roadmapx.auth import require_user
from roadmapx.config import MAX_FILES_PER_UPLOAD, get_storage_settings
from roadmapx.files import service, schemas
from roadmapx.users.models import User

router = APIRouter(prefix="/api/files", tags=["files"])


async def _read_upload(upload: UploadFile) -> bytes:
    """Read an upload, refusing to buffer more than the size limit plus one byte."""
    limit = get_storage_settings().max_file_size
    body = await upload.read(limit + 1)
    if len(body) > limit:
        raise HTTPException(status_code=413, detail="File too large")
    return body


def _store(db: Session, user: User, uploads: List[Tuple[UploadFile, bytes]]):
    try:
        return service.upload_files(
            db,
            user_id=user.id,
            uploads=[(upload.filename or "upload", upload.content_type, body) for upload, body in uploads],
        )
    except service.InvalidFileTypeError:
        raise HTTPException(status_code=400, detail="Invalid file type")
    except service.FileTooLargeError:
        raise HTTPException(status_code=413, detail="File too large")
    except service.StorageError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/upload", response_model=schemas.FileOut, status_code=201)
async def upload_file(
    file: Optional[UploadFile] = FastAPIFile(None),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")
    body = await _read_upload(file)
    records = await run_in_threadpool(_store, db, user, [(file, body)])
    return records[0]


@router.post("/upload-multiple", response_model=List[schemas.FileOut], status_code=201)
async def upload_multiple(
    files: Optional[List[UploadFile]] = FastAPIFile(None),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    if not files:
        raise HTTPException(status_code=400, detail="No files provided")
    if len(files) > MAX_FILES_PER_UPLOAD:
        raise HTTPException(status_code=400, detail=f"At most {MAX_FILES_PER_UPLOAD} files per upload")

    # Validate everything before the first object is written
    bodies = []
    for upload in files:
        body = await _read_upload(upload)
        try:
            service.validate_upload(upload.content_type, len(body))
        except service.InvalidFileTypeError:
            raise HTTPException(status_code=400, detail="Invalid file type")
        bodies.append(body)

    return await run_in_threadpool(_store, db, user, list(zip(files, bodies)))


@router.get("", response_model=List[schemas.FileOut])
def list_files(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return service.list_files(db, user.id)


@router.get("/{file_id}", response_model=schemas.FileOut)
def get_file(file_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    record = service.get_file(db, user.id, file_id)
    if not record:
        raise HTTPException(status_code=404, detail="File not found")
    return record


@router.get("/{file_id}/download", response_model=schemas.DownloadUrlOut)
def get_download_url(file_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    record = service.get_file(db, user.id, file_id)
    if not record:
        raise HTTPException(status_code=404, detail="File not found")
    try:
        return schemas.DownloadUrlOut(download_url=service.get_download_url(record))
    except service.StorageError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.delete("/{file_id}", status_code=204)
def delete_file(file_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    record = service.get_file(db, user.id, file_id)
    if not record:
        raise HTTPException(status_code=404, detail="File not found")
    try:
        service.delete_file(db, record)
    except service.StorageError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return None
