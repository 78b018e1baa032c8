from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db
from app.schemas.files import (
    FileListOut,
    FileOut,
    FileUploadOut,
    FolderCreate,
    FolderListOut,
    PasswordIn,
    ShareCreate,
    ShareOut,
)
from app.services.file_share_service import DownloadHandle, FileShareService, ShareLinkFailure
from app.services.object_storage import ObjectStorage, get_object_storage

router = APIRouter(prefix="/files", tags=["files"])


def get_file_share_service(
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
) -> FileShareService:
    return FileShareService(db, storage)


def _http_error(exc: ShareLinkFailure) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


def _share_url(request: Request, share_id: str) -> str:
    base = settings.PUBLIC_BASE_URL or str(request.base_url)
    return f"{base.rstrip('/')}/share/{share_id}"


def _attachment(handle: DownloadHandle) -> StreamingResponse:
    name = handle.file.nama_file
    ascii_name = name.encode("ascii", "ignore").decode() or "download"
    headers = {
        "Content-Disposition": f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(name)}"
    }
    if handle.obj.content_length is not None:
        headers["Content-Length"] = str(handle.obj.content_length)
    return StreamingResponse(
        handle.obj.body,
        media_type=handle.obj.content_type or handle.file.content_type or "application/octet-stream",
        headers=headers,
    )


@router.post("", response_model=FileUploadOut)
def upload_file_api(
    file: UploadFile = File(...),
    password: str | None = Form(None),
    service: FileShareService = Depends(get_file_share_service),
):
    data = file.file.read()
    try:
        record = service.upload(
            filename=file.filename or "",
            data=data,
            content_type=file.content_type,
            password=password or None,
        )
    except ShareLinkFailure as e:
        raise _http_error(e)
    return FileUploadOut(file_key=record.file_key, filename=record.nama_file, size=len(data))


@router.get("", response_model=FileListOut)
def list_files_api(service: FileShareService = Depends(get_file_share_service)):
    return FileListOut(
        files=[
            FileOut(
                file_key=f.file_key,
                nama_file=f.nama_file,
                has_password=bool(f.password_hash),
                created_at=f.created_at,
            )
            for f in service.list_files()
        ]
    )


@router.post("/folders")
def create_folder_api(
    payload: FolderCreate,
    service: FileShareService = Depends(get_file_share_service),
):
    try:
        key = service.create_folder(payload.folderName or "", payload.prefix)
    except ShareLinkFailure as e:
        raise _http_error(e)
    return {"message": "Folder created successfully", "folder": key}


@router.get("/folders", response_model=FolderListOut)
def list_folder_api(
    prefix: str = "",
    service: FileShareService = Depends(get_file_share_service),
):
    try:
        listing = service.list_folder(prefix)
    except ShareLinkFailure as e:
        raise _http_error(e)
    return FolderListOut(prefix=listing.prefix, folders=listing.folders, files=listing.files)


@router.get("/{file_key}/download")
def download_file_api(
    file_key: str,
    service: FileShareService = Depends(get_file_share_service),
):
    try:
        handle = service.open_download(file_key)
    except ShareLinkFailure as e:
        raise _http_error(e)
    return _attachment(handle)


@router.post("/{file_key}/download")
def download_protected_file_api(
    file_key: str,
    payload: PasswordIn,
    service: FileShareService = Depends(get_file_share_service),
):
    try:
        handle = service.open_download(file_key, password=payload.password)
    except ShareLinkFailure as e:
        raise _http_error(e)
    return _attachment(handle)


@router.delete("/{file_key}")
def delete_file_api(
    file_key: str,
    service: FileShareService = Depends(get_file_share_service),
):
    try:
        service.delete_file(file_key)
    except ShareLinkFailure as e:
        raise _http_error(e)
    return {"message": "File deleted successfully"}


@router.get("/{file_key}/share", response_model=ShareOut)
def share_file_default_api(
    file_key: str,
    request: Request,
    service: FileShareService = Depends(get_file_share_service),
):
    try:
        share, file = service.create_default_share(file_key)
    except ShareLinkFailure as e:
        raise _http_error(e)
    return ShareOut(
        shareUrl=_share_url(request, share.id),
        fileName=file.nama_file,
        requiresPassword=bool(file.password_hash),
    )


@router.post("/{file_key}/share", response_model=ShareOut)
def share_file_api(
    file_key: str,
    payload: ShareCreate,
    request: Request,
    service: FileShareService = Depends(get_file_share_service),
):
    try:
        share, file = service.create_share(file_key, payload.expiresAt)
    except ShareLinkFailure as e:
        raise _http_error(e)
    return ShareOut(
        shareUrl=_share_url(request, share.id),
        fileName=file.nama_file,
        requiresPassword=bool(file.password_hash),
    )
