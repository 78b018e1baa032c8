from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import logging
import secrets
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.flow_logging import flow_info
from app.core.security.passwords import hash_password, verify_password
from app.models.files import FileShare, StoredFile
from app.services.object_storage import (
    ObjectListing,
    ObjectStorage,
    StorageError,
    StoredObject,
)

logger = logging.getLogger(__name__)


@dataclass
class ShareLinkFailure(Exception):
    code: str
    message: str
    status_code: int = 400

    def __str__(self) -> str:
        return self.message


@dataclass
class DownloadHandle:
    file: StoredFile
    obj: StoredObject


class FileShareService:
    def __init__(self, db: Session, storage: ObjectStorage):
        self.db = db
        self.storage = storage

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)

    @staticmethod
    def _new_share_id() -> str:
        return secrets.token_urlsafe(16)

    @staticmethod
    def _as_naive_utc(value: datetime | None) -> datetime | None:
        if value is None or value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def _require_file(self, file_key: str) -> StoredFile:
        file = self.db.get(StoredFile, file_key)
        if file is None:
            raise ShareLinkFailure(code="FILE_NOT_FOUND", message="File not found", status_code=404)
        return file

    # files

    def upload(
        self,
        *,
        filename: str,
        data: bytes,
        content_type: str | None,
        password: str | None = None,
    ) -> StoredFile:
        filename = (filename or "").strip()
        if not filename:
            raise ShareLinkFailure(code="NO_FILE", message="No file provided", status_code=400)

        # objects are stored under the original filename, the row gets its own key
        try:
            self.storage.put_object(filename, data, content_type=content_type)
        except StorageError as exc:
            raise ShareLinkFailure(code="UPLOAD_FAILED", message=str(exc), status_code=500) from exc

        record = StoredFile(
            file_key=str(uuid.uuid4()),
            nama_file=filename,
            password_hash=hash_password(password) if password else None,
            content_type=content_type,
            size=len(data),
        )
        self.db.add(record)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("file_record_insert_failed name=%s", filename)
            try:
                self.storage.delete_object(filename)
            except StorageError:
                logger.warning("file_upload_cleanup_failed name=%s", filename)
            raise ShareLinkFailure(
                code="UPLOAD_FAILED",
                message="Failed to record uploaded file",
                status_code=500,
            ) from exc

        self.db.refresh(record)
        flow_info(
            logger,
            "file_uploaded file_key=%s name=%s size=%s protected=%s",
            record.file_key,
            record.nama_file,
            record.size,
            record.password_hash is not None,
            category="files",
        )
        return record

    def list_files(self) -> list[StoredFile]:
        stmt = select(StoredFile).order_by(StoredFile.created_at.desc(), StoredFile.nama_file)
        return list(self.db.execute(stmt).scalars().all())

    def open_download(self, file_key: str, password: str | None = None) -> DownloadHandle:
        file = self._require_file(file_key)
        if file.password_hash:
            if not password:
                raise ShareLinkFailure(
                    code="PASSWORD_REQUIRED",
                    message="Password required for this file",
                    status_code=401,
                )
            if not verify_password(password, file.password_hash):
                raise ShareLinkFailure(code="BAD_PASSWORD", message="Incorrect password", status_code=401)

        try:
            obj = self.storage.get_object(file.nama_file)
        except StorageError as exc:
            logger.exception("file_download_failed file_key=%s", file_key)
            raise ShareLinkFailure(code="DOWNLOAD_FAILED", message=str(exc), status_code=500) from exc
        return DownloadHandle(file=file, obj=obj)

    def delete_file(self, file_key: str) -> None:
        file = self._require_file(file_key)
        try:
            self.storage.delete_object(file.nama_file)
        except StorageError as exc:
            raise ShareLinkFailure(code="DELETE_FAILED", message=str(exc), status_code=500) from exc
        self.db.delete(file)
        self.db.commit()
        flow_info(logger, "file_deleted file_key=%s", file_key, category="files")

    # folders

    def create_folder(self, folder_name: str, prefix: str = "") -> str:
        name = (folder_name or "").strip().strip("/")
        if not name:
            raise ShareLinkFailure(code="NO_FOLDER_NAME", message="Folder name is required", status_code=400)
        key = f"{prefix or ''}{name}/"
        try:
            self.storage.put_object(key, b"", content_type="application/x-directory")
        except StorageError as exc:
            raise ShareLinkFailure(code="FOLDER_FAILED", message=str(exc), status_code=500) from exc
        return key

    def list_folder(self, prefix: str = "") -> ObjectListing:
        try:
            return self.storage.list_prefix(prefix or "")
        except StorageError as exc:
            raise ShareLinkFailure(code="LIST_FAILED", message=str(exc), status_code=500) from exc

    # share links

    def create_share(self, file_key: str, expires_at: datetime | None) -> tuple[FileShare, StoredFile]:
        file = self._require_file(file_key)
        share = FileShare(
            id=self._new_share_id(),
            file_key=file.file_key,
            created_at=self._now(),
            expires_at=self._as_naive_utc(expires_at),
        )
        self.db.add(share)
        self.db.commit()
        self.db.refresh(share)
        flow_info(
            logger,
            "share_created share_id=%s file_key=%s expires_at=%s",
            share.id,
            file.file_key,
            share.expires_at,
            category="files",
        )
        return share, file

    def create_default_share(self, file_key: str) -> tuple[FileShare, StoredFile]:
        expires_at = self._now() + timedelta(days=settings.SHARE_DEFAULT_TTL_DAYS)
        return self.create_share(file_key, expires_at)

    def _live_share(self, share_id: str) -> FileShare:
        share = self.db.get(FileShare, share_id)
        if share is None:
            raise ShareLinkFailure(code="SHARE_NOT_FOUND", message="Share link not found", status_code=404)
        if share.expires_at is not None and share.expires_at <= self._now():
            self.db.delete(share)
            self.db.commit()
            flow_info(logger, "share_expired_removed share_id=%s", share_id, category="files")
            raise ShareLinkFailure(code="SHARE_EXPIRED", message="Share link has expired", status_code=404)
        return share

    def _check_share_password(self, file: StoredFile, password: str | None) -> None:
        if not file.password_hash:
            return
        if not password:
            raise ShareLinkFailure(
                code="PASSWORD_REQUIRED",
                message="Password required for this file",
                status_code=401,
            )
        if not verify_password(password, file.password_hash):
            raise ShareLinkFailure(code="BAD_PASSWORD", message="Invalid password", status_code=401)

    def resolve_share(self, share_id: str, password: str | None = None) -> str:
        """Presigned download URL for a live share link."""
        share = self._live_share(share_id)
        self._check_share_password(share.file, password)
        try:
            return self.storage.presigned_get_url(share.file.nama_file)
        except StorageError as exc:
            logger.exception("share_sign_failed share_id=%s", share_id)
            raise ShareLinkFailure(code="SIGN_FAILED", message=str(exc), status_code=500) from exc

    def verify_share_password(self, share_id: str, password: str | None) -> str:
        share = self._live_share(share_id)
        if not share.file.password_hash:
            return "No password required"
        self._check_share_password(share.file, password)
        return "Password verified"

    def list_shares(self) -> list[FileShare]:
        stmt = select(FileShare).order_by(FileShare.created_at.desc(), FileShare.id)
        return list(self.db.execute(stmt).scalars().all())

    def delete_share(self, share_id: str) -> bool:
        share = self.db.get(FileShare, share_id)
        if share is None:
            return False
        self.db.delete(share)
        self.db.commit()
        return True
