from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class FileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    file_key: str
    nama_file: str
    has_password: bool = False
    created_at: Optional[datetime] = None


class FileListOut(BaseModel):
    files: list[FileOut]


class FileUploadOut(BaseModel):
    message: str = "File uploaded successfully"
    file_key: str
    filename: str
    size: int


class PasswordIn(BaseModel):
    password: Optional[str] = None


class FolderCreate(BaseModel):
    folderName: Optional[str] = None
    prefix: str = ""


class FolderListOut(BaseModel):
    prefix: str
    folders: list[str]
    files: list[dict]


class ShareCreate(BaseModel):
    expiresAt: Optional[datetime] = None


class ShareOut(BaseModel):
    shareUrl: str
    fileName: str
    requiresPassword: bool


class SharedLinkOut(BaseModel):
    id: str
    file_key: str
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    file_name: Optional[str] = None


class SharedLinkListOut(BaseModel):
    sharedLinks: list[SharedLinkOut]
