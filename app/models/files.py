from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class StoredFile(Base):
    """File uploaded to object storage. The object key is the original filename."""

    __tablename__ = "files"

    file_key: Mapped[str] = mapped_column(String(36), primary_key=True)
    nama_file: Mapped[str] = mapped_column(String(500), nullable=False)
    # bcrypt hash; NULL means the file is not password protected
    password_hash: Mapped[str | None] = mapped_column("password", String(255), nullable=True)
    content_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())

    shares: Mapped[list["FileShare"]] = relationship(
        back_populates="file",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class FileShare(Base):
    __tablename__ = "file_shares"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    file_key: Mapped[str] = mapped_column(
        ForeignKey("files.file_key", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
    # NULL means the link never expires
    expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    file: Mapped[StoredFile] = relationship(back_populates="shares")
