from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Radio(Base):
    """Handheld radio register."""

    __tablename__ = "radio"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    nama_radio: Mapped[str] = mapped_column(String(255), nullable=False)
    tipe_radio: Mapped[str | None] = mapped_column(String(255), nullable=True)
    serial_number: Mapped[str] = mapped_column(String(255), nullable=False)
    user_radio: Mapped[str | None] = mapped_column(String(255), nullable=True)
    nomor_bast: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
