from datetime import date, datetime

from sqlalchemy import Date, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base

VOUCHER_STATUSES = ("aktif", "digunakan", "kadaluarsa")


class Voucher(Base):
    """Locally tracked Wi-Fi voucher issued to a staff member."""

    __tablename__ = "voucher"

    kode_voucher: Mapped[str] = mapped_column(String(100), primary_key=True)
    nama_user: Mapped[str] = mapped_column(String(255), nullable=False)
    tipe_voucher: Mapped[str] = mapped_column(String(100), nullable=False)
    divisi: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # aktif | digunakan | kadaluarsa
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="aktif")
    tanggal_kadaluarsa: Mapped[date | None] = mapped_column(Date, nullable=True)

    dibuat_pada: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
