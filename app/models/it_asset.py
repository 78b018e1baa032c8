import uuid
from datetime import date

from sqlalchemy import Date, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.mixins import TimestampMixin


class ItAsset(TimestampMixin, Base):
    __tablename__ = "it_assets"

    __table_args__ = (
        UniqueConstraint("nomor_asset", name="uq_it_assets_nomor_asset"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    nama: Mapped[str] = mapped_column(String(255), nullable=False)
    pic: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    serial_number: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    tanggal_diterima: Mapped[date] = mapped_column(Date, nullable=False)
    kategori: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    # e.g. LMA.1B/IT-NB/03.25/007, or a manually entered number
    nomor_asset: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    nomor_bast: Mapped[str | None] = mapped_column(String(255), nullable=True)
    keterangan: Mapped[str | None] = mapped_column(Text, nullable=True)
