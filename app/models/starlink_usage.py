from datetime import date

from sqlalchemy import Date, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.mixins import TimestampMixin


class StarlinkUsage(TimestampMixin, Base):
    """Daily data usage (GB) reported per Starlink terminal."""

    __tablename__ = "starlink_usage"

    __table_args__ = (
        UniqueConstraint("tanggal", "unit_starlink", name="uq_starlink_usage_date_unit"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tanggal: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    unit_starlink: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    total_pemakaian: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=False
    )
