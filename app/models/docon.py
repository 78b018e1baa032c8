from datetime import date, datetime

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin


class DoconDocument(TimestampMixin, Base):
    """
    Controlled project document (drawings, letters, reports, ...).

    A document number is assembled from the five key columns plus the serial
    and revision; see app.services.document_numbering.
    """

    __tablename__ = "docon_documents"

    __table_args__ = (
        UniqueConstraint(
            "contract_code",
            "document_type",
            "discipline",
            "location",
            "work_system",
            "serial_number",
            "revision_number",
            name="uq_docon_documents_number_parts",
        ),
        Index(
            "ix_docon_documents_combination",
            "contract_code",
            "document_type",
            "discipline",
            "location",
            "work_system",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Numbering components
    contract_code: Mapped[str] = mapped_column(String(10), nullable=False)
    document_type: Mapped[str] = mapped_column(String(10), nullable=False)
    discipline: Mapped[str] = mapped_column(String(10), nullable=False)
    location: Mapped[str] = mapped_column(String(10), nullable=False)
    work_system: Mapped[str] = mapped_column(String(10), nullable=False)
    serial_number: Mapped[str] = mapped_column(String(10), nullable=False)
    revision_number: Mapped[str] = mapped_column(String(10), nullable=False, default="0")

    document_number: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    pic: Mapped[str] = mapped_column(String(255), nullable=False)
    date_received: Mapped[date] = mapped_column(Date, nullable=False)
    transmittal_no: Mapped[str | None] = mapped_column(String(100), nullable=True)

    submission_status: Mapped[str] = mapped_column(String(30), nullable=False, default="Draft")
    document_workflow_status: Mapped[str | None] = mapped_column(String(10), nullable=True)
    revision_review_code: Mapped[str | None] = mapped_column(String(5), nullable=True)

    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)

    previous_revision_id: Mapped[int | None] = mapped_column(
        ForeignKey("docon_documents.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    history: Mapped[list["DoconRevisionHistory"]] = relationship(
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="DoconRevisionHistory.id",
    )
    files: Mapped[list["DoconDocumentFile"]] = relationship(
        back_populates="document",
        cascade="all, delete-orphan",
    )


class DoconRevisionHistory(Base):
    __tablename__ = "docon_revision_history"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    document_id: Mapped[int] = mapped_column(
        ForeignKey("docon_documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    revision_number: Mapped[str] = mapped_column(String(10), nullable=False)
    revision_date: Mapped[date] = mapped_column(Date, nullable=False)
    revised_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    review_code: Mapped[str | None] = mapped_column(String(5), nullable=True)
    review_comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    review_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    changes_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())

    document: Mapped[DoconDocument] = relationship(back_populates="history")


class DoconDocumentFile(Base):
    __tablename__ = "docon_document_files"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    document_id: Mapped[int] = mapped_column(
        ForeignKey("docon_documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    file_key: Mapped[str] = mapped_column(String(255), nullable=False)
    file_name: Mapped[str] = mapped_column(String(500), nullable=False)
    file_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    file_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    file_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # current | previous | attachment
    file_category: Mapped[str] = mapped_column(String(20), nullable=False, default="current")

    uploaded_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
    uploaded_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    document: Mapped[DoconDocument] = relationship(back_populates="files")
