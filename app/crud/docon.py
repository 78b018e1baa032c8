from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud.errors import DuplicateError
from app.models.docon import DoconDocument, DoconDocumentFile, DoconRevisionHistory
from app.schemas.docon import DocumentFileCreate, DoconDocumentCreate, DoconDocumentUpdate
from app.services.document_numbering import (
    DocumentKey,
    DocumentNumberingService,
    build_document_number,
    validate_work_system,
)

logger = logging.getLogger(__name__)

NUMBER_PART_FIELDS = (
    "contract_code",
    "document_type",
    "discipline",
    "location",
    "work_system",
    "serial_number",
    "revision_number",
)

PLAIN_FIELDS = (
    "title",
    "pic",
    "date_received",
    "transmittal_no",
    "submission_status",
    "document_workflow_status",
    "revision_review_code",
    "remarks",
)


class DocumentValidationError(Exception):
    """Rejected document input (bad work system, duplicate number, ...)."""


@dataclass
class DoconFilters:
    contract_code: str | None = None
    document_type: str | None = None
    discipline: str | None = None
    location: str | None = None
    work_system: str | None = None
    submission_status: str | None = None
    document_workflow_status: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    search: str | None = None

    def has_key_filter(self) -> bool:
        return any(
            (self.contract_code, self.document_type, self.discipline, self.location, self.work_system)
        )


def _apply_filters(stmt, filters: DoconFilters):
    for field in (
        "contract_code",
        "document_type",
        "discipline",
        "location",
        "work_system",
        "submission_status",
        "document_workflow_status",
    ):
        value = getattr(filters, field)
        if value:
            stmt = stmt.where(getattr(DoconDocument, field) == value)

    if filters.date_from:
        stmt = stmt.where(DoconDocument.date_received >= filters.date_from)
    if filters.date_to:
        stmt = stmt.where(DoconDocument.date_received <= filters.date_to)

    # free-text search only applies to an unscoped list
    search = (filters.search or "").strip()
    if search and not filters.has_key_filter():
        like = f"%{search}%"
        stmt = stmt.where(
            or_(
                DoconDocument.document_number.ilike(like),
                DoconDocument.title.ilike(like),
                DoconDocument.pic.ilike(like),
                DoconDocument.transmittal_no.ilike(like),
            )
        )
    return stmt


def list_documents(
    db: Session,
    filters: DoconFilters,
    limit: int = 100,
    offset: int = 0,
) -> list[tuple[DoconDocument, int, int]]:
    """Rows of (document, file_count, revision_count), newest first."""
    file_count = (
        select(func.count(DoconDocumentFile.id))
        .where(DoconDocumentFile.document_id == DoconDocument.id)
        .correlate(DoconDocument)
        .scalar_subquery()
    )
    revision_count = (
        select(func.count(DoconRevisionHistory.id))
        .where(DoconRevisionHistory.document_id == DoconDocument.id)
        .correlate(DoconDocument)
        .scalar_subquery()
    )
    stmt = select(
        DoconDocument,
        file_count.label("file_count"),
        revision_count.label("revision_count"),
    )
    stmt = _apply_filters(stmt, filters)
    stmt = stmt.order_by(DoconDocument.created_at.desc(), DoconDocument.id.desc())
    stmt = stmt.offset(offset).limit(limit)
    return [(row[0], row[1] or 0, row[2] or 0) for row in db.execute(stmt).all()]


def list_documents_for_export(db: Session, filters: DoconFilters) -> list[DoconDocument]:
    stmt = _apply_filters(select(DoconDocument), filters)
    stmt = stmt.order_by(DoconDocument.created_at.desc(), DoconDocument.id.desc())
    return list(db.execute(stmt).scalars().all())


def get_document(db: Session, document_id: int) -> DoconDocument | None:
    return db.get(DoconDocument, document_id)


def _number_for(key: DocumentKey, serial_number: str, revision_number: str) -> str:
    if not validate_work_system(key.work_system):
        raise DocumentValidationError("Work system must be a number between 1 and 99.")
    try:
        return build_document_number(key, serial_number, revision_number)
    except ValueError as exc:
        raise DocumentValidationError("Location and work system must be numeric.") from exc


def create_document(db: Session, data: DoconDocumentCreate, actor: str | None = None) -> DoconDocument:
    key = DocumentKey(
        contract_code=data.contract_code,
        document_type=data.document_type,
        discipline=data.discipline,
        location=data.location,
        work_system=data.work_system,
    ).canonical()
    if not validate_work_system(key.work_system):
        raise DocumentValidationError("Work system must be a number between 1 and 99.")

    serial_number = (data.serial_number or "").strip()
    if not serial_number:
        serial_number = DocumentNumberingService.next_serial(db, key).serial_number
    revision_number = (data.revision_number or "").strip() or "0"

    document_number = _number_for(key, serial_number, revision_number)

    validation = DocumentNumberingService.validate_uniqueness(db, key, serial_number, revision_number)
    if not validation.valid:
        raise DocumentValidationError(validation.error or "Document number already exists")

    obj = DoconDocument(
        contract_code=key.contract_code,
        document_type=key.document_type,
        discipline=key.discipline,
        location=key.location,
        work_system=key.work_system,
        serial_number=serial_number,
        revision_number=revision_number,
        document_number=document_number,
        title=data.title,
        pic=data.pic,
        date_received=data.date_received,
        transmittal_no=data.transmittal_no,
        submission_status=data.submission_status or "Draft",
        document_workflow_status=data.document_workflow_status,
        revision_review_code=data.revision_review_code,
        remarks=data.remarks,
        previous_revision_id=data.previous_revision_id,
        created_by=data.created_by or actor,
    )
    obj.history.append(
        DoconRevisionHistory(
            revision_number=revision_number,
            revision_date=data.date_received,
            revised_by=data.pic,
            changes_description="Initial document creation",
        )
    )
    db.add(obj)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError(f"Duplicate document number: {document_number} already exists") from e
    db.refresh(obj)
    logger.info("docon_document_created id=%s number=%s", obj.id, obj.document_number)
    return obj


def update_document(
    db: Session,
    document_id: int,
    data: DoconDocumentUpdate,
    actor: str | None = None,
) -> DoconDocument | None:
    obj = db.get(DoconDocument, document_id)
    if not obj:
        return None

    patch = data.model_dump(exclude_unset=True)
    number_patch = {k: patch[k] for k in NUMBER_PART_FIELDS if patch.get(k)}
    is_revision_update = bool(
        number_patch.get("revision_number")
        and number_patch["revision_number"] != obj.revision_number
    )

    if number_patch:
        parts = {k: number_patch.get(k) or getattr(obj, k) for k in NUMBER_PART_FIELDS}
        key = DocumentKey(**{k: parts[k] for k in NUMBER_PART_FIELDS[:5]}).canonical()
        parts.update({k: getattr(key, k) for k in NUMBER_PART_FIELDS[:5]})
        document_number = _number_for(key, parts["serial_number"], parts["revision_number"])

        if document_number != obj.document_number:
            validation = DocumentNumberingService.validate_uniqueness(
                db,
                key,
                parts["serial_number"],
                parts["revision_number"],
                exclude_id=obj.id,
            )
            if not validation.valid:
                raise DocumentValidationError(validation.error or "Document number already exists")
            for k, v in parts.items():
                setattr(obj, k, v)
            obj.document_number = document_number

    for k in PLAIN_FIELDS:
        if k in patch:
            setattr(obj, k, patch[k])
    obj.updated_by = patch.get("updated_by") or actor

    if is_revision_update and patch.get("changes_description"):
        obj.history.append(
            DoconRevisionHistory(
                revision_number=number_patch["revision_number"],
                revision_date=patch.get("date_received") or date.today(),
                revised_by=patch.get("pic") or obj.updated_by,
                review_code=patch.get("revision_review_code"),
                review_comments=patch.get("review_comments"),
                reviewer_name=patch.get("reviewer_name"),
                review_date=patch.get("review_date"),
                changes_description=patch["changes_description"],
            )
        )

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError("Update violates the document number unique constraint.") from e

    db.refresh(obj)
    return obj


def delete_document(db: Session, document_id: int) -> bool:
    obj = db.get(DoconDocument, document_id)
    if not obj:
        return False
    db.delete(obj)
    db.commit()
    return True


def list_history(db: Session, document_id: int) -> list[DoconRevisionHistory]:
    stmt = (
        select(DoconRevisionHistory)
        .where(DoconRevisionHistory.document_id == document_id)
        .order_by(DoconRevisionHistory.created_at.desc(), DoconRevisionHistory.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


def list_document_files(db: Session, document_id: int) -> list[DoconDocumentFile]:
    stmt = (
        select(DoconDocumentFile)
        .where(DoconDocumentFile.document_id == document_id)
        .order_by(DoconDocumentFile.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


def add_document_file(
    db: Session,
    document_id: int,
    data: DocumentFileCreate,
    actor: str | None = None,
) -> DoconDocumentFile | None:
    doc = db.get(DoconDocument, document_id)
    if not doc:
        return None

    payload = data.model_dump()
    payload["uploaded_by"] = payload.get("uploaded_by") or actor
    obj = DoconDocumentFile(document_id=doc.id, **payload)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj
