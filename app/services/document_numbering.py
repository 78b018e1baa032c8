from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.flow_logging import flow_info
from app.core.numbering.catalog import DOCON_CONFIG
from app.models.docon import DoconDocument

logger = logging.getLogger(__name__)


class NumberingError(Exception):
    """Raised when the serial allocation query cannot be answered."""


@dataclass(frozen=True)
class DocumentKey:
    """The five-part combination that owns a serial sequence."""

    contract_code: str
    document_type: str
    discipline: str
    location: str
    work_system: str

    @classmethod
    def from_document(cls, doc: DoconDocument) -> "DocumentKey":
        return cls(
            contract_code=doc.contract_code,
            document_type=doc.document_type,
            discipline=doc.discipline,
            location=doc.location,
            work_system=doc.work_system,
        )

    def canonical(self) -> "DocumentKey":
        """Same combination with location as 2 digits and work system without leading zeros."""
        return DocumentKey(
            contract_code=(self.contract_code or "").strip(),
            document_type=(self.document_type or "").strip(),
            discipline=(self.discipline or "").strip(),
            location=canonical_location(self.location),
            work_system=canonical_work_system(self.work_system),
        )

    def is_complete(self) -> bool:
        return all(
            (value or "").strip()
            for value in (
                self.contract_code,
                self.document_type,
                self.discipline,
                self.location,
                self.work_system,
            )
        )

    def clauses(self) -> list:
        return [
            DoconDocument.contract_code == self.contract_code,
            DoconDocument.document_type == self.document_type,
            DoconDocument.discipline == self.discipline,
            DoconDocument.location == self.location,
            DoconDocument.work_system == self.work_system,
        ]


@dataclass
class SerialAllocation:
    serial_number: str
    is_new_combination: bool
    is_fallback: bool = False

    @property
    def message(self) -> str:
        if self.is_new_combination:
            return "New combination - starting from beginning"
        return "Existing combination - incrementing"


@dataclass
class UniquenessResult:
    valid: bool
    error: str | None = None


def start_number_for_type(document_type: str) -> int:
    if (document_type or "").strip().upper() in DOCON_CONFIG["exception_types"]:
        return DOCON_CONFIG["exception_serial_start"]
    return DOCON_CONFIG["default_serial_start"]


def format_serial(num: int, width: int | None = None) -> str:
    return str(int(num)).zfill(width or DOCON_CONFIG["serial_width"])


def parse_serial(value: str | None) -> int | None:
    text = (value or "").strip()
    if not text.isdigit():
        return None
    return int(text)


def canonical_location(value: str | None) -> str:
    text = (value or "").strip()
    if not text.isdigit():
        return text
    return str(int(text)).zfill(DOCON_CONFIG["location_width"])


def canonical_work_system(value: str | None) -> str:
    text = (value or "").strip()
    if not text.isdigit():
        return text
    return str(int(text))


def format_location_work_system(location: str, work_system: str) -> str:
    """'05', '03' -> '5.3'. Raises ValueError for non-numeric parts."""
    return f"{int(location)}{DOCON_CONFIG['serial_separator']}{int(work_system)}"


def build_document_number(key: DocumentKey, serial_number: str, revision_number: str) -> str:
    sep = DOCON_CONFIG["separator"]
    parts = [
        key.contract_code,
        key.document_type,
        key.discipline,
        format_location_work_system(key.location, key.work_system),
        serial_number,
        str(revision_number),
    ]
    return sep.join(parts)


def validate_work_system(work_system: str) -> bool:
    try:
        value = int(str(work_system).strip())
    except ValueError:
        return False
    return 1 <= value <= 99


def _revision_sort_key(doc: DoconDocument) -> tuple:
    text = (doc.revision_number or "").strip()
    if text.isdigit():
        return (1, int(text), "")
    return (0, 0, text)


class DocumentNumberingService:
    @staticmethod
    def next_serial(db: Session, key: DocumentKey) -> SerialAllocation:
        """
        Find-max-then-increment over documents sharing the five-part key.

        Serials are compared numerically, so '1000' follows '999'. Stored
        serials that are not plain digits are skipped.
        """
        stmt = select(DoconDocument.serial_number).where(*key.clauses())
        try:
            serials = db.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            raise NumberingError(f"Failed to query documents: {exc}") from exc

        numbers = [n for n in (parse_serial(s) for s in serials) if n is not None]
        if not numbers:
            allocation = SerialAllocation(
                serial_number=format_serial(start_number_for_type(key.document_type)),
                is_new_combination=True,
            )
        else:
            allocation = SerialAllocation(
                serial_number=format_serial(max(numbers) + 1),
                is_new_combination=False,
            )

        flow_info(
            logger,
            "serial_allocated key=%s serial=%s new_combination=%s",
            key,
            allocation.serial_number,
            allocation.is_new_combination,
            category="numbering",
        )
        return allocation

    @staticmethod
    def preview_next_serial(db: Session, key: DocumentKey) -> SerialAllocation:
        """Like next_serial, but never fails: query errors fall back to the type's first serial."""
        try:
            return DocumentNumberingService.next_serial(db, key)
        except NumberingError as exc:
            logger.warning("serial_preview_fallback key=%s error=%s", key, exc)
            return SerialAllocation(
                serial_number=format_serial(start_number_for_type(key.document_type)),
                is_new_combination=True,
                is_fallback=True,
            )

    @staticmethod
    def validate_uniqueness(
        db: Session,
        key: DocumentKey,
        serial_number: str,
        revision_number: str,
        exclude_id: int | None = None,
    ) -> UniquenessResult:
        same_parts = and_(
            *key.clauses(),
            DoconDocument.serial_number == serial_number,
            DoconDocument.revision_number == str(revision_number),
        )
        try:
            # rows stored under another spelling of the key still print the same number
            same_number = DoconDocument.document_number == build_document_number(
                key, serial_number, revision_number
            )
            condition = or_(same_parts, same_number)
        except ValueError:
            condition = same_parts
        stmt = select(DoconDocument.id, DoconDocument.document_number).where(condition)
        if exclude_id is not None:
            stmt = stmt.where(DoconDocument.id != exclude_id)

        try:
            existing = db.execute(stmt).first()
        except SQLAlchemyError as exc:
            return UniquenessResult(valid=False, error=f"Database error: {exc}")

        if existing is not None:
            return UniquenessResult(
                valid=False,
                error=f"Duplicate document number: {existing.document_number} already exists",
            )
        return UniquenessResult(valid=True)

    @staticmethod
    def is_serial_available(db: Session, key: DocumentKey, serial_number: str) -> bool:
        stmt = (
            select(func.count(DoconDocument.id))
            .where(*key.clauses())
            .where(DoconDocument.serial_number == serial_number)
        )
        try:
            count = db.execute(stmt).scalar_one()
        except SQLAlchemyError:
            logger.exception("serial_availability_check_failed key=%s serial=%s", key, serial_number)
            return False
        return (count or 0) == 0

    @staticmethod
    def list_revisions(db: Session, key: DocumentKey, serial_number: str) -> list[DoconDocument]:
        """All revisions of one document, highest revision first."""
        stmt = (
            select(DoconDocument)
            .where(*key.clauses())
            .where(DoconDocument.serial_number == serial_number)
        )
        docs = list(db.execute(stmt).scalars().all())
        return sorted(docs, key=_revision_sort_key, reverse=True)
