from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud.errors import DuplicateError
from app.models.starlink_usage import StarlinkUsage


def _duplicate_message(unit: str, tanggal: date) -> str:
    return f'Duplicate entry: Unit "{unit}" already exists for date {tanggal.isoformat()}'


def find_usage(
    db: Session,
    tanggal: date,
    unit: str,
    exclude_id: int | None = None,
) -> StarlinkUsage | None:
    stmt = select(StarlinkUsage).where(
        StarlinkUsage.tanggal == tanggal,
        StarlinkUsage.unit_starlink == unit,
    )
    if exclude_id is not None:
        stmt = stmt.where(StarlinkUsage.id != exclude_id)
    return db.execute(stmt).scalars().first()


def list_usage(
    db: Session,
    start_date: date | None = None,
    end_date: date | None = None,
    unit: str | None = None,
    newest_first: bool = True,
) -> list[StarlinkUsage]:
    stmt = select(StarlinkUsage)
    if start_date:
        stmt = stmt.where(StarlinkUsage.tanggal >= start_date)
    if end_date:
        stmt = stmt.where(StarlinkUsage.tanggal <= end_date)
    if unit:
        stmt = stmt.where(StarlinkUsage.unit_starlink == unit)
    if newest_first:
        stmt = stmt.order_by(StarlinkUsage.tanggal.desc(), StarlinkUsage.unit_starlink)
    else:
        stmt = stmt.order_by(StarlinkUsage.tanggal, StarlinkUsage.unit_starlink)
    return list(db.execute(stmt).scalars().all())


def list_units(db: Session) -> list[str]:
    stmt = select(StarlinkUsage.unit_starlink).distinct().order_by(StarlinkUsage.unit_starlink)
    return list(db.execute(stmt).scalars().all())


def get_usage(db: Session, usage_id: int) -> StarlinkUsage | None:
    return db.get(StarlinkUsage, usage_id)


def create_usage(db: Session, tanggal: date, unit: str, total: float) -> StarlinkUsage:
    if find_usage(db, tanggal, unit) is not None:
        raise DuplicateError(_duplicate_message(unit, tanggal))

    obj = StarlinkUsage(tanggal=tanggal, unit_starlink=unit, total_pemakaian=total)
    db.add(obj)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError(_duplicate_message(unit, tanggal)) from e
    db.refresh(obj)
    return obj


def update_usage(db: Session, usage_id: int, patch: dict) -> StarlinkUsage | None:
    obj = db.get(StarlinkUsage, usage_id)
    if not obj:
        return None

    tanggal = patch.get("tanggal") or obj.tanggal
    unit = patch.get("unit_starlink") or obj.unit_starlink
    if find_usage(db, tanggal, unit, exclude_id=obj.id) is not None:
        raise DuplicateError(_duplicate_message(unit, tanggal))

    for k, v in patch.items():
        if v is not None:
            setattr(obj, k, v)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError(_duplicate_message(unit, tanggal)) from e
    db.refresh(obj)
    return obj


def delete_usage(db: Session, usage_id: int) -> bool:
    obj = db.get(StarlinkUsage, usage_id)
    if not obj:
        return False
    db.delete(obj)
    db.commit()
    return True
