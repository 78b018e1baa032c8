from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud.errors import DuplicateError
from app.models.voucher import Voucher
from app.schemas.vouchers import VoucherCreate, VoucherUpdate


def create_voucher(db: Session, data: VoucherCreate) -> Voucher:
    if db.get(Voucher, data.kode_voucher) is not None:
        raise DuplicateError(f"Voucher {data.kode_voucher} already exists.")

    obj = Voucher(**data.model_dump())
    db.add(obj)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError(f"Voucher {data.kode_voucher} already exists.") from e
    db.refresh(obj)
    return obj


def get_voucher(db: Session, kode_voucher: str) -> Voucher | None:
    return db.get(Voucher, kode_voucher)


def list_vouchers(
    db: Session,
    search: str | None = None,
    status: str | None = None,
) -> list[Voucher]:
    stmt = select(Voucher).order_by(Voucher.dibuat_pada.desc(), Voucher.kode_voucher)
    if status:
        stmt = stmt.where(Voucher.status == status)
    if search:
        like = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Voucher.kode_voucher.ilike(like),
                Voucher.nama_user.ilike(like),
                Voucher.divisi.ilike(like),
            )
        )
    return list(db.execute(stmt).scalars().all())


def update_voucher(db: Session, kode_voucher: str, data: VoucherUpdate) -> Voucher | None:
    obj = db.get(Voucher, kode_voucher)
    if not obj:
        return None
    for k, v in data.model_dump(exclude_unset=True).items():
        setattr(obj, k, v)
    db.commit()
    db.refresh(obj)
    return obj


def update_voucher_status(db: Session, kode_voucher: str, status: str) -> Voucher | None:
    obj = db.get(Voucher, kode_voucher)
    if not obj:
        return None
    obj.status = status
    db.commit()
    db.refresh(obj)
    return obj


def delete_voucher(db: Session, kode_voucher: str) -> bool:
    obj = db.get(Voucher, kode_voucher)
    if not obj:
        return False
    db.delete(obj)
    db.commit()
    return True
