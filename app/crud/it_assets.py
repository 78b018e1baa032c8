from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud.errors import DuplicateError
from app.models.it_asset import ItAsset
from app.schemas.it_assets import ItAssetCreate, ItAssetUpdate

DUPLICATE_ASSET_MESSAGE = "Asset number already exists. Please use a unique asset number."


def create_it_asset(db: Session, data: ItAssetCreate) -> ItAsset:
    obj = ItAsset(**data.model_dump())
    db.add(obj)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError(DUPLICATE_ASSET_MESSAGE) from e
    db.refresh(obj)
    return obj


def get_it_asset(db: Session, asset_id: str) -> ItAsset | None:
    return db.get(ItAsset, asset_id)


def list_it_assets(db: Session, search: str | None = None) -> list[ItAsset]:
    stmt = select(ItAsset).order_by(ItAsset.created_at.desc(), ItAsset.nomor_asset.desc())
    if search:
        like = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                ItAsset.nama.ilike(like),
                ItAsset.pic.ilike(like),
                ItAsset.serial_number.ilike(like),
                ItAsset.kategori.ilike(like),
                ItAsset.nomor_asset.ilike(like),
                ItAsset.nomor_bast.ilike(like),
            )
        )
    return list(db.execute(stmt).scalars().all())


def update_it_asset(db: Session, asset_id: str, data: ItAssetUpdate) -> ItAsset | None:
    obj = db.get(ItAsset, asset_id)
    if not obj:
        return None

    for k, v in data.model_dump(exclude_unset=True).items():
        setattr(obj, k, v)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError(DUPLICATE_ASSET_MESSAGE) from e

    db.refresh(obj)
    return obj


def delete_it_asset(db: Session, asset_id: str) -> bool:
    obj = db.get(ItAsset, asset_id)
    if not obj:
        return False
    db.delete(obj)
    db.commit()
    return True
