from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.radio import Radio
from app.schemas.radios import RadioCreate, RadioUpdate


def create_radio(db: Session, data: RadioCreate) -> Radio:
    obj = Radio(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def get_radio(db: Session, radio_id: int) -> Radio | None:
    return db.get(Radio, radio_id)


def list_radios(db: Session, search: str | None = None) -> list[Radio]:
    query = db.query(Radio)
    if search:
        like = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Radio.nama_radio.ilike(like),
                Radio.serial_number.ilike(like),
                Radio.user_radio.ilike(like),
                Radio.tipe_radio.ilike(like),
                Radio.nomor_bast.ilike(like),
            )
        )
    return query.order_by(Radio.created_at.desc(), Radio.id.desc()).all()


def update_radio(db: Session, radio_id: int, data: RadioUpdate) -> Radio | None:
    obj = db.get(Radio, radio_id)
    if not obj:
        return None
    for k, v in data.model_dump(exclude_unset=True).items():
        setattr(obj, k, v)
    db.commit()
    db.refresh(obj)
    return obj


def delete_radio(db: Session, radio_id: int) -> bool:
    obj = db.get(Radio, radio_id)
    if not obj:
        return False
    db.delete(obj)
    db.commit()
    return True
