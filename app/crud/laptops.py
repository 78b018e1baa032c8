from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.models.laptop import Laptop
from app.schemas.laptops import LaptopCreate, LaptopUpdate


def create_laptop(db: Session, data: LaptopCreate) -> Laptop:
    obj = Laptop(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def get_laptop(db: Session, laptop_id: str) -> Laptop | None:
    return db.get(Laptop, laptop_id)


def list_laptops(db: Session, search: str | None = None) -> list[Laptop]:
    stmt = select(Laptop).order_by(Laptop.created_at.desc(), Laptop.name)
    if search:
        like = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Laptop.name.ilike(like),
                Laptop.assigned_user.ilike(like),
                Laptop.serial_number.ilike(like),
                Laptop.asset_number.ilike(like),
                Laptop.model_type.ilike(like),
                Laptop.no_bast.ilike(like),
            )
        )
    return list(db.execute(stmt).scalars().all())


def update_laptop(db: Session, laptop_id: str, data: LaptopUpdate) -> Laptop | None:
    obj = db.get(Laptop, laptop_id)
    if not obj:
        return None

    for k, v in data.model_dump(exclude_unset=True).items():
        setattr(obj, k, v)
    db.commit()
    db.refresh(obj)
    return obj


def set_laptop_image(db: Session, laptop: Laptop, url: str) -> Laptop:
    laptop.image_url = url
    db.commit()
    db.refresh(laptop)
    return laptop


def delete_laptop(db: Session, laptop_id: str) -> bool:
    obj = db.get(Laptop, laptop_id)
    if not obj:
        return False
    db.delete(obj)
    db.commit()
    return True
