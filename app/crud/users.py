from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security.passwords import hash_password, verify_password
from app.crud.errors import DuplicateError
from app.models.users import User
from app.schemas.users import UserCreate, UserUpdate


def create_user(db: Session, data: UserCreate) -> User:
    obj = User(
        username=data.username.strip(),
        password_hash=hash_password(data.password),
        email=str(data.email) if data.email else None,
        name=data.name,
    )
    db.add(obj)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError("Username already exists.") from e
    db.refresh(obj)
    return obj


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> User | None:
    stmt = select(User).where(User.username == username)
    return db.execute(stmt).scalar_one_or_none()


def username_exists(db: Session, username: str, exclude_id: int | None = None) -> bool:
    stmt = select(func.count(User.id)).where(User.username == username)
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return (db.execute(stmt).scalar_one() or 0) > 0


def list_users(
    db: Session,
    skip: int = 0,
    limit: int = 50,
    search: str | None = None,
) -> list[User]:
    stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
    if search:
        like = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                User.username.ilike(like),
                User.email.ilike(like),
                User.name.ilike(like),
            )
        )
    stmt = stmt.offset(skip).limit(limit)
    return list(db.execute(stmt).scalars().all())


def update_user(db: Session, user_id: int, data: UserUpdate) -> User | None:
    obj = db.get(User, user_id)
    if not obj:
        return None

    # only apply fields that were provided
    patch = data.model_dump(exclude_unset=True)
    for k, v in patch.items():
        if k == "password":
            if v:
                obj.password_hash = hash_password(v)
            continue
        if k == "email" and v is not None:
            v = str(v)
        setattr(obj, k, v)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError("Update violates unique constraint.") from e

    db.refresh(obj)
    return obj


def delete_user(db: Session, user_id: int) -> bool:
    obj = db.get(User, user_id)
    if not obj:
        return False
    db.delete(obj)
    db.commit()
    return True


def authenticate(db: Session, username: str, password: str) -> User | None:
    user = get_user_by_username(db, username.strip())
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user
