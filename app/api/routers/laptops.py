import logging
import time

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.api.deps.request_identity import require_identity
from app.core.config import settings
from app.crud.laptops import (
    create_laptop,
    delete_laptop,
    get_laptop,
    list_laptops,
    set_laptop_image,
    update_laptop,
)
from app.db.session import get_db
from app.schemas.laptops import ImageUploadOut, LaptopCreate, LaptopOut, LaptopUpdate
from app.services.object_storage import ObjectStorage, StorageError, get_object_storage

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/laptops",
    tags=["laptops"],
    dependencies=[Depends(require_identity)],
)


@router.get("", response_model=list[LaptopOut])
def list_laptops_api(search: str | None = Query(None), db: Session = Depends(get_db)):
    return list_laptops(db, search=search)


@router.post("", response_model=LaptopOut, status_code=status.HTTP_201_CREATED)
def create_laptop_api(payload: LaptopCreate, db: Session = Depends(get_db)):
    return create_laptop(db, payload)


@router.get("/{laptop_id}", response_model=LaptopOut)
def get_laptop_api(laptop_id: str, db: Session = Depends(get_db)):
    obj = get_laptop(db, laptop_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Laptop not found")
    return obj


@router.put("/{laptop_id}", response_model=LaptopOut)
def update_laptop_api(laptop_id: str, payload: LaptopUpdate, db: Session = Depends(get_db)):
    obj = update_laptop(db, laptop_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Laptop not found")
    return obj


@router.delete("/{laptop_id}")
def delete_laptop_api(laptop_id: str, db: Session = Depends(get_db)):
    ok = delete_laptop(db, laptop_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Laptop not found")
    return {"success": True}


@router.post("/{laptop_id}/image", response_model=ImageUploadOut)
def upload_laptop_image_api(
    laptop_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
):
    laptop = get_laptop(db, laptop_id)
    if not laptop:
        raise HTTPException(status_code=404, detail="Laptop not found")

    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed")

    data = file.file.read()
    if len(data) > settings.LAPTOP_IMAGE_MAX_BYTES:
        limit_mb = settings.LAPTOP_IMAGE_MAX_BYTES // (1024 * 1024)
        raise HTTPException(status_code=400, detail=f"File size exceeds {limit_mb}MB limit")

    key = f"{settings.LAPTOP_IMAGE_PREFIX}/{laptop_id}/{int(time.time() * 1000)}_{file.filename}"
    try:
        url = storage.public_url(key)
        storage.put_object(key, data, content_type=file.content_type)
    except StorageError as e:
        logger.exception("laptop_image_upload_failed laptop_id=%s key=%s", laptop_id, key)
        raise HTTPException(status_code=500, detail=f"Failed to upload image: {e}")

    set_laptop_image(db, laptop, url)
    logger.info("laptop_image_uploaded laptop_id=%s key=%s size=%s", laptop_id, key, len(data))
    return ImageUploadOut(url=url)
