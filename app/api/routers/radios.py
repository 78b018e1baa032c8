from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps.request_identity import require_identity
from app.crud.radios import create_radio, delete_radio, get_radio, list_radios, update_radio
from app.db.session import get_db
from app.schemas.radios import RadioCreate, RadioOut, RadioUpdate

router = APIRouter(
    prefix="/radios",
    tags=["radios"],
    dependencies=[Depends(require_identity)],
)


@router.get("", response_model=list[RadioOut])
def list_radios_api(search: str | None = Query(None), db: Session = Depends(get_db)):
    return list_radios(db, search=search)


@router.post("", response_model=RadioOut, status_code=status.HTTP_201_CREATED)
def create_radio_api(payload: RadioCreate, db: Session = Depends(get_db)):
    return create_radio(db, payload)


@router.get("/{radio_id}", response_model=RadioOut)
def get_radio_api(radio_id: int, db: Session = Depends(get_db)):
    obj = get_radio(db, radio_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Radio not found")
    return obj


@router.put("/{radio_id}", response_model=RadioOut)
def update_radio_api(radio_id: int, payload: RadioUpdate, db: Session = Depends(get_db)):
    obj = update_radio(db, radio_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Radio not found")
    return obj


@router.delete("/{radio_id}")
def delete_radio_api(radio_id: int, db: Session = Depends(get_db)):
    ok = delete_radio(db, radio_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Radio not found")
    return {"success": True}
