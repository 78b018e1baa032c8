from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps.request_identity import require_identity
from app.crud.errors import DuplicateError
from app.crud.it_assets import (
    create_it_asset,
    delete_it_asset,
    get_it_asset,
    list_it_assets,
    update_it_asset,
)
from app.db.session import get_db
from app.schemas.it_assets import ItAssetCreate, ItAssetOut, ItAssetUpdate, NextAssetNumberOut
from app.services.asset_numbering import asset_number_prefix, next_asset_number

router = APIRouter(
    prefix="/it-assets",
    tags=["it-assets"],
    dependencies=[Depends(require_identity)],
)


@router.get("/next-number", response_model=NextAssetNumberOut)
def next_number_api(
    kategori: str | None = Query(None),
    tanggal: date | None = Query(None),
    db: Session = Depends(get_db),
):
    if not kategori:
        raise HTTPException(status_code=400, detail="Kategori is required")
    next_number = next_asset_number(db, kategori)
    prefix = asset_number_prefix(kategori, tanggal or date.today())
    return NextAssetNumberOut(
        nextNumber=next_number,
        prefix=prefix,
        assetNumber=f"{prefix}{next_number}" if prefix else "",
    )


@router.get("", response_model=list[ItAssetOut])
def list_it_assets_api(
    search: str | None = Query(None),
    db: Session = Depends(get_db),
):
    return list_it_assets(db, search=search)


@router.post("", response_model=ItAssetOut, status_code=status.HTTP_201_CREATED)
def create_it_asset_api(payload: ItAssetCreate, db: Session = Depends(get_db)):
    try:
        return create_it_asset(db, payload)
    except DuplicateError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/{asset_id}", response_model=ItAssetOut)
def get_it_asset_api(asset_id: str, db: Session = Depends(get_db)):
    obj = get_it_asset(db, asset_id)
    if not obj:
        raise HTTPException(status_code=404, detail="IT asset not found")
    return obj


@router.put("/{asset_id}", response_model=ItAssetOut)
def update_it_asset_api(asset_id: str, payload: ItAssetUpdate, db: Session = Depends(get_db)):
    try:
        obj = update_it_asset(db, asset_id, payload)
    except DuplicateError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not obj:
        raise HTTPException(status_code=404, detail="IT asset not found")
    return obj


@router.delete("/{asset_id}")
def delete_it_asset_api(asset_id: str, db: Session = Depends(get_db)):
    ok = delete_it_asset(db, asset_id)
    if not ok:
        raise HTTPException(status_code=404, detail="IT asset not found")
    return {"success": True}
