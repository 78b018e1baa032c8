from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.crud.errors import DuplicateError
from app.crud.vouchers import (
    create_voucher,
    delete_voucher,
    get_voucher,
    list_vouchers,
    update_voucher,
    update_voucher_status,
)
from app.db.session import get_db
from app.schemas.vouchers import (
    RuijieVoucherCreate,
    VoucherCreate,
    VoucherOut,
    VoucherStatusUpdate,
    VoucherUpdate,
)
from app.services import ruijie_client
from app.services.ruijie_client import RuijieApiError

router = APIRouter(prefix="/vouchers", tags=["vouchers"])


def _ruijie_error_response(exc: RuijieApiError) -> JSONResponse:
    content = {"error": str(exc)}
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


# Ruijie cloud passthrough


@router.get("")
def list_ruijie_vouchers_api(
    listId: str | None = Query(None),
    searchFirstName: str | None = Query(None),
    searchVoucherCode: str | None = Query(None),
):
    try:
        vouchers = ruijie_client.fetch_vouchers(listId)
    except RuijieApiError as e:
        return _ruijie_error_response(e)
    return ruijie_client.filter_vouchers(
        vouchers,
        first_name=searchFirstName,
        voucher_code=searchVoucherCode,
    )


@router.post("")
def create_ruijie_vouchers_api(
    payload: RuijieVoucherCreate,
    listId: str | None = Query(None),
):
    if not (payload.quantity and payload.profile and payload.userGroupId and payload.firstName):
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: quantity, profile, userGroupId, firstName",
        )
    body = {
        "quantity": payload.quantity,
        "profile": payload.profile,
        "userGroupId": payload.userGroupId,
        "firstName": payload.firstName,
        "comment": payload.comment or "",
    }
    try:
        return ruijie_client.create_vouchers(body, listId)
    except RuijieApiError as e:
        return _ruijie_error_response(e)


# Local voucher register


@router.get("/local", response_model=list[VoucherOut])
def list_local_vouchers_api(
    search: str | None = Query(None),
    voucher_status: str | None = Query(
        None, alias="status", pattern="^(aktif|digunakan|kadaluarsa)$"
    ),
    db: Session = Depends(get_db),
):
    return list_vouchers(db, search=search, status=voucher_status)


@router.post("/local", response_model=VoucherOut, status_code=status.HTTP_201_CREATED)
def create_local_voucher_api(payload: VoucherCreate, db: Session = Depends(get_db)):
    try:
        return create_voucher(db, payload)
    except DuplicateError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/local/{kode_voucher}", response_model=VoucherOut)
def get_local_voucher_api(kode_voucher: str, db: Session = Depends(get_db)):
    obj = get_voucher(db, kode_voucher)
    if not obj:
        raise HTTPException(status_code=404, detail="Voucher not found")
    return obj


@router.put("/local/{kode_voucher}", response_model=VoucherOut)
def update_local_voucher_api(
    kode_voucher: str,
    payload: VoucherUpdate,
    db: Session = Depends(get_db),
):
    obj = update_voucher(db, kode_voucher, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="Voucher not found")
    return obj


@router.patch("/local/{kode_voucher}/status", response_model=VoucherOut)
def update_local_voucher_status_api(
    kode_voucher: str,
    payload: VoucherStatusUpdate,
    db: Session = Depends(get_db),
):
    obj = update_voucher_status(db, kode_voucher, payload.status)
    if not obj:
        raise HTTPException(status_code=404, detail="Voucher not found")
    return obj


@router.delete("/local/{kode_voucher}")
def delete_local_voucher_api(kode_voucher: str, db: Session = Depends(get_db)):
    ok = delete_voucher(db, kode_voucher)
    if not ok:
        raise HTTPException(status_code=404, detail="Voucher not found")
    return {"success": True}
