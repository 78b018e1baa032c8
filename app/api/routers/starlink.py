from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.crud.errors import DuplicateError
from app.crud.starlink import (
    create_usage,
    delete_usage,
    get_usage,
    list_units,
    list_usage,
    update_usage,
)
from app.db.session import get_db
from app.schemas.starlink import StarlinkUsageIn, StarlinkUsageOut
from app.services import starlink_usage_service as usage_stats
from app.services.excel_export import xlsx_response

router = APIRouter(prefix="/starlink", tags=["starlink"])

GROUP_BY_PATTERN = "^(date|dateAndUnit|month|monthAndUnit)$"

EXPORT_COLUMNS = {
    "tanggal": "Tanggal",
    "unit_starlink": "Unit Starlink",
    "total_pemakaian": "Total Pemakaian (GB)",
}


@router.get("")
def list_usage_api(
    groupBy: str | None = Query(None, pattern=GROUP_BY_PATTERN),
    startDate: date | None = Query(None),
    endDate: date | None = Query(None),
    unit: str | None = Query(None),
    month: str | None = Query(None, pattern=r"^\d{4}-\d{2}$"),
    units: bool = Query(False),
    db: Session = Depends(get_db),
):
    if groupBy:
        rows = list_usage(db, start_date=startDate, end_date=endDate, newest_first=False)
        if groupBy == "date":
            return usage_stats.usage_by_date(rows)
        if groupBy == "dateAndUnit":
            return usage_stats.usage_by_date_and_unit(rows)
        if groupBy == "month":
            return usage_stats.usage_by_month(rows, month=month)
        return usage_stats.usage_by_month_and_unit(rows, month=month)

    if units:
        return list_units(db)

    rows = list_usage(db, start_date=startDate, end_date=endDate, unit=unit)
    return [StarlinkUsageOut.model_validate(row) for row in rows]


@router.get("/months", response_model=list[str])
def list_months_api(db: Session = Depends(get_db)):
    return usage_stats.months_with_data(list_usage(db))


@router.get("/export")
def export_usage_api(
    startDate: date | None = Query(None),
    endDate: date | None = Query(None),
    unit: str | None = Query(None),
    db: Session = Depends(get_db),
):
    rows = list_usage(db, start_date=startDate, end_date=endDate, unit=unit, newest_first=False)
    data = [
        {
            "tanggal": row.tanggal,
            "unit_starlink": row.unit_starlink,
            "total_pemakaian": row.total_pemakaian,
        }
        for row in rows
    ]
    return xlsx_response(
        data,
        columns=EXPORT_COLUMNS,
        sheet_name="Starlink Usage",
        filename_prefix="Starlink_Usage",
    )


@router.post("", response_model=StarlinkUsageOut, status_code=status.HTTP_201_CREATED)
def create_usage_api(payload: StarlinkUsageIn, db: Session = Depends(get_db)):
    if payload.tanggal is None or not payload.unit_starlink or payload.total_pemakaian is None:
        raise HTTPException(status_code=400, detail="Missing required fields")
    try:
        return create_usage(db, payload.tanggal, payload.unit_starlink, payload.total_pemakaian)
    except DuplicateError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/{usage_id}", response_model=StarlinkUsageOut)
def get_usage_api(usage_id: int, db: Session = Depends(get_db)):
    obj = get_usage(db, usage_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Record not found")
    return obj


@router.put("/{usage_id}", response_model=StarlinkUsageOut)
def update_usage_api(usage_id: int, payload: StarlinkUsageIn, db: Session = Depends(get_db)):
    try:
        obj = update_usage(db, usage_id, payload.model_dump(exclude_unset=True))
    except DuplicateError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not obj:
        raise HTTPException(status_code=404, detail="Record not found")
    return obj


@router.delete("/{usage_id}")
def delete_usage_api(usage_id: int, db: Session = Depends(get_db)):
    ok = delete_usage(db, usage_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Record not found")
    return {"message": "Record deleted successfully"}
