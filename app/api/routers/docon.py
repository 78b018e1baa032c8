from datetime import date
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps.request_identity import require_identity
from app.core.config import settings
from app.core.numbering.catalog import reference_catalog
from app.crud.docon import (
    DoconFilters,
    DocumentValidationError,
    add_document_file,
    create_document,
    delete_document,
    get_document,
    list_document_files,
    list_documents,
    list_documents_for_export,
    list_history,
    update_document,
)
from app.crud.errors import DuplicateError
from app.db.session import get_db
from app.schemas.docon import (
    DocumentFileCreate,
    DocumentFileOut,
    DoconDocumentCreate,
    DoconDocumentListItem,
    DoconDocumentOut,
    DoconDocumentUpdate,
    NextSerialOut,
    RevisionHistoryOut,
)
from app.schemas.request_identity import RequestIdentity
from app.services.document_numbering import (
    DocumentKey,
    DocumentNumberingService,
    NumberingError,
    canonical_location,
    canonical_work_system,
)
from app.services.excel_export import xlsx_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/docon", tags=["docon"])

EXPORT_COLUMNS = {
    "document_number": "Document Number",
    "title": "Title",
    "pic": "PIC",
    "date_received": "Date Received",
    "transmittal_no": "Transmittal No",
    "submission_status": "Submission Status",
    "document_workflow_status": "Workflow Status",
    "revision_review_code": "Review Code",
    "remarks": "Remarks",
}


def _filters(
    contract_code: str | None = Query(None),
    document_type: str | None = Query(None),
    discipline: str | None = Query(None),
    location: str | None = Query(None),
    work_system: str | None = Query(None),
    submission_status: str | None = Query(None),
    document_workflow_status: str | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    search: str | None = Query(None),
) -> DoconFilters:
    return DoconFilters(
        contract_code=contract_code,
        document_type=document_type,
        discipline=discipline,
        location=canonical_location(location) if location else None,
        work_system=canonical_work_system(work_system) if work_system else None,
        submission_status=submission_status,
        document_workflow_status=document_workflow_status,
        date_from=date_from,
        date_to=date_to,
        search=search,
    )


def _next_serial(db: Session, key: DocumentKey) -> NextSerialOut:
    try:
        allocation = DocumentNumberingService.next_serial(db, key)
    except NumberingError as e:
        logger.exception("docon_next_serial_failed key=%s", key)
        raise HTTPException(status_code=500, detail=f"Failed to get next serial number: {e}")
    return NextSerialOut(
        serial_number=allocation.serial_number,
        is_new_combination=allocation.is_new_combination,
        message=allocation.message,
    )


@router.get("/reference")
def reference_api():
    return reference_catalog()


@router.get("/documents", response_model=list[DoconDocumentListItem] | NextSerialOut)
def list_documents_api(
    limit: int | None = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    get_next_serial: bool = Query(False),
    filters: DoconFilters = Depends(_filters),
    db: Session = Depends(get_db),
):
    if get_next_serial:
        key = DocumentKey(
            contract_code=filters.contract_code or "",
            document_type=filters.document_type or "",
            discipline=filters.discipline or "",
            location=filters.location or "",
            work_system=filters.work_system or "",
        ).canonical()
        if key.is_complete():
            return _next_serial(db, key)

    rows = list_documents(
        db,
        filters,
        limit=limit or settings.DOCON_DEFAULT_PAGE_SIZE,
        offset=offset,
    )
    return [
        DoconDocumentListItem(
            **DoconDocumentOut.model_validate(doc).model_dump(),
            file_count=file_count,
            revision_count=revision_count,
        )
        for doc, file_count, revision_count in rows
    ]


@router.get("/documents/next-serial", response_model=NextSerialOut)
def next_serial_api(
    contract_code: str = Query(..., min_length=1),
    document_type: str = Query(..., min_length=1),
    discipline: str = Query(..., min_length=1),
    location: str = Query(..., min_length=1),
    work_system: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    key = DocumentKey(
        contract_code=contract_code,
        document_type=document_type,
        discipline=discipline,
        location=location,
        work_system=work_system,
    ).canonical()
    return _next_serial(db, key)


@router.get("/documents/export")
def export_documents_api(
    filters: DoconFilters = Depends(_filters),
    db: Session = Depends(get_db),
):
    docs = list_documents_for_export(db, filters)
    rows = [{col: getattr(doc, col) for col in EXPORT_COLUMNS} for doc in docs]
    return xlsx_response(
        rows,
        columns=EXPORT_COLUMNS,
        sheet_name="Documents",
        filename_prefix="Docon_Register",
    )


@router.post("/documents", response_model=DoconDocumentOut, status_code=status.HTTP_201_CREATED)
def create_document_api(
    payload: DoconDocumentCreate,
    db: Session = Depends(get_db),
    identity: RequestIdentity = Depends(require_identity),
):
    try:
        return create_document(db, payload, actor=identity.actor)
    except DocumentValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except NumberingError as e:
        logger.exception("docon_create_serial_failed")
        raise HTTPException(status_code=500, detail=f"Failed to generate serial number: {e}")


@router.get("/documents/{document_id}", response_model=DoconDocumentOut)
def get_document_api(document_id: int, db: Session = Depends(get_db)):
    obj = get_document(db, document_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Document not found")
    return obj


@router.get("/documents/{document_id}/revisions", response_model=list[DoconDocumentOut])
def list_revisions_api(document_id: int, db: Session = Depends(get_db)):
    obj = get_document(db, document_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Document not found")
    return DocumentNumberingService.list_revisions(
        db, DocumentKey.from_document(obj), obj.serial_number
    )


@router.get("/documents/{document_id}/history", response_model=list[RevisionHistoryOut])
def list_history_api(document_id: int, db: Session = Depends(get_db)):
    if not get_document(db, document_id):
        raise HTTPException(status_code=404, detail="Document not found")
    return list_history(db, document_id)


@router.get("/documents/{document_id}/files", response_model=list[DocumentFileOut])
def list_files_api(document_id: int, db: Session = Depends(get_db)):
    if not get_document(db, document_id):
        raise HTTPException(status_code=404, detail="Document not found")
    return list_document_files(db, document_id)


@router.post(
    "/documents/{document_id}/files",
    response_model=DocumentFileOut,
    status_code=status.HTTP_201_CREATED,
)
def add_file_api(
    document_id: int,
    payload: DocumentFileCreate,
    db: Session = Depends(get_db),
    identity: RequestIdentity = Depends(require_identity),
):
    obj = add_document_file(db, document_id, payload, actor=identity.actor)
    if not obj:
        raise HTTPException(status_code=404, detail="Document not found")
    return obj


@router.put("/documents/{document_id}", response_model=DoconDocumentOut)
def update_document_api(
    document_id: int,
    payload: DoconDocumentUpdate,
    db: Session = Depends(get_db),
    identity: RequestIdentity = Depends(require_identity),
):
    try:
        obj = update_document(db, document_id, payload, actor=identity.actor)
    except DocumentValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not obj:
        raise HTTPException(status_code=404, detail="Document not found")
    return obj


@router.delete("/documents/{document_id}")
def delete_document_api(
    document_id: int,
    db: Session = Depends(get_db),
    identity: RequestIdentity = Depends(require_identity),
):
    ok = delete_document(db, document_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Document not found")
    logger.info("docon_document_deleted id=%s by=%s", document_id, identity.actor)
    return {"message": "Document deleted successfully"}
