from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from app.api.routers.files import get_file_share_service
from app.schemas.files import PasswordIn
from app.services.file_share_service import FileShareService, ShareLinkFailure

router = APIRouter(prefix="/share", tags=["share"])


@router.get("/{share_id}")
def open_share_api(
    share_id: str,
    password: str | None = Query(None),
    service: FileShareService = Depends(get_file_share_service),
):
    try:
        url = service.resolve_share(share_id, password=password)
    except ShareLinkFailure as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return RedirectResponse(url=url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.post("/{share_id}")
def verify_share_password_api(
    share_id: str,
    payload: PasswordIn,
    service: FileShareService = Depends(get_file_share_service),
):
    try:
        message = service.verify_share_password(share_id, payload.password)
    except ShareLinkFailure as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"message": message}
