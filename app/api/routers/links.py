from fastapi import APIRouter, Depends, HTTPException

from app.api.routers.files import get_file_share_service
from app.schemas.files import SharedLinkListOut, SharedLinkOut
from app.services.file_share_service import FileShareService

router = APIRouter(prefix="/links", tags=["links"])


@router.get("", response_model=SharedLinkListOut)
def list_links_api(service: FileShareService = Depends(get_file_share_service)):
    return SharedLinkListOut(
        sharedLinks=[
            SharedLinkOut(
                id=share.id,
                file_key=share.file_key,
                created_at=share.created_at,
                expires_at=share.expires_at,
                file_name=share.file.nama_file if share.file else None,
            )
            for share in service.list_shares()
        ]
    )


@router.delete("/{share_id}")
def delete_link_api(share_id: str, service: FileShareService = Depends(get_file_share_service)):
    if not service.delete_share(share_id):
        raise HTTPException(status_code=404, detail="Shared link not found")
    return {"message": "Shared link deleted successfully"}
