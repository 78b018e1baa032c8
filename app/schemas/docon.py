from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

FileCategory = Literal["current", "previous", "attachment"]


class DoconDocumentBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    contract_code: str = Field(min_length=1, max_length=10)
    document_type: str = Field(min_length=1, max_length=10)
    discipline: str = Field(min_length=1, max_length=10)
    location: str = Field(min_length=1, max_length=10)
    work_system: str = Field(min_length=1, max_length=10)

    title: str = Field(min_length=1, max_length=500)
    pic: str = Field(min_length=1, max_length=255)
    date_received: date
    transmittal_no: Optional[str] = None

    submission_status: str = "Draft"
    document_workflow_status: Optional[str] = None
    revision_review_code: Optional[str] = None
    remarks: Optional[str] = None
    previous_revision_id: Optional[int] = None


class DoconDocumentCreate(DoconDocumentBase):
    # allocated from the combination when omitted
    serial_number: Optional[str] = None
    revision_number: Optional[str] = None
    created_by: Optional[str] = None


class DoconDocumentUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    contract_code: Optional[str] = None
    document_type: Optional[str] = None
    discipline: Optional[str] = None
    location: Optional[str] = None
    work_system: Optional[str] = None
    serial_number: Optional[str] = None
    revision_number: Optional[str] = None

    title: Optional[str] = None
    pic: Optional[str] = None
    date_received: Optional[date] = None
    transmittal_no: Optional[str] = None
    submission_status: Optional[str] = None
    document_workflow_status: Optional[str] = None
    revision_review_code: Optional[str] = None
    remarks: Optional[str] = None
    updated_by: Optional[str] = None

    # revision history entry, recorded when revision_number changes
    changes_description: Optional[str] = None
    review_comments: Optional[str] = None
    reviewer_name: Optional[str] = None
    review_date: Optional[date] = None


class DoconDocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    contract_code: str
    document_type: str
    discipline: str
    location: str
    work_system: str
    serial_number: str
    revision_number: str
    document_number: str
    title: str
    pic: str
    date_received: date
    transmittal_no: Optional[str] = None
    submission_status: str
    document_workflow_status: Optional[str] = None
    revision_review_code: Optional[str] = None
    remarks: Optional[str] = None
    previous_revision_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None


class DoconDocumentListItem(DoconDocumentOut):
    file_count: int = 0
    revision_count: int = 0


class NextSerialOut(BaseModel):
    serial_number: str
    is_new_combination: bool
    message: str


class RevisionHistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    document_id: int
    revision_number: str
    revision_date: date
    revised_by: Optional[str] = None
    review_code: Optional[str] = None
    review_comments: Optional[str] = None
    reviewer_name: Optional[str] = None
    review_date: Optional[date] = None
    changes_description: Optional[str] = None
    created_at: Optional[datetime] = None


class DocumentFileCreate(BaseModel):
    file_key: str = Field(min_length=1)
    file_name: str = Field(min_length=1)
    file_size: Optional[int] = Field(default=None, ge=0)
    file_type: Optional[str] = None
    file_url: Optional[str] = None
    file_category: FileCategory = "current"
    uploaded_by: Optional[str] = None


class DocumentFileOut(DocumentFileCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    document_id: int
    uploaded_at: Optional[datetime] = None
