from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RadioBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    nama_radio: str = Field(min_length=1, max_length=255)
    tipe_radio: Optional[str] = None
    serial_number: str = Field(min_length=1, max_length=255)
    user_radio: Optional[str] = None
    nomor_bast: Optional[str] = None


class RadioCreate(RadioBase):
    pass


class RadioUpdate(BaseModel):
    nama_radio: Optional[str] = Field(default=None, min_length=1, max_length=255)
    tipe_radio: Optional[str] = None
    serial_number: Optional[str] = Field(default=None, min_length=1, max_length=255)
    user_radio: Optional[str] = None
    nomor_bast: Optional[str] = None


class RadioOut(RadioBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None
