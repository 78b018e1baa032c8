from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LaptopBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    assigned_user: Optional[str] = None
    serial_number: str = Field(min_length=1, max_length=255)
    asset_number: Optional[str] = None
    model_type: Optional[str] = None
    no_bast: Optional[str] = None
    date_received: date
    condition: Optional[str] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None


class LaptopCreate(LaptopBase):
    pass


class LaptopUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    assigned_user: Optional[str] = None
    serial_number: Optional[str] = Field(default=None, min_length=1, max_length=255)
    asset_number: Optional[str] = None
    model_type: Optional[str] = None
    no_bast: Optional[str] = None
    date_received: Optional[date] = None
    condition: Optional[str] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None


class LaptopOut(LaptopBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: Optional[datetime] = None


class ImageUploadOut(BaseModel):
    url: str
