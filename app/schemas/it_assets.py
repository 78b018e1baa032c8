from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ItAssetBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    nama: str = Field(min_length=1, max_length=255)
    pic: str = Field(min_length=1, max_length=255)
    serial_number: str = Field(min_length=1, max_length=255)
    tanggal_diterima: date
    kategori: str = Field(min_length=1, max_length=100)
    nomor_asset: str = Field(min_length=1, max_length=255)
    nomor_bast: Optional[str] = None
    keterangan: Optional[str] = None


class ItAssetCreate(ItAssetBase):
    pass


class ItAssetUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    nama: Optional[str] = Field(default=None, min_length=1, max_length=255)
    pic: Optional[str] = Field(default=None, min_length=1, max_length=255)
    serial_number: Optional[str] = Field(default=None, min_length=1, max_length=255)
    tanggal_diterima: Optional[date] = None
    kategori: Optional[str] = Field(default=None, min_length=1, max_length=100)
    nomor_asset: Optional[str] = Field(default=None, min_length=1, max_length=255)
    nomor_bast: Optional[str] = None
    keterangan: Optional[str] = None


class ItAssetOut(ItAssetBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NextAssetNumberOut(BaseModel):
    nextNumber: str
    prefix: str
    assetNumber: str
