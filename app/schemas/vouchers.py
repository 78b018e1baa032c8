from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

VoucherStatus = Literal["aktif", "digunakan", "kadaluarsa"]


class VoucherBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    nama_user: str = Field(min_length=1, max_length=255)
    tipe_voucher: str = Field(min_length=1, max_length=100)
    divisi: Optional[str] = None
    status: VoucherStatus = "aktif"
    tanggal_kadaluarsa: Optional[date] = None


class VoucherCreate(VoucherBase):
    kode_voucher: str = Field(min_length=1, max_length=100)


class VoucherUpdate(BaseModel):
    nama_user: Optional[str] = Field(default=None, min_length=1, max_length=255)
    tipe_voucher: Optional[str] = Field(default=None, min_length=1, max_length=100)
    divisi: Optional[str] = None
    status: Optional[VoucherStatus] = None
    tanggal_kadaluarsa: Optional[date] = None


class VoucherStatusUpdate(BaseModel):
    status: VoucherStatus


class VoucherOut(VoucherBase):
    model_config = ConfigDict(from_attributes=True)

    kode_voucher: str
    dibuat_pada: Optional[datetime] = None


class RuijieVoucherCreate(BaseModel):
    # validated by hand so a missing field is a 400 like the upstream contract
    quantity: Optional[int] = None
    profile: Optional[str] = None
    userGroupId: Optional[str | int] = None
    firstName: Optional[str] = None
    comment: Optional[str] = None
