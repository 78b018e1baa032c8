from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StarlinkUsageIn(BaseModel):
    # presence is checked in the router so missing fields answer 400
    model_config = ConfigDict(str_strip_whitespace=True)

    tanggal: Optional[date] = None
    unit_starlink: Optional[str] = None
    total_pemakaian: Optional[float] = Field(default=None, ge=0)


class StarlinkUsageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tanggal: date
    unit_starlink: str
    total_pemakaian: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
