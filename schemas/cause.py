# app/schemas/cause.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, timezone

from models.cause import CauseCategory, CauseStatus


def _naive_utc(v: Optional[datetime]) -> Optional[datetime]:
    # stored datetimes are naive UTC
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


class CauseCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[CauseCategory] = None
    target_amount: Optional[float] = Field(None, alias="targetAmount")
    image_url: Optional[str] = Field(None, alias="imageUrl", max_length=500)
    end_date: Optional[datetime] = Field(None, alias="endDate")

    @field_validator("end_date")
    @classmethod
    def normalize_end_date(cls, v):
        return _naive_utc(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if v else v

    class Config:
        populate_by_name = True


class CauseUpdate(BaseModel):
    """Administrative edit; financial aggregates are not editable here."""
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[CauseCategory] = None
    target_amount: Optional[float] = Field(None, alias="targetAmount")
    status: Optional[CauseStatus] = None
    image_url: Optional[str] = Field(None, alias="imageUrl", max_length=500)
    end_date: Optional[datetime] = Field(None, alias="endDate")

    @field_validator("end_date")
    @classmethod
    def normalize_end_date(cls, v):
        return _naive_utc(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if v else v

    class Config:
        populate_by_name = True


class CauseFilter(BaseModel):
    search: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
