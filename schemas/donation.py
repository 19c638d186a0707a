# app/schemas/donation.py
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from models.user import DonationEntryStatus


# Amount/id presence and positivity are checked by the donation rules so that
# they surface as 400 InvalidRequest instead of 422.

# ---------- single-cause donation ----------
class DonationCreate(BaseModel):
    """Donate to one cause"""
    cause_id: Optional[int] = Field(None, alias="causeId")
    amount: Optional[float] = None
    payment_id: Optional[str] = Field(None, alias="paymentId", max_length=100)
    payment_method: Optional[str] = Field(None, alias="paymentMethod", max_length=50)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {"causeId": 1, "amount": 100, "paymentMethod": "card"}
        }


# ---------- multi-cause donation ----------
class CauseAllocation(BaseModel):
    cause_id: Optional[int] = Field(None, alias="causeId")
    amount: Optional[float] = None

    class Config:
        populate_by_name = True


class MultiDonationCreate(BaseModel):
    """Split one payment across several causes"""
    total_amount: Optional[float] = Field(None, alias="totalAmount")
    causes: List[CauseAllocation] = []
    payment_id: Optional[str] = Field(None, alias="paymentId", max_length=100)
    payment_method: Optional[str] = Field(None, alias="paymentMethod", max_length=50)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "totalAmount": 150,
                "causes": [{"causeId": 1, "amount": 100}, {"causeId": 2, "amount": 50}],
                "paymentMethod": "card",
            }
        }


# ---------- history ----------
class DonationEntryRead(BaseModel):
    amount: float
    cause: str
    cause_id: Optional[int] = Field(None, serialization_alias="causeId")
    payment_id: Optional[str] = Field(None, serialization_alias="paymentId")
    payment_method: Optional[str] = Field(None, serialization_alias="paymentMethod")
    status: DonationEntryStatus
    is_multi_cause: bool = Field(False, serialization_alias="isMultiCause")
    date: datetime

    class Config:
        from_attributes = True
