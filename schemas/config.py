# app/schemas/config.py
from pydantic import BaseModel, Field
from typing import Optional


class MinimumDonationUpdate(BaseModel):
    amount: Optional[float] = None
    enabled: Optional[bool] = None


class CurrencyUpdate(BaseModel):
    code: Optional[str] = None
    symbol: Optional[str] = Field(None, max_length=5)
    position: Optional[str] = None
    decimal_places: Optional[int] = Field(None, alias="decimalPlaces")
    thousands_separator: Optional[str] = Field(None, alias="thousandsSeparator", max_length=1)
    decimal_separator: Optional[str] = Field(None, alias="decimalSeparator", max_length=1)

    class Config:
        populate_by_name = True


class PlatformConfigUpdate(BaseModel):
    minimum_donation: Optional[MinimumDonationUpdate] = Field(None, alias="minimumDonation")
    currency: Optional[CurrencyUpdate] = None

    class Config:
        populate_by_name = True
