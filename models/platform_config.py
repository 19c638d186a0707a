# app/models/platform_config.py
from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey

from models.base import Base

CONFIG_KEY = "platform_config"

CURRENCY_CODES = ["USD", "EUR", "GBP", "INR", "CAD", "AUD", "JPY"]
CURRENCY_POSITIONS = ["before", "after"]


class PlatformConfig(Base):
    __tablename__ = "platform_config"

    id = Column(Integer, primary_key=True)
    config_key = Column(String(50), unique=True, nullable=False, default=CONFIG_KEY)

    # minimum donation
    minimum_donation_amount = Column(Float, nullable=False, default=1.0)
    minimum_donation_enabled = Column(Boolean, nullable=False, default=True)

    # currency display
    currency_code = Column(String(3), nullable=False, default="USD")
    currency_symbol = Column(String(5), nullable=False, default="$")
    currency_position = Column(String(10), nullable=False, default="before")
    decimal_places = Column(Integer, nullable=False, default=2)
    thousands_separator = Column(String(1), nullable=False, default=",")
    decimal_separator = Column(String(1), nullable=False, default=".")

    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def minimum_donation(self) -> dict:
        return {
            "amount": self.minimum_donation_amount,
            "enabled": self.minimum_donation_enabled,
        }

    @property
    def currency(self) -> dict:
        return {
            "code": self.currency_code,
            "symbol": self.currency_symbol,
            "position": self.currency_position,
            "decimalPlaces": self.decimal_places,
            "thousandsSeparator": self.thousands_separator,
            "decimalSeparator": self.decimal_separator,
        }
