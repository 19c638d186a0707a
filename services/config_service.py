# app/services/config_service.py
from typing import Dict, Any
import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from models.platform_config import PlatformConfig, CONFIG_KEY, CURRENCY_CODES, CURRENCY_POSITIONS
from models.user import User
from schemas.config import PlatformConfigUpdate

logger = logging.getLogger(__name__)

CURRENCY_PRESETS = [
    {"code": "USD", "symbol": "$", "position": "before", "decimalPlaces": 2, "thousandsSeparator": ",", "decimalSeparator": ".", "name": "US Dollar"},
    {"code": "EUR", "symbol": "€", "position": "before", "decimalPlaces": 2, "thousandsSeparator": ".", "decimalSeparator": ",", "name": "Euro"},
    {"code": "GBP", "symbol": "£", "position": "before", "decimalPlaces": 2, "thousandsSeparator": ",", "decimalSeparator": ".", "name": "British Pound"},
    {"code": "INR", "symbol": "₹", "position": "before", "decimalPlaces": 2, "thousandsSeparator": ",", "decimalSeparator": ".", "name": "Indian Rupee"},
    {"code": "CAD", "symbol": "CA$", "position": "before", "decimalPlaces": 2, "thousandsSeparator": ",", "decimalSeparator": ".", "name": "Canadian Dollar"},
    {"code": "AUD", "symbol": "A$", "position": "before", "decimalPlaces": 2, "thousandsSeparator": ",", "decimalSeparator": ".", "name": "Australian Dollar"},
    {"code": "JPY", "symbol": "¥", "position": "before", "decimalPlaces": 0, "thousandsSeparator": ",", "decimalSeparator": ".", "name": "Japanese Yen"},
]

# request field -> PlatformConfig column
CURRENCY_COLUMNS = {
    "code": "currency_code",
    "symbol": "currency_symbol",
    "position": "currency_position",
    "decimal_places": "decimal_places",
    "thousands_separator": "thousands_separator",
    "decimal_separator": "decimal_separator",
}


class ConfigService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_config(self) -> PlatformConfig:
        """Return the singleton config row, creating it with defaults on first access."""
        config = await self._find()
        if config:
            return config

        config = PlatformConfig(
            config_key=CONFIG_KEY,
            minimum_donation_amount=settings.DEFAULT_MINIMUM_DONATION,
            minimum_donation_enabled=True,
            currency_code=settings.DEFAULT_CURRENCY_CODE,
            currency_symbol=settings.DEFAULT_CURRENCY_SYMBOL,
        )
        self.db.add(config)
        try:
            await self.db.commit()
        except IntegrityError:
            # created concurrently by another request
            await self.db.rollback()
            return await self._find()

        logger.info("Created default platform configuration")
        return config

    async def update_config(self, data: PlatformConfigUpdate, user: User) -> PlatformConfig:
        self._validate(data)
        config = await self.get_config()

        if data.minimum_donation:
            if data.minimum_donation.amount is not None:
                config.minimum_donation_amount = data.minimum_donation.amount
            if data.minimum_donation.enabled is not None:
                config.minimum_donation_enabled = data.minimum_donation.enabled

        if data.currency:
            for field, value in data.currency.model_dump(exclude_none=True).items():
                setattr(config, CURRENCY_COLUMNS[field], value)

        config.updated_by = user.id
        self.db.add(config)
        await self.db.commit()
        return config

    @staticmethod
    def serialize(config: PlatformConfig) -> Dict[str, Any]:
        return {
            "minimumDonation": config.minimum_donation,
            "currency": config.currency,
        }

    # ---------- Helper Methods ----------
    async def _find(self):
        result = await self.db.execute(
            select(PlatformConfig).where(PlatformConfig.config_key == CONFIG_KEY)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _validate(data: PlatformConfigUpdate):
        if data.minimum_donation and data.minimum_donation.amount is not None:
            if data.minimum_donation.amount < 0.01:
                raise HTTPException(status_code=400, detail="Minimum donation amount must be at least 0.01")

        if data.currency:
            if data.currency.code and data.currency.code not in CURRENCY_CODES:
                raise HTTPException(
                    status_code=400,
                    detail=f"Currency code must be one of: {', '.join(CURRENCY_CODES)}"
                )
            if data.currency.position and data.currency.position not in CURRENCY_POSITIONS:
                raise HTTPException(status_code=400, detail='Currency position must be "before" or "after"')
            if data.currency.decimal_places is not None and not 0 <= data.currency.decimal_places <= 4:
                raise HTTPException(status_code=400, detail="Decimal places must be between 0 and 4")
