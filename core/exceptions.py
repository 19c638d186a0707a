# app/core/exceptions.py
from typing import Iterable

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from core.config import settings


class DonationError(HTTPException):
    """Base class for donation failures; each subclass maps to one HTTP status."""
    status_code = 400
    code = "DONATION_ERROR"

    def __init__(self, detail: str):
        super().__init__(status_code=self.status_code, detail=detail)


class InvalidRequest(DonationError):
    code = "INVALID_REQUEST"


class BelowMinimum(DonationError):
    code = "BELOW_MINIMUM"


class NotFound(DonationError):
    status_code = 404
    code = "NOT_FOUND"


class CauseNotAcceptingDonations(DonationError):
    code = "CAUSE_NOT_ACCEPTING_DONATIONS"


class CauseEnded(DonationError):
    code = "CAUSE_ENDED"


class AllocationMismatch(DonationError):
    code = "ALLOCATION_MISMATCH"


class TransactionFailed(DonationError):
    status_code = 500
    code = "TRANSACTION_FAILED"

    def __init__(self, detail: str, internal_error: str = None):
        super().__init__(detail)
        self.internal_error = internal_error


def join_names(names: Iterable[str]) -> str:
    return ", ".join(str(n) for n in names)


async def donation_error_handler(request: Request, exc: DonationError) -> JSONResponse:
    content = {"detail": exc.detail, "code": exc.code}
    if isinstance(exc, TransactionFailed) and settings.DEBUG and exc.internal_error:
        content["error"] = exc.internal_error
    return JSONResponse(status_code=exc.status_code, content=content)
