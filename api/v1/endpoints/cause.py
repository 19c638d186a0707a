# app/api/v1/endpoints/cause.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from core.database import get_db
from services.cause_service import CauseService, CATEGORY_LABELS

router = APIRouter()


@router.get("")
async def list_causes(
        search: Optional[str] = Query(None),
        category: Optional[str] = Query(None),
        db: AsyncSession = Depends(get_db)
):
    """Public listing of active causes"""
    causes = await CauseService(db).list_public_causes(search, category)
    return {
        "success": True,
        "count": len(causes),
        "data": [CauseService.serialize(c) for c in causes]
    }


@router.get("/categories/list")
async def list_categories():
    return {"success": True, "data": CATEGORY_LABELS}


@router.get("/{cause_id}")
async def get_cause(cause_id: int, db: AsyncSession = Depends(get_db)):
    cause = await CauseService(db).get_cause(cause_id)
    return {"success": True, "data": CauseService.serialize(cause)}
