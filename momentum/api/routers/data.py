from __future__ import annotations

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from momentum.api.deps import get_current_user
from momentum.db import get_db
from momentum.schemas.snapshot import ImportResult
from momentum.services.events import discard_pending
from momentum.services.locks import user_write_lock
from momentum.services.snapshot import export_snapshot, import_snapshot


router = APIRouter()


@router.get("/export")
async def export_data(db: AsyncSession = Depends(get_db)) -> dict:
    return await export_snapshot(db)


@router.post("/import", response_model=ImportResult)
async def import_data(
    payload: dict = Body(...),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> ImportResult:
    # Streaks and summaries are replaced wholesale; keep progress writers out meanwhile.
    async with user_write_lock(user.id):
        counts = await import_snapshot(db, payload)
        await db.commit()
    discard_pending(db)
    return ImportResult(records_imported=counts)
