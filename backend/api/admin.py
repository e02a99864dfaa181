"""Admin endpoints — Quran content drill-down and dashboard overview.

All routes require the X-Admin-Key header matching ADMIN_API_KEY in settings.
"""
from fastapi import APIRouter, Depends, HTTPException, Security, Query
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession
from database import get_db
from config import Settings
from api.deps import get_app_settings, get_partitioner
from schemas.quran import ok, OverviewData
from services.partitioner import QuarterPartitioner
from services.structure import query_structure, structure_overview
from utils.juz_data import TOTAL_JUZ, TOTAL_HIZBS, QUARTERS_PER_HIZB

router = APIRouter(prefix="/admin", tags=["admin"])

_api_key_header = APIKeyHeader(name="X-Admin-Key", auto_error=False)


async def require_admin_key(
    key: str | None = Security(_api_key_header),
    settings: Settings = Depends(get_app_settings),
) -> None:
    if not settings.ADMIN_API_KEY or key != settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Invalid or missing admin key")


# ── Overview ──────────────────────────────────────────────────────────────────

@router.get("/overview", dependencies=[Depends(require_admin_key)])
async def overview(db: AsyncSession = Depends(get_db)):
    return ok(OverviewData(structure=await structure_overview(db)))


# ── Content drill-down ────────────────────────────────────────────────────────

@router.get("/content/quran", dependencies=[Depends(require_admin_key)])
async def quran_content(
    juz: int | None = Query(default=None, ge=1, le=TOTAL_JUZ, description="Juz (1-30)"),
    hizb: int | None = Query(default=None, ge=1, le=TOTAL_HIZBS, description="Hizb (1-60), needs juz"),
    quarter: int | None = Query(default=None, ge=1, le=QUARTERS_PER_HIZB, description="Quarter (1-4), needs juz and hizb"),
    db: AsyncSession = Depends(get_db),
    partitioner: QuarterPartitioner = Depends(get_partitioner),
):
    """Structure overview, hizbs of a juz, quarters of a hizb, or ayahs of a quarter.

    Quarter boundaries are computed on every request and are not cached.
    """
    return ok(await query_structure(db, partitioner, juz=juz, hizb=hizb, quarter=quarter))
