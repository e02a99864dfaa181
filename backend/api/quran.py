from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from database import get_db
from config import Settings
from api.deps import get_app_settings, get_cache, get_partitioner
from redis_client import ContentCache
from schemas.quran import ok
from services import content
from services.partitioner import QuarterPartitioner
from utils.time_utils import utc_now

router = APIRouter(prefix="/quran", tags=["quran"])


@router.get("/surahs")
async def list_surahs(
    db: AsyncSession = Depends(get_db),
    cache: ContentCache = Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
):
    return ok(await content.list_surahs(db, cache, ttl=settings.CACHE_LIST_TTL_SECONDS))


@router.get("/surah/{surah_number}")
async def get_surah(
    surah_number: int,
    start_ayah: int | None = Query(default=None, alias="startAyah", ge=1),
    end_ayah: int | None = Query(default=None, alias="endAyah", ge=1),
    db: AsyncSession = Depends(get_db),
    cache: ContentCache = Depends(get_cache),
):
    return ok(await content.get_surah(db, cache, surah_number, start_ayah, end_ayah))


@router.get("/juz")
async def list_juz(
    db: AsyncSession = Depends(get_db),
    cache: ContentCache = Depends(get_cache),
    partitioner: QuarterPartitioner = Depends(get_partitioner),
    settings: Settings = Depends(get_app_settings),
):
    return ok(await content.list_juz(db, cache, partitioner, ttl=settings.CACHE_LIST_TTL_SECONDS))


@router.get("/juz/{juz_number}")
async def get_juz(
    juz_number: int,
    db: AsyncSession = Depends(get_db),
    cache: ContentCache = Depends(get_cache),
):
    return ok(await content.get_juz(db, cache, juz_number))


@router.get("/ayah/{surah_number}/{ayah_number}")
async def get_ayah(
    surah_number: int = Path(ge=1),
    ayah_number: int = Path(ge=1),
    db: AsyncSession = Depends(get_db),
):
    return ok(await content.get_ayah(db, surah_number, ayah_number))


@router.get("/search")
async def search(
    q: str = Query(default=""),
    surah: int | None = Query(default=None, ge=1, le=114),
    limit: int | None = Query(default=None, ge=1),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    return ok(await content.search_ayahs(
        db, q, surah=surah,
        limit=limit or settings.SEARCH_DEFAULT_LIMIT,
        max_limit=settings.SEARCH_MAX_LIMIT,
    ))


@router.get("/ayah-of-the-day")
async def ayah_of_the_day(
    db: AsyncSession = Depends(get_db),
    cache: ContentCache = Depends(get_cache),
):
    return ok(await content.ayah_of_the_day(db, cache, utc_now().date()))
