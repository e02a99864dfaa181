"""Public reading queries: surahs, juz, single ayahs, search, ayah of the day.

List and per-surah/per-juz payloads are cached as JSON in Redis. Search and
single-ayah lookups always hit the database.
"""
import logging
from datetime import date
from itertools import groupby
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from errors import InvalidParameters, NotFound
from models import QuranAyah
from redis_client import ContentCache, cache_key
from schemas.quran import (
    AyahItem, SurahListItem, SurahDetail, SurahGroup, JuzDetail,
    SurahBoundary, RubSummary, JuzHizbEntry, JuzListItem, SearchResults,
)
from services.filters import FilterBuilder, Contains, InvalidFilter
from services.partitioner import QuarterPartitioner
from utils.juz_data import TOTAL_JUZ, TOTAL_SURAHS, juz_name, hizb_name, rub_number
from utils.time_utils import day_key, day_seed

logger = logging.getLogger(__name__)

_VERSE_ORDER = (QuranAyah.sura_number, QuranAyah.ayah_number)


def format_ayah(a: QuranAyah) -> AyahItem:
    return AyahItem(
        number=a.ayah_number,
        text=a.ayah_text_arabic,
        translation=a.ayah_text_english or "",
        sura_number=a.sura_number,
        sura_name_arabic=a.sura_name_arabic,
        juz=a.juz_number,
        hizb=a.hizb_number,
        quarter=a.quarter_hizb_segment,
        page=a.page_number,
        sajda=a.has_sajda,
        is_bismillah=a.is_bismillah,
    )


def span_label(first: QuranAyah, last: QuranAyah) -> str:
    return (
        f"{first.sura_name_arabic} ({first.sura_number}:{first.ayah_number}) - "
        f"{last.sura_name_arabic} ({last.sura_number}:{last.ayah_number})"
    )


def _dump(model) -> dict:
    return model.model_dump(by_alias=True)


# ── Surahs ────────────────────────────────────────────────────────────────────

async def list_surahs(db: AsyncSession, cache: ContentCache, ttl: int | None = None) -> list[dict]:
    key = "surahs:list"
    cached = await cache.get(key)
    if cached is not None:
        return cached

    rows = (await db.execute(
        select(
            QuranAyah.sura_number,
            func.min(QuranAyah.sura_name_arabic),
            func.min(QuranAyah.sura_name_english),
            func.count(QuranAyah.id),
        )
        .group_by(QuranAyah.sura_number)
        .order_by(QuranAyah.sura_number)
    )).all()
    surahs = [
        _dump(SurahListItem(number=n, name=name, name_english=name_en or "", number_of_ayahs=count))
        for n, name, name_en, count in rows
    ]
    await cache.set(key, surahs, ttl)
    return surahs


async def get_surah(
    db: AsyncSession,
    cache: ContentCache,
    surah_number: int,
    start_ayah: int | None = None,
    end_ayah: int | None = None,
) -> dict:
    if not (1 <= surah_number <= TOTAL_SURAHS):
        raise NotFound("Invalid Surah number")

    key = cache_key("surah", surah_number, start_ayah or "", end_ayah or "")
    cached = await cache.get(key)
    if cached is not None:
        return cached

    builder = FilterBuilder().equals("sura_number", surah_number)
    if start_ayah is not None or end_ayah is not None:
        try:
            builder.between("ayah_number", start_ayah, end_ayah)
        except InvalidFilter as e:
            raise InvalidParameters(str(e))

    ayahs = (await db.execute(
        select(QuranAyah).where(*builder.build()).order_by(QuranAyah.ayah_number)
    )).scalars().all()
    if not ayahs:
        raise NotFound("Surah not found")

    first = ayahs[0]
    detail = _dump(SurahDetail(
        number=first.sura_number,
        name=first.sura_name_arabic,
        name_english=first.sura_name_english or "",
        number_of_ayahs=len(ayahs),
        ayahs=[format_ayah(a) for a in ayahs],
    ))
    await cache.set(key, detail)
    return detail


# ── Juz ───────────────────────────────────────────────────────────────────────

async def list_juz(
    db: AsyncSession, cache: ContentCache, partitioner: QuarterPartitioner, ttl: int | None = None
) -> list[dict]:
    key = "juz:list"
    cached = await cache.get(key)
    if cached is not None:
        return cached

    where = FilterBuilder().between("juz_number", 1, TOTAL_JUZ).build()
    ayahs = (await db.execute(
        select(QuranAyah).where(*where).order_by(QuranAyah.juz_number, QuranAyah.hizb_number, *_VERSE_ORDER)
    )).scalars().all()

    juz_list = []
    for juz_number, juz_group in groupby(ayahs, key=lambda a: a.juz_number):
        juz_ayahs = sorted(juz_group, key=lambda a: (a.sura_number, a.ayah_number))
        first, last = juz_ayahs[0], juz_ayahs[-1]

        hizbs = []
        for hizb_number, hizb_group in groupby(
            sorted(juz_ayahs, key=lambda a: a.hizb_number), key=lambda a: a.hizb_number
        ):
            hizb_ayahs = list(hizb_group)
            quarters = [
                RubSummary(
                    quarter_number=q.number,
                    rub_number=rub_number(hizb_number, q.number),
                    total_ayahs=len(q.ayahs),
                    range=span_label(q.first, q.last),
                )
                for q in partitioner.partition(hizb_ayahs, hizb_number)
            ]
            hizbs.append(JuzHizbEntry(
                hizb_number=hizb_number,
                name=hizb_name(hizb_number),
                total_ayahs=len(hizb_ayahs),
                range=span_label(hizb_ayahs[0], hizb_ayahs[-1]),
                quarters=quarters,
            ))

        juz_list.append(_dump(JuzListItem(
            number=juz_number,
            name=juz_name(juz_number),
            english_name=f"Juz {juz_number}",
            total_ayahs=len(juz_ayahs),
            start_surah=SurahBoundary(number=first.sura_number, name=first.sura_name_arabic, ayah=first.ayah_number),
            end_surah=SurahBoundary(number=last.sura_number, name=last.sura_name_arabic, ayah=last.ayah_number),
            range=span_label(first, last),
            hizbs=hizbs,
        )))

    await cache.set(key, juz_list, ttl)
    return juz_list


async def get_juz(db: AsyncSession, cache: ContentCache, juz_number: int) -> dict:
    if not (1 <= juz_number <= TOTAL_JUZ):
        raise NotFound("Invalid Juz number")

    key = cache_key("juz", juz_number)
    cached = await cache.get(key)
    if cached is not None:
        return cached

    where = FilterBuilder().equals("juz_number", juz_number).build()
    ayahs = (await db.execute(select(QuranAyah).where(*where).order_by(*_VERSE_ORDER))).scalars().all()
    if not ayahs:
        raise NotFound("Juz not found")

    items = [format_ayah(a) for a in ayahs]
    surahs = []
    for sura_number, group in groupby(items, key=lambda i: i.sura_number):
        group = list(group)
        surahs.append(SurahGroup(sura_number=sura_number, sura_name_arabic=group[0].sura_name_arabic, ayahs=group))
    detail = _dump(JuzDetail(
        number=juz_number,
        name=juz_name(juz_number),
        english_name=f"Juz {juz_number}",
        total_ayahs=len(items),
        surahs=surahs,
        ayahs=items,
    ))
    await cache.set(key, detail)
    return detail


# ── Ayahs ─────────────────────────────────────────────────────────────────────

async def get_ayah(db: AsyncSession, surah_number: int, ayah_number: int) -> dict:
    where = FilterBuilder().equals("sura_number", surah_number).equals("ayah_number", ayah_number).build()
    ayah = (await db.execute(select(QuranAyah).where(*where))).scalar_one_or_none()
    if ayah is None:
        raise NotFound("Ayah not found")
    return _dump(format_ayah(ayah))


async def search_ayahs(
    db: AsyncSession, query: str, surah: int | None = None, limit: int = 20, max_limit: int = 100
) -> dict:
    if not query or not query.strip():
        raise InvalidParameters("q is required")
    limit = max(1, min(limit, max_limit))

    builder = FilterBuilder().any_of(
        Contains("ayah_text_arabic", query),
        Contains("ayah_text_english", query),
        Contains("sura_name_arabic", query),
    )
    if surah is not None:
        builder.equals("sura_number", surah)

    ayahs = (await db.execute(
        select(QuranAyah).where(*builder.build()).order_by(*_VERSE_ORDER).limit(limit)
    )).scalars().all()
    logger.info(f"Search '{query.strip()}' returned {len(ayahs)} ayahs")
    return _dump(SearchResults(query=query.strip(), total=len(ayahs), results=[format_ayah(a) for a in ayahs]))


async def ayah_of_the_day(db: AsyncSession, cache: ContentCache, today: date) -> dict:
    """Same ayah for everyone on a given UTC date."""
    key = cache_key("ayah-of-day", day_key(today))
    cached = await cache.get(key)
    if cached is not None:
        return cached

    total = (await db.execute(select(func.count(QuranAyah.id)))).scalar() or 0
    if total == 0:
        raise NotFound("No ayahs found")

    index = day_seed(today) % total
    ayah = (await db.execute(
        select(QuranAyah).order_by(*_VERSE_ORDER).offset(index).limit(1)
    )).scalar_one()
    item = _dump(format_ayah(ayah))
    item["date"] = day_key(today)
    await cache.set(key, item, 24 * 60 * 60)
    return item
