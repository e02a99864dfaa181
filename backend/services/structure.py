"""
Juz -> Hizb -> Quarter -> Ayah drill-down over the quran_ayahs table.

Which view is served depends on which of juz / hizb / quarter are given:

    none                  structure overview (global counts)
    juz                   hizb summaries for that juz
    juz + hizb            quarter summaries for that hizb
    juz + hizb + quarter  the ayahs of that quarter, formatted for display

Anything else is rejected. Quarter boundaries come from QuarterPartitioner
on every call.
"""
import logging
from sqlalchemy import select, func, distinct
from sqlalchemy.ext.asyncio import AsyncSession

from errors import InvalidParameters
from models import QuranAyah
from schemas.quran import (
    StructureOverview, OverviewData, SurahRef, HizbSummary, JuzHizbsData,
    RangePoint, QuarterRange, QuarterSummary, HizbQuartersData, DisplayAyah, QuarterAyahsData,
)
from services.filters import FilterBuilder
from services.partitioner import QuarterPartitioner
from utils.juz_data import QUARTERS_PER_HIZB, TOTAL_HIZBS, TOTAL_JUZ, hizb_in_juz

logger = logging.getLogger(__name__)

VIEW_OVERVIEW = "overview"
VIEW_HIZBS = "hizbs"
VIEW_QUARTERS = "quarters"
VIEW_AYAHS = "ayahs"


def resolve_view(juz: int | None, hizb: int | None, quarter: int | None) -> str:
    present = (juz is not None, hizb is not None, quarter is not None)
    views = {
        (False, False, False): VIEW_OVERVIEW,
        (True, False, False): VIEW_HIZBS,
        (True, True, False): VIEW_QUARTERS,
        (True, True, True): VIEW_AYAHS,
    }
    view = views.get(present)
    if view is None:
        raise InvalidParameters()
    # Range checks repeat the route's Query bounds so direct callers also get a 400.
    for name, value, upper in (("juz", juz, TOTAL_JUZ), ("hizb", hizb, TOTAL_HIZBS), ("quarter", quarter, QUARTERS_PER_HIZB)):
        if value is not None and not 1 <= value <= upper:
            raise InvalidParameters(name)
    if hizb is not None and not hizb_in_juz(juz, hizb):
        raise InvalidParameters(f"hizb {hizb} is not part of juz {juz}")
    return view


# ── Overview ──────────────────────────────────────────────────────────────────

async def structure_overview(db: AsyncSession) -> StructureOverview:
    total_ayahs = (await db.execute(select(func.count(QuranAyah.id)))).scalar()
    total_juz = (await db.execute(select(func.count(distinct(QuranAyah.juz_number))))).scalar()
    total_hizb = (await db.execute(select(func.count(distinct(QuranAyah.hizb_number))))).scalar()

    pairs = select(QuranAyah.juz_number, QuranAyah.hizb_number).distinct().subquery()
    total_pairs = (await db.execute(select(func.count()).select_from(pairs))).scalar()

    # pairs x 4 assumes every hizb splits into four quarters; a hizb with
    # fewer than four ayahs yields fewer in the drill-down.
    short = (await db.execute(
        select(QuranAyah.juz_number, QuranAyah.hizb_number, func.count(QuranAyah.id))
        .group_by(QuranAyah.juz_number, QuranAyah.hizb_number)
        .having(func.count(QuranAyah.id) < QUARTERS_PER_HIZB)
    )).all()
    if short:
        listed = ", ".join(f"{j}/{h} ({n})" for j, h, n in short)
        logger.warning(f"totalQuarters overstates drill-down: hizbs with <4 ayahs (juz/hizb): {listed}")

    return StructureOverview(
        total_ayahs=total_ayahs or 0,
        total_juz=total_juz or 0,
        total_hizb=total_hizb or 0,
        total_quarters=(total_pairs or 0) * QUARTERS_PER_HIZB,
    )


# ── Juz -> Hizbs ──────────────────────────────────────────────────────────────

async def list_hizbs_in_juz(db: AsyncSession, juz: int) -> JuzHizbsData:
    where = FilterBuilder().equals("juz_number", juz).build()

    counts = (await db.execute(
        select(
            QuranAyah.hizb_number,
            func.count(QuranAyah.id).label("ayah_count"),
            func.count(distinct(QuranAyah.quarter_hizb_segment)).label("quarter_count"),
        )
        .where(*where)
        .group_by(QuranAyah.hizb_number)
        .order_by(QuranAyah.hizb_number)
    )).all()

    surah_rows = (await db.execute(
        select(QuranAyah.hizb_number, QuranAyah.sura_number, QuranAyah.sura_name_arabic)
        .where(*where)
        .distinct()
        .order_by(QuranAyah.hizb_number, QuranAyah.sura_number)
    )).all()
    surahs_by_hizb: dict[int, list[SurahRef]] = {}
    for hizb_number, sura_number, sura_name in surah_rows:
        refs = surahs_by_hizb.setdefault(hizb_number, [])
        if not any(r.surah == sura_number for r in refs):
            refs.append(SurahRef(surah=sura_number, surah_name=sura_name))

    hizbs = [
        HizbSummary(
            hizb_number=row.hizb_number,
            quarter_count=row.quarter_count,
            ayah_count=row.ayah_count,
            surahs=surahs_by_hizb.get(row.hizb_number, []),
        )
        for row in counts
    ]
    return JuzHizbsData(juz=juz, hizbs=hizbs)


# ── Hizb -> Quarters ──────────────────────────────────────────────────────────

async def load_hizb_ayahs(db: AsyncSession, juz: int, hizb: int) -> list[QuranAyah]:
    where = FilterBuilder().equals("juz_number", juz).equals("hizb_number", hizb).build()
    result = await db.execute(
        select(QuranAyah).where(*where).order_by(QuranAyah.sura_number, QuranAyah.ayah_number)
    )
    return list(result.scalars().all())


def distinct_surahs(ayahs: list[QuranAyah]) -> list[SurahRef]:
    seen: dict[int, SurahRef] = {}
    for a in ayahs:
        if a.sura_number not in seen:
            seen[a.sura_number] = SurahRef(surah=a.sura_number, surah_name=a.sura_name_arabic or "")
    return [seen[n] for n in sorted(seen)]


def _range_point(ayah: QuranAyah) -> RangePoint:
    return RangePoint(surah=ayah.sura_number, surah_name=ayah.sura_name_arabic, ayah_number=ayah.ayah_number)


async def list_quarters_in_hizb(
    db: AsyncSession, partitioner: QuarterPartitioner, juz: int, hizb: int
) -> HizbQuartersData:
    ayahs = await load_hizb_ayahs(db, juz, hizb)
    quarters = [
        QuarterSummary(
            quarter_number=q.number,
            ayah_count=len(q.ayahs),
            surahs=distinct_surahs(q.ayahs),
            range=QuarterRange(start=_range_point(q.first), end=_range_point(q.last)),
        )
        for q in partitioner.partition(ayahs, hizb)
    ]
    return HizbQuartersData(juz=juz, hizb=hizb, quarters=quarters)


# ── Quarter -> Ayahs ──────────────────────────────────────────────────────────

def format_display_ayah(ayah: QuranAyah, quarter: int) -> DisplayAyah:
    return DisplayAyah(
        id=ayah.verse_key,
        surah=ayah.sura_number,
        surah_name=ayah.sura_name_arabic,
        surah_name_english=ayah.sura_name_english or "",
        ayah=ayah.ayah_number,
        text=ayah.ayah_text_arabic,
        translation=ayah.ayah_text_english or "",
        juz=ayah.juz_number,
        hizb=ayah.hizb_number,
        quarter=quarter,  # the requested quarter, not recomputed
        page=ayah.page_number,
        ruku=ayah.ruku_number,
        sajda=ayah.has_sajda,
    )


async def list_ayahs_in_quarter(
    db: AsyncSession, partitioner: QuarterPartitioner, juz: int, hizb: int, quarter: int
) -> QuarterAyahsData:
    ayahs = await load_hizb_ayahs(db, juz, hizb)
    selected = partitioner.quarter(ayahs, hizb, quarter)
    formatted = [format_display_ayah(a, quarter) for a in selected]
    return QuarterAyahsData(juz=juz, hizb=hizb, quarter=quarter, ayah_count=len(formatted), ayahs=formatted)


async def query_structure(
    db: AsyncSession,
    partitioner: QuarterPartitioner,
    juz: int | None = None,
    hizb: int | None = None,
    quarter: int | None = None,
):
    view = resolve_view(juz, hizb, quarter)
    if view == VIEW_OVERVIEW:
        return OverviewData(structure=await structure_overview(db))
    if view == VIEW_HIZBS:
        return await list_hizbs_in_juz(db, juz)
    if view == VIEW_QUARTERS:
        return await list_quarters_in_hizb(db, partitioner, juz, hizb)
    return await list_ayahs_in_quarter(db, partitioner, juz, hizb, quarter)
