from typing import Any
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialises snake_case fields as camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def ok(data: Any) -> dict:
    """Wrap a payload in the {success, data} envelope."""
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True)
    elif isinstance(data, list):
        data = [d.model_dump(by_alias=True) if isinstance(d, BaseModel) else d for d in data]
    return {"success": True, "data": data}


# ── Drill-down (admin content) ────────────────────────────────────────────────

class StructureOverview(CamelModel):
    total_ayahs: int
    total_juz: int
    total_hizb: int
    total_quarters: int


class OverviewData(CamelModel):
    structure: StructureOverview


class SurahRef(CamelModel):
    surah: int
    surah_name: str


class HizbSummary(CamelModel):
    hizb_number: int
    quarter_count: int  # distinct legacy quarter tags, informational
    ayah_count: int
    surahs: list[SurahRef]


class JuzHizbsData(CamelModel):
    juz: int
    hizbs: list[HizbSummary]


class RangePoint(CamelModel):
    surah: int
    surah_name: str
    ayah_number: int


class QuarterRange(CamelModel):
    start: RangePoint
    end: RangePoint


class QuarterSummary(CamelModel):
    quarter_number: int
    ayah_count: int
    surahs: list[SurahRef]
    range: QuarterRange


class HizbQuartersData(CamelModel):
    juz: int
    hizb: int
    quarters: list[QuarterSummary]


class DisplayAyah(CamelModel):
    id: str
    surah: int
    surah_name: str
    surah_name_english: str
    ayah: int
    text: str
    translation: str
    juz: int
    hizb: int
    quarter: int
    page: int | None
    ruku: int | None
    sajda: bool


class QuarterAyahsData(CamelModel):
    juz: int
    hizb: int
    quarter: int
    ayah_count: int
    ayahs: list[DisplayAyah]


# ── Public reading ────────────────────────────────────────────────────────────

class SurahListItem(CamelModel):
    number: int
    name: str
    name_english: str
    number_of_ayahs: int


class AyahItem(CamelModel):
    number: int
    text: str
    translation: str
    sura_number: int
    sura_name_arabic: str
    juz: int
    hizb: int
    quarter: str  # legacy tag as stored
    page: int | None
    sajda: bool
    is_bismillah: bool


class SurahDetail(CamelModel):
    number: int
    name: str
    name_english: str
    number_of_ayahs: int
    ayahs: list[AyahItem]


class SurahGroup(CamelModel):
    sura_number: int
    sura_name_arabic: str
    ayahs: list[AyahItem]


class JuzDetail(CamelModel):
    number: int
    name: str
    english_name: str
    total_ayahs: int
    surahs: list[SurahGroup]
    ayahs: list[AyahItem]


class SurahBoundary(CamelModel):
    number: int
    name: str
    ayah: int


class RubSummary(CamelModel):
    quarter_number: int
    rub_number: int
    total_ayahs: int
    range: str


class JuzHizbEntry(CamelModel):
    hizb_number: int
    name: str
    total_ayahs: int
    range: str
    quarters: list[RubSummary]


class JuzListItem(CamelModel):
    number: int
    name: str
    english_name: str
    total_ayahs: int
    start_surah: SurahBoundary
    end_surah: SurahBoundary
    range: str
    hizbs: list[JuzHizbEntry]


class SearchResults(CamelModel):
    query: str
    total: int
    results: list[AyahItem]
