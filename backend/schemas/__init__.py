from schemas.quran import (
    ok, StructureOverview, OverviewData, SurahRef, HizbSummary, JuzHizbsData,
    RangePoint, QuarterRange, QuarterSummary, HizbQuartersData, DisplayAyah, QuarterAyahsData,
    SurahListItem, AyahItem, SurahDetail, SurahGroup, JuzDetail, JuzListItem, SearchResults,
)

__all__ = [
    "ok", "StructureOverview", "OverviewData", "SurahRef", "HizbSummary", "JuzHizbsData",
    "RangePoint", "QuarterRange", "QuarterSummary", "HizbQuartersData", "DisplayAyah", "QuarterAyahsData",
    "SurahListItem", "AyahItem", "SurahDetail", "SurahGroup", "JuzDetail", "JuzListItem", "SearchResults",
]
