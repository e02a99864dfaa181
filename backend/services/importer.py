"""
Offline import of ayah reference data and its Juz/Hizb/quarter tags.

Input files:
  ayahs      JSON list of records keyed like the quran_ayahs columns
  structure  nested [{juz, hizb: [{hizbNumber, quarters: [{quarterNumber, ayahs: [{surah, ayah}]}]}]}]
"""
import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import QuranAyah, SAJDA_TYPES
from utils.juz_data import QUARTERS_PER_HIZB, TOTAL_JUZ, TOTAL_HIZBS, hizb_in_juz, is_valid_ayah

logger = logging.getLogger(__name__)

_COLUMNS = {c.name for c in QuranAyah.__table__.columns} - {"id"}
_REQUIRED = ("sura_number", "sura_name_arabic", "ayah_number", "ayah_text_arabic")


def load_json(path: str | Path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def parse_records(raw: list[dict]) -> list[dict]:
    """Keep known columns and check required fields; raises ValueError on bad rows."""
    records = []
    for i, row in enumerate(raw):
        missing = [k for k in _REQUIRED if row.get(k) in (None, "")]
        if missing:
            raise ValueError(f"Record {i}: missing {', '.join(missing)}")
        record = {k: v for k, v in row.items() if k in _COLUMNS}
        record["sura_number"] = int(record["sura_number"])
        record["ayah_number"] = int(record["ayah_number"])
        if not is_valid_ayah(record["sura_number"], record["ayah_number"]):
            raise ValueError(f"Record {i}: no such ayah {record['sura_number']}:{record['ayah_number']}")
        sajda = record.get("sajda_type") or "none"
        if sajda not in SAJDA_TYPES:
            raise ValueError(f"Record {i}: unknown sajda_type {sajda!r}")
        record["sajda_type"] = sajda
        records.append(record)
    return records


def structure_tags(structure: list[dict]) -> dict[tuple[int, int], dict]:
    """(surah, ayah) -> {juz_number, hizb_number, quarter_hizb_segment}."""
    tags = {}
    for juz in structure:
        for hizb in juz["hizb"]:
            for quarter in hizb["quarters"]:
                for ayah in quarter["ayahs"]:
                    tags[(int(ayah["surah"]), int(ayah["ayah"]))] = {
                        "juz_number": int(juz["juz"]),
                        "hizb_number": int(hizb["hizbNumber"]),
                        "quarter_hizb_segment": str(quarter["quarterNumber"]),
                    }
    return tags


def apply_structure(records: list[dict], tags: dict[tuple[int, int], dict]) -> int:
    """Merge structure tags into records in place. Returns how many were tagged."""
    tagged = 0
    for record in records:
        tag = tags.get((record["sura_number"], record["ayah_number"]))
        if tag:
            record.update(tag)
            tagged += 1
    return tagged


@dataclass
class StructureReport:
    total_ayahs: int = 0
    juz_count: int = 0
    hizb_count: int = 0
    quarter_tag_count: int = 0
    unassigned: int = 0
    mismatched: list[str] = field(default_factory=list)
    short_hizbs: list[tuple[int, int, int]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return (
            self.unassigned == 0
            and not self.mismatched
            and not self.short_hizbs
            and self.juz_count == TOTAL_JUZ
            and self.hizb_count == TOTAL_HIZBS
        )

    def lines(self) -> list[str]:
        out = [
            f"Total ayahs: {self.total_ayahs}",
            f"Unique Juz (excluding 0): {self.juz_count} (should be {TOTAL_JUZ})",
            f"Unique Hizb (excluding 0): {self.hizb_count} (should be {TOTAL_HIZBS})",
            f"Unique (hizb, quarter) tags: {self.quarter_tag_count} (should be {TOTAL_HIZBS * QUARTERS_PER_HIZB})",
            f"Unassigned ayahs (Juz=0): {self.unassigned} (should be 0)",
        ]
        if self.mismatched:
            out.append(f"Hizb outside its Juz: {len(self.mismatched)} e.g. {', '.join(self.mismatched[:5])}")
        for juz, hizb, n in self.short_hizbs:
            out.append(f"Juz {juz} Hizb {hizb} has {n} ayahs, fewer than {QUARTERS_PER_HIZB} quarters")
        return out


def verify_structure(records: list[dict]) -> StructureReport:
    report = StructureReport(total_ayahs=len(records))
    per_hizb: Counter = Counter()
    juzs, hizbs, quarter_tags = set(), set(), set()
    for r in records:
        juz, hizb = r.get("juz_number", 0) or 0, r.get("hizb_number", 0) or 0
        if juz == 0:
            report.unassigned += 1
            continue
        juzs.add(juz)
        if hizb:
            hizbs.add(hizb)
            per_hizb[(juz, hizb)] += 1
            segment = r.get("quarter_hizb_segment", "0")
            if segment not in (None, "", "0"):
                quarter_tags.add((hizb, segment))
            if not (1 <= juz <= TOTAL_JUZ) or not hizb_in_juz(juz, hizb):
                report.mismatched.append(f"{r['sura_number']}:{r['ayah_number']}")
    report.juz_count = len(juzs)
    report.hizb_count = len(hizbs)
    report.quarter_tag_count = len(quarter_tags)
    report.short_hizbs = sorted((j, h, n) for (j, h), n in per_hizb.items() if n < QUARTERS_PER_HIZB)
    return report


async def upsert_ayahs(db: AsyncSession, records: list[dict]) -> tuple[int, int]:
    """Insert or update by (sura_number, ayah_number). Returns (inserted, updated)."""
    existing = {
        (a.sura_number, a.ayah_number): a
        for a in (await db.execute(select(QuranAyah))).scalars().all()
    }
    inserted = updated = 0
    for i, record in enumerate(records, start=1):
        current = existing.get((record["sura_number"], record["ayah_number"]))
        if current is None:
            db.add(QuranAyah(**record))
            inserted += 1
        else:
            changed = False
            for k, v in record.items():
                if getattr(current, k) != v:
                    setattr(current, k, v)
                    changed = True
            updated += changed
        if i % 500 == 0:
            logger.info(f"Processed {i} ayahs ({inserted} inserted, {updated} updated)")
    await db.commit()
    return inserted, updated
