"""
Split one Hizb's ayahs into its Rub' al-Hizb quarters.

The default split is size based: ceil(N / 4) ayahs per quarter, last quarter
takes the remainder, empty quarters are dropped. This approximates the real
Rub' boundaries, which are not equal in verse count. When a boundary table is
configured (QUARTER_BOUNDARIES_FILE), each quarter instead starts at its
recorded ayah.

Boundaries are recomputed on every call and never stored.
"""
import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Sequence, TypeVar

from utils.juz_data import AyahKey, QUARTERS_PER_HIZB, TOTAL_HIZBS

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Quarter:
    number: int  # 1-4
    ayahs: list = field(default_factory=list)

    @property
    def first(self):
        return self.ayahs[0]

    @property
    def last(self):
        return self.ayahs[-1]


def size_based_bounds(total: int) -> list[tuple[int, int]]:
    """[start, end) index pairs for up to four contiguous non-empty quarters."""
    if total <= 0:
        return []
    per_quarter = math.ceil(total / QUARTERS_PER_HIZB)
    bounds = []
    for i in range(QUARTERS_PER_HIZB):
        start = i * per_quarter
        end = min((i + 1) * per_quarter, total)
        if start < end:
            bounds.append((start, end))
    return bounds


class BoundarySource(Protocol):
    def bounds(self, hizb_number: int, keys: Sequence[AyahKey]) -> list[tuple[int, int, int]]:
        """(quarter_number, start, end) for each non-empty quarter, in order."""
        ...


class SizeBasedBoundaries:
    name = "size"

    def bounds(self, hizb_number: int, keys: Sequence[AyahKey]) -> list[tuple[int, int, int]]:
        return [(i + 1, start, end) for i, (start, end) in enumerate(size_based_bounds(len(keys)))]


class RubBoundaryTable:
    """Authoritative quarter starts: {hizb: [start key of quarter 1..4]}.

    Hizbs without an entry fall back to the size-based split.
    """

    name = "table"

    def __init__(self, starts: dict[int, list[AyahKey]]):
        for hizb, keys in starts.items():
            if not (1 <= hizb <= TOTAL_HIZBS):
                raise ValueError(f"Boundary table: hizb {hizb} out of range")
            if len(keys) != QUARTERS_PER_HIZB:
                raise ValueError(f"Boundary table: hizb {hizb} needs {QUARTERS_PER_HIZB} starts, got {len(keys)}")
            if list(keys) != sorted(keys):
                raise ValueError(f"Boundary table: hizb {hizb} starts are not ascending")
        self.starts = starts
        self._fallback = SizeBasedBoundaries()

    @classmethod
    def from_file(cls, path: str | Path) -> "RubBoundaryTable":
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        starts = {int(hizb): [AyahKey.parse(k) for k in keys] for hizb, keys in raw.items()}
        logger.info(f"Loaded Rub' boundaries for {len(starts)} hizbs from {path}")
        return cls(starts)

    def bounds(self, hizb_number: int, keys: Sequence[AyahKey]) -> list[tuple[int, int, int]]:
        starts = self.starts.get(hizb_number)
        if starts is None:
            return self._fallback.bounds(hizb_number, keys)

        total = len(keys)
        # Index of the first ayah at or after each recorded start. Quarter 1
        # always opens at 0 so nothing before its recorded start is dropped.
        cut = [0]
        for start_key in starts[1:]:
            idx = cut[-1]
            while idx < total and keys[idx] < start_key:
                idx += 1
            cut.append(idx)
        cut.append(total)

        result = []
        for i in range(QUARTERS_PER_HIZB):
            if cut[i] < cut[i + 1]:
                result.append((i + 1, cut[i], cut[i + 1]))
        return result


class QuarterPartitioner:
    def __init__(self, source: BoundarySource | None = None):
        self.source = source or SizeBasedBoundaries()

    @classmethod
    def from_settings(cls, boundaries_file: str) -> "QuarterPartitioner":
        if boundaries_file:
            return cls(RubBoundaryTable.from_file(boundaries_file))
        return cls(SizeBasedBoundaries())

    def partition(self, ayahs: Sequence[T], hizb_number: int = 0) -> list[Quarter]:
        """Split ayahs (already sorted by surah, ayah) into at most four quarters."""
        keys = [AyahKey(a.sura_number, a.ayah_number) for a in ayahs]
        return [
            Quarter(number=number, ayahs=list(ayahs[start:end]))
            for number, start, end in self.source.bounds(hizb_number, keys)
        ]

    def quarter(self, ayahs: Sequence[T], hizb_number: int, quarter_number: int) -> list[T]:
        """Ayahs of one quarter, or [] if that quarter is empty."""
        for q in self.partition(ayahs, hizb_number):
            if q.number == quarter_number:
                return q.ayahs
        return []
