from dataclasses import dataclass

TOTAL_SURAHS = 114
TOTAL_JUZ = 30
HIZBS_PER_JUZ = 2
TOTAL_HIZBS = TOTAL_JUZ * HIZBS_PER_JUZ
QUARTERS_PER_HIZB = 4


@dataclass(frozen=True, order=True)
class AyahKey:
    surah: int
    ayah: int

    def __str__(self) -> str:
        return f"{self.surah}:{self.ayah}"

    @classmethod
    def parse(cls, key: str) -> "AyahKey":
        surah, ayah = key.split(":")
        return cls(surah=int(surah), ayah=int(ayah))


# Quran structure: ayahs per surah (1-114)
SURAH_AYAH_COUNT = [
    7, 286, 200, 176, 120, 165, 206, 75, 129, 109,
    123, 111, 43, 52, 99, 128, 111, 110, 98, 135,
    112, 78, 118, 64, 77, 227, 93, 88, 69, 60,
    34, 30, 73, 54, 45, 83, 182, 88, 75, 85,
    54, 53, 89, 59, 37, 35, 38, 29, 18, 45,
    60, 49, 62, 55, 78, 96, 29, 22, 24, 13,
    14, 11, 11, 18, 12, 12, 30, 52, 52, 44,
    28, 28, 20, 56, 40, 31, 50, 40, 46, 42,
    29, 19, 36, 25, 22, 17, 19, 26, 30, 20,
    15, 21, 11, 8, 8, 19, 5, 8, 8, 11,
    11, 8, 3, 9, 5, 4, 7, 3, 6, 3,
    5, 4, 5, 6,
]


def is_valid_ayah(surah: int, ayah: int) -> bool:
    if not (1 <= surah <= TOTAL_SURAHS):
        return False
    return 1 <= ayah <= SURAH_AYAH_COUNT[surah - 1]


def hizbs_for_juz(juz_num: int) -> tuple[int, int]:
    """Canonical 30x2 mapping: Juz N holds Hizb 2N-1 and 2N."""
    if not (1 <= juz_num <= TOTAL_JUZ):
        raise ValueError(f"juz must be 1-{TOTAL_JUZ}, got {juz_num}")
    return 2 * juz_num - 1, 2 * juz_num


def juz_for_hizb(hizb_num: int) -> int:
    if not (1 <= hizb_num <= TOTAL_HIZBS):
        raise ValueError(f"hizb must be 1-{TOTAL_HIZBS}, got {hizb_num}")
    return (hizb_num + 1) // 2


def hizb_in_juz(juz_num: int, hizb_num: int) -> bool:
    return hizb_num in hizbs_for_juz(juz_num)


def rub_number(hizb_num: int, quarter_num: int) -> int:
    """Global Rub' index (1-240)."""
    return (hizb_num - 1) * QUARTERS_PER_HIZB + quarter_num


# ── Arabic ordinal names ──────────────────────────────────────────────────────

_ONES = ["", "الأول", "الثاني", "الثالث", "الرابع", "الخامس", "السادس", "السابع", "الثامن", "التاسع"]
_TENS = {2: "العشرون", 3: "الثلاثون", 4: "الأربعون", 5: "الخمسون", 6: "الستون"}


def arabic_ordinal(n: int) -> str:
    """Masculine ordinal 1-69, e.g. 21 -> 'الحادي والعشرون'."""
    if n < 1 or n >= 70:
        return str(n)
    if n < 10:
        return _ONES[n]
    if n == 10:
        return "العاشر"
    unit = n % 10
    unit_word = "الحادي" if unit == 1 else _ONES[unit]
    if n < 20:
        return f"{unit_word} عشر"
    tens = _TENS[n // 10]
    if unit == 0:
        return tens
    return f"{unit_word} و{tens}"


def juz_name(juz_num: int) -> str:
    if 1 <= juz_num <= TOTAL_JUZ:
        return f"الجزء {arabic_ordinal(juz_num)}"
    return f"الجزء {juz_num}"


def hizb_name(hizb_num: int) -> str:
    if 1 <= hizb_num <= TOTAL_HIZBS:
        return f"الحزب {arabic_ordinal(hizb_num)}"
    return f"الحزب {hizb_num}"
