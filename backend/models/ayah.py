from sqlalchemy import String, Text, SmallInteger, Integer, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from database import Base

SAJDA_TYPES = ("none", "obligatory", "recommended")


class QuranAyah(Base):
    """One verse. Reference data written by the offline import, read-only at runtime."""

    __tablename__ = "quran_ayahs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sura_number: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    sura_name_arabic: Mapped[str] = mapped_column(String(100), nullable=False)
    sura_name_english: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ayah_number: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    ayah_text_arabic: Mapped[str] = mapped_column(Text, nullable=False)
    ayah_text_english: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Structure
    juz_number: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    hizb_number: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    quarter_hizb_segment: Mapped[str] = mapped_column(String(10), nullable=False, default="0")  # legacy tag
    page_number: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    ruku_number: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    sajda_type: Mapped[str] = mapped_column(String(20), nullable=False, default="none")
    is_bismillah: Mapped[bool] = mapped_column(default=False)

    __table_args__ = (
        UniqueConstraint("sura_number", "ayah_number", name="uq_quran_ayahs_sura_ayah"),
        Index("idx_quran_ayahs_juz_hizb", "juz_number", "hizb_number"),
        Index("idx_quran_ayahs_hizb", "hizb_number"),
    )

    @property
    def verse_key(self) -> str:
        return f"{self.sura_number}:{self.ayah_number}"

    @property
    def has_sajda(self) -> bool:
        return self.sajda_type in ("obligatory", "recommended")
