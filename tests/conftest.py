"""
Shared fixtures for the Quran content backend tests.

The app runs against an on-disk SQLite database (aiosqlite driver) seeded
synchronously before startup, with Redis replaced by an in-memory double.
"""
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from api.deps import get_cache
from config import Settings
from database import Base
from main import create_app
from models import QuranAyah
from redis_client import ContentCache

ADMIN_KEY = "test-admin-key"

SURAH_NAMES = {
    1: ("الفاتحة", "Al-Fatihah"),
    2: ("البقرة", "Al-Baqarah"),
}


def ayah_record(sura, ayah, juz, hizb, segment="1", **extra):
    name_ar, name_en = SURAH_NAMES[sura]
    record = {
        "sura_number": sura,
        "sura_name_arabic": name_ar,
        "sura_name_english": name_en,
        "ayah_number": ayah,
        "ayah_text_arabic": f"نص {sura}:{ayah}",
        "ayah_text_english": f"Verse {sura}:{ayah}",
        "juz_number": juz,
        "hizb_number": hizb,
        "quarter_hizb_segment": segment,
        "page_number": 1 + (ayah // 15),
        "ruku_number": 1,
        "sajda_type": "none",
        "is_bismillah": sura == 1 and ayah == 1,
    }
    record.update(extra)
    return record


def build_records():
    """50 ayahs: Hizb 1 (40 ayahs) and Hizb 2 (7) in Juz 1, Hizb 3 (3) in Juz 2."""
    hizb1 = [(1, a) for a in range(1, 8)] + [(2, a) for a in range(1, 34)]
    records = [ayah_record(s, a, 1, 1, segment=str(i // 10 + 1)) for i, (s, a) in enumerate(hizb1)]
    for a in range(34, 41):
        extra = {}
        if a == 35:
            extra["sajda_type"] = "obligatory"
        elif a == 36:
            extra["sajda_type"] = "recommended"
        records.append(ayah_record(2, a, 1, 2, **extra))
    for a in range(41, 44):
        records.append(ayah_record(2, a, 2, 3))
    return records


def verse(sura, ayah):
    return SimpleNamespace(sura_number=sura, ayah_number=ayah)


class FakeRedis:
    """Minimal async stand-in for redis.asyncio.Redis (get/set)."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.ttls[key] = ex

    async def aclose(self):
        pass


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def records():
    return build_records()


@pytest.fixture
def db_path(tmp_path, records):
    path = tmp_path / "quran.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all([QuranAyah(**r) for r in records])
        session.commit()
    engine.dispose()
    return path


@pytest.fixture
def settings(db_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{db_path}",
        ADMIN_API_KEY=ADMIN_KEY,
        SEARCH_DEFAULT_LIMIT=5,
        SEARCH_MAX_LIMIT=10,
    )


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache(fake_redis):
    return ContentCache(fake_redis, default_ttl=1800)


@pytest.fixture
def app(settings, cache):
    app = create_app(settings)
    app.dependency_overrides[get_cache] = lambda: cache
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": ADMIN_KEY}
