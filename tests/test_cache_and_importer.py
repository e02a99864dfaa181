"""
Tests for the Redis content cache and the offline structure import.
"""
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy import select, func

from database import Database
from models import QuranAyah
from redis_client import ContentCache, cache_key
from services.importer import (
    apply_structure, parse_records, structure_tags, upsert_ayahs, verify_structure,
)
from conftest import ayah_record, build_records


class BrokenRedis:
    async def get(self, key):
        raise RedisConnectionError("down")

    async def set(self, key, value, ex=None):
        raise RedisConnectionError("down")


class TestContentCache:
    @pytest.mark.anyio
    async def test_round_trip_with_default_ttl(self, cache, fake_redis):
        await cache.set("k", {"name": "البقرة"})
        assert await cache.get("k") == {"name": "البقرة"}
        assert fake_redis.ttls["k"] == 1800

    @pytest.mark.anyio
    async def test_miss(self, cache):
        assert await cache.get("absent") is None

    @pytest.mark.anyio
    async def test_redis_outage_is_a_miss(self):
        cache = ContentCache(BrokenRedis())
        await cache.set("k", [1])
        assert await cache.get("k") is None

    def test_cache_key(self):
        assert cache_key("surah", 2, 5, "") == "surah:2:5:"


class TestParseRecords:
    def test_drops_unknown_keys(self):
        [record] = parse_records([{**ayah_record(1, 1, 1, 1), "_id": "1:1", "extra": True}])
        assert "_id" not in record and "extra" not in record
        assert record["sajda_type"] == "none"

    @pytest.mark.parametrize("row", [
        {"sura_number": 1, "ayah_number": 1, "sura_name_arabic": "الفاتحة"},
        ayah_record(1, 8, 1, 1),
        ayah_record(1, 1, 1, 1, sajda_type="maybe"),
    ])
    def test_rejects_bad_rows(self, row):
        with pytest.raises(ValueError):
            parse_records([row])


class TestStructure:
    def test_tags_applied(self):
        records = parse_records([ayah_record(1, a, 0, 0, segment="0") for a in range(1, 8)])
        structure = [{
            "juz": 1,
            "hizb": [{
                "hizbNumber": 1,
                "quarters": [
                    {"quarterNumber": 1, "ayahs": [{"surah": 1, "ayah": a} for a in range(1, 5)]},
                    {"quarterNumber": 2, "ayahs": [{"surah": 1, "ayah": a} for a in range(5, 8)]},
                ],
            }],
        }]
        assert apply_structure(records, structure_tags(structure)) == 7
        assert records[4]["quarter_hizb_segment"] == "2"
        assert {r["hizb_number"] for r in records} == {1}

    def test_verify_flags_problems(self):
        records = build_records()
        records.append(ayah_record(2, 50, 1, 5))      # hizb 5 is in juz 3
        records.append(ayah_record(2, 51, 0, 0))      # unassigned
        report = verify_structure(records)

        assert report.unassigned == 1
        assert report.mismatched == ["2:50"]
        assert (2, 3, 3) in report.short_hizbs
        assert not report.ok
        assert any("fewer than 4 quarters" in line for line in report.lines())


class TestUpsert:
    @pytest.mark.anyio
    async def test_insert_then_update(self, tmp_path):
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'import.db'}")
        await database.create_all()
        records = parse_records(build_records())
        try:
            async with database.session_factory() as db:
                assert await upsert_ayahs(db, records) == (50, 0)

            records[0]["ayah_text_english"] = "In the name of God"
            async with database.session_factory() as db:
                assert await upsert_ayahs(db, records) == (0, 1)
                total = (await db.execute(select(func.count(QuranAyah.id)))).scalar()
                first = (await db.execute(
                    select(QuranAyah).where(QuranAyah.sura_number == 1, QuranAyah.ayah_number == 1)
                )).scalar_one()
            assert total == 50
            assert first.ayah_text_english == "In the name of God"
        finally:
            await database.dispose()
