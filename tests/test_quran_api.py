"""
API tests for the public reading endpoints.
"""
import json
from datetime import datetime, timezone

import pytest

import api.quran
from utils.time_utils import day_seed


class TestSurahs:
    def test_list(self, client):
        body = client.get("/quran/surahs").json()
        assert body["success"] is True
        assert body["data"] == [
            {"number": 1, "name": "الفاتحة", "nameEnglish": "Al-Fatihah", "numberOfAyahs": 7},
            {"number": 2, "name": "البقرة", "nameEnglish": "Al-Baqarah", "numberOfAyahs": 43},
        ]

    def test_list_is_cached(self, client, fake_redis, settings):
        client.get("/quran/surahs")
        assert fake_redis.ttls["surahs:list"] == settings.CACHE_LIST_TTL_SECONDS

        fake_redis.store["surahs:list"] = json.dumps([{"number": 99}])
        assert client.get("/quran/surahs").json()["data"] == [{"number": 99}]

    def test_surah_range(self, client):
        data = client.get("/quran/surah/2", params={"startAyah": 5, "endAyah": 8}).json()["data"]
        assert data["numberOfAyahs"] == 4
        assert [a["number"] for a in data["ayahs"]] == [5, 6, 7, 8]
        assert data["ayahs"][0]["suraNameArabic"] == "البقرة"

    def test_surah_start_only(self, client):
        data = client.get("/quran/surah/1", params={"startAyah": 6}).json()["data"]
        assert [a["number"] for a in data["ayahs"]] == [6, 7]

    def test_surah_bad_range(self, client):
        resp = client.get("/quran/surah/2", params={"startAyah": 9, "endAyah": 3})
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    @pytest.mark.parametrize("n,message", [(0, "Invalid Surah number"), (115, "Invalid Surah number"), (3, "Surah not found")])
    def test_surah_not_found(self, client, n, message):
        resp = client.get(f"/quran/surah/{n}")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": message}

    def test_non_numeric_surah(self, client):
        assert client.get("/quran/surah/abc").status_code == 400


class TestJuz:
    def test_list(self, client):
        data = client.get("/quran/juz").json()["data"]
        assert [j["number"] for j in data] == [1, 2]

        juz1 = data[0]
        assert juz1["name"] == "الجزء الأول"
        assert juz1["englishName"] == "Juz 1"
        assert juz1["totalAyahs"] == 47
        assert juz1["startSurah"] == {"number": 1, "name": "الفاتحة", "ayah": 1}
        assert juz1["endSurah"] == {"number": 2, "name": "البقرة", "ayah": 40}
        assert juz1["range"] == "الفاتحة (1:1) - البقرة (2:40)"

        hizb2 = juz1["hizbs"][1]
        assert hizb2["hizbNumber"] == 2
        assert hizb2["name"] == "الحزب الثاني"
        assert [q["totalAyahs"] for q in hizb2["quarters"]] == [2, 2, 2, 1]
        assert [q["rubNumber"] for q in hizb2["quarters"]] == [5, 6, 7, 8]
        assert hizb2["quarters"][3]["range"] == "البقرة (2:40) - البقرة (2:40)"

    def test_detail(self, client):
        data = client.get("/quran/juz/2").json()["data"]
        assert data["totalAyahs"] == 3
        assert data["surahs"][0]["suraNumber"] == 2
        assert [a["number"] for a in data["surahs"][0]["ayahs"]] == [41, 42, 43]

    def test_detail_groups_surahs(self, client):
        data = client.get("/quran/juz/1").json()["data"]
        assert [(s["suraNumber"], len(s["ayahs"])) for s in data["surahs"]] == [(1, 7), (2, 40)]

    @pytest.mark.parametrize("n,message", [(31, "Invalid Juz number"), (5, "Juz not found")])
    def test_not_found(self, client, n, message):
        resp = client.get(f"/quran/juz/{n}")
        assert resp.status_code == 404
        assert resp.json()["message"] == message


class TestAyah:
    def test_found(self, client):
        data = client.get("/quran/ayah/2/35").json()["data"]
        assert data["number"] == 35
        assert data["hizb"] == 2
        assert data["sajda"] is True
        assert data["translation"] == "Verse 2:35"

    def test_missing(self, client):
        resp = client.get("/quran/ayah/2/200")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": "Ayah not found"}


class TestSearch:
    def test_matches_translation(self, client):
        data = client.get("/quran/search", params={"q": "verse 2:4"}).json()["data"]
        assert data["query"] == "verse 2:4"
        # 2:4 and 2:40..2:43, capped by SEARCH_DEFAULT_LIMIT=5
        assert [a["number"] for a in data["results"]] == [4, 40, 41, 42, 43]

    def test_surah_filter(self, client):
        data = client.get("/quran/search", params={"q": "1:", "surah": 1, "limit": 3}).json()["data"]
        assert data["total"] == 3
        assert all(a["suraNumber"] == 1 for a in data["results"])

    def test_limit_is_clamped(self, client):
        data = client.get("/quran/search", params={"q": "نص", "limit": 500}).json()["data"]
        assert data["total"] == 10

    def test_matches_surah_name(self, client):
        data = client.get("/quran/search", params={"q": "الفاتحة", "limit": 10}).json()["data"]
        assert data["total"] == 7

    def test_blank_query(self, client):
        resp = client.get("/quran/search", params={"q": "  "})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid parameters: q is required"


class TestAyahOfTheDay:
    def test_deterministic_for_date(self, client, records, monkeypatch, fake_redis):
        fixed = datetime(2026, 10, 18, 8, 30, tzinfo=timezone.utc)
        monkeypatch.setattr(api.quran, "utc_now", lambda: fixed)

        ordered = sorted(records, key=lambda r: (r["sura_number"], r["ayah_number"]))
        expected = ordered[day_seed(fixed.date()) % len(ordered)]

        data = client.get("/quran/ayah-of-the-day").json()["data"]
        assert (data["suraNumber"], data["number"]) == (expected["sura_number"], expected["ayah_number"])
        assert data["date"] == "2026-10-18"
        assert "ayah-of-day:2026-10-18" in fake_redis.store


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "service": "quran-content"}
