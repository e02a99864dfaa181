#!/usr/bin/env python3
"""
Import Quran ayahs and tag them with Juz / Hizb / quarter numbers.

Usage:
    python scripts/import_quran_structure.py data/quran_ayahs.json
    python scripts/import_quran_structure.py data/quran_ayahs.json --structure data/quran_juz_hizb_rub.json --strict
"""
import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import logging
logging.basicConfig(level=logging.INFO)

from config import get_settings
from database import Database
from services.importer import (
    load_json, parse_records, structure_tags, apply_structure, verify_structure, upsert_ayahs,
)

settings = get_settings()


async def run(args) -> int:
    records = parse_records(load_json(args.ayahs))
    print(f"Loaded {len(records)} ayahs from {args.ayahs}")

    if args.structure:
        tags = structure_tags(load_json(args.structure))
        tagged = apply_structure(records, tags)
        print(f"Applied structure tags to {tagged} ayahs ({len(tags)} in {args.structure})")

    report = verify_structure(records)
    print("\n=== Verification ===")
    for line in report.lines():
        print(f"  {line}")

    if args.strict and not report.ok:
        print("\n[fail] Structure checks failed, nothing written (--strict)")
        return 1

    if args.dry_run:
        print("\n[dry-run] Skipping database write")
        return 0

    database = Database(settings.DATABASE_URL)
    try:
        await database.create_all()
        async with database.session_factory() as db:
            inserted, updated = await upsert_ayahs(db, records)
    finally:
        await database.dispose()

    print(f"\n=== Import Complete === inserted {inserted}, updated {updated}")
    if not report.ok:
        print("[warn] Structure checks reported problems, see above")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Import Quran ayahs and Juz/Hizb/Rub' tags")
    parser.add_argument("ayahs", help="JSON list of ayah records")
    parser.add_argument("--structure", help="Nested Juz/Hizb/quarter JSON to tag ayahs with")
    parser.add_argument("--strict", action="store_true", help="Abort if any structure check fails")
    parser.add_argument("--dry-run", action="store_true", help="Validate only, do not write")
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
