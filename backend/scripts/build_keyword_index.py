"""
Build and inspect the keyword index
===================================
Builds the holiday-type keyword index from published packages, prints the
holiday-type distribution and runs a sample text search.

Usage:
  python scripts/build_keyword_index.py ["sample query"]

Requires: catalog seeded (scripts/seed_packages.py).
"""

import os
import sys
import time

# Add backend directory to path for app imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.db.database import SessionLocal
from app.db.repositories import CachedTourRepository, FlightPackageRepository
from app.services.catalog import build_searchable_catalog, package_to_indexable
from app.services.keyword_index import KeywordIndexStore
from app.services.search_engine import search_items


def main():
    query = sys.argv[1] if len(sys.argv) > 1 else "beach"

    print("=" * 60)
    print("  Keyword Index Builder")
    print("=" * 60)

    db = SessionLocal()
    try:
        packages = FlightPackageRepository(db).get_published()
        tours = CachedTourRepository(db).get_all()
        print(f"\nPublished packages: {len(packages)} | Cached tours: {len(tours)}")

        if not packages:
            print("ERROR: No published packages. Run scripts/seed_packages.py first.")
            return

        store = KeywordIndexStore()
        start = time.time()
        store.build(package_to_indexable(p) for p in packages)
        elapsed = time.time() - start

        stats = store.stats()
        print(f"\nIndex built in {elapsed * 1000:.0f}ms")
        print(f"  Packages indexed: {stats['packages']}")
        print(f"  Holiday type matches: {stats['holiday_type_matches']}")
        for holiday_type, count in sorted(stats["distribution"].items(), key=lambda x: -x[1]):
            print(f"    {holiday_type:<16} {count}")

        print(f"\nSample search: '{query}'")
        results = search_items(build_searchable_catalog(packages, tours), query)
        if results:
            for r in results[:5]:
                print(f"    [{r.score:6.2f}] {r.type:<7} {r.title}  ({', '.join(r.matched_fields)})")
        else:
            print("  No results")
    finally:
        db.close()


if __name__ == "__main__":
    main()
