"""
Seed the catalog tables from a JSON file.
Creates flight_packages / cached_products and inserts packages and tours.
Run: python scripts/seed_packages.py [path/to/catalog.json]
"""

import json
import os
import sys
from datetime import datetime, timedelta

# Add backend directory to path for app imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import func
from sqlalchemy.orm import sessionmaker

from app.db.database import engine
from app.db.models import Base, CachedTour, FlightPackage

DEFAULT_CATALOG = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    "app", "ingestion", "sample_catalog.json",
)

# JSON key -> model column (missing keys fall back to column defaults)
PACKAGE_FIELDS = (
    "title", "slug", "category", "countries", "tags", "price", "description",
    "excerpt", "whats_included", "highlights", "itinerary", "featured_image",
    "duration", "is_published", "display_order",
)
TOUR_CACHE_DAYS = 7


def main():
    json_path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CATALOG
    print(f"Catalog: {json_path}")

    with open(json_path, "r", encoding="utf-8") as f:
        catalog = json.load(f)

    Base.metadata.create_all(engine)
    print("Tables ready")

    Session = sessionmaker(bind=engine)
    session = Session()

    existing_slugs = {s for (s,) in session.query(FlightPackage.slug).all()}
    existing_tours = {p for (p,) in session.query(CachedTour.product_id).all()}

    packages_added = 0
    packages_skipped = 0
    for pkg_data in catalog.get("packages", []):
        slug = pkg_data.get("slug", "")
        if not slug or slug in existing_slugs:
            packages_skipped += 1
            continue
        existing_slugs.add(slug)
        row = {k: pkg_data[k] for k in PACKAGE_FIELDS if k in pkg_data}
        session.add(FlightPackage(**row))
        packages_added += 1

    tours_added = 0
    tours_skipped = 0
    now = datetime.utcnow()
    for tour_data in catalog.get("tours", []):
        product_id = str(tour_data.get("product_id", ""))
        if not product_id or product_id in existing_tours:
            tours_skipped += 1
            continue
        existing_tours.add(product_id)
        session.add(CachedTour(
            product_id=product_id,
            data=tour_data.get("data", {}),
            cached_at=now,
            expires_at=now + timedelta(days=TOUR_CACHE_DAYS),
        ))
        tours_added += 1

    session.commit()

    published = session.query(func.count(FlightPackage.id)).filter(
        FlightPackage.is_published.is_(True)
    ).scalar()
    print(f"\nPackages: {packages_added} inserted ({packages_skipped} skipped), {published} published")
    print(f"Tours: {tours_added} inserted ({tours_skipped} skipped)")

    session.close()
    engine.dispose()
    print("\nSeed complete! Run scripts/build_keyword_index.py to preview the index.")


if __name__ == "__main__":
    main()
