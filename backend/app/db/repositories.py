"""
Repository pattern for data access.
Read-only queries over the storefront catalog.
"""

from typing import List
from sqlalchemy.orm import Session
import logging

from app.db.models import CachedTour, FlightPackage

logger = logging.getLogger(__name__)


class FlightPackageRepository:
    """
    Repository for FlightPackage data access (flight_packages table).
    """

    def __init__(self, db: Session):
        self.db = db

    def get_published(self) -> List[FlightPackage]:
        """All published packages in display order."""
        try:
            return self.db.query(FlightPackage).filter(
                FlightPackage.is_published.is_(True)
            ).order_by(FlightPackage.display_order, FlightPackage.id).all()
        except Exception as e:
            logger.error(f"Error fetching published packages: {str(e)}")
            return []

    def count_published(self) -> int:
        try:
            return self.db.query(FlightPackage).filter(
                FlightPackage.is_published.is_(True)
            ).count()
        except Exception as e:
            logger.error(f"Error counting packages: {str(e)}")
            return 0


class CachedTourRepository:
    """
    Repository for cached provider tours (cached_products table).
    """

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[CachedTour]:
        try:
            return self.db.query(CachedTour).order_by(CachedTour.product_id).all()
        except Exception as e:
            logger.error(f"Error fetching cached tours: {str(e)}")
            return []

    def count(self) -> int:
        try:
            return self.db.query(CachedTour).count()
        except Exception as e:
            logger.error(f"Error counting cached tours: {str(e)}")
            return 0
