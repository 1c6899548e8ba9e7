"""
Database models -- SQLAlchemy ORM definitions.
Read-side mirror of the storefront's catalog tables:
  flight_packages  flight-inclusive holiday packages (admin-managed)
  cached_products  land tours cached from the booking provider as JSON
Compatible with both PostgreSQL and SQLite.
"""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, JSON, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class FlightPackage(Base):
    """
    Flight-inclusive holiday package.
    List-valued content (countries, tags, highlights, ...) is stored as JSON.
    """
    __tablename__ = "flight_packages"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False)
    slug = Column(Text, unique=True, nullable=False, index=True)
    category = Column(Text, nullable=False, index=True)  # primary country, e.g. "Maldives"
    countries = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)  # e.g. "Beach", "Honeymoon"
    price = Column(Float, nullable=False, default=0.0)
    currency = Column(Text, nullable=False, default="GBP")
    description = Column(Text, nullable=False, default="")  # HTML
    excerpt = Column(Text)
    whats_included = Column(JSON, nullable=False, default=list)
    highlights = Column(JSON, nullable=False, default=list)
    itinerary = Column(JSON, nullable=False, default=list)  # [{day, title, description}]
    featured_image = Column(Text)
    duration = Column(Text)  # e.g. "7 Nights / 9 Days"
    is_published = Column(Boolean, nullable=False, default=False, index=True)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class CachedTour(Base):
    """
    Land tour snapshot from the booking provider.
    `data` holds the provider JSON (title, excerpt, summary, country, keywords,
    price, durationText, keyPhoto).
    """
    __tablename__ = "cached_products"

    product_id = Column(Text, primary_key=True)
    data = Column(JSON, nullable=False)
    cached_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    expires_at = Column(DateTime, nullable=False)
