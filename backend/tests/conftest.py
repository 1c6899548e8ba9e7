"""Pytest fixtures: in-memory catalog, isolated keyword index, API client."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

from datetime import datetime, timedelta
from typing import List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.rate_limiting import limiter
from app.db.database import get_db
from app.db.models import Base, CachedTour, FlightPackage
from app.main import app
from app.services.keyword_index import KeywordIndexStore, get_keyword_index


def make_packages() -> List[FlightPackage]:
    return [
        FlightPackage(
            id=1,
            title="Maldives Overwater Villa Escape",
            slug="maldives-overwater-villa-escape",
            category="Maldives",
            countries=["Maldives"],
            tags=["Beach", "Luxury", "Honeymoon"],
            price=2899.0,
            description="<p>Seven nights in a luxurious <strong>overwater villa</strong> with snorkeling.</p>",
            excerpt="Return flights and seven nights on a sandy beachfront.",
            whats_included=["Seaplane transfers", "All-inclusive dining"],
            highlights=["Sunset dolphin cruise"],
            itinerary=[{"day": 1, "title": "Arrive in Male", "description": "Seaplane to the atoll."}],
            featured_image="https://images.example.com/maldives.jpg",
            duration="7 Nights / 9 Days",
            is_published=True,
            display_order=1,
        ),
        FlightPackage(
            id=2,
            title="Golden Triangle & Ranthambore",
            slug="golden-triangle-ranthambore",
            category="India",
            countries=["India"],
            tags=["Cultural", "Wildlife"],
            price=1649.0,
            description="<p>Delhi, Agra and Jaipur with a tiger safari in Ranthambore National Park.</p>",
            excerpt="Palaces, the Taj Mahal and a tiger game drive.",
            whats_included=["Private driver", "Heritage hotels"],
            highlights=["Amber Fort"],
            itinerary=[],
            duration="10 Nights / 12 Days",
            is_published=True,
            display_order=2,
        ),
        FlightPackage(
            id=3,
            title="Rome City Break",
            slug="rome-city-break",
            category="Italy",
            countries=["Italy"],
            tags=["City Break"],
            price=699.0,
            description="<p>Three nights in central Rome with a Colosseum and Vatican museum tour.</p>",
            excerpt="Ancient Rome, cafes and piazzas.",
            whats_included=["Boutique hotel"],
            highlights=["Colosseum"],
            itinerary=[],
            duration="3 Nights / 4 Days",
            is_published=True,
            display_order=3,
        ),
        FlightPackage(
            id=4,
            title="Kenya Safari & Zanzibar Beach",
            slug="kenya-safari-zanzibar-beach",
            category="Kenya",
            countries=["Kenya", "Tanzania"],
            tags=["Safari", "Beach", "Multi-Centre"],
            price=3450.0,
            description="<p>Big five game drives in the Masai Mara, then a week on Zanzibar.</p>",
            excerpt="Safari lodge and white sand beaches in one trip.",
            whats_included=["Game drives"],
            highlights=["Masai Mara"],
            itinerary=[],
            duration="12 Nights / 14 Days",
            is_published=True,
            display_order=4,
        ),
        FlightPackage(
            id=5,
            title="Draft: Iceland Northern Lights",
            slug="iceland-northern-lights-draft",
            category="Iceland",
            countries=["Iceland"],
            tags=["Adventure"],
            price=1199.0,
            description="<p>Unpublished draft.</p>",
            whats_included=[],
            highlights=[],
            itinerary=[],
            duration="4 Nights / 5 Days",
            is_published=False,
            display_order=99,
        ),
    ]


def make_tours() -> List[CachedTour]:
    now = datetime.utcnow()
    return [
        CachedTour(
            product_id="bk-1001",
            data={
                "title": "Paris Adventure",
                "excerpt": "Montmartre, the Louvre and a Seine river cruise.",
                "summary": "A week exploring Paris on foot and by boat.",
                "country": "France",
                "keywords": ["City Break", "Cultural"],
                "price": 899,
                "durationText": "6 days",
                "keyPhoto": {"originalUrl": "https://images.example.com/paris.jpg"},
            },
            cached_at=now,
            expires_at=now + timedelta(days=7),
        ),
        CachedTour(
            product_id="bk-1002",
            data={
                "title": "Kyoto Temples & Tea",
                "excerpt": "Zen gardens and a tea ceremony.",
                "country": "Japan",
                "keywords": ["Cultural"],
                "price": 450,
                "durationText": "2 days",
            },
            cached_at=now,
            expires_at=now + timedelta(days=7),
        ),
    ]


@pytest.fixture
def published_packages() -> List[FlightPackage]:
    """Transient (session-less) published packages."""
    return [p for p in make_packages() if p.is_published]


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, autoflush=False)
    session = Session()
    session.add_all(make_packages())
    session.add_all(make_tours())
    session.commit()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def index_store() -> KeywordIndexStore:
    return KeywordIndexStore()


@pytest.fixture
def client(db_session, index_store):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_keyword_index] = lambda: index_store
    limiter.reset()

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def offline_client():
    """Client whose database dependency reports an outage."""
    def override_get_db():
        yield None

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()

    yield TestClient(app)

    app.dependency_overrides.clear()
