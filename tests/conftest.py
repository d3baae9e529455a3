# tests/conftest.py
import os

# Runtime toggles must be set before the service modules read their settings
os.environ.setdefault("ENABLE_SCHEDULER", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DATABASE_URL_LOCAL", "sqlite://")

import pytest
from unittest.mock import MagicMock, patch
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from negotiation_service.models import Base
from negotiation_service.schemas.provider import ServiceProviderCreate
from negotiation_service.schemas.proposal_card import ProposalTerms
from negotiation_service.schemas.service_request import BudgetRange, ServiceRequestCreate
from negotiation_service.services.negotiation import negotiation_engine

ORGANIZER = "user_organizer"
PROVIDER = "user_provider"
OUTSIDER = "user_outsider"


# --- Test Database Setup ---
# In-memory SQLite shared across threads so the TestClient sees the same data.
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


# --- Messaging mocks ---
@pytest.fixture(autouse=True)
def kafka_producer():
    """A mock producer whose sends always succeed."""
    producer = MagicMock()
    with patch("negotiation_service.utils.kafka_helpers.get_kafka_singleton", return_value=producer):
        yield producer


@pytest.fixture(autouse=True)
def redis_mock():
    client = MagicMock()
    with patch("negotiation_service.utils.realtime.redis_client", client):
        yield client


# --- Domain helpers ---
def make_terms(title="Event photography", budget_min=4000, budget_max=5000, timeline="2 weeks"):
    return ProposalTerms(
        title=title,
        description=f"{title} for the annual summit",
        budget_range=BudgetRange(min=budget_min, max=budget_max, currency="USD"),
        timeline=timeline,
    )


@pytest.fixture
def provider(db):
    return negotiation_engine.register_provider(
        db, actor_id=PROVIDER, data=ServiceProviderCreate(business_name="Shutter & Co")
    )


@pytest.fixture
def open_request(db):
    """A request without an assigned provider (open market)."""
    return negotiation_engine.create_request(
        db,
        organizer_id=ORGANIZER,
        data=ServiceRequestCreate(title="Summit photography", timeline="June"),
    )


@pytest.fixture
def direct_request(db, provider):
    """A request addressed to a known provider."""
    return negotiation_engine.create_request(
        db,
        organizer_id=ORGANIZER,
        data=ServiceRequestCreate(title="Summit photography", provider_id=provider.id),
    )


@pytest.fixture
def agreed_request(db, provider, open_request):
    """Organizer proposes, provider counters, both accept the counter."""
    first = negotiation_engine.submit_proposal(
        db, request_id=open_request.id, actor_id=ORGANIZER, terms=make_terms()
    )
    counter = negotiation_engine.submit_proposal(
        db,
        request_id=open_request.id,
        actor_id=PROVIDER,
        terms=make_terms(budget_min=5000, budget_max=5500),
        responds_to=first.id,
    )
    negotiation_engine.respond(db, card_id=counter.id, actor_id=ORGANIZER, response_type="accept")
    negotiation_engine.respond(db, card_id=counter.id, actor_id=PROVIDER, response_type="accept")
    db.refresh(open_request)
    return open_request
