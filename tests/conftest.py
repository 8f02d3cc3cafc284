"""
Shared test fixtures — SQLite test database, test client, seeded stair catalog,
and in-memory rule store builders for the pricing core.
"""

import os
import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["SEED_DEFAULT_CATALOG"] = "false"

from stairquote.database import Base, get_db
from stairquote.main import app
from stairquote.pricing.domain import BoardType, PricingRule, SpecialPartDefinition
from stairquote.pricing.rule_store import InMemoryRuleStore
from stairquote.routers.stairs import seed_default_catalog


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded_db(db):
    """Database session with the default stair catalog loaded."""
    seed_default_catalog(db)
    return db


# --- In-memory store for pricing core tests ---

TREAD_MATERIAL = 5
RISER_MATERIAL = 4
STRINGER_MATERIAL = 7


def _make_rule(board_type, material_id, base="0", length="0", width="0",
              mitre="0", multiplier="1", width_min=None, width_max=None):
    return PricingRule(
        base_price=Decimal(base),
        length_charge_rate=Decimal(length),
        width_charge_rate=Decimal(width),
        mitre_charge=Decimal(mitre),
        material_multiplier=Decimal(multiplier),
        board_type=board_type,
        material_id=material_id,
        width_min=width_min,
        width_max=width_max,
    )


def sample_rules():
    """One any-width rule per board type, multiplier 1 for easy hand math."""
    return [
        _make_rule(BoardType.TREAD, TREAD_MATERIAL, base="10", length="2", width="3", mitre="5"),
        _make_rule(BoardType.RISER, RISER_MATERIAL, base="4", length="0.5", width="1"),
        _make_rule(BoardType.STRINGER, STRINGER_MATERIAL, base="20", length="0.25", width="2"),
    ]


def sample_special_parts():
    return [
        SpecialPartDefinition(part_id="volute", description="Volute",
                              unit_cost=Decimal("180"), labor_cost=Decimal("30")),
        SpecialPartDefinition(part_id="volute", description="Red oak volute",
                              unit_cost=Decimal("220"), labor_cost=Decimal("30"),
                              material_id=20),
        SpecialPartDefinition(part_id="skirt_board", description="Skirt board",
                              unit_cost=Decimal("6.50"), labor_cost=Decimal("1.50"),
                              pricing="per_riser"),
    ]


@pytest.fixture
def store():
    """In-memory rule store with the sample rules and special parts."""
    return InMemoryRuleStore(sample_rules(), sample_special_parts())
