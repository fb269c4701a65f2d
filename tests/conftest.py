"""
Shared fixtures: an in-memory database with two squads of eleven, and an
API client wired to it.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  registers every table on Base
from app.auth.utils import create_access_token
from app.database import Base, get_db
from app.engine.locks import MatchLockRegistry
from app.engine.match_engine import MatchEngine
from app.engine.notifications import DeliveryPublisher
from app.models.player import Player
from app.models.team import Team


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = Session(engine)
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def teams(test_db):
    """Two teams of eleven players each."""
    teams = []
    for name, short_name in (("Harbour Hawks", "HH"), ("Valley Vipers", "VV")):
        team = Team(name=name, short_name=short_name)
        team.players = [Player(name=f"{short_name} Player {i}") for i in range(1, 12)]
        test_db.add(team)
        teams.append(team)
    test_db.commit()
    return teams


@pytest.fixture
def home_ids(teams):
    return sorted(p.id for p in teams[0].players)


@pytest.fixture
def away_ids(teams):
    return sorted(p.id for p in teams[1].players)


@pytest.fixture
def publisher():
    return DeliveryPublisher()


@pytest.fixture
def engine(test_db, publisher):
    """Scoring engine with its own publisher and lock registry."""
    return MatchEngine(test_db, publisher=publisher, locks=MatchLockRegistry())


@pytest.fixture
def match(engine, teams):
    """A scheduled two-over match."""
    return engine.create_match(teams[0].id, teams[1].id, overs_limit=2)


@pytest.fixture
def live_match(engine, match, teams, home_ids, away_ids):
    """Home side batting, openers and first bowler in place."""
    engine.record_toss(match.id, teams[0].id, "bat")
    engine.assign_players(match.id, striker_id=home_ids[0], non_striker_id=home_ids[1], bowler_id=away_ids[0])
    return match


@pytest.fixture
def client(test_db):
    from main import app

    def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {create_access_token(1)}"}
