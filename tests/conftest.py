from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from lottery_areas.core.db import Base, build_engine, get_session
from lottery_areas.main import app
from lottery_areas.models.company import Company
from lottery_areas.models.game import Game
from lottery_areas.models.user import ROLE_ADMIN, ROLE_CAMBISTA, ROLE_MASTER, User


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def seed(db):
    acme = Company(name="Acme Loterias", slug="acme")
    other = Company(name="Outra Banca", slug="outra")
    db.add_all([acme, other])
    db.flush()
    master = User(username="master", role=ROLE_MASTER)
    admin = User(username="admin", role=ROLE_ADMIN, company_id=acme.id)
    other_admin = User(username="other-admin", role=ROLE_ADMIN, company_id=other.id)
    seller = User(username="cambista", role=ROLE_CAMBISTA, company_id=acme.id)
    game = Game(name="2x1000", company_id=acme.id, max_tickets_per_series=3)
    other_game = Game(name="Minuto da Sorte", company_id=other.id)
    db.add_all([master, admin, other_admin, seller, game, other_game])
    db.commit()
    return SimpleNamespace(
        acme=acme,
        other=other,
        master=master,
        admin=admin,
        other_admin=other_admin,
        seller=seller,
        game=game,
        other_game=other_game,
    )


@pytest.fixture
def client(session_factory):
    def _override_session():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_session] = _override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def as_user(user) -> dict:
    return {"X-User-Id": str(user.id)}
