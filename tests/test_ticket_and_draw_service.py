import pytest
from sqlalchemy import select

from lottery_areas.errors import NotFoundOrForbidden, ValidationFailed
from lottery_areas.models.game import ExtractionSeries, Game
from lottery_areas.schemas.area import AreaCreate, AreaUpdate
from lottery_areas.schemas.ticket import DrawCreate
from lottery_areas.services.area_service import AreaService
from lottery_areas.services.draw_service import DrawService
from lottery_areas.services.series_service import SeriesService
from lottery_areas.services.ticket_service import TicketService


@pytest.fixture
def area(db, seed):
    return AreaService(db).create(AreaCreate(name="Centro", city="Recife", state="PE"), seed.acme.id)


def test_issue_stamps_series_and_cycles_once_when_full(db, seed, area):
    service = TicketService(db)
    tickets = [service.issue(area.id, seed.game.id, seed.acme.id) for _ in range(4)]

    # seeded game allows 3 tickets per series
    assert [(t.series, t.number_in_series) for t in tickets] == [
        ("0001", 1),
        ("0001", 2),
        ("0001", 3),
        ("0002", 1),
    ]
    area = SeriesService(db).get_area(area.id)
    assert (area.current_series, area.tickets_in_series) == ("0002", 1)


def test_issue_uses_default_limit_when_game_has_none(db, seed, area, monkeypatch):
    from lottery_areas.services import ticket_service

    monkeypatch.setattr(ticket_service.settings, "default_max_tickets_per_series", 2)
    game = Game(name="Sem limite", company_id=seed.acme.id)
    db.add(game)
    db.commit()
    series = [TicketService(db).issue(area.id, game.id).series for _ in range(3)]
    assert series == ["0001", "0001", "0002"]


def test_issue_rejects_inactive_area(db, seed, area):
    AreaService(db).update(area.id, AreaUpdate(is_active=False))
    with pytest.raises(ValidationFailed):
        TicketService(db).issue(area.id, seed.game.id)


def test_issue_rejects_game_of_other_company(db, seed, area):
    with pytest.raises(ValidationFailed):
        TicketService(db).issue(area.id, seed.other_game.id)
    with pytest.raises(NotFoundOrForbidden):
        TicketService(db).issue(area.id, seed.other_game.id, seed.acme.id)


def test_series_stats(db, seed, area):
    service = TicketService(db)
    service.issue(area.id, seed.game.id)
    service.issue(area.id, seed.game.id)
    stats = service.series_stats(area.id, seed.game.id, seed.acme.id)
    assert stats == {
        "area_id": area.id,
        "game_id": seed.game.id,
        "current_series": "0001",
        "max_tickets_per_series": 3,
        "tickets_sold": 2,
        "tickets_remaining": 1,
        "percentage_filled": 66.7,
        "status": "ACTIVE",
    }


def test_company_wide_draw_advances_slot_and_game_counters(db, seed):
    service = DrawService(db)
    first = service.create(DrawCreate(game_id=seed.game.id, draw_time="14:00"), seed.acme.id)
    second = service.create(DrawCreate(game_id=seed.game.id, draw_time="14:00"), seed.acme.id)

    assert (first["series"], second["series"]) == (1, 2)
    assert second["series_label"] == "0002"
    assert second["area_series"] is None
    db.expire_all()
    rows = db.scalars(select(ExtractionSeries).where(ExtractionSeries.game_id == seed.game.id)).all()
    assert [(row.time, row.area_id, row.last_series, row.company_id) for row in rows] == [
        ("14:00", None, 2, seed.acme.id)
    ]
    assert db.get(Game, seed.game.id).last_series == 2


def test_area_draw_closes_area_series(db, seed, area):
    TicketService(db).issue(area.id, seed.game.id)
    draw = DrawService(db).create(DrawCreate(game_id=seed.game.id, draw_time="18:00", area_id=area.id), seed.acme.id)

    assert draw["series"] == 1
    assert draw["area_series"] == "0002"
    area = SeriesService(db).get_area(area.id)
    assert (area.current_series, area.tickets_in_series) == ("0002", 0)


def test_draw_rejects_area_of_other_company(db, seed, area):
    with pytest.raises(ValidationFailed):
        DrawService(db).create(DrawCreate(game_id=seed.other_game.id, draw_time="18:00", area_id=area.id))
