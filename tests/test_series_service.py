import threading
import time

import pytest
from sqlalchemy import update

from lottery_areas.errors import MalformedSeriesValue, NotFoundOrForbidden, SeriesConflict
from lottery_areas.models.area import Area
from lottery_areas.schemas.area import AreaCreate
from lottery_areas.services.area_service import AreaService
from lottery_areas.services.series_service import SeriesService, format_series, next_series


def _area(db, company, series="0001"):
    return AreaService(db).create(AreaCreate(name="Centro", city="Recife", state="PE", series_number=series), company.id)


@pytest.mark.parametrize(
    "current, expected",
    [("0007", "0008"), ("7", "0008"), ("0000", "0001"), ("0999", "1000"), ("9999", "10000"), ("123456", "123457")],
)
def test_next_series_pads_to_minimum_width(current, expected):
    assert next_series(current) == expected


@pytest.mark.parametrize("value", ["", "12a", "-1", " 12", "1.5", "12\n", None, 12])
def test_next_series_rejects_non_digit_values(value):
    with pytest.raises(MalformedSeriesValue):
        next_series(value)


def test_next_series_is_integer_successor_over_a_range():
    for start in range(0, 20000, 997):
        result = next_series(str(start).zfill(4))
        assert int(result) == start + 1
        assert len(result) >= 4


def test_format_series_never_truncates():
    assert format_series(3) == "0003"
    assert format_series(123456) == "123456"


def test_create_record_and_cycle_scenario(db, seed):
    area = _area(db, seed.acme, "0001")
    assert (area.current_series, area.tickets_in_series) == ("0001", 0)

    service = SeriesService(db)
    for expected in (1, 2, 3):
        series, count = service.record_ticket_issued(area.id)
        assert (series, count) == ("0001", expected)
    assert service.get_area(area.id).tickets_in_series == 3

    area = service.cycle_series(area.id)
    assert (area.current_series, area.tickets_in_series) == ("0002", 0)


def test_record_ticket_issued_never_touches_current_series(db, seed):
    area = _area(db, seed.acme, "0042")
    service = SeriesService(db)
    service.record_ticket_issued(area.id)
    service.record_ticket_issued(area.id)
    area = service.get_area(area.id)
    assert area.current_series == "0042"
    assert area.series_number == "0042"
    assert area.tickets_in_series == 2


def test_record_ticket_issued_unknown_area(db, seed):
    with pytest.raises(NotFoundOrForbidden):
        SeriesService(db).record_ticket_issued(999)


def test_cycle_from_9999_grows_width(db, seed):
    area = _area(db, seed.acme, "9999")
    assert SeriesService(db).cycle_series(area.id).current_series == "10000"


def test_cycle_twice_gives_distinct_series_and_resets_count(db, seed):
    area = _area(db, seed.acme, "0010")
    service = SeriesService(db)
    for _ in range(5):
        service.record_ticket_issued(area.id)
    first = service.cycle_series(area.id).current_series
    service.record_ticket_issued(area.id)
    second = service.cycle_series(area.id)
    assert first == "0011"
    assert second.current_series == "0012"
    assert second.tickets_in_series == 0


def test_reconfigure_keeps_value_exactly_as_supplied(db, seed):
    area = _area(db, seed.acme, "0032")
    service = SeriesService(db)
    area = service.reconfigure_series(area.id, "50")
    assert area.current_series == "50"
    assert area.series_number == "50"
    assert area.tickets_in_series == 0
    # cycling later applies the padding
    assert service.cycle_series(area.id).current_series == "0051"


def test_reconfigure_rejects_malformed_value(db, seed):
    area = _area(db, seed.acme)
    with pytest.raises(MalformedSeriesValue):
        SeriesService(db).reconfigure_series(area.id, "12-A")


def test_cycle_refuses_corrupt_stored_series(db, seed):
    area = _area(db, seed.acme)
    db.execute(update(Area).where(Area.id == area.id).values(current_series="abc"))
    with pytest.raises(MalformedSeriesValue):
        SeriesService(db).cycle_series(area.id)


def test_tenant_scoping_hides_other_company_areas(db, seed):
    area = _area(db, seed.acme)
    service = SeriesService(db)
    with pytest.raises(NotFoundOrForbidden):
        service.cycle_series(area.id, company_id=seed.other.id)
    with pytest.raises(NotFoundOrForbidden):
        service.reconfigure_series(area.id, "0100", company_id=seed.other.id)
    assert service.get_area(area.id).current_series == "0001"


def test_stale_compare_and_swap_does_not_apply(db, seed):
    area = _area(db, seed.acme, "0001")
    service = SeriesService(db)
    assert service._swap_series(area.id, "0005", "0006") is False
    assert service.get_area(area.id).current_series == "0001"


def test_cycle_racing_another_writer_advances_twice(db, seed, monkeypatch):
    area = _area(db, seed.acme, "0001")
    service = SeriesService(db)
    real_swap = service._swap_series
    calls = []

    def racing_swap(area_id, expected, new_series):
        if not calls:
            # another request cycles the area between our read and our write
            db.execute(update(Area).where(Area.id == area_id).values(current_series="0002", tickets_in_series=0))
        calls.append(expected)
        return real_swap(area_id, expected, new_series)

    monkeypatch.setattr(service, "_swap_series", racing_swap)
    area = service.cycle_series(area.id)
    assert calls == ["0001", "0002"]
    assert area.current_series == "0003"


def test_cycle_gives_up_after_configured_attempts(db, seed, monkeypatch):
    area = _area(db, seed.acme)
    service = SeriesService(db)
    monkeypatch.setattr(service, "_swap_series", lambda *args: False)
    with pytest.raises(SeriesConflict):
        service.cycle_series(area.id)


def test_cycle_with_expected_series_skips_when_already_advanced(db, seed):
    area = _area(db, seed.acme, "0004")
    service = SeriesService(db)
    service.cycle_series(area.id, expected_series="0004")
    area = service.cycle_series(area.id, expected_series="0004")
    assert area.current_series == "0005"


def test_concurrent_cycles_from_separate_sessions_serialize(session_factory, db, seed):
    area = _area(db, seed.acme, "0001")
    first_read = threading.Event()
    results, errors = [], []

    def cycle(hold=False):
        with session_factory() as session:
            service = SeriesService(session)
            if hold:
                real_swap = service._swap_series

                def slow_swap(*args):
                    first_read.set()
                    time.sleep(0.2)
                    return real_swap(*args)

                service._swap_series = slow_swap
            else:
                first_read.wait(5)
            try:
                results.append(service.cycle_series(area.id).current_series)
                session.commit()
            except Exception as exc:
                errors.append(exc)

    threads = [threading.Thread(target=cycle, kwargs={"hold": True}), threading.Thread(target=cycle)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert sorted(results) == ["0002", "0003"]
    with session_factory() as session:
        assert SeriesService(session).get_area(area.id).current_series == "0003"


def test_cycle_of_longest_accepted_series_fits_column(db, seed):
    area = _area(db, seed.acme, "9" * 20)
    area = SeriesService(db).cycle_series(area.id)
    db.commit()
    assert area.current_series == "1" + "0" * 20
    assert len(area.current_series) <= Area.__table__.c.current_series.type.length
