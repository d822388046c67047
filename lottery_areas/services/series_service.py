"""Per-area series counter.

An area sells tickets in numbered batches ("series"). The pair
``(current_series, tickets_in_series)`` on the ``areas`` row is the whole
state; every mutation goes through this module and is either a single
UPDATE statement or a locked compare-and-swap, so concurrent sellers and
admins never lose an increment.
"""

import re
from typing import Optional, Tuple

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from lottery_areas.core.config import settings
from lottery_areas.errors import MalformedSeriesValue, NotFoundOrForbidden, SeriesConflict
from lottery_areas.models.area import Area

_DIGITS = re.compile(r"[0-9]+")


def parse_series(value) -> int:
    if not isinstance(value, str) or not _DIGITS.fullmatch(value):
        raise MalformedSeriesValue(value)
    return int(value)


def format_series(number: int, width: Optional[int] = None) -> str:
    """Zero-pad ``number`` to at least ``width`` digits; longer values are kept whole."""
    if number < 0:
        raise MalformedSeriesValue(number)
    return str(number).zfill(width or settings.series_min_width)


def next_series(value: str, width: Optional[int] = None) -> str:
    return format_series(parse_series(value) + 1, width)


class SeriesService:
    def __init__(self, session: Session):
        self.session = session

    def initialize(self, area: Area, series_number: str) -> Area:
        parse_series(series_number)
        area.series_number = series_number
        area.current_series = series_number
        area.tickets_in_series = 0
        return area

    def get_area(self, area_id: int, company_id: Optional[int] = None, for_update: bool = False) -> Area:
        stmt = select(Area).where(Area.id == area_id)
        if company_id is not None:
            stmt = stmt.where(Area.company_id == company_id)
        if for_update:
            stmt = stmt.with_for_update()
        area = self.session.scalar(stmt.execution_options(populate_existing=True))
        if not area:
            raise NotFoundOrForbidden()
        return area

    def reconfigure_series(self, area_id: int, new_series_number: str, company_id: Optional[int] = None) -> Area:
        parse_series(new_series_number)
        area = self.get_area(area_id, company_id, for_update=True)
        old_series = area.current_series
        # stored exactly as supplied, no padding
        area.series_number = new_series_number
        area.current_series = new_series_number
        area.tickets_in_series = 0
        self.session.flush()
        logger.info("Area {} series reconfigured {} -> {}", area_id, old_series, new_series_number)
        return area

    def record_ticket_issued(self, area_id: int) -> Tuple[str, int]:
        """Count one sold ticket; returns the series label and the ticket's position in it."""
        stmt = (
            update(Area)
            .where(Area.id == area_id)
            .values(tickets_in_series=Area.tickets_in_series + 1)
            .returning(Area.current_series, Area.tickets_in_series)
            .execution_options(synchronize_session=False)
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            raise NotFoundOrForbidden()
        return row.current_series, row.tickets_in_series

    def cycle_series(
        self,
        area_id: int,
        company_id: Optional[int] = None,
        expected_series: Optional[str] = None,
    ) -> Area:
        """Advance the area to the next series and zero its ticket count.

        With ``expected_series`` the cycle only happens while the area is
        still on that series; a caller that lost the race gets the already
        advanced row back instead of skipping a series.
        """
        for attempt in range(1, settings.series_cycle_attempts + 1):
            area = self.get_area(area_id, company_id, for_update=True)
            current = area.current_series
            if expected_series is not None and current != expected_series:
                logger.info(
                    "Area {} already left series {} (now {}), cycle skipped", area_id, expected_series, current
                )
                return area
            new_series = next_series(current)
            if self._swap_series(area_id, current, new_series):
                self.session.refresh(area)
                logger.info("Area {} series rotated {} -> {}", area_id, current, new_series)
                return area
            logger.warning("Area {} series changed during cycle (attempt {}), retrying", area_id, attempt)
        raise SeriesConflict(details={"area_id": area_id})

    def _swap_series(self, area_id: int, expected: str, new_series: str) -> bool:
        stmt = (
            update(Area)
            .where(Area.id == area_id, Area.current_series == expected)
            .values(current_series=new_series, tickets_in_series=0)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1
