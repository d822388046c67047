from typing import Optional

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lottery_areas.errors import ValidationFailed
from lottery_areas.models.game import ExtractionSeries, Game
from lottery_areas.models.ticket import Draw
from lottery_areas.schemas.ticket import DrawCreate
from lottery_areas.services.game_service import GameService
from lottery_areas.services.series_service import SeriesService, format_series


class DrawService:
    def __init__(self, session: Session):
        self.session = session
        self.series = SeriesService(session)
        self.games = GameService(session)

    def _extraction_series(self, game: Game, area_id: Optional[int], time: str) -> ExtractionSeries:
        stmt = select(ExtractionSeries).where(
            ExtractionSeries.game_id == game.id,
            ExtractionSeries.time == time,
            ExtractionSeries.area_id.is_(None) if area_id is None else ExtractionSeries.area_id == area_id,
        )
        row = self.session.scalar(stmt)
        if row:
            return row
        row = ExtractionSeries(game_id=game.id, area_id=area_id, time=time, last_series=0, company_id=game.company_id)
        try:
            with self.session.begin_nested():
                self.session.add(row)
        except IntegrityError:
            # created concurrently by another draw for the same slot
            row = self.session.scalar(stmt)
        return row

    def _increment(self, model, row_id: int) -> int:
        stmt = (
            update(model)
            .where(model.id == row_id)
            .values(last_series=model.last_series + 1)
            .returning(model.last_series)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).scalar_one()

    def create(self, data: DrawCreate, company_id: Optional[int] = None) -> dict:
        """Register a draw for a time slot.

        The slot's extraction counter and the game's global counter each move
        up by one, and an area-bound draw closes the area's current series.
        """
        game = self.games.find_one(data.game_id, company_id)
        area = None
        if data.area_id is not None:
            area = self.series.get_area(data.area_id, company_id)
            if area.company_id != game.company_id:
                raise ValidationFailed("Jogo e praça pertencem a empresas diferentes.")

        extraction = self._extraction_series(game, data.area_id, data.draw_time)
        series = self._increment(ExtractionSeries, extraction.id)
        self._increment(Game, game.id)

        area_series = None
        if area is not None:
            area_series = self.series.cycle_series(area.id).current_series

        draw = Draw(
            game_id=game.id,
            area_id=data.area_id,
            company_id=game.company_id,
            draw_time=data.draw_time,
            series=series,
        )
        self.session.add(draw)
        self.session.commit()
        logger.info("Draw {} registered for game {} at {} with series {}", draw.id, game.id, data.draw_time, series)
        return {
            "id": draw.id,
            "game_id": draw.game_id,
            "area_id": draw.area_id,
            "company_id": draw.company_id,
            "draw_time": draw.draw_time,
            "series": draw.series,
            "series_label": format_series(draw.series),
            "area_series": area_series,
            "created_at": draw.created_at,
        }
