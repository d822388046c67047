from typing import Optional

from loguru import logger
from sqlalchemy.orm import Session

from lottery_areas.core.config import settings
from lottery_areas.errors import ValidationFailed
from lottery_areas.models.area import Area
from lottery_areas.models.game import Game
from lottery_areas.models.ticket import Ticket
from lottery_areas.services.game_service import GameService
from lottery_areas.services.series_service import SeriesService


def max_tickets_for(game: Game) -> int:
    return game.max_tickets_per_series or settings.default_max_tickets_per_series


class TicketService:
    def __init__(self, session: Session):
        self.session = session
        self.series = SeriesService(session)
        self.games = GameService(session)

    def _sale_context(self, area_id: int, game_id: int, company_id: Optional[int]) -> tuple[Area, Game]:
        area = self.series.get_area(area_id, company_id)
        game = self.games.find_one(game_id, company_id)
        if area.company_id != game.company_id:
            raise ValidationFailed("Jogo e praça pertencem a empresas diferentes.")
        return area, game

    def issue(self, area_id: int, game_id: int, company_id: Optional[int] = None) -> Ticket:
        area, game = self._sale_context(area_id, game_id, company_id)
        if not area.is_active:
            raise ValidationFailed("Praça inativa.")
        if not game.is_active:
            raise ValidationFailed("Jogo inativo.")

        series, position = self.series.record_ticket_issued(area.id)
        ticket = Ticket(
            area_id=area.id,
            game_id=game.id,
            company_id=area.company_id,
            series=series,
            number_in_series=position,
        )
        self.session.add(ticket)
        self.session.flush()

        limit = max_tickets_for(game)
        if position >= limit:
            logger.info("Area {} filled series {} ({} tickets)", area.id, series, position)
            self.series.cycle_series(area.id, expected_series=series)
        self.session.commit()
        return ticket

    def series_stats(self, area_id: int, game_id: int, company_id: Optional[int] = None) -> dict:
        area, game = self._sale_context(area_id, game_id, company_id)
        limit = max_tickets_for(game)
        sold = area.tickets_in_series
        return {
            "area_id": area.id,
            "game_id": game.id,
            "current_series": area.current_series,
            "max_tickets_per_series": limit,
            "tickets_sold": sold,
            "tickets_remaining": max(limit - sold, 0),
            "percentage_filled": round(sold / limit * 100, 1),
            "status": "FULL" if sold >= limit else "ACTIVE",
        }
