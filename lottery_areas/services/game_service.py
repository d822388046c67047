from typing import Iterable, List, Optional

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from lottery_areas.errors import DependencyViolation, NotFoundOrForbidden, ValidationFailed
from lottery_areas.models.area import Area
from lottery_areas.models.game import ExtractionSeries, Game
from lottery_areas.schemas.game import ExtractionSeriesIn, GameCreate, GameUpdate
from lottery_areas.services.audit_service import log_action, snapshot


def _game_snapshot(game: Game) -> dict:
    data = snapshot(game)
    data["extraction_series"] = [snapshot(series) for series in game.extraction_series]
    return data


class GameService:
    def __init__(self, session: Session):
        self.session = session

    def _validate_schedule(self, schedule: Iterable[ExtractionSeriesIn], company_id: Optional[int]) -> None:
        seen = set()
        for entry in schedule:
            key = (entry.area_id, entry.time)
            if key in seen:
                raise ValidationFailed(f"Horário {entry.time} repetido para a mesma praça.")
            seen.add(key)
            if entry.area_id is None:
                continue
            area = self.session.get(Area, entry.area_id)
            # the series row carries the game's tenant, so the area must match it
            if area is None or area.company_id != company_id:
                raise ValidationFailed(
                    f"Praça {entry.area_id} não pertence à empresa do jogo.",
                    details={"area_id": entry.area_id, "company_id": company_id},
                )

    def create(self, data: GameCreate, company_id: Optional[int] = None, admin_id: Optional[int] = None) -> Game:
        self._validate_schedule(data.extraction_series, company_id)
        game = Game(
            name=data.name,
            is_active=data.is_active,
            max_tickets_per_series=data.max_tickets_per_series,
            company_id=company_id,
        )
        for entry in data.extraction_series:
            game.extraction_series.append(
                ExtractionSeries(
                    time=entry.time,
                    area_id=entry.area_id,
                    last_series=entry.last_series,
                    company_id=company_id,
                )
            )
        self.session.add(game)
        self.session.flush()
        if admin_id:
            log_action(self.session, admin_id, "CREATE_GAME", "Game", game.id, None, _game_snapshot(game), company_id)
        self.session.commit()
        return game

    def find_all(self, company_id: Optional[int] = None, active_only: bool = False) -> List[Game]:
        stmt = select(Game).options(selectinload(Game.extraction_series))
        if company_id is not None:
            stmt = stmt.where(Game.company_id == company_id)
        if active_only:
            stmt = stmt.where(Game.is_active.is_(True))
        return list(self.session.scalars(stmt.order_by(Game.name, Game.id)).all())

    def find_one(self, game_id: int, company_id: Optional[int] = None) -> Game:
        stmt = select(Game).options(selectinload(Game.extraction_series)).where(Game.id == game_id)
        if company_id is not None:
            stmt = stmt.where(Game.company_id == company_id)
        game = self.session.scalar(stmt)
        if not game:
            raise NotFoundOrForbidden("Jogo não encontrado ou acesso negado.")
        return game

    def update(
        self,
        game_id: int,
        patch: GameUpdate,
        company_id: Optional[int] = None,
        admin_id: Optional[int] = None,
    ) -> Game:
        game = self.find_one(game_id, company_id)
        old_value = _game_snapshot(game)
        changes = patch.model_dump(exclude_unset=True, exclude={"extraction_series"})
        for field, value in changes.items():
            setattr(game, field, value)
        if patch.extraction_series is not None:
            self._sync_extraction_series(game, patch.extraction_series)
        self.session.flush()
        if admin_id:
            log_action(self.session, admin_id, "UPDATE_GAME", "Game", game.id, old_value, _game_snapshot(game), game.company_id)
        self.session.commit()
        return game

    def _sync_extraction_series(self, game: Game, schedule: List[ExtractionSeriesIn]) -> None:
        """Make the stored schedule match ``schedule``.

        Times that disappeared are dropped; each (area, time) row is updated
        in place or created, never duplicated, including company-wide rows
        whose area is NULL.
        """
        self._validate_schedule(schedule, game.company_id)
        incoming_times = {entry.time for entry in schedule}
        logger.info("Syncing extraction series for game {}: {}", game.id, sorted(incoming_times))
        for row in list(game.extraction_series):
            if row.time not in incoming_times:
                game.extraction_series.remove(row)
        for entry in schedule:
            existing = next(
                (row for row in game.extraction_series if row.time == entry.time and row.area_id == entry.area_id),
                None,
            )
            if existing:
                existing.last_series = entry.last_series
                existing.company_id = game.company_id
            else:
                game.extraction_series.append(
                    ExtractionSeries(
                        time=entry.time,
                        area_id=entry.area_id,
                        last_series=entry.last_series,
                        company_id=game.company_id,
                    )
                )

    def remove(self, game_id: int, company_id: Optional[int] = None, admin_id: Optional[int] = None) -> Game:
        game = self.find_one(game_id, company_id)
        old_value = _game_snapshot(game)
        try:
            self.session.execute(delete(Game).where(Game.id == game_id).execution_options(synchronize_session=False))
            self.session.flush()
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning("Game {} has dependent records, delete refused", game_id)
            raise DependencyViolation(
                "Jogo possui bilhetes ou sorteios vinculados. Desative-o em vez de excluir.",
                details={"game_id": game_id},
            ) from exc
        for row in list(game.extraction_series):
            self.session.expunge(row)
        self.session.expunge(game)
        if admin_id:
            log_action(self.session, admin_id, "DELETE_GAME", "Game", game_id, old_value, None, old_value["company_id"])
        self.session.commit()
        return game
