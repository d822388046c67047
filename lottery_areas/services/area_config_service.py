from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from lottery_areas.errors import NotFoundOrForbidden
from lottery_areas.models.area import Area, AreaConfig
from lottery_areas.models.game import Game
from lottery_areas.schemas.area import AreaConfigUpsert
from lottery_areas.services.audit_service import log_action, snapshot
from lottery_areas.services.series_service import SeriesService


class AreaConfigService:
    def __init__(self, session: Session):
        self.session = session

    def find_by_area(self, area_id: int, company_id: Optional[int] = None):
        SeriesService(self.session).get_area(area_id, company_id)
        stmt = (
            select(AreaConfig)
            .options(joinedload(AreaConfig.game))
            .where(AreaConfig.area_id == area_id)
            .order_by(AreaConfig.game_id)
        )
        return self.session.scalars(stmt).all()

    def find_by_game(self, game_id: int, company_id: Optional[int] = None):
        stmt = (
            select(AreaConfig)
            .join(AreaConfig.area)
            .options(joinedload(AreaConfig.area))
            .where(AreaConfig.game_id == game_id)
            .order_by(Area.name)
        )
        if company_id is not None:
            stmt = stmt.where(Area.company_id == company_id)
        return self.session.scalars(stmt).all()

    def _check_owned(self, area_id: int, game_id: int, company_id: Optional[int]) -> Area:
        area = SeriesService(self.session).get_area(area_id, company_id)
        game_stmt = select(Game.id).where(Game.id == game_id)
        if company_id is not None:
            game_stmt = game_stmt.where(Game.company_id == company_id)
        if self.session.scalar(game_stmt) is None:
            raise NotFoundOrForbidden("Jogo não encontrado ou acesso negado.")
        return area

    def upsert(
        self,
        data: AreaConfigUpsert,
        admin_id: Optional[int] = None,
        company_id: Optional[int] = None,
    ) -> AreaConfig:
        """Create or update the (area, game) override; one row per pair."""
        area = self._check_owned(data.area_id, data.game_id, company_id)
        overrides = data.overrides()
        config = self.session.get(AreaConfig, (data.area_id, data.game_id), populate_existing=True)
        old_value = snapshot(config)
        if config is None:
            config = AreaConfig(area_id=data.area_id, game_id=data.game_id, **overrides)
            self.session.add(config)
        else:
            for field, value in overrides.items():
                setattr(config, field, value)
        self.session.flush()
        if admin_id:
            log_action(
                self.session,
                admin_id,
                "UPDATE_AREA_CONFIG" if old_value else "CREATE_AREA_CONFIG",
                "AreaConfig",
                f"{data.area_id}:{data.game_id}",
                old_value,
                snapshot(config),
                area.company_id,
            )
        self.session.commit()
        return config

    def remove(self, area_id: int, game_id: int, company_id: Optional[int] = None) -> AreaConfig:
        self._check_owned(area_id, game_id, company_id)
        config = self.session.get(AreaConfig, (area_id, game_id))
        if config is None:
            raise NotFoundOrForbidden("Configuração não encontrada.")
        self.session.delete(config)
        self.session.commit()
        return config
