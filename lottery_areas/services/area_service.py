from typing import List, Optional

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lottery_areas.errors import DependencyViolation
from lottery_areas.models.area import Area, AreaConfig
from lottery_areas.models.ticket import Ticket
from lottery_areas.schemas.area import AreaCreate, AreaUpdate
from lottery_areas.services.audit_service import log_action, snapshot
from lottery_areas.services.series_service import SeriesService


class AreaService:
    def __init__(self, session: Session):
        self.session = session
        self.series = SeriesService(session)

    def create(self, data: AreaCreate, company_id: Optional[int] = None, admin_id: Optional[int] = None) -> Area:
        area = Area(name=data.name, city=data.city, state=data.state.upper(), company_id=company_id)
        self.series.initialize(area, data.series_number)
        self.session.add(area)
        self.session.flush()
        if admin_id:
            log_action(self.session, admin_id, "CREATE_AREA", "Area", area.id, None, snapshot(area), area.company_id)
        self.session.commit()
        logger.info("Area {} created for company {} starting at series {}", area.id, company_id, area.current_series)
        return area

    def find_all(self, company_id: Optional[int] = None) -> List[dict]:
        tickets_count = (
            select(func.count(Ticket.id)).where(Ticket.area_id == Area.id).correlate(Area).scalar_subquery()
        )
        configs_count = (
            select(func.count()).select_from(AreaConfig).where(AreaConfig.area_id == Area.id).correlate(Area).scalar_subquery()
        )
        stmt = select(Area, tickets_count.label("tickets_count"), configs_count.label("configs_count"))
        if company_id is not None:
            stmt = stmt.where(Area.company_id == company_id)
        rows = self.session.execute(stmt.order_by(Area.name, Area.id)).all()
        return [
            {**snapshot(area), "tickets_count": tickets, "configs_count": configs}
            for area, tickets, configs in rows
        ]

    def find_one(self, area_id: int, company_id: Optional[int] = None) -> Area:
        return self.series.get_area(area_id, company_id)

    def update(
        self,
        area_id: int,
        patch: AreaUpdate,
        company_id: Optional[int] = None,
        admin_id: Optional[int] = None,
    ) -> Area:
        area = self.series.get_area(area_id, company_id)
        old_value = snapshot(area)
        changes = patch.model_dump(exclude_unset=True)
        series_number = changes.pop("series_number", None)
        if series_number is not None:
            area = self.series.reconfigure_series(area_id, series_number, company_id)
        for field, value in changes.items():
            if field == "state" and value:
                value = value.upper()
            setattr(area, field, value)
        self.session.flush()
        if admin_id:
            log_action(self.session, admin_id, "UPDATE_AREA", "Area", area.id, old_value, snapshot(area), area.company_id)
        self.session.commit()
        return area

    def remove(self, area_id: int, company_id: Optional[int] = None, admin_id: Optional[int] = None) -> Area:
        area = self.series.get_area(area_id, company_id)
        old_value = snapshot(area)
        try:
            # area_configs cascade, extraction series and draws are detached,
            # tickets restrict the delete
            self.session.execute(
                delete(Area).where(Area.id == area_id).execution_options(synchronize_session=False)
            )
            self.session.flush()
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning("Area {} has dependent records, delete refused", area_id)
            raise DependencyViolation(
                "Praça possui bilhetes vinculados e não pode ser excluída. Desative-a em vez de excluir.",
                details={"area_id": area_id},
            ) from exc
        self.session.expunge(area)
        if admin_id:
            log_action(self.session, admin_id, "DELETE_AREA", "Area", area_id, old_value, None, old_value["company_id"])
        self.session.commit()
        return area

    def cycle_series(self, area_id: int, company_id: Optional[int] = None, admin_id: Optional[int] = None) -> Area:
        before = self.series.get_area(area_id, company_id).current_series
        area = self.series.cycle_series(area_id, company_id)
        if admin_id:
            log_action(
                self.session,
                admin_id,
                "CYCLE_AREA_SERIES",
                "Area",
                area.id,
                {"current_series": before},
                {"current_series": area.current_series},
                area.company_id,
            )
        self.session.commit()
        return area
