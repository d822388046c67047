from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from lottery_areas.core.db import get_session
from lottery_areas.dependencies import get_current_user, restricted_company
from lottery_areas.models.user import User
from lottery_areas.schemas.ticket import SeriesStatsOut, TicketIssue, TicketOut
from lottery_areas.services.ticket_service import TicketService

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.post("", response_model=TicketOut, status_code=201)
async def issue_ticket(data: TicketIssue, user: User = Depends(get_current_user), db: Session = Depends(get_session)):
    return TicketService(db).issue(data.area_id, data.game_id, restricted_company(user))


@router.get("/series-stats", response_model=SeriesStatsOut)
async def series_stats(
    area_id: int = Query(..., alias="areaId"),
    game_id: int = Query(..., alias="gameId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    return TicketService(db).series_stats(area_id, game_id, restricted_company(user))
