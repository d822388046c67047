from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lottery_areas.core.db import get_session
from lottery_areas.dependencies import require_admin, restricted_company
from lottery_areas.models.user import User
from lottery_areas.schemas.ticket import DrawCreate, DrawOut
from lottery_areas.services.draw_service import DrawService

router = APIRouter(prefix="/draws", tags=["draws"])


@router.post("", response_model=DrawOut, status_code=201)
async def create_draw(data: DrawCreate, user: User = Depends(require_admin), db: Session = Depends(get_session)):
    return DrawService(db).create(data, restricted_company(user))
