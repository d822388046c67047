from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lottery_areas.core.db import get_session
from lottery_areas.dependencies import require_admin, require_roles, restricted_company
from lottery_areas.models.user import ROLE_ADMIN, User
from lottery_areas.schemas.area import AreaConfigOut, AreaConfigUpsert, AreaConfigWithArea, AreaConfigWithGame
from lottery_areas.services.area_config_service import AreaConfigService

router = APIRouter(prefix="/areas-config", tags=["areas-config"])


@router.get("/area/{area_id}", response_model=List[AreaConfigWithGame])
async def configs_by_area(area_id: int, user: User = Depends(require_admin), db: Session = Depends(get_session)):
    return AreaConfigService(db).find_by_area(area_id, restricted_company(user))


@router.get("/game/{game_id}", response_model=List[AreaConfigWithArea])
async def configs_by_game(game_id: int, user: User = Depends(require_admin), db: Session = Depends(get_session)):
    return AreaConfigService(db).find_by_game(game_id, restricted_company(user))


@router.post("", response_model=AreaConfigOut)
async def upsert_config(
    data: AreaConfigUpsert,
    user: User = Depends(require_roles(ROLE_ADMIN)),
    db: Session = Depends(get_session),
):
    return AreaConfigService(db).upsert(data, admin_id=user.id, company_id=restricted_company(user))


@router.delete("/{area_id}/{game_id}", response_model=AreaConfigOut)
async def delete_config(
    area_id: int,
    game_id: int,
    user: User = Depends(require_roles(ROLE_ADMIN)),
    db: Session = Depends(get_session),
):
    return AreaConfigService(db).remove(area_id, game_id, restricted_company(user))
