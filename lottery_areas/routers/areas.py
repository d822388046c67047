from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy.orm import Session

from lottery_areas.core.db import get_session
from lottery_areas.dependencies import (
    get_current_user,
    require_admin,
    require_roles,
    restricted_company,
    target_company,
)
from lottery_areas.models.user import ROLE_ADMIN, ROLE_CAMBISTA, ROLE_COBRADOR, ROLE_MASTER, User
from lottery_areas.schemas.area import AreaCreate, AreaListItem, AreaOut, AreaUpdate
from lottery_areas.services.area_service import AreaService

router = APIRouter(prefix="/areas", tags=["areas"])


@router.post("", response_model=AreaOut, status_code=201)
async def create_area(
    data: AreaCreate,
    target_company_id: Optional[int] = Query(None, alias="targetCompanyId"),
    user: User = Depends(require_admin),
    db: Session = Depends(get_session),
):
    return AreaService(db).create(data, target_company(user, target_company_id), admin_id=user.id)


@router.get("", response_model=List[AreaListItem])
async def list_areas(
    target_company_id: Optional[int] = Query(None, alias="targetCompanyId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    # a user without company (platform admin) lists every area
    return AreaService(db).find_all(target_company(user, target_company_id))


@router.get("/{area_id}", response_model=AreaOut)
async def get_area(
    area_id: int,
    user: User = Depends(require_roles(ROLE_ADMIN, ROLE_MASTER, ROLE_CAMBISTA, ROLE_COBRADOR)),
    db: Session = Depends(get_session),
):
    return AreaService(db).find_one(area_id, restricted_company(user))


@router.patch("/{area_id}", response_model=AreaOut)
async def update_area(
    area_id: int,
    patch: AreaUpdate,
    user: User = Depends(require_admin),
    db: Session = Depends(get_session),
):
    return AreaService(db).update(area_id, patch, restricted_company(user), admin_id=user.id)


@router.delete("/{area_id}", response_model=AreaOut)
async def delete_area(
    area_id: int,
    user: User = Depends(require_admin),
    db: Session = Depends(get_session),
):
    return AreaService(db).remove(area_id, restricted_company(user), admin_id=user.id)


@router.post("/{area_id}/cycle-series", response_model=AreaOut)
async def cycle_series(
    area_id: int,
    user: User = Depends(require_admin),
    db: Session = Depends(get_session),
):
    logger.info("Manual series cycle for area {} by user {}", area_id, user.id)
    return AreaService(db).cycle_series(area_id, restricted_company(user), admin_id=user.id)
