from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from lottery_areas.core.db import get_session
from lottery_areas.dependencies import get_current_user, require_admin, restricted_company, target_company
from lottery_areas.models.user import User
from lottery_areas.schemas.game import GameCreate, GameOut, GameUpdate
from lottery_areas.services.game_service import GameService

router = APIRouter(prefix="/games", tags=["games"])


@router.post("", response_model=GameOut, status_code=201)
async def create_game(
    data: GameCreate,
    target_company_id: Optional[int] = Query(None, alias="targetCompanyId"),
    user: User = Depends(require_admin),
    db: Session = Depends(get_session),
):
    return GameService(db).create(data, target_company(user, target_company_id), admin_id=user.id)


@router.get("", response_model=List[GameOut])
async def list_games(
    active_only: bool = Query(False, alias="activeOnly"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    return GameService(db).find_all(restricted_company(user), active_only=active_only)


@router.get("/{game_id}", response_model=GameOut)
async def get_game(game_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_session)):
    return GameService(db).find_one(game_id, restricted_company(user))


@router.patch("/{game_id}", response_model=GameOut)
async def update_game(
    game_id: int,
    patch: GameUpdate,
    user: User = Depends(require_admin),
    db: Session = Depends(get_session),
):
    return GameService(db).update(game_id, patch, restricted_company(user), admin_id=user.id)


@router.delete("/{game_id}", response_model=GameOut)
async def delete_game(game_id: int, user: User = Depends(require_admin), db: Session = Depends(get_session)):
    return GameService(db).remove(game_id, restricted_company(user), admin_id=user.id)
