from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from lottery_areas.core.db import get_session
from lottery_areas.errors import PermissionDenied
from lottery_areas.models.user import ROLE_ADMIN, ROLE_MASTER, User


async def get_current_user(
    x_user_id: Optional[int] = Header(None),
    db: Session = Depends(get_session),
) -> User:
    if x_user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Usuário não identificado")
    user = db.get(User, x_user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Usuário inválido ou inativo")
    return user


def require_roles(*roles: str):
    async def _checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise PermissionDenied(f"Perfil {user.role} sem permissão para esta operação")
        return user

    return _checker


require_admin = require_roles(ROLE_ADMIN, ROLE_MASTER)


def restricted_company(user: User) -> Optional[int]:
    """Tenant filter for the user: MASTER sees every company."""
    if user.role == ROLE_MASTER:
        return None
    return user.company_id


def target_company(user: User, target_company_id: Optional[int]) -> Optional[int]:
    # a foreign target from a non-MASTER silently falls back to the user's own company
    if target_company_id is not None and (user.role == ROLE_MASTER or target_company_id == user.company_id):
        return target_company_id
    return user.company_id
