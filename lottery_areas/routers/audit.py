from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from lottery_areas.core.db import get_session
from lottery_areas.dependencies import require_admin, restricted_company
from lottery_areas.models.user import User
from lottery_areas.schemas.audit import AuditLogOut
from lottery_areas.services.audit_service import AuditService

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/logs", response_model=List[AuditLogOut])
async def list_logs(
    entity: Optional[str] = None,
    user_id: Optional[int] = Query(None, alias="userId"),
    user: User = Depends(require_admin),
    db: Session = Depends(get_session),
):
    return AuditService(db).find_all(entity=entity, user_id=user_id, company_id=restricted_company(user))


@router.get("/logs/entity", response_model=List[AuditLogOut])
async def logs_by_entity(
    entity: str,
    entity_id: str = Query(..., alias="entityId"),
    user: User = Depends(require_admin),
    db: Session = Depends(get_session),
):
    return AuditService(db).find_by_entity(entity, entity_id, company_id=restricted_company(user))
