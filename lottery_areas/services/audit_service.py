import json
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from loguru import logger
from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lottery_areas.core.config import settings
from lottery_areas.models.user import AuditLog


def snapshot(obj) -> Optional[Dict[str, Any]]:
    if obj is None:
        return None
    return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}


def _dump(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(jsonable_encoder(value), ensure_ascii=False)


def log_action(
    session: Session,
    user_id: Optional[int],
    action: str,
    entity: str,
    entity_id: Optional[Any] = None,
    old_value: Any = None,
    new_value: Any = None,
    company_id: Optional[int] = None,
) -> Optional[AuditLog]:
    """Record an administrative change without ever failing the caller's write.

    Pending changes are flushed first so that a failed audit insert only
    rolls back its own savepoint.
    """
    session.flush()
    try:
        with session.begin_nested():
            log = AuditLog(
                user_id=user_id,
                company_id=company_id,
                action=action,
                entity=entity,
                entity_id=str(entity_id) if entity_id is not None else None,
                old_value=_dump(old_value),
                new_value=_dump(new_value),
            )
            session.add(log)
        return log
    except (SQLAlchemyError, TypeError, ValueError):
        logger.exception("Failed to record audit log: {}", action)
        return None


class AuditService:
    def __init__(self, session: Session):
        self.session = session

    def find_all(
        self,
        entity: Optional[str] = None,
        user_id: Optional[int] = None,
        company_id: Optional[int] = None,
    ):
        stmt = select(AuditLog)
        if entity:
            stmt = stmt.where(AuditLog.entity == entity)
        if user_id is not None:
            stmt = stmt.where(AuditLog.user_id == user_id)
        if company_id is not None:
            stmt = stmt.where(AuditLog.company_id == company_id)
        stmt = stmt.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(settings.audit_log_limit)
        return self.session.scalars(stmt).all()

    def find_by_entity(self, entity: str, entity_id: str, company_id: Optional[int] = None):
        stmt = select(AuditLog).where(AuditLog.entity == entity, AuditLog.entity_id == str(entity_id))
        if company_id is not None:
            stmt = stmt.where(AuditLog.company_id == company_id)
        return self.session.scalars(stmt.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())).all()
