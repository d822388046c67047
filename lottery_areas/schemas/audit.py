import json
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator


class AuditLogOut(BaseModel):
    id: int
    user_id: Optional[int] = None
    company_id: Optional[int] = None
    action: str
    entity: str
    entity_id: Optional[str] = None
    old_value: Any = None
    new_value: Any = None
    created_at: datetime

    class Config:
        from_attributes = True

    @field_validator("old_value", "new_value", mode="before")
    @classmethod
    def _decode_json(cls, value):
        if isinstance(value, str):
            return json.loads(value)
        return value
