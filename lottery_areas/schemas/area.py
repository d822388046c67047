from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, field_validator

SERIES_PATTERN = r"^[0-9]+$"
TIME_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"

ScheduleTime = Annotated[str, Field(pattern=TIME_PATTERN)]


class AreaBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=255)
    state: str = Field(..., min_length=2, max_length=2)


class AreaCreate(AreaBase):
    series_number: str = Field("0001", pattern=SERIES_PATTERN, max_length=20)


class AreaUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    city: str | None = Field(None, min_length=1, max_length=255)
    state: str | None = Field(None, min_length=2, max_length=2)
    series_number: str | None = Field(None, pattern=SERIES_PATTERN, max_length=20)
    is_active: bool | None = None

    @field_validator("name", "city", "state", "series_number", "is_active")
    @classmethod
    def _not_null(cls, value):
        # omitted fields stay unchanged, explicit nulls are rejected
        if value is None:
            raise ValueError("não pode ser nulo")
        return value


class AreaOut(AreaBase):
    id: int
    company_id: Optional[int] = None
    series_number: str
    current_series: str
    tickets_in_series: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AreaListItem(AreaOut):
    tickets_count: int = 0
    configs_count: int = 0


class AreaSummary(BaseModel):
    id: int
    name: str
    city: str
    state: str
    current_series: str

    class Config:
        from_attributes = True


class AreaConfigUpsert(BaseModel):
    area_id: int
    game_id: int
    commission_rate: Decimal | None = Field(None, ge=0, le=100)
    prize_multiplier: Decimal | None = Field(None, gt=0)
    max_liability: Decimal | None = Field(None, ge=0)
    extraction_times: List[ScheduleTime] | None = None

    def overrides(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"area_id", "game_id"})


class AreaConfigOut(BaseModel):
    area_id: int
    game_id: int
    commission_rate: Optional[Decimal] = None
    prize_multiplier: Optional[Decimal] = None
    max_liability: Optional[Decimal] = None
    extraction_times: Optional[List[str]] = None

    class Config:
        from_attributes = True


class AreaConfigWithArea(AreaConfigOut):
    area: AreaSummary


class GameSummary(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class AreaConfigWithGame(AreaConfigOut):
    game: GameSummary
