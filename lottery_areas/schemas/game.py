from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from lottery_areas.schemas.area import TIME_PATTERN


class ExtractionSeriesIn(BaseModel):
    time: str = Field(..., pattern=TIME_PATTERN)
    area_id: int | None = None
    last_series: int = Field(0, ge=0)


class ExtractionSeriesOut(BaseModel):
    id: int
    game_id: int
    area_id: Optional[int] = None
    company_id: Optional[int] = None
    time: str
    last_series: int

    class Config:
        from_attributes = True


class GameCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    is_active: bool = True
    max_tickets_per_series: int | None = Field(None, gt=0)
    extraction_series: List[ExtractionSeriesIn] = []


class GameUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    is_active: bool | None = None
    max_tickets_per_series: int | None = Field(None, gt=0)
    extraction_series: List[ExtractionSeriesIn] | None = None


class GameOut(BaseModel):
    id: int
    company_id: Optional[int] = None
    name: str
    is_active: bool
    max_tickets_per_series: Optional[int] = None
    last_series: int
    created_at: datetime
    extraction_series: List[ExtractionSeriesOut] = []

    class Config:
        from_attributes = True
