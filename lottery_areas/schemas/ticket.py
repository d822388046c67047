from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from lottery_areas.schemas.area import TIME_PATTERN


class TicketIssue(BaseModel):
    area_id: int
    game_id: int


class TicketOut(BaseModel):
    id: int
    area_id: int
    game_id: int
    company_id: Optional[int] = None
    series: str
    number_in_series: int
    created_at: datetime

    class Config:
        from_attributes = True


class SeriesStatsOut(BaseModel):
    area_id: int
    game_id: int
    current_series: str
    max_tickets_per_series: int
    tickets_sold: int
    tickets_remaining: int
    percentage_filled: float
    status: str


class DrawCreate(BaseModel):
    game_id: int
    draw_time: str = Field(..., pattern=TIME_PATTERN)
    area_id: int | None = None


class DrawOut(BaseModel):
    id: int
    game_id: int
    area_id: Optional[int] = None
    company_id: Optional[int] = None
    draw_time: str
    series: int
    series_label: str
    area_series: Optional[str] = None
    created_at: datetime
