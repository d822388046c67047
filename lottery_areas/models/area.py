from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship

from lottery_areas.core.db import Base


class Area(Base):
    __tablename__ = "areas"
    __table_args__ = (CheckConstraint("tickets_in_series >= 0", name="ck_areas_tickets_in_series"),)

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    city = Column(String(255), nullable=False)
    state = Column(String(2), nullable=False)
    # series values are digit strings so leading zeros survive ("0001")
    series_number = Column(String(32), nullable=False, default="0001")
    current_series = Column(String(32), nullable=False, default="0001")
    tickets_in_series = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    configs = relationship("AreaConfig", back_populates="area", passive_deletes=True)


class AreaConfig(Base):
    __tablename__ = "area_configs"

    area_id = Column(Integer, ForeignKey("areas.id", ondelete="CASCADE"), primary_key=True)
    game_id = Column(Integer, ForeignKey("games.id", ondelete="CASCADE"), primary_key=True)
    commission_rate = Column(Numeric(5, 2))
    prize_multiplier = Column(Numeric(10, 2))
    max_liability = Column(Numeric(18, 2))
    extraction_times = Column(JSON)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    area = relationship("Area", back_populates="configs")
    game = relationship("Game")
