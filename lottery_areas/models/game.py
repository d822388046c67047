from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from lottery_areas.core.db import Base


class Game(Base):
    __tablename__ = "games"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    max_tickets_per_series = Column(Integer)
    last_series = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    extraction_series = relationship(
        "ExtractionSeries",
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="ExtractionSeries.time",
    )


class ExtractionSeries(Base):
    __tablename__ = "extraction_series"
    __table_args__ = (UniqueConstraint("game_id", "area_id", "time", name="uq_extraction_series_game_area_time"),)

    id = Column(Integer, primary_key=True, index=True)
    game_id = Column(Integer, ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True)
    # NULL area means the schedule applies to the whole company
    area_id = Column(Integer, ForeignKey("areas.id", ondelete="SET NULL"), nullable=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True)
    time = Column(String(5), nullable=False)
    last_series = Column(Integer, nullable=False, default=0)

    game = relationship("Game", back_populates="extraction_series")
