from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.sql import func
from backend.app.core.database import Base

class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Related rows are looked up explicitly through the repositories (no ORM relationships)
    team_a_id = Column(Integer, ForeignKey("teams.id", ondelete="RESTRICT"), nullable=False)
    team_b_id = Column(Integer, ForeignKey("teams.id", ondelete="RESTRICT"), nullable=False)
    tournament_id = Column(Integer, ForeignKey("tournaments.id", ondelete="RESTRICT"), nullable=False, index=True)

    # Always team_a_id or team_b_id; decided by coin flip at creation
    winner_id = Column(Integer, ForeignKey("teams.id", ondelete="RESTRICT"), nullable=False)
