from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from backend.app.core.database import Base

class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    name = Column(String(100), nullable=False, unique=True)
    start_date = Column(Date, nullable=False)

    # Set by winner resolution only, never by the client
    winner_id = Column(Integer, ForeignKey("teams.id", ondelete="RESTRICT"), nullable=True)
