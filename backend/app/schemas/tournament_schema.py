from datetime import date
from typing import Optional
from pydantic import Field

from backend.app.schemas.base import ApiModel
from backend.app.schemas.team_schema import TeamResponse

class TournamentCreate(ApiModel):
    name: str = Field(min_length=1, max_length=100)
    start_date: date

class TournamentUpdate(TournamentCreate):
    id: int

class TournamentResponse(ApiModel):
    id: int
    name: str
    start_date: date
    winner_id: Optional[int] = None
    winner: Optional[TeamResponse] = None
