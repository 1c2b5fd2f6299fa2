from backend.app.schemas.base import ApiModel
from backend.app.schemas.team_schema import TeamResponse
from backend.app.schemas.tournament_schema import TournamentResponse

class MatchCreate(ApiModel):
    team_a_id: int
    team_b_id: int
    tournament_id: int

class MatchUpdate(MatchCreate):
    id: int

class MatchResponse(ApiModel):
    id: int
    team_a: TeamResponse
    team_b: TeamResponse
    tournament: TournamentResponse
    # Resolved at creation, never client-supplied
    winner: TeamResponse
