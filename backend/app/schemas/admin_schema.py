from pydantic import BaseModel

class AdminStatus(BaseModel):
    teams: int
    tournaments: int
    matches: int
