from pydantic import Field

from backend.app.schemas.base import ApiModel

class TeamCreate(ApiModel):
    name: str = Field(min_length=1, max_length=100)
    region: str = Field(min_length=1)

class TeamUpdate(TeamCreate):
    id: int

class TeamResponse(ApiModel):
    id: int
    name: str
    region: str
