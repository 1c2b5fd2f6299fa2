from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from backend.app.core.database import get_db
from backend.app.core.errors import InvalidRequestError
from backend.app.schemas.team_schema import TeamCreate, TeamUpdate, TeamResponse
from backend.app.services.team_service import team_service

router = APIRouter()

@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(payload: TeamCreate, db: AsyncSession = Depends(get_db)):
    """Registers a new team. Team names are unique."""
    return await team_service.create_team(db, payload)

@router.get("/{id}", response_model=TeamResponse)
async def get_team(id: int, db: AsyncSession = Depends(get_db)):
    return await team_service.get_team(db, id)

@router.get("", response_model=List[TeamResponse])
async def list_teams(db: AsyncSession = Depends(get_db)):
    return await team_service.list_teams(db)

@router.put("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_team(id: int, payload: TeamUpdate, db: AsyncSession = Depends(get_db)):
    if id != payload.id:
        raise InvalidRequestError("ID in URL and body must match.")
    await team_service.update_team(db, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_team(id: int, db: AsyncSession = Depends(get_db)):
    await team_service.delete_team(db, id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
