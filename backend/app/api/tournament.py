from datetime import date
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from backend.app.core.database import get_db
from backend.app.core.errors import InvalidRequestError
from backend.app.schemas.tournament_schema import TournamentCreate, TournamentUpdate, TournamentResponse
from backend.app.services.tournament_service import tournament_service

router = APIRouter()

@router.post("", response_model=TournamentResponse, status_code=status.HTTP_201_CREATED)
async def create_tournament(payload: TournamentCreate, db: AsyncSession = Depends(get_db)):
    if payload.start_date < date.today():
        raise InvalidRequestError("The start date cannot be in the past.")
    return await tournament_service.create_tournament(db, payload)

@router.get("/{id}/winner", response_model=int)
async def get_tournament_winner(id: int, db: AsyncSession = Depends(get_db)):
    """
    Returns the winning team's id.
    404 while no match has been played in the tournament.
    """
    return await tournament_service.determine_winner(db, id)

@router.get("/{id}", response_model=TournamentResponse)
async def get_tournament(id: int, db: AsyncSession = Depends(get_db)):
    return await tournament_service.get_tournament(db, id)

@router.get("", response_model=List[TournamentResponse])
async def list_tournaments(db: AsyncSession = Depends(get_db)):
    return await tournament_service.list_tournaments(db)

@router.put("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_tournament(id: int, payload: TournamentUpdate, db: AsyncSession = Depends(get_db)):
    if id != payload.id:
        raise InvalidRequestError("ID in URL and body must match.")
    await tournament_service.update_tournament(db, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tournament(id: int, db: AsyncSession = Depends(get_db)):
    await tournament_service.delete_tournament(db, id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
