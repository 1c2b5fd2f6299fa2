from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from backend.app.core.database import get_db
from backend.app.core.errors import InvalidRequestError
from backend.app.schemas.match_schema import MatchCreate, MatchUpdate, MatchResponse
from backend.app.services.match_service import match_service

router = APIRouter()

@router.post("", response_model=MatchResponse, status_code=status.HTTP_201_CREATED)
async def create_match(payload: MatchCreate, db: AsyncSession = Depends(get_db)):
    """Creates a match; the winner is drawn immediately and returned with it."""
    return await match_service.create_match(db, payload)

@router.get("/{id}", response_model=MatchResponse)
async def get_match(id: int, db: AsyncSession = Depends(get_db)):
    return await match_service.get_match(db, id)

@router.get("", response_model=List[MatchResponse])
async def list_matches(db: AsyncSession = Depends(get_db)):
    return await match_service.list_matches(db)

@router.put("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_match(id: int, payload: MatchUpdate, db: AsyncSession = Depends(get_db)):
    if id != payload.id:
        raise InvalidRequestError("ID in URL and body must match.")
    await match_service.update_match(db, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_match(id: int, db: AsyncSession = Depends(get_db)):
    await match_service.delete_match(db, id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
