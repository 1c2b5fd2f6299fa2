from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete

from backend.app.core.database import get_db
from backend.app.models.match_model import Match
from backend.app.models.team_model import Team
from backend.app.models.tournament_model import Tournament
from backend.app.repositories.repository import MatchRepository, TeamRepository, TournamentRepository
from backend.app.schemas.admin_schema import AdminStatus

router = APIRouter()

RESET_CONFIRMATION = "I-UNDERSTAND-THIS-DELETES-EVERYTHING"

@router.delete("/reset", status_code=status.HTTP_200_OK)
async def reset_database(confirmation: str, db: AsyncSession = Depends(get_db)):
    """
    Resets the database. Development only: there is no authentication on /admin.
    Query Param 'confirmation' must equal 'I-UNDERSTAND-THIS-DELETES-EVERYTHING'.
    """
    if confirmation != RESET_CONFIRMATION:
        raise HTTPException(
            status_code=400, 
            detail="Invalid confirmation string. Operation aborted."
        )

    # Children first: matches reference tournaments and teams, tournaments reference teams
    await db.execute(delete(Match))
    await db.execute(delete(Tournament))
    await db.execute(delete(Team))
    await db.commit()
    return {"message": "Database successfully wiped."}

@router.get("/status", response_model=AdminStatus)
async def get_admin_status(db: AsyncSession = Depends(get_db)):
    """
    Get row counts for the admin dashboard.
    """
    return AdminStatus(
        teams=await TeamRepository(db).count(),
        tournaments=await TournamentRepository(db).count(),
        matches=await MatchRepository(db).count(),
    )
