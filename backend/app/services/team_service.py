import logging
from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import ConflictError, EntityNotFoundError
from backend.app.models.team_model import Team
from backend.app.repositories.repository import TeamRepository
from backend.app.schemas.team_schema import TeamCreate, TeamUpdate

logger = logging.getLogger(__name__)


class TeamService:
    async def create_team(self, db: AsyncSession, payload: TeamCreate) -> Team:
        repo = TeamRepository(db)
        try:
            team = await repo.create(Team(name=payload.name, region=payload.region))
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("A team with the same name already exists.")

        logger.info("Team %s created (%s, %s)", team.id, team.name, team.region)
        return team

    async def get_team(self, db: AsyncSession, team_id: int) -> Team:
        team = await TeamRepository(db).get_by_id(team_id)
        if not team:
            raise EntityNotFoundError("Team", team_id)
        return team

    async def list_teams(self, db: AsyncSession) -> List[Team]:
        return await TeamRepository(db).get_all()

    async def update_team(self, db: AsyncSession, payload: TeamUpdate) -> None:
        repo = TeamRepository(db)
        try:
            updated = await repo.update(payload.id, name=payload.name, region=payload.region)
            if not updated:
                raise EntityNotFoundError("Team", payload.id)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("A team with the same name already exists.")

    async def delete_team(self, db: AsyncSession, team_id: int) -> None:
        """Deletes a team. Rejected while any match or tournament still references it."""
        repo = TeamRepository(db)
        if not await repo.get_by_id(team_id):
            raise EntityNotFoundError("Team", team_id)

        try:
            await repo.delete(team_id)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError(f"Team {team_id} is still referenced by matches or tournaments.")

        logger.info("Team %s deleted", team_id)


team_service = TeamService()
