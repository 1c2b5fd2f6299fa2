"""Repository classes for database operations.

Repositories only flush; the calling service owns the transaction and commits.
Unique and foreign-key violations surface as sqlalchemy IntegrityError.
"""

from typing import Dict, Iterable, List

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.match_model import Match
from backend.app.models.team_model import Team
from backend.app.models.tournament_model import Tournament


class EntityRepository:
    """Create/read/update/delete over one table keyed by integer id."""

    model = None

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entity):
        """Add a new row and return it with its assigned id."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def get_by_id(self, entity_id: int):
        result = await self.session.execute(
            select(self.model).where(self.model.id == entity_id)
        )
        return result.scalar_one_or_none()

    async def get_by_ids(self, entity_ids: Iterable[int]) -> Dict[int, object]:
        """Batch lookup used to resolve related rows for list responses."""
        ids = {i for i in entity_ids if i is not None}
        if not ids:
            return {}
        result = await self.session.execute(
            select(self.model).where(self.model.id.in_(ids))
        )
        return {row.id: row for row in result.scalars().all()}

    async def get_all(self) -> List:
        result = await self.session.execute(select(self.model).order_by(self.model.id))
        return list(result.scalars().all())

    async def update(self, entity_id: int, **values) -> bool:
        """Update columns of one row. Returns False if the row does not exist."""
        result = await self.session.execute(
            update(self.model)
            .where(self.model.id == entity_id)
            .values(**values)
        )
        await self.session.flush()
        return result.rowcount > 0

    async def delete(self, entity_id: int) -> bool:
        """Delete one row. A missing row is a silent no-op (returns False)."""
        result = await self.session.execute(
            delete(self.model).where(self.model.id == entity_id)
        )
        await self.session.flush()
        return result.rowcount > 0

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(self.model.id)))
        return result.scalar() or 0


class TeamRepository(EntityRepository):
    """Repository for Team operations."""

    model = Team


class TournamentRepository(EntityRepository):
    """Repository for Tournament operations."""

    model = Tournament


class MatchRepository(EntityRepository):
    """Repository for Match operations."""

    model = Match

    async def list_by_tournament(self, tournament_id: int) -> List[Match]:
        """All matches of a tournament, oldest first."""
        result = await self.session.execute(
            select(Match).where(Match.tournament_id == tournament_id).order_by(Match.id)
        )
        return list(result.scalars().all())
