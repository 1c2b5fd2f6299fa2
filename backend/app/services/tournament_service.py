import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import ConflictError, EntityNotFoundError, NoWinnerYetError
from backend.app.engine.winner import resolve_tournament_winner
from backend.app.models.tournament_model import Tournament
from backend.app.repositories.repository import MatchRepository, TeamRepository, TournamentRepository
from backend.app.schemas.team_schema import TeamResponse
from backend.app.schemas.tournament_schema import TournamentCreate, TournamentResponse, TournamentUpdate

logger = logging.getLogger(__name__)


class TournamentService:
    async def create_tournament(self, db: AsyncSession, payload: TournamentCreate) -> TournamentResponse:
        """
        Creates the Tournament record, then runs winner resolution once.
        No match can reference the tournament yet, so this leaves winner_id empty;
        later winners are resolved on demand by determine_winner().
        """
        repo = TournamentRepository(db)
        try:
            tournament = await repo.create(Tournament(name=payload.name, start_date=payload.start_date))

            winner_id = resolve_tournament_winner(
                await MatchRepository(db).list_by_tournament(tournament.id)
            )
            if winner_id is not None:
                tournament.winner_id = winner_id

            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("A tournament with the same name already exists.")

        logger.info("Tournament %s created (%s, starts %s)", tournament.id, tournament.name, tournament.start_date)
        return await self.to_response(db, tournament)

    async def get_tournament(self, db: AsyncSession, tournament_id: int) -> TournamentResponse:
        tournament = await self._get_or_raise(db, tournament_id)
        return await self.to_response(db, tournament)

    async def list_tournaments(self, db: AsyncSession) -> List[TournamentResponse]:
        tournaments = await TournamentRepository(db).get_all()
        winners = await TeamRepository(db).get_by_ids(t.winner_id for t in tournaments)
        return [self.build_response(t, winners.get(t.winner_id)) for t in tournaments]

    async def update_tournament(self, db: AsyncSession, payload: TournamentUpdate) -> None:
        """Updates name and start date. The winner is owned by winner resolution."""
        repo = TournamentRepository(db)
        try:
            updated = await repo.update(payload.id, name=payload.name, start_date=payload.start_date)
            if not updated:
                raise EntityNotFoundError("Tournament", payload.id)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("A tournament with the same name already exists.")

    async def delete_tournament(self, db: AsyncSession, tournament_id: int) -> None:
        """Deletes a tournament. Rejected while matches still reference it."""
        await self._get_or_raise(db, tournament_id)

        try:
            await TournamentRepository(db).delete(tournament_id)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError(f"Tournament {tournament_id} still has matches.")

        logger.info("Tournament %s deleted", tournament_id)

    async def determine_winner(self, db: AsyncSession, tournament_id: int) -> int:
        """
        Returns the tournament winner's team id.
        Once a winner is stored it is returned as-is; otherwise it is resolved
        from the tournament's matches and stored (NoWinner -> HasWinner only).
        Raises NoWinnerYetError while there is nothing to resolve from.
        """
        tournament = await self._get_or_raise(db, tournament_id)
        if tournament.winner_id is not None:
            return tournament.winner_id

        winner_id = resolve_tournament_winner(
            await MatchRepository(db).list_by_tournament(tournament_id)
        )
        if winner_id is None:
            raise NoWinnerYetError(tournament_id)

        tournament.winner_id = winner_id
        await db.commit()
        logger.info("Tournament %s winner set to team %s", tournament_id, winner_id)
        return winner_id

    async def revalidate_winner(self, db: AsyncSession, tournament_id: int) -> None:
        """
        Clears a stored winner that no longer won any match of the tournament
        (after a match was edited or removed). Caller commits.
        """
        tournament = await TournamentRepository(db).get_by_id(tournament_id)
        if tournament is None or tournament.winner_id is None:
            return

        matches = await MatchRepository(db).list_by_tournament(tournament_id)
        if tournament.winner_id not in {m.winner_id for m in matches}:
            logger.info("Tournament %s winner %s cleared", tournament_id, tournament.winner_id)
            tournament.winner_id = None

    async def to_response(self, db: AsyncSession, tournament: Tournament) -> TournamentResponse:
        winner = None
        if tournament.winner_id is not None:
            winner = await TeamRepository(db).get_by_id(tournament.winner_id)
        return self.build_response(tournament, winner)

    def build_response(self, tournament: Tournament, winner: Optional[object]) -> TournamentResponse:
        return TournamentResponse(
            id=tournament.id,
            name=tournament.name,
            start_date=tournament.start_date,
            winner_id=tournament.winner_id,
            winner=TeamResponse.model_validate(winner) if winner is not None else None,
        )

    async def _get_or_raise(self, db: AsyncSession, tournament_id: int) -> Tournament:
        tournament = await TournamentRepository(db).get_by_id(tournament_id)
        if not tournament:
            raise EntityNotFoundError("Tournament", tournament_id)
        return tournament


tournament_service = TournamentService()
