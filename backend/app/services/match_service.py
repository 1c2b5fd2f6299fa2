"""
Match Service

Creates matches between two existing teams inside an existing tournament and
decides each match winner by coin flip at creation time. The winner is stored
and only re-drawn when an update replaces the team that had won.
"""

import logging
import random
from typing import List, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import ConflictError, EntityNotFoundError
from backend.app.engine.winner import CoinSource, pick_match_winner
from backend.app.models.match_model import Match
from backend.app.models.team_model import Team
from backend.app.models.tournament_model import Tournament
from backend.app.repositories.repository import MatchRepository, TeamRepository, TournamentRepository
from backend.app.schemas.match_schema import MatchCreate, MatchResponse, MatchUpdate
from backend.app.schemas.team_schema import TeamResponse
from backend.app.services.tournament_service import tournament_service

logger = logging.getLogger(__name__)


class MatchService:
    def __init__(self, rng: CoinSource = random):
        # Any object with randint(a, b); tests inject a seeded Random or a stub
        self.rng = rng

    async def create_match(self, db: AsyncSession, payload: MatchCreate) -> MatchResponse:
        team_a, team_b, tournament = await self._load_related(db, payload)

        winner_id = pick_match_winner(team_a.id, team_b.id, self.rng)
        match = Match(
            team_a_id=team_a.id,
            team_b_id=team_b.id,
            tournament_id=tournament.id,
            winner_id=winner_id,
        )
        try:
            await MatchRepository(db).create(match)
            await db.commit()
        except IntegrityError:
            # A related row vanished between the existence checks and the insert
            await db.rollback()
            raise ConflictError("Match references a team or tournament that no longer exists.")

        logger.info(
            "Match %s created: %s vs %s in tournament %s, winner %s",
            match.id, team_a.name, team_b.name, tournament.id, winner_id
        )
        teams = {team_a.id: team_a, team_b.id: team_b}
        return await self._build_response(db, match, teams, {tournament.id: tournament})

    async def get_match(self, db: AsyncSession, match_id: int) -> MatchResponse:
        match = await self._get_or_raise(db, match_id)
        teams = await TeamRepository(db).get_by_ids([match.team_a_id, match.team_b_id, match.winner_id])
        tournaments = await TournamentRepository(db).get_by_ids([match.tournament_id])
        return await self._build_response(db, match, teams, tournaments)

    async def list_matches(self, db: AsyncSession) -> List[MatchResponse]:
        matches = await MatchRepository(db).get_all()

        team_ids = set()
        for m in matches:
            team_ids.update((m.team_a_id, m.team_b_id, m.winner_id))
        tournaments = await TournamentRepository(db).get_by_ids(m.tournament_id for m in matches)
        for t in tournaments.values():
            team_ids.add(t.winner_id)
        teams = await TeamRepository(db).get_by_ids(team_ids)

        return [await self._build_response(db, m, teams, tournaments) for m in matches]

    async def update_match(self, db: AsyncSession, payload: MatchUpdate) -> None:
        """
        Moves a match to other teams and/or another tournament.
        The stored winner is kept while it is still one of the two teams.
        """
        match = await self._get_or_raise(db, payload.id)
        team_a, team_b, tournament = await self._load_related(db, payload)
        previous_tournament_id = match.tournament_id

        match.team_a_id = team_a.id
        match.team_b_id = team_b.id
        match.tournament_id = tournament.id
        if match.winner_id not in (team_a.id, team_b.id):
            match.winner_id = pick_match_winner(team_a.id, team_b.id, self.rng)
            logger.info("Match %s winner re-drawn: team %s", match.id, match.winner_id)

        try:
            await db.flush()
            for tournament_id in {previous_tournament_id, tournament.id}:
                await tournament_service.revalidate_winner(db, tournament_id)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("Match references a team or tournament that no longer exists.")

    async def delete_match(self, db: AsyncSession, match_id: int) -> None:
        match = await self._get_or_raise(db, match_id)
        tournament_id = match.tournament_id

        await MatchRepository(db).delete(match_id)
        await tournament_service.revalidate_winner(db, tournament_id)
        await db.commit()
        logger.info("Match %s deleted", match_id)

    async def _load_related(self, db: AsyncSession, payload: MatchCreate) -> Tuple[Team, Team, Tournament]:
        """Existence checks for the teams and tournament a match points at."""
        teams = TeamRepository(db)
        team_a = await teams.get_by_id(payload.team_a_id)
        if not team_a:
            raise EntityNotFoundError("Team", payload.team_a_id)
        team_b = await teams.get_by_id(payload.team_b_id)
        if not team_b:
            raise EntityNotFoundError("Team", payload.team_b_id)
        tournament = await TournamentRepository(db).get_by_id(payload.tournament_id)
        if not tournament:
            raise EntityNotFoundError("Tournament", payload.tournament_id)
        return team_a, team_b, tournament

    async def _get_or_raise(self, db: AsyncSession, match_id: int) -> Match:
        match = await MatchRepository(db).get_by_id(match_id)
        if not match:
            raise EntityNotFoundError("Match", match_id)
        return match

    async def _build_response(self, db: AsyncSession, match: Match, teams: dict, tournaments: dict) -> MatchResponse:
        tournament = tournaments[match.tournament_id]
        if tournament.winner_id is not None and tournament.winner_id in teams:
            tournament_response = tournament_service.build_response(tournament, teams[tournament.winner_id])
        else:
            tournament_response = await tournament_service.to_response(db, tournament)

        return MatchResponse(
            id=match.id,
            team_a=TeamResponse.model_validate(teams[match.team_a_id]),
            team_b=TeamResponse.model_validate(teams[match.team_b_id]),
            tournament=tournament_response,
            winner=TeamResponse.model_validate(teams[match.winner_id]),
        )


match_service = MatchService()
