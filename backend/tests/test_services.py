import random
import unittest

from backend.app.core.errors import ConflictError, EntityNotFoundError, NoWinnerYetError
from backend.app.schemas.match_schema import MatchCreate, MatchUpdate
from backend.app.schemas.team_schema import TeamCreate, TeamUpdate
from backend.app.schemas.tournament_schema import TournamentCreate, TournamentUpdate
from backend.app.services.match_service import MatchService
from backend.app.services.team_service import team_service
from backend.app.services.tournament_service import tournament_service
from backend.tests.db_case import DatabaseTestCase, FixedCoin, FUTURE_DATE


class ServiceTestCase(DatabaseTestCase):
    async def create_team(self, name, region="NA"):
        async with self.SessionLocal() as db:
            return await team_service.create_team(db, TeamCreate(name=name, region=region))

    async def create_tournament(self, name):
        async with self.SessionLocal() as db:
            return await tournament_service.create_tournament(
                db, TournamentCreate(name=name, start_date=FUTURE_DATE)
            )

    async def create_match(self, team_a, team_b, tournament, side=0):
        async with self.SessionLocal() as db:
            return await MatchService(FixedCoin(side)).create_match(
                db, MatchCreate(team_a_id=team_a.id, team_b_id=team_b.id, tournament_id=tournament.id)
            )

    async def winner_of(self, tournament_id):
        async with self.SessionLocal() as db:
            return await tournament_service.determine_winner(db, tournament_id)


class TestTeamService(ServiceTestCase):
    async def test_create_assigns_id(self):
        team = await self.create_team("Alpha")
        self.assertGreater(team.id, 0)
        self.assertEqual(team.name, "Alpha")

    async def test_duplicate_name_conflicts(self):
        await self.create_team("Alpha")
        with self.assertRaises(ConflictError):
            await self.create_team("Alpha", region="EU")

    async def test_update_and_read_back(self):
        team = await self.create_team("Alpha")
        async with self.SessionLocal() as db:
            await team_service.update_team(db, TeamUpdate(id=team.id, name="Alpha Prime", region="EU"))
        async with self.SessionLocal() as db:
            stored = await team_service.get_team(db, team.id)
        self.assertEqual((stored.name, stored.region), ("Alpha Prime", "EU"))

    async def test_update_missing_team(self):
        async with self.SessionLocal() as db:
            with self.assertRaises(EntityNotFoundError):
                await team_service.update_team(db, TeamUpdate(id=99, name="Ghost", region="NA"))

    async def test_update_to_taken_name_conflicts(self):
        await self.create_team("Alpha")
        beta = await self.create_team("Beta")
        async with self.SessionLocal() as db:
            with self.assertRaises(ConflictError):
                await team_service.update_team(db, TeamUpdate(id=beta.id, name="Alpha", region="EU"))

    async def test_second_delete_is_not_found(self):
        team = await self.create_team("Alpha")
        async with self.SessionLocal() as db:
            await team_service.delete_team(db, team.id)
        async with self.SessionLocal() as db:
            with self.assertRaises(EntityNotFoundError):
                await team_service.delete_team(db, team.id)

    async def test_delete_referenced_team_conflicts(self):
        alpha = await self.create_team("Alpha")
        beta = await self.create_team("Beta")
        cup = await self.create_tournament("Cup")
        await self.create_match(alpha, beta, cup)

        async with self.SessionLocal() as db:
            with self.assertRaises(ConflictError):
                await team_service.delete_team(db, alpha.id)
        async with self.SessionLocal() as db:
            self.assertEqual((await team_service.get_team(db, alpha.id)).name, "Alpha")

    async def test_list_teams(self):
        await self.create_team("Alpha")
        await self.create_team("Beta", region="EU")
        async with self.SessionLocal() as db:
            teams = await team_service.list_teams(db)
        self.assertEqual([t.name for t in teams], ["Alpha", "Beta"])


class TestTournamentService(ServiceTestCase):
    async def test_new_tournament_has_no_winner(self):
        cup = await self.create_tournament("Cup")
        self.assertIsNone(cup.winner_id)
        with self.assertRaises(NoWinnerYetError):
            await self.winner_of(cup.id)

    async def test_duplicate_name_conflicts(self):
        await self.create_tournament("Cup")
        with self.assertRaises(ConflictError):
            await self.create_tournament("Cup")

    async def test_missing_tournament(self):
        async with self.SessionLocal() as db:
            with self.assertRaises(EntityNotFoundError):
                await tournament_service.get_tournament(db, 42)
        with self.assertRaises(EntityNotFoundError):
            await self.winner_of(42)

    async def test_winner_comes_from_latest_match(self):
        alpha = await self.create_team("Alpha")
        beta = await self.create_team("Beta")
        cup = await self.create_tournament("Cup")
        await self.create_match(alpha, beta, cup, side=0)
        await self.create_match(alpha, beta, cup, side=1)

        self.assertEqual(await self.winner_of(cup.id), beta.id)

    async def test_winner_is_persisted_and_monotonic(self):
        alpha = await self.create_team("Alpha")
        beta = await self.create_team("Beta")
        cup = await self.create_tournament("Cup")
        await self.create_match(alpha, beta, cup, side=0)
        self.assertEqual(await self.winner_of(cup.id), alpha.id)

        # A later match won by the other side does not flip the declared winner
        await self.create_match(alpha, beta, cup, side=1)
        self.assertEqual(await self.winner_of(cup.id), alpha.id)

        async with self.SessionLocal() as db:
            stored = await tournament_service.get_tournament(db, cup.id)
        self.assertEqual(stored.winner_id, alpha.id)
        self.assertEqual(stored.winner.name, "Alpha")

    async def test_matches_of_other_tournaments_are_ignored(self):
        alpha = await self.create_team("Alpha")
        beta = await self.create_team("Beta")
        cup = await self.create_tournament("Cup")
        league = await self.create_tournament("League")
        await self.create_match(alpha, beta, league)

        with self.assertRaises(NoWinnerYetError):
            await self.winner_of(cup.id)

    async def test_update_keeps_winner(self):
        alpha = await self.create_team("Alpha")
        beta = await self.create_team("Beta")
        cup = await self.create_tournament("Cup")
        await self.create_match(alpha, beta, cup)
        await self.winner_of(cup.id)

        async with self.SessionLocal() as db:
            await tournament_service.update_tournament(
                db, TournamentUpdate(id=cup.id, name="Grand Cup", start_date=FUTURE_DATE)
            )
        async with self.SessionLocal() as db:
            stored = await tournament_service.get_tournament(db, cup.id)
        self.assertEqual(stored.name, "Grand Cup")
        self.assertEqual(stored.winner_id, alpha.id)

    async def test_delete_with_matches_conflicts(self):
        alpha = await self.create_team("Alpha")
        beta = await self.create_team("Beta")
        cup = await self.create_tournament("Cup")
        await self.create_match(alpha, beta, cup)

        async with self.SessionLocal() as db:
            with self.assertRaises(ConflictError):
                await tournament_service.delete_tournament(db, cup.id)

    async def test_delete_empty_tournament(self):
        cup = await self.create_tournament("Cup")
        async with self.SessionLocal() as db:
            await tournament_service.delete_tournament(db, cup.id)
        async with self.SessionLocal() as db:
            self.assertEqual(await tournament_service.list_tournaments(db), [])


class TestMatchService(ServiceTestCase):
    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.alpha = await self.create_team("Alpha", region="NA")
        self.beta = await self.create_team("Beta", region="EU")
        self.cup = await self.create_tournament("Cup")

    async def test_create_returns_nested_entities(self):
        match = await self.create_match(self.alpha, self.beta, self.cup, side=1)
        self.assertEqual(match.team_a.name, "Alpha")
        self.assertEqual(match.team_b.name, "Beta")
        self.assertEqual(match.tournament.name, "Cup")
        self.assertEqual(match.winner.id, self.beta.id)

    async def test_winner_is_one_of_the_teams(self):
        service = MatchService(random.Random(7))
        payload = MatchCreate(team_a_id=self.alpha.id, team_b_id=self.beta.id, tournament_id=self.cup.id)
        for _ in range(20):
            async with self.SessionLocal() as db:
                match = await service.create_match(db, payload)
            self.assertIn(match.winner.id, (self.alpha.id, self.beta.id))

    async def test_missing_related_entity(self):
        service = MatchService(FixedCoin(0))
        cases = [
            MatchCreate(team_a_id=99, team_b_id=self.beta.id, tournament_id=self.cup.id),
            MatchCreate(team_a_id=self.alpha.id, team_b_id=99, tournament_id=self.cup.id),
            MatchCreate(team_a_id=self.alpha.id, team_b_id=self.beta.id, tournament_id=99),
        ]
        for payload in cases:
            async with self.SessionLocal() as db:
                with self.assertRaises(EntityNotFoundError):
                    await service.create_match(db, payload)
        async with self.SessionLocal() as db:
            self.assertEqual(await service.list_matches(db), [])

    async def test_self_match_is_allowed(self):
        match = await self.create_match(self.alpha, self.alpha, self.cup)
        self.assertEqual(match.winner.id, self.alpha.id)

    async def test_get_and_list(self):
        created = await self.create_match(self.alpha, self.beta, self.cup)
        service = MatchService()
        async with self.SessionLocal() as db:
            fetched = await service.get_match(db, created.id)
            listed = await service.list_matches(db)
        self.assertEqual(fetched, created)
        self.assertEqual(listed, [created])

    async def test_missing_match(self):
        service = MatchService()
        async with self.SessionLocal() as db:
            with self.assertRaises(EntityNotFoundError):
                await service.get_match(db, 5)
        async with self.SessionLocal() as db:
            with self.assertRaises(EntityNotFoundError):
                await service.delete_match(db, 5)

    async def test_update_keeps_winner_still_playing(self):
        gamma = await self.create_team("Gamma")
        match = await self.create_match(self.alpha, self.beta, self.cup, side=0)

        coin = FixedCoin(1)
        async with self.SessionLocal() as db:
            await MatchService(coin).update_match(
                db, MatchUpdate(id=match.id, team_a_id=self.alpha.id, team_b_id=gamma.id, tournament_id=self.cup.id)
            )
        async with self.SessionLocal() as db:
            updated = await MatchService().get_match(db, match.id)
        self.assertEqual(updated.team_b.name, "Gamma")
        self.assertEqual(updated.winner.id, self.alpha.id)
        self.assertEqual(coin.flips, 0)

    async def test_update_redraws_when_winner_leaves(self):
        gamma = await self.create_team("Gamma")
        match = await self.create_match(self.alpha, self.beta, self.cup, side=0)

        async with self.SessionLocal() as db:
            await MatchService(FixedCoin(1)).update_match(
                db, MatchUpdate(id=match.id, team_a_id=self.beta.id, team_b_id=gamma.id, tournament_id=self.cup.id)
            )
        async with self.SessionLocal() as db:
            updated = await MatchService().get_match(db, match.id)
        self.assertEqual(updated.winner.id, gamma.id)

    async def test_update_missing_match(self):
        async with self.SessionLocal() as db:
            with self.assertRaises(EntityNotFoundError):
                await MatchService().update_match(
                    db, MatchUpdate(id=77, team_a_id=self.alpha.id, team_b_id=self.beta.id, tournament_id=self.cup.id)
                )

    async def test_deleting_winning_match_clears_tournament_winner(self):
        match = await self.create_match(self.alpha, self.beta, self.cup, side=0)
        self.assertEqual(await self.winner_of(self.cup.id), self.alpha.id)

        async with self.SessionLocal() as db:
            await MatchService().delete_match(db, match.id)

        async with self.SessionLocal() as db:
            stored = await tournament_service.get_tournament(db, self.cup.id)
        self.assertIsNone(stored.winner_id)
        with self.assertRaises(NoWinnerYetError):
            await self.winner_of(self.cup.id)

    async def test_deleting_other_match_keeps_tournament_winner(self):
        first = await self.create_match(self.alpha, self.beta, self.cup, side=0)
        await self.create_match(self.alpha, self.beta, self.cup, side=0)
        self.assertEqual(await self.winner_of(self.cup.id), self.alpha.id)

        async with self.SessionLocal() as db:
            await MatchService().delete_match(db, first.id)
        self.assertEqual(await self.winner_of(self.cup.id), self.alpha.id)

    async def test_moving_match_out_of_tournament_clears_winner(self):
        league = await self.create_tournament("League")
        match = await self.create_match(self.alpha, self.beta, self.cup, side=0)
        await self.winner_of(self.cup.id)

        async with self.SessionLocal() as db:
            await MatchService().update_match(
                db, MatchUpdate(id=match.id, team_a_id=self.alpha.id, team_b_id=self.beta.id, tournament_id=league.id)
            )
        with self.assertRaises(NoWinnerYetError):
            await self.winner_of(self.cup.id)
        self.assertEqual(await self.winner_of(league.id), self.alpha.id)


if __name__ == '__main__':
    unittest.main()
