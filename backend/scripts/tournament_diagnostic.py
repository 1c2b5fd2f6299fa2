#!/usr/bin/env python3
"""
Tournament Diagnostic Script
Lists a tournament's matches and checks its stored winner against them.

Usage:
    python backend/scripts/tournament_diagnostic.py [tournament_id]
"""

import asyncio
import os
import sys
from collections import Counter

# Add project root to path so we can import from backend.app
sys.path.append(os.path.join(os.path.dirname(__file__), '../../'))

from sqlalchemy.future import select
from backend.app.core.database import get_session_maker
from backend.app.engine.winner import resolve_tournament_winner
from backend.app.models.tournament_model import Tournament
from backend.app.repositories.repository import MatchRepository, TeamRepository

async def diagnose(tournament_id: int = None):
    SessionLocal = get_session_maker()
    async with SessionLocal() as db:
        if tournament_id is None:
            # Latest tournament
            res = await db.execute(select(Tournament).order_by(Tournament.id.desc()).limit(1))
        else:
            res = await db.execute(select(Tournament).where(Tournament.id == tournament_id))
        t = res.scalar_one_or_none()

        if not t:
            print("No tournaments found in database.")
            return

        print(f"--- Diagnostic: Tournament #{t.id} ({t.name}) ---")
        print(f"Start date: {t.start_date}")
        print(f"Stored winner: {t.winner_id}")

        matches = await MatchRepository(db).list_by_tournament(t.id)
        teams = await TeamRepository(db).get_by_ids(
            i for m in matches for i in (m.team_a_id, m.team_b_id, m.winner_id)
        )
        name = lambda team_id: teams[team_id].name if team_id in teams else f"#{team_id}"

        print(f"\nMatches: {len(matches)}")
        for m in matches:
            print(f"  Match {m.id}: {name(m.team_a_id)} vs {name(m.team_b_id)} -> {name(m.winner_id)}")

        wins = Counter(m.winner_id for m in matches)
        if wins:
            print("\nWins per team:")
            for team_id, count in wins.most_common():
                print(f"  {name(team_id)}: {count}")

        resolved = resolve_tournament_winner(matches)
        print(f"\nWinner by current rule: {name(resolved) if resolved else 'none yet'}")

        if t.winner_id is not None and t.winner_id not in wins:
            print(f"\n⚠️  WARNING: Stored winner {t.winner_id} did not win any match in tournament #{t.id}!")

if __name__ == "__main__":
    asyncio.run(diagnose(int(sys.argv[1]) if len(sys.argv) > 1 else None))
