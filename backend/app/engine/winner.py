import random
from typing import Optional, Protocol, Sequence

SIDE_A = 0
SIDE_B = 1


class CoinSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


class MatchLike(Protocol):
    id: int
    winner_id: Optional[int]


def pick_match_winner(team_a_id: int, team_b_id: int, rng: CoinSource = random) -> int:
    """
    Unweighted coin flip between the two sides of a match.
    0 -> team A wins, 1 -> team B wins. No skill, seed or history is considered.
    """
    return team_a_id if rng.randint(SIDE_A, SIDE_B) == SIDE_A else team_b_id


def resolve_tournament_winner(matches: Sequence[MatchLike]) -> Optional[int]:
    """
    Derives a tournament winner from its matches.
    Returns None when there are no matches yet. Otherwise the winner of the
    most recently created match (highest id) is the tournament winner.
    """
    if not matches:
        return None

    latest = max(matches, key=lambda m: m.id)
    return latest.winner_id
