from app.models.player import Player
from app.models.team import Team
from app.models.match import Match, MatchActiveState, MatchScore, MatchEvent

__all__ = [
    "Player",
    "Team",
    "Match",
    "MatchActiveState",
    "MatchScore",
    "MatchEvent",
]
