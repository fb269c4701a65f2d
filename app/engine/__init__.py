from app.engine.extras import BallType, classify
from app.engine.deliveries import apply_delivery
from app.engine.result import MatchResult, calculate_result

__all__ = [
    "BallType",
    "classify",
    "apply_delivery",
    "MatchResult",
    "calculate_result",
]
