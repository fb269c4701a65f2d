"""
Scoring errors.

Every error carries an HTTP status and a stable code so the API layer can
render it without knowing the engine's internals. Validation and state
errors are always raised before anything is mutated.
"""
from typing import Optional


class ScoringError(Exception):
    """Base class for scoring engine errors."""

    status_code = 400
    code = "scoring_error"
    title = "Scoring error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.title
        super().__init__(self.detail)


class ValidationError(ScoringError):
    """The submitted input is wrong; re-prompt the scorer."""

    status_code = 422
    code = "validation_error"
    title = "Invalid input"


class SamePlayerError(ValidationError):
    code = "same_player"
    title = "Striker and non-striker must be different players"


class BowlerRepeatError(ValidationError):
    code = "bowler_repeat"
    title = "A bowler cannot bowl consecutive overs"


class InvalidDeliveryError(ValidationError):
    code = "invalid_delivery"
    title = "Invalid delivery"


class StateError(ScoringError):
    """The match is not in a state that allows this operation."""

    status_code = 409
    code = "state_error"
    title = "Operation not allowed in current match state"


class InningsEndedError(StateError):
    code = "innings_ended"
    title = "Innings has already ended"


class MatchStateError(StateError):
    code = "match_state"


class MissingPlayersError(ValidationError, StateError):
    """A striker, non-striker or bowler slot is empty."""

    status_code = 409
    code = "missing_players"
    title = "Players must be selected before the next delivery"

    def __init__(self, slots: list[str]):
        self.slots = list(slots)
        super().__init__(f"Select {', '.join(self.slots)} before the next delivery")


class NotFoundError(ScoringError):
    status_code = 404
    code = "not_found"
    title = "Not found"


class ConcurrencyError(ScoringError):
    status_code = 409
    code = "concurrency_error"
    title = "Another scoring operation is in progress"


class ConcurrentWriteError(ConcurrencyError):
    code = "concurrent_write"

    def __init__(self, match_id: int):
        self.match_id = match_id
        super().__init__(f"A delivery for match {match_id} is already being processed")


class PersistenceError(ScoringError):
    """The store failed; retry with the same sequence number."""

    status_code = 503
    code = "persistence_error"
    title = "Score could not be saved"
