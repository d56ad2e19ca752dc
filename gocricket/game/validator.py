"""Validation of card requests."""

from dataclasses import dataclass

from gocricket.errors import InvalidActionError, RequestError
from gocricket.models.card import Rank
from gocricket.models.game_state import GamePhase, GameState


@dataclass
class ValidationResult:
    """Result of request validation."""

    is_valid: bool
    error: RequestError = RequestError.NONE
    error_message: str = ""

    def raise_if_invalid(self) -> None:
        """Raise InvalidActionError carrying the rejection reason."""
        if not self.is_valid:
            raise InvalidActionError(self.error, self.error_message)


class RequestValidator:
    """Checks that a player may ask another player for a rank."""

    def validate(
        self,
        state: GameState,
        actor_id: str,
        target_id: str,
        rank: Rank,
    ) -> ValidationResult:
        """Validate a request.

        Args:
            state: Canonical game state
            actor_id: Player making the request
            target_id: Player being asked
            rank: Requested rank

        Returns:
            ValidationResult
        """
        if state.phase != GamePhase.PLAYING:
            return ValidationResult(
                is_valid=False,
                error=RequestError.WRONG_PHASE,
                error_message=f"Requests are not allowed during {state.phase.value}",
            )

        current = state.current_player()
        if current is None or current.id != actor_id:
            return ValidationResult(
                is_valid=False,
                error=RequestError.NOT_YOUR_TURN,
                error_message=f"It is not {actor_id}'s turn",
            )

        if state.is_animating:
            return ValidationResult(
                is_valid=False,
                error=RequestError.BUSY,
                error_message="A draw is still in progress",
            )

        target = state.player_by_id(target_id)
        if target is None:
            return ValidationResult(
                is_valid=False,
                error=RequestError.UNKNOWN_PLAYER,
                error_message=f"No player with id {target_id!r}",
            )
        if target.id == actor_id:
            return ValidationResult(
                is_valid=False,
                error=RequestError.SELF_TARGET,
                error_message="Players cannot ask themselves",
            )

        if not current.has_rank(rank):
            return ValidationResult(
                is_valid=False,
                error=RequestError.RANK_NOT_HELD,
                error_message="You can only ask for ranks you have in your hand!",
            )

        return ValidationResult(is_valid=True)
