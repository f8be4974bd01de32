"""
Forgot-word sub-flow: SELECT -> CONFIRM -> REVEAL.

A pure read path over the Session. Only the modal's own transient state
ever changes; round state (timer included) is untouched.
"""

from typing import Optional

from imposter.game.constants import ForgotStep, Phase
from imposter.game.errors import PhaseError, ValidationError
from imposter.game.models import ForgotModal, RoleCard, Session
from imposter.game.reveal import build_role_card

CLOSED = ForgotModal()


def _require_discussion(session: Session) -> None:
    if session.phase != Phase.GAME_ACTIVE:
        raise PhaseError("Forgot-word is only available during discussion")


def _require_step(modal: ForgotModal, step: ForgotStep) -> None:
    if not modal.is_open or modal.step != step:
        raise PhaseError(f"Forgot-word modal is not at step {step.value}")


def open_modal(session: Session, modal: ForgotModal) -> ForgotModal:
    _require_discussion(session)
    return ForgotModal(is_open=True)


def select_player(
    session: Session, modal: ForgotModal, player_id: int
) -> ForgotModal:
    _require_discussion(session)
    _require_step(modal, ForgotStep.SELECT)
    if session.player_by_id(player_id) is None:
        raise ValidationError(f"Unknown player {player_id}")
    return ForgotModal(
        is_open=True, step=ForgotStep.CONFIRM, player_id=player_id
    )


def confirm_identity(session: Session, modal: ForgotModal) -> ForgotModal:
    """Privacy gate passed: the selected player holds the device."""
    _require_discussion(session)
    _require_step(modal, ForgotStep.CONFIRM)
    return modal.model_copy(update={"step": ForgotStep.REVEAL})


def back_to_select(session: Session, modal: ForgotModal) -> ForgotModal:
    _require_discussion(session)
    _require_step(modal, ForgotStep.CONFIRM)
    return ForgotModal(is_open=True)


def close_modal() -> ForgotModal:
    """Closing from any step discards everything."""
    return CLOSED


def modal_card(session: Session, modal: ForgotModal) -> Optional[RoleCard]:
    """The re-revealed card, only once the identity gate was passed."""
    if not modal.is_open or modal.step != ForgotStep.REVEAL:
        return None
    return build_role_card(session, modal.player_id)
