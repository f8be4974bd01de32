"""
Phase views for the shared device.

Secret content is only ever included where the person holding the device
is entitled to it: the current player's revealed card, the forgot-word
card after the identity gate, and the results screen.
"""

from typing import Any, Dict, Optional

from imposter.game import presets
from imposter.game.constants import (
    AI_MODES,
    CUSTOM_DIFFICULTY_LABEL,
    HINT_MODES,
    PRESET_MODES,
    GameMode,
    Phase,
    RevealStage,
)
from imposter.game.forgot import modal_card
from imposter.game.models import ForgotModal, Session
from imposter.game.reveal import build_role_card


def _setup_view(session: Session) -> Dict[str, Any]:
    view: Dict[str, Any] = {
        "player_count": session.player_count,
        "category": session.category,
        "difficulty": session.difficulty.value,
        "timer_duration": session.timer_duration,
        "imposter_hint_enabled": session.imposter_hint_enabled,
        "requires_category": session.mode in AI_MODES,
        "shows_difficulty": session.mode != GameMode.CUSTOM,
        "shows_hint_toggle": session.mode in HINT_MODES,
    }
    if session.mode == GameMode.PRESET:
        view["categories"] = sorted(presets.list_categories())
    elif session.mode == GameMode.PRESET_UNDERCOVER:
        view["categories"] = sorted(presets.list_undercover_categories())
    return view


def _reveal_view(session: Session) -> Dict[str, Any]:
    player = session.current_player
    view: Dict[str, Any] = {
        "player_id": player.id,
        "reveal_stage": session.reveal_stage.value,
        "is_last_player": (
            session.current_player_index == len(session.players) - 1
        ),
    }
    if session.reveal_stage == RevealStage.REVEALED:
        view["card"] = build_role_card(session, player.id).model_dump()
    return view


def _discussion_view(
    session: Session, modal: ForgotModal
) -> Dict[str, Any]:
    card = modal_card(session, modal)
    return {
        "category": session.category,
        "difficulty": (
            CUSTOM_DIFFICULTY_LABEL if session.mode == GameMode.CUSTOM
            else session.difficulty.value
        ),
        "starting_player_id": session.starting_player_id,
        "player_ids": [player.id for player in session.players],
        "timer_duration": session.timer_duration,
        "time_left": session.time_left,
        "hints": list(session.hints),
        "forgot_modal": {
            "is_open": modal.is_open,
            "step": modal.step.value,
            "player_id": modal.player_id,
            "card": card.model_dump() if card else None,
        },
    }


def _results_view(session: Session) -> Dict[str, Any]:
    imposter = session.players[session.imposter_index]
    return {
        "category": session.category,
        "secret_word": session.secret_word,
        "imposter_id": imposter.id,
        "imposter_word": (
            session.imposter_word if session.is_undercover else None
        ),
        "imposter_hint": session.imposter_hint,
    }


def build_view(
    session: Session,
    modal: ForgotModal,
    materials_loading: bool = False,
    hint_loading: bool = False,
    error: Optional[str] = None,
) -> Dict[str, Any]:
    """Return the JSON-ready view of the current phase."""
    view: Dict[str, Any] = {
        "phase": session.phase.value,
        "mode": session.mode.value,
        "loading": materials_loading,
        "hint_loading": hint_loading,
        "error": error,
    }

    phase = session.phase
    if phase == Phase.MODE_SELECTION:
        view["modes"] = [mode.value for mode in GameMode]
    elif phase == Phase.SETUP:
        view["setup"] = _setup_view(session)
        view["uses_presets"] = session.mode in PRESET_MODES
    elif phase == Phase.CUSTOM_INPUT:
        view["custom_input"] = {
            "player_id": session.custom_input_index + 1,
            "player_count": session.player_count,
            "is_last_player": (
                session.custom_input_index == session.player_count - 1
            ),
        }
    elif phase == Phase.PASS_DEVICE:
        view["pass_device"] = {"player_id": session.current_player.id}
    elif phase == Phase.REVEAL_ROLE:
        view["reveal"] = _reveal_view(session)
    elif phase == Phase.GAME_ACTIVE:
        view["discussion"] = _discussion_view(session, modal)
    elif phase == Phase.GAME_OVER:
        view["results"] = _results_view(session)
    return view
