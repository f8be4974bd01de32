"""
Session state machine.

``apply_event(session, event, rng)`` is a pure function: it returns a new
Session or raises a ``GameRuleError`` and leaves the input untouched.
All transitions live in the ``_TRANSITIONS`` table keyed by
``(phase, event type)``.

    MODE_SELECTION -> SETUP -> [CUSTOM_INPUT] -> PASS_DEVICE <-> REVEAL_ROLE
        -> GAME_ACTIVE -> GAME_OVER -> (reset) MODE_SELECTION
"""

import logging
import random
from typing import Callable, Dict, Optional, Tuple, Type

from configs.config import get_config
from imposter.game.constants import (
    AI_MODES,
    HINT_MODES,
    MSG_CATEGORY_REQUIRED,
    MSG_MIN_PLAYERS,
    PRESET_MODES,
    RANDOM_CATEGORY,
    Difficulty,
    GameMode,
    Phase,
    RevealStage,
)
from imposter.game.custom_words import submit_custom_word
from imposter.game.errors import PhaseError, ValidationError
from imposter.game.events import (
    Advance,
    BeginCustomInput,
    ConfirmPlayer,
    HintReceived,
    MaterialsReady,
    Reset,
    RevealComplete,
    RevealResults,
    SelectMode,
    SubmitCustomWord,
    TapReveal,
    Tick,
    UpdateSetup,
)
from imposter.game.models import Session, initial_session
from imposter.game.roles import initialize_round

logger = logging.getLogger(__name__)

cfg = get_config()

Handler = Callable[[Session, object, Optional[random.Random]], Session]


# ── Validation ───────────────────────────────────────────────────────────


def validate_timer_duration(seconds: int) -> int:
    """0 disables the timer; otherwise whole minutes up to the maximum."""
    if seconds == 0 or seconds in cfg.TIMER_PRESET_SECONDS:
        return seconds
    if seconds % 60 or not 60 <= seconds <= cfg.MAX_CUSTOM_TIMER_MINUTES * 60:
        raise ValidationError(
            f"Timer must be 0 or 1-{cfg.MAX_CUSTOM_TIMER_MINUTES} whole minutes"
        )
    return seconds


def validate_setup(session: Session) -> None:
    """Guards for leaving SETUP. Raises ValidationError."""
    if session.mode in AI_MODES and not session.category.strip():
        raise ValidationError(MSG_CATEGORY_REQUIRED)
    if session.player_count < cfg.MIN_PLAYERS:
        raise ValidationError(MSG_MIN_PLAYERS)


# ── Handlers ─────────────────────────────────────────────────────────────


def _select_mode(session: Session, event: SelectMode, rng) -> Session:
    mode = GameMode(event.mode)
    return session.model_copy(update={
        "phase": Phase.SETUP,
        "mode": mode,
        "category": RANDOM_CATEGORY if mode in PRESET_MODES else "",
        "difficulty": Difficulty.MEDIUM,
        "imposter_hint_enabled": mode == GameMode.AI_RANDOM,
    })


def _update_setup(session: Session, event: UpdateSetup, rng) -> Session:
    update: Dict[str, object] = {}

    if event.player_count is not None:
        if not cfg.MIN_PLAYERS <= event.player_count <= cfg.MAX_PLAYERS:
            raise ValidationError(
                f"Player count must be between {cfg.MIN_PLAYERS} "
                f"and {cfg.MAX_PLAYERS}"
            )
        update["player_count"] = event.player_count

    if event.category is not None:
        update["category"] = event.category

    if event.difficulty is not None:
        update["difficulty"] = Difficulty(event.difficulty)

    if event.timer_duration is not None:
        update["timer_duration"] = validate_timer_duration(
            event.timer_duration
        )

    if event.imposter_hint_enabled is not None:
        if event.imposter_hint_enabled and session.mode not in HINT_MODES:
            raise ValidationError(
                "Imposter hints are only available in classic modes"
            )
        update["imposter_hint_enabled"] = event.imposter_hint_enabled

    return session.model_copy(update=update)


def _begin_custom_input(
    session: Session, event: BeginCustomInput, rng
) -> Session:
    if session.mode != GameMode.CUSTOM:
        raise PhaseError("Custom input is only used in custom mode")
    validate_setup(session)
    return session.model_copy(update={
        "phase": Phase.CUSTOM_INPUT,
        "custom_input_index": 0,
        "custom_words": (),
    })


def _materials_ready(session: Session, event: MaterialsReady, rng) -> Session:
    if session.mode == GameMode.CUSTOM:
        raise PhaseError("Custom rounds are built from player input")
    validate_setup(session)
    return initialize_round(session, event.materials, rng)


def _submit_custom(session: Session, event: SubmitCustomWord, rng) -> Session:
    return submit_custom_word(session, event.category, event.word, rng)


def _confirm_player(session: Session, event: ConfirmPlayer, rng) -> Session:
    return session.model_copy(update={
        "phase": Phase.REVEAL_ROLE,
        "reveal_stage": RevealStage.HIDDEN,
    })


def _tap_reveal(session: Session, event: TapReveal, rng) -> Session:
    if session.reveal_stage != RevealStage.HIDDEN:
        raise PhaseError("Card is already revealing")
    return session.model_copy(update={
        "reveal_stage": RevealStage.DECRYPTING,
        "reveal_generation": session.reveal_generation + 1,
    })


def _reveal_complete(session: Session, event: RevealComplete, rng) -> Session:
    if (
        session.reveal_stage != RevealStage.DECRYPTING
        or event.generation != session.reveal_generation
    ):
        return session
    return session.model_copy(update={"reveal_stage": RevealStage.REVEALED})


def _advance(session: Session, event: Advance, rng) -> Session:
    if session.reveal_stage != RevealStage.REVEALED:
        raise PhaseError("Reveal your card before passing the device")
    update: Dict[str, object] = {"reveal_stage": RevealStage.HIDDEN}
    if session.current_player_index < len(session.players) - 1:
        update["current_player_index"] = session.current_player_index + 1
        update["phase"] = Phase.PASS_DEVICE
    else:
        update["phase"] = Phase.GAME_ACTIVE
        logger.info("All roles revealed; discussion started")
    return session.model_copy(update=update)


def tick(session: Session) -> Session:
    """One elapsed second of discussion. Clamped at zero."""
    if (
        session.phase != Phase.GAME_ACTIVE
        or session.timer_duration <= 0
        or session.time_left <= 0
    ):
        return session
    return session.model_copy(
        update={"time_left": max(0, session.time_left - 1)}
    )


def _tick(session: Session, event: Tick, rng) -> Session:
    return tick(session)


def _hint_received(session: Session, event: HintReceived, rng) -> Session:
    text = (event.text or "").strip()
    if not text:
        return session
    return session.model_copy(update={"hints": (text,) + session.hints})


def _reveal_results(session: Session, event: RevealResults, rng) -> Session:
    return session.model_copy(update={"phase": Phase.GAME_OVER})


def _reset(session: Session, event: Reset, rng) -> Session:
    return initial_session()


# ── Transition table ─────────────────────────────────────────────────────

_TRANSITIONS: Dict[Tuple[Phase, Type], Handler] = {
    (Phase.MODE_SELECTION, SelectMode): _select_mode,
    (Phase.SETUP, UpdateSetup): _update_setup,
    (Phase.SETUP, BeginCustomInput): _begin_custom_input,
    (Phase.SETUP, MaterialsReady): _materials_ready,
    (Phase.CUSTOM_INPUT, SubmitCustomWord): _submit_custom,
    (Phase.PASS_DEVICE, ConfirmPlayer): _confirm_player,
    (Phase.REVEAL_ROLE, TapReveal): _tap_reveal,
    (Phase.REVEAL_ROLE, RevealComplete): _reveal_complete,
    (Phase.REVEAL_ROLE, Advance): _advance,
    (Phase.GAME_ACTIVE, Tick): _tick,
    (Phase.GAME_ACTIVE, HintReceived): _hint_received,
    (Phase.GAME_ACTIVE, RevealResults): _reveal_results,
}

# Available from every phase
_ANY_PHASE: Dict[Type, Handler] = {
    Reset: _reset,
}

# Async completions that may arrive after their phase is gone; ignored then
_PASSIVE_EVENTS = (Tick, RevealComplete, HintReceived)


def apply_event(
    session: Session, event: object, rng: Optional[random.Random] = None
) -> Session:
    """Apply one event and return the resulting Session."""
    handler = _ANY_PHASE.get(type(event)) or _TRANSITIONS.get(
        (session.phase, type(event))
    )
    if handler is None:
        if isinstance(event, _PASSIVE_EVENTS):
            return session
        raise PhaseError(
            f"{type(event).__name__} is not allowed during "
            f"{session.phase.value}"
        )
    return handler(session, event, rng)
