"""
Data models for the Imposter game core.

``Session`` is the single mutable root of a game, modelled as a frozen
pydantic model: transitions never mutate it, they return an updated copy
(``model_copy(update=...)``). Sequences are tuples for the same reason.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from configs.config import get_config
from imposter.game.constants import (
    Difficulty,
    ForgotStep,
    GameMode,
    Phase,
    RevealStage,
    UNDERCOVER_MODES,
)

cfg = get_config()


class Player(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    is_imposter: bool = False


class CustomWord(BaseModel):
    """One player-authored (category, word) pair."""

    model_config = ConfigDict(frozen=True)

    player_id: int
    category: str
    word: str


class RoundMaterials(BaseModel):
    """Secret word(s) and optional hint produced for one round."""

    model_config = ConfigDict(frozen=True)

    secret_word: str = Field(..., min_length=1)
    category: str
    imposter_word: Optional[str] = None
    imposter_hint: Optional[str] = None


class RoleCard(BaseModel):
    """
    What a player sees when their role is revealed.

    ``kind`` is ``"imposter"`` for the classic imposter (category and
    optional hint, never the word) and ``"word"`` for everybody else.
    """

    model_config = ConfigDict(frozen=True)

    player_id: int
    kind: str
    category: str
    word: Optional[str] = None
    hint: Optional[str] = None


class ForgotModal(BaseModel):
    """Transient state of the in-discussion "forgot my word" modal."""

    model_config = ConfigDict(frozen=True)

    is_open: bool = False
    step: ForgotStep = ForgotStep.SELECT
    player_id: Optional[int] = None


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: Phase = Phase.MODE_SELECTION
    mode: GameMode = GameMode.AI_RANDOM

    # Setup configuration
    player_count: int = cfg.DEFAULT_PLAYER_COUNT
    category: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    timer_duration: int = cfg.DEFAULT_TIMER_SECONDS
    imposter_hint_enabled: bool = False

    # Round materials
    secret_word: str = ""
    imposter_word: Optional[str] = None
    imposter_hint: Optional[str] = None

    # Roles and reveal sequence
    players: Tuple[Player, ...] = ()
    imposter_index: Optional[int] = None
    starting_player_id: int = 1
    current_player_index: int = 0
    reveal_stage: RevealStage = RevealStage.HIDDEN
    reveal_generation: int = 0

    # Discussion
    time_left: int = cfg.DEFAULT_TIMER_SECONDS
    hints: Tuple[str, ...] = ()

    # Custom word collection
    custom_words: Tuple[CustomWord, ...] = ()
    custom_input_index: int = 0

    @property
    def is_undercover(self) -> bool:
        return self.mode in UNDERCOVER_MODES

    @property
    def current_player(self) -> Optional[Player]:
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    def player_by_id(self, player_id: int) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None


def initial_session() -> Session:
    """Return the fixed template every session starts from (and resets to)."""
    return Session()
