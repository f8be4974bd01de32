"""
Events understood by the session state machine.

Every user command, timer tick and async completion is one of these;
``transitions.apply_event`` is the only place they take effect.
"""

from dataclasses import dataclass
from typing import Optional

from imposter.game.constants import Difficulty, GameMode
from imposter.game.models import RoundMaterials


@dataclass(frozen=True)
class SelectMode:
    mode: GameMode


@dataclass(frozen=True)
class UpdateSetup:
    player_count: Optional[int] = None
    category: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    timer_duration: Optional[int] = None
    imposter_hint_enabled: Optional[bool] = None


@dataclass(frozen=True)
class BeginCustomInput:
    pass


@dataclass(frozen=True)
class MaterialsReady:
    materials: RoundMaterials


@dataclass(frozen=True)
class SubmitCustomWord:
    category: str
    word: str


@dataclass(frozen=True)
class ConfirmPlayer:
    """The current player claims the device on the pass screen."""


@dataclass(frozen=True)
class TapReveal:
    pass


@dataclass(frozen=True)
class RevealComplete:
    generation: int


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class HintReceived:
    text: str


@dataclass(frozen=True)
class RevealResults:
    pass


@dataclass(frozen=True)
class Reset:
    pass
