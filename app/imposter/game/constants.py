"""
Phase, mode and difficulty constants for the Imposter pass-the-device game.
"""

from enum import Enum


class Phase(str, Enum):
    """Top-level phase of a session. Exactly one is active at a time."""

    MODE_SELECTION = "MODE_SELECTION"
    SETUP = "SETUP"
    CUSTOM_INPUT = "CUSTOM_INPUT"
    PASS_DEVICE = "PASS_DEVICE"
    REVEAL_ROLE = "REVEAL_ROLE"
    GAME_ACTIVE = "GAME_ACTIVE"
    GAME_OVER = "GAME_OVER"


class GameMode(str, Enum):
    AI_RANDOM = "AI_RANDOM"
    AI_UNDERCOVER = "AI_UNDERCOVER"
    CUSTOM = "CUSTOM"
    PRESET = "PRESET"
    PRESET_UNDERCOVER = "PRESET_UNDERCOVER"


class Difficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"
    INSANE = "INSANE"


class RevealStage(str, Enum):
    """Private reveal card state for the player holding the device."""

    HIDDEN = "HIDDEN"
    DECRYPTING = "DECRYPTING"
    REVEALED = "REVEALED"


class ForgotStep(str, Enum):
    SELECT = "SELECT"
    CONFIRM = "CONFIRM"
    REVEAL = "REVEAL"


AI_MODES = frozenset({GameMode.AI_RANDOM, GameMode.AI_UNDERCOVER})
PRESET_MODES = frozenset({GameMode.PRESET, GameMode.PRESET_UNDERCOVER})
UNDERCOVER_MODES = frozenset(
    {GameMode.AI_UNDERCOVER, GameMode.PRESET_UNDERCOVER}
)
# Modes where the imposter may receive a subtle hint instead of a word
HINT_MODES = frozenset({GameMode.AI_RANDOM, GameMode.PRESET})

RANDOM_CATEGORY = "Random"

# Label shown instead of a difficulty for player-authored rounds
CUSTOM_DIFFICULTY_LABEL = "USER"

# User-facing messages
MSG_CATEGORY_REQUIRED = "Please enter a category"
MSG_MIN_PLAYERS = "Minimum 3 players required"
MSG_CUSTOM_FIELDS_REQUIRED = "Please fill in both fields"
MSG_GENERATION_FAILED = "Failed to generate word. Try again."
MSG_START_FAILED = "Failed to start game."
MSG_START_ABANDONED = "The game left setup before the round could start."
MSG_QUIT_CONFIRM = (
    "Are you sure you want to quit? Current game progress will be lost."
)
