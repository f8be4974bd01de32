"""
Round materials orchestration: maps the session's mode to the preset
tables or the AI provider and returns ``RoundMaterials``.

Runs in a worker thread (``asyncio.to_thread``); it only reads the
Session snapshot it was given.
"""

import logging
import random
from typing import Optional, Protocol

from imposter.game import presets
from imposter.game.constants import Difficulty, GameMode
from imposter.game.models import RoundMaterials, Session
from imposter.game.topic_generator import ClassicContent, UndercoverContent

logger = logging.getLogger(__name__)


class MaterialsProvider(Protocol):
    """Contract of the AI-backed generator. Implementations never raise."""

    def generate_classic(
        self, category: str, difficulty: Difficulty, want_hint: bool
    ) -> ClassicContent: ...

    def generate_undercover(
        self, category: str, difficulty: Difficulty
    ) -> UndercoverContent: ...

    def generate_hint(self, category: str, secret_word: str) -> str: ...

    def generate_imposter_hint(
        self, category: str, secret_word: str
    ) -> str: ...


def fetch_round_materials(
    session: Session,
    provider: MaterialsProvider,
    rng: Optional[random.Random] = None,
) -> RoundMaterials:
    """
    Produce the materials for the next round.

    Raises ``ValueError`` for an unknown preset category; provider
    failures are contained inside the provider.
    """
    mode = session.mode
    category = session.category.strip()

    if mode == GameMode.AI_RANDOM:
        content = provider.generate_classic(
            category, session.difficulty, session.imposter_hint_enabled
        )
        return RoundMaterials(
            secret_word=content.secret_word,
            category=category,
            imposter_hint=content.imposter_hint or None,
        )

    if mode == GameMode.AI_UNDERCOVER:
        content = provider.generate_undercover(category, session.difficulty)
        return RoundMaterials(
            secret_word=content.secret_word,
            category=category,
            imposter_word=content.imposter_word,
        )

    if mode == GameMode.PRESET:
        pick = presets.pick_random(session.difficulty, category, rng)
        hint = None
        if session.imposter_hint_enabled:
            hint = provider.generate_imposter_hint(pick.category, pick.word)
        return RoundMaterials(
            secret_word=pick.word, category=pick.category, imposter_hint=hint
        )

    if mode == GameMode.PRESET_UNDERCOVER:
        pick = presets.pick_random_undercover(
            session.difficulty, category, rng
        )
        return RoundMaterials(
            secret_word=pick.secret_word,
            category=pick.category,
            imposter_word=pick.imposter_word,
        )

    raise ValueError(f"Mode {mode.value} does not fetch round materials")
