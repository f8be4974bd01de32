"""
Custom word collection for the player-authored mode.

Each player in turn submits one (category, word) pair. Once the last
player has submitted, one pair drawn uniformly from *all* pairs becomes
the round secret, so submission order gives nothing away.
"""

import logging
import random
from typing import Optional, Sequence

from imposter.game.constants import MSG_CUSTOM_FIELDS_REQUIRED
from imposter.game.errors import ValidationError
from imposter.game.models import CustomWord, RoundMaterials, Session
from imposter.game.roles import initialize_round

logger = logging.getLogger(__name__)

_default_rng = random.SystemRandom()


def pick_custom_materials(
    entries: Sequence[CustomWord], rng: Optional[random.Random] = None
) -> RoundMaterials:
    """Select one collected pair as the round secret (no hint, no decoy)."""
    if not entries:
        raise ValueError("No custom words collected")
    pick = (rng or _default_rng).choice(list(entries))
    return RoundMaterials(secret_word=pick.word, category=pick.category)


def submit_custom_word(
    session: Session,
    category: str,
    word: str,
    rng: Optional[random.Random] = None,
) -> Session:
    """
    Record the current player's pair and either advance the cursor or,
    for the final player, initialize the round.
    """
    category = (category or "").strip()
    word = (word or "").strip()
    if not category or not word:
        raise ValidationError(MSG_CUSTOM_FIELDS_REQUIRED)

    entry = CustomWord(
        player_id=session.custom_input_index + 1,
        category=category,
        word=word,
    )
    entries = session.custom_words + (entry,)
    next_index = session.custom_input_index + 1

    if next_index < session.player_count:
        logger.debug(
            "Custom word %d/%d collected", next_index, session.player_count
        )
        return session.model_copy(update={
            "custom_words": entries,
            "custom_input_index": next_index,
        })

    logger.info("All %d custom words collected", len(entries))
    session = session.model_copy(update={"custom_words": entries})
    return initialize_round(session, pick_custom_materials(entries, rng), rng)
