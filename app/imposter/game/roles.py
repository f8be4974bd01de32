"""
Role assignment and round initialization.

Randomness comes from an injectable ``random.Random``-compatible source so
tests can supply deterministic sequences.
"""

import logging
import random
from typing import NamedTuple, Optional, Tuple

from imposter.game.constants import Phase, RevealStage
from imposter.game.models import Player, RoundMaterials, Session

logger = logging.getLogger(__name__)

_default_rng = random.SystemRandom()


class RoleAssignment(NamedTuple):
    players: Tuple[Player, ...]
    imposter_index: int
    starting_player_id: int


def assign_roles(
    player_count: int, rng: Optional[random.Random] = None
) -> RoleAssignment:
    """
    Pick one imposter index and an independent starting player id.

    The two draws are independent: the starting player may or may not be
    the imposter.
    """
    rng = rng or _default_rng
    if player_count < 1:
        raise ValueError("player_count must be positive")

    imposter_index = rng.randrange(player_count)
    starting_player_id = rng.randrange(player_count) + 1
    players = tuple(
        Player(id=index + 1, is_imposter=index == imposter_index)
        for index in range(player_count)
    )
    return RoleAssignment(players, imposter_index, starting_player_id)


def initialize_round(
    session: Session,
    materials: RoundMaterials,
    rng: Optional[random.Random] = None,
) -> Session:
    """Build a fresh round from materials and enter the reveal sequence."""
    assignment = assign_roles(session.player_count, rng)
    logger.info(
        "Round initialized: %d players, category '%s', starting player %d",
        session.player_count,
        materials.category,
        assignment.starting_player_id,
    )
    return session.model_copy(update={
        "phase": Phase.PASS_DEVICE,
        "secret_word": materials.secret_word,
        "category": materials.category,
        "imposter_word": materials.imposter_word,
        "imposter_hint": materials.imposter_hint,
        "players": assignment.players,
        "imposter_index": assignment.imposter_index,
        "starting_player_id": assignment.starting_player_id,
        "current_player_index": 0,
        "reveal_stage": RevealStage.HIDDEN,
        "time_left": session.timer_duration,
        "hints": (),
    })
