"""
Role card content for the private reveal and the forgot-word re-reveal.

Always recomputed from the current Session fields, never cached.
"""

from imposter.game.errors import ValidationError
from imposter.game.models import RoleCard, Session

CARD_IMPOSTER = "imposter"
CARD_WORD = "word"


def build_role_card(session: Session, player_id: int) -> RoleCard:
    """
    Return what ``player_id`` is entitled to see.

    - Classic imposter: category and hint (if any), never the secret word.
    - Undercover imposter: their own decoy word.
    - Everybody else: the secret word.
    """
    player = session.player_by_id(player_id)
    if player is None:
        raise ValidationError(f"Unknown player {player_id}")

    if player.is_imposter and not session.is_undercover:
        return RoleCard(
            player_id=player.id,
            kind=CARD_IMPOSTER,
            category=session.category,
            hint=session.imposter_hint,
        )

    word = session.imposter_word if player.is_imposter else session.secret_word
    return RoleCard(
        player_id=player.id,
        kind=CARD_WORD,
        category=session.category,
        word=word,
    )
