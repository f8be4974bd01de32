"""
In-memory registry of game sessions.

One entry per shared device. Nothing survives a process restart.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from configs.config import get_config
from imposter.game.session import GameSession

logger = logging.getLogger(__name__)

cfg = get_config()

# Only touched from the event loop thread (every route is async def).
_sessions: Dict[str, GameSession] = {}


# ═══════════════════════════════════════════════════════════════════════════
#  GAME SESSION OPERATIONS
# ═══════════════════════════════════════════════════════════════════════════


def create_game_session(game: GameSession) -> bool:
    """Register ``game``. False if the id is taken or the store is full."""
    if game.session_id in _sessions:
        logger.warning("Game session %s already exists", game.session_id)
        return False
    if len(_sessions) >= cfg.MAX_SESSIONS:
        logger.warning(
            "Session limit reached (%d); refusing %s",
            cfg.MAX_SESSIONS, game.session_id,
        )
        return False
    _sessions[game.session_id] = game
    logger.info("Game session %s created", game.session_id)
    return True


def get_game_session(session_id: str) -> Optional[GameSession]:
    """Return the session and mark it active, or None."""
    game = _sessions.get(session_id)
    if game is None:
        logger.warning("Game session %s not found", session_id)
        return None
    game.touch()
    return game


def get_all_game_sessions() -> List[GameSession]:
    return list(_sessions.values())


def remove_game_session(session_id: str) -> bool:
    """Drop a session and stop its background tasks."""
    game = _sessions.pop(session_id, None)
    if game is None:
        return False
    game.close()
    logger.info("Game session %s removed", session_id)
    return True


def remove_stale_sessions(ttl_seconds: Optional[int] = None) -> int:
    """Remove sessions idle for longer than ``ttl_seconds``."""
    ttl = cfg.SESSION_TTL_SECONDS if ttl_seconds is None else ttl_seconds
    cutoff = datetime.now(timezone.utc) - timedelta(seconds=ttl)
    stale = [
        session_id
        for session_id, game in _sessions.items()
        if game.last_activity < cutoff
    ]
    removed = sum(1 for session_id in stale if remove_game_session(session_id))
    if removed:
        logger.info("Removed %d stale game sessions", removed)
    return removed


def clear_sessions() -> None:
    """Drop every session."""
    for game in get_all_game_sessions():
        remove_game_session(game.session_id)
