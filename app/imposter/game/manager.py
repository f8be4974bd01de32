"""
Game manager for the Imposter pass-the-device game.

Facade between the HTTP routes and the session controllers: looks
sessions up, runs one command and turns game-rule errors into
``(success, response)`` tuples.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from commons import generate_session_id
from configs.config import get_config
from imposter.game import presets
from imposter.game.constants import GameMode
from imposter.game.errors import GameRuleError
from imposter.game.materials import MaterialsProvider
from imposter.game.session import GameSession
from imposter.game.store import (
    create_game_session,
    get_game_session,
    remove_game_session,
    remove_stale_sessions,
)
from imposter.game.topic_generator import GeminiWordProvider

logger = logging.getLogger(__name__)

cfg = get_config()

_SESSION_ID_ATTEMPTS = 5


def _not_found(session_id: str) -> Tuple[bool, Dict]:
    return False, {
        "success": False,
        "code": "not_found",
        "message": f"Game session {session_id} not found",
    }


def _rejected(exc: GameRuleError) -> Tuple[bool, Dict]:
    return False, {"success": False, "code": exc.code, "message": str(exc)}


def _accepted(
    game: GameSession, message: str, **extra: Any
) -> Tuple[bool, Dict]:
    return True, {
        "success": True,
        "message": message,
        "game": game.view(),
        **extra,
    }


class GameManager:
    """Static-method-based manager for game sessions."""

    # Shared materials provider; created on first use
    provider: Optional[MaterialsProvider] = None

    @staticmethod
    def get_provider() -> MaterialsProvider:
        if GameManager.provider is None:
            GameManager.provider = GeminiWordProvider()
        return GameManager.provider

    # ── Command plumbing ─────────────────────────────────────────────────

    @staticmethod
    def _run(
        session_id: str,
        action: Callable[[GameSession], Any],
        message: str,
    ) -> Tuple[bool, Dict]:
        game = get_game_session(session_id)
        if game is None:
            return _not_found(session_id)
        try:
            action(game)
        except GameRuleError as exc:
            logger.info(
                "Session %s rejected %s: %s", session_id, message, exc
            )
            return _rejected(exc)
        return _accepted(game, message)

    @staticmethod
    async def _run_async(
        session_id: str,
        action: Callable[[GameSession], Awaitable[Any]],
        message: str,
    ) -> Tuple[bool, Dict]:
        game = get_game_session(session_id)
        if game is None:
            return _not_found(session_id)
        try:
            await action(game)
        except GameRuleError as exc:
            logger.info(
                "Session %s rejected %s: %s", session_id, message, exc
            )
            return _rejected(exc)
        return _accepted(game, message)

    # ── Session lifecycle ────────────────────────────────────────────────

    @staticmethod
    def create_new_game() -> Tuple[bool, Dict]:
        """Create a session for one shared device."""
        provider = GameManager.get_provider()
        for _ in range(_SESSION_ID_ATTEMPTS):
            game = GameSession(generate_session_id(), provider)
            if create_game_session(game):
                logger.info("New game created: %s", game.session_id)
                return _accepted(
                    game, "Game created successfully",
                    session_id=game.session_id,
                )
        return False, {
            "success": False,
            "code": "unavailable",
            "message": "Could not allocate a game session, try again later",
        }

    @staticmethod
    def get_game_info(session_id: str) -> Tuple[bool, Dict]:
        """Return the current phase view."""
        game = get_game_session(session_id)
        if game is None:
            return _not_found(session_id)
        return _accepted(game, "OK")

    @staticmethod
    def delete_game(session_id: str) -> Tuple[bool, Dict]:
        if not remove_game_session(session_id):
            return _not_found(session_id)
        return True, {
            "success": True,
            "message": f"Game {session_id} deleted",
        }

    @staticmethod
    def delete_old_games() -> Tuple[bool, Dict]:
        """Drop sessions idle for longer than the configured TTL."""
        removed = remove_stale_sessions(cfg.SESSION_TTL_SECONDS)
        return True, {
            "success": True,
            "message": f"Removed {removed} stale games",
            "removed": removed,
        }

    # ── Setup ────────────────────────────────────────────────────────────

    @staticmethod
    def select_mode(session_id: str, mode: GameMode) -> Tuple[bool, Dict]:
        return GameManager._run(
            session_id, lambda game: game.select_mode(mode), "Mode selected"
        )

    @staticmethod
    def update_setup(session_id: str, fields: Dict) -> Tuple[bool, Dict]:
        return GameManager._run(
            session_id,
            lambda game: game.update_setup(**fields),
            "Setup updated",
        )

    @staticmethod
    async def start_round(session_id: str) -> Tuple[bool, Dict]:
        """Start the round (or custom word collection) from SETUP."""
        return await GameManager._run_async(
            session_id, lambda game: game.start(), "Round started"
        )

    @staticmethod
    def submit_custom_word(
        session_id: str, category: str, word: str
    ) -> Tuple[bool, Dict]:
        return GameManager._run(
            session_id,
            lambda game: game.submit_custom_word(category, word),
            "Word submitted",
        )

    # ── Reveal sequence ──────────────────────────────────────────────────

    @staticmethod
    def confirm_player(session_id: str) -> Tuple[bool, Dict]:
        return GameManager._run(
            session_id, lambda game: game.confirm_player(), "Player confirmed"
        )

    @staticmethod
    def tap_reveal(session_id: str) -> Tuple[bool, Dict]:
        return GameManager._run(
            session_id, lambda game: game.tap_reveal(), "Revealing"
        )

    @staticmethod
    def advance(session_id: str) -> Tuple[bool, Dict]:
        return GameManager._run(
            session_id, lambda game: game.advance(), "Device passed"
        )

    # ── Discussion ───────────────────────────────────────────────────────

    @staticmethod
    async def request_hint(session_id: str) -> Tuple[bool, Dict]:
        return await GameManager._run_async(
            session_id, lambda game: game.request_hint(), "Hint added"
        )

    @staticmethod
    def open_forgot(session_id: str) -> Tuple[bool, Dict]:
        return GameManager._run(
            session_id, lambda game: game.open_forgot(), "Forgot-word opened"
        )

    @staticmethod
    def select_forgot_player(
        session_id: str, player_id: int
    ) -> Tuple[bool, Dict]:
        return GameManager._run(
            session_id,
            lambda game: game.select_forgot_player(player_id),
            "Player selected",
        )

    @staticmethod
    def confirm_forgot_identity(session_id: str) -> Tuple[bool, Dict]:
        return GameManager._run(
            session_id,
            lambda game: game.confirm_forgot_identity(),
            "Identity confirmed",
        )

    @staticmethod
    def forgot_back(session_id: str) -> Tuple[bool, Dict]:
        return GameManager._run(
            session_id, lambda game: game.forgot_back(), "Back to selection"
        )

    @staticmethod
    def close_forgot(session_id: str) -> Tuple[bool, Dict]:
        return GameManager._run(
            session_id, lambda game: game.close_forgot(), "Forgot-word closed"
        )

    @staticmethod
    def reveal_results(session_id: str) -> Tuple[bool, Dict]:
        return GameManager._run(
            session_id, lambda game: game.reveal_results(), "Results revealed"
        )

    # ── Leaving the round ────────────────────────────────────────────────

    @staticmethod
    def reset(session_id: str) -> Tuple[bool, Dict]:
        return GameManager._run(
            session_id, lambda game: game.reset(), "Back to mode selection"
        )

    @staticmethod
    def quit_game(session_id: str, confirmed: bool) -> Tuple[bool, Dict]:
        """Quit the round; asks for confirmation while one is in progress."""
        game = get_game_session(session_id)
        if game is None:
            return _not_found(session_id)
        prompt = game.quit(confirmed)
        if prompt is not None:
            return _accepted(game, prompt, confirm_required=True)
        logger.info("Game %s quit", session_id)
        return _accepted(game, "Game quit", confirm_required=False)

    # ── Presets ──────────────────────────────────────────────────────────

    @staticmethod
    def list_preset_categories(undercover: bool = False) -> Dict:
        names = (
            presets.list_undercover_categories() if undercover
            else presets.list_categories()
        )
        return {"success": True, "categories": sorted(names)}
