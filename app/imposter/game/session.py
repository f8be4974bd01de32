"""
Async controller for one shared-device game.

Wraps the pure state machine with the parts that need an event loop:
provider calls in a worker thread, the reveal delay and the discussion
countdown. Every state change goes through ``_apply`` and completes
without awaiting, so transitions never interleave.
"""

import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from configs.config import get_config
from imposter.game import forgot
from imposter.game.constants import (
    MSG_GENERATION_FAILED,
    MSG_QUIT_CONFIRM,
    MSG_START_ABANDONED,
    MSG_START_FAILED,
    GameMode,
    Phase,
)
from imposter.game.errors import BusyError, GenerationError, PhaseError
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
from imposter.game.materials import MaterialsProvider, fetch_round_materials
from imposter.game.models import ForgotModal, Session, initial_session
from imposter.game.transitions import apply_event, validate_setup
from imposter.game.views import build_view

logger = logging.getLogger(__name__)

cfg = get_config()

# Phases that can be left for the lobby without a confirmation prompt
FREE_RESET_PHASES = frozenset(
    {Phase.MODE_SELECTION, Phase.SETUP, Phase.GAME_OVER}
)


class GameSession:
    """One session on one shared device."""

    def __init__(
        self,
        session_id: str,
        provider: MaterialsProvider,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.session_id = session_id
        self.provider = provider
        self.rng = rng or random.SystemRandom()

        self.state: Session = initial_session()
        self.modal: ForgotModal = forgot.CLOSED
        self.materials_loading = False
        self.hint_loading = False
        self.last_error: Optional[str] = None

        self.created_at = datetime.now(timezone.utc)
        self.last_activity = self.created_at

        # Bumped on every reset; async completions carrying an older value
        # belong to an abandoned round.
        self._epoch = 0
        self._reveal_task: Optional[asyncio.Task] = None
        self._timer_task: Optional[asyncio.Task] = None

    # ── Internals ────────────────────────────────────────────────────────

    def touch(self) -> None:
        self.last_activity = datetime.now(timezone.utc)

    def _apply(self, event: object) -> Session:
        self.state = apply_event(self.state, event, self.rng)
        if self.state.phase != Phase.GAME_ACTIVE:
            self.modal = forgot.CLOSED
        self._sync_timer()
        return self.state

    def _timer_should_run(self) -> bool:
        state = self.state
        return (
            state.phase == Phase.GAME_ACTIVE
            and state.timer_duration > 0
            and state.time_left > 0
        )

    def _sync_timer(self) -> None:
        running = self._timer_task is not None and not self._timer_task.done()
        if self._timer_should_run():
            if not running:
                self._timer_task = asyncio.get_running_loop().create_task(
                    self._countdown(self._epoch)
                )
        elif running:
            self._timer_task.cancel()
            self._timer_task = None

    async def _countdown(self, epoch: int) -> None:
        while epoch == self._epoch and self._timer_should_run():
            await asyncio.sleep(cfg.TIMER_TICK_SECONDS)
            if epoch != self._epoch:
                return
            self.state = apply_event(self.state, Tick(), self.rng)
        logger.debug("Countdown stopped for session %s", self.session_id)

    async def _finish_reveal(self, epoch: int, generation: int) -> None:
        await asyncio.sleep(cfg.REVEAL_DELAY_SECONDS)
        if epoch == self._epoch:
            self._apply(RevealComplete(generation))

    def _cancel_tasks(self) -> None:
        for task in (self._reveal_task, self._timer_task):
            if task is not None and not task.done():
                task.cancel()
        self._reveal_task = None
        self._timer_task = None

    # ── Setup ────────────────────────────────────────────────────────────

    def select_mode(self, mode: GameMode) -> Session:
        return self._apply(SelectMode(GameMode(mode)))

    def update_setup(self, **fields: Any) -> Session:
        if self.materials_loading:
            raise BusyError("Round materials are already loading")
        self.last_error = None
        return self._apply(UpdateSetup(**fields))

    async def start(self) -> Session:
        """
        Leave SETUP: open custom input, or fetch materials for the round.

        The provider runs in a worker thread. Its result is dropped if the
        session was reset meanwhile or is no longer in SETUP, and the
        caller gets a PhaseError instead of a started round.
        """
        if self.state.phase != Phase.SETUP:
            raise PhaseError(
                f"Cannot start a round during {self.state.phase.value}"
            )
        validate_setup(self.state)
        self.last_error = None

        if self.state.mode == GameMode.CUSTOM:
            return self._apply(BeginCustomInput())

        if self.materials_loading:
            raise BusyError("Round materials are already loading")

        epoch = self._epoch
        snapshot = self.state
        self.materials_loading = True
        try:
            materials = await asyncio.to_thread(
                fetch_round_materials, snapshot, self.provider, self.rng
            )
        except ValueError as exc:
            logger.warning(
                "Session %s could not start a round: %s", self.session_id, exc
            )
            self._fail_start(epoch, MSG_START_FAILED)
            raise GenerationError(MSG_START_FAILED) from exc
        except Exception as exc:
            logger.error(
                "Materials fetch failed for session %s: %s",
                self.session_id, exc, exc_info=True,
            )
            self._fail_start(epoch, MSG_GENERATION_FAILED)
            raise GenerationError(MSG_GENERATION_FAILED) from exc
        finally:
            if epoch == self._epoch:
                self.materials_loading = False

        if epoch != self._epoch or self.state.phase != Phase.SETUP:
            logger.info(
                "Discarding stale round materials for session %s",
                self.session_id,
            )
            raise PhaseError(MSG_START_ABANDONED)

        self._apply(MaterialsReady(materials))
        logger.info(
            "Session %s round started (%s, %d players)",
            self.session_id, self.state.mode.value, self.state.player_count,
        )
        return self.state

    def _fail_start(self, epoch: int, message: str) -> None:
        if epoch == self._epoch:
            self.last_error = message

    def submit_custom_word(self, category: str, word: str) -> Session:
        return self._apply(SubmitCustomWord(category, word))

    # ── Reveal sequence ──────────────────────────────────────────────────

    def confirm_player(self) -> Session:
        return self._apply(ConfirmPlayer())

    def tap_reveal(self) -> Session:
        self._apply(TapReveal())
        if self._reveal_task is not None and not self._reveal_task.done():
            self._reveal_task.cancel()
        self._reveal_task = asyncio.get_running_loop().create_task(
            self._finish_reveal(self._epoch, self.state.reveal_generation)
        )
        return self.state

    def advance(self) -> Session:
        return self._apply(Advance())

    # ── Discussion ───────────────────────────────────────────────────────

    async def request_hint(self) -> Session:
        """Fetch one discussion question; one request at a time."""
        if self.state.phase != Phase.GAME_ACTIVE:
            raise PhaseError("Hints are only available during discussion")
        if self.hint_loading:
            raise BusyError("A hint is already being generated")

        epoch = self._epoch
        category = self.state.category
        secret_word = self.state.secret_word
        self.hint_loading = True
        try:
            text = await asyncio.to_thread(
                self.provider.generate_hint, category, secret_word
            )
        finally:
            if epoch == self._epoch:
                self.hint_loading = False

        if epoch != self._epoch:
            logger.info(
                "Discarding stale hint for session %s", self.session_id
            )
            return self.state
        return self._apply(HintReceived(text))

    def open_forgot(self) -> ForgotModal:
        self.modal = forgot.open_modal(self.state, self.modal)
        return self.modal

    def select_forgot_player(self, player_id: int) -> ForgotModal:
        self.modal = forgot.select_player(self.state, self.modal, player_id)
        return self.modal

    def confirm_forgot_identity(self) -> ForgotModal:
        self.modal = forgot.confirm_identity(self.state, self.modal)
        return self.modal

    def forgot_back(self) -> ForgotModal:
        self.modal = forgot.back_to_select(self.state, self.modal)
        return self.modal

    def close_forgot(self) -> ForgotModal:
        self.modal = forgot.close_modal()
        return self.modal

    def reveal_results(self) -> Session:
        return self._apply(RevealResults())

    # ── Leaving the round ────────────────────────────────────────────────

    def _restart(self) -> Session:
        self._epoch += 1
        self._cancel_tasks()
        self.materials_loading = False
        self.hint_loading = False
        self.last_error = None
        self.modal = forgot.CLOSED
        logger.info("Session %s reset to mode selection", self.session_id)
        return self._apply(Reset())

    def reset(self) -> Session:
        """Back to the lobby from a phase with no round in progress."""
        if self.state.phase not in FREE_RESET_PHASES:
            raise PhaseError(MSG_QUIT_CONFIRM)
        return self._restart()

    def quit(self, confirmed: bool = False) -> Optional[str]:
        """
        Abandon the current round.

        Returns the confirmation prompt, leaving everything untouched, when
        a round is in progress and ``confirmed`` is false.
        """
        if not confirmed and self.state.phase not in FREE_RESET_PHASES:
            return MSG_QUIT_CONFIRM
        self._restart()
        return None

    def close(self) -> None:
        """Stop background work before the session is dropped."""
        self._epoch += 1
        self._cancel_tasks()

    # ── Presentation ─────────────────────────────────────────────────────

    def view(self) -> Dict[str, Any]:
        view = build_view(
            self.state,
            self.modal,
            materials_loading=self.materials_loading,
            hint_loading=self.hint_loading,
            error=self.last_error,
        )
        view["session_id"] = self.session_id
        return view
