"""
Imposter game API routes.

Endpoints:
    POST /api/sessions                               — create session
    GET  /api/sessions/{session_id}                  — current phase view
    POST /api/sessions/{session_id}/mode             — choose game mode
    POST /api/sessions/{session_id}/setup            — edit setup fields
    POST /api/sessions/{session_id}/start            — start the round
    POST /api/sessions/{session_id}/custom-words     — submit a custom word
    POST /api/sessions/{session_id}/confirm-player   — "I am Player N"
    POST /api/sessions/{session_id}/reveal           — tap to reveal
    POST /api/sessions/{session_id}/advance          — pass the device
    POST /api/sessions/{session_id}/hints            — request a hint
    POST /api/sessions/{session_id}/forgot/open      — open forgot-word
    POST /api/sessions/{session_id}/forgot/select    — pick a player
    POST /api/sessions/{session_id}/forgot/confirm   — identity gate
    POST /api/sessions/{session_id}/forgot/back      — back to selection
    POST /api/sessions/{session_id}/forgot/close     — close forgot-word
    POST /api/sessions/{session_id}/results          — reveal results
    POST /api/sessions/{session_id}/reset            — back to the lobby
    POST /api/sessions/{session_id}/quit             — quit the round
    GET  /api/presets/categories                     — preset categories
"""

import logging
from typing import Dict, Optional, Tuple

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from commons import limiter
from imposter.game.constants import Difficulty, GameMode
from imposter.game.manager import GameManager
from security import safe_error_response, validate_session_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["game"])

_STATUS_BY_CODE = {
    "not_found": 404,
    "busy": 409,
    "generation": 502,
    "unavailable": 503,
}


def _unwrap(result: Tuple[bool, Dict], default_detail: str) -> Dict:
    """Return the response or raise the HTTP error matching its code."""
    success, response = result
    if success:
        return response
    raise HTTPException(
        status_code=_STATUS_BY_CODE.get(response.get("code"), 400),
        detail=response.get("message", default_detail),
    )


# ── Pydantic request bodies ─────────────────────────────────────────────


class SelectModeRequest(BaseModel):
    mode: GameMode


class SetupRequest(BaseModel):
    player_count: Optional[int] = Field(default=None, ge=1, le=100)
    category: Optional[str] = Field(default=None, max_length=50)
    difficulty: Optional[Difficulty] = None
    timer_duration: Optional[int] = Field(default=None, ge=0)
    imposter_hint_enabled: Optional[bool] = None


class CustomWordRequest(BaseModel):
    category: str = Field(default="", max_length=50)
    word: str = Field(default="", max_length=50)


class ForgotSelectRequest(BaseModel):
    player_id: int = Field(..., ge=1)


class QuitRequest(BaseModel):
    confirmed: bool = False


# ── Endpoints ────────────────────────────────────────────────────────────


@router.post("/sessions")
@limiter.limit("10/minute")
async def create_session(request: Request) -> dict:
    """Create a new session for this device."""
    try:
        return _unwrap(GameManager.create_new_game(), "Failed to create game")
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="create_session")


@router.get("/sessions/{session_id}")
@limiter.limit("300/minute")
async def get_session(request: Request, session_id: str) -> dict:
    """Return the view of the current phase."""
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(
            GameManager.get_game_info(session_id), "Game not found"
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="get_session")


@router.post("/sessions/{session_id}/mode")
@limiter.limit("30/minute")
async def select_mode(
    request: Request, session_id: str, body: SelectModeRequest
) -> dict:
    """Choose a game mode and open setup."""
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(
            GameManager.select_mode(session_id, body.mode),
            "Failed to select mode",
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="select_mode")


@router.post("/sessions/{session_id}/setup")
@limiter.limit("120/minute")
async def update_setup(
    request: Request, session_id: str, body: SetupRequest
) -> dict:
    """Edit one or more setup fields."""
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(
            GameManager.update_setup(
                session_id, body.model_dump(exclude_none=True)
            ),
            "Failed to update setup",
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="update_setup")


@router.post("/sessions/{session_id}/start")
@limiter.limit("20/minute")
async def start_round(request: Request, session_id: str) -> dict:
    """Start the round: fetch materials or open custom word input."""
    session_id = validate_session_id(session_id)
    try:
        response = _unwrap(
            await GameManager.start_round(session_id), "Failed to start game"
        )
        logger.info("Game %s started", session_id)
        return response
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="start_round")


@router.post("/sessions/{session_id}/custom-words")
@limiter.limit("60/minute")
async def submit_custom_word(
    request: Request, session_id: str, body: CustomWordRequest
) -> dict:
    """Submit the current player's category and word."""
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(
            GameManager.submit_custom_word(
                session_id, body.category, body.word
            ),
            "Failed to submit word",
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="submit_custom_word")


@router.post("/sessions/{session_id}/confirm-player")
@limiter.limit("120/minute")
async def confirm_player(request: Request, session_id: str) -> dict:
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(
            GameManager.confirm_player(session_id), "Failed to confirm player"
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="confirm_player")


@router.post("/sessions/{session_id}/reveal")
@limiter.limit("120/minute")
async def tap_reveal(request: Request, session_id: str) -> dict:
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(GameManager.tap_reveal(session_id), "Failed to reveal")
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="tap_reveal")


@router.post("/sessions/{session_id}/advance")
@limiter.limit("120/minute")
async def advance(request: Request, session_id: str) -> dict:
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(GameManager.advance(session_id), "Failed to advance")
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="advance")


@router.post("/sessions/{session_id}/hints")
@limiter.limit("30/minute")
async def request_hint(request: Request, session_id: str) -> dict:
    """Generate one discussion question."""
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(
            await GameManager.request_hint(session_id), "Failed to get hint"
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="request_hint")


@router.post("/sessions/{session_id}/forgot/open")
@limiter.limit("60/minute")
async def open_forgot(request: Request, session_id: str) -> dict:
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(
            GameManager.open_forgot(session_id), "Failed to open modal"
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="open_forgot")


@router.post("/sessions/{session_id}/forgot/select")
@limiter.limit("60/minute")
async def select_forgot_player(
    request: Request, session_id: str, body: ForgotSelectRequest
) -> dict:
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(
            GameManager.select_forgot_player(session_id, body.player_id),
            "Failed to select player",
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="select_forgot_player")


@router.post("/sessions/{session_id}/forgot/confirm")
@limiter.limit("60/minute")
async def confirm_forgot_identity(request: Request, session_id: str) -> dict:
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(
            GameManager.confirm_forgot_identity(session_id),
            "Failed to confirm identity",
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="confirm_forgot_identity")


@router.post("/sessions/{session_id}/forgot/back")
@limiter.limit("60/minute")
async def forgot_back(request: Request, session_id: str) -> dict:
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(GameManager.forgot_back(session_id), "Failed to go back")
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="forgot_back")


@router.post("/sessions/{session_id}/forgot/close")
@limiter.limit("60/minute")
async def close_forgot(request: Request, session_id: str) -> dict:
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(
            GameManager.close_forgot(session_id), "Failed to close modal"
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="close_forgot")


@router.post("/sessions/{session_id}/results")
@limiter.limit("30/minute")
async def reveal_results(request: Request, session_id: str) -> dict:
    """End discussion and show the secret word and the imposter."""
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(
            GameManager.reveal_results(session_id), "Failed to reveal results"
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="reveal_results")


@router.post("/sessions/{session_id}/reset")
@limiter.limit("30/minute")
async def reset(request: Request, session_id: str) -> dict:
    """Return to mode selection when no round is in progress."""
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(GameManager.reset(session_id), "Failed to reset")
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="reset")


@router.post("/sessions/{session_id}/quit")
@limiter.limit("30/minute")
async def quit_game(
    request: Request, session_id: str, body: QuitRequest
) -> dict:
    """Quit the round. Unconfirmed quits only return the prompt."""
    session_id = validate_session_id(session_id)
    try:
        return _unwrap(
            GameManager.quit_game(session_id, body.confirmed),
            "Failed to quit",
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="quit_game")


@router.get("/presets/categories")
@limiter.limit("60/minute")
async def preset_categories(
    request: Request, undercover: bool = Query(False)
) -> dict:
    """List the curated preset categories."""
    try:
        return GameManager.list_preset_categories(undercover)
    except Exception as exc:
        safe_error_response(exc, context="preset_categories")
