"""
Admin / cleanup API routes.

All endpoints require a valid ``X-Admin-Key`` header.

Endpoints:
    POST   /api/sessions/cleanup          — drop sessions idle past the TTL
    DELETE /api/sessions/{session_id}     — delete a specific session
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from commons import limiter
from imposter.game.manager import GameManager
from security import require_admin_key, safe_error_response, validate_session_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["admin"])


@router.post("/sessions/cleanup")
@limiter.limit("5/minute")
async def cleanup_stale_sessions(
    request: Request, _=Depends(require_admin_key)
) -> dict:
    """Delete sessions that have been idle longer than the TTL."""
    try:
        success, response = GameManager.delete_old_games()
        if success:
            logger.info("Stale sessions cleaned up successfully")
            return response
        raise HTTPException(
            status_code=500, detail="Failed to clean up stale sessions"
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="cleanup_stale_sessions")


@router.delete("/sessions/{session_id}")
@limiter.limit("5/minute")
async def delete_session(
    request: Request, session_id: str, _=Depends(require_admin_key)
) -> dict:
    """Delete a specific game session (admin only)."""
    session_id = validate_session_id(session_id)
    try:
        success, response = GameManager.delete_game(session_id)
        if success:
            logger.info("Game %s deleted", session_id)
            return response
        raise HTTPException(
            status_code=404,
            detail=response.get("message", "Game not found"),
        )
    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="delete_session")
