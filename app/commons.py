"""
Rate limiter and session-code helpers shared by the routes and the game
manager.
"""

import secrets

from slowapi import Limiter
from slowapi.util import get_remote_address

# Route modules decorate with this instance; main.py only registers it.
limiter = Limiter(key_func=get_remote_address)

# Codes are read aloud and retyped, so 0/O and 1/I/L are left out.
SESSION_CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
SESSION_CODE_LENGTH = 5


def generate_session_id() -> str:
    """Return a 5-character session code such as 'K3Q9Z'."""
    return "".join(
        secrets.choice(SESSION_CODE_ALPHABET)
        for _ in range(SESSION_CODE_LENGTH)
    )
