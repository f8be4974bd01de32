"""
Centralized configuration loader.

Reads the ENVIRONMENT env-var and merges the correct environment module
(config_prod, config_local or config_test) into a single settings
namespace.

Usage:
    from configs.config import get_config
    cfg = get_config()
    print(cfg.GEMINI_MODEL_NAME)
"""

import os
import importlib
import logging
from types import SimpleNamespace

logger = logging.getLogger(__name__)

# ── Environment detection ────────────────────────────────────────────────
ENVIRONMENT = os.getenv("ENVIRONMENT", "production")

_ENVIRONMENT_MODULES = {
    "development": "configs.config_local",
    "test": "configs.config_test",
}

# ── Shared constants (environment-independent) ───────────────────────────

# Security
ADMIN_API_KEY = os.getenv("ADMIN_API_KEY", "change-me-in-production")

CORS_METHODS = ["GET", "POST", "DELETE", "OPTIONS"]
CORS_HEADERS = [
    "Accept",
    "Accept-Language",
    "Content-Type",
    "Origin",
    "X-Requested-With",
    "X-Admin-Key",
    "X-Request-ID",
]

# Gemini / word generation
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL_NAME = "gemini-3-flash-preview"

# Logging
LOG_TO_FILE = True
LOG_FILE_APP = "imposter.log"
LOG_FILE_ERRORS = "errors.log"
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
LOG_BACKUP_COUNT = 5

# Game setup bounds and defaults
MIN_PLAYERS = 3
MAX_PLAYERS = 20
DEFAULT_PLAYER_COUNT = 4
DEFAULT_TIMER_SECONDS = 300
TIMER_PRESET_SECONDS = (0, 180, 300)
MAX_CUSTOM_TIMER_MINUTES = 120

# Round pacing
REVEAL_DELAY_SECONDS = 2.0
TIMER_TICK_SECONDS = 1.0

# Session registry
SESSION_TTL_SECONDS = 21600       # 6 hours
MAX_SESSIONS = 500


# ── Config loader ────────────────────────────────────────────────────────

_config_cache = None


def get_config() -> SimpleNamespace:
    """
    Return a merged configuration namespace.

    Environment-specific values from config_local, config_test or
    config_prod override the shared defaults defined above.
    """
    global _config_cache
    if _config_cache is not None:
        return _config_cache

    # Start with all module-level constants
    base = {
        key: value
        for key, value in globals().items()
        if key.isupper() and not key.startswith("_")
    }

    # Overlay environment-specific settings
    env_module_name = _ENVIRONMENT_MODULES.get(
        ENVIRONMENT, "configs.config_prod"
    )
    try:
        env_module = importlib.import_module(env_module_name)
        for key in dir(env_module):
            if key.isupper():
                base[key] = getattr(env_module, key)
        logger.info("Loaded configuration from %s", env_module_name)
    except ImportError:
        logger.warning(
            "Environment config '%s' not found; using shared defaults.",
            env_module_name,
        )

    _config_cache = SimpleNamespace(**base)
    return _config_cache
