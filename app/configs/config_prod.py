"""
Production environment configuration.

These are the baseline defaults. Local overrides live in config_local.py.
"""

# FastAPI docs are disabled in production
DOCS_ENABLED = False

CORS_ORIGINS = [
    "https://imposter.party",
]

ALLOWED_HOSTS = [
    "imposter.party",
    "api.imposter.party",
    "localhost",
    "127.0.0.1",
]
