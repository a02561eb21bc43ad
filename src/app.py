"""Marketplace FastAPI application.

Single-domain web server that processes commands synchronously via HTTP.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay in domain.toml:
#   - "test"/"development" → in-memory providers
#   - "production"         → PostgreSQL at DATABASE_URL
from marketplace.api import create_app
from marketplace.domain import marketplace

marketplace.init()

app = create_app(marketplace)
