# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Registration and login endpoints backed by bcrypt password hashes.
#
# Usage:
#   from app.auth import routes as auth_routes
#   app.include_router(auth_routes.router, tags=["Auth"])
# =============================================================================

from app.auth import routes

__all__ = ["routes"]
