"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- Service instances (identity, ledger, catalog, inventory, reports)
- Access tokens and the current user
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from kitcheckout.config import AppSettings, get_app_settings
from kitcheckout.errors import AuthenticationError, PermissionDeniedError
from kitcheckout.services import ServiceContainer
from kitcheckout.storage.records import User
from .security import TokenService


# =============================================================================
# Configuration
# =============================================================================

def get_settings() -> AppSettings:
    """Get cached application settings."""
    return get_app_settings()


bearer_scheme = HTTPBearer(auto_error=False)


# =============================================================================
# Service Dependencies
# =============================================================================

def get_service_container(request: Request) -> ServiceContainer:
    """Service container attached to the application."""
    return request.app.state.services


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_identity_service(container: ServiceContainer = Depends(get_service_container)):
    """Dependency for identity service."""
    return container.identity


def get_ledger(container: ServiceContainer = Depends(get_service_container)):
    """Dependency for ledger engine."""
    return container.ledger


def get_catalog(container: ServiceContainer = Depends(get_service_container)):
    """Dependency for settings/category manager."""
    return container.catalog


def get_inventory(container: ServiceContainer = Depends(get_service_container)):
    """Dependency for inventory manager."""
    return container.inventory


def get_undo_registry(container: ServiceContainer = Depends(get_service_container)):
    """Dependency for undo registry."""
    return container.undo_registry


def get_reports(container: ServiceContainer = Depends(get_service_container)):
    """Dependency for ledger reports."""
    return container.reports


# =============================================================================
# Authentication Dependencies
# =============================================================================

def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Please log in first.", code="NOT_AUTHENTICATED")
    return credentials.credentials


def get_token_payload(
    token: str = Depends(get_bearer_token),
    tokens: TokenService = Depends(get_token_service),
) -> dict:
    """Verified claims of the presented access token."""
    return tokens.decode(token)


def get_current_user(
    payload: dict = Depends(get_token_payload),
    container: ServiceContainer = Depends(get_service_container),
) -> User:
    """Dependency to get the signed-in user."""
    user = container.identity.find_user(payload["sub"])
    if user is None:
        raise AuthenticationError("Session expired. Please log in again.", code="NOT_AUTHENTICATED")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Dependency restricting a route to admins."""
    if not user.is_admin:
        raise PermissionDeniedError()
    return user
