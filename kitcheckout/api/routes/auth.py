"""
Authentication API Routes for KitCheckout.

Handles:
- User registration (Sign Up)
- User login (JWT access token)
- Current user retrieval and logout
"""

from fastapi import APIRouter, Depends, status
from loguru import logger

from kitcheckout.api.dependencies import (
    get_current_user,
    get_identity_service,
    get_token_payload,
    get_token_service,
)
from kitcheckout.api.security import TokenService
from kitcheckout.api.schemas import LoginRequest, SignupRequest, TokenResponse, UserResponse
from kitcheckout.identity.service import IdentityService
from kitcheckout.storage.records import User

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    identity: IdentityService = Depends(get_identity_service),
):
    """Register a new user."""
    user = identity.register(
        payload.email,
        payload.password,
        role=payload.role,
        admin_code=payload.admin_code,
    )
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    identity: IdentityService = Depends(get_identity_service),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Login endpoint.
    Returns a bearer token if credentials are valid.
    """
    user = identity.authenticate(payload.email, payload.password)
    token = tokens.issue(user.email)
    logger.info(f"Login: {user.email} ({user.role.value})")
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
def read_current_user(user: User = Depends(get_current_user)):
    """Get current user profile."""
    return UserResponse.model_validate(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    payload: dict = Depends(get_token_payload),
    tokens: TokenService = Depends(get_token_service),
):
    """Revoke the presented access token."""
    tokens.revoke(payload)
    logger.info(f"Logout: {payload['sub']}")
