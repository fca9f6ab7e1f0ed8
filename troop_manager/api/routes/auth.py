# troop_manager/api/routes/auth.py
from fastapi import APIRouter, Depends, status

from ...middleware.jwt_middleware import get_current_user
from ...models.users import (
    ChangePasswordRequest, JWTAccount, LoginRequest, OAuthLoginRequest,
    RefreshTokenRequest, RegisterRequest, UpdateProfileRequest,
)
from ...services.auth_service import AuthService
from ...utilities.response import success_response
from ..dependencies import get_auth_service

router = APIRouter()

# Handlers that run bcrypt are plain def so they execute in the threadpool


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Create a local account and return it with a token pair"""
    result = auth_service.register(body)
    return success_response("User registered successfully", result, status.HTTP_201_CREATED)


@router.post("/login")
def login(
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    result = auth_service.login(body.email, body.password)
    return success_response("Login successful", result)


@router.post("/refresh-token")
async def refresh_token(
    body: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Exchange a refresh token for a new access token"""
    result = auth_service.refresh_token(body.refreshToken)
    return success_response("Token refreshed successfully", result)


@router.post("/oauth")
async def oauth_login(
    body: OAuthLoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Social login; the provider identity is trusted as already verified
    by the client-side provider flow
    """
    result = auth_service.oauth_login(body)
    return success_response("OAuth login successful", result)


@router.get("/profile")
async def get_profile(
    current_user: JWTAccount = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    user = auth_service.get_profile(current_user.user_id)
    return success_response("Profile retrieved successfully", user)


@router.put("/profile")
async def update_profile(
    body: UpdateProfileRequest,
    current_user: JWTAccount = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    user = auth_service.update_profile(current_user.user_id, body)
    return success_response("Profile updated successfully", user)


@router.put("/change-password")
def change_password(
    body: ChangePasswordRequest,
    current_user: JWTAccount = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    auth_service.change_password(current_user.user_id, body.currentPassword, body.newPassword)
    return success_response("Password changed successfully")
