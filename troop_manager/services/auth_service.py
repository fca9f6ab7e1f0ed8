# troop_manager/services/auth_service.py
from typing import Any, Dict, Optional

from loguru import logger

from ..core.exceptions import (
    BadRequestError, ConflictError, InvalidCredentialsError, InvalidTokenError, NotFoundError,
)
from ..core.security import PasswordHasher, TokenService
from ..models.users import (
    AuthProvider, OAuthLoginRequest, RegisterRequest, UpdateProfileRequest,
)
from ..utilities.helpers.data_formatters import strip_password, to_storage_fields
from .user_service import UserService


class AuthService:
    """
    Account lifecycle: registration, password and social login, token refresh,
    password change and self-service profile.

    User records handed back to callers never carry the password hash.
    """

    def __init__(
        self,
        user_service: UserService,
        token_service: TokenService,
        password_hasher: PasswordHasher,
    ):
        self.user_service = user_service
        self.token_service = token_service
        self.password_hasher = password_hasher

    def _auth_result(self, user: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "user": strip_password(user),
            "tokens": self.token_service.issue_token_pair(user),
        }

    def register(self, data: RegisterRequest) -> Dict[str, Any]:
        """
        Create a local account and log it in

        Args:
            data: Validated registration body

        Returns:
            {"user": ..., "tokens": {"accessToken", "refreshToken"}}

        Raises:
            ConflictError: If the email is already registered
        """
        if self.user_service.find_user_by_email(data.email):
            logger.info(f"Registration rejected, email already in use: {data.email}")
            raise ConflictError("User already exists with this email")

        fields = to_storage_fields(data.model_dump(exclude={"password"}))
        fields["password"] = self.password_hasher.hash(data.password)
        fields["provider"] = AuthProvider.LOCAL.value
        fields["email_verified"] = False

        user = self.user_service.create_user(fields)
        logger.info(f"Registered user {user['id']}")
        return self._auth_result(user)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Verify an email/password pair and issue a token pair

        Raises:
            InvalidCredentialsError: Unknown email, wrong password, or an
                account that only signs in through a social provider
        """
        user = self.user_service.find_user_by_email(email)

        if user is None:
            self.password_hasher.verify_placeholder(password)
            logger.info("Login failed: unknown email")
            raise InvalidCredentialsError()

        if not user.get("password"):
            logger.info(f"Login failed: user {user['id']} has no password ({user.get('provider')})")
            raise InvalidCredentialsError("Please use social login for this account")

        if not self.password_hasher.verify(password, user["password"]):
            logger.info(f"Login failed: wrong password for user {user['id']}")
            raise InvalidCredentialsError()

        logger.info(f"User {user['id']} logged in")
        return self._auth_result(user)

    def refresh_token(self, refresh_token: Optional[str]) -> Dict[str, str]:
        """
        Exchange a refresh token for a new access token

        Returns:
            {"accessToken": ...}; the refresh token itself is not rotated

        Raises:
            BadRequestError: If no refresh token was sent
            InvalidTokenError: If the token is invalid or expired
            NotFoundError: If the user no longer exists
        """
        if not refresh_token:
            raise BadRequestError("Refresh token is required")

        try:
            payload = self.token_service.verify_refresh_token(refresh_token)
        except InvalidTokenError as e:
            logger.warning(f"Refresh rejected ({e.error_code}): {e.message}")
            raise

        user_id = payload.get("userId")
        if not user_id:
            raise InvalidTokenError("Invalid refresh token")

        user = self.user_service.find_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        access_token = self.token_service.issue_access_token({"userId": user["id"], "email": user["email"]})
        return {"accessToken": access_token}

    def oauth_login(self, data: OAuthLoginRequest) -> Dict[str, Any]:
        """
        Sign in with an already-verified social identity

        Looks the user up by (provider, providerId), then by email (linking
        the provider to that account), and otherwise creates a password-less
        account with a verified email.
        """
        provider = data.provider.value

        user = self.user_service.find_user_by_provider(provider, data.providerId)
        if user:
            logger.info(f"OAuth login for user {user['id']} via {provider}")
            return self._auth_result(user)

        user = self.user_service.find_user_by_email(data.email)
        if user:
            user = self.user_service.update_user(
                user["id"],
                {"provider": provider, "provider_id": data.providerId},
            )
            logger.info(f"Linked {provider} identity to user {user['id']}")
            return self._auth_result(user)

        user = self.user_service.create_user({
            "email": data.email,
            "first_name": data.firstName,
            "last_name": data.lastName,
            "provider": provider,
            "provider_id": data.providerId,
            "email_verified": True,
        })
        logger.info(f"Created user {user['id']} from {provider} login")
        return self._auth_result(user)

    def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        """
        Raises:
            NotFoundError: If the user is unknown or has no password
            BadRequestError: If the current password does not match
        """
        user = self.user_service.find_user_by_id(user_id)
        if not user or not user.get("password"):
            raise NotFoundError("User not found or password not set")

        if not self.password_hasher.verify(current_password, user["password"]):
            raise BadRequestError("Current password is incorrect")

        self.user_service.update_user(user_id, {"password": self.password_hasher.hash(new_password)})
        logger.info(f"Password changed for user {user_id}")

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        return strip_password(self.user_service.get_user_or_404(user_id))

    def update_profile(self, user_id: str, data: UpdateProfileRequest) -> Dict[str, Any]:
        updates = to_storage_fields(data.model_dump(exclude_unset=True))
        return strip_password(self.user_service.update_user(user_id, updates))
