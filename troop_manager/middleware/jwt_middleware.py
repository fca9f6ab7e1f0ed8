# troop_manager/middleware/jwt_middleware.py
from typing import Callable

import pydantic
from fastapi import Depends, Request
from loguru import logger

from ..api.dependencies import get_token_service, get_troop_service
from ..core.exceptions import ForbiddenError, InvalidTokenError, UnauthorizedError
from ..core.security import TokenService
from ..models.users import JWTAccount, UserRole
from ..services.troop_service import TroopService


class JWTMiddleware:
    def __init__(self, token_service: TokenService):
        self.token_service = token_service

    def retrieve_details_from_token(self, token: str) -> JWTAccount:
        """
        Decode an access token and extract the user identity

        Args:
            token: JWT token string

        Returns:
            JWTAccount with user_id and email

        Raises:
            InvalidTokenError: If the token is invalid, expired or the payload is malformed
        """
        payload = self.token_service.verify_access_token(token)
        try:
            jwt_account = JWTAccount(
                user_id=payload["userId"],
                email=payload["email"]
            )

        except pydantic.ValidationError as validation_error:
            raise InvalidTokenError("Invalid payload in token") from validation_error

        except KeyError as key_error:
            raise InvalidTokenError(f"Missing required field in token: {key_error}") from key_error

        return jwt_account

    def verify_jwt_token(self, request: Request) -> JWTAccount:
        """
        Extract and verify the bearer token of a request

        The decoded identity is also stored on request.state.user.

        Raises:
            UnauthorizedError: If the token is missing, invalid or expired
        """
        authorization = request.headers.get("Authorization")
        if not authorization or not authorization.startswith("Bearer "):
            raise UnauthorizedError("Access token required")

        token = authorization[len("Bearer "):].strip()
        if not token:
            raise UnauthorizedError("Access token required")

        try:
            jwt_account = self.retrieve_details_from_token(token)
        except InvalidTokenError as e:
            logger.warning(f"JWT rejected on {request.url.path} ({e.error_code}): {e.message}")
            raise UnauthorizedError("Invalid or expired token") from e

        request.state.user = jwt_account
        logger.debug(f"JWT verified for user: {jwt_account.user_id}")
        return jwt_account


async def get_current_user(
    request: Request,
    token_service: TokenService = Depends(get_token_service),
) -> JWTAccount:
    """
    Dependency to get current authenticated user from JWT token
    """
    return JWTMiddleware(token_service).verify_jwt_token(request)


def authorize(*roles: UserRole) -> Callable:
    """
    Dependency factory for role checks

    On routes with a troop_id path parameter the caller needs one of roles
    (or ADMIN) in that troop; elsewhere in any troop.
    """
    allowed = set(roles) | {UserRole.ADMIN}

    async def role_checker(
        request: Request,
        current_user: JWTAccount = Depends(get_current_user),
        troop_service: TroopService = Depends(get_troop_service),
    ) -> JWTAccount:
        troop_id = request.path_params.get("troop_id")
        if not troop_service.has_role(current_user.user_id, troop_id, allowed):
            logger.warning(
                f"User {current_user.user_id} lacks {sorted(role.value for role in allowed)} "
                f"for {request.method} {request.url.path}"
            )
            raise ForbiddenError()
        return current_user

    return role_checker


def authorize_over_member(*roles: UserRole) -> Callable:
    """
    Dependency factory for routes acting on another user's record (user_id
    path parameter). Admins pass; anyone else needs one of roles in a troop
    the target user belongs to.
    """

    async def member_checker(
        request: Request,
        current_user: JWTAccount = Depends(get_current_user),
        troop_service: TroopService = Depends(get_troop_service),
    ) -> JWTAccount:
        target_id = request.path_params["user_id"]
        if troop_service.is_admin(current_user.user_id):
            return current_user
        if not troop_service.leads_member(current_user.user_id, target_id, roles):
            logger.warning(
                f"User {current_user.user_id} does not lead a troop of user {target_id} "
                f"for {request.method} {request.url.path}"
            )
            raise ForbiddenError()
        return current_user

    return member_checker
