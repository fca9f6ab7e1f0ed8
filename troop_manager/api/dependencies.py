# troop_manager/api/dependencies.py
from fastapi import Depends
from pymongo.database import Database

from ..config.database import get_database
from ..config.settings import settings
from ..core.security import PasswordHasher, TokenService
from ..services.auth_service import AuthService
from ..services.scout_service import ScoutService
from ..services.troop_service import TroopService
from ..services.user_service import UserService

token_service = TokenService.from_settings(settings)
password_hasher = PasswordHasher.from_settings(settings)


def get_db() -> Database:
    """Database connection dependency"""
    return get_database()


def get_token_service() -> TokenService:
    return token_service


def get_password_hasher() -> PasswordHasher:
    return password_hasher


def get_user_service(db: Database = Depends(get_db)) -> UserService:
    return UserService(db)


def get_troop_service(db: Database = Depends(get_db)) -> TroopService:
    return TroopService(db)


def get_scout_service(db: Database = Depends(get_db)) -> ScoutService:
    return ScoutService(db)


def get_auth_service(
    user_service: UserService = Depends(get_user_service),
    tokens: TokenService = Depends(get_token_service),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthService:
    return AuthService(user_service, tokens, hasher)
