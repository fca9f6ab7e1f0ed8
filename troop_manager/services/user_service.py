# troop_manager/services/user_service.py
import uuid
from typing import Any, Dict, List, Optional

from loguru import logger
from pymongo import ASCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from ..config.database import SCOUTS, TROOPS, USERS, USER_TROOP_ROLES
from ..core.exceptions import BadRequestError, ConflictError, NotFoundError
from ..models.users import AuthProvider
from ..utilities.helpers.date_utils import utc_now_iso

NO_ID = {"_id": 0}


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """
    Credential store: user records keyed by a UUID string id.
    Emails are stored lower-cased so lookups are case-insensitive.
    """

    def __init__(self, db: Database):
        self.users = db[USERS]
        self.memberships = db[USER_TROOP_ROLES]
        self.scouts = db[SCOUTS]
        self.troops = db[TROOPS]

    def create_user(self, user_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new user

        Args:
            user_data: Storage fields (snake_case); email, first_name and last_name required

        Returns:
            The stored user record, password hash included

        Raises:
            BadRequestError: If a local account has no password hash
            ConflictError: If the email is already registered
        """
        now = utc_now_iso()
        user = {
            "id": str(uuid.uuid4()),
            "password": None,
            "provider": AuthProvider.LOCAL.value,
            "provider_id": None,
            "email_verified": False,
            "phone": None,
            "address": None,
            "background_check_status": None,
            "background_check_date": None,
            "youth_protection_date": None,
            "created_at": now,
            "updated_at": now,
        }
        user.update(user_data)
        user["email"] = normalize_email(user["email"])

        if user["provider"] == AuthProvider.LOCAL.value and not user["password"]:
            raise BadRequestError("Local accounts require a password")

        try:
            self.users.insert_one(dict(user))
        except DuplicateKeyError as e:
            raise ConflictError("User already exists with this email") from e

        logger.info(f"Created user {user['id']} (provider={user['provider']})")
        return user

    def find_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.users.find_one({"id": user_id}, NO_ID)

    def find_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return self.users.find_one({"email": normalize_email(email)}, NO_ID)

    def find_user_by_provider(self, provider: str, provider_id: str) -> Optional[Dict[str, Any]]:
        return self.users.find_one({"provider": provider, "provider_id": provider_id}, NO_ID)

    def get_user_or_404(self, user_id: str) -> Dict[str, Any]:
        user = self.find_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_user(self, user_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update and return the updated record

        Raises:
            NotFoundError: If no user has this id
            ConflictError: If an email change collides with another account
        """
        changes = dict(updates)
        if changes.get("email"):
            changes["email"] = normalize_email(changes["email"])
        changes["updated_at"] = utc_now_iso()

        try:
            updated = self.users.find_one_and_update(
                {"id": user_id},
                {"$set": changes},
                projection=NO_ID,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise ConflictError("User already exists with this email") from e

        if updated is None:
            raise NotFoundError("User not found")
        return updated

    def delete_user(self, user_id: str) -> None:
        """Hard delete a user together with their troop memberships"""
        result = self.users.delete_one({"id": user_id})
        if result.deleted_count == 0:
            raise NotFoundError("User not found")

        removed = self.memberships.delete_many({"user_id": user_id}).deleted_count
        logger.info(f"Deleted user {user_id} and {removed} troop membership(s)")

    def get_user_with_scouts(self, user_id: str) -> Optional[Dict[str, Any]]:
        """User record plus the scouts they are the parent of, each with its troop name"""
        user = self.find_user_by_id(user_id)
        if not user:
            return None

        scouts: List[Dict[str, Any]] = list(
            self.scouts.find({"parent_id": user_id}, NO_ID).sort("last_name", ASCENDING)
        )
        troop_ids = list({scout["troop_id"] for scout in scouts})
        troop_names = {
            troop["id"]: troop["name"]
            for troop in self.troops.find({"id": {"$in": troop_ids}}, {"_id": 0, "id": 1, "name": 1})
        }
        for scout in scouts:
            scout["troop"] = {"name": troop_names.get(scout["troop_id"])}

        user["scouts"] = scouts
        return user
