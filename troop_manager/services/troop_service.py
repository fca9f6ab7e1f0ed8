# troop_manager/services/troop_service.py
import uuid
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger
from pymongo import ASCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..config.database import SCOUTS, TROOPS, USERS, USER_TROOP_ROLES
from ..core.exceptions import ConflictError, ForbiddenError, NotFoundError
from ..models.troop import TroopCreate, TroopStatus, TroopUpdate
from ..models.users import UserRole
from ..utilities.helpers.data_formatters import count_by, strip_password, to_storage_fields
from ..utilities.helpers.date_utils import utc_now_iso

NO_ID = {"_id": 0}
DEFAULT_TROOP_SIZE_LIMIT = 100
TROOP_DATE_FIELDS = ("foundedDate",)


class TroopService:
    """
    Troops and the membership model linking users to troops.

    A membership is a (user_id, troop_id, role) tuple; a user may hold several
    roles in one troop and the same role in several troops, but never the same
    tuple twice.
    """

    def __init__(self, db: Database):
        self.troops = db[TROOPS]
        self.memberships = db[USER_TROOP_ROLES]
        self.users = db[USERS]
        self.scouts = db[SCOUTS]

    # ------------------------------------------------------------------
    # Troops
    # ------------------------------------------------------------------

    def find_troop_by_id(self, troop_id: str) -> Optional[Dict[str, Any]]:
        return self.troops.find_one({"id": troop_id}, NO_ID)

    def get_troop_or_404(self, troop_id: str) -> Dict[str, Any]:
        troop = self.find_troop_by_id(troop_id)
        if not troop:
            raise NotFoundError("Troop not found")
        return troop

    def get_active_troops(self) -> List[Dict[str, Any]]:
        return list(
            self.troops.find({"status": TroopStatus.ACTIVE.value}, NO_ID).sort("name", ASCENDING)
        )

    def create_troop(self, creator_id: str, data: TroopCreate) -> Dict[str, Any]:
        """
        Create a troop and make its creator the SCOUTMASTER

        If the membership cannot be written the troop is deleted again, so a
        troop never exists without its founding leader.

        Args:
            creator_id: Id of the authenticated user creating the troop
            data: Validated troop body

        Returns:
            The stored troop
        """
        now = utc_now_iso()
        troop = to_storage_fields(data.model_dump(), date_fields=TROOP_DATE_FIELDS)
        troop.update({
            "id": str(uuid.uuid4()),
            "status": TroopStatus.ACTIVE.value,
            "created_by_id": creator_id,
            "created_at": now,
            "updated_at": now,
        })
        if troop.get("troop_size_limit") is None:
            troop["troop_size_limit"] = DEFAULT_TROOP_SIZE_LIMIT

        self.troops.insert_one(dict(troop))

        try:
            self.add_member(creator_id, troop["id"], UserRole.SCOUTMASTER)
        except (ConflictError, PyMongoError) as e:
            logger.error(f"Could not add creator {creator_id} to troop {troop['id']}, rolling back: {e}")
            self.troops.delete_one({"id": troop["id"]})
            raise

        logger.info(f"Troop {troop['id']} ({troop['name']}) created by {creator_id}")
        return troop

    def update_troop(self, troop_id: str, data: TroopUpdate) -> Dict[str, Any]:
        """Partial update; address fields are merged into the stored address"""
        changes = to_storage_fields(data.model_dump(exclude_unset=True), date_fields=TROOP_DATE_FIELDS)

        if changes.get("address") is not None:
            current = self.get_troop_or_404(troop_id)
            address = dict(current.get("address") or {})
            address.update({key: value for key, value in changes["address"].items() if value is not None})
            changes["address"] = address

        return self._set_fields(troop_id, changes)

    def set_status(self, troop_id: str, status: TroopStatus) -> Dict[str, Any]:
        troop = self._set_fields(troop_id, {"status": status.value})
        logger.info(f"Troop {troop_id} status set to {status.value}")
        return troop

    def _set_fields(self, troop_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        changes = dict(changes)
        changes["updated_at"] = utc_now_iso()
        updated = self.troops.find_one_and_update(
            {"id": troop_id},
            {"$set": changes},
            projection=NO_ID,
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFoundError("Troop not found")
        return updated

    def get_troop_with_members(self, troop_id: str) -> Dict[str, Any]:
        troop = self.get_troop_or_404(troop_id)
        troop["members"] = self.list_members_for_troop(troop_id)
        troop["scouts"] = list(
            self.scouts.find(
                {"troop_id": troop_id},
                {"_id": 0, "id": 1, "first_name": 1, "last_name": 1, "current_rank": 1},
            ).sort("last_name", ASCENDING)
        )
        return troop

    def get_troop_stats(self, troop_id: str) -> Dict[str, Any]:
        self.get_troop_or_404(troop_id)

        scouts = list(self.scouts.find({"troop_id": troop_id}, {"_id": 0, "current_rank": 1}))
        memberships = list(self.memberships.find({"troop_id": troop_id}, {"_id": 0, "role": 1}))

        return {
            "totalScouts": len(scouts),
            "totalAdults": len(memberships),
            "scoutsByRank": count_by(scouts, "current_rank"),
            "usersByRole": count_by(memberships, "role"),
        }

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def add_member(self, user_id: str, troop_id: str, role: UserRole) -> Dict[str, Any]:
        """
        Record that a user holds a role in a troop

        Raises:
            ConflictError: If the user already holds this role in the troop
        """
        role = UserRole(role).value
        key = {"user_id": user_id, "troop_id": troop_id, "role": role}

        if self.memberships.find_one(key, NO_ID):
            raise ConflictError("User already has this role in the troop")

        membership = dict(key, created_at=utc_now_iso())
        try:
            self.memberships.insert_one(dict(membership))
        except DuplicateKeyError as e:
            raise ConflictError("User already has this role in the troop") from e

        logger.info(f"User {user_id} added to troop {troop_id} as {role}")
        return membership

    def remove_member(self, user_id: str, troop_id: str, role: Optional[UserRole] = None) -> int:
        """
        Delete a membership; without a role every role the user holds in the
        troop is removed

        Returns:
            Number of memberships deleted
        """
        query: Dict[str, Any] = {"user_id": user_id, "troop_id": troop_id}
        if role is not None:
            query["role"] = UserRole(role).value

        removed = self.memberships.delete_many(query).deleted_count
        logger.info(f"Removed {removed} membership(s) of user {user_id} in troop {troop_id}")
        return removed

    def list_troops_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        """Each troop the user belongs to, once, with the list of their roles"""
        roles_by_troop: Dict[str, List[str]] = {}
        for membership in self.memberships.find({"user_id": user_id}, NO_ID).sort("created_at", ASCENDING):
            roles_by_troop.setdefault(membership["troop_id"], []).append(membership["role"])

        troops = self.troops.find({"id": {"$in": list(roles_by_troop)}}, NO_ID).sort("name", ASCENDING)
        return [dict(troop, roles=roles_by_troop[troop["id"]]) for troop in troops]

    def list_members_for_troop(self, troop_id: str) -> List[Dict[str, Any]]:
        """One entry per (user, role) in the troop: public user fields plus role"""
        memberships = list(self.memberships.find({"troop_id": troop_id}, NO_ID).sort("created_at", ASCENDING))
        user_ids = list({membership["user_id"] for membership in memberships})
        users = {user["id"]: user for user in self.users.find({"id": {"$in": user_ids}}, NO_ID)}

        members = []
        for membership in memberships:
            user = users.get(membership["user_id"])
            if user is None:
                continue
            members.append(dict(strip_password(user), role=membership["role"]))
        return members

    def has_role(
        self,
        user_id: str,
        troop_id: Optional[str],
        roles: Iterable[UserRole],
    ) -> bool:
        """
        True if the user holds one of roles in the troop, or in any troop when
        troop_id is None
        """
        role_values = [UserRole(role).value for role in roles]
        if not role_values:
            return False

        query: Dict[str, Any] = {"user_id": user_id, "role": {"$in": role_values}}
        if troop_id is not None:
            query["troop_id"] = troop_id
        return self.memberships.find_one(query, NO_ID) is not None

    def is_admin(self, user_id: str) -> bool:
        return self.has_role(user_id, None, [UserRole.ADMIN])

    def leads_member(self, leader_id: str, member_id: str, roles: Iterable[UserRole]) -> bool:
        """True if leader_id holds one of roles in a troop that member_id belongs to"""
        role_values = [UserRole(role).value for role in roles]
        troop_ids = self.memberships.distinct("troop_id", {"user_id": member_id})
        if not role_values or not troop_ids:
            return False

        return self.memberships.find_one(
            {"user_id": leader_id, "role": {"$in": role_values}, "troop_id": {"$in": troop_ids}},
            NO_ID,
        ) is not None

    def check_can_grant(self, granter_id: str, role: UserRole) -> None:
        """
        Only existing administrators may hand out ADMIN

        Raises:
            ForbiddenError: If granter_id is not an admin and role is ADMIN
        """
        if UserRole(role) == UserRole.ADMIN and not self.is_admin(granter_id):
            logger.warning(f"User {granter_id} tried to grant ADMIN without holding it")
            raise ForbiddenError("Only administrators can grant the ADMIN role")
