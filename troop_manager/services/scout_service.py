# troop_manager/services/scout_service.py
import uuid
from typing import Any, Dict, List, Optional

from loguru import logger
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from ..config.database import (
    DEFAULT_MERIT_BADGES, MERIT_BADGES, RANK_ADVANCEMENTS, SCOUT_MERIT_BADGES, SCOUTS, TROOPS,
)
from ..core.exceptions import ConflictError, NotFoundError
from ..models.scout import RankAdvancementCreate, ScoutCreate, ScoutRank, ScoutUpdate
from ..utilities.helpers.data_formatters import to_storage_fields
from ..utilities.helpers.date_utils import utc_now_iso

NO_ID = {"_id": 0}
SCOUT_DATE_FIELDS = ("dateOfBirth",)
ADVANCEMENT_DATE_FIELDS = ("awardedDate", "boardDate")


class ScoutService:
    """Scouts, their rank advancements and merit badge progress"""

    def __init__(self, db: Database):
        self.scouts = db[SCOUTS]
        self.troops = db[TROOPS]
        self.advancements = db[RANK_ADVANCEMENTS]
        self.merit_badges = db[MERIT_BADGES]
        self.scout_badges = db[SCOUT_MERIT_BADGES]

    # ------------------------------------------------------------------
    # Scouts
    # ------------------------------------------------------------------

    def find_scout_by_id(self, scout_id: str) -> Optional[Dict[str, Any]]:
        return self.scouts.find_one({"id": scout_id}, NO_ID)

    def get_scout_or_404(self, scout_id: str) -> Dict[str, Any]:
        scout = self.find_scout_by_id(scout_id)
        if not scout:
            raise NotFoundError("Scout not found")
        return scout

    def get_scouts_by_troop_id(self, troop_id: str) -> List[Dict[str, Any]]:
        return list(self.scouts.find({"troop_id": troop_id}, NO_ID).sort("last_name", ASCENDING))

    def get_scouts_by_parent_id(self, parent_id: str) -> List[Dict[str, Any]]:
        return list(self.scouts.find({"parent_id": parent_id}, NO_ID).sort("last_name", ASCENDING))

    def create_scout(self, data: ScoutCreate, default_parent_id: str) -> Dict[str, Any]:
        """
        Register a scout in a troop

        Args:
            data: Validated scout body
            default_parent_id: Parent used when the body names none (the caller)

        Returns:
            The stored scout

        Raises:
            NotFoundError: If the troop does not exist
        """
        if not self.troops.find_one({"id": data.troopId}, {"_id": 0, "id": 1}):
            raise NotFoundError("Troop not found")

        now = utc_now_iso()
        scout = to_storage_fields(data.model_dump(mode="json"), date_fields=SCOUT_DATE_FIELDS)
        scout.update({
            "id": str(uuid.uuid4()),
            "parent_id": data.parentId or default_parent_id,
            "current_rank": scout.get("current_rank") or ScoutRank.SCOUT.value,
            "created_at": now,
            "updated_at": now,
        })

        self.scouts.insert_one(dict(scout))
        logger.info(f"Scout {scout['id']} added to troop {scout['troop_id']}")
        return scout

    def update_scout(self, scout_id: str, data: ScoutUpdate) -> Dict[str, Any]:
        changes = to_storage_fields(
            data.model_dump(mode="json", exclude_unset=True),
            date_fields=SCOUT_DATE_FIELDS,
        )

        if changes.get("address") is not None:
            current = self.get_scout_or_404(scout_id)
            address = dict(current.get("address") or {})
            address.update({key: value for key, value in changes["address"].items() if value is not None})
            changes["address"] = address

        return self._set_fields(scout_id, changes)

    def _set_fields(self, scout_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        changes = dict(changes)
        changes["updated_at"] = utc_now_iso()
        updated = self.scouts.find_one_and_update(
            {"id": scout_id},
            {"$set": changes},
            projection=NO_ID,
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFoundError("Scout not found")
        return updated

    def delete_scout(self, scout_id: str) -> None:
        """Delete a scout with its advancement history and badge progress"""
        if self.scouts.delete_one({"id": scout_id}).deleted_count == 0:
            raise NotFoundError("Scout not found")
        self.advancements.delete_many({"scout_id": scout_id})
        self.scout_badges.delete_many({"scout_id": scout_id})
        logger.info(f"Deleted scout {scout_id}")

    # ------------------------------------------------------------------
    # Rank advancement
    # ------------------------------------------------------------------

    def get_scout_with_rank_history(self, scout_id: str) -> Dict[str, Any]:
        scout = self.get_scout_or_404(scout_id)
        scout["rank_advancements"] = list(
            self.advancements.find({"scout_id": scout_id}, NO_ID).sort("created_at", DESCENDING)
        )
        return scout

    def add_rank_advancement(self, scout_id: str, data: RankAdvancementCreate) -> Dict[str, Any]:
        """
        Record a rank award and make it the scout's current rank

        Returns:
            The stored advancement record
        """
        self.get_scout_or_404(scout_id)

        advancement = to_storage_fields(data.model_dump(mode="json"), date_fields=ADVANCEMENT_DATE_FIELDS)
        advancement.update({
            "id": str(uuid.uuid4()),
            "scout_id": scout_id,
            "awarded_date": advancement.get("awarded_date") or utc_now_iso(),
            "board_members": advancement.get("board_members") or [],
            "created_at": utc_now_iso(),
        })

        self.advancements.insert_one(dict(advancement))
        self._set_fields(scout_id, {"current_rank": advancement["rank"]})
        logger.info(f"Scout {scout_id} advanced to {advancement['rank']}")
        return advancement

    # ------------------------------------------------------------------
    # Merit badges
    # ------------------------------------------------------------------

    def get_all_merit_badges(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        query = {"category": category} if category else {}
        return list(self.merit_badges.find(query, NO_ID).sort("name", ASCENDING))

    def get_scout_with_merit_badges(self, scout_id: str) -> Dict[str, Any]:
        scout = self.get_scout_or_404(scout_id)
        progress = list(self.scout_badges.find({"scout_id": scout_id}, NO_ID).sort("start_date", ASCENDING))

        badge_ids = [entry["badge_id"] for entry in progress]
        badges = {
            badge["id"]: {key: badge.get(key) for key in ("name", "description", "category")}
            for badge in self.merit_badges.find({"id": {"$in": badge_ids}}, NO_ID)
        }
        for entry in progress:
            entry["merit_badges"] = badges.get(entry["badge_id"])

        scout["scout_merit_badges"] = progress
        return scout

    def start_merit_badge(self, scout_id: str, badge_id: str, counselor: Optional[str] = None) -> Dict[str, Any]:
        """
        Begin tracking a merit badge for a scout

        Raises:
            NotFoundError: If the scout or the badge does not exist
            ConflictError: If the scout already started this badge
        """
        self.get_scout_or_404(scout_id)
        if not self.merit_badges.find_one({"id": badge_id}, {"_id": 0, "id": 1}):
            raise NotFoundError("Merit badge not found")

        key = {"scout_id": scout_id, "badge_id": badge_id}
        if self.scout_badges.find_one(key, NO_ID):
            raise ConflictError("Scout has already started this merit badge")

        entry = dict(key, id=str(uuid.uuid4()), start_date=utc_now_iso(), completed_date=None, counselor=counselor)
        try:
            self.scout_badges.insert_one(dict(entry))
        except DuplicateKeyError as e:
            raise ConflictError("Scout has already started this merit badge") from e

        logger.info(f"Scout {scout_id} started merit badge {badge_id}")
        return entry

    def complete_merit_badge(self, scout_id: str, badge_id: str) -> Dict[str, Any]:
        updated = self.scout_badges.find_one_and_update(
            {"scout_id": scout_id, "badge_id": badge_id},
            {"$set": {"completed_date": utc_now_iso()}},
            projection=NO_ID,
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFoundError("Merit badge progress not found")

        logger.info(f"Scout {scout_id} completed merit badge {badge_id}")
        return updated


def seed_merit_badges(db: Database) -> int:
    """
    Fill an empty merit badge catalog with the default badges

    Returns:
        Number of badges inserted
    """
    collection = db[MERIT_BADGES]
    if collection.count_documents({}) > 0:
        return 0

    now = utc_now_iso()
    badges = [dict(badge, id=str(uuid.uuid4()), created_at=now) for badge in DEFAULT_MERIT_BADGES]
    collection.insert_many(badges)
    logger.info(f"Seeded {len(badges)} merit badges")
    return len(badges)
