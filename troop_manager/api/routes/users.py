# troop_manager/api/routes/users.py
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from loguru import logger

from ...core.exceptions import ForbiddenError, NotFoundError
from ...middleware.jwt_middleware import authorize, authorize_over_member, get_current_user
from ...models.common import UUID_PATTERN
from ...models.users import (
    BackgroundCheckUpdate, JWTAccount, LEADER_ROLES, TroopMembershipRequest,
    UserRole, UserUpdateRequest, YouthProtectionUpdate,
)
from ...services.troop_service import TroopService
from ...services.user_service import UserService
from ...utilities.helpers.data_formatters import normalize_date, strip_password, to_storage_fields
from ...utilities.helpers.date_utils import utc_now_iso
from ...utilities.response import success_response
from ..dependencies import get_troop_service, get_user_service

router = APIRouter()


@router.get("")
async def get_users(
    troop_id: Optional[str] = Query(None, alias="troopId", pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(get_current_user),
    troop_service: TroopService = Depends(get_troop_service),
):
    """Members of a troop; there is no unfiltered user listing"""
    if not troop_id:
        return success_response("Use troop-specific user queries (troopId)", [])

    members = troop_service.list_members_for_troop(troop_id)
    return success_response("Users retrieved successfully", members)


@router.get("/dashboard")
async def get_dashboard(
    current_user: JWTAccount = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
    troop_service: TroopService = Depends(get_troop_service),
):
    """Caller's profile with their scouts, troops and totals"""
    user = user_service.get_user_with_scouts(current_user.user_id)
    if not user:
        raise NotFoundError("User not found")

    troops = troop_service.list_troops_for_user(current_user.user_id)
    dashboard = {
        "user": strip_password(user),
        "scouts": user["scouts"],
        "troops": troops,
        "summary": {
            "totalScouts": len(user["scouts"]),
            "totalTroops": len(troops),
        },
    }
    return success_response("Dashboard data retrieved successfully", dashboard)


@router.post("/troop-membership")
async def add_user_to_troop(
    body: TroopMembershipRequest,
    current_user: JWTAccount = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
    troop_service: TroopService = Depends(get_troop_service),
):
    user_service.get_user_or_404(body.userId)
    troop_service.get_troop_or_404(body.troopId)

    if not troop_service.has_role(current_user.user_id, body.troopId, LEADER_ROLES):
        raise ForbiddenError()

    troop_service.check_can_grant(current_user.user_id, body.role)
    troop_service.add_member(body.userId, body.troopId, body.role)
    return success_response("User added to troop successfully")


@router.delete("/{user_id}/troop/{troop_id}")
async def remove_user_from_troop(
    user_id: str = Path(..., pattern=UUID_PATTERN),
    troop_id: str = Path(..., pattern=UUID_PATTERN),
    role: Optional[UserRole] = Query(None),
    current_user: JWTAccount = Depends(get_current_user),
    troop_service: TroopService = Depends(get_troop_service),
):
    """Leaders manage their roster; any member may leave a troop themselves"""
    is_self = current_user.user_id == user_id
    if not is_self and not troop_service.has_role(current_user.user_id, troop_id, LEADER_ROLES):
        raise ForbiddenError()

    troop_service.remove_member(user_id, troop_id, role)
    return success_response("User removed from troop successfully")


@router.get("/{user_id}")
async def get_user(
    user_id: str = Path(..., pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    user = user_service.get_user_or_404(user_id)
    return success_response("User retrieved successfully", strip_password(user))


@router.get("/{user_id}/scouts")
async def get_user_with_scouts(
    user_id: str = Path(..., pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    user = user_service.get_user_with_scouts(user_id)
    if not user:
        raise NotFoundError("User not found")
    return success_response("User with scouts retrieved successfully", strip_password(user))


@router.get("/{user_id}/troops")
async def get_user_troops(
    user_id: str = Path(..., pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(get_current_user),
    troop_service: TroopService = Depends(get_troop_service),
):
    troops = troop_service.list_troops_for_user(user_id)
    return success_response("User troops retrieved successfully", troops)


@router.put("/{user_id}")
async def update_user(
    body: UserUpdateRequest,
    user_id: str = Path(..., pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(authorize(UserRole.ADMIN)),
    user_service: UserService = Depends(get_user_service),
):
    """Admin edit of a user; credentials and provider linkage are not editable here"""
    updates = to_storage_fields(body.model_dump(exclude_unset=True))
    user = user_service.update_user(user_id, updates)
    logger.info(f"Admin {current_user.user_id} updated user {user_id}: {sorted(updates)}")
    return success_response("User updated successfully", strip_password(user))


@router.delete("/{user_id}")
async def delete_user(
    user_id: str = Path(..., pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(authorize(UserRole.ADMIN)),
    user_service: UserService = Depends(get_user_service),
):
    user_service.delete_user(user_id)
    return success_response("User deleted successfully")


@router.put("/{user_id}/background-check")
async def update_background_check(
    body: BackgroundCheckUpdate,
    user_id: str = Path(..., pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(authorize_over_member(*LEADER_ROLES)),
    user_service: UserService = Depends(get_user_service),
):
    user = user_service.update_user(user_id, {
        "background_check_status": body.status.value,
        "background_check_date": normalize_date(body.date, "date") or utc_now_iso(),
    })
    return success_response("Background check status updated successfully", strip_password(user))


@router.put("/{user_id}/youth-protection")
async def update_youth_protection(
    body: YouthProtectionUpdate,
    user_id: str = Path(..., pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(authorize_over_member(*LEADER_ROLES)),
    user_service: UserService = Depends(get_user_service),
):
    user = user_service.update_user(user_id, {"youth_protection_date": normalize_date(body.date, "date")})
    return success_response("Youth protection status updated successfully", strip_password(user))
