# troop_manager/api/routes/troops.py
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ...middleware.jwt_middleware import authorize, get_current_user
from ...models.common import UUID_PATTERN
from ...models.troop import AddMemberRequest, TroopCreate, TroopStatus, TroopUpdate
from ...models.users import JWTAccount, LEADER_ROLES, UserRole
from ...services.troop_service import TroopService
from ...services.user_service import UserService
from ...utilities.response import success_response
from ..dependencies import get_troop_service, get_user_service

router = APIRouter()


@router.get("")
async def get_all_troops(troop_service: TroopService = Depends(get_troop_service)):
    """Active troops ordered by name (public)"""
    return success_response("Troops retrieved successfully", troop_service.get_active_troops())


@router.get("/my/troops")
async def get_my_troops(
    current_user: JWTAccount = Depends(get_current_user),
    troop_service: TroopService = Depends(get_troop_service),
):
    troops = troop_service.list_troops_for_user(current_user.user_id)
    return success_response("User troops retrieved successfully", troops)


@router.get("/{troop_id}")
async def get_troop(
    troop_id: str = Path(..., pattern=UUID_PATTERN),
    troop_service: TroopService = Depends(get_troop_service),
):
    return success_response("Troop retrieved successfully", troop_service.get_troop_or_404(troop_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_troop(
    body: TroopCreate,
    current_user: JWTAccount = Depends(get_current_user),
    troop_service: TroopService = Depends(get_troop_service),
):
    """Create a troop; the caller becomes its SCOUTMASTER"""
    troop = troop_service.create_troop(current_user.user_id, body)
    return success_response("Troop created successfully", troop, status.HTTP_201_CREATED)


@router.put("/{troop_id}")
async def update_troop(
    body: TroopUpdate,
    troop_id: str = Path(..., pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(authorize(*LEADER_ROLES)),
    troop_service: TroopService = Depends(get_troop_service),
):
    troop = troop_service.update_troop(troop_id, body)
    return success_response("Troop updated successfully", troop)


@router.get("/{troop_id}/members")
async def get_troop_with_members(
    troop_id: str = Path(..., pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(get_current_user),
    troop_service: TroopService = Depends(get_troop_service),
):
    troop = troop_service.get_troop_with_members(troop_id)
    return success_response("Troop with members retrieved successfully", troop)


@router.get("/{troop_id}/stats")
async def get_troop_stats(
    troop_id: str = Path(..., pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(get_current_user),
    troop_service: TroopService = Depends(get_troop_service),
):
    stats = troop_service.get_troop_stats(troop_id)
    return success_response("Troop statistics retrieved successfully", stats)


@router.post("/{troop_id}/members")
async def add_member_to_troop(
    body: AddMemberRequest,
    troop_id: str = Path(..., pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(authorize(*LEADER_ROLES)),
    troop_service: TroopService = Depends(get_troop_service),
    user_service: UserService = Depends(get_user_service),
):
    troop_service.get_troop_or_404(troop_id)
    user_service.get_user_or_404(body.userId)
    troop_service.check_can_grant(current_user.user_id, body.role)
    troop_service.add_member(body.userId, troop_id, body.role)
    return success_response("Member added to troop successfully")


@router.delete("/{troop_id}/members/{user_id}")
async def remove_member_from_troop(
    troop_id: str = Path(..., pattern=UUID_PATTERN),
    user_id: str = Path(..., pattern=UUID_PATTERN),
    role: Optional[UserRole] = Query(None, description="Only remove this role"),
    current_user: JWTAccount = Depends(authorize(*LEADER_ROLES)),
    troop_service: TroopService = Depends(get_troop_service),
):
    troop_service.get_troop_or_404(troop_id)
    troop_service.remove_member(user_id, troop_id, role)
    return success_response("Member removed from troop successfully")


@router.put("/{troop_id}/archive")
async def archive_troop(
    troop_id: str = Path(..., pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(authorize(*LEADER_ROLES)),
    troop_service: TroopService = Depends(get_troop_service),
):
    troop = troop_service.set_status(troop_id, TroopStatus.ARCHIVED)
    return success_response("Troop archived successfully", troop)


@router.put("/{troop_id}/reactivate")
async def reactivate_troop(
    troop_id: str = Path(..., pattern=UUID_PATTERN),
    current_user: JWTAccount = Depends(authorize(*LEADER_ROLES)),
    troop_service: TroopService = Depends(get_troop_service),
):
    troop = troop_service.set_status(troop_id, TroopStatus.ACTIVE)
    return success_response("Troop reactivated successfully", troop)
