# troop_manager/api/routes/scouts.py
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ...core.exceptions import BadRequestError
from ...middleware.jwt_middleware import get_current_user
from ...models.common import UUID_PATTERN
from ...models.scout import MeritBadgeStart, RankAdvancementCreate, ScoutCreate, ScoutUpdate
from ...models.users import JWTAccount
from ...services.scout_service import ScoutService
from ...utilities.response import success_response
from ..dependencies import get_scout_service

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("")
async def get_scouts(
    troop_id: Optional[str] = Query(None, alias="troopId", pattern=UUID_PATTERN),
    parent_id: Optional[str] = Query(None, alias="parentId", pattern=UUID_PATTERN),
    scout_service: ScoutService = Depends(get_scout_service),
):
    """Scouts of a troop or of a parent, ordered by last name"""
    if troop_id:
        scouts = scout_service.get_scouts_by_troop_id(troop_id)
    elif parent_id:
        scouts = scout_service.get_scouts_by_parent_id(parent_id)
    else:
        raise BadRequestError("Either troopId or parentId query parameter is required")

    return success_response("Scouts retrieved successfully", scouts)


@router.get("/my")
async def get_my_scouts(
    current_user: JWTAccount = Depends(get_current_user),
    scout_service: ScoutService = Depends(get_scout_service),
):
    scouts = scout_service.get_scouts_by_parent_id(current_user.user_id)
    return success_response("My scouts retrieved successfully", scouts)


@router.get("/merit-badges/catalog")
async def get_merit_badge_catalog(
    category: Optional[str] = Query(None),
    scout_service: ScoutService = Depends(get_scout_service),
):
    badges = scout_service.get_all_merit_badges(category)
    return success_response("Merit badges retrieved successfully", badges)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_scout(
    body: ScoutCreate,
    current_user: JWTAccount = Depends(get_current_user),
    scout_service: ScoutService = Depends(get_scout_service),
):
    """Register a scout; the caller is the parent unless parentId is given"""
    scout = scout_service.create_scout(body, default_parent_id=current_user.user_id)
    return success_response("Scout created successfully", scout, status.HTTP_201_CREATED)


@router.get("/{scout_id}")
async def get_scout(
    scout_id: str = Path(..., pattern=UUID_PATTERN),
    scout_service: ScoutService = Depends(get_scout_service),
):
    return success_response("Scout retrieved successfully", scout_service.get_scout_or_404(scout_id))


@router.put("/{scout_id}")
async def update_scout(
    body: ScoutUpdate,
    scout_id: str = Path(..., pattern=UUID_PATTERN),
    scout_service: ScoutService = Depends(get_scout_service),
):
    scout = scout_service.update_scout(scout_id, body)
    return success_response("Scout updated successfully", scout)


@router.delete("/{scout_id}")
async def delete_scout(
    scout_id: str = Path(..., pattern=UUID_PATTERN),
    scout_service: ScoutService = Depends(get_scout_service),
):
    scout_service.delete_scout(scout_id)
    return success_response("Scout deleted successfully")


@router.get("/{scout_id}/ranks")
async def get_scout_rank_history(
    scout_id: str = Path(..., pattern=UUID_PATTERN),
    scout_service: ScoutService = Depends(get_scout_service),
):
    scout = scout_service.get_scout_with_rank_history(scout_id)
    return success_response("Scout with rank history retrieved successfully", scout)


@router.post("/{scout_id}/ranks", status_code=status.HTTP_201_CREATED)
async def add_rank_advancement(
    body: RankAdvancementCreate,
    scout_id: str = Path(..., pattern=UUID_PATTERN),
    scout_service: ScoutService = Depends(get_scout_service),
):
    advancement = scout_service.add_rank_advancement(scout_id, body)
    return success_response("Rank advancement added successfully", advancement, status.HTTP_201_CREATED)


@router.get("/{scout_id}/merit-badges")
async def get_scout_merit_badges(
    scout_id: str = Path(..., pattern=UUID_PATTERN),
    scout_service: ScoutService = Depends(get_scout_service),
):
    scout = scout_service.get_scout_with_merit_badges(scout_id)
    return success_response("Scout with merit badges retrieved successfully", scout)


@router.post("/{scout_id}/merit-badges", status_code=status.HTTP_201_CREATED)
async def start_merit_badge(
    body: MeritBadgeStart,
    scout_id: str = Path(..., pattern=UUID_PATTERN),
    scout_service: ScoutService = Depends(get_scout_service),
):
    progress = scout_service.start_merit_badge(scout_id, body.badgeId, body.counselor)
    return success_response("Merit badge progress started successfully", progress, status.HTTP_201_CREATED)


@router.put("/{scout_id}/merit-badges/{badge_id}/complete")
async def complete_merit_badge(
    scout_id: str = Path(..., pattern=UUID_PATTERN),
    badge_id: str = Path(..., pattern=UUID_PATTERN),
    scout_service: ScoutService = Depends(get_scout_service),
):
    completed = scout_service.complete_merit_badge(scout_id, badge_id)
    return success_response("Merit badge completed successfully", completed)
