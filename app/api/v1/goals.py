from fastapi import APIRouter, Depends, Response
from typing import List

from app.core.dependencies import get_current_user, get_goal_service
from app.models.user import User
from app.schemas.goal import (
    FrequencyGoalCreate, GoalAlertsResponse, GoalDetailResponse, GoalRefreshResponse,
    GoalUpdate, StrengthGoalCreate, WeightGoalCreate
)
from app.services.goal_service import GoalService

router = APIRouter(tags=["goals"])


@router.post("/strength", response_model=GoalDetailResponse, status_code=201)
async def create_strength_goal(
        goal_data: StrengthGoalCreate,
        current_user: User = Depends(get_current_user),
        goal_service: GoalService = Depends(get_goal_service),
):
    """Силовая цель: целевой вес в упражнении к дате"""
    goal = await goal_service.create_strength_goal(current_user.id, goal_data)
    return await goal_service.get_goal_detail(current_user.id, goal.id)


@router.post("/weight", response_model=GoalDetailResponse, status_code=201)
async def create_weight_goal(
        goal_data: WeightGoalCreate,
        current_user: User = Depends(get_current_user),
        goal_service: GoalService = Depends(get_goal_service),
):
    """Цель по весу тела (снижение или набор определяется автоматически)"""
    goal = await goal_service.create_weight_goal(current_user.id, goal_data)
    return await goal_service.get_goal_detail(current_user.id, goal.id)


@router.post("/frequency", response_model=GoalDetailResponse, status_code=201)
async def create_frequency_goal(
        goal_data: FrequencyGoalCreate,
        current_user: User = Depends(get_current_user),
        goal_service: GoalService = Depends(get_goal_service),
):
    """Цель по частоте: тренировок в неделю × количество недель"""
    goal = await goal_service.create_frequency_goal(current_user.id, goal_data)
    return await goal_service.get_goal_detail(current_user.id, goal.id)


@router.get("", response_model=List[GoalDetailResponse])
async def get_active_goals(
        current_user: User = Depends(get_current_user),
        goal_service: GoalService = Depends(get_goal_service),
):
    """Активные цели с прогрессом (просроченные тоже здесь, со статусом expired)"""
    return await goal_service.list_goals(current_user.id)


@router.get("/completed", response_model=List[GoalDetailResponse])
async def get_completed_goals(
        current_user: User = Depends(get_current_user),
        goal_service: GoalService = Depends(get_goal_service),
):
    return await goal_service.list_goals(current_user.id, completed=True)


@router.get("/alerts", response_model=GoalAlertsResponse)
async def get_goal_alerts(
        current_user: User = Depends(get_current_user),
        goal_service: GoalService = Depends(get_goal_service),
):
    """Цели, близкие к выполнению (>= 90%), и истекающие в ближайшие 3 дня"""
    return await goal_service.get_alerts(current_user.id)


@router.post("/refresh", response_model=GoalRefreshResponse)
async def refresh_goals(
        current_user: User = Depends(get_current_user),
        goal_service: GoalService = Depends(get_goal_service),
):
    """Пересчитать прогресс и отметить достигнутые цели"""
    return await goal_service.refresh_goals(current_user.id)


@router.get("/{goal_id}", response_model=GoalDetailResponse)
async def get_goal(
        goal_id: int,
        current_user: User = Depends(get_current_user),
        goal_service: GoalService = Depends(get_goal_service),
):
    return await goal_service.get_goal_detail(current_user.id, goal_id)


@router.put("/{goal_id}", response_model=GoalDetailResponse)
async def update_goal(
        goal_id: int,
        goal_data: GoalUpdate,
        current_user: User = Depends(get_current_user),
        goal_service: GoalService = Depends(get_goal_service),
):
    """Изменить целевое значение и/или дату окончания"""
    goal = await goal_service.update_goal(current_user.id, goal_id, goal_data)
    return await goal_service.get_goal_detail(current_user.id, goal.id)


@router.delete("/{goal_id}", status_code=204)
async def delete_goal(
        goal_id: int,
        current_user: User = Depends(get_current_user),
        goal_service: GoalService = Depends(get_goal_service),
):
    await goal_service.delete_goal(current_user.id, goal_id)
    return Response(status_code=204)
