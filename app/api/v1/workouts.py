from fastapi import APIRouter, Depends, Query, Response
from datetime import date, datetime
from typing import List, Optional

from app.core.dependencies import (
    get_activity_repository,
    get_current_user,
    get_goal_service,
    get_streak_service,
    get_workout_service,
)
from app.models.user import User
from app.repositories.activity_repository import ActivityRepository
from app.schemas.workout import (
    LogActivityResponse,
    RegenerateLogsRequest,
    RegenerateLogsResponse,
    RestDayCreate,
    WorkoutComparisonResponse,
    WorkoutCreate,
    WorkoutDetailResponse,
    WorkoutLogResponse,
    WorkoutResponse,
)
from app.services.goal_service import GoalService
from app.services.streak_service import StreakService
from app.services.workout_service import WorkoutService

router = APIRouter(tags=["workouts"])


@router.post("", response_model=WorkoutLogResponse, status_code=201)
async def log_workout(
        workout_data: WorkoutCreate,
        current_user: User = Depends(get_current_user),
        streak_service: StreakService = Depends(get_streak_service),
        goal_service: GoalService = Depends(get_goal_service),
):
    """Записать тренировку: подходы, дневной журнал, серия и пересчет целей"""
    workout, activity = await streak_service.log_workout(current_user.id, workout_data)
    refresh = await goal_service.refresh_goals(current_user.id)

    return WorkoutLogResponse(
        workout=WorkoutResponse.model_validate(workout),
        activity=activity,
        achieved_goals=refresh.newly_achieved,
    )


@router.get("", response_model=List[WorkoutResponse])
async def get_workouts_for_day(
        day: Optional[date] = Query(None, description="День (по умолчанию сегодня)"),
        current_user: User = Depends(get_current_user),
        activity_repo: ActivityRepository = Depends(get_activity_repository),
):
    """Тренировки пользователя за выбранный день"""
    workouts = await activity_repo.get_workouts_for_date(current_user.id, day or datetime.utcnow().date())
    return [WorkoutResponse.model_validate(workout) for workout in workouts]


@router.post("/rest-day", response_model=LogActivityResponse, status_code=201)
async def log_rest_day(
        rest_day: RestDayCreate,
        current_user: User = Depends(get_current_user),
        streak_service: StreakService = Depends(get_streak_service),
):
    """Записать день отдыха (не заменяет уже записанную тренировку)"""
    return await streak_service.log_rest_day(current_user.id, rest_day.date, rest_day.notes)


@router.post("/regenerate-logs", response_model=RegenerateLogsResponse)
async def regenerate_daily_logs(
        request: RegenerateLogsRequest,
        current_user: User = Depends(get_current_user),
        streak_service: StreakService = Depends(get_streak_service),
):
    """Пересобрать дневной журнал по истории тренировок"""
    changed = await streak_service.regenerate_daily_logs(current_user.id, request.start_date, request.end_date)
    return RegenerateLogsResponse(changed_days=changed)


@router.get("/compare", response_model=WorkoutComparisonResponse)
async def compare_workouts(
        first_id: int = Query(..., description="Более ранняя тренировка"),
        second_id: int = Query(..., description="Более поздняя тренировка"),
        current_user: User = Depends(get_current_user),
        workout_service: WorkoutService = Depends(get_workout_service),
):
    """Сравнить объем и рабочие веса двух тренировок"""
    return await workout_service.compare(current_user.id, first_id, second_id)


@router.get("/{workout_id}", response_model=WorkoutDetailResponse)
async def get_workout_details(
        workout_id: int,
        current_user: User = Depends(get_current_user),
        workout_service: WorkoutService = Depends(get_workout_service),
):
    return await workout_service.get_details(current_user.id, workout_id)


@router.delete("/{workout_id}", status_code=204)
async def delete_workout(
        workout_id: int,
        current_user: User = Depends(get_current_user),
        workout_service: WorkoutService = Depends(get_workout_service),
):
    """Удалить тренировку и ее подходы. Запись в дневном журнале остается."""
    await workout_service.delete_workout(current_user.id, workout_id)
    return Response(status_code=204)
