from fastapi import APIRouter, Depends, Query
from datetime import date, datetime
from typing import List, Optional
import logging

from app.core.dates import to_naive_utc
from app.core.dependencies import get_current_user, get_goal_service, get_progress_service
from app.models.user import User
from app.schemas.progress import (
    ExerciseProgressResponse,
    FrequencyResponse,
    MuscleGroupShare,
    PersonalBestResponse,
    ProgressSummaryResponse,
    VolumePoint,
    WeightEntryCreate,
    WeightEntryResponse,
)
from app.services.goal_service import GoalService
from app.services.progress_service import ProgressService

router = APIRouter(tags=["progress"])
logger = logging.getLogger(__name__)


@router.post("/weight", response_model=WeightEntryResponse, status_code=201)
async def log_weight(
        entry_data: WeightEntryCreate,
        current_user: User = Depends(get_current_user),
        progress_service: ProgressService = Depends(get_progress_service),
        goal_service: GoalService = Depends(get_goal_service),
):
    """Записать вес тела и пересчитать цели"""
    entry = await progress_service.log_weight(current_user.id, entry_data)
    refresh = await goal_service.refresh_goals(current_user.id)
    if refresh.newly_achieved:
        logger.info(f"Пользователь {current_user.id}: достигнуты цели {refresh.newly_achieved}")
    return WeightEntryResponse.model_validate(entry)


@router.get("/weight", response_model=List[WeightEntryResponse])
async def get_weight_history(
        start: Optional[datetime] = Query(None),
        end: Optional[datetime] = Query(None),
        current_user: User = Depends(get_current_user),
        progress_service: ProgressService = Depends(get_progress_service),
):
    entries = await progress_service.get_weight_history(current_user.id, to_naive_utc(start), to_naive_utc(end))
    return [WeightEntryResponse.model_validate(entry) for entry in entries]


@router.get("/exercises/{exercise_id}", response_model=ExerciseProgressResponse)
async def get_exercise_progress(
        exercise_id: int,
        current_user: User = Depends(get_current_user),
        progress_service: ProgressService = Depends(get_progress_service),
):
    """График лучшего веса по дням и личный рекорд"""
    return await progress_service.get_exercise_progress(current_user.id, exercise_id)


@router.get("/volume", response_model=List[VolumePoint])
async def get_volume_data(
        start_date: Optional[date] = Query(None, description="По умолчанию 30 дней назад"),
        end_date: Optional[date] = Query(None, description="По умолчанию сегодня"),
        current_user: User = Depends(get_current_user),
        progress_service: ProgressService = Depends(get_progress_service),
):
    """Объем каждой тренировки за период"""
    return await progress_service.get_volume_data(current_user.id, start_date, end_date)


@router.get("/muscle-groups", response_model=List[MuscleGroupShare])
async def get_muscle_group_distribution(
        start_date: Optional[date] = Query(None),
        end_date: Optional[date] = Query(None),
        current_user: User = Depends(get_current_user),
        progress_service: ProgressService = Depends(get_progress_service),
):
    """Распределение упражнений по группам мышц"""
    return await progress_service.get_muscle_group_distribution(current_user.id, start_date, end_date)


@router.get("/frequency", response_model=FrequencyResponse)
async def get_frequency_data(
        start_date: Optional[date] = Query(None),
        end_date: Optional[date] = Query(None),
        current_user: User = Depends(get_current_user),
        progress_service: ProgressService = Depends(get_progress_service),
):
    return await progress_service.get_frequency_data(current_user.id, start_date, end_date)


@router.get("/summary", response_model=ProgressSummaryResponse)
async def get_progress_summary(
        current_user: User = Depends(get_current_user),
        progress_service: ProgressService = Depends(get_progress_service),
):
    """Сводка для главного экрана прогресса"""
    return await progress_service.get_summary(current_user.id)


@router.get("/personal-bests", response_model=List[PersonalBestResponse])
async def get_personal_bests(
        current_user: User = Depends(get_current_user),
        progress_service: ProgressService = Depends(get_progress_service),
):
    """Лучший подход по каждому упражнению"""
    return await progress_service.get_personal_bests(current_user.id)
