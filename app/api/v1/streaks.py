from fastapi import APIRouter, Depends, Query
from datetime import date, datetime, timedelta
from typing import List, Optional

from app.core.dependencies import get_current_user, get_streak_service
from app.models.user import User
from app.schemas.streak import CalendarResponse, MilestoneResponse, StreakResponse
from app.services.streak_service import StreakService

router = APIRouter(tags=["streaks"])


@router.get("", response_model=StreakResponse)
async def get_streak(
        current_user: User = Depends(get_current_user),
        streak_service: StreakService = Depends(get_streak_service),
):
    """Текущая и самая длинная серия, активность за месяц"""
    return await streak_service.get_summary(current_user.id)


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(
        start_date: Optional[date] = Query(None),
        end_date: Optional[date] = Query(None),
        current_user: User = Depends(get_current_user),
        streak_service: StreakService = Depends(get_streak_service),
):
    """Календарь активности; по умолчанию последние ~6 месяцев"""
    end_date = end_date or datetime.utcnow().date()
    start_date = start_date or end_date - timedelta(days=StreakService.HISTORY_DAYS)
    return await streak_service.get_calendar(current_user.id, start_date, end_date)


@router.get("/milestones", response_model=List[MilestoneResponse])
async def get_milestones(
        current_user: User = Depends(get_current_user),
        streak_service: StreakService = Depends(get_streak_service),
):
    milestones = await streak_service.get_milestones(current_user.id)
    return [MilestoneResponse.model_validate(milestone) for milestone in milestones]
