from pydantic import BaseModel
from typing import Optional, List
from datetime import date, datetime

from app.models.daily_log import ActivityTypeEnum
from app.models.goal import MilestoneTypeEnum

class MonthlyActivity(BaseModel):
    active_days: int
    elapsed_days: int
    label: str  # "12/18"

class StreakResponse(BaseModel):
    current_streak: int
    longest_streak: int
    today_has_activity: bool
    monthly_activity: MonthlyActivity

class CalendarDay(BaseModel):
    date: date
    activity_type: ActivityTypeEnum
    is_milestone: bool

class CalendarResponse(BaseModel):
    start_date: date
    end_date: date
    days: List[CalendarDay]
    milestone_days: List[date]

class MilestoneResponse(BaseModel):
    id: int
    type: MilestoneTypeEnum
    value: Optional[float] = None
    exercise_id: Optional[int] = None
    date: datetime

    class Config:
        from_attributes = True
