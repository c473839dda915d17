from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime

from app.core.dates import UtcDatetime
from app.models.goal import GoalTypeEnum
from app.services.goal_progress import GoalStatusEnum

class StrengthGoalCreate(BaseModel):
    exercise_id: int
    current_weight: float = Field(ge=0)
    target_weight: float = Field(gt=0)
    target_date: UtcDatetime

class WeightGoalCreate(BaseModel):
    current_weight: float = Field(gt=0)
    target_weight: float = Field(gt=0)
    target_date: UtcDatetime

class FrequencyGoalCreate(BaseModel):
    workouts_per_week: int = Field(gt=0, le=14)
    duration_weeks: int = Field(gt=0, le=104)

class GoalUpdate(BaseModel):
    target_value: Optional[float] = Field(default=None, ge=0)
    end_date: Optional[UtcDatetime] = None

    @model_validator(mode="after")
    def check_not_empty(self):
        if self.target_value is None and self.end_date is None:
            raise ValueError("Нужно указать target_value или end_date")
        return self

class GoalResponse(BaseModel):
    id: int
    type: GoalTypeEnum
    exercise_id: Optional[int] = None
    target_value: float
    start_date: datetime
    end_date: datetime
    achieved: bool
    current_progress: float
    achieved_date: Optional[datetime] = None

    class Config:
        from_attributes = True

class GoalProgressResponse(BaseModel):
    goal_id: int
    goal_type: GoalTypeEnum
    status: GoalStatusEnum
    baseline: float
    target_value: float
    current_value: float
    progress: float
    progress_percentage: float  # 0-100, для прогресс-бара
    days_left: int
    is_expired: bool
    projected_completion_date: Optional[datetime] = None
    improvement_percentage: Optional[float] = None
    weekly_target: Optional[float] = None
    weight_change: Optional[float] = None
    is_weight_loss: bool = False
    is_weight_gain: bool = False
    title: str

class GoalDetailResponse(BaseModel):
    goal: GoalResponse
    progress: GoalProgressResponse

class GoalAlertsResponse(BaseModel):
    near_completion: List[GoalProgressResponse]
    expiring_soon: List[GoalProgressResponse]

class GoalRefreshResponse(BaseModel):
    evaluated: int
    newly_achieved: List[int]
