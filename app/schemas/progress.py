from pydantic import BaseModel, Field
from typing import Dict, Optional, List
from datetime import date, datetime

from app.core.dates import UtcDatetime

class WeightEntryCreate(BaseModel):
    weight: float = Field(gt=0)
    recorded_at: Optional[UtcDatetime] = None

class WeightEntryResponse(BaseModel):
    id: int
    weight: float
    recorded_at: datetime

    class Config:
        from_attributes = True

class ProgressChartData(BaseModel):
    date: str  # "01.11"
    value: float
    label: Optional[str] = None

class ExerciseProgressResponse(BaseModel):
    exercise_id: int
    exercise_name: str
    personal_best: Optional[float] = None
    first_logged_weight: Optional[float] = None
    improvement_percentage: Optional[float] = None
    chart_data: List[ProgressChartData]

class VolumePoint(BaseModel):
    workout_id: int
    date: date
    label: str  # "01.11"
    volume: float

class MuscleGroupShare(BaseModel):
    muscle_group: str
    count: int
    percentage: float

class FrequencyDay(BaseModel):
    date: date
    has_workout: bool
    has_rest_day: bool
    has_activity: bool

class FrequencyResponse(BaseModel):
    start_date: date
    end_date: date
    days: List[FrequencyDay]
    workouts_by_weekday: Dict[str, int]
    total_workouts: int
    total_days: int
    workout_frequency: float  # % дней с тренировкой
    current_streak: int
    longest_streak: int

class ProgressSummaryResponse(BaseModel):
    total_workouts: int
    weekly_workouts: int
    monthly_workouts: int
    weekly_target: int
    weekly_progress: float
    most_recent_workout: Optional[date] = None
    days_since_last_workout: Optional[int] = None
    current_streak: int
    longest_streak: int
    most_trained_muscle_group: Optional[str] = None
    muscle_group_count: Optional[int] = None

class PersonalBestResponse(BaseModel):
    exercise_id: int
    exercise_name: str
    muscle_group: str
    max_weight: float
    reps: Optional[int] = None
    date: date
