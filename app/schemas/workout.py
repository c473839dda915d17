from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date

from app.models.daily_log import ActivityTypeEnum

class SetInput(BaseModel):
    exercise_id: int
    weight: Optional[float] = Field(default=None, ge=0)
    reps: Optional[int] = Field(default=None, ge=0)

class WorkoutCreate(BaseModel):
    name: str
    date: date
    notes: Optional[str] = None
    sets: List[SetInput] = []

class RestDayCreate(BaseModel):
    date: date
    notes: Optional[str] = None

class RegenerateLogsRequest(BaseModel):
    start_date: date
    end_date: date

class SetResponse(BaseModel):
    id: int
    exercise_id: int
    set_number: int
    weight: Optional[float] = None
    reps: Optional[int] = None

    class Config:
        from_attributes = True

class WorkoutResponse(BaseModel):
    id: int
    name: str
    date: date
    notes: Optional[str] = None
    sets: List[SetResponse] = []

    class Config:
        from_attributes = True

class DailyLogResponse(BaseModel):
    date: date
    activity_type: ActivityTypeEnum
    notes: Optional[str] = None

    class Config:
        from_attributes = True

class LogActivityResponse(BaseModel):
    daily_log: DailyLogResponse
    current_streak: int
    milestone_reached: Optional[int] = None
    message: str

class WorkoutLogResponse(BaseModel):
    workout: WorkoutResponse
    activity: LogActivityResponse
    achieved_goals: List[int] = []

class RegenerateLogsResponse(BaseModel):
    changed_days: int

class ExerciseBreakdown(BaseModel):
    exercise_id: int
    exercise_name: str
    muscle_group: str
    sets: int
    total_reps: int
    max_weight: float
    volume: float  # сумма вес × повторения

class WorkoutDetailResponse(BaseModel):
    workout: WorkoutResponse
    total_volume: float
    exercises: List[ExerciseBreakdown]

class ExerciseComparison(BaseModel):
    exercise_id: int
    exercise_name: str
    muscle_group: str
    first_max_weight: float
    second_max_weight: float
    weight_difference: float
    weight_percent_change: float
    first_volume: float
    second_volume: float
    volume_difference: float
    volume_percent_change: float
    first_sets: int
    second_sets: int
    first_total_reps: int
    second_total_reps: int
    explanation: Optional[str] = None

class WorkoutComparisonResponse(BaseModel):
    first_workout_id: int
    second_workout_id: int
    days_between: int
    first_total_volume: float
    second_total_volume: float
    volume_difference: float
    volume_percent_change: float
    is_improved: bool
    matching_exercises: List[ExerciseComparison]
    unique_to_first: List[ExerciseBreakdown]
    unique_to_second: List[ExerciseBreakdown]
    has_inconsistent_data: bool
    summary: Optional[str] = None
