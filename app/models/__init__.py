from app.models.user import User
from app.models.goal import Goal, Milestone
from app.models.workout import Exercise, Workout, WorkoutSet
from app.models.daily_log import DailyLog
from app.models.progress import BodyWeightEntry

__all__ = [
    "User", "Goal", "Milestone",
    "Exercise", "Workout", "WorkoutSet",
    "DailyLog",
    "BodyWeightEntry"
]
