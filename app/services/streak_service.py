import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

from app.core.exceptions import InvalidInputError, NotFoundError
from app.models.daily_log import ActivityTypeEnum, DailyLog
from app.models.goal import Milestone, MilestoneTypeEnum
from app.models.workout import Workout, WorkoutSet
from app.repositories.activity_repository import ActivityRepository
from app.repositories.goal_repository import GoalRepository
from app.schemas.streak import CalendarDay, CalendarResponse, MonthlyActivity, StreakResponse
from app.schemas.workout import DailyLogResponse, LogActivityResponse, WorkoutCreate
from app.services.streak_engine import StreakEngine

logger = logging.getLogger(__name__)


class StreakService:
    """Запись активности в дневной журнал и чтение серий/календаря."""

    # Окно истории для экрана серий (~6 месяцев)
    HISTORY_DAYS = 183
    # Сколько дней назад смотреть, чтобы распознать самую длинную отметку (30 дней)
    MILESTONE_LOOKBACK_DAYS = max(StreakEngine.MILESTONE_LENGTHS)

    def __init__(self, activity_repo: ActivityRepository, goal_repo: GoalRepository):
        self.activity_repo = activity_repo
        self.goal_repo = goal_repo

    async def _upsert_day(
            self,
            user_id: int,
            day: date,
            activity_type: ActivityTypeEnum,
            notes: Optional[str] = None
    ) -> Tuple[DailyLog, bool]:
        """Одна запись на день; тренировка заменяет отдых, но не наоборот."""
        existing = await self.activity_repo.get_daily_log(user_id, day)

        if existing is None:
            log = DailyLog(user_id=user_id, date=day, activity_type=activity_type, notes=notes)
            return await self.activity_repo.save_daily_log(log), True

        if activity_type == ActivityTypeEnum.workout and existing.activity_type != ActivityTypeEnum.workout:
            existing.activity_type = ActivityTypeEnum.workout
            if notes:
                existing.notes = notes
            return await self.activity_repo.save_daily_log(existing), True

        return existing, False

    async def _record_streak_milestone(self, user_id: int, day: date) -> Tuple[int, Optional[int]]:
        history = await self.activity_repo.get_daily_log_history(
            user_id, day - timedelta(days=self.MILESTONE_LOOKBACK_DAYS), day
        )
        streak = StreakEngine.current_streak(history, as_of=day)

        if not StreakEngine.is_milestone(day, history):
            return streak, None

        if await self.goal_repo.has_milestone(user_id, MilestoneTypeEnum.longest_streak, streak, day):
            return streak, None

        await self.goal_repo.add_milestone(Milestone(
            user_id=user_id,
            type=MilestoneTypeEnum.longest_streak,
            value=streak,
            date=datetime.combine(day, time.min),
        ))
        logger.info(f"Пользователь {user_id}: серия {streak} дней на {day.isoformat()}")
        return streak, streak

    async def log_workout(self, user_id: int, workout_data: WorkoutCreate) -> Tuple[Workout, LogActivityResponse]:
        for exercise_id in {item.exercise_id for item in workout_data.sets}:
            if await self.activity_repo.get_exercise(exercise_id) is None:
                raise NotFoundError(f"Упражнение {exercise_id} не найдено")

        workout = Workout(
            user_id=user_id,
            name=workout_data.name,
            date=workout_data.date,
            notes=workout_data.notes,
        )
        set_numbers = {}
        for item in workout_data.sets:
            set_numbers[item.exercise_id] = set_numbers.get(item.exercise_id, 0) + 1
            workout.sets.append(WorkoutSet(
                exercise_id=item.exercise_id,
                set_number=set_numbers[item.exercise_id],
                weight=item.weight,
                reps=item.reps,
            ))

        workout = await self.activity_repo.add_workout(workout)
        log, _ = await self._upsert_day(user_id, workout_data.date, ActivityTypeEnum.workout, workout_data.notes)
        streak, milestone = await self._record_streak_milestone(user_id, workout_data.date)

        return workout, LogActivityResponse(
            daily_log=DailyLogResponse.model_validate(log),
            current_streak=streak,
            milestone_reached=milestone,
            message=self._streak_message(streak, milestone),
        )

    async def log_rest_day(self, user_id: int, day: date, notes: Optional[str] = None) -> LogActivityResponse:
        log, _ = await self._upsert_day(user_id, day, ActivityTypeEnum.rest, notes)
        streak, milestone = await self._record_streak_milestone(user_id, day)

        return LogActivityResponse(
            daily_log=DailyLogResponse.model_validate(log),
            current_streak=streak,
            milestone_reached=milestone,
            message=self._streak_message(streak, milestone),
        )

    async def regenerate_daily_logs(self, user_id: int, start_date: date, end_date: date) -> int:
        """Восстановить записи журнала по истории тренировок. Возвращает число измененных дней."""
        if end_date < start_date:
            raise InvalidInputError("Дата окончания периода раньше даты начала")

        workout_dates = await self.activity_repo.get_workout_dates(user_id, start_date, end_date)
        changed = 0
        for day in workout_dates:
            _, updated = await self._upsert_day(user_id, day, ActivityTypeEnum.workout)
            changed += int(updated)

        logger.info(
            f"Пользователь {user_id}: журнал пересобран за {start_date}..{end_date}, "
            f"дней с тренировками {len(workout_dates)}, изменено {changed}"
        )
        return changed

    async def get_summary(self, user_id: int, today: Optional[date] = None) -> StreakResponse:
        today = today or datetime.utcnow().date()
        history = await self.activity_repo.get_daily_log_history(
            user_id, today - timedelta(days=self.HISTORY_DAYS), today
        )

        state = StreakEngine.streak_state(history, as_of=today)
        active_days, elapsed_days = StreakEngine.monthly_activity(history, today)

        return StreakResponse(
            current_streak=state.current_streak,
            longest_streak=state.longest_streak,
            today_has_activity=state.current_streak > 0,
            monthly_activity=MonthlyActivity(
                active_days=active_days,
                elapsed_days=elapsed_days,
                label=f"{active_days}/{elapsed_days}",
            ),
        )

    async def get_calendar(self, user_id: int, start_date: date, end_date: date) -> CalendarResponse:
        if end_date < start_date:
            raise InvalidInputError("Дата окончания периода раньше даты начала")

        # Захватываем 30 дней до начала, чтобы отметки в начале периода считались верно
        history = await self.activity_repo.get_daily_log_history(
            user_id, start_date - timedelta(days=self.MILESTONE_LOOKBACK_DAYS), end_date
        )
        activity = StreakEngine.activity_by_day(history)
        milestones = [
            day for day in StreakEngine.milestone_days(history)
            if start_date <= day <= end_date
        ]
        milestone_set = set(milestones)

        days: List[CalendarDay] = [
            CalendarDay(date=day, activity_type=activity_type, is_milestone=day in milestone_set)
            for day, activity_type in sorted(activity.items())
            if start_date <= day <= end_date
        ]

        return CalendarResponse(
            start_date=start_date,
            end_date=end_date,
            days=days,
            milestone_days=milestones,
        )

    async def get_milestones(self, user_id: int) -> List[Milestone]:
        return await self.goal_repo.get_milestones(user_id)

    @staticmethod
    def _streak_message(streak: int, milestone: Optional[int]) -> str:
        if milestone:
            return f"🔥 {milestone} дней подряд! Так держать!"
        if streak > 1:
            return f"Серия продолжается: {streak} дней подряд 💪"
        return "Активность записана"
