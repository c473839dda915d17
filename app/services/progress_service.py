import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple

from app.core.exceptions import InvalidInputError, NotFoundError
from app.models.daily_log import ActivityTypeEnum
from app.models.progress import BodyWeightEntry
from app.repositories.activity_repository import ActivityRepository
from app.schemas.progress import (
    ExerciseProgressResponse,
    FrequencyDay,
    FrequencyResponse,
    MuscleGroupShare,
    PersonalBestResponse,
    ProgressChartData,
    ProgressSummaryResponse,
    VolumePoint,
    WeightEntryCreate,
)
from app.services.goal_progress import improvement_percentage
from app.services.streak_engine import StreakEngine, StreakState
from app.services.streak_service import StreakService
from app.services.workout_analysis import WorkoutAnalyzer

logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class ProgressService:
    # Период по умолчанию для графиков
    DEFAULT_RANGE_DAYS = 30
    # Календарь частоты строится по дням, период ограничен
    MAX_RANGE_DAYS = 366
    WEEKLY_TARGET = 5
    # Окно истории для серий, как на экране серий
    STREAK_HISTORY_DAYS = StreakService.HISTORY_DAYS

    def __init__(self, activity_repo: ActivityRepository):
        self.activity_repo = activity_repo

    def resolve_range(
            self,
            start_date: Optional[date],
            end_date: Optional[date],
            today: Optional[date] = None
    ) -> Tuple[date, date]:
        end_date = end_date or today or datetime.utcnow().date()
        start_date = start_date or end_date - timedelta(days=self.DEFAULT_RANGE_DAYS - 1)
        if end_date < start_date:
            raise InvalidInputError(
                "Дата окончания периода раньше даты начала",
                details={"start": start_date.isoformat(), "end": end_date.isoformat()},
            )
        return start_date, end_date

    async def _streak_state(self, user_id: int, today: date) -> StreakState:
        history = await self.activity_repo.get_daily_log_history(
            user_id, today - timedelta(days=self.STREAK_HISTORY_DAYS), today
        )
        return StreakEngine.streak_state(history, as_of=today)

    async def log_weight(self, user_id: int, data: WeightEntryCreate) -> BodyWeightEntry:
        recorded_at = data.recorded_at or datetime.utcnow()
        entry = await self.activity_repo.add_weight_entry(user_id, data.weight, recorded_at)
        logger.info(f"Пользователь {user_id}: записан вес {data.weight} кг")
        return entry

    async def get_weight_history(
            self,
            user_id: int,
            start: Optional[datetime] = None,
            end: Optional[datetime] = None
    ) -> List[BodyWeightEntry]:
        return await self.activity_repo.get_body_weight_history(user_id, start, end)

    async def get_exercise_progress(self, user_id: int, exercise_id: int) -> ExerciseProgressResponse:
        """Максимальный вес по дням, личный рекорд и прирост от первого подхода"""
        exercise = await self.activity_repo.get_exercise(exercise_id)
        if exercise is None:
            raise NotFoundError(f"Упражнение {exercise_id} не найдено")

        sets = await self.activity_repo.get_exercise_sets(user_id, exercise_id)

        best_by_day: Dict[date, float] = {}
        for record in sets:
            if record.weight is None:
                continue
            best_by_day[record.date] = max(best_by_day.get(record.date, record.weight), record.weight)

        chart_data = [
            ProgressChartData(date=day.strftime("%d.%m"), value=weight, label=f"{weight} кг")
            for day, weight in sorted(best_by_day.items())
        ]

        personal_best = max(best_by_day.values()) if best_by_day else None
        first_logged = chart_data[0].value if chart_data else None

        return ExerciseProgressResponse(
            exercise_id=exercise.id,
            exercise_name=exercise.name,
            personal_best=personal_best,
            first_logged_weight=first_logged,
            improvement_percentage=improvement_percentage(first_logged, personal_best),
            chart_data=chart_data,
        )

    async def get_volume_data(
            self,
            user_id: int,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None
    ) -> List[VolumePoint]:
        """Объем (вес × повторения) каждой тренировки за период"""
        start_date, end_date = self.resolve_range(start_date, end_date)
        workouts = await self.activity_repo.get_workouts(user_id, start_date, end_date)
        return [
            VolumePoint(
                workout_id=workout.id,
                date=workout.date,
                label=workout.date.strftime("%d.%m"),
                volume=WorkoutAnalyzer.workout_volume(workout),
            )
            for workout in workouts
        ]

    async def get_muscle_group_distribution(
            self,
            user_id: int,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None
    ) -> List[MuscleGroupShare]:
        start_date, end_date = self.resolve_range(start_date, end_date)
        counts = await self.activity_repo.get_muscle_group_counts(user_id, start_date, end_date)
        total = sum(item.count for item in counts)
        return [
            MuscleGroupShare(
                muscle_group=item.muscle_group,
                count=item.count,
                percentage=item.count / total * 100 if total else 0.0,
            )
            for item in counts
        ]

    async def get_frequency_data(
            self,
            user_id: int,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
            today: Optional[date] = None
    ) -> FrequencyResponse:
        """
        Календарь тренировок и отдыха за период, тренировки по дням недели
        и доля дней с тренировкой.
        """
        today = today or datetime.utcnow().date()
        start_date, end_date = self.resolve_range(start_date, end_date, today)
        total_days = (end_date - start_date).days + 1
        if total_days > self.MAX_RANGE_DAYS:
            raise InvalidInputError(
                f"Период не может быть длиннее {self.MAX_RANGE_DAYS} дней",
                details={"start": start_date.isoformat(), "end": end_date.isoformat()},
            )

        workout_days = set(await self.activity_repo.get_workout_dates(user_id, start_date, end_date))
        logs = await self.activity_repo.get_daily_log_history(user_id, start_date, end_date)
        rest_days = {
            log.date for log in logs
            if ActivityTypeEnum(log.activity_type) == ActivityTypeEnum.rest
        }

        by_weekday: Dict[str, int] = {name: 0 for name in WEEKDAYS}
        days: List[FrequencyDay] = []
        for offset in range(total_days):
            day = start_date + timedelta(days=offset)
            has_workout = day in workout_days
            has_rest_day = day in rest_days
            days.append(FrequencyDay(
                date=day,
                has_workout=has_workout,
                has_rest_day=has_rest_day,
                has_activity=has_workout or has_rest_day,
            ))
            if has_workout:
                by_weekday[WEEKDAYS[day.weekday()]] += 1

        streak = await self._streak_state(user_id, today)
        return FrequencyResponse(
            start_date=start_date,
            end_date=end_date,
            days=days,
            workouts_by_weekday=by_weekday,
            total_workouts=len(workout_days),
            total_days=total_days,
            workout_frequency=len(workout_days) / total_days * 100,
            current_streak=streak.current_streak,
            longest_streak=streak.longest_streak,
        )

    async def get_summary(self, user_id: int, today: Optional[date] = None) -> ProgressSummaryResponse:
        """Сводка: тренировки всего, за неделю (с понедельника) и за месяц, серия, любимая группа мышц"""
        today = today or datetime.utcnow().date()
        week_start = today - timedelta(days=today.weekday())
        month_start = today.replace(day=1)

        total = await self.activity_repo.count_workouts(user_id)
        weekly = await self.activity_repo.count_workouts(user_id, week_start)
        monthly = await self.activity_repo.count_workouts(user_id, month_start)
        last_workout = await self.activity_repo.get_last_workout_date(user_id)
        muscle_groups = await self.activity_repo.get_muscle_group_counts(user_id)
        streak = await self._streak_state(user_id, today)

        top_group = muscle_groups[0] if muscle_groups else None
        return ProgressSummaryResponse(
            total_workouts=total,
            weekly_workouts=weekly,
            monthly_workouts=monthly,
            weekly_target=self.WEEKLY_TARGET,
            weekly_progress=weekly / self.WEEKLY_TARGET,
            most_recent_workout=last_workout,
            days_since_last_workout=(today - last_workout).days if last_workout is not None else None,
            current_streak=streak.current_streak,
            longest_streak=streak.longest_streak,
            most_trained_muscle_group=top_group.muscle_group if top_group is not None else None,
            muscle_group_count=top_group.count if top_group is not None else None,
        )

    async def get_personal_bests(self, user_id: int) -> List[PersonalBestResponse]:
        records = await self.activity_repo.get_personal_bests(user_id)
        return [
            PersonalBestResponse(
                exercise_id=record.exercise_id,
                exercise_name=record.exercise_name,
                muscle_group=record.muscle_group,
                max_weight=record.weight,
                reps=record.reps,
                date=record.date,
            )
            for record in records
        ]
