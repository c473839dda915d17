from datetime import date, datetime
from typing import List, NamedTuple, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import InvalidInputError
from app.models.daily_log import DailyLog
from app.models.progress import BodyWeightEntry
from app.models.workout import Exercise, Workout, WorkoutSet


class SetRecord(NamedTuple):
    date: date
    weight: Optional[float]
    reps: Optional[int]


class MuscleGroupCount(NamedTuple):
    muscle_group: str
    count: int


class PersonalBestRecord(NamedTuple):
    exercise_id: int
    exercise_name: str
    muscle_group: str
    weight: float
    reps: Optional[int]
    date: date


def _check_range(start, end) -> None:
    if start is not None and end is not None and end < start:
        raise InvalidInputError(
            "Дата окончания периода раньше даты начала",
            details={"start": start.isoformat(), "end": end.isoformat()},
        )


class ActivityRepository:
    """Хранилище активности: дневной журнал, тренировки, подходы и взвешивания."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # --- Дневной журнал ---

    async def get_daily_log_history(self, user_id: int, start_date: date, end_date: date) -> List[DailyLog]:
        _check_range(start_date, end_date)
        result = await self.db.execute(
            select(DailyLog)
            .where(
                DailyLog.user_id == user_id,
                DailyLog.date >= start_date,
                DailyLog.date <= end_date,
            )
            .order_by(DailyLog.date.desc())
        )
        return list(result.scalars().all())

    async def get_daily_log(self, user_id: int, day: date) -> Optional[DailyLog]:
        result = await self.db.execute(
            select(DailyLog).where(DailyLog.user_id == user_id, DailyLog.date == day)
        )
        return result.scalar_one_or_none()

    async def save_daily_log(self, log: DailyLog) -> DailyLog:
        self.db.add(log)
        await self.db.commit()
        await self.db.refresh(log)
        return log

    # --- Тренировки ---

    async def add_workout(self, workout: Workout) -> Workout:
        self.db.add(workout)
        await self.db.commit()
        await self.db.refresh(workout, attribute_names=["sets"])
        return workout

    async def get_workouts_for_date(self, user_id: int, day: date) -> List[Workout]:
        result = await self.db.execute(
            select(Workout)
            .options(selectinload(Workout.sets))
            .where(Workout.user_id == user_id, Workout.date == day)
            .order_by(Workout.created_at.asc())
        )
        return list(result.scalars().all())

    def _workouts_query(self):
        return select(Workout).options(selectinload(Workout.sets).selectinload(WorkoutSet.exercise))

    async def get_workout(self, workout_id: int) -> Optional[Workout]:
        result = await self.db.execute(self._workouts_query().where(Workout.id == workout_id))
        return result.scalar_one_or_none()

    async def get_workouts(
            self,
            user_id: int,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None
    ) -> List[Workout]:
        """Тренировки за период вместе с подходами и упражнениями."""
        _check_range(start_date, end_date)
        query = self._workouts_query().where(Workout.user_id == user_id)
        if start_date is not None:
            query = query.where(Workout.date >= start_date)
        if end_date is not None:
            query = query.where(Workout.date <= end_date)
        result = await self.db.execute(query.order_by(Workout.date.asc(), Workout.created_at.asc()))
        return list(result.scalars().all())

    async def delete_workout(self, workout_id: int) -> None:
        # Дневной журнал не трогаем: день остается отмеченным
        await self.db.execute(delete(WorkoutSet).where(WorkoutSet.workout_id == workout_id))
        await self.db.execute(delete(Workout).where(Workout.id == workout_id))
        await self.db.commit()

    async def count_workouts(self, user_id: int, start_date: Optional[date] = None) -> int:
        query = select(func.count(Workout.id)).where(Workout.user_id == user_id)
        if start_date is not None:
            query = query.where(Workout.date >= start_date)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def get_last_workout_date(self, user_id: int) -> Optional[date]:
        result = await self.db.execute(select(func.max(Workout.date)).where(Workout.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_muscle_group_counts(
            self,
            user_id: int,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None
    ) -> List[MuscleGroupCount]:
        """Сколько раз группа мышц встречалась в тренировках: пара (тренировка, упражнение) считается один раз."""
        _check_range(start_date, end_date)
        pairs = (
            select(WorkoutSet.workout_id, WorkoutSet.exercise_id)
            .join(Workout, WorkoutSet.workout_id == Workout.id)
            .where(Workout.user_id == user_id)
        )
        if start_date is not None:
            pairs = pairs.where(Workout.date >= start_date)
        if end_date is not None:
            pairs = pairs.where(Workout.date <= end_date)
        pairs = pairs.distinct().subquery()

        total = func.count().label("count")
        result = await self.db.execute(
            select(Exercise.muscle_group, total)
            .select_from(pairs)
            .join(Exercise, Exercise.id == pairs.c.exercise_id)
            .group_by(Exercise.muscle_group)
            .order_by(total.desc(), Exercise.muscle_group.asc())
        )
        return [MuscleGroupCount(*row) for row in result.all()]

    async def get_workout_dates(
            self,
            user_id: int,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None
    ) -> List[date]:
        _check_range(start_date, end_date)
        query = select(Workout.date).where(Workout.user_id == user_id).distinct()
        if start_date is not None:
            query = query.where(Workout.date >= start_date)
        if end_date is not None:
            query = query.where(Workout.date <= end_date)
        result = await self.db.execute(query.order_by(Workout.date.asc()))
        return list(result.scalars().all())

    async def get_exercise(self, exercise_id: int) -> Optional[Exercise]:
        return await self.db.get(Exercise, exercise_id)

    async def get_exercise_sets(
            self,
            user_id: int,
            exercise_id: int,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None
    ) -> List[SetRecord]:
        _check_range(start_date, end_date)
        query = (
            select(Workout.date, WorkoutSet.weight, WorkoutSet.reps)
            .join(Workout, WorkoutSet.workout_id == Workout.id)
            .where(
                Workout.user_id == user_id,
                WorkoutSet.exercise_id == exercise_id,
                WorkoutSet.weight.is_not(None),
            )
        )
        if start_date is not None:
            query = query.where(Workout.date >= start_date)
        if end_date is not None:
            query = query.where(Workout.date <= end_date)
        result = await self.db.execute(query.order_by(Workout.date.asc(), WorkoutSet.set_number.asc()))
        return [SetRecord(*row) for row in result.all()]

    async def get_personal_bests(self, user_id: int) -> List[PersonalBestRecord]:
        """Подход с максимальным весом по каждому упражнению, по алфавиту."""
        result = await self.db.execute(
            select(
                Exercise.id, Exercise.name, Exercise.muscle_group,
                WorkoutSet.weight, WorkoutSet.reps, Workout.date,
            )
            .join(WorkoutSet, WorkoutSet.exercise_id == Exercise.id)
            .join(Workout, WorkoutSet.workout_id == Workout.id)
            .where(Workout.user_id == user_id, WorkoutSet.weight.is_not(None))
            .order_by(Exercise.name.asc(), WorkoutSet.weight.desc(), Workout.date.asc())
        )

        bests: List[PersonalBestRecord] = []
        seen = set()
        for row in result.all():
            if row[0] in seen:
                continue
            seen.add(row[0])
            bests.append(PersonalBestRecord(*row))
        return bests

    # --- Вес тела ---

    async def get_body_weight_history(
            self,
            user_id: int,
            start: Optional[datetime] = None,
            end: Optional[datetime] = None
    ) -> List[BodyWeightEntry]:
        _check_range(start, end)
        query = select(BodyWeightEntry).where(BodyWeightEntry.user_id == user_id)
        if start is not None:
            query = query.where(BodyWeightEntry.recorded_at >= start)
        if end is not None:
            query = query.where(BodyWeightEntry.recorded_at <= end)
        result = await self.db.execute(query.order_by(BodyWeightEntry.recorded_at.asc()))
        return list(result.scalars().all())

    async def add_weight_entry(self, user_id: int, weight: float, recorded_at: datetime) -> BodyWeightEntry:
        entry = BodyWeightEntry(user_id=user_id, weight=weight, recorded_at=recorded_at)
        self.db.add(entry)
        await self.db.commit()
        await self.db.refresh(entry)
        return entry
