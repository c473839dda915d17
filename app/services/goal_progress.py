"""
Расчет прогресса по целям.

Движок чистый: получает цель, уже отфильтрованные исторические точки
(ProgressSample) и момент времени now, возвращает GoalEvaluation.

Для каждого типа цели свой калькулятор:
- WorkoutFrequency: число различных дней с тренировками в окне цели / цель
- ExerciseTarget: лучший вес в окне цели, нормированный от базового значения
- WeightTarget: последнее взвешивание, нормированное от базового значения

Деление на ноль никогда не выходит наружу: вместо NaN/inf возвращаются
0, 1 или None.
"""
import enum
from abc import ABC, abstractmethod
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from app.core.dates import to_naive_utc
from app.core.exceptions import InvalidInputError
from app.models.goal import Goal, GoalTypeEnum


class GoalStatusEnum(str, enum.Enum):
    active = "active"
    achieved = "achieved"
    expired = "expired"


@dataclass(frozen=True)
class ProgressSample:
    """Историческая точка: взвешивание, тренировка (value=None) или подход."""
    date: datetime
    value: Optional[float] = None
    reps: Optional[int] = None


@dataclass(frozen=True)
class GoalEvaluation:
    goal_id: Optional[int]
    goal_type: GoalTypeEnum
    status: GoalStatusEnum
    baseline: float
    target_value: float
    current_value: float
    progress: float
    days_left: int
    is_expired: bool
    projected_completion_date: Optional[datetime] = None
    improvement_percentage: Optional[float] = None
    weekly_target: Optional[float] = None
    weight_change: Optional[float] = None
    is_weight_loss: bool = False
    is_weight_gain: bool = False


Series = List[Tuple[datetime, float]]


def as_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    raise InvalidInputError(f"Ожидалась дата, получено: {value!r}")


def _days_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 86400


def normalized_progress(current: float, baseline: float, target: float) -> float:
    """(current - baseline) / (target - baseline); при target == baseline 1 или 0."""
    denominator = target - baseline
    if denominator == 0:
        return 1.0 if current >= target else 0.0
    return max(0.0, (current - baseline) / denominator)


def improvement_percentage(starting: Optional[float], current: Optional[float]) -> Optional[float]:
    """Процент изменения относительно стартового значения; None, если старт 0 или неизвестен."""
    if starting is None or current is None or starting == 0:
        return None
    return (current - starting) / starting * 100


def project_completion(series: Series, target: float) -> Optional[datetime]:
    """
    Линейная экстраполяция по самой ранней и самой поздней точке.

    None, если точек меньше двух, скорость нулевая или метрика движется
    в сторону от цели.
    """
    if len(series) < 2:
        return None

    ordered = sorted(series, key=lambda point: point[0])
    (earliest_date, earliest_value), (latest_date, latest_value) = ordered[0], ordered[-1]

    elapsed = _days_between(earliest_date, latest_date)
    if elapsed <= 0:
        return None

    daily_rate = (latest_value - earliest_value) / elapsed
    if daily_rate == 0:
        return None

    remaining = target - latest_value
    if remaining == 0:
        return latest_date
    if (remaining > 0) != (daily_rate > 0):
        return None

    days_needed = abs(remaining) / abs(daily_rate)
    return latest_date + timedelta(days=days_needed)


class GoalProgressCalculator(ABC):
    goal_type: GoalTypeEnum

    def window_end(self, goal: Goal, now: datetime) -> datetime:
        return min(now, as_datetime(goal.end_date))

    def in_window(self, goal: Goal, sample: ProgressSample, now: datetime) -> bool:
        day = as_datetime(sample.date).date()
        return as_datetime(goal.start_date).date() <= day <= self.window_end(goal, now).date()

    @abstractmethod
    def series(self, goal: Goal, samples: Sequence[ProgressSample], now: datetime) -> Series:
        raise NotImplementedError

    @abstractmethod
    def current_value(self, goal: Goal, series: Series) -> float:
        raise NotImplementedError

    def progress(self, goal: Goal, current: float) -> float:
        return normalized_progress(current, goal.current_progress or 0.0, goal.target_value)

    def extras(self, goal: Goal, series: Series, current: float) -> dict:
        return {}


class WorkoutFrequencyCalculator(GoalProgressCalculator):
    goal_type = GoalTypeEnum.workout_frequency

    def series(self, goal, samples, now):
        days = sorted({
            as_datetime(sample.date).date()
            for sample in samples
            if self.in_window(goal, sample, now)
        })
        # Накопительное число тренировок по дням
        return [(as_datetime(day), float(index)) for index, day in enumerate(days, start=1)]

    def current_value(self, goal, series):
        return float(len(series))

    def progress(self, goal, current):
        if goal.target_value == 0:
            return 1.0 if current >= goal.target_value else 0.0
        return current / goal.target_value

    def extras(self, goal, series, current):
        weeks = (as_datetime(goal.end_date) - as_datetime(goal.start_date)).days / 7
        return {"weekly_target": goal.target_value / weeks if weeks > 0 else None}


class ExerciseTargetCalculator(GoalProgressCalculator):
    goal_type = GoalTypeEnum.exercise_target

    def series(self, goal, samples, now):
        best_by_day: Dict[date, float] = {}
        for sample in samples:
            if sample.value is None or not self.in_window(goal, sample, now):
                continue
            day = as_datetime(sample.date).date()
            best_by_day[day] = max(best_by_day.get(day, sample.value), sample.value)
        return [(as_datetime(day), weight) for day, weight in sorted(best_by_day.items())]

    def current_value(self, goal, series):
        if not series:
            return goal.current_progress or 0.0
        return max(weight for _, weight in series)

    def extras(self, goal, series, current):
        starting = series[0][1] if series else None
        return {"improvement_percentage": improvement_percentage(starting, current if series else None)}


class WeightTargetCalculator(GoalProgressCalculator):
    goal_type = GoalTypeEnum.weight_target

    def series(self, goal, samples, now):
        start = as_datetime(goal.start_date).date()
        points = [
            (as_datetime(sample.date), sample.value)
            for sample in samples
            if sample.value is not None
            and as_datetime(sample.date) <= now
            and as_datetime(sample.date).date() >= start
        ]
        return sorted(points, key=lambda point: point[0])

    def current_value(self, goal, series):
        if not series:
            return goal.current_progress or 0.0
        return series[-1][1]

    def extras(self, goal, series, current):
        baseline = goal.current_progress or 0.0
        return {
            "is_weight_loss": goal.target_value < baseline,
            "is_weight_gain": goal.target_value > baseline,
            "weight_change": current - baseline,
            "improvement_percentage": improvement_percentage(baseline, current) if series else None,
        }


CALCULATORS: Dict[GoalTypeEnum, GoalProgressCalculator] = {
    calculator.goal_type: calculator
    for calculator in (
        WorkoutFrequencyCalculator(),
        ExerciseTargetCalculator(),
        WeightTargetCalculator(),
    )
}

_missing = set(GoalTypeEnum) - set(CALCULATORS)
if _missing:
    raise RuntimeError(f"Нет калькулятора прогресса для типов целей: {sorted(_missing)}")


class GoalProgressEngine:
    NEAR_COMPLETION_THRESHOLD = 0.9
    EXPIRING_WITHIN_DAYS = 3

    @staticmethod
    def validate(goal: Goal) -> None:
        if goal.target_value is None:
            raise InvalidInputError("У цели не задано целевое значение")
        if goal.target_value < 0:
            raise InvalidInputError("Целевое значение не может быть отрицательным")
        if goal.start_date is None or goal.end_date is None:
            raise InvalidInputError("У цели должны быть даты начала и окончания")
        if as_datetime(goal.end_date) < as_datetime(goal.start_date):
            raise InvalidInputError("Дата окончания цели раньше даты начала")

    @staticmethod
    def days_left(goal: Goal, now: datetime) -> int:
        return max(0, math.ceil(_days_between(now, as_datetime(goal.end_date))))

    @classmethod
    def evaluate(
            cls,
            goal: Goal,
            samples: Optional[Sequence[ProgressSample]] = None,
            now: Optional[datetime] = None
    ) -> GoalEvaluation:
        cls.validate(goal)
        now = to_naive_utc(now) if now is not None else datetime.utcnow()
        goal_type = GoalTypeEnum(goal.type)
        calculator = CALCULATORS[goal_type]

        series = calculator.series(goal, list(samples or []), now)
        current = calculator.current_value(goal, series)
        # Нет данных, нет прогресса
        progress = calculator.progress(goal, current) if series else 0.0
        is_expired = now > as_datetime(goal.end_date) and progress < 1

        if goal.achieved:
            status = GoalStatusEnum.achieved
        elif is_expired:
            status = GoalStatusEnum.expired
        else:
            status = GoalStatusEnum.active

        return GoalEvaluation(
            goal_id=goal.id,
            goal_type=goal_type,
            status=status,
            baseline=goal.current_progress or 0.0,
            target_value=goal.target_value,
            current_value=current,
            progress=progress,
            days_left=cls.days_left(goal, now),
            is_expired=is_expired,
            projected_completion_date=project_completion(series, goal.target_value),
            **calculator.extras(goal, series, current),
        )

    @classmethod
    def is_near_completion(cls, goal: Goal, evaluation: GoalEvaluation) -> bool:
        return not goal.achieved and evaluation.progress >= cls.NEAR_COMPLETION_THRESHOLD

    @classmethod
    def is_expiring(cls, goal: Goal, now: Optional[datetime] = None) -> bool:
        now = now or datetime.utcnow()
        end_date = as_datetime(goal.end_date)
        return not goal.achieved and now <= end_date <= now + timedelta(days=cls.EXPIRING_WITHIN_DAYS)
