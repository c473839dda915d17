"""
Объем и сравнение тренировок.

Объем подхода: вес × повторения. Пустой вес или пустые повторения дают 0.
Процент изменения считается от первого значения; если оно 0, изменение 0.
"""
from typing import Dict, Iterable, List, Optional

from app.models.workout import Workout, WorkoutSet
from app.schemas.workout import (
    ExerciseBreakdown,
    ExerciseComparison,
    WorkoutComparisonResponse,
    WorkoutDetailResponse,
    WorkoutResponse,
)


def percent_change(first: float, second: float) -> float:
    if first <= 0:
        return 0.0
    return (second - first) / first * 100


class WorkoutAnalyzer:
    # Пороги для пояснений по упражнению
    EXPLAIN_VOLUME_SHIFT = 15
    EXPLAIN_VOLUME_JUMP = 50
    # Пороги для общего вывода
    SUMMARY_VOLUME_GROWTH = 30
    SUMMARY_VOLUME_DROP = -20
    # Сильно разошедшиеся вес и объем
    INCONSISTENT_WEIGHT = 10
    INCONSISTENT_VOLUME = 50

    @classmethod
    def set_volume(cls, workout_set: WorkoutSet) -> float:
        if workout_set.weight is None or workout_set.reps is None:
            return 0.0
        return workout_set.weight * workout_set.reps

    @classmethod
    def workout_volume(cls, workout: Workout) -> float:
        return sum(cls.set_volume(workout_set) for workout_set in workout.sets)

    @classmethod
    def breakdown(cls, sets: Iterable[WorkoutSet]) -> List[ExerciseBreakdown]:
        """Сводка по упражнениям в порядке первого подхода."""
        grouped: Dict[int, List[WorkoutSet]] = {}
        for workout_set in sets:
            grouped.setdefault(workout_set.exercise_id, []).append(workout_set)

        result = []
        for exercise_id, exercise_sets in grouped.items():
            exercise = exercise_sets[0].exercise
            result.append(ExerciseBreakdown(
                exercise_id=exercise_id,
                exercise_name=exercise.name if exercise is not None else "",
                muscle_group=exercise.muscle_group if exercise is not None else "",
                sets=len(exercise_sets),
                total_reps=sum(item.reps or 0 for item in exercise_sets),
                max_weight=max((item.weight or 0.0 for item in exercise_sets), default=0.0),
                volume=sum(cls.set_volume(item) for item in exercise_sets),
            ))
        return result

    @classmethod
    def details(cls, workout: Workout) -> WorkoutDetailResponse:
        return WorkoutDetailResponse(
            workout=WorkoutResponse.model_validate(workout),
            total_volume=cls.workout_volume(workout),
            exercises=cls.breakdown(workout.sets),
        )

    @classmethod
    def _explain(cls, item: ExerciseComparison) -> Optional[str]:
        volume_change = item.volume_percent_change
        weight_change = item.weight_percent_change
        reps_difference = item.second_total_reps - item.first_total_reps

        if volume_change > cls.EXPLAIN_VOLUME_SHIFT and weight_change <= 0:
            weight_word = "меньшем" if item.weight_difference < 0 else "том же"
            reason = "больше повторений" if reps_difference > 0 else "больше подходов"
            return f"Объем вырос на {volume_change:.1f}% при {weight_word} максимальном весе: {reason}"
        if volume_change < -cls.EXPLAIN_VOLUME_SHIFT and weight_change > 0:
            reason = "меньше повторений" if reps_difference < 0 else "меньше подходов"
            return f"Объем снизился на {abs(volume_change):.1f}% при большем максимальном весе: {reason}"
        if volume_change > cls.EXPLAIN_VOLUME_JUMP:
            return f"Объем вырос на {volume_change:.1f}%, заметный рост работоспособности"
        return None

    @classmethod
    def _compare_exercise(cls, first: ExerciseBreakdown, second: ExerciseBreakdown) -> ExerciseComparison:
        item = ExerciseComparison(
            exercise_id=first.exercise_id,
            exercise_name=first.exercise_name,
            muscle_group=first.muscle_group,
            first_max_weight=first.max_weight,
            second_max_weight=second.max_weight,
            weight_difference=second.max_weight - first.max_weight,
            weight_percent_change=percent_change(first.max_weight, second.max_weight),
            first_volume=first.volume,
            second_volume=second.volume,
            volume_difference=second.volume - first.volume,
            volume_percent_change=percent_change(first.volume, second.volume),
            first_sets=first.sets,
            second_sets=second.sets,
            first_total_reps=first.total_reps,
            second_total_reps=second.total_reps,
        )
        item.explanation = cls._explain(item)
        return item

    @classmethod
    def _summary(cls, volume_change: float, matching: List[ExerciseComparison]) -> Optional[str]:
        if not matching:
            return None
        if volume_change > cls.SUMMARY_VOLUME_GROWTH and any(item.weight_percent_change > 0 for item in matching):
            return "Отличный прогресс: выросли и объем, и рабочие веса"
        if volume_change < cls.SUMMARY_VOLUME_DROP:
            return "Объем снизился: меньше подходов, повторений или меньше вес"
        if all(item.weight_percent_change < 0 for item in matching):
            return "Веса снизились во всех упражнениях: усталость или работа над техникой"
        return None

    @classmethod
    def _is_inconsistent(cls, item: ExerciseComparison) -> bool:
        return (
            (item.weight_percent_change < -cls.INCONSISTENT_WEIGHT
             and item.volume_percent_change > cls.INCONSISTENT_VOLUME)
            or (item.weight_percent_change > cls.INCONSISTENT_WEIGHT
                and item.volume_percent_change < -cls.INCONSISTENT_VOLUME)
        )

    @classmethod
    def compare(cls, first: Workout, second: Workout) -> WorkoutComparisonResponse:
        """Сравнение двух тренировок: общий объем и упражнения, которые есть в обеих."""
        first_volume = cls.workout_volume(first)
        second_volume = cls.workout_volume(second)
        volume_change = percent_change(first_volume, second_volume)

        second_by_id = {item.exercise_id: item for item in cls.breakdown(second.sets)}
        matching: List[ExerciseComparison] = []
        unique_to_first: List[ExerciseBreakdown] = []
        for item in cls.breakdown(first.sets):
            other = second_by_id.pop(item.exercise_id, None)
            if other is None:
                unique_to_first.append(item)
            else:
                matching.append(cls._compare_exercise(item, other))

        # Сначала самые большие изменения веса, в любую сторону
        matching.sort(key=lambda item: abs(item.weight_percent_change), reverse=True)

        return WorkoutComparisonResponse(
            first_workout_id=first.id,
            second_workout_id=second.id,
            days_between=(second.date - first.date).days,
            first_total_volume=first_volume,
            second_total_volume=second_volume,
            volume_difference=second_volume - first_volume,
            volume_percent_change=volume_change,
            is_improved=volume_change > 0,
            matching_exercises=matching,
            unique_to_first=unique_to_first,
            unique_to_second=list(second_by_id.values()),
            has_inconsistent_data=any(cls._is_inconsistent(item) for item in matching),
            summary=cls._summary(volume_change, matching),
        )
