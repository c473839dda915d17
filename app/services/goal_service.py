"""
Сервис целей: создание/редактирование/удаление, сбор исторических данных
из хранилища активности и расчет прогресса через GoalProgressEngine.

Единственный сохраняемый переход состояния: Active -> Achieved.
Просроченность вычисляется при чтении и в БД не пишется.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from app.core.exceptions import InvalidInputError, NotFoundError
from app.models.goal import Goal, GoalTypeEnum, Milestone, MilestoneTypeEnum
from app.repositories.activity_repository import ActivityRepository
from app.repositories.goal_repository import GoalRepository
from app.schemas.goal import (
    FrequencyGoalCreate, GoalAlertsResponse, GoalDetailResponse, GoalProgressResponse,
    GoalRefreshResponse, GoalResponse, GoalUpdate, StrengthGoalCreate, WeightGoalCreate
)
from app.services.goal_progress import GoalEvaluation, GoalProgressEngine, ProgressSample

logger = logging.getLogger(__name__)


class GoalService:
    def __init__(self, goal_repo: GoalRepository, activity_repo: ActivityRepository):
        self.goal_repo = goal_repo
        self.activity_repo = activity_repo

    @staticmethod
    def _require_future(end_date: datetime, now: datetime) -> None:
        if end_date <= now:
            raise InvalidInputError(
                "Дата окончания цели должна быть в будущем",
                details={"end_date": end_date.isoformat()},
            )

    # ==========================
    # СОЗДАНИЕ / ИЗМЕНЕНИЕ
    # ==========================

    async def create_strength_goal(
            self, user_id: int, data: StrengthGoalCreate, now: Optional[datetime] = None
    ) -> Goal:
        now = now or datetime.utcnow()
        self._require_future(data.target_date, now)
        if await self.activity_repo.get_exercise(data.exercise_id) is None:
            raise NotFoundError(f"Упражнение {data.exercise_id} не найдено")

        goal = Goal(
            user_id=user_id,
            type=GoalTypeEnum.exercise_target,
            exercise_id=data.exercise_id,
            target_value=data.target_weight,
            start_date=now,
            end_date=data.target_date,
            achieved=False,
            current_progress=data.current_weight,
        )
        return await self.goal_repo.create_goal(goal)

    async def create_weight_goal(
            self, user_id: int, data: WeightGoalCreate, now: Optional[datetime] = None
    ) -> Goal:
        now = now or datetime.utcnow()
        self._require_future(data.target_date, now)

        goal = Goal(
            user_id=user_id,
            type=GoalTypeEnum.weight_target,
            target_value=data.target_weight,
            start_date=now,
            end_date=data.target_date,
            achieved=False,
            current_progress=data.current_weight,
        )
        # Стартовый вес сразу попадает в историю взвешиваний
        await self.activity_repo.add_weight_entry(user_id, data.current_weight, now)
        return await self.goal_repo.create_goal(goal)

    async def create_frequency_goal(
            self, user_id: int, data: FrequencyGoalCreate, now: Optional[datetime] = None
    ) -> Goal:
        now = now or datetime.utcnow()
        goal = Goal(
            user_id=user_id,
            type=GoalTypeEnum.workout_frequency,
            target_value=float(data.workouts_per_week * data.duration_weeks),
            start_date=now,
            end_date=now + timedelta(weeks=data.duration_weeks),
            achieved=False,
            current_progress=0.0,
        )
        return await self.goal_repo.create_goal(goal)

    async def get_owned_goal(self, user_id: int, goal_id: int) -> Goal:
        goal = await self.goal_repo.get_goal_by_id(goal_id)
        if goal is None or goal.user_id != user_id:
            raise NotFoundError(f"Цель {goal_id} не найдена")
        return goal

    async def update_goal(
            self, user_id: int, goal_id: int, data: GoalUpdate, now: Optional[datetime] = None
    ) -> Goal:
        now = now or datetime.utcnow()
        goal = await self.get_owned_goal(user_id, goal_id)

        if data.end_date is not None:
            self._require_future(data.end_date, now)
            if data.end_date < goal.start_date:
                raise InvalidInputError("Дата окончания цели раньше даты начала")
            goal.end_date = data.end_date
        if data.target_value is not None:
            goal.target_value = data.target_value

        await self.goal_repo.update_goal(goal)

        # Новая цель могла оказаться уже достигнутой
        evaluation = await self.evaluate_goal(goal, now)
        if evaluation.progress >= 1:
            await self.mark_achieved(goal, now)
        return goal

    async def delete_goal(self, user_id: int, goal_id: int) -> None:
        goal = await self.get_owned_goal(user_id, goal_id)
        await self.goal_repo.delete_goal(goal.id)
        logger.info(f"Пользователь {user_id}: цель {goal_id} удалена")

    # ==========================
    # ПРОГРЕСС
    # ==========================

    async def collect_samples(self, goal: Goal, now: datetime) -> List[ProgressSample]:
        window_end = min(now, goal.end_date)
        if window_end < goal.start_date:
            return []

        if goal.type == GoalTypeEnum.workout_frequency:
            dates = await self.activity_repo.get_workout_dates(
                goal.user_id, goal.start_date.date(), window_end.date()
            )
            return [ProgressSample(date=day) for day in dates]

        if goal.type == GoalTypeEnum.exercise_target:
            if goal.exercise_id is None:
                # Упражнение удалено, прогресса нет, это не ошибка
                return []
            sets = await self.activity_repo.get_exercise_sets(
                goal.user_id, goal.exercise_id, goal.start_date.date(), window_end.date()
            )
            return [ProgressSample(date=record.date, value=record.weight, reps=record.reps) for record in sets]

        entries = await self.activity_repo.get_body_weight_history(goal.user_id, goal.start_date, now)
        return [ProgressSample(date=entry.recorded_at, value=entry.weight) for entry in entries]

    async def evaluate_goal(self, goal: Goal, now: Optional[datetime] = None) -> GoalEvaluation:
        now = now or datetime.utcnow()
        samples = await self.collect_samples(goal, now)
        return GoalProgressEngine.evaluate(goal, samples, now)

    async def _title(self, goal: Goal) -> str:
        if goal.type == GoalTypeEnum.exercise_target:
            exercise = await self.activity_repo.get_exercise(goal.exercise_id) if goal.exercise_id else None
            name = exercise.name if exercise else "Упражнение удалено"
            return f"{name}: силовая цель"
        if goal.type == GoalTypeEnum.workout_frequency:
            return "Частота тренировок"
        return "Цель по весу"

    async def build_progress(self, goal: Goal, now: Optional[datetime] = None) -> GoalProgressResponse:
        return await self._to_response(goal, await self.evaluate_goal(goal, now))

    async def _to_response(self, goal: Goal, evaluation: GoalEvaluation) -> GoalProgressResponse:
        return GoalProgressResponse(
            goal_id=goal.id,
            goal_type=evaluation.goal_type,
            status=evaluation.status,
            baseline=evaluation.baseline,
            target_value=evaluation.target_value,
            current_value=evaluation.current_value,
            progress=evaluation.progress,
            progress_percentage=round(min(evaluation.progress, 1.0) * 100, 1),
            days_left=evaluation.days_left,
            is_expired=evaluation.is_expired,
            projected_completion_date=evaluation.projected_completion_date,
            improvement_percentage=evaluation.improvement_percentage,
            weekly_target=evaluation.weekly_target,
            weight_change=evaluation.weight_change,
            is_weight_loss=evaluation.is_weight_loss,
            is_weight_gain=evaluation.is_weight_gain,
            title=await self._title(goal),
        )

    async def get_goal_detail(self, user_id: int, goal_id: int, now: Optional[datetime] = None) -> GoalDetailResponse:
        goal = await self.get_owned_goal(user_id, goal_id)
        return GoalDetailResponse(
            goal=GoalResponse.model_validate(goal),
            progress=await self.build_progress(goal, now),
        )

    async def list_goals(self, user_id: int, completed: bool = False, now: Optional[datetime] = None) -> List[GoalDetailResponse]:
        if completed:
            goals = await self.goal_repo.get_completed_goals(user_id)
        else:
            goals = await self.goal_repo.get_active_goals(user_id)
        return [
            GoalDetailResponse(goal=GoalResponse.model_validate(goal), progress=await self.build_progress(goal, now))
            for goal in goals
        ]

    async def mark_achieved(self, goal: Goal, now: Optional[datetime] = None) -> bool:
        """Active -> Achieved. Повторный вызов ничего не меняет."""
        if goal.achieved:
            return False

        now = now or datetime.utcnow()
        goal.achieved = True
        goal.achieved_date = now
        await self.goal_repo.update_goal(goal)
        await self.goal_repo.add_milestone(Milestone(
            user_id=goal.user_id,
            type=MilestoneTypeEnum.goal_achieved,
            exercise_id=goal.exercise_id,
            value=goal.target_value,
            date=now,
        ))
        logger.info(f"Пользователь {goal.user_id}: цель {goal.id} достигнута")
        return True

    async def refresh_goals(self, user_id: int, now: Optional[datetime] = None) -> GoalRefreshResponse:
        """Пересчитать все активные цели и отметить достигнутые."""
        now = now or datetime.utcnow()
        goals = await self.goal_repo.get_active_goals(user_id)

        newly_achieved = []
        for goal in goals:
            evaluation = await self.evaluate_goal(goal, now)
            if evaluation.progress >= 1 and await self.mark_achieved(goal, now):
                newly_achieved.append(goal.id)

        return GoalRefreshResponse(evaluated=len(goals), newly_achieved=newly_achieved)

    async def get_alerts(self, user_id: int, now: Optional[datetime] = None) -> GoalAlertsResponse:
        now = now or datetime.utcnow()
        goals = await self.goal_repo.get_active_goals(user_id)

        near_completion = []
        expiring_soon = []
        for goal in goals:
            evaluation = await self.evaluate_goal(goal, now)
            near = GoalProgressEngine.is_near_completion(goal, evaluation)
            expiring = GoalProgressEngine.is_expiring(goal, now)
            if not (near or expiring):
                continue

            progress = await self._to_response(goal, evaluation)
            if near:
                near_completion.append(progress)
            if expiring:
                expiring_soon.append(progress)

        return GoalAlertsResponse(near_completion=near_completion, expiring_soon=expiring_soon)
