import logging

from app.core.exceptions import InvalidInputError, NotFoundError
from app.models.workout import Workout
from app.repositories.activity_repository import ActivityRepository
from app.schemas.workout import WorkoutComparisonResponse, WorkoutDetailResponse
from app.services.workout_analysis import WorkoutAnalyzer

logger = logging.getLogger(__name__)


class WorkoutService:
    """Просмотр, удаление и сравнение записанных тренировок."""

    def __init__(self, activity_repo: ActivityRepository):
        self.activity_repo = activity_repo

    async def get_owned_workout(self, user_id: int, workout_id: int) -> Workout:
        workout = await self.activity_repo.get_workout(workout_id)
        if workout is None or workout.user_id != user_id:
            raise NotFoundError(f"Тренировка {workout_id} не найдена")
        return workout

    async def get_details(self, user_id: int, workout_id: int) -> WorkoutDetailResponse:
        workout = await self.get_owned_workout(user_id, workout_id)
        return WorkoutAnalyzer.details(workout)

    async def delete_workout(self, user_id: int, workout_id: int) -> None:
        workout = await self.get_owned_workout(user_id, workout_id)
        await self.activity_repo.delete_workout(workout.id)
        logger.info(f"Пользователь {user_id}: тренировка {workout_id} удалена")

    async def compare(self, user_id: int, first_id: int, second_id: int) -> WorkoutComparisonResponse:
        if first_id == second_id:
            raise InvalidInputError(
                "Для сравнения нужны две разные тренировки",
                details={"first_id": first_id, "second_id": second_id},
            )
        first = await self.get_owned_workout(user_id, first_id)
        second = await self.get_owned_workout(user_id, second_id)
        return WorkoutAnalyzer.compare(first, second)
