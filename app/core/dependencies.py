from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.config import settings
from app.models.user import User
from app.repositories.activity_repository import ActivityRepository
from app.repositories.goal_repository import GoalRepository
from app.repositories.user_repository import UserRepository
from app.services.goal_service import GoalService
from app.services.progress_service import ProgressService
from app.services.streak_service import StreakService
from app.services.workout_service import WorkoutService


security = HTTPBearer()


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    """Фабрика репозитория, инжектируется в эндпоинты через Depends."""
    return UserRepository(db)


def get_activity_repository(db: AsyncSession = Depends(get_db)) -> ActivityRepository:
    return ActivityRepository(db)


def get_goal_repository(db: AsyncSession = Depends(get_db)) -> GoalRepository:
    return GoalRepository(db)


def get_streak_service(
        activity_repo: ActivityRepository = Depends(get_activity_repository),
        goal_repo: GoalRepository = Depends(get_goal_repository),
) -> StreakService:
    return StreakService(activity_repo, goal_repo)


def get_goal_service(
        goal_repo: GoalRepository = Depends(get_goal_repository),
        activity_repo: ActivityRepository = Depends(get_activity_repository),
) -> GoalService:
    return GoalService(goal_repo, activity_repo)


def get_progress_service(
        activity_repo: ActivityRepository = Depends(get_activity_repository),
) -> ProgressService:
    return ProgressService(activity_repo)


def get_workout_service(
        activity_repo: ActivityRepository = Depends(get_activity_repository),
) -> WorkoutService:
    return WorkoutService(activity_repo)


async def get_current_user(
        credentials: HTTPAuthorizationCredentials = Depends(security),
        repo: UserRepository = Depends(get_user_repository),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Невалидный токен доступа",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
        user_id: str = payload.get("sub")
        if user_id is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user = await repo.get_by_id(int(user_id))
    if user is None:
        raise credentials_exception

    return user
