"""
Общие фикстуры для всех тестов FitJourney backend.

Стратегия:
- Тестовое FastAPI-приложение создаётся без startup-событий (нет подключения к БД).
- Репозитории заменяются на AsyncMock(spec=...) через dependency_overrides;
  сервисы при этом настоящие, так что эндпоинты проверяются вместе с логикой.
- get_current_user заменяется на лямбду с нужным пользователем.
- JWT-токены создаются через auth_service.create_access_token() для проверки get_current_user.
"""

import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI
from datetime import datetime
from itertools import count
from typing import AsyncGenerator

from app.api.router import api_router
from app.core.exceptions import register_exception_handlers
from app.models.progress import BodyWeightEntry
from app.models.user import User
from app.services.auth_service import auth_service
from app.repositories.activity_repository import ActivityRepository
from app.repositories.goal_repository import GoalRepository
from app.repositories.user_repository import UserRepository
from app.core.dependencies import (
    get_activity_repository,
    get_current_user,
    get_goal_repository,
    get_user_repository,
)


# ---------------------------------------------------------------------------
# Вспомогательные функции
# ---------------------------------------------------------------------------

def create_test_app() -> FastAPI:
    """Тестовое FastAPI-приложение без startup-событий."""
    test_app = FastAPI(title="FitJourney Test App")
    register_exception_handlers(test_app)
    test_app.include_router(api_router, prefix="/api/v1")
    return test_app


def make_auth_headers(user: User) -> dict:
    """Создать заголовки авторизации с валидным JWT для указанного пользователя."""
    access_token = auth_service.create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {access_token}"}


# ---------------------------------------------------------------------------
# Фикстуры пользователей
# ---------------------------------------------------------------------------

@pytest.fixture
def user_fixture() -> User:
    return User(
        id=1,
        email="test@example.com",
        nickname="tester",
        password=auth_service.hash_password("password123"),
        weight=80.0,
        created_at=datetime.utcnow(),
    )


# ---------------------------------------------------------------------------
# Мок-репозитории
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_repo() -> AsyncMock:
    """Мокированный UserRepository для auth-эндпоинтов."""
    return AsyncMock(spec=UserRepository)


@pytest.fixture
def mock_activity_repo() -> AsyncMock:
    """
    ActivityRepository без данных. Сохранение возвращает тот же объект,
    новым сущностям выдаются id, как это сделала бы БД.
    """
    ids = count(1)
    repo = AsyncMock(spec=ActivityRepository)
    repo.get_daily_log_history.return_value = []
    repo.get_daily_log.return_value = None
    repo.get_workouts_for_date.return_value = []
    repo.get_workout_dates.return_value = []
    repo.get_exercise.return_value = None
    repo.get_exercise_sets.return_value = []
    repo.get_body_weight_history.return_value = []
    repo.get_workout.return_value = None
    repo.get_workouts.return_value = []
    repo.count_workouts.return_value = 0
    repo.get_last_workout_date.return_value = None
    repo.get_muscle_group_counts.return_value = []
    repo.get_personal_bests.return_value = []
    repo.delete_workout.return_value = None
    repo.save_daily_log.side_effect = lambda log: log

    def add_workout(workout):
        workout.id = next(ids)
        for workout_set in workout.sets:
            workout_set.id = next(ids)
        return workout

    def add_weight_entry(user_id, weight, recorded_at):
        return BodyWeightEntry(id=next(ids), user_id=user_id, weight=weight, recorded_at=recorded_at)

    repo.add_workout.side_effect = add_workout
    repo.add_weight_entry.side_effect = add_weight_entry
    return repo


@pytest.fixture
def mock_goal_repo() -> AsyncMock:
    ids = count(100)
    repo = AsyncMock(spec=GoalRepository)
    repo.get_goal_by_id.return_value = None
    repo.get_active_goals.return_value = []
    repo.get_completed_goals.return_value = []
    repo.get_milestones.return_value = []
    repo.has_milestone.return_value = False
    repo.update_goal.return_value = None

    def assign_id(entity):
        entity.id = next(ids)
        return entity

    repo.create_goal.side_effect = assign_id
    repo.add_milestone.side_effect = assign_id
    return repo


# ---------------------------------------------------------------------------
# HTTP-клиенты
# ---------------------------------------------------------------------------

@pytest.fixture
async def client(mock_repo) -> AsyncGenerator[AsyncClient, None]:
    """
    Базовый клиент: get_user_repository → mock_repo.
    Используется для auth-эндпоинтов и проверки токенов.
    """
    app = create_test_app()
    app.dependency_overrides[get_user_repository] = lambda: mock_repo
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def user_client(
        user_fixture, mock_repo, mock_activity_repo, mock_goal_repo
) -> AsyncGenerator[AsyncClient, None]:
    """
    Клиент, аутентифицированный как обычный пользователь.
    get_current_user → user_fixture, репозитории → моки.
    """
    app = create_test_app()
    app.dependency_overrides[get_user_repository] = lambda: mock_repo
    app.dependency_overrides[get_activity_repository] = lambda: mock_activity_repo
    app.dependency_overrides[get_goal_repository] = lambda: mock_goal_repo
    app.dependency_overrides[get_current_user] = lambda: user_fixture
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
