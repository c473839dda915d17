"""
Интеграционные тесты эндпоинтов /api/v1/workouts/*.

Покрываемые сценарии:
- POST /workouts: запись тренировки, серия, пересчет целей, неизвестное упражнение → 404
- GET /workouts?day=: тренировки за день
- POST /workouts/rest-day: день отдыха
- POST /workouts/regenerate-logs: пересборка журнала, перевернутый период → 422
- GET|DELETE /workouts/{id}: детали и удаление, чужая тренировка → 404
- GET /workouts/compare: сравнение двух тренировок
"""

import pytest
from datetime import date, datetime, timedelta

from app.models.daily_log import ActivityTypeEnum, DailyLog
from app.models.goal import Goal, GoalTypeEnum
from app.models.workout import Exercise, Workout, WorkoutSet

pytestmark = pytest.mark.integration


def make_workout(user_id: int, day: date, workout_id: int = 1) -> Workout:
    workout = Workout(id=workout_id, user_id=user_id, name="Тестовая тренировка", date=day)
    workout.sets.append(WorkoutSet(id=10, exercise_id=1, set_number=1, weight=50.0, reps=10))
    return workout


# ---------------------------------------------------------------------------
# POST /workouts
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_log_workout_returns_workout_and_streak(user_client, mock_activity_repo):
    today = date.today()
    mock_activity_repo.get_exercise.return_value = Exercise(id=1, name="Жим", muscle_group="chest")
    mock_activity_repo.get_daily_log_history.return_value = [
        DailyLog(user_id=1, date=today - timedelta(days=offset), activity_type=ActivityTypeEnum.workout)
        for offset in range(7)
    ]

    response = await user_client.post("/api/v1/workouts", json={
        "name": "Грудь",
        "date": today.isoformat(),
        "sets": [
            {"exercise_id": 1, "weight": 60, "reps": 10},
            {"exercise_id": 1, "weight": 65, "reps": 8},
        ],
    })

    assert response.status_code == 201
    data = response.json()
    assert [s["set_number"] for s in data["workout"]["sets"]] == [1, 2]
    assert data["activity"]["current_streak"] == 7
    assert data["activity"]["milestone_reached"] == 7
    assert data["achieved_goals"] == []


@pytest.mark.asyncio
async def test_log_workout_completes_frequency_goal(user_client, mock_activity_repo, mock_goal_repo):
    today = datetime.utcnow().date()
    goal = Goal(
        id=5, user_id=1, type=GoalTypeEnum.workout_frequency, target_value=1.0,
        start_date=datetime.utcnow() - timedelta(days=1), end_date=datetime.utcnow() + timedelta(days=6),
        achieved=False, current_progress=0.0,
    )
    mock_goal_repo.get_active_goals.return_value = [goal]
    mock_activity_repo.get_workout_dates.return_value = [today]

    response = await user_client.post("/api/v1/workouts", json={"name": "Бег", "date": today.isoformat()})

    assert response.status_code == 201
    assert response.json()["achieved_goals"] == [5]
    assert goal.achieved is True


@pytest.mark.asyncio
async def test_log_workout_unknown_exercise_returns_404(user_client, mock_activity_repo):
    mock_activity_repo.get_exercise.return_value = None

    response = await user_client.post("/api/v1/workouts", json={
        "name": "x",
        "date": date.today().isoformat(),
        "sets": [{"exercise_id": 99, "weight": 10, "reps": 1}],
    })

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_log_workout_negative_weight_returns_422(user_client):
    response = await user_client.post("/api/v1/workouts", json={
        "name": "x",
        "date": date.today().isoformat(),
        "sets": [{"exercise_id": 1, "weight": -5, "reps": 1}],
    })
    assert response.status_code == 422


# ---------------------------------------------------------------------------
# GET /workouts
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_workouts_for_day(user_client, mock_activity_repo, user_fixture):
    day = date(2024, 3, 15)
    mock_activity_repo.get_workouts_for_date.return_value = [make_workout(user_fixture.id, day)]

    response = await user_client.get("/api/v1/workouts", params={"day": day.isoformat()})

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["sets"][0]["weight"] == 50.0
    mock_activity_repo.get_workouts_for_date.assert_called_once_with(user_fixture.id, day)


# ---------------------------------------------------------------------------
# POST /workouts/rest-day
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_log_rest_day(user_client):
    response = await user_client.post("/api/v1/workouts/rest-day", json={"date": date.today().isoformat()})

    assert response.status_code == 201
    data = response.json()
    assert data["daily_log"]["activity_type"] == "rest"
    assert data["current_streak"] == 0


# ---------------------------------------------------------------------------
# POST /workouts/regenerate-logs
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_regenerate_logs(user_client, mock_activity_repo):
    mock_activity_repo.get_workout_dates.return_value = [date(2024, 3, 1), date(2024, 3, 3)]

    response = await user_client.post("/api/v1/workouts/regenerate-logs", json={
        "start_date": "2024-03-01",
        "end_date": "2024-03-31",
    })

    assert response.status_code == 200
    assert response.json() == {"changed_days": 2}


@pytest.mark.asyncio
async def test_regenerate_logs_inverted_range_returns_422(user_client):
    response = await user_client.post("/api/v1/workouts/regenerate-logs", json={
        "start_date": "2024-03-31",
        "end_date": "2024-03-01",
    })

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_INPUT"


# ---------------------------------------------------------------------------
# GET|DELETE /workouts/{id}, GET /workouts/compare
# ---------------------------------------------------------------------------

BENCH = Exercise(id=1, name="Жим", muscle_group="chest")
ROW = Exercise(id=2, name="Тяга", muscle_group="back")


def make_detailed_workout(workout_id: int, day: date, sets, user_id: int = 1) -> Workout:
    workout = Workout(id=workout_id, user_id=user_id, name="Тренировка", date=day)
    for number, (exercise, weight, reps) in enumerate(sets, start=1):
        workout.sets.append(WorkoutSet(
            id=workout_id * 10 + number, exercise_id=exercise.id, exercise=exercise,
            set_number=number, weight=weight, reps=reps,
        ))
    return workout


@pytest.mark.asyncio
async def test_get_workout_details(user_client, mock_activity_repo):
    mock_activity_repo.get_workout.return_value = make_detailed_workout(
        3, date(2024, 3, 1), [(BENCH, 60.0, 10), (ROW, 50.0, 12), (BENCH, 65.0, 8)]
    )

    response = await user_client.get("/api/v1/workouts/3")

    assert response.status_code == 200
    data = response.json()
    assert data["workout"]["id"] == 3
    assert data["total_volume"] == 1720.0
    assert [(e["exercise_name"], e["sets"], e["max_weight"]) for e in data["exercises"]] == [
        ("Жим", 2, 65.0), ("Тяга", 1, 50.0),
    ]


@pytest.mark.asyncio
async def test_get_foreign_workout_returns_404(user_client, mock_activity_repo):
    mock_activity_repo.get_workout.return_value = make_detailed_workout(3, date(2024, 3, 1), [], user_id=2)

    response = await user_client.get("/api/v1/workouts/3")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_delete_workout(user_client, mock_activity_repo):
    mock_activity_repo.get_workout.return_value = make_detailed_workout(3, date(2024, 3, 1), [(BENCH, 60.0, 10)])

    response = await user_client.delete("/api/v1/workouts/3")

    assert response.status_code == 204
    mock_activity_repo.delete_workout.assert_called_once_with(3)
    mock_activity_repo.save_daily_log.assert_not_called()


@pytest.mark.asyncio
async def test_delete_missing_workout_returns_404(user_client, mock_activity_repo):
    response = await user_client.delete("/api/v1/workouts/99")

    assert response.status_code == 404
    mock_activity_repo.delete_workout.assert_not_called()


@pytest.mark.asyncio
async def test_compare_workouts(user_client, mock_activity_repo):
    workouts = {
        1: make_detailed_workout(1, date(2024, 3, 1), [(BENCH, 60.0, 10), (ROW, 50.0, 10)]),
        2: make_detailed_workout(2, date(2024, 3, 8), [(BENCH, 70.0, 10)]),
    }
    mock_activity_repo.get_workout.side_effect = lambda workout_id: workouts.get(workout_id)

    response = await user_client.get("/api/v1/workouts/compare", params={"first_id": 1, "second_id": 2})

    assert response.status_code == 200
    data = response.json()
    assert data["days_between"] == 7
    assert data["first_total_volume"] == 1100.0
    assert data["second_total_volume"] == 700.0
    assert data["is_improved"] is False
    assert data["matching_exercises"][0]["weight_difference"] == 10.0
    assert [e["exercise_name"] for e in data["unique_to_first"]] == ["Тяга"]
    assert data["unique_to_second"] == []
    assert data["summary"].startswith("Объем снизился")


@pytest.mark.asyncio
async def test_compare_same_workout_returns_422(user_client):
    response = await user_client.get("/api/v1/workouts/compare", params={"first_id": 4, "second_id": 4})
    assert response.status_code == 422
