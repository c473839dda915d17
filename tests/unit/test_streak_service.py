"""
Модульные тесты для StreakService.

Покрываемые сценарии:
- log_workout: проверка упражнений, нумерация подходов, запись в дневной журнал
- log_rest_day: не заменяет уже записанную тренировку
- отметки 7/30 дней: создаются один раз
- regenerate_daily_logs: восстановление пропущенных записей
- get_summary / get_calendar
"""

import pytest
from datetime import date, timedelta

from app.core.exceptions import InvalidInputError, NotFoundError
from app.models.daily_log import ActivityTypeEnum, DailyLog
from app.models.goal import MilestoneTypeEnum
from app.models.workout import Exercise
from app.schemas.workout import SetInput, WorkoutCreate
from app.services.streak_service import StreakService

pytestmark = pytest.mark.unit

TODAY = date(2024, 3, 15)


@pytest.fixture
def service(mock_activity_repo, mock_goal_repo) -> StreakService:
    return StreakService(mock_activity_repo, mock_goal_repo)


def history(end: date, length: int, activity_type=ActivityTypeEnum.workout):
    return [
        DailyLog(user_id=1, date=end - timedelta(days=offset), activity_type=activity_type)
        for offset in range(length)
    ]


# ---------------------------------------------------------------------------
# log_workout
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_log_workout_numbers_sets_per_exercise(service, mock_activity_repo):
    mock_activity_repo.get_exercise.return_value = Exercise(id=1, name="Жим лежа", muscle_group="chest")
    mock_activity_repo.get_daily_log_history.return_value = history(TODAY, 1)

    workout, activity = await service.log_workout(1, WorkoutCreate(
        name="Грудь",
        date=TODAY,
        sets=[
            SetInput(exercise_id=1, weight=60, reps=10),
            SetInput(exercise_id=2, weight=20, reps=12),
            SetInput(exercise_id=1, weight=70, reps=8),
        ],
    ))

    assert [(s.exercise_id, s.set_number) for s in workout.sets] == [(1, 1), (2, 1), (1, 2)]
    assert activity.daily_log.activity_type == ActivityTypeEnum.workout
    assert activity.current_streak == 1
    assert activity.milestone_reached is None
    saved_log = mock_activity_repo.save_daily_log.call_args.args[0]
    assert saved_log.date == TODAY


@pytest.mark.asyncio
async def test_log_workout_unknown_exercise_raises_not_found(service, mock_activity_repo):
    mock_activity_repo.get_exercise.return_value = None

    with pytest.raises(NotFoundError):
        await service.log_workout(1, WorkoutCreate(
            name="x", date=TODAY, sets=[SetInput(exercise_id=99, weight=10, reps=1)]
        ))
    mock_activity_repo.add_workout.assert_not_called()


@pytest.mark.asyncio
async def test_log_workout_upgrades_existing_rest_day(service, mock_activity_repo):
    rest = DailyLog(user_id=1, date=TODAY, activity_type=ActivityTypeEnum.rest)
    mock_activity_repo.get_daily_log.return_value = rest

    _, activity = await service.log_workout(1, WorkoutCreate(name="Бег", date=TODAY))

    assert rest.activity_type == ActivityTypeEnum.workout
    assert activity.daily_log.activity_type == ActivityTypeEnum.workout


# ---------------------------------------------------------------------------
# log_rest_day
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_rest_day_does_not_replace_workout(service, mock_activity_repo):
    mock_activity_repo.get_daily_log.return_value = DailyLog(
        user_id=1, date=TODAY, activity_type=ActivityTypeEnum.workout
    )

    activity = await service.log_rest_day(1, TODAY)

    assert activity.daily_log.activity_type == ActivityTypeEnum.workout
    mock_activity_repo.save_daily_log.assert_not_called()


@pytest.mark.asyncio
async def test_rest_day_creates_log(service, mock_activity_repo):
    activity = await service.log_rest_day(1, TODAY, "восстановление")

    assert activity.daily_log.activity_type == ActivityTypeEnum.rest
    assert activity.daily_log.notes == "восстановление"


# ---------------------------------------------------------------------------
# Отметки серий
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_seventh_day_records_milestone(service, mock_activity_repo, mock_goal_repo):
    mock_activity_repo.get_daily_log_history.return_value = history(TODAY, 7)

    activity = await service.log_rest_day(1, TODAY)

    assert activity.current_streak == 7
    assert activity.milestone_reached == 7
    milestone = mock_goal_repo.add_milestone.call_args.args[0]
    assert milestone.type == MilestoneTypeEnum.longest_streak
    assert milestone.value == 7


@pytest.mark.asyncio
async def test_milestone_is_not_duplicated(service, mock_activity_repo, mock_goal_repo):
    mock_activity_repo.get_daily_log_history.return_value = history(TODAY, 30)
    mock_goal_repo.has_milestone.return_value = True

    activity = await service.log_rest_day(1, TODAY)

    assert activity.current_streak == 30
    assert activity.milestone_reached is None
    mock_goal_repo.add_milestone.assert_not_called()


@pytest.mark.asyncio
async def test_non_milestone_length_records_nothing(service, mock_activity_repo, mock_goal_repo):
    mock_activity_repo.get_daily_log_history.return_value = history(TODAY, 8)

    activity = await service.log_rest_day(1, TODAY)

    assert activity.milestone_reached is None
    mock_goal_repo.add_milestone.assert_not_called()


# ---------------------------------------------------------------------------
# regenerate_daily_logs
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_regenerate_daily_logs_counts_changed_days(service, mock_activity_repo):
    days = [TODAY - timedelta(days=2), TODAY - timedelta(days=1), TODAY]
    mock_activity_repo.get_workout_dates.return_value = days
    existing = {
        days[0]: DailyLog(user_id=1, date=days[0], activity_type=ActivityTypeEnum.workout),
        days[1]: DailyLog(user_id=1, date=days[1], activity_type=ActivityTypeEnum.rest),
    }
    mock_activity_repo.get_daily_log.side_effect = lambda user_id, day: existing.get(day)

    changed = await service.regenerate_daily_logs(1, days[0], TODAY)

    assert changed == 2
    assert existing[days[1]].activity_type == ActivityTypeEnum.workout


@pytest.mark.asyncio
async def test_regenerate_daily_logs_rejects_inverted_range(service):
    with pytest.raises(InvalidInputError):
        await service.regenerate_daily_logs(1, TODAY, TODAY - timedelta(days=1))


# ---------------------------------------------------------------------------
# get_summary / get_calendar
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_summary(service, mock_activity_repo):
    mock_activity_repo.get_daily_log_history.return_value = (
        history(TODAY, 3) + history(TODAY - timedelta(days=10), 5, ActivityTypeEnum.rest)
    )

    summary = await service.get_summary(1, TODAY)

    assert summary.current_streak == 3
    assert summary.longest_streak == 5
    assert summary.today_has_activity is True
    assert summary.monthly_activity.active_days == 8
    assert summary.monthly_activity.label == "8/15"


@pytest.mark.asyncio
async def test_get_summary_empty_history(service):
    summary = await service.get_summary(1, TODAY)

    assert summary.current_streak == 0
    assert summary.longest_streak == 0
    assert summary.today_has_activity is False


@pytest.mark.asyncio
async def test_get_calendar_marks_milestones_inside_range(service, mock_activity_repo):
    # Серия началась до начала периода: 7-й день попадает внутрь
    mock_activity_repo.get_daily_log_history.return_value = history(TODAY, 10)
    start = TODAY - timedelta(days=4)

    calendar = await service.get_calendar(1, start, TODAY)

    assert [d.date for d in calendar.days] == [start + timedelta(days=i) for i in range(5)]
    assert calendar.milestone_days == [TODAY - timedelta(days=3)]
    lookback_start = mock_activity_repo.get_daily_log_history.call_args.args[1]
    assert lookback_start == start - timedelta(days=30)


@pytest.mark.asyncio
async def test_get_calendar_rejects_inverted_range(service):
    with pytest.raises(InvalidInputError):
        await service.get_calendar(1, TODAY, TODAY - timedelta(days=1))
