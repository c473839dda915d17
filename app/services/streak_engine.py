"""
Расчет серий активности (streak) по дневному журналу пользователя.

Все функции чистые: на вход подается уже загруженная коллекция записей
DailyLog (или любых объектов с полями date и activity_type), на выход:
числа и даты. Ввода-вывода и общего изменяемого состояния нет.

Активным считается день, в котором есть хотя бы одна запись: тренировка
или день отдыха. Даты сравниваются с точностью до календарного дня.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Set, Tuple

from app.models.daily_log import ActivityTypeEnum


@dataclass(frozen=True)
class StreakState:
    current_streak: int = 0
    longest_streak: int = 0


def normalize_day(value) -> date:
    """Отбросить время: datetime -> date."""
    if isinstance(value, datetime):
        return value.date()
    return value


class StreakEngine:
    # Только 7 и 30 дней, других порогов нет
    MILESTONE_LENGTHS = (7, 30)

    @classmethod
    def activity_days(cls, entries: Optional[Iterable]) -> Set[date]:
        return {normalize_day(entry.date) for entry in entries or []}

    @classmethod
    def activity_by_day(cls, entries: Optional[Iterable]) -> Dict[date, ActivityTypeEnum]:
        """Тип активности по дням: тренировка приоритетнее отдыха."""
        result: Dict[date, ActivityTypeEnum] = {}
        for entry in entries or []:
            day = normalize_day(entry.date)
            activity = ActivityTypeEnum(entry.activity_type)
            if result.get(day) != ActivityTypeEnum.workout:
                result[day] = activity
        return result

    @classmethod
    def _walk_back(cls, days: Set[date], anchor: date) -> int:
        count = 0
        day = anchor
        while day in days:
            count += 1
            day -= timedelta(days=1)
        return count

    @classmethod
    def current_streak(cls, entries: Optional[Iterable], as_of: Optional[date] = None) -> int:
        """Количество подряд идущих активных дней, заканчивающихся в as_of (по умолчанию сегодня)."""
        anchor = normalize_day(as_of) if as_of is not None else date.today()
        return cls._walk_back(cls.activity_days(entries), anchor)

    @classmethod
    def longest_streak(cls, entries: Optional[Iterable]) -> int:
        days = sorted(cls.activity_days(entries))
        if not days:
            return 0

        longest = current = 1
        for previous, day in zip(days, days[1:]):
            if (day - previous).days == 1:
                current += 1
            else:
                current = 1
            longest = max(longest, current)
        return longest

    @classmethod
    def is_milestone(cls, day: date, entries: Optional[Iterable]) -> bool:
        """Был ли day 7-м или 30-м днем непрерывной серии, заканчивающейся в этот день."""
        return cls.current_streak(entries, as_of=day) in cls.MILESTONE_LENGTHS

    @classmethod
    def milestone_days(cls, entries: Optional[Iterable]) -> List[date]:
        days = cls.activity_days(entries)
        return sorted(day for day in days if cls._walk_back(days, day) in cls.MILESTONE_LENGTHS)

    @classmethod
    def monthly_activity(cls, entries: Optional[Iterable], today: Optional[date] = None) -> Tuple[int, int]:
        """
        Активные дни текущего месяца и число прошедших дней месяца.

        Каждая календарная дата учитывается один раз, даже если за нее
        есть несколько записей.
        """
        today = normalize_day(today) if today is not None else date.today()
        first_day = today.replace(day=1)
        active = {day for day in cls.activity_days(entries) if first_day <= day <= today}
        return len(active), today.day

    @classmethod
    def streak_state(cls, entries: Optional[Iterable], as_of: Optional[date] = None) -> StreakState:
        entries = list(entries or [])
        return StreakState(
            current_streak=cls.current_streak(entries, as_of=as_of),
            longest_streak=cls.longest_streak(entries),
        )
