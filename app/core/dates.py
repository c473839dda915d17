from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware datetime -> naive UTC. В БД и в расчетах время хранится без зоны."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# Дата-время из запроса: смещение (+03:00, Z) переводится в naive UTC
UtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]
