from datetime import date, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.goal import Goal, Milestone, MilestoneTypeEnum


class GoalRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_goal_by_id(self, goal_id: int) -> Optional[Goal]:
        result = await self.db.execute(select(Goal).where(Goal.id == goal_id))
        return result.scalar_one_or_none()

    async def get_active_goals(self, user_id: int) -> List[Goal]:
        """Цели, которые еще не отмечены как достигнутые (включая просроченные)."""
        result = await self.db.execute(
            select(Goal)
            .where(Goal.user_id == user_id, Goal.achieved.is_(False))
            .order_by(Goal.end_date.asc())
        )
        return list(result.scalars().all())

    async def get_completed_goals(self, user_id: int) -> List[Goal]:
        result = await self.db.execute(
            select(Goal)
            .where(Goal.user_id == user_id, Goal.achieved.is_(True))
            .order_by(Goal.end_date.desc())
        )
        return list(result.scalars().all())

    async def create_goal(self, goal: Goal) -> Goal:
        self.db.add(goal)
        await self.db.commit()
        await self.db.refresh(goal)
        return goal

    async def update_goal(self, goal: Goal) -> None:
        self.db.add(goal)
        await self.db.commit()

    async def delete_goal(self, goal_id: int) -> None:
        await self.db.execute(delete(Goal).where(Goal.id == goal_id))
        await self.db.commit()

    # --- Достижения ---

    async def add_milestone(self, milestone: Milestone) -> Milestone:
        self.db.add(milestone)
        await self.db.commit()
        await self.db.refresh(milestone)
        return milestone

    async def get_milestones(self, user_id: int, milestone_type: Optional[MilestoneTypeEnum] = None) -> List[Milestone]:
        query = select(Milestone).where(Milestone.user_id == user_id)
        if milestone_type is not None:
            query = query.where(Milestone.type == milestone_type)
        result = await self.db.execute(query.order_by(Milestone.date.desc()))
        return list(result.scalars().all())

    async def has_milestone(
            self,
            user_id: int,
            milestone_type: MilestoneTypeEnum,
            value: float,
            day: date
    ) -> bool:
        day_start = datetime.combine(day, time.min)
        result = await self.db.execute(
            select(Milestone.id).where(
                Milestone.user_id == user_id,
                Milestone.type == milestone_type,
                Milestone.value == value,
                Milestone.date >= day_start,
                Milestone.date < day_start + timedelta(days=1),
            )
        )
        return result.first() is not None
