import enum
from datetime import datetime
from sqlalchemy import Column, Integer, Float, ForeignKey, Enum, Boolean, DateTime
from sqlalchemy.orm import relationship
from app.core.base import Base

class GoalTypeEnum(str, enum.Enum):
    exercise_target = "ExerciseTarget"
    workout_frequency = "WorkoutFrequency"
    weight_target = "WeightTarget"

class MilestoneTypeEnum(str, enum.Enum):
    longest_streak = "LongestStreak"
    goal_achieved = "GoalAchieved"

class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(Enum(GoalTypeEnum), nullable=False)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="SET NULL"), nullable=True)
    target_value = Column(Float, nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    achieved = Column(Boolean, default=False, nullable=False)
    # Базовое значение метрики на момент создания цели
    current_progress = Column(Float, default=0, nullable=False)
    achieved_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="goals")
    exercise = relationship("Exercise")

class Milestone(Base):
    __tablename__ = "milestones"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(Enum(MilestoneTypeEnum), nullable=False)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="SET NULL"), nullable=True)
    value = Column(Float, nullable=True)
    date = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="milestones")
