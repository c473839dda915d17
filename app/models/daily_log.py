import enum
from sqlalchemy import Column, Integer, String, Date, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.base import Base

class ActivityTypeEnum(str, enum.Enum):
    workout = "workout"
    rest = "rest"

class DailyLog(Base):
    __tablename__ = "daily_logs"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_logs_user_date"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    activity_type = Column(Enum(ActivityTypeEnum), nullable=False)
    notes = Column(String, nullable=True)

    user = relationship("User", back_populates="daily_logs")
