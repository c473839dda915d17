from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.core.base import Base

class BodyWeightEntry(Base):
    __tablename__ = "body_weight_entries"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    weight = Column(Float, nullable=False)
    recorded_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="weight_entries")
