"""
Review - written by an employer about a freelancer, owned by the freelancer's User row.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.app.db.base import Base


class Review(Base):
    __tablename__ = "user_reviews"

    id = Column(Integer, primary_key=True, index=True)
    freelancer_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    job_id = Column(String(64), nullable=False)
    employer_id = Column(String(64), nullable=False)
    rating = Column(Float, nullable=False)  # 1..5
    comment = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    freelancer = relationship("User", back_populates="reviews")
