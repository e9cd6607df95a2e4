"""
User - freelancer or employer identity, with the profile flattened into columns.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from backend.app.db.base import Base
from backend.app.utils.ids import new_principal_id


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, index=True, default=new_principal_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)  # freelancer | employer

    # Password reset one-time code
    reset_otp = Column(String(6), nullable=True)
    reset_otp_expires = Column(DateTime, nullable=True)

    # Profile
    profile_email = Column(String(255), default="")
    full_name = Column(String(255), nullable=False, default="")
    phone = Column(String(50), nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    title = Column(String(255), default="")
    bio = Column(Text, nullable=True)
    hourly_rate = Column(Float, nullable=True)
    location = Column(String(255), nullable=True)
    website = Column(String(1024), nullable=True)
    linkedin = Column(String(1024), nullable=True)
    github = Column(String(1024), nullable=True)
    skills = Column(JSON, default=list)  # ["React", "Python", ...]

    # Dashboard metrics (denormalized, see tasks/reconcile.py)
    active_projects = Column(Integer, default=0)
    pending_applications = Column(Integer, default=0)
    completed_projects = Column(Integer, default=0)
    total_rating = Column(Float, default=0.0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reviews = relationship(
        "Review",
        back_populates="freelancer",
        order_by="Review.id",
        cascade="all, delete-orphan",
    )
    projects = relationship(
        "Project",
        back_populates="freelancer",
        order_by="Project.id",
        cascade="all, delete-orphan",
    )
