"""
Employer - hiring-side mirror of employer Users (linked by user_id, else email) plus metrics.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from backend.app.db.base import Base
from backend.app.utils.ids import new_principal_id


class Employer(Base):
    __tablename__ = "employers"

    id = Column(String(32), primary_key=True, index=True, default=new_principal_id)
    # Set when the row mirrors an employer User; standalone employers leave it empty
    user_id = Column(String(32), ForeignKey("users.id", ondelete="SET NULL"), unique=True, nullable=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=True)  # auth lives on users
    role = Column(String(20), default="employer")

    full_name = Column(String(255), nullable=False, default="")
    title = Column(String(255), default="")
    avatar_url = Column(String(1024), nullable=True)
    phone = Column(String(50), default="")
    location = Column(String(255), default="")
    website = Column(String(1024), default="")
    linkedin = Column(String(1024), default="")
    github = Column(String(1024), default="")
    bio = Column(Text, default="")

    # Metrics
    active_jobs = Column(Integer, default=0)
    total_applications = Column(Integer, default=0)
    active_projects = Column(Integer, default=0)
    draft_jobs = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
