"""
Project - a freelancer's portfolio item. Single store for both the standalone
/projects API and the profile.projects view of a user.
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from backend.app.db.base import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    freelancer_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    technologies = Column(JSON, default=list)
    duration = Column(String(100), nullable=True)  # e.g. "3 months"
    budget = Column(Float, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    images = Column(JSON, default=list)  # image URLs
    project_url = Column(String(1024), nullable=True)
    github_url = Column(String(1024), nullable=True)
    client_name = Column(String(255), nullable=True)
    is_public = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    freelancer = relationship("User", back_populates="projects")
