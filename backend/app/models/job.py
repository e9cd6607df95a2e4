"""
Job aggregate - a job posting together with the applications and submissions it owns.
"""
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from backend.app.db.base import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    employer_id = Column(String(64), nullable=False, index=True)  # user or employer id, not enforced

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    budget_type = Column(String(20), nullable=False)  # fixed | hourly
    budget_min = Column(Float, nullable=True)
    budget_max = Column(Float, nullable=True)
    duration_weeks = Column(Float, nullable=True)
    status = Column(String(20), default="open", nullable=False)
    location = Column(String(255), nullable=True)
    remote_allowed = Column(Boolean, default=True)
    experience_level = Column(String(20), nullable=True)  # entry | intermediate | expert
    relevant_experience = Column(Text, nullable=True)
    proposed_approach = Column(Text, nullable=True)
    skills = Column(JSON, default=list)  # [{"id", "name", "category"}]

    applications_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    applications = relationship(
        "JobApplication",
        back_populates="job",
        order_by="JobApplication.id",
        cascade="all, delete-orphan",
    )
    submissions = relationship(
        "JobSubmission",
        back_populates="job",
        order_by="JobSubmission.id",
        cascade="all, delete-orphan",
    )


class JobApplication(Base):
    __tablename__ = "job_applications"
    __table_args__ = (
        UniqueConstraint("job_id", "freelancer_id", name="uq_job_applications_job_freelancer"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    freelancer_id = Column(String(64), nullable=False, index=True)

    cover_letter = Column(Text, nullable=False)
    experience = Column(Text, nullable=True)
    approach = Column(Text, nullable=True)
    proposed_rate = Column(Float, nullable=True)
    estimated_duration = Column(Float, nullable=True)  # weeks
    status = Column(String(20), default="applied", nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    job = relationship("Job", back_populates="applications")


class JobSubmission(Base):
    __tablename__ = "job_submissions"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    freelancer_id = Column(String(64), nullable=False, index=True)

    deploy_link = Column(String(1024), nullable=True)
    github_link = Column(String(1024), nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    job = relationship("Job", back_populates="submissions")
