"""
Admin - operator accounts, created via the bootstrap endpoint or seed task.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, String

from backend.app.db.base import Base
from backend.app.utils.ids import new_principal_id


class Admin(Base):
    __tablename__ = "admins"

    id = Column(String(32), primary_key=True, index=True, default=new_principal_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), default="admin")
    full_name = Column(String(255), default="")
    avatar_url = Column(String(1024), default="")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
