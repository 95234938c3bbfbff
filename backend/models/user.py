from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from core.database import Base


class User(Base):
    """Registered account"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    age = Column(Integer, nullable=False)
    phone_number = Column(String(20))  # Trimmed, optional
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
