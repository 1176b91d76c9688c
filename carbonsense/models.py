# carbonsense/models.py
from sqlalchemy import Column, String, Float, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import uuid

def gen_id(prefix):
    return f"{prefix}_{uuid.uuid4().hex[:8]}"

class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=lambda: gen_id("user"))
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    token = Column(String, nullable=True, index=True)  # cleared on logout
    created_at = Column(DateTime, default=datetime.utcnow)

    entries = relationship("CarbonEntry", back_populates="user")
    achievements = relationship("Achievement", back_populates="user")

class CarbonEntry(Base):
    __tablename__ = "carbon_entries"
    id = Column(String, primary_key=True, default=lambda: gen_id("entry"))
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    entry_date = Column(Date, nullable=False, default=lambda: datetime.utcnow().date())
    total_emissions = Column(Float, default=0.0)  # kg CO2e
    travel_distance_km = Column(Float, default=0.0)
    travel_mode = Column(String, nullable=True)  # car, motorbike, bus, train, cycle, walk
    food_type = Column(String, nullable=True)  # vegan, veg, non-veg
    electricity_kwh = Column(Float, default=0.0)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="entries")

class Achievement(Base):
    __tablename__ = "achievements"
    __table_args__ = (UniqueConstraint("user_id", "badge_id", name="uq_achievement_user_badge"),)
    id = Column(String, primary_key=True, default=lambda: gen_id("ach"))
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    badge_id = Column(String, nullable=False)
    earned_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="achievements")
