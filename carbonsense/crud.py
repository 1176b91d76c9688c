# carbonsense/crud.py
from . import models
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from passlib.context import CryptContext
from datetime import date, timedelta
import uuid

pwd_ctx = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# Auth
def create_user(db: Session, first_name, last_name, email, password):
    hashed = pwd_ctx.hash(password)
    user = models.User(first_name=first_name, last_name=last_name, email=email,
                       password_hash=hashed, token=uuid.uuid4().hex)
    db.add(user); db.commit(); db.refresh(user)
    return user

def authenticate_user(db: Session, email, password):
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not pwd_ctx.verify(password, user.password_hash):
        return None
    # fresh token per login
    user.token = uuid.uuid4().hex
    db.add(user); db.commit(); db.refresh(user)
    return user

def logout_user(db: Session, user):
    user.token = None
    db.add(user); db.commit()

def get_user_by_token(db: Session, token):
    if not token:
        return None
    return db.query(models.User).filter(models.User.token == token).first()

def get_user_by_email(db: Session, email):
    return db.query(models.User).filter(models.User.email == email).first()

# Entries
def create_entry(db: Session, user_id, entry_date, total_emissions, travel_distance_km=0.0,
                 travel_mode=None, food_type=None, electricity_kwh=0.0):
    ent = models.CarbonEntry(
        user_id=user_id,
        entry_date=entry_date,
        total_emissions=total_emissions,
        travel_distance_km=travel_distance_km,
        travel_mode=travel_mode,
        food_type=food_type,
        electricity_kwh=electricity_kwh,
    )
    db.add(ent)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(ent)
    return ent

def get_entries_for_user(db: Session, user_id, since=None):
    q = db.query(models.CarbonEntry).filter(models.CarbonEntry.user_id == user_id)
    if since is not None:
        q = q.filter(models.CarbonEntry.entry_date >= since)
    return q.order_by(models.CarbonEntry.entry_date.desc(), models.CarbonEntry.created_at.desc()).all()

def get_entries_for_date(db: Session, user_id, day):
    return (db.query(models.CarbonEntry)
            .filter(models.CarbonEntry.user_id == user_id, models.CarbonEntry.entry_date == day)
            .order_by(models.CarbonEntry.created_at.desc())
            .all())

# Achievements
def get_earned_badges(db: Session, user_id):
    rows = db.query(models.Achievement.badge_id).filter(models.Achievement.user_id == user_id).all()
    return {badge_id for (badge_id,) in rows}

def insert_achievement(db: Session, user_id, badge_id):
    """False when the user already holds the badge (unique user_id/badge_id)."""
    db.add(models.Achievement(user_id=user_id, badge_id=badge_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    return True

# Leaderboard
def weekly_leaderboard(db: Session, today=None):
    today = today or date.today()
    cutoff = today - timedelta(days=6)
    rows = (db.query(
                models.User.id,
                models.User.first_name,
                models.User.last_name,
                func.coalesce(func.sum(models.CarbonEntry.total_emissions), 0.0),
                func.count(models.CarbonEntry.id))
            .join(models.CarbonEntry, models.CarbonEntry.user_id == models.User.id)
            .filter(models.CarbonEntry.entry_date >= cutoff, models.CarbonEntry.entry_date <= today)
            .group_by(models.User.id, models.User.first_name, models.User.last_name)
            .all())
    result = []
    for uid, name, lname, total, count in rows:
        result.append({
            "user_id": uid,
            "full_name": f"{name} {lname}".strip() or "Anonymous",
            "weekly_emissions": round(float(total), 4),
            "entries_count": int(count),
        })
    result.sort(key=lambda x: (x["weekly_emissions"], x["full_name"]))
    return result
