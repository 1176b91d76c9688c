# carbonsense/main.py
import logging
import logging.config
from datetime import date
from typing import List, Optional

from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .config import settings
from .database import engine, Base, SessionLocal
from . import models, crud, schemas, badges, stats, distance, prediction, assistant
from .calculations import calculate_emissions, format_emissions, get_emission_level
from .demo import DemoRegistry
from .factors import BADGES

logging.config.dictConfig(settings.get_logging_config())
logger = logging.getLogger(__name__)

# Create DB tables
Base.metadata.create_all(bind=engine)

app = FastAPI(title="CarbonSense API")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
app.state.demo = DemoRegistry()

# Dependency to get DB session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def require_user(token: str, db: Session = Depends(get_db)):
    user = crud.get_user_by_token(db, token)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user

def _token_out(user):
    return {"token": user.token or "", "user_id": user.id, "first_name": user.first_name,
            "last_name": user.last_name, "email": user.email}

# -----------------
# Auth endpoints
# -----------------
@app.post("/signup", response_model=schemas.TokenOut)
def signup(payload: schemas.SignupIn, db: Session = Depends(get_db)):
    existing = crud.get_user_by_email(db, payload.email)
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")
    user = crud.create_user(db, payload.first_name, payload.last_name, payload.email, payload.password)
    logger.info("New user %s signed up", user.id)
    return _token_out(user)

@app.post("/login", response_model=schemas.TokenOut)
def login(payload: schemas.LoginIn, db: Session = Depends(get_db)):
    user = crud.authenticate_user(db, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _token_out(user)

@app.post("/logout")
def logout(user: models.User = Depends(require_user), db: Session = Depends(get_db)):
    crud.logout_user(db, user)
    return {"ok": True}

# -----------------
# Calculator
# -----------------
@app.post("/calculate", response_model=schemas.CalculationOut)
def calculate(payload: schemas.LifestyleEntry):
    breakdown = calculate_emissions(payload)
    return {"breakdown": breakdown, "formatted": format_emissions(breakdown.total),
            "level": get_emission_level(breakdown.total)}

# -----------------
# Entries
# -----------------
@app.post("/entries", response_model=schemas.EntryCreated)
def add_entry(payload: schemas.EntryIn, user: models.User = Depends(require_user),
              db: Session = Depends(get_db)):
    """
    The total comes from the ML model when a questionnaire is attached, otherwise from
    the calculator. Nothing is saved if the prediction fails.
    """
    breakdown = None
    if payload.prediction is not None:
        try:
            total = prediction.predict_emission(payload.prediction)
        except prediction.PredictionError as e:
            logger.warning("Prediction failed for %s: %s", user.id, e)
            raise HTTPException(status_code=502, detail="Failed to calculate emissions")
    else:
        breakdown = calculate_emissions(schemas.LifestyleEntry(
            travel_distance_km=payload.travel_distance_km,
            travel_mode=payload.travel_mode,
            electricity_kwh=payload.electricity_kwh,
            food_type=payload.food_type,
        ))
        total = breakdown.total

    try:
        ent = crud.create_entry(
            db, user.id,
            entry_date=payload.entry_date or date.today(),
            total_emissions=total,
            travel_distance_km=payload.travel_distance_km,
            travel_mode=payload.travel_mode,
            food_type=payload.food_type,
            electricity_kwh=payload.electricity_kwh,
        )
    except SQLAlchemyError:
        logger.exception("Could not save entry for %s", user.id)
        raise HTTPException(status_code=500, detail="Failed to save entry")
    logger.info("Entry %s saved for %s (%.2f kg)", ent.id, user.id, total)

    new_badges = [badges.get_badge_by_id(b) for b in badges.check_and_award_badges(db, user.id)]
    return {
        "entry_id": ent.id,
        "total_emissions": round(total, 2),
        "formatted": format_emissions(total),
        "level": get_emission_level(total),
        "breakdown": breakdown,
        "new_badges": new_badges,
    }

@app.get("/entries", response_model=List[schemas.EntryOut])
def list_entries(since: Optional[date] = None, user: models.User = Depends(require_user),
                 db: Session = Depends(get_db)):
    return crud.get_entries_for_user(db, user.id, since=since)

@app.get("/entries/today", response_model=List[schemas.EntryOut])
def today_entries(user: models.User = Depends(require_user), db: Session = Depends(get_db)):
    return crud.get_entries_for_date(db, user.id, date.today())

@app.get("/dashboard")
def dashboard(user: models.User = Depends(require_user), db: Session = Depends(get_db)):
    today = date.today()
    week = crud.get_entries_for_user(db, user.id, since=stats.week_start(today))
    summary = stats.weekly_stats(week, today=today)
    categories = stats.category_totals(week)
    summary["categories"] = categories
    summary["tips"] = stats.generate_eco_tips(
        summary["weekly_total"], categories["travel"], categories["electricity"],
        categories["food"], summary["entries_count"],
    )
    return summary

# -----------------
# Badges & achievements
# -----------------
@app.get("/badges", response_model=List[schemas.BadgeOut])
def list_badges():
    return BADGES

@app.get("/achievements", response_model=List[schemas.AchievementOut])
def achievements(user: models.User = Depends(require_user), db: Session = Depends(get_db)):
    earned = crud.get_earned_badges(db, user.id)
    return [{**b, "earned": b["id"] in earned} for b in BADGES]

# -----------------
# Leaderboard
# -----------------
@app.get("/leaderboard", response_model=List[schemas.LeaderboardRow])
def leaderboard(db: Session = Depends(get_db)):
    rows = crud.weekly_leaderboard(db)
    return [{**r, "formatted": format_emissions(r["weekly_emissions"])} for r in rows]

# -----------------
# Distance proxy
# -----------------
@app.post("/distance")
def calculate_distance(payload: schemas.DistanceRequest):
    try:
        return distance.calculate_distance(payload.origin, payload.destination, payload.mode)
    except distance.DistanceError as e:
        logger.warning("Distance calculation failed: %s", e)
        return JSONResponse(status_code=400, content={"success": False, "error": str(e)})

# -----------------
# Eco assistant
# -----------------
@app.post("/assistant", response_model=schemas.ChatOut)
def assistant_chat(payload: schemas.ChatIn, user: models.User = Depends(require_user),
                   db: Session = Depends(get_db)):
    # seed the conversation with the user's recent data
    entries = crud.get_entries_for_user(db, user.id)
    context = assistant.user_context(user, entries)
    try:
        reply = assistant.call_gemini_chat(payload.messages, context=context)
    except assistant.AssistantError as e:
        logger.warning("Assistant failed for %s: %s", user.id, e)
        raise HTTPException(status_code=502, detail="Sorry, I encountered an error. Please try again!")
    return {"response": reply}

# -----------------
# Demo mode
# -----------------
def _demo_view(session):
    return {"session_id": session.id, "user": session.user, "entries": session.entries,
            "badges": session.badges, "stats": session.summary()}

def _get_demo(session_id):
    session = app.state.demo.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Demo session not found")
    return session

@app.post("/demo")
def open_demo():
    return _demo_view(app.state.demo.open())

@app.get("/demo/{session_id}")
def get_demo(session_id: str):
    return _demo_view(_get_demo(session_id))

@app.post("/demo/{session_id}/entries")
def add_demo_entry(session_id: str, payload: schemas.LifestyleEntry):
    session = _get_demo(session_id)
    return session.add_entry(payload)

@app.delete("/demo/{session_id}")
def close_demo(session_id: str):
    if not app.state.demo.close(session_id):
        raise HTTPException(status_code=404, detail="Demo session not found")
    return {"ok": True}

def run():
    import uvicorn
    uvicorn.run("carbonsense.main:app", host=settings.server.host, port=settings.server.port)
