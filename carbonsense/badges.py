# carbonsense/badges.py
"""
Badge evaluation.

``evaluate_badges`` is pure: it looks at a user's whole entry history and returns the
badge ids that qualify now and were not earned before. ``check_and_award_badges``
wraps it with the database reads and the achievement inserts.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Set, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud
from .factors import BADGES

logger = logging.getLogger(__name__)

ACTIVE_MODES = {"cycle", "walk"}
TRANSIT_MODES = {"bus", "train"}
VEG_FOODS = {"veg", "vegan"}

STREAK_DAYS = 7
# Compared against stored totals as-is. Totals are kg, so this almost always holds.
CARBON_CUTTER_THRESHOLD = 5000
LOW_ELECTRICITY_KWH = 5


@dataclass(frozen=True)
class HistoryEntry:
    travel_mode: Optional[str]
    food_type: Optional[str]
    total_emissions: Optional[float]
    electricity_kwh: Optional[float]
    entry_date: Union[date, str]

    def __post_init__(self):
        if isinstance(self.entry_date, str):
            object.__setattr__(self, "entry_date", date.fromisoformat(self.entry_date))

    @classmethod
    def from_record(cls, record):
        return cls(
            travel_mode=record.travel_mode,
            food_type=record.food_type,
            total_emissions=record.total_emissions,
            electricity_kwh=record.electricity_kwh,
            entry_date=record.entry_date,
        )


def _distinct_dates(history, predicate=None):
    return {e.entry_date for e in history if predicate is None or predicate(e)}


def has_streak(dates: Iterable[date], length: int = STREAK_DAYS) -> bool:
    ordered = sorted(set(dates), reverse=True)
    if not ordered:
        return False
    streak = 1
    for newer, older in zip(ordered, ordered[1:]):
        if (newer - older).days == 1:
            streak += 1
            if streak >= length:
                break
        else:
            streak = 1
    return streak >= length


def _eco_starter(history):
    return len(history) >= 1

def _bike_lover(history):
    return len(_distinct_dates(history, lambda e: e.travel_mode in ACTIVE_MODES)) >= 5

def _veg_day(history):
    return len(_distinct_dates(history, lambda e: e.food_type in VEG_FOODS)) >= 3

def _carbon_cutter(history):
    return any((e.total_emissions or 0) < CARBON_CUTTER_THRESHOLD for e in history)

def _green_streak(history):
    return has_streak(_distinct_dates(history))

def _transit_pro(history):
    return sum(1 for e in history if e.travel_mode in TRANSIT_MODES) >= 10

def _solar_saver(history):
    return sum(1 for e in history if (e.electricity_kwh or 0) < LOW_ELECTRICITY_KWH) >= 7


# Evaluation order, also the order newly earned badges are awarded in.
BADGE_RULES = [
    ("eco_starter", _eco_starter),
    ("bike_lover", _bike_lover),
    ("veg_day", _veg_day),
    ("carbon_cutter", _carbon_cutter),
    ("green_streak", _green_streak),
    ("transit_pro", _transit_pro),
    ("solar_saver", _solar_saver),
]


def evaluate_badges(history: Iterable[HistoryEntry], already_earned: Iterable[str]) -> Set[str]:
    history = list(history)
    earned = set(already_earned)
    return {
        badge_id
        for badge_id, rule in BADGE_RULES
        if badge_id not in earned and rule(history)
    }


def get_badge_by_id(badge_id: str):
    return next((b for b in BADGES if b["id"] == badge_id), None)


def check_and_award_badges(db: Session, user_id: str) -> List[str]:
    """Evaluate and persist new badges. Returns the ids that were actually inserted."""
    try:
        records = crud.get_entries_for_user(db, user_id)
        earned = crud.get_earned_badges(db, user_id)
    except SQLAlchemyError:
        logger.exception("Could not load history for badge check of %s", user_id)
        return []

    qualifying = evaluate_badges([HistoryEntry.from_record(r) for r in records], earned)

    newly_earned = []
    for badge_id, _ in BADGE_RULES:
        if badge_id not in qualifying:
            continue
        try:
            inserted = crud.insert_achievement(db, user_id, badge_id)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Could not award %s to %s", badge_id, user_id)
            continue
        if inserted:
            logger.info("User %s earned badge %s", user_id, badge_id)
            newly_earned.append(badge_id)
    return newly_earned
