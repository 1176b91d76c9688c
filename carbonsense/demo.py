# carbonsense/demo.py
"""
Demo mode state.

A demo session is opened explicitly, lives in a ``DemoRegistry`` owned by the app,
and is dropped again when the visitor leaves demo mode. Nothing is written to the
database.
"""
import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from .calculations import calculate_emissions, generate_mock_week_data
from .schemas import LifestyleEntry

logger = logging.getLogger(__name__)

DEMO_BADGES = ["eco_starter", "bike_lover", "veg_day"]


@dataclass
class DemoSession:
    id: str
    user: Dict[str, str]
    entries: List[dict] = field(default_factory=list)
    badges: List[str] = field(default_factory=list)

    def add_entry(self, entry: LifestyleEntry, day=None):
        breakdown = calculate_emissions(entry)
        record = {
            "id": f"demo-entry-{uuid.uuid4().hex[:8]}",
            "date": day or date.today(),
            "travel_mode": entry.travel_mode,
            "food_type": entry.food_type,
            "travel_distance_km": entry.travel_distance_km,
            "electricity_kwh": entry.electricity_kwh,
            **breakdown.model_dump(),
        }
        self.entries.append(record)
        return record

    def summary(self):
        weekly_total = sum(e["total"] for e in self.entries)
        count = len(self.entries)
        return {
            "today_total": self.entries[-1]["total"] if self.entries else 0.0,
            "weekly_total": round(weekly_total, 2),
            "entries_count": count,
            "avg_emission": round(weekly_total / count, 2) if count else 0.0,
        }


class DemoRegistry:
    def __init__(self):
        self._sessions: Dict[str, DemoSession] = {}
        self._lock = threading.Lock()

    def open(self, today=None, rng=None) -> DemoSession:
        session_id = uuid.uuid4().hex
        entries = generate_mock_week_data(today=today, rng=rng)
        for index, entry in enumerate(entries):
            entry["id"] = f"demo-entry-{index}"
        session = DemoSession(
            id=session_id,
            user={"id": "demo-user", "name": "Eco Explorer", "email": "demo@carbonsense.app"},
            entries=entries,
            badges=list(DEMO_BADGES),
        )
        with self._lock:
            self._sessions[session_id] = session
        logger.info("Demo session %s opened", session_id)
        return session

    def get(self, session_id) -> Optional[DemoSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def close(self, session_id) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            logger.info("Demo session %s closed", session_id)
        return session is not None

    def __len__(self):
        with self._lock:
            return len(self._sessions)
