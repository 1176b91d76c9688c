# carbonsense/schemas.py
from datetime import date
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List, Literal

class SignupIn(BaseModel):
    first_name: str
    last_name: str
    email: EmailStr
    password: str

class LoginIn(BaseModel):
    email: EmailStr
    password: str

class TokenOut(BaseModel):
    token: str
    user_id: str
    first_name: str
    last_name: str
    email: EmailStr

# Calculator input. Mode and food stay free-form so unknown values reach the
# calculator and fall back instead of being rejected.
class LifestyleEntry(BaseModel):
    travel_distance_km: float = Field(0.0, ge=0)
    travel_mode: str = "car"
    electricity_kwh: float = Field(0.0, ge=0)
    food_type: str = "veg"

class EmissionBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    travel: float
    electricity: float
    food: float
    total: float

class CalculationOut(BaseModel):
    breakdown: EmissionBreakdown
    formatted: str
    level: Literal["excellent", "good", "average", "high"]

# Questionnaire sent to the ML model, defaults match the entry form.
class PredictionForm(BaseModel):
    grocery: float = Field(3000, ge=0)
    distance: float = Field(10, ge=0)
    waste: float = Field(2, ge=0)
    tv: float = Field(3, ge=0)
    internet: float = Field(5, ge=0)
    clothes: float = Field(1, ge=0)
    gender: Literal["male", "female"] = "male"
    body: Literal["underweight", "normal", "overweight", "obese"] = "overweight"
    diet: Literal["vegetarian", "vegan", "pescatarian", "omnivore"] = "vegetarian"
    transport: Literal["public", "walk", "private"] = "public"
    vehicle: Literal["petrol", "diesel", "electric", "hybrid", "lpg"] = "petrol"

class EntryIn(BaseModel):
    entry_date: Optional[date] = None  # defaults to today
    travel_distance_km: float = Field(0.0, ge=0)
    travel_mode: Literal["car", "motorbike", "bus", "train", "cycle", "walk"] = "car"
    electricity_kwh: float = Field(0.0, ge=0)
    food_type: Literal["vegan", "veg", "non-veg"] = "veg"
    # when present the total comes from the ML model instead of the calculator
    prediction: Optional[PredictionForm] = None

class BadgeOut(BaseModel):
    id: str
    name: str
    icon: str
    description: str

class AchievementOut(BadgeOut):
    earned: bool

class EntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    entry_date: date
    total_emissions: float
    travel_distance_km: Optional[float] = None
    travel_mode: Optional[str] = None
    food_type: Optional[str] = None
    electricity_kwh: Optional[float] = None

class EntryCreated(BaseModel):
    entry_id: str
    total_emissions: float
    formatted: str
    level: str
    breakdown: Optional[EmissionBreakdown] = None
    new_badges: List[BadgeOut] = []

class LeaderboardRow(BaseModel):
    user_id: str
    full_name: str
    weekly_emissions: float
    entries_count: int
    formatted: str

class DistanceRequest(BaseModel):
    origin: str
    destination: str
    mode: str = "car"

class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str = Field(..., min_length=1)

class ChatIn(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1)

class ChatOut(BaseModel):
    response: str
