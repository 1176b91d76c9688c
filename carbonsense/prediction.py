# carbonsense/prediction.py
import logging
import re

import requests

from .config import settings
from .schemas import PredictionForm

logger = logging.getLogger(__name__)

NUMBER_RE = re.compile(r"[-+]?[0-9]*\.?[0-9]+")


class PredictionError(Exception):
    pass


def _flag(condition):
    return 1 if condition else 0


def build_feature_vector(form: PredictionForm):
    return {
        "Monthly_Grocery_Bill": form.grocery,
        "Vehicle_Monthly_Distance_Km": form.distance,
        "Waste_Bag_Weekly_Count": form.waste,
        "How_Long_TV_PC_Daily_Hour": form.tv,
        "How_Many_New_Clothes_Monthly": form.clothes,
        "How_Long_Internet_Daily_Hour": form.internet,

        "Body_Type_obese": _flag(form.body == "obese"),
        "Body_Type_overweight": _flag(form.body == "overweight"),
        "Body_Type_underweight": _flag(form.body == "underweight"),

        "Sex_male": _flag(form.gender == "male"),

        "Diet_pescatarian": _flag(form.diet == "pescatarian"),
        "Diet_vegan": _flag(form.diet == "vegan"),
        "Diet_vegetarian": _flag(form.diet == "vegetarian"),

        "Transport_public": _flag(form.transport == "public"),
        "Transport_walk_bicycle": _flag(form.transport == "walk"),

        "Vehicle_Type_electric": _flag(form.vehicle == "electric"),
        "Vehicle_Type_hybrid": _flag(form.vehicle == "hybrid"),
        "Vehicle_Type_lpg": _flag(form.vehicle == "lpg"),
        "Vehicle_Type_petrol": _flag(form.vehicle == "petrol"),
    }


def extract_prediction(text):
    """The model answers in free text; the first number in it is the kg total."""
    match = NUMBER_RE.search(text or "")
    if not match:
        raise PredictionError("Invalid ML response")
    return float(match.group(0))


def predict_emission(form: PredictionForm, url=None, timeout=None):
    url = url or settings.services.ml_predict_url
    try:
        r = requests.post(
            url,
            json=build_feature_vector(form),
            timeout=timeout or settings.services.request_timeout,
        )
    except requests.RequestException as e:
        logger.warning("ML prediction request failed: %s", e)
        raise PredictionError(str(e)) from e

    if not r.ok:
        logger.warning("ML prediction returned %s: %s", r.status_code, r.text[:200])
        raise PredictionError(f"ML service error ({r.status_code})")

    return extract_prediction(r.text)
