import pytest
import requests
from pydantic import ValidationError

from carbonsense import prediction
from carbonsense.prediction import (
    PredictionError,
    build_feature_vector,
    extract_prediction,
    predict_emission,
)
from carbonsense.schemas import PredictionForm
from conftest import FakeResponse


def test_default_form_vector():
    vector = build_feature_vector(PredictionForm())
    assert vector["Monthly_Grocery_Bill"] == 3000
    assert vector["Vehicle_Monthly_Distance_Km"] == 10
    assert vector["Body_Type_overweight"] == 1
    assert vector["Body_Type_obese"] == 0
    assert vector["Sex_male"] == 1
    assert vector["Diet_vegetarian"] == 1
    assert vector["Transport_public"] == 1
    assert vector["Transport_walk_bicycle"] == 0
    assert vector["Vehicle_Type_petrol"] == 1
    assert len(vector) == 19


def test_one_hot_flags_follow_form():
    form = PredictionForm(gender="female", body="normal", diet="omnivore", transport="walk", vehicle="diesel")
    vector = build_feature_vector(form)
    assert vector["Sex_male"] == 0
    assert vector["Transport_walk_bicycle"] == 1
    # baseline categories are all-zero
    assert not any(vector[k] for k in ("Body_Type_obese", "Body_Type_overweight", "Body_Type_underweight"))
    assert not any(vector[k] for k in ("Diet_pescatarian", "Diet_vegan", "Diet_vegetarian"))
    assert not any(v for k, v in vector.items() if k.startswith("Vehicle_Type_"))


def test_form_rejects_unknown_choice():
    with pytest.raises(ValidationError):
        PredictionForm(diet="keto")


@pytest.mark.parametrize("text,value", [
    ("1234.5", 1234.5),
    ('{"prediction": [2203.77]}', 2203.77),
    ("Predicted emission: -3 kg", -3.0),
    (".75", 0.75),
])
def test_extract_prediction(text, value):
    assert extract_prediction(text) == value


def test_extract_prediction_fails_closed():
    with pytest.raises(PredictionError):
        extract_prediction("model unavailable")


def test_predict_emission_posts_vector(monkeypatch):
    sent = {}

    def fake_post(url, json=None, timeout=None):
        sent["url"] = url
        sent["json"] = json
        return FakeResponse(text="[2250.5]")

    monkeypatch.setattr(prediction.requests, "post", fake_post)
    assert predict_emission(PredictionForm(), url="http://ml.test/predict") == 2250.5
    assert sent["url"] == "http://ml.test/predict"
    assert sent["json"]["Diet_vegetarian"] == 1


def test_predict_emission_http_error(monkeypatch):
    monkeypatch.setattr(prediction.requests, "post",
                        lambda *a, **k: FakeResponse(status_code=503, text="1.0 overloaded"))
    with pytest.raises(PredictionError):
        predict_emission(PredictionForm())


def test_predict_emission_network_error(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr(prediction.requests, "post", boom)
    with pytest.raises(PredictionError):
        predict_emission(PredictionForm())
