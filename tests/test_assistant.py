import pytest
import requests

from carbonsense import assistant
from carbonsense.assistant import AssistantError, build_contents, call_gemini_chat
from carbonsense.schemas import ChatMessage
from conftest import FakeResponse


def gemini_reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def msgs(*pairs):
    return [ChatMessage(role=role, content=content) for role, content in pairs]


def test_build_contents_maps_roles():
    contents = build_contents(msgs(("user", "hi"), ("assistant", "hello"), ("user", "tips?")),
                              context="User has 3 entries.")
    assert [c["role"] for c in contents] == ["user", "user", "model", "user"]
    assert "User has 3 entries." in contents[0]["parts"][0]["text"]
    assert contents[-1]["parts"][0]["text"] == "tips?"


def test_call_gemini_chat(monkeypatch):
    sent = {}

    def fake_post(url, params=None, json=None, timeout=None):
        sent.update(url=url, params=params, json=json)
        return FakeResponse(gemini_reply("Try cycling to work."))

    monkeypatch.setattr(assistant.requests, "post", fake_post)
    reply = call_gemini_chat(msgs(("user", "How do I cut travel emissions?")),
                             api_key="g-key", url="http://gemini.test/generate")
    assert reply == "Try cycling to work."
    assert sent["url"] == "http://gemini.test/generate"
    assert sent["params"] == {"key": "g-key"}
    assert sent["json"]["contents"][-1]["parts"][0]["text"] == "How do I cut travel emissions?"


def test_missing_key(monkeypatch):
    monkeypatch.setattr(assistant.settings.services, "gemini_api_key", None)
    with pytest.raises(AssistantError, match="not configured"):
        call_gemini_chat(msgs(("user", "hi")))


@pytest.mark.parametrize("response", [
    FakeResponse(status_code=500, text="boom"),
    FakeResponse({"candidates": []}),
    FakeResponse(gemini_reply("")),
    FakeResponse(text="not json"),
])
def test_bad_responses(monkeypatch, response):
    monkeypatch.setattr(assistant.requests, "post", lambda *a, **k: response)
    with pytest.raises(AssistantError):
        call_gemini_chat(msgs(("user", "hi")), api_key="g-key")


def test_network_error(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(assistant.requests, "post", boom)
    with pytest.raises(AssistantError):
        call_gemini_chat(msgs(("user", "hi")), api_key="g-key")


def test_assistant_endpoint_includes_user_context(client, token, monkeypatch):
    monkeypatch.setattr(assistant.settings.services, "gemini_api_key", "g-key")
    sent = {}

    def fake_post(url, params=None, json=None, timeout=None):
        sent["json"] = json
        return FakeResponse(gemini_reply("Eat more plants."))

    monkeypatch.setattr(assistant.requests, "post", fake_post)
    client.post("/entries", params={"token": token}, json={"travel_distance_km": 10, "travel_mode": "car"})
    r = client.post("/assistant", params={"token": token},
                    json={"messages": [{"role": "user", "content": "Any food tips?"}]})
    assert r.status_code == 200
    assert r.json() == {"response": "Eat more plants."}
    preamble = sent["json"]["contents"][0]["parts"][0]["text"]
    assert "Asha Rao" in preamble
    assert "across 1 entries" in preamble


def test_assistant_endpoint_failure(client, token, monkeypatch):
    monkeypatch.setattr(assistant.settings.services, "gemini_api_key", "g-key")
    monkeypatch.setattr(assistant.requests, "post", lambda *a, **k: FakeResponse(status_code=503))
    r = client.post("/assistant", params={"token": token},
                    json={"messages": [{"role": "user", "content": "hi"}]})
    assert r.status_code == 502
    assert r.json()["detail"] == "Sorry, I encountered an error. Please try again!"


def test_assistant_endpoint_validates_messages(client, token):
    r = client.post("/assistant", params={"token": token}, json={"messages": []})
    assert r.status_code == 422
    r = client.post("/assistant", params={"token": token},
                    json={"messages": [{"role": "system", "content": "hi"}]})
    assert r.status_code == 422
