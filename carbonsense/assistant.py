# carbonsense/assistant.py
import logging

import requests

from .config import settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are EcoBot, a friendly sustainability assistant inside a carbon footprint "
    "tracker. Give short, practical tips for lowering everyday CO2 emissions."
)

# Gemini calls the assistant side of the conversation "model"
ROLE_MAP = {"user": "user", "assistant": "model"}


class AssistantError(Exception):
    pass


def build_contents(messages, context=None):
    preamble = SYSTEM_PROMPT
    if context:
        preamble += "\n\n" + context
    contents = [{"role": "user", "parts": [{"text": preamble}]}]
    for msg in messages:
        contents.append({"role": ROLE_MAP[msg.role], "parts": [{"text": msg.content}]})
    return contents


def user_context(user, entries):
    """Short summary of the user's recent data, prepended to the conversation."""
    recent = entries[:50]
    total_recent = sum((e.total_emissions or 0.0) for e in recent)
    return (f"User {user.first_name} {user.last_name} has recent total emissions "
            f"~{round(total_recent, 2)} kgCO2 across {len(entries)} entries.")


def call_gemini_chat(messages, context=None, api_key=None, url=None, timeout=None):
    api_key = api_key or settings.services.gemini_api_key
    if not api_key:
        raise AssistantError("Assistant API key not configured")

    payload = {"contents": build_contents(messages, context)}
    try:
        r = requests.post(
            url or settings.services.gemini_url,
            params={"key": api_key},
            json=payload,
            timeout=timeout or settings.services.request_timeout,
        )
    except requests.RequestException as e:
        logger.warning("Assistant request failed: %s", e)
        raise AssistantError(str(e)) from e

    if not r.ok:
        logger.warning("Assistant returned %s: %s", r.status_code, r.text[:200])
        raise AssistantError(f"Gemini error ({r.status_code})")

    try:
        data = r.json()
        output = (
            data.get("candidates", [{}])[0]
            .get("content", {})
            .get("parts", [{}])[0]
            .get("text", "")
        )
    except (ValueError, AttributeError, IndexError, TypeError) as e:
        raise AssistantError("Gemini returned an invalid response") from e

    if not output:
        raise AssistantError("Gemini returned no text")
    return output
