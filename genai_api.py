"""Gemini client access for Lily's Life.

The game talks to Gemini in two places: :class:`services.narrative.NarrativeService`
asks for a turn's narrative and state delta, and the UI's choice panel asks
:func:`services.choices.suggest_choices` for four actions matching the
player's intent.  Both get their client from :func:`ensure_client`, which
reads ``GEMINI_API_KEY`` and rebuilds the client when the key changes.  A
missing key is not an error here; callers see ``None`` and show the
"enter a valid API Key" notice instead of starting a turn.
"""
from __future__ import annotations

import os
import logging
from google import genai
from google.genai import errors

from utils import get_user_env_var

logger = logging.getLogger(__name__)

API_KEY_VAR = "GEMINI_API_KEY"

# Cached client instance and the key used to create it
client: genai.Client | None = None
_client_key: str | None = None


def resolve_api_key() -> str:
    """Return the Gemini key from the process or user environment, or "".

    Any key found is written back into ``os.environ``.
    """
    key = (
        os.environ.get(API_KEY_VAR)
        or get_user_env_var(API_KEY_VAR)
        or ""
    ).strip()
    if key:
        os.environ[API_KEY_VAR] = key
    return key


def ensure_client() -> genai.Client | None:
    """Return a Gemini client for the current environment key.

    Lazily creates or updates the cached :class:`google.genai.Client` when the
    API key changes.  ``None`` is returned if no key is available.
    """
    global client, _client_key
    key = resolve_api_key()
    if not key:
        client = None
        _client_key = None
        return None
    if client is None or key != _client_key:
        try:
            client = genai.Client(api_key=key)
            _client_key = key
        except (getattr(errors, "APIError", Exception), ValueError) as exc:
            logger.error("Failed to create GenAI client: %s", exc)
            client = None
            _client_key = None
            return None
    return client


__all__ = [
    "client",
    "ensure_client",
    "resolve_api_key",
    "errors",
    "genai",
]
