"""Prompt construction and response handling."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

import genai_api as ga
from catalog import TUTORIAL_INSTRUCTIONS
from models import GameEngineResponse, Intent, StateUpdates
from state import GameState
from utils import clean_unicode, strip_code_fences

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


class NarrativeUnavailable(RuntimeError):
    """Raised when no Gemini client can be created (usually a missing key)."""


def describe_outfit(state: GameState) -> str:
    worn = [f"{slot.value}: {item.name}" for slot, item in state.equipped.items()]
    return ", ".join(worn) or "Naked"


def _num(value: float) -> str:
    return f"{value:g}"


def build_prompt(state: GameState, intent: Intent | None, user_text: str) -> str:
    """Create the turn prompt for *state* and the player's action."""

    s = state.stats
    rels = ", ".join(
        f"{name} (Trust:{_num(rel.trust)})" for name, rel in state.npc_relationships.items()
    )
    action = f"{intent.type} ({intent.manner})" if intent else "General Action"

    prompt = f"""
You are the RPG Game Engine for "Lily's Life". You manage the story AND the
mathematical state of the game.

**CURRENT STATE:**
- Time: {state.time.segment.value} (Day {state.time.day})
- Location: {state.location}
- Outfit: {describe_outfit(state)}
- NPC Relationships: {rels}

**PLAYER STATS:**
- Core: Confidence ({_num(s.get('CONFIDENCE', 0))}), Will ({_num(s.get('WILL', 0))}), Wit ({_num(s.get('WIT', 0))}), Grace ({_num(s.get('GRACE', 0))})
- State: Vitality ({_num(s.get('VITALITY', 0))}), Finance (${_num(s.get('FINANCE', 0))}), Blush ({_num(s.get('BLUSH', 0))})
- Environment: Danger ({_num(s.get('DANGER', 0))}), Social Class ({_num(s.get('SOCIAL_CLASS', 0))})

**PLAYER INPUT:**
- Action: "{user_text}"
- Intent: {action}

**GAME MECHANICS RULES (YOU MUST ENFORCE THESE):**
1. Vitality Cost: every action consumes 1-5 VITALITY depending on effort.
2. Finance: if the player buys something, deduct the EXACT cost via moneyChange.
3. Skill Checks: for a [STAT] option, roll internally. On success increase that
   stat by 1, on failure decrease CONFIDENCE.
4. Relationships: update trust/attraction/familiarity based on dialogue.
5. Location: if the player moves, set locationChange to the closest location ID.

**OUTPUT FORMAT:**
Respond with a single JSON object:
{{
  "narrative": "string (second person, 'You...')",
  "updates": {{
    "statChanges": {{"VITALITY": number, "CONFIDENCE": number}},
    "relationshipChanges": {{"NPC_Name": {{"trust": number, "attraction": number}}}},
    "moneyChange": number,
    "locationChange": "string (only if moving)",
    "itemGained": ["item id"]
  }}
}}
"""
    if state.config is not None and state.config.tutorial and state.time.day == 0:
        prompt += "\n" + TUTORIAL_INSTRUCTIONS
    return prompt


def finalize_to_model(json_text: str) -> GameEngineResponse:
    """Parse *json_text* into :class:`GameEngineResponse`."""

    data: Any = json.loads(strip_code_fences(json_text))
    return GameEngineResponse.model_validate(clean_unicode(data))


def parse_response(text: str) -> tuple[str, StateUpdates | None]:
    """Return ``(narrative, updates)`` from the model's raw reply.

    A reply that does not match the schema is kept verbatim as the narrative
    and no updates are applied.
    """
    try:
        response = finalize_to_model(text)
    except (ValueError, ValidationError) as exc:
        logger.warning("Failed to parse narrative response: %s", exc)
        return text, None
    return response.narrative, response.updates


class NarrativeService:
    """Sends turn prompts to Gemini and returns the raw reply text."""

    def __init__(self, model: str = DEFAULT_MODEL) -> None:
        self.model = model

    def _client(self):
        client = ga.ensure_client()
        if client is None:
            raise NarrativeUnavailable("No Gemini API key configured")
        return client

    def generate(self, state: GameState, intent: Intent | None, text: str) -> str:
        response = self._client().models.generate_content(
            model=self.model,
            contents=build_prompt(state, intent, text),
            config={"response_mime_type": "application/json"},
        )
        return response.text or ""

    async def generate_async(self, state: GameState, intent: Intent | None, text: str) -> str:
        response = await self._client().aio.models.generate_content(
            model=self.model,
            contents=build_prompt(state, intent, text),
            config={"response_mime_type": "application/json"},
        )
        return response.text or ""
