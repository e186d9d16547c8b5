"""Suggested actions for the choice panel.

Suggestions never touch the game state; picking one simply submits its text
as the player's action.
"""

from __future__ import annotations

import json
import logging

from catalog import TUTORIAL_INSTRUCTIONS
from models import Intent
from state import GameState
from utils import strip_code_fences

from .narrative import DEFAULT_MODEL

logger = logging.getLogger(__name__)

MAX_CHOICES = 4

EMPTY_FALLBACK = ["Error generating options.", "Try again.", "...", "..."]
PARSE_FALLBACK = [
    "Parsing Error.",
    "The AI did not return valid JSON.",
    "Try again.",
    "Use Custom Input.",
]
CONNECTION_FALLBACK = ["Connection Error.", "Check API Key.", "...", "..."]


def build_choice_prompt(state: GameState, intent: Intent) -> str:
    """Create the prompt asking for four actions matching *intent*."""
    rels = ", ".join(
        f"{name} (Trust:{rel.trust:g}, Attraction:{rel.attraction:g})"
        for name, rel in state.npc_relationships.items()
    )
    stats = state.stats

    addendum = ""
    if state.config is not None and state.config.tutorial and state.time.day == 0:
        addendum = (
            f"\n{TUTORIAL_INSTRUCTIONS}\n"
            "If the current situation matches a PHASE above, generate the choices "
            "listed in its [CHOICE BLOCK] that fit the player's intent.\n"
        )

    return f"""
You are the Game Engine for "Lily's Life".

**Context:**
- Time: {state.time.segment.value}
- Location: {state.location}
- Player Relationships: {rels}
- Player Stats: Confidence {stats.get('CONFIDENCE', 0):g}, Will {stats.get('WILL', 0):g}, Grace {stats.get('GRACE', 0):g}
{addendum}
**Player Intent:**
The player wants to: **{intent.type}** with a **{intent.manner}** manner.

**Task:**
Generate exactly 4 distinct dialogue/action choices for this intent.
1. High Impact: the most direct embodiment of {intent.type} + {intent.manner}.
2. Subtle: a moderated, safer version.
3. Skill Check: relies on WILL, WIT, GRACE or CONFIDENCE, labelled like "[WIT] ...".
4. Neutral Out: a non-committal or deflecting option.

Return ONLY a JSON array of 4 strings.
"""


def parse_choices(text: str | None) -> list[str]:
    """Turn the model's reply into at most :data:`MAX_CHOICES` strings.

    Invalid JSON yields :data:`PARSE_FALLBACK`; an empty or non-list reply
    yields :data:`EMPTY_FALLBACK`.
    """
    try:
        data = json.loads(strip_code_fences(text or "") or "[]")
    except ValueError as exc:
        logger.error("Choice response was not JSON: %s", exc)
        return list(PARSE_FALLBACK)
    if not isinstance(data, list) or not data:
        return list(EMPTY_FALLBACK)
    return [str(choice) for choice in data[:MAX_CHOICES]]


def suggest_choices(
    state: GameState, intent: Intent, client, model: str = DEFAULT_MODEL
) -> list[str]:
    """Ask *client* for suggestions; SDK failures give :data:`CONNECTION_FALLBACK`."""
    try:
        result = client.models.generate_content(
            model=model, contents=build_choice_prompt(state, intent)
        )
    except Exception as exc:
        logger.error("Choice generation failed: %s", exc)
        return list(CONNECTION_FALLBACK)
    return parse_choices(result.text)
