"""Game save/load helpers."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from models import SaveGame
from state import GameState, state_from_dict, state_to_dict

logger = logging.getLogger(__name__)

SAVE_VERSION = 1


def save_state(path: str | Path, state: GameState, name: str | None = None) -> None:
    """Write *state* to *path* as versioned JSON."""

    save = SaveGame(
        save_version=SAVE_VERSION,
        name=name,
        state=state_to_dict(state),
    )
    with open(path, "w", encoding="utf-8") as f:
        f.write(save.model_dump_json(indent=2))


def load_state(path: str | Path) -> GameState:
    """Load game state from *path*."""

    with open(path, "r", encoding="utf-8") as f:
        save = SaveGame.model_validate(json.load(f))
    if save.save_version != SAVE_VERSION:
        logger.warning("Loading save version %d (current %d)", save.save_version, SAVE_VERSION)
    return state_from_dict(save.state)
