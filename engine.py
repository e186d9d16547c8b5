"""The game engine: owner of the live :class:`GameState`.

The engine sequences a turn in two halves.  :meth:`GameEngine.begin_turn`
snapshots the state, moves the clock and logs the player's action; the
state is then consistent on its own while the narrative model works.
:meth:`GameEngine.complete_turn` folds in the reply, while
:meth:`GameEngine.fail_turn` logs a failure notice instead.  Only one turn
may be in flight at a time.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Optional

import equipment
from catalog import (
    GAME_START_TEXT,
    INITIAL_STATS,
    NPC_ROSTER,
    START_LOCATION,
    STARTING_RELATIONSHIPS,
    TUTORIAL_PHASE_1_CHOICES,
    TUTORIAL_START_TEXT,
    WELCOME_TEXT,
    ItemCatalog,
)
from mechanics import STAT_MAX, advance_time, compute_effective_stats
from models import Intent, Item
from pipeline import apply_response
from services.narrative import parse_response
from state import (
    EquipSlot,
    GameConfig,
    GameState,
    HistoryEntry,
    Relationship,
    StatType,
    TimeState,
    state_from_dict,
    state_to_dict,
)

logger = logging.getLogger(__name__)

NEW_DAY_VITALITY = 50
FAILURE_NOTICE = "Error connecting to the narrative engine. Please check your API key."
CANCEL_NOTICE = "System: The narrative engine request was cancelled."

Narrator = Callable[[GameState, Optional[Intent], str], str]
AsyncNarrator = Callable[[GameState, Optional[Intent], str], Awaitable[str]]


class TurnInProgressError(RuntimeError):
    """Raised when a turn is submitted while another one is in flight."""


@dataclass(frozen=True)
class PendingTurn:
    """What the narrative model needs to answer the turn in flight."""

    state: GameState
    intent: Optional[Intent]
    text: str


class UndoStack:
    """Unbounded stack of deep-copied pre-turn states."""

    def __init__(self) -> None:
        self._frames: list[GameState] = []

    def push(self, state: GameState) -> None:
        self._frames.append(copy.deepcopy(state))

    def pop(self) -> GameState | None:
        return self._frames.pop() if self._frames else None

    def clear(self) -> None:
        self._frames.clear()

    def __len__(self) -> int:
        return len(self._frames)


def initial_state(catalog: ItemCatalog) -> GameState:
    """Return the fixed state every new game starts from."""
    relationships = {}
    for name in NPC_ROSTER:
        relationships[name] = Relationship(**STARTING_RELATIONSHIPS.get(name, {}))
    return GameState(
        stats=dict(INITIAL_STATS),
        inventory=catalog.all(),
        time=TimeState(),
        location=START_LOCATION,
        history=[HistoryEntry(role="model", text=WELCOME_TEXT)],
        npc_relationships=relationships,
    )


def restore_with_retractions(current: GameState, previous: GameState) -> GameState:
    """Return *previous* with *current*'s newer history appended as retracted."""
    retracted = [
        replace(entry, retracted=True)
        for entry in current.history[len(previous.history):]
    ]
    restored = copy.deepcopy(previous)
    restored.history = previous.history + retracted
    return restored


def format_action(text: str, intent: Intent | None) -> str:
    return f"[{intent.label()}] {text}" if intent else text


class GameEngine:
    """Single owner of the game state; the UI only dispatches commands."""

    def __init__(
        self,
        catalog: ItemCatalog | None = None,
        state: GameState | None = None,
        dev_mode: bool = False,
    ) -> None:
        self.catalog = catalog or ItemCatalog.default()
        self.dev_mode = dev_mode
        self._state = state if state is not None else initial_state(self.catalog)
        self._undo = UndoStack()
        self._busy = False
        self._lock = threading.RLock()

    # Read access ---------------------------------------------------------
    @property
    def state(self) -> GameState:
        """The live state.  Treat as read-only."""
        return self._state

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    def snapshot(self) -> GameState:
        with self._lock:
            return copy.deepcopy(self._state)

    def effective_stats(self) -> dict[str, float]:
        with self._lock:
            return compute_effective_stats(self._state.stats, self._state.equipped)

    # Lifecycle -----------------------------------------------------------
    def new_game(self, config: GameConfig | None = None) -> list[str]:
        """Start over and return the choices to offer first."""
        config = config or GameConfig()
        state = initial_state(self.catalog)
        state.config = config
        start_text = TUTORIAL_START_TEXT if config.tutorial else GAME_START_TEXT
        state.history = [HistoryEntry(role="model", text=start_text)]
        if not config.tutorial:
            state.time.day = 1
        self.load(state)
        logger.info("New game started (tutorial=%s)", config.tutorial)
        return list(TUTORIAL_PHASE_1_CHOICES) if config.tutorial else []

    def load(self, state: GameState) -> None:
        """Replace the live state wholesale and drop the undo history."""
        with self._lock:
            self._state = state
            self._undo.clear()
            self._busy = False

    def serialize(self) -> dict[str, Any]:
        with self._lock:
            return state_to_dict(self._state)

    def deserialize(self, data: dict[str, Any]) -> None:
        self.load(state_from_dict(data))

    # Turns ---------------------------------------------------------------
    def begin_turn(self, text: str, intent: Intent | None = None) -> PendingTurn:
        """Run the pre-response half of a turn.

        The undo snapshot, the clock advance, any new-day effects and the
        player's entry in the history are all applied before this returns.
        """
        with self._lock:
            if self._busy:
                raise TurnInProgressError("A turn is already in progress")

            self._undo.push(self._state)
            state = copy.deepcopy(self._state)

            advance = advance_time(state.time.segment, state.time.slots_used)
            if advance.new_day:
                vitality = StatType.VITALITY.value
                state.stats[vitality] = min(STAT_MAX, state.stats.get(vitality, 0) + NEW_DAY_VITALITY)
                state.stats[StatType.FATIGUE.value] = 0
                state.time.day += 1
                logger.info("Day %d begins", state.time.day)
            state.time.segment = advance.segment
            state.time.slots_used = advance.slots

            state.history.append(HistoryEntry(role="user", text=format_action(text, intent)))
            self._state = state
            self._busy = True
            return PendingTurn(state=copy.deepcopy(state), intent=intent, text=text)

    def complete_turn(self, response_text: str) -> None:
        """Apply the narrative model's reply and release the turn."""
        narrative, updates = parse_response(response_text)
        with self._lock:
            if not self._busy:
                logger.warning("Ignoring a reply with no turn in progress")
                return
            try:
                self._state = apply_response(self._state, narrative, updates, self.catalog)
            finally:
                self._busy = False

    def fail_turn(self, notice: str = FAILURE_NOTICE) -> None:
        """Log *notice* and release the turn; the player may retry or undo."""
        with self._lock:
            if not self._busy:
                logger.warning("Ignoring a failure with no turn in progress")
                return
            self._state.history.append(HistoryEntry(role="model", text=notice))
            self._busy = False

    def cancel_turn(self) -> None:
        self.fail_turn(CANCEL_NOTICE)

    def play_turn(self, text: str, intent: Intent | None, narrator: Narrator) -> bool:
        """Run a whole turn synchronously.  Returns ``False`` if the call failed."""
        pending = self.begin_turn(text, intent)
        try:
            reply = narrator(pending.state, pending.intent, pending.text)
        except Exception:
            logger.exception("Narrative request failed")
            self.fail_turn()
            return False
        self.complete_turn(reply)
        return True

    async def play_turn_async(
        self, text: str, intent: Intent | None, narrator: AsyncNarrator
    ) -> bool:
        """Async variant of :meth:`play_turn`; cancellation is a failed turn."""
        pending = self.begin_turn(text, intent)
        try:
            reply = await narrator(pending.state, pending.intent, pending.text)
        except asyncio.CancelledError:
            self.cancel_turn()
            raise
        except Exception:
            logger.exception("Narrative request failed")
            self.fail_turn()
            return False
        self.complete_turn(reply)
        return True

    def undo(self) -> bool:
        """Restore the state from before the last turn.

        Entries logged since then stay in the history, marked retracted.
        Does nothing while a turn is in flight or when there is nothing to
        undo.
        """
        with self._lock:
            if self._busy:
                return False
            previous = self._undo.pop()
            if previous is None:
                return False
            self._state = restore_with_retractions(self._state, previous)
            return True

    def notify(self, text: str) -> None:
        """Append a system notice to the history."""
        with self._lock:
            self._state.history.append(HistoryEntry(role="model", text=text))

    # Equipment -----------------------------------------------------------
    def _set_loadout(self, loadout: equipment.Loadout) -> None:
        self._state.inventory, self._state.equipped = loadout

    def equip(self, index: int) -> None:
        with self._lock:
            self._set_loadout(equipment.equip(self._state.inventory, self._state.equipped, index))

    def equip_to_slot(self, index: int, slot: EquipSlot) -> None:
        with self._lock:
            self._set_loadout(
                equipment.equip_to_slot(self._state.inventory, self._state.equipped, index, slot)
            )

    def unequip(self, slot: EquipSlot) -> None:
        with self._lock:
            self._set_loadout(equipment.unequip(self._state.inventory, self._state.equipped, slot))

    def force_equip(self, item: Item) -> None:
        with self._lock:
            self._set_loadout(equipment.force_equip(self._state.inventory, self._state.equipped, item))

    # Relationships and debug tools ---------------------------------------
    def toggle_favorite(self, name: str) -> None:
        with self._lock:
            rel = self._state.npc_relationships.get(name)
            if rel is not None:
                rel.is_favorite = not rel.is_favorite

    def force_advance_slot(self) -> bool:
        """Move the clock one slot without taking a turn (dev mode only)."""
        if not self.dev_mode:
            return False
        with self._lock:
            time = self._state.time
            advance = advance_time(time.segment, time.slots_used)
            if advance.new_day:
                time.day += 1
            time.segment = advance.segment
            time.slots_used = advance.slots
            return True

    def set_stat(self, stat: str, value: float) -> None:
        with self._lock:
            if stat in self._state.stats:
                self._state.stats[stat] = value

    def dev_add_item(self, item: Item) -> None:
        with self._lock:
            self._state.inventory.append(item)
