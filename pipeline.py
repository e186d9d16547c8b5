"""Folding narrative deltas into the game state."""

from __future__ import annotations

import copy
import logging

from catalog import ItemCatalog
from mechanics import clamp
from models import StateUpdates
from state import GameState, HistoryEntry, Relationship, StatType

logger = logging.getLogger(__name__)

RELATIONSHIP_FIELDS = ("trust", "attraction", "familiarity")


def apply_delta(state: GameState, updates: StateUpdates, catalog: ItemCatalog) -> GameState:
    """Return a copy of *state* with *updates* applied.

    Stat deltas only touch stats the state already tracks and are clamped to
    ``[0, 100]``, FINANCE included.  ``money_change`` goes to FINANCE
    unclamped.  Characters the state has not met yet are added with a zeroed
    relationship before their deltas are applied.  Item ids the catalog does
    not know are skipped.
    """
    new = copy.deepcopy(state)

    for stat, delta in updates.stat_changes.items():
        if stat not in new.stats:
            logger.debug("Ignoring change to unknown stat %s", stat)
            continue
        new.stats[stat] = clamp(new.stats[stat] + (delta or 0))

    if updates.money_change:
        finance = StatType.FINANCE.value
        new.stats[finance] = new.stats.get(finance, 0) + updates.money_change

    if updates.location_change:
        new.location = updates.location_change

    for name, change in updates.relationship_changes.items():
        rel = new.npc_relationships.get(name)
        if rel is None:
            logger.info("Discovered new character %s", name)
            rel = new.npc_relationships[name] = Relationship()
        for attr in RELATIONSHIP_FIELDS:
            delta = getattr(change, attr)
            if delta is not None:
                setattr(rel, attr, clamp(getattr(rel, attr) + delta))

    for item_id in updates.item_gained:
        item = catalog.get(item_id)
        if item is None:
            logger.warning("Skipping unknown item %s", item_id)
            continue
        new.inventory.append(item)

    for item_id in updates.item_lost:
        for index, item in enumerate(new.inventory):
            if item.id == item_id:
                del new.inventory[index]
                break
        else:
            logger.warning("Cannot remove %s: not in inventory", item_id)

    return new


def apply_response(
    state: GameState,
    narrative: str,
    updates: StateUpdates | None,
    catalog: ItemCatalog,
) -> GameState:
    """Apply *updates* (if any) then log *narrative* as the turn's reply."""
    new = apply_delta(state, updates, catalog) if updates is not None else copy.deepcopy(state)
    new.history.append(HistoryEntry(role="model", text=narrative))
    return new
