"""Equipment slot resolution and swapping.

All functions take the current inventory and equipment and return new
ones; the inputs are never modified.  Every item taken out of a slot goes
back into the inventory so equipping never loses anything.
"""

from __future__ import annotations

import copy
import logging

from models import Item, ItemType
from state import EquipSlot, Equipped

logger = logging.getLogger(__name__)


class UnmappedItemTypeError(ValueError):
    """Raised when an item type has no equipment slot."""


SLOT_BY_TYPE: dict[ItemType, EquipSlot] = {
    ItemType.TOP: EquipSlot.TOP,
    ItemType.BOTTOM: EquipSlot.BOTTOM,
    ItemType.FOOTWEAR: EquipSlot.FOOTWEAR,
    ItemType.ACCESSORY: EquipSlot.ACCESSORY,
    ItemType.UNDERWEAR_TOP: EquipSlot.UNDERWEAR_TOP,
    ItemType.UNDERWEAR_BOTTOM: EquipSlot.UNDERWEAR_BOTTOM,
    ItemType.FULL_BODY: EquipSlot.FULL_BODY,
}

# Slots vacated when an item lands in the key slot.
EXCLUSIVE_SLOTS: dict[EquipSlot, tuple[EquipSlot, ...]] = {
    EquipSlot.FULL_BODY: (EquipSlot.TOP, EquipSlot.BOTTOM),
    EquipSlot.TOP: (EquipSlot.FULL_BODY,),
    EquipSlot.BOTTOM: (EquipSlot.FULL_BODY,),
}

Loadout = tuple[list[Item], Equipped]


def slot_for(item_type: ItemType) -> EquipSlot:
    """Return the equipment slot for *item_type*."""
    try:
        return SLOT_BY_TYPE[ItemType(item_type)]
    except (KeyError, ValueError) as exc:
        raise UnmappedItemTypeError(f"No equipment slot for item type {item_type!r}") from exc


def _place(inventory: list[Item], equipped: Equipped, item: Item) -> None:
    slot = slot_for(item.type)
    for other in EXCLUSIVE_SLOTS.get(slot, ()):
        displaced = equipped.get(other)
        if displaced is not None:
            inventory.append(displaced)
            equipped.set(other, None)

    current = equipped.get(slot)
    if current is not None:
        inventory.append(current)
    equipped.set(slot, item)
    logger.debug("Equipped %s in %s", item.id, slot.value)


def equip(inventory: list[Item], equipped: Equipped, index: int) -> Loadout:
    """Equip the inventory item at *index*.

    An index outside the inventory leaves both collections unchanged.
    """
    new_inventory = list(inventory)
    new_equipped = copy.copy(equipped)
    if not 0 <= index < len(new_inventory):
        return new_inventory, new_equipped

    item = new_inventory.pop(index)
    _place(new_inventory, new_equipped, item)
    return new_inventory, new_equipped


def force_equip(inventory: list[Item], equipped: Equipped, item: Item) -> Loadout:
    """Equip *item* without taking it from the inventory (debug only)."""
    new_inventory = list(inventory)
    new_equipped = copy.copy(equipped)
    _place(new_inventory, new_equipped, item)
    return new_inventory, new_equipped


def equip_to_slot(
    inventory: list[Item], equipped: Equipped, index: int, slot: EquipSlot
) -> Loadout:
    """Equip the item at *index* only if it belongs in *slot*.

    Used for drag-and-drop onto a specific slot; a mismatch is a no-op.
    """
    if 0 <= index < len(inventory) and slot_for(inventory[index].type) == EquipSlot(slot):
        return equip(inventory, equipped, index)
    return list(inventory), copy.copy(equipped)


def unequip(inventory: list[Item], equipped: Equipped, slot: EquipSlot) -> Loadout:
    """Move the item in *slot* back into the inventory."""
    new_inventory = list(inventory)
    new_equipped = copy.copy(equipped)
    item = new_equipped.get(slot)
    if item is not None:
        new_inventory.append(item)
        new_equipped.set(slot, None)
    return new_inventory, new_equipped
