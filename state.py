"""Game state dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import TypeAdapter

from models import Item


class StatType(str, Enum):
    """Identifiers of every tracked stat."""

    # Aptitude
    CONFIDENCE = "CONFIDENCE"
    WILL = "WILL"
    WIT = "WIT"
    GRACE = "GRACE"
    UTILITY = "UTILITY"
    AWARENESS = "AWARENESS"

    # Dynamic state
    VITALITY = "VITALITY"
    FINANCE = "FINANCE"
    SOCIAL_CLASS = "SOCIAL_CLASS"
    BLUSH = "BLUSH"
    FATIGUE = "FATIGUE"
    VULNERABILITY = "VULNERABILITY"

    # Environmental
    MALE_GAZE = "MALE_GAZE"
    FEMALE_JUDGE = "FEMALE_JUDGE"
    DANGER = "DANGER"


class TimeSegment(str, Enum):
    """Phases of a day in cyclic order."""

    PRE_DAWN = "Pre-Dawn"
    DAWN = "Dawn"
    MORNING = "Morning"
    DAY = "Day"
    EVENING = "Evening"
    NIGHT = "Night"
    POST_NIGHT = "Post-Night"


SEGMENT_ORDER: List[TimeSegment] = list(TimeSegment)
ZERO_SLOT_SEGMENTS = frozenset({TimeSegment.PRE_DAWN, TimeSegment.POST_NIGHT})


class EquipSlot(str, Enum):
    """Body slots an item can occupy."""

    TOP = "top"
    BOTTOM = "bottom"
    FOOTWEAR = "footwear"
    UNDERWEAR_TOP = "underwear_top"
    UNDERWEAR_BOTTOM = "underwear_bottom"
    ACCESSORY = "accessory"
    FULL_BODY = "full_body"


@dataclass
class Equipped:
    """At most one item per :class:`EquipSlot`."""

    top: Optional[Item] = None
    bottom: Optional[Item] = None
    footwear: Optional[Item] = None
    underwear_top: Optional[Item] = None
    underwear_bottom: Optional[Item] = None
    accessory: Optional[Item] = None
    full_body: Optional[Item] = None

    def get(self, slot: EquipSlot) -> Optional[Item]:
        return getattr(self, EquipSlot(slot).value)

    def set(self, slot: EquipSlot, item: Optional[Item]) -> None:
        setattr(self, EquipSlot(slot).value, item)

    def items(self) -> List[tuple[EquipSlot, Item]]:
        """Return ``(slot, item)`` pairs for every occupied slot."""
        pairs = []
        for f in fields(self):
            item = getattr(self, f.name)
            if item is not None:
                pairs.append((EquipSlot(f.name), item))
        return pairs

    def occupied(self) -> int:
        return len(self.items())


@dataclass
class TimeState:
    """Day counter plus the segment/slot cursor."""

    day: int = 0
    segment: TimeSegment = TimeSegment.PRE_DAWN
    slots_used: int = 0


@dataclass(frozen=True)
class HistoryEntry:
    """One line of the message log.  Only ``retracted`` ever changes."""

    role: Literal["user", "model"]
    text: str
    retracted: bool = False


@dataclass
class Relationship:
    trust: float = 0
    attraction: float = 0
    familiarity: float = 0
    is_favorite: bool = False


@dataclass
class GameConfig:
    """Options picked on the new game screen."""

    nsfw: bool = False
    intensity: Literal["Light", "Full"] = "Light"
    tutorial: bool = True
    first_time_events: bool = True


@dataclass
class GameState:
    """Represents the player's progress and world state."""

    stats: Dict[str, float] = field(default_factory=dict)
    inventory: List[Item] = field(default_factory=list)
    equipped: Equipped = field(default_factory=Equipped)
    time: TimeState = field(default_factory=TimeState)
    location: str = ""
    history: List[HistoryEntry] = field(default_factory=list)
    npc_relationships: Dict[str, Relationship] = field(default_factory=dict)
    config: Optional[GameConfig] = None


_STATE_ADAPTER = TypeAdapter(GameState)


def state_to_dict(state: GameState) -> Dict[str, Any]:
    """Return a JSON-compatible dict for *state*."""
    return _STATE_ADAPTER.dump_python(state, mode="json")


def state_from_dict(data: Dict[str, Any]) -> GameState:
    """Validate *data* back into a :class:`GameState`."""
    return _STATE_ADAPTER.validate_python(data)
