"""Static world data: items, characters and opening text.

The engine only ever reads from here.  Items are validated once when an
:class:`ItemCatalog` is built so that a typo in a slot type surfaces as a
configuration error at start-up rather than mid-game.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Mapping

from pydantic import TypeAdapter, ValidationError

from models import Item
from state import StatType

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when the static item data is inconsistent."""


INITIAL_STATS: dict[str, float] = {
    StatType.CONFIDENCE.value: 10,
    StatType.WILL.value: 10,
    StatType.WIT.value: 10,
    StatType.GRACE.value: 10,
    StatType.UTILITY.value: 10,
    StatType.AWARENESS.value: 10,
    StatType.VITALITY.value: 100,
    StatType.FINANCE.value: 100,
    StatType.SOCIAL_CLASS.value: 0,
    StatType.BLUSH.value: 0,
    StatType.FATIGUE.value: 0,
    StatType.VULNERABILITY.value: 0,
    StatType.MALE_GAZE.value: 0,
    StatType.FEMALE_JUDGE.value: 0,
    StatType.DANGER.value: 0,
}

START_LOCATION = "home_lily_bedroom"

# Every character with a profile; all of them start in the relationship table.
NPC_ROSTER: tuple[str, ...] = (
    "Ramone", "Ashley", "Mitch", "Marcus", "Tiffany", "Alistar", "Roxy",
    "Tano", "The Agent", "Aric", "Finn", "Jax", "Veronica", "Benji",
    "Cassian", "Nova", "Esther", "The Stranger", "Brock", "Duke", "Jeb",
    "Vic", "Kwame", "Simone", "Tristan", "Oscar", "Rhiannon", "Fern",
    "Jasper", "Ranger Elias", "Ranger Skye", "The Shadow", "The Roughneck",
    "Dorian", "Sally", "Coach Elara", "Elana", "Nia", "Zachary", "Helena",
)

STARTING_RELATIONSHIPS: dict[str, dict[str, float]] = {
    "Mitch": {"trust": 100, "attraction": 0, "familiarity": 100},
    "Ashley": {"trust": 50, "attraction": 0, "familiarity": 50},
    "Veronica": {"trust": 10, "attraction": 0, "familiarity": 0},
    "Jax": {"trust": 10, "attraction": 0, "familiarity": 0},
}

WELCOME_TEXT = (
    "Welcome to Lily's Life.\n"
    "Please enter your API Key in Settings or Load a Game to begin."
)

GAME_START_TEXT = (
    "You wake up. The room is familiar, yet... different. You catch a glimpse "
    "of yourself in the mirror. This isn't the body you went to sleep in. "
    "It's Pre-Dawn. The house is quiet."
)

TUTORIAL_START_TEXT = (
    "The alarm isn't what wakes you. It's the weight. Or rather, the lack of it.\n"
    "You blink, staring at a ceiling that looks familiar but feels wrong. You "
    "sit up, your center of gravity completely thrown off, and stumble toward "
    "the full-length mirror in the corner.\n"
    "You freeze.\n"
    "Eli is gone. Staring back at you is a stranger with messy blonde hair and "
    "wide, terrified eyes. You touch your face, and the reflection mimics the "
    "movement instantly. This is real. This is you."
)

TUTORIAL_PHASE_1_CHOICES: tuple[str, ...] = (
    "[ CURIOSITY ] Lean in closer. Inspect the reflection.",
    "[ PANIC ] Stumble backward. Rush to the bathroom.",
    "[ PHYSIOLOGICAL ] Focus on the sensation. Ground yourself.",
)

TUTORIAL_INSTRUCTIONS = """
[SYSTEM INSTRUCTION: STRICT NARRATIVE RAILS]
You are running the "Tutorial Phase" of Lily's Life. Follow the script phases
below based on the player's location and actions.

GLOBAL RULES:
1. Do NOT invent new locations or NPCs until Phase 5 is complete.
2. If a [CHOICE BLOCK] is defined, offer similar choices.
3. Keep the tone immersive, slightly disorienting and sensory-focused.

PHASE 1: THE AWAKENING
LOCATION: home_lily_bedroom
OBJECTIVE: React to the new body. NEXT STEP: move to the bathroom.

PHASE 2: THE SHOWER (Archetype Lock)
TRIGGER: Player enters 'home_lily_shower' or chooses to wash up.
[CHOICE BLOCK]:
- [ EUPHORIC ] "Finally."
- [ EXCITED ] "This is wild."
- [ BITTER ] "Just my luck."
- [ RESISTANT ] "No, no, no."
- [ ANALYTICAL ] "Assess data."

PHASE 3: THE WARDROBE (Inventory Gate)
TRIGGER: Player enters 'home_lily_closet'.
MECHANIC: The player cannot leave the bedroom area until 'Underwear_Top' and
'Underwear_Bottom' are equipped. If they try, send them back:
"You can't go out there like this. Mitch is downstairs."

PHASE 4: THE BRO HUG (Social Test)
TRIGGER: Player enters 'home_mitch_livingroom'.
NPC: Mitch (best friend, does not know about the swap) gives a "bro hug".

PHASE 5: THE WORLD
TRIGGER: Player leaves the house. The "Male Gaze" stat activates for the
first time.
"""

ITEM_DATA: list[dict[str, Any]] = [
    {
        "id": "foot_sneakers_chucks_01",
        "name": "White Converse",
        "type": "Footwear",
        "base_price": 30,
        "description": "Classic canvas high-tops.",
        "tags": ["Low Class", "Neutral"],
        "stats": {"UTILITY": 3, "SOCIAL_CLASS": -1, "AWARENESS": -5},
    },
    {
        "id": "foot_heels_pumps_01",
        "name": "Red Pumps",
        "type": "Footwear",
        "base_price": 70,
        "description": "Extremely high, crimson leather stiletto heels.",
        "tags": ["High Class", "Feminine", "Restrictive"],
        "stats": {
            "UTILITY": -10,
            "SOCIAL_CLASS": 10,
            "MALE_GAZE": 8,
            "FEMALE_JUDGE": 10,
            "AWARENESS": 20,
        },
    },
    {
        "id": "btm_pants_yoga_01",
        "name": "Yoga Pants",
        "type": "Bottom",
        "base_price": 40,
        "description": "Skin-tight athletic pants.",
        "tags": ["Medium Class", "Feminine", "Revealing"],
        "stats": {"UTILITY": 8, "SOCIAL_CLASS": -3, "MALE_GAZE": 15, "FEMALE_JUDGE": 10},
    },
    {
        "id": "btm_skirt_mini_01",
        "name": "Black Mini Skirt",
        "type": "Bottom",
        "base_price": 35,
        "description": "A very short, high-risk fabric skirt.",
        "tags": ["Low Class", "Feminine", "High Risk"],
        "stats": {"UTILITY": -2, "SOCIAL_CLASS": 2, "MALE_GAZE": 12, "AWARENESS": 10},
    },
    {
        "id": "top_blouse_silk_01",
        "name": "Silk Blouse",
        "type": "Top",
        "base_price": 60,
        "description": "Long-sleeved, high-collared blouse in delicate material.",
        "tags": ["Medium Class", "Feminine", "Professional"],
        "stats": {"UTILITY": -3, "SOCIAL_CLASS": 15, "FEMALE_JUDGE": 8, "MALE_GAZE": 3},
    },
    {
        "id": "top_tank_wifebeater_01",
        "name": "Stained Tank",
        "type": "Top",
        "base_price": 5,
        "description": "A thin, ripped cotton tank top.",
        "tags": ["Low Class", "Masculine", "Trashy"],
        "stats": {"UTILITY": 1, "SOCIAL_CLASS": -10, "FEMALE_JUDGE": -10, "MALE_GAZE": 5},
    },
    {
        "id": "und_top_lace_01",
        "name": "Black Lace Bra",
        "type": "Underwear_Top",
        "base_price": 45,
        "description": "Delicate and itchy.",
        "tags": ["Feminine", "Lingerie"],
        "stats": {"MALE_GAZE": 5},
    },
    {
        "id": "und_btm_lace_01",
        "name": "Black Lace Panties",
        "type": "Underwear_Bottom",
        "base_price": 35,
        "description": "Matching set. Very drafty.",
        "tags": ["Feminine", "Lingerie"],
        "stats": {"MALE_GAZE": 5},
    },
    {
        "id": "outfit_dress_sundress_01",
        "name": "Flowery Sundress",
        "type": "FullBody",
        "base_price": 50,
        "description": "A light, low-cut dress with a flowing skirt.",
        "tags": ["Medium Class", "Feminine"],
        "stats": {"UTILITY": -1, "SOCIAL_CLASS": 5, "MALE_GAZE": 8, "AWARENESS": 10},
    },
]

_ITEMS_ADAPTER = TypeAdapter(list[Item])


class ItemCatalog:
    """Lookup from item id to the immutable :class:`Item` record."""

    def __init__(self, items: Iterable[Item | Mapping[str, Any]] = ()) -> None:
        raw = [i.model_dump() if isinstance(i, Item) else dict(i) for i in items]
        try:
            parsed = _ITEMS_ADAPTER.validate_python(raw)
        except ValidationError as exc:
            raise CatalogError(f"Invalid item data: {exc}") from exc

        self._items: dict[str, Item] = {}
        for item in parsed:
            if item.id in self._items:
                raise CatalogError(f"Duplicate item id: {item.id}")
            self._items[item.id] = item

    @classmethod
    def default(cls) -> "ItemCatalog":
        return cls(ITEM_DATA)

    def get(self, item_id: str) -> Item | None:
        return self._items.get(item_id)

    def all(self) -> list[Item]:
        return list(self._items.values())

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)
