"""Data models used by the Lily's Life application."""

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ItemType(str, Enum):
    """Slot-type tag carried by every catalog item."""

    TOP = "Top"
    BOTTOM = "Bottom"
    FOOTWEAR = "Footwear"
    ACCESSORY = "Accessory"
    UNDERWEAR_TOP = "Underwear_Top"
    UNDERWEAR_BOTTOM = "Underwear_Bottom"
    FULL_BODY = "FullBody"


class Item(BaseModel):
    """An immutable catalog item.  Equipping moves references, never copies."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: ItemType
    base_price: float = 0
    stats: dict[str, float] = Field(default_factory=dict)
    description: str = ""
    tags: tuple[str, ...] = ()


class Intent(BaseModel):
    """Optional framing the player picks before choosing an action."""

    type: Literal["Question", "Request", "Confess", "Praise", "Act", "Challenge", "Lie"]
    manner: Literal[
        "Neutral",
        "Curious",
        "Serious",
        "Sarcastic",
        "Humorous",
        "Teasing",
        "Flirty",
        "Aggressive",
        "Hesitant",
    ]

    def label(self) -> str:
        return f"{self.type} - {self.manner}"


class RelationshipChange(BaseModel):
    """Partial relationship delta; absent fields are left untouched."""

    trust: float | None = None
    attraction: float | None = None
    familiarity: float | None = None


class StateUpdates(BaseModel):
    """State changes requested by the narrative model for one turn."""

    model_config = ConfigDict(populate_by_name=True)

    stat_changes: dict[str, float | None] = Field(default_factory=dict, alias="statChanges")
    money_change: float | None = Field(default=None, alias="moneyChange")
    location_change: str | None = Field(default=None, alias="locationChange")
    relationship_changes: dict[str, RelationshipChange] = Field(
        default_factory=dict, alias="relationshipChanges"
    )
    item_gained: list[str] = Field(default_factory=list, alias="itemGained")
    item_lost: list[str] = Field(default_factory=list, alias="itemLost")

    @field_validator("stat_changes", "relationship_changes", mode="before")
    @classmethod
    def null_mapping(cls, v):
        if v is None:
            return {}
        if isinstance(v, dict):
            return {k: val for k, val in v.items() if val is not None}
        return v

    @field_validator("item_gained", "item_lost", mode="before")
    @classmethod
    def null_list(cls, v):
        return [] if v is None else v


class GameEngineResponse(BaseModel):
    """Full response returned from the narrative model for a player's action.

    ``null`` anywhere in ``updates`` means "no change", the same as leaving
    the key out.
    """

    narrative: str
    updates: StateUpdates = Field(default_factory=StateUpdates)

    @field_validator("updates", mode="before")
    @classmethod
    def null_updates(cls, v):
        return {} if v is None else v


class SaveGame(BaseModel):
    """Versioned envelope written to disk by :mod:`storage.saves`."""

    model_config = ConfigDict(extra="forbid")

    save_version: int = 1
    name: str | None = None
    saved_at: datetime = Field(default_factory=datetime.now)
    state: dict[str, Any]
