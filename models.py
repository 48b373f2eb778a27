from __future__ import annotations
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

PLACEHOLDER = "TODO"

# ============================================================================
# Base Models and Enums
# ============================================================================
class Direction(str, Enum):
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def short(self) -> str:
        return self.value[0]

DIRECTION_OFFSETS: Dict[Direction, tuple] = {
    Direction.NORTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
}

class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int = 0
    y: int = 0
    z: int = 0

    @model_validator(mode="before")
    @classmethod
    def _from_sequence(cls, data: Any) -> Any:
        # Content files write coordinates as [x, y, z]
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise ValueError(f"coordinates need exactly three values, got {list(data)}")
            x, y, z = data
            return {"x": x, "y": y, "z": z}
        return data

    def step(self, direction: Direction) -> "Coordinates":
        dx, dy = DIRECTION_OFFSETS[direction]
        return Coordinates(x=self.x + dx, y=self.y + dy, z=self.z)

    def __str__(self) -> str:
        return f"[{self.x}, {self.y}, {self.z}]"

class Verb(str, Enum):
    LOOK = "Look"
    TALK = "Talk"
    HELP = "Help"
    ATTACK = "Attack"
    CUSTOM = "Custom"

class Outcome(str, Enum):
    DEATH = "Death"

    @property
    def is_terminal(self) -> bool:
        return self is Outcome.DEATH

class ItemVariant(str, Enum):
    CONSUMABLE = "Consumable"
    WEAPON = "Weapon"
    MONEY = "Money"

def normalize_phrase(text: Optional[str]) -> str:
    """Case-fold and collapse whitespace so aliases and player input compare equal."""
    if not text:
        return ""
    return " ".join(text.lower().split())

# ============================================================================
# Modifier Models
# ============================================================================
FlagValue = Union[bool, int, str]

class ChangeState(BaseModel):
    verb: Literal["ChangeState"] = "ChangeState"
    flag: str
    value: Optional[FlagValue] = None  # None clears the flag

    @model_validator(mode="before")
    @classmethod
    def _from_content(cls, data: Any) -> Any:
        # Level files write `{verb: ChangeState, <flag>: <value>}`
        if isinstance(data, dict) and "flag" not in data:
            extra = {key: value for key, value in data.items() if key != "verb"}
            if len(extra) != 1:
                raise ValueError(f"ChangeState names exactly one flag, got {sorted(extra)}")
            flag, value = next(iter(extra.items()))
            return {"verb": "ChangeState", "flag": flag, "value": value}
        return data

class ChangeRoom(BaseModel):
    verb: Literal["ChangeRoom"] = "ChangeRoom"
    id: str

class AddItem(BaseModel):
    verb: Literal["AddItem"] = "AddItem"
    item: str
    quantity: int = Field(default=1, ge=0)

class RemoveItem(BaseModel):
    verb: Literal["RemoveItem"] = "RemoveItem"
    item: str
    quantity: int = Field(default=1, ge=0)

Modifier = Annotated[Union[ChangeState, ChangeRoom, AddItem, RemoveItem], Field(discriminator="verb")]

# ============================================================================
# Action and Region Models
# ============================================================================
class Action(BaseModel):
    verb: Verb
    alias: Optional[str] = None
    targets: List[str] = Field(default_factory=list)
    value: str
    modify: List[Modifier] = Field(default_factory=list)
    outcome: Optional[Outcome] = None

    @field_validator("targets")
    @classmethod
    def _normalize_targets(cls, targets: List[str]) -> List[str]:
        return [normalize_phrase(str(target)) for target in targets]

    @field_validator("alias")
    @classmethod
    def _normalize_alias(cls, alias: Optional[str]) -> Optional[str]:
        return normalize_phrase(alias) or None

    @model_validator(mode="after")
    def _custom_needs_alias(self) -> "Action":
        if self.verb == Verb.CUSTOM and not self.alias:
            raise ValueError("Custom actions need an alias")
        if self.verb != Verb.CUSTOM and self.alias:
            raise ValueError(f"only Custom actions take an alias, not {self.verb.value}")
        return self

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not None and self.outcome.is_terminal

class Region(BaseModel):
    actions: List[Action] = Field(default_factory=list)

# ============================================================================
# Character and Item Models
# ============================================================================
class SaleItem(BaseModel):
    id: str
    cost: int = Field(ge=0)
    count: Optional[int] = Field(default=None, ge=0)

class NPC(BaseModel):
    name: str
    description: str
    targets: List[str] = Field(default_factory=list)
    talk: str
    items: List[SaleItem] = Field(default_factory=list)
    count: Optional[int] = Field(default=None, ge=0)  # stock per sale item, untracked when None

    @field_validator("targets")
    @classmethod
    def _normalize_targets(cls, targets: List[str]) -> List[str]:
        return [normalize_phrase(target) for target in targets]

    def initial_stock(self, sale_item: SaleItem) -> Optional[int]:
        return sale_item.count if sale_item.count is not None else self.count

class Item(BaseModel):
    id: str
    name: str
    targets: List[str] = Field(default_factory=list)
    sticky: bool = False
    variant: ItemVariant
    quantity: int = Field(default=1, ge=0)
    max_quantity: Optional[int] = None
    description: str

    @field_validator("targets")
    @classmethod
    def _normalize_targets(cls, targets: List[str]) -> List[str]:
        return [normalize_phrase(target) for target in targets]

    def answers_to(self, phrase: str) -> bool:
        return phrase in self.targets or phrase == self.id or phrase == normalize_phrase(self.name)

class RoomItem(BaseModel):
    id: str
    quantity: int = Field(default=1, ge=0)
    name: Optional[str] = None
    targets: List[str] = Field(default_factory=list)
    pickup: Optional[str] = None

    @field_validator("targets")
    @classmethod
    def _normalize_targets(cls, targets: List[str]) -> List[str]:
        return [normalize_phrase(target) for target in targets]

# ============================================================================
# Room and Level Models
# ============================================================================
class Room(BaseModel):
    title: str
    coord: Coordinates
    id: Optional[str] = None
    description: str = PLACEHOLDER
    actions: List[Action] = Field(default_factory=list)
    items: List[RoomItem] = Field(default_factory=list)
    npcs: List[str] = Field(default_factory=list)
    regions: List[str] = Field(default_factory=list)
    state: Dict[str, Optional[FlagValue]] = Field(default_factory=dict)

    @field_validator("actions", "items", "npcs", "regions", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def identifier(self) -> str:
        if self.id:
            return self.id
        return f"room-{self.coord.x}-{self.coord.y}-{self.coord.z}"

    @property
    def is_placeholder(self) -> bool:
        return self.description.strip() == PLACEHOLDER

class Level(BaseModel):
    maps: List[List[str]]
    entry: Coordinates
    npcs: Dict[str, NPC] = Field(default_factory=dict)
    regions: Dict[str, Region] = Field(default_factory=dict)
    rooms: List[Room] = Field(default_factory=list)

    @field_validator("npcs", "regions", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value
