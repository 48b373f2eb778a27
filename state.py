"""Mutable session state: position, active room variants, flags and inventory."""
import logging
from typing import Dict, Iterable, List, Optional, Set

from pydantic import BaseModel, Field

from models import Coordinates, FlagValue, Room, RoomItem
from world import WorldGraph

logger = logging.getLogger(__name__)

GOLD = "gold"

class GameState(BaseModel):
    coord: Coordinates
    variants: Dict[Coordinates, str] = Field(default_factory=dict)
    flags: Dict[str, FlagValue] = Field(default_factory=dict)
    inventory: Dict[str, int] = Field(default_factory=dict)
    floor_items: Dict[Coordinates, List[RoomItem]] = Field(default_factory=dict)
    npc_stock: Dict[str, Dict[str, int]] = Field(default_factory=dict)
    entered_rooms: Set[str] = Field(default_factory=set)
    debug: bool = False
    game_over: bool = False

    @classmethod
    def new(cls, world: WorldGraph, starting_items: Iterable[str] = ()) -> "GameState":
        """Start a session at the world's entry with the given items at their default quantities."""
        state = cls(coord=world.entry)
        for item_id in starting_items:
            state.add_item(item_id, world.item(item_id).quantity)
        for npc_id, npc in world.npcs.items():
            for sale_item in npc.items:
                stock = npc.initial_stock(sale_item)
                if stock is not None:
                    state.npc_stock.setdefault(npc_id, {})[sale_item.id] = stock
        state.enter_room(world.active_room(world.entry, state))
        return state

    # ------------------------------------------------------------------
    # Rooms
    # ------------------------------------------------------------------
    def set_variant(self, coord: Coordinates, room_id: str) -> None:
        self.variants[coord] = room_id

    def enter_room(self, room: Optional[Room], keep: Iterable[str] = ()) -> None:
        """Seed a room variant's flag defaults and floor items the first time it is entered.

        Flags named in `keep` were already written this turn and are left alone.
        """
        if room is None or room.identifier in self.entered_rooms:
            return
        self.entered_rooms.add(room.identifier)
        for flag, value in room.state.items():
            if flag not in keep:
                self.set_flag(flag, value)
        if room.items:
            floor = self.floor_items.setdefault(room.coord, [])
            floor.extend(item.model_copy(deep=True) for item in room.items)

    def floor(self, coord: Optional[Coordinates] = None) -> List[RoomItem]:
        return self.floor_items.setdefault(coord or self.coord, [])

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------
    def set_flag(self, flag: str, value: Optional[FlagValue]) -> None:
        if value is None:
            self.flags.pop(flag, None)
        else:
            self.flags[flag] = value

    def flag(self, flag: str) -> Optional[FlagValue]:
        return self.flags.get(flag)

    def is_set(self, flag: str) -> bool:
        return bool(self.flags.get(flag))

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------
    def quantity(self, item_id: str) -> int:
        return self.inventory.get(item_id, 0)

    def add_item(self, item_id: str, quantity: int = 1) -> None:
        total = self.quantity(item_id) + quantity
        if total:
            self.inventory[item_id] = total

    def remove_item(self, item_id: str, quantity: int = 1) -> int:
        """Remove up to `quantity`, clamping at zero. Returns how many were removed."""
        held = self.quantity(item_id)
        removed = min(held, quantity)
        if removed < quantity:
            logger.warning(f"Clamped removal of {quantity} {item_id}: only {held} held")
        remaining = held - removed
        if remaining:
            self.inventory[item_id] = remaining
        else:
            self.inventory.pop(item_id, None)
        return removed

    @property
    def gold(self) -> int:
        return self.quantity(GOLD)

    def stock(self, npc_id: str, item_id: str) -> Optional[int]:
        """Remaining stock, or None when the NPC's stock of that item is not tracked."""
        return self.npc_stock.get(npc_id, {}).get(item_id)
