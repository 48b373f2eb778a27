import logging
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from grid import MapGrid
from models import (
    NPC, Action, AddItem, ChangeRoom, Coordinates, Item, Level, Region,
    RemoveItem, Room,
)

if TYPE_CHECKING:
    from state import GameState

logger = logging.getLogger(__name__)

class WorldError(ValueError):
    """Content-authoring problems found while building the world. Fatal."""
    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("The level has content errors:\n" + "\n".join(f"  - {p}" for p in problems))

class WorldGraph:
    """Static registry of rooms, regions, NPCs and items, built once per session.

    Rooms sharing a coordinate are variants of that cell. They are kept in
    declaration order; the game state decides which one is active.
    """
    def __init__(self, level: Level, items: Iterable[Item]):
        self.level = level
        self.grid = MapGrid(level.maps)
        self.entry = level.entry
        self.regions: Dict[str, Region] = dict(level.regions)
        self.npcs: Dict[str, NPC] = dict(level.npcs)
        self.items: Dict[str, Item] = {}
        self.rooms_by_id: Dict[str, Room] = {}
        self.rooms_by_coord: Dict[Coordinates, List[Room]] = {}

        problems: List[str] = []
        for item in items:
            if item.id in self.items:
                problems.append(f"Item {item.id!r} is declared twice")
            self.items[item.id] = item

        for room in level.rooms:
            self._register_room(room, problems)
        for room in self.rooms():
            problems.extend(self._check_room(room))
        problems.extend(self._check_npcs())
        problems.extend(self._check_map())

        if problems:
            for problem in problems:
                logger.error(problem)
            raise WorldError(problems)
        logger.info(f"World built: {len(self.rooms_by_id)} rooms, {len(self.regions)} regions, {len(self.npcs)} NPCs")

    # ------------------------------------------------------------------
    # Construction checks
    # ------------------------------------------------------------------
    def _register_room(self, room: Room, problems: List[str]) -> None:
        existing = self.rooms_by_id.get(room.identifier)
        if existing is not None:
            if room.is_placeholder:
                logger.warning(f"Skipping placeholder room {room.identifier!r} at {room.coord}: the identifier is already declared")
                return
            if existing.coord == room.coord:
                problems.append(f"Room {room.identifier!r} is declared twice at {room.coord}")
            else:
                problems.append(f"Room id {room.identifier!r} is used at both {existing.coord} and {room.coord}")
            return
        self.rooms_by_id[room.identifier] = room
        self.rooms_by_coord.setdefault(room.coord, []).append(room)

    def _check_room(self, room: Room) -> List[str]:
        problems = []
        where = f"room {room.identifier!r} at {room.coord}"
        for region_id in room.regions:
            if region_id not in self.regions:
                problems.append(f"Unknown region {region_id!r} in {where}; available: {sorted(self.regions)}")
        for npc_id in room.npcs:
            if npc_id not in self.npcs:
                problems.append(f"Unknown NPC {npc_id!r} in {where}; available: {sorted(self.npcs)}")
        for room_item in room.items:
            if room_item.id not in self.items:
                problems.append(f"Unknown item {room_item.id!r} on the floor of {where}")
        if not self.grid.is_passable(room.coord):
            problems.append(f"The {where} does not sit on a floor cell\n{self.grid.picture(room.coord)}")
        problems.extend(self._check_actions(room.actions, where))
        return problems

    def _check_actions(self, actions: Iterable[Action], where: str) -> List[str]:
        problems = []
        for action in actions:
            for modifier in action.modify:
                if isinstance(modifier, ChangeRoom) and modifier.id not in self.rooms_by_id:
                    problems.append(f"ChangeRoom to undeclared room {modifier.id!r} in {where}")
                elif isinstance(modifier, (AddItem, RemoveItem)) and modifier.item not in self.items:
                    problems.append(f"{modifier.verb} of unknown item {modifier.item!r} in {where}")
        return problems

    def _check_npcs(self) -> List[str]:
        problems = []
        for npc_id, npc in self.npcs.items():
            for sale_item in npc.items:
                if sale_item.id not in self.items:
                    problems.append(f"NPC {npc_id!r} sells unknown item {sale_item.id!r}")
        for region_id, region in self.regions.items():
            problems.extend(self._check_actions(region.actions, f"region {region_id!r}"))
        return problems

    def _check_map(self) -> List[str]:
        problems = []
        empty = [c for c in self.grid.floor_cells() if c not in self.rooms_by_coord]
        if empty:
            stubs = "\n".join(f"  - title: TODO\n    coord: [{c.x}, {c.y}, {c.z}]\n    description: TODO" for c in empty)
            problems.append(f"Empty rooms were found in the map. Add the following:\n{stubs}\n{self.grid.picture(empty[0])}")
        if self.entry not in self.rooms_by_coord:
            problems.append(f"The entry {self.entry} has no room")
        return problems

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def rooms(self) -> List[Room]:
        return list(self.rooms_by_id.values())

    def variants(self, coord: Coordinates) -> List[Room]:
        return list(self.rooms_by_coord.get(coord, []))

    def room_by_id(self, room_id: str) -> Room:
        try:
            return self.rooms_by_id[room_id]
        except KeyError:
            raise WorldError([f"Unknown room id {room_id!r}"]) from None

    def active_room(self, coord: Coordinates, state: Optional["GameState"] = None) -> Optional[Room]:
        """The room variant currently standing at `coord`, or None for an empty cell."""
        variants = self.rooms_by_coord.get(coord)
        if not variants:
            return None
        if state is not None:
            override = state.variants.get(coord)
            if override is not None:
                for room in variants:
                    if room.identifier == override:
                        return room
        return variants[0]

    def effective_actions(self, room: Room) -> List[Action]:
        """Room actions first, then each region's actions in the room's region order."""
        actions = list(room.actions)
        for region_id in room.regions:
            actions.extend(self.regions[region_id].actions)
        return actions

    def npcs_in(self, room: Room) -> List[NPC]:
        return [self.npcs[npc_id] for npc_id in room.npcs]

    def item(self, item_id: str) -> Item:
        return self.items[item_id]
