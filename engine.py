import logging
from typing import Any, Iterable, List, Optional, Tuple

from pydantic import BaseModel

from executor import ModifierExecutor, Response
from models import Coordinates, Direction, Item, Room, RoomItem, Verb, normalize_phrase
from resolver import NOT_UNDERSTOOD, Command, CommandKind, CommandResolver, parse_command
from shop import BUY, Shop
from state import GameState
from utils import boxed, wrap_description
from world import WorldGraph

logger = logging.getLogger(__name__)

DEATH_IF_MOVE = "death-if-move"
UNWRITTEN = "Nothing has been written about this place yet."
GAME_OVER = "Your story has ended. Type \"restart\" to begin again, or \"quit\" to leave."

class EngineResult(BaseModel):
    success: bool
    message: str
    data: Optional[Any] = None
    game_over: bool = False

class GameEngine:
    """Runs one session: parses a line, resolves it against the current room and applies the outcome."""
    def __init__(self, world: WorldGraph, starting_items: Iterable[str] = (), help_text: str = "",
                 line_width: int = 90, indent: int = 4):
        self.world = world
        self.starting_items = list(starting_items)
        self.help_text = help_text
        self.line_width = line_width
        self.indent = indent
        self.resolver = CommandResolver(world)
        self.executor = ModifierExecutor(world)
        self.shop = Shop(world, self.executor)
        self.state: Optional[GameState] = None

    def new_game(self) -> EngineResult:
        self.state = GameState.new(self.world, self.starting_items)
        logger.info(f"New session at {self.state.coord}")
        return EngineResult(success=True, message=self.describe_room())

    @property
    def current_room(self) -> Room:
        return self.world.active_room(self.state.coord, self.state)

    def process(self, text: str) -> EngineResult:
        if self.state is None:
            self.new_game()
        if self.state.game_over:
            return EngineResult(success=False, message=GAME_OVER, game_over=True)
        command = parse_command(text)
        logger.debug(f"Parsed {text!r} as {command.kind.value}")

        if command.kind == CommandKind.MESSAGE:
            return EngineResult(success=False, message=command.message)
        if command.kind == CommandKind.MOVE:
            return self.move(command.direction)
        if command.kind == CommandKind.INVENTORY:
            return EngineResult(success=True, message=self.describe_inventory())
        if command.kind == CommandKind.TAKE:
            return self.take(command.target)
        if command.kind == CommandKind.DROP:
            return self.drop(command.target)
        if command.kind == CommandKind.DEBUG:
            self.state.debug = not self.state.debug
            return EngineResult(success=True, message="Debug mode activated." if self.state.debug else "Debug mode de-activated.")
        return self.act(command)

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------
    def enter(self, coord: Coordinates) -> Room:
        """Place the player at `coord` and seed the active variant on first entry."""
        room = self.world.active_room(coord, self.state)
        if room is None:
            raise ValueError(f"No room at {coord}")
        self.state.coord = coord
        self.state.enter_room(room)
        return room

    def move(self, direction: Direction) -> EngineResult:
        target = self.world.grid.step(self.state.coord, direction)
        if target is None or self.world.active_room(target, self.state) is None:
            return EngineResult(success=False, message=f"You cannot move {direction.value}.")
        if self.state.is_set(DEATH_IF_MOVE):
            narration = self.state.flag(DEATH_IF_MOVE)
            self.state.game_over = True
            logger.info(f"Moved {direction.value} while {DEATH_IF_MOVE!r} was set at {self.state.coord}")
            return EngineResult(success=True, message=narration if isinstance(narration, str) else "You are dead.", game_over=True)
        self.enter(target)
        return EngineResult(success=True, message=self.describe_room())

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------
    def act(self, command: Command) -> EngineResult:
        room = self.current_room
        if command.verb == Verb.LOOK and not command.target:
            return EngineResult(success=True, message=self.describe_room())
        if command.verb == Verb.HELP and not command.target:
            return EngineResult(success=True, message=self.help_text)

        action = self.resolver.resolve(command, room, self.state)
        if action is NOT_UNDERSTOOD:
            return self.not_understood(command, room)

        response = self.executor.execute(action, self.state)
        message = response.text.rstrip()
        if command.verb in (Verb.LOOK, Verb.TALK) and not response.terminal:
            npc_id = self._npc_named(command.target, room)
            own = self.world.effective_actions(room)
            if npc_id and not any(action is candidate for candidate in own):
                listing = self.shop.render_listing(npc_id, self.state)
                if listing:
                    message = f"{message}\n\n{listing}"
        return self._result(response, message)

    def not_understood(self, command: Command, room: Room) -> EngineResult:
        target = normalize_phrase(command.target)
        if command.verb == Verb.LOOK:
            return self.look_at_item(target)
        if command.verb == Verb.CUSTOM and command.alias == BUY:
            response = self.shop.buy(target, room, self.state)
            return self._result(response, response.text)
        if not target:
            messages = {
                Verb.TALK: "You talk out loud for a bit and feel much better, thank you.",
                Verb.ATTACK: "Attack what?",
            }
            message = messages.get(command.verb, f"{command.alias.capitalize() if command.alias else 'Do'} what?")
            if command.verb == Verb.CUSTOM and not self._knows_alias(command.alias, room):
                message = f"You don't know how to {command.alias!r}. Type \"help\" for help."
            return EngineResult(success=False, message=message)
        if command.verb == Verb.TALK:
            return EngineResult(success=False, message=f"You can't talk to {target!r}.")
        if command.verb == Verb.HELP:
            return EngineResult(success=False, message=f"You can't help {target}.")
        if command.verb == Verb.ATTACK:
            return EngineResult(success=False, message=f"You think better of attacking the {target}.")
        if self._knows_alias(command.alias, room):
            return EngineResult(success=False, message=f"You can't {command.alias} the {target}.")
        return EngineResult(success=False, message=f"You don't know how to {command.alias!r}. Type \"help\" for help.")

    def look_at_item(self, target: str) -> EngineResult:
        room = self.current_room
        for npc_id in room.npcs:
            for item, _ in self.shop.listing(npc_id, self.state):
                if item.answers_to(target):
                    return EngineResult(success=True, message=item.description.rstrip())

        found = self._floor_item(target)
        if found is not None:
            room_item, item = found
            if room_item.pickup:
                return self.take(target)
            return EngineResult(success=True, message=item.description.rstrip())

        held = self._held_item(target)
        if held is not None:
            return EngineResult(success=True, message=held.description.rstrip())
        return EngineResult(success=False, message=f"You don't see a {target}.")

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------
    def take(self, target: Optional[str]) -> EngineResult:
        target = normalize_phrase(target)
        found = self._floor_item(target)
        if found is None:
            return EngineResult(success=False, message=f"You couldn't find a {target} to take.")
        room_item, item = found
        self.state.floor().remove(room_item)
        self.state.add_item(item.id, room_item.quantity)
        logger.debug(f"Picked up {room_item.quantity} {item.id} at {self.state.coord}")
        if room_item.pickup:
            return EngineResult(success=True, message=room_item.pickup.rstrip())
        return EngineResult(success=True, message=f"You place the {item.name} in your inventory.")

    def drop(self, target: Optional[str]) -> EngineResult:
        target = normalize_phrase(target)
        item = self._held_item(target)
        if item is None:
            return EngineResult(success=False, message=f"It does not look like you have a {target}.")
        if item.sticky:
            return EngineResult(success=False, message=f"The {target} appear(s) to be sticking to your hand.")
        quantity = self.state.remove_item(item.id, self.state.quantity(item.id))
        self.state.floor().append(RoomItem(id=item.id, quantity=quantity))
        return EngineResult(success=True, message=f"You dropped the {item.name}.")

    def _floor_item(self, target: str) -> Optional[Tuple[RoomItem, Item]]:
        for room_item in self.state.floor():
            item = self.world.item(room_item.id)
            if target in room_item.targets or item.answers_to(target):
                return room_item, item
        return None

    def _held_item(self, target: str) -> Optional[Item]:
        for item_id in self.state.inventory:
            item = self.world.item(item_id)
            if item.answers_to(target):
                return item
        return None

    def _npc_named(self, target: Optional[str], room: Room) -> Optional[str]:
        target = normalize_phrase(target)
        for npc_id in room.npcs:
            if target in self.world.npcs[npc_id].targets:
                return npc_id
        return None

    def _knows_alias(self, alias: Optional[str], room: Room) -> bool:
        return any(action.alias == alias for action in self.world.effective_actions(room))

    def _result(self, response: Response, message: str) -> EngineResult:
        return EngineResult(success=True, message=message, data=response.outcome, game_over=response.terminal)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def describe_room(self) -> str:
        room = self.current_room
        description = UNWRITTEN if room.is_placeholder else room.description
        parts = [room.title, wrap_description(description, self.line_width, self.indent)]
        floor_names = [item.name or self.world.item(item.id).name for item in self.state.floor()]
        if floor_names:
            parts.append("\n".join(floor_names))
        if self.state.debug:
            parts.append(f"Coord: {self.state.coord} ({room.identifier})")
        parts.append(self.describe_exits())
        return "\n\n".join(parts)

    def describe_exits(self) -> str:
        exits = self.world.grid.exits(self.state.coord)
        marks: List[str] = []
        for direction in Direction:
            if direction in exits and self.world.active_room(exits[direction], self.state) is not None:
                marks.append(direction.short)
            else:
                marks.append("_")
        return "Exits: " + " ".join(marks)

    def describe_inventory(self) -> str:
        lines = [boxed("Your inventory:")]
        if not self.state.inventory:
            lines.append("    (empty)")
        for item_id, quantity in self.state.inventory.items():
            item = self.world.item(item_id)
            if item.max_quantity is not None:
                lines.append(f"  ‣ {item.name} ({quantity})")
            else:
                lines.append(f"  ‣ {item.name}")
        return "\n".join(lines)
