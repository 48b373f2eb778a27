import logging
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel

from models import Action, Direction, Room, Verb, normalize_phrase
from state import GameState
from world import WorldGraph

logger = logging.getLogger(__name__)

# ============================================================================
# Command Parsing
# ============================================================================
class CommandKind(str, Enum):
    ACTION = "action"
    MOVE = "move"
    INVENTORY = "inventory"
    TAKE = "take"
    DROP = "drop"
    DEBUG = "debug"
    MESSAGE = "message"

class Command(BaseModel):
    kind: CommandKind
    verb: Optional[Verb] = None
    alias: Optional[str] = None
    target: Optional[str] = None
    direction: Optional[Direction] = None
    message: str = ""

VERB_WORDS = {
    "look": Verb.LOOK, "l": Verb.LOOK, "examine": Verb.LOOK,
    "talk": Verb.TALK, "t": Verb.TALK,
    "help": Verb.HELP, "h": Verb.HELP,
    "attack": Verb.ATTACK,
}
DIRECTION_WORDS = {
    "north": Direction.NORTH, "n": Direction.NORTH,
    "east": Direction.EAST, "e": Direction.EAST,
    "south": Direction.SOUTH, "s": Direction.SOUTH,
    "west": Direction.WEST, "w": Direction.WEST,
}
FILLER_WORDS = ("at", "to", "in", "up")
TAKE_WORDS = ("take", "pick", "pickup", "grab")

def _target(command: str, words: List[str]) -> Union[Optional[str], Command]:
    """Join the remaining words into a target phrase, dropping one leading filler word."""
    if not words:
        return None
    if words[0] in FILLER_WORDS:
        if len(words) == 1:
            return Command(kind=CommandKind.MESSAGE, message=f"{command} {words[0]}... what?")
        words = words[1:]
    return " ".join(words)

def parse_command(text: str) -> Command:
    """Tokenize one line of player input. Empty input is a plain look around."""
    words = normalize_phrase(text).split()
    if not words:
        return Command(kind=CommandKind.ACTION, verb=Verb.LOOK)
    word, rest = words[0], words[1:]

    if word in DIRECTION_WORDS:
        return Command(kind=CommandKind.MOVE, direction=DIRECTION_WORDS[word])
    if word == "go":
        if not rest:
            return Command(kind=CommandKind.MESSAGE, message="Where do you want to go?")
        phrase = " ".join(rest)
        if phrase in DIRECTION_WORDS:
            return Command(kind=CommandKind.MOVE, direction=DIRECTION_WORDS[phrase])
        return Command(kind=CommandKind.MESSAGE, message=f"You don't know how to go {phrase!r}.")
    if word in ("inventory", "inv", "i", "items"):
        return Command(kind=CommandKind.INVENTORY)
    if word == "debug":
        return Command(kind=CommandKind.DEBUG)

    target = _target(word, rest)
    if isinstance(target, Command):
        return target
    if word in TAKE_WORDS:
        if target is None:
            if word == "pick":
                return Command(kind=CommandKind.MESSAGE, message="You pick your nose. Gross.")
            return Command(kind=CommandKind.MESSAGE, message="This relationship is on the rocks, all you do is take take take.")
        return Command(kind=CommandKind.TAKE, target=target)
    if word == "drop":
        if target is None:
            return Command(kind=CommandKind.MESSAGE, message="You stop, drop and roll.")
        return Command(kind=CommandKind.DROP, target=target)
    if word in VERB_WORDS:
        return Command(kind=CommandKind.ACTION, verb=VERB_WORDS[word], target=target)
    return Command(kind=CommandKind.ACTION, verb=Verb.CUSTOM, alias=word, target=target)

# ============================================================================
# Resolution
# ============================================================================
class _NotUnderstood:
    """Sentinel for a verb/target pair no candidate action answers to."""
    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_UNDERSTOOD"

NOT_UNDERSTOOD = _NotUnderstood()

def target_matches(target: str, alias: str) -> bool:
    """True when `target` equals `alias` or appears in it as a run of whole words."""
    if not target:
        return False
    if target == alias:
        return True
    return f" {target} " in f" {alias} "

class CommandResolver:
    """Maps a parsed command to the first matching action in candidate order.

    Candidates are the room's own actions, then its regions' actions in the
    room's region order, then fallbacks built from the NPCs standing in the
    room. Declaration order is the priority order, so a room can override a
    region-wide default by declaring the same verb and target itself.
    Authored actions match a target as whole words inside an alias. NPC
    fallbacks only match an alias exactly.
    Resolution never touches the game state.
    """
    def __init__(self, world: WorldGraph):
        self.world = world

    def fallbacks(self, room: Room) -> List[Action]:
        actions = []
        for npc in self.world.npcs_in(room):
            actions.append(Action(verb=Verb.LOOK, targets=npc.targets, value=npc.description))
            actions.append(Action(verb=Verb.TALK, targets=npc.targets, value=npc.talk))
        return actions

    def resolve(self, command: Command, room: Optional[Room], state: GameState) -> Union[Action, _NotUnderstood]:
        if room is None or command.verb is None:
            return NOT_UNDERSTOOD
        target = normalize_phrase(command.target)
        for action in self.world.effective_actions(room):
            if self._answers(action, command) and any(target_matches(target, alias) for alias in action.targets):
                logger.debug(f"Resolved {command.verb.value} {target!r} in {room.identifier!r}")
                return action
        for action in self.fallbacks(room):
            if self._answers(action, command) and target in action.targets:
                logger.debug(f"Resolved {command.verb.value} {target!r} to an NPC in {room.identifier!r}")
                return action
        logger.debug(f"No action for {command.verb.value} {target!r} in {room.identifier!r} at {state.coord}")
        return NOT_UNDERSTOOD

    @staticmethod
    def _answers(action: Action, command: Command) -> bool:
        if action.verb != command.verb:
            return False
        return action.verb != Verb.CUSTOM or action.alias == command.alias
