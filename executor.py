import logging
from typing import Iterable, Optional, Set

from pydantic import BaseModel

from models import Action, AddItem, ChangeRoom, ChangeState, Outcome, RemoveItem
from state import GameState
from world import WorldGraph

logger = logging.getLogger(__name__)

class Response(BaseModel):
    text: str
    outcome: Optional[Outcome] = None

    @property
    def terminal(self) -> bool:
        return self.outcome is not None and self.outcome.is_terminal

class ModifierExecutor:
    """Applies a resolved action's modifiers to the game state, in declared order."""
    def __init__(self, world: WorldGraph):
        self.world = world

    def execute(self, action: Action, state: GameState) -> Response:
        # Modifiers still apply on a terminal outcome
        written: Set[str] = set()
        for modifier in action.modify:
            if isinstance(modifier, ChangeState):
                state.set_flag(modifier.flag, modifier.value)
                written.add(modifier.flag)
                logger.debug(f"Flag {modifier.flag!r} -> {modifier.value!r}")
            elif isinstance(modifier, ChangeRoom):
                self.change_room(modifier.id, state, keep=written)
            elif isinstance(modifier, AddItem):
                state.add_item(modifier.item, modifier.quantity)
            elif isinstance(modifier, RemoveItem):
                state.remove_item(modifier.item, modifier.quantity)
        if action.is_terminal:
            state.game_over = True
            logger.info(f"Terminal outcome {action.outcome.value} at {state.coord}")
        return Response(text=action.value, outcome=action.outcome)

    def change_room(self, room_id: str, state: GameState, keep: Iterable[str] = ()) -> None:
        room = self.world.room_by_id(room_id)
        state.set_variant(room.coord, room.identifier)
        logger.info(f"Variant at {room.coord} is now {room.identifier!r}")
        if room.coord == state.coord:
            state.enter_room(room, keep=keep)
