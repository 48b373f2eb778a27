import logging
from typing import List, Optional, Tuple

from executor import ModifierExecutor, Response
from models import NPC, Action, AddItem, Item, RemoveItem, Room, SaleItem, Verb, normalize_phrase
from state import GOLD, GameState
from world import WorldGraph

logger = logging.getLogger(__name__)

BUY = "buy"

class Shop:
    """Buying from NPCs that carry a shop list."""
    def __init__(self, world: WorldGraph, executor: ModifierExecutor):
        self.world = world
        self.executor = executor

    def listing(self, npc_id: str, state: GameState) -> List[Tuple[Item, SaleItem]]:
        """Sale items still in stock, in the NPC's declared order."""
        npc = self.world.npcs[npc_id]
        return [
            (self.world.item(sale_item.id), sale_item)
            for sale_item in npc.items
            if state.stock(npc_id, sale_item.id) != 0
        ]

    def render_listing(self, npc_id: str, state: GameState) -> str:
        return "\n".join(f"  ‣ {item.name} ({sale_item.cost} gp)" for item, sale_item in self.listing(npc_id, state))

    def buy(self, phrase: Optional[str], room: Room, state: GameState) -> Response:
        phrase = normalize_phrase(phrase)
        if not phrase:
            return Response(text="Buy what?")
        wanted, _, seller = phrase.partition(" from ")
        sellers = [npc_id for npc_id in room.npcs if self.world.npcs[npc_id].items]
        if seller:
            sellers = [npc_id for npc_id in sellers if seller in self.world.npcs[npc_id].targets]
        if not sellers:
            return Response(text="There is nobody here selling anything.")

        for npc_id in sellers:
            for item, sale_item in self.listing(npc_id, state):
                if item.answers_to(wanted):
                    return self._purchase(npc_id, self.world.npcs[npc_id], item, sale_item, state)
        if len(sellers) > 1:
            return Response(text=f"Nobody here has any {wanted} for sale.")
        return Response(text=f"{self.world.npcs[sellers[0]].name} doesn't have any {wanted} for sale.")

    def _purchase(self, npc_id: str, npc: NPC, item: Item, sale_item: SaleItem, state: GameState) -> Response:
        if state.gold < sale_item.cost:
            logger.info(f"Purchase of {item.id} refused: {state.gold} gold held, {sale_item.cost} needed")
            return Response(text=f"You can't afford the {item.name}. {npc.name} wants {sale_item.cost} gp and you have {state.gold}.")
        action = Action(
            verb=Verb.CUSTOM,
            alias=BUY,
            targets=[item.id],
            value=f"You hand {npc.name} {sale_item.cost} gp and receive the {item.name}.",
            modify=[RemoveItem(item=GOLD, quantity=sale_item.cost), AddItem(item=item.id, quantity=1)],
        )
        response = self.executor.execute(action, state)
        stock = state.stock(npc_id, item.id)
        if stock is not None:
            state.npc_stock[npc_id][item.id] = stock - 1
        logger.info(f"Bought {item.id} from {npc_id} for {sale_item.cost} gp")
        return response
