import pytest

from executor import ModifierExecutor
from models import Coordinates, Level
from shop import Shop
from state import GameState
from world import WorldGraph


def c(x, y, z=0):
    return Coordinates(x=x, y=y, z=z)


@pytest.fixture
def shop(world):
    return Shop(world, ModifierExecutor(world))


@pytest.fixture
def bakery(world):
    return world.active_room(c(3, 1))


class TestBakery:
    def test_purchase_moves_gold_and_item(self, shop, bakery, state):
        response = shop.buy("bread", bakery, state)
        assert "receive the Bread" in response.text
        assert state.gold == 1
        assert state.quantity("bread") == 1

    def test_insufficient_funds_leaves_state_alone(self, shop, bakery, state):
        state.inventory["gold"] = 1
        before = state.model_copy(deep=True)
        response = shop.buy("loaf", bakery, state)
        assert "can't afford" in response.text
        assert state == before

    def test_stock_runs_out(self, shop, bakery, state):
        assert [item.id for item, _ in shop.listing("baker", state)] == ["bread"]
        shop.buy("bread", bakery, state)
        assert shop.listing("baker", state) == []
        assert state.stock("baker", "bread") == 0
        response = shop.buy("bread", bakery, state)
        assert "doesn't have any bread" in response.text
        assert state.quantity("bread") == 1
        assert bakery.npcs == ["baker"]

    def test_named_seller(self, shop, bakery, state):
        assert "receive" in shop.buy("bread from old baker", bakery, state).text

    def test_unknown_seller(self, shop, bakery, state):
        assert shop.buy("bread from butcher", bakery, state).text == "There is nobody here selling anything."

    def test_nobody_sells_in_an_empty_room(self, shop, world, state):
        assert "nobody here" in shop.buy("bread", world.room_by_id("hall"), state).text

    def test_two_sellers_without_the_item(self, level_data, items):
        level_data["npcs"]["grocer"] = {
            "name": "Grocer", "description": "A grocer.", "targets": ["grocer"],
            "talk": "Hello.", "items": [{"id": "bread", "cost": 3}],
        }
        level_data["rooms"][3]["npcs"] = ["baker", "grocer"]
        world = WorldGraph(Level.model_validate(level_data), items)
        state = GameState.new(world, ["gold"])
        response = Shop(world, ModifierExecutor(world)).buy("cake", world.active_room(c(3, 1)), state)
        assert response.text == "Nobody here has any cake for sale."

    def test_buy_nothing(self, shop, bakery, state):
        assert shop.buy("", bakery, state).text == "Buy what?"

    def test_listing_render(self, shop, state):
        assert shop.render_listing("baker", state) == "  ‣ Bread (2 gp)"


class TestAppleFarmer:
    @pytest.fixture
    def market(self, stone_end):
        return stone_end.active_room(c(11, 15))

    @pytest.fixture
    def farmer_shop(self, stone_end):
        return Shop(stone_end, ModifierExecutor(stone_end))

    def test_buy_apple_with_one_gold(self, farmer_shop, market, stone_end):
        state = GameState.new(stone_end)
        state.inventory["gold"] = 1
        response = farmer_shop.buy("apple", market, state)
        assert "Apple" in response.text
        assert state.gold == 0
        assert state.quantity("apple") == 1

    def test_buy_apple_without_gold(self, farmer_shop, market, stone_end):
        state = GameState.new(stone_end)
        before = dict(state.inventory)
        response = farmer_shop.buy("apple", market, state)
        assert "can't afford" in response.text
        assert state.inventory == before
        assert state.gold == 0

    def test_apples_are_not_stock_tracked(self, farmer_shop, market, stone_end):
        state = GameState.new(stone_end)
        state.inventory["gold"] = 3
        for _ in range(3):
            farmer_shop.buy("apple from farmer", market, state)
        assert state.quantity("apple") == 3
        assert state.stock("apple-farmer", "apple") is None
