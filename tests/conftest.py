"""Shared fixtures: a small hand-built level and the shipped Stone End level."""

from pathlib import Path

import pytest

from engine import GameEngine
from loader import load_world
from models import Item, Level
from state import GameState
from world import WorldGraph

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
STONE_END_LEVEL = DATA_DIR / "levels" / "stone-end-market.yml"
STONE_END_ITEMS = DATA_DIR / "items.yml"


# ============================================================================
# A tiny bakery level
# ============================================================================
#
#   #####
#   #...#    (1,1) hall      (2,1) door-closed / door-open   (3,1) bakery
#   #.#.#    (1,2) cellar    (3,2) trapdoor
#   #####


@pytest.fixture
def items_data():
    return [
        {"id": "gold", "name": "Gold", "targets": ["gold", "coin"], "variant": "Money",
         "quantity": 3, "max_quantity": 999, "description": "Shiny coins."},
        {"id": "sword", "name": "Sword", "targets": ["sword"], "variant": "Weapon",
         "sticky": True, "description": "Your sword."},
        {"id": "bread", "name": "Bread", "targets": ["bread", "loaf"], "variant": "Consumable",
         "max_quantity": 5, "description": "A warm loaf."},
    ]


@pytest.fixture
def level_data():
    return {
        "maps": [[
            "#####  the bakery",
            "#...#",
            "#.#.#",
            "#####",
        ]],
        "entry": [1, 1, 0],
        "npcs": {
            "baker": {
                "name": "Baker",
                "description": "A floury baker.",
                "targets": ["baker", "Old Baker"],
                "talk": "\"Fresh bread!\"",
                "items": [{"id": "bread", "cost": 2}],
                "count": 1,
            },
        },
        "regions": {
            "house": {
                "actions": [
                    {"verb": "Look", "targets": ["wall", "walls"], "value": "Region wall."},
                    {"verb": "Look", "targets": ["old oven"], "value": "The oven is cold."},
                    {"verb": "Custom", "alias": "climb", "targets": ["wall"], "value": "Too smooth."},
                ],
            },
        },
        "rooms": [
            {
                "title": "Hall",
                "coord": [1, 1, 0],
                "id": "hall",
                "description": "A narrow hall.",
                "regions": ["house"],
                "actions": [
                    {"verb": "Look", "targets": ["wall"], "value": "Room wall."},
                ],
            },
            {
                "title": "Closed Door",
                "coord": [2, 1, 0],
                "id": "door-closed",
                "description": "A closed door.",
                "regions": ["house"],
                "actions": [
                    {"verb": "Look", "targets": ["door"], "value": "The door swings open.",
                     "modify": [
                         {"verb": "ChangeState", "door-open": True},
                         {"verb": "ChangeRoom", "id": "door-open"},
                     ]},
                ],
            },
            {
                "title": "Open Door",
                "coord": [2, 1, 0],
                "id": "door-open",
                "description": "An open door.",
                "actions": [
                    {"verb": "Look", "targets": ["door"], "value": "The door stands open."},
                ],
            },
            {
                "title": "Bakery",
                "coord": [3, 1, 0],
                "description": "It smells of bread.",
                "npcs": ["baker"],
                "regions": ["house"],
            },
            {
                "title": "Cellar",
                "coord": [1, 2, 0],
                "id": "cellar",
                "description": "A damp cellar.",
                "items": [
                    {"id": "gold", "quantity": 2, "targets": ["glint"],
                     "name": "Something glints in the dust.", "pickup": "Two gold coins!"},
                ],
            },
            {
                "title": "Trapdoor",
                "coord": [3, 2, 0],
                "id": "trapdoor",
                "description": "The floor creaks.",
                "state": {"death-if-move": "The floor gives way."},
                "actions": [
                    {"verb": "Look", "targets": ["floor"], "value": "You find the safe boards.",
                     "modify": [{"verb": "ChangeState", "death-if-move": None}]},
                    {"verb": "Attack", "targets": ["floor"], "value": "You stamp through the floor.",
                     "outcome": "Death",
                     "modify": [
                         {"verb": "RemoveItem", "item": "gold", "quantity": 10},
                         {"verb": "AddItem", "item": "bread", "quantity": 1},
                     ]},
                ],
            },
        ],
    }


@pytest.fixture
def items(items_data):
    return [Item.model_validate(entry) for entry in items_data]


@pytest.fixture
def world(level_data, items):
    return WorldGraph(Level.model_validate(level_data), items)


@pytest.fixture
def state(world):
    return GameState.new(world, ["gold", "sword"])


@pytest.fixture
def bakery_engine(world):
    engine = GameEngine(world, starting_items=["gold", "sword"], help_text="Try looking around.")
    engine.new_game()
    return engine


# ============================================================================
# Stone End
# ============================================================================
@pytest.fixture(scope="session")
def stone_end():
    return load_world(STONE_END_LEVEL, STONE_END_ITEMS)


@pytest.fixture
def engine(stone_end):
    engine = GameEngine(stone_end, starting_items=["sword", "gold"], help_text="help")
    engine.new_game()
    return engine
