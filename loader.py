import logging
from pathlib import Path
from typing import Any, List

import yaml
from pydantic import TypeAdapter, ValidationError

from models import Item, Level
from world import WorldGraph

logger = logging.getLogger(__name__)

_items_adapter = TypeAdapter(List[Item])

class LevelLoadError(Exception):
    """A content file could not be read, parsed or validated."""
    def __init__(self, path: Path, reason: str):
        super().__init__(f"Unable to load {path}: {reason}")
        self.path = path
        self.reason = reason

def read_yaml(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise LevelLoadError(path, f"could not read the file ({e})") from e
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        where = f" at line {mark.line + 1}, column {mark.column + 1}" if mark else ""
        raise LevelLoadError(path, f"invalid YAML{where}: {e}") from e

def load_level(path: Path) -> Level:
    data = read_yaml(path)
    try:
        level = Level.model_validate(data)
    except ValidationError as e:
        raise LevelLoadError(path, str(e)) from e
    logger.info(f"Loaded level {path.name}: {len(level.rooms)} rooms on {len(level.maps)} map(s)")
    return level

def load_items(path: Path) -> List[Item]:
    data = read_yaml(path)
    try:
        return _items_adapter.validate_python(data or [])
    except ValidationError as e:
        raise LevelLoadError(path, str(e)) from e

def load_world(level_path: Path, items_path: Path) -> WorldGraph:
    """Load and validate a level and the item database into a world graph."""
    return WorldGraph(load_level(level_path), load_items(items_path))
