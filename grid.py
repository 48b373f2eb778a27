import logging
from enum import Enum
from typing import Dict, List, Optional

from models import Coordinates, Direction

logger = logging.getLogger(__name__)

class Cell(str, Enum):
    FLOOR = "."
    WALL = "#"
    VOID = "-"

# A space ends the map row; whatever follows is an author's note.
COMMENT_START = " "

class MapError(ValueError):
    """A grid row holds a character that is not part of the map vocabulary."""
    def __init__(self, message: str, coord: Coordinates, picture: str = ""):
        super().__init__(f"{message} at {coord}\n{picture}" if picture else f"{message} at {coord}")
        self.coord = coord
        self.picture = picture

class MapGrid:
    """Passability lookup built from one character grid per z-level."""
    def __init__(self, maps: List[List[str]]):
        self.maps = maps
        self.cells: Dict[Coordinates, Cell] = {}
        for z, rows in enumerate(maps):
            for y, row in enumerate(rows):
                for x, ch in enumerate(row):
                    if ch == COMMENT_START:
                        break
                    try:
                        cell = Cell(ch)
                    except ValueError:
                        coord = Coordinates(x=x, y=y, z=z)
                        raise MapError(f"Unknown map character {ch!r}", coord, self.picture(coord)) from None
                    if cell != Cell.VOID:
                        self.cells[Coordinates(x=x, y=y, z=z)] = cell

    def cell(self, coord: Coordinates) -> Cell:
        return self.cells.get(coord, Cell.VOID)

    def is_passable(self, coord: Coordinates) -> bool:
        return self.cell(coord) == Cell.FLOOR

    def step(self, coord: Coordinates, direction: Direction) -> Optional[Coordinates]:
        """Return the neighbouring floor cell, or None when the way is blocked."""
        target = coord.step(direction)
        if not self.is_passable(target):
            logger.debug(f"Blocked move {direction.value} from {coord}")
            return None
        return target

    def exits(self, coord: Coordinates) -> Dict[Direction, Coordinates]:
        return {d: coord.step(d) for d in Direction if self.is_passable(coord.step(d))}

    def floor_cells(self) -> List[Coordinates]:
        return sorted(
            (c for c, cell in self.cells.items() if cell == Cell.FLOOR),
            key=lambda c: (c.z, c.y, c.x),
        )

    def picture(self, coord: Coordinates) -> str:
        """Render the map rows up to `coord` with a caret under it, for content errors."""
        if coord.z < 0 or coord.z >= len(self.maps):
            return f"No map was found at layer: {coord.z}"
        lines = []
        for y, row in enumerate(self.maps[coord.z]):
            lines.append(row)
            if y == coord.y:
                lines.append(" " * coord.x + "^")
                break
        return "\n".join(lines)
