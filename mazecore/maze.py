from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Set, Tuple

MAZE_SEED = 555

# up, right, down, left
CARVE_STEPS: Tuple[Tuple[int, int], ...] = ((0, -2), (2, 0), (0, 2), (-2, 0))


class Position(NamedTuple):
    x: int
    y: int


@dataclass(frozen=True)
class Cell:
    x: int
    y: int
    is_wall: bool = True


Maze = List[List[Cell]]  # maze[y][x]


class SeededRandom:
    """Tiny LCG so a given seed always carves the same maze, on any platform."""

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)

    def next(self) -> float:
        self.seed = (self.seed * 9301 + 49297) % 233280
        return self.seed / 233280


class MazeGenerator:
    """
    Randomized depth-first maze carving.

    The generator re-seeds itself on every call, so the same width/height
    always produce the same layout.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self._rng = SeededRandom(MAZE_SEED)

    def _in_grid(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def generate(self) -> Maze:
        self._rng = SeededRandom(MAZE_SEED)
        walls = [[True] * self.width for _ in range(self.height)]

        start = Position(1, 1)
        if self._in_grid(*start):
            walls[start.y][start.x] = False
            stack: List[Position] = [start]
            visited: Set[Position] = {start}
            while stack:
                current = stack[-1]
                neighbors = self.get_unvisited_neighbors(current, visited)
                if not neighbors:
                    stack.pop()
                    continue
                nxt = neighbors[int(self._rng.next() * len(neighbors))]
                walls[(current.y + nxt.y) // 2][(current.x + nxt.x) // 2] = False
                walls[nxt.y][nxt.x] = False
                visited.add(nxt)
                stack.append(nxt)

        # Start and goal corners stay open even where carving never reached.
        w, h = self.width, self.height
        for x, y in ((0, 0), (1, 0), (0, 1), (1, 1), (w - 1, h - 1), (w - 1, h - 2), (w - 2, h - 1), (w - 2, h - 2)):
            if self._in_grid(x, y):
                walls[y][x] = False

        return [[Cell(x, y, walls[y][x]) for x in range(w)] for y in range(h)]

    def get_unvisited_neighbors(self, pos: Tuple[int, int], visited: Iterable[Tuple[int, int]]) -> List[Position]:
        seen = visited if isinstance(visited, (set, frozenset, dict)) else set(visited)
        out: List[Position] = []
        for dx, dy in CARVE_STEPS:
            nx, ny = pos[0] + dx, pos[1] + dy
            if 0 < nx < self.width - 1 and 0 < ny < self.height - 1 and (nx, ny) not in seen:
                out.append(Position(nx, ny))
        return out


def maze_size(maze: Maze) -> Tuple[int, int]:
    height = len(maze)
    width = len(maze[0]) if height else 0
    return width, height


def is_open(maze: Maze, pos: Tuple[int, int]) -> bool:
    width, height = maze_size(maze)
    x, y = pos
    if x < 0 or y < 0 or x >= width or y >= height:
        return False
    return not maze[y][x].is_wall


def copy_maze(maze: Maze) -> Maze:
    return [[Cell(c.x, c.y, c.is_wall) for c in row] for row in maze]
