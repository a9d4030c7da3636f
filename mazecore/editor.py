from __future__ import annotations

from dataclasses import replace
from typing import Tuple

from mazecore.maze import Maze, Position, copy_maze, maze_size

TOOLS = ("wall", "start", "goal", "eraser")


class MazeEditor:
    """Edits a private copy of a maze together with its start and goal markers."""

    def __init__(self, maze: Maze, start: Tuple[int, int], goal: Tuple[int, int]) -> None:
        self._initial = copy_maze(maze)
        self._initial_start = Position(*start)
        self._initial_goal = Position(*goal)
        self.grid = copy_maze(maze)
        self.start = self._initial_start
        self.goal = self._initial_goal

    def _set_wall(self, x: int, y: int, wall: bool) -> None:
        cell = self.grid[y][x]
        if cell.is_wall != wall:
            self.grid[y][x] = replace(cell, is_wall=wall)

    def apply(self, tool: str, x: int, y: int) -> None:
        if tool not in TOOLS:
            raise ValueError(f"Unknown tool: {tool}")
        width, height = maze_size(self.grid)
        if not (0 <= x < width and 0 <= y < height):
            return
        pos = Position(x, y)
        if tool == "start":
            self.start = pos
            self._set_wall(x, y, False)
        elif tool == "goal":
            self.goal = pos
            self._set_wall(x, y, False)
        elif tool == "wall":
            if pos in (self.start, self.goal):
                return
            self._set_wall(x, y, True)
        else:
            self._set_wall(x, y, False)

    def clear(self) -> None:
        self.grid = [[replace(c, is_wall=False) for c in row] for row in self.grid]

    @property
    def has_changes(self) -> bool:
        if self.start != self._initial_start or self.goal != self._initial_goal:
            return True
        for row, initial_row in zip(self.grid, self._initial):
            for cell, initial in zip(row, initial_row):
                if cell.is_wall != initial.is_wall:
                    return True
        return False

    def result(self) -> Tuple[Maze, Position, Position]:
        return copy_maze(self.grid), self.start, self.goal
