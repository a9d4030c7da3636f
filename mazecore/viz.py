"""Plain-text and numpy views of a maze and a Q-table, shared by the viewer and scripts."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence, Tuple

import numpy as np

from mazecore.maze import Maze, maze_size


def render_ascii(maze: Maze, agent: Tuple[int, int], goal: Tuple[int, int], start: Optional[Tuple[int, int]] = None) -> str:
    rows = []
    for row in maze:
        line = []
        for cell in row:
            pos = (cell.x, cell.y)
            ch = "#" if cell.is_wall else "."
            if start is not None and pos == tuple(start):
                ch = "S"
            if pos == tuple(goal):
                ch = "G"
            if pos == tuple(agent):
                ch = "A"
            line.append(ch)
        rows.append("".join(line))
    return "\n".join(rows)


def value_grid(q_table: Mapping[Tuple[int, int], Sequence[float]], width: int, height: int) -> np.ndarray:
    heat = np.zeros((height, width), dtype=float)
    for (x, y), qvals in q_table.items():
        if 0 <= x < width and 0 <= y < height and qvals:
            heat[y, x] = float(max(qvals))
    return heat


def policy_grid(q_table: Mapping[Tuple[int, int], Sequence[float]], width: int, height: int) -> np.ndarray:
    best = np.full((height, width), -1, dtype=int)
    for (x, y), qvals in q_table.items():
        if 0 <= x < width and 0 <= y < height and qvals:
            best[y, x] = int(np.argmax(qvals))
    return best


def normalize(hm: np.ndarray) -> np.ndarray:
    mx = float(hm.max()) if hm.size else 0.0
    mn = float(hm.min()) if hm.size else 0.0
    if mx <= mn:
        return np.zeros_like(hm, dtype=float)
    return (hm - mn) / (mx - mn)


def maze_walls(maze: Maze) -> np.ndarray:
    width, height = maze_size(maze)
    walls = np.zeros((height, width), dtype=bool)
    for row in maze:
        for cell in row:
            walls[cell.y, cell.x] = cell.is_wall
    return walls
