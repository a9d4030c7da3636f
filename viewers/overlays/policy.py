from __future__ import annotations

import math

import pygame

from mazecore.qlearning import ACTION_DELTAS, Action
from mazecore.viz import policy_grid
from viewers.ui.theme import Theme


class PolicyOverlay:
    """Greedy-action arrows for every visited cell."""

    def __init__(self) -> None:
        self._cache_key = None
        self._cache = None

    def render(self, screen: pygame.Surface, theme: Theme, q_table: dict, rc, version: int, walls: set | None = None) -> None:
        key = (version, rc.w, rc.h)
        if key != self._cache_key:
            self._cache_key = key
            self._cache = policy_grid(q_table, rc.w, rc.h)
        best = self._cache
        if best is None:
            return
        for y in range(rc.h):
            for x in range(rc.w):
                if walls and (x, y) in walls:
                    continue
                a = int(best[y, x])
                if a < 0:
                    continue
                dx, dy = ACTION_DELTAS[Action(a)]
                cx, cy = rc.cell_center(x, y)
                L = max(4, int(rc.cell * 0.3))
                ex, ey = cx + dx * L, cy + dy * L
                pygame.draw.line(screen, theme.palette.muted, (cx, cy), (ex, ey), 2)
                ang = math.atan2(ey - cy, ex - cx)
                ah = max(3, int(rc.cell * 0.12))
                left = (ex - ah * math.cos(ang - 0.6), ey - ah * math.sin(ang - 0.6))
                right = (ex - ah * math.cos(ang + 0.6), ey - ah * math.sin(ang + 0.6))
                pygame.draw.polygon(screen, theme.palette.muted, [(ex, ey), left, right])
