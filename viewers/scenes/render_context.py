from __future__ import annotations

from dataclasses import dataclass

import pygame


@dataclass
class RenderContext:
    w: int
    h: int
    cell: int
    mx: int
    my: int

    @classmethod
    def fit(cls, area: pygame.Rect, w: int, h: int, margin: int = 16) -> "RenderContext":
        cell = max(4, min((area.w - 2 * margin) // max(1, w), (area.h - 2 * margin) // max(1, h)))
        mx = area.x + (area.w - cell * w) // 2
        my = area.y + (area.h - cell * h) // 2
        return cls(w=w, h=h, cell=cell, mx=mx, my=my)

    def cell_rect(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(self.mx + x * self.cell, self.my + y * self.cell, self.cell, self.cell)

    def cell_center(self, x: int, y: int):
        r = self.cell_rect(x, y)
        return (r.x + r.w // 2, r.y + r.h // 2)

    def pixel_to_cell(self, px: int, py: int):
        x = (px - self.mx) // self.cell
        y = (py - self.my) // self.cell
        if 0 <= x < self.w and 0 <= y < self.h:
            return (int(x), int(y))
        return (None, None)
