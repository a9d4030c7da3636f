from __future__ import annotations

from dataclasses import dataclass, field
import os
import pygame


@dataclass
class Palette:
    bg: tuple[int,int,int] = (10, 14, 22)
    panel: tuple[int,int,int] = (12, 18, 28)
    panel_alpha: int = 235
    fg: tuple[int,int,int] = (242, 246, 255)
    muted: tuple[int,int,int] = (150, 160, 185)
    accent: tuple[int,int,int] = (0, 246, 255)    # runner
    goal: tuple[int,int,int] = (255, 222, 0)
    start: tuple[int,int,int] = (86, 224, 160)
    danger: tuple[int,int,int] = (255, 92, 112)
    warn: tuple[int,int,int] = (255, 170, 60)
    wall: tuple[int,int,int] = (46, 54, 78)
    floor: tuple[int,int,int] = (18, 22, 32)
    explored: tuple[int,int,int] = (30, 60, 90)
    heat_lo: tuple[int,int,int] = (40, 20, 70)
    heat_hi: tuple[int,int,int] = (0, 200, 255)
    grid_line: tuple[int,int,int] = (28, 34, 48)


@dataclass
class Theme:
    ui_scale: float = 1.0
    font_name: str | None = None
    font_size: int = 20
    font_size_title: int = 34
    palette: Palette = field(default_factory=Palette)

    def font(self, size: int) -> pygame.font.Font:
        if self.font_name and os.path.exists(self.font_name):
            return pygame.font.Font(self.font_name, size)
        return pygame.font.SysFont(self.font_name, size)

    def text_font(self) -> pygame.font.Font:
        return self.font(int(self.font_size * self.ui_scale))

    def panel(self, surface: pygame.Surface, rect: pygame.Rect) -> None:
        panel = pygame.Surface((rect.w, rect.h), pygame.SRCALPHA)
        panel.fill((*self.palette.panel, self.palette.panel_alpha))
        surface.blit(panel, rect.topleft)

    def heat_color(self, t: float) -> tuple[int, int, int]:
        t = max(0.0, min(1.0, t))
        lo, hi = self.palette.heat_lo, self.palette.heat_hi
        return tuple(int(lo[i] * (1 - t) + hi[i] * t) for i in range(3))


def palette_for_mode(mode: str) -> Palette:
    mode = (mode or "neo").lower()
    if mode == "high_contrast":
        return Palette(
            bg=(0, 0, 0),
            panel=(0, 0, 0),
            fg=(255, 255, 255),
            muted=(220, 220, 220),
            wall=(90, 90, 90),
            floor=(0, 0, 0),
            explored=(0, 70, 120),
            grid_line=(40, 40, 40),
        )
    if mode == "colorblind":
        # avoid red/green reliance
        return Palette(
            start=(110, 170, 255),
            danger=(180, 60, 255),
            warn=(255, 200, 60),
            heat_lo=(30, 30, 80),
            heat_hi=(255, 200, 60),
        )
    return Palette()
