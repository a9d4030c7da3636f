from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, List, Optional

import pygame

from viewers.ui.theme import Theme


@dataclass
class EpisodeStats:
    episode: int
    steps: int
    total_reward: float
    terminal: str
    epsilon: float


@dataclass
class RunStats:
    episodes: List[EpisodeStats] = field(default_factory=list)

    def record(self, episode: int, steps: int, total_reward: float, terminal: str, epsilon: float) -> None:
        self.episodes.append(EpisodeStats(episode, steps, float(total_reward), terminal, float(epsilon)))

    def clear(self) -> None:
        self.episodes.clear()

    def success_rate(self, window: int = 20) -> float:
        recent = self.episodes[-window:]
        if not recent:
            return 0.0
        return sum(1 for e in recent if e.terminal == 'goal') / len(recent)

    def to_rows(self) -> list[dict[str, Any]]:
        return [asdict(e) for e in self.episodes]


class StatsPanel:
    """Sidebar with runner stats, traits and the recent reward sparkline."""

    def __init__(self, stats: RunStats) -> None:
        self.stats = stats

    def render(self, screen: pygame.Surface, theme: Theme, area: pygame.Rect, lines: list[tuple[str, Optional[tuple]]]) -> None:
        theme.panel(screen, area)
        font = theme.text_font()
        pad = int(12 * theme.ui_scale)
        y = area.y + pad
        for text, color in lines:
            if text:
                surf = font.render(text, True, color or theme.palette.fg)
                screen.blit(surf, (area.x + pad, y))
                y += surf.get_height() + pad // 3
            else:
                y += pad

        rewards = [e.total_reward for e in self.stats.episodes[-30:]]
        if len(rewards) < 2:
            return
        w = area.w - 2 * pad
        h = int(48 * theme.ui_scale)
        sx, sy = area.x + pad, min(area.bottom - h - pad, y + pad)
        pygame.draw.rect(screen, theme.palette.floor, (sx, sy, w, h), border_radius=6)
        lo, hi = min(rewards), max(rewards)
        if hi <= lo:
            return
        points = [
            (sx + i * w // (len(rewards) - 1), sy + h - 3 - int((r - lo) / (hi - lo) * (h - 6)))
            for i, r in enumerate(rewards)
        ]
        pygame.draw.lines(screen, theme.palette.accent, False, points, 2)
