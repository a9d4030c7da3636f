from __future__ import annotations

from dataclasses import asdict, dataclass
import json
import os
from typing import Optional

import pygame

from mazecore.sim import SimConfig
from viewers.ui.theme import Theme, palette_for_mode

CONFIG_PATH = os.path.join('data', 'viewer_config.json')
WARP_SPEED = 500


@dataclass
class AppConfig:
    # maze / driver
    maze_size: int = 15
    max_steps: int = 2000
    step_reward: float = -1.0
    wall_reward: float = -100.0
    goal_reward: float = 1000.0
    seed: int = -1  # -1 = unseeded exploration

    # agent defaults
    alpha: float = 0.1
    gamma: float = 0.9
    epsilon: float = 0.2

    # view
    speed: int = 400  # 0..500, 500 = warp
    render_fps: int = 60
    heatmap: bool = True
    policy: bool = False
    qhover: bool = True
    explored: bool = True
    color_mode: str = 'neo'
    font_scale: float = 1.0

    # io defaults (persist last used paths so the viewer is usable without retyping)
    runner_path: str = os.path.join('data', 'runner.json')
    history_path: str = os.path.join('data', 'episode_history.json')
    screenshot_dir: str = os.path.join('data', 'screenshots')

    def sim_config(self) -> SimConfig:
        return SimConfig(
            maze_size=int(self.maze_size),
            max_steps=int(self.max_steps),
            step_reward=float(self.step_reward),
            wall_reward=float(self.wall_reward),
            goal_reward=float(self.goal_reward),
            alpha=float(self.alpha),
            gamma=float(self.gamma),
            epsilon=float(self.epsilon),
        )

    def agent_seed(self) -> int | None:
        return int(self.seed) if int(self.seed) >= 0 else None


def load_config(path: str = CONFIG_PATH) -> AppConfig:
    cfg = AppConfig()
    if not os.path.exists(path):
        return cfg
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return cfg
    for k, v in data.items():
        if hasattr(cfg, k):
            setattr(cfg, k, v)
    return cfg


def save_config(cfg: AppConfig, path: str = CONFIG_PATH) -> None:
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(asdict(cfg), f, indent=2)


@dataclass
class Toast:
    text: str
    ttl: float


class ToastManager:
    def __init__(self) -> None:
        self._items: list[Toast] = []

    def push(self, text: str, ttl: float = 2.5) -> None:
        self._items.append(Toast(text=text, ttl=ttl))

    def update(self, dt: float) -> None:
        for t in self._items:
            t.ttl -= dt
        self._items = [t for t in self._items if t.ttl > 0]

    def render(self, screen: pygame.Surface, theme: Theme) -> None:
        if not self._items:
            return
        font = theme.text_font()
        pad = int(10 * theme.ui_scale)
        y = screen.get_height() - pad
        for t in reversed(self._items[-3:]):
            surf = font.render(t.text, True, theme.palette.fg)
            box = pygame.Rect(0, 0, surf.get_width() + 2 * pad, surf.get_height() + 2 * pad)
            box.bottomright = (screen.get_width() - pad, y)
            theme.panel(screen, box)
            screen.blit(surf, (box.x + pad, box.y + pad))
            y = box.y - pad


class App:
    def __init__(self, cfg: Optional[AppConfig] = None) -> None:
        self.cfg = cfg or load_config()
        self.theme = Theme(ui_scale=float(self.cfg.font_scale), palette=palette_for_mode(self.cfg.color_mode))
        self.toast = ToastManager()
        self._scene_stack: list[object] = []
        self._running = False

        pygame.init()
        pygame.display.set_caption('Learn A Maze')
        self.screen = pygame.display.set_mode((1280, 860), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()

    def push(self, scene: object) -> None:
        self._scene_stack.append(scene)

    def pop(self) -> None:
        if len(self._scene_stack) > 1:
            self._scene_stack.pop()
        else:
            self.quit()

    def scene(self) -> object:
        return self._scene_stack[-1]

    def quit(self) -> None:
        self._running = False

    def run(self) -> None:
        self._running = True
        while self._running:
            dt = self.clock.tick(int(self.cfg.render_fps)) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                    break
                if event.type == pygame.VIDEORESIZE:
                    self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.scene().handle_event(self, event)
            if not self._running:
                break

            self.scene().update(self, dt)
            self.toast.update(dt)

            self.screen.fill(self.theme.palette.bg)
            self.scene().render(self, self.screen)
            self.toast.render(self.screen, self.theme)
            pygame.display.flip()

        pygame.quit()
        try:
            save_config(self.cfg)
        except OSError as exc:
            print(f"Could not save viewer config: {exc}")
