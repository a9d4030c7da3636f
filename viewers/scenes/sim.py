from __future__ import annotations

import os
import time

import numpy as np
import pygame

from mazecore.maze import Maze
from mazecore.qlearning import QTable
from mazecore.sim import MazeRunner, StepResult
from mazecore.viz import normalize, value_grid
from viewers.app import WARP_SPEED
from viewers.io.export import export_history, export_screenshot
from viewers.io.save_load import apply_payload, default_runner_filename, read_payload, save_runner
from viewers.keymap import get_keymap
from viewers.overlays.policy import PolicyOverlay
from viewers.overlays.qvalues import QValuesOverlay
from viewers.overlays.stats import RunStats, StatsPanel
from viewers.scenes.render_context import RenderContext

SIDEBAR_W = 340
WARP_BATCH = 30
Q_SYNC_EVERY = 10
MAX_STEPS_PER_FRAME = 500

# (cfg field, key down, key up, min, max)
TRAIT_KEYS = (
    ('alpha', pygame.K_1, pygame.K_2, 0.01, 1.0),
    ('gamma', pygame.K_3, pygame.K_4, 0.1, 0.99),
    ('epsilon', pygame.K_5, pygame.K_6, 0.01, 1.0),
)


class SimulationScene:
    def __init__(self, app) -> None:
        self.runner = MazeRunner(app.cfg.sim_config(), seed=app.cfg.agent_seed())
        self.stats = RunStats()
        self.stats_panel = StatsPanel(self.stats)
        self.policy_overlay = PolicyOverlay()
        self.qvalues_overlay = QValuesOverlay()

        self.playing = False
        self.show_help = False

        self.q_table: QTable = {}
        self._q_version = 0
        self._heat: np.ndarray | None = None
        self._acc_ms = 0.0
        self.walls: set[tuple[int, int]] = set()
        self._sync_walls()

    # -- runner control ---------------------------------------------------

    def _sync_walls(self) -> None:
        # the maze only changes on layout edits and loads
        self.walls = {(c.x, c.y) for row in self.runner.maze for c in row if c.is_wall}

    def _sync_q(self) -> None:
        self.q_table = self.runner.q_snapshot()
        self._q_version += 1
        self._heat = normalize(value_grid(self.q_table, self.runner.width, self.runner.height))

    def _observe(self, res: StepResult) -> None:
        if res.info.get('episode_end'):
            self.stats.record(
                episode=res.info['episode'],
                steps=res.info['steps'],
                total_reward=res.info['total_reward'],
                terminal=res.info['terminal'],
                epsilon=self.runner.agent.epsilon,
            )

    def _restore_traits(self, app) -> None:
        agent = self.runner.agent
        app.cfg.alpha = agent.alpha
        app.cfg.gamma = agent.gamma
        app.cfg.epsilon = agent.initial_epsilon

    def reset(self, app) -> None:
        self.playing = False
        self.runner.reset()
        self.stats.clear()
        self._acc_ms = 0.0
        self._restore_traits(app)
        self._sync_q()

    def apply_layout(self, app, maze: Maze, start, goal) -> None:
        self.runner.load_maze(maze, start, goal)
        self._sync_walls()
        self.reset(app)
        app.toast.push('Maze layout saved, runner reset')

    def _nudge_trait(self, app, name: str, delta: float, lo: float, hi: float) -> None:
        if self.runner.locked:
            app.toast.push('Traits are locked while training. Press R to reset.')
            return
        value = round(max(lo, min(hi, float(getattr(app.cfg, name)) + delta)), 2)
        setattr(app.cfg, name, value)
        self.runner.set_parameters(app.cfg.alpha, app.cfg.gamma, app.cfg.epsilon)

    def _save(self, app) -> None:
        folder = os.path.dirname(app.cfg.runner_path) or 'data'
        path = os.path.join(folder, default_runner_filename(self.runner))
        try:
            save_runner(self.runner, path)
        except OSError as exc:
            app.toast.push(f'Export failed: {exc}')
            return
        app.cfg.runner_path = path
        app.toast.push(f'Exported runner -> {path}')

    def _load(self, app) -> None:
        path = app.cfg.runner_path
        try:
            apply_payload(self.runner, read_payload(path))
        except (OSError, ValueError, KeyError, TypeError) as exc:
            app.toast.push(f'Failed to load runner data: {exc}')
            return
        self.playing = False
        self.stats.clear()
        self._restore_traits(app)
        self._sync_walls()
        self._sync_q()
        app.toast.push(f'Imported runner <- {os.path.basename(path)}')

    def _screenshot(self, app) -> None:
        ts = time.strftime('%Y%m%d_%H%M%S')
        path = os.path.join(app.cfg.screenshot_dir, f'maze_{ts}.png')
        try:
            export_screenshot(app.screen, path)
        except (OSError, pygame.error) as exc:
            app.toast.push(f'Screenshot failed: {exc}')
            return
        app.toast.push(f'Screenshot -> {path}')

    def _export_history(self, app) -> None:
        try:
            csv_path = export_history(self.stats.to_rows(), app.cfg.history_path)
        except OSError as exc:
            app.toast.push(f'History export failed: {exc}')
            return
        app.toast.push(f'Episode history -> {app.cfg.history_path} / {os.path.basename(csv_path)}')

    # -- scene interface --------------------------------------------------

    def handle_event(self, app, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        cfg = app.cfg
        if event.mod & pygame.KMOD_CTRL:
            if event.key == pygame.K_s:
                self._save(app)
            elif event.key == pygame.K_l:
                self._load(app)
            elif event.key == pygame.K_p:
                self._screenshot(app)
            elif event.key == pygame.K_x:
                self._export_history(app)
            return

        if event.key == pygame.K_ESCAPE:
            if self.show_help:
                self.show_help = False
            else:
                app.pop()
        elif event.unicode == '?' or event.key == pygame.K_F1:
            self.show_help = not self.show_help
        elif event.key == pygame.K_SPACE:
            self.playing = not self.playing
        elif event.key == pygame.K_PERIOD:
            self.playing = False
            self._observe(self.runner.step())
            self._sync_q()
        elif event.key == pygame.K_r:
            self.reset(app)
            app.toast.push('Runner reset')
        elif event.key in (pygame.K_UP, pygame.K_DOWN):
            delta = 50 if event.key == pygame.K_UP else -50
            cfg.speed = max(0, min(WARP_SPEED, int(cfg.speed) + delta))
        elif event.key == pygame.K_h:
            cfg.heatmap = not cfg.heatmap
        elif event.key == pygame.K_p:
            cfg.policy = not cfg.policy
        elif event.key == pygame.K_q:
            cfg.qhover = not cfg.qhover
        elif event.key == pygame.K_x:
            cfg.explored = not cfg.explored
        elif event.key == pygame.K_e:
            from viewers.scenes.designer import DesignerScene

            self.playing = False
            app.push(DesignerScene(self))
        else:
            for name, down, up, lo, hi in TRAIT_KEYS:
                if event.key in (down, up):
                    self._nudge_trait(app, name, 0.01 if event.key == up else -0.01, lo, hi)
                    break

    def update(self, app, dt: float) -> None:
        if not self.playing:
            return
        speed = int(app.cfg.speed)
        if speed >= WARP_SPEED:
            for res in self.runner.run_batch(WARP_BATCH):
                self._observe(res)
            self._sync_q()
            return

        delay = max(1, 500 - speed)
        self._acc_ms += dt * 1000.0
        n = 0
        while self._acc_ms >= delay and n < MAX_STEPS_PER_FRAME:
            self._acc_ms -= delay
            self._observe(self.runner.step())
            n += 1
            if self.runner.state.step % Q_SYNC_EVERY == 0:
                self._sync_q()
        if n >= MAX_STEPS_PER_FRAME:
            self._acc_ms = 0.0

    def render(self, app, screen: pygame.Surface) -> None:
        theme = app.theme
        pal = theme.palette
        runner = self.runner
        sidebar = pygame.Rect(0, 0, int(SIDEBAR_W * theme.ui_scale), screen.get_height())
        area = pygame.Rect(sidebar.right, 0, screen.get_width() - sidebar.w, screen.get_height())
        rc = RenderContext.fit(area, runner.width, runner.height)

        for row in runner.maze:
            for cell in row:
                r = rc.cell_rect(cell.x, cell.y)
                if cell.is_wall:
                    color = pal.wall
                elif app.cfg.heatmap and (cell.x, cell.y) in self.q_table and self._heat is not None:
                    color = theme.heat_color(float(self._heat[cell.y, cell.x]))
                elif app.cfg.explored and (cell.x, cell.y) in runner.explored:
                    color = pal.explored
                else:
                    color = pal.floor
                pygame.draw.rect(screen, color, r)
                pygame.draw.rect(screen, pal.grid_line, r, 1)

        if app.cfg.policy:
            self.policy_overlay.render(screen, theme, self.q_table, rc, self._q_version, self.walls)

        pygame.draw.rect(screen, pal.start, rc.cell_rect(*runner.start).inflate(-4, -4), 2)
        pygame.draw.rect(screen, pal.goal, rc.cell_rect(*runner.goal).inflate(-rc.cell // 3, -rc.cell // 3))
        pygame.draw.circle(screen, pal.accent, rc.cell_center(*runner.position), max(3, int(rc.cell * 0.35)))

        s = runner.state
        if s.step >= runner.cfg.max_steps * 0.9:
            font = theme.font(int(theme.font_size_title * 0.6 * theme.ui_scale))
            surf = font.render('Runner is lost! Resetting...', True, pal.danger)
            screen.blit(surf, (area.centerx - surf.get_width() // 2, area.y + 8))

        self.stats_panel.render(screen, theme, sidebar, self._sidebar_lines(app))

        if app.cfg.qhover:
            self.qvalues_overlay.render(screen, theme, self.q_table, rc, pygame.mouse.get_pos())

    def _sidebar_lines(self, app) -> list[tuple[str, tuple | None]]:
        pal = app.theme.palette
        if self.show_help:
            lines: list[tuple[str, tuple | None]] = [('HOTKEYS', pal.accent), ('', None)]
            lines += [(f"{k['keys']:<8} {k['action']}", None) for k in get_keymap('Simulation')]
            return lines

        runner = self.runner
        s = runner.state
        agent = runner.agent
        max_steps = runner.cfg.max_steps
        speed = int(app.cfg.speed)
        step_color = pal.danger if s.step > max_steps * 0.8 else pal.start
        best = f'{s.best_step_count} steps' if s.best_step_count else '---'
        return [
            ('LEARN A MAZE', pal.accent),
            ('', None),
            (f'Episode {s.episode}', None),
            (f'Step {s.step} / {max_steps}', step_color),
            (f'Best path: {best}', pal.goal),
            (f'Curiosity: {s.epsilon * 100:.1f}%', pal.warn),
            (f'Episode reward: {s.total_reward:.0f}', None),
            (f'Q states: {agent.n_states}', None),
            (f'Success (last 20): {self.stats.success_rate() * 100:.0f}%', None),
            ('', None),
            (f"Traits [{'LOCKED' if runner.locked else 'OPEN'}]", pal.danger if runner.locked else pal.start),
            (f'alpha {agent.alpha:.2f}  gamma {agent.gamma:.2f}', None),
            (f'epsilon start {agent.initial_epsilon:.2f}', None),
            ('', None),
            (f"Speed: {'WARP' if speed >= WARP_SPEED else str(max(1, 500 - speed)) + 'ms'}", None),
            (f"{'RUNNING' if self.playing else 'PAUSED'}", pal.start if self.playing else pal.muted),
            (f'Start {tuple(runner.start)}  Goal {tuple(runner.goal)}', pal.muted),
            ('? for hotkeys', pal.muted),
        ]
