from __future__ import annotations

import pygame

from mazecore.editor import MazeEditor
from viewers.keymap import get_keymap
from viewers.scenes.render_context import RenderContext

TOOL_KEYS = {
    pygame.K_w: 'wall',
    pygame.K_s: 'start',
    pygame.K_g: 'goal',
    pygame.K_e: 'eraser',
}


class DesignerScene:
    """Maze layout editor. Enter writes the layout back to the simulation scene."""

    def __init__(self, sim_scene) -> None:
        self.sim_scene = sim_scene
        runner = sim_scene.runner
        self.editor = MazeEditor(runner.maze, runner.start, runner.goal)
        self.tool = 'wall'
        self.show_help = False
        self._painting = False
        self._confirm_clear = False
        self._confirm_exit = False
        self._rc: RenderContext | None = None

    def _paint(self, pos) -> None:
        if self._rc is None:
            return
        x, y = self._rc.pixel_to_cell(*pos)
        if x is None:
            return
        self.editor.apply(self.tool, x, y)

    def handle_event(self, app, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._painting = True
            self._paint(event.pos)
            return
        if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self._painting = False
            return
        if event.type == pygame.MOUSEMOTION and self._painting and self.tool in ('wall', 'eraser'):
            self._paint(event.pos)
            return
        if event.type != pygame.KEYDOWN:
            return

        if event.key != pygame.K_c:
            self._confirm_clear = False
        if event.key != pygame.K_ESCAPE:
            self._confirm_exit = False

        if event.key in TOOL_KEYS:
            self.tool = TOOL_KEYS[event.key]
        elif event.key == pygame.K_c:
            if self._confirm_clear:
                self.editor.clear()
                self._confirm_clear = False
                app.toast.push('All walls cleared')
            else:
                self._confirm_clear = True
                app.toast.push('Press C again to clear every wall')
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            maze, start, goal = self.editor.result()
            self.sim_scene.apply_layout(app, maze, start, goal)
            app.pop()
        elif event.key == pygame.K_ESCAPE:
            if self.show_help:
                self.show_help = False
            elif self.editor.has_changes and not self._confirm_exit:
                self._confirm_exit = True
                app.toast.push('Unsaved changes. Press Esc again to discard')
            else:
                app.pop()
        elif event.unicode == '?' or event.key == pygame.K_F1:
            self.show_help = not self.show_help

    def update(self, app, dt: float) -> None:
        pass

    def render(self, app, screen: pygame.Surface) -> None:
        theme = app.theme
        pal = theme.palette
        editor = self.editor
        grid = editor.grid
        w, h = len(grid[0]) if grid else 0, len(grid)

        sidebar_w = int(280 * theme.ui_scale)
        sidebar = pygame.Rect(0, 0, sidebar_w, screen.get_height())
        area = pygame.Rect(sidebar_w, 0, screen.get_width() - sidebar_w, screen.get_height())
        rc = RenderContext.fit(area, w, h)
        self._rc = rc

        for row in grid:
            for cell in row:
                r = rc.cell_rect(cell.x, cell.y)
                pygame.draw.rect(screen, pal.wall if cell.is_wall else pal.floor, r)
                pygame.draw.rect(screen, pal.grid_line, r, 1)
        pygame.draw.rect(screen, pal.start, rc.cell_rect(*editor.start).inflate(-4, -4), 3)
        pygame.draw.rect(screen, pal.goal, rc.cell_rect(*editor.goal).inflate(-rc.cell // 3, -rc.cell // 3))

        mx, my = pygame.mouse.get_pos()
        hx, hy = rc.pixel_to_cell(mx, my)
        if hx is not None:
            pygame.draw.rect(screen, pal.accent, rc.cell_rect(hx, hy), 2)

        theme.panel(screen, sidebar)
        font = theme.text_font()
        pad = int(12 * theme.ui_scale)
        y = pad
        title = theme.font(int(theme.font_size_title * 0.7 * theme.ui_scale)).render('DESIGNER', True, pal.accent)
        screen.blit(title, (pad, y))
        y += title.get_height() + pad

        if self.show_help:
            lines = [(f"{k['keys']:<6} {k['action']}", pal.fg) for k in get_keymap('Designer')]
        else:
            lines = [(f'Tool: {self.tool.upper()}', pal.warn), ('', pal.fg)]
            for key, tool in (('W', 'wall'), ('S', 'start'), ('G', 'goal'), ('E', 'eraser')):
                lines.append((f'[{key}] {tool}', pal.accent if tool == self.tool else pal.muted))
            lines += [
                ('', pal.fg),
                (f'Start {tuple(editor.start)}', pal.start),
                (f'Goal {tuple(editor.goal)}', pal.goal),
                ('', pal.fg),
                ('Enter: save and reset', pal.muted),
                ('C twice: clear walls', pal.muted),
                ('Esc: cancel', pal.muted),
            ]
            if editor.has_changes:
                lines.append(('* unsaved changes', pal.danger))
        for text, color in lines:
            if text:
                surf = font.render(text, True, color)
                screen.blit(surf, (pad, y))
                y += surf.get_height() + pad // 3
            else:
                y += pad
