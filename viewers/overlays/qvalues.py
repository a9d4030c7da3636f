from __future__ import annotations

import pygame

from viewers.ui.theme import Theme


class QValuesOverlay:
    def render(self, screen: pygame.Surface, theme: Theme, q_table: dict, rc, mouse_pos) -> None:
        x, y = rc.pixel_to_cell(mouse_pos[0], mouse_pos[1])
        if x is None:
            return
        q = q_table.get((x, y))
        lines = [f'cell=({x},{y})']
        if q is None:
            lines.append('unvisited')
        else:
            lines.append(f'Q: [U={q[0]:.2f} R={q[1]:.2f} D={q[2]:.2f} L={q[3]:.2f}]')
        font = theme.text_font()
        pad = int(10 * theme.ui_scale)
        box_w = max(font.size(l)[0] for l in lines) + 2 * pad
        box_h = sum(font.size(l)[1] for l in lines) + pad * (len(lines) + 1)
        bx = min(screen.get_width() - box_w - pad, mouse_pos[0] + pad)
        by = min(screen.get_height() - box_h - pad, mouse_pos[1] + pad)
        theme.panel(screen, pygame.Rect(bx, by, box_w, box_h))
        yy = by + pad
        for l in lines:
            surf = font.render(l, True, theme.palette.fg)
            screen.blit(surf, (bx + pad, yy))
            yy += surf.get_height() + pad // 2
