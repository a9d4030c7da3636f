from __future__ import annotations

import argparse
import sys
import traceback

from viewers.app import App, AppConfig
from viewers.scenes.sim import SimulationScene


def main() -> None:
    ap = argparse.ArgumentParser(description='Learn A Maze - Pygame Viewer')
    ap.add_argument('--reset-config', action='store_true')
    ap.add_argument('--size', type=int, default=None, help='maze size (odd values give a perfect maze)')
    ap.add_argument('--seed', type=int, default=None, help='agent RNG seed, -1 = unseeded')
    args = ap.parse_args()

    cfg = AppConfig() if args.reset_config else None
    app = App(cfg=cfg)
    if args.size is not None:
        app.cfg.maze_size = args.size
    if args.seed is not None:
        app.cfg.seed = args.seed
    app.push(SimulationScene(app))
    try:
        app.run()
    except Exception as e:
        # Write crash dump
        import os, datetime
        dump_dir = 'data'
        os.makedirs(dump_dir, exist_ok=True)
        ts = datetime.datetime.now().strftime('%Y%m%d_%H%M%S')
        dump_path = os.path.join(dump_dir, f'crash_dump_{ts}.txt')
        with open(dump_path, 'w', encoding='utf-8') as f:
            f.write('Learn A Maze Crash Dump\n')
            f.write(f'Time: {ts}\n')
            f.write(f'Exception: {e}\n')
            f.write('Traceback:\n')
            traceback.print_exc(file=f)
            f.write('\n')
            f.write('AppConfig:\n')
            f.write(str(app.cfg))
        import pygame
        pygame.init()
        screen = pygame.display.set_mode((800, 300))
        pygame.display.set_caption('Learn A Maze - Crash')
        font = pygame.font.SysFont(None, 32)
        screen.fill((30, 0, 0))
        y = 60
        for line in ('The runner crashed.', f'Crash dump: {dump_path}', '', 'Press any key to exit.'):
            screen.blit(font.render(line, True, (255, 200, 200)), (40, y))
            y += 44
        pygame.display.flip()
        waiting = True
        while waiting:
            for event in pygame.event.get():
                if event.type in (pygame.QUIT, pygame.KEYDOWN, pygame.MOUSEBUTTONDOWN):
                    waiting = False
        pygame.quit()
        sys.exit(1)


if __name__ == '__main__':
    main()
