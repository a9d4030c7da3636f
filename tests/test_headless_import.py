import os


def test_import_viewer_headless():
    os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
    import pygame  # noqa: F401
    from viewers.app import App  # noqa: F401
    from viewers.scenes.designer import DesignerScene  # noqa: F401
    from viewers.scenes.sim import SimulationScene  # noqa: F401


def test_simulation_scene_headless_frame():
    os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
    import pygame
    from viewers.app import App, AppConfig
    from viewers.scenes.sim import SimulationScene

    app = App(cfg=AppConfig(maze_size=7, seed=0, speed=500))
    try:
        scene = SimulationScene(app)
        app.push(scene)
        scene.playing = True
        scene.update(app, 0.016)
        assert scene.runner.state.step > 0 or scene.runner.state.episode > 1
        scene.render(app, app.screen)
    finally:
        pygame.quit()


def test_simulation_scene_tracks_walls_across_layout_changes():
    os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
    import pygame
    from mazecore.maze import MazeGenerator
    from viewers.app import App, AppConfig
    from viewers.scenes.sim import SimulationScene

    app = App(cfg=AppConfig(maze_size=5, seed=0))
    try:
        scene = SimulationScene(app)
        walls = {(c.x, c.y) for row in scene.runner.maze for c in row if c.is_wall}
        assert scene.walls == walls

        maze = MazeGenerator(3, 3).generate()
        scene.apply_layout(app, maze, (0, 0), (2, 2))
        assert scene.walls == {(2, 0), (0, 2)}
    finally:
        pygame.quit()
