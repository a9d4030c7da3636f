from collections import deque

from mazecore.maze import MAZE_SEED, Cell, MazeGenerator, SeededRandom, is_open, maze_size


def _bfs(maze, start, goal):
    w, h = maze_size(maze)
    seen = {start}
    q = deque([(start, 0)])
    while q:
        (x, y), d = q.popleft()
        if (x, y) == goal:
            return d
        for nx, ny in ((x, y - 1), (x + 1, y), (x, y + 1), (x - 1, y)):
            if (nx, ny) not in seen and is_open(maze, (nx, ny)):
                seen.add((nx, ny))
                q.append(((nx, ny), d + 1))
    return None


def test_lcg_sequence():
    r = SeededRandom(MAZE_SEED)
    v = r.next()
    assert r.seed == 79192
    assert v == 79192 / 233280
    for _ in range(1000):
        assert 0.0 <= r.next() < 1.0


def test_generate_is_deterministic():
    a = MazeGenerator(15, 15).generate()
    b = MazeGenerator(15, 15).generate()
    gen = MazeGenerator(15, 15)
    assert a == b
    assert gen.generate() == gen.generate()


def test_dimensions_and_coordinates():
    for w, h in ((5, 5), (7, 9), (15, 15), (21, 13)):
        maze = MazeGenerator(w, h).generate()
        assert maze_size(maze) == (w, h)
        for y, row in enumerate(maze):
            for x, cell in enumerate(row):
                assert isinstance(cell, Cell)
                assert (cell.x, cell.y) == (x, y)


def test_corners_open_and_border_walls():
    w, h = 15, 15
    maze = MazeGenerator(w, h).generate()
    corners = {(0, 0), (1, 0), (0, 1), (1, 1), (w - 1, h - 1), (w - 1, h - 2), (w - 2, h - 1), (w - 2, h - 2)}
    for x, y in corners:
        assert not maze[y][x].is_wall
    for x in range(w):
        for y in (0, h - 1):
            if (x, y) not in corners:
                assert maze[y][x].is_wall
    for y in range(h):
        for x in (0, w - 1):
            if (x, y) not in corners:
                assert maze[y][x].is_wall


def test_odd_mazes_are_solvable_and_fully_carved():
    for w, h in ((5, 5), (7, 9), (15, 15), (21, 13)):
        maze = MazeGenerator(w, h).generate()
        assert _bfs(maze, (0, 0), (w - 1, h - 1)) is not None
        for y in range(1, h - 1, 2):
            for x in range(1, w - 1, 2):
                assert not maze[y][x].is_wall


def test_degenerate_sizes():
    assert MazeGenerator(0, 0).generate() == []
    assert MazeGenerator(1, 1).generate() == [[Cell(0, 0, False)]]
    tiny = MazeGenerator(2, 2).generate()
    assert all(not c.is_wall for row in tiny for c in row)
    three = MazeGenerator(3, 3).generate()
    walls = {(c.x, c.y) for row in three for c in row if c.is_wall}
    assert walls == {(2, 0), (0, 2)}


def test_unvisited_neighbors_order_and_interior():
    gen = MazeGenerator(7, 7)
    assert gen.get_unvisited_neighbors((3, 3), set()) == [(3, 1), (5, 3), (3, 5), (1, 3)]
    assert gen.get_unvisited_neighbors((1, 1), set()) == [(3, 1), (1, 3)]
    assert gen.get_unvisited_neighbors((1, 1), {(3, 1)}) == [(1, 3)]
    assert gen.get_unvisited_neighbors((5, 5), []) == [(5, 3), (3, 5)]
