from collections import deque

import pytest

from mazecore.editor import MazeEditor
from mazecore.maze import MazeGenerator, Position, is_open
from mazecore.qlearning import Action
from mazecore.sim import MazeRunner, SimConfig


def _runner(**kw):
    return MazeRunner(SimConfig(**kw), seed=0)


def _shortest(maze, start, goal):
    seen = {tuple(start)}
    q = deque([(tuple(start), 0)])
    while q:
        (x, y), d = q.popleft()
        if (x, y) == tuple(goal):
            return d
        for nxt in ((x, y - 1), (x + 1, y), (x, y + 1), (x - 1, y)):
            if nxt not in seen and is_open(maze, nxt):
                seen.add(nxt)
                q.append((nxt, d + 1))
    return None


def test_runner_defaults():
    r = MazeRunner()
    assert (r.width, r.height) == (15, 15)
    assert r.start == (0, 0)
    assert r.goal == (14, 14)
    assert r.position == r.start
    assert r.explored == {r.start}
    assert r.state.episode == 1 and r.state.step == 0
    assert r.agent.epsilon == 0.2
    assert not r.locked


def test_goal_path_and_rollover():
    r = _runner(maze_size=3)
    rewards = [r.apply_action(a).reward for a in (Action.RIGHT, Action.DOWN, Action.DOWN)]
    assert rewards == [-1.0, -1.0, -1.0]
    res = r.apply_action(Action.RIGHT)
    assert res.reward == 1000.0
    assert res.done
    assert res.info["terminal"] == "goal"
    assert r.state.is_goal_reached
    assert r.state.total_reward == 997.0
    assert r.explored == {(0, 0), (1, 0), (1, 1), (1, 2), (2, 2)}

    end = r.step()
    assert end.info["episode_end"]
    assert end.info["terminal"] == "goal"
    assert (end.info["episode"], end.info["steps"], end.info["total_reward"]) == (1, 4, 997.0)
    assert r.state.episode == 2
    assert r.state.step == 0
    assert r.state.total_reward == 0.0
    assert r.state.best_step_count == 4
    assert r.state.epsilon == pytest.approx(0.2 * 0.995)
    assert r.agent.epsilon == r.state.epsilon
    assert r.position == r.start
    assert not r.state.is_goal_reached


def test_wall_bump_keeps_position():
    r = _runner(maze_size=3)
    res = r.apply_action(Action.UP)
    assert res.reward == -100.0
    assert res.info["bumped_wall"]
    assert r.position == (0, 0)
    assert r.state.step == 1
    assert r.agent.get_q_values((0, 0))[Action.UP] == pytest.approx(-10.0)

    r.apply_action(Action.RIGHT)
    res = r.apply_action(Action.RIGHT)  # (2, 0) is a wall
    assert res.reward == -100.0
    assert r.position == (1, 0)


def test_timeout_rollover():
    r = _runner(maze_size=3, max_steps=2)
    r.apply_action(Action.UP)
    res = r.apply_action(Action.LEFT)
    assert res.done
    end = r.step()
    assert end.info["terminal"] == "timeout"
    assert r.state.episode == 2
    assert r.state.best_step_count is None


def test_best_step_count_keeps_minimum():
    r = _runner(maze_size=3)
    for a in (Action.RIGHT, Action.DOWN, Action.DOWN, Action.RIGHT):
        r.apply_action(a)
    r.step()
    for a in (Action.RIGHT, Action.LEFT, Action.RIGHT, Action.DOWN, Action.DOWN, Action.RIGHT):
        r.apply_action(a)
    r.step()
    assert r.state.best_step_count == 4


def test_parameters_lock_after_first_step():
    r = _runner(maze_size=3)
    r.set_parameters(0.5, 0.7, 0.4)
    assert (r.agent.alpha, r.agent.gamma, r.agent.epsilon) == (0.5, 0.7, 0.4)
    assert r.state.epsilon == 0.4

    r.step()
    assert r.locked
    with pytest.raises(RuntimeError):
        r.set_parameters(0.2, 0.2, 0.2)

    r.reset()
    assert not r.locked
    assert r.agent.n_states == 0
    assert (r.agent.alpha, r.agent.gamma, r.agent.epsilon) == (0.1, 0.9, 0.2)


def test_run_batch_stops_at_episode_boundary():
    r = _runner(maze_size=5, max_steps=5)
    results = r.run_batch(100)
    assert 1 <= len(results) <= 6
    assert r.state.is_goal_reached or r.state.step == 0
    assert r.run_batch(0) == []


def test_run_episode_summary():
    r = _runner(maze_size=5, max_steps=50)
    summary = r.run_episode()
    assert summary.episode == 1
    assert 1 <= summary.steps <= 50
    assert summary.epsilon == 0.2
    assert r.state.episode == 2
    assert r.state.step == 0
    if summary.reached_goal:
        assert r.state.best_step_count == summary.steps


def test_training_finds_the_goal():
    r = _runner(maze_size=5)
    for _ in range(200):
        r.run_episode()
    best = r.state.best_step_count
    assert best is not None
    assert best >= _shortest(r.maze, r.start, r.goal)
    assert r.agent.epsilon < 0.2


def test_load_maze_resets_runner():
    r = _runner(maze_size=5)
    r.run_batch(10)
    maze = MazeGenerator(7, 7).generate()
    r.load_maze(maze, (1, 1), (5, 5))
    assert (r.width, r.height) == (7, 7)
    assert r.position == Position(1, 1)
    assert r.goal == Position(5, 5)
    assert r.state.episode == 1 and r.state.step == 0
    assert r.agent.n_states == 0
    assert r.maze is not maze


def test_editor_tools():
    maze = MazeGenerator(5, 5).generate()
    ed = MazeEditor(maze, (0, 0), (4, 4))
    assert not ed.has_changes

    ed.apply("wall", 0, 0)
    assert not ed.grid[0][0].is_wall

    ed.apply("wall", 1, 1)
    assert ed.grid[1][1].is_wall
    assert ed.has_changes
    assert not maze[1][1].is_wall

    ed.apply("eraser", 1, 1)
    assert not ed.has_changes

    assert maze[2][2].is_wall
    ed.apply("start", 2, 2)
    assert ed.start == (2, 2)
    assert not ed.grid[2][2].is_wall

    ed.apply("goal", 3, 3)
    assert ed.goal == (3, 3)

    ed.apply("wall", 99, 99)
    with pytest.raises(ValueError):
        ed.apply("laser", 0, 0)

    ed.clear()
    assert all(not c.is_wall for row in ed.grid for c in row)
    grid, start, goal = ed.result()
    assert grid is not ed.grid
    assert (start, goal) == ((2, 2), (3, 3))


def test_apply_action_without_learning():
    r = _runner(maze_size=3)
    res = r.apply_action(Action.RIGHT, learn=False)
    assert res.reward == -1.0
    assert r.position == (1, 0)
    assert r.state.step == 1
    assert r.agent.n_states == 0
