from __future__ import annotations

from datetime import datetime
import json
import os
from typing import Any, Dict

from mazecore.maze import Cell, Maze, Position
from mazecore.qlearning import QLearningAgent, format_state_key
from mazecore.sim import MazeRunner, SimConfig, SimState


def default_runner_filename(runner: MazeRunner) -> str:
    return f"runner_ep{runner.state.episode}.json"


def _maze_to_rows(maze: Maze) -> list[list[Dict[str, Any]]]:
    return [[{'x': c.x, 'y': c.y, 'isWall': bool(c.is_wall)} for c in row] for row in maze]


def _maze_from_rows(rows: list) -> Maze:
    return [
        [Cell(int(c['x']), int(c['y']), bool(c['isWall'])) for c in row]
        for row in rows
    ]


def _pos(obj: Dict[str, Any]) -> Position:
    return Position(int(obj['x']), int(obj['y']))


def runner_to_payload(runner: MazeRunner) -> Dict[str, Any]:
    s = runner.state
    agent = runner.agent
    return {
        'grid': _maze_to_rows(runner.maze),
        'startPos': {'x': runner.start.x, 'y': runner.start.y},
        'goalPos': {'x': runner.goal.x, 'y': runner.goal.y},
        'qTable': {format_state_key(k): row for k, row in agent.q_table().items()},
        'simState': {
            'episode': s.episode,
            'step': s.step,
            'totalReward': s.total_reward,
            'epsilon': s.epsilon,
            'isGoalReached': s.is_goal_reached,
            'bestStepCount': s.best_step_count,
            'initialEpsilon': agent.initial_epsilon,
            'alpha': agent.alpha,
            'gamma': agent.gamma,
        },
        'savedAt': datetime.now().isoformat(),
    }


def apply_payload(runner: MazeRunner, payload: Dict[str, Any]) -> None:
    if payload.get('qTable') is None:
        raise ValueError("Runner file has no qTable")
    cfg = runner.cfg
    # parse everything first; a bad file leaves the runner untouched
    maze = _maze_from_rows(payload['grid']) if payload.get('grid') else runner.maze
    start = _pos(payload['startPos']) if payload.get('startPos') else runner.start
    goal = _pos(payload['goalPos']) if payload.get('goalPos') else runner.goal
    staging = QLearningAgent()
    staging.set_q_table(payload['qTable'])

    s = payload.get('simState') or {}
    alpha = float(s.get('alpha', cfg.alpha))
    gamma = float(s.get('gamma', cfg.gamma))
    initial_epsilon = float(s.get('initialEpsilon', cfg.epsilon))
    eps = s.get('epsilon')
    epsilon = float(eps) if eps is not None else initial_epsilon
    best = s.get('bestStepCount')
    state = SimState(
        episode=int(s.get('episode') or 1),
        epsilon=epsilon,
        best_step_count=int(best) if best is not None else None,
    )

    agent = runner.agent
    agent.set_q_table(staging.q_table())
    agent.alpha = alpha
    agent.gamma = gamma
    agent.initial_epsilon = initial_epsilon
    agent.epsilon = epsilon
    runner.maze = maze
    runner.start = start
    runner.goal = goal
    runner.position = start
    runner.explored = {start}
    runner.state = state


def save_runner(runner: MazeRunner, path: str) -> None:
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(runner_to_payload(runner), f, indent=2)


def read_payload(path: str) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_runner(path: str, cfg: SimConfig | None = None, seed: int | None = None) -> MazeRunner:
    runner = MazeRunner(cfg=cfg, seed=seed)
    apply_payload(runner, read_payload(path))
    return runner
