from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from mazecore.maze import Maze, MazeGenerator, Position, copy_maze, is_open, maze_size
from mazecore.qlearning import ACTION_DELTAS, Action, QLearningAgent, QLearningConfig, QTable


@dataclass
class SimConfig:
    maze_size: int = 15
    max_steps: int = 2000
    step_reward: float = -1.0
    wall_reward: float = -100.0
    goal_reward: float = 1000.0

    # agent defaults, restored on every reset
    alpha: float = 0.1
    gamma: float = 0.9
    epsilon: float = 0.2


@dataclass
class SimState:
    episode: int = 1
    step: int = 0
    total_reward: float = 0.0
    epsilon: float = 0.2
    is_goal_reached: bool = False
    best_step_count: Optional[int] = None


@dataclass
class StepResult:
    action: Optional[Action]
    position: Position
    reward: float
    done: bool
    info: Dict = field(default_factory=dict)


@dataclass
class EpisodeSummary:
    episode: int
    steps: int
    total_reward: float
    reached_goal: bool
    epsilon: float


class MazeRunner:
    """
    Step/episode driver around a maze and a Q-learning agent.

    Rewards:
      goal_reward  when the agent enters the goal cell
      wall_reward  when it bumps a wall or the grid edge (and stays put)
      step_reward  for any other move

    An episode ends on the goal or after max_steps; the rollover itself is
    performed by the next call to step(), which decays epsilon and returns the
    agent to the start.
    """

    def __init__(self, cfg: SimConfig | None = None, seed: int | None = None) -> None:
        self.cfg = cfg or SimConfig()
        size = int(self.cfg.maze_size)
        self.maze: Maze = MazeGenerator(size, size).generate()
        self.start = Position(0, 0)
        self.goal = Position(size - 1, size - 1)
        self.agent = QLearningAgent(
            QLearningConfig(alpha=self.cfg.alpha, gamma=self.cfg.gamma, epsilon=self.cfg.epsilon),
            seed=seed,
        )
        self.position = self.start
        self.explored: Set[Position] = set()
        self.state = SimState()
        self.reset()

    @property
    def width(self) -> int:
        return maze_size(self.maze)[0]

    @property
    def height(self) -> int:
        return maze_size(self.maze)[1]

    @property
    def locked(self) -> bool:
        return self.state.episode > 1 or self.state.step > 0

    def reset(self) -> None:
        self.position = self.start
        self.explored = {self.start}
        self.agent.reset_q_table()
        self.agent.set_parameters(self.cfg.alpha, self.cfg.gamma, self.cfg.epsilon)
        self.state = SimState(epsilon=self.agent.epsilon)

    def set_parameters(self, alpha: float, gamma: float, epsilon: float) -> None:
        if self.locked:
            raise RuntimeError("agent parameters are locked once training has started; reset first")
        self.agent.set_parameters(alpha, gamma, epsilon)
        self.state.epsilon = self.agent.epsilon

    def load_maze(self, maze: Maze, start: Tuple[int, int], goal: Tuple[int, int]) -> None:
        self.maze = copy_maze(maze)
        self.start = Position(*start)
        self.goal = Position(*goal)
        self.reset()

    def q_snapshot(self) -> QTable:
        return self.agent.q_table()

    def episode_over(self) -> bool:
        return self.state.is_goal_reached or self.state.step >= self.cfg.max_steps

    def _finish_episode(self) -> StepResult:
        s = self.state
        episode, steps, total = s.episode, s.step, s.total_reward
        success = s.is_goal_reached
        self.agent.decay_curiosity()
        self.position = self.start
        s.episode += 1
        s.step = 0
        s.total_reward = 0.0
        s.epsilon = self.agent.epsilon
        s.is_goal_reached = False
        if success:
            s.best_step_count = steps if s.best_step_count is None else min(s.best_step_count, steps)
        self.explored = {self.start}
        info = {
            "episode_end": True,
            "terminal": "goal" if success else "timeout",
            "episode": episode,
            "steps": steps,
            "total_reward": total,
        }
        return StepResult(action=None, position=self.position, reward=0.0, done=True, info=info)

    def step(self) -> StepResult:
        if self.episode_over():
            return self._finish_episode()
        return self.apply_action(self.agent.choose_action(self.position))

    def apply_action(self, action: Action, learn: bool = True) -> StepResult:
        action = Action(action)
        dx, dy = ACTION_DELTAS[action]
        pos = self.position
        target = Position(pos.x + dx, pos.y + dy)
        info: Dict = {}

        if not is_open(self.maze, target):
            reward = self.cfg.wall_reward
            target = pos
            info["bumped_wall"] = True
        elif target == self.goal:
            reward = self.cfg.goal_reward
            info["terminal"] = "goal"
        else:
            reward = self.cfg.step_reward

        if learn:
            self.agent.update(pos, action, reward, target)

        s = self.state
        self.position = target
        s.step += 1
        s.total_reward += reward
        s.is_goal_reached = info.get("terminal") == "goal"
        self.explored.add(target)
        info["steps"] = s.step
        return StepResult(action=action, position=target, reward=float(reward), done=self.episode_over(), info=info)

    def run_batch(self, limit: int = 30) -> List[StepResult]:
        """Warp mode: run up to `limit` steps, stopping at the goal or an episode rollover."""
        results: List[StepResult] = []
        for _ in range(max(0, int(limit))):
            results.append(self.step())
            if self.state.is_goal_reached or self.state.step == 0:
                break
        return results

    def run_episode(self) -> EpisodeSummary:
        episode = self.state.episode
        epsilon = self.agent.epsilon
        while not self.episode_over():
            self.step()
        steps = self.state.step
        total = self.state.total_reward
        reached = self.state.is_goal_reached
        self._finish_episode()
        return EpisodeSummary(episode=episode, steps=steps, total_reward=total, reached_goal=reached, epsilon=epsilon)
