from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
import random
from typing import Dict, List, Mapping, Sequence, Tuple, Union


class Action(IntEnum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3


ACTIONS: Tuple[Action, ...] = tuple(Action)
ACTION_DELTAS: Dict[Action, Tuple[int, int]] = {
    Action.UP: (0, -1),
    Action.RIGHT: (1, 0),
    Action.DOWN: (0, 1),
    Action.LEFT: (-1, 0),
}

StateKey = Tuple[int, int]  # (x, y)
QTable = Dict[StateKey, List[float]]


def state_key(pos: Sequence[int]) -> StateKey:
    return (int(pos[0]), int(pos[1]))


def format_state_key(key: Sequence[int]) -> str:
    """Saved runners index the Q-table by "x,y" strings."""
    return f"{int(key[0])},{int(key[1])}"


def parse_state_key(text: str) -> StateKey:
    x, y = text.split(",")
    return (int(x), int(y))


@dataclass
class QLearningConfig:
    alpha: float = 0.1      # learning rate
    gamma: float = 0.9      # discount factor
    epsilon: float = 0.1    # starting exploration rate
    min_epsilon: float = 0.01
    decay_rate: float = 0.995  # per-episode multiplier


class QLearningAgent:
    """
    Classic tabular Q-learning over grid positions.

    Q[s][a] updated by:
      Q(s,a) <- Q(s,a) + alpha * (r + gamma*max_a' Q(s',a') - Q(s,a))

    Rows are created lazily (all zeros) the first time a position is read.
    Reads hand out copies of rows; only update/set_q_table write to the table.
    """

    def __init__(self, cfg: QLearningConfig | None = None, seed: int | None = None) -> None:
        cfg = cfg or QLearningConfig()
        self.alpha = cfg.alpha
        self.gamma = cfg.gamma
        self.epsilon = cfg.epsilon
        self.initial_epsilon = cfg.epsilon
        self.min_epsilon = cfg.min_epsilon
        self.decay_rate = cfg.decay_rate
        self._rng = random.Random(seed)
        self._q: QTable = {}

    def _row(self, pos: Sequence[int]) -> List[float]:
        key = state_key(pos)
        row = self._q.get(key)
        if row is None:
            row = [0.0 for _ in ACTIONS]
            self._q[key] = row
        return row

    @property
    def n_states(self) -> int:
        return len(self._q)

    def get_q_values(self, pos: Sequence[int]) -> List[float]:
        return list(self._row(pos))

    def get_max_q(self, pos: Sequence[int]) -> float:
        return max(self._row(pos))

    def choose_action(self, pos: Sequence[int]) -> Action:
        if self._rng.random() < self.epsilon:
            return ACTIONS[self._rng.randrange(len(ACTIONS))]
        row = self._row(pos)
        best_q = max(row)
        # untouched rows are all ties; picking among them keeps exploration unbiased
        best = [a for a in ACTIONS if row[a] == best_q]
        return best[self._rng.randrange(len(best))]

    def update(self, state: Sequence[int], action: int, reward: float, next_state: Sequence[int]) -> float:
        row = self._row(state)
        old_q = row[action]
        max_next = self.get_max_q(next_state)
        new_q = old_q + self.alpha * (reward + self.gamma * max_next - old_q)
        row[action] = new_q
        return new_q

    def decay_curiosity(self) -> None:
        self.epsilon = max(self.min_epsilon, self.epsilon * self.decay_rate)

    def reset_q_table(self) -> None:
        self._q = {}
        self.epsilon = self.initial_epsilon

    def set_parameters(self, alpha: float, gamma: float, initial_epsilon: float) -> None:
        self.alpha = alpha
        self.gamma = gamma
        self.initial_epsilon = initial_epsilon
        self.epsilon = initial_epsilon

    def set_q_table(self, table: Mapping[Union[str, StateKey], Sequence[float]]) -> None:
        fresh: QTable = {}
        for key, values in table.items():
            row = [float(v) for v in values]
            if len(row) != len(ACTIONS):
                raise ValueError(f"Q-table row for {key!r} has {len(row)} values, expected {len(ACTIONS)}")
            fresh[parse_state_key(key) if isinstance(key, str) else state_key(key)] = row
        self._q = fresh

    def q_table(self) -> QTable:
        return {key: list(row) for key, row in self._q.items()}
