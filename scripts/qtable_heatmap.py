from __future__ import annotations

import argparse

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from mazecore.sim import MazeRunner
from mazecore.viz import maze_walls, normalize, value_grid
from viewers.io.save_load import load_runner


def compute_heatmap(runner: MazeRunner) -> np.ndarray:
    """Normalized max-Q per cell; walls and unvisited cells are masked."""
    q = runner.agent.q_table()
    hm = normalize(value_grid(q, runner.width, runner.height))
    mask = maze_walls(runner.maze)
    for y in range(runner.height):
        for x in range(runner.width):
            if (x, y) not in q:
                mask[y, x] = True
    return np.ma.masked_array(hm, mask=mask)


def main() -> None:
    ap = argparse.ArgumentParser(description="Export a Q-table heatmap image from a runner JSON.")
    ap.add_argument("--runner", type=str, required=True, help="path to runner JSON")
    ap.add_argument("--out", type=str, default="data/q_heatmap.png")
    args = ap.parse_args()

    runner = load_runner(args.runner)
    hm = compute_heatmap(runner)

    plt.figure()
    plt.imshow(hm, interpolation="nearest")
    plt.scatter([runner.start.x], [runner.start.y], marker="s", c="lime", label="start")
    plt.scatter([runner.goal.x], [runner.goal.y], marker="*", c="red", label="goal")
    plt.title(f"Max Q by cell (episode {runner.state.episode})")
    plt.xlabel("x")
    plt.ylabel("y")
    plt.colorbar()
    plt.legend(loc="upper right")
    plt.tight_layout()
    plt.savefig(args.out, dpi=160)
    print(f"Saved heatmap to {args.out}")


if __name__ == "__main__":
    main()
