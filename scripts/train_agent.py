from __future__ import annotations

import argparse
from dataclasses import replace
import statistics
import time
from typing import List

from mazecore import viz
from mazecore.sim import EpisodeSummary, MazeRunner, SimConfig
from viewers.io.save_load import load_runner, save_runner


def run_training(runner: MazeRunner, episodes: int, report_every: int = 0) -> List[EpisodeSummary]:
    """Runs full episodes back to back and returns one summary per episode."""
    history: List[EpisodeSummary] = []
    for _ in range(max(0, int(episodes))):
        summary = runner.run_episode()
        history.append(summary)
        if report_every and summary.episode % int(report_every) == 0:
            print(f"[ep {summary.episode}] {report(history[-int(report_every):], runner)}")
    return history


def report(window: List[EpisodeSummary], runner: MazeRunner) -> str:
    goals = sum(1 for e in window if e.reached_goal)
    best = runner.state.best_step_count
    return (
        f"avg_steps={statistics.mean(e.steps for e in window):.1f} "
        f"avg_reward={statistics.mean(e.total_reward for e in window):.1f} "
        f"goals={goals}/{len(window)} "
        f"best={best if best is not None else '-'} "
        f"eps={runner.agent.epsilon:.3f} "
        f"Q_states={runner.agent.n_states}"
    )


def play(runner: MazeRunner, max_steps: int, sleep_s: float) -> bool:
    """
    Greedy rollout from the start cell, printed frame by frame. Returns True on the goal.

    Nothing is learned; the Q-table and the runner's episode state are restored afterwards.
    """
    agent = runner.agent
    saved_eps = agent.epsilon
    saved_q = agent.q_table()
    saved = (runner.position, set(runner.explored), replace(runner.state))
    agent.epsilon = 0.0
    runner.position = runner.start
    total = 0.0
    try:
        for t in range(max_steps):
            res = runner.apply_action(agent.choose_action(runner.position), learn=False)
            total += res.reward
            print(viz.render_ascii(runner.maze, runner.position, runner.goal, runner.start))
            print(f"t={t:04d} action={res.action.name} reward={res.reward:.0f} total={total:.0f}")
            print("-" * runner.width)
            if sleep_s > 0:
                time.sleep(sleep_s)
            if res.info.get("terminal") == "goal":
                print("DONE: goal")
                return True
        print("DONE: timeout")
        return False
    finally:
        agent.epsilon = saved_eps
        # greedy reads create empty rows for new cells
        agent.set_q_table(saved_q)
        runner.position, runner.explored, runner.state = saved


def main() -> None:
    ap = argparse.ArgumentParser(description="Learn A Maze: headless tabular Q-learning on a generated maze.")
    ap.add_argument("--episodes", type=int, default=300, help="training episodes")
    ap.add_argument("--size", type=int, default=15, help="maze size (width = height)")
    ap.add_argument("--max-steps", type=int, default=2000, help="max steps per episode")
    ap.add_argument("--alpha", type=float, default=0.1, help="learning rate")
    ap.add_argument("--gamma", type=float, default=0.9, help="discount")
    ap.add_argument("--epsilon", type=float, default=0.2, help="starting curiosity (epsilon)")
    ap.add_argument("--seed", type=int, default=0, help="agent random seed (-1 = unseeded)")
    ap.add_argument("--save", type=str, default="data/runner.json", help="where to export the runner JSON")
    ap.add_argument("--load", type=str, default="", help="import a runner JSON to continue training or to play")
    ap.add_argument("--report-every", type=int, default=50, help="print a summary every N episodes (0 disables)")
    ap.add_argument("--play", action="store_true", help="watch the greedy runner (no training)")
    ap.add_argument("--sleep", type=float, default=0.03, help="sleep between frames in --play")
    args = ap.parse_args()

    cfg = SimConfig(
        maze_size=args.size,
        max_steps=args.max_steps,
        alpha=args.alpha,
        gamma=args.gamma,
        epsilon=args.epsilon,
    )
    seed = args.seed if args.seed >= 0 else None

    if args.load:
        runner = load_runner(args.load, cfg=cfg, seed=seed)
        print(f"Loaded runner from {args.load} (episode {runner.state.episode}, {runner.agent.n_states} states)")
    else:
        runner = MazeRunner(cfg, seed=seed)

    if args.play:
        play(runner, max_steps=args.max_steps, sleep_s=args.sleep)
        return

    history = run_training(runner, args.episodes, report_every=args.report_every)
    if history:
        print(f"trained episodes={len(history)} {report(history, runner)}")

    if args.save:
        save_runner(runner, args.save)
        print(f"Saved runner to {args.save}")


if __name__ == "__main__":
    main()
