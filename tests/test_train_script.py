from mazecore.sim import MazeRunner, SimConfig
from scripts.train_agent import play, run_training


def test_run_training_and_greedy_play(capsys):
    runner = MazeRunner(SimConfig(maze_size=5, max_steps=500), seed=3)
    history = run_training(runner, 150, report_every=50)
    assert [e.episode for e in history] == list(range(1, 151))
    assert runner.state.episode == 151
    out = capsys.readouterr().out
    assert "[ep 50]" in out and "Q_states=" in out

    eps = runner.agent.epsilon
    reached = play(runner, max_steps=200, sleep_s=0.0)
    assert runner.agent.epsilon == eps
    assert "DONE:" in capsys.readouterr().out
    assert isinstance(reached, bool)


def test_play_does_not_learn_or_advance_the_episode():
    runner = MazeRunner(SimConfig(maze_size=5, max_steps=500), seed=0)
    run_training(runner, 5)
    runner.run_batch(3)
    table = runner.agent.q_table()
    position, step, episode = runner.position, runner.state.step, runner.state.episode
    explored = set(runner.explored)

    play(runner, max_steps=20, sleep_s=0.0)

    assert runner.agent.q_table() == table
    assert runner.position == position
    assert (runner.state.step, runner.state.episode) == (step, episode)
    assert runner.explored == explored
