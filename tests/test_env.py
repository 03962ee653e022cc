import gymnasium as gym
import numpy as np

import falling_blocks.env  # noqa: F401
from falling_blocks.env import ENV_ACTIONS, FallingBlocksEnv
from falling_blocks.game import Action

HARD_DROP = ENV_ACTIONS.index(Action.HARD_DROP)


def test_reset_observation_matches_space():
    env = FallingBlocksEnv()
    obs, info = env.reset(seed=0)
    assert env.observation_space.contains(obs)
    assert obs["board"].shape == (20, 10)
    assert (obs["board"] < 0).sum() > 0  # falling piece overlay
    assert obs["held"] == -1
    assert info["phase"] == "running"


def test_reset_seed_is_reproducible():
    env = FallingBlocksEnv()
    a, _ = env.reset(seed=5)
    b, _ = env.reset(seed=5)
    assert np.array_equal(a["board"], b["board"])
    assert a["next"] == b["next"]


def test_hard_drop_step_reports_events():
    env = FallingBlocksEnv()
    env.reset(seed=1)
    obs, reward, terminated, truncated, info = env.step(HARD_DROP)
    assert "lock" in info["events"]
    assert reward == 0.0
    assert not terminated and not truncated
    assert (obs["board"] > 0).sum() == 4


def test_stacking_in_the_middle_terminates():
    env = FallingBlocksEnv()
    env.reset(seed=3)
    terminated = False
    for _ in range(40):
        _, _, terminated, truncated, info = env.step(HARD_DROP)
        if terminated:
            break
    assert terminated
    assert info["phase"] == "game_over"
    _, reward, terminated, _, _ = env.step(HARD_DROP)
    assert terminated and reward == 0.0


def test_truncation_after_max_steps():
    env = FallingBlocksEnv(max_episode_steps=3)
    env.reset(seed=0)
    none = ENV_ACTIONS.index(Action.NONE)
    results = [env.step(none) for _ in range(3)]
    assert [r[3] for r in results] == [False, False, True]


def test_rgb_render():
    env = FallingBlocksEnv(render_mode="rgb_array")
    env.reset(seed=0)
    img = env.render()
    assert img.shape == (240, 120, 3)
    assert img.dtype == np.uint8


def test_registered_environment():
    env = gym.make("FallingBlocks-20x10-v0")
    obs, _ = env.reset(seed=0)
    obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
    assert "score" in info
    env.close()
