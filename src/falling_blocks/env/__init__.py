"""Gymnasium environments for the falling-block engine."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .falling_blocks_env import ENV_ACTIONS, FallingBlocksEnv

# Register the default 20x10 environment
register(
    id="FallingBlocks-20x10-v0",
    entry_point="falling_blocks.env.falling_blocks_env:FallingBlocksEnv",
)

__all__ = ["ENV_ACTIONS", "FallingBlocksEnv"]
