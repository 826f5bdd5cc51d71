"""Reward Calculator."""

from questline.modules.rewards.calculator import CompletionReward, RewardCalculator, RewardQuote

__all__ = ["CompletionReward", "RewardCalculator", "RewardQuote"]
