from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from .entropy_engine import EntropyEngine
from .records import Permission, Reward

LOGGER = logging.getLogger("Traineer")


class PermissionPolicy(str, Enum):
    """
    How a permission is decided while mood sits between ``min_mood`` and
    ``certain_mood``.

    - LITERAL: the random draw is taken but a failed draw still grants.
    - STRICT: a failed draw denies.
    """

    LITERAL = "literal"
    STRICT = "strict"

    @classmethod
    def parse(cls, value: object, default: PermissionPolicy | None = None) -> PermissionPolicy:
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default or cls.LITERAL


def grant_probability(mood: float, permission: Permission) -> float:
    return (mood - permission.min_mood) / (permission.certain_mood - permission.min_mood)


def decide_permission(
    mood: float,
    permission: Permission,
    entropy: EntropyEngine,
    policy: PermissionPolicy = PermissionPolicy.LITERAL,
) -> bool:
    if mood < permission.min_mood:
        return False

    if mood < permission.certain_mood:
        probability = grant_probability(mood, permission)
        draw = entropy.draw_unit()
        LOGGER.debug(
            "[Permission] %s draw=%.3f p=%.3f policy=%s",
            permission.id,
            draw,
            probability,
            policy.value,
        )
        if draw <= probability:
            return True
        if policy is PermissionPolicy.STRICT:
            return False

    return True


# ---------------------------------------------------------------------------
# Reward selection
# ---------------------------------------------------------------------------

RewardCandidatePolicy = Callable[[list[Reward], float, float], list[Reward]]


def literal_candidates(rewards: list[Reward], smallest_deviation: float, target: float) -> list[Reward]:
    """Rewards whose value equals the smallest deviation itself."""
    return [reward for reward in rewards if reward.value == smallest_deviation]


def nearest_candidates(rewards: list[Reward], smallest_deviation: float, target: float) -> list[Reward]:
    """Rewards sitting exactly at the smallest deviation from the target."""
    return [reward for reward in rewards if reward.value - target == smallest_deviation]


REWARD_CANDIDATE_POLICIES: dict[str, RewardCandidatePolicy] = {
    "literal": literal_candidates,
    "nearest": nearest_candidates,
}


def resolve_reward_policy(name: object) -> RewardCandidatePolicy:
    return REWARD_CANDIDATE_POLICIES.get(str(name).strip().lower(), literal_candidates)


def smallest_deviation(rewards: list[Reward], target: float, search_bound: float) -> float:
    """Signed deviation ``value - target`` with the smallest square."""
    smallest = search_bound
    for reward in rewards:
        current = reward.value - target
        if current * current < smallest * smallest:
            smallest = current
    return smallest
