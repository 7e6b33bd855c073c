from __future__ import annotations

TRAINER_MIN_MOOD = -100.0
TRAINER_MAX_MOOD = 100.0


class MoodSystem:
    """
    Bounded trainer mood.

    Positive stimuli are scaled by the reward multiplier, everything else by
    the punishment multiplier, and the result is clamped to the bounds.
    """

    LABELS = (
        (0.2, "furious"),
        (0.4, "displeased"),
        (0.6, "calm"),
        (0.8, "pleased"),
    )

    def __init__(
        self,
        initial_mood: float = 0.0,
        *,
        reward_multiplier: float = 1.0,
        punishment_multiplier: float = 1.0,
        min_mood: float = TRAINER_MIN_MOOD,
        max_mood: float = TRAINER_MAX_MOOD,
    ):
        if min_mood > max_mood:
            min_mood, max_mood = max_mood, min_mood
        self._min_mood = float(min_mood)
        self._max_mood = float(max_mood)
        self.reward_multiplier = float(reward_multiplier)
        self.punishment_multiplier = float(punishment_multiplier)
        self._mood = self._clamp(float(initial_mood))

    @property
    def mood(self) -> float:
        return self._mood

    @property
    def min_mood(self) -> float:
        return self._min_mood

    @property
    def max_mood(self) -> float:
        return self._max_mood

    @property
    def span(self) -> float:
        return self._max_mood - self._min_mood

    @property
    def label(self) -> str:
        if self.span <= 0:
            return "calm"
        position = (self._mood - self._min_mood) / self.span
        for upper, name in self.LABELS:
            if position < upper:
                return name
        return "delighted"

    def apply(self, value: float) -> float:
        if value > 0:
            self._mood = self._mood + value * self.reward_multiplier
        else:
            self._mood = self._mood + value * self.punishment_multiplier
        self._mood = self._clamp(self._mood)
        return self._mood

    def _clamp(self, value: float) -> float:
        return max(self._min_mood, min(self._max_mood, value))
