from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class Record:
    """Identity fields shared by every catalog record."""

    id: str
    name: str = ""
    description: str = ""


@dataclass(slots=True)
class Confession(Record):
    value: float = 0.0


@dataclass(slots=True)
class Permission(Record):
    min_mood: float = 0.0
    certain_mood: float = 0.0


@dataclass(slots=True)
class Punishment(Record):
    pass


@dataclass(slots=True)
class Reward(Record):
    value: float = 0.0


@dataclass(slots=True)
class ScenarioStep:
    title: str
    description: str = ""


@dataclass(slots=True)
class Scenario(Record):
    steps: list[ScenarioStep] = field(default_factory=list)
    reward: float = 0.0
