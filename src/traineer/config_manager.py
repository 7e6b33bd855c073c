from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from PySide6.QtCore import QIODevice, QSaveFile

from .mood_system import TRAINER_MAX_MOOD, TRAINER_MIN_MOOD


@dataclass(slots=True)
class TrainerConfig:
    id: str = "coach"
    name: str = "Coach"
    description: str = ""
    reward_multiplier: float = 1.0
    punishment_multiplier: float = 1.0
    scenario_rate: int = 60
    scenarios: tuple[str, ...] = ()
    rewards: tuple[str, ...] = ()
    punishments: tuple[str, ...] = ()
    permissions: tuple[str, ...] = ()
    confessions: tuple[str, ...] = ()


@dataclass(slots=True)
class MoodConfig:
    min_mood: float = TRAINER_MIN_MOOD
    max_mood: float = TRAINER_MAX_MOOD
    initial_mood: float = 0.0


@dataclass(slots=True)
class PolicyConfig:
    permission: str = "literal"  # literal / strict
    reward_selection: str = "literal"  # literal / nearest
    schedule: str = "single_shot"  # single_shot / periodic


@dataclass(slots=True)
class BehaviorConfig:
    debug_mode: bool = False
    catalog_path: str = ""


@dataclass(slots=True)
class AppConfig:
    version: str = "1.0.0"
    trainer: TrainerConfig = field(default_factory=TrainerConfig)
    mood: MoodConfig = field(default_factory=MoodConfig)
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    behavior: BehaviorConfig = field(default_factory=BehaviorConfig)


class ConfigManager:
    """Load trainer runtime configuration from JSON with safe defaults."""

    LIST_FIELDS = ("scenarios", "rewards", "punishments", "permissions", "confessions")

    def __init__(self, config_path: Path):
        self._config_path = config_path

    @property
    def config_path(self) -> Path:
        return self._config_path

    def load(self) -> AppConfig:
        if not self._config_path.exists():
            return AppConfig()
        try:
            raw = json.loads(self._config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return AppConfig()
        if not isinstance(raw, dict):
            return AppConfig()

        return AppConfig(
            version=str(raw.get("version", "1.0.0")),
            trainer=self._build_trainer(raw.get("trainer")),
            mood=self._build_mood(raw.get("mood")),
            policy=self._build_policy(raw.get("policy")),
            behavior=self._build_behavior(raw.get("behavior")),
        )

    def save(self, config: AppConfig) -> bool:
        payload = self.to_dict(config)
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(payload, ensure_ascii=False, indent=2) + "\n"
        try:
            saver = QSaveFile(str(self._config_path))
            if not saver.open(QIODevice.OpenModeFlag.WriteOnly | QIODevice.OpenModeFlag.Truncate):
                return False
            raw = content.encode("utf-8")
            written = saver.write(raw)
            if written != len(raw):
                saver.cancelWriting()
                return False
            if not saver.commit():
                return False
        except OSError:
            return False
        return True

    @classmethod
    def to_dict(cls, config: AppConfig) -> dict[str, Any]:
        trainer = config.trainer
        return {
            "version": str(config.version),
            "trainer": {
                "id": str(trainer.id),
                "name": str(trainer.name),
                "description": str(trainer.description),
                "reward_multiplier": float(trainer.reward_multiplier),
                "punishment_multiplier": float(trainer.punishment_multiplier),
                "scenario_rate": int(trainer.scenario_rate),
                **{name: [str(item) for item in getattr(trainer, name)] for name in cls.LIST_FIELDS},
            },
            "mood": {
                "min_mood": float(config.mood.min_mood),
                "max_mood": float(config.mood.max_mood),
                "initial_mood": float(config.mood.initial_mood),
            },
            "policy": {
                "permission": str(config.policy.permission).lower(),
                "reward_selection": str(config.policy.reward_selection).lower(),
                "schedule": str(config.policy.schedule).lower(),
            },
            "behavior": {
                "debug_mode": bool(config.behavior.debug_mode),
                "catalog_path": str(config.behavior.catalog_path),
            },
        }

    @staticmethod
    def _float(payload: dict[str, Any], key: str, default: float) -> float:
        try:
            return float(payload.get(key, default))
        except (TypeError, ValueError):
            return default

    @staticmethod
    def _identifiers(raw: Any) -> tuple[str, ...]:
        if isinstance(raw, str):
            raw = [raw]
        if not isinstance(raw, list):
            return ()
        return tuple(str(item).strip() for item in raw if str(item).strip())

    @classmethod
    def _build_trainer(cls, payload: Any) -> TrainerConfig:
        if not isinstance(payload, dict):
            return TrainerConfig()
        try:
            scenario_rate = max(1, int(payload.get("scenario_rate", 60)))
        except (TypeError, ValueError):
            scenario_rate = 60
        return TrainerConfig(
            id=str(payload.get("id", "coach")).strip() or "coach",
            name=str(payload.get("name", "Coach")),
            description=str(payload.get("description", "")),
            reward_multiplier=cls._float(payload, "reward_multiplier", 1.0),
            punishment_multiplier=cls._float(payload, "punishment_multiplier", 1.0),
            scenario_rate=scenario_rate,
            **{name: cls._identifiers(payload.get(name)) for name in cls.LIST_FIELDS},
        )

    @classmethod
    def _build_mood(cls, payload: Any) -> MoodConfig:
        if not isinstance(payload, dict):
            return MoodConfig()
        min_mood = cls._float(payload, "min_mood", TRAINER_MIN_MOOD)
        max_mood = cls._float(payload, "max_mood", TRAINER_MAX_MOOD)
        if min_mood > max_mood:
            min_mood, max_mood = max_mood, min_mood
        initial = cls._float(payload, "initial_mood", 0.0)
        return MoodConfig(
            min_mood=min_mood,
            max_mood=max_mood,
            initial_mood=min(max(initial, min_mood), max_mood),
        )

    @staticmethod
    def _build_policy(payload: Any) -> PolicyConfig:
        if not isinstance(payload, dict):
            return PolicyConfig()
        permission = str(payload.get("permission", "literal")).strip().lower()
        if permission not in {"literal", "strict"}:
            permission = "literal"
        reward_selection = str(payload.get("reward_selection", "literal")).strip().lower()
        if reward_selection not in {"literal", "nearest"}:
            reward_selection = "literal"
        schedule = str(payload.get("schedule", "single_shot")).strip().lower()
        if schedule not in {"single_shot", "periodic"}:
            schedule = "single_shot"
        return PolicyConfig(
            permission=permission,
            reward_selection=reward_selection,
            schedule=schedule,
        )

    @staticmethod
    def _build_behavior(payload: Any) -> BehaviorConfig:
        if not isinstance(payload, dict):
            return BehaviorConfig()
        return BehaviorConfig(
            debug_mode=bool(payload.get("debug_mode", False)),
            catalog_path=str(payload.get("catalog_path", "") or ""),
        )
