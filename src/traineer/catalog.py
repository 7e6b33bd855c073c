from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Iterable, TypeVar

import yaml

from .errors import NotFoundError
from .records import Confession, Permission, Punishment, Record, Reward, Scenario, ScenarioStep

LOGGER = logging.getLogger("Traineer")

RecordT = TypeVar("RecordT", bound=Record)


class Catalog:
    """
    Read-only store of trainer content keyed by identifier.

    Records come either from the constructor or from a YAML/JSON content
    file with one list per record kind::

        confessions: [{id, name, description, value}]
        permissions: [{id, min_mood, certain_mood}]
        punishments: [{id, name, description}]
        rewards:     [{id, value}]
        scenarios:   [{id, reward, steps: [{title, description}]}]
    """

    SECTIONS = ("confessions", "permissions", "punishments", "rewards", "scenarios")

    def __init__(
        self,
        *,
        confessions: Iterable[Confession] = (),
        permissions: Iterable[Permission] = (),
        punishments: Iterable[Punishment] = (),
        rewards: Iterable[Reward] = (),
        scenarios: Iterable[Scenario] = (),
    ):
        self._confessions = {item.id: item for item in confessions}
        self._permissions = {item.id: item for item in permissions}
        self._punishments = {item.id: item for item in punishments}
        self._rewards = {item.id: item for item in rewards}
        self._scenarios = {item.id: item for item in scenarios}

    def __len__(self) -> int:
        return (
            len(self._confessions)
            + len(self._permissions)
            + len(self._punishments)
            + len(self._rewards)
            + len(self._scenarios)
        )

    def get_confession(self, confession_id: str) -> Confession:
        return self._lookup(self._confessions, "confession", confession_id)

    def get_permission(self, permission_id: str) -> Permission:
        return self._lookup(self._permissions, "permission", permission_id)

    def get_punishment(self, punishment_id: str) -> Punishment:
        return self._lookup(self._punishments, "punishment", punishment_id)

    def get_reward(self, reward_id: str) -> Reward:
        return self._lookup(self._rewards, "reward", reward_id)

    def get_scenario(self, scenario_id: str) -> Scenario:
        return self._lookup(self._scenarios, "scenario", scenario_id)

    @staticmethod
    def _lookup(source: dict[str, RecordT], kind: str, record_id: str) -> RecordT:
        try:
            return source[record_id]
        except KeyError:
            raise NotFoundError(f"{kind} not found: {record_id}") from None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path) -> Catalog:
        if not path.exists():
            LOGGER.warning("[Catalog] Content file missing: %s", path)
            return cls()
        try:
            text = path.read_text(encoding="utf-8")
            if path.suffix.lower() in {".yaml", ".yml"}:
                raw = yaml.safe_load(text)
            else:
                raw = json.loads(text)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
            LOGGER.warning("[Catalog] Failed to read %s: %s", path, exc)
            return cls()
        if not isinstance(raw, dict):
            LOGGER.warning("[Catalog] Unexpected content layout in %s", path)
            return cls()
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Catalog:
        return cls(
            confessions=cls._parse_section(raw.get("confessions"), cls._parse_confession),
            permissions=cls._parse_section(raw.get("permissions"), cls._parse_permission),
            punishments=cls._parse_section(raw.get("punishments"), cls._parse_punishment),
            rewards=cls._parse_section(raw.get("rewards"), cls._parse_reward),
            scenarios=cls._parse_section(raw.get("scenarios"), cls._parse_scenario),
        )

    @staticmethod
    def _parse_section(items: Any, parser: Callable[[dict[str, Any]], RecordT | None]) -> list[RecordT]:
        if not isinstance(items, list):
            return []
        parsed: list[RecordT] = []
        for item in items:
            if not isinstance(item, dict) or not str(item.get("id", "")).strip():
                LOGGER.debug("[Catalog] Skipping entry without id: %r", item)
                continue
            try:
                record = parser(item)
            except (TypeError, ValueError) as exc:
                LOGGER.debug("[Catalog] Skipping malformed entry %r: %s", item.get("id"), exc)
                continue
            if record is not None:
                parsed.append(record)
        return parsed

    @staticmethod
    def _identity(item: dict[str, Any]) -> dict[str, str]:
        return {
            "id": str(item["id"]).strip(),
            "name": str(item.get("name", "") or ""),
            "description": str(item.get("description", "") or ""),
        }

    @classmethod
    def _parse_confession(cls, item: dict[str, Any]) -> Confession:
        return Confession(**cls._identity(item), value=float(item.get("value", 0.0)))

    @classmethod
    def _parse_permission(cls, item: dict[str, Any]) -> Permission:
        return Permission(
            **cls._identity(item),
            min_mood=float(item.get("min_mood", 0.0)),
            certain_mood=float(item.get("certain_mood", 0.0)),
        )

    @classmethod
    def _parse_punishment(cls, item: dict[str, Any]) -> Punishment:
        return Punishment(**cls._identity(item))

    @classmethod
    def _parse_reward(cls, item: dict[str, Any]) -> Reward:
        return Reward(**cls._identity(item), value=float(item.get("value", 0.0)))

    @classmethod
    def _parse_scenario(cls, item: dict[str, Any]) -> Scenario:
        steps: list[ScenarioStep] = []
        raw_steps = item.get("steps", [])
        if isinstance(raw_steps, list):
            for raw_step in raw_steps:
                if isinstance(raw_step, dict):
                    steps.append(
                        ScenarioStep(
                            title=str(raw_step.get("title", "") or ""),
                            description=str(raw_step.get("description", "") or ""),
                        )
                    )
                elif isinstance(raw_step, str) and raw_step.strip():
                    steps.append(ScenarioStep(title=raw_step.strip()))
        return Scenario(**cls._identity(item), steps=steps, reward=float(item.get("reward", 0.0)))
