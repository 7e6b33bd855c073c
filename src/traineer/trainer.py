from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Callable, Iterable, TypeVar

from PySide6.QtCore import QObject, Signal

from .catalog import Catalog
from .entropy_engine import EntropyEngine, RandomSource
from .errors import (
    NoMatchingReward,
    NoPunishmentsAvailable,
    NoRewardsAvailable,
    NoScenariosAvailable,
    NotFoundError,
    RecordLookupError,
)
from .mood_system import TRAINER_MAX_MOOD, TRAINER_MIN_MOOD, MoodSystem
from .policies import (
    PermissionPolicy,
    RewardCandidatePolicy,
    decide_permission,
    literal_candidates,
    resolve_reward_policy,
    smallest_deviation,
)
from .records import Punishment, Record, Reward
from .scenario_scheduler import ScenarioScheduler, ScheduleMode

if TYPE_CHECKING:
    from .config_manager import AppConfig

LOGGER = logging.getLogger("Traineer")

RecordT = TypeVar("RecordT", bound=Record)


class Trainer(QObject):
    """
    A personal trainer or coach with a bounded mood.

    The identifier lists are allow-lists: the trainer only acts on
    identifiers it knows, everything else is resolved through the catalog.

    Signals:
    - step_presented(str, str): title and description of a scenario step
    - mood_changed(float): mood after a mood-affecting operation
    - scenario_completed(str): scenario id after its reward was applied
    """

    step_presented = Signal(str, str)
    mood_changed = Signal(float)
    scenario_completed = Signal(str)

    def __init__(
        self,
        catalog: Catalog,
        *,
        trainer_id: str = "",
        name: str = "",
        description: str = "",
        reward_multiplier: float = 1.0,
        punishment_multiplier: float = 1.0,
        scenario_rate: int = 60,
        scenarios: Iterable[str] = (),
        rewards: Iterable[str] = (),
        punishments: Iterable[str] = (),
        permissions: Iterable[str] = (),
        confessions: Iterable[str] = (),
        initial_mood: float = 0.0,
        min_mood: float = TRAINER_MIN_MOOD,
        max_mood: float = TRAINER_MAX_MOOD,
        permission_policy: PermissionPolicy = PermissionPolicy.LITERAL,
        reward_policy: RewardCandidatePolicy = literal_candidates,
        schedule_mode: ScheduleMode = ScheduleMode.SINGLE_SHOT,
        rng: RandomSource | None = None,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._catalog = catalog
        self.trainer_id = trainer_id
        self.name = name
        self.description = description
        self.active = False
        self.scenario_rate = int(scenario_rate)
        self.scenarios = list(scenarios)
        self.rewards = list(rewards)
        self.punishments = list(punishments)
        self.permissions = list(permissions)
        self.confessions = list(confessions)
        self.permission_policy = permission_policy
        self.reward_policy = reward_policy

        self._lock = threading.RLock()
        self._mood = MoodSystem(
            initial_mood,
            reward_multiplier=reward_multiplier,
            punishment_multiplier=punishment_multiplier,
            min_mood=min_mood,
            max_mood=max_mood,
        )
        self._entropy = EntropyEngine(rng)
        self._scheduler = ScenarioScheduler(
            self.trigger_scenario,
            rate_seconds=self.scenario_rate,
            mode=schedule_mode,
            parent=self,
        )

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        catalog: Catalog,
        *,
        rng: RandomSource | None = None,
        parent: QObject | None = None,
    ) -> Trainer:
        profile = config.trainer
        return cls(
            catalog,
            trainer_id=profile.id,
            name=profile.name,
            description=profile.description,
            reward_multiplier=profile.reward_multiplier,
            punishment_multiplier=profile.punishment_multiplier,
            scenario_rate=profile.scenario_rate,
            scenarios=profile.scenarios,
            rewards=profile.rewards,
            punishments=profile.punishments,
            permissions=profile.permissions,
            confessions=profile.confessions,
            initial_mood=config.mood.initial_mood,
            min_mood=config.mood.min_mood,
            max_mood=config.mood.max_mood,
            permission_policy=PermissionPolicy.parse(config.policy.permission),
            reward_policy=resolve_reward_policy(config.policy.reward_selection),
            schedule_mode=ScheduleMode.parse(config.policy.schedule),
            rng=rng,
            parent=parent,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> None:
        """Activate the trainer and start the background scenario trigger."""
        self.active = True
        self._scheduler.start()

    def shutdown(self) -> None:
        self._scheduler.stop()
        self.active = False

    @property
    def scheduler(self) -> ScenarioScheduler:
        return self._scheduler

    @property
    def mood(self) -> float:
        with self._lock:
            return self._mood.mood

    @property
    def mood_label(self) -> str:
        with self._lock:
            return self._mood.label

    @property
    def reward_multiplier(self) -> float:
        return self._mood.reward_multiplier

    @property
    def punishment_multiplier(self) -> float:
        return self._mood.punishment_multiplier

    # ------------------------------------------------------------------
    # Interactions
    # ------------------------------------------------------------------

    def confess_to(self, confession_id: str) -> None:
        if confession_id not in self.confessions:
            raise NotFoundError(f"trainer doesn't know confession: {confession_id}")

        confession = self._resolve(self._catalog.get_confession, confession_id, "confession")

        with self._lock:
            self._modify_mood(confession.value)

    def ask_permission(self, permission_id: str) -> bool:
        if permission_id not in self.permissions:
            raise NotFoundError(f"trainer doesn't know permission: {permission_id}")

        permission = self._resolve(self._catalog.get_permission, permission_id, "permission")

        with self._lock:
            return decide_permission(
                self._mood.mood,
                permission,
                self._entropy,
                self.permission_policy,
            )

    def get_punished(self, val: float) -> Punishment:
        """
        Impose a punishment the user must fulfill.

        ``val`` is accepted for symmetry with :meth:`reward`; selection is by
        identifier order only and always returns the first punishment.
        """
        if not self.punishments:
            raise NoPunishmentsAvailable("trainer has no punishments")

        return self._resolve(self._catalog.get_punishment, self.punishments[0], "punishment")

    def reward(self, val: float) -> Reward:
        """Treat the user with the reward closest to ``val`` and apply it to mood."""
        if not self.rewards:
            raise NoRewardsAvailable("trainer has no rewards")

        resolved: list[Reward] = [
            self._resolve(self._catalog.get_reward, reward_id, "reward") for reward_id in self.rewards
        ]

        with self._lock:
            deviation = smallest_deviation(resolved, val, self._mood.span)
            candidates = self.reward_policy(resolved, deviation, val)
            if not candidates:
                raise NoMatchingReward(f"no reward matches target {val:g}")
            chosen = candidates[self._entropy.pick_index(len(candidates))]
            self._modify_mood(chosen.value)
        return chosen

    def trigger_scenario(self) -> None:
        if not self.scenarios:
            raise NoScenariosAvailable("trainer has no scenarios")

        scenario = self._resolve(self._catalog.get_scenario, self.scenarios[0], "scenario")

        LOGGER.info("[Trainer] Scenario %s triggered (%d steps)", scenario.id, len(scenario.steps))
        for step in scenario.steps:
            self.step_presented.emit(step.title, step.description)

        with self._lock:
            self._modify_mood(scenario.reward)
        self.scenario_completed.emit(scenario.id)

    @staticmethod
    def _resolve(lookup: Callable[[str], RecordT], record_id: str, kind: str) -> RecordT:
        # Every catalog failure surfaces as RecordLookupError.
        try:
            return lookup(record_id)
        except Exception as exc:
            raise RecordLookupError(f"error getting {kind}: {record_id}") from exc

    def _modify_mood(self, value: float) -> None:
        before = self._mood.mood
        after = self._mood.apply(value)
        LOGGER.debug("[Trainer] mood %.2f -> %.2f (delta=%.2f)", before, after, value)
        if after != before:
            self.mood_changed.emit(after)
