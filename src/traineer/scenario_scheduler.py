"""
Background scenario trigger.

``single_shot`` fires the trigger once, sleeps for the scenario rate and then
finishes. ``periodic`` keeps repeating trigger + sleep until stopped.
Both run on the Qt event loop of the owning thread.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from .errors import TrainerError

LOGGER = logging.getLogger("Traineer")


class ScheduleMode(str, Enum):
    SINGLE_SHOT = "single_shot"
    PERIODIC = "periodic"

    @classmethod
    def parse(cls, value: object, default: ScheduleMode | None = None) -> ScheduleMode:
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default or cls.SINGLE_SHOT


class SchedulerState(Enum):
    INACTIVE = auto()
    PENDING = auto()
    SLEEPING = auto()
    FINISHED = auto()


class ScenarioScheduler(QObject):
    triggered = Signal()
    trigger_failed = Signal(str)
    finished = Signal()

    MIN_PERIOD_MS = 1_000

    def __init__(
        self,
        trigger: Callable[[], object],
        *,
        rate_seconds: int = 60,
        mode: ScheduleMode = ScheduleMode.SINGLE_SHOT,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._trigger = trigger
        self._rate_seconds = max(0, int(rate_seconds))
        self._mode = mode
        self._state = SchedulerState.INACTIVE
        self._trigger_count = 0

        self._kick_timer = QTimer(self)
        self._kick_timer.setSingleShot(True)
        self._kick_timer.timeout.connect(self._on_kick)

        self._sleep_timer = QTimer(self)
        self._sleep_timer.setSingleShot(True)
        self._sleep_timer.timeout.connect(self._on_sleep_elapsed)

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def mode(self) -> ScheduleMode:
        return self._mode

    @property
    def trigger_count(self) -> int:
        return self._trigger_count

    @property
    def is_running(self) -> bool:
        return self._state in (SchedulerState.PENDING, SchedulerState.SLEEPING)

    def start(self) -> None:
        if self.is_running:
            return
        LOGGER.info(
            "[Scheduler] Started mode=%s rate=%ds",
            self._mode.value,
            self._rate_seconds,
        )
        self._state = SchedulerState.PENDING
        self._kick_timer.start(0)

    def stop(self) -> None:
        self._kick_timer.stop()
        self._sleep_timer.stop()
        if self._state != SchedulerState.INACTIVE:
            LOGGER.info("[Scheduler] Stopped after %d trigger(s).", self._trigger_count)
        self._state = SchedulerState.INACTIVE

    def sleep_interval_ms(self) -> int:
        interval = self._rate_seconds * 1000
        if self._mode is ScheduleMode.PERIODIC:
            return max(self.MIN_PERIOD_MS, interval)
        return interval

    @Slot()
    def _on_kick(self) -> None:
        if self._state != SchedulerState.PENDING:
            return
        self._run_trigger()
        if self._state != SchedulerState.PENDING:
            # Trigger callback stopped the scheduler.
            return
        self._state = SchedulerState.SLEEPING
        self._sleep_timer.start(self.sleep_interval_ms())

    @Slot()
    def _on_sleep_elapsed(self) -> None:
        if self._state != SchedulerState.SLEEPING:
            return
        if self._mode is ScheduleMode.PERIODIC:
            self._state = SchedulerState.PENDING
            self._on_kick()
            return
        self._state = SchedulerState.FINISHED
        LOGGER.info("[Scheduler] Finished.")
        self.finished.emit()

    def _run_trigger(self) -> None:
        self._trigger_count += 1
        try:
            self._trigger()
        except TrainerError as exc:
            LOGGER.warning("[Scheduler] Scenario trigger failed: %s", exc)
            self.trigger_failed.emit(str(exc))
            return
        except Exception as exc:
            LOGGER.warning("[Scheduler] Scenario trigger crashed: %r", exc, exc_info=True)
            self.trigger_failed.emit(str(exc) or type(exc).__name__)
            return
        self.triggered.emit()
