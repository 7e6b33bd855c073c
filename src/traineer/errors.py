from __future__ import annotations


class TrainerError(RuntimeError):
    """Base class for every error raised by a trainer or its catalog."""


class NotFoundError(TrainerError):
    """Identifier is unknown to the trainer's allow-list or to the catalog."""


class RecordLookupError(TrainerError, LookupError):
    """An allow-listed identifier could not be resolved through the catalog."""


class NoRewardsAvailable(TrainerError):
    """Trainer has no rewards to hand out."""


class NoMatchingReward(NoRewardsAvailable):
    """Reward selection produced an empty candidate set."""


class NoPunishmentsAvailable(TrainerError):
    """Trainer has no punishments to impose."""


class NoScenariosAvailable(TrainerError):
    """Trainer has no scenario to trigger."""
