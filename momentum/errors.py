from __future__ import annotations

import uuid


class MomentumError(Exception):
    """Base class for errors raised by the progress engine."""


class NotFoundError(MomentumError):
    def __init__(self, entity: str, entity_id: uuid.UUID | int | str) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidRuleError(MomentumError):
    """A recurrence rule that cannot be expanded (bad weekday name, end before start)."""


class PreconditionViolation(MomentumError):
    """A singleton record the engine relies on (user, streak) is missing."""


class SnapshotError(MomentumError):
    """An import payload that is not a supported snapshot."""
