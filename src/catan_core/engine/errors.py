from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RuleViolation:
    reason: str


class CatanError(Exception):
    """Base class for errors raised by the rules engine."""


class ValidationRejected(CatanError, ValueError):
    """The action breaks a game rule. The state it was applied to is unchanged."""

    def __init__(self, reason: str):
        super().__init__(f"Illegal action: {reason}")
        self.reason = reason

    @classmethod
    def from_violation(cls, violation: RuleViolation) -> "ValidationRejected":
        return cls(violation.reason)


class NotFound(CatanError, LookupError):
    """A player, hex, vertex or edge id does not exist."""

    def __init__(self, kind: str, identifier: object):
        super().__init__(f"{kind} not found: {identifier!r}")
        self.kind = kind
        self.identifier = identifier
