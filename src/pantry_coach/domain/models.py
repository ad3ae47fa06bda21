"""Result models shared by application services."""

from dataclasses import dataclass

from pantry_coach.domain.history import DietaryHistoryEntry


@dataclass(frozen=True)
class OperationResult:
    """Recoverable outcome of a storage or import operation."""

    success: bool
    message: str | None = None
    count: int = 0


@dataclass(frozen=True)
class ConsumptionResult:
    """Outcome of logging a consumed item."""

    success: bool
    entry: DietaryHistoryEntry | None = None
    warnings: tuple[str, ...] = ()
    message: str | None = None
