import logging
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class SideEffectOutcome:
    """Result of a best-effort step such as an email or a cached total."""

    name: str
    succeeded: bool
    error: str | None = None

    @classmethod
    def ok(cls, name: str) -> "SideEffectOutcome":
        return cls(name=name, succeeded=True)

    @classmethod
    def failed(cls, name: str, exc: BaseException) -> "SideEffectOutcome":
        return cls(name=name, succeeded=False, error=f"{type(exc).__name__}: {exc}")


@dataclass
class OperationResult(Generic[T]):
    """Primary outcome plus the side effects it triggered.

    Only ``value`` is ever shown to the client; side effects go to the logs.
    """

    value: T
    side_effects: list[SideEffectOutcome] = field(default_factory=list)

    def add(self, outcome: SideEffectOutcome) -> SideEffectOutcome:
        self.side_effects.append(outcome)
        return outcome

    @property
    def failed_side_effects(self) -> list[SideEffectOutcome]:
        return [outcome for outcome in self.side_effects if not outcome.succeeded]

    def log(self, logger: logging.Logger, operation: str) -> None:
        for outcome in self.failed_side_effects:
            logger.warning(f"{operation}: {outcome.name} failed ({outcome.error})")
