"""Formula intake domain models."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class FormulaDaySummary:
    """Formula slots completed on one day."""

    date: date
    completed_slots: int
    total_slots: int

    def __post_init__(self) -> None:
        if not 0 <= self.completed_slots <= self.total_slots:
            raise ValueError(
                f"completed_slots must be within 0..{self.total_slots}, "
                f"got {self.completed_slots}"
            )

    @property
    def is_missed(self) -> bool:
        """Return true when slots were configured but none were completed."""
        return self.total_slots > 0 and self.completed_slots == 0
